"""Health routes for the insights service.

- GET /health       - backend configuration, pipeline mode and models
- GET /health/ready - 200 once insights can be generated, 503 otherwise
- GET /health/live  - the process is serving requests

The completion backend is never called from here: a test request would spend
tokens. Readiness only reflects whether a credential is configured.
"""

from __future__ import annotations

import logging
import time
from enum import Enum

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from lynq_insights.core.config import Settings, get_settings
from lynq_insights.core.constants import HEALTH_CHECK_PATH


logger = logging.getLogger(__name__)

router = APIRouter(prefix=HEALTH_CHECK_PATH, tags=["Health"])


class ServiceState(str, Enum):
    """Whether the service can generate insights."""

    READY = "ready"
    UNCONFIGURED = "unconfigured"


class BackendInfo(BaseModel):
    """Completion backend as configured."""

    configured: bool
    base_url: str
    fast_model: str
    summary_model: str


class PipelineInfo(BaseModel):
    mode: str
    timeout_seconds: float


class HealthReport(BaseModel):
    """Body of GET /health."""

    status: ServiceState
    service: str
    environment: str
    uptime_seconds: float | None = None
    backend: BackendInfo
    pipeline: PipelineInfo


def service_state(settings: Settings) -> ServiceState:
    if settings.backend_configured:
        return ServiceState.READY
    return ServiceState.UNCONFIGURED


def backend_info(settings: Settings) -> BackendInfo:
    return BackendInfo(
        configured=settings.backend_configured,
        base_url=settings.openai_base_url,
        fast_model=settings.fast_model,
        summary_model=settings.summary_model,
    )


def uptime_seconds(request: Request) -> float | None:
    """Seconds since the lifespan started, or None outside a lifespan."""
    started_at = getattr(request.app.state, "started_at", None)
    if started_at is None:
        return None
    return round(time.monotonic() - started_at, 3)


@router.get("", response_model=HealthReport, summary="Service health")
async def health(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> HealthReport:
    return HealthReport(
        status=service_state(settings),
        service=settings.service_name,
        environment=settings.environment,
        uptime_seconds=uptime_seconds(request),
        backend=backend_info(settings),
        pipeline=PipelineInfo(
            mode=settings.pipeline_mode,
            timeout_seconds=settings.pipeline_timeout_seconds,
        ),
    )


@router.get("/ready", summary="Readiness check")
async def ready(settings: Settings = Depends(get_settings)) -> JSONResponse:
    """503 until a completion backend credential is configured."""
    state = service_state(settings)
    if state is not ServiceState.READY:
        logger.warning("Readiness check failed: backend credential missing")
        return JSONResponse(status_code=503, content={"status": state.value})
    return JSONResponse(status_code=200, content={"status": state.value})


@router.get("/live", summary="Liveness check")
async def live() -> dict[str, str]:
    return {"status": "alive"}


__all__ = [
    "BackendInfo",
    "HealthReport",
    "PipelineInfo",
    "ServiceState",
    "backend_info",
    "router",
    "service_state",
    "uptime_seconds",
]
