"""Insights API routes.

Service Endpoints:
- POST /insights    - Run the insight pipeline over a metrics payload
- OPTIONS /insights - CORS preflight without Origin headers (empty 200)

Response contract:
- 200: InsightReport JSON
- 400: {"error": "metricsData is required"}
- 409: {"error": ..., "fallback": <busy report>}
- 500: {"error": ..., "fallback": <configuration or failure report>}
- 504: {"error": ..., "fallback": <service unavailable report>}

Any other method on /insights answers 405 through the error handlers.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from lynq_insights.clients.completion import create_completion_client
from lynq_insights.core.config import Settings, get_settings
from lynq_insights.core.constants import INSIGHTS_PATH
from lynq_insights.pipelines.factory import create_insight_pipeline
from lynq_insights.pipelines.orchestrator import (
    BaseInsightPipeline,
    PipelineResult,
    PipelineStatus,
)
from lynq_insights.schemas.error_reports import configuration_error_report


logger = logging.getLogger(__name__)


# =============================================================================
# Router Configuration
# =============================================================================

router = APIRouter(
    tags=["Insights"],
)


# =============================================================================
# Request Models
# =============================================================================

class InsightsRequest(BaseModel):
    """Request body for insight generation.

    Attributes:
        metrics_data: Metrics record, or a string holding one
    """

    model_config = ConfigDict(populate_by_name=True)

    metrics_data: Any = Field(
        default=None,
        alias="metricsData",
        description="Metrics payload (object or JSON string)",
    )


# Error status per terminal pipeline status
FAILURE_STATUS_CODES: dict[PipelineStatus, int] = {
    PipelineStatus.BUSY: 409,
    PipelineStatus.MISCONFIGURED: 500,
    PipelineStatus.FAILED: 500,
    PipelineStatus.TIMED_OUT: 504,
}

FAILURE_MESSAGES: dict[PipelineStatus, str] = {
    PipelineStatus.BUSY: "An analysis is already in progress",
    PipelineStatus.MISCONFIGURED: "Completion backend is misconfigured",
    PipelineStatus.FAILED: "Insight generation failed",
    PipelineStatus.TIMED_OUT: "Insight generation timed out",
}


# =============================================================================
# Dependencies
# =============================================================================

def get_pipeline(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> BaseInsightPipeline:
    """Return the app's shared pipeline, building it on first use.

    One instance serves every request, so its busy guard rejects a run
    started while another is in flight. It is rebuilt when the shared
    completion client is replaced.
    """
    state = request.app.state
    client = getattr(state, "completion_client", None)
    if client is None:
        client = create_completion_client(settings)
        state.completion_client = client

    pipeline = getattr(state, "pipeline", None)
    if pipeline is None or pipeline.client is not client:
        pipeline = create_insight_pipeline(settings, client)
        state.pipeline = pipeline
    return pipeline


def _failure_response(result: PipelineResult) -> JSONResponse:
    status_code = FAILURE_STATUS_CODES.get(result.status, 500)
    return JSONResponse(
        status_code=status_code,
        content={
            "error": FAILURE_MESSAGES.get(result.status, "Insight generation failed"),
            "fallback": result.report.to_payload(),
        },
    )


# =============================================================================
# API Endpoints
# =============================================================================

@router.options(
    INSIGHTS_PATH,
    summary="Insights preflight",
    include_in_schema=False,
)
async def insights_options() -> Response:
    """Answer a bare OPTIONS request with an empty 200."""
    return Response(status_code=200)


@router.post(
    INSIGHTS_PATH,
    summary="Generate insights",
    description="Runs the insight pipeline and returns an InsightReport.",
)
async def generate_insights(
    body: InsightsRequest | None = Body(default=None),
    settings: Settings = Depends(get_settings),
    pipeline: BaseInsightPipeline = Depends(get_pipeline),
) -> JSONResponse:
    """Generate an insights report for a metrics payload.

    Args:
        body: Request body with metricsData
        settings: Application settings
        pipeline: Insight pipeline for this request

    Returns:
        JSONResponse with the report, or an error body carrying a fallback report
    """
    if not settings.backend_configured:
        logger.error("Completion backend API key not configured")
        return JSONResponse(
            status_code=500,
            content={
                "error": "OpenAI API key not configured",
                "fallback": configuration_error_report().to_payload(),
            },
        )

    if body is None or not body.metrics_data:
        return JSONResponse(status_code=400, content={"error": "metricsData is required"})

    result = await pipeline.run(body.metrics_data)
    logger.info(
        "Insights generated: status=%s, degraded=%s, duration_ms=%.1f",
        result.status.value,
        result.degraded_stages,
        result.total_duration_ms,
    )

    if not result.success:
        return _failure_response(result)
    return JSONResponse(status_code=200, content=result.report.to_payload())


__all__ = [
    "InsightsRequest",
    "get_pipeline",
    "router",
]
