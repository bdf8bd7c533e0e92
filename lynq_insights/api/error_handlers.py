"""Framework-level error bodies.

Routing errors, request validation errors and uncaught exceptions answer
with an ErrorResponse. On the insights path the body also carries a
``fallback`` report, so a dashboard that sent the wrong method still gets
something it can render.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from lynq_insights.core.constants import INSIGHTS_PATH
from lynq_insights.schemas.error_reports import http_error_report


logger = logging.getLogger(__name__)


ERROR_TYPES: dict[int, str] = {
    400: "BadRequest",
    401: "Unauthorized",
    403: "Forbidden",
    404: "NotFound",
    405: "MethodNotAllowed",
    409: "Conflict",
    422: "ValidationError",
    500: "InternalServerError",
    503: "ServiceUnavailable",
    504: "GatewayTimeout",
}


class ErrorResponse(BaseModel):
    """Body of a framework-level error."""

    error: str
    detail: str
    code: str | None = None
    path: str | None = None
    fallback: dict[str, Any] | None = None


def _error_response(
    request: Request,
    status_code: int,
    detail: str,
    code: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    path = request.url.path
    body = ErrorResponse(
        error=ERROR_TYPES.get(status_code, "Error"),
        detail=detail,
        code=code,
        path=path,
    )
    if path.rstrip("/") == INSIGHTS_PATH:
        body.fallback = http_error_report(status_code, detail).to_payload()
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Router-raised 404/405 and explicit HTTPExceptions."""
    return _error_response(
        request,
        exc.status_code,
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Request bodies FastAPI could not parse, one ``loc: msg`` per problem."""
    problems = [
        "{}: {}".format(
            ".".join(str(part) for part in error.get("loc", ())),
            error.get("msg", "Invalid value"),
        )
        for error in exc.errors()
    ]
    return _error_response(
        request,
        422,
        "; ".join(problems) or "Validation error",
        code="VALIDATION_ERROR",
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled %s on %s", type(exc).__name__, request.url.path,
    )
    return _error_response(
        request, 500, "An unexpected error occurred", code="INTERNAL_ERROR",
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the handlers on ``app``."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = [
    "ERROR_TYPES",
    "ErrorResponse",
    "register_error_handlers",
]
