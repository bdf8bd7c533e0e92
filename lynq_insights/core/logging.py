"""Structured logging with structlog.

configure_logging() runs once per process. Production and staging emit JSON
lines; other environments get console output. Every entry carries the
service name and environment, and entries logged inside run_context() also
carry the pipeline name and a per-run id, so the four stage entries of one
run can be correlated.
"""

import logging
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from lynq_insights.core.config import Settings, get_settings


JSON_ENVIRONMENTS = frozenset({"production", "staging"})

# Chatty per-request loggers held at WARNING
QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")

_configured = False


def service_context(settings: Settings) -> Processor:
    """Build a processor stamping service name and environment on each entry."""

    def add_service_context(
        logger: WrappedLogger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event_dict.setdefault("service", settings.service_name)
        event_dict.setdefault("environment", settings.environment)
        return event_dict

    return add_service_context


def _level(settings: Settings) -> int:
    level = logging.getLevelName(settings.log_level.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(settings: Settings | None = None, force: bool = False) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        settings: Settings to read environment and level from
            (defaults to get_settings()).
        force: Reconfigure even when already configured.
    """
    global _configured
    if _configured and not force:
        return

    settings = settings or get_settings()
    level = _level(settings)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        service_context(settings),
    ]
    if settings.environment in JSON_ENVIRONMENTS:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Return a structlog logger, e.g. ``get_logger(__name__)``."""
    return structlog.get_logger(name)


@contextmanager
def run_context(pipeline: str) -> Iterator[str]:
    """Bind a fresh run id and the pipeline name to every entry in the block.

    Yields:
        The run id.
    """
    run_id = uuid.uuid4().hex[:12]
    with structlog.contextvars.bound_contextvars(run_id=run_id, pipeline=pipeline):
        yield run_id


__all__ = [
    "configure_logging",
    "get_logger",
    "run_context",
    "service_context",
]
