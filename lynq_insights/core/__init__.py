"""Core module - Configuration, logging, constants, and exceptions.

Exports:
    - Settings, get_settings: Pydantic Settings configuration
    - configure_logging, get_logger: Structured logging (structlog)
    - Confidence, Timeouts: report and timeout constants
    - Exception classes: AgentError, AgentConfigurationError, etc.
"""

from lynq_insights.core.config import Settings, get_settings
from lynq_insights.core.constants import (
    MAX_INSIGHTS,
    MAX_RECOMMENDATIONS,
    MAX_TRENDS,
    REQUIRED_METRIC_FIELDS,
    TREND_DIRECTIONS,
    Confidence,
    ServicePort,
    Timeouts,
)
from lynq_insights.core.exceptions import (
    AgentConfigurationError,
    AgentConnectionError,
    AgentError,
    AgentExecutionError,
    AgentTimeoutError,
    ClientError,
    GatewayClientError,
)
from lynq_insights.core.logging import configure_logging, get_logger


__all__ = [
    "MAX_INSIGHTS",
    "MAX_RECOMMENDATIONS",
    "MAX_TRENDS",
    "REQUIRED_METRIC_FIELDS",
    "TREND_DIRECTIONS",
    # Exceptions
    "AgentConfigurationError",
    "AgentConnectionError",
    "AgentError",
    "AgentExecutionError",
    "AgentTimeoutError",
    "ClientError",
    # Constants
    "Confidence",
    "GatewayClientError",
    "ServicePort",
    # Configuration
    "Settings",
    "Timeouts",
    # Logging
    "configure_logging",
    "get_logger",
    "get_settings",
]
