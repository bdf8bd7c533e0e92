"""Insight pipeline constants and canonical report wording.

Provides centralized constants for the insights service:
- Report shape limits
- Confidence defaults
- Canonical fallback sentences
- Default timeout values
"""

from enum import IntEnum


# =============================================================================
# Service Ports
# =============================================================================

class ServicePort(IntEnum):
    """Standard ports for the insights deployment."""
    INSIGHTS_SERVICE = 8090


# =============================================================================
# Report Shape Limits
# =============================================================================

MAX_INSIGHTS: int = 4
MAX_TRENDS: int = 3
MAX_RECOMMENDATIONS: int = 4

TREND_DIRECTIONS: tuple[str, ...] = ("up", "down", "stable")


# =============================================================================
# Confidence Defaults
# =============================================================================

class Confidence:
    """Confidence bounds and defaults.

    DEFAULT applies to the four-stage pipeline, LEGACY_DEFAULT to the
    single-stage mode.
    """
    FLOOR: int = 0
    CEILING: int = 100
    DEFAULT: int = 75
    LEGACY_DEFAULT: int = 70
    FAILED: int = 0


# =============================================================================
# Canonical Fallback Wording (S1192 - No Duplicated Literals)
# =============================================================================

PLACEHOLDER_INSIGHT = "Analysis completed. Review the detailed metrics for specific insights."
DEFAULT_CALL_TO_ACTION = "Review the analysis and implement the recommended changes."
LEGACY_CALL_TO_ACTION = "Review the analysis for next steps."
UNSPECIFIED_ISSUE = "Data quality issues were reported without details."
RETRY_CALL_TO_ACTION = "Retry the analysis or contact support if the issue persists."


# =============================================================================
# Metrics Payload
# =============================================================================

REQUIRED_METRIC_FIELDS: tuple[str, ...] = (
    "objectiveScore",
    "strScore",
    "engagementRate",
    "completionRate",
)

# Benchmarks quoted to the Trend Analyzer
ENGAGEMENT_GOOD_THRESHOLD = 70
COMPLETION_EXCELLENT_THRESHOLD = 80


# =============================================================================
# Default Timeout Values
# =============================================================================

class Timeouts:
    """Default timeout values in seconds.

    These can be overridden via Settings.
    """
    HTTP_COMPLETION: float = 60.0
    HTTP_INSIGHTS: float = 150.0
    PIPELINE_DEFAULT: float = 120.0


# =============================================================================
# API
# =============================================================================

INSIGHTS_PATH = "/insights"
HEALTH_CHECK_PATH = "/health"

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_ENVIRONMENT = "development"
