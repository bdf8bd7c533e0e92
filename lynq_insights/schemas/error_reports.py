"""Error-shaped InsightReports.

Every failure path (configuration, transport, fatal pipeline error) is
delivered to callers as a well-formed InsightReport with zero confidence,
so the rendering layer never needs a separate error-display path.
"""

from __future__ import annotations

from lynq_insights.core.constants import RETRY_CALL_TO_ACTION, Confidence
from lynq_insights.schemas.insights import DataQuality, InsightReport


def _error_report(issue: str, insights: list[str], call_to_action: str) -> InsightReport:
    return InsightReport(
        data_quality=DataQuality(is_valid=False, issues=[issue]),
        trends=[],
        insights=insights,
        call_to_action=call_to_action,
        confidence=Confidence.FAILED,
    )


def pipeline_failure_report() -> InsightReport:
    """A stage raised; the run was aborted."""
    return _error_report(
        "Agent execution failed",
        ["Unable to generate insights at this time. Please try again."],
        RETRY_CALL_TO_ACTION,
    )


def legacy_failure_report() -> InsightReport:
    """The single-stage agent raised."""
    return _error_report(
        "Analysis failed",
        ["Unable to generate insights. Please try again."],
        "Retry the analysis.",
    )


def configuration_error_report(rejected: bool = False) -> InsightReport:
    """The backend credential is missing or was rejected.

    Args:
        rejected: True when the backend refused the credential (401/403).
    """
    if rejected:
        return _error_report(
            "Invalid API key",
            [
                "The OpenAI API key is invalid or expired.",
                "Please check your API key and try again.",
            ],
            "Update the API key in the service configuration.",
        )
    return _error_report(
        "API key not configured",
        ["Unable to generate insights: API key not configured."],
        "Contact administrator to configure the OpenAI API key.",
    )


def service_unavailable_report(detail: str | None = None) -> InsightReport:
    """The generation backend timed out or could not be reached."""
    return _error_report(
        detail or "Insight service unavailable",
        [
            "The insight service is currently unavailable.",
            "Please try again in a few moments.",
        ],
        RETRY_CALL_TO_ACTION,
    )


def connection_failure_report(detail: str | None = None) -> InsightReport:
    """No response at all from the remote insights service."""
    return _error_report(
        detail or "Connection to the insights service failed",
        [
            "Unable to reach the insights service.",
            "Please check your connection and try again.",
        ],
        "Check your network connection and regenerate the analysis.",
    )


def http_error_report(status_code: int, error: str | None = None) -> InsightReport:
    """The remote insights service answered with an error and no fallback."""
    issue = f"HTTP {status_code}: {error}" if error else f"HTTP {status_code}"
    return _error_report(
        issue,
        ["The insights service returned an error while generating insights."],
        RETRY_CALL_TO_ACTION,
    )


def busy_report() -> InsightReport:
    """Another run is already in flight on this pipeline."""
    return _error_report(
        "An analysis is already in progress",
        ["Insight generation is already running for this dashboard."],
        "Wait for the current analysis to finish before regenerating.",
    )


__all__ = [
    "busy_report",
    "configuration_error_report",
    "connection_failure_report",
    "http_error_report",
    "legacy_failure_report",
    "pipeline_failure_report",
    "service_unavailable_report",
]
