"""Unit tests for error-shaped reports."""

from collections.abc import Callable

import pytest

from lynq_insights.core.constants import RETRY_CALL_TO_ACTION
from lynq_insights.schemas.error_reports import (
    busy_report,
    configuration_error_report,
    connection_failure_report,
    http_error_report,
    legacy_failure_report,
    pipeline_failure_report,
    service_unavailable_report,
)
from lynq_insights.schemas.insights import InsightReport


ALL_REPORTS: list[Callable[[], InsightReport]] = [
    pipeline_failure_report,
    legacy_failure_report,
    configuration_error_report,
    lambda: configuration_error_report(rejected=True),
    service_unavailable_report,
    connection_failure_report,
    lambda: http_error_report(502),
    busy_report,
]


class TestErrorReportShape:
    """Every error report is a well-formed, zero-confidence report."""

    @pytest.mark.parametrize("factory", ALL_REPORTS)
    def test_zero_confidence_and_flagged_invalid(
        self, factory: Callable[[], InsightReport]
    ) -> None:
        report = factory()

        assert report.confidence == 0
        assert report.data_quality.is_valid is False
        assert report.data_quality.issues
        assert report.trends == []
        assert 1 <= len(report.insights) <= 4
        assert report.call_to_action


class TestErrorReportWording:

    def test_pipeline_failure(self) -> None:
        report = pipeline_failure_report()

        assert report.data_quality.issues == ["Agent execution failed"]
        assert report.call_to_action == RETRY_CALL_TO_ACTION

    def test_legacy_failure(self) -> None:
        report = legacy_failure_report()

        assert report.data_quality.issues == ["Analysis failed"]
        assert report.call_to_action == "Retry the analysis."

    def test_missing_key(self) -> None:
        report = configuration_error_report()

        assert report.data_quality.issues == ["API key not configured"]
        assert "configure the OpenAI API key" in report.call_to_action

    def test_rejected_key(self) -> None:
        report = configuration_error_report(rejected=True)

        assert report.data_quality.issues == ["Invalid API key"]

    def test_service_unavailable_detail(self) -> None:
        report = service_unavailable_report("Insight generation timed out")

        assert report.data_quality.issues == ["Insight generation timed out"]

    def test_http_error_with_and_without_text(self) -> None:
        assert http_error_report(502, "Bad Gateway").data_quality.issues == ["HTTP 502: Bad Gateway"]
        assert http_error_report(502).data_quality.issues == ["HTTP 502"]
