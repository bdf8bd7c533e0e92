"""Unit tests for the InsightReport schema.

Pattern: Pydantic model validation testing
"""

from typing import Any

import pytest
from pydantic import ValidationError

from lynq_insights.schemas.insights import DataQuality, InsightReport, InsightTrend


def _report(**overrides: Any) -> dict[str, Any]:
    record: dict[str, Any] = {
        "dataQuality": {"isValid": True},
        "trends": [{"metric": "engagementRate", "direction": "up", "analysis": "Rising."}],
        "insights": ["Engagement is improving."],
        "callToAction": "Keep the current cadence.",
        "confidence": 80,
    }
    record.update(overrides)
    return record


class TestInsightReportValid:
    """Conforming records validate and keep their camelCase shape."""

    def test_validates_camel_case_record(self) -> None:
        report = InsightReport.model_validate(_report())

        assert report.data_quality.is_valid is True
        assert report.trends[0].direction == "up"
        assert report.call_to_action == "Keep the current cadence."
        assert report.confidence == 80

    def test_populates_by_field_name(self) -> None:
        report = InsightReport(
            data_quality=DataQuality(is_valid=True),
            trends=[],
            insights=["One insight."],
            call_to_action="Act.",
            confidence=50,
        )

        assert report.insights == ["One insight."]

    def test_float_confidence_is_rounded(self) -> None:
        report = InsightReport.model_validate(_report(confidence=72.6))

        assert report.confidence == 73

    def test_unknown_keys_ignored(self) -> None:
        report = InsightReport.model_validate(_report(extraCommentary="hi"))

        assert "extraCommentary" not in report.to_payload()

    def test_to_payload_uses_camel_case_and_omits_absent_issues(self) -> None:
        payload = InsightReport.model_validate(_report()).to_payload()

        assert set(payload) == {"dataQuality", "trends", "insights", "callToAction", "confidence"}
        assert payload["dataQuality"] == {"isValid": True}

    def test_report_is_frozen(self) -> None:
        report = InsightReport.model_validate(_report())

        with pytest.raises(ValidationError):
            report.confidence = 10


class TestInsightReportInvalid:
    """Non-conforming records are rejected, never coerced."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"insights": []},
            {"insights": ["a", "b", "c", "d", "e"]},
            {"insights": [""]},
            {"callToAction": ""},
            {"confidence": 101},
            {"confidence": -1},
            {"confidence": "high"},
            {"confidence": True},
            {"confidence": float("nan")},
            {"dataQuality": {"isValid": "true"}},
            {"trends": [{"metric": "x", "direction": "sideways", "analysis": "?"}]},
            {"trends": [
                {"metric": "a", "direction": "up", "analysis": "."},
                {"metric": "b", "direction": "up", "analysis": "."},
                {"metric": "c", "direction": "up", "analysis": "."},
                {"metric": "d", "direction": "up", "analysis": "."},
            ]},
        ],
    )
    def test_rejects_non_conforming(self, overrides: dict[str, Any]) -> None:
        with pytest.raises(ValidationError):
            InsightReport.model_validate(_report(**overrides))

    def test_missing_field_rejected(self) -> None:
        record = _report()
        del record["callToAction"]

        with pytest.raises(ValidationError):
            InsightReport.model_validate(record)

    def test_invalid_data_requires_issues(self) -> None:
        with pytest.raises(ValidationError, match="issues"):
            InsightReport.model_validate(_report(dataQuality={"isValid": False}))

    def test_invalid_data_with_issues_accepted(self) -> None:
        report = InsightReport.model_validate(
            _report(dataQuality={"isValid": False, "issues": ["strScore missing"]})
        )

        assert report.data_quality.issues == ["strScore missing"]


class TestInsightTrend:

    def test_empty_metric_rejected(self) -> None:
        with pytest.raises(ValidationError):
            InsightTrend(metric="", direction="up", analysis="Rising.")
