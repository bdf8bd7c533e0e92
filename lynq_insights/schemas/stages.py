"""Output schemas for the intermediate pipeline stages.

One schema per stage role. The summarizer stage produces the full
InsightReport, so STAGE_SCHEMAS maps it to that model.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import Field, StrictBool, StrictFloat, StrictInt, StrictStr

from lynq_insights.core.constants import MAX_RECOMMENDATIONS
from lynq_insights.schemas.insights import (
    InsightReport,
    NonEmptyStr,
    ReportModel,
    TrendDirection,
)


class StageRole(str, Enum):
    """Pipeline stage roles, in execution order."""

    VALIDATOR = "validator"
    TREND_ANALYZER = "trend_analyzer"
    RECOMMENDER = "recommender"
    SUMMARIZER = "summarizer"


OverallHealth = Literal["excellent", "good", "needs_attention", "critical"]
Priority = Literal["high", "medium", "low"]


class DataValidationOutput(ReportModel):
    """Validator stage output."""

    is_valid: StrictBool
    issues: list[StrictStr] | None = None
    sanitized_data: dict[str, Any] | None = None
    summary: StrictStr | None = None


class TrendEntry(ReportModel):
    """One metric trend as classified by the trend analyzer."""

    metric: NonEmptyStr
    direction: TrendDirection
    percentage_change: StrictFloat | StrictInt | None = None
    analysis: NonEmptyStr


class TrendAnalysisOutput(ReportModel):
    """Trend analyzer stage output."""

    trends: list[TrendEntry]
    overall_health: OverallHealth


class Recommendation(ReportModel):
    """A single prioritized action."""

    priority: Priority
    area: StrictStr | None = None
    action: NonEmptyStr
    expected_impact: StrictStr


class RecommendationOutput(ReportModel):
    """Recommender stage output."""

    recommendations: list[Recommendation] = Field(..., max_length=MAX_RECOMMENDATIONS)


STAGE_SCHEMAS: dict[StageRole, type[ReportModel]] = {
    StageRole.VALIDATOR: DataValidationOutput,
    StageRole.TREND_ANALYZER: TrendAnalysisOutput,
    StageRole.RECOMMENDER: RecommendationOutput,
    StageRole.SUMMARIZER: InsightReport,
}


__all__ = [
    "STAGE_SCHEMAS",
    "DataValidationOutput",
    "OverallHealth",
    "Priority",
    "Recommendation",
    "RecommendationOutput",
    "StageRole",
    "TrendAnalysisOutput",
    "TrendEntry",
]
