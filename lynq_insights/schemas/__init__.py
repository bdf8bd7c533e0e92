"""Pydantic schemas for insight reports and stage outputs."""

from lynq_insights.schemas.insights import (
    DataQuality,
    InsightReport,
    InsightTrend,
    TrendDirection,
)
from lynq_insights.schemas.stages import (
    STAGE_SCHEMAS,
    DataValidationOutput,
    Recommendation,
    RecommendationOutput,
    StageRole,
    TrendAnalysisOutput,
    TrendEntry,
)


__all__ = [
    "DataQuality",
    "DataValidationOutput",
    "InsightReport",
    "InsightTrend",
    "Recommendation",
    "RecommendationOutput",
    "STAGE_SCHEMAS",
    "StageRole",
    "TrendAnalysisOutput",
    "TrendDirection",
    "TrendEntry",
]
