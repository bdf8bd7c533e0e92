"""Insight report schemas.

Defines the single externally visible result type (InsightReport) and its
parts. JSON keys are camelCase, Python attributes snake_case.

The models are strict: they describe a *conforming* report and reject
anything else. Lenient repair of generated content lives in
lynq_insights.validation.schema_validator, never here.
"""

from __future__ import annotations

import math
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from lynq_insights.core.constants import MAX_INSIGHTS, MAX_TRENDS, Confidence


# =============================================================================
# Shared Types
# =============================================================================

TrendDirection = Literal["up", "down", "stable"]

NonEmptyStr = Annotated[StrictStr, Field(min_length=1)]


class ReportModel(BaseModel):
    """Base for all generated-content schemas.

    Scalar fields use strict types (no "true" -> True, no 1 -> True).
    camelCase aliases, unknown keys ignored.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# =============================================================================
# Report Parts
# =============================================================================

class DataQuality(ReportModel):
    """Data-quality flags for the analysed payload."""

    is_valid: StrictBool = Field(..., description="Whether the metrics passed validation")
    issues: list[StrictStr] | None = Field(
        default=None,
        description="Issues found; non-empty whenever is_valid is False",
    )


class InsightTrend(ReportModel):
    """Direction classification for one tracked metric."""

    metric: NonEmptyStr
    direction: TrendDirection
    analysis: NonEmptyStr


# =============================================================================
# InsightReport
# =============================================================================

class InsightReport(ReportModel):
    """Fixed-shape insights report returned to callers.

    Invariants:
        - 1..4 insights
        - at most 3 trends, each with a direction in {up, down, stable}
        - non-empty call to action
        - integer confidence in [0, 100]
        - issues present whenever data_quality.is_valid is False
    """

    data_quality: DataQuality
    trends: list[InsightTrend] = Field(..., max_length=MAX_TRENDS)
    insights: list[NonEmptyStr] = Field(..., min_length=1, max_length=MAX_INSIGHTS)
    call_to_action: NonEmptyStr
    confidence: int = Field(..., ge=Confidence.FLOOR, le=Confidence.CEILING)

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence_is_number(cls, value: Any) -> Any:
        """Accept int or finite float, rounding floats to the nearest integer."""
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise PydanticCustomError("number_type", "confidence must be a number")
        if isinstance(value, float):
            if not math.isfinite(value):
                raise PydanticCustomError("number_type", "confidence must be finite")
            return round(value)
        return value

    @model_validator(mode="after")
    def _issues_required_when_invalid(self) -> InsightReport:
        if not self.data_quality.is_valid and not self.data_quality.issues:
            raise PydanticCustomError(
                "issues_required",
                "dataQuality.issues must be non-empty when isValid is false",
            )
        return self

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the camelCase wire shape, omitting absent issues."""
        return self.model_dump(by_alias=True, exclude_none=True)


__all__ = [
    "DataQuality",
    "InsightReport",
    "InsightTrend",
    "NonEmptyStr",
    "ReportModel",
    "TrendDirection",
]
