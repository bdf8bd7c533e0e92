"""Schema validation and repair for generated content.

Two entry points per shape:

- validate_*: strict. Returns the typed value or itemized shape violations.
- coerce_*: lenient. Always returns a conforming value by clamping numbers,
  truncating arrays, substituting defaults and dropping non-conforming
  array elements.

This module is the only place that accepts untrusted generated content
leniently; everything downstream works with validated models.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from lynq_insights.core.constants import (
    DEFAULT_CALL_TO_ACTION,
    MAX_INSIGHTS,
    MAX_TRENDS,
    PLACEHOLDER_INSIGHT,
    TREND_DIRECTIONS,
    UNSPECIFIED_ISSUE,
    Confidence,
)
from lynq_insights.schemas.insights import DataQuality, InsightReport, InsightTrend
from lynq_insights.schemas.stages import STAGE_SCHEMAS, StageRole


ModelT = TypeVar("ModelT", bound=BaseModel)


# =============================================================================
# Violations
# =============================================================================

class ViolationKind(str, Enum):
    """Category of a shape violation."""

    MISSING_FIELD = "missing_field"
    WRONG_TYPE = "wrong_type"
    INVALID_ENUM = "invalid_enum"
    LENGTH_EXCEEDED = "length_exceeded"
    EMPTY_VALUE = "empty_value"
    OUT_OF_RANGE = "out_of_range"


@dataclass(frozen=True)
class ShapeViolation:
    """One reason a candidate does not conform to its schema."""

    path: str
    kind: ViolationKind
    message: str


@dataclass(frozen=True)
class ValidationOutcome(Generic[ModelT]):
    """Result of strict validation: a typed value or violations, never both."""

    value: ModelT | None = None
    violations: tuple[ShapeViolation, ...] = ()

    @property
    def ok(self) -> bool:
        return self.value is not None


_ERROR_KINDS: dict[str, ViolationKind] = {
    "missing": ViolationKind.MISSING_FIELD,
    "issues_required": ViolationKind.MISSING_FIELD,
    "literal_error": ViolationKind.INVALID_ENUM,
    "enum": ViolationKind.INVALID_ENUM,
    "too_long": ViolationKind.LENGTH_EXCEEDED,
    "too_short": ViolationKind.EMPTY_VALUE,
    "string_too_short": ViolationKind.EMPTY_VALUE,
    "greater_than_equal": ViolationKind.OUT_OF_RANGE,
    "less_than_equal": ViolationKind.OUT_OF_RANGE,
}

# Model-level errors carry an empty location
_ERROR_PATHS: dict[str, str] = {
    "issues_required": "dataQuality.issues",
}


def _to_violations(exc: ValidationError) -> tuple[ShapeViolation, ...]:
    violations = []
    for error in exc.errors():
        error_type = error.get("type", "")
        path = ".".join(str(part) for part in error.get("loc", ()))
        violations.append(
            ShapeViolation(
                path=path or _ERROR_PATHS.get(error_type, ""),
                kind=_ERROR_KINDS.get(error_type, ViolationKind.WRONG_TYPE),
                message=error.get("msg", "Invalid value"),
            )
        )
    return tuple(violations)


# =============================================================================
# Strict Validation
# =============================================================================

def validate_model(schema: type[ModelT], candidate: Any) -> ValidationOutcome[ModelT]:
    """Strictly validate a candidate record against a schema.

    Args:
        schema: Target pydantic model.
        candidate: Untrusted value, usually a parsed stage output.

    Returns:
        ValidationOutcome with the typed value, or the itemized violations.
    """
    if not isinstance(candidate, Mapping):
        return ValidationOutcome(
            violations=(
                ShapeViolation(
                    path="",
                    kind=ViolationKind.WRONG_TYPE,
                    message=f"expected an object, got {type(candidate).__name__}",
                ),
            )
        )
    try:
        value = schema.model_validate(dict(candidate))
    except ValidationError as exc:
        return ValidationOutcome(violations=_to_violations(exc))
    return ValidationOutcome(value=value)


def validate_report(candidate: Any) -> ValidationOutcome[InsightReport]:
    """Strictly validate a candidate InsightReport record."""
    return validate_model(InsightReport, candidate)


def validate_stage(role: StageRole, candidate: Any) -> ValidationOutcome[Any]:
    """Strictly validate an intermediate stage output against its role schema."""
    return validate_model(STAGE_SCHEMAS[role], candidate)


# =============================================================================
# Lenient Coercion
# =============================================================================

def coerce_confidence(value: Any, default: int = Confidence.DEFAULT) -> int:
    """Clamp a numeric confidence into [0, 100]; non-numeric -> default."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    return int(min(Confidence.CEILING, max(Confidence.FLOOR, round(value))))


def coerce_insights(value: Any, limit: int = MAX_INSIGHTS) -> list[str]:
    """Keep non-empty strings, order preserved, truncated to ``limit``."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str) and item][:limit]


def is_complete_trend(item: Any) -> bool:
    """True when a trend entry has metric, a known direction and analysis."""
    if not isinstance(item, Mapping):
        return False
    metric = item.get("metric")
    analysis = item.get("analysis")
    direction = item.get("direction")
    return (
        isinstance(metric, str) and bool(metric)
        and isinstance(analysis, str) and bool(analysis)
        and isinstance(direction, str) and direction in TREND_DIRECTIONS
    )


def coerce_trends(value: Any, limit: int = MAX_TRENDS) -> list[InsightTrend]:
    """Drop non-conforming trend entries and keep the first ``limit``.

    Entries with a direction outside {up, down, stable} are dropped,
    never coerced.
    """
    if not isinstance(value, list):
        return []
    return [
        InsightTrend(
            metric=item["metric"],
            direction=item["direction"],
            analysis=item["analysis"],
        )
        for item in value
        if is_complete_trend(item)
    ][:limit]


def coerce_data_quality(value: Any) -> DataQuality:
    """Default is_valid to True; guarantee issues when it is False."""
    record = value if isinstance(value, Mapping) else {}
    is_valid = record.get("isValid", record.get("is_valid"))
    is_valid = is_valid if isinstance(is_valid, bool) else True

    raw_issues = record.get("issues")
    issues = (
        [issue for issue in raw_issues if isinstance(issue, str) and issue]
        if isinstance(raw_issues, list)
        else None
    )
    if not is_valid and not issues:
        issues = [UNSPECIFIED_ISSUE]
    return DataQuality(is_valid=is_valid, issues=issues)


def coerce_call_to_action(value: Any, default: str = DEFAULT_CALL_TO_ACTION) -> str:
    """Return the value when it is a non-empty string, else ``default``."""
    return value if isinstance(value, str) and value else default


def coerce_report(
    candidate: Any,
    *,
    default_confidence: int = Confidence.DEFAULT,
    default_call_to_action: str = DEFAULT_CALL_TO_ACTION,
) -> InsightReport:
    """Repair any candidate into a conforming InsightReport.

    Never raises. Coercing an already-valid report returns an equal report.

    Args:
        candidate: Untrusted record (or an InsightReport).
        default_confidence: Used when confidence is missing or non-numeric.
        default_call_to_action: Used when callToAction is missing or empty.

    Returns:
        A report satisfying every InsightReport invariant.
    """
    if isinstance(candidate, InsightReport):
        candidate = candidate.to_payload()
    record: Mapping[str, Any] = candidate if isinstance(candidate, Mapping) else {}

    return InsightReport(
        data_quality=coerce_data_quality(record.get("dataQuality")),
        trends=coerce_trends(record.get("trends")),
        insights=coerce_insights(record.get("insights")) or [PLACEHOLDER_INSIGHT],
        call_to_action=coerce_call_to_action(
            record.get("callToAction"), default_call_to_action
        ),
        confidence=coerce_confidence(record.get("confidence"), default_confidence),
    )


__all__ = [
    "ShapeViolation",
    "ValidationOutcome",
    "ViolationKind",
    "coerce_call_to_action",
    "coerce_confidence",
    "coerce_data_quality",
    "coerce_insights",
    "coerce_report",
    "coerce_trends",
    "is_complete_trend",
    "validate_model",
    "validate_report",
    "validate_stage",
]
