"""Parsing, strict validation and lenient repair of generated content."""

from lynq_insights.validation.parsing import (
    Parsed,
    StageOutput,
    Unparsed,
    as_record,
    parse_stage_output,
)
from lynq_insights.validation.schema_validator import (
    ShapeViolation,
    ValidationOutcome,
    ViolationKind,
    coerce_confidence,
    coerce_report,
    coerce_trends,
    validate_model,
    validate_report,
    validate_stage,
)


__all__ = [
    "Parsed",
    "ShapeViolation",
    "StageOutput",
    "Unparsed",
    "ValidationOutcome",
    "ViolationKind",
    "as_record",
    "coerce_confidence",
    "coerce_report",
    "coerce_trends",
    "parse_stage_output",
    "validate_model",
    "validate_report",
    "validate_stage",
]
