"""Fallback Synthesizer.

Builds a valid InsightReport from partial stage outputs when the summarizer
output fails strict validation. Every rule is a best-effort salvage:

    insights      summarizer insights -> recommendation actions -> placeholder
    trends        complete trend-analyzer entries, at most 3
    dataQuality   validator verdict (default valid) plus degraded-stage notes
    callToAction  summarizer value -> default sentence
    confidence    summarizer value clamped -> 75
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from lynq_insights.core.constants import MAX_INSIGHTS, PLACEHOLDER_INSIGHT, Confidence
from lynq_insights.schemas.insights import DataQuality, InsightReport
from lynq_insights.validation.schema_validator import (
    coerce_call_to_action,
    coerce_confidence,
    coerce_data_quality,
    coerce_insights,
    coerce_trends,
)


def degraded_note(stage_name: str) -> str:
    """Issue text recording that a stage's output was malformed."""
    return f"{stage_name} returned malformed output; this report may be incomplete."


def _recommendation_actions(recommendations: Mapping[str, Any]) -> list[str]:
    entries = recommendations.get("recommendations")
    if not isinstance(entries, list):
        return []
    actions = [
        entry["action"]
        for entry in entries
        if isinstance(entry, Mapping)
        and isinstance(entry.get("action"), str)
        and entry["action"]
    ]
    return actions[:MAX_INSIGHTS]


def _with_notes(quality: DataQuality, notes: Sequence[str]) -> DataQuality:
    if not notes:
        return quality
    return DataQuality(
        is_valid=quality.is_valid,
        issues=[*(quality.issues or []), *notes],
    )


def synthesize_fallback(
    summary: Mapping[str, Any],
    validation: Mapping[str, Any],
    trends: Mapping[str, Any],
    recommendations: Mapping[str, Any],
    degraded_stages: Sequence[str] = (),
) -> InsightReport:
    """Reconstruct a valid report from whatever the stages produced.

    Never raises for any combination of inputs; an ``{"raw": ...}`` record
    simply contributes nothing.

    Args:
        summary: Summarizer output record
        validation: Validator output record
        trends: Trend analyzer output record
        recommendations: Recommender output record
        degraded_stages: Display names of stages whose output was malformed

    Returns:
        A report satisfying every InsightReport invariant.
    """
    insights = (
        coerce_insights(summary.get("insights"))
        or _recommendation_actions(recommendations)
        or [PLACEHOLDER_INSIGHT]
    )
    quality = coerce_data_quality(
        {
            "isValid": validation.get("isValid"),
            "issues": validation.get("issues"),
        }
    )

    return InsightReport(
        data_quality=_with_notes(quality, [degraded_note(name) for name in degraded_stages]),
        trends=coerce_trends(trends.get("trends")),
        insights=insights,
        call_to_action=coerce_call_to_action(summary.get("callToAction")),
        confidence=coerce_confidence(summary.get("confidence"), Confidence.DEFAULT),
    )


__all__ = [
    "degraded_note",
    "synthesize_fallback",
]
