"""Display formatting for insight reports.

Derives presentation hints from a report: an overall health status with
its colour class, a confidence label, and per-trend icon and colour. The
colour classes and icon names are the dashboard's Tailwind and lucide
identifiers.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from lynq_insights.schemas.insights import InsightReport, TrendDirection


HealthLabel = Literal["excellent", "good", "warning", "error"]

HIGH_CONFIDENCE = 80
MODERATE_CONFIDENCE = 60

TREND_ICONS: dict[str, str] = {
    "up": "TrendingUp",
    "down": "TrendingDown",
    "stable": "Minus",
}

TREND_COLORS: dict[str, str] = {
    "up": "text-emerald-500",
    "down": "text-rose-500",
    "stable": "text-slate-500",
}

HEALTH_COLORS: dict[str, str] = {
    "excellent": "text-emerald-500",
    "good": "text-blue-500",
    "warning": "text-yellow-500",
    "error": "text-red-500",
}


class DisplayHints(BaseModel):
    """Presentation hints for one report."""

    model_config = ConfigDict(frozen=True)

    health_status: HealthLabel = Field(..., description="Overall health bucket")
    health_color: str = Field(..., description="Colour class for the health bucket")
    confidence_label: str = Field(..., description="Human-readable confidence")


def health_status(report: InsightReport) -> HealthLabel:
    """Bucket a report by validity and confidence."""
    if not report.data_quality.is_valid or report.confidence == 0:
        return "error"
    if report.confidence >= HIGH_CONFIDENCE:
        return "excellent"
    if report.confidence >= MODERATE_CONFIDENCE:
        return "good"
    return "warning"


def confidence_label(confidence: int) -> str:
    if confidence >= HIGH_CONFIDENCE:
        return "High Confidence"
    if confidence >= MODERATE_CONFIDENCE:
        return "Moderate Confidence"
    if confidence > 0:
        return "Low Confidence"
    return "Analysis Failed"


def format_for_display(report: InsightReport) -> DisplayHints:
    """Derive display hints for a report."""
    status = health_status(report)
    return DisplayHints(
        health_status=status,
        health_color=HEALTH_COLORS[status],
        confidence_label=confidence_label(report.confidence),
    )


def trend_icon(direction: TrendDirection) -> str:
    """Icon name for a trend direction."""
    return TREND_ICONS[direction]


def trend_color(direction: TrendDirection) -> str:
    """Colour class for a trend direction."""
    return TREND_COLORS[direction]


__all__ = [
    "DisplayHints",
    "confidence_label",
    "format_for_display",
    "health_status",
    "trend_color",
    "trend_icon",
]
