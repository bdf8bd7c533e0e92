"""Formatters package for report presentation."""

from lynq_insights.formatters.display import (
    DisplayHints,
    format_for_display,
    trend_color,
    trend_icon,
)


__all__ = [
    "DisplayHints",
    "format_for_display",
    "trend_color",
    "trend_icon",
]
