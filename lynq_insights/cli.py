"""Command-line entry point.

Runs the insight pipeline over a metrics JSON file and renders the report:

    lynq-insights metrics.json
    lynq-insights metrics.json --remote http://localhost:8090
    lynq-insights metrics.json --single-stage --json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from lynq_insights.clients.insights_service import InsightsServiceClient
from lynq_insights.core.config import Settings, get_settings
from lynq_insights.core.logging import configure_logging
from lynq_insights.formatters.display import format_for_display, trend_color
from lynq_insights.pipelines.factory import create_insight_pipeline
from lynq_insights.schemas.insights import InsightReport


console = Console()

# Tailwind classes map onto the nearest rich colours
RICH_COLORS: dict[str, str] = {
    "text-emerald-500": "green",
    "text-rose-500": "red",
    "text-slate-500": "grey50",
    "text-blue-500": "blue",
    "text-yellow-500": "yellow",
    "text-red-500": "red",
}

TREND_ARROWS: dict[str, str] = {"up": "↑", "down": "↓", "stable": "→"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lynq-insights",
        description="Generate an insights report for learning-module metrics.",
    )
    parser.add_argument("metrics_file", type=Path, help="JSON file holding the metrics payload")
    parser.add_argument(
        "--remote",
        metavar="URL",
        help="Call a running insights service instead of running the pipeline in-process",
    )
    parser.add_argument(
        "--single-stage",
        action="store_true",
        help="Use the legacy single-agent pipeline",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="as_json",
        help="Print the raw report JSON",
    )
    return parser


def load_metrics(path: Path) -> Any:
    """Read the metrics payload; invalid JSON is passed on as text."""
    text = path.read_text(encoding="utf-8")
    try:
        return json.loads(text)
    except ValueError:
        return text


async def generate_report(metrics: Any, settings: Settings, remote: str | None) -> InsightReport:
    """Produce a report in-process or through a remote service."""
    if remote:
        client = InsightsServiceClient(base_url=remote, timeout=settings.insights_timeout_seconds)
        try:
            return await client.generate(metrics)
        finally:
            await client.close()

    pipeline = create_insight_pipeline(settings)
    try:
        return await pipeline.generate(metrics)
    finally:
        await pipeline.close()


def render_report(report: InsightReport) -> None:
    """Render a report as rich panels and a trend table."""
    hints = format_for_display(report)
    color = RICH_COLORS.get(hints.health_color, "white")

    console.print(Panel.fit(
        f"[bold {color}]{hints.health_status.upper()}[/bold {color}]  "
        f"{hints.confidence_label} ({report.confidence}%)",
        title="LYNQ Insights",
        border_style=color,
    ))

    if report.data_quality.issues:
        console.print("[bold]Data quality issues[/bold]")
        for issue in report.data_quality.issues:
            console.print(f"  • [yellow]{issue}[/yellow]")

    if report.trends:
        table = Table(title="Trends", show_header=True)
        table.add_column("Metric", style="cyan")
        table.add_column("Direction")
        table.add_column("Analysis")
        for trend in report.trends:
            trend_style = RICH_COLORS.get(trend_color(trend.direction), "white")
            table.add_row(
                trend.metric,
                f"[{trend_style}]{TREND_ARROWS[trend.direction]} {trend.direction}[/{trend_style}]",
                trend.analysis,
            )
        console.print(table)

    console.print("[bold]Insights[/bold]")
    for insight in report.insights:
        console.print(f"  • {insight}")

    console.print(Panel.fit(report.call_to_action, title="Next step", border_style="green"))


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    if not args.metrics_file.is_file():
        console.print(f"[red]Metrics file not found: {args.metrics_file}[/red]")
        return 2

    settings = get_settings()
    configure_logging(settings)
    if args.single_stage:
        settings = settings.model_copy(update={"pipeline_mode": "single_stage"})

    try:
        report = asyncio.run(
            generate_report(load_metrics(args.metrics_file), settings, args.remote)
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        return 1

    if args.as_json:
        console.print_json(json.dumps(report.to_payload()))
    else:
        render_report(report)
    return 0 if report.confidence > 0 else 1


if __name__ == "__main__":
    sys.exit(main())
