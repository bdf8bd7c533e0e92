"""Pipeline factory.

Builds the pipeline selected by ``Settings.pipeline_mode`` with an explicit
settings object and an optional pre-built completion client.
"""

from __future__ import annotations

from lynq_insights.clients.completion import create_completion_client
from lynq_insights.clients.protocols import CompletionClientProtocol
from lynq_insights.core.config import Settings, get_settings
from lynq_insights.functions.stages import build_single_agent, build_stage_agents
from lynq_insights.pipelines.orchestrator import BaseInsightPipeline, InsightPipeline
from lynq_insights.pipelines.single_stage import SingleStagePipeline


def create_insight_pipeline(
    settings: Settings | None = None,
    client: CompletionClientProtocol | None = None,
) -> BaseInsightPipeline:
    """Create the configured insight pipeline.

    Args:
        settings: Settings to build from (defaults to get_settings())
        client: Completion client to use (defaults to one built from settings)

    Returns:
        InsightPipeline, or SingleStagePipeline in single_stage mode.
    """
    settings = settings or get_settings()
    client = client or create_completion_client(settings)

    if settings.pipeline_mode == "single_stage":
        return SingleStagePipeline(
            client,
            build_single_agent(settings),
            timeout_seconds=settings.pipeline_timeout_seconds,
        )
    return InsightPipeline(
        client,
        build_stage_agents(settings),
        timeout_seconds=settings.pipeline_timeout_seconds,
    )


__all__ = [
    "create_insight_pipeline",
]
