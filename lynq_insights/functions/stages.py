"""The four pipeline stage agents and the legacy single agent.

Input builders thread the accumulated context into each stage:

    Validator       <- metrics
    Trend Analyzer  <- metrics
    Recommender     <- metrics + validation + trends
    Summarizer      <- metrics + validation + trends + recommendations
"""

from __future__ import annotations

from lynq_insights.core.config import Settings
from lynq_insights.functions.base import StageAgent
from lynq_insights.functions.prompts import (
    RECOMMENDER_INSTRUCTIONS,
    RECOMMENDER_PROMPT,
    SINGLE_AGENT_INSTRUCTIONS,
    SINGLE_AGENT_PROMPT,
    SUMMARIZER_INSTRUCTIONS,
    SUMMARIZER_PROMPT,
    TREND_ANALYZER_INSTRUCTIONS,
    TREND_ANALYZER_PROMPT,
    VALIDATOR_INSTRUCTIONS,
    VALIDATOR_PROMPT,
)
from lynq_insights.functions.context import InsightContext
from lynq_insights.schemas.stages import StageRole


def validator_input(context: InsightContext) -> str:
    return VALIDATOR_PROMPT.format(payload=context.metrics_text)


def trend_analyzer_input(context: InsightContext) -> str:
    return TREND_ANALYZER_PROMPT.format(payload=context.metrics_text)


def recommender_input(context: InsightContext) -> str:
    payload = context.serialize(StageRole.VALIDATOR, StageRole.TREND_ANALYZER)
    return RECOMMENDER_PROMPT.format(payload=payload)


def summarizer_input(context: InsightContext) -> str:
    payload = context.serialize(
        StageRole.VALIDATOR,
        StageRole.TREND_ANALYZER,
        StageRole.RECOMMENDER,
    )
    return SUMMARIZER_PROMPT.format(payload=payload)


def single_agent_input(context: InsightContext) -> str:
    return SINGLE_AGENT_PROMPT.format(payload=context.metrics_text)


def build_stage_agents(settings: Settings) -> tuple[StageAgent, ...]:
    """Build the four stage agents in execution order.

    The first three stages use the fast model; the summarizer uses the
    summary model.
    """
    common = {
        "temperature": settings.temperature,
        "max_tokens": settings.max_tokens,
    }
    return (
        StageAgent(
            role=StageRole.VALIDATOR,
            name="Data Validator",
            instructions=VALIDATOR_INSTRUCTIONS,
            build_input=validator_input,
            model=settings.fast_model,
            **common,
        ),
        StageAgent(
            role=StageRole.TREND_ANALYZER,
            name="Trend Analyzer",
            instructions=TREND_ANALYZER_INSTRUCTIONS,
            build_input=trend_analyzer_input,
            model=settings.fast_model,
            **common,
        ),
        StageAgent(
            role=StageRole.RECOMMENDER,
            name="Recommendation Agent",
            instructions=RECOMMENDER_INSTRUCTIONS,
            build_input=recommender_input,
            model=settings.fast_model,
            **common,
        ),
        StageAgent(
            role=StageRole.SUMMARIZER,
            name="Summary Agent",
            instructions=SUMMARIZER_INSTRUCTIONS,
            build_input=summarizer_input,
            model=settings.summary_model,
            **common,
        ),
    )


def build_single_agent(settings: Settings) -> StageAgent:
    """Build the legacy single-stage agent, checked against the full report schema."""
    return StageAgent(
        role=StageRole.SUMMARIZER,
        name="LYNQ Insights Agent",
        instructions=SINGLE_AGENT_INSTRUCTIONS,
        build_input=single_agent_input,
        model=settings.fast_model,
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
    )


__all__ = [
    "build_single_agent",
    "build_stage_agents",
    "recommender_input",
    "summarizer_input",
    "trend_analyzer_input",
    "validator_input",
]
