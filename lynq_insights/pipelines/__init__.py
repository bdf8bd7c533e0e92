"""Insight pipelines.

Exports:
    - InsightPipeline: canonical four-stage pipeline
    - SingleStagePipeline: legacy one-agent pipeline
    - PipelineResult, PipelineState, PipelineStatus: run outcome
    - synthesize_fallback: partial-output repair
    - create_insight_pipeline: settings-driven factory
"""

from lynq_insights.pipelines.factory import create_insight_pipeline
from lynq_insights.pipelines.fallback import synthesize_fallback
from lynq_insights.pipelines.orchestrator import (
    BaseInsightPipeline,
    InsightPipeline,
    PipelineResult,
    PipelineRun,
    PipelineState,
    PipelineStatus,
)
from lynq_insights.pipelines.single_stage import SingleStagePipeline


__all__ = [
    "BaseInsightPipeline",
    "InsightPipeline",
    "PipelineResult",
    "PipelineRun",
    "PipelineState",
    "PipelineStatus",
    "SingleStagePipeline",
    "create_insight_pipeline",
    "synthesize_fallback",
]
