"""Single-stage legacy pipeline.

One agent produces the whole report. Kept for deployments that trade the
four-stage analysis for a single completion call; never the default.
"""

from __future__ import annotations

from lynq_insights.clients.protocols import CompletionClientProtocol
from lynq_insights.core.constants import LEGACY_CALL_TO_ACTION, Confidence, Timeouts
from lynq_insights.core.logging import get_logger
from lynq_insights.functions.base import StageAgent
from lynq_insights.pipelines.orchestrator import (
    BaseInsightPipeline,
    PipelineRun,
    PipelineState,
    PipelineStatus,
    Transitions,
)
from lynq_insights.schemas.error_reports import legacy_failure_report
from lynq_insights.schemas.insights import InsightReport
from lynq_insights.validation.schema_validator import coerce_report, validate_report


logger = get_logger(__name__)


SINGLE_STAGE_TRANSITIONS: Transitions = {
    PipelineState.IDLE: frozenset({PipelineState.ANALYZING, PipelineState.FAILED}),
    PipelineState.ANALYZING: frozenset({PipelineState.DONE, PipelineState.FAILED}),
}


class SingleStagePipeline(BaseInsightPipeline):
    """One agent, one completion, one report.

    A response failing strict validation is repaired into a partial report:
    data quality is taken as valid, trends and insights are coerced,
    callToAction and confidence fall back to the legacy defaults.
    """

    name = "insights-single-stage"
    transitions = SINGLE_STAGE_TRANSITIONS

    def __init__(
        self,
        client: CompletionClientProtocol,
        agent: StageAgent,
        timeout_seconds: float = Timeouts.PIPELINE_DEFAULT,
    ) -> None:
        super().__init__(client, timeout_seconds)
        self._agent = agent

    @property
    def agent(self) -> StageAgent:
        return self._agent

    def _failure_report(self) -> InsightReport:
        return legacy_failure_report()

    async def _execute(self, run: PipelineRun) -> tuple[InsightReport, PipelineStatus]:
        run.advance(PipelineState.ANALYZING)
        result = await self._agent.run(self._client, run.context)
        run.record(result)
        run.advance(PipelineState.DONE)

        record = run.context.record_of(self._agent.role)
        outcome = validate_report(record)
        if outcome.value is not None:
            return outcome.value, PipelineStatus.COMPLETED

        logger.warning("Single-stage output failed validation, building partial report")
        partial = coerce_report(
            {**record, "dataQuality": {"isValid": True}},
            default_confidence=Confidence.LEGACY_DEFAULT,
            default_call_to_action=LEGACY_CALL_TO_ACTION,
        )
        return partial, PipelineStatus.REPAIRED


__all__ = [
    "SINGLE_STAGE_TRANSITIONS",
    "SingleStagePipeline",
]
