"""Pipeline Orchestrator for the insight stage sequence.

Implements:
- PipelineState finite-state machine with an explicit transition table
- PipelineRun carrying the per-run state, context and stage results
- BaseInsightPipeline: busy guard, whole-run timeout, error mapping
- InsightPipeline: the canonical four-stage sequence

State machine (four-stage):

    idle -> validating -> analyzing_trends -> recommending -> summarizing -> done
                 \\              \\                 \\              \\
                  +--------------+-----------------+--------------+--> failed

No branching and no retries between stages. A degraded stage's partial
output is still forwarded; only a raised exception ends the run early.

Neither run() nor generate() raises: every outcome, including busy,
timeout, configuration and fatal errors, is a well-formed InsightReport.
"""

from __future__ import annotations

import asyncio
import time
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from lynq_insights.clients.protocols import CompletionClientProtocol
from lynq_insights.core.constants import Timeouts
from lynq_insights.core.exceptions import AgentConfigurationError, AgentExecutionError
from lynq_insights.core.logging import get_logger, run_context
from lynq_insights.functions.base import StageAgent, StageResult
from lynq_insights.functions.context import InsightContext
from lynq_insights.pipelines.fallback import synthesize_fallback
from lynq_insights.schemas.error_reports import (
    busy_report,
    configuration_error_report,
    pipeline_failure_report,
    service_unavailable_report,
)
from lynq_insights.schemas.insights import InsightReport
from lynq_insights.schemas.stages import StageRole
from lynq_insights.validation.schema_validator import validate_report


logger = get_logger(__name__)


# =============================================================================
# Enums
# =============================================================================

class PipelineState(str, Enum):
    """State of a pipeline run."""

    IDLE = "idle"
    VALIDATING = "validating"
    ANALYZING_TRENDS = "analyzing_trends"
    RECOMMENDING = "recommending"
    SUMMARIZING = "summarizing"
    ANALYZING = "analyzing"
    DONE = "done"
    FAILED = "failed"


class PipelineStatus(str, Enum):
    """How a run ended."""

    COMPLETED = "completed"
    REPAIRED = "repaired"
    BUSY = "busy"
    TIMED_OUT = "timed_out"
    MISCONFIGURED = "misconfigured"
    FAILED = "failed"


Transitions = Mapping[PipelineState, frozenset[PipelineState]]

MULTI_STAGE_TRANSITIONS: Transitions = {
    PipelineState.IDLE: frozenset({PipelineState.VALIDATING, PipelineState.FAILED}),
    PipelineState.VALIDATING: frozenset({PipelineState.ANALYZING_TRENDS, PipelineState.FAILED}),
    PipelineState.ANALYZING_TRENDS: frozenset({PipelineState.RECOMMENDING, PipelineState.FAILED}),
    PipelineState.RECOMMENDING: frozenset({PipelineState.SUMMARIZING, PipelineState.FAILED}),
    PipelineState.SUMMARIZING: frozenset({PipelineState.DONE, PipelineState.FAILED}),
}

# State entered to run each stage role
STAGE_STATES: dict[StageRole, PipelineState] = {
    StageRole.VALIDATOR: PipelineState.VALIDATING,
    StageRole.TREND_ANALYZER: PipelineState.ANALYZING_TRENDS,
    StageRole.RECOMMENDER: PipelineState.RECOMMENDING,
    StageRole.SUMMARIZER: PipelineState.SUMMARIZING,
}


# =============================================================================
# Pydantic Schemas
# =============================================================================

class PipelineResult(BaseModel):
    """Result of one pipeline run."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    report: InsightReport
    status: PipelineStatus
    final_state: PipelineState
    run_id: str | None = None
    stage_results: dict[str, StageResult] = Field(default_factory=dict)
    degraded_stages: list[str] = Field(default_factory=list)
    total_duration_ms: float = 0.0
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.status in (PipelineStatus.COMPLETED, PipelineStatus.REPAIRED)


# =============================================================================
# Run State
# =============================================================================

@dataclass
class PipelineRun:
    """Mutable state of a single run. Never shared across runs."""

    context: InsightContext
    transitions: Transitions = field(default_factory=lambda: MULTI_STAGE_TRANSITIONS)
    state: PipelineState = PipelineState.IDLE
    run_id: str | None = None
    stage_results: dict[str, StageResult] = field(default_factory=dict)

    def advance(self, target: PipelineState) -> None:
        """Move to ``target``; illegal transitions are fatal for the run."""
        if target not in self.transitions.get(self.state, frozenset()):
            raise AgentExecutionError(
                f"Illegal pipeline transition {self.state.value} -> {target.value}",
                step=self.state.value,
            )
        self.state = target

    def fail(self) -> None:
        """Enter the terminal failed state (no-op once terminal)."""
        if self.state not in (PipelineState.DONE, PipelineState.FAILED):
            self.state = PipelineState.FAILED

    def record(self, result: StageResult) -> None:
        """Store a stage result and thread its output into the context."""
        self.stage_results[result.role.value] = result
        self.context.record(result.role, result.output)

    @property
    def degraded_stages(self) -> list[str]:
        return [r.stage_name for r in self.stage_results.values() if r.degraded]


# =============================================================================
# Base Pipeline
# =============================================================================

class BaseInsightPipeline(ABC):
    """Shared run wrapper for insight pipelines.

    Subclasses implement ``_execute`` (the stage sequence) and
    ``_failure_report`` (the fixed fatal-error report). This class adds the
    busy guard, the whole-run timeout and the mapping of exceptions onto
    error-shaped reports.
    """

    name: str = ""
    transitions: Transitions = MULTI_STAGE_TRANSITIONS

    def __init__(
        self,
        client: CompletionClientProtocol,
        timeout_seconds: float = Timeouts.PIPELINE_DEFAULT,
    ) -> None:
        self._client = client
        self.timeout_seconds = timeout_seconds
        self._in_flight = False

    @property
    def client(self) -> CompletionClientProtocol:
        return self._client

    @property
    def busy(self) -> bool:
        """True while a run is in flight on this instance."""
        return self._in_flight

    @abstractmethod
    async def _execute(self, run: PipelineRun) -> tuple[InsightReport, PipelineStatus]:
        """Run the stage sequence and assemble the report."""
        ...

    @abstractmethod
    def _failure_report(self) -> InsightReport:
        """Report returned when a stage raises."""
        ...

    def _create_failure_result(
        self,
        run: PipelineRun,
        start_time: float,
        report: InsightReport,
        status: PipelineStatus,
        error: str,
    ) -> PipelineResult:
        """Create a failure PipelineResult."""
        return PipelineResult(
            report=report,
            status=status,
            final_state=run.state,
            run_id=run.run_id,
            stage_results=run.stage_results,
            degraded_stages=run.degraded_stages,
            total_duration_ms=(time.time() - start_time) * 1000,
            error=error,
        )

    async def run(self, metrics: Any) -> PipelineResult:
        """Execute one run over a metrics payload.

        Args:
            metrics: Metrics record, or a string holding one

        Returns:
            PipelineResult carrying the report, status and per-stage detail.
        """
        start_time = time.time()
        run = PipelineRun(
            context=InsightContext.from_payload(metrics),
            transitions=self.transitions,
        )

        if self._in_flight:
            logger.warning("Pipeline busy, rejecting run", pipeline=self.name)
            return self._create_failure_result(
                run, start_time, busy_report(), PipelineStatus.BUSY,
                "An analysis is already in progress",
            )

        self._in_flight = True
        try:
            with run_context(self.name) as run_id:
                run.run_id = run_id
                return await self._guarded(run, start_time)
        finally:
            self._in_flight = False

    async def _guarded(self, run: PipelineRun, start_time: float) -> PipelineResult:
        """Run under the whole-run timeout, mapping every exception to a report."""
        logger.info("Pipeline started")
        try:
            report, status = await asyncio.wait_for(
                self._execute(run), timeout=self.timeout_seconds
            )
        except TimeoutError:
            run.fail()
            logger.error("Pipeline timed out", timeout_seconds=self.timeout_seconds)
            return self._create_failure_result(
                run, start_time,
                service_unavailable_report("Insight generation timed out"),
                PipelineStatus.TIMED_OUT,
                f"Pipeline exceeded {self.timeout_seconds}s",
            )
        except AgentConfigurationError as e:
            run.fail()
            logger.error("Pipeline misconfigured", error=str(e), rejected=e.rejected)
            return self._create_failure_result(
                run, start_time,
                configuration_error_report(rejected=e.rejected),
                PipelineStatus.MISCONFIGURED,
                str(e),
            )
        except Exception as e:
            failed_state = run.state
            run.fail()
            logger.error(
                "Pipeline failed",
                state=failed_state.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            return self._create_failure_result(
                run, start_time, self._failure_report(), PipelineStatus.FAILED, str(e),
            )

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "Pipeline finished",
            status=status.value,
            degraded=run.degraded_stages,
            duration_ms=round(duration_ms, 1),
        )
        return PipelineResult(
            report=report,
            status=status,
            final_state=run.state,
            run_id=run.run_id,
            stage_results=run.stage_results,
            degraded_stages=run.degraded_stages,
            total_duration_ms=duration_ms,
        )

    async def generate(self, metrics: Any) -> InsightReport:
        """Execute one run and return only the report. Never raises."""
        result = await self.run(metrics)
        return result.report

    async def close(self) -> None:
        """Release the completion client."""
        await self._client.close()


# =============================================================================
# Four-stage Pipeline
# =============================================================================

class InsightPipeline(BaseInsightPipeline):
    """Validator -> Trend Analyzer -> Recommender -> Summarizer.

    The summarizer output becomes the report when it passes strict
    validation; otherwise the fallback synthesizer rebuilds it from all
    four stage outputs.
    """

    name = "insights"

    def __init__(
        self,
        client: CompletionClientProtocol,
        agents: Sequence[StageAgent],
        timeout_seconds: float = Timeouts.PIPELINE_DEFAULT,
    ) -> None:
        super().__init__(client, timeout_seconds)
        self._agents = tuple(agents)

    @property
    def agents(self) -> tuple[StageAgent, ...]:
        return self._agents

    def _failure_report(self) -> InsightReport:
        return pipeline_failure_report()

    async def _execute(self, run: PipelineRun) -> tuple[InsightReport, PipelineStatus]:
        for agent in self._agents:
            run.advance(STAGE_STATES[agent.role])
            result = await agent.run(self._client, run.context)
            run.record(result)
        run.advance(PipelineState.DONE)
        return self._assemble(run)

    def _assemble(self, run: PipelineRun) -> tuple[InsightReport, PipelineStatus]:
        context = run.context
        summary = context.record_of(StageRole.SUMMARIZER)

        outcome = validate_report(summary)
        if outcome.value is not None:
            return outcome.value, PipelineStatus.COMPLETED

        logger.warning(
            "Summary failed validation, synthesizing fallback",
            violations=len(outcome.violations),
        )
        report = synthesize_fallback(
            summary=summary,
            validation=context.record_of(StageRole.VALIDATOR),
            trends=context.record_of(StageRole.TREND_ANALYZER),
            recommendations=context.record_of(StageRole.RECOMMENDER),
            degraded_stages=run.degraded_stages,
        )
        return report, PipelineStatus.REPAIRED


__all__ = [
    "MULTI_STAGE_TRANSITIONS",
    "STAGE_STATES",
    "BaseInsightPipeline",
    "InsightPipeline",
    "PipelineResult",
    "PipelineRun",
    "PipelineState",
    "PipelineStatus",
    "Transitions",
]
