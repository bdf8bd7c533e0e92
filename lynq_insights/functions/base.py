"""Stage Agent Base Class.

Defines the single stage-agent abstraction used for every pipeline role.
Stage agents are stateless: they read the accumulated context, make one
completion request and hand back a StageResult. They never call each other.

Pattern: one class parameterized by data (role, instructions, input builder,
model) with Protocol duck typing, instead of one subclass per role.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from lynq_insights.core.logging import get_logger
from lynq_insights.schemas.stages import STAGE_SCHEMAS, StageRole
from lynq_insights.validation.parsing import (
    Parsed,
    StageOutput,
    Unparsed,
    parse_stage_output,
)
from lynq_insights.validation.schema_validator import ShapeViolation, validate_stage


if TYPE_CHECKING:
    from lynq_insights.clients.protocols import CompletionClientProtocol
    from lynq_insights.functions.context import InsightContext


logger = get_logger(__name__)

InputBuilder = Callable[["InsightContext"], str]


# ============================================================================
# Stage Result
# ============================================================================

class StageStatus(str, Enum):
    """Outcome of one stage invocation."""

    COMPLETED = "completed"
    DEGRADED = "degraded"


class StageResult(BaseModel):
    """Result of executing a single stage."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    role: StageRole
    stage_name: str
    status: StageStatus
    output: Any = Field(..., description="Parsed or Unparsed stage output")
    violations: tuple[ShapeViolation, ...] = ()
    duration_ms: float = 0.0

    @property
    def degraded(self) -> bool:
        return self.status is StageStatus.DEGRADED


# ============================================================================
# Protocol for Type Checking
# ============================================================================

@runtime_checkable
class StageAgentProtocol(Protocol):
    """Protocol for stage agent type hints."""

    @property
    def role(self) -> StageRole:
        """Return the stage role."""
        ...

    @property
    def name(self) -> str:
        """Return the display name."""
        ...

    async def run(
        self,
        client: CompletionClientProtocol,
        context: InsightContext,
    ) -> StageResult:
        """Execute the stage."""
        ...


# ============================================================================
# Stage Agent
# ============================================================================

class StageAgent:
    """A named generation role with fixed instructions and an output contract.

    Failure modes:
        - the completion client raises: the exception propagates unchanged
          and the orchestrator treats it as fatal
        - the response is malformed: the stage is DEGRADED and its partial
          output is still returned for forwarding

    Example:
        ```python
        agent = StageAgent(
            role=StageRole.VALIDATOR,
            name="Data Validator",
            instructions=VALIDATOR_INSTRUCTIONS,
            build_input=lambda ctx: VALIDATOR_PROMPT.format(payload=ctx.metrics_text),
            model="gpt-4o-mini",
        )
        result = await agent.run(client, context)
        ```
    """

    def __init__(
        self,
        *,
        role: StageRole,
        name: str,
        instructions: str,
        build_input: InputBuilder,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> None:
        self._role = role
        self._name = name
        self.instructions = instructions
        self.build_input = build_input
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    @property
    def role(self) -> StageRole:
        return self._role

    @property
    def name(self) -> str:
        return self._name

    @property
    def output_schema(self) -> type[BaseModel]:
        """Schema the stage output is checked against."""
        return STAGE_SCHEMAS[self._role]

    def check(self, output: StageOutput) -> tuple[ShapeViolation, ...]:
        """Strictly validate a stage output against the role schema."""
        return validate_stage(self._role, _candidate(output)).violations

    async def run(
        self,
        client: CompletionClientProtocol,
        context: InsightContext,
    ) -> StageResult:
        """Execute the stage once.

        Args:
            client: Completion backend client
            context: Accumulated run context (read only here)

        Returns:
            StageResult with the parsed output, any violations and status.

        Raises:
            AgentError: Propagated from the completion client.
        """
        start_time = time.time()

        text = await client.complete(
            system_prompt=self.instructions,
            user_prompt=self.build_input(context),
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        output = parse_stage_output(text)
        violations = self.check(output)
        status = StageStatus.DEGRADED if violations else StageStatus.COMPLETED
        duration_ms = (time.time() - start_time) * 1000

        if violations:
            logger.warning(
                "Stage output failed validation",
                stage=self._role.value,
                violations=[f"{v.path or '<root>'}: {v.kind.value}" for v in violations],
            )
        logger.info(
            "Stage finished",
            stage=self._role.value,
            status=status.value,
            duration_ms=round(duration_ms, 1),
        )

        return StageResult(
            role=self._role,
            stage_name=self._name,
            status=status,
            output=output,
            violations=violations,
            duration_ms=duration_ms,
        )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"{self.__class__.__name__}(role={self._role.value!r}, model={self.model!r})"


def _candidate(output: StageOutput) -> Any:
    # Unparsed text is checked as-is so it reports a wrong_type violation
    match output:
        case Parsed(record=record):
            return record
        case Unparsed(raw_text=raw_text):
            return raw_text
    return None


__all__ = [
    "InputBuilder",
    "StageAgent",
    "StageAgentProtocol",
    "StageResult",
    "StageStatus",
]
