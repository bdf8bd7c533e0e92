"""Accumulated context threaded through the stage sequence.

One InsightContext lives for exactly one pipeline run. It holds the original
metrics payload and every stage output recorded so far; stage input builders
read from it and nothing outside the run can see it.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from lynq_insights.schemas.stages import StageRole
from lynq_insights.validation.parsing import StageOutput, as_record


# Keys under which prior outputs appear in serialized stage inputs
CONTEXT_KEYS: dict[StageRole, str] = {
    StageRole.VALIDATOR: "validation",
    StageRole.TREND_ANALYZER: "trends",
    StageRole.RECOMMENDER: "recommendations",
    StageRole.SUMMARIZER: "summary",
}


@dataclass
class InsightContext:
    """State passed between pipeline stages."""

    metrics: Any
    metrics_text: str
    outputs: dict[StageRole, StageOutput] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Any) -> InsightContext:
        """Build a context from a metrics payload.

        A string payload is decoded when it is valid JSON and kept verbatim
        otherwise. The payload itself is never mutated.
        """
        if isinstance(payload, str):
            try:
                metrics = json.loads(payload)
            except ValueError:
                metrics = payload
            return cls(metrics=metrics, metrics_text=payload)
        return cls(metrics=payload, metrics_text=json.dumps(payload, default=str))

    def record(self, role: StageRole, output: StageOutput) -> None:
        """Record the output of a finished stage."""
        self.outputs[role] = output

    def record_of(self, role: StageRole) -> dict[str, Any]:
        """Return a stage's output as a forwardable record ({} when absent)."""
        output = self.outputs.get(role)
        return as_record(output) if output is not None else {}

    def serialize(self, *roles: StageRole) -> str:
        """Serialize the metrics plus the named prior outputs as JSON."""
        combined: dict[str, Any] = {"metrics": self.metrics}
        for role in roles:
            combined[CONTEXT_KEYS[role]] = self.record_of(role)
        return json.dumps(combined, default=str)


__all__ = [
    "CONTEXT_KEYS",
    "InsightContext",
]
