"""Stage agents - one parameterized StageAgent per pipeline role.

Exports:
    - StageAgent, StageAgentProtocol: the stage abstraction
    - StageResult, StageStatus: per-stage outcome
    - InsightContext: accumulated context threaded between stages
    - build_stage_agents, build_single_agent: configured instances
"""

from lynq_insights.functions.base import (
    StageAgent,
    StageAgentProtocol,
    StageResult,
    StageStatus,
)
from lynq_insights.functions.context import InsightContext
from lynq_insights.functions.stages import build_single_agent, build_stage_agents


__all__ = [
    "InsightContext",
    "StageAgent",
    "StageAgentProtocol",
    "StageResult",
    "StageStatus",
    "build_single_agent",
    "build_stage_agents",
]
