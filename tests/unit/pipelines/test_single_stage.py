"""Unit tests for the single-stage legacy pipeline."""

import json
from typing import Any

import pytest

from lynq_insights.core.config import Settings
from lynq_insights.core.constants import LEGACY_CALL_TO_ACTION, PLACEHOLDER_INSIGHT
from lynq_insights.core.exceptions import AgentExecutionError
from lynq_insights.functions.stages import build_single_agent
from lynq_insights.pipelines.orchestrator import PipelineState, PipelineStatus
from lynq_insights.pipelines.single_stage import SingleStagePipeline
from tests.fakes.fake_clients import FakeCompletionClient


def _pipeline(settings: Settings, client: FakeCompletionClient) -> SingleStagePipeline:
    return SingleStagePipeline(client, build_single_agent(settings), timeout_seconds=5.0)


class TestSingleStagePipeline:

    @pytest.mark.asyncio
    async def test_conforming_report(
        self,
        test_settings: Settings,
        stage_outputs: list[dict[str, Any]],
        sample_metrics: dict[str, Any],
    ) -> None:
        client = FakeCompletionClient(responses=[json.dumps(stage_outputs[3])])

        result = await _pipeline(test_settings, client).run(sample_metrics)

        assert result.status is PipelineStatus.COMPLETED
        assert result.final_state is PipelineState.DONE
        assert result.report.to_payload() == stage_outputs[3]
        call = client.completion_calls[0]
        assert call["user_prompt"] == f"Analyze this data: {json.dumps(sample_metrics)}"
        assert len(client.completion_calls) == 1

    @pytest.mark.asyncio
    async def test_partial_report_uses_legacy_defaults(self, test_settings: Settings) -> None:
        partial = {
            "dataQuality": {"isValid": False},
            "trends": [{"metric": "strScore", "direction": "up", "analysis": "Rising."}],
        }
        client = FakeCompletionClient(responses=[json.dumps(partial)])

        result = await _pipeline(test_settings, client).run({"strScore": 4})

        assert result.status is PipelineStatus.REPAIRED
        report = result.report
        assert report.data_quality.is_valid is True
        assert report.insights == [PLACEHOLDER_INSIGHT]
        assert report.call_to_action == LEGACY_CALL_TO_ACTION
        assert report.confidence == 70
        assert [t.metric for t in report.trends] == ["strScore"]

    @pytest.mark.asyncio
    async def test_unparseable_response(self, test_settings: Settings) -> None:
        client = FakeCompletionClient(responses=["no idea"])

        result = await _pipeline(test_settings, client).run({"a": 1})

        assert result.status is PipelineStatus.REPAIRED
        assert result.report.confidence == 70

    @pytest.mark.asyncio
    async def test_agent_failure_uses_legacy_report(self, test_settings: Settings) -> None:
        client = FakeCompletionClient(
            error_on={"complete": AgentExecutionError("empty", step="chat_completion")}
        )

        result = await _pipeline(test_settings, client).run({"a": 1})

        assert result.status is PipelineStatus.FAILED
        assert result.report.data_quality.issues == ["Analysis failed"]
        assert result.report.call_to_action == "Retry the analysis."
        assert result.final_state is PipelineState.FAILED
