"""Unit tests for the pipeline factory."""

from lynq_insights.clients.completion import CompletionClient
from lynq_insights.core.config import Settings
from lynq_insights.pipelines.factory import create_insight_pipeline
from lynq_insights.pipelines.orchestrator import InsightPipeline
from lynq_insights.pipelines.single_stage import SingleStagePipeline
from tests.fakes.fake_clients import FakeCompletionClient


class TestCreateInsightPipeline:

    def test_multi_stage_by_default(self, test_settings: Settings) -> None:
        client = FakeCompletionClient()

        pipeline = create_insight_pipeline(test_settings, client)

        assert isinstance(pipeline, InsightPipeline)
        assert pipeline.client is client
        assert len(pipeline.agents) == 4
        assert pipeline.timeout_seconds == test_settings.pipeline_timeout_seconds

    def test_single_stage_mode(self, test_settings: Settings) -> None:
        settings = test_settings.model_copy(update={"pipeline_mode": "single_stage"})

        pipeline = create_insight_pipeline(settings, FakeCompletionClient())

        assert isinstance(pipeline, SingleStagePipeline)
        assert pipeline.agent.name == "LYNQ Insights Agent"

    def test_builds_completion_client_from_settings(self, test_settings: Settings) -> None:
        pipeline = create_insight_pipeline(test_settings)

        assert isinstance(pipeline.client, CompletionClient)
        assert pipeline.client.configured is True

    def test_unconfigured_settings_still_build(self, unconfigured_settings: Settings) -> None:
        pipeline = create_insight_pipeline(unconfigured_settings)

        assert isinstance(pipeline.client, CompletionClient)
        assert pipeline.client.configured is False
