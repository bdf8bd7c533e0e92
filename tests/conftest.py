"""Test configuration and shared fixtures.

Pattern: Pytest fixtures, conftest.py
Anti-Pattern Avoided: Fixture reuse without explicit scope
"""

import json
from typing import Any

import pytest

from lynq_insights.core.config import Settings
from lynq_insights.functions.stages import build_stage_agents
from lynq_insights.pipelines.orchestrator import InsightPipeline
from tests.fakes.fake_clients import FakeCompletionClient


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with safe defaults and no .env lookup."""
    return Settings(
        _env_file=None,
        openai_api_key="test-key",
        fast_model="fast-model",
        summary_model="summary-model",
        pipeline_timeout_seconds=5.0,
        log_level="DEBUG",
    )


@pytest.fixture
def unconfigured_settings() -> Settings:
    """Settings without a backend credential."""
    return Settings(_env_file=None, openai_api_key=None)


# ============================================================================
# Payload Fixtures
# ============================================================================

@pytest.fixture
def sample_metrics() -> dict[str, Any]:
    """A well-formed metrics payload for one learning module."""
    return {
        "objectiveScore": 82,
        "strScore": 74,
        "engagementRate": 68,
        "completionRate": 85,
        "moduleId": "mod-101",
    }


VALIDATOR_OUTPUT: dict[str, Any] = {
    "isValid": True,
    "issues": [],
    "summary": "All required metrics are present and within range.",
}

TREND_OUTPUT: dict[str, Any] = {
    "trends": [
        {
            "metric": "engagementRate",
            "direction": "down",
            "percentageChange": -4.5,
            "analysis": "Engagement is just below the 70% benchmark.",
        },
        {
            "metric": "completionRate",
            "direction": "up",
            "analysis": "Completion is above the 80% excellence mark.",
        },
    ],
    "overallHealth": "good",
}

RECOMMENDER_OUTPUT: dict[str, Any] = {
    "recommendations": [
        {
            "priority": "high",
            "area": "engagement",
            "action": "Add short interactive checkpoints to the module.",
            "expectedImpact": "Lift engagement above 70%.",
        },
        {
            "priority": "medium",
            "action": "Review STR questions with the lowest scores.",
            "expectedImpact": "Improve the STR score.",
        },
    ],
}

SUMMARY_OUTPUT: dict[str, Any] = {
    "dataQuality": {"isValid": True},
    "trends": [
        {
            "metric": "engagementRate",
            "direction": "down",
            "analysis": "Engagement is just below the 70% benchmark.",
        },
    ],
    "insights": [
        "Completion is strong at 85%.",
        "Engagement trails the benchmark at 68%.",
    ],
    "callToAction": "Add interactive checkpoints to lift engagement.",
    "confidence": 88,
}


@pytest.fixture
def stage_outputs() -> list[dict[str, Any]]:
    """Conforming outputs for the four stages, in execution order."""
    return [VALIDATOR_OUTPUT, TREND_OUTPUT, RECOMMENDER_OUTPUT, SUMMARY_OUTPUT]


@pytest.fixture
def stage_responses(stage_outputs: list[dict[str, Any]]) -> list[str]:
    """Completion texts for the four stages, in execution order."""
    return [json.dumps(output) for output in stage_outputs]


# ============================================================================
# Client and Pipeline Fixtures
# ============================================================================

@pytest.fixture
def fake_client(stage_responses: list[str]) -> FakeCompletionClient:
    """Fake backend answering every stage with conforming JSON."""
    return FakeCompletionClient(responses=stage_responses)


@pytest.fixture
def pipeline(test_settings: Settings, fake_client: FakeCompletionClient) -> InsightPipeline:
    """Four-stage pipeline over the fake backend."""
    return InsightPipeline(
        fake_client,
        build_stage_agents(test_settings),
        timeout_seconds=test_settings.pipeline_timeout_seconds,
    )
