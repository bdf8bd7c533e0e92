"""Tests for health API routes."""

import time
from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from lynq_insights.api.routes.health import ServiceState, router, service_state
from lynq_insights.core.config import Settings, get_settings


@pytest.fixture
def app() -> Iterator[FastAPI]:
    app = FastAPI()
    app.include_router(router)
    yield app
    app.dependency_overrides.clear()


def _client(app: FastAPI, settings: Settings) -> TestClient:
    app.dependency_overrides[get_settings] = lambda: settings
    return TestClient(app)


class TestHealthEndpoint:

    def test_reports_backend_and_pipeline(self, app: FastAPI, test_settings: Settings) -> None:
        response = _client(app, test_settings).get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ready"
        assert body["service"] == "lynq-insights"
        assert body["backend"]["configured"] is True
        assert body["backend"]["fast_model"] == "fast-model"
        assert body["backend"]["summary_model"] == "summary-model"
        assert body["pipeline"] == {"mode": "multi_stage", "timeout_seconds": 5.0}

    def test_api_key_never_exposed(self, app: FastAPI, test_settings: Settings) -> None:
        response = _client(app, test_settings).get("/health")

        assert "test-key" not in response.text

    def test_missing_key_is_unconfigured(
        self, app: FastAPI, unconfigured_settings: Settings
    ) -> None:
        body = _client(app, unconfigured_settings).get("/health").json()

        assert body["status"] == "unconfigured"
        assert body["backend"]["configured"] is False

    def test_uptime_absent_outside_lifespan(self, app: FastAPI, test_settings: Settings) -> None:
        body = _client(app, test_settings).get("/health").json()

        assert body["uptime_seconds"] is None

    def test_uptime_from_app_state(self, app: FastAPI, test_settings: Settings) -> None:
        app.state.started_at = time.monotonic() - 10

        body = _client(app, test_settings).get("/health").json()

        assert body["uptime_seconds"] >= 10


class TestReadinessEndpoint:

    def test_ready_when_configured(self, app: FastAPI, test_settings: Settings) -> None:
        response = _client(app, test_settings).get("/health/ready")

        assert response.status_code == 200
        assert response.json() == {"status": "ready"}

    def test_not_ready_without_key(self, app: FastAPI, unconfigured_settings: Settings) -> None:
        response = _client(app, unconfigured_settings).get("/health/ready")

        assert response.status_code == 503
        assert response.json() == {"status": "unconfigured"}


class TestLivenessEndpoint:

    def test_alive_without_key(self, app: FastAPI, unconfigured_settings: Settings) -> None:
        response = _client(app, unconfigured_settings).get("/health/live")

        assert response.status_code == 200
        assert response.json() == {"status": "alive"}


def test_service_state(test_settings: Settings, unconfigured_settings: Settings) -> None:
    assert service_state(test_settings) is ServiceState.READY
    assert service_state(unconfigured_settings) is ServiceState.UNCONFIGURED
