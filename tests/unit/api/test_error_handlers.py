"""Tests for API error handlers."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel

from lynq_insights.api.error_handlers import ERROR_TYPES, ErrorResponse, register_error_handlers


class Payload(BaseModel):
    count: int


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    register_error_handlers(app)

    @app.post("/items")
    async def create_item(payload: Payload) -> dict[str, int]:
        return {"count": payload.count}

    @app.get("/boom")
    async def boom() -> None:
        raise RuntimeError("kaboom")

    return TestClient(app, raise_server_exceptions=False)


class TestErrorHandlers:

    def test_unknown_route(self, client: TestClient) -> None:
        response = client.get("/missing")

        assert response.status_code == 404
        body = ErrorResponse.model_validate(response.json())
        assert body.error == "NotFound"
        assert body.path == "/missing"

    def test_validation_error(self, client: TestClient) -> None:
        response = client.post("/items", json={"count": "many"})

        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert "count" in body["detail"]

    def test_unhandled_exception(self, client: TestClient) -> None:
        response = client.get("/boom")

        assert response.status_code == 500
        assert response.json()["code"] == "INTERNAL_ERROR"

    def test_error_types_cover_route_statuses(self) -> None:
        for status in (400, 405, 409, 500, 504):
            assert status in ERROR_TYPES

    def test_no_fallback_off_the_insights_path(self, client: TestClient) -> None:
        response = client.get("/missing")

        assert "fallback" not in response.json()

    def test_insights_path_errors_carry_a_fallback(self, client: TestClient) -> None:
        response = client.get("/insights")

        assert response.status_code == 404
        fallback = response.json()["fallback"]
        assert fallback["dataQuality"] == {"isValid": False, "issues": ["HTTP 404: Not Found"]}
        assert fallback["confidence"] == 0
