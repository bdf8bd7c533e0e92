"""Insights Service Client (transport adapter).

HTTP client for a remote insights service's POST /insights endpoint.

generate() never raises. Every outcome is normalized into an InsightReport:

    200 + report-shaped object  -> the report (coerced; lossless when valid)
    200 + anything else         -> HTTP error report (not an object, no report
                                   fields, or undecodable)
    non-200 + embedded fallback -> the fallback report
    non-200 otherwise           -> HTTP error report with status and error text
    no response (network/timeout) -> connection-failure report

No automatic retries; each call is an independent run.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from lynq_insights.core.config import Settings
from lynq_insights.core.constants import INSIGHTS_PATH, Confidence, Timeouts
from lynq_insights.schemas.error_reports import (
    connection_failure_report,
    http_error_report,
)
from lynq_insights.schemas.insights import InsightReport
from lynq_insights.validation.schema_validator import coerce_report


logger = logging.getLogger(__name__)

# A 200 object with none of these is not a report
REPORT_KEYS = frozenset({"insights", "dataQuality", "confidence"})


def serialize_metrics(metrics: Any) -> str:
    """Strings pass through unchanged; anything else is JSON-encoded."""
    if isinstance(metrics, str):
        return metrics
    return json.dumps(metrics, default=str)


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except (ValueError, RecursionError):
        return None


class InsightsServiceClient:
    """Async client for a remote insights service.

    Usage:
        client = InsightsServiceClient("http://localhost:8090")
        report = await client.generate({"engagementRate": 72, ...})
        await client.close()

    Attributes:
        base_url: Base URL of the insights service
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8090",
        timeout: float = Timeouts.HTTP_INSIGHTS,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the insights service client.

        Args:
            base_url: Base URL of the insights service
            timeout: Request timeout in seconds (covers the whole remote run)
            http_client: Pre-built client (tests inject one with MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = http_client
        self._owns_client = http_client is None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client (lazy initialization)."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
            )
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Release HTTP client resources."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def generate(self, metrics: Any) -> InsightReport:
        """Request an insights report for a metrics payload.

        Args:
            metrics: Metrics record, or a string holding one

        Returns:
            InsightReport; error-shaped with confidence 0 on any failure.
        """
        body = {"metricsData": serialize_metrics(metrics)}
        url = f"{self.base_url}{INSIGHTS_PATH}"

        try:
            response = await self._get_client().post(url, json=body)
        except httpx.TimeoutException:
            logger.warning("Insights request timed out after %ss", self.timeout)
            return connection_failure_report(
                f"Insights request timed out after {self.timeout}s"
            )
        except httpx.RequestError as e:
            logger.warning("Insights service unreachable: %s", e)
            return connection_failure_report(f"Connection failed: {e}")

        return self._normalize(response)

    def _normalize(self, response: httpx.Response) -> InsightReport:
        payload = _json_body(response)

        if response.status_code == httpx.codes.OK:
            if isinstance(payload, Mapping) and not REPORT_KEYS.isdisjoint(payload):
                return coerce_report(payload)
            logger.warning("Insights response body is not an insights report")
            return http_error_report(response.status_code, "Response body is not an insights report")

        logger.warning("Insights service returned HTTP %d", response.status_code)
        error: str | None = None
        if isinstance(payload, Mapping):
            fallback = payload.get("fallback")
            if isinstance(fallback, Mapping):
                return coerce_report(fallback, default_confidence=Confidence.FAILED)
            if "insights" in payload:
                return coerce_report(payload, default_confidence=Confidence.FAILED)
            if isinstance(payload.get("error"), str):
                error = payload["error"]
        return http_error_report(response.status_code, error or response.reason_phrase or None)


def create_insights_service_client(
    settings: Settings,
    http_client: httpx.AsyncClient | None = None,
) -> InsightsServiceClient:
    """Build an InsightsServiceClient from settings."""
    return InsightsServiceClient(
        base_url=settings.insights_service_url,
        timeout=settings.insights_timeout_seconds,
        http_client=http_client,
    )


__all__ = [
    "InsightsServiceClient",
    "create_insights_service_client",
    "serialize_metrics",
]
