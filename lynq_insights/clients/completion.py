"""Completion Backend Client.

HTTP client for an OpenAI-compatible chat completions API.

Every request asks for JSON-mode output. Transport failures are mapped onto
the agent error taxonomy so the pipeline can tell a configuration problem
from an unreachable backend:

    missing credential         -> AgentConfigurationError
    401 / 403                  -> AgentConfigurationError (rejected=True)
    other HTTP error status    -> GatewayClientError
    httpx.TimeoutException     -> AgentTimeoutError
    other httpx.RequestError   -> AgentConnectionError
    no choices / empty content -> AgentExecutionError
"""

from __future__ import annotations

import logging

import httpx
from pydantic import BaseModel, Field, SecretStr, ValidationError

from lynq_insights.core.config import Settings
from lynq_insights.core.exceptions import (
    AgentConfigurationError,
    AgentConnectionError,
    AgentExecutionError,
    AgentTimeoutError,
    GatewayClientError,
)


logger = logging.getLogger(__name__)

SERVICE_NAME = "completion-backend"
COMPLETIONS_PATH = "/chat/completions"

_REJECTED_STATUSES = frozenset({401, 403})


# =============================================================================
# Request/Response Models
# =============================================================================

class ChatMessage(BaseModel):
    """Chat message for the completions API."""

    role: str = Field(..., description="Message role: system, user, assistant")
    content: str | None = Field(default=None, description="Message content")


class ChatCompletionRequest(BaseModel):
    """OpenAI-compatible chat completion request."""

    model: str = Field(..., description="Model ID")
    messages: list[ChatMessage] = Field(..., description="Conversation messages")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1000, gt=0)
    response_format: dict[str, str] = Field(
        default_factory=lambda: {"type": "json_object"},
    )


class ChatCompletionChoice(BaseModel):
    """Choice in chat completion response."""

    index: int = 0
    message: ChatMessage
    finish_reason: str | None = None


class Usage(BaseModel):
    """Token usage statistics."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatCompletionResponse(BaseModel):
    """OpenAI-compatible chat completion response."""

    model: str | None = None
    choices: list[ChatCompletionChoice] = Field(default_factory=list)
    usage: Usage | None = None


# =============================================================================
# Completion Client
# =============================================================================

class CompletionClient:
    """Async client for the generation backend.

    Usage:
        client = CompletionClient(api_key=settings.openai_api_key)
        text = await client.complete(
            system_prompt="You are a Data Quality Analyst...",
            user_prompt="Validate this metrics data: {...}",
            model="gpt-4o-mini",
        )
        await client.close()

    Attributes:
        base_url: Base URL of the completions API
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        api_key: SecretStr | str | None,
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the completion client.

        Args:
            api_key: Backend credential. May be absent; requests then fail
                with AgentConfigurationError without touching the network.
            base_url: Base URL of the completions API
            timeout: Request timeout in seconds
            http_client: Pre-built client (tests inject one with MockTransport)
        """
        if isinstance(api_key, SecretStr):
            api_key = api_key.get_secret_value()
        self._api_key = (api_key or "").strip()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = http_client
        self._owns_client = http_client is None

    @property
    def configured(self) -> bool:
        """True when a credential is present."""
        return bool(self._api_key)

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

    async def complete(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> str:
        """Request one JSON-mode chat completion.

        Args:
            system_prompt: Stage instructions
            user_prompt: Stage input
            model: Backend model identifier
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate

        Returns:
            Completion text of the first choice

        Raises:
            AgentConfigurationError: Credential missing or rejected
            AgentTimeoutError: Request timed out
            AgentConnectionError: Backend unreachable
            GatewayClientError: Backend answered with an error status
            AgentExecutionError: Response carried no usable content
        """
        if not self.configured:
            raise AgentConfigurationError(
                "Completion backend API key is not configured",
                setting="openai_api_key",
            )

        request = ChatCompletionRequest(
            model=model,
            messages=[
                ChatMessage(role="system", content=system_prompt),
                ChatMessage(role="user", content=user_prompt),
            ],
            temperature=temperature,
            max_tokens=max_tokens,
        )

        logger.debug("Calling completion backend: model=%s", model)

        client = self._get_client()
        try:
            response = await client.post(
                f"{self.base_url}{COMPLETIONS_PATH}",
                json=request.model_dump(exclude_none=True),
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
        except httpx.TimeoutException as e:
            raise AgentTimeoutError(
                f"Completion request timed out after {self.timeout}s",
                operation="chat_completion",
                timeout_seconds=self.timeout,
            ) from e
        except httpx.RequestError as e:
            raise AgentConnectionError(
                f"Completion backend unreachable: {e}",
                service=SERVICE_NAME,
                url=self.base_url,
            ) from e

        self._raise_for_status(response)
        return self._extract_content(response)

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.status_code in _REJECTED_STATUSES:
            raise AgentConfigurationError(
                "Completion backend rejected the API key",
                setting="openai_api_key",
                rejected=True,
            )
        if response.is_error:
            raise GatewayClientError(
                f"Completion backend returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

    def _extract_content(self, response: httpx.Response) -> str:
        try:
            completion = ChatCompletionResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise AgentExecutionError(
                "Completion backend returned an unreadable response",
                step="chat_completion",
                cause=e,
            ) from e

        if not completion.choices:
            raise AgentExecutionError(
                "No completion choices returned",
                step="chat_completion",
            )

        content = completion.choices[0].message.content or ""
        if not content:
            logger.warning("Completion choice carried no content: model=%s", completion.model)

        logger.debug(
            "Completion done: tokens=%s, model=%s",
            completion.usage.total_tokens if completion.usage else "unknown",
            completion.model,
        )
        return content


def create_completion_client(
    settings: Settings,
    http_client: httpx.AsyncClient | None = None,
) -> CompletionClient:
    """Build a CompletionClient from settings."""
    return CompletionClient(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        timeout=settings.llm_timeout_seconds,
        http_client=http_client,
    )


__all__ = [
    "ChatCompletionRequest",
    "ChatCompletionResponse",
    "ChatMessage",
    "CompletionClient",
    "create_completion_client",
]
