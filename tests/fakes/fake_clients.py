"""Fake clients for unit testing.

Implements CompletionClientProtocol for duck typing without any network.

Pattern: FakeClient per protocol
Anti-Pattern Avoided: MagicMock for async completion calls
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any


class FakeCompletionClient:
    """Fake completion backend for unit testing.

    Returns scripted responses in call order and supports error injection,
    either per method (``error_on``) or per call index (``fail_on_call``).

    Attributes:
        call_history: List of recorded method calls for verification
        closed: True once close() was awaited

    Example:
        >>> client = FakeCompletionClient(responses=['{"isValid": true}'])
        >>> text = await client.complete(
        ...     system_prompt="...", user_prompt="...", model="gpt-4o-mini"
        ... )
        >>> assert text == '{"isValid": true}'
    """

    def __init__(
        self,
        responses: Sequence[str] | None = None,
        default_response: str = "{}",
        error_on: dict[str, Exception] | None = None,
        fail_on_call: dict[int, Exception] | None = None,
        delay_seconds: float = 0.0,
    ) -> None:
        """Initialize fake client with scripted responses.

        Args:
            responses: Completion texts returned in order
            default_response: Returned once the script is exhausted
            error_on: Dict mapping method names to exceptions to raise
            fail_on_call: Dict mapping zero-based complete() call index to
                an exception to raise on that call
            delay_seconds: Sleep before answering each completion
        """
        self._responses = list(responses or [])
        self._default = default_response
        self._error_on = error_on or {}
        self._fail_on_call = fail_on_call or {}
        self._delay = delay_seconds
        self.call_history: list[dict[str, Any]] = []
        self.closed = False

    def _check_error(self, method: str) -> None:
        """Check if error should be raised for method."""
        if method in self._error_on:
            raise self._error_on[method]

    def _record_call(self, method: str, kwargs: dict[str, Any]) -> None:
        """Record method call for verification."""
        self.call_history.append({"method": method, **kwargs})

    @property
    def completion_calls(self) -> list[dict[str, Any]]:
        return [call for call in self.call_history if call["method"] == "complete"]

    async def complete(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> str:
        """Return the next scripted completion (fake implementation)."""
        index = len(self.completion_calls)
        self._record_call(
            "complete",
            {
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "model": model,
                "temperature": temperature,
                "max_tokens": max_tokens,
            },
        )
        await asyncio.sleep(self._delay)
        self._check_error("complete")
        if index in self._fail_on_call:
            raise self._fail_on_call[index]

        if index < len(self._responses):
            return self._responses[index]
        return self._default

    async def close(self) -> None:
        """Close client (records the call)."""
        self._check_error("close")
        self._record_call("close", {})
        self.closed = True
        await asyncio.sleep(0)

    def clear_history(self) -> None:
        """Clear recorded call history."""
        self.call_history.clear()


__all__ = [
    "FakeCompletionClient",
]
