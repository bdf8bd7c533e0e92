"""Completion Client Protocols.

Duck typing protocols for service clients - enables FakeClient substitution in tests.

Pattern: Protocol duck typing
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class CompletionClientProtocol(Protocol):
    """Protocol for the generation backend client.

    Defines the interface stage agents use to request a completion.
    Enables duck typing for test doubles (FakeCompletionClient).

    Methods:
        complete: Request one JSON-mode completion
        close: Release HTTP client resources
    """

    async def complete(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> str:
        """Request a completion.

        Args:
            system_prompt: Stage instructions (persona and output contract)
            user_prompt: Stage input
            model: Backend model identifier
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate

        Returns:
            Raw completion text
        """
        ...

    async def close(self) -> None:
        """Release HTTP client resources."""
        ...


__all__ = [
    "CompletionClientProtocol",
]
