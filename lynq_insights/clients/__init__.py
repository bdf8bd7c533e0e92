"""HTTP clients.

Exports:
    - CompletionClient: generation backend (chat completions)
    - InsightsServiceClient: transport adapter for a remote insights service
    - CompletionClientProtocol: duck-typed seam for test doubles
"""

from lynq_insights.clients.completion import CompletionClient, create_completion_client
from lynq_insights.clients.insights_service import (
    InsightsServiceClient,
    create_insights_service_client,
)
from lynq_insights.clients.protocols import CompletionClientProtocol


__all__ = [
    "CompletionClient",
    "CompletionClientProtocol",
    "InsightsServiceClient",
    "create_completion_client",
    "create_insights_service_client",
]
