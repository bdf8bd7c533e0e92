"""LYNQ insights - multi-stage insight generation for learning-module metrics.

Exports:
    - InsightPipeline, create_insight_pipeline: in-process generation
    - InsightsServiceClient: transport adapter for a remote service
    - InsightReport: the fixed-shape result
"""

from lynq_insights.clients.insights_service import InsightsServiceClient
from lynq_insights.pipelines import InsightPipeline, create_insight_pipeline
from lynq_insights.schemas.insights import InsightReport


__version__ = "0.1.0"

__all__ = [
    "InsightPipeline",
    "InsightReport",
    "InsightsServiceClient",
    "__version__",
    "create_insight_pipeline",
]
