"""API routes module for the insights service.

This module exports all API routers for registration in main.py.
"""

from lynq_insights.api.routes.health import router as health_router
from lynq_insights.api.routes.insights import router as insights_router


__all__ = [
    "health_router",
    "insights_router",
]
