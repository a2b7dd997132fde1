"""API route modules."""

from src.api.routes.health import router as health_router
from src.api.routes.insights import router as insights_router

__all__ = [
    "health_router",
    "insights_router",
]
