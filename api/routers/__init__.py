"""
Router package for the workout generation service.

- health: Health check endpoints
- generation: AI-powered workout generation
"""

from api.routers.health import router as health_router
from api.routers.generation import router as generation_router

__all__ = [
    "health_router",
    "generation_router",
]
