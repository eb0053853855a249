"""
Song Queue Service API endpoints.
"""

from .songs import router as songs_router
from .stats import router as stats_router
from .health import router as health_router

__all__ = ["songs_router", "stats_router", "health_router"]
