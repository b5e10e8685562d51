"""
app/api/routers package marker.
"""

from app.api.routers.dashboard_router import router as dashboard_router
from app.api.routers.roster_router import router as roster_router
from app.api.routers.sessions_router import router as sessions_router

__all__ = [
    "dashboard_router",
    "roster_router",
    "sessions_router",
]
