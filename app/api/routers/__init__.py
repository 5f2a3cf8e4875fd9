"""
app/api/routers package marker.
"""

from app.api.routers.monthly_health_router import router as monthly_health_router

__all__ = [
    "monthly_health_router",
]
