"""
app/services package marker.
"""

from app.services.monthly_health_service import (
    MonthlyHealthService,
    MonthlyHealthView,
    MonthlySummary,
    get_monthly_health_service,
)

__all__ = [
    "MonthlyHealthService",
    "MonthlyHealthView",
    "MonthlySummary",
    "get_monthly_health_service",
]
