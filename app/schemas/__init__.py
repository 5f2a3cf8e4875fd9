"""
app/schemas package marker.
"""

from app.schemas.monthly_health import (
    AvailableMonthsResponse,
    ChartSliceResponse,
    MonthlyHealthResponse,
)

__all__ = [
    "AvailableMonthsResponse",
    "ChartSliceResponse",
    "MonthlyHealthResponse",
]
