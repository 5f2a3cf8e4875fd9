"""
app/schemas/monthly_health.py

Response schemas for the monthly flock health endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ChartSliceResponse(BaseModel):
    """
    One category of the monthly proportion chart.
    """

    model_config = ConfigDict(from_attributes=True)

    label: str
    value: int = Field(..., ge=0)
    share: int = Field(..., ge=0, le=100, description="Whole-number percent of the month total")
    color: str


class MonthlyHealthResponse(BaseModel):
    """
    Chart payload for one user and one selected month.

    ``distribution`` is empty when the month has no data; otherwise it has
    exactly four entries in display order.
    """

    user_id: str | None = None
    months: list[str] = Field(default_factory=list)
    selected_month: str | None = None
    has_data: bool = False
    distribution: list[ChartSliceResponse] = Field(default_factory=list)


class AvailableMonthsResponse(BaseModel):
    """
    Month selector payload: months with data, in calendar order.
    """

    user_id: str | None = None
    months: list[str] = Field(default_factory=list)
    default_month: str | None = None
