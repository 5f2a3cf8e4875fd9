"""
app/api/routers/monthly_health_router.py

Monthly flock health chart endpoints.

Both read endpoints load one view per request (served from the service's
snapshot cache when warm) and never fail on store errors: a failed fetch or
a missing user produces an empty payload with HTTP 200, which the dashboard
renders as "no data".
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_request_user_id
from app.schemas.monthly_health import (
    AvailableMonthsResponse,
    ChartSliceResponse,
    MonthlyHealthResponse,
)
from app.services.monthly_health_service import (
    MonthlyHealthService,
    get_monthly_health_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/monthly-health", tags=["monthly-health"])


@router.get("", response_model=MonthlyHealthResponse)
def get_monthly_health(
    month: str | None = Query(
        default=None,
        description="Long English month name, e.g. 'March'. Defaults to the earliest month with data.",
    ),
    user_id: str | None = Depends(get_request_user_id),
    service: MonthlyHealthService = Depends(get_monthly_health_service),
) -> MonthlyHealthResponse:
    """
    Return the category distribution of one month for the calling user.
    """

    summary = service.load(user_id).summary(month)
    logger.debug(
        "monthly health user=%r month=%r has_data=%s",
        summary.user_id, summary.selected_month, summary.has_data,
    )
    return MonthlyHealthResponse(
        user_id=summary.user_id,
        months=list(summary.months),
        selected_month=summary.selected_month,
        has_data=summary.has_data,
        distribution=[ChartSliceResponse.model_validate(item) for item in summary.slices],
    )


@router.get("/months", response_model=AvailableMonthsResponse)
def get_available_months(
    user_id: str | None = Depends(get_request_user_id),
    service: MonthlyHealthService = Depends(get_monthly_health_service),
) -> AvailableMonthsResponse:
    """
    Return the months that have at least one detection, in calendar order.
    """

    view = service.load(user_id)
    return AvailableMonthsResponse(
        user_id=view.user_id,
        months=list(view.months),
        default_month=view.default_month,
    )


@router.post("/refresh", status_code=status.HTTP_204_NO_CONTENT)
def refresh_monthly_health(
    user_id: str | None = Depends(get_request_user_id),
    service: MonthlyHealthService = Depends(get_monthly_health_service),
) -> None:
    """
    Drop the calling user's cached snapshot so the next read re-fetches.
    """

    if user_id is not None:
        service.invalidate(user_id)
