"""
Print the monthly flock health distribution for one user.
"""

from __future__ import annotations

import argparse
import json
import logging
import os

from app.config import get_monthly_health_settings
from app.services.monthly_health_service import MonthlyHealthService
from db.repositories.detection_repository import DetectionRepository
from db.session import read_session


def main() -> int:
    parser = argparse.ArgumentParser(description="Report monthly detection distribution for a user.")
    parser.add_argument("--user-id", dest="user_id", required=True, help="Owner of the detection records.")
    parser.add_argument(
        "--month",
        dest="month",
        default=None,
        help="Long month name, e.g. March. Defaults to the earliest month with data.",
    )
    parser.add_argument(
        "--all-months",
        dest="all_months",
        action="store_true",
        help="Report every available month instead of a single one.",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, os.getenv("LOG_LEVEL", "WARNING").strip().upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    settings = get_monthly_health_settings()
    with read_session() as db:
        service = MonthlyHealthService(DetectionRepository(db).fetch, tz=settings.display_timezone)
        view = service.load(args.user_id)

    months = list(view.months) if args.all_months else [args.month]
    payload = []
    for month in months:
        summary = view.summary(month)
        payload.append(
            {
                "user_id": summary.user_id,
                "month": summary.selected_month,
                "available_months": list(summary.months),
                "has_data": summary.has_data,
                "distribution": [
                    {"label": s.label, "value": s.value, "share": s.share, "color": s.color}
                    for s in summary.slices
                ],
            }
        )
    print(json.dumps(payload if args.all_months else payload[0], indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
