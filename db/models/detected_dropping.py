"""
db/models/detected_dropping.py

One stored detection run: a farm owner's photographed droppings sample
and the per-class counts the detector produced for it.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Index, String, func, text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class DetectedDropping(Base):
    __tablename__ = "detected_droppings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        comment="Owning farm-owner account identifier",
    )
    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="When the sample was observed",
    )
    detections_count: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
        server_default=text("'{}'::jsonb"),
        comment="Detector class name -> count, e.g. {'Healthy': 3, 'NCD-like': 1}",
    )
    image_path: Mapped[str | None] = mapped_column(String(512), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        Index("ix_detected_droppings_user_id", "user_id"),
        Index("ix_detected_droppings_user_id_date", "user_id", "date"),
    )

    def __repr__(self) -> str:
        return f"<DetectedDropping id={self.id} user_id={self.user_id!r} date={self.date!r}>"
