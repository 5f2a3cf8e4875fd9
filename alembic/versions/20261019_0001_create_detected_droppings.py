"""create detected_droppings table

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "detected_droppings",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "detections_count",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("image_path", sa.String(length=512), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_detected_droppings_user_id",
        "detected_droppings",
        ["user_id"],
        unique=False,
    )
    op.create_index(
        "ix_detected_droppings_user_id_date",
        "detected_droppings",
        ["user_id", "date"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_detected_droppings_user_id_date", table_name="detected_droppings")
    op.drop_index("ix_detected_droppings_user_id", table_name="detected_droppings")
    op.drop_table("detected_droppings")
