"""Initial schema: drivers and rides.

Revision ID: 001
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── drivers ───────────────────────────────────────────────────────
    op.create_table(
        "drivers",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column(
            "status",
            sa.Enum("available", "busy", "offline", name="driverstatus"),
            nullable=False,
            server_default="offline",
        ),
        sa.Column(
            "is_online", sa.Boolean, nullable=False, server_default=sa.false()
        ),
        sa.Column("current_lat", sa.Float, nullable=True),
        sa.Column("current_lng", sa.Float, nullable=True),
        sa.Column("heading", sa.Float, nullable=True),
        sa.Column("last_location_update", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index("idx_drivers_status", "drivers", ["status"])
    op.create_index("idx_drivers_online", "drivers", ["is_online"])

    # ── rides ─────────────────────────────────────────────────────────
    op.create_table(
        "rides",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column(
            "driver_id", sa.String(36), sa.ForeignKey("drivers.id"), nullable=True
        ),
        sa.Column("pickup_lat", sa.Float, nullable=False),
        sa.Column("pickup_lng", sa.Float, nullable=False),
        sa.Column("pickup_address", sa.String(255), nullable=True),
        sa.Column("dropoff_lat", sa.Float, nullable=False),
        sa.Column("dropoff_lng", sa.Float, nullable=False),
        sa.Column("dropoff_address", sa.String(255), nullable=True),
        sa.Column(
            "payment_method",
            sa.Enum(
                "efectivo", "transferencia", "pago_movil", name="paymentmethod"
            ),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.Enum(
                "pending",
                "accepted",
                "in_progress",
                "completed",
                "cancelled",
                name="ridestatus",
            ),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("estimated_distance_km", sa.Float, nullable=True),
        sa.Column("estimated_duration_min", sa.Integer, nullable=True),
        sa.Column("estimated_fare_bs", sa.Float, nullable=True),
        sa.Column("actual_distance_km", sa.Float, nullable=True),
        sa.Column("actual_duration_min", sa.Float, nullable=True),
        sa.Column("final_amount", sa.Float, nullable=True),
        sa.Column("rating", sa.Float, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("idx_rides_status", "rides", ["status"])
    op.create_index("idx_rides_user", "rides", ["user_id"])
    op.create_index(
        "idx_rides_driver_created", "rides", ["driver_id", "created_at"]
    )


def downgrade() -> None:
    op.drop_table("rides")
    op.drop_table("drivers")
    op.execute("DROP TYPE IF EXISTS ridestatus")
    op.execute("DROP TYPE IF EXISTS paymentmethod")
    op.execute("DROP TYPE IF EXISTS driverstatus")
