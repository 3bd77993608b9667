"""
SQLAlchemy ORM models  (maps to PostgreSQL).

Tables
------
* ``drivers``  -- drivers with availability flags and last known position
* ``rides``    -- ride requests, estimates and final figures

Indexes
-------
* **B-Tree** on ``drivers.status`` / ``drivers.is_online`` for the nearby
  driver search, and on ``rides.driver_id`` + ``rides.created_at`` for the
  per-driver statistics window.
"""

import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    func,
)

from .database import Base
from mipana.domain.enums import DriverStatus, PaymentMethod, RideStatus


def _new_id() -> str:
    return str(uuid.uuid4())


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class DriverModel(Base):
    __tablename__ = "drivers"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(120), nullable=False)
    phone = Column(String(32), nullable=True)
    status = Column(
        Enum(DriverStatus, name="driverstatus", values_callable=_enum_values),
        default=DriverStatus.OFFLINE,
        nullable=False,
    )
    is_online = Column(Boolean, default=False, nullable=False)

    current_lat = Column(Float, nullable=True)
    current_lng = Column(Float, nullable=True)
    heading = Column(Float, nullable=True)
    last_location_update = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_drivers_status", "status"),
        Index("idx_drivers_online", "is_online"),
    )


class RideModel(Base):
    __tablename__ = "rides"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(64), nullable=False)
    driver_id = Column(String(36), ForeignKey("drivers.id"), nullable=True)

    pickup_lat = Column(Float, nullable=False)
    pickup_lng = Column(Float, nullable=False)
    pickup_address = Column(String(255), nullable=True)
    dropoff_lat = Column(Float, nullable=False)
    dropoff_lng = Column(Float, nullable=False)
    dropoff_address = Column(String(255), nullable=True)

    payment_method = Column(
        Enum(PaymentMethod, name="paymentmethod", values_callable=_enum_values),
        nullable=False,
    )
    status = Column(
        Enum(RideStatus, name="ridestatus", values_callable=_enum_values),
        default=RideStatus.PENDING,
        nullable=False,
    )

    # Estimates at request time
    estimated_distance_km = Column(Float, nullable=True)
    estimated_duration_min = Column(Integer, nullable=True)
    estimated_fare_bs = Column(Float, nullable=True)

    # Figures recorded on completion
    actual_distance_km = Column(Float, nullable=True)
    actual_duration_min = Column(Float, nullable=True)
    final_amount = Column(Float, nullable=True)
    rating = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    completed_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_rides_status", "status"),
        Index("idx_rides_user", "user_id"),
        Index("idx_rides_driver_created", "driver_id", "created_at"),
    )
