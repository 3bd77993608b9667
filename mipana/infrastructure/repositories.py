"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import DriverModel, RideModel
from mipana.domain.enums import DriverStatus, PaymentMethod, RideStatus


class DriverRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, driver_id: str) -> Optional[DriverModel]:
        return await self.session.get(DriverModel, driver_id)

    async def get_available_online(self) -> list[DriverModel]:
        result = await self.session.execute(
            select(DriverModel).where(
                DriverModel.status == DriverStatus.AVAILABLE,
                DriverModel.is_online.is_(True),
            )
        )
        return list(result.scalars().all())

    async def update_location(
        self,
        driver_id: str,
        *,
        lat: float,
        lng: float,
        at: datetime,
        heading: float | None = None,
    ) -> Optional[DriverModel]:
        """Store a new position; heading is only overwritten when given."""
        driver = await self.get_by_id(driver_id)
        if driver is None:
            return None
        driver.current_lat = lat
        driver.current_lng = lng
        driver.last_location_update = at
        if heading is not None:
            driver.heading = heading
        await self.session.flush()
        return driver


class RideRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_ride(
        self,
        *,
        user_id: str,
        pickup_lat: float,
        pickup_lng: float,
        pickup_address: str | None,
        dropoff_lat: float,
        dropoff_lng: float,
        dropoff_address: str | None,
        payment_method: PaymentMethod,
        estimated_distance_km: float,
        estimated_duration_min: int,
        estimated_fare_bs: float,
        created_at: datetime,
        status: RideStatus = RideStatus.PENDING,
    ) -> RideModel:
        ride = RideModel(
            user_id=user_id,
            pickup_lat=pickup_lat,
            pickup_lng=pickup_lng,
            pickup_address=pickup_address,
            dropoff_lat=dropoff_lat,
            dropoff_lng=dropoff_lng,
            dropoff_address=dropoff_address,
            payment_method=payment_method,
            status=status,
            estimated_distance_km=estimated_distance_km,
            estimated_duration_min=estimated_duration_min,
            estimated_fare_bs=estimated_fare_bs,
            created_at=created_at,
        )
        self.session.add(ride)
        await self.session.flush()
        return ride

    async def get_by_id(self, ride_id: str) -> Optional[RideModel]:
        return await self.session.get(RideModel, ride_id)

    async def get_driver_rides_since(
        self,
        driver_id: str,
        since: datetime,
        statuses: Iterable[RideStatus],
    ) -> list[RideModel]:
        result = await self.session.execute(
            select(RideModel)
            .where(
                RideModel.driver_id == driver_id,
                RideModel.created_at >= since,
                RideModel.status.in_(list(statuses)),
            )
            .order_by(RideModel.created_at)
        )
        return list(result.scalars().all())

    async def complete_ride(
        self,
        ride_id: str,
        *,
        actual_distance_km: float,
        actual_duration_min: float,
        final_amount: float,
        completed_at: datetime,
        rating: float | None = None,
    ) -> Optional[RideModel]:
        ride = await self.get_by_id(ride_id)
        if ride is None:
            return None
        ride.status = RideStatus.COMPLETED
        ride.actual_distance_km = actual_distance_km
        ride.actual_duration_min = actual_duration_min
        ride.final_amount = final_amount
        ride.completed_at = completed_at
        if rating:
            ride.rating = rating
        await self.session.flush()
        return ride
