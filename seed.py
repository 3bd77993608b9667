"""
Seed script -- populates the database with sample data for local testing.

Run after migrations:
    python seed.py

Creates:
  - 8 sample drivers around Caracas (mix of available, busy and offline)
  - 6 sample rides (mix of COMPLETED, CANCELLED and PENDING)
"""

import asyncio
from datetime import datetime, timedelta, timezone

from sqlalchemy import text

from mipana.domain.distance import haversine_km, eta_minutes
from mipana.domain.enums import DriverStatus, PaymentMethod, RideStatus
from mipana.infrastructure.database import async_session_factory, engine
from mipana.infrastructure.models import DriverModel, RideModel

# Plaza Venezuela, Caracas (approx)
CENTER_LAT, CENTER_LNG = 10.5000, -66.8836


DRIVERS = [
    {"name": "José Rodríguez", "phone": "+584121110001", "status": DriverStatus.AVAILABLE, "online": True, "lat": 10.5010, "lng": -66.8820},
    {"name": "María González", "phone": "+584141110002", "status": DriverStatus.AVAILABLE, "online": True, "lat": 10.4965, "lng": -66.8870},
    {"name": "Luis Hernández", "phone": "+584241110003", "status": DriverStatus.AVAILABLE, "online": True, "lat": 10.4920, "lng": -66.8540},
    {"name": "Carmen Pérez", "phone": "+584161110004", "status": DriverStatus.AVAILABLE, "online": True, "lat": 10.5060, "lng": -66.9140},
    {"name": "Pedro Martínez", "phone": "+584121110005", "status": DriverStatus.BUSY, "online": True, "lat": 10.4980, "lng": -66.8800},
    {"name": "Ana Ramírez", "phone": "+584141110006", "status": DriverStatus.AVAILABLE, "online": False, "lat": 10.5030, "lng": -66.8900},
    {"name": "Carlos Torres", "phone": "+584241110007", "status": DriverStatus.OFFLINE, "online": False, "lat": None, "lng": None},
    # Outside the default 5 km search radius (Petare)
    {"name": "Daniela Rojas", "phone": "+584161110008", "status": DriverStatus.AVAILABLE, "online": True, "lat": 10.4770, "lng": -66.8080},
]


async def seed():
    async with async_session_factory() as session:
        # Check if already seeded
        result = await session.execute(text("SELECT count(*) FROM drivers"))
        if result.scalar() > 0:
            print("Database already seeded. Skipping.")
            return

        now = datetime.now(timezone.utc)

        # ── Drivers ───────────────────────────────────────────────────
        driver_models = []
        for d in DRIVERS:
            m = DriverModel(
                name=d["name"],
                phone=d["phone"],
                status=d["status"],
                is_online=d["online"],
                current_lat=d["lat"],
                current_lng=d["lng"],
                last_location_update=now if d["lat"] is not None else None,
            )
            session.add(m)
            driver_models.append(m)
        await session.flush()
        print(f"  Created {len(driver_models)} drivers")

        # ── Rides ─────────────────────────────────────────────────────
        rides_data = [
            {
                "user_id": "user-001", "driver": driver_models[0],
                "pickup": (10.5000, -66.8836, "Plaza Venezuela"),
                "dropoff": (10.4806, -66.8560, "Las Mercedes"),
                "status": RideStatus.COMPLETED, "payment": PaymentMethod.MOBILE_PAYMENT,
                "ago": timedelta(hours=2), "final": 18.40, "rating": 5.0,
            },
            {
                "user_id": "user-002", "driver": driver_models[0],
                "pickup": (10.4970, -66.8530, "Chacao"),
                "dropoff": (10.5060, -66.9140, "Plaza Bolívar"),
                "status": RideStatus.COMPLETED, "payment": PaymentMethod.CASH,
                "ago": timedelta(days=3), "final": 26.75, "rating": 4.0,
            },
            {
                "user_id": "user-003", "driver": driver_models[0],
                "pickup": (10.4880, -66.8790, "Los Chaguaramos"),
                "dropoff": (10.4920, -66.8540, "Altamira"),
                "status": RideStatus.CANCELLED, "payment": PaymentMethod.BANK_TRANSFER,
                "ago": timedelta(days=1), "final": None, "rating": None,
            },
            {
                "user_id": "user-004", "driver": driver_models[1],
                "pickup": (10.5060, -66.9140, "Plaza Bolívar"),
                "dropoff": (10.5000, -66.8836, "Plaza Venezuela"),
                "status": RideStatus.COMPLETED, "payment": PaymentMethod.CASH,
                "ago": timedelta(days=20), "final": 15.10, "rating": None,
            },
            {
                "user_id": "user-005", "driver": driver_models[4],
                "pickup": (10.4980, -66.8800, "Sabana Grande"),
                "dropoff": (10.4806, -66.8560, "Las Mercedes"),
                "status": RideStatus.IN_PROGRESS, "payment": PaymentMethod.MOBILE_PAYMENT,
                "ago": timedelta(minutes=10), "final": None, "rating": None,
            },
            {
                "user_id": "user-006", "driver": None,
                "pickup": (10.4920, -66.8540, "Altamira"),
                "dropoff": (10.4770, -66.8080, "Petare"),
                "status": RideStatus.PENDING, "payment": PaymentMethod.CASH,
                "ago": timedelta(minutes=1), "final": None, "rating": None,
            },
        ]

        for r in rides_data:
            distance = haversine_km(r["pickup"][0], r["pickup"][1], r["dropoff"][0], r["dropoff"][1])
            completed = r["status"] == RideStatus.COMPLETED
            ride = RideModel(
                user_id=r["user_id"],
                driver_id=r["driver"].id if r["driver"] is not None else None,
                pickup_lat=r["pickup"][0],
                pickup_lng=r["pickup"][1],
                pickup_address=r["pickup"][2],
                dropoff_lat=r["dropoff"][0],
                dropoff_lng=r["dropoff"][1],
                dropoff_address=r["dropoff"][2],
                payment_method=r["payment"],
                status=r["status"],
                estimated_distance_km=distance,
                estimated_duration_min=eta_minutes(distance),
                actual_distance_km=distance if completed else None,
                actual_duration_min=eta_minutes(distance) if completed else None,
                final_amount=r["final"],
                rating=r["rating"],
                created_at=now - r["ago"],
                completed_at=now - r["ago"] + timedelta(minutes=eta_minutes(distance)) if completed else None,
            )
            session.add(ride)
        await session.flush()
        print(f"  Created {len(rides_data)} rides")

        await session.commit()
        print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
