"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL.  The production models are portable, so the real
``Base.metadata`` is created on SQLite directly.  The exchange rate source
and the clock are replaced by deterministic stubs.
"""

from datetime import datetime, timezone
from typing import AsyncGenerator, Optional, Union

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from mipana.domain.enums import DriverStatus, PaymentMethod, RideStatus
from mipana.domain.pricing import FareConfig, FareEngine, RateSourceUnavailable
from mipana.infrastructure.database import Base
from mipana.infrastructure.models import DriverModel, RideModel
from mipana.tools.dispatcher import ToolDispatcher

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

# Fixed "now" for everything that reads the wall clock in tests
NOW = datetime(2026, 3, 15, 14, 30, tzinfo=timezone.utc)

# Plaza Venezuela, Caracas
CENTER = (10.5000, -66.8836)


# ── Stubs ─────────────────────────────────────────────────────────────


class StubRateSource:
    """Replays a scripted sequence of rates / exceptions and counts calls."""

    def __init__(self, *outcomes: Union[float, Exception]):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def fetch_rate(self) -> float:
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeClock:
    """Monotonic clock the test moves by hand."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def unavailable(reason: str = "boom") -> RateSourceUnavailable:
    return RateSourceUnavailable(reason)


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Fresh in-memory database per test."""
    engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fare_engine(clock) -> FareEngine:
    return FareEngine(FareConfig(), StubRateSource(36.5), clock=clock)


@pytest.fixture
def dispatcher(session_factory, fare_engine) -> ToolDispatcher:
    return ToolDispatcher(session_factory, fare_engine, now=lambda: NOW)


# ── Seed helpers ──────────────────────────────────────────────────────


async def add_driver(
    session_factory,
    *,
    name: str = "José Rodríguez",
    lat: Optional[float] = CENTER[0],
    lng: Optional[float] = CENTER[1],
    status: DriverStatus = DriverStatus.AVAILABLE,
    is_online: bool = True,
) -> str:
    async with session_factory() as session:
        driver = DriverModel(
            name=name,
            status=status,
            is_online=is_online,
            current_lat=lat,
            current_lng=lng,
            created_at=NOW,
        )
        session.add(driver)
        await session.commit()
        return driver.id


async def add_ride(
    session_factory,
    *,
    driver_id: Optional[str] = None,
    status: RideStatus = RideStatus.PENDING,
    created_at: datetime = NOW,
    final_amount: Optional[float] = None,
    actual_distance_km: Optional[float] = None,
    rating: Optional[float] = None,
) -> str:
    async with session_factory() as session:
        ride = RideModel(
            user_id="user-001",
            driver_id=driver_id,
            pickup_lat=CENTER[0],
            pickup_lng=CENTER[1],
            pickup_address="Plaza Venezuela",
            dropoff_lat=10.4806,
            dropoff_lng=-66.8560,
            dropoff_address="Las Mercedes",
            payment_method=PaymentMethod.CASH,
            status=status,
            final_amount=final_amount,
            actual_distance_km=actual_distance_km,
            rating=rating,
            created_at=created_at,
        )
        session.add(ride)
        await session.commit()
        return ride.id
