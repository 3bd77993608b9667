"""Driver performance statistics over a reporting period."""

from __future__ import annotations

import calendar
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional, Protocol

from .enums import RideStatus, StatsPeriod
from .rounding import round2

ALL_TIME_START = datetime(2020, 1, 1, tzinfo=timezone.utc)


class ClosedRide(Protocol):
    status: RideStatus
    final_amount: Optional[float]
    actual_distance_km: Optional[float]
    rating: Optional[float]


@dataclass(frozen=True)
class DriverStats:
    periodo: str
    total_viajes: int
    viajes_completados: int
    viajes_cancelados: int
    ganancia_total_bs: float
    distancia_total_km: float
    calificacion_promedio: float
    tasa_cancelacion: float

    def to_dict(self) -> dict:
        return asdict(self)


def _one_month_earlier(now: datetime) -> datetime:
    year, month = (now.year, now.month - 1) if now.month > 1 else (now.year - 1, 12)
    day = min(now.day, calendar.monthrange(year, month)[1])
    return now.replace(year=year, month=month, day=day)


def period_start(period: str, now: datetime) -> datetime:
    """First instant covered by *period*; unknown periods mean today."""
    if period == StatsPeriod.WEEK:
        return now - timedelta(days=7)
    if period == StatsPeriod.MONTH:
        return _one_month_earlier(now)
    if period == StatsPeriod.ALL_TIME:
        return ALL_TIME_START
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def summarize_driver_rides(period: str, rides: Iterable[ClosedRide]) -> DriverStats:
    rides = list(rides)
    completed = [r for r in rides if r.status == RideStatus.COMPLETED]
    cancelled = [r for r in rides if r.status == RideStatus.CANCELLED]

    earnings = sum(r.final_amount or 0 for r in completed)
    distance = sum(r.actual_distance_km or 0 for r in completed)
    # unrated completed rides pull the average down
    avg_rating = (
        sum(r.rating or 0 for r in completed) / len(completed) if completed else 0
    )
    cancel_rate = len(cancelled) / len(rides) * 100 if rides else 0

    return DriverStats(
        periodo=period,
        total_viajes=len(rides),
        viajes_completados=len(completed),
        viajes_cancelados=len(cancelled),
        ganancia_total_bs=round2(earnings),
        distancia_total_km=round2(distance),
        calificacion_promedio=round2(avg_rating),
        tasa_cancelacion=round2(cancel_rate),
    )
