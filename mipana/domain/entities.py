"""Domain value objects shared by the geo, pricing and tool layers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class TripEstimate:
    """Straight-line distance and naive travel time between two points."""

    distance_km: float
    duration_min: int
