"""
Nearby-driver search
====================

A bounded linear scan: every candidate driver's straight-line distance to the
search origin is computed, drivers outside the radius are dropped and the
rest are ordered nearest first.  Good enough for the few hundred online
drivers a single city has at any moment; no spatial index is involved.

Complexity: O(n log n) for n candidate drivers.
"""

from __future__ import annotations

from typing import Iterable, Protocol, TypeVar

from .distance import haversine_km
from .entities import Location


class Positioned(Protocol):
    current_lat: float | None
    current_lng: float | None


D = TypeVar("D", bound=Positioned)


def drivers_within_radius(
    origin: Location, drivers: Iterable[D], radius_km: float
) -> list[tuple[D, float]]:
    """Return ``(driver, distance_km)`` pairs within *radius_km*, nearest first.

    Drivers that never reported a position are skipped.
    """
    nearby: list[tuple[D, float]] = []
    for driver in drivers:
        if driver.current_lat is None or driver.current_lng is None:
            continue
        distance = haversine_km(
            origin.latitude, origin.longitude, driver.current_lat, driver.current_lng
        )
        if distance <= radius_km:
            nearby.append((driver, distance))

    nearby.sort(key=lambda pair: pair[1])
    return nearby
