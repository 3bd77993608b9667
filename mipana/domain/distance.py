"""
Distance and travel-time estimation.

Assumption
----------
Distances are great-circle (Haversine) distances and travel time assumes a
constant 20 km/h city average.  There is no routing engine behind either
number; both are cheap, deterministic estimates used for pricing and for
ranking nearby drivers.

Inputs are not validated: out-of-range degrees are used as given and NaN
propagates to the result.

Complexity: O(1) per call.
"""

import math

from .entities import Location, TripEstimate
from .rounding import round2

EARTH_RADIUS_KM = 6_371.0
AVERAGE_CITY_SPEED_KMH = 20.0


def haversine_km(
    lat1: float, lng1: float, lat2: float, lng2: float
) -> float:
    """Return the great-circle distance in **km**, rounded to 2 decimals."""
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(dlng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return round2(EARTH_RADIUS_KM * c)


def distance_between(a: Location, b: Location) -> float:
    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)


def eta_minutes(distance_km: float) -> int:
    """Minutes to cover *distance_km*; partial minutes round up."""
    return math.ceil(distance_km / AVERAGE_CITY_SPEED_KMH * 60)


def estimate_trip(origin: Location, destination: Location) -> TripEstimate:
    distance = distance_between(origin, destination)
    return TripEstimate(distance_km=distance, duration_min=eta_minutes(distance))
