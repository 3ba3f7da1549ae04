"""Geo math for delivery tracking.

Zero is the "unset" sentinel for coordinates across the data model, so a
location is only usable when both latitude and longitude are non-zero.
"""

import math
from dataclasses import dataclass

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float

    @property
    def is_valid(self) -> bool:
        return is_valid_location(self)

    def to_payload(self) -> dict:
        return {"latitude": round(self.latitude, 6), "longitude": round(self.longitude, 6)}


def _is_coordinate(value) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value != 0
    )


def is_valid_location(location: Location | None) -> bool:
    return location is not None and _is_coordinate(location.latitude) and _is_coordinate(location.longitude)


def location_or_none(latitude, longitude) -> Location | None:
    """Build a Location from raw wire values, or None if either is unset."""
    if latitude is None or longitude is None:
        return None
    location = Location(float(latitude), float(longitude))
    return location if location.is_valid else None


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometres."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def distance_km(a: Location, b: Location) -> float:
    """Haversine distance between two locations, rounded to 2 decimals."""
    return round(haversine(a.latitude, a.longitude, b.latitude, b.longitude), 2)


def midpoint(a: Location, b: Location) -> Location:
    """Arithmetic midpoint, good enough for centring a city-scale map."""
    return Location((a.latitude + b.latitude) / 2, (a.longitude + b.longitude) / 2)
