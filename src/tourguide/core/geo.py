from __future__ import annotations

from math import acos, cos, degrees, radians, sin
from typing import Protocol

"""
Geospatial helpers.

Distances are great-circle distances in statute miles, computed with the spherical
law of cosines. Anything exposing `latitude`/`longitude` in decimal degrees works
as an input (domain `Coordinate` objects in practice).
"""

STATUTE_MILES_PER_NAUTICAL_MILE = 1.15077945


class LatLon(Protocol):
    latitude: float
    longitude: float


def distance_miles(a: LatLon, b: LatLon) -> float:
    """Compute great-circle distance in statute miles between two points."""
    if a.latitude == b.latitude and a.longitude == b.longitude:
        return 0.0
    lat1 = radians(a.latitude)
    lon1 = radians(a.longitude)
    lat2 = radians(b.latitude)
    lon2 = radians(b.longitude)

    cos_angle = sin(lat1) * sin(lat2) + cos(lat1) * cos(lat2) * cos(lon1 - lon2)
    # Rounding can push the cosine just past +/-1 for (near-)identical or antipodal points.
    angle = acos(max(-1.0, min(1.0, cos_angle)))

    nautical_miles = 60 * degrees(angle)
    return STATUTE_MILES_PER_NAUTICAL_MILE * nautical_miles
