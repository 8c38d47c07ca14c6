"""
Nearest-attraction ranking.

The whole catalog is sorted by distance from the given location. Python's sort is
stable, so attractions at the same distance keep their catalog order. Reward points
are reported for every returned attraction, whether or not it is inside the reward
buffer. Nothing here mutates the user.
"""

from __future__ import annotations

from typing import Sequence

from tourguide.core.geo import distance_miles
from tourguide.domain.models import Attraction, Coordinate, NearbyAttraction
from tourguide.domain.user import User
from tourguide.providers.base import PointsProvider


def rank_by_distance(location: Coordinate, attractions: Sequence[Attraction]) -> list[tuple[Attraction, float]]:
    """Return `(attraction, miles)` pairs sorted nearest first."""
    scored = [(a, distance_miles(location, a.location)) for a in attractions]
    scored.sort(key=lambda pair: pair[1])
    return scored


def nearest_attractions(
    location: Coordinate,
    user: User,
    *,
    attractions: Sequence[Attraction],
    points: PointsProvider,
    k: int = 5,
) -> list[NearbyAttraction]:
    if k <= 0:
        return []
    out: list[NearbyAttraction] = []
    for attraction, miles in rank_by_distance(location, attractions)[:k]:
        out.append(
            NearbyAttraction(
                name=attraction.name,
                attraction_lat=attraction.location.latitude,
                attraction_lon=attraction.location.longitude,
                user_lat=location.latitude,
                user_lon=location.longitude,
                distance_miles=miles,
                reward_points=points.get_attraction_reward_points(attraction.id, user.user_id),
            )
        )
    return out
