"""
Proximity thresholds.

Two inclusive (`<=`) distance predicates:
- attraction range: fixed, wide radius used for "is this attraction nearby at all".
- reward buffer: narrow radius deciding whether a visit earns a reward.

The reward buffer can be changed at runtime. Writes are serialized; readers see
either the old or the new value (last write wins) and nothing is recomputed for
rewards already granted.
"""

from __future__ import annotations

import math
import threading

from tourguide.config.settings import ProximitySettings
from tourguide.core.geo import distance_miles
from tourguide.domain.errors import InvalidProximityConfig
from tourguide.domain.models import Attraction, Coordinate, VisitedLocation


def _validate_miles(value: float, *, name: str) -> float:
    try:
        miles = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidProximityConfig(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(miles) or miles < 0:
        raise InvalidProximityConfig(f"{name} must be a finite, non-negative distance in miles, got {value!r}")
    return miles


class ProximityPolicy:
    def __init__(self, *, default_reward_buffer_miles: float = 10, attraction_range_miles: float = 200):
        self._default_reward_buffer = _validate_miles(default_reward_buffer_miles, name="reward buffer")
        self._attraction_range = _validate_miles(attraction_range_miles, name="attraction range")
        self._reward_buffer = self._default_reward_buffer
        self._write_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: ProximitySettings) -> "ProximityPolicy":
        return cls(
            default_reward_buffer_miles=settings.reward_buffer_miles,
            attraction_range_miles=settings.attraction_range_miles,
        )

    @property
    def reward_buffer_miles(self) -> float:
        return self._reward_buffer

    @property
    def default_reward_buffer_miles(self) -> float:
        return self._default_reward_buffer

    @property
    def attraction_range_miles(self) -> float:
        return self._attraction_range

    def set_reward_buffer(self, miles: float) -> None:
        value = _validate_miles(miles, name="reward buffer")
        with self._write_lock:
            self._reward_buffer = value

    def reset_reward_buffer(self) -> None:
        with self._write_lock:
            self._reward_buffer = self._default_reward_buffer

    def is_within_attraction_range(self, attraction: Attraction, location: Coordinate) -> bool:
        return distance_miles(attraction.location, location) <= self._attraction_range

    def is_reward_eligible(self, visited_location: VisitedLocation, attraction: Attraction) -> bool:
        return distance_miles(attraction.location, visited_location.location) <= self._reward_buffer
