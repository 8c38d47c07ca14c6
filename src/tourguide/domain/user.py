"""
User aggregate.

A `User` exclusively owns its visited-location history and its reward ledger.
Both are append-only and are appended to from worker threads (the tracker adds
locations while the reward engine reads them), so every mutation goes through a
lock and every read returns an immutable snapshot.
"""

from __future__ import annotations

import threading
from datetime import datetime
from uuid import UUID

from tourguide.domain.models import ProviderOffer, TripPreferences, UserReward, UserSummary, VisitedLocation


class RewardLedger:
    """Per-user reward records, unique by attraction name."""

    def __init__(self) -> None:
        self._rewards: list[UserReward] = []
        self._lock = threading.Lock()

    def has_reward(self, attraction_name: str) -> bool:
        with self._lock:
            return any(r.attraction.name == attraction_name for r in self._rewards)

    def add_reward(self, reward: UserReward) -> None:
        """Append unconditionally; callers check `has_reward` first."""
        with self._lock:
            self._rewards.append(reward)

    def snapshot(self) -> tuple[UserReward, ...]:
        with self._lock:
            return tuple(self._rewards)

    def total_points(self) -> int:
        return sum(r.reward_points for r in self.snapshot())

    def __len__(self) -> int:
        with self._lock:
            return len(self._rewards)


class User:
    def __init__(
        self,
        user_id: UUID,
        user_name: str,
        phone_number: str,
        email_address: str,
        *,
        preferences: TripPreferences | None = None,
    ):
        self.user_id = user_id
        self.user_name = user_name
        self.phone_number = phone_number
        self.email_address = email_address
        self.latest_location_timestamp: datetime | None = None
        self.preferences = preferences or TripPreferences()
        self.rewards = RewardLedger()
        self.trip_deals: list[ProviderOffer] = []
        # Held for the whole of a reward run so two runs for one user never interleave.
        self.reward_lock = threading.Lock()
        self._visited_locations: list[VisitedLocation] = []
        self._locations_lock = threading.Lock()

    def __repr__(self) -> str:
        return f"User(user_name={self.user_name!r}, user_id={self.user_id})"

    @property
    def visited_locations(self) -> tuple[VisitedLocation, ...]:
        """Chronological snapshot of the location history."""
        with self._locations_lock:
            return tuple(self._visited_locations)

    def add_visited_location(self, visited_location: VisitedLocation) -> None:
        with self._locations_lock:
            self._visited_locations.append(visited_location)
            self.latest_location_timestamp = visited_location.time_visited

    def last_visited_location(self) -> VisitedLocation | None:
        with self._locations_lock:
            return self._visited_locations[-1] if self._visited_locations else None

    def summary(self) -> UserSummary:
        return UserSummary(
            user_id=self.user_id,
            user_name=self.user_name,
            phone_number=self.phone_number,
            email_address=self.email_address,
            visited_locations=len(self.visited_locations),
            rewards=len(self.rewards),
        )
