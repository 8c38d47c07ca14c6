"""
In-process providers for test mode and local demos.

These stand in for the remote GPS, rewards and trip-pricing services:
- GPS fixes are random points on the Web-Mercator latitude band.
- Reward points are random integers in a configured range.
- Trip offers are five named providers with prices derived from party size,
  trip duration and the user's cumulative reward points.

`latency_seconds` adds a blocking sleep to each call so load tests can mimic
network-bound providers.
"""

from __future__ import annotations

import random
import time
import uuid
from datetime import datetime, timezone
from uuid import UUID

from tourguide.catalog.loader import load_packaged_attractions
from tourguide.config.settings import SimulatedProviderSettings
from tourguide.domain.models import Attraction, Coordinate, ProviderOffer, VisitedLocation

MAX_MERCATOR_LATITUDE = 85.05112878

OFFER_NAMES = [
    "Holiday Travels",
    "Enterprize Ventures Limited",
    "Sunny Days",
    "FlyAway Trips",
    "United Partners Vacations",
    "Dream Trips",
    "Live Free",
    "Dancing Waves Cruselines and Partners",
    "AdventureCo",
    "Cure-Your-Blues",
]


def random_coordinate(rng: random.Random) -> Coordinate:
    return Coordinate(
        latitude=rng.uniform(-MAX_MERCATOR_LATITUDE, MAX_MERCATOR_LATITUDE),
        longitude=rng.uniform(-180.0, 180.0),
    )


class _Simulated:
    def __init__(self, settings: SimulatedProviderSettings | None = None, *, rng: random.Random | None = None):
        self._settings = settings or SimulatedProviderSettings()
        self._rng = rng or random.Random(self._settings.seed)

    def _simulate_latency(self) -> None:
        delay = float(self._settings.latency_seconds)
        if delay > 0:
            time.sleep(delay)


class SimulatedGps(_Simulated):
    def __init__(
        self,
        settings: SimulatedProviderSettings | None = None,
        *,
        rng: random.Random | None = None,
        attractions: list[Attraction] | None = None,
    ):
        super().__init__(settings, rng=rng)
        self._attractions = list(attractions) if attractions is not None else load_packaged_attractions()

    def get_user_location(self, user_id: UUID) -> VisitedLocation:
        self._simulate_latency()
        return VisitedLocation(
            user_id=user_id,
            location=random_coordinate(self._rng),
            time_visited=datetime.now(timezone.utc),
        )

    def get_attractions(self) -> list[Attraction]:
        self._simulate_latency()
        return list(self._attractions)


class SimulatedRewardCentral(_Simulated):
    def get_attraction_reward_points(self, attraction_id: UUID, user_id: UUID) -> int:
        self._simulate_latency()
        return self._rng.randint(self._settings.min_reward_points, self._settings.max_reward_points)


class SimulatedTripPricer(_Simulated):
    def get_price(
        self,
        api_key: str,
        user_id: UUID,
        number_of_adults: int,
        number_of_children: int,
        trip_duration: int,
        cumulative_reward_points: int,
    ) -> list[ProviderOffer]:
        if not api_key:
            raise ValueError("api_key is required")
        self._simulate_latency()

        names = self._rng.sample(OFFER_NAMES, k=min(self._settings.offers, len(OFFER_NAMES)))
        offers: list[ProviderOffer] = []
        for name in names:
            nightly = self._rng.randint(100, 700)
            gross = nightly * (number_of_adults + 0.5 * number_of_children) * trip_duration
            price = max(0.0, gross - cumulative_reward_points)
            offers.append(ProviderOffer(name=name, price=round(price, 2), trip_id=uuid.uuid4()))
        return offers
