"""
External collaborator contracts.

The core only depends on these protocols. Concrete implementations live in
`tourguide.providers.simulated` (in-process) and `tourguide.providers.http_clients`
(remote services). Implementations report failures as `ProviderUnavailable`.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from tourguide.domain.models import Attraction, ProviderOffer, VisitedLocation


class GpsProvider(Protocol):
    def get_user_location(self, user_id: UUID) -> VisitedLocation: ...

    def get_attractions(self) -> list[Attraction]: ...


class PointsProvider(Protocol):
    def get_attraction_reward_points(self, attraction_id: UUID, user_id: UUID) -> int: ...


class TripPricingProvider(Protocol):
    def get_price(
        self,
        api_key: str,
        user_id: UUID,
        number_of_adults: int,
        number_of_children: int,
        trip_duration: int,
        cumulative_reward_points: int,
    ) -> list[ProviderOffer]: ...
