"""
Domain models (Pydantic).

These types represent the stable "contract" between layers:
- provider payloads (`VisitedLocation`, `Attraction`, `ProviderOffer`)
- reward records (`UserReward`)
- API/CLI outputs (`NearbyAttraction`)

Value objects are frozen: visited locations and rewards are append-only records
and are never edited once created.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Coordinate(BaseModel):
    """A geographic point in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class Attraction(BaseModel):
    """A named point of interest from the static catalog."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str
    location: Coordinate
    city: str | None = None
    state: str | None = None


class VisitedLocation(BaseModel):
    """One GPS fix for a user."""

    model_config = ConfigDict(frozen=True)

    user_id: UUID
    location: Coordinate
    time_visited: datetime


class UserReward(BaseModel):
    """Points earned for being within the reward buffer of an attraction."""

    model_config = ConfigDict(frozen=True)

    visited_location: VisitedLocation
    attraction: Attraction
    reward_points: int = Field(..., ge=0)


class TripPreferences(BaseModel):
    """Trip-pricing inputs attached to a user."""

    attraction_proximity: float = Field(default=float(2**31 - 1), ge=0)
    currency: str = "USD"
    lower_price_point: float = Field(default=0, ge=0)
    high_price_point: float = Field(default=float(2**31 - 1), ge=0)
    trip_duration: int = Field(default=1, ge=1)
    ticket_quantity: int = Field(default=1, ge=1)
    number_of_adults: int = Field(default=1, ge=1)
    number_of_children: int = Field(default=0, ge=0)


class ProviderOffer(BaseModel):
    """One priced trip offer returned by the trip-pricing provider."""

    model_config = ConfigDict(frozen=True)

    name: str
    price: float
    trip_id: UUID


class NearbyAttraction(BaseModel):
    """One ranked attraction for the "nearby" query."""

    name: str
    attraction_lat: float
    attraction_lon: float
    user_lat: float
    user_lon: float
    distance_miles: float = Field(..., ge=0)
    reward_points: int


class UserSummary(BaseModel):
    """Public view of a registered user."""

    user_id: UUID
    user_name: str
    phone_number: str
    email_address: str
    visited_locations: int
    rewards: int
