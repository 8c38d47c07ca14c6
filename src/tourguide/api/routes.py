"""
API routes.

Endpoints:
- GET    `/api/location`: latest (or freshly tracked) location of a user.
- GET    `/api/nearby-attractions`: closest attractions with reward points.
- GET    `/api/rewards`: rewards earned by a user.
- GET    `/api/trip-deals`: trip offers priced with the user's cumulative reward points.
- GET    `/api/attractions/in-range`: attractions within the attraction range of the user.
- GET    `/api/users`, POST `/api/users`: list / register users.
- GET|PUT|DELETE `/api/settings/proximity`: read, change or reset the reward buffer.
"""

from __future__ import annotations

import threading
import uuid

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from tourguide.config.settings import get_settings
from tourguide.domain.errors import InvalidProximityConfig, ProviderUnavailable, UserNotFound
from tourguide.domain.models import (
    Attraction,
    NearbyAttraction,
    ProviderOffer,
    TripPreferences,
    UserReward,
    UserSummary,
    VisitedLocation,
)
from tourguide.domain.user import User
from tourguide.service import TourGuideService, build_service

router = APIRouter()

_service_instance: TourGuideService | None = None
_service_lock = threading.Lock()


def _service() -> TourGuideService:
    global _service_instance
    with _service_lock:
        if _service_instance is None:
            _service_instance = build_service(get_settings())
        return _service_instance


def reset_service() -> None:
    """Forget the current service so the next app startup builds a fresh one."""
    global _service_instance
    with _service_lock:
        _service_instance = None


class RegisterUserRequest(BaseModel):
    user_name: str = Field(..., min_length=1)
    phone_number: str = ""
    email_address: str = ""
    preferences: TripPreferences | None = None


class ProximitySettingsPayload(BaseModel):
    reward_buffer_miles: float
    default_reward_buffer_miles: float
    attraction_range_miles: float


class RewardBufferUpdate(BaseModel):
    reward_buffer_miles: float


def _get_user(service: TourGuideService, user_name: str) -> User:
    try:
        return service.get_user(user_name)
    except UserNotFound as e:
        raise HTTPException(status_code=404, detail={"code": "USER_NOT_FOUND", "message": str(e)}) from e


def _provider_error(e: ProviderUnavailable) -> HTTPException:
    return HTTPException(status_code=502, detail={"code": "PROVIDER_UNAVAILABLE", "message": str(e)})


def _proximity_payload(service: TourGuideService) -> ProximitySettingsPayload:
    policy = service.policy
    return ProximitySettingsPayload(
        reward_buffer_miles=policy.reward_buffer_miles,
        default_reward_buffer_miles=policy.default_reward_buffer_miles,
        attraction_range_miles=policy.attraction_range_miles,
    )


@router.get("/api/location", response_model=VisitedLocation)
def get_location(user_name: str) -> VisitedLocation:
    """Return the user's latest location, tracking it first when the history is empty."""
    service = _service()
    user = _get_user(service, user_name)
    try:
        return service.get_user_location(user)
    except ProviderUnavailable as e:
        raise _provider_error(e) from e


@router.get("/api/nearby-attractions", response_model=list[NearbyAttraction])
def get_nearby_attractions(user_name: str) -> list[NearbyAttraction]:
    """Return the closest attractions to the user's current location."""
    service = _service()
    user = _get_user(service, user_name)
    try:
        visited_location = service.get_user_location(user)
        return service.get_nearby_attractions(visited_location, user)
    except ProviderUnavailable as e:
        raise _provider_error(e) from e


@router.get("/api/rewards", response_model=list[UserReward])
def get_rewards(user_name: str) -> list[UserReward]:
    service = _service()
    return service.get_user_rewards(_get_user(service, user_name))


@router.get("/api/trip-deals", response_model=list[ProviderOffer])
def get_trip_deals(user_name: str) -> list[ProviderOffer]:
    """Price trips for the user; cumulative reward points lower the prices."""
    service = _service()
    user = _get_user(service, user_name)
    try:
        return service.get_trip_deals(user)
    except ProviderUnavailable as e:
        raise _provider_error(e) from e


@router.get("/api/attractions/in-range", response_model=list[Attraction])
def get_attractions_in_range(user_name: str) -> list[Attraction]:
    service = _service()
    user = _get_user(service, user_name)
    try:
        visited_location = service.get_user_location(user)
    except ProviderUnavailable as e:
        raise _provider_error(e) from e
    return service.attractions_in_range(visited_location.location)


@router.get("/api/users", response_model=list[UserSummary])
def list_users() -> list[UserSummary]:
    return [u.summary() for u in _service().get_all_users()]


@router.post("/api/users", response_model=UserSummary, status_code=201)
def register_user(req: RegisterUserRequest) -> UserSummary:
    user = User(
        uuid.uuid4(),
        req.user_name.strip(),
        req.phone_number,
        req.email_address,
        preferences=req.preferences,
    )
    if not _service().add_user(user):
        raise HTTPException(
            status_code=409,
            detail={"code": "USER_EXISTS", "message": f"User '{user.user_name}' already exists."},
        )
    return user.summary()


@router.get("/api/settings/proximity", response_model=ProximitySettingsPayload)
def get_proximity_settings() -> ProximitySettingsPayload:
    return _proximity_payload(_service())


@router.put("/api/settings/proximity", response_model=ProximitySettingsPayload)
def put_proximity_settings(update: RewardBufferUpdate) -> ProximitySettingsPayload:
    """Change the reward buffer for all subsequent reward computations."""
    service = _service()
    try:
        service.set_reward_buffer(update.reward_buffer_miles)
    except InvalidProximityConfig as e:
        raise HTTPException(status_code=400, detail={"code": "INVALID_PROXIMITY", "message": str(e)}) from e
    return _proximity_payload(service)


@router.delete("/api/settings/proximity", response_model=ProximitySettingsPayload)
def reset_proximity_settings() -> ProximitySettingsPayload:
    service = _service()
    service.reset_reward_buffer()
    return _proximity_payload(service)
