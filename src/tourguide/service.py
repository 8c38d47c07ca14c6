"""
TourGuide service facade.

This is the single entrypoint the API and CLI talk to. It wires together:
- the shared worker pool,
- the attraction catalog (loaded once),
- the proximity policy, reward engine and location tracker,
- the periodic background tracker,
- the in-memory user registry (populated with internal users in test mode),
- the trip-pricing provider.

Lifecycle: `start()` starts the pool (and the tracker when enabled); `shutdown()`
stops the tracker and waits for outstanding work.
"""

from __future__ import annotations

import logging
import threading

from tourguide.catalog.loader import AttractionCatalog
from tourguide.config.settings import Settings
from tourguide.core.workers import WorkerPool
from tourguide.domain.errors import UserNotFound
from tourguide.domain.models import Attraction, Coordinate, NearbyAttraction, ProviderOffer, UserReward, VisitedLocation
from tourguide.domain.user import User
from tourguide.providers.base import GpsProvider, PointsProvider, TripPricingProvider
from tourguide.providers.http_clients import build_http_clients
from tourguide.providers.simulated import SimulatedGps, SimulatedRewardCentral, SimulatedTripPricer
from tourguide.recommender.nearby import nearest_attractions
from tourguide.rewards.engine import RewardEngine
from tourguide.rewards.proximity import ProximityPolicy
from tourguide.tracking.locations import LocationTracker
from tourguide.tracking.tracker import Tracker
from tourguide.users.internal import create_internal_users

logger = logging.getLogger(__name__)


class TourGuideService:
    def __init__(
        self,
        settings: Settings,
        *,
        gps: GpsProvider,
        points: PointsProvider,
        pricer: TripPricingProvider,
        catalog: AttractionCatalog | None = None,
        pool: WorkerPool | None = None,
        users: dict[str, User] | None = None,
    ):
        self._settings = settings
        self._gps = gps
        self._points = points
        self._pricer = pricer
        self._pool = pool or WorkerPool(settings.workers.pool_size)
        self._catalog = catalog if catalog is not None else self._load_catalog(settings, gps)

        self.policy = ProximityPolicy.from_settings(settings.proximity)
        self.engine = RewardEngine(catalog=self._catalog, points=points, policy=self.policy, pool=self._pool)
        self.locations = LocationTracker(gps=gps, engine=self.engine, pool=self._pool)
        self.tracker = Tracker(
            users=self.get_all_users,
            locations=self.locations,
            interval_seconds=settings.tracking.interval_seconds,
        )

        self._users_lock = threading.Lock()
        if users is not None:
            self._users = dict(users)
        elif settings.internal_users.enabled:
            logger.info("TestMode enabled")
            logger.debug("Initializing users")
            self._users = create_internal_users(settings.internal_users)
            logger.debug("Created %s internal test users.", len(self._users))
        else:
            self._users = {}

    @staticmethod
    def _load_catalog(settings: Settings, gps: GpsProvider) -> AttractionCatalog:
        if settings.catalog.path:
            return AttractionCatalog.from_file(settings.catalog.path)
        return AttractionCatalog.from_provider(gps)

    @property
    def catalog(self) -> AttractionCatalog:
        return self._catalog

    @property
    def pool(self) -> WorkerPool:
        return self._pool

    def start(self) -> "TourGuideService":
        self._pool.start()
        if self._settings.tracking.enabled:
            self.tracker.start()
        return self

    def shutdown(self) -> None:
        self.tracker.stop()
        self._pool.shutdown(wait=True)
        for provider in (self._gps, self._points, self._pricer):
            close = getattr(provider, "close", None)
            if close is not None:
                close()

    def __enter__(self) -> "TourGuideService":
        return self.start()

    def __exit__(self, *_exc: object) -> None:
        self.shutdown()

    # ---- users ----

    def get_user(self, user_name: str) -> User:
        with self._users_lock:
            user = self._users.get(user_name)
        if user is None:
            raise UserNotFound(user_name)
        return user

    def get_all_users(self) -> list[User]:
        with self._users_lock:
            return list(self._users.values())

    def add_user(self, user: User) -> bool:
        """Register `user`; returns False if the name is already taken."""
        with self._users_lock:
            if user.user_name in self._users:
                return False
            self._users[user.user_name] = user
            return True

    # ---- locations & rewards ----

    def get_user_location(self, user: User) -> VisitedLocation:
        return self.locations.get_current_location(user)

    def get_user_rewards(self, user: User) -> list[UserReward]:
        return list(user.rewards.snapshot())

    def get_nearby_attractions(self, visited_location: VisitedLocation, user: User) -> list[NearbyAttraction]:
        return nearest_attractions(
            visited_location.location,
            user,
            attractions=self._catalog.attractions,
            points=self._points,
            k=self._settings.nearby.top_k,
        )

    def attractions_in_range(self, location: Coordinate) -> list[Attraction]:
        return [a for a in self._catalog if self.policy.is_within_attraction_range(a, location)]

    def set_reward_buffer(self, miles: float) -> None:
        self.policy.set_reward_buffer(miles)
        logger.info("Reward buffer set to %s miles", self.policy.reward_buffer_miles)

    def reset_reward_buffer(self) -> None:
        self.policy.reset_reward_buffer()
        logger.info("Reward buffer reset to %s miles", self.policy.reward_buffer_miles)

    # ---- trip deals ----

    def get_trip_deals(self, user: User) -> list[ProviderOffer]:
        cumulative_reward_points = user.rewards.total_points()
        prefs = user.preferences
        offers = self._pricer.get_price(
            self._settings.trip_pricer.api_key,
            user.user_id,
            prefs.number_of_adults,
            prefs.number_of_children,
            prefs.trip_duration,
            cumulative_reward_points,
        )
        user.trip_deals = list(offers)
        return list(offers)


def build_providers(settings: Settings) -> tuple[GpsProvider, PointsProvider, TripPricingProvider]:
    if settings.providers.mode == "http":
        return build_http_clients(settings)
    simulated = settings.providers.simulated
    return SimulatedGps(simulated), SimulatedRewardCentral(simulated), SimulatedTripPricer(simulated)


def build_service(settings: Settings) -> TourGuideService:
    gps, points, pricer = build_providers(settings)
    return TourGuideService(settings, gps=gps, points=points, pricer=pricer)
