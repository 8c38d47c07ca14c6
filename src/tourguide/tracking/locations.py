"""
Location tracking.

`track_location` is one task on the shared pool that runs three steps in order:
1) fetch the user's current GPS fix,
2) append it to the user's history,
3) run the reward engine for the user,
and then resolves with the fetched location.

A GPS failure fails the returned future. Reward failures are per attraction and
only mean fewer rewards; the location is still returned.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future

from tourguide.core.workers import WorkerPool
from tourguide.domain.models import VisitedLocation
from tourguide.domain.user import User
from tourguide.providers.base import GpsProvider
from tourguide.rewards.engine import RewardEngine

logger = logging.getLogger(__name__)


class LocationTracker:
    def __init__(self, *, gps: GpsProvider, engine: RewardEngine, pool: WorkerPool):
        self._gps = gps
        self._engine = engine
        self._pool = pool

    def track_location(self, user: User) -> Future[VisitedLocation]:
        return self._pool.submit(self._track, user)

    def _track(self, user: User) -> VisitedLocation:
        visited_location = self._gps.get_user_location(user.user_id)
        user.add_visited_location(visited_location)
        run = self._engine.reward_user(user)
        if run.failed:
            logger.warning(
                "Tracked user=%s with %s failed reward lookups", user.user_name, run.failed
            )
        return visited_location

    def get_current_location(self, user: User) -> VisitedLocation:
        """Return the latest known location, tracking the user first if it has none.

        This is the only call that blocks the caller on the pool.
        """
        last = user.last_visited_location()
        if last is not None:
            return last
        return self.track_location(user).result()
