from __future__ import annotations

# Reward computation.
#
# For one user, every (visited location, attraction) pair is checked:
# - attractions the user already holds a reward for are skipped,
# - the rest are tested against the reward buffer,
# - eligible ones get their points from the points provider and are appended to the ledger.
#
# The engine works on a snapshot of the location history taken when the run starts;
# locations the tracker appends afterwards are picked up by the next run.

import logging
import time
from concurrent.futures import Future
from dataclasses import dataclass

from tourguide.catalog.loader import AttractionCatalog
from tourguide.core.workers import WorkerPool
from tourguide.domain.errors import ProviderUnavailable
from tourguide.domain.models import Attraction, UserReward
from tourguide.domain.user import User
from tourguide.providers.base import PointsProvider
from tourguide.rewards.proximity import ProximityPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RewardRun:
    """Outcome of one reward computation for one user."""

    user_name: str
    locations_checked: int
    added: int
    failed: int
    elapsed_ms: int


class RewardEngine:
    def __init__(
        self,
        *,
        catalog: AttractionCatalog,
        points: PointsProvider,
        policy: ProximityPolicy,
        pool: WorkerPool,
    ):
        self._catalog = catalog
        self._points = points
        self._policy = policy
        self._pool = pool

    def get_reward_points(self, attraction: Attraction, user: User) -> int:
        return self._points.get_attraction_reward_points(attraction.id, user.user_id)

    def calculate_rewards(self, user: User) -> Future[RewardRun]:
        """Schedule a reward run for `user` on the shared pool."""
        return self._pool.submit(self.reward_user, user)

    def reward_user(self, user: User) -> RewardRun:
        """Run the reward computation for `user` in the calling thread."""
        t0 = time.monotonic()
        added = 0
        failed = 0

        # Serialize runs per user so the has_reward/add_reward pair cannot race.
        with user.reward_lock:
            locations = user.visited_locations
            attractions = self._catalog.attractions

            for visited_location in locations:
                for attraction in attractions:
                    if user.rewards.has_reward(attraction.name):
                        continue
                    if not self._policy.is_reward_eligible(visited_location, attraction):
                        continue
                    try:
                        points = self.get_reward_points(attraction, user)
                    except ProviderUnavailable as exc:
                        failed += 1
                        logger.warning(
                            "Skipping reward for user=%s attraction=%s: %s",
                            user.user_name,
                            attraction.name,
                            exc,
                        )
                        continue
                    user.rewards.add_reward(
                        UserReward(visited_location=visited_location, attraction=attraction, reward_points=points)
                    )
                    added += 1

        run = RewardRun(
            user_name=user.user_name,
            locations_checked=len(locations),
            added=added,
            failed=failed,
            elapsed_ms=int((time.monotonic() - t0) * 1000),
        )
        if added or failed:
            logger.debug(
                "Reward run user=%s added=%s failed=%s elapsed_ms=%s",
                run.user_name,
                run.added,
                run.failed,
                run.elapsed_ms,
            )
        return run
