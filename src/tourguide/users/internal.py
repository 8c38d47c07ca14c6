"""
Internal test users.

There is no persistence layer: in test mode the service is populated with
`internalUser{i}` accounts, each with a short random location history, so the
tracker, reward engine and API have something to work on.
"""

from __future__ import annotations

import random
import uuid
from datetime import datetime, timedelta, timezone

from tourguide.config.settings import InternalUsersSettings
from tourguide.domain.models import VisitedLocation
from tourguide.domain.user import User
from tourguide.providers.simulated import random_coordinate


def _random_time(rng: random.Random, *, days: int) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=rng.randrange(days))


def generate_location_history(user: User, *, size: int, days: int, rng: random.Random) -> None:
    # History is chronological, so the random timestamps are appended oldest first.
    for time_visited in sorted(_random_time(rng, days=days) for _ in range(size)):
        user.add_visited_location(
            VisitedLocation(user_id=user.user_id, location=random_coordinate(rng), time_visited=time_visited)
        )


def create_internal_users(settings: InternalUsersSettings, *, rng: random.Random | None = None) -> dict[str, User]:
    rng = rng or random.Random()
    users: dict[str, User] = {}
    for i in range(settings.count):
        user_name = f"internalUser{i}"
        user = User(uuid.uuid4(), user_name, "000", f"{user_name}@tourGuide.com")
        generate_location_history(user, size=settings.history_size, days=settings.history_days, rng=rng)
        users[user_name] = user
    return users
