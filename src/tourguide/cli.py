"""
TourGuide CLI entrypoint.

This CLI is intended for quick local demos and load checks without the HTTP API.
It builds an in-process `TourGuideService` (internal users + configured providers)
and never starts the periodic background tracker.
"""

from __future__ import annotations

import argparse
import json
import time
from typing import Any

from tourguide.config.settings import Settings, get_settings
from tourguide.core.logging import configure_logging
from tourguide.domain.errors import TourGuideError
from tourguide.service import TourGuideService, build_service


def _build(args: argparse.Namespace) -> TourGuideService:
    settings: Settings = get_settings()
    updates: dict[str, Any] = {"tracking": settings.tracking.model_copy(update={"enabled": False})}
    if getattr(args, "users", None) is not None:
        updates["internal_users"] = settings.internal_users.model_copy(update={"count": int(args.users)})
    settings = settings.model_copy(update=updates)
    service = build_service(settings)
    if getattr(args, "reward_buffer", None) is not None:
        service.set_reward_buffer(float(args.reward_buffer))
    return service


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2, default=str))


def _cmd_users(args: argparse.Namespace) -> int:
    with _build(args) as service:
        users = service.get_all_users()
        if args.json:
            _print_json([u.summary().model_dump(mode="json") for u in users])
            return 0
        for u in users:
            print(f"{u.user_name}  id={u.user_id}  locations={len(u.visited_locations)}  rewards={len(u.rewards)}")
    return 0


def _cmd_track(args: argparse.Namespace) -> int:
    with _build(args) as service:
        user = service.get_user(args.user)
        visited = service.locations.track_location(user).result()
        rewards = service.get_user_rewards(user)
        if args.json:
            _print_json(
                {
                    "location": visited.model_dump(mode="json"),
                    "rewards": [r.model_dump(mode="json") for r in rewards],
                }
            )
            return 0
        loc = visited.location
        print(f"{user.user_name} at ({loc.latitude:.5f}, {loc.longitude:.5f}) {visited.time_visited.isoformat()}")
        print(f"rewards: {len(rewards)}  points: {user.rewards.total_points()}")
    return 0


def _cmd_nearby(args: argparse.Namespace) -> int:
    with _build(args) as service:
        user = service.get_user(args.user)
        visited = service.get_user_location(user)
        nearby = service.get_nearby_attractions(visited, user)
        if args.json:
            _print_json([n.model_dump(mode="json") for n in nearby])
            return 0
        for i, n in enumerate(nearby, start=1):
            print(f"{i:>2}. {n.name}  {n.distance_miles:,.1f} mi  points={n.reward_points}")
    return 0


def _cmd_rewards(args: argparse.Namespace) -> int:
    with _build(args) as service:
        user = service.get_user(args.user)
        service.engine.reward_user(user)
        rewards = service.get_user_rewards(user)
        if args.json:
            _print_json([r.model_dump(mode="json") for r in rewards])
            return 0
        for r in rewards:
            print(f"- {r.attraction.name}: {r.reward_points} points")
        print(f"total: {user.rewards.total_points()} points")
    return 0


def _cmd_trip_deals(args: argparse.Namespace) -> int:
    with _build(args) as service:
        user = service.get_user(args.user)
        offers = service.get_trip_deals(user)
        if args.json:
            _print_json([o.model_dump(mode="json") for o in offers])
            return 0
        for o in offers:
            print(f"- {o.name}: {o.price:,.2f}  trip={o.trip_id}")
    return 0


def _cmd_track_all(args: argparse.Namespace) -> int:
    """Run one tracking cycle over every internal user and report the timing."""
    with _build(args) as service:
        t0 = time.monotonic()
        cycle = service.tracker.run_once()
        elapsed = time.monotonic() - t0
        rewarded = sum(1 for u in service.get_all_users() if len(u.rewards) > 0)
        payload = {
            "users": cycle.users,
            "failed": cycle.failed,
            "users_with_rewards": rewarded,
            "elapsed_seconds": round(elapsed, 3),
            "pool_size": service.pool.size,
        }
        if args.json:
            _print_json(payload)
            return 0
        print(
            f"tracked {cycle.users} users in {elapsed:.2f}s "
            f"(failed={cycle.failed}, with rewards={rewarded}, pool={service.pool.size})"
        )
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the TourGuide CLI."""
    parser = argparse.ArgumentParser(prog="tourguide")
    parser.add_argument("--users", type=int, default=None, help="Number of internal users to create.")
    parser.add_argument(
        "--reward-buffer", type=float, default=None, help="Reward buffer in miles (defaults to config)."
    )
    parser.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    sub = parser.add_subparsers(dest="command", required=True)

    u = sub.add_parser("users", help="List internal users.")
    u.set_defaults(func=_cmd_users)

    for name, func, help_text in [
        ("track", _cmd_track, "Fetch a new location for a user and compute rewards."),
        ("nearby", _cmd_nearby, "Show the attractions closest to a user."),
        ("rewards", _cmd_rewards, "Compute and show a user's rewards."),
        ("trip-deals", _cmd_trip_deals, "Price trips for a user."),
    ]:
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--user", required=True, help="User name (e.g. internalUser0)")
        p.set_defaults(func=func)

    t = sub.add_parser("track-all", help="Track every internal user once and report elapsed time.")
    t.set_defaults(func=_cmd_track_all)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m tourguide.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    try:
        return int(func(args))
    except TourGuideError as e:
        print(f"error: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
