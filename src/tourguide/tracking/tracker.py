"""
Periodic background tracker.

Every `interval_seconds` the tracker schedules `track_location` for all known users
and waits for that cycle to finish before sleeping again.

Shutdown is graceful and idempotent: `stop()` prevents new cycles from starting
but never interrupts a cycle that is already running.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import wait
from dataclasses import dataclass
from typing import Callable

from tourguide.core.workers import PoolNotRunning
from tourguide.domain.user import User
from tourguide.tracking.locations import LocationTracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrackingCycle:
    users: int
    failed: int
    elapsed_ms: int


class Tracker:
    def __init__(
        self,
        *,
        users: Callable[[], list[User]],
        locations: LocationTracker,
        interval_seconds: float,
    ):
        if float(interval_seconds) <= 0:
            raise ValueError("interval_seconds must be > 0")
        self._users = users
        self._locations = locations
        self._interval_seconds = float(interval_seconds)
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()
        self.cycles = 0

    @property
    def running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def start(self) -> None:
        with self._lock:
            if self._thread is not None or self._stop.is_set():
                return
            self._thread = threading.Thread(target=self._run, name="tourguide-tracker", daemon=True)
            self._thread.start()

    def stop(self, *, timeout: float | None = None) -> None:
        """Stop scheduling cycles and wait for the current one to finish."""
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def run_once(self) -> TrackingCycle:
        t0 = time.monotonic()
        users = self._users()
        logger.debug("Begin tracker. Tracking %s users.", len(users))

        futures = [self._locations.track_location(u) for u in users]
        done, _ = wait(futures)
        failed = 0
        for f in done:
            exc = f.exception()
            if exc is not None:
                failed += 1
                logger.warning("Tracking failed: %s: %s", type(exc).__name__, exc)

        cycle = TrackingCycle(users=len(users), failed=failed, elapsed_ms=int((time.monotonic() - t0) * 1000))
        self.cycles += 1
        logger.info(
            "Tracker cycle finished: users=%s failed=%s elapsed_ms=%s", cycle.users, cycle.failed, cycle.elapsed_ms
        )
        return cycle

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                self.run_once()
            except PoolNotRunning as exc:
                logger.info("Tracker stopping: %s", exc)
                break
            except Exception:
                logger.exception("Tracker cycle failed; retrying in %ss", self._interval_seconds)
            if self._stop.wait(self._interval_seconds):
                break
        logger.debug("Tracker stopping")
