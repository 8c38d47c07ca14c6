"""
Shared worker pool.

Location tracking and reward computation are I/O-bound waits on the GPS and points
providers, so both run on one generously sized thread pool. The pool is created
once by the service and injected into the components that schedule work on it.

Lifecycle:
- `start()` creates the executor (idempotent).
- `shutdown()` stops accepting new work and waits for queued/in-flight tasks (idempotent).
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PoolNotRunning(RuntimeError):
    """Work was submitted to a pool that is not started or already shut down."""


class WorkerPool:
    """A bounded `ThreadPoolExecutor` with an explicit start/shutdown lifecycle."""

    def __init__(self, size: int, *, name: str = "tourguide-worker"):
        if int(size) <= 0:
            raise ValueError("size must be > 0")
        self._size = int(size)
        self._name = name
        self._executor: ThreadPoolExecutor | None = None
        self._closed = False
        self._lock = threading.Lock()

    @property
    def size(self) -> int:
        return self._size

    def start(self) -> "WorkerPool":
        with self._lock:
            if self._closed:
                raise PoolNotRunning("WorkerPool has been shut down and cannot be restarted.")
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=self._size, thread_name_prefix=self._name)
                logger.debug("Started worker pool %s with %s workers", self._name, self._size)
        return self

    def submit(self, fn: Callable[..., T], /, *args: Any, **kwargs: Any) -> Future[T]:
        executor = self._executor
        if executor is None or self._closed:
            raise PoolNotRunning("WorkerPool is not running; call start() first.")
        try:
            return executor.submit(fn, *args, **kwargs)
        except RuntimeError as exc:
            # Lost a race with shutdown().
            raise PoolNotRunning(str(exc)) from exc

    def shutdown(self, *, wait: bool = True) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            executor = self._executor
        if executor is not None:
            # Outstanding tasks are allowed to finish; nothing is cancelled.
            executor.shutdown(wait=wait, cancel_futures=False)
            logger.debug("Worker pool %s shut down", self._name)

    def __enter__(self) -> "WorkerPool":
        return self.start()

    def __exit__(self, *_exc: object) -> None:
        self.shutdown(wait=True)
