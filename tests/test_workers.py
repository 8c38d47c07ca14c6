import threading

import pytest

from tourguide.core.workers import PoolNotRunning, WorkerPool


def test_submit_requires_start():
    pool = WorkerPool(2)
    with pytest.raises(PoolNotRunning):
        pool.submit(lambda: 1)


def test_start_is_idempotent_and_runs_tasks():
    pool = WorkerPool(3)
    assert pool.start() is pool.start()
    assert pool.submit(lambda x: x * 2, 21).result(timeout=5) == 42
    pool.shutdown()


def test_shutdown_waits_for_in_flight_tasks_and_rejects_new_work():
    release = threading.Event()
    pool = WorkerPool(2).start()
    future = pool.submit(lambda: release.wait(5) and "done")

    threading.Timer(0.05, release.set).start()
    pool.shutdown(wait=True)
    pool.shutdown(wait=True)

    assert future.result() == "done"
    with pytest.raises(PoolNotRunning):
        pool.submit(lambda: None)
    with pytest.raises(PoolNotRunning):
        pool.start()


@pytest.mark.parametrize("size", [0, -3])
def test_size_must_be_positive(size):
    with pytest.raises(ValueError):
        WorkerPool(size)


def test_pool_not_running_is_a_runtime_error():
    assert issubclass(PoolNotRunning, RuntimeError)
