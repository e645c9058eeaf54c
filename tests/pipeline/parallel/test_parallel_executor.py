from __future__ import annotations

import os

import pytest

from mpboost.pipeline.parallel import executor as executor_mod
from mpboost.pipeline.parallel.executor import ParallelExecutor, WorkerPool
from mpboost.pipeline.parallel.types import ParallelKind


def square(x: int) -> int:
    return x * x


def fail_on_bad(item: str) -> str:
    if item == "bad":
        raise RuntimeError("boom")
    return item


def worker_pid(_item) -> int:
    return os.getpid()


def test_run_with_empty_items_returns_empty():
    called = []

    out = ParallelExecutor.run(
        kind=ParallelKind.PARTITION,
        items=[],
        handler=called.append,
    )

    assert out == []
    assert called == []


def test_run_sequential_order_preserved():
    called = []

    def handler(x):
        called.append(x)
        return x.upper()

    out = ParallelExecutor.run(
        kind=ParallelKind.PARTITION,
        items=["a", "b", "c"],
        handler=handler,
        max_workers=1,
    )

    assert called == ["a", "b", "c"]
    assert out == ["A", "B", "C"]


def test_run_parallel_all_items_processed():
    out = ParallelExecutor.run(
        kind=ParallelKind.PARTITION,
        items=range(8),
        handler=square,
        max_workers=2,
    )

    assert sorted(out) == [x * x for x in range(8)]


def test_run_parallel_ordered():
    out = ParallelExecutor.run(
        kind=ParallelKind.PARTITION,
        items=range(8),
        handler=square,
        max_workers=2,
        ordered=True,
    )

    assert out == [x * x for x in range(8)]


def test_run_parallel_propagates_exception():
    with pytest.raises(RuntimeError):
        ParallelExecutor.run(
            kind=ParallelKind.PARTITION,
            items=["ok1", "bad", "ok2"],
            handler=fail_on_bad,
            max_workers=2,
        )


# ============================================================
# retry of transient failures
# ============================================================
def test_transient_failure_is_retried():
    attempts = {"n": 0}

    def flaky(x):
        attempts["n"] += 1
        if attempts["n"] < 3:
            raise OSError("disk hiccup")
        return x

    out = ParallelExecutor.run(
        kind=ParallelKind.PARTITION,
        items=["p0"],
        handler=flaky,
        max_workers=1,
        retry_on=(OSError,),
        max_attempts=3,
    )

    assert out == ["p0"]
    assert attempts["n"] == 3


def test_non_transient_failure_is_not_retried():
    attempts = {"n": 0}

    def broken(x):
        attempts["n"] += 1
        raise ValueError("bad data")

    with pytest.raises(ValueError):
        ParallelExecutor.run(
            kind=ParallelKind.PARTITION,
            items=["p0"],
            handler=broken,
            max_workers=1,
            retry_on=(OSError,),
            max_attempts=3,
        )

    assert attempts["n"] == 1


# ============================================================
# worker resolution
# ============================================================
def test_resolve_workers_caps_by_items():
    assert ParallelExecutor._resolve_workers(["a", "b"], max_workers=10) == 2


def test_resolve_workers_caps_by_cpu():
    cpu = os.cpu_count() or 1
    assert ParallelExecutor._resolve_workers(list(range(100)), max_workers=None) <= cpu


def test_resolve_workers_at_least_one():
    assert ParallelExecutor._resolve_workers(["a"], max_workers=0) == 1


def test_retry_goes_through_retry_front_end(monkeypatch):
    seen = []
    original = executor_mod.Retry.run

    def spy(func, *args, **kwargs):
        seen.append(kwargs["exceptions"])
        return original(func, *args, **kwargs)

    monkeypatch.setattr(executor_mod.Retry, "run", staticmethod(spy))

    out = ParallelExecutor.run(
        kind=ParallelKind.PARTITION,
        items=["p0", "p1"],
        handler=str.upper,
        max_workers=1,
        retry_on=(OSError,),
        max_attempts=2,
    )

    assert out == ["P0", "P1"]
    assert seen == [(OSError,), (OSError,)]


# ============================================================
# shared worker pool
# ============================================================
def test_open_pool_single_worker_stays_in_process():
    assert ParallelExecutor.open_pool(handler=square, max_workers=1) is None


def test_shared_pool_serves_repeated_runs():
    pool = ParallelExecutor.open_pool(handler=square, max_workers=2)
    assert isinstance(pool, WorkerPool)
    try:
        first = ParallelExecutor.run(
            kind=ParallelKind.BATCH, items=[1, 2, 3], handler=square, pool=pool
        )
        second = ParallelExecutor.run(
            kind=ParallelKind.BATCH, items=[4, 5], handler=square, pool=pool, ordered=True
        )
    finally:
        pool.close()

    assert sorted(first) == [1, 4, 9]
    assert second == [16, 25]


def test_shared_pool_reuses_worker_processes():
    with WorkerPool(worker_pid, workers=2) as pool:
        pids = set(pool.map(list(range(20))))
        pids |= set(pool.map(list(range(20))))

    assert os.getpid() not in pids
    assert 1 <= len(pids) <= 2


def test_shared_pool_propagates_exception():
    with WorkerPool(fail_on_bad, workers=2) as pool:
        with pytest.raises(RuntimeError):
            pool.map(["ok1", "bad", "ok2"])
