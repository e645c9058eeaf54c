# mpboost/pipeline/parallel/executor.py
from __future__ import annotations

import os
from concurrent.futures import ProcessPoolExecutor, as_completed
from functools import partial
from typing import Any, Callable, Iterable, Optional, Tuple, Type

from mpboost import logs
from mpboost.pipeline.parallel.types import ParallelKind
from mpboost.utils.retry import Retry

# per worker process: the task installed by the pool initializer
_WORKER_TASK: Optional[Callable[[Any], Any]] = None


def _call_with_retry(
        handler: Callable[[Any], Any],
        retry_on: Tuple[Type[BaseException], ...],
        max_attempts: int,
        item: Any,
) -> Any:
    # module-level so the wrapped handler stays picklable
    return Retry.run(
        handler,
        item,
        exceptions=retry_on,
        max_attempts=max_attempts,
        delay=0.1,
        backoff=2.0,
    )


def _install_task(task: Callable[[Any], Any]) -> None:
    global _WORKER_TASK
    _WORKER_TASK = task


def _run_installed(item: Any) -> Any:
    return _WORKER_TASK(item)


class WorkerPool:
    """
    WorkerPool

    ProcessPoolExecutor whose workers receive the task (handler + read-only
    model) once, through the pool initializer. Only the items travel per
    submission, so one pool can serve every batch of a streaming job.
    """

    def __init__(self, task: Callable[[Any], Any], workers: int):
        self.task = task
        self.workers = workers
        self._executor = ProcessPoolExecutor(
            max_workers=workers, initializer=_install_task, initargs=(task,)
        )

    def map(self, items: list, *, ordered: bool = False) -> list:
        if ordered:
            return list(self._executor.map(_run_installed, items))

        futures = [self._executor.submit(_run_installed, item) for item in items]
        results = []
        try:
            for fut in as_completed(futures):
                results.append(fut.result())
        except BaseException:
            for fut in futures:
                fut.cancel()
            raise
        return results

    def close(self) -> None:
        self._executor.shutdown(wait=True, cancel_futures=True)

    def __enter__(self) -> "WorkerPool":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class ParallelExecutor:
    """
    ParallelExecutor

    - one item == one independent unit of work (a partition)
    - workers == 1 -> sequential, in-process, input order
    - workers > 1  -> WorkerPool; handler + its state (the read-only model)
      are shipped once per worker process
    - pool=...     -> reuse a pool from open_pool() instead of starting one
    - ordered=False returns results in completion order
    - only exceptions in `retry_on` are retried; anything else aborts the run
    """

    @staticmethod
    def run(
            *,
            kind: ParallelKind,
            items: Iterable[Any],
            handler: Callable[[Any], Any],
            max_workers: int | None = None,
            ordered: bool = False,
            retry_on: Tuple[Type[BaseException], ...] = (),
            max_attempts: int = 1,
            verbose: bool = False,
            pool: WorkerPool | None = None,
    ) -> list[Any]:
        items = list(items)
        level = "INFO" if verbose else "DEBUG"

        if not items:
            logs.log(level, "[ParallelExecutor] no items to process")
            return []

        if pool is not None:
            logs.log(
                level,
                f"[ParallelExecutor] start kind={kind.value} total={len(items)} "
                f"workers={pool.workers} (shared pool)",
            )
            return pool.map(items, ordered=ordered)

        workers = ParallelExecutor._resolve_workers(items, max_workers)
        logs.log(
            level,
            f"[ParallelExecutor] start kind={kind.value} total={len(items)} workers={workers}",
        )

        task = ParallelExecutor._task(handler, retry_on, max_attempts)
        if workers == 1:
            return [task(item) for item in items]
        with WorkerPool(task, workers) as one_shot:
            return one_shot.map(items, ordered=ordered)

    @staticmethod
    def open_pool(
            *,
            handler: Callable[[Any], Any],
            max_workers: int | None = None,
            retry_on: Tuple[Type[BaseException], ...] = (),
            max_attempts: int = 1,
    ) -> WorkerPool | None:
        """
        Start a long-lived pool for repeated run(pool=...) calls.
        None when a single worker is enough (run() then stays in-process).
        """
        workers = max_workers if max_workers is not None else (os.cpu_count() or 1)
        if workers <= 1:
            return None
        logs.debug(f"[ParallelExecutor] open pool workers={workers}")
        return WorkerPool(ParallelExecutor._task(handler, retry_on, max_attempts), workers)

    # ---------------- internal ----------------

    @staticmethod
    def _task(
            handler: Callable[[Any], Any],
            retry_on: Tuple[Type[BaseException], ...],
            max_attempts: int,
    ) -> Callable[[Any], Any]:
        if retry_on and max_attempts > 1:
            return partial(_call_with_retry, handler, tuple(retry_on), max_attempts)
        return handler

    @staticmethod
    def _resolve_workers(items: list, max_workers: int | None) -> int:
        cpu = os.cpu_count() or 1
        if max_workers is None:
            return max(1, min(cpu, len(items)))
        return max(1, min(max_workers, len(items)))
