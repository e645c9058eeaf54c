#!filepath: mpboost/utils/retry.py
import random
import time
from dataclasses import dataclass
from typing import Any, Callable, Tuple, Type

from mpboost.utils.logger import logs


@dataclass(frozen=True)
class RetryPolicy:
    """
    Which failures are worth another attempt, and how long to back off.

    Frozen and picklable: the partition executor ships it to worker
    processes together with the handler.
    """

    exceptions: Tuple[Type[BaseException], ...] = (Exception,)
    max_attempts: int = 3
    delay: float = 1.0
    backoff: float = 2.0
    jitter: bool = True

    def wait_for(self, attempt: int) -> float:
        """backoff before attempt+1 (attempt is 1-based)"""
        wait = self.delay * (self.backoff ** (attempt - 1))
        if self.jitter:
            wait *= random.uniform(0.8, 1.2)
        return wait

    def call(self, func: Callable, *args, **kwargs) -> Any:
        name = getattr(func, "__name__", type(func).__name__)
        attempt = 1
        while True:
            try:
                return func(*args, **kwargs)
            except self.exceptions as e:
                if attempt >= self.max_attempts:
                    logs.error(f"[Retry] {name} gave up after {attempt} attempts: {e}")
                    raise
                wait = self.wait_for(attempt)
                logs.warning(
                    f"[Retry] {name} attempt {attempt}/{self.max_attempts} failed: {e}; "
                    f"next in {wait:.2f}s"
                )
                time.sleep(wait)
                attempt += 1


class Retry:
    """
    Functional front-end over RetryPolicy.

    An empty `exceptions` tuple retries nothing: the first failure propagates.
    """

    @staticmethod
    def run(
        func: Callable,
        *args,
        exceptions: Tuple[Type[BaseException], ...] = (Exception,),
        max_attempts: int = 3,
        delay: float = 1.0,
        backoff: float = 2.0,
        jitter: bool = True,
        **kwargs,
    ):
        policy = RetryPolicy(tuple(exceptions), max_attempts, delay, backoff, jitter)
        return policy.call(func, *args, **kwargs)
