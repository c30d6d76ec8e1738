"""
Bounded retry with jittered backoff.

The policy is a plain value (max attempts, backoff function, retryable-error
predicate, sleep function) so that it can be tested with a fake clock and
reused for any callable.

Example
-------
from convex_sdk.utils.retry import RetryPolicy

policy = RetryPolicy.jittered(
    max_attempts=5,
    base=1.0,
    jitter=2.0,
    retry_if=lambda exc: isinstance(exc, TimeoutError),
)
result = policy.call(flaky, arg1, key=value)

Notes
-----
- The first call counts as attempt 1; ``max_attempts`` bounds the total.
- When attempts are exhausted the last exception is re-raised unchanged.
- Exceptions rejected by ``retry_if`` propagate immediately.
- ``on_retry`` receives (attempt_index, exception, sleep_seconds) before each sleep.
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TypeVar

__all__ = [
    "RetryPolicy",
    "jittered_delay",
]

T = TypeVar("T")

Backoff = Callable[[int], float]
RetryPredicate = Callable[[BaseException], bool]


def jittered_delay(base: float, jitter: float, *, rng: Optional[random.Random] = None) -> float:
    """
    Return ``base + U(0, jitter)`` seconds.

    A fixed floor plus a uniform spread keeps concurrent senders that failed
    together from retrying in lock-step.
    """
    if base < 0 or jitter < 0:
        raise ValueError("base and jitter must be non-negative")
    uniform = rng.uniform if rng is not None else random.uniform
    return float(base) + uniform(0.0, float(jitter))


def _always(_exc: BaseException) -> bool:
    return True


@dataclass
class RetryPolicy:
    """Retry a callable up to ``max_attempts`` times while ``retry_if`` holds."""

    max_attempts: int = 20
    backoff: Backoff = field(default=lambda _attempt: jittered_delay(1.0, 2.0))
    retry_if: RetryPredicate = _always
    sleep: Callable[[float], None] = time.sleep
    on_retry: Optional[Callable[[int, BaseException, float], None]] = None

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

    @classmethod
    def jittered(
        cls,
        *,
        max_attempts: int = 20,
        base: float = 1.0,
        jitter: float = 2.0,
        retry_if: RetryPredicate = _always,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None,
        on_retry: Optional[Callable[[int, BaseException, float], None]] = None,
    ) -> "RetryPolicy":
        return cls(
            max_attempts=max_attempts,
            backoff=lambda _attempt: jittered_delay(base, jitter, rng=rng),
            retry_if=retry_if,
            sleep=sleep,
            on_retry=on_retry,
        )

    def call(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        attempt = 0
        while True:
            attempt += 1
            try:
                return fn(*args, **kwargs)
            except Exception as exc:
                if not self.retry_if(exc) or attempt >= self.max_attempts:
                    raise
                sleep_s = max(0.0, float(self.backoff(attempt)))
                if self.on_retry is not None:
                    self.on_retry(attempt, exc, sleep_s)
                self.sleep(sleep_s)
