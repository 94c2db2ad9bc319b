"""Backoff policy for re-sending failed requests."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
import random


def _any_exception(exc: Exception) -> bool:
    return True


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Which failures are re-sent, how often, and how long to wait between.

    Attributes:
        max_attempts: Total attempts, including the first call.
        initial_delay: Delay after the first failure, in seconds.
        max_delay: Delay ceiling, in seconds.
        exponential_base: Backoff multiplier per failed attempt.
        jitter: Spread delays over ``[delay / 2, delay]``.
        retry_if: Predicate selecting the failures worth another attempt.
    """

    max_attempts: int = 3
    initial_delay: float = 0.5
    max_delay: float = 10.0
    exponential_base: float = 2.0
    jitter: bool = True
    retry_if: Callable[[Exception], bool] = _any_exception

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            msg = f"max_attempts must be at least 1, got {self.max_attempts}"
            raise ValueError(msg)

    def backoff(self, failures: int) -> float:
        """Delay before the next attempt after ``failures`` failed attempts."""
        delay = min(self.initial_delay * self.exponential_base ** (failures - 1), self.max_delay)
        if self.jitter:
            delay = delay / 2 + random.uniform(0, delay / 2)
        return delay

    def only_if(self, predicate: Callable[[Exception], bool]) -> RetryPolicy:
        """Same backoff, narrower set of retried failures."""
        return replace(self, retry_if=predicate)
