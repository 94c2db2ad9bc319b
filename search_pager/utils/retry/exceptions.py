"""Retry outcome types."""

from __future__ import annotations

from dataclasses import dataclass, field
import time


@dataclass
class RetryStatistics:
    """What one retried call went through before it gave up."""

    start_time: float = field(default_factory=time.monotonic)
    end_time: float = 0.0
    total_delay: float = 0.0
    failures: list[str] = field(default_factory=list)

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    def record(self, exc: Exception, delay: float) -> None:
        self.failures.append(type(exc).__name__)
        self.total_delay += delay


class RetryError(Exception):
    """Every attempt of ``operation`` failed with a retryable error."""

    def __init__(
        self,
        operation: str,
        last_exception: Exception,
        attempts: int,
        statistics: RetryStatistics,
    ) -> None:
        self.operation = operation
        self.last_exception = last_exception
        self.attempts = attempts
        self.statistics = statistics
        super().__init__(f"{operation} failed after {attempts} attempts: {last_exception}")
