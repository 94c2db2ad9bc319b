from __future__ import annotations

import asyncio
from functools import wraps
import logging
import time
from typing import TYPE_CHECKING, ParamSpec, TypeVar

from search_pager.infra.metrics.tracking import (
    track_retry_attempt,
    track_retry_exhausted,
    track_retry_success,
)

from .exceptions import RetryError, RetryStatistics
from .strategies import RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def retry(
    policy: RetryPolicy | None = None,
    *,
    operation: str | Callable[..., str] | None = None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Re-send an async call on the failures ``policy`` selects.

    Failures the policy does not select propagate unchanged, as does
    cancellation. When every attempt fails, ``RetryError`` is raised from the
    last failure.

    Args:
        policy: Backoff policy (default ``RetryPolicy()``).
        operation: Label for logs and metrics. Either a fixed name or a
            callable receiving the call's arguments, for functions that serve
            several operations. Defaults to the function name.

    Example:
        send = retry(policy, operation=lambda op, *_, **__: op)(send_once)
        await send("open_pit", "POST", "/findings/_pit")
    """
    policy = policy or RetryPolicy()

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            if callable(operation):
                name = operation(*args, **kwargs)
            else:
                name = operation or func.__name__
            statistics = RetryStatistics()

            for attempt in range(1, policy.max_attempts + 1):
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    if not policy.retry_if(e):
                        raise

                    if attempt == policy.max_attempts:
                        statistics.end_time = time.monotonic()
                        track_retry_exhausted(name)
                        logger.error(
                            f"{name} failed after {attempt} attempts",
                            extra={
                                "operation": name,
                                "attempts": attempt,
                                "last_exception": str(e),
                                "total_delay": statistics.total_delay,
                                "duration": statistics.duration,
                            },
                        )
                        raise RetryError(name, e, attempt, statistics) from e

                    delay = policy.backoff(attempt)
                    statistics.record(e, delay)
                    track_retry_attempt(name, attempt + 1)
                    logger.warning(
                        f"Retrying {name} in {delay:.2f}s ({attempt}/{policy.max_attempts} failed)",
                        extra={
                            "operation": name,
                            "attempt": attempt,
                            "max_attempts": policy.max_attempts,
                            "delay": delay,
                            "exception": str(e),
                        },
                    )
                    await asyncio.sleep(delay)
                    continue

                if attempt > 1:
                    track_retry_success(name, attempt)
                return result

            msg = f"{name} retry loop ended without a result"
            raise RuntimeError(msg)

        return wrapper

    return decorator
