"""Unit tests for the retry utility."""
from __future__ import annotations

import asyncio

import pytest

from search_pager.infra.metrics.prometheus import REGISTRY
from search_pager.utils.retry import RetryError, RetryPolicy, retry

NO_WAIT = RetryPolicy(initial_delay=0.0, max_delay=0.0, jitter=False)


def sample(name: str, labels: dict[str, str]) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


@pytest.mark.unit
class TestRetryDecorator:
    """Test suite for retry decorator."""

    @pytest.mark.asyncio
    async def test_success_is_not_retried(self):
        call_count = 0

        @retry(NO_WAIT)
        async def successful_func():
            nonlocal call_count
            call_count += 1
            return "success"

        assert await successful_func() == "success"
        assert call_count == 1

    @pytest.mark.asyncio
    async def test_retries_until_success(self):
        call_count = 0

        @retry(NO_WAIT)
        async def eventually_successful():
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                raise ValueError("Not yet")
            return "success"

        assert await eventually_successful() == "success"
        assert call_count == 3

    @pytest.mark.asyncio
    async def test_exhausted_attempts_raise_retry_error(self):
        call_count = 0

        @retry(NO_WAIT, operation="search")
        async def always_fails():
            nonlocal call_count
            call_count += 1
            raise ValueError("Always fails")

        with pytest.raises(RetryError) as exc_info:
            await always_fails()

        error = exc_info.value
        assert call_count == 3
        assert str(error) == "search failed after 3 attempts: Always fails"
        assert error.operation == "search"
        assert error.attempts == 3
        assert isinstance(error.last_exception, ValueError)
        assert error.statistics.failures == ["ValueError", "ValueError"]

    @pytest.mark.asyncio
    async def test_unselected_failure_propagates(self):
        call_count = 0

        @retry(NO_WAIT.only_if(lambda e: isinstance(e, ConnectionError)))
        async def raises_type_error():
            nonlocal call_count
            call_count += 1
            raise TypeError("Not retryable")

        with pytest.raises(TypeError):
            await raises_type_error()

        assert call_count == 1

    @pytest.mark.asyncio
    async def test_cancellation_not_retried(self):
        call_count = 0

        @retry(NO_WAIT)
        async def cancelled():
            nonlocal call_count
            call_count += 1
            raise asyncio.CancelledError

        with pytest.raises(asyncio.CancelledError):
            await cancelled()

        assert call_count == 1

    @pytest.mark.asyncio
    async def test_operation_resolved_per_call(self):
        """A callable label names each call after its arguments."""
        failed: set[str] = set()

        @retry(NO_WAIT, operation=lambda op, *_, **__: op)
        async def send(op: str, path: str) -> str:
            if op not in failed:
                failed.add(op)
                raise ConnectionError(path)
            return path

        labels = {"operation": "label_open_pit", "attempt_number": "2"}
        other = {"operation": "label_count", "attempt_number": "2"}
        before, before_other = sample("retry_attempts_total", labels), sample("retry_attempts_total", other)

        assert await send("label_open_pit", "/findings/_pit") == "/findings/_pit"

        assert sample("retry_attempts_total", labels) == before + 1
        assert sample("retry_attempts_total", other) == before_other

    @pytest.mark.asyncio
    async def test_operation_defaults_to_function_name(self):
        attempts = 0

        @retry(NO_WAIT.only_if(lambda e: True))
        async def flaky_lookup():
            nonlocal attempts
            attempts += 1
            if attempts == 1:
                raise ValueError("once")
            return "ok"

        labels = {"operation": "flaky_lookup", "attempts_needed": "2"}
        before = sample("retry_success_after_failure_total", labels)

        await flaky_lookup()

        assert sample("retry_success_after_failure_total", labels) == before + 1


@pytest.mark.unit
class TestRetryPolicy:
    """Test suite for backoff delays."""

    def test_exponential_backoff_without_jitter(self):
        policy = RetryPolicy(initial_delay=0.5, exponential_base=2.0, jitter=False)

        assert [policy.backoff(n) for n in range(1, 5)] == [0.5, 1.0, 2.0, 4.0]

    def test_delay_capped(self):
        policy = RetryPolicy(initial_delay=1.0, max_delay=3.0, jitter=False)

        assert policy.backoff(10) == 3.0

    def test_jitter_never_exceeds_delay(self):
        policy = RetryPolicy(initial_delay=2.0, max_delay=2.0, jitter=True)

        for _ in range(20):
            assert 1.0 <= policy.backoff(3) <= 2.0

    def test_only_if_keeps_backoff(self):
        policy = RetryPolicy(max_attempts=5, initial_delay=0.25)

        narrowed = policy.only_if(lambda e: False)

        assert narrowed.max_attempts == 5
        assert narrowed.initial_delay == 0.25
        assert narrowed.retry_if(ValueError()) is False
        assert policy.retry_if(ValueError()) is True

    def test_at_least_one_attempt(self):
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=0)
