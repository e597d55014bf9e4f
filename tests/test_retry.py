"""Tests for tessera_sink.retry."""

from __future__ import annotations

import pytest

from tessera_sink.config import RetryConfig
from tessera_sink.errors import ErrorCode, RecordValidationError
from tessera_sink.retry import with_retry


@pytest.fixture
def config() -> RetryConfig:
    return RetryConfig(max_attempts=3, initial_wait_seconds=0.01, max_wait_seconds=0.1)


class TestWithRetry:
    @pytest.mark.asyncio
    async def test_succeeds_first_try(self, config: RetryConfig):
        call_count = 0

        @with_retry(config)
        async def fn():
            nonlocal call_count
            call_count += 1
            return "ok"

        assert await fn() == "ok"
        assert call_count == 1

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self, config: RetryConfig):
        call_count = 0

        @with_retry(config)
        async def fn():
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                raise ConnectionError("transient")
            return "recovered"

        assert await fn() == "recovered"
        assert call_count == 3

    @pytest.mark.asyncio
    async def test_exhausts_retries_and_raises(self, config: RetryConfig):
        call_count = 0

        @with_retry(config)
        async def fn():
            nonlocal call_count
            call_count += 1
            raise ConnectionError("channel closed")

        with pytest.raises(ConnectionError, match="channel closed"):
            await fn()
        assert call_count == 3

    @pytest.mark.asyncio
    async def test_custom_retryable_exceptions(self):
        config = RetryConfig(max_attempts=5, initial_wait_seconds=0.01, max_wait_seconds=0.1)
        call_count = 0

        @with_retry(config, retryable_exceptions=(ConnectionError,))
        async def fn():
            nonlocal call_count
            call_count += 1
            raise TypeError("not retryable")

        with pytest.raises(TypeError):
            await fn()
        assert call_count == 1

    @pytest.mark.asyncio
    async def test_record_errors_are_not_retried(self, config: RetryConfig):
        call_count = 0

        @with_retry(config)
        async def fn():
            nonlocal call_count
            call_count += 1
            raise RecordValidationError(ErrorCode.WRONG_VALUE_TYPE, "bad row")

        with pytest.raises(RecordValidationError):
            await fn()
        assert call_count == 1
