"""Tenacity retry wrapper for row delivery, driven by RetryConfig."""

from __future__ import annotations

from collections.abc import Callable

import structlog
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .config import RetryConfig
from .errors import RecordError

logger = structlog.get_logger()


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome is not None else None
    logger.warning(
        "row_delivery_retrying",
        attempt=state.attempt_number,
        error=str(exc),
    )


def with_retry(
    config: RetryConfig,
    *,
    retryable_exceptions: tuple[type[BaseException], ...] = (Exception,),
) -> Callable:
    """Return a tenacity retry decorator configured from *config*.

    :class:`RecordError` is never retried: a record that cannot be converted
    will not convert on the next attempt either.

    Usage::

        @with_retry(config.retry)
        async def deliver(row: str) -> None: ...
    """
    return retry(
        stop=stop_after_attempt(config.max_attempts),
        wait=wait_exponential(
            multiplier=config.multiplier,
            min=config.initial_wait_seconds,
            max=config.max_wait_seconds,
        ),
        retry=(
            retry_if_exception_type(retryable_exceptions)
            & retry_if_not_exception_type(RecordError)
        ),
        before_sleep=_log_retry,
        reraise=True,
    )
