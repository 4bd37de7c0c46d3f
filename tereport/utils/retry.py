# ==============================================================================
# Retry Configuration
# ==============================================================================
"""
Retry policy for upstream HTTP calls (authoring service, portal, log-puller).

Only transport failures (connection refused, timeouts, dropped connections)
are retried. An HTTP error status is an answer, not a transient failure, and
is passed straight back to the caller.

    retry_standard: 5 attempts, backoff 1s, 2s, 4s, 8s (exports, event logs)
    retry_light:    3 attempts, backoff 1s, 2s (name lookups)

Tests switch off the backoff with:
    monkeypatch.setattr(SomeSource._get.retry, "wait", wait_none())
"""

import logging
from typing import Tuple, Type

import httpx
import requests
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

RETRY_ATTEMPTS = 5
RETRY_ATTEMPTS_LIGHT = 3
BACKOFF_MIN_SECONDS = 1
BACKOFF_MAX_SECONDS = 8

ExceptionTypes = Tuple[Type[BaseException], ...]

HTTPX_RETRY_EXCEPTIONS: ExceptionTypes = (httpx.TransportError,)
REQUESTS_RETRY_EXCEPTIONS: ExceptionTypes = (
    requests.exceptions.ConnectionError,
    requests.exceptions.Timeout,
)


def _warn_before_sleep(logger: logging.Logger, attempts: int):
    def before_sleep(retry_state: RetryCallState) -> None:
        outcome = retry_state.outcome
        logger.warning(
            "%s failed (attempt %d/%d), retrying in %.1fs: %s",
            getattr(retry_state.fn, "__qualname__", "request"),
            retry_state.attempt_number,
            attempts,
            retry_state.next_action.sleep if retry_state.next_action else 0.0,
            outcome.exception() if outcome else None,
        )

    return before_sleep


def _transport_retry(exception_types: ExceptionTypes, logger: logging.Logger, attempts: int):
    return retry(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(min=BACKOFF_MIN_SECONDS, max=BACKOFF_MAX_SECONDS),
        retry=retry_if_exception_type(exception_types),
        before_sleep=_warn_before_sleep(logger, attempts),
        reraise=True,
    )


def retry_standard(exception_types: ExceptionTypes, logger: logging.Logger):
    """
    Retry decorator for fetches a report cannot do without.

    Works on plain and async functions alike; the last exception is
    re-raised once attempts run out.

    Args:
        exception_types: Transport exception types worth retrying
        logger: Logger that receives a warning before each retry

    Example:
        @retry_standard(HTTPX_RETRY_EXCEPTIONS, logger)
        async def _get(self, url):
            ...
    """
    return _transport_retry(exception_types, logger, RETRY_ATTEMPTS)


def retry_light(exception_types: ExceptionTypes, logger: logging.Logger):
    """Retry decorator for lookups whose failure the caller tolerates."""
    return _transport_retry(exception_types, logger, RETRY_ATTEMPTS_LIGHT)
