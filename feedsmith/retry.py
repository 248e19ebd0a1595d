"""Standardized retry logic for feed transports.

Provides a centralized way to create retry configurations using tenacity.
"""

from collections.abc import Callable
from typing import Any

import logfire
from tenacity import (
    BaseRetrying,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from feedsmith.settings import TransportSettings


def get_retryer(
    max_attempts: int = 3,
    wait_min: float = 1.0,
    wait_max: float = 10.0,
    wait_multiplier: float = 1.0,
    exceptions: tuple[type[Exception], ...] = (OSError,),
    log_callback: Callable[[Any], None] | None = None,
    reraise: bool = True,
) -> BaseRetrying:
    """Create a standardized tenacity Retrying object.

    Args:
        max_attempts: Maximum number of attempts, including the first one.
        wait_min: Minimum wait time between retries in seconds.
        wait_max: Maximum wait time between retries in seconds.
        wait_multiplier: Multiplier for exponential backoff.
        exceptions: Tuple of exception types considered transient.
        log_callback: Optional callback function for before_sleep logging.
                      Receives the retry state.
        reraise: Whether to reraise the last exception after all attempts fail.

    Returns:
        A configured tenacity.Retrying object.

    """
    return Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=wait_multiplier, min=wait_min, max=wait_max),
        retry=retry_if_exception_type(exceptions),
        before_sleep=log_callback,
        reraise=reraise,
    )


def log_retry(retry_state: Any) -> None:
    """Default logging callback for transport retries.

    Args:
        retry_state: The tenacity retry state object.

    """
    exception = retry_state.outcome.exception()
    attempt = retry_state.attempt_number
    logfire.warn(
        'Retrying transport operation', attempt=attempt, error=str(exception) if exception else 'Unknown error'
    )


def transport_retryer(settings: TransportSettings) -> BaseRetrying:
    """Build the retryer used around every remote copy or delete.

    Args:
        settings: Transport retry and timeout settings.

    Returns:
        A Retrying object that retries OS level and timeout errors.

    """
    return get_retryer(
        max_attempts=settings.retry_attempts,
        wait_min=settings.retry_wait_min,
        wait_max=settings.retry_wait_max,
        exceptions=(OSError, TimeoutError),
        log_callback=log_retry,
    )
