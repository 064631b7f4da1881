"""Retry policy for document fetches, built on tenacity.

Transport errors and transient HTTP statuses are retried with exponential
backoff; every other outcome is final on the first attempt.
"""

from typing import Any

import logfire
import requests
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

# Statuses worth another attempt; anything else is final
RETRY_STATUSES = frozenset((429, 500, 502, 503, 504))


class RetryableStatusError(requests.HTTPError):
    """A response status that may succeed on a later attempt."""

    pass


RETRYABLE_ERRORS = (requests.ConnectionError, requests.Timeout, RetryableStatusError)


def raise_for_retry_status(response: requests.Response) -> requests.Response:
    """Raise RetryableStatusError if ``response`` carries a transient status."""
    if response.status_code in RETRY_STATUSES:
        raise RetryableStatusError(f'HTTP {response.status_code}', response=response)
    return response


def fetch_retryer(max_attempts: int = 3, wait_min: float = 1.0, wait_max: float = 10.0) -> Retrying:
    """Create the retrying policy for one fetch.

    Args:
        max_attempts: Attempts per URL, the first one included
        wait_min: Minimum backoff between attempts in seconds
        wait_max: Maximum backoff between attempts in seconds

    Returns:
        A tenacity Retrying that reraises the last error once attempts run out

    """
    return Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(min=wait_min, max=wait_max),
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        before_sleep=log_fetch_retry,
        reraise=True,
    )


def log_fetch_retry(retry_state: Any) -> None:
    """Report a failed attempt before tenacity sleeps.

    The retried callable is expected to take the URL as its first argument.
    """
    exception = retry_state.outcome.exception()
    url = retry_state.args[0] if retry_state.args else None
    logfire.warn(
        'Retrying fetch',
        url=url,
        attempt=retry_state.attempt_number,
        error=str(exception) if exception else 'Unknown error',
    )
