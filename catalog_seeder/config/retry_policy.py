"""Retry policy for TMDB communication.

This module defines which HTTP errors are considered transient and
builds the per-request retry policy using the Tenacity library.
"""

import requests
import logging

from tenacity import retry, stop_after_attempt, wait_incrementing, retry_if_exception

logger = logging.getLogger(__name__)

RETRIABLE_STATUS_CODES = {429, 500, 502, 503, 504}


def log_retry(retry_state):
    """Logs details of a failed request before attempting a retry.

    Args:
        retry_state: The current state of the tenacity retry call.
    """

    logger.warning(
        "TMDB_RETRY_DELAY | Attempt: %s | Reason: %s | Waiting: %ss",
        retry_state.attempt_number,
        retry_state.outcome.exception(),
        retry_state.next_action.sleep,
    )


def is_transient_error(exception):
    """Determines if an exception should trigger a retry attempt.

    Retries on connection issues, timeouts and specific HTTP status codes (429, 5xx).

    Args:
        exception: The exception raised during the HTTP request.

    Returns:
        bool: True if the error is transient and should be retried, False otherwise.
    """

    if isinstance(exception, (requests.exceptions.ConnectionError, requests.exceptions.Timeout)):
        return True

    if isinstance(exception, requests.exceptions.HTTPError):
        if exception.response is None:
            return False
        return exception.response.status_code in RETRIABLE_STATUS_CODES

    return False


def build_retry_policy(max_attempts: int = 1, *, max_wait: float = 5):
    """Builds the retry decorator applied to every raw TMDB GET.

    With max_attempts=1 a failing request is not retried at all.

    Args:
        max_attempts: Total attempts per request, including the first one.
        max_wait: Upper bound in seconds for the incrementing wait between attempts.
    """
    return retry(
        retry=retry_if_exception(is_transient_error),
        wait=wait_incrementing(start=1, increment=1, max=max_wait),
        stop=stop_after_attempt(max(1, max_attempts)),
        reraise=True,
        before_sleep=log_retry,
    )
