"""Retry policy for Notion API requests.

* :func:`should_retry` -- is a failed attempt worth repeating?
* :func:`compute_backoff` -- how long to wait before the next attempt.
"""

from __future__ import annotations

import random

import httpx

RETRYABLE_STATUSES: frozenset[int] = frozenset({429, 500, 502, 503, 504})

RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
)


def should_retry(
    status_code: int | None,
    exception: Exception | None,
    attempt: int,
    max_attempts: int,
) -> bool:
    """Decide whether attempt number *attempt* (0-indexed) may be repeated.

    A retry needs budget left (``attempt + 1 < max_attempts``) and either a
    retryable status code or a transport-level exception.
    """
    if attempt + 1 >= max_attempts:
        return False
    if exception is not None:
        return isinstance(exception, RETRYABLE_EXCEPTIONS)
    return status_code in RETRYABLE_STATUSES


def compute_backoff(
    attempt: int,
    base: float = 1.0,
    maximum: float = 30.0,
    jitter: bool = True,
    retry_after: float | None = None,
) -> float:
    """Seconds to wait before retrying attempt *attempt* (0-indexed).

    A server-provided ``Retry-After`` wins; otherwise the delay grows as
    ``base * 2**attempt`` up to *maximum*.  Jitter scales the result to
    50–100 % of its value.
    """
    delay = retry_after if retry_after is not None else min(base * (2 ** attempt), maximum)
    if jitter:
        delay *= 0.5 + random.random() * 0.5
    return delay
