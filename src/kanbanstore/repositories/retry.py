"""Bounded retry with exponential backoff for contended transactions."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TypeVar

from ..errors import ContentionError, StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def with_retry(
    fn: Callable[[], T],
    *,
    operation: str,
    max_retries: int = 3,
    backoff: float = 0.1,
) -> T:
    """Call ``fn`` until it succeeds, retrying only retryable storage errors.

    ``max_retries`` is the total number of attempts. Attempt ``n`` (zero-based)
    that fails waits ``backoff * 2**n`` seconds before the next one. Business
    errors and non-retryable storage errors propagate on the first attempt.

    Raises:
        ContentionError: every attempt failed with a retryable error
    """
    if max_retries < 1:
        raise ValueError("max_retries must be at least 1")

    for attempt in range(max_retries):
        try:
            return fn()
        except StorageError as e:
            if not e.retryable:
                raise
            if attempt + 1 >= max_retries:
                logger.error("%s: retries exhausted after %d attempts", operation, max_retries)
                raise ContentionError(operation, max_retries, e.message) from e
            wait_s = backoff * (2**attempt)
            logger.warning(
                "%s failed, retrying in %.2fs (%d/%d): %s",
                operation,
                wait_s,
                attempt + 1,
                max_retries,
                e.message,
            )
            time.sleep(wait_s)

    raise AssertionError("unreachable")
