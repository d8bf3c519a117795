r"""Exponential backoff strategy with jitter."""

from __future__ import annotations

__all__ = ["ExponentialJitterBackoff", "get_next_retry_delay"]

import random

from retryrequest.backoff.base import BaseBackoffStrategy
from retryrequest.core.config import BASE_DELAY_MS, MAX_JITTER_MS
from retryrequest.core.validation import validate_retry_number


def get_next_retry_delay(retry_number: int) -> float:
    """Compute the delay before the Nth retry.

    The delay is ``2 ** retry_number`` seconds plus a uniformly
    distributed jitter in ``[0, 1000)`` milliseconds, so operations that
    fail together do not retry together.

    Args:
        retry_number: The retry number (1-indexed).

    Returns:
        The delay in milliseconds, in
        ``[2 ** retry_number * 1000, 2 ** retry_number * 1000 + 1000)``.

    Raises:
        ValueError: If retry_number is lower than 1.

    Example:
        ```pycon
        >>> from retryrequest import get_next_retry_delay
        >>> 2000.0 <= get_next_retry_delay(1) < 3000.0
        True
        >>> 8000.0 <= get_next_retry_delay(3) < 9000.0
        True

        ```
    """
    validate_retry_number(retry_number)
    return (2**retry_number) * BASE_DELAY_MS + random.random() * MAX_JITTER_MS  # noqa: S311


class ExponentialJitterBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy with jitter.

    This is the default backoff strategy. It delegates to
    ``get_next_retry_delay``.

    Example:
        ```pycon
        >>> from retryrequest.backoff import ExponentialJitterBackoff
        >>> backoff = ExponentialJitterBackoff()
        >>> 4000.0 <= backoff.calculate(2) < 5000.0
        True

        ```
    """

    def calculate(self, retry_number: int) -> float:
        return get_next_retry_delay(retry_number)

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}()"
