r"""Constant backoff strategy."""

from __future__ import annotations

__all__ = ["ConstantBackoff"]

from retryrequest.backoff.base import BaseBackoffStrategy
from retryrequest.core.validation import validate_retry_number


class ConstantBackoff(BaseBackoffStrategy):
    """Constant/fixed backoff strategy.

    Returns the same delay before every retry, regardless of the retry
    number.

    This strategy is useful for testing or when you know the exact delay
    that works best for a particular service.

    Args:
        delay: The fixed delay in milliseconds (default: 0.0).

    Example:
        ```pycon
        >>> from retryrequest.backoff import ConstantBackoff
        >>> backoff = ConstantBackoff(delay=250.0)
        >>> backoff.calculate(1)
        250.0
        >>> backoff.calculate(10)
        250.0

        ```
    """

    def __init__(self, delay: float = 0.0) -> None:
        if delay < 0:
            msg = f"delay must be non-negative, got {delay}"
            raise ValueError(msg)

        self.delay = float(delay)

    def calculate(self, retry_number: int) -> float:
        validate_retry_number(retry_number)
        return self.delay

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(delay={self.delay})"
