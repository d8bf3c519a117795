r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy"]

from abc import ABC, abstractmethod


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies.

    A backoff strategy determines how long to wait before issuing the
    next attempt after a retryable outcome.
    """

    @abstractmethod
    def calculate(self, retry_number: int) -> float:
        """Calculate the delay before a given retry.

        Args:
            retry_number: The retry number (1-indexed). For example,
                retry_number=1 is the delay before the first retry,
                retry_number=2 before the second retry, etc.

        Returns:
            The delay in milliseconds before the next attempt.
        """
