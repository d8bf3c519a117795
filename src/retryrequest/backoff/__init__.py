r"""Backoff strategies for retry delays.

This package provides the delay calculation used between attempts:
exponential growth with jitter by default, and a constant delay for
tests or fixed-rate callers.
"""

from __future__ import annotations

__all__ = [
    "BaseBackoffStrategy",
    "ConstantBackoff",
    "ExponentialJitterBackoff",
    "get_next_retry_delay",
]

from retryrequest.backoff.base import BaseBackoffStrategy
from retryrequest.backoff.constant import ConstantBackoff
from retryrequest.backoff.exponential import ExponentialJitterBackoff, get_next_retry_delay
