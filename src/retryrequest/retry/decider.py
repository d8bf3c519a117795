r"""Retry decision logic for attempt outcomes.

This module provides the ``Outcome`` of a single attempt and the default
policy deciding whether that outcome is transient and worth retrying.
"""

from __future__ import annotations

__all__ = ["Outcome", "RetryPredicate", "should_retry_request"]

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from retryrequest.core.config import (
    INFORMATIONAL_STATUS_CODES,
    RATE_LIMITED_STATUS_CODE,
    SERVER_ERROR_STATUS_CODES,
)

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Outcome:
    """The result of one attempt.

    Exactly one of ``response`` and ``error`` is set.

    Attributes:
        response: The response descriptor reported by the attempt. Any
            object exposing a ``status_code`` attribute is accepted, for
            example ``httpx.Response``.
        error: The transport error reported when no response was produced.
    """

    response: Any = None
    error: BaseException | None = None

    def __post_init__(self) -> None:
        if (self.response is None) == (self.error is None):
            msg = "an outcome carries either a response or an error"
            raise ValueError(msg)

    @property
    def status_code(self) -> int | None:
        """The response status code, or ``None`` for a transport error."""
        if self.response is None:
            return None
        return self.response.status_code


class RetryPredicate(Protocol):
    """Decides whether an outcome warrants another attempt."""

    def __call__(self, outcome: Outcome) -> bool: ...


def should_retry_request(outcome: Outcome) -> bool:
    """Default retry policy.

    The checks are evaluated in this order:

    1. No response was produced (transport error): retry.
    2. Informational status (100-199): retry.
    3. Rate limited (429): retry.
    4. Server error (500-599): retry.
    5. Anything else: do not retry.

    Args:
        outcome: The outcome of the attempt.

    Returns:
        ``True`` if the attempt should be retried, otherwise ``False``.

    Example:
        ```pycon
        >>> from unittest.mock import Mock
        >>> from retryrequest.retry.decider import Outcome, should_retry_request
        >>> should_retry_request(Outcome(response=Mock(status_code=503)))
        True
        >>> should_retry_request(Outcome(response=Mock(status_code=404)))
        False
        >>> should_retry_request(Outcome(error=OSError("connection reset")))
        True

        ```
    """
    status_code = outcome.status_code
    if status_code is None:
        logger.debug(f"No response produced ({outcome.error!r}), retryable")
        return True
    if status_code in INFORMATIONAL_STATUS_CODES:
        return True
    if status_code == RATE_LIMITED_STATUS_CODE:
        return True
    return status_code in SERVER_ERROR_STATUS_CODES
