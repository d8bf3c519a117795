r"""Exceptions raised or reported by retryrequest."""

from __future__ import annotations

__all__ = ["RetryRequestError", "TransportError"]

from typing import Any


class RetryRequestError(Exception):
    """Base class for all retryrequest errors."""


class TransportError(RetryRequestError):
    """Raised when an attempt could not produce any response.

    This covers network failures, DNS failures and connections dropped
    mid-flight. The default retry policy always treats it as transient.

    Args:
        target: The request target of the failed attempt.
        message: Human readable description of the failure.
        attempt: The 1-indexed attempt that failed, if known.
        cause: The underlying exception reported by the transport.

    Example:
        ```pycon
        >>> from retryrequest.exceptions import TransportError
        >>> error = TransportError(
        ...     target="https://api.example.com",
        ...     message="connection refused",
        ...     attempt=3,
        ... )
        >>> error.attempt
        3
        >>> str(error)
        'connection refused'

        ```
    """

    def __init__(
        self,
        target: Any,
        message: str,
        attempt: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.target = target
        self.attempt = attempt
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause
