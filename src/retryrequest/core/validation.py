r"""Parameter validation utilities for retried requests.

This module provides validation functions to ensure retry parameters
meet the required constraints before a coordinator is built from them.
"""

from __future__ import annotations

__all__ = ["validate_retry_number", "validate_retry_params"]

from typing import Any


def validate_retry_params(max_retries: int, request_factory: Any, predicate: Any) -> None:
    """Validate retry parameters.

    Args:
        max_retries: Maximum number of retries beyond the first attempt.
            Must be an integer >= 0. A value of 0 means only the initial
            attempt is made.
        request_factory: The callable performing one attempt.
        predicate: The callable deciding whether an outcome is retried.

    Raises:
        ValueError: If max_retries is negative or not an integer, or if
            request_factory or predicate is not callable.

    Example:
        ```pycon
        >>> from retryrequest.core.validation import validate_retry_params
        >>> validate_retry_params(2, print, bool)
        >>> validate_retry_params(-1, print, bool)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: max_retries must be >= 0, got -1

        ```
    """
    if isinstance(max_retries, bool) or not isinstance(max_retries, int):
        msg = f"max_retries must be an integer, got {max_retries!r}"
        raise ValueError(msg)
    if max_retries < 0:
        msg = f"max_retries must be >= 0, got {max_retries}"
        raise ValueError(msg)
    if not callable(request_factory):
        msg = f"request_factory must be callable, got {request_factory!r}"
        raise ValueError(msg)
    if not callable(predicate):
        msg = f"predicate must be callable, got {predicate!r}"
        raise ValueError(msg)


def validate_retry_number(retry_number: int) -> None:
    """Validate the 1-indexed number of a retry.

    Args:
        retry_number: The retry number. 1 is the first retry.

    Raises:
        ValueError: If retry_number is lower than 1.
    """
    if retry_number < 1:
        msg = f"retry_number must be >= 1, got {retry_number}"
        raise ValueError(msg)
