r"""Configuration of one retried operation."""

from __future__ import annotations

__all__ = ["RetryPolicy"]

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from retryrequest.backoff import BaseBackoffStrategy, ExponentialJitterBackoff
from retryrequest.core.config import DEFAULT_MAX_RETRIES, DEFAULT_OBJECT_MODE
from retryrequest.core.validation import validate_retry_params
from retryrequest.retry.decider import should_retry_request
from retryrequest.transport import HttpxAttemptFactory

if TYPE_CHECKING:
    from retryrequest.retry.attempt import AttemptFactory
    from retryrequest.retry.decider import RetryPredicate


@dataclass(frozen=True)
class RetryPolicy:
    """Retry behavior of one operation.

    A policy is immutable for the lifetime of the operation. It is built
    once from the caller's configuration merged with the defaults.

    Args:
        max_retries: Maximum number of retries beyond the first attempt.
            Must be >= 0.
        predicate: Decides whether an outcome is retried. Replaces the
            default policy entirely when given.
        request_factory: Performs one attempt.
        object_mode: Whether the body is made of parsed records rather
            than raw byte chunks.
        backoff_strategy: Computes the delay before each retry.

    Example:
        ```pycon
        >>> from retryrequest.retry.config import RetryPolicy
        >>> policy = RetryPolicy(request_factory=lambda target, reporter: None)
        >>> policy.max_retries
        2
        >>> policy.merge(max_retries=0, predicate=None).max_retries
        0

        ```
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    predicate: RetryPredicate = should_retry_request
    request_factory: AttemptFactory = field(default_factory=HttpxAttemptFactory)
    object_mode: bool = DEFAULT_OBJECT_MODE
    backoff_strategy: BaseBackoffStrategy = field(default_factory=ExponentialJitterBackoff)

    def __post_init__(self) -> None:
        """Validate configuration parameters after initialization.

        Raises:
            ValueError: If any parameter fails validation.
        """
        validate_retry_params(
            max_retries=self.max_retries,
            request_factory=self.request_factory,
            predicate=self.predicate,
        )
        if not isinstance(self.backoff_strategy, BaseBackoffStrategy):
            msg = (
                "backoff_strategy must be a BaseBackoffStrategy, "
                f"got {type(self.backoff_strategy).__name__}"
            )
            raise ValueError(msg)

    @property
    def max_attempts(self) -> int:
        """Total number of attempts allowed, the first one included."""
        return self.max_retries + 1

    def merge(self, **overrides: Any) -> RetryPolicy:
        """Create a new policy with specified parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new RetryPolicy instance with overrides applied.
        """
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
