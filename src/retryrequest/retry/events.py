r"""Event surface through which adapters observe a coordinator.

Adapters subclass ``CoordinatorListener`` and override the hooks they
need. Every hook is a no-op by default.
"""

from __future__ import annotations

__all__ = ["CoordinatorListener"]

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from retryrequest.retry.coordinator import Attempt, RetryCoordinator
    from retryrequest.retry.decider import Outcome


class CoordinatorListener:
    """Receives the lifecycle events of a ``RetryCoordinator``.

    Hooks are invoked synchronously, in the order the transitions occur.
    No hook is invoked once the coordinator has been aborted.
    """

    def on_attempt_start(self, coordinator: RetryCoordinator, attempt: Attempt) -> None:
        """Called when a new attempt is about to be issued."""

    def on_outcome(
        self,
        coordinator: RetryCoordinator,
        attempt: Attempt,
        outcome: Outcome,
        will_retry: bool,
    ) -> None:
        """Called once per attempt when its outcome has been evaluated.

        ``will_retry`` tells whether another attempt follows this one.
        """

    def on_retry_scheduled(
        self, coordinator: RetryCoordinator, attempt: Attempt, delay: float
    ) -> None:
        """Called when the next attempt is scheduled ``delay`` milliseconds from now."""

    def on_terminal(self, coordinator: RetryCoordinator) -> None:
        """Called once when the coordinator reaches ``COMPLETED`` or ``FAILED``."""

    def on_data(self, coordinator: RetryCoordinator, attempt: Attempt, chunk: Any) -> None:
        """Called for each body chunk of the current or final attempt."""

    def on_body_end(self, coordinator: RetryCoordinator, attempt: Attempt) -> None:
        """Called when the body of the final attempt ended."""

    def on_body_error(
        self, coordinator: RetryCoordinator, attempt: Attempt, error: BaseException
    ) -> None:
        """Called when reading the body of the final attempt failed."""
