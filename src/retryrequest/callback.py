r"""Callback view of a retried request."""

from __future__ import annotations

__all__ = ["RetryHandle"]

import logging
from typing import TYPE_CHECKING, Any

from retryrequest.retry.events import CoordinatorListener

if TYPE_CHECKING:
    from collections.abc import Callable

    from retryrequest.retry.coordinator import Attempt, RetryCoordinator

logger: logging.Logger = logging.getLogger(__name__)


class RetryHandle(CoordinatorListener):
    """Handle on a retried request reported through a single callback.

    The callback is invoked exactly once, when the operation terminates,
    with ``(error, response, body)``:

    - ``error`` is set only when the operation ends with a transport
      error. A final response is never an error, whatever its status.
    - ``body`` holds the data of the final attempt: ``bytes`` (or ``str``
      if the attempt produced text chunks) in raw mode, a list of records
      in object mode. Data of retried attempts is discarded.

    The callback is never invoked once the request is aborted.

    Args:
        coordinator: The coordinator driving the request.
        callback: Called with ``(error, response, body)`` on termination.
    """

    def __init__(
        self,
        coordinator: RetryCoordinator,
        callback: Callable[[BaseException | None, Any, Any], Any],
    ) -> None:
        self.coordinator = coordinator
        self.callback = callback
        self._chunks: list[Any] = []
        self._called = False
        coordinator.subscribe(self)

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(coordinator={self.coordinator!r})"

    @property
    def attempts(self) -> int:
        """Number of attempts issued so far."""
        return self.coordinator.retry_state.attempts_made

    def start(self) -> None:
        """Issue the first attempt immediately."""
        self.coordinator.start()

    def abort(self) -> None:
        """Cancel the request. Safe to call at any point."""
        self.coordinator.abort()

    def on_attempt_start(self, coordinator: RetryCoordinator, attempt: Attempt) -> None:
        self._chunks = []

    def on_terminal(self, coordinator: RetryCoordinator) -> None:
        outcome = coordinator.last_outcome
        if outcome is not None and outcome.error is not None:
            self._invoke(outcome.error, None, None)

    def on_data(self, coordinator: RetryCoordinator, attempt: Attempt, chunk: Any) -> None:
        self._chunks.append(chunk)

    def on_body_end(self, coordinator: RetryCoordinator, attempt: Attempt) -> None:
        self._invoke(None, coordinator.retry_state.last_response, self._collect_body())

    def on_body_error(
        self, coordinator: RetryCoordinator, attempt: Attempt, error: BaseException
    ) -> None:
        self._invoke(error, coordinator.retry_state.last_response, self._collect_body())

    def _collect_body(self) -> Any:
        chunks, self._chunks = self._chunks, []
        if self.coordinator.policy.object_mode:
            return chunks
        if chunks and isinstance(chunks[0], str):
            return "".join(chunks)
        return b"".join(chunks)

    def _invoke(self, error: BaseException | None, response: Any, body: Any) -> None:
        if self._called:
            return
        self._called = True
        logger.debug(
            f"Request to {self.coordinator.target} done after {self.attempts} attempt(s)"
            + (f" with error {error!r}" if error is not None else "")
        )
        self.callback(error, response, body)
