r"""Event-emitting view of a retried request.

``RetryStream`` renders the lifecycle of a ``RetryCoordinator`` as
events that consumers subscribe to with ``on``:

- ``response``: fired once per attempt with its response, including the
  attempts that will be retried.
- ``data``: fired for each body chunk of the final attempt. Chunks are
  held back until the attempt is known to be final, so data of retried
  attempts never reaches the consumer.
- ``error``: fired once when the operation ends with a transport error.
- ``complete``: fired once when the final body ended, with the number of
  attempts made.

Exactly one of ``error`` and ``complete`` is ever fired.
"""

from __future__ import annotations

__all__ = ["RetryStream", "STREAM_EVENTS"]

import logging
from typing import TYPE_CHECKING, Any

from retryrequest.retry.events import CoordinatorListener

if TYPE_CHECKING:
    from collections.abc import Callable

    from retryrequest.retry.coordinator import Attempt, RetryCoordinator
    from retryrequest.retry.decider import Outcome

logger: logging.Logger = logging.getLogger(__name__)

STREAM_EVENTS = ("response", "data", "error", "complete")


class RetryStream(CoordinatorListener):
    """Stream-shaped handle on a retried request.

    The first attempt is issued on the next iteration of the event loop,
    so listeners attached right after creation see every event.

    Args:
        coordinator: The coordinator driving the request.

    Attributes:
        object_mode: Whether ``data`` events carry parsed records rather
            than raw byte chunks.

    Example:
        ```pycon
        >>> import asyncio
        >>> from retryrequest import retry_request
        >>> async def main():
        ...     done = asyncio.get_running_loop().create_future()
        ...     (
        ...         retry_request("https://api.example.com/data")
        ...         .on("response", lambda response: print(response.status_code))
        ...         .on("error", done.set_exception)
        ...         .on("complete", done.set_result)
        ...     )
        ...     return await done
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(self, coordinator: RetryCoordinator) -> None:
        self.coordinator = coordinator
        self.object_mode = coordinator.policy.object_mode
        self._listeners: dict[str, list[Callable[..., Any]]] = {
            event: [] for event in STREAM_EVENTS
        }
        self._pending: list[Any] = []
        self._flowing = False
        coordinator.subscribe(self)

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(coordinator={self.coordinator!r}, object_mode={self.object_mode})"

    @property
    def attempts(self) -> int:
        """Number of attempts issued so far."""
        return self.coordinator.retry_state.attempts_made

    def on(self, event: str, listener: Callable[..., Any]) -> RetryStream:
        """Register a listener for an event.

        Args:
            event: One of ``"response"``, ``"data"``, ``"error"`` and
                ``"complete"``.
            listener: Called with the event's arguments.

        Returns:
            The stream itself, so calls can be chained.

        Raises:
            ValueError: If the event is unknown.
        """
        self._listeners_for(event).append(listener)
        return self

    def once(self, event: str, listener: Callable[..., Any]) -> RetryStream:
        """Register a listener called at most once."""

        def wrapper(*args: Any) -> None:
            self.off(event, wrapper)
            listener(*args)

        return self.on(event, wrapper)

    def off(self, event: str, listener: Callable[..., Any]) -> RetryStream:
        """Remove a listener. Does nothing if it is not registered."""
        listeners = self._listeners_for(event)
        if listener in listeners:
            listeners.remove(listener)
        return self

    def emit(self, event: str, *args: Any) -> bool:
        """Call the listeners of an event.

        Returns:
            ``True`` if the event had listeners, otherwise ``False``.
        """
        listeners = list(self._listeners_for(event))
        for listener in listeners:
            listener(*args)
        return bool(listeners)

    def start(self) -> None:
        """Schedule the first attempt on the coordinator's event loop."""
        self.coordinator.loop.call_soon(self.coordinator.start)

    def abort(self) -> None:
        """Cancel the request.

        Safe to call at any point: before the first attempt, while waiting
        for an outcome or a retry delay, and after completion.
        """
        self.coordinator.abort()

    def on_attempt_start(self, coordinator: RetryCoordinator, attempt: Attempt) -> None:
        self._pending = []

    def on_outcome(
        self,
        coordinator: RetryCoordinator,
        attempt: Attempt,
        outcome: Outcome,
        will_retry: bool,
    ) -> None:
        if outcome.response is not None:
            self.emit("response", outcome.response)

    def on_terminal(self, coordinator: RetryCoordinator) -> None:
        outcome = coordinator.last_outcome
        if outcome is not None and outcome.error is not None:
            self._emit_error(outcome.error)
            return
        self._flowing = True
        pending, self._pending = self._pending, []
        for chunk in pending:
            self.emit("data", chunk)

    def on_data(self, coordinator: RetryCoordinator, attempt: Attempt, chunk: Any) -> None:
        if self._flowing:
            self.emit("data", chunk)
        else:
            self._pending.append(chunk)

    def on_body_end(self, coordinator: RetryCoordinator, attempt: Attempt) -> None:
        self.emit("complete", coordinator.retry_state.attempts_made)

    def on_body_error(
        self, coordinator: RetryCoordinator, attempt: Attempt, error: BaseException
    ) -> None:
        self._emit_error(error)

    def _emit_error(self, error: BaseException) -> None:
        if not self.emit("error", error):
            logger.warning(f"Unhandled error on {self!r}: {error!r}")

    def _listeners_for(self, event: str) -> list[Callable[..., Any]]:
        try:
            return self._listeners[event]
        except KeyError:
            msg = f"unknown event {event!r}, expected one of {STREAM_EVENTS}"
            raise ValueError(msg) from None
