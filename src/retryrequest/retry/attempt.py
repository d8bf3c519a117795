r"""Interfaces between the retry coordinator and a single attempt.

An attempt factory performs one network attempt and returns a handle
that can abort it. The attempt reports what happened through the
``AttemptReporter`` it was given.
"""

from __future__ import annotations

__all__ = ["AttemptFactory", "AttemptHandle", "AttemptReporter"]

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from retryrequest.retry.coordinator import Attempt, RetryCoordinator


class AttemptHandle(Protocol):
    """Handle on an in-flight attempt."""

    def abort(self) -> None:
        """Cancel in-flight work.

        Must be a no-op if the attempt already finished.
        """


class AttemptFactory(Protocol):
    """Performs one attempt against a request target.

    The factory may report the outcome synchronously, during the call, or
    later from the event loop. It may return ``None`` when the attempt
    cannot be aborted.
    """

    def __call__(self, target: Any, reporter: AttemptReporter) -> AttemptHandle | None: ...


class AttemptReporter:
    """Reports the outcome and body of one attempt to the coordinator.

    An attempt reports either ``error`` (no response was produced) or
    ``response``. A response reported with ``stream=True`` is followed by
    any number of ``data`` calls and exactly one ``end`` (or ``error`` if
    reading the body fails). Reports for an attempt that is no longer
    current, or received after an abort, are ignored.

    Args:
        coordinator: The coordinator owning the attempt.
        attempt: The attempt this reporter is bound to.

    Attributes:
        ordinal: The 1-indexed number of the attempt.
        object_mode: Whether the body is made of parsed records rather
            than raw byte chunks. Identical for every attempt of one
            operation.
    """

    def __init__(self, coordinator: RetryCoordinator, attempt: Attempt) -> None:
        self._coordinator = coordinator
        self._attempt = attempt

    @property
    def ordinal(self) -> int:
        return self._attempt.ordinal

    @property
    def object_mode(self) -> bool:
        return self._coordinator.policy.object_mode

    def response(self, response: Any, body: Any = None, *, stream: bool = False) -> None:
        """Report the response produced by the attempt.

        Args:
            response: The response descriptor. It must expose a
                ``status_code`` attribute.
            body: Optional complete body, delivered as a single chunk.
                Ignored when ``stream`` is ``True``.
            stream: If ``True``, the body follows through ``data`` and
                ``end``. Otherwise the body is complete on return.
        """
        self._coordinator.handle_outcome(self._attempt, response=response)
        if stream:
            return
        if body is not None:
            self.data(body)
        self.end()

    def error(self, error: BaseException) -> None:
        """Report a transport error.

        Args:
            error: The failure. Before a response this is the attempt's
                outcome, after a streamed response it aborts the body.
        """
        if self._attempt.outcome_reported:
            self._coordinator.handle_body_error(self._attempt, error)
        else:
            self._coordinator.handle_outcome(self._attempt, error=error)

    def data(self, chunk: Any) -> None:
        """Report one chunk of the response body."""
        self._coordinator.handle_data(self._attempt, chunk)

    def end(self) -> None:
        """Report the end of the response body."""
        self._coordinator.handle_body_end(self._attempt)
