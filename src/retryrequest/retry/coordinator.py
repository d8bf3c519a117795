r"""State machine driving the attempts of one retried operation.

The coordinator issues attempts through the policy's request factory,
evaluates each outcome with the policy's predicate, and schedules the
next attempt after a backoff delay. Exactly one attempt is in flight and
at most one delay timer is pending at any time. Everything runs on the
asyncio event loop thread, so no locking is involved.
"""

from __future__ import annotations

__all__ = ["Attempt", "CoordinatorState", "RetryCoordinator", "RetryState"]

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from retryrequest.exceptions import TransportError
from retryrequest.retry.attempt import AttemptReporter
from retryrequest.retry.decider import Outcome

if TYPE_CHECKING:
    from retryrequest.retry.attempt import AttemptHandle
    from retryrequest.retry.config import RetryPolicy
    from retryrequest.retry.events import CoordinatorListener

logger: logging.Logger = logging.getLogger(__name__)


class CoordinatorState(enum.Enum):
    """States of a ``RetryCoordinator``."""

    IDLE = "idle"
    REQUESTING = "requesting"
    EVALUATING = "evaluating"
    RETRYING = "retrying"
    COMPLETED = "completed"
    FAILED = "failed"
    ABORTED = "aborted"


_TERMINAL_STATES = frozenset(
    {CoordinatorState.COMPLETED, CoordinatorState.FAILED, CoordinatorState.ABORTED}
)


@dataclass(eq=False)
class Attempt:
    """One execution of the underlying request.

    Attributes:
        ordinal: The attempt number, starting at 1.
        handle: The handle returned by the request factory, once it
            returned.
        outcome_reported: Whether the attempt already reported its
            outcome.
        aborted: Whether ``abort`` was called on the handle.
        abort_pending: Whether the handle must be aborted as soon as the
            factory returns it.
    """

    ordinal: int
    handle: AttemptHandle | None = None
    outcome_reported: bool = False
    aborted: bool = False
    abort_pending: bool = False


@dataclass
class RetryState:
    """Progress of one operation.

    Attributes:
        attempts_made: Number of attempts issued so far.
        last_error: The last transport error reported, if any.
        last_response: The last response reported, if any.
        aborted: Whether the operation was cancelled.
    """

    attempts_made: int = 0
    last_error: BaseException | None = None
    last_response: Any = None
    aborted: bool = False


class RetryCoordinator:
    """Drives repeated attempts of one request until a terminal state.

    States: ``IDLE -> REQUESTING -> EVALUATING -> {RETRYING -> REQUESTING
    | COMPLETED | FAILED}``, with ``ABORTED`` reachable from any
    non-terminal state.

    When the final outcome is a response, its body keeps flowing to the
    listeners after the terminal transition, until the attempt reports the
    end of the body.

    Args:
        target: The request target, passed unchanged to the factory.
        policy: The retry policy of the operation.
        loop: The event loop used to schedule delays. Defaults to the
            running loop.

    Raises:
        RuntimeError: If no loop is given and no event loop is running.

    Example:
        ```pycon
        >>> import asyncio
        >>> from unittest.mock import Mock
        >>> from retryrequest.retry import RetryCoordinator, RetryPolicy
        >>> async def main():
        ...     def factory(target, reporter):
        ...         reporter.response(Mock(status_code=200), body=b"ok")
        ...
        ...     coordinator = RetryCoordinator("https://api.example.com", RetryPolicy(request_factory=factory))
        ...     coordinator.start()
        ...     return coordinator.state
        ...
        >>> asyncio.run(main())
        <CoordinatorState.COMPLETED: 'completed'>

        ```
    """

    def __init__(
        self,
        target: Any,
        policy: RetryPolicy,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.target = target
        self.policy = policy
        self.state = CoordinatorState.IDLE
        self.retry_state = RetryState()
        self._loop = loop if loop is not None else asyncio.get_running_loop()
        self._listeners: list[CoordinatorListener] = []
        self._current: Attempt | None = None
        self._final: Attempt | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._finished = False
        self.last_outcome: Outcome | None = None

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(target={self.target!r}, state={self.state.name}, "
            f"attempts_made={self.retry_state.attempts_made})"
        )

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        """The event loop the delays are scheduled on."""
        return self._loop

    @property
    def current_attempt(self) -> Attempt | None:
        """The attempt whose outcome is pending, if any."""
        return self._current

    @property
    def is_terminal(self) -> bool:
        return self.state in _TERMINAL_STATES

    @property
    def has_pending_timer(self) -> bool:
        return self._timer is not None

    def subscribe(self, listener: CoordinatorListener) -> None:
        """Register a listener for the lifecycle events."""
        self._listeners.append(listener)

    def start(self) -> None:
        """Issue the first attempt.

        Does nothing if the coordinator was aborted before starting.

        Raises:
            RuntimeError: If the coordinator was already started.
        """
        if self.state is CoordinatorState.ABORTED:
            logger.debug(f"Request to {self.target} aborted before the first attempt")
            return
        if self.state is not CoordinatorState.IDLE:
            msg = f"coordinator already started (state={self.state.name})"
            raise RuntimeError(msg)
        self._issue_attempt()

    def abort(self) -> None:
        """Cancel the operation.

        Cancels the pending delay timer, aborts the live attempt handle and
        suppresses every later notification. Safe to call at any point;
        does nothing once the operation finished or was already aborted.
        """
        if self._finished or self.state is CoordinatorState.ABORTED:
            return
        logger.debug(
            f"Aborting request to {self.target} in state {self.state.name} "
            f"after {self.retry_state.attempts_made} attempt(s)"
        )
        self.state = CoordinatorState.ABORTED
        self.retry_state.aborted = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        for attempt in (self._current, self._final):
            if attempt is not None:
                self._abort_attempt(attempt)
        self._current = None
        self._final = None

    def handle_outcome(
        self,
        attempt: Attempt,
        response: Any = None,
        error: BaseException | None = None,
    ) -> None:
        """Evaluate the outcome reported by an attempt.

        Args:
            attempt: The attempt reporting the outcome.
            response: The response, if one was produced.
            error: The transport error, if no response was produced.
        """
        if self.state is CoordinatorState.ABORTED:
            logger.debug(f"Ignoring outcome of attempt {attempt.ordinal} after abort")
            return
        if attempt is not self._current or attempt.outcome_reported:
            logger.debug(f"Ignoring stale outcome of attempt {attempt.ordinal}")
            return

        attempt.outcome_reported = True
        self._current = None
        self.state = CoordinatorState.EVALUATING
        outcome = Outcome(response=response, error=error)
        self.last_outcome = outcome
        self.retry_state.last_response = response
        self.retry_state.last_error = error

        retryable = bool(self.policy.predicate(outcome))
        retries_done = attempt.ordinal - 1
        will_retry = retryable and retries_done < self.policy.max_retries
        self._emit("on_outcome", attempt, outcome, will_retry)
        if self.state is not CoordinatorState.EVALUATING:
            # A listener aborted the operation.
            return

        if will_retry:
            self._schedule_retry(attempt, retries_done + 1)
        elif error is not None:
            logger.debug(
                f"Request to {self.target} failed on attempt {attempt.ordinal}/"
                f"{self.policy.max_attempts}: {error!r}"
            )
            self._finish(CoordinatorState.FAILED)
        else:
            final_state = CoordinatorState.FAILED if retryable else CoordinatorState.COMPLETED
            logger.debug(
                f"Request to {self.target} finished with status {outcome.status_code} "
                f"on attempt {attempt.ordinal}/{self.policy.max_attempts} ({final_state.name})"
            )
            self._final = attempt
            self._finish(final_state, finished=False)

    def handle_data(self, attempt: Attempt, chunk: Any) -> None:
        """Forward a body chunk of the current or final attempt."""
        if attempt is self._current or attempt is self._final:
            self._emit("on_data", attempt, chunk)

    def handle_body_end(self, attempt: Attempt) -> None:
        """Forward the end of the final attempt's body."""
        if attempt is not self._final:
            return
        self._final = None
        self._finished = True
        self._emit("on_body_end", attempt)

    def handle_body_error(self, attempt: Attempt, error: BaseException) -> None:
        """Forward a failure while reading the final attempt's body."""
        if attempt is not self._final:
            return
        logger.debug(f"Reading the body of attempt {attempt.ordinal} failed: {error!r}")
        self._final = None
        self._finished = True
        self.retry_state.last_error = error
        self._emit("on_body_error", attempt, error)

    def _issue_attempt(self) -> None:
        attempt = Attempt(ordinal=self.retry_state.attempts_made + 1)
        self.retry_state.attempts_made = attempt.ordinal
        self._current = attempt
        self.state = CoordinatorState.REQUESTING
        logger.debug(
            f"Request to {self.target}: attempt {attempt.ordinal}/{self.policy.max_attempts}"
        )
        self._emit("on_attempt_start", attempt)
        if self.state is not CoordinatorState.REQUESTING:
            return

        reporter = AttemptReporter(self, attempt)
        try:
            handle = self.policy.request_factory(self.target, reporter)
        except Exception as exc:
            logger.debug(f"Request factory raised on attempt {attempt.ordinal}: {exc!r}")
            error = TransportError(
                target=self.target,
                message=f"request to {self.target} failed on attempt {attempt.ordinal}: {exc}",
                attempt=attempt.ordinal,
                cause=exc,
            )
            reporter.error(error)
            return

        attempt.handle = handle
        if attempt.abort_pending:
            self._abort_attempt(attempt)

    def _schedule_retry(self, attempt: Attempt, retry_number: int) -> None:
        self._abort_attempt(attempt)
        delay = self.policy.backoff_strategy.calculate(retry_number)
        self.state = CoordinatorState.RETRYING
        logger.debug(
            f"Request to {self.target}: waiting {delay:.0f}ms before retry "
            f"{retry_number}/{self.policy.max_retries}"
        )
        self._timer = self._loop.call_later(delay / 1000.0, self._on_timer_fired)
        self._emit("on_retry_scheduled", attempt, delay)

    def _on_timer_fired(self) -> None:
        self._timer = None
        if self.state is not CoordinatorState.RETRYING:
            return
        self._issue_attempt()

    def _abort_attempt(self, attempt: Attempt) -> None:
        if attempt.aborted:
            return
        if attempt.handle is None:
            # The factory has not returned yet, or returned no handle.
            attempt.abort_pending = True
            return
        attempt.aborted = True
        attempt.abort_pending = False
        attempt.handle.abort()

    def _finish(self, state: CoordinatorState, finished: bool = True) -> None:
        self.state = state
        self._finished = finished
        self._emit("on_terminal")

    def _emit(self, hook: str, *args: Any) -> None:
        for listener in list(self._listeners):
            if self.state is CoordinatorState.ABORTED:
                return
            getattr(listener, hook)(self, *args)
