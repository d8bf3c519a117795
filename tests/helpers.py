r"""Shared test helpers for retried requests.

This module contains fake attempt factories and small utilities used
across the unit and integration tests.
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING, Any
from unittest.mock import Mock

import httpx

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from retryrequest.retry.attempt import AttemptReporter

TEST_URL = "https://api.example.com/data"

# Statuses retried by the default policy, one per class
RETRYABLE_STATUS_CODES = (100, 199, 429, 500, 503, 599)
NON_RETRYABLE_STATUS_CODES = (200, 204, 301, 399, 400, 404, 428, 430, 499)


def make_response(status_code: int) -> httpx.Response:
    """Create a mock httpx.Response with the given status code."""
    return Mock(spec=httpx.Response, status_code=status_code)


class FakeAttempt:
    """Attempt handle counting the calls to ``abort``."""

    def __init__(self, ordinal: int) -> None:
        self.ordinal = ordinal
        self.abort_calls = 0

    def abort(self) -> None:
        self.abort_calls += 1


class FakeAttemptFactory:
    """Attempt factory replaying a sequence of outcomes.

    Each attempt reports the next item of ``outcomes``: an ``int`` is
    reported as a response with that status code and a body naming the
    attempt, an exception is reported as a transport error. The last item
    is repeated once the sequence is exhausted.

    Args:
        outcomes: The outcomes to report, in order.
        sync: If ``True``, outcomes are reported during the factory call,
            otherwise on the next iteration of the event loop.
    """

    def __init__(self, outcomes: Sequence[int | BaseException], sync: bool = False) -> None:
        self.outcomes = list(outcomes)
        self.sync = sync
        self.handles: list[FakeAttempt] = []
        self.reporters: list[AttemptReporter] = []
        self.targets: list[Any] = []

    @property
    def attempts(self) -> int:
        return len(self.handles)

    @property
    def abort_calls(self) -> list[int]:
        return [handle.abort_calls for handle in self.handles]

    def __call__(self, target: Any, reporter: AttemptReporter) -> FakeAttempt:
        outcome = self.outcomes[min(len(self.handles), len(self.outcomes) - 1)]
        handle = FakeAttempt(reporter.ordinal)
        self.handles.append(handle)
        self.reporters.append(reporter)
        self.targets.append(target)

        def report() -> None:
            if isinstance(outcome, BaseException):
                reporter.error(outcome)
            else:
                reporter.response(
                    make_response(outcome), body=f"attempt-{reporter.ordinal}".encode()
                )

        if self.sync:
            report()
        else:
            asyncio.get_running_loop().call_soon(report)
        return handle


class CallbackRecorder:
    """Callback storing its calls and resolving a future on the first one."""

    def __init__(self) -> None:
        self.calls: list[tuple[BaseException | None, Any, Any]] = []
        self.done: asyncio.Future = asyncio.get_running_loop().create_future()

    def __call__(self, error: BaseException | None, response: Any, body: Any) -> None:
        self.calls.append((error, response, body))
        if not self.done.done():
            self.done.set_result((error, response, body))

    async def wait(self, timeout: float = 5.0) -> tuple[BaseException | None, Any, Any]:
        return await asyncio.wait_for(self.done, timeout=timeout)


async def run_loop(iterations: int = 10) -> None:
    """Let the event loop process pending callbacks."""
    for _ in range(iterations):
        await asyncio.sleep(0)


@contextlib.contextmanager
def capture_loop_errors() -> Iterator[list[dict[str, Any]]]:
    """Collect the contexts passed to the running loop's exception handler."""
    loop = asyncio.get_running_loop()
    contexts: list[dict[str, Any]] = []
    previous = loop.get_exception_handler()
    loop.set_exception_handler(lambda loop, context: contexts.append(context))
    try:
        yield contexts
    finally:
        loop.set_exception_handler(previous)
