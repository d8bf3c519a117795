r"""Default attempt factory built on ``httpx``.

Each attempt runs as an asyncio task that streams the response with
``httpx.AsyncClient.stream`` and reports it through the attempt's
reporter. Aborting an attempt cancels its task.
"""

from __future__ import annotations

__all__ = ["HttpxAttempt", "HttpxAttemptFactory"]

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import httpx

from retryrequest.exceptions import TransportError

if TYPE_CHECKING:
    from retryrequest.retry.attempt import AttemptReporter

logger: logging.Logger = logging.getLogger(__name__)

# Failures of the exchange itself, as opposed to errors raised by consumers
_TRANSPORT_ERRORS = (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError)


class HttpxAttempt:
    """Handle on one in-flight httpx request.

    Args:
        task: The task running the request.
    """

    def __init__(self, task: asyncio.Task) -> None:
        self.task = task

    def abort(self) -> None:
        """Cancel the request. Does nothing if it already finished."""
        if not self.task.done():
            self.task.cancel()


class HttpxAttemptFactory:
    """Performs attempts with an ``httpx.AsyncClient``.

    In raw mode the body is forwarded as byte chunks
    (``Response.aiter_bytes``). In object mode it is forwarded as decoded
    text lines (``Response.aiter_lines``), one record per line.

    Any failure before the response arrives (an invalid URL, a refused
    connection, a rejected request option) and any httpx error while
    reading the body is reported as a ``TransportError``. An exception
    raised by a consumer of the response is passed to the event loop's
    exception handler.

    Args:
        client: Optional client used for every attempt. It is never
            closed by the factory. If ``None``, a new client is opened and
            closed for each attempt.
        method: The HTTP method (default: ``"GET"``).
        **kwargs: Additional keyword arguments passed unchanged to
            ``httpx.AsyncClient.stream`` (e.g. ``headers``, ``params``,
            ``json``, ``timeout``).

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from retryrequest import retry_request
        >>> from retryrequest.transport import HttpxAttemptFactory
        >>> async def main():
        ...     async with httpx.AsyncClient() as client:
        ...         done = asyncio.get_running_loop().create_future()
        ...         retry_request(
        ...             "https://api.example.com/data",
        ...             lambda err, resp, body: done.set_result(resp.status_code),
        ...             request=HttpxAttemptFactory(client=client, headers={"Accept": "application/json"}),
        ...         )
        ...         return await done
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        method: str = "GET",
        **kwargs: Any,
    ) -> None:
        self.client = client
        self.method = method
        self.kwargs = kwargs

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(method={self.method!r}, client={self.client!r})"

    def __call__(self, target: Any, reporter: AttemptReporter) -> HttpxAttempt:
        task = asyncio.ensure_future(self._run(target, reporter))
        task.add_done_callback(self._report_unhandled)
        return HttpxAttempt(task)

    async def _run(self, target: Any, reporter: AttemptReporter) -> None:
        responded = False
        try:
            # Client management
            owns_client = self.client is None
            client = httpx.AsyncClient() if owns_client else self.client
            try:
                async with client.stream(self.method, target, **self.kwargs) as response:
                    logger.debug(
                        f"{self.method} {target} (attempt {reporter.ordinal}): "
                        f"status {response.status_code}"
                    )
                    responded = True
                    reporter.response(response, stream=True)
                    chunks = (
                        response.aiter_lines() if reporter.object_mode else response.aiter_bytes()
                    )
                    async for chunk in chunks:
                        reporter.data(chunk)
            finally:
                if owns_client:
                    await client.aclose()
        except Exception as exc:
            if responded and not isinstance(exc, _TRANSPORT_ERRORS):
                # Raised by a consumer of the response or of its body.
                raise
            logger.debug(f"{self.method} {target} (attempt {reporter.ordinal}) failed: {exc!r}")
            reporter.error(
                TransportError(
                    target=target,
                    message=f"{self.method} request to {target} failed: {exc}",
                    attempt=reporter.ordinal,
                    cause=exc,
                )
            )
            return
        reporter.end()

    def _report_unhandled(self, task: asyncio.Task) -> None:
        if task.cancelled() or task.exception() is None:
            return
        task.get_loop().call_exception_handler(
            {
                "message": f"Unhandled exception in {self.method} attempt task",
                "exception": task.exception(),
                "task": task,
            }
        )
