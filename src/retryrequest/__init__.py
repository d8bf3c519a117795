r"""retryrequest - Retry network requests with exponential backoff.

This package wraps an arbitrary request operation with automatic retry
logic. After each attempt it decides whether the failure is transient,
waits an exponentially increasing delay with jitter, and tries again. The
in-flight operation is exposed either as a stream of events or through a
single completion callback, with identical retry semantics.

Key Features:
    - Automatic retry of transport errors and 1xx, 429 and 5xx responses
    - Exponential backoff with jitter (2 ** n seconds + up to 1s)
    - Pluggable attempt factory and retry predicate
    - Stream (``response``/``data``/``error``/``complete`` events) or
      callback (``(error, response, body)``) consumption
    - Immediate, cooperative cancellation with ``abort()``
    - Default transport built on httpx

Example:
    ```pycon
    >>> import asyncio
    >>> from retryrequest import retry_request
    >>> async def main():
    ...     done = asyncio.get_running_loop().create_future()
    ...     stream = retry_request("https://api.example.com/data", retries=3)
    ...     stream.on("error", done.set_exception).on("complete", done.set_result)
    ...     return await done  # number of attempts
    ...
    >>> asyncio.run(main())  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_MAX_RETRIES",
    "HttpxAttemptFactory",
    "Outcome",
    "RetryHandle",
    "RetryPolicy",
    "RetryRequestError",
    "RetryStream",
    "TransportError",
    "__version__",
    "get_next_retry_delay",
    "retry_request",
    "should_retry_request",
]

from importlib.metadata import PackageNotFoundError, version

from retryrequest.backoff import get_next_retry_delay
from retryrequest.callback import RetryHandle
from retryrequest.core.config import DEFAULT_MAX_RETRIES
from retryrequest.exceptions import RetryRequestError, TransportError
from retryrequest.request import retry_request
from retryrequest.retry import Outcome, RetryPolicy, should_retry_request
from retryrequest.stream import RetryStream
from retryrequest.transport import HttpxAttemptFactory

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
