r"""Public entry point for requests with automatic retry logic."""

from __future__ import annotations

__all__ = ["retry_request"]

from typing import TYPE_CHECKING, Any, overload

from retryrequest.callback import RetryHandle
from retryrequest.core.config import DEFAULT_MAX_RETRIES, DEFAULT_OBJECT_MODE
from retryrequest.retry.config import RetryPolicy
from retryrequest.retry.coordinator import RetryCoordinator
from retryrequest.retry.decider import should_retry_request
from retryrequest.stream import RetryStream
from retryrequest.transport import HttpxAttemptFactory

if TYPE_CHECKING:
    from collections.abc import Callable

    from retryrequest.backoff import BaseBackoffStrategy
    from retryrequest.retry.attempt import AttemptFactory
    from retryrequest.retry.decider import Outcome


@overload
def retry_request(
    target: Any,
    callback: None = None,
    *,
    retries: int = ...,
    request: AttemptFactory | None = ...,
    should_retry_fn: Callable[[Outcome], bool] | None = ...,
    object_mode: bool = ...,
    backoff_strategy: BaseBackoffStrategy | None = ...,
    **kwargs: Any,
) -> RetryStream: ...


@overload
def retry_request(
    target: Any,
    callback: Callable[[BaseException | None, Any, Any], Any],
    *,
    retries: int = ...,
    request: AttemptFactory | None = ...,
    should_retry_fn: Callable[[Outcome], bool] | None = ...,
    object_mode: bool = ...,
    backoff_strategy: BaseBackoffStrategy | None = ...,
    **kwargs: Any,
) -> RetryHandle: ...


def retry_request(
    target: Any,
    callback: Callable[[BaseException | None, Any, Any], Any] | None = None,
    *,
    retries: int = DEFAULT_MAX_RETRIES,
    request: AttemptFactory | None = None,
    should_retry_fn: Callable[[Outcome], bool] | None = None,
    object_mode: bool = DEFAULT_OBJECT_MODE,
    backoff_strategy: BaseBackoffStrategy | None = None,
    **kwargs: Any,
) -> RetryStream | RetryHandle:
    """Perform a request with automatic retry logic.

    Each attempt's outcome is checked with the retry predicate. Transient
    outcomes (no response, 1xx, 429 and 5xx with the default predicate)
    are retried up to ``retries`` times, waiting
    ``2 ** n`` seconds plus up to one second of jitter before the nth
    retry.

    This function must be called from a running asyncio event loop.

    Args:
        target: The request target (e.g. a URL), passed unchanged to the
            request factory.
        callback: Optional function called once on termination with
            ``(error, response, body)``. If provided the first attempt is
            issued immediately and a ``RetryHandle`` is returned,
            otherwise a ``RetryStream`` is returned.
        retries: Maximum number of retries beyond the first attempt.
            Must be >= 0.
        request: Optional attempt factory replacing the default httpx
            transport.
        should_retry_fn: Optional predicate replacing the default retry
            policy. Called once per attempt with its ``Outcome``.
        object_mode: Whether the body is made of parsed records rather
            than raw byte chunks.
        backoff_strategy: Optional strategy replacing the default
            exponential backoff with jitter.
        **kwargs: Additional keyword arguments passed to the default
            ``HttpxAttemptFactory`` (e.g. ``client``, ``method``,
            ``headers``, ``timeout``). Ignored when ``request`` is given.

    Returns:
        A ``RetryStream`` if no callback is given, otherwise a
        ``RetryHandle``. Both expose ``abort()``.

    Raises:
        ValueError: If a parameter fails validation.
        RuntimeError: If no event loop is running.

    Example:
        ```pycon
        >>> import asyncio
        >>> from retryrequest import retry_request
        >>> async def main():
        ...     done = asyncio.get_running_loop().create_future()
        ...
        ...     def on_done(error, response, body):
        ...         done.set_result((error, response, body))
        ...
        ...     handle = retry_request("https://api.example.com/data", on_done, retries=3)
        ...     error, response, body = await done
        ...     return response.status_code
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """
    policy = RetryPolicy(
        request_factory=request if request is not None else HttpxAttemptFactory(**kwargs),
    ).merge(
        max_retries=retries,
        predicate=should_retry_fn if should_retry_fn is not None else should_retry_request,
        object_mode=object_mode,
        backoff_strategy=backoff_strategy,
    )
    coordinator = RetryCoordinator(target, policy)
    if callback is None:
        stream = RetryStream(coordinator)
        stream.start()
        return stream
    handle = RetryHandle(coordinator, callback)
    handle.start()
    return handle
