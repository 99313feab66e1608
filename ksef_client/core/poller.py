"""
Bounded fixed-interval polling.

The polled action reports its outcome as a tagged result so "not ready yet"
and "rejected" are distinct from transient transport failures:

- ``Ready(value)``: stop and return ``value``.
- ``NOT_READY``: consume an attempt, wait, retry.
- ``Fatal(error)``: stop and raise ``error``.

Exceptions raised by the action that match ``retry_on`` are treated like
``NOT_READY``; any other exception propagates immediately. A transient error
carrying a ``retry_after`` hint (HTTP 429) stretches that one wait to the
hinted number of seconds when it is longer than the interval.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

import structlog

from ksef_client.exceptions import NetworkError, PollTimeoutError, RateLimitError, ServerError

logger = structlog.get_logger(__name__)

T = TypeVar("T")

DEFAULT_RETRY_ON: tuple[type[BaseException], ...] = (NetworkError, ServerError, RateLimitError)


@dataclass(frozen=True, slots=True)
class Ready(Generic[T]):
    """Conclusive result."""

    value: T


@dataclass(frozen=True, slots=True)
class NotReady:
    """Operation still in progress."""


@dataclass(frozen=True, slots=True)
class Fatal:
    """Conclusive failure; polling stops without consuming retries."""

    error: Exception


NOT_READY = NotReady()

PollResult = Ready[T] | NotReady | Fatal


async def poll_until(
    action: Callable[[], Awaitable[PollResult]],
    *,
    max_attempts: int,
    interval: float,
    retry_on: tuple[type[BaseException], ...] = DEFAULT_RETRY_ON,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    operation: str = "poll",
) -> T:
    """
    Invoke ``action`` until it is ready, fails, or attempts run out.

    The wait between attempts is fixed, stretched only by a longer
    ``retry_after`` hint. There is no wait after the last one.

    Args:
        action: Coroutine function returning Ready, NOT_READY or Fatal.
        max_attempts: Maximum number of calls to ``action``.
        interval: Seconds to wait between attempts.
        retry_on: Exception types treated as transient.
        sleep: Awaitable sleep, replaceable in tests.
        operation: Name used in log events and the timeout message.

    Returns:
        The value wrapped in the first Ready result.

    Raises:
        PollTimeoutError: If no attempt returned Ready.
        Exception: The error of a Fatal result, or any non-transient exception.
    """
    if max_attempts < 1:
        msg = "max_attempts must be at least 1"
        raise ValueError(msg)
    if interval < 0:
        msg = "interval must be non-negative"
        raise ValueError(msg)

    last_error: BaseException | None = None

    for attempt in range(1, max_attempts + 1):
        delay = interval
        try:
            result = await action()
        except retry_on as e:
            last_error = e
            logger.debug(
                "Transient error while polling",
                operation=operation,
                attempt=attempt,
                max_attempts=max_attempts,
                error_type=type(e).__name__,
            )
            retry_after = getattr(e, "retry_after", None)
            if retry_after is not None and retry_after > interval:
                delay = float(retry_after)
        else:
            if isinstance(result, Ready):
                logger.debug("Polling finished", operation=operation, attempt=attempt)
                return result.value
            if isinstance(result, Fatal):
                logger.debug("Polling aborted", operation=operation, attempt=attempt)
                raise result.error
            if not isinstance(result, NotReady):
                msg = f"Polled action returned {type(result).__name__}, expected a poll result"
                raise TypeError(msg)
            last_error = None
            logger.debug(
                "Not ready yet",
                operation=operation,
                attempt=attempt,
                max_attempts=max_attempts,
            )

        if attempt < max_attempts:
            await sleep(delay)

    msg = f"{operation} did not complete after {max_attempts} attempts"
    raise PollTimeoutError(msg, attempts=max_attempts) from last_error
