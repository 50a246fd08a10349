"""Cancellation tokens for bytestream.

This module provides concrete implementations of the ICancellation interface
and a helper for awaiting work under a cancellation token.
"""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, TypeVar

from bytestream.exceptions import OperationCancelledError
from bytestream.interfaces import ICancellation

T = TypeVar("T")


class DeferredCancellation(ICancellation):
    """Cancellation token triggered explicitly by calling cancel().

    Example:
        >>> cancellation = DeferredCancellation()
        >>> task = asyncio.create_task(payload.buffer(cancellation))
        >>> cancellation.cancel("client went away")
    """

    def __init__(self) -> None:
        self._reason: str | None = None
        self._event = asyncio.Event()

    @property
    def is_requested(self) -> bool:
        return self._reason is not None

    @property
    def reason(self) -> str:
        return self._reason or ""

    def cancel(self, reason: str = "The operation was cancelled") -> None:
        """Request cancellation.

        Only the first call has an effect.

        Args:
            reason: Message carried by the raised OperationCancelledError.
        """
        if self._reason is not None:
            return
        self._reason = reason
        self._event.set()

    def throw_if_requested(self) -> None:
        if self._reason is not None:
            raise OperationCancelledError(self._reason)

    async def wait(self) -> None:
        await self._event.wait()


class TimeoutCancellation(ICancellation):
    """Cancellation token triggered once a timeout elapses.

    The timeout starts counting when the token is created.
    """

    def __init__(self, timeout: float, message: str = "Operation timed out") -> None:
        """Initialize the token.

        Args:
            timeout: Number of seconds before cancellation is requested.
            message: Reason carried by the raised OperationCancelledError.
        """
        self._deadline = time.monotonic() + timeout
        self._message = message

    @property
    def is_requested(self) -> bool:
        return time.monotonic() >= self._deadline

    @property
    def reason(self) -> str:
        return self._message if self.is_requested else ""

    def throw_if_requested(self) -> None:
        if self.is_requested:
            raise OperationCancelledError(self._message)

    async def wait(self) -> None:
        remaining = self._deadline - time.monotonic()
        if remaining > 0:
            await asyncio.sleep(remaining)


async def await_cancellable(
    awaitable: Awaitable[T], cancellation: ICancellation | None = None
) -> T:
    """Await work, abandoning the wait when cancellation is requested.

    Only the wait is abandoned. The awaited work keeps running, so a shared
    future can be awaited again later. Cancelling the calling task behaves
    the same way.

    Args:
        awaitable: The work to wait for. Coroutines are wrapped in a task.
        cancellation: Optional token governing the wait.

    Returns:
        The result of the awaited work.

    Raises:
        OperationCancelledError: If cancellation was requested first.
    """
    future = asyncio.ensure_future(awaitable)
    if cancellation is None:
        return await asyncio.shield(future)

    cancellation.throw_if_requested()

    waiter = asyncio.ensure_future(cancellation.wait())
    try:
        await asyncio.wait((future, waiter), return_when=asyncio.FIRST_COMPLETED)
    finally:
        waiter.cancel()

    if future.done():
        return future.result()

    raise OperationCancelledError(cancellation.reason)
