"""Cancellation token threaded through the console's async calls."""

import asyncio
import contextlib
from typing import Awaitable, Optional, TypeVar

from ..exceptions import RequestCancelled

T = TypeVar("T")


class CancellationToken:
    """Lets an owner abandon every in-flight request it handed the token to.

    A token is cancelled at most once; work started after cancellation fails
    immediately with RequestCancelled.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "cancelled") -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise RequestCancelled(f"Request abandoned: {self.reason}")

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """
        Await ``awaitable`` unless the token fires first.

        Args:
            awaitable: The request to run

        Returns:
            The awaitable's result

        Raises:
            RequestCancelled: If the token was or becomes cancelled
        """
        task = asyncio.ensure_future(awaitable)
        if self.cancelled:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
            self.raise_if_cancelled()

        waiter = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            if not task.done():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
            waiter.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await waiter

        if task.cancelled():
            self.raise_if_cancelled()
            raise asyncio.CancelledError()
        return task.result()


async def guarded(awaitable: Awaitable[T], token: Optional[CancellationToken]) -> T:
    """Await through ``token`` when one is given."""
    if token is None:
        return await awaitable
    return await token.guard(awaitable)
