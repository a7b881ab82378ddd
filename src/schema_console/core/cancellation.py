"""Cooperative cancellation for one session iteration."""

import asyncio
import logging
from collections.abc import Awaitable
from typing import Optional, TypeVar

from schema_console.errors import IterationCancelled

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CancellationScope:
    """A one-shot cancellation signal shared by every prompt of an iteration.

    Once cancelled, a scope stays cancelled: every awaitable run through it,
    pending or future, resolves by raising IterationCancelled.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: Optional[str] = None

    def cancel(self, reason: str = "user requested") -> None:
        """Trigger the scope. Later calls keep the first reason."""
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()
        logger.debug(f"Iteration cancelled: {reason}")

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise IterationCancelled(self._reason or "user requested")

    async def wait(self) -> None:
        """Block until the scope is cancelled."""
        await self._event.wait()

    async def run(self, awaitable: Awaitable[T]) -> T:
        """
        Await ``awaitable`` unless the scope is cancelled first.

        On cancellation the underlying task is cancelled and awaited, so it
        never stays pending.

        Raises:
            IterationCancelled: If the scope is or becomes cancelled
        """
        if self._event.is_set():
            # Close a coroutine that will never be scheduled
            close = getattr(awaitable, "close", None)
            if close is not None:
                close()
            self.raise_if_cancelled()

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait(
                {task, waiter}, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if task in done:
            return task.result()

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.debug(f"Cancelled operation ended with {e!r}")
        raise IterationCancelled(self._reason or "user requested")
