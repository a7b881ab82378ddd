"""Unit Tests for CancellationScope"""

import asyncio

import pytest

from schema_console.core import CancellationScope
from schema_console.errors import IterationCancelled


async def answer(value: str) -> str:
    await asyncio.sleep(0)
    return value


class TestCancellationScope:
    """Test cooperative cancellation of awaited operations."""

    async def test_run_returns_result(self):
        scope = CancellationScope()

        assert await scope.run(answer("users")) == "users"
        assert scope.cancelled is False

    async def test_run_propagates_errors(self):
        async def fail() -> str:
            raise EOFError

        with pytest.raises(EOFError):
            await CancellationScope().run(fail())

    async def test_cancel_resolves_pending_operation(self):
        """A pending operation is abandoned and its task cancelled."""
        scope = CancellationScope()
        started = asyncio.Event()
        finished = asyncio.Event()

        async def wait_forever() -> str:
            started.set()
            try:
                await asyncio.Event().wait()
            finally:
                finished.set()
            return "never"

        pending = asyncio.create_task(scope.run(wait_forever()))
        await started.wait()
        scope.cancel("escape pressed")

        with pytest.raises(IterationCancelled) as exc_info:
            await pending

        assert exc_info.value.reason == "escape pressed"
        assert finished.is_set()

    async def test_cancelled_scope_rejects_new_operations(self):
        """Every later operation of the iteration resolves as cancelled."""
        scope = CancellationScope()
        scope.cancel()

        with pytest.raises(IterationCancelled):
            await scope.run(answer("orders"))
        with pytest.raises(IterationCancelled):
            await scope.run(answer("email"))

    async def test_first_reason_wins(self):
        scope = CancellationScope()
        scope.cancel("escape pressed")
        scope.cancel("interrupted")

        assert scope.reason == "escape pressed"

    async def test_wait(self):
        scope = CancellationScope()
        waiter = asyncio.create_task(scope.wait())
        await asyncio.sleep(0)
        assert not waiter.done()

        scope.cancel()
        await asyncio.wait_for(waiter, timeout=1)

    async def test_outer_cancellation_cancels_operation(self):
        """Cancelling the caller does not leave the operation running."""
        scope = CancellationScope()
        operation_cancelled = asyncio.Event()

        async def wait_forever() -> str:
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                operation_cancelled.set()
                raise
            return "never"

        caller = asyncio.create_task(scope.run(wait_forever()))
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        caller.cancel()

        with pytest.raises(asyncio.CancelledError):
            await caller
        await asyncio.sleep(0)
        assert operation_cancelled.is_set()
