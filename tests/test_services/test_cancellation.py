"""Tests for CancellationToken."""

import asyncio
import threading
import time
from unittest.mock import MagicMock

import pytest

from ping_runner.services import CancellationToken


class TestCancellationToken:
    """Tests for the cooperative cancellation signal."""

    def test_starts_uncancelled(self) -> None:
        assert not CancellationToken().cancelled

    def test_cancel_is_idempotent(self) -> None:
        token = CancellationToken()
        callback = MagicMock()
        token.register(callback)

        token.cancel()
        token.cancel()

        assert token.cancelled
        callback.assert_called_once_with()

    def test_register_after_cancel_runs_immediately(self) -> None:
        token = CancellationToken()
        token.cancel()
        callback = MagicMock()

        token.register(callback)

        callback.assert_called_once_with()

    def test_unregister_prevents_callback(self) -> None:
        token = CancellationToken()
        callback = MagicMock()
        unregister = token.register(callback)

        unregister()
        token.cancel()

        callback.assert_not_called()

    def test_failing_callback_does_not_stop_others(self) -> None:
        token = CancellationToken()
        second = MagicMock()
        token.register(MagicMock(side_effect=RuntimeError("boom")))
        token.register(second)

        token.cancel()

        second.assert_called_once_with()

    def test_cancel_after_fires(self) -> None:
        token = CancellationToken()
        fired = threading.Event()
        token.register(fired.set)

        token.cancel_after(0.05)

        assert fired.wait(timeout=5)
        assert token.cancelled

    def test_cancel_after_rejects_negative_delay(self) -> None:
        with pytest.raises(ValueError):
            CancellationToken().cancel_after(-1)

    def test_manual_cancel_stops_timer(self) -> None:
        token = CancellationToken()
        callback = MagicMock()
        token.register(callback)
        token.cancel_after(0.05)

        token.cancel()
        time.sleep(0.1)

        callback.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_wait_returns_when_already_cancelled(self) -> None:
        token = CancellationToken()
        token.cancel()

        await asyncio.wait_for(token.wait(), timeout=1)

    @pytest.mark.asyncio
    async def test_wait_wakes_on_cancel_from_thread(self) -> None:
        token = CancellationToken()
        waiter = asyncio.ensure_future(token.wait())
        await asyncio.sleep(0)
        assert not waiter.done()

        threading.Thread(target=token.cancel).start()

        await asyncio.wait_for(waiter, timeout=5)

    @pytest.mark.asyncio
    async def test_abandoned_wait_unregisters(self) -> None:
        token = CancellationToken()
        waiter = asyncio.ensure_future(token.wait())
        await asyncio.sleep(0)

        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter

        assert token._callbacks == []
