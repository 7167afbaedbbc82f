"""Cooperative cancellation shared between threads and asyncio code."""

import asyncio
import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class CancellationToken:
    """Thread-safe cooperative cancellation signal.

    Cancel from any thread; observe with ``cancelled``, a registered
    callback, or ``await token.wait()`` inside an event loop. Timeouts are
    composed with ``cancel_after``.

    Example:
        >>> token = CancellationToken()
        >>> token.cancel_after(5.0)
        >>> outcome = await runner.run_async("-c 4 localhost", token)
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []
        self._timer: threading.Timer | None = None

    @property
    def cancelled(self) -> bool:
        """Whether cancellation was requested."""
        return self._event.is_set()

    def cancel(self) -> None:
        """Request cancellation. Idempotent."""
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks = list(self._callbacks)
            self._callbacks.clear()
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

        for callback in callbacks:
            try:
                callback()
            except Exception:
                logger.exception("Cancellation callback failed")

    def cancel_after(self, seconds: float) -> None:
        """Cancel automatically once ``seconds`` have elapsed."""
        if seconds < 0:
            raise ValueError(f"Delay must be non-negative, got {seconds}")

        with self._lock:
            if self._event.is_set():
                return
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(seconds, self.cancel)
            self._timer.daemon = True
            self._timer.start()

    def register(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Run ``callback`` on cancellation.

        Runs immediately on the calling thread if already cancelled.

        Returns:
            A function that unregisters the callback.
        """
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return lambda: self._unregister(callback)

        callback()
        return lambda: None

    def _unregister(self, callback: Callable[[], None]) -> None:
        with self._lock:
            try:
                self._callbacks.remove(callback)
            except ValueError:
                pass

    async def wait(self) -> None:
        """Suspend until cancellation is requested."""
        if self._event.is_set():
            return

        loop = asyncio.get_running_loop()
        waiter: asyncio.Future[None] = loop.create_future()

        def _wake() -> None:
            if not waiter.done():
                waiter.set_result(None)

        unregister = self.register(lambda: loop.call_soon_threadsafe(_wake))
        try:
            await waiter
        finally:
            unregister()
