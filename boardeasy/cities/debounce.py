import asyncio
from typing import Optional


class DebounceTimer:
    """Cancellable countdown that collapses rapid triggers into one.

    Each call to ``schedule`` restarts the countdown and returns a future. The
    future resolves to True when the countdown elapses (or ``fire`` is called)
    and to False when a later ``schedule`` or ``cancel`` supersedes it.
    """

    def __init__(self, delay: float):
        self.delay = delay
        self._handle: Optional[asyncio.TimerHandle] = None
        self._waiter: Optional[asyncio.Future] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self) -> asyncio.Future:
        self.cancel()
        loop = asyncio.get_running_loop()
        waiter = loop.create_future()
        self._waiter = waiter
        self._handle = loop.call_later(self.delay, self._elapse, waiter)
        return waiter

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if self._waiter is not None and not self._waiter.done():
            self._waiter.set_result(False)
        self._waiter = None

    def fire(self) -> None:
        """Elapse the pending countdown immediately"""
        if self._handle is None:
            return
        self._handle.cancel()
        self._elapse(self._waiter)

    def _elapse(self, waiter: asyncio.Future) -> None:
        self._handle = None
        self._waiter = None
        if not waiter.done():
            waiter.set_result(True)
