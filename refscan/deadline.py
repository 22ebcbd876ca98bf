"""One-shot search deadline with a cooperative cancellation flag."""

from __future__ import annotations

import asyncio
import time
from typing import Callable, Optional


class Deadline:
    """Arms a timer on `start()`; workers poll `cancelled` between files.

    `expired()` re-checks the wall clock directly so a late timer callback
    does not let a busy loop run past the budget.
    """

    def __init__(self, max_search_ms: int, on_expire: Optional[Callable[[int], None]] = None):
        self.max_search_ms = max_search_ms
        self._on_expire = on_expire
        self._event = asyncio.Event()
        self._handle: Optional[asyncio.TimerHandle] = None
        self._t0 = time.monotonic()

    def start(self) -> "Deadline":
        self._t0 = time.monotonic()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.max_search_ms / 1000.0, self._fire)
        return self

    def _fire(self) -> None:
        self._handle = None
        if self._event.is_set():
            return
        self._event.set()
        if self._on_expire is not None:
            self._on_expire(self.elapsed_ms())

    def elapsed_ms(self) -> int:
        return int((time.monotonic() - self._t0) * 1000)

    def expired(self) -> bool:
        return self.elapsed_ms() > self.max_search_ms

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def trip(self) -> None:
        """Raise the cancellation flag without notifying `on_expire`."""
        self._event.set()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
