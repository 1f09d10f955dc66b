"""Deferred callbacks for decisions that must wait one event-loop turn.

A focus-loss event fires before the newly focused element is known, so the
"should the dropdown close?" check is pushed to the next turn instead of
being evaluated inside the blur handler.
"""

from __future__ import annotations

import asyncio
from collections import deque
from typing import Callable

Scheduler = Callable[[Callable[[], None]], None]


def call_soon(callback: Callable[[], None]) -> None:
    """Run *callback* on the next turn of the running asyncio loop.

    Without a running loop there is no later turn to wait for, so the
    callback runs immediately.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        callback()
        return
    loop.call_soon(callback)


class DeferredQueue:
    """FIFO scheduler for hosts that drive their own event loop.

    ``schedule`` only records the callback; ``run_pending`` runs everything
    queued so far, including callbacks scheduled while draining.
    """

    def __init__(self) -> None:
        self._queue: deque[Callable[[], None]] = deque()

    def __call__(self, callback: Callable[[], None]) -> None:
        self.schedule(callback)

    def schedule(self, callback: Callable[[], None]) -> None:
        self._queue.append(callback)

    @property
    def pending(self) -> int:
        return len(self._queue)

    def run_pending(self) -> int:
        """Run queued callbacks in order. Returns how many ran."""
        count = 0
        while self._queue:
            callback = self._queue.popleft()
            callback()
            count += 1
        return count
