"""
Schedulers: how the engine hands control back to its host.

The engine never loops over all iterations itself. It runs one batch,
then asks the scheduler to call it back for the next one. What "later"
means is up to the scheduler:

- InlineScheduler: immediately, on the caller's stack (scripts, tests)
- ManualScheduler: when the caller says so (step-wise tests, cancellation)
- AsyncioScheduler: on the next pass of an asyncio event loop, so an
  interactive application stays responsive between batches
"""

from __future__ import annotations

import asyncio
from collections import deque
from typing import Callable


class InlineScheduler:
    """
    Run deferred callbacks synchronously in FIFO order.

    A callback that defers another callback does not recurse: the new
    callback is queued and run by the outermost defer() once the current
    one returns, so arbitrarily long runs use constant stack depth.
    """

    def __init__(self):
        self._queue: deque[Callable[[], None]] = deque()
        self._draining = False

    def defer(self, callback: Callable[[], None]) -> None:
        self._queue.append(callback)
        if self._draining:
            return

        self._draining = True
        try:
            while self._queue:
                self._queue.popleft()()
        finally:
            self._queue.clear()
            self._draining = False


class ManualScheduler:
    """
    Queue deferred callbacks until explicitly run.

    Usage:
        scheduler = ManualScheduler()
        run = BootstrapEngine(controller, scheduler).start(...)
        scheduler.run_next()     # one batch
        run.cancel()
        scheduler.run_all()      # observes the cancellation
    """

    def __init__(self):
        self._queue: deque[Callable[[], None]] = deque()

    @property
    def pending(self) -> int:
        """Number of callbacks waiting to run."""
        return len(self._queue)

    def defer(self, callback: Callable[[], None]) -> None:
        self._queue.append(callback)

    def run_next(self) -> bool:
        """Run one queued callback. Returns False if the queue was empty."""
        if not self._queue:
            return False
        self._queue.popleft()()
        return True

    def run_all(self) -> int:
        """Run callbacks until the queue is empty. Returns how many ran."""
        count = 0
        while self.run_next():
            count += 1
        return count


class AsyncioScheduler:
    """
    Defer callbacks onto an asyncio event loop.

    Args:
        loop: Event loop to schedule on. When omitted, each defer() uses
            the loop running at that moment, so one scheduler can serve
            successive asyncio.run() calls.
        delay: Seconds to wait before each batch. 0 schedules with
            call_soon, which already lets pending tasks and I/O run.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None, delay: float = 0.0):
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        self._loop = loop
        self._delay = delay

    def defer(self, callback: Callable[[], None]) -> None:
        loop = self._loop if self._loop is not None else asyncio.get_running_loop()
        if self._delay:
            loop.call_later(self._delay, callback)
        else:
            loop.call_soon(callback)
