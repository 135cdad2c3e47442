"""Cancellable timers owned by the console instead of ambient global timers.

Two implementations share one small interface:

* :class:`AsyncioScheduler` runs timers on an asyncio event loop and is what
  the CLI uses.
* :class:`ManualScheduler` keeps a virtual clock that only moves when
  :meth:`ManualScheduler.advance` is called. Tests use it to exercise the
  debounce and polling logic without wall-clock waits, and the Streamlit
  dashboard advances it by real elapsed time on every rerun.
"""
from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from typing import Awaitable, Callable, List, Optional

logger = logging.getLogger(__name__)

Callback = Callable[[], None]
CoroutineFactory = Callable[[], Awaitable[object]]


class TimerHandle:
    """Handle returned by ``call_later``/``call_every``; cancel it to stop the timer."""

    def __init__(self) -> None:
        self.cancelled = False
        self._on_cancel: Optional[Callback] = None

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        if self._on_cancel:
            self._on_cancel()


class Scheduler:
    """Interface shared by the schedulers below."""

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        raise NotImplementedError

    def call_every(self, interval: float, callback: Callback) -> TimerHandle:
        raise NotImplementedError

    def spawn(self, factory: CoroutineFactory) -> None:
        raise NotImplementedError


class AsyncioScheduler(Scheduler):
    """Schedule timers and tasks on an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._tasks: set[asyncio.Task] = set()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        handle = TimerHandle()
        loop_handle = self.loop.call_later(delay, callback)
        handle._on_cancel = loop_handle.cancel
        return handle

    def call_every(self, interval: float, callback: Callback) -> TimerHandle:
        handle = TimerHandle()
        current: dict[str, asyncio.TimerHandle] = {}

        def _tick() -> None:
            if handle.cancelled:
                return
            current["timer"] = self.loop.call_later(interval, _tick)
            callback()

        current["timer"] = self.loop.call_later(interval, _tick)
        handle._on_cancel = lambda: current["timer"].cancel()
        return handle

    def spawn(self, factory: CoroutineFactory) -> None:
        task = self.loop.create_task(factory())
        # Keep a strong reference until the task finishes.
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def wait_idle(self) -> None:
        """Wait for every task spawned so far to finish."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


class ManualScheduler(Scheduler):
    """Virtual-clock scheduler; time only moves when :meth:`advance` is called.

    With a ``clock``, new timers are armed from the later of the virtual time
    and the clock reading, so a caller that only advances occasionally still
    measures delays from the moment they were requested.
    """

    def __init__(self, start: float = 0.0, clock: Optional[Callable[[], float]] = None) -> None:
        self.now = start
        self._clock = clock
        self._counter = itertools.count()
        self._timers: list[tuple[float, int, TimerHandle, Callback]] = []
        self._pending: List[CoroutineFactory] = []

    def _base(self) -> float:
        if self._clock is None:
            return self.now
        return max(self.now, self._clock())

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        handle = TimerHandle()
        heapq.heappush(self._timers, (self._base() + delay, next(self._counter), handle, callback))
        return handle

    def call_every(self, interval: float, callback: Callback) -> TimerHandle:
        handle = TimerHandle()

        def _tick() -> None:
            if handle.cancelled:
                return
            heapq.heappush(self._timers, (self.now + interval, next(self._counter), handle, _tick))
            callback()

        heapq.heappush(self._timers, (self._base() + interval, next(self._counter), handle, _tick))
        return handle

    def spawn(self, factory: CoroutineFactory) -> None:
        self._pending.append(factory)

    @property
    def pending_timers(self) -> int:
        return sum(1 for _, _, handle, _ in self._timers if not handle.cancelled)

    @property
    def pending_tasks(self) -> int:
        return len(self._pending)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing due timers in deadline order.

        Returns the number of callbacks that fired.
        """

        return self.advance_to(self.now + seconds)

    def advance_to(self, target: float) -> int:
        fired = 0
        while self._timers and self._timers[0][0] <= target:
            deadline, _, handle, callback = heapq.heappop(self._timers)
            if handle.cancelled:
                continue
            self.now = deadline
            callback()
            fired += 1
        self.now = max(self.now, target)
        return fired

    async def run_pending(self) -> int:
        """Await every spawned coroutine in spawn order; returns how many ran."""

        ran = 0
        while self._pending:
            factory = self._pending.pop(0)
            await factory()
            ran += 1
        return ran
