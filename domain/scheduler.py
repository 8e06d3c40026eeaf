# domain/scheduler.py
"""
Timer primitives used by the engine for deferred effects.

Delays are expressed in milliseconds of simulated time. The asyncio scheduler
maps them onto the running loop; the manual scheduler keeps its own clock and
only fires callbacks when advanced, which makes tests deterministic.
"""
from __future__ import annotations

import asyncio
import heapq
import itertools
import time
from typing import Callable, List, Tuple


class Scheduler:
    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> None:
        raise NotImplementedError

    def now(self) -> float:
        raise NotImplementedError


class AsyncioScheduler(Scheduler):
    """One-shot timers on the running event loop."""

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> None:
        loop = asyncio.get_running_loop()
        loop.call_later(delay_ms / 1000.0, callback)

    def now(self) -> float:
        return time.time()


class ManualScheduler(Scheduler):
    """Simulated-time scheduler driven explicitly by `advance`."""

    def __init__(self, start: float = 0.0):
        self._now_ms = start * 1000.0
        self._seq = itertools.count()
        self._queue: List[Tuple[float, int, Callable[[], None]]] = []

    @property
    def pending(self) -> int:
        return len(self._queue)

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> None:
        heapq.heappush(self._queue, (self._now_ms + delay_ms, next(self._seq), callback))

    def now(self) -> float:
        return self._now_ms / 1000.0

    def advance(self, delay_ms: float) -> int:
        """Move the clock forward, firing every callback that comes due.

        Returns the number of callbacks fired.
        """
        target = self._now_ms + delay_ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, callback = heapq.heappop(self._queue)
            self._now_ms = due
            callback()
            fired += 1
        self._now_ms = target
        return fired
