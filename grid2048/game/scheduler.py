# -*- coding: utf-8 -*-
"""
Deferred callbacks for a single-threaded game loop.

The host owns the loop: it calls ``run_due`` on every tick, or ``run_all`` to fast-forward.
"""
import time
from dataclasses import dataclass, field
from heapq import heappop, heappush
from itertools import count
from typing import Callable


@dataclass(order=True)
class Handle:
    """A scheduled callback. Cancelled handles stay in the queue and are skipped when due."""

    due: float
    sequence: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class DeferredQueue:
    """
    Queue of callbacks ordered by due time, then by scheduling order.

    Parameters
    ----------
    clock : Callable[[], float], optional
        Source of the current time in seconds (default is ``time.monotonic``).
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._heap: list[Handle] = []
        self._sequence = count()

    def __len__(self) -> int:
        return sum(1 for handle in self._heap if not handle.cancelled)

    @property
    def pending(self) -> bool:
        return len(self) > 0

    def call_later(self, delay: float, callback: Callable[[], None]) -> Handle:
        """
        Schedule a callback.

        Parameters
        ----------
        delay : float
            Seconds to wait, from now.
        callback : Callable[[], None]
            Function to call once the delay elapsed.

        Returns
        -------
        Handle
            The handle, to cancel the callback.
        """
        handle = Handle(due=self._clock() + max(delay, 0.0), sequence=next(self._sequence), callback=callback)
        heappush(self._heap, handle)
        return handle

    def run_due(self, now: float | None = None) -> int:
        """
        Run every callback whose due time has passed.

        Parameters
        ----------
        now : float, optional
            Time to compare due times against (default is the clock's current time).

        Returns
        -------
        int
            Number of callbacks run.
        """
        now = self._clock() if now is None else now
        executed = 0
        while self._heap and self._heap[0].due <= now:
            handle = heappop(self._heap)
            if handle.cancelled:
                continue
            handle.callback()
            executed += 1
        return executed

    def run_all(self) -> int:
        """
        Run every pending callback in order, regardless of its due time.

        Callbacks scheduled while running are run too.
        """
        executed = 0
        while self._heap:
            handle = heappop(self._heap)
            if handle.cancelled:
                continue
            handle.callback()
            executed += 1
        return executed
