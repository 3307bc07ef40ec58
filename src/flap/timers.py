from __future__ import annotations

from dataclasses import dataclass
from typing import Callable


@dataclass
class TimerHandle:
    delay_ms: float
    callback: Callable[[], None]
    loop: bool
    due_at: float
    removed: bool = False

    def remove(self) -> None:
        self.removed = True


class TimerQueue:
    """
    Millisecond timers driven by an external clock (`advance(dt)` once per frame).

    Repeating timers catch up if a single frame spans several intervals.
    Callbacks may add or remove timers; removal takes effect immediately.
    """

    def __init__(self) -> None:
        self._now: float = 0.0
        self._timers: list[TimerHandle] = []

    def add(self, delay_ms: float, callback: Callable[[], None], *, loop: bool = False) -> TimerHandle:
        delay = max(1.0, float(delay_ms))
        handle = TimerHandle(delay_ms=delay, callback=callback, loop=bool(loop), due_at=self._now + delay / 1000.0)
        self._timers.append(handle)
        return handle

    def pending(self) -> list[TimerHandle]:
        return [t for t in self._timers if not t.removed]

    def advance(self, dt: float) -> None:
        self._now += max(0.0, float(dt))
        for handle in list(self._timers):
            while not handle.removed and handle.due_at <= self._now:
                if handle.loop:
                    handle.due_at += handle.delay_ms / 1000.0
                else:
                    handle.removed = True
                handle.callback()
        self._timers = [t for t in self._timers if not t.removed]


__all__ = ["TimerHandle", "TimerQueue"]
