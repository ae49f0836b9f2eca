"""DeferredSchedule: explicit (fire-time, callback) queue drained by the host tick."""
from __future__ import annotations

import heapq
from typing import Callable, Generic, TypeVar

from brickfall.types import ContractError

R = TypeVar("R")


class DeferredSchedule(Generic[R]):
    """Min-heap of pending callbacks keyed by fire time.

    Nothing runs on its own: drain(now) fires every entry due at or before
    now, ordered by fire time and then by scheduling order.
    """

    def __init__(self) -> None:
        self._heap: list[tuple[float, int, Callable[[], R]]] = []
        self._seq: int = 0

    def call_later(self, now: float, delay: float, fn: Callable[[], R]) -> float:
        """Schedule fn to fire at now + delay. Returns the fire time."""
        if delay <= 0:
            raise ContractError(f"delay must be positive, got {delay}")
        fire_at = now + delay
        heapq.heappush(self._heap, (fire_at, self._seq, fn))
        self._seq += 1
        return fire_at

    def drain(self, now: float) -> list[R]:
        """Fire all due entries and return their results in firing order.

        Entries scheduled by a firing callback only run in this pass if
        they are already due.
        """
        results: list[R] = []
        while self._heap and self._heap[0][0] <= now:
            _, _, fn = heapq.heappop(self._heap)
            results.append(fn())
        return results

    def next_fire_time(self) -> float | None:
        return self._heap[0][0] if self._heap else None

    def pending(self) -> int:
        return len(self._heap)

    def clear(self) -> None:
        self._heap.clear()

    def __len__(self) -> int:
        return len(self._heap)

    def __repr__(self) -> str:
        return f"DeferredSchedule(pending={len(self._heap)}, next={self.next_fire_time()})"
