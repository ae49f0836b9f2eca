"""Tests for brickfall.schedule: DeferredSchedule."""
from __future__ import annotations

import pytest

from brickfall.schedule import DeferredSchedule
from brickfall.types import ContractError


class TestCallLater:
    def test_returns_fire_time(self) -> None:
        s: DeferredSchedule[str] = DeferredSchedule()
        assert s.call_later(50, 100, lambda: "x") == 150
        assert s.next_fire_time() == 150
        assert len(s) == 1

    @pytest.mark.parametrize("delay", [0, -5])
    def test_non_positive_delay_rejected(self, delay: float) -> None:
        s: DeferredSchedule[str] = DeferredSchedule()
        with pytest.raises(ContractError):
            s.call_later(0, delay, lambda: "x")


class TestDrain:
    def test_nothing_fires_early(self) -> None:
        s: DeferredSchedule[str] = DeferredSchedule()
        s.call_later(0, 100, lambda: "x")
        assert s.drain(99) == []
        assert s.pending() == 1

    def test_fires_at_due_time(self) -> None:
        s: DeferredSchedule[str] = DeferredSchedule()
        s.call_later(0, 100, lambda: "x")
        assert s.drain(100) == ["x"]
        assert s.pending() == 0
        assert s.next_fire_time() is None

    def test_ordered_by_time_then_insertion(self) -> None:
        s: DeferredSchedule[str] = DeferredSchedule()
        s.call_later(0, 200, lambda: "late")
        s.call_later(0, 100, lambda: "first")
        s.call_later(0, 100, lambda: "second")
        assert s.drain(500) == ["first", "second", "late"]

    def test_clear(self) -> None:
        s: DeferredSchedule[int] = DeferredSchedule()
        s.call_later(0, 10, lambda: 1)
        s.clear()
        assert s.drain(100) == []

    def test_repr(self) -> None:
        s: DeferredSchedule[int] = DeferredSchedule()
        s.call_later(0, 10, lambda: 1)
        assert repr(s) == "DeferredSchedule(pending=1, next=10)"
