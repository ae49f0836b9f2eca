"""Tests for brickfall.grid and brickfall.arc: neighbour lookup and chain scheduling."""
from __future__ import annotations

from brickfall.arc import ElectricArcResolver
from brickfall.grid import GridGeometry
from brickfall.schedule import DeferredSchedule
from brickfall.types import Target


def _grid(cols: int = 3, rows: int = 3) -> list[Target]:
    geo = GridGeometry()
    targets = []
    for row in range(rows):
        for col in range(cols):
            x, y = geo.grid_to_world(col, row)
            targets.append(Target(id=row * cols + col, col=col, row=row, x=x, y=y, health=1))
    return targets


class TestGridGeometry:
    def test_round_trip(self) -> None:
        geo = GridGeometry()
        for col in range(10):
            for row in range(8):
                assert geo.world_to_grid(*geo.grid_to_world(col, row)) == (col, row)

    def test_world_to_grid_rounds(self) -> None:
        geo = GridGeometry()
        x, y = geo.grid_to_world(4, 2)
        assert geo.world_to_grid(x + 20, y - 10) == (4, 2)

    def test_in_bounds(self) -> None:
        geo = GridGeometry()
        assert geo.in_bounds(0, 0)
        assert geo.in_bounds(9, 7)
        assert not geo.in_bounds(10, 0)
        assert not geo.in_bounds(0, -1)

    def test_cardinal_order(self) -> None:
        assert GridGeometry().cardinal(5, 5) == [(5, 4), (5, 6), (4, 5), (6, 5)]


class TestFindAdjacent:
    def test_center_of_full_grid_finds_four_cardinals(self) -> None:
        targets = _grid()
        center = targets[4]
        adjacent = ElectricArcResolver().find_adjacent(center, targets)
        # north, south, west, east
        assert [t.id for t in adjacent] == [1, 7, 3, 5]

    def test_excludes_diagonals_and_source(self) -> None:
        targets = _grid()
        ids = {t.id for t in ElectricArcResolver().find_adjacent(targets[4], targets)}
        assert ids.isdisjoint({0, 2, 6, 8, 4})

    def test_excludes_inactive(self) -> None:
        targets = _grid()
        targets[1].active = False
        targets[5].active = False
        adjacent = ElectricArcResolver().find_adjacent(targets[4], targets)
        assert [t.id for t in adjacent] == [7, 3]

    def test_corner_has_two(self) -> None:
        targets = _grid()
        adjacent = ElectricArcResolver().find_adjacent(targets[0], targets)
        assert [t.id for t in adjacent] == [3, 1]

    def test_uses_current_position(self) -> None:
        geo = GridGeometry()
        sx, sy = geo.grid_to_world(4, 4)
        source = Target(id=0, col=4, row=4, x=sx, y=sy, health=1)
        nx, ny = geo.grid_to_world(5, 4)
        # Nominal cell is far away; it drifted next to the source.
        drifter = Target(id=1, col=0, row=0, x=nx, y=ny, health=1)
        adjacent = ElectricArcResolver(geo).find_adjacent(source, [source, drifter])
        assert adjacent == [drifter]


class TestScheduleChain:
    def test_fires_after_delay(self) -> None:
        targets = _grid()
        arc = ElectricArcResolver()
        schedule: DeferredSchedule[tuple[int, int]] = DeferredSchedule()
        scheduled = arc.schedule_chain(
            targets[4], targets, 1000, schedule, lambda s, t: (s.id, t.id)
        )
        assert len(scheduled) == 4
        assert schedule.drain(1099) == []
        assert schedule.drain(1100) == [(4, 1), (4, 7), (4, 3), (4, 5)]

    def test_nothing_to_schedule(self) -> None:
        lone = _grid(1, 1)
        schedule: DeferredSchedule[None] = DeferredSchedule()
        assert ElectricArcResolver().schedule_chain(lone[0], lone, 0, schedule, lambda s, t: None) == []
        assert len(schedule) == 0
