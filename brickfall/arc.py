"""ElectricArcResolver - neighbour lookup and delayed chain damage."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Iterable, TypeVar

from brickfall.config import ArcConfig
from brickfall.grid import GridGeometry

if TYPE_CHECKING:
    from brickfall.schedule import DeferredSchedule
    from brickfall.types import Target

logger = logging.getLogger(__name__)

R = TypeVar("R")


class ElectricArcResolver:
    """Finds the cardinal neighbours of a hit target and schedules chain hits."""

    def __init__(
        self,
        geometry: GridGeometry | None = None,
        config: ArcConfig | None = None,
    ) -> None:
        self._geometry = geometry if geometry is not None else GridGeometry()
        self._config = config if config is not None else ArcConfig()

    @property
    def delay_ms(self) -> float:
        return self._config.delay_ms

    def find_adjacent(self, source: Target, targets: Iterable[Target]) -> list[Target]:
        """Active targets north, south, west and east of source, in that order.

        Cells are derived from world positions, so a target that drifted off
        its nominal cell is found where it currently sits.
        """
        by_cell: dict[tuple[int, int], Target] = {}
        for target in targets:
            if target is source or target.id == source.id or not target.active:
                continue
            cell = self._geometry.world_to_grid(target.x, target.y)
            by_cell.setdefault(cell, target)

        col, row = self._geometry.world_to_grid(source.x, source.y)
        adjacent: list[Target] = []
        for cell in self._geometry.cardinal(col, row):
            target = by_cell.get(cell)
            if target is not None:
                adjacent.append(target)
        return adjacent

    def schedule_chain(
        self,
        source: Target,
        targets: Iterable[Target],
        now: float,
        schedule: DeferredSchedule[R],
        fire: Callable[[Target, Target], R],
    ) -> list[Target]:
        """Schedule fire(source, neighbour) for every neighbour after the arc delay."""
        adjacent = self.find_adjacent(source, targets)
        for target in adjacent:
            schedule.call_later(
                now, self._config.delay_ms, _bind(fire, source, target)
            )
        if adjacent:
            logger.debug(
                "Chain from target %d scheduled onto %s",
                source.id,
                [t.id for t in adjacent],
            )
        return adjacent


def _bind(
    fire: Callable[[Target, Target], R], source: Target, target: Target
) -> Callable[[], R]:
    def _fire() -> R:
        return fire(source, target)

    return _fire
