"""GridGeometry - world/grid conversion for the target grid."""
from __future__ import annotations

from brickfall.config import GridConfig

# North, south, west, east. Never diagonal.
CARDINAL_OFFSETS: tuple[tuple[int, int], ...] = ((0, -1), (0, 1), (-1, 0), (1, 0))


class GridGeometry:
    def __init__(self, config: GridConfig | None = None) -> None:
        self._config = config if config is not None else GridConfig()

    @property
    def cols(self) -> int:
        return self._config.cols

    @property
    def rows(self) -> int:
        return self._config.rows

    def world_to_grid(self, x: float, y: float) -> tuple[int, int]:
        cfg = self._config
        col = round((x - cfg.origin_x) / cfg.pitch_x)
        row = round((y - cfg.origin_y) / cfg.pitch_y)
        return col, row

    def grid_to_world(self, col: int, row: int) -> tuple[float, float]:
        cfg = self._config
        return cfg.origin_x + col * cfg.pitch_x, cfg.origin_y + row * cfg.pitch_y

    def in_bounds(self, col: int, row: int) -> bool:
        return 0 <= col < self._config.cols and 0 <= row < self._config.rows

    def cardinal(self, col: int, row: int) -> list[tuple[int, int]]:
        """The four edge-adjacent cells, in N, S, W, E order. Not bounds-checked."""
        return [(col + dx, row + dy) for dx, dy in CARDINAL_OFFSETS]
