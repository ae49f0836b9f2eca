"""Endless-mode wave generation.

Every wave is a pure function of (seed, wave index): the generator seeds a
fresh ``random.Random`` per wave and consumes draws in a fixed order
(pattern, layout, top-up, then kind and health per placement), so the same
pair always reproduces the same layout.
"""
from __future__ import annotations

import json
import logging
import math
import random
from dataclasses import asdict, dataclass
from typing import Any, Callable

from brickfall.config import RulesConfig, WaveRules
from brickfall.selector import select_weighted
from brickfall.types import PINATA, ConfigError, ContractError, Placement, WeightedItem

logger = logging.getLogger(__name__)

Cell = tuple[int, int]

SCATTER = "scatter"
ROWS = "rows"
SYMMETRIC = "symmetric"
CLUSTERS = "clusters"
MAZE = "maze"
FORTRESS = "fortress"


@dataclass(frozen=True)
class WaveConfig:
    """Difficulty parameters derived from the wave index."""

    wave: int
    brick_count: int
    average_health: int
    density: float
    speed_scalar: float
    checkpoint: bool


def wave_config(wave: int, rules: WaveRules | None = None) -> WaveConfig:
    """Derive the difficulty parameters for a wave index.

    Raises:
        ContractError: If wave is negative.
    """
    if wave < 0:
        raise ContractError(f"wave index must be >= 0, got {wave}")
    r = rules if rules is not None else WaveRules()
    return WaveConfig(
        wave=wave,
        brick_count=r.base_brick_count + min(wave * r.brick_count_step, r.max_extra_bricks),
        average_health=min(1 + wave // r.health_interval, r.max_health),
        density=r.base_density + min(wave * r.density_step, r.max_extra_density),
        speed_scalar=1.0 + min(wave * r.speed_step, r.max_extra_speed),
        checkpoint=wave % r.checkpoint_interval == 0,
    )


@dataclass(frozen=True)
class Wave:
    """One generated layout."""

    config: WaveConfig
    pattern: str
    placements: tuple[Placement, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "config": asdict(self.config),
            "pattern": self.pattern,
            "placements": [asdict(p) for p in self.placements],
        }

    def to_json(self) -> str:
        """Canonical JSON; identical layouts produce identical bytes."""
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))


# --- Patterns ---
# Each pattern returns (cells, reinforced) inside a cols x rows region.
# Cells may repeat or run short; the generator dedupes and tops up.

def _scatter(
    rng: random.Random, cols: int, rows: int, count: int, wave: int
) -> tuple[list[Cell], set[Cell]]:
    cells = [(c, r) for r in range(rows) for c in range(cols)]
    rng.shuffle(cells)
    return cells[:count], set()


def _rows(
    rng: random.Random, cols: int, rows: int, count: int, wave: int
) -> tuple[list[Cell], set[Cell]]:
    cells: list[Cell] = []
    for r in range(rows):
        if len(cells) >= count:
            break
        gaps = {rng.randrange(cols) for _ in range(rng.randrange(3))}
        cells.extend((c, r) for c in range(cols) if c not in gaps)
    return cells, set()


def _symmetric(
    rng: random.Random, cols: int, rows: int, count: int, wave: int
) -> tuple[list[Cell], set[Cell]]:
    half = [(c, r) for r in range(rows) for c in range(cols // 2)]
    rng.shuffle(half)
    cells: list[Cell] = []
    for c, r in half:
        if len(cells) >= count:
            break
        cells.append((c, r))
        cells.append((cols - 1 - c, r))
    return cells, set()


def _clusters(
    rng: random.Random, cols: int, rows: int, count: int, wave: int
) -> tuple[list[Cell], set[Cell]]:
    cells: list[Cell] = []
    taken: set[Cell] = set()
    for _ in range(3 + rng.randrange(3)):
        cx = 1 + rng.randrange(max(1, cols - 2))
        cy = rng.randrange(rows)
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                cell = (cx + dx, cy + dy)
                if not (0 <= cell[0] < cols and 0 <= cell[1] < rows):
                    continue
                if cell not in taken and rng.random() < 0.8:
                    taken.add(cell)
                    cells.append(cell)
    return cells, set()


def _maze(
    rng: random.Random, cols: int, rows: int, count: int, wave: int
) -> tuple[list[Cell], set[Cell]]:
    channels = {rng.randrange(cols) for _ in range(2 + rng.randrange(2))}
    cells: list[Cell] = []
    for r in range(rows):
        # Horizontal passage.
        if rng.random() < 0.3:
            continue
        for c in range(cols):
            if c in channels or rng.random() < 0.25:
                continue
            cells.append((c, r))
    return cells, set()


def _fortress(
    rng: random.Random, cols: int, rows: int, count: int, wave: int
) -> tuple[list[Cell], set[Cell]]:
    cx, cy = cols // 2, rows // 3
    size = min(3 + wave // 10, 4)
    core_limit = int(count * 0.4)
    core: list[Cell] = []
    for dy in range(-1, size - 1):
        for dx in range(-size + 1, size):
            cell = (cx + dx, cy + dy)
            if 0 <= cell[0] < cols and 0 <= cell[1] < rows and len(core) < core_limit:
                core.append(cell)
    core_set = set(core)
    shell = [(c, r) for r in range(rows) for c in range(cols) if (c, r) not in core_set]
    rng.shuffle(shell)
    return core + shell[: count - len(core)], core_set


PATTERNS: dict[str, Callable[..., tuple[list[Cell], set[Cell]]]] = {
    SCATTER: _scatter,
    ROWS: _rows,
    SYMMETRIC: _symmetric,
    CLUSTERS: _clusters,
    MAZE: _maze,
    FORTRESS: _fortress,
}


class WaveGenerator:
    """Seeded, stateless-per-wave layout generator for the endless mode."""

    def __init__(self, seed: int, config: RulesConfig | None = None) -> None:
        self._seed = seed
        self._config = config if config is not None else RulesConfig()
        rules = self._config.waves
        unknown = (set(rules.pattern_weights) | set(rules.checkpoint_patterns)) - set(PATTERNS)
        if unknown:
            raise ConfigError(f"Unknown wave patterns: {sorted(unknown)}")
        named = {PINATA}.union(*(weights for _, weights in rules.kind_tiers))
        missing = named - set(self._config.targets)
        if missing:
            raise ConfigError(f"Wave target kinds without a profile: {sorted(missing)}")

    @property
    def seed(self) -> int:
        return self._seed

    def config_for(self, wave: int) -> WaveConfig:
        return wave_config(wave, self._config.waves)

    def pattern_weights(self, wave: int) -> list[WeightedItem[str]]:
        """Pattern weights at this wave, early weights easing into late ones."""
        rules = self._config.waves
        if wave % rules.checkpoint_interval == 0:
            return [WeightedItem(name, 1.0) for name in rules.checkpoint_patterns]
        t = min(wave / rules.ramp_waves, 1.0) if rules.ramp_waves > 0 else 1.0
        return [
            WeightedItem(name, early + (late - early) * t)
            for name, (early, late) in rules.pattern_weights.items()
        ]

    def select_pattern(self, wave: int, random_value: float) -> str:
        pattern = select_weighted(self.pattern_weights(wave), random_value)
        if pattern is None:
            raise ConfigError(f"No wave pattern has positive weight at wave {wave}")
        return pattern

    def generate(self, wave: int) -> Wave:
        """Build the layout for a wave index. Same seed and index, same wave."""
        cfg = self.config_for(wave)
        grid = self._config.grid
        cols, rows = grid.cols, grid.rows
        count = cfg.brick_count
        if count > cols * rows:
            raise ConfigError(f"wave {wave} needs {count} bricks but the grid holds {cols * rows}")

        rng = random.Random(f"{self._seed}:{wave}")
        pattern = self.select_pattern(wave, rng.random())

        region_rows = rows
        if cfg.density > 0:
            region_rows = min(rows, math.ceil(count / (cfg.density * cols)))
        region_rows = max(region_rows, math.ceil(count / cols))

        raw, reinforced = PATTERNS[pattern](rng, cols, region_rows, count, wave)
        cells = _unique_in_bounds(raw, cols, region_rows)[:count]
        if len(cells) < count:
            taken = set(cells)
            free = [(c, r) for r in range(region_rows) for c in range(cols) if (c, r) not in taken]
            rng.shuffle(free)
            cells.extend(free[: count - len(cells)])

        placements = tuple(
            self._place(rng, cell, cfg, cell in reinforced) for cell in cells
        )
        logger.debug(
            "Generated wave %d: pattern=%s bricks=%d region_rows=%d",
            wave,
            pattern,
            len(placements),
            region_rows,
        )
        return Wave(config=cfg, pattern=pattern, placements=placements)

    # --- Per-brick attributes ---

    def _place(
        self, rng: random.Random, cell: Cell, cfg: WaveConfig, reinforced: bool
    ) -> Placement:
        rules = self._config.waves
        col, row = cell
        if reinforced:
            return Placement(
                col=col,
                row=row,
                kind=PINATA,
                health=min(2 + cfg.wave // 15, rules.max_health),
            )
        kind = self._brick_kind(cfg.wave, rng.random())
        return Placement(col=col, row=row, kind=kind, health=self._brick_health(cfg, cell, rng.random()))

    def _brick_kind(self, wave: int, random_value: float) -> str:
        weights: dict[str, float] = {}
        for limit, tier in self._config.waves.kind_tiers:
            weights = tier
            if limit < 0 or wave <= limit:
                break
        kind = select_weighted([WeightedItem(k, w) for k, w in weights.items()], random_value)
        if kind is None:
            raise ConfigError(f"No brick kind has positive weight at wave {wave}")
        return kind

    def _brick_health(self, cfg: WaveConfig, cell: Cell, random_value: float) -> int:
        """Average health nudged up near the centre and the top, plus jitter."""
        grid = self._config.grid
        col, row = cell
        bonus = 0.0
        if abs(col - grid.cols / 2) < 3:
            bonus += 0.2
        if row < grid.rows / 2:
            bonus += 0.15
        health = math.floor(cfg.average_health + bonus + (random_value - 0.5) + 0.5)
        return max(1, min(self._config.waves.max_health, health))


def _unique_in_bounds(cells: list[Cell], cols: int, rows: int) -> list[Cell]:
    seen: set[Cell] = set()
    out: list[Cell] = []
    for cell in cells:
        if cell in seen or not (0 <= cell[0] < cols and 0 <= cell[1] < rows):
            continue
        seen.add(cell)
        out.append(cell)
    return out
