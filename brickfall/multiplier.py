"""ScoreMultiplier: a hit-driven, time-decaying score multiplier."""
from __future__ import annotations

import math
from typing import Any

from brickfall.config import MultiplierConfig


class ScoreMultiplier:
    """Multiplier that grows on hits with diminishing returns and decays when idle.

    The value always stays within [base, max_value].
    """

    def __init__(self, config: MultiplierConfig | None = None) -> None:
        self._config = config if config is not None else MultiplierConfig()
        self._value: float = self._config.base
        self._last_hit: float = 0.0

    @property
    def value(self) -> float:
        return self._value

    @property
    def last_hit(self) -> float:
        return self._last_hit

    @property
    def config(self) -> MultiplierConfig:
        return self._config

    def is_above_base(self) -> bool:
        return self._value > self._config.base

    def step_size(self) -> float:
        """Increment the next hit would add, before capping."""
        return self._config.step * (self._config.base / self._value)

    def increment(self, now: float) -> None:
        self._last_hit = now
        self._value = min(self._config.max_value, self._value + self.step_size())

    def update(self, now: float, delta_ms: float) -> None:
        """Decay after the grace period; faster the higher the value."""
        cfg = self._config
        if now - self._last_hit < cfg.decay_delay_ms:
            return
        if self._value <= cfg.base:
            return
        decay = cfg.decay_rate * (delta_ms / 1000.0) * (self._value / cfg.max_value)
        self._value = max(cfg.base, self._value - decay)

    def reset(self) -> None:
        self._value = self._config.base
        self._last_hit = 0.0

    def apply_to_score(self, points: int) -> int:
        return math.floor(points * self._value)

    # --- Serialization ---

    def snapshot(self) -> dict[str, Any]:
        return {"value": self._value, "last_hit": self._last_hit}

    def restore(self, data: dict[str, Any]) -> None:
        cfg = self._config
        self._value = max(cfg.base, min(cfg.max_value, float(data["value"])))
        self._last_hit = float(data["last_hit"])
