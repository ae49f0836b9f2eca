"""GameSession - explicit per-session context handed to the resolver."""
from __future__ import annotations

import logging
import os
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from brickfall.config import RulesConfig
from brickfall.effects import AbilityRegistry, EffectSet
from brickfall.grid import GridGeometry
from brickfall.multiplier import ScoreMultiplier
from brickfall.schedule import DeferredSchedule
from brickfall.types import ContractError, Paddle, Pickup, Projectile, Target

if TYPE_CHECKING:
    from brickfall.outcomes import Outcome
    from brickfall.waves import Wave

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionReport:
    """Handed to the persistence/currency layer once at round or game end."""

    score: int
    round_complete: bool
    lives: int
    wave: int


class GameSession:
    """Owns all mutable rule state of one play-through.

    Nothing here is global: create one per game, pass it to a
    CollisionResolver, throw it away afterwards.
    """

    def __init__(
        self,
        config: RulesConfig | None = None,
        seed: int | None = None,
        paddle: Paddle | None = None,
    ) -> None:
        self.config = config if config is not None else RulesConfig()
        self.registry = AbilityRegistry(self.config.abilities)
        self.geometry = GridGeometry(self.config.grid)
        self.multiplier = ScoreMultiplier(self.config.multiplier)
        self.schedule: DeferredSchedule[list[Outcome]] = DeferredSchedule()
        self.effects = EffectSet()  # session-scoped abilities
        self.paddle = paddle

        if seed is None:
            seed = int.from_bytes(os.urandom(8))
        self._seed = seed
        self.rng = random.Random(seed)

        self.projectiles: dict[int, Projectile] = {}
        self.targets: dict[int, Target] = {}
        self.pickups: dict[int, Pickup] = {}
        self.primary_id: int | None = None

        self.score: int = 0
        self.lives: int = self.config.starting_lives
        self.wave: int = 0
        self.speed_scalar: float = 1.0
        self.round_complete: bool = False
        self.now: float = 0.0
        self.debug_drop_chance: float | None = None

    @property
    def seed(self) -> int:
        return self._seed

    def random(self) -> float:
        return self.rng.random()

    # --- Entities ---

    def add_projectile(self, projectile: Projectile) -> None:
        self.projectiles[projectile.id] = projectile
        if self.primary_id is None:
            self.primary_id = projectile.id

    def remove_projectile(self, projectile_id: int) -> None:
        """Drop a projectile (e.g. lost below the paddle). Primary moves on."""
        self.projectiles.pop(projectile_id, None)
        if self.primary_id == projectile_id:
            self.primary_id = next(iter(self.projectiles), None)

    def primary(self) -> Projectile | None:
        if self.primary_id is None:
            return None
        return self.projectiles.get(self.primary_id)

    def add_target(self, target: Target) -> None:
        self._check_target(target)
        self.targets[target.id] = target

    def _check_target(self, target: Target) -> None:
        if target.health < 0:
            raise ContractError(f"target {target.id} has negative health")
        if target.kind not in self.config.targets:
            raise ContractError(f"target {target.id} has unconfigured kind {target.kind!r}")

    def add_pickup(self, pickup: Pickup) -> None:
        self.pickups[pickup.id] = pickup

    def remove_pickup(self, pickup_id: int) -> None:
        self.pickups.pop(pickup_id, None)

    def active_targets(self) -> list[Target]:
        return [t for t in self.targets.values() if t.active]

    def remaining_targets(self) -> int:
        return sum(1 for t in self.targets.values() if t.active)

    # --- Session-wide queries ---

    def power_bonus_active(self, now: float) -> bool:
        return self.effects.is_active(self.config.power_bonus_ability, now)

    def paddle_half_width(self, now: float) -> float:
        """Paddle half width scaled by active session abilities. 0 without a paddle."""
        if self.paddle is None:
            return 0.0
        return self.paddle.half_width * self.effects.width_scale(self.registry, now)

    # --- Round / life transitions ---

    def start_round(self, targets: list[Target], wave: int = 0, speed_scalar: float = 1.0) -> None:
        """Replace the layout and clear per-round state. Score and lives carry over."""
        for target in targets:
            self._check_target(target)
        self.targets = {t.id: t for t in targets}
        self.pickups.clear()
        self.schedule.clear()
        self.effects.clear()
        for projectile in self.projectiles.values():
            projectile.effects.clear()
        self.multiplier.reset()
        self.wave = wave
        self.speed_scalar = speed_scalar
        self.round_complete = False
        logger.debug(
            "Round started: wave=%d targets=%d speed=%.2f",
            wave,
            len(self.targets),
            speed_scalar,
        )

    def start_wave(self, wave: Wave, first_id: int = 0) -> list[Target]:
        """Populate the round from a generated endless-mode wave."""
        targets: list[Target] = []
        for i, placement in enumerate(wave.placements):
            x, y = self.geometry.grid_to_world(placement.col, placement.row)
            targets.append(
                Target(
                    id=first_id + i,
                    col=placement.col,
                    row=placement.row,
                    x=x,
                    y=y,
                    health=placement.health,
                    kind=placement.kind,
                )
            )
        self.start_round(targets, wave=wave.config.wave, speed_scalar=wave.config.speed_scalar)
        return targets

    def lose_life(self) -> int:
        """Consume a life and reset the multiplier. Returns lives left."""
        self.lives = max(0, self.lives - 1)
        self.multiplier.reset()
        return self.lives

    def is_game_over(self) -> bool:
        return self.lives <= 0

    def report(self) -> SessionReport:
        return SessionReport(
            score=self.score,
            round_complete=self.round_complete,
            lives=self.lives,
            wave=self.wave,
        )

    # --- Serialization ---

    def snapshot(self) -> dict[str, Any]:
        """Serialize rule state. Entities' positions belong to the host."""
        return {
            "score": self.score,
            "lives": self.lives,
            "wave": self.wave,
            "speed_scalar": self.speed_scalar,
            "round_complete": self.round_complete,
            "now": self.now,
            "seed": self._seed,
            "rng_state": _serialize_rng_state(self.rng.getstate()),
            "multiplier": self.multiplier.snapshot(),
            "effects": self.effects.snapshot(),
            "projectile_effects": {
                str(pid): p.effects.snapshot() for pid, p in self.projectiles.items()
            },
            "target_health": {
                str(tid): [t.health, t.active] for tid, t in self.targets.items()
            },
        }

    def restore(self, data: dict[str, Any]) -> None:
        """Restore rule state onto already-registered entities.

        Pending scheduled chain hits are not serialized and are dropped.
        """
        self.score = data["score"]
        self.lives = data["lives"]
        self.wave = data["wave"]
        self.speed_scalar = data["speed_scalar"]
        self.round_complete = data["round_complete"]
        self.now = data["now"]
        self._seed = data["seed"]
        self.rng.setstate(_deserialize_rng_state(data["rng_state"]))
        self.multiplier.restore(data["multiplier"])
        self.effects.restore(data["effects"])
        for pid_str, effects_data in data.get("projectile_effects", {}).items():
            projectile = self.projectiles.get(int(pid_str))
            if projectile is not None:
                projectile.effects.restore(effects_data)
        for tid_str, (health, active) in data.get("target_health", {}).items():
            target = self.targets.get(int(tid_str))
            if target is not None:
                target.health = health
                target.active = active
        self.schedule.clear()


def _serialize_rng_state(state: tuple[int, tuple[int, ...], float | None]) -> list[Any]:
    version, internalstate, gauss_next = state
    return [version, list(internalstate), gauss_next]


def _deserialize_rng_state(data: list[Any]) -> tuple[int, tuple[int, ...], float | None]:
    version, internalstate, gauss_next = data
    return (version, tuple(internalstate), gauss_next)
