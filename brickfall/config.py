"""Rule tables and constants for the resolution engine."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from brickfall.effects import SESSION, AbilityDef
from brickfall.types import BALLOON, DRIFTER, PINATA, PRESENT, ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TargetProfile:
    """Per target-kind score value and base drop chance."""

    score_value: int
    drop_chance: float


@dataclass(frozen=True)
class MultiplierConfig:
    """Score multiplier constants.

    Attributes:
        base: Floor and reset value.
        max_value: Hard cap.
        step: Increment at base; scaled by base/value on every hit.
        decay_delay_ms: Grace period after a hit before decay starts.
        decay_rate: Decay per second at max_value; scales with value/max_value.
    """

    base: float = 1.0
    max_value: float = 5.0
    step: float = 0.15
    decay_delay_ms: float = 1000.0
    decay_rate: float = 1.0


@dataclass(frozen=True)
class GridConfig:
    """Target grid geometry in world units.

    Attributes:
        cols: Grid columns.
        rows: Grid rows available to generated layouts.
        cell_width: Target width.
        cell_height: Target height.
        padding: Gap between neighbouring targets.
        origin_x: World x of column 0's centre.
        origin_y: World y of row 0's centre.
    """

    cols: int = 10
    rows: int = 8
    cell_width: float = 64.0
    cell_height: float = 28.0
    padding: float = 4.0
    origin_x: float = 94.0
    origin_y: float = 200.0

    @property
    def pitch_x(self) -> float:
        return self.cell_width + self.padding

    @property
    def pitch_y(self) -> float:
        return self.cell_height + self.padding


@dataclass(frozen=True)
class PaddleConfig:
    """Bounce angles in degrees (negative = upward) and flush offset."""

    min_angle_deg: float = -150.0
    max_angle_deg: float = -30.0
    flush_gap: float = 1.0


@dataclass(frozen=True)
class ArcConfig:
    """Chain damage settings for the area-effect ability."""

    delay_ms: float = 100.0
    score_fraction: float = 0.5
    damage: int = 1


def _default_pattern_weights() -> dict[str, tuple[float, float]]:
    # (weight at wave 0, weight at ramp_waves and beyond)
    return {
        "scatter": (4.0, 1.0),
        "rows": (4.0, 0.5),
        "symmetric": (3.0, 2.0),
        "clusters": (1.0, 3.0),
        "maze": (0.5, 3.0),
        "fortress": (0.0, 3.5),
    }


def _default_kind_tiers() -> tuple[tuple[int, dict[str, float]], ...]:
    # (highest wave of the tier, weights); the last tier is open-ended.
    return (
        (5, {PRESENT: 70.0, BALLOON: 20.0, PINATA: 10.0}),
        (15, {PRESENT: 40.0, BALLOON: 35.0, PINATA: 25.0}),
        (-1, {PRESENT: 20.0, BALLOON: 40.0, PINATA: 40.0}),
    )


@dataclass(frozen=True)
class WaveRules:
    """Endless-mode difficulty curve and pattern tables."""

    base_brick_count: int = 20
    brick_count_step: int = 2
    max_extra_bricks: int = 20
    health_interval: int = 10
    max_health: int = 3
    base_density: float = 0.3
    density_step: float = 0.02
    max_extra_density: float = 0.4
    speed_step: float = 0.03
    max_extra_speed: float = 0.5
    checkpoint_interval: int = 5
    ramp_waves: int = 20
    pattern_weights: dict[str, tuple[float, float]] = field(
        default_factory=_default_pattern_weights
    )
    checkpoint_patterns: tuple[str, ...] = ("rows", "scatter")
    kind_tiers: tuple[tuple[int, dict[str, float]], ...] = field(
        default_factory=_default_kind_tiers
    )


def _default_targets() -> dict[str, TargetProfile]:
    return {
        PRESENT: TargetProfile(score_value=10, drop_chance=0.15),
        PINATA: TargetProfile(score_value=15, drop_chance=0.25),
        BALLOON: TargetProfile(score_value=20, drop_chance=0.30),
        DRIFTER: TargetProfile(score_value=25, drop_chance=0.20),
    }


def _default_abilities() -> tuple[AbilityDef, ...]:
    return (
        AbilityDef(
            kind="balloon",
            duration_ms=10_000,
            speed_factor=0.6,
            exclusive_with=("electricball",),
            drop_weight=20,
        ),
        AbilityDef(
            kind="cake",
            duration_ms=15_000,
            width_factor=1.5,
            scope=SESSION,
            drop_weight=15,
        ),
        AbilityDef(kind="drinks", duration_ms=8_000, scope=SESSION, drop_weight=15),
        AbilityDef(kind="disco", drop_weight=10),
        AbilityDef(kind="mystery", drop_weight=10),
        AbilityDef(kind="powerball", duration_ms=12_000, scope=SESSION, drop_weight=12),
        AbilityDef(
            kind="fireball",
            duration_ms=10_000,
            stacks=True,
            propagates=True,
            drop_weight=10,
        ),
        AbilityDef(
            kind="electricball",
            duration_ms=8_000,
            propagates=True,
            speed_factor=1.5,
            exclusive_with=("balloon",),
            drop_weight=12,
        ),
        AbilityDef(kind="partypopper", drop_weight=10),
        AbilityDef(kind="bassdrop", drop_weight=8),
        AbilityDef(kind="djscratch", duration_ms=15_000, scope=SESSION, drop_weight=12),
        AbilityDef(kind="bouncehouse", drop_weight=10),
        AbilityDef(kind="partyfavor", drop_weight=3),
        AbilityDef(kind="confetticannon", drop_weight=10),
        AbilityDef(kind="congaline", duration_ms=8_000, scope=SESSION, drop_weight=8),
        AbilityDef(kind="spotlight", duration_ms=8_000, scope=SESSION, drop_weight=8),
        AbilityDef(kind="dancefloor", drop_weight=10),
    )


@dataclass(frozen=True)
class RulesConfig:
    """Immutable rule configuration for one game session.

    Attributes:
        targets: Score value and base drop chance per target kind.
        abilities: Ability table; order is the drop-selection order.
        multiplier: Score multiplier constants.
        grid: Target grid geometry.
        paddle: Paddle bounce angles.
        arc: Chain damage settings.
        waves: Endless-mode generation rules.
        starting_lives: Lives at session start.
        pierce_ability: Stacking kind whose level drives piercing damage.
        area_ability: Kind that chains damage to neighbours.
        power_bonus_ability: Session kind that doubles drop chance.
        spawn_ability: Instant kind that requests sibling projectiles.
        mystery_ability: Instant kind that resolves to another kind.
        extra_life_ability: Instant kind that grants a life.
        screen_ability: Instant kind that hits every active target once.
        screen_damage: Damage the screen ability deals to each target.
        spawn_count: Siblings requested per spawn pickup.
    """

    targets: dict[str, TargetProfile] = field(default_factory=_default_targets)
    abilities: tuple[AbilityDef, ...] = field(default_factory=_default_abilities)
    multiplier: MultiplierConfig = field(default_factory=MultiplierConfig)
    grid: GridConfig = field(default_factory=GridConfig)
    paddle: PaddleConfig = field(default_factory=PaddleConfig)
    arc: ArcConfig = field(default_factory=ArcConfig)
    waves: WaveRules = field(default_factory=WaveRules)
    starting_lives: int = 3
    pierce_ability: str = "fireball"
    area_ability: str = "electricball"
    power_bonus_ability: str = "powerball"
    spawn_ability: str = "disco"
    mystery_ability: str = "mystery"
    extra_life_ability: str = "partyfavor"
    screen_ability: str = "bassdrop"
    screen_damage: int = 1
    spawn_count: int = 2

    def __post_init__(self) -> None:
        m = self.multiplier
        if not 0 < m.base <= m.max_value:
            raise ConfigError(
                f"multiplier base {m.base} must be in (0, {m.max_value}]"
            )
        if self.arc.delay_ms <= 0:
            raise ConfigError("arc.delay_ms must be positive")
        if self.screen_damage < 0:
            raise ConfigError("screen_damage must be >= 0")
        known = {a.kind for a in self.abilities}
        for name in (
            self.pierce_ability,
            self.area_ability,
            self.power_bonus_ability,
            self.spawn_ability,
            self.mystery_ability,
            self.extra_life_ability,
            self.screen_ability,
        ):
            if name not in known:
                raise ConfigError(f"Ability {name!r} is not in the ability table")
        for kind, profile in self.targets.items():
            if profile.score_value < 0:
                raise ConfigError(f"Negative score value for target kind {kind!r}")

    def target(self, kind: str) -> TargetProfile:
        """Profile for a target kind. Raises KeyError if unknown."""
        return self.targets[kind]

    # --- Loading ---

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RulesConfig:
        """Build a config from plain data, falling back to defaults per section."""
        allowed = {f.name for f in fields(cls)}
        unknown = set(data) - allowed
        if unknown:
            raise ConfigError(f"Unknown config keys: {sorted(unknown)}")

        kwargs: dict[str, Any] = {}
        try:
            if "targets" in data:
                kwargs["targets"] = {
                    kind: TargetProfile(**profile)
                    for kind, profile in data["targets"].items()
                }
            if "abilities" in data:
                kwargs["abilities"] = tuple(
                    _ability_from_dict(a) for a in data["abilities"]
                )
            if "multiplier" in data:
                kwargs["multiplier"] = MultiplierConfig(**data["multiplier"])
            if "grid" in data:
                kwargs["grid"] = GridConfig(**data["grid"])
            if "paddle" in data:
                kwargs["paddle"] = PaddleConfig(**data["paddle"])
            if "arc" in data:
                kwargs["arc"] = ArcConfig(**data["arc"])
            if "waves" in data:
                kwargs["waves"] = _waves_from_dict(data["waves"])
        except TypeError as exc:
            raise ConfigError(str(exc)) from exc

        for name in allowed - {
            "targets", "abilities", "multiplier", "grid", "paddle", "arc", "waves"
        }:
            if name in data:
                kwargs[name] = data[name]
        return cls(**kwargs)


def _ability_from_dict(data: dict[str, Any]) -> AbilityDef:
    data = dict(data)
    if "exclusive_with" in data:
        data["exclusive_with"] = tuple(data["exclusive_with"])
    return AbilityDef(**data)


def _waves_from_dict(data: dict[str, Any]) -> WaveRules:
    data = dict(data)
    if "pattern_weights" in data:
        data["pattern_weights"] = {
            name: (float(pair[0]), float(pair[1]))
            for name, pair in data["pattern_weights"].items()
        }
    if "checkpoint_patterns" in data:
        data["checkpoint_patterns"] = tuple(data["checkpoint_patterns"])
    if "kind_tiers" in data:
        data["kind_tiers"] = tuple(
            (int(limit), dict(weights)) for limit, weights in data["kind_tiers"]
        )
    return WaveRules(**data)


def load_config(path: str | Path) -> RulesConfig:
    """Read a RulesConfig from a JSON file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top-level JSON value must be an object")
    logger.debug("Loaded rules config from %s", path)
    return RulesConfig.from_dict(data)
