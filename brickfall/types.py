"""Core data types for the resolution engine."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from brickfall.effects import EffectSet

T = TypeVar("T")

# Contact kinds reported by the host physics layer.
PROJECTILE_PADDLE = "projectile_paddle"
PROJECTILE_TARGET = "projectile_target"
PICKUP_PADDLE = "pickup_paddle"

CONTACT_KINDS = (PROJECTILE_PADDLE, PROJECTILE_TARGET, PICKUP_PADDLE)

# Target kinds (closed set).
PRESENT = "present"
PINATA = "pinata"
BALLOON = "balloon"
DRIFTER = "drifter"

TARGET_KINDS = (PRESENT, PINATA, BALLOON, DRIFTER)


def _empty_effects() -> EffectSet:
    from brickfall.effects import EffectSet

    return EffectSet()


@dataclass
class Projectile:
    """A ball. Position, velocity and the launch flags are owned by the host,
    effects by the engine.

    ``launched`` gates spawn requests. ``attached`` (resting on the paddle
    before launch) is host bookkeeping the engine never reads.
    """

    id: int
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    speed: float = 400.0  # base speed scalar before ability/wave modifiers
    radius: float = 10.0
    launched: bool = False
    attached: bool = False
    effects: EffectSet = field(default_factory=_empty_effects)


@dataclass
class Target:
    """A brick. Destroyed (active=False) is terminal."""

    id: int
    col: int
    row: int
    x: float
    y: float
    health: int
    kind: str = PRESENT
    max_health: int | None = None  # defaults to the initial health
    active: bool = True

    def __post_init__(self) -> None:
        if self.max_health is None:
            self.max_health = self.health


@dataclass
class Pickup:
    """A falling collectible that grants an ability on collection."""

    id: int
    kind: str
    x: float
    y: float
    collected: bool = False
    active: bool = True


@dataclass
class Paddle:
    x: float
    y: float
    half_width: float = 60.0
    half_height: float = 10.0


@dataclass(frozen=True)
class Contact:
    """One overlap reported by the host. Not a component."""

    kind: str
    a: int
    b: int
    now: float


@dataclass(frozen=True)
class DropRollParams:
    base_chance: float
    power_bonus_active: bool = False
    is_area_effect: bool = False
    debug_override: float | None = None


@dataclass(frozen=True)
class WeightedItem(Generic[T]):
    """A payload with a selection weight. Negative weights count as zero."""

    value: T
    weight: float


@dataclass(frozen=True)
class Placement:
    """One generated brick slot of a wave layout."""

    col: int
    row: int
    kind: str
    health: int


class ContractError(ValueError):
    """Raised when a caller violates an engine contract (e.g. negative damage)."""


class ConfigError(Exception):
    """Raised on malformed or inconsistent rule configuration."""
