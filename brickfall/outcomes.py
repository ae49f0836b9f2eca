"""Outcome records returned by the resolver.

Each record is a frozen dataclass with a ``kind`` tag and ``to_dict()``,
so the presentation layer never has to look at resolver internals.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, ClassVar


@dataclass(frozen=True)
class Outcome:
    kind: ClassVar[str] = "outcome"

    def to_dict(self) -> dict[str, Any]:
        data = dataclasses.asdict(self)
        data["kind"] = self.kind
        return data


@dataclass(frozen=True)
class Hit(Outcome):
    kind: ClassVar[str] = "hit"

    target_id: int
    projectile_id: int
    damage: int
    score_delta: int
    multiplier: float
    remaining_health: int
    pierced: bool


@dataclass(frozen=True)
class Destroyed(Outcome):
    kind: ClassVar[str] = "destroyed"

    target_id: int
    x: float
    y: float
    target_kind: str


@dataclass(frozen=True)
class DropSpawned(Outcome):
    kind: ClassVar[str] = "drop_spawned"

    x: float
    y: float
    item_kind: str
    source_target_id: int


@dataclass(frozen=True)
class ChainHit(Outcome):
    kind: ClassVar[str] = "chain_hit"

    source_target_id: int
    target_id: int
    score_delta: int
    remaining_health: int


@dataclass(frozen=True)
class BlastHit(Outcome):
    kind: ClassVar[str] = "blast_hit"

    target_id: int
    score_delta: int
    multiplier: float
    remaining_health: int


@dataclass(frozen=True)
class AbilityApplied(Outcome):
    kind: ClassVar[str] = "ability_applied"

    ability: str
    level: int
    expires_at: float
    projectile_ids: tuple[int, ...] = ()  # empty for session-scoped abilities


@dataclass(frozen=True)
class AbilityExpired(Outcome):
    kind: ClassVar[str] = "ability_expired"

    ability: str
    projectile_id: int | None = None  # None for session-scoped abilities


@dataclass(frozen=True)
class PaddleBounce(Outcome):
    kind: ClassVar[str] = "paddle_bounce"

    projectile_id: int
    angle: float
    speed: float


@dataclass(frozen=True)
class SpawnRequested(Outcome):
    kind: ClassVar[str] = "spawn_requested"

    source_projectile_id: int
    count: int


@dataclass(frozen=True)
class LifeGained(Outcome):
    kind: ClassVar[str] = "life_gained"

    lives: int


@dataclass(frozen=True)
class RoundCleared(Outcome):
    kind: ClassVar[str] = "round_cleared"

    score: int
