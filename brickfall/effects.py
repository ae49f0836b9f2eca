"""Ability definitions and the per-projectile effect state machine."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Scopes an ability can live in.
PROJECTILE = "projectile"
SESSION = "session"


@dataclass(frozen=True)
class AbilityDef:
    """Definition of an ability kind. Pure data, not serialized."""

    kind: str
    duration_ms: float = 0.0  # 0 = instant, never recorded in an EffectSet
    stacks: bool = False  # re-application raises level and resets expiry
    propagates: bool = False  # copied onto siblings spawned while active
    applies_to_all: bool = True  # every live projectile, not just the primary
    exclusive_with: tuple[str, ...] = ()  # kinds evicted on application
    speed_factor: float = 1.0
    width_factor: float = 1.0  # paddle width, session scope only
    scope: str = PROJECTILE
    drop_weight: float = 0.0

    @property
    def instant(self) -> bool:
        return self.duration_ms <= 0


@dataclass
class EffectEntry:
    """Runtime state of one active ability. Mutable, serializable."""

    kind: str
    level: int
    expires_at: float


@dataclass(frozen=True)
class ApplyResult:
    kind: str
    level: int
    expires_at: float
    refreshed: bool  # True when the ability was already active
    evicted: tuple[str, ...] = ()


class AbilityRegistry:
    """Maps ability kinds to their definitions. Insertion order preserved."""

    def __init__(self, abilities: tuple[AbilityDef, ...] | list[AbilityDef] = ()) -> None:
        self._definitions: dict[str, AbilityDef] = {}
        for ability in abilities:
            self.define(ability)

    def define(self, ability: AbilityDef) -> None:
        """Register a definition. Overwrites if already registered."""
        self._definitions[ability.kind] = ability

    def get(self, kind: str) -> AbilityDef:
        """Look up a definition. Raises KeyError if not registered."""
        return self._definitions[kind]

    def definition(self, kind: str) -> AbilityDef | None:
        return self._definitions.get(kind)

    def has(self, kind: str) -> bool:
        return kind in self._definitions

    def kinds(self) -> list[str]:
        return list(self._definitions)

    def definitions(self) -> list[AbilityDef]:
        return list(self._definitions.values())

    def excludes(self, a: str, b: str) -> bool:
        """True if a and b may not be active together (either direction)."""
        da = self._definitions.get(a)
        db = self._definitions.get(b)
        return (da is not None and b in da.exclusive_with) or (
            db is not None and a in db.exclusive_with
        )


def can_pierce(level: int, health: int) -> bool:
    """A projectile passes through a target iff its piercing level >= health."""
    return level > 0 and level >= health


@dataclass
class EffectSet:
    """Active abilities of one owner, at most one entry per kind.

    Expiry is lazy: every query takes the current time and treats entries
    with expires_at <= now as absent. sweep() physically removes them.
    """

    entries: dict[str, EffectEntry] = field(default_factory=dict)

    # --- Mutation ---

    def apply(
        self,
        defn: AbilityDef,
        now: float,
        registry: AbilityRegistry | None = None,
        level: int = 1,
    ) -> ApplyResult:
        expires_at = now + defn.duration_ms
        if defn.instant:
            return ApplyResult(defn.kind, 0, now, refreshed=False)

        evicted: list[str] = []
        for other in list(self.entries):
            if other == defn.kind:
                continue
            exclusive = (
                registry.excludes(defn.kind, other)
                if registry is not None
                else other in defn.exclusive_with
            )
            if exclusive:
                del self.entries[other]
                evicted.append(other)

        current = self._live(defn.kind, now)
        if current is not None:
            if defn.stacks:
                current.level += level
            current.expires_at = expires_at
            return ApplyResult(
                defn.kind, current.level, expires_at, True, tuple(evicted)
            )

        self.entries[defn.kind] = EffectEntry(
            kind=defn.kind, level=level, expires_at=expires_at
        )
        return ApplyResult(defn.kind, level, expires_at, False, tuple(evicted))

    def remove(self, kind: str) -> bool:
        return self.entries.pop(kind, None) is not None

    def clear(self) -> None:
        self.entries.clear()

    def sweep(self, now: float) -> list[str]:
        """Drop expired entries. Returns their kinds in insertion order."""
        expired = [k for k, e in self.entries.items() if e.expires_at <= now]
        for kind in expired:
            del self.entries[kind]
        return expired

    def propagate_from(
        self, source: EffectSet, registry: AbilityRegistry, now: float
    ) -> list[str]:
        """Copy the source's live propagating abilities onto this set."""
        copied: list[str] = []
        for kind, entry in source.entries.items():
            if entry.expires_at <= now:
                continue
            defn = registry.definition(kind)
            if defn is None or not defn.propagates:
                continue
            self.entries[kind] = EffectEntry(
                kind=kind, level=entry.level, expires_at=entry.expires_at
            )
            copied.append(kind)
        return copied

    # --- Queries ---

    def is_active(self, kind: str, now: float) -> bool:
        return self._live(kind, now) is not None

    def level(self, kind: str, now: float) -> int:
        """Current level of an ability, 0 if inactive or expired."""
        entry = self._live(kind, now)
        return entry.level if entry is not None else 0

    def expires_at(self, kind: str, now: float) -> float | None:
        entry = self._live(kind, now)
        return entry.expires_at if entry is not None else None

    def active_kinds(self, now: float) -> list[str]:
        return [k for k, e in self.entries.items() if e.expires_at > now]

    def speed_scale(self, registry: AbilityRegistry, now: float) -> float:
        scale = 1.0
        for kind in self.active_kinds(now):
            defn = registry.definition(kind)
            if defn is not None:
                scale *= defn.speed_factor
        return scale

    def width_scale(self, registry: AbilityRegistry, now: float) -> float:
        scale = 1.0
        for kind in self.active_kinds(now):
            defn = registry.definition(kind)
            if defn is not None:
                scale *= defn.width_factor
        return scale

    def _live(self, kind: str, now: float) -> EffectEntry | None:
        entry = self.entries.get(kind)
        if entry is None or entry.expires_at <= now:
            return None
        return entry

    # --- Serialization ---

    def snapshot(self) -> dict[str, Any]:
        return {
            "effects": [
                {"kind": e.kind, "level": e.level, "expires_at": e.expires_at}
                for e in self.entries.values()
            ],
        }

    def restore(self, data: dict[str, Any]) -> None:
        self.entries.clear()
        for entry_data in data.get("effects", []):
            entry = EffectEntry(**entry_data)
            self.entries[entry.kind] = entry
