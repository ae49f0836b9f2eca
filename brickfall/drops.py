"""Drop probability: effective chance, rolls, and drop kind selection.

All functions are pure. Randomness is injected as a zero-argument callable
returning a float in [0, 1) (``random.Random().random`` fits).
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from brickfall.selector import select_weighted
from brickfall.types import ContractError, DropRollParams, WeightedItem

if TYPE_CHECKING:
    from brickfall.config import RulesConfig

RandomFn = Callable[[], float]

POWER_BONUS_FACTOR = 2.0
AREA_EFFECT_FACTOR = 0.5


def calculate_drop_chance(params: DropRollParams) -> float:
    """Effective drop chance after modifiers.

    A debug override wins outright and is returned as-is, even if it lies
    outside [0, 1]. Otherwise the power bonus is applied (and capped at 1)
    before the area-effect penalty, so a saturated bonus still gets halved.
    """
    if params.debug_override is not None:
        return params.debug_override

    chance = params.base_chance
    if params.power_bonus_active:
        chance = min(chance * POWER_BONUS_FACTOR, 1.0)
    if params.is_area_effect:
        chance *= AREA_EFFECT_FACTOR
    return chance


def roll_drop(chance: float, rng: RandomFn) -> bool:
    """True iff the sample is strictly below chance."""
    return rng() < chance


def roll_drops_for_damage(chance: float, damage: int, rng: RandomFn) -> int:
    """Roll once per point of damage and count the successes."""
    if damage < 0:
        raise ContractError(f"damage must be >= 0, got {damage}")
    drops = 0
    for _ in range(damage):
        if rng() < chance:
            drops += 1
    return drops


def drop_weights(config: RulesConfig) -> list[WeightedItem[str]]:
    return [WeightedItem(a.kind, a.drop_weight) for a in config.abilities]


def select_drop_kind(config: RulesConfig, random_value: float) -> str | None:
    """Choose which pickup a successful roll spawns. None if nothing can drop."""
    return select_weighted(drop_weights(config), random_value)


def resolve_mystery(config: RulesConfig, random_value: float) -> str:
    """Uniform choice over every ability kind except the mystery kind itself."""
    choices = [
        a.kind for a in config.abilities if a.kind != config.mystery_ability
    ]
    if not choices:
        raise ContractError("mystery needs at least one other ability kind")
    index = min(int(random_value * len(choices)), len(choices) - 1)
    return choices[index]
