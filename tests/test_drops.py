"""Tests for brickfall.drops: drop chance, rolls and drop kinds."""
from __future__ import annotations

from dataclasses import replace

import pytest

from brickfall.config import RulesConfig
from brickfall.drops import (
    calculate_drop_chance,
    drop_weights,
    resolve_mystery,
    roll_drop,
    roll_drops_for_damage,
    select_drop_kind,
)
from brickfall.selector import total_weight
from brickfall.types import ContractError, DropRollParams


def _samples(*values: float):
    it = iter(values)
    return lambda: next(it)


class TestCalculateDropChance:
    def test_base_unchanged(self) -> None:
        assert calculate_drop_chance(DropRollParams(base_chance=0.15)) == 0.15

    def test_power_bonus_doubles(self) -> None:
        params = DropRollParams(base_chance=0.2, power_bonus_active=True)
        assert calculate_drop_chance(params) == pytest.approx(0.4)

    def test_power_bonus_capped_at_one(self) -> None:
        params = DropRollParams(base_chance=0.7, power_bonus_active=True)
        assert calculate_drop_chance(params) == 1.0

    def test_area_effect_halves(self) -> None:
        params = DropRollParams(base_chance=0.3, is_area_effect=True)
        assert calculate_drop_chance(params) == pytest.approx(0.15)

    @pytest.mark.parametrize(
        "base, expected", [(0.30, 0.30), (0.60, 0.50), (0.0, 0.0), (1.0, 0.5)]
    )
    def test_bonus_applied_before_area_penalty(self, base: float, expected: float) -> None:
        params = DropRollParams(base_chance=base, power_bonus_active=True, is_area_effect=True)
        assert calculate_drop_chance(params) == pytest.approx(expected)

    def test_debug_override_wins(self) -> None:
        params = DropRollParams(
            base_chance=0.1,
            power_bonus_active=True,
            is_area_effect=True,
            debug_override=0.9,
        )
        assert calculate_drop_chance(params) == 0.9


class TestRollDrop:
    @pytest.mark.parametrize("chance", [0.0, 0.25, 0.5, 1.0])
    @pytest.mark.parametrize("sample", [0.0, 0.25, 0.5, 0.999])
    def test_true_iff_sample_strictly_below_chance(self, chance: float, sample: float) -> None:
        assert roll_drop(chance, lambda: sample) is (sample < chance)


class TestRollDropsForDamage:
    @pytest.mark.parametrize("damage", [0, 1, 3, 7])
    def test_certain_chance_drops_once_per_damage(self, damage: int) -> None:
        assert roll_drops_for_damage(1.0, damage, lambda: 0.999) == damage

    @pytest.mark.parametrize("damage", [0, 1, 3, 7])
    def test_zero_chance_never_drops(self, damage: int) -> None:
        assert roll_drops_for_damage(0.0, damage, lambda: 0.0) == 0

    def test_counts_independent_rolls(self) -> None:
        assert roll_drops_for_damage(0.5, 3, _samples(0.1, 0.9, 0.2)) == 2

    def test_negative_damage_rejected(self) -> None:
        with pytest.raises(ContractError):
            roll_drops_for_damage(0.5, -1, lambda: 0.0)


class TestDropKinds:
    def test_select_follows_ability_table_order(self) -> None:
        config = RulesConfig()
        assert select_drop_kind(config, 0.0) == "balloon"
        assert select_drop_kind(config, 0.999) == "dancefloor"

    def test_full_table_weights(self) -> None:
        config = RulesConfig()
        assert total_weight(drop_weights(config)) == 183
        # bassdrop covers [114, 122) of the cumulative weight
        assert select_drop_kind(config, 113.9 / 183) == "partypopper"
        assert select_drop_kind(config, 118 / 183) == "bassdrop"
        assert select_drop_kind(config, 122.1 / 183) == "djscratch"

    def test_no_selection_when_nothing_can_drop(self) -> None:
        base = RulesConfig()
        config = replace(base, abilities=tuple(replace(a, drop_weight=0) for a in base.abilities))
        assert select_drop_kind(config, 0.5) is None

    def test_mystery_never_resolves_to_itself(self) -> None:
        config = RulesConfig()
        kinds = {resolve_mystery(config, i / 100) for i in range(100)}
        assert "mystery" not in kinds
        assert kinds == {a.kind for a in config.abilities} - {"mystery"}

    def test_mystery_bounds(self) -> None:
        config = RulesConfig()
        assert resolve_mystery(config, 0.0) == "balloon"
        assert resolve_mystery(config, 0.9999) == "dancefloor"
