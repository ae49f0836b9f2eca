"""Tests for brickfall.outcomes: outcome records."""
from __future__ import annotations

import dataclasses

import pytest

from brickfall.outcomes import AbilityApplied, AbilityExpired, BlastHit, Hit, RoundCleared


class TestOutcomes:
    def test_to_dict_includes_kind(self) -> None:
        hit = Hit(
            target_id=1,
            projectile_id=2,
            damage=1,
            score_delta=10,
            multiplier=1.0,
            remaining_health=0,
            pierced=False,
        )
        data = hit.to_dict()
        assert data["kind"] == "hit"
        assert data["target_id"] == 1
        assert data["pierced"] is False

    def test_blast_hit(self) -> None:
        data = BlastHit(target_id=3, score_delta=11, multiplier=1.15, remaining_health=0).to_dict()
        assert data == {
            "kind": "blast_hit",
            "target_id": 3,
            "score_delta": 11,
            "multiplier": 1.15,
            "remaining_health": 0,
        }

    def test_kind_is_not_a_field(self) -> None:
        assert "kind" not in {f.name for f in dataclasses.fields(RoundCleared)}
        assert RoundCleared(score=5).kind == "round_cleared"

    def test_defaults(self) -> None:
        assert AbilityApplied(ability="cake", level=1, expires_at=10.0).projectile_ids == ()
        assert AbilityExpired(ability="cake").projectile_id is None

    def test_frozen(self) -> None:
        cleared = RoundCleared(score=5)
        with pytest.raises(dataclasses.FrozenInstanceError):
            cleared.score = 6  # type: ignore[misc]
