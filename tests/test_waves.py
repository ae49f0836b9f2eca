"""Tests for brickfall.waves: WaveConfig and WaveGenerator."""
from __future__ import annotations

from dataclasses import replace

import pytest

from brickfall.config import GridConfig, RulesConfig, TargetProfile
from brickfall.types import PINATA, TARGET_KINDS, ConfigError, ContractError
from brickfall.waves import FORTRESS, ROWS, SCATTER, WaveGenerator, wave_config


class TestWaveConfig:
    def test_first_wave(self) -> None:
        cfg = wave_config(0)
        assert cfg.brick_count == 20
        assert cfg.average_health == 1
        assert cfg.density == pytest.approx(0.3)
        assert cfg.speed_scalar == 1.0
        assert cfg.checkpoint is True

    def test_saturates_for_large_waves(self) -> None:
        cfg = wave_config(100)
        assert cfg.brick_count == 40
        assert cfg.average_health == 3
        assert cfg.density == pytest.approx(0.7)
        assert cfg.speed_scalar == 1.5

    def test_ranges_and_monotonic(self) -> None:
        previous = wave_config(0)
        for w in range(1, 200):
            cfg = wave_config(w)
            assert 20 <= cfg.brick_count <= 40
            assert 1 <= cfg.average_health <= 3
            assert 0.3 <= cfg.density <= 0.7 + 1e-9
            assert 1.0 <= cfg.speed_scalar <= 1.5
            assert cfg.brick_count >= previous.brick_count
            assert cfg.speed_scalar >= previous.speed_scalar
            previous = cfg

    def test_health_steps_every_ten_waves(self) -> None:
        assert wave_config(9).average_health == 1
        assert wave_config(10).average_health == 2
        assert wave_config(20).average_health == 3

    def test_checkpoints(self) -> None:
        assert [w for w in range(12) if wave_config(w).checkpoint] == [0, 5, 10]

    def test_negative_wave_rejected(self) -> None:
        with pytest.raises(ContractError):
            wave_config(-1)


class TestPatternSelection:
    def test_checkpoint_uses_easy_patterns(self) -> None:
        gen = WaveGenerator(seed=1)
        for w in range(0, 101, 5):
            assert gen.generate(w).pattern in (ROWS, SCATTER)

    def test_weights_shift_toward_hard_patterns(self) -> None:
        gen = WaveGenerator(seed=1)
        early = {i.value: i.weight for i in gen.pattern_weights(1)}
        late = {i.value: i.weight for i in gen.pattern_weights(41)}
        assert early[FORTRESS] == pytest.approx(3.5 / 20)
        assert late[FORTRESS] == pytest.approx(3.5)
        assert late[SCATTER] < early[SCATTER]

    def test_no_positive_weight(self) -> None:
        base = RulesConfig()
        waves = replace(base.waves, pattern_weights={ROWS: (0.0, 0.0)})
        gen = WaveGenerator(seed=1, config=replace(base, waves=waves))
        with pytest.raises(ConfigError):
            gen.select_pattern(1, 0.5)

    def test_unknown_pattern_rejected(self) -> None:
        base = RulesConfig()
        waves = replace(base.waves, pattern_weights={"spiral": (1.0, 1.0)})
        with pytest.raises(ConfigError):
            WaveGenerator(seed=1, config=replace(base, waves=waves))


class TestGenerate:
    def test_reproducible(self) -> None:
        for w in (0, 3, 17, 42):
            assert WaveGenerator(seed=7).generate(w).to_json() == WaveGenerator(seed=7).generate(w).to_json()

    def test_same_generator_twice(self) -> None:
        gen = WaveGenerator(seed=7)
        assert gen.generate(12) == gen.generate(12)

    def test_seed_changes_layouts(self) -> None:
        a = WaveGenerator(seed=1)
        b = WaveGenerator(seed=2)
        assert any(a.generate(w).to_json() != b.generate(w).to_json() for w in range(1, 10))

    @pytest.mark.parametrize("seed", [1, 2, 99])
    def test_placements_unique_in_bounds_and_exact(self, seed: int) -> None:
        gen = WaveGenerator(seed=seed)
        for w in range(0, 60):
            wave = gen.generate(w)
            cells = [(p.col, p.row) for p in wave.placements]
            assert len(cells) == wave.config.brick_count
            assert len(set(cells)) == len(cells)
            assert all(0 <= c < 10 and 0 <= r < 8 for c, r in cells)

    def test_brick_attributes(self) -> None:
        gen = WaveGenerator(seed=3)
        for w in range(0, 60):
            for p in gen.generate(w).placements:
                assert p.kind in TARGET_KINDS
                assert 1 <= p.health <= 3

    def test_every_pattern_appears(self) -> None:
        gen = WaveGenerator(seed=11)
        seen = {gen.generate(w).pattern for w in range(1, 200)}
        assert seen == {"scatter", "rows", "symmetric", "clusters", "maze", "fortress"}

    def test_grid_too_small(self) -> None:
        gen = WaveGenerator(seed=1, config=RulesConfig(grid=GridConfig(cols=2, rows=2)))
        with pytest.raises(ConfigError):
            gen.generate(0)

    def test_wave_kinds_need_profiles(self) -> None:
        config = RulesConfig(targets={PINATA: TargetProfile(score_value=15, drop_chance=0.25)})
        with pytest.raises(ConfigError):
            WaveGenerator(seed=1, config=config)

    def test_pinata_only_tiers(self) -> None:
        base = RulesConfig(targets={PINATA: TargetProfile(score_value=15, drop_chance=0.25)})
        waves = replace(base.waves, kind_tiers=((-1, {PINATA: 1.0}),))
        wave = WaveGenerator(seed=1, config=replace(base, waves=waves)).generate(1)
        assert {p.kind for p in wave.placements} == {PINATA}

    def test_to_json_is_canonical(self) -> None:
        wave = WaveGenerator(seed=5).generate(8)
        text = wave.to_json()
        assert " " not in text
        assert text.startswith('{"config":{')
        assert wave.to_dict()["pattern"] == wave.pattern
