"""Gameplay resolution engine for a brick-breaker."""
from brickfall.arc import ElectricArcResolver
from brickfall.config import (
    ArcConfig,
    GridConfig,
    MultiplierConfig,
    PaddleConfig,
    RulesConfig,
    TargetProfile,
    WaveRules,
    load_config,
)
from brickfall.drops import (
    calculate_drop_chance,
    roll_drop,
    roll_drops_for_damage,
    select_drop_kind,
)
from brickfall.effects import AbilityDef, AbilityRegistry, EffectSet, can_pierce
from brickfall.grid import GridGeometry
from brickfall.multiplier import ScoreMultiplier
from brickfall.outcomes import (
    AbilityApplied,
    AbilityExpired,
    BlastHit,
    ChainHit,
    Destroyed,
    DropSpawned,
    Hit,
    LifeGained,
    Outcome,
    PaddleBounce,
    RoundCleared,
    SpawnRequested,
)
from brickfall.resolver import CollisionResolver
from brickfall.schedule import DeferredSchedule
from brickfall.selector import select_weighted
from brickfall.session import GameSession, SessionReport
from brickfall.types import (
    Contact,
    ConfigError,
    ContractError,
    DropRollParams,
    Paddle,
    Pickup,
    Placement,
    Projectile,
    Target,
    WeightedItem,
)
from brickfall.waves import Wave, WaveConfig, WaveGenerator, wave_config

__all__ = [
    "AbilityApplied",
    "AbilityDef",
    "AbilityExpired",
    "AbilityRegistry",
    "ArcConfig",
    "BlastHit",
    "ChainHit",
    "CollisionResolver",
    "ConfigError",
    "Contact",
    "ContractError",
    "DeferredSchedule",
    "Destroyed",
    "DropRollParams",
    "DropSpawned",
    "EffectSet",
    "ElectricArcResolver",
    "GameSession",
    "GridConfig",
    "GridGeometry",
    "Hit",
    "LifeGained",
    "MultiplierConfig",
    "Outcome",
    "Paddle",
    "PaddleBounce",
    "PaddleConfig",
    "Pickup",
    "Placement",
    "Projectile",
    "RoundCleared",
    "RulesConfig",
    "ScoreMultiplier",
    "SessionReport",
    "SpawnRequested",
    "Target",
    "TargetProfile",
    "Wave",
    "WaveConfig",
    "WaveGenerator",
    "WaveRules",
    "WeightedItem",
    "calculate_drop_chance",
    "can_pierce",
    "load_config",
    "roll_drop",
    "roll_drops_for_damage",
    "select_drop_kind",
    "select_weighted",
    "wave_config",
]
