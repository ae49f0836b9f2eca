"""CollisionResolver - turns contacts and ticks into outcome records."""
from __future__ import annotations

import logging
import math
from typing import Callable

from brickfall.arc import ElectricArcResolver
from brickfall.drops import (
    calculate_drop_chance,
    resolve_mystery,
    roll_drop,
    roll_drops_for_damage,
    select_drop_kind,
)
from brickfall.effects import SESSION, can_pierce
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
from brickfall.paddle import bounce_angle, velocity_from_angle
from brickfall.session import GameSession
from brickfall.types import (
    PICKUP_PADDLE,
    PROJECTILE_PADDLE,
    PROJECTILE_TARGET,
    Contact,
    ContractError,
    DropRollParams,
    Projectile,
    Target,
)

logger = logging.getLogger(__name__)


class CollisionResolver:
    """Resolves contacts against the state held by a GameSession.

    Every public method returns the outcomes it produced, in order. The
    resolver keeps no state of its own beyond the session it was given.
    """

    def __init__(self, session: GameSession) -> None:
        self.session = session
        self.arc = ElectricArcResolver(session.geometry, session.config.arc)
        self._handlers: dict[str, Callable[[Contact], list[Outcome]]] = {
            PROJECTILE_PADDLE: self._projectile_paddle,
            PROJECTILE_TARGET: self._projectile_target,
            PICKUP_PADDLE: self._pickup_paddle,
        }

    # --- Entry points ---

    def resolve(self, contact: Contact) -> list[Outcome]:
        """Dispatch one contact by kind.

        projectile_paddle: a = projectile id (b is ignored; the session paddle is used).
        projectile_target: a = projectile id, b = target id.
        pickup_paddle: a = pickup id.
        """
        handler = self._handlers.get(contact.kind)
        if handler is None:
            raise ContractError(f"Unknown contact kind {contact.kind!r}")
        self.session.now = contact.now
        return handler(contact)

    def tick(self, now: float, delta_ms: float) -> list[Outcome]:
        """Advance time: fire due chain hits, decay the multiplier, expire abilities."""
        session = self.session
        session.now = now
        outcomes: list[Outcome] = []
        for batch in session.schedule.drain(now):
            outcomes.extend(batch)

        session.multiplier.update(now, delta_ms)

        for projectile in session.projectiles.values():
            for kind in projectile.effects.sweep(now):
                outcomes.append(AbilityExpired(ability=kind, projectile_id=projectile.id))
        for kind in session.effects.sweep(now):
            outcomes.append(AbilityExpired(ability=kind))
        return outcomes

    def should_bounce(self, projectile_id: int, target_id: int, now: float) -> bool:
        """Whether the host physics should apply its own bounce for this contact.

        False means the projectile pierces: the host lets it pass through
        and still reports the contact to resolve().
        """
        projectile = self.session.projectiles.get(projectile_id)
        target = self.session.targets.get(target_id)
        if projectile is None or target is None or not target.active:
            return True
        level = projectile.effects.level(self.session.config.pierce_ability, now)
        return not can_pierce(level, target.health)

    def register_projectile(
        self,
        projectile: Projectile,
        now: float,
        sibling_of: int | None = None,
    ) -> list[Outcome]:
        """Add a host-spawned projectile, inheriting propagating abilities."""
        session = self.session
        session.add_projectile(projectile)
        if sibling_of is None:
            return []
        source = session.projectiles.get(sibling_of)
        if source is None or source is projectile:
            return []
        copied = projectile.effects.propagate_from(source.effects, session.registry, now)
        return [
            AbilityApplied(
                ability=kind,
                level=projectile.effects.level(kind, now),
                expires_at=projectile.effects.expires_at(kind, now) or now,
                projectile_ids=(projectile.id,),
            )
            for kind in copied
        ]

    def projectile_speed(self, projectile: Projectile, now: float) -> float:
        session = self.session
        return (
            projectile.speed
            * session.speed_scalar
            * projectile.effects.speed_scale(session.registry, now)
        )

    # --- Projectile <-> paddle ---

    def _projectile_paddle(self, contact: Contact) -> list[Outcome]:
        session = self.session
        projectile = session.projectiles.get(contact.a)
        paddle = session.paddle
        if projectile is None or paddle is None:
            return []
        # Receding: overlap from the previous bounce still persists.
        if projectile.vy <= 0:
            return []

        cfg = session.config.paddle
        projectile.y = paddle.y - paddle.half_height - projectile.radius - cfg.flush_gap
        angle = bounce_angle(
            projectile.x,
            paddle.x,
            session.paddle_half_width(contact.now),
            cfg.min_angle_deg,
            cfg.max_angle_deg,
        )
        speed = self.projectile_speed(projectile, contact.now)
        projectile.vx, projectile.vy = velocity_from_angle(angle, speed)
        return [PaddleBounce(projectile_id=projectile.id, angle=angle, speed=speed)]

    # --- Projectile <-> target ---

    def _projectile_target(self, contact: Contact) -> list[Outcome]:
        session = self.session
        projectile = session.projectiles.get(contact.a)
        target = session.targets.get(contact.b)
        if projectile is None or target is None or not target.active:
            return []

        now = contact.now
        config = session.config
        level = projectile.effects.level(config.pierce_ability, now)
        pierced = can_pierce(level, target.health)
        damage = level if pierced else 1

        session.multiplier.increment(now)
        score_delta = session.multiplier.apply_to_score(config.target(target.kind).score_value)
        session.score += score_delta

        if projectile.effects.is_active(config.area_ability, now):
            self.arc.schedule_chain(
                target,
                list(session.targets.values()),
                now,
                session.schedule,
                self._chain_hit,
            )

        drop_count = roll_drops_for_damage(
            self._drop_chance(target, now, is_area_effect=False),
            damage,
            session.random,
        )
        drops = self._spawn_drops(target, drop_count)

        destroyed = self._apply_damage(target, damage)
        outcomes: list[Outcome] = [
            Hit(
                target_id=target.id,
                projectile_id=projectile.id,
                damage=damage,
                score_delta=score_delta,
                multiplier=session.multiplier.value,
                remaining_health=target.health,
                pierced=pierced,
            )
        ]
        outcomes.extend(drops)
        if destroyed:
            outcomes.extend(self._on_destroyed(target))
        return outcomes

    def _chain_hit(self, source: Target, target: Target) -> list[Outcome]:
        """Deferred secondary hit from the area ability."""
        if not target.active:
            return []
        session = self.session
        config = session.config
        now = session.now

        share = math.floor(config.target(target.kind).score_value * config.arc.score_fraction)
        score_delta = session.multiplier.apply_to_score(share)
        session.score += score_delta

        drops: list[Outcome] = []
        if roll_drop(self._drop_chance(target, now, is_area_effect=True), session.random):
            drops = self._spawn_drops(target, 1)

        destroyed = self._apply_damage(target, config.arc.damage)
        outcomes: list[Outcome] = [
            ChainHit(
                source_target_id=source.id,
                target_id=target.id,
                score_delta=score_delta,
                remaining_health=target.health,
            )
        ]
        outcomes.extend(drops)
        if destroyed:
            outcomes.extend(self._on_destroyed(target))
        return outcomes

    def _blast(self, now: float) -> list[Outcome]:
        """Hit every active target once, as a primary hit with the area drop penalty."""
        session = self.session
        config = session.config
        outcomes: list[Outcome] = []
        for target in session.active_targets():
            session.multiplier.increment(now)
            score_delta = session.multiplier.apply_to_score(config.target(target.kind).score_value)
            session.score += score_delta

            drops: list[Outcome] = []
            if roll_drop(self._drop_chance(target, now, is_area_effect=True), session.random):
                drops = self._spawn_drops(target, 1)

            destroyed = self._apply_damage(target, config.screen_damage)
            outcomes.append(
                BlastHit(
                    target_id=target.id,
                    score_delta=score_delta,
                    multiplier=session.multiplier.value,
                    remaining_health=target.health,
                )
            )
            outcomes.extend(drops)
            if destroyed:
                outcomes.extend(self._on_destroyed(target))
        logger.debug("Screen blast hit %d targets", sum(isinstance(o, BlastHit) for o in outcomes))
        return outcomes

    def _drop_chance(self, target: Target, now: float, is_area_effect: bool) -> float:
        session = self.session
        return calculate_drop_chance(
            DropRollParams(
                base_chance=session.config.target(target.kind).drop_chance,
                power_bonus_active=session.power_bonus_active(now),
                is_area_effect=is_area_effect,
                debug_override=session.debug_drop_chance,
            )
        )

    def _spawn_drops(self, target: Target, count: int) -> list[Outcome]:
        outcomes: list[Outcome] = []
        for _ in range(count):
            item_kind = select_drop_kind(self.session.config, self.session.random())
            if item_kind is None:
                continue
            outcomes.append(
                DropSpawned(x=target.x, y=target.y, item_kind=item_kind, source_target_id=target.id)
            )
        return outcomes

    def _apply_damage(self, target: Target, amount: int) -> bool:
        """Apply damage. Returns True if this call destroyed the target."""
        if amount < 0:
            raise ContractError(f"damage must be >= 0, got {amount}")
        target.health = max(0, target.health - amount)
        if target.health == 0:
            target.active = False
            return True
        return False

    def _on_destroyed(self, target: Target) -> list[Outcome]:
        session = self.session
        outcomes: list[Outcome] = [
            Destroyed(target_id=target.id, x=target.x, y=target.y, target_kind=target.kind)
        ]
        if not session.round_complete and session.remaining_targets() == 0:
            session.round_complete = True
            outcomes.append(RoundCleared(score=session.score))
            logger.debug("Round cleared with score %d", session.score)
        return outcomes

    # --- Pickup <-> paddle ---

    def _pickup_paddle(self, contact: Contact) -> list[Outcome]:
        pickup = self.session.pickups.get(contact.a)
        if pickup is None or not pickup.active or pickup.collected:
            return []
        # Mark before applying anything so persisting overlap cannot re-apply.
        pickup.collected = True
        pickup.active = False
        logger.debug("Pickup %d (%s) collected", pickup.id, pickup.kind)
        return self.apply_ability(pickup.kind, contact.now)

    def apply_ability(self, kind: str, now: float) -> list[Outcome]:
        """Apply one activation of an ability kind per its scope and propagation rules."""
        session = self.session
        config = session.config
        defn = session.registry.definition(kind)
        if defn is None:
            logger.warning("Ignoring unknown ability kind %r", kind)
            return []

        if kind == config.mystery_ability:
            revealed = resolve_mystery(config, session.random())
            logger.debug("Mystery revealed %s", revealed)
            return self.apply_ability(revealed, now)

        if kind == config.spawn_ability:
            outcomes: list[Outcome] = [AbilityApplied(ability=kind, level=0, expires_at=now)]
            primary = session.primary()
            if primary is not None and primary.launched:
                outcomes.append(
                    SpawnRequested(source_projectile_id=primary.id, count=config.spawn_count)
                )
            return outcomes

        if kind == config.screen_ability:
            outcomes = [AbilityApplied(ability=kind, level=0, expires_at=now)]
            outcomes.extend(self._blast(now))
            return outcomes

        if kind == config.extra_life_ability:
            session.lives += 1
            return [
                AbilityApplied(ability=kind, level=0, expires_at=now),
                LifeGained(lives=session.lives),
            ]

        if defn.instant:
            return [AbilityApplied(ability=kind, level=0, expires_at=now)]

        if defn.scope == SESSION:
            result = session.effects.apply(defn, now, session.registry)
            outcomes = [AbilityExpired(ability=k) for k in result.evicted]
            outcomes.append(
                AbilityApplied(ability=kind, level=result.level, expires_at=result.expires_at)
            )
            return outcomes

        if defn.applies_to_all:
            recipients = list(session.projectiles.values())
        else:
            primary = session.primary()
            recipients = [primary] if primary is not None else []

        outcomes = []
        level = 0
        expires_at = now + defn.duration_ms
        for projectile in recipients:
            result = projectile.effects.apply(defn, now, session.registry)
            for evicted in result.evicted:
                outcomes.append(AbilityExpired(ability=evicted, projectile_id=projectile.id))
            level = max(level, result.level)
            expires_at = result.expires_at
        outcomes.append(
            AbilityApplied(
                ability=kind,
                level=level,
                expires_at=expires_at,
                projectile_ids=tuple(p.id for p in recipients),
            )
        )
        return outcomes
