"""Headless endless-mode run.

Plays generated waves with a scripted paddle: every step the ball hits the
first standing brick, catches whatever drops, and returns off the paddle.
Prints one summary line per wave and the final session report.

Run:
    python examples/endless_run.py
    python examples/endless_run.py --seed 7 --waves 25 --rules rules.json -v
"""
from __future__ import annotations

import argparse
import logging
from collections import Counter

from brickfall import (
    CollisionResolver,
    Contact,
    DropSpawned,
    GameSession,
    Paddle,
    Pickup,
    Projectile,
    RulesConfig,
    SpawnRequested,
    WaveGenerator,
    load_config,
)
from brickfall.types import PICKUP_PADDLE, PROJECTILE_PADDLE, PROJECTILE_TARGET

STEP_MS = 40.0
SETTLE_MS = 250.0


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="brickfall endless-mode run")
    p.add_argument("--seed", type=int, default=42, help="Wave seed (default: 42)")
    p.add_argument("--waves", type=int, default=10, help="Waves to play (default: 10)")
    p.add_argument("--rules", type=str, default=None, help="JSON rules file")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p.parse_args()


def play_wave(
    session: GameSession,
    resolver: CollisionResolver,
    generator: WaveGenerator,
    wave_index: int,
    now: float,
) -> tuple[Counter[str], float]:
    wave = generator.generate(wave_index)
    session.start_wave(wave)
    kinds: Counter[str] = Counter()
    next_ball = max(session.projectiles) + 1
    next_pickup = 0

    while not session.round_complete:
        target = session.active_targets()[0]
        outcomes = resolver.resolve(Contact(PROJECTILE_TARGET, session.primary_id or 0, target.id, now))
        for outcome in list(outcomes):
            if isinstance(outcome, DropSpawned):
                session.add_pickup(Pickup(id=next_pickup, kind=outcome.item_kind, x=outcome.x, y=outcome.y))
                outcomes.extend(resolver.resolve(Contact(PICKUP_PADDLE, next_pickup, 0, now)))
                next_pickup += 1
        for outcome in list(outcomes):
            if isinstance(outcome, SpawnRequested):
                for _ in range(outcome.count):
                    resolver.register_projectile(
                        Projectile(id=next_ball, launched=True), now, sibling_of=outcome.source_projectile_id
                    )
                    next_ball += 1
        outcomes.extend(resolver.tick(now + STEP_MS, STEP_MS))
        now += STEP_MS

        primary = session.primary()
        if primary is not None:
            primary.vy = abs(primary.vy) or 1.0
            outcomes.extend(resolver.resolve(Contact(PROJECTILE_PADDLE, primary.id, 0, now)))
        kinds.update(o.kind for o in outcomes)

    now += SETTLE_MS
    kinds.update(o.kind for o in resolver.tick(now, SETTLE_MS))
    return kinds, now


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = load_config(args.rules) if args.rules else RulesConfig()

    session = GameSession(config, seed=args.seed, paddle=Paddle(x=400, y=560))
    session.add_projectile(Projectile(id=1, x=400, y=540, vy=300, launched=True))
    resolver = CollisionResolver(session)
    generator = WaveGenerator(seed=args.seed, config=config)

    now = 0.0
    for wave_index in range(args.waves):
        kinds, now = play_wave(session, resolver, generator, wave_index, now)
        print(
            f"wave {wave_index:3d}  score {session.score:7d}  lives {session.lives}"
            f"  balls {len(session.projectiles):2d}  hits {kinds['hit']:3d}"
            f"  chains {kinds['chain_hit']:3d}  blasts {kinds['blast_hit']:3d}"
            f"  drops {kinds['drop_spawned']:2d}"
        )

    report = session.report()
    print(f"\nFinal: score={report.score} wave={report.wave} lives={report.lives}")


if __name__ == "__main__":
    main()
