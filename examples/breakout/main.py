"""
brickfall Breakout
Playable pygame front-end: the demo owns movement and overlap tests, the
engine resolves every contact it reports.
"""

import logging
import math
import sys

import pygame

from brickfall import (
    CollisionResolver,
    Contact,
    Destroyed,
    DropSpawned,
    GameSession,
    Paddle,
    Pickup,
    Projectile,
    RoundCleared,
    SpawnRequested,
    WaveGenerator,
)
from brickfall.types import PICKUP_PADDLE, PROJECTILE_PADDLE, PROJECTILE_TARGET

# --- Configuration ---
WIDTH, HEIGHT = 800, 600
FPS = 60
TITLE = "brickfall Breakout"
SEED = 42

PADDLE_Y = 560.0
PADDLE_SPEED = 520.0
PICKUP_FALL_SPEED = 150.0
PICKUP_RADIUS = 12.0

# Colors
BG_COLOR = (26, 26, 46)
HUD_COLOR = (200, 200, 220)
PADDLE_COLOR = (230, 230, 255)
BALL_COLOR = (255, 255, 255)
BRICK_COLORS = {
    "present": (255, 100, 100),
    "pinata": (255, 160, 0),
    "balloon": (100, 200, 255),
    "drifter": (180, 100, 255),
}
PICKUP_COLORS = {
    "fireball": (255, 80, 0),
    "electricball": (255, 255, 100),
    "balloon": (100, 200, 255),
    "powerball": (255, 0, 200),
}
DEFAULT_PICKUP_COLOR = (0, 255, 100)


def circle_hits_rect(cx, cy, r, rx, ry, hw, hh):
    """Overlap test; returns the axis of least penetration ("x"/"y") or None."""
    dx = cx - rx
    dy = cy - ry
    px = hw + r - abs(dx)
    py = hh + r - abs(dy)
    if px <= 0 or py <= 0:
        return None
    return "x" if px < py else "y"


class Demo:
    def __init__(self) -> None:
        self.session = GameSession(seed=SEED, paddle=Paddle(x=WIDTH / 2, y=PADDLE_Y))
        self.resolver = CollisionResolver(self.session)
        self.generator = WaveGenerator(seed=SEED, config=self.session.config)
        self.now = 0.0
        self.next_ball = 1
        self.next_pickup = 1
        self.wave = 0
        self.touching: dict[int, set[int]] = {}
        self.flash = ""
        self.spawn_attached_ball()
        self.session.start_wave(self.generator.generate(self.wave))

    # --- Entities ---

    def spawn_attached_ball(self) -> Projectile:
        ball = Projectile(id=self.next_ball, attached=True)
        self.next_ball += 1
        self.resolver.register_projectile(ball, self.now)
        self.follow_paddle(ball)
        return ball

    def follow_paddle(self, ball: Projectile) -> None:
        paddle = self.session.paddle
        ball.x = paddle.x
        ball.y = paddle.y - paddle.half_height - ball.radius - 1

    def launch(self) -> None:
        for ball in self.session.projectiles.values():
            if ball.attached:
                ball.attached = False
                ball.launched = True
                speed = self.resolver.projectile_speed(ball, self.now)
                ball.vx, ball.vy = 0.0, -speed

    def spawn_siblings(self, request: SpawnRequested) -> None:
        source = self.session.projectiles.get(request.source_projectile_id)
        if source is None:
            return
        heading = math.atan2(source.vy, source.vx)
        speed = math.hypot(source.vx, source.vy)
        for i in range(request.count):
            angle = heading + (i + 1) * 0.35 * (1 if i % 2 == 0 else -1)
            ball = Projectile(
                id=self.next_ball,
                x=source.x,
                y=source.y,
                vx=math.cos(angle) * speed,
                vy=math.sin(angle) * speed,
                launched=True,
            )
            self.next_ball += 1
            self.resolver.register_projectile(ball, self.now, sibling_of=source.id)

    # --- Outcomes ---

    def handle(self, outcomes) -> None:
        for outcome in outcomes:
            if isinstance(outcome, DropSpawned):
                self.session.add_pickup(
                    Pickup(id=self.next_pickup, kind=outcome.item_kind, x=outcome.x, y=outcome.y)
                )
                self.next_pickup += 1
            elif isinstance(outcome, SpawnRequested):
                self.spawn_siblings(outcome)
            elif isinstance(outcome, Destroyed):
                for touching in self.touching.values():
                    touching.discard(outcome.target_id)
            elif isinstance(outcome, RoundCleared):
                self.flash = f"Wave {self.wave} cleared!"
            elif outcome.kind == "ability_applied":
                self.flash = outcome.ability

    def next_wave(self) -> None:
        self.wave += 1
        for pid in list(self.session.projectiles):
            self.session.remove_projectile(pid)
        self.touching.clear()
        self.spawn_attached_ball()
        self.session.start_wave(self.generator.generate(self.wave))

    # --- Simulation ---

    def step(self, dt: float, move: float) -> None:
        self.now += dt * 1000
        session = self.session
        paddle = session.paddle
        half_width = session.paddle_half_width(self.now)
        paddle.x = max(half_width, min(WIDTH - half_width, paddle.x + move * PADDLE_SPEED * dt))

        grid = session.config.grid
        hw, hh = grid.cell_width / 2, grid.cell_height / 2

        for ball in list(session.projectiles.values()):
            if ball.attached:
                self.follow_paddle(ball)
                continue
            ball.x += ball.vx * dt
            ball.y += ball.vy * dt
            if ball.x - ball.radius < 0 or ball.x + ball.radius > WIDTH:
                ball.vx = -ball.vx
                ball.x = max(ball.radius, min(WIDTH - ball.radius, ball.x))
            if ball.y - ball.radius < 0:
                ball.vy = abs(ball.vy)
            if ball.y - ball.radius > HEIGHT:
                session.remove_projectile(ball.id)
                self.touching.pop(ball.id, None)
                continue

            touching = self.touching.setdefault(ball.id, set())
            for target in session.active_targets():
                axis = circle_hits_rect(ball.x, ball.y, ball.radius, target.x, target.y, hw, hh)
                if axis is None:
                    touching.discard(target.id)
                    continue
                if target.id in touching:
                    continue
                touching.add(target.id)
                if self.resolver.should_bounce(ball.id, target.id, self.now):
                    if axis == "x":
                        ball.vx = -ball.vx
                    else:
                        ball.vy = -ball.vy
                self.handle(self.resolver.resolve(Contact(PROJECTILE_TARGET, ball.id, target.id, self.now)))

            if circle_hits_rect(ball.x, ball.y, ball.radius, paddle.x, paddle.y, half_width, paddle.half_height):
                self.handle(self.resolver.resolve(Contact(PROJECTILE_PADDLE, ball.id, 0, self.now)))

        for pickup in list(session.pickups.values()):
            pickup.y += PICKUP_FALL_SPEED * dt
            if pickup.y > HEIGHT:
                session.remove_pickup(pickup.id)
            elif circle_hits_rect(pickup.x, pickup.y, PICKUP_RADIUS, paddle.x, paddle.y, half_width, paddle.half_height):
                self.handle(self.resolver.resolve(Contact(PICKUP_PADDLE, pickup.id, 0, self.now)))
                session.remove_pickup(pickup.id)

        self.handle(self.resolver.tick(self.now, dt * 1000))

        if not session.projectiles and not session.is_game_over():
            session.lose_life()
            if not session.is_game_over():
                self.spawn_attached_ball()
        if session.round_complete:
            self.next_wave()

    # --- Drawing ---

    def draw(self, screen, font, fps_val: float) -> None:
        screen.fill(BG_COLOR)
        session = self.session
        grid = session.config.grid

        for target in session.active_targets():
            rect = pygame.Rect(
                int(target.x - grid.cell_width / 2), int(target.y - grid.cell_height / 2),
                int(grid.cell_width), int(grid.cell_height),
            )
            color = BRICK_COLORS.get(target.kind, HUD_COLOR)
            shade = 0.5 + 0.5 * target.health / max(1, target.max_health)
            pygame.draw.rect(screen, tuple(int(c * shade) for c in color), rect)

        for pickup in session.pickups.values():
            color = PICKUP_COLORS.get(pickup.kind, DEFAULT_PICKUP_COLOR)
            pygame.draw.circle(screen, color, (int(pickup.x), int(pickup.y)), int(PICKUP_RADIUS))

        for ball in session.projectiles.values():
            color = BALL_COLOR
            for kind in ball.effects.active_kinds(self.now):
                color = PICKUP_COLORS.get(kind, color)
            pygame.draw.circle(screen, color, (int(ball.x), int(ball.y)), int(ball.radius))

        paddle = session.paddle
        half_width = session.paddle_half_width(self.now)
        pygame.draw.rect(screen, PADDLE_COLOR, pygame.Rect(
            int(paddle.x - half_width), int(paddle.y - paddle.half_height),
            int(half_width * 2), int(paddle.half_height * 2),
        ))

        status = "  [GAME OVER]" if session.is_game_over() else ""
        hud_lines = [
            f"Wave: {self.wave}   Score: {session.score}   Lives: {session.lives}"
            f"   x{session.multiplier.value:.2f}   FPS: {fps_val:.0f}{status}",
            f"Left/Right=Move  Space=Launch  Esc=Quit   {self.flash}",
        ]
        for i, line in enumerate(hud_lines):
            surf = font.render(line, True, HUD_COLOR)
            screen.blit(surf, (10, 8 + i * 20))


def main():
    logging.basicConfig(level=logging.INFO)
    pygame.init()
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    pygame.display.set_caption(TITLE)
    pg_clock = pygame.time.Clock()
    font = pygame.font.SysFont("monospace", 14)

    demo = Demo()
    running = True

    while running:
        dt = pg_clock.tick(FPS) / 1000.0

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_SPACE:
                    demo.launch()

        keys = pygame.key.get_pressed()
        move = (1 if keys[pygame.K_RIGHT] else 0) - (1 if keys[pygame.K_LEFT] else 0)

        if not demo.session.is_game_over():
            demo.step(dt, move)

        demo.draw(screen, font, pg_clock.get_fps())
        pygame.display.flip()

    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()
