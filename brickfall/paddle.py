"""Paddle bounce geometry."""
from __future__ import annotations

import math


def bounce_angle(
    hit_x: float,
    paddle_x: float,
    half_width: float,
    min_angle_deg: float = -150.0,
    max_angle_deg: float = -30.0,
) -> float:
    """Outgoing angle in radians from where the projectile met the paddle.

    The hit offset is normalized to [-1, 1] across the paddle (clamped at
    the edges) and mapped linearly onto [min_angle_deg, max_angle_deg].
    Negative angles point upward in screen coordinates.
    """
    offset = (hit_x - paddle_x) / half_width if half_width > 0 else 0.0
    offset = max(-1.0, min(1.0, offset))
    t = (offset + 1.0) / 2.0
    return math.radians(min_angle_deg + (max_angle_deg - min_angle_deg) * t)


def velocity_from_angle(angle: float, speed: float) -> tuple[float, float]:
    return math.cos(angle) * speed, math.sin(angle) * speed
