from __future__ import annotations

import math
from dataclasses import dataclass

NONE = "none"
LEFT = "left"
RIGHT = "right"
UP = "up"
DOWN = "down"
DIRECTIONS = (LEFT, RIGHT, UP, DOWN)
HORIZONTAL = (LEFT, RIGHT)


@dataclass(frozen=True, slots=True)
class Vector:
    x: float = 0.0
    y: float = 0.0


ZERO = Vector(0.0, 0.0)


@dataclass(frozen=True, slots=True)
class SwipeThresholds:
    """Commit thresholds, in screen pixels and pixels per second."""

    position_threshold: float = 100.0
    velocity_threshold: float = 400.0
    # Release velocities at or below this are treated as noise.
    velocity_noise_floor: float = 100.0
    decisive_velocity: float = 500.0

    def __post_init__(self):
        for name in ("position_threshold", "velocity_threshold", "velocity_noise_floor", "decisive_velocity"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be a non-negative number, got {value!r}")

    @staticmethod
    def for_screen(screen_width: float, ratio: float = 0.25, velocity_threshold: float = 400.0) -> SwipeThresholds:
        return SwipeThresholds(position_threshold=screen_width * ratio, velocity_threshold=velocity_threshold)


DEFAULT_THRESHOLDS = SwipeThresholds()


@dataclass(frozen=True, slots=True)
class SwipeResolution:
    outcome: str
    # Effective exit velocity along the committing axis, signed like the outcome; zero for NONE.
    velocity: Vector = ZERO

    @property
    def committed(self) -> bool:
        return self.outcome != NONE

    @property
    def speed(self) -> float:
        return abs(self.velocity.x) + abs(self.velocity.y)


def _sign(primary: float, fallback: float) -> float:
    if primary != 0:
        return 1.0 if primary > 0 else -1.0
    return 1.0 if fallback > 0 else -1.0


def _effective_speed(velocity: float, sign: float, thresholds: SwipeThresholds) -> float:
    # Always points along the outcome; slow or opposing releases leave at the decisive speed.
    if abs(velocity) <= thresholds.velocity_noise_floor or velocity * sign < 0:
        return sign * thresholds.decisive_velocity
    return velocity


def resolve(translation: Vector, velocity: Vector, thresholds: SwipeThresholds = DEFAULT_THRESHOLDS) -> SwipeResolution:
    """
    Classify a released drag.

    The axis is chosen first by comparing absolute translations (horizontal
    wins ties), and only that axis is tested against the thresholds. A
    gesture that dominates one axis but fails its thresholds resolves to
    NONE even if the other axis alone would have committed.
    """
    horizontal = abs(translation.x) >= abs(translation.y)
    if horizontal:
        travel, speed = translation.x, velocity.x
    else:
        travel, speed = translation.y, velocity.y

    if not (abs(travel) > thresholds.position_threshold or abs(speed) > thresholds.velocity_threshold):
        return SwipeResolution(NONE)

    sign = _sign(travel, speed)
    exit_speed = _effective_speed(speed, sign, thresholds)
    if horizontal:
        outcome = RIGHT if sign > 0 else LEFT
        return SwipeResolution(outcome, Vector(exit_speed, 0.0))
    outcome = DOWN if sign > 0 else UP
    return SwipeResolution(outcome, Vector(0.0, exit_speed))


def resolve_outcome(translation: Vector, velocity: Vector, thresholds: SwipeThresholds = DEFAULT_THRESHOLDS) -> str:
    return resolve(translation, velocity, thresholds).outcome


def exit_trajectory(
    outcome: str,
    translation: Vector,
    screen_width: float,
    screen_height: float,
    overshoot: float = 1.5,
) -> Vector:
    """Off-screen target for the top card, far enough along the outcome axis to fully leave the screen."""
    if outcome not in DIRECTIONS:
        raise ValueError(f"no exit trajectory for outcome {outcome!r}")
    if outcome == RIGHT:
        return Vector(screen_width * overshoot, translation.y * 2)
    if outcome == LEFT:
        return Vector(-screen_width * overshoot, translation.y * 2)
    if outcome == DOWN:
        return Vector(translation.x * 2, screen_height * overshoot)
    return Vector(translation.x * 2, -screen_height * overshoot)


def rotation_for(translate_x: float, screen_width: float, max_rotation: float = 20.0) -> float:
    half = screen_width / 2
    if half <= 0:
        return 0.0
    t = max(-1.0, min(1.0, translate_x / half))
    return t * max_rotation
