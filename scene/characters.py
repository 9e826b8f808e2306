"""Character behaviours driven once per fixed step."""
from __future__ import annotations

import math

from .state import TOTORO_GROUND_Y, TotoroState, UMBRELLA_CLOSED_ANGLE, UMBRELLA_OPEN_ANGLE

LEG_SWING_PERIOD = 30
JUMP_LAUNCH_SPEED = 2.5
JUMP_DECELERATION = 1.0


def walk(totoro: TotoroState, dx: float) -> None:
    """Shift Totoro sideways and swing the legs every few ticks."""

    totoro.x += dx
    totoro.leg_counter += 1
    if totoro.leg_counter % LEG_SWING_PERIOD == 0:
        totoro.leg_angle = 0.1 * math.sin(totoro.leg_counter)


def jump_height(elapsed: float) -> float:
    return JUMP_LAUNCH_SPEED * elapsed - JUMP_DECELERATION * elapsed * elapsed + TOTORO_GROUND_Y


def update_jump(totoro: TotoroState, time: float) -> bool:
    """Advance a requested jump; return ``True`` on the step Totoro lands."""

    if not totoro.jump_requested:
        return False
    totoro.jumping = True
    if totoro.jump_start is None:
        totoro.jump_start = time
    totoro.y = jump_height(time - totoro.jump_start)
    if totoro.y < TOTORO_GROUND_Y:
        totoro.y = TOTORO_GROUND_Y
        totoro.jump_requested = False
        totoro.jumping = False
        totoro.jump_start = None
        return True
    return False


def step_umbrella(
    angle: float,
    opening: bool,
    step: float = 0.1,
    closed: float = UMBRELLA_CLOSED_ANGLE,
    opened: float = UMBRELLA_OPEN_ANGLE,
) -> float:
    """Move an umbrella canopy angle one notch toward open or closed."""

    if opening and angle < opened:
        return angle + step
    if not opening and angle > closed:
        return angle - step
    return angle
