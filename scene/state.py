"""Mutable state shared by the timeline, controls and renderer."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

from physics import transforms

Vec3 = Tuple[float, float, float]

TOTORO_GROUND_Y = 1.1
TOTORO_START_X = 20.0
UMBRELLA_OPEN_ANGLE = 1.1
UMBRELLA_CLOSED_ANGLE = 0.2
PURPLE_UMBRELLA_START: Vec3 = (-4.0, 2.0, 0.0)
PINK_UMBRELLA_POSITION: Vec3 = (-2.5, 2.0, 0.0)
LAMP_LIGHT_POSITION: Vec3 = (-5.0, 7.0, 0.9)


def initial_camera() -> np.ndarray:
    return transforms.translation(0.0, -2.0, -10.0) @ transforms.rotation(1.1, (0.0, 1.0, 0.0))


@dataclass
class Light:
    position: Tuple[float, float, float, float]
    color: Tuple[float, float, float, float]
    size: float


@dataclass
class TotoroState:
    x: float = TOTORO_START_X
    y: float = TOTORO_GROUND_Y
    facing_angle: float = 0.0
    leg_counter: int = 0
    leg_angle: float = 0.0
    jump_requested: bool = False
    jumping: bool = False
    jump_start: Optional[float] = None

    def facing(self) -> np.ndarray:
        return transforms.rotation(self.facing_angle, (0.0, 1.0, 0.0))


@dataclass
class SceneState:
    """Everything the scripted scene reads and writes between steps."""

    scene: int = 1
    time: float = 0.0
    time_paused: float = 0.0
    paused: bool = False
    light_on: bool = False
    raining: bool = True
    umbrella_open: bool = True
    purple_selected: bool = True
    selection_label: str = "no umbrella selected"
    purple_angle: float = 0.1
    pink_angle: float = UMBRELLA_OPEN_ANGLE
    purple_position: np.ndarray = field(
        default_factory=lambda: np.array(PURPLE_UMBRELLA_START, dtype=np.float64)
    )
    totoro: TotoroState = field(default_factory=TotoroState)
    camera_transform: np.ndarray = field(default_factory=initial_camera)

    @property
    def story_time(self) -> float:
        """Scripted time with the interactive pause taken out."""

        return self.time - self.time_paused

    def lights(self) -> Tuple[Light, ...]:
        if self.light_on:
            return (
                Light((100.0, 5.0, 5.0, 1.0), (1.0, 0.7, 0.5, 1.0), 5000.0),
                Light((*LAMP_LIGHT_POSITION, 1.0), (1.0, 0.7, 0.5, 1.0), 1000.0),
            )
        if self.paused:
            return (Light((100.0, 5.0, 0.0, 1.0), (0.0, 0.0, 0.0, 1.0), 5000.0),)
        return (Light((100.0, 5.0, 0.0, 1.0), (1.0, 0.7, 0.5, 1.0), 5000.0),)

    def shadow_offset(self, extent: float) -> float:
        """Sideways shift of a limb shadow as Totoro turns toward the camera."""

        return extent - (math.pi / 2 - self.totoro.facing_angle) * extent * 2 / math.pi
