"""Scripted bus-stop storyline.

Every fixed step the timeline looks at the scripted clock and applies
whatever time windows are open.  Windows are expressed in seconds of scene
time; after the interactive pause ends they are measured in story time,
which excludes the seconds spent paused.
"""
from __future__ import annotations

import logging
import math
from enum import Enum
from typing import List

from physics import transforms

from . import characters
from .state import UMBRELLA_OPEN_ANGLE, SceneState

logger = logging.getLogger(__name__)

Y_AXIS = (0.0, 1.0, 0.0)

WALK_IN_SPEED = -0.03
WALK_OUT_SPEED = 0.03
PAUSE_TURN_RATE = 0.006
EXIT_TURN_RATE = 0.005
STORY_UMBRELLA_OPEN_RATE = 0.01
UMBRELLA_SLIDE_RATE = 0.03
UMBRELLA_LIFT_RATE = 0.05
UMBRELLA_LIFT_HEIGHT = 3.0
UMBRELLA_LIFT_DEPTH = 1.0


class TimelineEvent(Enum):
    LANDED = "landed"
    PAUSED = "paused"
    SCENE_CHANGED = "scene_changed"


def opening_camera():
    return transforms.rotation(-1.0, Y_AXIS) @ transforms.translation(-5.0, -5.0, -5.0)


def forest_camera():
    return transforms.rotation(-1.6, Y_AXIS) @ transforms.translation(-15.0, -3.0, -2.0)


def bus_stop_camera():
    return transforms.translation(0.0, -2.0, -10.0)


def departure_camera():
    return transforms.rotation(1.6, Y_AXIS) @ transforms.translation(15.0, -3.0, -5.0)


class BusStopTimeline:
    """Applies the scripted camera moves and character actions."""

    def __init__(self) -> None:
        self._last_scene = 0
        self._was_paused = False

    def update(self, state: SceneState) -> List[TimelineEvent]:
        events: List[TimelineEvent] = []
        self._run_intro(state)
        self._run_arrival(state)
        if state.paused:
            if not self._was_paused:
                logger.info("Scene paused at t=%.2fs", state.time)
                events.append(TimelineEvent.PAUSED)
            if self._run_interaction(state):
                events.append(TimelineEvent.LANDED)
        else:
            if self._was_paused:
                logger.info("Scene continued at t=%.2fs", state.time)
            self._run_departure(state)
        self._was_paused = state.paused
        if state.scene != self._last_scene:
            logger.info("Scene %d", state.scene)
            self._last_scene = state.scene
            events.append(TimelineEvent.SCENE_CHANGED)
        return events

    # ------------------------------------------------------------------
    # Story segments
    def _run_intro(self, state: SceneState) -> None:
        t = state.time
        if 0.0 < t < 10.0:
            state.scene = 1
            state.camera_transform = opening_camera()
        if 10.0 < t < 10.1:
            state.light_on = True
        if 20.0 < t < 40.0:
            state.scene = 2
            state.camera_transform = forest_camera()

    def _run_arrival(self, state: SceneState) -> None:
        totoro = state.totoro
        if 40.0 < state.time < 80.0 and totoro.x > 0.0:
            state.scene = 3
            totoro.facing_angle = -math.pi / 2
            characters.walk(totoro, WALK_IN_SPEED)
            state.camera_transform = bus_stop_camera()
        if totoro.x <= 0.0 and totoro.facing_angle < 0.0:
            totoro.facing_angle += PAUSE_TURN_RATE
            state.paused = True

    def _run_interaction(self, state: SceneState) -> bool:
        if state.purple_selected:
            state.purple_angle = characters.step_umbrella(state.purple_angle, state.umbrella_open)
        else:
            state.pink_angle = characters.step_umbrella(state.pink_angle, state.umbrella_open)
        return characters.update_jump(state.totoro, state.time)

    def _run_departure(self, state: SceneState) -> None:
        story = state.story_time
        totoro = state.totoro
        position = state.purple_position
        if story > 80.0 and state.purple_angle < UMBRELLA_OPEN_ANGLE:
            state.purple_angle += STORY_UMBRELLA_OPEN_RATE
        if 100.0 < story <= 103.0:
            position[0] += UMBRELLA_SLIDE_RATE
        if story > 100.0 and totoro.facing_angle < math.pi / 2:
            totoro.facing_angle += EXIT_TURN_RATE
        if 110.0 < story < 135.0:
            position[0] += UMBRELLA_SLIDE_RATE
        if 113.0 < story < 135.0:
            state.scene = 4
            totoro.facing_angle = math.pi / 2
            characters.walk(totoro, WALK_OUT_SPEED)
            if position[1] <= UMBRELLA_LIFT_HEIGHT:
                position[1] += UMBRELLA_LIFT_RATE
            if position[2] <= UMBRELLA_LIFT_DEPTH:
                position[2] += UMBRELLA_LIFT_RATE
            state.camera_transform = departure_camera()
