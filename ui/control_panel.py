"""Keyboard controls and live readouts for the bus-stop scene."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

import pygame

from physics.stepper import Stepper
from scene.state import SceneState

logger = logging.getLogger(__name__)

TIME_SCALE_FACTOR = 5.0


@dataclass
class KeyBinding:
    label: str
    key: int
    action: Callable[[], None]
    shift: bool = False

    def matches(self, key: int, mods: int) -> bool:
        if key != self.key:
            return False
        shifted = bool(mods & pygame.KMOD_SHIFT)
        return shifted == self.shift

    def describe(self) -> str:
        name = pygame.key.name(self.key).upper()
        return f"{'Shift+' if self.shift else ''}{name}: {self.label}"


def _on_off(value: bool) -> str:
    return "On" if value else "Off"


class ControlPanel:
    """Maps key presses onto the scene state and the stepper's time scale.

    Light, rain and umbrella toggles only take effect during the interactive
    pause; outside it they are accepted and ignored.
    """

    def __init__(self, state: SceneState, stepper: Stepper, mouse=None) -> None:
        self.state = state
        self.stepper = stepper
        self.mouse = mouse
        self.bindings: List[KeyBinding] = [
            KeyBinding("Speed up time", pygame.K_t, self.speed_up, shift=True),
            KeyBinding("Slow down time", pygame.K_t, self.slow_down),
            KeyBinding("Toggle light", pygame.K_l, self.toggle_light),
            KeyBinding("Toggle rain", pygame.K_r, self.toggle_rain),
            KeyBinding("Open/close umbrella", pygame.K_u, self.toggle_umbrella),
            KeyBinding("Make Totoro jump", pygame.K_j, self.request_jump),
            KeyBinding("Continue scene", pygame.K_c, self.continue_scene),
        ]

    def handle_key(self, key: int, mods: int = 0) -> Optional[KeyBinding]:
        """Run the binding for ``key``; return it, or ``None`` when unbound."""

        for binding in self.bindings:
            if binding.matches(key, mods):
                binding.action()
                return binding
        return None

    # ------------------------------------------------------------------
    # Actions
    def speed_up(self) -> None:
        self.stepper.time_scale = self.stepper.time_scale * TIME_SCALE_FACTOR
        logger.info("Time scale %.4g", self.stepper.time_scale)

    def slow_down(self) -> None:
        self.stepper.time_scale = self.stepper.time_scale / TIME_SCALE_FACTOR
        logger.info("Time scale %.4g", self.stepper.time_scale)

    def toggle_light(self) -> None:
        if self.state.paused:
            self.state.light_on = not self.state.light_on

    def toggle_rain(self) -> None:
        if self.state.paused:
            self.state.raining = not self.state.raining

    def toggle_umbrella(self) -> None:
        if self.state.paused:
            self.state.umbrella_open = not self.state.umbrella_open

    def request_jump(self) -> None:
        totoro = self.state.totoro
        if totoro.jumping:
            return
        totoro.jump_requested = self.state.paused and not totoro.jump_requested

    def continue_scene(self) -> None:
        self.state.paused = False

    # ------------------------------------------------------------------
    # Readouts
    def readouts(self) -> List[str]:
        state = self.state
        lines = [
            f"Time scale: {self.stepper.time_scale:g}",
            f"Light state: {_on_off(state.light_on)}",
            f"Rain state: {_on_off(state.raining)}",
            f"Umbrella state: {'Open' if state.umbrella_open else 'Closed'}",
            f"Scene paused?: {'Yes' if state.paused else 'No'}",
        ]
        if self.mouse is not None:
            x, y = self.mouse.from_center
            lines.append(f"Mouse X: {x:.0f} / Y: {y:.0f}")
        lines.append(state.selection_label)
        lines.append(f"Drops: {len(self.stepper.bodies)}")
        return lines

    def help_lines(self) -> List[str]:
        return [binding.describe() for binding in self.bindings]
