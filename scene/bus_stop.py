"""The rainy bus-stop scene as a step policy."""
from __future__ import annotations

import logging
from typing import Optional

from physics.rain import RainConfig, RainPool, RainProfile
from physics.stepper import SimulationContext
from rendering.materials import scene_materials
from rendering.meshes import create_raindrop_mesh

from .state import SceneState
from .timeline import BusStopTimeline, TimelineEvent

logger = logging.getLogger(__name__)

NORMAL_RAIN_COUNT = 500
BURST_RAIN_COUNT = 1000
RAIN_SPEED = 1.3


def bus_stop_rain_config(
    target_count: int = NORMAL_RAIN_COUNT,
    burst_count: int = BURST_RAIN_COUNT,
) -> RainConfig:
    """Rain settings for the bus stop: slow blue drops, white ones after a jump."""

    materials = scene_materials()
    drop = create_raindrop_mesh()
    return RainConfig(
        target_count=target_count,
        burst_count=burst_count,
        normal=RainProfile(shape=drop, material=materials["rain"], speed=RAIN_SPEED),
        burst=RainProfile(shape=drop, material=materials["rain_bright"], speed=RAIN_SPEED),
    )


class BusStopScene:
    """Advances scripted time, the rain pool and the timeline each step."""

    label = "bus-stop"

    def __init__(
        self,
        rain_config: Optional[RainConfig] = None,
        state: Optional[SceneState] = None,
    ) -> None:
        self.state = state if state is not None else SceneState()
        self.rain = RainPool(rain_config if rain_config is not None else bus_stop_rain_config())
        self.timeline = BusStopTimeline()

    def on_step(self, dt: float, context: SimulationContext) -> None:
        state = self.state
        state.time += dt
        if state.paused:
            state.time_paused += dt
        self.rain.enabled = state.raining
        self.rain.step(dt, context.bodies, context.rng)
        events = self.timeline.update(state)
        if TimelineEvent.LANDED in events:
            logger.info("Totoro landed, shaking the rain loose")
            self.rain.trigger_burst()
