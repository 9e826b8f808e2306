"""Bouncing-cylinder inertia demo: random launches, gravity, lossy bounces."""
from __future__ import annotations

from physics.rain import RainConfig, RainPool, RainProfile
from physics.stepper import SimulationContext
from rendering.materials import scene_materials
from rendering.meshes import create_capped_cylinder_mesh

BODY_COUNT = 30
LAUNCH_SPEED = 3.0
GRAVITY = 9.8
FLOOR_HEIGHT = -8.0
GROUND_HEIGHT = -10.0
RESTITUTION = 0.8


def inertia_config(body_count: int = BODY_COUNT) -> RainConfig:
    profile = RainProfile(
        shape=create_capped_cylinder_mesh(12),
        material=scene_materials()["cylinder"],
        speed=LAUNCH_SPEED,
    )
    return RainConfig(
        target_count=body_count,
        burst_count=body_count,
        direction_jitter=2.0,
        drop_size=(0.2, 0.2, 0.2),
        gravity=GRAVITY,
        floor_height=FLOOR_HEIGHT,
        restitution=RESTITUTION,
        clamp_to_floor=False,
        max_distance=50.0,
        min_speed=LAUNCH_SPEED,
        normal=profile,
        burst=profile,
    )


class InertiaDemo:
    """Keeps a few dozen cylinders in flight until they stop or fly off."""

    label = "inertia"

    def __init__(self, body_count: int = BODY_COUNT) -> None:
        self.pool = RainPool(inertia_config(body_count))

    def on_step(self, dt: float, context: SimulationContext) -> None:
        self.pool.step(dt, context.bodies, context.rng)
