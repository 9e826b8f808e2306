"""Rain particle pool layered on top of the stepper."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

import numpy as np

from . import transforms
from .body import Body, BodyPhase
from .errors import ConfigurationError
from .stepper import BodyArena

logger = logging.getLogger(__name__)

Vec3 = Sequence[float]


@dataclass
class RainProfile:
    """Look and launch speed for one batch of spawned drops."""

    shape: Any = None
    material: Any = None
    speed: float = 1.3


@dataclass
class RainConfig:
    target_count: int = 500
    burst_count: int = 1000
    spawn_center: Vec3 = (0.0, 10.0, 0.0)
    spawn_extent: float = 40.0
    spawn_direction: Vec3 = (0.0, -1.0, 0.0)
    direction_jitter: float = 0.0
    drop_size: Vec3 = (0.05, 0.05, 0.05)
    gravity: float = 1.0
    floor_height: float = 0.5
    restitution: float = 0.2
    clamp_to_floor: bool = True
    max_distance: float = 50.0
    min_speed: float = 1.2
    normal: RainProfile = field(default_factory=RainProfile)
    burst: RainProfile = field(default_factory=RainProfile)

    def __post_init__(self) -> None:
        if self.target_count < 0 or self.burst_count < 0:
            raise ConfigurationError("Drop counts must not be negative")
        if not 0.0 <= self.restitution < 1.0:
            raise ConfigurationError(
                f"Restitution must lie in [0, 1), got {self.restitution!r}"
            )
        if self.spawn_extent < 0.0 or self.direction_jitter < 0.0:
            raise ConfigurationError("Spawn extent and jitter must not be negative")
        for profile in (self.normal, self.burst):
            if profile.speed < 0.0:
                raise ConfigurationError(f"Spawn speed must not be negative, got {profile.speed!r}")
        if self.max_distance <= 0.0 or self.min_speed < 0.0:
            raise ConfigurationError("Retirement bounds must be positive")


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------
def sample_spawn_position(rng: np.random.Generator, center: Vec3, extent: float) -> np.ndarray:
    """Uniform point in the cube of side ``extent`` around ``center``."""

    return np.asarray(center, dtype=np.float64) + extent * (rng.random(3) - 0.5)


def sample_spawn_velocity(
    rng: np.random.Generator,
    direction: Vec3,
    jitter: float,
    speed: float,
) -> np.ndarray:
    """Unit ``direction`` nudged by up to ``jitter / 2`` per axis, scaled to ``speed``."""

    base = transforms.normalized(np.asarray(direction, dtype=np.float64))
    nudged = transforms.normalized(base + jitter * (rng.random(3) - 0.5))
    if not nudged.any():
        nudged = base
    return nudged * speed


def apply_gravity(body: Body, gravity: float, dt: float) -> None:
    body.linear_velocity[1] -= gravity * dt


def apply_floor_response(
    body: Body,
    floor_height: float,
    restitution: float,
    clamp: bool = True,
) -> bool:
    """Bounce ``body`` off the floor plane; return ``True`` if it bounced."""

    velocity = body.linear_velocity
    if body.center[1] < floor_height and velocity[1] < 0.0:
        velocity[1] *= -restitution
        if clamp:
            body.center[1] = floor_height
        body.phase = BodyPhase.BOUNCING
        return True
    if body.phase is BodyPhase.BOUNCING and velocity[1] < 0.0:
        body.phase = BodyPhase.FALLING
    return False


def keep_alive(body: Body, max_distance: float, min_speed: float) -> bool:
    return body.distance_from_origin() < max_distance and body.speed() > min_speed


# ---------------------------------------------------------------------------
# Pool policy
# ---------------------------------------------------------------------------
class RainPool:
    """Keeps a target number of drops alive, falling, bouncing and retiring.

    Spawning is driven by population, not by time: every step tops the pool
    back up to its target, so the drop count settles regardless of frame
    rate.  ``trigger_burst`` raises the target for a single replenish pass
    and swaps in the burst profile for that batch.
    """

    def __init__(self, config: Optional[RainConfig] = None) -> None:
        self.config = config if config is not None else RainConfig()
        self.target_count = self.config.target_count
        self.enabled = True
        self._burst_pending = False
        self.spawned_total = 0
        self.retired_total = 0

    @property
    def burst_pending(self) -> bool:
        return self._burst_pending

    def trigger_burst(self) -> None:
        if self._burst_pending:
            return
        logger.info("Rain burst: %d drops", self.config.burst_count)
        self._burst_pending = True
        self.target_count = self.config.burst_count

    def spawn_drop(self, rng: np.random.Generator, profile: RainProfile) -> Body:
        config = self.config
        position = sample_spawn_position(rng, config.spawn_center, config.spawn_extent)
        velocity = sample_spawn_velocity(
            rng, config.spawn_direction, config.direction_jitter, profile.speed
        )
        body = Body(profile.shape, profile.material, config.drop_size)
        return body.emplace(transforms.translation(*position), velocity, rng.random(), rng=rng)

    def replenish(self, bodies: BodyArena, rng: np.random.Generator) -> int:
        if not self.enabled:
            return 0
        profile = self.config.burst if self._burst_pending else self.config.normal
        spawned = 0
        while len(bodies) < self.target_count:
            bodies.spawn(self.spawn_drop(rng, profile))
            spawned += 1
        if self._burst_pending:
            self._burst_pending = False
            self.target_count = self.config.target_count
        self.spawned_total += spawned
        return spawned

    def retire(self, bodies: BodyArena) -> int:
        config = self.config
        if not self.enabled:
            removed = bodies.clear()
        else:
            removed = bodies.retain(
                lambda body: keep_alive(body, config.max_distance, config.min_speed)
            )
        if removed:
            logger.debug("Retired %d drops", len(removed))
        self.retired_total += len(removed)
        return len(removed)

    def step(self, dt: float, bodies: BodyArena, rng: np.random.Generator) -> None:
        """One fixed step: replenish, gravity, floor response, then retire.

        Retirement runs last so no live drop fails the keep-alive check once
        the step is over; a lossy bounce usually retires the drop at once.
        """

        config = self.config
        self.replenish(bodies, rng)
        for body in bodies:
            apply_gravity(body, config.gravity, dt)
            apply_floor_response(body, config.floor_height, config.restitution, config.clamp_to_floor)
        self.retire(bodies)
