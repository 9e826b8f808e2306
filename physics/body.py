"""Kinematic bodies advanced by the fixed-timestep stepper."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

import numpy as np

from . import transforms


class BodyPhase(Enum):
    SPAWNED = "spawned"
    FALLING = "falling"
    BOUNCING = "bouncing"
    RETIRED = "retired"


@dataclass
class KinematicState:
    """One discrete snapshot: center position plus accumulated spin angle."""

    center: np.ndarray
    spin: float = 0.0

    def copy(self) -> "KinematicState":
        return KinematicState(center=self.center.copy(), spin=self.spin)


def _zero_state() -> KinematicState:
    return KinematicState(center=np.zeros(3, dtype=np.float64))


def random_spin_axis(rng: np.random.Generator) -> np.ndarray:
    axis = transforms.normalized(rng.uniform(-0.5, 0.5, size=3))
    if not axis.any():
        return np.array((0.0, 0.0, 1.0))
    return axis


@dataclass
class Body:
    """A drawable instance whose motion is integrated by the stepper.

    ``shape`` and ``material`` are shared handles: many bodies point at the
    same mesh and material objects.  ``size`` is the bounding half-size and
    doubles as the draw scale.
    """

    shape: Any
    material: Any
    size: np.ndarray
    linear_velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    angular_velocity: float = 0.0
    spin_axis: np.ndarray = field(default_factory=lambda: np.array((0.0, 0.0, 1.0)))
    base_rotation: np.ndarray = field(default_factory=transforms.identity, repr=False)
    previous_state: KinematicState = field(default_factory=_zero_state)
    current_state: KinematicState = field(default_factory=_zero_state)
    drawn_location: np.ndarray = field(default_factory=transforms.identity, repr=False)
    phase: BodyPhase = BodyPhase.SPAWNED

    def __post_init__(self) -> None:
        self.size = np.asarray(self.size, dtype=np.float64)

    def emplace(
        self,
        location: np.ndarray,
        linear_velocity,
        angular_velocity: float,
        spin_axis=None,
        rng: Optional[np.random.Generator] = None,
    ) -> "Body":
        """Place the body at ``location`` with both snapshots equal."""

        location = np.asarray(location, dtype=np.float64)
        center = transforms.position_of(location)
        self.base_rotation = transforms.identity()
        self.base_rotation[:3, :3] = location[:3, :3]
        self.previous_state = KinematicState(center=center.copy())
        self.current_state = KinematicState(center=center)
        self.linear_velocity = np.array(linear_velocity, dtype=np.float64)
        self.angular_velocity = float(angular_velocity)
        if spin_axis is None:
            spin_axis = random_spin_axis(rng if rng is not None else np.random.default_rng())
        self.spin_axis = transforms.normalized(np.asarray(spin_axis, dtype=np.float64))
        self.blend_state(0.0)
        return self

    @property
    def center(self) -> np.ndarray:
        return self.current_state.center

    def speed(self) -> float:
        return float(np.linalg.norm(self.linear_velocity))

    def distance_from_origin(self) -> float:
        return float(np.linalg.norm(self.current_state.center))

    def advance(self, dt: float) -> None:
        """Integrate velocities over ``dt``, keeping the old state for blending."""

        self.previous_state = self.current_state.copy()
        self.current_state.center = self.current_state.center + self.linear_velocity * dt
        self.current_state.spin += self.angular_velocity * dt
        if self.phase is BodyPhase.SPAWNED:
            self.phase = BodyPhase.FALLING

    def blend_state(self, alpha: float) -> np.ndarray:
        """Compute ``drawn_location`` between the last two snapshots."""

        previous = self.previous_state
        current = self.current_state
        center = transforms.lerp(previous.center, current.center, alpha)
        spin = transforms.lerp(previous.spin, current.spin, alpha)
        self.drawn_location = (
            transforms.translation(*center)
            @ transforms.rotation(spin, self.spin_axis)
            @ self.base_rotation
            @ transforms.scale(*self.size)
        )
        return self.drawn_location

    def retire(self) -> None:
        self.phase = BodyPhase.RETIRED
