"""Fixed-timestep simulation stepper.

Real display frame intervals arrive irregularly.  The stepper banks them in
an accumulator and spends that time in whole steps of exactly ``dt``, so the
simulation advances identically no matter how fast frames are drawn.  The
left-over fraction of a step becomes ``alpha``, used to blend every body
between its last two snapshots for display.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List, Optional, Protocol, Tuple

import numpy as np

from .body import Body, BodyPhase
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_DT = 1.0 / 20.0
MAX_FRAME_TIME = 0.1

DrawSink = Callable[[Any, np.ndarray, Any], None]


@dataclass
class SimulationClock:
    """Time bookkeeping for one scene."""

    dt: float = DEFAULT_DT
    time_scale: float = 1.0
    max_frame_time: float = MAX_FRAME_TIME
    time_accumulator: float = field(default=0.0, init=False)
    t: float = field(default=0.0, init=False)
    steps_taken: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        if not self.dt > 0.0:
            raise ConfigurationError(f"Step size must be positive, got {self.dt!r}")
        if not self.max_frame_time > 0.0:
            raise ConfigurationError(
                f"Frame time ceiling must be positive, got {self.max_frame_time!r}"
            )

    @property
    def alpha(self) -> float:
        return self.time_accumulator / self.dt

    def bank(self, frame_time: float) -> float:
        """Add scaled, clamped frame time to the accumulator and return it."""

        scaled = self.time_scale * frame_time
        ceiling = self.max_frame_time
        banked = max(-ceiling, min(ceiling, scaled))
        if banked != scaled:
            logger.debug("Dropped %.4fs of frame time", scaled - banked)
        self.time_accumulator += banked
        return banked

    def tick(self, direction: float) -> None:
        self.t += direction * self.dt
        self.time_accumulator -= direction * self.dt
        self.steps_taken += 1


class BodyArena:
    """Owned collection of live bodies with in-place retirement."""

    def __init__(self) -> None:
        self._bodies: List[Body] = []

    def __len__(self) -> int:
        return len(self._bodies)

    def __iter__(self) -> Iterator[Body]:
        return iter(self._bodies)

    def spawn(self, body: Body) -> Body:
        self._bodies.append(body)
        return body

    def retain(self, keep: Callable[[Body], bool]) -> List[Body]:
        """Compact the arena to bodies passing ``keep``; return the removed ones."""

        bodies = self._bodies
        removed: List[Body] = []
        write = 0
        for body in bodies:
            if keep(body):
                bodies[write] = body
                write += 1
            else:
                body.retire()
                removed.append(body)
        del bodies[write:]
        return removed

    def clear(self) -> List[Body]:
        return self.retain(lambda body: False)


class SimulationContext:
    """What a step policy may see and touch during one step.

    Clock fields are read-only views; the body arena is the only thing a
    policy mutates here.
    """

    def __init__(self, clock: SimulationClock, bodies: BodyArena, rng: np.random.Generator) -> None:
        self._clock = clock
        self.bodies = bodies
        self.rng = rng

    @property
    def dt(self) -> float:
        return self._clock.dt

    @property
    def t(self) -> float:
        return self._clock.t

    @property
    def steps_taken(self) -> int:
        return self._clock.steps_taken

    @property
    def time_scale(self) -> float:
        return self._clock.time_scale


class StepPolicy(Protocol):
    def on_step(self, dt: float, context: SimulationContext) -> None:
        ...


class Stepper:
    """Drives a :class:`StepPolicy` and its bodies at a fixed step size."""

    def __init__(
        self,
        policy: StepPolicy,
        clock: Optional[SimulationClock] = None,
        *,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ) -> None:
        on_step = getattr(policy, "on_step", None)
        if not callable(on_step):
            raise ConfigurationError(
                f"{type(policy).__name__} does not provide an on_step(dt, context) method"
            )
        self.policy = policy
        self.clock = clock if clock is not None else SimulationClock()
        self.bodies = BodyArena()
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.context = SimulationContext(self.clock, self.bodies, self.rng)
        self._alpha = 0.0

    @property
    def time_scale(self) -> float:
        return self.clock.time_scale

    @time_scale.setter
    def time_scale(self, value: float) -> None:
        self.clock.time_scale = float(value)

    @property
    def alpha(self) -> float:
        return self._alpha

    def advance(self, frame_time: float) -> float:
        """Catch the simulation up with ``frame_time`` real seconds."""

        clock = self.clock
        banked = clock.bank(frame_time)
        direction = 1.0 if banked >= 0.0 else -1.0
        while abs(clock.time_accumulator) >= clock.dt:
            self.policy.on_step(clock.dt, self.context)
            for body in self.bodies:
                body.advance(clock.dt)
            clock.tick(direction)
        return self.blend()

    def blend(self) -> float:
        """Blend every body at the current accumulator fraction."""

        alpha = self.clock.alpha
        self._alpha = alpha
        for body in self.bodies:
            body.blend_state(alpha)
        return alpha

    def drawables(self) -> Iterator[Tuple[Any, np.ndarray, Any]]:
        for body in self.bodies:
            if body.phase is BodyPhase.RETIRED:
                continue
            yield body.shape, body.drawn_location, body.material

    def display(self, frame_time: float, animate: bool, sink: Optional[DrawSink] = None) -> int:
        """Step when animating, then hand each body's blended transform to ``sink``."""

        if animate:
            self.advance(frame_time)
        drawn = 0
        for shape, location, material in self.drawables():
            if sink is not None:
                sink(shape, location, material)
            drawn += 1
        return drawn
