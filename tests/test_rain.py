import numpy as np
import pytest

from physics import transforms
from physics.body import Body, BodyPhase
from physics.errors import ConfigurationError
from physics.rain import (
    RainConfig,
    RainPool,
    RainProfile,
    apply_floor_response,
    apply_gravity,
    keep_alive,
    sample_spawn_position,
    sample_spawn_velocity,
)
from physics.stepper import BodyArena, SimulationClock, Stepper


class PoolScene:
    def __init__(self, pool):
        self.pool = pool

    def on_step(self, dt, context):
        self.pool.step(dt, context.bodies, context.rng)


def _drop(position, velocity):
    body = Body("drop", "rain", (0.05, 0.05, 0.05))
    return body.emplace(transforms.translation(*position), velocity, 0.0, spin_axis=(0.0, 0.0, 1.0))


def test_replenish_fills_an_empty_pool_inside_the_spawn_box():
    config = RainConfig(target_count=10, normal=RainProfile(speed=1.3))
    pool = RainPool(config)
    bodies = BodyArena()

    spawned = pool.replenish(bodies, np.random.default_rng(11))

    assert spawned == 10
    assert len(bodies) == 10
    for body in bodies:
        offset = body.center - np.array(config.spawn_center)
        assert np.all(np.abs(offset) <= config.spawn_extent / 2)
        assert body.speed() == pytest.approx(1.3)
        assert body.linear_velocity[1] < 0.0
        assert body.phase is BodyPhase.SPAWNED


def test_one_step_spawns_exactly_the_target():
    pool = RainPool(RainConfig(target_count=10))
    stepper = Stepper(PoolScene(pool), SimulationClock(dt=0.05), seed=1)

    stepper.advance(0.05)

    assert stepper.clock.steps_taken == 1
    assert pool.spawned_total == 10
    assert len(stepper.bodies) + pool.retired_total == 10
    assert all(body.phase is not BodyPhase.SPAWNED for body in stepper.bodies)


def test_floor_response_clamps_and_reflects():
    body = _drop((0.0, 0.4, 0.0), (0.0, -2.0, 0.0))

    bounced = apply_floor_response(body, floor_height=0.5, restitution=0.2)

    assert bounced
    assert body.center[1] == 0.5
    assert body.linear_velocity[1] == pytest.approx(0.4)
    assert body.phase is BodyPhase.BOUNCING


def test_floor_response_without_clamp_leaves_position():
    body = _drop((0.0, -9.0, 0.0), (0.0, -3.0, 0.0))

    apply_floor_response(body, floor_height=-8.0, restitution=0.8, clamp=False)

    assert body.center[1] == -9.0
    assert body.linear_velocity[1] == pytest.approx(2.4)


def test_rising_body_below_floor_is_left_alone():
    body = _drop((0.0, 0.2, 0.0), (0.0, 1.0, 0.0))

    assert not apply_floor_response(body, 0.5, 0.2)
    assert body.center[1] == 0.2


def test_bouncing_body_falls_again_once_moving_down():
    body = _drop((0.0, 2.0, 0.0), (0.0, -0.1, 0.0))
    body.phase = BodyPhase.BOUNCING

    apply_floor_response(body, 0.5, 0.2)

    assert body.phase is BodyPhase.FALLING


@pytest.mark.parametrize("restitution", [0.0, 0.2, 0.5, 0.9])
def test_bounce_flips_sign_and_loses_energy(restitution):
    body = _drop((0.0, 0.1, 0.0), (0.0, -3.0, 0.0))

    apply_floor_response(body, 0.5, restitution)

    assert body.linear_velocity[1] >= 0.0
    assert abs(body.linear_velocity[1]) < 3.0


def test_gravity_only_touches_vertical_velocity():
    body = _drop((0.0, 5.0, 0.0), (1.0, -1.0, 2.0))

    apply_gravity(body, 9.8, 0.1)

    np.testing.assert_allclose(body.linear_velocity, [1.0, -1.98, 2.0])


def test_keep_alive_needs_both_speed_and_range():
    assert keep_alive(_drop((0.0, 1.0, 0.0), (0.0, -2.0, 0.0)), 50.0, 1.2)
    assert not keep_alive(_drop((0.0, 1.0, 0.0), (0.0, 0.4, 0.0)), 50.0, 1.2)
    assert not keep_alive(_drop((60.0, 0.0, 0.0), (0.0, -2.0, 0.0)), 50.0, 1.2)


def test_spawn_samplers_are_reproducible_with_a_seed():
    first = np.random.default_rng(5)
    second = np.random.default_rng(5)

    np.testing.assert_array_equal(
        sample_spawn_position(first, (0.0, 10.0, 0.0), 40.0),
        sample_spawn_position(second, (0.0, 10.0, 0.0), 40.0),
    )
    np.testing.assert_array_equal(
        sample_spawn_velocity(first, (0.0, -1.0, 0.0), 2.0, 3.0),
        sample_spawn_velocity(second, (0.0, -1.0, 0.0), 2.0, 3.0),
    )


def test_jittered_velocity_keeps_the_requested_speed():
    rng = np.random.default_rng(9)
    for _ in range(25):
        velocity = sample_spawn_velocity(rng, (0.0, -1.0, 0.0), 2.0, 3.0)
        assert np.linalg.norm(velocity) == pytest.approx(3.0)


def test_no_live_drop_fails_the_keep_alive_check_after_a_step():
    config = RainConfig(target_count=200)
    pool = RainPool(config)
    stepper = Stepper(PoolScene(pool), SimulationClock(dt=0.05), seed=2)
    bodies = stepper.bodies

    for _ in range(300):
        stepper.advance(0.05)
        assert len(bodies) <= config.target_count
        for body in bodies:
            assert keep_alive(body, config.max_distance, config.min_speed)

    assert pool.retired_total > 0
    assert pool.spawned_total == pool.retired_total + len(bodies)


def test_burst_spawns_once_then_reverts_to_the_target():
    bright = RainProfile(material="rain_bright")
    config = RainConfig(target_count=5, burst_count=12, burst=bright)
    pool = RainPool(config)
    bodies = BodyArena()
    rng = np.random.default_rng(4)
    pool.replenish(bodies, rng)

    pool.trigger_burst()
    assert pool.burst_pending
    spawned = pool.replenish(bodies, rng)

    assert spawned == 7
    assert len(bodies) == 12
    assert [body.material for body in bodies][5:] == ["rain_bright"] * 7
    assert not pool.burst_pending
    assert pool.target_count == 5
    assert pool.replenish(bodies, rng) == 0


def test_disabled_rain_clears_and_stops_spawning():
    pool = RainPool(RainConfig(target_count=20, spawn_center=(0.0, 20.0, 0.0), spawn_extent=10.0))
    bodies = BodyArena()
    rng = np.random.default_rng(8)
    pool.step(0.05, bodies, rng)
    assert len(bodies) == 20

    pool.enabled = False
    pool.step(0.05, bodies, rng)

    assert len(bodies) == 0
    assert pool.retired_total == 20
    assert pool.replenish(bodies, rng) == 0


@pytest.mark.parametrize(
    "changes",
    [
        {"restitution": 1.0},
        {"restitution": -0.1},
        {"target_count": -1},
        {"spawn_extent": -1.0},
        {"max_distance": 0.0},
        {"normal": RainProfile(speed=-1.0)},
    ],
)
def test_invalid_rain_config_is_rejected(changes):
    with pytest.raises(ConfigurationError):
        RainConfig(**changes)


def test_drop_bounced_this_step_is_retired_in_the_same_step():
    pool = RainPool(RainConfig(target_count=0))
    bodies = BodyArena()
    bodies.spawn(_drop((0.0, 0.45, 0.0), (0.0, -2.0, 0.0)))
    bodies.spawn(_drop((0.0, 5.0, 0.0), (0.0, -2.0, 0.0)))

    pool.step(0.05, bodies, np.random.default_rng(0))

    assert len(bodies) == 1
    assert [float(body.center[1]) for body in bodies] == [5.0]
    assert pool.retired_total == 1


def test_lively_bounce_keeps_the_body_in_flight():
    pool = RainPool(RainConfig(target_count=0, restitution=0.9, min_speed=1.0, clamp_to_floor=False))
    bodies = BodyArena()
    body = bodies.spawn(_drop((0.0, 0.4, 0.0), (0.0, -3.0, 0.0)))

    pool.step(0.05, bodies, np.random.default_rng(0))

    assert len(bodies) == 1
    assert body.phase is BodyPhase.BOUNCING
    assert body.linear_velocity[1] > 0.0