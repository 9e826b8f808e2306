import math

import numpy as np
import pytest

from physics.stepper import SimulationClock, Stepper
from scene import characters
from scene.bus_stop import BusStopScene, bus_stop_rain_config
from scene.inertia_demo import InertiaDemo
from scene.state import (
    TOTORO_GROUND_Y,
    UMBRELLA_CLOSED_ANGLE,
    UMBRELLA_OPEN_ANGLE,
    SceneState,
    TotoroState,
)
from scene.timeline import BusStopTimeline, TimelineEvent


def _scene_stepper(target=20, burst=40, seed=3):
    scene = BusStopScene(bus_stop_rain_config(target, burst))
    return scene, Stepper(scene, SimulationClock(dt=0.05), seed=seed)


# ---------------------------------------------------------------------------
# Characters
# ---------------------------------------------------------------------------
def test_walk_moves_and_swings_legs_every_thirty_ticks():
    totoro = TotoroState(x=5.0)
    for _ in range(29):
        characters.walk(totoro, -0.03)
    assert totoro.leg_angle == 0.0

    characters.walk(totoro, -0.03)

    assert totoro.x == pytest.approx(5.0 - 0.9)
    assert totoro.leg_angle == pytest.approx(0.1 * math.sin(30))


def test_jump_rises_then_lands_on_the_ground():
    totoro = TotoroState(jump_requested=True)

    assert not characters.update_jump(totoro, 10.0)
    assert totoro.jumping
    assert characters.jump_height(1.0) > TOTORO_GROUND_Y
    assert not characters.update_jump(totoro, 11.0)
    assert totoro.y == pytest.approx(2.6)

    assert characters.update_jump(totoro, 13.0)
    assert totoro.y == TOTORO_GROUND_Y
    assert not totoro.jumping
    assert not totoro.jump_requested
    assert totoro.jump_start is None


def test_update_jump_ignores_idle_totoro():
    totoro = TotoroState()

    assert not characters.update_jump(totoro, 4.0)
    assert totoro.y == TOTORO_GROUND_Y


def test_umbrella_steps_stay_within_limits():
    angle = UMBRELLA_CLOSED_ANGLE
    for _ in range(20):
        angle = characters.step_umbrella(angle, True)
    assert UMBRELLA_OPEN_ANGLE <= angle < UMBRELLA_OPEN_ANGLE + 0.1

    for _ in range(20):
        angle = characters.step_umbrella(angle, False)
    assert UMBRELLA_CLOSED_ANGLE - 0.1 < angle <= UMBRELLA_CLOSED_ANGLE


# ---------------------------------------------------------------------------
# Timeline
# ---------------------------------------------------------------------------
def test_intro_turns_the_light_on():
    state = SceneState(time=10.05)

    BusStopTimeline().update(state)

    assert state.light_on
    assert state.scene == 1


def test_forest_segment_switches_scene():
    state = SceneState(time=25.0)

    events = BusStopTimeline().update(state)

    assert state.scene == 2
    assert TimelineEvent.SCENE_CHANGED in events


def test_arrival_pauses_once_totoro_reaches_the_stop():
    state = SceneState(time=50.0)
    state.totoro.x = 0.02
    timeline = BusStopTimeline()

    events = timeline.update(state)

    assert state.scene == 3
    assert state.paused
    assert state.totoro.x < 0.0
    assert state.totoro.facing_angle == pytest.approx(-math.pi / 2 + 0.006)
    assert TimelineEvent.PAUSED in events

    assert TimelineEvent.PAUSED not in timeline.update(state)


def test_paused_interaction_moves_only_the_selected_umbrella():
    state = SceneState(time=60.0, paused=True, umbrella_open=False)
    state.totoro.x = -0.5
    state.purple_selected = False
    before = state.purple_angle

    BusStopTimeline().update(state)

    assert state.pink_angle == pytest.approx(UMBRELLA_OPEN_ANGLE - 0.1)
    assert state.purple_angle == before


def test_landing_is_reported_as_an_event():
    state = SceneState(time=70.0, paused=True)
    state.totoro.x = -0.5
    state.totoro.jump_requested = True
    state.totoro.jump_start = 66.0

    events = BusStopTimeline().update(state)

    assert TimelineEvent.LANDED in events
    assert state.totoro.y == TOTORO_GROUND_Y


def test_departure_uses_story_time():
    state = SceneState(time=200.0, time_paused=80.0, purple_angle=UMBRELLA_OPEN_ANGLE)
    state.totoro.x = -0.5
    state.totoro.facing_angle = 0.0
    start = state.purple_position.copy()

    BusStopTimeline().update(state)

    assert state.scene == 4
    assert state.totoro.facing_angle == pytest.approx(math.pi / 2)
    assert state.totoro.x == pytest.approx(-0.47)
    assert state.purple_position[0] == pytest.approx(start[0] + 0.03)
    assert state.purple_position[1] == pytest.approx(start[1] + 0.05)


def test_story_time_excludes_the_pause():
    state = SceneState(time=90.0, time_paused=25.0)

    assert state.story_time == 65.0


def test_lights_follow_lamp_and_pause():
    assert len(SceneState(light_on=True).lights()) == 2
    dark = SceneState(paused=True).lights()
    assert dark[0].color[:3] == (0.0, 0.0, 0.0)


# ---------------------------------------------------------------------------
# Step policies
# ---------------------------------------------------------------------------
def test_bus_stop_scene_keeps_rain_at_the_target():
    scene, stepper = _scene_stepper()

    stepper.advance(0.1)

    assert scene.state.time == pytest.approx(0.1)
    assert 0 < len(stepper.bodies) <= 20


def test_paused_steps_count_toward_paused_time():
    scene, stepper = _scene_stepper()
    scene.state.paused = True
    scene.state.time = 60.0
    scene.state.totoro.x = -0.5

    stepper.advance(0.1)

    assert scene.state.time_paused == pytest.approx(0.1)


def test_turning_rain_off_empties_the_arena():
    scene, stepper = _scene_stepper()
    stepper.advance(0.1)

    scene.state.raining = False
    stepper.advance(0.05)

    assert len(stepper.bodies) == 0


def test_landing_triggers_a_bright_burst():
    scene, stepper = _scene_stepper()
    stepper.advance(0.05)
    state = scene.state
    state.time = 70.0
    state.paused = True
    state.totoro.x = -0.5
    state.totoro.jump_requested = True
    state.totoro.jump_start = 66.0

    stepper.advance(0.05)
    assert scene.rain.burst_pending

    stepper.advance(0.05)

    bright = scene.rain.config.burst.material
    assert not scene.rain.burst_pending
    assert scene.rain.target_count == 20
    assert any(body.material is bright for body in stepper.bodies)


def test_inertia_demo_bodies_bounce_without_clamping():
    demo = InertiaDemo(body_count=8)
    stepper = Stepper(demo, SimulationClock(dt=0.05), seed=5)

    for _ in range(100):
        stepper.advance(0.05)

    assert len(stepper.bodies) <= 8
    assert demo.pool.spawned_total >= 8
    for body in stepper.bodies:
        assert np.isfinite(body.center).all()
