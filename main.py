"""Entry point for the rainy bus-stop demo."""
from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

import pygame

from config import FPS, WINDOW_TITLE, WINDOWED_SIZE, DemoConfig, parse_args
from logging_config import setup_logging
from physics import transforms
from physics.stepper import SimulationClock, Stepper
from rendering.camera import SceneCamera
from rendering.draw_system import SceneRenderer
from rendering.opengl_context import initialize_gl, resize_viewport
from scene.bus_stop import BusStopScene, bus_stop_rain_config
from scene.inertia_demo import GROUND_HEIGHT, InertiaDemo
from scene.state import Light
from ui.control_panel import ControlPanel
from ui.hud import HudRenderer
from ui.mouse_controls import MouseControls

logger = logging.getLogger(__name__)

INERTIA_CAMERA = transforms.translation(0.0, 0.0, -50.0)
INERTIA_LIGHTS: Tuple[Light, ...] = (
    Light((0.0, 5.0, 5.0, 1.0), (1.0, 1.0, 1.0, 1.0), 1000.0),
)


def build_stepper(config: DemoConfig) -> Stepper:
    clock = SimulationClock(
        dt=config.dt,
        time_scale=config.time_scale,
        max_frame_time=config.max_frame_time,
    )
    if config.scene == "inertia":
        policy = InertiaDemo()
    else:
        policy = BusStopScene(bus_stop_rain_config(config.rain_count, config.burst_count))
    return Stepper(policy, clock, seed=config.seed)


def _open_window(windowed: bool) -> Tuple[int, int]:
    if windowed:
        pygame.display.set_mode(
            WINDOWED_SIZE, pygame.OPENGL | pygame.DOUBLEBUF | pygame.RESIZABLE
        )
    else:
        pygame.display.set_mode(
            (0, 0), pygame.OPENGL | pygame.DOUBLEBUF | pygame.FULLSCREEN
        )
    return pygame.display.get_surface().get_size()


def run(config: DemoConfig) -> None:
    stepper = build_stepper(config)
    policy = stepper.policy
    logger.info(
        "Starting %s scene (dt=%.4fs, time scale %.3g, seed %s)",
        policy.label,
        config.dt,
        config.time_scale,
        config.seed,
    )

    pygame.init()
    try:
        pygame.display.set_caption(WINDOW_TITLE)
        window_size = _open_window(config.windowed)
        initialize_gl(window_size)

        camera = SceneCamera(viewport_size=window_size)
        renderer = SceneRenderer()
        hud = HudRenderer()
        bus_stop = policy if isinstance(policy, BusStopScene) else None
        mouse = MouseControls(window_size)
        panel = ControlPanel(bus_stop.state, stepper, mouse) if bus_stop is not None else None

        clock = pygame.time.Clock()
        animate = True
        running = True
        while running:
            frame_time = clock.tick(FPS) / 1000.0
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_SPACE:
                        animate = not animate
                    elif panel is not None:
                        panel.handle_key(event.key, event.mod)
                elif event.type == pygame.VIDEORESIZE:
                    pygame.display.set_mode(event.size, pygame.OPENGL | pygame.DOUBLEBUF | pygame.RESIZABLE)
                    resize_viewport(event.size)
                    window_size = event.size
                    camera.update_viewport(window_size)
                    mouse.update_viewport(window_size)
                elif event.type == pygame.MOUSEMOTION:
                    mouse.move(event.pos)
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    if bus_stop is not None:
                        label = mouse.press(event.pos, bus_stop.state)
                        logger.debug("Picked %s", label)
                elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                    mouse.release()
                elif event.type == pygame.WINDOWLEAVE:
                    mouse.leave()

            if bus_stop is not None:
                state = bus_stop.state
                camera.set_view(state.camera_transform)
                renderer.begin_frame(camera, state.lights())
                stepper.display(frame_time, animate, sink=renderer.draw_tilted)
                renderer.draw_bus_stop(state)
                hud.draw(window_size, panel.readouts(), panel.help_lines())
            else:
                camera.set_view(INERTIA_CAMERA)
                renderer.begin_frame(camera, INERTIA_LIGHTS)
                renderer.draw_ground(GROUND_HEIGHT)
                drawn = stepper.display(frame_time, animate, sink=renderer.draw)
                hud.draw(
                    window_size,
                    [f"Time scale: {stepper.time_scale:g}", f"Bodies: {drawn}"],
                )
            pygame.display.flip()
        logger.info("Stopped after %d steps (t=%.2fs)", stepper.clock.steps_taken, stepper.clock.t)
    finally:
        pygame.quit()


def main(argv: Optional[Sequence[str]] = None) -> None:
    config = parse_args(argv)
    setup_logging(config.log_level, config.log_file)
    try:
        run(config)
    except Exception:
        logger.exception("Demo terminated with an error")
        raise


if __name__ == "__main__":
    main()
