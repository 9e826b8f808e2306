"""Window, timing and command-line settings for the demo."""
from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from physics.stepper import DEFAULT_DT, MAX_FRAME_TIME
from scene.bus_stop import BURST_RAIN_COUNT, NORMAL_RAIN_COUNT

WINDOW_TITLE = "Bus Stop in the Rain"
WINDOWED_SIZE: Tuple[int, int] = (1080, 600)
FPS = 60
SCENES = ("bus-stop", "inertia")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class DemoConfig:
    scene: str = "bus-stop"
    seed: Optional[int] = None
    time_scale: float = 1.0
    dt: float = DEFAULT_DT
    max_frame_time: float = MAX_FRAME_TIME
    rain_count: int = NORMAL_RAIN_COUNT
    burst_count: int = BURST_RAIN_COUNT
    windowed: bool = False
    log_level: int = logging.INFO
    log_file: Optional[str] = None


def build_parser() -> argparse.ArgumentParser:
    epilog = """
Keys (bus-stop scene):
  Shift+T / T   speed up / slow down time
  L, R, U       toggle light, rain, umbrella (while paused)
  J             make Totoro jump (while paused)
  C             continue the scene
  Esc           quit

Click an umbrella while paused to choose which one U opens and closes.
"""
    parser = argparse.ArgumentParser(
        description="Rainy bus-stop scene on a fixed-timestep simulation",
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("--scene", choices=SCENES, default="bus-stop",
                        help="Scene to run (default: bus-stop)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the drop spawner (default: random)")
    parser.add_argument("--time-scale", type=float, default=1.0,
                        help="Initial time scale; negative plays backwards (default: 1.0)")
    parser.add_argument("--dt", type=float, default=DEFAULT_DT,
                        help=f"Fixed step size in seconds (default: {DEFAULT_DT:g})")
    parser.add_argument("--max-frame-time", type=float, default=MAX_FRAME_TIME,
                        help=f"Per-frame time ceiling in seconds (default: {MAX_FRAME_TIME:g})")
    parser.add_argument("--rain-count", type=int, default=NORMAL_RAIN_COUNT,
                        help=f"Drops kept alive (default: {NORMAL_RAIN_COUNT})")
    parser.add_argument("--burst-count", type=int, default=BURST_RAIN_COUNT,
                        help=f"Drops spawned after Totoro lands (default: {BURST_RAIN_COUNT})")
    parser.add_argument("--windowed", action="store_true",
                        help=f"Open a {WINDOWED_SIZE[0]}x{WINDOWED_SIZE[1]} window instead of fullscreen")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="INFO",
                        help="Logging verbosity (default: INFO)")
    parser.add_argument("--log-file", default=None,
                        help="Also write the log to this file")
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> DemoConfig:
    args = build_parser().parse_args(argv)
    return DemoConfig(
        scene=args.scene,
        seed=args.seed,
        time_scale=args.time_scale,
        dt=args.dt,
        max_frame_time=args.max_frame_time,
        rain_count=args.rain_count,
        burst_count=args.burst_count,
        windowed=args.windowed,
        log_level=getattr(logging, args.log_level),
        log_file=args.log_file,
    )
