import logging

import pytest

from config import DemoConfig, parse_args
from logging_config import setup_logging
from physics.stepper import DEFAULT_DT, MAX_FRAME_TIME


def test_defaults_match_the_bus_stop_scene():
    config = parse_args([])

    assert config == DemoConfig()
    assert config.scene == "bus-stop"
    assert config.dt == DEFAULT_DT
    assert config.max_frame_time == MAX_FRAME_TIME
    assert config.rain_count == 500
    assert config.burst_count == 1000


def test_flags_are_parsed_into_the_config():
    config = parse_args(
        [
            "--scene", "inertia",
            "--seed", "42",
            "--time-scale", "-0.5",
            "--dt", "0.02",
            "--rain-count", "50",
            "--burst-count", "80",
            "--windowed",
            "--log-level", "DEBUG",
            "--log-file", "demo.log",
        ]
    )

    assert config.scene == "inertia"
    assert config.seed == 42
    assert config.time_scale == -0.5
    assert config.dt == 0.02
    assert config.rain_count == 50
    assert config.burst_count == 80
    assert config.windowed
    assert config.log_level == logging.DEBUG
    assert config.log_file == "demo.log"


def test_unknown_scene_is_rejected():
    with pytest.raises(SystemExit):
        parse_args(["--scene", "totoro"])


def test_setup_logging_replaces_root_handlers(tmp_path):
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    log_file = tmp_path / "demo.log"
    try:
        setup_logging(logging.DEBUG, str(log_file))
        setup_logging(logging.DEBUG, str(log_file))

        assert len(root.handlers) == 2
        assert root.level == logging.DEBUG
        logging.getLogger("physics.rain").debug("Retired 3 drops")
        for handler in root.handlers:
            handler.flush()
        assert "physics.rain - DEBUG - Retired 3 drops" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
