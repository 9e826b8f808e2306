"""Error types raised by the simulation core."""
from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when a stepper, clock or particle pool is built with invalid settings."""
