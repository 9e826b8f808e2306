"""Perspective camera for the bus-stop scene."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Tuple

import numpy as np

from physics import transforms


@dataclass
class SceneCamera:
    """Projection settings plus a view transform written by the timeline."""

    viewport_size: Tuple[int, int]
    fov: float = math.pi / 4
    near_clip: float = 1.0
    far_clip: float = 500.0
    view: np.ndarray = field(default_factory=transforms.identity)

    def update_viewport(self, size: Tuple[int, int]) -> None:
        self.viewport_size = size

    def set_view(self, view: np.ndarray) -> None:
        self.view = np.asarray(view, dtype=np.float64)

    def view_matrix(self) -> np.ndarray:
        return self.view

    def projection_matrix(self) -> np.ndarray:
        width, height = self.viewport_size
        aspect = width / height if height > 0 else 1.0
        return transforms.perspective(self.fov, aspect, self.near_clip, self.far_clip)

    def view_projection_matrix(self) -> np.ndarray:
        return self.projection_matrix() @ self.view_matrix()

