"""4x4 homogeneous transform helpers shared by the simulation and renderer."""
from __future__ import annotations

import math
from typing import Sequence, Union

import numpy as np

Vec3 = Sequence[float]
Blendable = Union[float, np.ndarray]


def normalized(vec: np.ndarray) -> np.ndarray:
    norm = np.linalg.norm(vec)
    if norm == 0:
        return vec
    return vec / norm


def identity() -> np.ndarray:
    return np.identity(4, dtype=np.float64)


def translation(x: float, y: float, z: float) -> np.ndarray:
    matrix = identity()
    matrix[0, 3] = x
    matrix[1, 3] = y
    matrix[2, 3] = z
    return matrix


def scale(x: float, y: float, z: float) -> np.ndarray:
    matrix = identity()
    matrix[0, 0] = x
    matrix[1, 1] = y
    matrix[2, 2] = z
    return matrix


def rotation(angle: float, axis: Vec3) -> np.ndarray:
    """Rotation of ``angle`` radians about ``axis`` (Rodrigues' formula)."""

    unit = normalized(np.asarray(axis, dtype=np.float64))
    if not unit.any():
        return identity()
    x, y, z = unit
    c = math.cos(angle)
    s = math.sin(angle)
    one_c = 1.0 - c
    matrix = identity()
    matrix[:3, :3] = (
        (c + x * x * one_c, x * y * one_c - z * s, x * z * one_c + y * s),
        (y * x * one_c + z * s, c + y * y * one_c, y * z * one_c - x * s),
        (z * x * one_c - y * s, z * y * one_c + x * s, c + z * z * one_c),
    )
    return matrix


def perspective(fov: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Perspective projection with a vertical field of view in radians."""

    projection = np.zeros((4, 4), dtype=np.float64)
    f = 1.0 / math.tan(fov / 2.0)
    projection[0, 0] = f / aspect
    projection[1, 1] = f
    projection[2, 2] = (far + near) / (near - far)
    projection[2, 3] = (2 * far * near) / (near - far)
    projection[3, 2] = -1.0
    return projection


def position_of(matrix: np.ndarray) -> np.ndarray:
    return np.array(matrix[:3, 3], dtype=np.float64)


def lerp(a: Blendable, b: Blendable, alpha: float) -> Blendable:
    return a + (b - a) * alpha
