"""Static wireframe meshes used throughout the bus-stop scene."""
from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Sequence, Tuple

import numpy as np

from physics import transforms

Vec3 = Tuple[float, float, float]
Segment = Tuple[int, int]

X_AXIS = (1.0, 0.0, 0.0)
Y_AXIS = (0.0, 1.0, 0.0)
Z_AXIS = (0.0, 0.0, 1.0)


@dataclass(frozen=True)
class WireframeMesh:
    """Simple container for line segments connecting vertex indices."""

    vertices: Sequence[Vec3]
    segments: Sequence[Segment]

    def transformed_by(self, matrix: np.ndarray) -> "WireframeMesh":
        """Return a copy with every vertex multiplied through ``matrix``."""

        if not self.vertices:
            return self
        points = np.ones((len(self.vertices), 4), dtype=np.float64)
        points[:, :3] = self.vertices
        moved = points @ np.asarray(matrix, dtype=np.float64).T
        vertices = [(float(x), float(y), float(z)) for x, y, z in moved[:, :3]]
        return WireframeMesh(vertices, self.segments)


def merged(*meshes: WireframeMesh) -> WireframeMesh:
    """Concatenate meshes, re-indexing each one's segments."""

    vertices: List[Vec3] = []
    segments: List[Segment] = []
    for mesh in meshes:
        base = len(vertices)
        vertices.extend(mesh.vertices)
        segments.extend((a + base, b + base) for a, b in mesh.segments)
    return WireframeMesh(vertices, segments)


def _loop_segments(start: int, count: int) -> List[Segment]:
    return [(start + i, start + (i + 1) % count) for i in range(count)]


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------
def create_sphere_mesh(radius: float = 1.0, rings: int = 5, segments: int = 12) -> WireframeMesh:
    """Latitude rings plus meridians approximating a sphere."""

    vertices: List[Vec3] = [(0.0, radius, 0.0), (0.0, -radius, 0.0)]
    lines: List[Segment] = []
    ring_starts: List[int] = []
    for ring in range(1, rings + 1):
        lat = math.pi * ring / (rings + 1)
        y = math.cos(lat) * radius
        ring_radius = math.sin(lat) * radius
        start = len(vertices)
        ring_starts.append(start)
        for i in range(segments):
            angle = 2 * math.pi * i / segments
            vertices.append((math.cos(angle) * ring_radius, y, math.sin(angle) * ring_radius))
        lines.extend(_loop_segments(start, segments))
    for i in range(0, segments, 2):
        lines.append((0, ring_starts[0] + i))
        for upper, lower in zip(ring_starts, ring_starts[1:]):
            lines.append((upper + i, lower + i))
        lines.append((ring_starts[-1] + i, 1))
    return WireframeMesh(vertices, lines)


def create_surface_of_revolution(
    profile: Sequence[Vec3],
    sections: int,
    sweep: float = 2 * math.pi,
) -> WireframeMesh:
    """Revolve an ``(x, 0, z)`` profile curve about the Z axis."""

    closed = math.isclose(sweep, 2 * math.pi)
    columns = sections if closed else sections + 1
    vertices: List[Vec3] = []
    lines: List[Segment] = []
    count = len(profile)
    for column in range(columns):
        angle = sweep * column / sections
        c = math.cos(angle)
        s = math.sin(angle)
        start = len(vertices)
        for x, y, z in profile:
            vertices.append((x * c - y * s, x * s + y * c, z))
        lines.extend((start + i, start + i + 1) for i in range(count - 1))
    for column in range(columns):
        following = column + 1
        if following == columns:
            if not closed:
                break
            following = 0
        for i in range(count):
            lines.append((column * count + i, following * count + i))
    return WireframeMesh(vertices, lines)


def create_capped_cylinder_mesh(sections: int = 12) -> WireframeMesh:
    """Unit-radius cylinder spanning z in [-0.5, 0.5]."""

    profile = [(0.0, 0.0, -0.5), (1.0, 0.0, -0.5), (1.0, 0.0, 0.5), (0.0, 0.0, 0.5)]
    return create_surface_of_revolution(profile, sections)


def create_disc_mesh(sides: int = 15, radius: float = 1.0) -> WireframeMesh:
    """Regular polygon in the XY plane with spokes to its center."""

    vertices: List[Vec3] = [(0.0, 0.0, 0.0)]
    for i in range(sides):
        angle = 2 * math.pi * i / sides
        vertices.append((math.cos(angle) * radius, math.sin(angle) * radius, 0.0))
    lines = _loop_segments(1, sides)
    lines.extend((0, 1 + i) for i in range(0, sides, 3))
    return WireframeMesh(vertices, lines)


def create_ground_grid(half_size: float = 50.0, divisions: int = 20) -> WireframeMesh:
    vertices: List[Vec3] = []
    lines: List[Segment] = []
    for i in range(divisions + 1):
        offset = -half_size + 2 * half_size * i / divisions
        start = len(vertices)
        vertices.extend(
            [
                (offset, 0.0, -half_size),
                (offset, 0.0, half_size),
                (-half_size, 0.0, offset),
                (half_size, 0.0, offset),
            ]
        )
        lines.extend([(start, start + 1), (start + 2, start + 3)])
    return WireframeMesh(vertices, lines)


def create_raindrop_mesh() -> WireframeMesh:
    """Six-point diamond; cheap enough to draw a thousand times per frame."""

    vertices: List[Vec3] = [
        (0.0, 1.0, 0.0),
        (0.0, -1.0, 0.0),
        (1.0, 0.0, 0.0),
        (-1.0, 0.0, 0.0),
        (0.0, 0.0, 1.0),
        (0.0, 0.0, -1.0),
    ]
    equator = [2, 4, 3, 5]
    lines: List[Segment] = []
    for i, vertex in enumerate(equator):
        lines.append((vertex, equator[(i + 1) % 4]))
        lines.append((0, vertex))
        lines.append((1, vertex))
    return WireframeMesh(vertices, lines)


# ---------------------------------------------------------------------------
# Props
# ---------------------------------------------------------------------------
@lru_cache(maxsize=32)
def _umbrella_mesh(angle_key: float, sections: int) -> WireframeMesh:
    x = math.sin(angle_key)
    y = math.cos(angle_key)
    canopy = create_surface_of_revolution(
        [(x, 0.0, y), (x * 0.95, 0.0, y * 0.8), (x * 0.8, 0.0, y * 0.5), (x * 0.5, 0.0, y * 0.2), (0.0, 0.0, 0.0)],
        sections,
    )
    stick = create_surface_of_revolution(
        [(0.0, 0.0, 0.0), (0.02, 0.0, 0.0), (0.02, 0.0, 1.1), (0.0, 0.0, 1.1)], 3
    )
    handle_profile = [
        (0.2, 0.0, 0.0),
        (0.165, 0.0, 0.015),
        (0.15, 0.0, 0.05),
        (0.165, 0.0, 0.085),
        (0.2, 0.0, 0.1),
        (0.235, 0.0, 0.085),
        (0.25, 0.0, 0.05),
        (0.235, 0.0, 0.015),
    ]
    handle = create_surface_of_revolution(handle_profile, 10, sweep=math.pi).transformed_by(
        transforms.scale(0.6, 0.6, 0.75)
        @ transforms.translation(0.2, 0.05, 1.43)
        @ transforms.rotation(math.pi / 2, X_AXIS)
    )
    return merged(canopy, stick, handle)


def create_umbrella_mesh(angle: float, sections: int = 8) -> WireframeMesh:
    """Umbrella whose canopy is opened to ``angle`` radians from the shaft."""

    return _umbrella_mesh(round(angle, 3), sections)


def create_streetlamp_mesh() -> WireframeMesh:
    post = create_surface_of_revolution(
        [(0.0, 0.0, 0.0), (0.3, 0.0, 0.0), (0.3, 0.0, 8.0), (0.0, 0.0, 8.0)], 6
    ).transformed_by(transforms.rotation(math.pi / 2, X_AXIS))
    shade = create_surface_of_revolution(
        [(1.0, 0.0, 1.0), (0.8, 0.0, 0.7), (0.6, 0.0, 0.5), (0.3, 0.0, 0.2), (0.0, 0.0, 0.0)], 10
    ).transformed_by(transforms.translation(0.0, -0.4, 0.7) @ transforms.rotation(1.0, X_AXIS))
    return merged(post, shade)


def create_tree_mesh() -> WireframeMesh:
    return create_surface_of_revolution(
        [(7.0, 0.0, 0.0), (5.0, 0.0, 1.5), (5.0, 0.0, 50.0), (0.0, 0.0, 50.0)], 10
    ).transformed_by(transforms.rotation(-math.pi / 2, X_AXIS))


# ---------------------------------------------------------------------------
# Characters
# ---------------------------------------------------------------------------
def _sphere_at(matrix: np.ndarray) -> WireframeMesh:
    return create_sphere_mesh().transformed_by(matrix)


def _cylinder_at(matrix: np.ndarray) -> WireframeMesh:
    return create_capped_cylinder_mesh(8).transformed_by(matrix)


def _disc_at(matrix: np.ndarray) -> WireframeMesh:
    return create_disc_mesh().transformed_by(matrix)


@lru_cache(maxsize=8)
def create_totoro_body_mesh(leg_angle: float = 0.0) -> WireframeMesh:
    """Body, head, ears, arms and legs; legs tilt with ``leg_angle``."""

    T, R, S = transforms.translation, transforms.rotation, transforms.scale
    arm_scale = S(0.6, 2.2, 2.0)
    arm_lift = T(0.0, 1.0, 0.0)
    leg_scale = S(1.0, 2.0, 1.0)
    return merged(
        _sphere_at(S(3.0, 4.0, 3.0)),
        _sphere_at(T(0.0, 3.0, 0.0) @ S(2.0, 2.0, 2.0)),
        _sphere_at(R(25.0, Z_AXIS) @ T(0.0, 5.0, 0.0) @ S(0.35, 1.35, 0.35)),
        _sphere_at(R(-25.0, Z_AXIS) @ T(0.0, 5.0, 0.0) @ S(0.35, 1.35, 0.35)),
        _sphere_at(arm_lift @ R(math.pi * 0.9, Z_AXIS) @ T(2.6, 1.2, 0.0) @ arm_scale),
        _sphere_at(arm_lift @ R(-math.pi * 0.9, Z_AXIS) @ T(-2.75, 1.2, 0.0) @ arm_scale),
        _sphere_at(R(-math.pi * 0.9, (0.0, leg_angle, 1.0)) @ T(-1.3, 2.5, 0.0) @ leg_scale),
        _sphere_at(R(math.pi * 0.9, (0.0, -leg_angle, 1.0)) @ T(1.3, 2.5, 0.0) @ leg_scale),
    )


@lru_cache(maxsize=1)
def create_totoro_belly_mesh() -> WireframeMesh:
    return _sphere_at(transforms.translation(0.0, -0.2, 0.7) @ transforms.scale(2.65, 3.3, 2.65))


@lru_cache(maxsize=1)
def create_totoro_eyes_mesh() -> WireframeMesh:
    T, S = transforms.translation, transforms.scale
    return merged(
        _disc_at(T(-0.9, 3.9, 1.7) @ S(0.35, 0.35, 0.35)),
        _disc_at(T(0.9, 3.9, 1.7) @ S(0.35, 0.35, 0.35)),
    )


@lru_cache(maxsize=1)
def create_totoro_face_mesh() -> WireframeMesh:
    """Whiskers, pupils and nose."""

    T, R, S = transforms.translation, transforms.rotation, transforms.scale
    whisker = (
        R(math.pi / 2, Y_AXIS) @ T(-1.2, 3.5, -2.0) @ S(0.1, 0.1, 1.75) @ R(math.pi / 2, Y_AXIS)
    )
    first = R(-0.1, Z_AXIS) @ whisker
    second = T(0.0, -0.1, 0.0) @ R(0.1, Z_AXIS) @ first
    third = T(0.5, -0.1, 0.0) @ R(0.1, Z_AXIS) @ second
    mirror = S(-1.0, 1.0, 1.0)
    whiskers = [_cylinder_at(m) for m in (first, second, third)]
    whiskers += [_cylinder_at(mirror @ m) for m in (first, second, third)]
    return merged(
        *whiskers,
        _disc_at(T(-0.82, 3.9, 1.82) @ S(0.15, 0.15, 0.2)),
        _disc_at(T(0.82, 3.9, 1.82) @ S(0.15, 0.15, 0.2)),
        _disc_at(T(0.0, 3.7, 2.0) @ S(0.2, 0.1, 0.2)),
    )


@lru_cache(maxsize=1)
def create_girl_meshes() -> dict:
    """Named parts of one of the sisters, in her local frame."""

    T, R, S = transforms.translation, transforms.rotation, transforms.scale
    limb = (1.0, 1.0, 0.0)
    body = merged(
        _sphere_at(T(0.0, 0.3, 0.2) @ S(0.25, 0.25, 0.25)),
        _cylinder_at(T(-0.4, 0.05, 0.7) @ R(-math.pi / 10, limb) @ S(0.1, 0.1, 0.6)),
        _cylinder_at(T(0.4, 0.05, 0.7) @ R(math.pi / 10, limb) @ S(0.1, 0.1, 0.6)),
        _cylinder_at(T(-0.17, 0.0, 1.6) @ S(0.1, 0.1, 0.8)),
        _cylinder_at(T(0.17, 0.0, 1.6) @ S(0.1, 0.1, 0.8)),
    )
    dress_bottom = create_surface_of_revolution(
        [(0.8, 0.0, 0.8), (0.7, 0.0, 0.6), (0.6, 0.0, 0.3), (0.5, 0.0, 0.1), (0.0, 0.0, 0.0)], 10
    ).transformed_by(S(0.5, 0.4, 0.7) @ T(0.0, 0.0, 1.1))
    dress_top = merged(
        _sphere_at(T(0.0, 0.08, 0.6) @ S(0.35, 0.25, 0.35) @ R(-math.pi / 10, X_AXIS)),
        _sphere_at(T(0.3, 0.14, 0.4) @ S(0.15, 0.12, 0.15)),
        _sphere_at(T(-0.3, 0.14, 0.4) @ S(0.15, 0.12, 0.15)),
    )
    boots = merged(
        _cylinder_at(T(-0.18, 0.0, 2.0) @ S(0.15, 0.15, 0.4)),
        _cylinder_at(T(0.18, 0.0, 2.0) @ S(0.15, 0.15, 0.4)),
    )
    tilt = R(-math.pi / 2.5, X_AXIS)
    eyes = merged(
        _disc_at(T(-0.11, 0.55, 0.25) @ S(0.06, 0.06, 0.045) @ tilt),
        _disc_at(T(0.11, 0.55, 0.25) @ S(0.06, 0.06, 0.045) @ tilt),
    )
    pupils = merged(
        _disc_at(T(-0.11, 0.56, 0.25) @ S(0.03, 0.03, 0.028) @ tilt),
        _disc_at(T(0.11, 0.56, 0.25) @ S(0.03, 0.03, 0.028) @ tilt),
    )
    hair = create_surface_of_revolution(
        [(0.3, 0.0, 0.3), (0.28, 0.0, 0.24), (0.24, 0.0, 0.2), (0.2, 0.0, 0.1), (0.0, 0.0, 0.0)], 10
    ).transformed_by(R(math.pi / 10, X_AXIS) @ T(0.0, 0.35, -0.26))
    return {
        "body": body,
        "dress_bottom": dress_bottom,
        "dress_top": dress_top,
        "boots": boots,
        "eyes": eyes,
        "pupils": pupils,
        "hair": hair,
    }
