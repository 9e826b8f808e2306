"""Wireframe renderer for the bus-stop scene."""
from __future__ import annotations

import math
from typing import Dict, Sequence, Tuple

import numpy as np
from OpenGL import GL as gl

from physics import transforms
from scene.state import LAMP_LIGHT_POSITION, PINK_UMBRELLA_POSITION, Light, SceneState

from .camera import SceneCamera
from .materials import Color, Material, hex_color, scene_materials
from .meshes import (
    WireframeMesh,
    create_disc_mesh,
    create_girl_meshes,
    create_ground_grid,
    create_sphere_mesh,
    create_streetlamp_mesh,
    create_totoro_belly_mesh,
    create_totoro_body_mesh,
    create_totoro_eyes_mesh,
    create_totoro_face_mesh,
    create_tree_mesh,
    create_umbrella_mesh,
)
from .opengl_context import BACKGROUND_COLOR, DARK_BACKGROUND_COLOR

X_AXIS = (1.0, 0.0, 0.0)

# (x, z, scale) for each tree in the forest behind the bus stop.
TREE_PLACEMENTS: Tuple[Tuple[float, float, float], ...] = (
    (5.0, -5.0, 0.6),
    (-4.0, -16.0, 0.6),
    (-10.0, -10.0, 1.0),
    (-15.0, -8.0, 0.8),
    (5.0, 14.0, 0.6),
    (-2.0, 13.0, 0.6),
    (-10.0, 17.0, 1.0),
    (10.0, 15.0, 0.8),
    (20.0, -4.0, 1.0),
    (20.0, 15.0, 0.8),
)

GIRL_COLORS: Dict[str, str] = {
    "body": "#ffe0c0",
    "dress_bottom": "#ffa500",
    "dress_top": "#ffff00",
    "boots": "#add8e6",
    "eyes": "#ffffff",
    "pupils": "#000000",
    "hair": "#8b4513",
}

DROP_TILT = transforms.rotation(math.pi / 2, (1.0, 1.0, 1.0))


def _light_level(lights: Sequence[Light]) -> float:
    """Brightest light colour, used to dim every material uniformly."""

    level = 0.0
    for light in lights:
        red, green, blue, _ = light.color
        level = max(level, (red + green + blue) / 3.0)
    return min(1.0, level * 1.35)


class SceneRenderer:
    """Draws meshes at arbitrary 4x4 transforms using shared mesh data."""

    def __init__(self) -> None:
        self.materials: Dict[str, Material] = scene_materials()
        self.ground_mesh = create_ground_grid(50.0, 25)
        self.sphere_mesh = create_sphere_mesh()
        self.shadow_mesh = create_disc_mesh(15)
        self.streetlamp_mesh = create_streetlamp_mesh()
        self.tree_mesh = create_tree_mesh()
        self.girl_meshes = create_girl_meshes()
        self._light_level = 1.0

    # ------------------------------------------------------------------
    # Frame setup
    def begin_frame(self, camera: SceneCamera, lights: Sequence[Light]) -> None:
        self._light_level = _light_level(lights)
        background = BACKGROUND_COLOR if self._light_level > 0.0 else DARK_BACKGROUND_COLOR
        gl.glClearColor(*background)
        gl.glClear(gl.GL_COLOR_BUFFER_BIT | gl.GL_DEPTH_BUFFER_BIT)
        width, height = camera.viewport_size
        gl.glViewport(0, 0, width, height)
        gl.glEnable(gl.GL_DEPTH_TEST)
        self._apply_camera(camera)

    def _apply_camera(self, camera: SceneCamera) -> None:
        projection = camera.projection_matrix()
        view = camera.view_matrix()
        gl.glMatrixMode(gl.GL_PROJECTION)
        gl.glLoadMatrixf(np.transpose(projection).astype(np.float32).flatten())
        gl.glMatrixMode(gl.GL_MODELVIEW)
        gl.glLoadMatrixf(np.transpose(view).astype(np.float32).flatten())

    def _shade(self, material: Material) -> Color:
        red, green, blue, alpha = material.color
        level = material.ambient + (1.0 - material.ambient) * self._light_level
        return (red * level, green * level, blue * level, alpha)

    # ------------------------------------------------------------------
    # Draw sink
    def draw(self, mesh: WireframeMesh, transform: np.ndarray, material: Material) -> None:
        """Draw ``mesh`` placed by ``transform`` in ``material``'s colour."""

        if not mesh.segments:
            return
        gl.glPushMatrix()
        gl.glMultMatrixf(np.transpose(transform).astype(np.float32).flatten())
        gl.glColor4f(*self._shade(material))
        gl.glBegin(gl.GL_LINES)
        vertices = mesh.vertices
        for start_index, end_index in mesh.segments:
            gl.glVertex3f(*vertices[start_index])
            gl.glVertex3f(*vertices[end_index])
        gl.glEnd()
        gl.glPopMatrix()

    def draw_tilted(self, mesh: WireframeMesh, transform: np.ndarray, material: Material) -> None:
        self.draw(mesh, transform @ DROP_TILT, material)

    def draw_ground(self, height: float = 0.0) -> None:
        ground = self.materials["ground"]
        self.draw(self.ground_mesh, transforms.translation(0.0, height, 0.0), ground)

    # ------------------------------------------------------------------
    # Bus stop scene
    def draw_bus_stop(self, state: SceneState) -> None:
        self.draw_ground()
        if state.light_on:
            self._draw_shadows(state)
        self._draw_umbrellas(state)
        self._draw_totoro(state)
        self._draw_girls()
        self._draw_streetlamp()
        self._draw_trees()

    def _draw_shadow(self, x: float, y: float, z: float, x_scale: float, z_scale: float) -> None:
        lx, ly, lz = LAMP_LIGHT_POSITION
        dx = x - lx
        dz = z - lz
        offset = -0.01 / ly
        transform = (
            transforms.translation(x - dx * offset, 0.01, z - dz * offset)
            @ transforms.scale((1.1 ** abs(dx)) * x_scale * 0.3, 1.0, (1.1 ** abs(dz)) * z_scale * 0.3)
            @ transforms.rotation(math.pi / 2, X_AXIS)
        )
        self.draw(self.shadow_mesh, transform, self.materials["shadow"])

    def _draw_shadows(self, state: SceneState) -> None:
        totoro = state.totoro
        lift = totoro.y - 1.1
        x = totoro.x
        self._draw_shadow(x + lift, 0.0, 0.0, 2.5, 3.0)
        self._draw_shadow((x + 0.75) * 1.2 + lift, 3.0, 0.0, 1.0, 2.0)
        ear = state.shadow_offset(0.16)
        self._draw_shadow((x + 1.0) * 1.35 + lift, 5.0, ear, 0.75, 0.35)
        self._draw_shadow((x + 1.0) * 1.35 + lift, 5.0, -ear, 0.75, 0.35)
        arm = state.shadow_offset(0.7)
        self._draw_shadow(x + lift, 1.0, arm, 1.5, 1.5)
        self._draw_shadow(x + lift, 1.0, -arm, 1.5, 1.5)
        pink_extent = state.pink_angle / 0.3 + 0.1
        self._draw_shadow(PINK_UMBRELLA_POSITION[0], 2.0, 0.0, pink_extent, pink_extent)
        purple_extent = state.purple_angle / 0.3 + 0.1
        self._draw_shadow(state.purple_position[0], 2.0, 0.0, purple_extent, purple_extent)

    def _draw_umbrellas(self, state: SceneState) -> None:
        upright = transforms.rotation(math.pi / 2, X_AXIS)
        pink = transforms.translation(*PINK_UMBRELLA_POSITION) @ transforms.scale(1.4, 1.4, 1.4) @ upright
        self.draw(create_umbrella_mesh(state.pink_angle), pink, self.materials["pink_umbrella"])
        purple = transforms.translation(*state.purple_position) @ transforms.scale(1.5, 1.5, 1.5) @ upright
        self.draw(create_umbrella_mesh(state.purple_angle), purple, self.materials["purple_umbrella"])

    def _draw_totoro(self, state: SceneState) -> None:
        totoro = state.totoro
        base = self.materials["totoro"]
        transform = (
            transforms.translation(totoro.x, totoro.y, 0.0)
            @ transforms.scale(0.3, 0.3, 0.3)
            @ totoro.facing()
        )
        self.draw(create_totoro_body_mesh(round(totoro.leg_angle, 3)), transform, base)
        self.draw(create_totoro_belly_mesh(), transform, base.override(hex_color("#ffeed0")))
        self.draw(create_totoro_face_mesh(), transform, base.override(hex_color("#000000"), specularity=0.2))
        self.draw(create_totoro_eyes_mesh(), transform, base.override(hex_color("#ffffff"), ambient=0.3))

    def _draw_girls(self) -> None:
        older = (
            transforms.translation(-2.2, 1.35, -0.1)
            @ transforms.scale(0.65, 0.65, 0.65)
            @ transforms.rotation(math.pi / 2, X_AXIS)
        )
        younger = older @ transforms.translation(-0.2, 0.13, -0.15) @ transforms.scale(0.5, 0.5, 0.5)
        base = self.materials["girl"]
        for transform in (older, younger):
            for part, mesh in self.girl_meshes.items():
                material = base.override(hex_color(GIRL_COLORS[part]))
                self.draw(mesh, transform, material)

    def _draw_streetlamp(self) -> None:
        self.draw(self.streetlamp_mesh, transforms.translation(-5.0, 8.0, -2.0), self.materials["streetlamp"])
        bulb = transforms.translation(-5.0, 7.0, -0.9) @ transforms.scale(0.3, 0.3, 0.3)
        self.draw(self.sphere_mesh, bulb, self.materials["lightbulb"])

    def _draw_trees(self) -> None:
        material = self.materials["tree"]
        for x, z, size in TREE_PLACEMENTS:
            transform = transforms.translation(x, 0.0, z) @ transforms.scale(size, size, size)
            self.draw(self.tree_mesh, transform, material)
