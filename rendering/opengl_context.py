"""OpenGL context helpers for the bus-stop wireframe rendering."""
from __future__ import annotations

from typing import Tuple

from OpenGL import GL as gl


BACKGROUND_COLOR = (0.02, 0.03, 0.06, 1.0)
DARK_BACKGROUND_COLOR = (0.0, 0.0, 0.0, 1.0)


def initialize_gl(surface_size: Tuple[int, int]) -> None:
    """Configure OpenGL state for depth-tested 3D line rendering."""
    width, height = surface_size
    gl.glViewport(0, 0, width, height)
    gl.glClearColor(*BACKGROUND_COLOR)

    gl.glMatrixMode(gl.GL_PROJECTION)
    gl.glLoadIdentity()
    gl.glMatrixMode(gl.GL_MODELVIEW)
    gl.glLoadIdentity()

    gl.glEnable(gl.GL_DEPTH_TEST)
    gl.glDepthFunc(gl.GL_LEQUAL)
    gl.glEnable(gl.GL_BLEND)
    gl.glBlendFunc(gl.GL_SRC_ALPHA, gl.GL_ONE_MINUS_SRC_ALPHA)
    gl.glLineWidth(1.2)


def resize_viewport(surface_size: Tuple[int, int]) -> None:
    """Update viewport and projection when the window changes size."""
    initialize_gl(surface_size)
