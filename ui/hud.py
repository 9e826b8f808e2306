"""Text overlay for the control panel readouts."""
from __future__ import annotations

from typing import Sequence, Tuple

import pygame
from OpenGL import GL as gl

Size = Tuple[int, int]


class HudRenderer:
    """Blits pygame-rendered text lines over the 3-D view."""

    def __init__(self, font_size: int = 16) -> None:
        pygame.font.init()
        self._font = pygame.font.SysFont("Consolas", font_size)
        self._line_height = self._font.get_linesize()
        self._text_color = (230, 235, 255)
        self._muted_text = (160, 170, 190)
        self._panel_color = (0.04, 0.05, 0.08, 0.75)

    def draw(self, viewport_size: Size, readouts: Sequence[str], help_lines: Sequence[str] = ()) -> None:
        width, height = viewport_size
        if width <= 0 or height <= 0:
            return
        self._begin_overlay(width, height)
        try:
            lines = list(readouts)
            panel_height = (len(lines) + len(help_lines)) * self._line_height + 16
            panel_width = 20 + max(
                (self._font.size(line)[0] for line in (*lines, *help_lines)),
                default=0,
            )
            self._draw_panel(8, 8, panel_width, panel_height)
            y = 16.0
            for line in lines:
                self._draw_text(16, y, line, self._text_color)
                y += self._line_height
            for line in help_lines:
                self._draw_text(16, y, line, self._muted_text)
                y += self._line_height
        finally:
            self._end_overlay()

    def _begin_overlay(self, width: int, height: int) -> None:
        gl.glMatrixMode(gl.GL_PROJECTION)
        gl.glPushMatrix()
        gl.glLoadIdentity()
        gl.glOrtho(0, width, height, 0, -1, 1)
        gl.glMatrixMode(gl.GL_MODELVIEW)
        gl.glPushMatrix()
        gl.glLoadIdentity()
        gl.glDisable(gl.GL_DEPTH_TEST)

    def _end_overlay(self) -> None:
        gl.glEnable(gl.GL_DEPTH_TEST)
        gl.glPopMatrix()
        gl.glMatrixMode(gl.GL_PROJECTION)
        gl.glPopMatrix()
        gl.glMatrixMode(gl.GL_MODELVIEW)

    def _draw_panel(self, x: float, y: float, width: float, height: float) -> None:
        gl.glColor4f(*self._panel_color)
        gl.glBegin(gl.GL_QUADS)
        gl.glVertex2f(x, y)
        gl.glVertex2f(x + width, y)
        gl.glVertex2f(x + width, y + height)
        gl.glVertex2f(x, y + height)
        gl.glEnd()

    def _draw_text(self, x: float, y: float, text: str, color: Tuple[int, int, int]) -> None:
        surface = self._font.render(text, True, color)
        data = pygame.image.tostring(surface, "RGBA", True)
        # glDrawPixels grows upward from the raster position.
        gl.glRasterPos2f(x, y + surface.get_height())
        gl.glDrawPixels(
            surface.get_width(),
            surface.get_height(),
            gl.GL_RGBA,
            gl.GL_UNSIGNED_BYTE,
            data,
        )
