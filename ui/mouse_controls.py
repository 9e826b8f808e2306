"""Mouse tracking and umbrella picking."""
from __future__ import annotations

from typing import Tuple

from scene.state import SceneState

Vec2 = Tuple[float, float]
Size = Tuple[int, int]

PICK_ROW = (10.0, 130.0)
PURPLE_COLUMN = (-300.0, -280.0)
PINK_COLUMN = (-190.0, -170.0)

NO_SELECTION = "no umbrella selected"


def _inside(value: float, bounds: Tuple[float, float]) -> bool:
    return bounds[0] < value < bounds[1]


class MouseControls:
    """Keeps the pointer offset from the viewport centre and picks umbrellas."""

    def __init__(self, viewport_size: Size) -> None:
        self.viewport_size = viewport_size
        self.from_center: Vec2 = (0.0, 0.0)
        self.anchor: Vec2 | None = None

    def update_viewport(self, size: Size) -> None:
        self.viewport_size = size

    def offset_from_center(self, pos: Tuple[int, int]) -> Vec2:
        width, height = self.viewport_size
        return (pos[0] - width / 2, pos[1] - height / 2)

    def move(self, pos: Tuple[int, int]) -> None:
        self.from_center = self.offset_from_center(pos)

    def leave(self) -> None:
        if self.anchor is None:
            self.from_center = (0.0, 0.0)

    def release(self) -> None:
        self.anchor = None

    def press(self, pos: Tuple[int, int], state: SceneState) -> str:
        """Select the umbrella under the pointer; purple is the fallback target."""

        self.anchor = self.offset_from_center(pos)
        self.from_center = self.anchor
        x, y = self.from_center
        state.purple_selected = True
        state.selection_label = NO_SELECTION
        if _inside(y, PICK_ROW):
            if _inside(x, PURPLE_COLUMN):
                state.selection_label = "purple umbrella"
            elif _inside(x, PINK_COLUMN):
                state.selection_label = "pink umbrella"
                state.purple_selected = False
        return state.selection_label
