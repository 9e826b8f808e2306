"""Material palette for the bus-stop scene."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Tuple

Color = Tuple[float, float, float, float]


def hex_color(value: str, alpha: float = 1.0) -> Color:
    """Parse ``#RRGGBB`` into an RGBA float tuple."""

    digits = value.lstrip("#")
    if len(digits) != 6:
        raise ValueError(f"Expected #RRGGBB colour, got {value!r}")
    red, green, blue = (int(digits[i:i + 2], 16) / 255.0 for i in (0, 2, 4))
    return (red, green, blue, alpha)


@dataclass(frozen=True)
class Material:
    """Surface parameters; only colour and ambient reach the wireframe renderer."""

    color: Color
    ambient: float = 0.05
    specularity: float = 0.3
    diffusivity: float = 0.7
    smoothness: float = 0.6

    def override(self, color: Color | None = None, **changes: float) -> "Material":
        if color is not None:
            changes["color"] = color
        return replace(self, **changes)


def scene_materials() -> Dict[str, Material]:
    return {
        "ground": Material((0.1, 0.8, 0.6, 1.0), ambient=0.08, specularity=0.5, diffusivity=1.0, smoothness=0.5),
        "pink_umbrella": Material(hex_color("#ff3080"), smoothness=0.8),
        "purple_umbrella": Material(hex_color("#8020f0"), smoothness=0.8),
        "totoro": Material(hex_color("#363636")),
        "girl": Material(hex_color("#363636")),
        "streetlamp": Material(hex_color("#404040"), ambient=0.08, specularity=0.7, diffusivity=1.0, smoothness=0.4),
        "lightbulb": Material((1.0, 0.0, 0.0, 0.7), ambient=0.08, specularity=1.0, diffusivity=1.0, smoothness=1.0),
        "tree": Material(hex_color("#964b00"), ambient=0.08, specularity=0.5, diffusivity=0.8, smoothness=0.4),
        "rain": Material((0.0, 0.0, 1.0, 0.2), ambient=0.08, diffusivity=0.8, smoothness=0.4),
        "rain_bright": Material((1.0, 1.0, 1.0, 0.8), ambient=0.08, diffusivity=0.8, smoothness=0.4),
        "shadow": Material(hex_color("#808080"), ambient=0.01, specularity=0.1, diffusivity=0.0),
        "cylinder": Material((0.1, 0.9, 0.9, 1.0), ambient=0.4),
    }
