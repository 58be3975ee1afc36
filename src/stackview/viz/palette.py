"""
Color palette service.

The host supplies default colors through a palette: a seeded color per key (stable for
the lifetime of the palette), a high-contrast flag, and the foreground color used in
high-contrast mode. ColorPalette is the in-process implementation used by the CLI and
tests; any object with the same attributes can be passed to the pipeline instead.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

from stackview.core.constants import LEGEND_PALETTE

__all__ = ["PaletteService", "ColorPalette", "resolve_color"]


class PaletteService(Protocol):
    is_high_contrast: bool
    foreground: str

    def get_color(self, key: str) -> str: ...


class ColorPalette:
    """
    Seeded default-color-per-key palette.

    Keys receive colors in first-request order starting at ``seed``; asking for the same
    key again returns the same color.

    Examples:
        >>> p = ColorPalette(colors=("#111111", "#222222"))
        >>> p.get_color("a"), p.get_color("b"), p.get_color("a")
        ('#111111', '#222222', '#111111')
    """

    def __init__(
        self,
        colors: Sequence[str] = LEGEND_PALETTE,
        *,
        seed: int = 0,
        is_high_contrast: bool = False,
        foreground: str = "#000000",
    ) -> None:
        if not colors:
            raise ValueError("palette needs at least one color")
        self.colors = tuple(colors)
        self.seed = seed
        self.is_high_contrast = is_high_contrast
        self.foreground = foreground
        self._assigned: dict[str, str] = {}

    def get_color(self, key: str) -> str:
        color = self._assigned.get(key)
        if color is None:
            color = self.colors[(self.seed + len(self._assigned)) % len(self.colors)]
            self._assigned[key] = color
        return color


def resolve_color(value: Any, default: str) -> str:
    """Accept a plain color string or a ``{"solid": {"color": ...}}`` fill mapping."""
    if isinstance(value, str) and value:
        return value
    if isinstance(value, dict):
        solid = value.get("solid")
        if isinstance(solid, dict) and isinstance(solid.get("color"), str):
            return solid["color"]
    return default
