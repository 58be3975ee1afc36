"""
Plot layout engine.

Stacks the plots vertically in discovery order and builds the single horizontal scale
shared by all of them.

Algorithm
---------
1) reserved = top/bottom padding + legend block + title strips + x-label strips
   + heatmap strips + per-plot top/bottom margins
2) unit = (available height - reserved) / sum(height factors); plot height = factor * unit
3) unit below the minimum: clamp it and grow the canvas by sum(factors) * (minimum - unit)
4) plot width below the minimum: clamp it and grow the canvas width by the difference
5) each plot's top = previous bottom edge + its own decorations

Available height and width are the viewport minus the scrollbar space.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from stackview.core.errors import ViewportSizeError
from stackview.core.schema import Viewport
from stackview.io.config import Margins, ViewDefaults

from .model import PlotSettings, XAxisSettings

logger = logging.getLogger(__name__)

__all__ = ["LinearScale", "TimeScale", "Layout", "compute_layout", "build_scale"]


@dataclass(frozen=True)
class LinearScale:
    """Maps a numeric domain onto a pixel range; a zero-width domain maps to the midpoint."""

    domain: tuple[float, float]
    range: tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return (r0 + r1) / 2
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, pixel: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r1 == r0:
            return d0
        return d0 + (pixel - r0) / (r1 - r0) * (d1 - d0)


@dataclass(frozen=True)
class TimeScale:
    """LinearScale over POSIX timestamps of a datetime domain."""

    domain: tuple[datetime, datetime]
    range: tuple[float, float]

    def _linear(self) -> LinearScale:
        return LinearScale((self.domain[0].timestamp(), self.domain[1].timestamp()), self.range)

    def __call__(self, value: datetime) -> float:
        return self._linear()(value.timestamp())

    def invert(self, pixel: float) -> datetime:
        return datetime.fromtimestamp(self._linear().invert(pixel), tz=self.domain[0].tzinfo)


@dataclass(frozen=True)
class Layout:
    """
    Vertical geometry of the stacked plots.

    Attributes:
        svg_width (float): Canvas width (grown when the plot width is clamped).
        svg_height (float): Canvas height (grown when the height unit is clamped).
        plot_width (float): Drawing width shared by all plots.
        height_unit (float): Height of a plot with factor 1.
        plot_tops (tuple[float, ...]): Top offset of each plot's drawing area.
        plot_heights (tuple[float, ...]): Height of each plot's drawing area.
        legend_height (float): Reserved legend block (0 without legends).
        legend_y (float): Top of the legend block.
        margins (Margins): Per-plot margins used.
    """

    svg_width: float
    svg_height: float
    plot_width: float
    height_unit: float
    plot_tops: tuple[float, ...]
    plot_heights: tuple[float, ...]
    legend_height: float
    legend_y: float
    margins: Margins

    def to_dict(self) -> dict[str, Any]:
        return {
            "svg_width": self.svg_width,
            "svg_height": self.svg_height,
            "plot_width": self.plot_width,
            "height_unit": self.height_unit,
            "plot_tops": list(self.plot_tops),
            "plot_heights": list(self.plot_heights),
            "legend_height": self.legend_height,
            "legend_y": self.legend_y,
            "margins": vars(self.margins),
        }


def _usable(value: float | None, scrollbar: float) -> float:
    if value is None or not math.isfinite(value):
        raise ViewportSizeError()
    usable = value - scrollbar
    if usable <= 0:
        raise ViewportSizeError(f"Viewport dimension {value} leaves no drawable space.")
    return usable


def compute_layout(
    viewport: Viewport | None,
    settings: Sequence[PlotSettings],
    *,
    has_legend: bool,
    defaults: ViewDefaults,
) -> Layout:
    """
    Compute canvas size, plot heights and top offsets.

    Args:
        viewport: Render surface; None or non-positive dimensions are fatal.
        settings: Resolved settings per plot, in plot order.
        has_legend: Whether a legend block is reserved.
        defaults: Strip sizes, margins and minimums.

    Returns:
        Layout

    Raises:
        ViewportSizeError: If the viewport is missing or unusable.
    """
    if viewport is None:
        raise ViewportSizeError()
    svg_height = _usable(viewport.height, defaults.scrollbar_space)
    svg_width = _usable(viewport.width, defaults.scrollbar_space)
    m = defaults.margins

    legend_height = defaults.legend_height if has_legend else 0
    titles = sum(1 for s in settings if s.title)
    x_strips = sum(1 for s in settings if s.x_axis.shows_label_strip)
    heatmaps = sum(1 for s in settings if s.show_heatmap)
    reserved = (
        defaults.svg_top_padding
        + defaults.svg_bottom_padding
        + legend_height
        + defaults.plot_title_height * titles
        + defaults.x_label_space * x_strips
        + defaults.heatmap_space * heatmaps
        + (m.top + m.bottom) * len(settings)
    )
    factor_sum = sum(s.height_factor for s in settings)

    unit = (svg_height - reserved) / factor_sum
    if unit < defaults.min_plot_height:
        svg_height += factor_sum * (defaults.min_plot_height - unit)
        logger.debug("Height unit %.1f below minimum; canvas grows to %.1f", unit, svg_height)
        unit = defaults.min_plot_height

    plot_width = svg_width - m.left - m.right
    if plot_width < defaults.min_plot_width:
        svg_width += defaults.min_plot_width - plot_width
        plot_width = defaults.min_plot_width

    tops: list[float] = []
    heights: list[float] = []
    y = float(defaults.svg_top_padding)
    for s in settings:
        y += m.top
        if s.title:
            y += defaults.plot_title_height
        tops.append(y)
        height = s.height_factor * unit
        heights.append(height)
        y += height
        if s.x_axis.shows_label_strip:
            y += defaults.x_label_space
        y += m.bottom
        if s.show_heatmap:
            y += defaults.heatmap_space

    return Layout(
        svg_width=svg_width,
        svg_height=svg_height,
        plot_width=plot_width,
        height_unit=unit,
        plot_tops=tuple(tops),
        plot_heights=tuple(heights),
        legend_height=legend_height,
        legend_y=y + defaults.legend_top_margin,
        margins=m,
    )


def build_scale(x_axis: XAxisSettings, plot_width: float) -> LinearScale | TimeScale:
    """The shared horizontal scale over the active x domain (ranks when compressed)."""
    lo, hi = x_axis.x_range
    if x_axis.is_date and not x_axis.axis_break:
        return TimeScale(domain=(lo, hi), range=(0.0, plot_width))
    return LinearScale(domain=(float(lo), float(hi)), range=(0.0, plot_width))
