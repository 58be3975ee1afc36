"""
Overlay geometry: interval rectangles and region (run-length encoded) stripes.

Interval overlay
- One rectangle per axis position with a non-null, non-zero length: ``[x, x + length]``
  for numeric axes, ``[x, x at position i + length]`` for date axes.
- ``width`` is the paired overlay width, ``y`` the paired overlay y (default 0).
- Rectangles with a null/negative x or a non-positive width are dropped, then
  duplicates sharing ``(x, end_x)`` collapse to the first one.

Region overlay
- Consecutive equal category samples become one rectangle; each run ends where the next
  begins, the last run at the last axis position. Null runs draw nothing.
- Colors come from the persisted map or the palette; the legend lists values in
  descending order.

All x coordinates are in the active space (ranks when the axis is compressed).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Any

import polars as pl

from stackview.core.errors import PipelineWarning, WarningKind

from .extract import is_null
from .legends import assign_colors, legend_key, load_color_map
from .model import (
    AxisData,
    AxisValue,
    LegendValue,
    OverlayInputs,
    OverlayRectangle,
    RegionInput,
    RegionOverlay,
    XAxisSettings,
)

logger = logging.getLogger(__name__)

__all__ = ["build_interval_overlay", "run_length_encode", "build_region_overlay"]


def _number(value: Any) -> float | None:
    if is_null(value) or isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def build_interval_overlay(
    axis: AxisData, x_axis: XAxisSettings, overlay: OverlayInputs
) -> tuple[list[OverlayRectangle] | None, PipelineWarning | None]:
    """
    Build interval overlay rectangles.

    Returns:
        tuple: ``(None, None)`` when no overlay columns were supplied, ``(None, warning)``
        when columns were supplied but no rectangle survives, else ``(rectangles, None)``.

    Examples:
        >>> from stackview.core.grammar import ColumnType
        >>> ax = AxisData(values=(0, 1, 2), name="x", column_id=0, column_type=ColumnType.NUMERIC)
        >>> xs = XAxisSettings(False, 1.0, True, False, (0, 1, 2), {0: 0, 1: 1, 2: 2}, (), (0, 2), "x")
        >>> rects, _ = build_interval_overlay(ax, xs, OverlayInputs(length=(2, 0, None), width=(5, 5, 5)))
        >>> [(r.x, r.end_x, r.width) for r in rects]
        [(0, 2, 5)]
    """
    if not overlay.present:
        return None, None

    xs = axis.values
    n = min(len(xs), len(overlay.length), len(overlay.width))
    rects: list[OverlayRectangle] = []
    seen: set[tuple[AxisValue, AxisValue]] = set()
    for i in range(n):
        length = _number(overlay.length[i])
        if not length:
            continue
        x = x_axis.map_x(xs[i])
        if x_axis.is_date:
            end = x_axis.map_x(xs[max(0, min(i + int(length), len(xs) - 1))])
        else:
            end = x + length if x is not None else None
        width = _number(overlay.width[i])
        y = _number(overlay.y[i]) if i < len(overlay.y) else None

        if x is None or end is None or width is None or width <= 0:
            continue
        if not isinstance(x, datetime) and x < 0:
            continue
        if (x, end) in seen:
            continue
        seen.add((x, end))
        rects.append(OverlayRectangle(x=x, end_x=end, width=width, y=y or 0))

    if not rects:
        msg = "Overlay columns were supplied but no valid overlay rectangle remains."
        logger.warning(msg)
        return None, PipelineWarning(WarningKind.OVERLAY_DATA, msg)
    logger.debug("Built %d interval overlay rectangles", len(rects))
    return rects, None


def run_length_encode(
    x_values: Sequence[AxisValue], categories: Sequence[Any]
) -> list[tuple[AxisValue, AxisValue, str | None]]:
    """
    Collapse consecutive equal categories into ``(start_x, end_x, value)`` runs.

    Examples:
        >>> run_length_encode([0, 1, 2, 3], ["a", "a", "b", "b"])
        [(0, 2, 'a'), (2, 3, 'b')]
    """
    n = min(len(x_values), len(categories))
    if n == 0:
        return []
    df = pl.DataFrame(
        {
            "x": list(x_values[:n]),
            "v": [legend_key(v) for v in categories[:n]],
        },
        schema_overrides={"v": pl.String},
    )
    runs = (
        df.with_columns(pl.col("v").rle_id().alias("run"))
        .group_by("run", maintain_order=True)
        .agg(pl.col("x").first().alias("start"), pl.col("v").first().alias("v"))
    )
    starts = runs.get_column("start").to_list()
    ends = starts[1:] + [x_values[n - 1]]
    return list(zip(starts, ends, runs.get_column("v").to_list(), strict=True))


def build_region_overlay(
    x_values: Sequence[AxisValue],
    region: RegionInput,
    *,
    y: float,
    height: float,
    opacity: float,
    palette: Sequence[str],
) -> tuple[RegionOverlay, list[PipelineWarning]]:
    """
    Build region stripes spanning from ``y`` over ``height`` pixels.

    Args:
        x_values: Axis values in the active coordinate space, in row order.
        region: The categorical stripe column.
        y: Top of the first plot.
        height: Distance from the first plot's top to the last plot's bottom.
        opacity: Stripe opacity.
        palette: Fallback colors.

    Returns:
        tuple: The overlay and any color-mapping warning.
    """
    warnings: list[PipelineWarning] = []
    runs = run_length_encode(x_values, region.values)
    color_map, warning = load_color_map(region.objects, region.name)
    if warning is not None:
        logger.warning(warning.message)
        warnings.append(warning)

    distinct = {v for _, _, v in runs if v is not None}
    colors = assign_colors(distinct, color_map, palette)
    rects = tuple(
        OverlayRectangle(x=start, end_x=end, width=height, y=y, color=colors[v])
        for start, end, v in runs
        if v is not None
    )
    legend = tuple(LegendValue(v, colors[v]) for v in sorted(distinct, reverse=True))
    logger.debug("Region overlay %s: %d runs, %d values", region.name, len(rects), len(legend))
    return RegionOverlay(name=region.name, rectangles=rects, legend=legend, opacity=opacity), warnings
