"""
Axis-break mapping.

Distinct axis values are sorted ascending and given dense ranks ``0..U-1``. Consecutive
values further apart than the gap threshold (seconds for date axes) produce a break
point. With compression enabled every x coordinate downstream is the rank instead of
the raw value, so unused stretches of the axis collapse.

Notes
- Sorting happens here, so unsorted or descending raw input gives the same ranks.
- Compression is numeric-only; date axes keep calendar spacing and report break
  points at raw midpoints for decoration.
"""

from __future__ import annotations

import logging

import polars as pl

from .model import AxisData, AxisValue, XAxisSettings

logger = logging.getLogger(__name__)

__all__ = ["build_x_axis", "gap_positions"]


def gap_positions(unique: pl.Series, threshold: float, *, is_date: bool) -> list[int]:
    """Indices ``j`` of sorted unique values where ``unique[j] - unique[j-1] > threshold``."""
    gaps = unique.diff()
    if is_date:
        gaps = gaps.dt.total_microseconds() / 1_000_000
    return (
        pl.DataFrame({"gap": gaps})
        .with_row_index("j")
        .filter(pl.col("gap") > threshold)
        .get_column("j")
        .to_list()
    )


def build_x_axis(
    axis: AxisData,
    *,
    axis_break: bool,
    break_gap_size: float,
    show_break_lines: bool,
) -> XAxisSettings:
    """
    Build the shared x axis state (without a scale; layout attaches it).

    Args:
        axis: Extracted axis column.
        axis_break: Requested compression; ignored for date axes.
        break_gap_size: Gap threshold.
        show_break_lines: Renderer decoration flag, passed through.

    Returns:
        XAxisSettings: Sorted unique values, rank map, break points and domain.

    Examples:
        >>> from stackview.core.grammar import ColumnType
        >>> ax = AxisData(values=(1, 2, 3, 10, 11), name="x", column_id=0, column_type=ColumnType.NUMERIC)
        >>> xs = build_x_axis(ax, axis_break=True, break_gap_size=1, show_break_lines=True)
        >>> xs.index_map, xs.break_points
        ({1: 0, 2: 1, 3: 2, 10: 3, 11: 4}, (2.5,))
    """
    compress = axis_break and not axis.is_date
    if axis_break and axis.is_date:
        logger.debug("Axis break compression is numeric-only; keeping calendar spacing")

    unique = pl.Series("x", list(axis.values)).unique().sort()
    values: list[AxisValue] = unique.to_list()
    index_map = {v: i for i, v in enumerate(values)}

    breaks: list[AxisValue] = []
    for j in gap_positions(unique, break_gap_size, is_date=axis.is_date):
        lo, hi = values[j - 1], values[j]
        breaks.append(j - 0.5 if compress else lo + (hi - lo) / 2)

    if compress:
        x_range: tuple[AxisValue, AxisValue] = (0, len(values) - 1)
    else:
        x_range = (values[0], values[-1])

    logger.debug(
        "Axis %s: %d distinct values, %d break points, compressed=%s",
        axis.name,
        len(values),
        len(breaks),
        compress,
    )
    return XAxisSettings(
        axis_break=compress,
        break_gap_size=break_gap_size,
        show_break_lines=show_break_lines,
        is_date=axis.is_date,
        unique_values=tuple(values),
        index_map=index_map,
        break_points=tuple(breaks),
        x_range=x_range,
        name=axis.name,
    )
