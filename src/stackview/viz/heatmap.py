"""
Heatmap strip binning.

The x domain is split into equal-width bins; each bin's value is the spread
``max(y) - min(y)`` of the plot's points falling into it, or None when the bin is empty.
Date coordinates are binned on POSIX seconds.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Any

import polars as pl

from .model import AxisValue, HeatmapStrip

logger = logging.getLogger(__name__)

__all__ = ["compute_heatmap"]


def _seconds(value: AxisValue | None) -> float | None:
    if isinstance(value, datetime):
        return value.timestamp()
    return value


def compute_heatmap(
    x: Sequence[AxisValue | None],
    y: Sequence[Any],
    *,
    domain: tuple[AxisValue, AxisValue],
    bins: int,
    color_scheme: str,
) -> HeatmapStrip:
    """
    Bin points over ``domain`` into ``bins`` equal-width buckets.

    Examples:
        >>> strip = compute_heatmap([0, 1, 2, 3], [1, 4, 2, 2], domain=(0, 4), bins=2, color_scheme="s")
        >>> strip.values
        (3.0, 0.0)
    """
    lo, hi = (float(_seconds(d)) for d in domain)
    step = (hi - lo) / bins
    edges = tuple(lo + i * step for i in range(bins + 1))

    df = (
        pl.DataFrame(
            {"x": [_seconds(v) for v in x], "y": list(y)},
            schema={"x": pl.Float64, "y": pl.Float64},
            strict=False,
        )
        .drop_nulls()
        .filter(pl.col("x").is_not_nan() & pl.col("y").is_not_nan())
    )
    if step > 0:
        bin_expr = ((pl.col("x") - lo) / step).floor().cast(pl.Int64).clip(0, bins - 1)
    else:
        bin_expr = pl.lit(0, dtype=pl.Int64)
    spread = (
        df.with_columns(bin_expr.alias("bin"))
        .group_by("bin")
        .agg((pl.col("y").max() - pl.col("y").min()).alias("spread"))
    )
    by_bin = dict(zip(spread.get_column("bin").to_list(), spread.get_column("spread").to_list(), strict=True))
    values = tuple(by_bin.get(i) for i in range(bins))
    logger.debug("Heatmap: %d of %d bins populated", len(by_bin), bins)
    return HeatmapStrip(edges=edges, values=values, color_scheme=color_scheme)
