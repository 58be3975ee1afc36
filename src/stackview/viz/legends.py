"""
Legend and filter construction, plus the visibility rule.

- Categorical legend: distinct non-empty values of one column, colored from the persisted
  ``legendSettings.legendColors`` JSON map, falling back to the palette cycled by sorted
  value order.
- Filter legend: distinct values per column, classified as boolean when the set is a
  subset of {"0", "1"}, otherwise numeric or string by source type; uncolored.

Every selection starts as the full set of observed values and only shrinks afterwards.
A point is visible when every active legend admits it (logical AND).
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable, Sequence
from typing import Any

from stackview.core.constants import LEGEND_SETTINGS
from stackview.core.errors import PipelineWarning, WarningKind
from stackview.core.grammar import LegendKind
from stackview.core.schema import ConfigObjects

from .model import Legend, LegendData, LegendValue, PlotModel
from .palette import resolve_color
from .settings import get_value

logger = logging.getLogger(__name__)

__all__ = [
    "legend_key",
    "load_color_map",
    "assign_colors",
    "build_categorical_legend",
    "build_filter_legend",
    "apply_visibility",
]


def legend_key(value: Any) -> str | None:
    """String key of a legend value; None for nulls and empty strings."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float):
        if math.isnan(value):
            return None
        if value.is_integer():
            return str(int(value))
    key = str(value)
    return key if key else None


def load_color_map(
    objects: ConfigObjects, name: str
) -> tuple[dict[str, Any], PipelineWarning | None]:
    """
    Read the persisted value -> color map of a legend column.

    Returns:
        tuple: The map (empty when absent or malformed) and a warning when malformed.
    """
    raw = get_value(objects, LEGEND_SETTINGS, "legendColors", None)
    if raw is None or raw == "":
        return {}, None
    parsed = raw
    if isinstance(raw, str):
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            parsed = None
    if not isinstance(parsed, dict):
        msg = f"Color mapping of {name} is not a valid JSON object; using default colors."
        return {}, PipelineWarning(WarningKind.LEGEND_COLOR_MAPPING, msg)
    return parsed, None


def assign_colors(
    values: Iterable[str], color_map: dict[str, Any], palette: Sequence[str]
) -> dict[str, str]:
    """Persisted color per value, else ``palette[i % len]`` by sorted value index."""
    return {
        v: resolve_color(color_map.get(v), palette[i % len(palette)])
        for i, v in enumerate(sorted(values))
    }


def _points(values: Sequence[Any]) -> dict[int, str]:
    out: dict[int, str] = {}
    for i, v in enumerate(values):
        key = legend_key(v)
        if key is not None:
            out[i] = key
    return out


def _title(data: LegendData) -> str:
    return str(get_value(data.objects, LEGEND_SETTINGS, "legendTitle", data.name))


def build_categorical_legend(
    data: LegendData, palette: Sequence[str]
) -> tuple[Legend, list[PipelineWarning]]:
    warnings: list[PipelineWarning] = []
    points = _points(data.values)
    distinct = sorted(set(points.values()))
    color_map, warning = load_color_map(data.objects, data.name)
    if warning is not None:
        logger.warning(warning.message)
        warnings.append(warning)
    colors = assign_colors(distinct, color_map, palette)
    legend = Legend(
        title=_title(data),
        kind=LegendKind.CATEGORICAL,
        column_id=data.column_id,
        values=[LegendValue(v, colors[v]) for v in distinct],
        points=points,
        selected=set(distinct),
    )
    return legend, warnings


def build_filter_legend(data: LegendData) -> Legend:
    points = _points(data.values)
    distinct = set(points.values())
    if distinct and distinct <= {"0", "1"}:
        kind = LegendKind.BOOLEAN
    elif data.column_type.is_number:
        kind = LegendKind.NUMERIC
    else:
        kind = LegendKind.STRING

    if kind is LegendKind.NUMERIC:
        ordered = sorted(distinct, key=_numeric_sort_key)
    else:
        ordered = sorted(distinct)
    return Legend(
        title=_title(data),
        kind=kind,
        column_id=data.column_id,
        values=[LegendValue(v, None) for v in ordered],
        points=points,
        selected=set(distinct),
    )


def _numeric_sort_key(value: str) -> tuple[int, float, str]:
    try:
        return (0, float(value), value)
    except ValueError:
        return (1, 0.0, value)


def apply_visibility(plots: Iterable[PlotModel], legends: Sequence[Legend]) -> None:
    """Recompute every plot's visibility flags from the current selections."""
    for plot in plots:
        plot.visible = [
            all(lg.admits(p.point_index) for lg in legends) for p in plot.points
        ]
