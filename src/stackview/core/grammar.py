"""
Closed variants and normalization helpers for stackview.

Defines the column types, column roles, plot and overlay styles, axis display modes,
and legend kinds used across the pipeline, together with zero-IO helpers that turn
host-supplied strings into enum members.

Design principles
-----------------
1) One naming standard:
   - Enum classes: PascalCase
   - Enum member names: UPPER_SNAKE (Python constants)
   - Enum serialized values (wire/JSON/config): lower_snake

2) Closed sets:
   - Every enum-like string coming from the host goes through a ``*_from_value``
     helper exactly once. Unknown values raise GrammarError instead of silently
     falling back.
   - Camel/Pascal case and a few punctuation variants are accepted on input
     (``dateTime``, ``TicksLabels``, ``ticks+labels``, ``ScatterPlot``).

3) Exhaustive tables:
   - AXIS_DISPLAY_TABLE maps every AxisDisplayMode to its (ticks, labels) pair and
     is checked for completeness at import time.

Examples
--------
>>> from stackview.core.grammar import axis_display_from_value, column_type_from_value
>>> axis_display_from_value("ticks+labels")
AxisDisplay(ticks=True, labels=True)
>>> column_type_from_value("dateTime").value
'date_time'
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Final, TypeVar

from .errors import GrammarError

__all__ = [
    "ColumnType",
    "ColumnRole",
    "PlotStyle",
    "OverlayStyle",
    "AxisDisplayMode",
    "AxisDisplay",
    "LegendKind",
    "AXIS_DISPLAY_TABLE",
    "normalize_token",
    "column_type_from_value",
    "column_role_from_value",
    "plot_style_from_value",
    "overlay_style_from_value",
    "axis_display_mode_from_value",
    "axis_display_from_value",
    "axis_display_mode_for",
]


class ColumnType(str, Enum):
    """Declared source type of a raw column."""

    NUMERIC = "numeric"
    DATE_TIME = "date_time"
    TEXT = "text"
    INTEGER = "integer"

    @property
    def is_number(self) -> bool:
        return self in (ColumnType.NUMERIC, ColumnType.INTEGER)


class ColumnRole(str, Enum):
    """Semantic role a raw column plays in the dataset."""

    AXIS = "axis"
    SERIES = "series"
    TOOLTIP = "tooltip"
    LEGEND = "legend"
    FILTER_LEGEND = "filter_legend"
    OVERLAY_LENGTH = "overlay_length"
    OVERLAY_WIDTH = "overlay_width"
    OVERLAY_Y = "overlay_y"
    VISUAL_OVERLAY = "visual_overlay"


class PlotStyle(str, Enum):
    SCATTER = "scatter"
    LINE = "line"


class OverlayStyle(str, Enum):
    NONE = "none"
    RECTANGLE = "rectangle"
    LINE = "line"


class AxisDisplayMode(str, Enum):
    """What an axis shows: nothing, ticks, labels, or both."""

    NONE = "none"
    TICKS = "ticks"
    LABELS = "labels"
    TICKS_LABELS = "ticks_labels"


class LegendKind(str, Enum):
    """Classification of a legend built from one column's distinct values."""

    CATEGORICAL = "categorical"
    BOOLEAN = "boolean"
    STRING = "string"
    NUMERIC = "numeric"


@dataclass(frozen=True)
class AxisDisplay:
    """Resolved axis decoration flags."""

    ticks: bool
    labels: bool

    @property
    def shows_label_strip(self) -> bool:
        # Only an axis with both ticks and labels reserves an extra label strip.
        return self.ticks and self.labels


AXIS_DISPLAY_TABLE: Final[dict[AxisDisplayMode, AxisDisplay]] = {
    AxisDisplayMode.NONE: AxisDisplay(ticks=False, labels=False),
    AxisDisplayMode.TICKS: AxisDisplay(ticks=True, labels=False),
    AxisDisplayMode.LABELS: AxisDisplay(ticks=False, labels=True),
    AxisDisplayMode.TICKS_LABELS: AxisDisplay(ticks=True, labels=True),
}

if set(AXIS_DISPLAY_TABLE) != set(AxisDisplayMode):  # pragma: no cover - import-time guard
    raise RuntimeError("AXIS_DISPLAY_TABLE must cover every AxisDisplayMode")


_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_SEPARATORS = re.compile(r"[\s\-+/&]+")

_ALIASES: Final[dict[str, str]] = {
    # Host-side names for the same variants.
    "datetime": "date_time",
    "date": "date_time",
    "scatter_plot": "scatter",
    "line_plot": "line",
    "labels_ticks": "ticks_labels",
    "values": "series",
    "legend_filter": "filter_legend",
}

E = TypeVar("E", bound=Enum)


def normalize_token(value: str) -> str:
    """
    Normalize an enum-like host string to lower_snake.

    Args:
        value (str): Raw token such as ``"TicksLabels"``, ``"ticks+labels"`` or ``"dateTime"``.

    Returns:
        str: lower_snake token with known aliases resolved.
    """
    s = _CAMEL_BOUNDARY.sub("_", value.strip())
    s = _SEPARATORS.sub("_", s).lower().strip("_")
    return _ALIASES.get(s, s)


def _enum_from_value(enum_cls: type[E], value: object, what: str) -> E:
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        raise GrammarError(f"{what} must be a string, got {value!r}")
    token = normalize_token(value)
    try:
        return enum_cls(token)
    except ValueError as exc:
        allowed = ", ".join(m.value for m in enum_cls)  # type: ignore[attr-defined]
        raise GrammarError(f"unknown {what} {value!r} (allowed: {allowed})") from exc


def column_type_from_value(value: object) -> ColumnType:
    return _enum_from_value(ColumnType, value, "column type")


def column_role_from_value(value: object) -> ColumnRole:
    return _enum_from_value(ColumnRole, value, "column role")


def plot_style_from_value(value: object) -> PlotStyle:
    return _enum_from_value(PlotStyle, value, "plot style")


def overlay_style_from_value(value: object) -> OverlayStyle:
    return _enum_from_value(OverlayStyle, value, "overlay style")


def axis_display_mode_from_value(value: object) -> AxisDisplayMode:
    return _enum_from_value(AxisDisplayMode, value, "axis display mode")


def axis_display_from_value(value: object) -> AxisDisplay:
    """Resolve an axis display mode string straight to its (ticks, labels) flags."""
    return AXIS_DISPLAY_TABLE[axis_display_mode_from_value(value)]


def axis_display_mode_for(display: AxisDisplay) -> AxisDisplayMode:
    """Inverse lookup of AXIS_DISPLAY_TABLE."""
    for mode, flags in AXIS_DISPLAY_TABLE.items():
        if flags == display:
            return mode
    raise GrammarError(f"no axis display mode for {display!r}")  # pragma: no cover
