"""
Settings resolution for stackview plots.

Every persisted option is read through ``get_value`` and resolved from three layers,
highest priority first:

1) per-column override (``RawColumn.objects``)
2) visual-level override (``RawDataset.objects``)
3) ViewDefaults (immutable, passed in explicitly)

Notes
- Axis display modes go through AXIS_DISPLAY_TABLE; an unknown mode is fatal
  (InvalidAxisDisplayError).
- Auto Y bounds are substituted afterwards from the plot's own values only.
- Values of the wrong type are ignored (the next layer wins) and logged at DEBUG.
"""

from __future__ import annotations

import logging
import math
from typing import Any

import polars as pl

from stackview.core.constants import (
    AXIS_LABEL_SETTINGS,
    AXIS_SETTINGS,
    COLOR_SETTINGS,
    GENERAL_SETTINGS,
    HEATMAP_SETTINGS,
    OVERLAY_PLOT_SETTINGS,
    PLOT_SETTINGS,
    X_AXIS_BREAK_SETTINGS,
    Y_RANGE_SETTINGS,
    ZOOMING_SETTINGS,
)
from stackview.core.errors import ExtractionError, GrammarError, InvalidAxisDisplayError
from stackview.core.grammar import (
    AxisDisplay,
    axis_display_from_value,
    overlay_style_from_value,
    plot_style_from_value,
)
from stackview.core.schema import ConfigObjects
from stackview.io.config import ViewDefaults

from .model import ColorSettings, PlotSettings, SeriesData, YRange, ZoomSettings
from .palette import PaletteService, resolve_color

logger = logging.getLogger(__name__)

__all__ = [
    "get_value",
    "layered_value",
    "resolve_plot_settings",
    "auto_y_range",
    "resolve_break_options",
    "resolve_color_settings",
    "resolve_zoom_settings",
    "resolve_heatmap_bins",
    "resolve_tooltip_precision",
]

_MISSING = object()


def get_value(objects: ConfigObjects | None, group: str, prop: str, default: Any) -> Any:
    """
    Return ``objects[group][prop]``, or ``default`` when any level is missing or None.

    Examples:
        >>> get_value({"plotSettings": {"plotTitle": "T"}}, "plotSettings", "plotTitle", "")
        'T'
        >>> get_value({"plotSettings": {"plotTitle": None}}, "plotSettings", "plotTitle", "")
        ''
    """
    if not objects:
        return default
    group_obj = objects.get(group)
    if not isinstance(group_obj, dict):
        return default
    value = group_obj.get(prop)
    return default if value is None else value


def layered_value(
    column_objects: ConfigObjects | None,
    visual_objects: ConfigObjects | None,
    group: str,
    prop: str,
    default: Any,
) -> Any:
    """Per-column override > visual-level override > default, type-checked against default."""
    for layer in (column_objects, visual_objects):
        raw = get_value(layer, group, prop, _MISSING)
        if raw is _MISSING:
            continue
        value = _typed(raw, default)
        if value is not _MISSING:
            return value
        logger.debug("Ignoring %s.%s=%r (expected %s)", group, prop, raw, type(default).__name__)
    return default


def _typed(raw: Any, default: Any) -> Any:
    if isinstance(default, bool):
        return raw if isinstance(raw, bool) else _MISSING
    if default is None or isinstance(default, (int, float)):
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            return _MISSING
        return raw
    if isinstance(default, str):
        return raw if isinstance(raw, str) else _MISSING
    return raw


def _display(value: Any, column_name: str) -> AxisDisplay:
    try:
        return axis_display_from_value(value)
    except GrammarError as exc:
        raise InvalidAxisDisplayError(value, column_name) from exc


def resolve_plot_settings(
    series: SeriesData,
    visual_objects: ConfigObjects,
    defaults: ViewDefaults,
    palette: PaletteService,
    *,
    x_name: str,
) -> PlotSettings:
    """
    Resolve the full PlotSettings of one series column.

    Args:
        series: The series column (its ``objects`` are the per-column layer).
        visual_objects: Visual-level overrides.
        defaults: Hard-coded layer.
        palette: Seeds the default fill; high contrast forces the foreground color.
        x_name: Axis display name, the default x label.

    Returns:
        PlotSettings: Settings with auto Y bounds already substituted.

    Raises:
        InvalidAxisDisplayError: If an axis display mode is not recognized.
        ExtractionError: If a plot or overlay style is not recognized.
    """
    col = series.objects
    pd = defaults.plot

    def pick(group: str, prop: str, default: Any) -> Any:
        return layered_value(col, visual_objects, group, prop, default)

    def pick_display(prop: str, default: str) -> AxisDisplay:
        # Any set value is validated, so a wrong-typed mode is rejected rather than skipped.
        raw = get_value(col, AXIS_SETTINGS, prop, None)
        if raw is None:
            raw = get_value(visual_objects, AXIS_SETTINGS, prop, default)
        return _display(raw, series.name)

    if palette.is_high_contrast:
        fill = palette.foreground
    else:
        fallback = palette.get_color(str(series.column_id))
        fill = resolve_color(
            get_value(col, PLOT_SETTINGS, "fill", None)
            or get_value(visual_objects, PLOT_SETTINGS, "fill", None),
            fallback,
        )

    try:
        style = plot_style_from_value(pick(PLOT_SETTINGS, "plotStyle", pd.plot_style.value))
        overlay_style = overlay_style_from_value(
            pick(OVERLAY_PLOT_SETTINGS, "overlayType", pd.overlay_style.value)
        )
    except GrammarError as exc:
        raise ExtractionError(f"{series.name}: {exc}") from exc

    height_factor = float(pick(PLOT_SETTINGS, "heightFactor", pd.height_factor))
    if not math.isfinite(height_factor) or height_factor <= 0:
        logger.warning("Non-positive height factor for %s; using %s", series.name, pd.height_factor)
        height_factor = pd.height_factor

    y_range = YRange(
        min=float(pick(Y_RANGE_SETTINGS, "min", pd.y_min)),
        max=_optional_float(pick(Y_RANGE_SETTINGS, "max", None)),
        min_fixed=pick(Y_RANGE_SETTINGS, "minFixed", pd.y_min_fixed),
        max_fixed=pick(Y_RANGE_SETTINGS, "maxFixed", pd.y_max_fixed),
    )

    return PlotSettings(
        style=style,
        fill=fill,
        use_legend_color=pick(PLOT_SETTINGS, "useLegendColor", pd.use_legend_color),
        show_heatmap=pick(PLOT_SETTINGS, "showHeatmap", pd.show_heatmap),
        title=str(pick(PLOT_SETTINGS, "plotTitle", pd.title)),
        overlay_style=overlay_style,
        overlay_centered=pick(OVERLAY_PLOT_SETTINGS, "overlayCentered", pd.overlay_centered),
        height_factor=height_factor,
        x_axis=pick_display("xAxis", pd.x_axis_display.value),
        y_axis=pick_display("yAxis", pd.y_axis_display.value),
        x_label=str(pick(AXIS_LABEL_SETTINGS, "xLabel", x_name)),
        y_label=str(pick(AXIS_LABEL_SETTINGS, "yLabel", series.name)),
        y_range=auto_y_range(y_range, series.values),
    )


def _optional_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    return float(value)


def auto_y_range(y_range: YRange, values: tuple[Any, ...] | list[Any]) -> YRange:
    """
    Substitute unfixed bounds with the min/max of ``values`` (nulls and NaN ignored).

    A fixed max without an explicit value also falls back to the data max. With no
    numeric values at all, missing bounds collapse onto the known one (or 0).
    """
    s = pl.Series("y", list(values), dtype=pl.Float64, strict=False).drop_nulls().drop_nans()
    lo = s.min() if len(s) else None
    hi = s.max() if len(s) else None

    y_min = y_range.min if y_range.min_fixed else lo
    y_max = y_range.max if y_range.max_fixed and y_range.max is not None else hi
    if y_min is None:
        y_min = y_max if y_max is not None else 0.0
    if y_max is None:
        y_max = y_min
    return YRange(
        min=float(y_min),
        max=float(y_max),
        min_fixed=y_range.min_fixed,
        max_fixed=y_range.max_fixed,
    )


def resolve_break_options(objects: ConfigObjects, defaults: ViewDefaults) -> tuple[bool, float, bool]:
    """Return (axis_break, break_gap_size, show_break_lines) from the visual layer."""
    return (
        layered_value(None, objects, X_AXIS_BREAK_SETTINGS, "enable", defaults.axis_break),
        float(layered_value(None, objects, X_AXIS_BREAK_SETTINGS, "breakGapSize", defaults.break_gap_size)),
        layered_value(None, objects, X_AXIS_BREAK_SETTINGS, "showLines", defaults.show_break_lines),
    )


def resolve_color_settings(
    objects: ConfigObjects, defaults: ViewDefaults, palette: PaletteService
) -> ColorSettings:
    def color(prop: str, default: str) -> str:
        if palette.is_high_contrast:
            return palette.foreground
        return resolve_color(get_value(objects, COLOR_SETTINGS, prop, None), default)

    return ColorSettings(
        vertical_ruler_color=color("verticalRulerColor", defaults.vertical_ruler_color),
        overlay_color=color("overlayColor", defaults.overlay_color),
        y_zero_line_color=color("yZeroLineColor", defaults.y_zero_line_color),
        break_line_color=color("breakLineColor", defaults.break_line_color),
        heatmap_color_scheme=str(
            layered_value(None, objects, COLOR_SETTINGS, "heatmapColorScheme", defaults.heatmap_color_scheme)
        ),
    )


def resolve_zoom_settings(objects: ConfigObjects, defaults: ViewDefaults) -> ZoomSettings:
    return ZoomSettings(
        enable_zoom=layered_value(None, objects, ZOOMING_SETTINGS, "show", defaults.enable_zoom),
        maximum_zoom=int(layered_value(None, objects, ZOOMING_SETTINGS, "maximum", defaults.maximum_zoom)),
    )


def resolve_heatmap_bins(objects: ConfigObjects, defaults: ViewDefaults) -> int:
    bins = int(layered_value(None, objects, HEATMAP_SETTINGS, "heatmapBins", defaults.heatmap_bins))
    return bins if bins > 0 else defaults.heatmap_bins


def resolve_tooltip_precision(objects: ConfigObjects, defaults: ViewDefaults) -> int:
    precision = int(
        layered_value(None, objects, GENERAL_SETTINGS, "tooltipPrecision", defaults.tooltip_precision)
    )
    return max(precision, 0)
