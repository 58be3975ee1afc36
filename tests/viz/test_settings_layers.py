import pytest

from stackview.core.errors import ExtractionError, InvalidAxisDisplayError
from stackview.core.grammar import AxisDisplay, OverlayStyle, PlotStyle
from stackview.io.config import PlotDefaults, ViewDefaults
from stackview.viz.model import SeriesData, YRange
from stackview.viz.palette import ColorPalette
from stackview.viz.settings import (
    auto_y_range,
    get_value,
    layered_value,
    resolve_break_options,
    resolve_color_settings,
    resolve_plot_settings,
    resolve_zoom_settings,
)


def _series(values=(1.0, 5.0, 3.0), objects=None, column_id: int = 1) -> SeriesData:
    return SeriesData(values=tuple(values), name="y", column_id=column_id, slot=0, objects=objects or {})


def test_get_value_falls_back_on_missing_or_none() -> None:
    objects = {"g": {"p": 1, "n": None}}
    assert get_value(objects, "g", "p", 0) == 1
    assert get_value(objects, "g", "n", 0) == 0
    assert get_value(objects, "other", "p", 0) == 0
    assert get_value(None, "g", "p", 0) == 0


def test_layered_value_priority() -> None:
    column = {"plotSettings": {"plotTitle": "column"}}
    visual = {"plotSettings": {"plotTitle": "visual", "showHeatmap": True}}
    assert layered_value(column, visual, "plotSettings", "plotTitle", "") == "column"
    assert layered_value({}, visual, "plotSettings", "plotTitle", "") == "visual"
    assert layered_value({}, {}, "plotSettings", "plotTitle", "default") == "default"
    # Wrong type in the column layer: the visual layer wins
    assert layered_value({"plotSettings": {"showHeatmap": "yes"}}, visual, "plotSettings", "showHeatmap", False) is True


def test_resolve_plot_settings_defaults() -> None:
    palette = ColorPalette(("#aaaaaa", "#bbbbbb"))
    s = resolve_plot_settings(_series(), {}, ViewDefaults(), palette, x_name="time")

    assert s.style is PlotStyle.SCATTER
    assert s.overlay_style is OverlayStyle.NONE
    assert s.fill == "#aaaaaa"
    assert s.x_axis == AxisDisplay(ticks=True, labels=True)
    assert s.x_label == "time" and s.y_label == "y"
    assert s.height_factor == 1.0
    # min fixed at 0, max from the data
    assert (s.y_range.min, s.y_range.max) == (0.0, 5.0)


def test_resolve_plot_settings_column_over_visual() -> None:
    column = {
        "plotSettings": {"plotStyle": "LinePlot", "fill": {"solid": {"color": "#123456"}}, "heightFactor": 2},
        "axisSettings": {"xAxis": "none"},
        "axisLabelSettings": {"yLabel": "Temp"},
    }
    visual = {"plotSettings": {"plotStyle": "scatter", "plotTitle": "T"}, "axisSettings": {"yAxis": "ticks"}}

    s = resolve_plot_settings(_series(objects=column), visual, ViewDefaults(), ColorPalette(), x_name="x")

    assert s.style is PlotStyle.LINE
    assert s.fill == "#123456"
    assert s.height_factor == 2.0
    assert s.title == "T"
    assert s.x_axis == AxisDisplay(ticks=False, labels=False)
    assert s.y_axis == AxisDisplay(ticks=True, labels=False)
    assert s.y_label == "Temp"


def test_resolve_plot_settings_uses_injected_defaults() -> None:
    defaults = ViewDefaults(plot=PlotDefaults(plot_style=PlotStyle.LINE, y_min_fixed=False))
    s = resolve_plot_settings(_series((2.0, 4.0)), {}, defaults, ColorPalette(), x_name="x")
    assert s.style is PlotStyle.LINE
    assert (s.y_range.min, s.y_range.max) == (2.0, 4.0)


def test_invalid_axis_display_is_fatal() -> None:
    column = {"axisSettings": {"yAxis": "sideways"}}
    with pytest.raises(InvalidAxisDisplayError):
        resolve_plot_settings(_series(objects=column), {}, ViewDefaults(), ColorPalette(), x_name="x")


def test_non_string_axis_display_is_fatal() -> None:
    column = {"axisSettings": {"xAxis": 3}}
    with pytest.raises(InvalidAxisDisplayError):
        resolve_plot_settings(_series(objects=column), {}, ViewDefaults(), ColorPalette(), x_name="x")
    with pytest.raises(InvalidAxisDisplayError):
        resolve_plot_settings(_series(), column, ViewDefaults(), ColorPalette(), x_name="x")


def test_invalid_plot_style_is_extraction_error() -> None:
    column = {"plotSettings": {"plotStyle": "pie"}}
    with pytest.raises(ExtractionError):
        resolve_plot_settings(_series(objects=column), {}, ViewDefaults(), ColorPalette(), x_name="x")


def test_high_contrast_forces_foreground() -> None:
    palette = ColorPalette(is_high_contrast=True, foreground="#ffffff")
    column = {"plotSettings": {"fill": "#123456"}}
    s = resolve_plot_settings(_series(objects=column), {}, ViewDefaults(), palette, x_name="x")
    assert s.fill == "#ffffff"
    colors = resolve_color_settings({"colorSettings": {"overlayColor": "#ff0000"}}, ViewDefaults(), palette)
    assert colors.overlay_color == "#ffffff"


def test_auto_y_range_uses_only_own_values() -> None:
    auto = YRange(min=0.0, max=None, min_fixed=False, max_fixed=False)
    assert auto_y_range(auto, [3, None, float("nan"), 7]) == YRange(3.0, 7.0, False, False)
    assert auto_y_range(auto, [-1, 2]) == YRange(-1.0, 2.0, False, False)

    fixed = YRange(min=1.0, max=10.0, min_fixed=True, max_fixed=True)
    assert auto_y_range(fixed, [3, 7]) == fixed

    assert auto_y_range(auto, [None]) == YRange(0.0, 0.0, False, False)


def test_visual_level_options() -> None:
    objects = {
        "xAxisBreakSettings": {"enable": True, "breakGapSize": 5, "showLines": False},
        "zoomingSettings": {"show": False, "maximum": 10},
        "colorSettings": {"verticalRulerColor": "#00ff00"},
    }
    assert resolve_break_options(objects, ViewDefaults()) == (True, 5.0, False)
    zoom = resolve_zoom_settings(objects, ViewDefaults())
    assert (zoom.enable_zoom, zoom.maximum_zoom) == (False, 10)
    colors = resolve_color_settings(objects, ViewDefaults(), ColorPalette())
    assert colors.vertical_ruler_color == "#00ff00"
    assert colors.y_zero_line_color == "#CCCCCC"
