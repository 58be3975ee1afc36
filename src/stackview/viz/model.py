"""
Intermediate data model and view model types.

The intermediate model (AxisData, SeriesData, ..., DataModel) is produced once per
update cycle by stackview.viz.extract and discarded after the view model is built. The
view model (PlotModel, Legend, OverlayRectangle, ..., ViewModel) is the only artifact a
renderer keeps until the next cycle.

Notes
- Intermediate types are frozen; stages hand new instances forward with
  dataclasses.replace instead of writing fields onto a shared object.
- Legend.selected and PlotModel.visible are the only state mutated after the build,
  and only through ViewModel.deselect.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from stackview.core.errors import PipelineWarning
from stackview.core.grammar import (
    AxisDisplay,
    ColumnType,
    LegendKind,
    OverlayStyle,
    PlotStyle,
    axis_display_mode_for,
)
from stackview.core.schema import ConfigObjects

if TYPE_CHECKING:
    from .layout import Layout, LinearScale, TimeScale

AxisValue = float | int | datetime

__all__ = [
    "AxisData",
    "SeriesData",
    "TooltipColumn",
    "LegendData",
    "OverlayInputs",
    "RegionInput",
    "DataModel",
    "YRange",
    "PlotSettings",
    "XAxisSettings",
    "LegendValue",
    "Legend",
    "DataPoint",
    "HeatmapStrip",
    "PlotModel",
    "OverlayRectangle",
    "RegionOverlay",
    "TooltipModel",
    "ColorSettings",
    "ZoomSettings",
    "ViewModel",
    "to_jsonable",
]


# ============================================================================
# Intermediate model
# ============================================================================


@dataclass(frozen=True)
class AxisData:
    """The single continuous/date axis column; values are null-free after validation."""

    values: tuple[AxisValue, ...]
    name: str
    column_id: int
    column_type: ColumnType

    @property
    def is_date(self) -> bool:
        return self.column_type is ColumnType.DATE_TIME


@dataclass(frozen=True)
class SeriesData:
    """One dependent column; becomes exactly one plot, in discovery order."""

    values: tuple[Any, ...]
    name: str
    column_id: int
    slot: int
    column_type: ColumnType = ColumnType.NUMERIC
    objects: ConfigObjects = field(default_factory=dict)


@dataclass(frozen=True)
class TooltipColumn:
    values: tuple[Any, ...]
    name: str
    column_id: int
    column_type: ColumnType
    objects: ConfigObjects = field(default_factory=dict)


@dataclass(frozen=True)
class LegendData:
    """Raw values of a categorical or filter legend column."""

    values: tuple[Any, ...]
    name: str
    column_id: int
    column_type: ColumnType
    is_filter: bool
    objects: ConfigObjects = field(default_factory=dict)


@dataclass(frozen=True)
class OverlayInputs:
    """Parallel interval overlay arrays (empty tuples when not supplied)."""

    length: tuple[Any, ...] = ()
    width: tuple[Any, ...] = ()
    y: tuple[Any, ...] = ()

    @property
    def present(self) -> bool:
        return len(self.length) > 0 and len(self.width) > 0


@dataclass(frozen=True)
class RegionInput:
    """Categorical stripe column sampled once per axis position."""

    values: tuple[Any, ...]
    name: str
    column_id: int
    objects: ConfigObjects = field(default_factory=dict)


@dataclass(frozen=True)
class DataModel:
    axis: AxisData
    series: tuple[SeriesData, ...]
    tooltips: tuple[TooltipColumn, ...] = ()
    legends: tuple[LegendData, ...] = ()
    filter_legends: tuple[LegendData, ...] = ()
    overlay: OverlayInputs = field(default_factory=OverlayInputs)
    region: RegionInput | None = None
    objects: ConfigObjects = field(default_factory=dict)


# ============================================================================
# Resolved settings
# ============================================================================


@dataclass(frozen=True)
class YRange:
    """Y bounds; unfixed bounds are substituted from the plot's own min/max."""

    min: float | None
    max: float | None
    min_fixed: bool
    max_fixed: bool


@dataclass(frozen=True)
class PlotSettings:
    style: PlotStyle
    fill: str
    use_legend_color: bool
    show_heatmap: bool
    title: str
    overlay_style: OverlayStyle
    overlay_centered: bool
    height_factor: float
    x_axis: AxisDisplay
    y_axis: AxisDisplay
    x_label: str
    y_label: str
    y_range: YRange

    def to_dict(self) -> dict[str, Any]:
        return {
            "style": self.style.value,
            "fill": self.fill,
            "use_legend_color": self.use_legend_color,
            "show_heatmap": self.show_heatmap,
            "title": self.title,
            "overlay_style": self.overlay_style.value,
            "overlay_centered": self.overlay_centered,
            "height_factor": self.height_factor,
            "x_axis": axis_display_mode_for(self.x_axis).value,
            "y_axis": axis_display_mode_for(self.y_axis).value,
            "x_label": self.x_label,
            "y_label": self.y_label,
            "y_range": {
                "min": self.y_range.min,
                "max": self.y_range.max,
                "min_fixed": self.y_range.min_fixed,
                "max_fixed": self.y_range.max_fixed,
            },
        }


@dataclass(frozen=True)
class XAxisSettings:
    """
    Shared x axis state.

    Attributes:
        axis_break (bool): True when x coordinates are dense ranks instead of raw values.
        break_gap_size (float): Gap threshold (seconds for dates).
        show_break_lines (bool): Renderer hint for break decoration.
        is_date (bool): Axis holds datetimes.
        unique_values (tuple): Sorted distinct axis values.
        index_map (dict): Distinct axis value -> dense rank ``0..U-1``.
        break_points (tuple): Break positions (mid rank when compressed, mid raw value otherwise).
        x_range (tuple): Domain in the active coordinate space.
        name (str): Axis display name.
        scale (LinearScale | TimeScale | None): Shared horizontal scale, set by the layout stage.
    """

    axis_break: bool
    break_gap_size: float
    show_break_lines: bool
    is_date: bool
    unique_values: tuple[AxisValue, ...]
    index_map: dict[AxisValue, int]
    break_points: tuple[AxisValue, ...]
    x_range: tuple[AxisValue, AxisValue]
    name: str
    scale: LinearScale | TimeScale | None = None

    def map_x(self, value: AxisValue | None) -> AxisValue | None:
        """Translate a raw axis value into the active coordinate space."""
        if value is None:
            return None
        if self.axis_break:
            return self.index_map.get(value)
        return value


# ============================================================================
# View model
# ============================================================================


@dataclass(frozen=True)
class LegendValue:
    value: str
    color: str | None


@dataclass
class Legend:
    """
    A categorical or filter legend with its mutable selection set.

    Attributes:
        title (str): Display title.
        kind (LegendKind): Categorical, or the filter classification.
        column_id (int): Source column id.
        values (list[LegendValue]): Ordered distinct values with colors (None for filters).
        points (dict[int, str]): Point index -> legend value, non-null entries only.
        selected (set[str]): Values currently enabled for display.
    """

    title: str
    kind: LegendKind
    column_id: int
    values: list[LegendValue]
    points: dict[int, str]
    selected: set[str]

    @property
    def is_filter(self) -> bool:
        return self.kind is not LegendKind.CATEGORICAL

    def color_of(self, value: str) -> str | None:
        for lv in self.values:
            if lv.value == value:
                return lv.color
        return None

    def admits(self, point_index: int) -> bool:
        value = self.points.get(point_index)
        return value is not None and value in self.selected

    def deselect(self, value: str) -> bool:
        """Remove a value from the selection; returns False when it was not selected."""
        if value not in self.selected:
            return False
        self.selected.discard(value)
        return True

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "kind": self.kind.value,
            "column_id": self.column_id,
            "values": [{"value": v.value, "color": v.color} for v in self.values],
            "selected": sorted(self.selected),
        }


@dataclass(frozen=True)
class DataPoint:
    x: AxisValue | None
    y: Any
    color: str
    point_index: int


@dataclass(frozen=True)
class HeatmapStrip:
    """Equal-width bins over the x domain; each value is max(y) - min(y) or None for empty bins."""

    edges: tuple[float, ...]
    values: tuple[float | None, ...]
    color_scheme: str


@dataclass
class PlotModel:
    plot_id: int
    name: str
    column_id: int
    points: list[DataPoint]
    top: float
    height: float
    settings: PlotSettings
    visible: list[bool] = field(default_factory=list)
    heatmap: HeatmapStrip | None = None

    def visible_points(self) -> list[DataPoint]:
        return [p for p, shown in zip(self.points, self.visible, strict=False) if shown]


@dataclass(frozen=True)
class OverlayRectangle:
    x: AxisValue
    end_x: AxisValue
    width: float
    y: float
    color: str | None = None


@dataclass(frozen=True)
class RegionOverlay:
    name: str
    rectangles: tuple[OverlayRectangle, ...]
    legend: tuple[LegendValue, ...]
    opacity: float


@dataclass(frozen=True)
class TooltipModel:
    title: str
    column_id: int
    values: tuple[Any, ...]


@dataclass(frozen=True)
class ColorSettings:
    vertical_ruler_color: str
    overlay_color: str
    y_zero_line_color: str
    break_line_color: str
    heatmap_color_scheme: str


@dataclass(frozen=True)
class ZoomSettings:
    enable_zoom: bool
    maximum_zoom: int


@dataclass
class ViewModel:
    """
    Fully laid-out multi-plot view model.

    Notes:
        - ``deselect`` is the only supported mutation: it shrinks one legend's selection
          and recomputes plot visibility without re-extraction.
        - Y ranges are not recomputed after deselection.
    """

    plots: list[PlotModel]
    x_axis: XAxisSettings
    layout: Layout
    legends: list[Legend]
    tooltips: list[TooltipModel]
    color_settings: ColorSettings
    zoom_settings: ZoomSettings
    overlay_rectangles: list[OverlayRectangle] | None = None
    region_overlay: RegionOverlay | None = None
    warnings: list[PipelineWarning] = field(default_factory=list)

    def deselect(self, legend_index: int, value: str) -> bool:
        """
        Remove ``value`` from legend ``legend_index`` and refresh plot visibility.

        Returns:
            bool: True when the selection changed.

        Raises:
            IndexError: If no legend exists at ``legend_index``.
        """
        from .legends import apply_visibility

        legend = self.legends[legend_index]
        if not legend.deselect(str(value)):
            return False
        apply_visibility(self.plots, self.legends)
        return True

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation (datetimes as ISO strings, NaN as None)."""
        x = self.x_axis
        return to_jsonable(
            {
                "plots": [
                    {
                        "plot_id": p.plot_id,
                        "name": p.name,
                        "column_id": p.column_id,
                        "top": p.top,
                        "height": p.height,
                        "settings": p.settings.to_dict(),
                        "points": [
                            {"x": d.x, "y": d.y, "color": d.color, "i": d.point_index, "visible": v}
                            for d, v in zip(p.points, p.visible, strict=False)
                        ],
                        "heatmap": None
                        if p.heatmap is None
                        else {
                            "edges": list(p.heatmap.edges),
                            "values": list(p.heatmap.values),
                            "color_scheme": p.heatmap.color_scheme,
                        },
                    }
                    for p in self.plots
                ],
                "x_axis": {
                    "name": x.name,
                    "is_date": x.is_date,
                    "axis_break": x.axis_break,
                    "break_gap_size": x.break_gap_size,
                    "show_break_lines": x.show_break_lines,
                    "break_points": list(x.break_points),
                    "x_range": list(x.x_range),
                },
                "layout": self.layout.to_dict(),
                "legends": [lg.to_dict() for lg in self.legends],
                "overlay_rectangles": None
                if self.overlay_rectangles is None
                else [_rect_dict(r) for r in self.overlay_rectangles],
                "region_overlay": None
                if self.region_overlay is None
                else {
                    "name": self.region_overlay.name,
                    "opacity": self.region_overlay.opacity,
                    "rectangles": [_rect_dict(r) for r in self.region_overlay.rectangles],
                    "legend": [
                        {"value": v.value, "color": v.color} for v in self.region_overlay.legend
                    ],
                },
                "tooltips": [
                    {"title": t.title, "column_id": t.column_id, "values": list(t.values)}
                    for t in self.tooltips
                ],
                "color_settings": vars(self.color_settings),
                "zoom_settings": vars(self.zoom_settings),
                "warnings": [w.to_dict() for w in self.warnings],
            }
        )


def _rect_dict(r: OverlayRectangle) -> dict[str, Any]:
    return {"x": r.x, "end_x": r.end_x, "width": r.width, "y": r.y, "color": r.color}


def to_jsonable(obj: Any) -> Any:
    """Recursively convert datetimes to ISO strings and non-finite floats to None."""
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, float) and not math.isfinite(obj):
        return None
    return obj
