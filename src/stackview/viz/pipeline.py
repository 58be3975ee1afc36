"""
Pipeline orchestration: raw dataset -> ViewModel.

Stages run in a fixed order, each taking and returning an immutable PipelineState:

1) extract         raw dataset -> DataModel
2) settings        DataModel -> PlotSettings per series
3) x axis          dense-rank map, break points, domain
4) legends         categorical + filter legends (layout needs their presence)
5) layout          canvas geometry and the shared scale
6) plots           points, colors, visibility, heatmaps
7) overlays        interval rectangles and region stripes
8) tooltips        formatted tooltip columns

Fatal conditions are PipelineError subclasses; build_view_model turns them into a
failed PipelineResult; any other exception raised by a stage is reported as an
ExtractionError. Non-fatal conditions accumulate as PipelineWarning records.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any, TypeVar

from pydantic import ValidationError

from stackview.core.errors import ExtractionError, PipelineError, PipelineWarning, WarningKind
from stackview.core.schema import RawDataset, Viewport
from stackview.io.config import ViewDefaults

from .axis_break import build_x_axis
from .extract import extract
from .heatmap import compute_heatmap
from .layout import Layout, build_scale, compute_layout
from .legends import apply_visibility, build_categorical_legend, build_filter_legend
from .model import (
    DataModel,
    DataPoint,
    Legend,
    PlotModel,
    PlotSettings,
    ViewModel,
    XAxisSettings,
)
from .overlays import build_interval_overlay, build_region_overlay
from .palette import ColorPalette, PaletteService
from .settings import (
    resolve_break_options,
    resolve_color_settings,
    resolve_heatmap_bins,
    resolve_plot_settings,
    resolve_tooltip_precision,
    resolve_zoom_settings,
)
from .tooltips import build_tooltips

logger = logging.getLogger(__name__)
_T = TypeVar("_T")

__all__ = ["PipelineState", "PipelineResult", "build_view_model"]


@dataclass(frozen=True)
class PipelineState:
    """Inputs plus everything produced so far; each stage returns a new instance."""

    dataset: RawDataset | None
    viewport: Viewport | None
    defaults: ViewDefaults
    palette: PaletteService
    model: DataModel | None = None
    plot_settings: tuple[PlotSettings, ...] = ()
    x_axis: XAxisSettings | None = None
    legends: tuple[Legend, ...] = ()
    layout: Layout | None = None
    plots: tuple[PlotModel, ...] = ()
    warnings: tuple[PipelineWarning, ...] = ()


@dataclass(frozen=True)
class PipelineResult:
    """
    Tagged outcome of one pipeline run.

    Exactly one of ``view_model`` and ``error`` is set.
    """

    view_model: ViewModel | None = None
    error: PipelineError | None = None
    warnings: tuple[PipelineWarning, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.error is None


def _coerce_dataset(dataset: RawDataset | Mapping[str, Any] | None) -> RawDataset | None:
    if dataset is None or isinstance(dataset, RawDataset):
        return dataset
    try:
        return RawDataset.model_validate(dataset)
    except ValidationError as exc:
        raise ExtractionError(f"The dataset could not be extracted: {exc}") from exc


def _stage_extract(state: PipelineState) -> PipelineState:
    return replace(state, model=extract(state.dataset))


def _stage_settings(state: PipelineState) -> PipelineState:
    model = state.model
    settings = tuple(
        resolve_plot_settings(s, model.objects, state.defaults, state.palette, x_name=model.axis.name)
        for s in model.series
    )
    return replace(state, plot_settings=settings)


def _stage_x_axis(state: PipelineState) -> PipelineState:
    axis_break, gap, show_lines = resolve_break_options(state.model.objects, state.defaults)
    x_axis = build_x_axis(
        state.model.axis, axis_break=axis_break, break_gap_size=gap, show_break_lines=show_lines
    )
    return replace(state, x_axis=x_axis)


def _stage_legends(state: PipelineState) -> PipelineState:
    legends: list[Legend] = []
    warnings = list(state.warnings)
    for data in state.model.legends:
        legend, legend_warnings = build_categorical_legend(data, state.defaults.legend_palette)
        legends.append(legend)
        warnings.extend(legend_warnings)
    legends.extend(build_filter_legend(data) for data in state.model.filter_legends)
    return replace(state, legends=tuple(legends), warnings=tuple(warnings))


def _stage_layout(state: PipelineState) -> PipelineState:
    layout = compute_layout(
        state.viewport,
        state.plot_settings,
        has_legend=bool(state.legends),
        defaults=state.defaults,
    )
    x_axis = replace(state.x_axis, scale=build_scale(state.x_axis, layout.plot_width))
    return replace(state, layout=layout, x_axis=x_axis)


def _stage_plots(state: PipelineState) -> PipelineState:
    model, x_axis, layout = state.model, state.x_axis, state.layout
    warnings = list(state.warnings)
    categorical = [lg for lg in state.legends if not lg.is_filter]
    bins = resolve_heatmap_bins(model.objects, state.defaults)
    scheme = resolve_color_settings(model.objects, state.defaults, state.palette).heatmap_color_scheme
    xs = [x_axis.map_x(v) for v in model.axis.values]

    plots: list[PlotModel] = []
    for series, settings in zip(model.series, state.plot_settings, strict=True):
        legend = None
        if settings.use_legend_color:
            if len(categorical) == 1:
                legend = categorical[0]
            else:
                msg = (
                    f"Plot {series.name} uses legend colors but {len(categorical)} "
                    "categorical legends are available; using the fill color."
                )
                logger.warning(msg)
                warnings.append(PipelineWarning(WarningKind.PLOT_LEGEND, msg))

        points: list[DataPoint] = []
        for i, x in enumerate(xs):
            y = series.values[i] if i < len(series.values) else None
            color = settings.fill
            if legend is not None:
                value = legend.points.get(i)
                if value is not None:
                    color = legend.color_of(value) or color
            points.append(DataPoint(x=x, y=y, color=color, point_index=i))

        heatmap = None
        if settings.show_heatmap:
            heatmap = compute_heatmap(
                [p.x for p in points],
                [p.y for p in points],
                domain=x_axis.x_range,
                bins=bins,
                color_scheme=scheme,
            )
        plots.append(
            PlotModel(
                plot_id=series.slot,
                name=series.name,
                column_id=series.column_id,
                points=points,
                top=layout.plot_tops[series.slot],
                height=layout.plot_heights[series.slot],
                settings=settings,
                heatmap=heatmap,
            )
        )
    apply_visibility(plots, state.legends)
    logger.debug("Assembled %d plots", len(plots))
    return replace(state, plots=tuple(plots), warnings=tuple(warnings))


def _finish(state: PipelineState) -> ViewModel:
    model, x_axis, defaults = state.model, state.x_axis, state.defaults
    warnings = list(state.warnings)

    rects, overlay_warning = build_interval_overlay(model.axis, x_axis, model.overlay)
    if overlay_warning is not None:
        warnings.append(overlay_warning)

    region = None
    if model.region is not None:
        first, last = state.plots[0], state.plots[-1]
        region, region_warnings = build_region_overlay(
            [x_axis.map_x(v) for v in model.axis.values],
            model.region,
            y=first.top,
            height=last.top + last.height - first.top,
            opacity=defaults.region_overlay_opacity,
            palette=defaults.legend_palette,
        )
        warnings.extend(region_warnings)

    tooltips = build_tooltips(
        model.tooltips,
        len(model.axis.values),
        resolve_tooltip_precision(model.objects, defaults),
    )
    return ViewModel(
        plots=list(state.plots),
        x_axis=x_axis,
        layout=state.layout,
        legends=list(state.legends),
        tooltips=tooltips,
        color_settings=resolve_color_settings(model.objects, defaults, state.palette),
        zoom_settings=resolve_zoom_settings(model.objects, defaults),
        overlay_rectangles=rects,
        region_overlay=region,
        warnings=warnings,
    )


_STAGES = (
    _stage_extract,
    _stage_settings,
    _stage_x_axis,
    _stage_legends,
    _stage_layout,
    _stage_plots,
)


def _run_stage(stage: Callable[[PipelineState], _T], state: PipelineState) -> _T:
    name = stage.__name__.removeprefix("_stage_").lstrip("_")
    logger.debug("Running stage %s", name)
    try:
        return stage(state)
    except PipelineError:
        raise
    except Exception as exc:
        # Values that passed validation can still be rejected downstream (e.g. integer overflow).
        logger.debug("Stage %s failed", name, exc_info=True)
        raise ExtractionError(f"The dataset could not be extracted: {exc}") from exc


def build_view_model(
    dataset: RawDataset | Mapping[str, Any] | None,
    viewport: Viewport | None,
    *,
    defaults: ViewDefaults | None = None,
    palette: PaletteService | None = None,
) -> PipelineResult:
    """
    Run the full pipeline for one update cycle.

    Args:
        dataset: Raw dataset (a mapping is validated into RawDataset), or None.
        viewport: Render surface dimensions.
        defaults: Configuration defaults; ``ViewDefaults()`` when omitted.
        palette: Palette service; a ColorPalette over ``defaults.legend_palette`` when omitted.

    Returns:
        PipelineResult: The view model and its warnings, or the fatal error.

    Examples:
        >>> ds = {
        ...     "categories": [{"display_name": "t", "column_id": 0, "roles": ["axis"], "values": [1, 2, 3]}],
        ...     "values": [{"display_name": "y", "column_id": 1, "roles": ["series"], "values": [4, 5, 6]}],
        ... }
        >>> result = build_view_model(ds, Viewport(width=800, height=600))
        >>> result.ok, len(result.view_model.plots)
        (True, 1)
    """
    defaults = defaults or ViewDefaults()
    palette = palette or ColorPalette(defaults.legend_palette)
    try:
        state = PipelineState(
            dataset=_coerce_dataset(dataset),
            viewport=viewport,
            defaults=defaults,
            palette=palette,
        )
        for stage in _STAGES:
            state = _run_stage(stage, state)
        view_model = _run_stage(_finish, state)
    except PipelineError as exc:
        logger.error("%s: %s", exc.title, exc.message)
        return PipelineResult(error=exc)

    return PipelineResult(view_model=view_model, warnings=tuple(view_model.warnings))
