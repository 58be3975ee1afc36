"""
Column extraction: raw dataset -> intermediate DataModel.

Each raw column is dispatched by its roles (a column may fill several):

- axis: exactly one, numeric/integer or date
- series: one plot each, in discovery order; when ``useLegendColor`` is set and the
  column carries highlighted values, those replace the raw values
- tooltip, legend, filter_legend: raw values kept, classified later
- overlay_length / overlay_width / overlay_y: parallel interval arrays
- visual_overlay: full-domain categorical stripes

Validation order after dispatch: missing dataset, no axis, axis count, no series,
empty series, null axis values.
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime
from typing import Any

from stackview.core.constants import PLOT_SETTINGS
from stackview.core.errors import (
    AxisCountError,
    AxisNullValuesError,
    EmptyValuesError,
    ExtractionError,
    MissingDatasetError,
    NoAxisError,
    NoValuesError,
)
from stackview.core.grammar import ColumnRole, ColumnType
from stackview.core.schema import RawColumn, RawDataset

from .model import (
    AxisData,
    AxisValue,
    DataModel,
    LegendData,
    OverlayInputs,
    RegionInput,
    SeriesData,
    TooltipColumn,
)
from .settings import layered_value

logger = logging.getLogger(__name__)

__all__ = ["extract", "is_null", "to_datetime"]


def is_null(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def to_datetime(value: Any) -> datetime:
    """Normalize a date-like raw value (datetime, date or ISO string)."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError as exc:
            raise ExtractionError(f"cannot parse date value {value!r}") from exc
    raise ExtractionError(f"unsupported date value {value!r}")


def _axis_value(value: Any, column_type: ColumnType) -> AxisValue:
    if column_type is ColumnType.DATE_TIME:
        return to_datetime(value)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ExtractionError(f"axis value {value!r} is not numeric")
    return value


def _series_values(column: RawColumn, visual_objects: dict[str, Any]) -> tuple[Any, ...]:
    use_legend_color = layered_value(
        column.objects, visual_objects, PLOT_SETTINGS, "useLegendColor", False
    )
    if use_legend_color and column.highlights:
        return tuple(column.highlights)
    return tuple(column.values)


def extract(dataset: RawDataset | None) -> DataModel:
    """
    Build the intermediate model from a raw dataset.

    Args:
        dataset: The host's dataset, or None when the host has no data.

    Returns:
        DataModel: Axis, series, tooltip, legend and overlay inputs.

    Raises:
        MissingDatasetError: If ``dataset`` is None.
        NoAxisError: If no column has the axis role, or the axis column is empty.
        AxisCountError: If more than one column has the axis role.
        NoValuesError: If no column has the series role.
        EmptyValuesError: If a series column has no values.
        AxisNullValuesError: If the axis column contains nulls.
        ExtractionError: If the axis is a text column or holds unusable values.
    """
    if dataset is None:
        raise MissingDatasetError()

    visual = dataset.objects
    axis_columns: list[RawColumn] = []
    series: list[SeriesData] = []
    tooltips: list[TooltipColumn] = []
    legends: list[LegendData] = []
    filters: list[LegendData] = []
    overlay: dict[ColumnRole, tuple[Any, ...]] = {}
    region: RegionInput | None = None

    for column in dataset.columns():
        for role in column.roles:
            if role is ColumnRole.AXIS:
                axis_columns.append(column)
            elif role is ColumnRole.SERIES:
                series.append(
                    SeriesData(
                        values=_series_values(column, visual),
                        name=column.display_name,
                        column_id=column.column_id,
                        slot=len(series),
                        column_type=column.type,
                        objects=column.objects,
                    )
                )
            elif role is ColumnRole.TOOLTIP:
                tooltips.append(
                    TooltipColumn(
                        values=tuple(column.values),
                        name=column.display_name,
                        column_id=column.column_id,
                        column_type=column.type,
                        objects=column.objects,
                    )
                )
            elif role in (ColumnRole.LEGEND, ColumnRole.FILTER_LEGEND):
                target = legends if role is ColumnRole.LEGEND else filters
                target.append(
                    LegendData(
                        values=tuple(column.values),
                        name=column.display_name,
                        column_id=column.column_id,
                        column_type=column.type,
                        is_filter=role is ColumnRole.FILTER_LEGEND,
                        objects=column.objects,
                    )
                )
            elif role in (ColumnRole.OVERLAY_LENGTH, ColumnRole.OVERLAY_WIDTH, ColumnRole.OVERLAY_Y):
                if role in overlay:
                    logger.debug("Ignoring extra %s column %s", role.value, column.display_name)
                    continue
                overlay[role] = tuple(column.values)
            elif role is ColumnRole.VISUAL_OVERLAY:
                if region is not None:
                    logger.debug("Ignoring extra region overlay column %s", column.display_name)
                    continue
                region = RegionInput(
                    values=tuple(column.values),
                    name=column.display_name,
                    column_id=column.column_id,
                    objects=column.objects,
                )

    if not axis_columns:
        raise NoAxisError()
    if len(axis_columns) > 1:
        raise AxisCountError(
            f"Exactly one axis column is required, got {len(axis_columns)}: "
            + ", ".join(c.display_name for c in axis_columns)
        )
    if not series:
        raise NoValuesError()
    for s in series:
        if len(s.values) == 0:
            raise EmptyValuesError(s.name)

    axis_column = axis_columns[0]
    if not axis_column.values:
        raise NoAxisError()
    if any(is_null(v) for v in axis_column.values):
        raise AxisNullValuesError(axis_column.display_name)
    if axis_column.type is ColumnType.TEXT:
        raise ExtractionError(f"Axis column {axis_column.display_name} must be numeric or date.")

    axis = AxisData(
        values=tuple(_axis_value(v, axis_column.type) for v in axis_column.values),
        name=axis_column.display_name,
        column_id=axis_column.column_id,
        column_type=axis_column.type,
    )
    logger.debug(
        "Extracted axis %s (%d rows), %d series, %d tooltips, %d legends, %d filters",
        axis.name,
        len(axis.values),
        len(series),
        len(tooltips),
        len(legends),
        len(filters),
    )
    return DataModel(
        axis=axis,
        series=tuple(series),
        tooltips=tuple(tooltips),
        legends=tuple(legends),
        filter_legends=tuple(filters),
        overlay=OverlayInputs(
            length=overlay.get(ColumnRole.OVERLAY_LENGTH, ()),
            width=overlay.get(ColumnRole.OVERLAY_WIDTH, ()),
            y=overlay.get(ColumnRole.OVERLAY_Y, ()),
        ),
        region=region,
        objects=visual,
    )
