"""Type-aware tooltip formatting."""

from __future__ import annotations

import logging
from typing import Any

from stackview.core.constants import TOOLTIP_TITLE_SETTINGS
from stackview.core.errors import ExtractionError
from stackview.core.grammar import ColumnType

from .extract import is_null, to_datetime
from .model import TooltipColumn, TooltipModel
from .settings import get_value

logger = logging.getLogger(__name__)

__all__ = ["format_tooltip_value", "build_tooltips"]

DATE_FORMAT = "%d.%m.%Y %H:%M"


def format_tooltip_value(value: Any, column_type: ColumnType, precision: int) -> Any:
    """
    Format one tooltip value.

    Dates render as ``DD.MM.YYYY HH:MM``; numbers of a non-integer numeric column render
    with ``precision`` decimals; everything else passes through unchanged.

    Examples:
        >>> format_tooltip_value(3.14159, ColumnType.NUMERIC, 2)
        '3.14'
        >>> format_tooltip_value("2024-01-05T08:03", ColumnType.DATE_TIME, 2)
        '05.01.2024 08:03'
        >>> format_tooltip_value(7, ColumnType.INTEGER, 2)
        7
    """
    if is_null(value):
        return None
    if column_type is ColumnType.DATE_TIME:
        try:
            return to_datetime(value).strftime(DATE_FORMAT)
        except ExtractionError:
            logger.debug("Tooltip value %r is not a date; passing it through", value)
            return value
    if column_type is ColumnType.NUMERIC and isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{value:.{precision}f}"
    return value


def build_tooltips(
    columns: tuple[TooltipColumn, ...], axis_length: int, precision: int
) -> list[TooltipModel]:
    """One TooltipModel per tooltip column, truncated to ``min(axis_length, column length)``."""
    out: list[TooltipModel] = []
    for col in columns:
        n = min(axis_length, len(col.values))
        out.append(
            TooltipModel(
                title=str(get_value(col.objects, TOOLTIP_TITLE_SETTINGS, "title", col.name)),
                column_id=col.column_id,
                values=tuple(format_tooltip_value(v, col.column_type, precision) for v in col.values[:n]),
            )
        )
    return out
