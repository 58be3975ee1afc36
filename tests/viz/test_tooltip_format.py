from datetime import datetime

from stackview.core.grammar import ColumnType
from stackview.viz.model import TooltipColumn
from stackview.viz.tooltips import build_tooltips, format_tooltip_value


def test_numeric_precision() -> None:
    assert format_tooltip_value(3.14159, ColumnType.NUMERIC, 2) == "3.14"
    assert format_tooltip_value(2, ColumnType.NUMERIC, 3) == "2.000"


def test_date_format_is_zero_padded() -> None:
    assert format_tooltip_value("2024-01-05T08:03", ColumnType.DATE_TIME, 2) == "05.01.2024 08:03"
    assert format_tooltip_value(datetime(2024, 11, 25, 17, 9), ColumnType.DATE_TIME, 2) == "25.11.2024 17:09"


def test_other_types_pass_through() -> None:
    assert format_tooltip_value(7, ColumnType.INTEGER, 2) == 7
    assert format_tooltip_value("abc", ColumnType.TEXT, 2) == "abc"
    assert format_tooltip_value("n/a", ColumnType.NUMERIC, 2) == "n/a"
    assert format_tooltip_value(None, ColumnType.NUMERIC, 2) is None


def test_tooltips_truncate_and_take_titles() -> None:
    columns = (
        TooltipColumn(values=(1.5, 2.5, 3.5, 4.5), name="a", column_id=1, column_type=ColumnType.NUMERIC),
        TooltipColumn(
            values=("x",),
            name="b",
            column_id=2,
            column_type=ColumnType.TEXT,
            objects={"tooltipTitleSettings": {"title": "Bee"}},
        ),
    )

    tips = build_tooltips(columns, axis_length=3, precision=1)

    assert tips[0].title == "a" and tips[0].values == ("1.5", "2.5", "3.5")
    assert tips[1].title == "Bee" and tips[1].values == ("x",)
    assert [t.column_id for t in tips] == [1, 2]
