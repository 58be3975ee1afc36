import pytest

from stackview.core.errors import GrammarError
from stackview.core.grammar import (
    AXIS_DISPLAY_TABLE,
    AxisDisplay,
    AxisDisplayMode,
    ColumnRole,
    ColumnType,
    LegendKind,
    OverlayStyle,
    PlotStyle,
    axis_display_from_value,
    axis_display_mode_for,
    column_role_from_value,
    column_type_from_value,
    normalize_token,
    plot_style_from_value,
)


def test_all_enum_values_are_lower_snake() -> None:
    for enum_cls in (ColumnType, ColumnRole, PlotStyle, OverlayStyle, AxisDisplayMode, LegendKind):
        for member in enum_cls:
            assert member.value == member.value.lower()
            assert " " not in member.value and "-" not in member.value


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("TicksLabels", "ticks_labels"),
        ("ticks+labels", "ticks_labels"),
        ("labels & ticks", "ticks_labels"),
        ("dateTime", "date_time"),
        ("ScatterPlot", "scatter"),
        ("  none ", "none"),
    ],
)
def test_normalize_token_accepts_host_spellings(raw: str, expected: str) -> None:
    assert normalize_token(raw) == expected


def test_axis_display_table_is_exhaustive_and_fixed() -> None:
    assert set(AXIS_DISPLAY_TABLE) == set(AxisDisplayMode)
    assert axis_display_from_value("none") == AxisDisplay(ticks=False, labels=False)
    assert axis_display_from_value("ticks") == AxisDisplay(ticks=True, labels=False)
    assert axis_display_from_value("labels") == AxisDisplay(ticks=False, labels=True)
    assert axis_display_from_value("ticks+labels") == AxisDisplay(ticks=True, labels=True)


def test_axis_display_mode_for_inverts_table() -> None:
    for mode, flags in AXIS_DISPLAY_TABLE.items():
        assert axis_display_mode_for(flags) is mode


def test_unknown_values_raise_grammar_error() -> None:
    with pytest.raises(GrammarError):
        axis_display_from_value("sideways")
    with pytest.raises(GrammarError):
        plot_style_from_value("bar")
    with pytest.raises(GrammarError):
        column_role_from_value(3)


def test_grammar_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        column_type_from_value("spreadsheet")


def test_column_type_is_number() -> None:
    assert ColumnType.NUMERIC.is_number
    assert ColumnType.INTEGER.is_number
    assert not ColumnType.DATE_TIME.is_number
    assert not ColumnType.TEXT.is_number
