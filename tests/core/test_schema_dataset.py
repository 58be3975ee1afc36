import pytest
from pydantic import ValidationError

from stackview.core.grammar import ColumnRole, ColumnType
from stackview.core.schema import RawColumn, RawDataset, Viewport


def test_raw_column_normalizes_type_and_roles() -> None:
    col = RawColumn(
        display_name="t",
        column_id=0,
        type="dateTime",
        roles=["Axis", "tooltip", "axis"],
        values=["2024-01-01T00:00"],
    )
    assert col.type is ColumnType.DATE_TIME
    assert col.roles == [ColumnRole.AXIS, ColumnRole.TOOLTIP]
    assert col.has_role(ColumnRole.TOOLTIP)


def test_raw_column_accepts_role_flag_mapping() -> None:
    col = RawColumn(display_name="y", column_id=1, roles={"series": True, "legend": False})
    assert col.roles == [ColumnRole.SERIES]


def test_raw_column_accepts_single_role_string() -> None:
    col = RawColumn(display_name="y", column_id=1, roles="values")
    assert col.roles == [ColumnRole.SERIES]


def test_raw_column_rejects_unknown_role() -> None:
    with pytest.raises(ValidationError):
        RawColumn(display_name="y", column_id=1, roles=["pie_slice"])


def test_raw_column_forbids_extra_fields() -> None:
    with pytest.raises(ValidationError):
        RawColumn(display_name="y", column_id=1, colour="red")


def test_dataset_columns_are_deduplicated_by_id() -> None:
    x = RawColumn(display_name="x", column_id=0, roles=["axis"], values=[1])
    y = RawColumn(display_name="y", column_id=1, roles=["series"], values=[2])
    ds = RawDataset(categories=[x, y], values=[y])

    assert [c.column_id for c in ds.columns()] == [0, 1]


def test_viewport_defaults_to_unknown_size() -> None:
    vp = Viewport()
    assert vp.width is None and vp.height is None
