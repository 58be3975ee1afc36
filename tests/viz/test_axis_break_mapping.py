from datetime import datetime, timedelta

from stackview.core.grammar import ColumnType
from stackview.viz.axis_break import build_x_axis
from stackview.viz.model import AxisData


def _axis(values, column_type=ColumnType.NUMERIC) -> AxisData:
    return AxisData(values=tuple(values), name="x", column_id=0, column_type=column_type)


def test_break_between_rank_two_and_three() -> None:
    # Arrange
    axis = _axis([1, 2, 3, 10, 11])

    # Act
    xs = build_x_axis(axis, axis_break=True, break_gap_size=1, show_break_lines=True)

    # Assert
    assert xs.index_map == {1: 0, 2: 1, 3: 2, 10: 3, 11: 4}
    assert xs.break_points == (2.5,)
    assert xs.x_range == (0, 4)
    assert xs.map_x(10) == 3


def test_index_map_is_bijection_onto_dense_ranks() -> None:
    axis = _axis([5, 3, 3, 9, 1, 5, 42])
    xs = build_x_axis(axis, axis_break=True, break_gap_size=1, show_break_lines=True)

    distinct = set(axis.values)
    assert len(xs.index_map) == len(distinct)
    assert set(xs.index_map) == distinct
    assert set(xs.index_map.values()) == set(range(len(distinct)))


def test_unsorted_input_gives_sorted_ranks() -> None:
    xs = build_x_axis(_axis([11, 10, 3, 2, 1]), axis_break=True, break_gap_size=1, show_break_lines=True)
    assert xs.unique_values == (1, 2, 3, 10, 11)
    assert xs.break_points == (2.5,)


def test_without_compression_breaks_sit_at_raw_midpoints() -> None:
    xs = build_x_axis(_axis([1, 2, 3, 10, 11]), axis_break=False, break_gap_size=1, show_break_lines=False)
    assert xs.axis_break is False
    assert xs.break_points == (6.5,)
    assert xs.x_range == (1, 11)
    assert xs.map_x(10) == 10
    assert xs.show_break_lines is False


def test_date_axis_is_never_compressed() -> None:
    t0 = datetime(2024, 1, 1)
    values = [t0, t0 + timedelta(seconds=1), t0 + timedelta(hours=1)]
    xs = build_x_axis(_axis(values, ColumnType.DATE_TIME), axis_break=True, break_gap_size=60, show_break_lines=True)

    assert xs.axis_break is False
    assert xs.is_date
    assert xs.x_range == (values[0], values[-1])
    # One gap of 3599 s > 60 s, reported at the raw midpoint
    assert len(xs.break_points) == 1
    assert values[1] < xs.break_points[0] < values[2]
    assert xs.map_x(values[2]) == values[2]
