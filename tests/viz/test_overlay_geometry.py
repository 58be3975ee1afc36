import json
from datetime import datetime, timedelta

from stackview.core.errors import WarningKind
from stackview.core.grammar import ColumnType
from stackview.viz.axis_break import build_x_axis
from stackview.viz.model import AxisData, OverlayInputs, RegionInput
from stackview.viz.overlays import build_interval_overlay, build_region_overlay, run_length_encode

PALETTE = ("#p0", "#p1", "#p2")


def _axis(values, column_type=ColumnType.NUMERIC) -> AxisData:
    return AxisData(values=tuple(values), name="x", column_id=0, column_type=column_type)


def _x_axis(axis: AxisData, axis_break: bool = False):
    return build_x_axis(axis, axis_break=axis_break, break_gap_size=1, show_break_lines=True)


def test_interval_overlay_skips_null_and_zero_lengths() -> None:
    # Arrange
    axis = _axis([0, 1, 2])
    overlay = OverlayInputs(length=(2, 0, None), width=(5, 5, 5))

    # Act
    rects, warning = build_interval_overlay(axis, _x_axis(axis), overlay)

    # Assert
    assert warning is None
    assert [(r.x, r.end_x, r.width, r.y) for r in rects] == [(0, 2, 5, 0)]


def test_interval_overlay_filters_and_deduplicates() -> None:
    axis = _axis([-1, 3, 3, 7, 9])
    overlay = OverlayInputs(
        length=(1, 2, 2, 1, 1),
        width=(4, 4, 6, 0, None),
        y=(None, 1.5, 2.5, 0, 0),
    )
    rects, _ = build_interval_overlay(axis, _x_axis(axis), overlay)

    # -1 is negative, duplicate [3, 5] keeps the first, widths 0/None are dropped
    assert [(r.x, r.end_x, r.width, r.y) for r in rects] == [(3, 5, 4, 1.5)]


def test_interval_overlay_uses_ranks_when_compressed() -> None:
    axis = _axis([10, 20, 30])
    rects, _ = build_interval_overlay(axis, _x_axis(axis, axis_break=True), OverlayInputs(length=(1, 1, 1), width=(1, 1, 1)))
    assert [(r.x, r.end_x) for r in rects] == [(0, 1), (1, 2), (2, 3)]


def test_interval_overlay_date_end_follows_positions() -> None:
    t0 = datetime(2024, 1, 1)
    values = [t0 + timedelta(hours=h) for h in range(4)]
    axis = _axis(values, ColumnType.DATE_TIME)
    rects, _ = build_interval_overlay(axis, _x_axis(axis), OverlayInputs(length=(2, None, None, 5), width=(1, 1, 1, 1)))

    # position 3 + 5 clamps to the last axis position
    assert [(r.x, r.end_x) for r in rects] == [(values[0], values[2]), (values[3], values[3])]


def test_interval_overlay_without_survivors_warns() -> None:
    axis = _axis([0, 1])
    rects, warning = build_interval_overlay(axis, _x_axis(axis), OverlayInputs(length=(1, 1), width=(0, -2)))
    assert rects is None
    assert warning is not None and warning.kind is WarningKind.OVERLAY_DATA


def test_interval_overlay_absent_is_silent() -> None:
    axis = _axis([0, 1])
    assert build_interval_overlay(axis, _x_axis(axis), OverlayInputs()) == (None, None)


def test_run_length_encoding_round_trips() -> None:
    # Arrange
    xs = list(range(10))
    categories = ["a", "a", "b", "b", "b", "a", None, None, "c", "c"]

    # Act
    runs = run_length_encode(xs, categories)

    # Assert: every position falls in exactly one run, and the run reproduces its value
    rebuilt = []
    for i, x in enumerate(xs):
        last = i == len(xs) - 1
        matches = [v for start, end, v in runs if start <= x < end or (last and x == end)]
        rebuilt.append(matches[-1])
    assert rebuilt == categories
    assert [(s, e) for s, e, _ in runs] == [(0, 2), (2, 5), (5, 6), (6, 8), (8, 9)]


def test_region_overlay_colors_and_descending_legend() -> None:
    # Arrange
    region = RegionInput(
        values=("low", "low", "high", "mid"),
        name="phase",
        column_id=7,
        objects={"legendSettings": {"legendColors": json.dumps({"mid": "#abc"})}},
    )

    # Act
    overlay, warnings = build_region_overlay([0, 1, 2, 3], region, y=10, height=200, opacity=0.2, palette=PALETTE)

    # Assert
    assert warnings == []
    assert [(r.x, r.end_x, r.color) for r in overlay.rectangles] == [(0, 2, "#p1"), (2, 3, "#p0"), (3, 3, "#abc")]
    assert all(r.y == 10 and r.width == 200 for r in overlay.rectangles)
    assert [v.value for v in overlay.legend] == ["mid", "low", "high"]
    assert overlay.opacity == 0.2


def test_region_overlay_malformed_color_map_warns() -> None:
    region = RegionInput(values=("a",), name="phase", column_id=7, objects={"legendSettings": {"legendColors": "[1, 2"}})
    overlay, warnings = build_region_overlay([0], region, y=0, height=1, opacity=0.2, palette=PALETTE)
    assert [w.kind for w in warnings] == [WarningKind.LEGEND_COLOR_MAPPING]
    assert overlay.rectangles[0].color == "#p0"
