import json

from stackview.core.errors import WarningKind
from stackview.core.grammar import ColumnType, LegendKind
from stackview.viz.legends import (
    apply_visibility,
    build_categorical_legend,
    build_filter_legend,
    legend_key,
)
from stackview.viz.model import DataPoint, LegendData, PlotModel

PALETTE = ("#p0", "#p1", "#p2")


def _data(values, column_type=ColumnType.TEXT, objects=None, is_filter=False) -> LegendData:
    return LegendData(
        values=tuple(values),
        name="col",
        column_id=3,
        column_type=column_type,
        is_filter=is_filter,
        objects=objects or {},
    )


def _plot(n: int) -> PlotModel:
    points = [DataPoint(x=i, y=i, color="#000", point_index=i) for i in range(n)]
    return PlotModel(plot_id=0, name="y", column_id=1, points=points, top=0, height=10, settings=None)


def test_legend_key() -> None:
    assert legend_key(None) is None
    assert legend_key("") is None
    assert legend_key(float("nan")) is None
    assert legend_key(True) == "1"
    assert legend_key(1.0) == "1"
    assert legend_key(2.5) == "2.5"


def test_categorical_legend_palette_by_sorted_value() -> None:
    legend, warnings = build_categorical_legend(_data(["b", None, "a", "", "c", "a"]), PALETTE)

    assert warnings == []
    assert legend.kind is LegendKind.CATEGORICAL
    assert [(v.value, v.color) for v in legend.values] == [("a", "#p0"), ("b", "#p1"), ("c", "#p2")]
    assert legend.selected == {"a", "b", "c"}
    assert legend.points == {0: "b", 2: "a", 4: "c", 5: "a"}
    assert legend.title == "col"


def test_categorical_legend_persisted_colors_and_title() -> None:
    objects = {"legendSettings": {"legendColors": json.dumps({"b": "#bbb"}), "legendTitle": "Defects"}}
    legend, warnings = build_categorical_legend(_data(["a", "b"], objects=objects), PALETTE)

    assert warnings == []
    assert legend.color_of("b") == "#bbb"
    assert legend.color_of("a") == "#p0"
    assert legend.title == "Defects"


def test_malformed_color_map_warns_and_falls_back() -> None:
    objects = {"legendSettings": {"legendColors": "{not json"}}
    legend, warnings = build_categorical_legend(_data(["a", "b"], objects=objects), PALETTE)

    assert [w.kind for w in warnings] == [WarningKind.LEGEND_COLOR_MAPPING]
    assert legend.color_of("b") == "#p1"


def test_filter_legend_classification() -> None:
    assert build_filter_legend(_data([0, 1, None], ColumnType.INTEGER, is_filter=True)).kind is LegendKind.BOOLEAN
    assert build_filter_legend(_data(["1", "1"], ColumnType.TEXT, is_filter=True)).kind is LegendKind.BOOLEAN
    numeric = build_filter_legend(_data([10, 2, 2], ColumnType.INTEGER, is_filter=True))
    assert numeric.kind is LegendKind.NUMERIC
    assert [v.value for v in numeric.values] == ["2", "10"]
    text = build_filter_legend(_data(["x", "0"], ColumnType.TEXT, is_filter=True))
    assert text.kind is LegendKind.STRING
    assert all(v.color is None for v in text.values)
    assert text.selected == {"x", "0"}


def test_visibility_is_logical_and_across_legends() -> None:
    # Arrange
    plot = _plot(4)
    cat, _ = build_categorical_legend(_data(["a", "b", "a", "b"]), PALETTE)
    flt = build_filter_legend(_data([1, 1, 0, None], ColumnType.INTEGER, is_filter=True))

    # Act
    apply_visibility([plot], [cat, flt])

    # Assert: index 3 has no filter value, so it is hidden
    assert plot.visible == [True, True, True, False]

    cat.deselect("a")
    apply_visibility([plot], [cat, flt])
    assert plot.visible == [False, True, False, False]


def test_deselection_is_monotonic() -> None:
    plot = _plot(6)
    cat, _ = build_categorical_legend(_data(["a", "b", "c", "a", "b", "c"]), PALETTE)
    apply_visibility([plot], [cat])
    previous = list(plot.visible)

    for value in ["b", "zzz", "b", "a", "c"]:
        cat.deselect(value)
        apply_visibility([plot], [cat])
        # Never reveals a point that was hidden
        assert all(prev or not now for prev, now in zip(previous, plot.visible))
        previous = list(plot.visible)

    assert plot.visible == [False] * 6
    assert cat.selected == set()


def test_deselect_reports_change() -> None:
    cat, _ = build_categorical_legend(_data(["a"]), PALETTE)
    assert cat.deselect("a") is True
    assert cat.deselect("a") is False
