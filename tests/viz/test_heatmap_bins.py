from datetime import datetime, timedelta

import pytest

from stackview.viz.heatmap import compute_heatmap


def test_bins_hold_spread_or_none() -> None:
    strip = compute_heatmap([0, 1, 2, 3, 9], [1, 4, 2, 2, None], domain=(0, 10), bins=5, color_scheme="interpolateBuGn")

    assert strip.values == (3.0, 0.0, None, None, None)
    assert strip.edges == (0.0, 2.0, 4.0, 6.0, 8.0, 10.0)
    assert strip.color_scheme == "interpolateBuGn"


def test_domain_end_falls_in_last_bin() -> None:
    strip = compute_heatmap([0, 10], [5, 8], domain=(0, 10), bins=2, color_scheme="s")
    assert strip.values == (0.0, 0.0)


def test_degenerate_domain_uses_one_bin() -> None:
    strip = compute_heatmap([3, 3], [1, 6], domain=(3, 3), bins=4, color_scheme="s")
    assert strip.values == (5.0, None, None, None)


def test_date_coordinates() -> None:
    t0 = datetime(2024, 1, 1)
    xs = [t0 + timedelta(hours=h) for h in range(4)]
    strip = compute_heatmap(xs, [1, 2, 10, 20], domain=(xs[0], xs[-1]), bins=2, color_scheme="s")
    # bin width 1.5 h: hours 0-1 land in bin 0, hour 3 clips into bin 1
    assert strip.values == (pytest.approx(1.0), pytest.approx(10.0))
