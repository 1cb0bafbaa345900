# focus-budget/tests/test_allocate.py
from __future__ import annotations

import pytest

from focus_budget.allocate import (
    ALLOCATION_COLS,
    AllocationOutOfRangeError,
    allocate,
    allocate_items,
    allocation_frame,
    format_percent,
    rank_percents,
)
from focus_budget.schema import FocusItem


def test_three_items_share_four_two_one():
    shares = allocate(["A", "B", "C"])
    assert list(shares) == ["A", "B", "C"]
    assert shares["A"] == pytest.approx(400 / 7)
    assert shares["B"] == pytest.approx(200 / 7)
    assert shares["C"] == pytest.approx(100 / 7)

    # display rounding only
    assert [format_percent(v) for v in shares.values()] == ["57.1", "28.6", "14.3"]


def test_empty_and_single():
    assert allocate([]) == {}
    assert allocate(["only"]) == {"only": 100.0}
    assert len(rank_percents(0)) == 0


@pytest.mark.parametrize("n", [2, 3, 7, 20, 53, 200, 1000])
def test_sum_is_100_and_adjacent_ratio_is_exactly_two(n):
    p = rank_percents(n)
    assert len(p) == n
    assert float(p.sum()) == pytest.approx(100.0, abs=1e-9)
    for i in range(n - 1):
        assert p[i] == 2.0 * p[i + 1]
    assert all(v > 0 for v in p)


def test_percent_depends_on_rank_not_identity():
    a = allocate(["x", "y", "z"])
    b = allocate(["z", "x", "y"])
    assert a["x"] == b["z"]
    assert a["z"] == b["y"]


def test_too_many_items_is_refused():
    with pytest.raises(AllocationOutOfRangeError) as ei:
        rank_percents(11, max_items=10)
    assert ei.value.n == 11
    assert ei.value.max_items == 10
    # still a ValueError for generic handlers
    with pytest.raises(ValueError):
        allocate([str(i) for i in range(1001)])


def test_negative_length_rejected():
    with pytest.raises(ValueError):
        rank_percents(-1)


def test_duplicate_ids_rejected():
    with pytest.raises(ValueError, match="duplicate"):
        allocate(["a", "b", "a"])


def test_allocate_items_overwrites_stale_percent():
    items = [
        FocusItem(id="a", text="Alpha", percent=10.0),
        FocusItem(id="b", text="Beta", percent=90.0),
    ]
    out = allocate_items(items)
    assert [it.id for it in out] == ["a", "b"]
    assert out[0].percent == pytest.approx(200 / 3)
    assert out[1].percent == pytest.approx(100 / 3)
    # inputs are frozen records, untouched
    assert items[0].percent == 10.0


def test_format_percent_rounds_half_away_from_zero():
    assert format_percent(100) == "100.0"
    assert format_percent(12.25, 1) == "12.3"
    assert format_percent(57.142857, 0) == "57"
    assert format_percent(0.5, 0) == "1"
    assert format_percent(14.2857, 2) == "14.29"


def test_allocation_frame_columns_and_order():
    items = [FocusItem.create(t, item_id=t.lower()) for t in ["Alpha", "Beta", "Gamma"]]
    df = allocation_frame(items)
    assert list(df.columns) == ALLOCATION_COLS
    assert df["id"].tolist() == ["alpha", "beta", "gamma"]
    assert df["rank"].tolist() == [0, 1, 2]
    assert df["weight_log2"].tolist() == [2, 1, 0]
    assert df["percent"].sum() == pytest.approx(100.0)
    assert df["percent_display"].tolist() == ["57.1", "28.6", "14.3"]
    assert df["hue"].tolist() == [120.0, 60.0, 0.0]
    assert df["color_hex"].iloc[0] == "#36e236"


def test_allocation_frame_empty():
    df = allocation_frame([])
    assert df.empty
    assert list(df.columns) == ALLOCATION_COLS
