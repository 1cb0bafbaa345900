# focus-budget/tests/test_reorder.py
from __future__ import annotations

import pytest

from focus_budget.allocate import AllocationOutOfRangeError
from focus_budget.reorder import INVALID_REFERENCE, ReorderEngine
from focus_budget.schema import FocusItem


def _engine(*ids: str, **kw) -> ReorderEngine:
    return ReorderEngine([FocusItem.create(i.upper(), item_id=i) for i in ids], **kw)


def _assert_allocated(engine: ReorderEngine) -> None:
    items = engine.items
    assert sum(it.percent for it in items) == pytest.approx(100.0)
    for a, b in zip(items, items[1:]):
        assert a.percent == 2.0 * b.percent


def test_initial_items_are_allocated_by_rank():
    e = _engine("a", "b", "c")
    assert e.ids == ["a", "b", "c"]
    assert e.percents()["a"] == pytest.approx(400 / 7)
    _assert_allocated(e)


def test_move_to_top_recomputes_every_percent():
    e = _engine("a", "b", "c")
    assert e.move_to_top("c") is True
    assert e.ids == ["c", "a", "b"]
    p = e.percents()
    assert p["c"] == pytest.approx(57.142857, abs=1e-6)
    assert p["a"] == pytest.approx(28.571429, abs=1e-6)
    assert p["b"] == pytest.approx(14.285714, abs=1e-6)


def test_move_up_and_down():
    e = _engine("a", "b", "c")
    assert e.move_up("b") is True
    assert e.ids == ["b", "a", "c"]
    assert e.move_down("b") is True
    assert e.ids == ["a", "b", "c"]
    assert e.move_to_bottom("a") is True
    assert e.ids == ["b", "c", "a"]
    _assert_allocated(e)


@pytest.mark.parametrize(
    "op, item_id",
    [
        ("move_up", "a"),
        ("move_to_top", "a"),
        ("move_down", "c"),
        ("move_to_bottom", "c"),
    ],
)
def test_boundary_moves_are_noops(op, item_id):
    e = _engine("a", "b", "c")
    before = e.items
    assert getattr(e, op)(item_id) is False
    assert e.items == before
    assert e.last_error is None


def test_reposition_downward_lands_after_target():
    e = _engine("a", "b", "c")
    assert e.reposition("a", "c") is True
    assert e.ids == ["b", "c", "a"]
    assert e.percents()["a"] == pytest.approx(100 / 7)


def test_reposition_upward_lands_before_target():
    e = _engine("a", "b", "c", "d")
    assert e.reposition("d", "b") is True
    assert e.ids == ["a", "d", "b", "c"]


def test_reposition_last_onto_first():
    e = _engine("a", "b", "c")
    assert e.reposition("c", "a") is True
    assert e.ids == ["c", "a", "b"]


def test_reposition_onto_itself_is_noop():
    e = _engine("a", "b")
    assert e.reposition("a", "a") is False
    assert e.ids == ["a", "b"]


def test_unknown_ids_are_noops_with_reason():
    e = _engine("a", "b", "c")
    before = e.items
    assert e.move_to_top("zzz") is False
    assert e.last_error.startswith(INVALID_REFERENCE)
    assert e.reposition("a", "zzz") is False
    assert e.remove("zzz") is False
    assert e.items == before

    # next successful call resets the reason
    assert e.move_down("a") is True
    assert e.last_error is None


def test_moves_preserve_the_id_set():
    e = _engine("a", "b", "c", "d", "e")
    for op in [
        lambda: e.move_to_top("e"),
        lambda: e.move_down("e"),
        lambda: e.reposition("b", "d"),
        lambda: e.move_to_bottom("a"),
        lambda: e.move_up("c"),
    ]:
        op()
        assert sorted(e.ids) == ["a", "b", "c", "d", "e"]
        _assert_allocated(e)


def test_add_remove_clear():
    e = ReorderEngine()
    first = e.add("  Ship   the release ")
    assert first.text == "Ship the release"
    assert first.percent == 100.0

    second = e.add("Hiring", item_id="hire")
    assert e.ids == [first.id, "hire"]
    assert second.percent == pytest.approx(100 / 3)

    assert e.add("   ") is None
    assert len(e) == 2

    with pytest.raises(ValueError):
        e.add("again", item_id="hire")

    assert e.remove(first.id) is True
    assert e.get("hire").percent == 100.0

    assert e.clear() is True
    assert e.items == ()
    assert e.clear() is False


def test_add_past_limit_leaves_state_untouched():
    e = _engine("a", "b", max_items=2)
    sig = e.signature()
    with pytest.raises(AllocationOutOfRangeError):
        e.add("one too many")
    assert e.signature() == sig
    assert len(e) == 2


def test_duplicate_ids_rejected_on_construction():
    with pytest.raises(ValueError):
        ReorderEngine([FocusItem("x", "one"), FocusItem("x", "two")])


def test_select_toggles_and_moves_selected():
    e = _engine("a", "b", "c")
    assert e.select("b") == "b"
    assert e.selected_index == 1
    assert e.move_selected("up") is True
    assert e.ids == ["b", "a", "c"]
    assert e.selected_index == 0

    assert e.select("b") is None
    assert e.move_selected("down") is False

    assert e.select("nope") is None
    assert e.last_error.startswith(INVALID_REFERENCE)

    e.select("c")
    with pytest.raises(ValueError):
        e.move_selected("sideways")


def test_removing_selected_item_clears_selection():
    e = _engine("a", "b")
    e.select("a")
    e.remove("a")
    assert e.selected_id is None


def test_dispatch_named_commands():
    e = _engine("a", "b", "c")
    assert e.dispatch("move-to-top", item_id="c") is True
    assert e.dispatch("reposition", from_id="c", to_id="b") is True
    assert e.ids == ["a", "b", "c"]
    with pytest.raises(ValueError):
        e.dispatch("shuffle")


def test_listeners_see_new_snapshot():
    seen = []
    e = _engine("a", "b", listeners=[seen.append])
    e.move_to_top("b")
    assert len(seen) == 1
    assert [it.id for it in seen[0]] == ["b", "a"]

    e.move_to_top("b")  # no-op, no notification
    assert len(seen) == 1

    e.remove_listener(seen.append)
    e.move_to_top("a")
    assert len(seen) == 1


def test_signature_tracks_order():
    e = _engine("a", "b")
    s0 = e.signature()
    e.move_to_top("b")
    assert e.signature() != s0
    e.move_to_top("a")
    assert e.signature() == s0
