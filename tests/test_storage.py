# focus-budget/tests/test_storage.py
from __future__ import annotations

import json

import pytest

from focus_budget.reorder import ReorderEngine
from focus_budget.schema import FocusItem, item_from_record, items_from_records
from focus_budget.storage import FocusStore


def test_missing_or_blank_store_loads_empty(tmp_path):
    store = FocusStore.at(tmp_path / "none.json")
    assert store.load() == []
    assert not store.exists()

    blank = tmp_path / "blank.json"
    blank.write_text("  \n", encoding="utf-8")
    assert FocusStore.at(blank).load() == []


def test_save_then_load_keeps_order_and_ids(tmp_path):
    e = ReorderEngine()
    for t in ["Alpha", "Beta", "Gamma"]:
        e.add(t)
    store = FocusStore.at(tmp_path / "sub" / "focus.json")
    out = store.save(e.items)
    assert out.exists()
    assert not (tmp_path / "sub" / "focus.json.tmp").exists()

    raw = json.loads(out.read_text(encoding="utf-8"))
    assert [r["text"] for r in raw] == ["Alpha", "Beta", "Gamma"]
    assert set(raw[0]) == {"id", "text", "percent"}

    loaded = store.load()
    assert [it.id for it in loaded] == e.ids


def test_stored_percents_are_not_trusted(tmp_path):
    p = tmp_path / "focus.json"
    p.write_text(
        json.dumps(
            [
                {"id": "a", "text": "A", "percent": 1},
                {"id": "b", "text": "B", "percent": 99},
            ]
        ),
        encoding="utf-8",
    )
    e = ReorderEngine(FocusStore.at(p).load())
    assert e.percents()["a"] == pytest.approx(200 / 3)
    assert e.percents()["b"] == pytest.approx(100 / 3)


def test_invalid_entries_are_dropped(tmp_path, caplog):
    p = tmp_path / "focus.json"
    p.write_text(
        json.dumps(
            [
                {"id": "a", "text": "A", "percent": 50},
                {"id": "b", "text": "B", "percent": 0},
                {"id": "c", "text": 3, "percent": 10},
                {"id": "", "text": "blank id", "percent": 10},
                {"id": "d", "text": "D", "percent": True},
                {"id": "a", "text": "dup", "percent": 10},
                "not an object",
                {"id": "e", "text": "E", "percent": 12.5},
            ]
        ),
        encoding="utf-8",
    )
    with caplog.at_level("WARNING"):
        items = FocusStore.at(p).load()
    assert [it.id for it in items] == ["a", "e"]
    assert "dropped 6" in caplog.text


def test_non_array_document_is_ignored(tmp_path):
    p = tmp_path / "focus.json"
    p.write_text(json.dumps({"id": "a"}), encoding="utf-8")
    assert FocusStore.at(p).load() == []


def test_malformed_json_raises(tmp_path):
    p = tmp_path / "focus.json"
    p.write_text("[{", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid JSON"):
        FocusStore.at(p).load()


def test_clear_removes_file(tmp_path):
    store = FocusStore.at(tmp_path / "focus.json")
    store.save([])
    assert store.exists()
    assert store.clear() is True
    assert store.clear() is False


def test_record_validation_rules():
    assert item_from_record({"id": "x", "text": "X", "percent": 2}) == FocusItem("x", "X", 2.0)
    assert item_from_record({"id": "x", "text": "X"}) is None
    assert item_from_record({"id": "x", "text": "X", "percent": float("inf")}) is None
    assert item_from_record(["x", "X", 2]) is None

    items, dropped = items_from_records([{"id": "x", "text": "X", "percent": 1}] * 3)
    assert len(items) == 1 and dropped == 2
