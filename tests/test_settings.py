# focus-budget/tests/test_settings.py
from __future__ import annotations

import json

import pytest

from focus_budget.colors import ColorRamp
from focus_budget.settings import DEFAULT_STORE_NAME, BudgetSettings, resolve_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for k in ("MAX_ITEMS", "DECIMALS", "STORE"):
        monkeypatch.delenv(f"FOCUS_BUDGET_{k}", raising=False)


def test_defaults_match_chart_constants():
    st = BudgetSettings()
    assert st.chart.center == (200.0, 200.0)
    assert (st.chart.outer_radius, st.chart.inner_radius) == (180.0, 90.0)
    assert st.chart.is_donut
    assert st.ramp() == ColorRamp()
    assert st.polyline_settings().min_segments == 20
    assert st.polyline_settings().degrees_per_segment == 5.0
    assert st.allocation.max_items == 1000
    assert st.allocation.display_decimals == 1
    assert st.store == DEFAULT_STORE_NAME


def test_from_json_partial_and_unknown_keys(tmp_path):
    p = tmp_path / "settings.json"
    p.write_text(
        json.dumps(
            {
                "chart": {"inner_radius": 0, "label_min_sweep": 20},
                "color": {"saturation": 140},
                "polyline": {"degrees_per_segment": -1},
                "future_section": {"x": 1},
            }
        ),
        encoding="utf-8",
    )
    st = BudgetSettings.from_json(p)
    assert st.chart.inner_radius == 0.0
    assert not st.chart.is_donut
    assert st.chart.label_min_sweep == 20.0
    assert st.chart.outer_radius == 180.0
    assert st.color.saturation == 100.0
    assert st.polyline.degrees_per_segment == 5.0


def test_from_json_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        BudgetSettings.from_json(tmp_path / "missing.json")

    bad = tmp_path / "bad.json"
    bad.write_text("{nope", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid JSON"):
        BudgetSettings.from_json(bad)

    arr = tmp_path / "arr.json"
    arr.write_text("[]", encoding="utf-8")
    with pytest.raises(ValueError, match="object"):
        BudgetSettings.from_json(arr)


def test_to_json_roundtrip(tmp_path):
    st = BudgetSettings(store="x.json")
    p = tmp_path / "out" / "settings.json"
    st.to_json(p)
    assert BudgetSettings.from_json(p) == st


def test_env_overrides_win_over_file(tmp_path, monkeypatch):
    p = tmp_path / "settings.json"
    p.write_text(json.dumps({"allocation": {"max_items": 50}}), encoding="utf-8")
    monkeypatch.setenv("FOCUS_BUDGET_MAX_ITEMS", "7")
    monkeypatch.setenv("FOCUS_BUDGET_DECIMALS", "2")
    monkeypatch.setenv("FOCUS_BUDGET_STORE", str(tmp_path / "env.json"))

    st = resolve_settings(p)
    assert st.allocation.max_items == 7
    assert st.allocation.display_decimals == 2
    assert st.store == str(tmp_path / "env.json")


def test_env_override_malformed_raises(monkeypatch):
    monkeypatch.setenv("FOCUS_BUDGET_MAX_ITEMS", "lots")
    with pytest.raises(ValueError, match="FOCUS_BUDGET_MAX_ITEMS"):
        resolve_settings()

    monkeypatch.setenv("FOCUS_BUDGET_MAX_ITEMS", "0")
    with pytest.raises(ValueError, match=">= 1"):
        resolve_settings()
