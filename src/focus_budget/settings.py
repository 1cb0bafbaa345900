# focus-budget/src/focus_budget/settings.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from . import _shared
from .allocate import DISPLAY_DECIMALS_DEFAULT, MAX_ITEMS_DEFAULT
from .colors import ColorRamp
from .polyline import PolylineSettings

DEFAULT_STORE_NAME = "focus_budget.json"


class ChartSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    cx: float = 200.0
    cy: float = 200.0
    outer_radius: float = 180.0
    inner_radius: float = 90.0
    start_angle: float = -90.0
    # sectors narrower than this get no percentage label
    label_min_sweep: float = 15.0

    @field_validator("outer_radius", "inner_radius", mode="before")
    @classmethod
    def _non_negative(cls, v: Any) -> float:
        return max(0.0, _shared.as_float(v, 0.0))

    @property
    def center(self) -> tuple[float, float]:
        return (self.cx, self.cy)

    @property
    def is_donut(self) -> bool:
        return 0.0 < self.inner_radius < self.outer_radius


class ColorSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    top_hue: float = 120.0
    bottom_hue: float = 0.0
    saturation: float = 75.0
    top_lightness: float = 55.0
    bottom_lightness: float = 60.0

    @field_validator("saturation", "top_lightness", "bottom_lightness", mode="before")
    @classmethod
    def _percent(cls, v: Any) -> float:
        return _shared.clamp(_shared.as_float(v, 50.0), 0.0, 100.0)

    def ramp(self) -> ColorRamp:
        return ColorRamp(**self.model_dump())


class PolylineConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    min_segments: int = 20
    degrees_per_segment: float = 5.0

    @field_validator("min_segments", mode="before")
    @classmethod
    def _min_segments(cls, v: Any) -> int:
        return max(1, _shared.as_int(v, 20))

    @field_validator("degrees_per_segment", mode="before")
    @classmethod
    def _step(cls, v: Any) -> float:
        x = _shared.as_float(v, 5.0)
        return x if x > 0 else 5.0

    def settings(self) -> PolylineSettings:
        return PolylineSettings(
            min_segments=self.min_segments, degrees_per_segment=self.degrees_per_segment
        )


class AllocationSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    max_items: int = MAX_ITEMS_DEFAULT
    display_decimals: int = DISPLAY_DECIMALS_DEFAULT

    @field_validator("max_items", mode="before")
    @classmethod
    def _max_items(cls, v: Any) -> int:
        return _shared.as_int(v, MAX_ITEMS_DEFAULT)

    @field_validator("display_decimals", mode="before")
    @classmethod
    def _decimals(cls, v: Any) -> int:
        return max(0, _shared.as_int(v, DISPLAY_DECIMALS_DEFAULT))


class BudgetSettings(BaseModel):
    """
    Tool-facing configuration.

    Sections: chart (layout), color (rank ramp), polyline (arc sampling),
    allocation (limits + display rounding). Unknown keys are ignored so that
    older/newer files keep loading.

    Priority when resolved by the CLI: flag > env (FOCUS_BUDGET_*) > file > defaults.
    """

    model_config = ConfigDict(extra="ignore")

    chart: ChartSettings = Field(default_factory=ChartSettings)
    color: ColorSettings = Field(default_factory=ColorSettings)
    polyline: PolylineConfig = Field(default_factory=PolylineConfig)
    allocation: AllocationSettings = Field(default_factory=AllocationSettings)
    store: str = DEFAULT_STORE_NAME

    @field_validator("store", mode="before")
    @classmethod
    def _store(cls, v: Any) -> str:
        s = _shared.clean_text(v)
        return s or DEFAULT_STORE_NAME

    # ---- derived ----
    def ramp(self) -> ColorRamp:
        return self.color.ramp()

    def polyline_settings(self) -> PolylineSettings:
        return self.polyline.settings()

    # ---- env ----
    def with_env_overrides(self) -> BudgetSettings:
        """
        Apply FOCUS_BUDGET_MAX_ITEMS / FOCUS_BUDGET_DECIMALS / FOCUS_BUDGET_STORE.

        Malformed integers raise ValueError naming the variable.
        """
        base = self.model_dump()
        max_items = _shared.env_int_strict("MAX_ITEMS")
        if max_items is not None:
            if max_items < 1:
                name = _shared.env_name("MAX_ITEMS")
                raise ValueError(f"{name} must be >= 1 (got {max_items})")
            base["allocation"]["max_items"] = max_items
        decimals = _shared.env_int_strict("DECIMALS")
        if decimals is not None:
            base["allocation"]["display_decimals"] = decimals
        store = _shared.env_str("STORE")
        if store:
            base["store"] = store
        return BudgetSettings(**base)

    # ---- IO ----
    @classmethod
    def from_json(cls, path: str | Path) -> BudgetSettings:
        p = Path(path)
        try:
            obj = json.loads(p.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise FileNotFoundError(f"settings JSON not found: {p}") from e
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in settings: {p} ({e.msg} at line {e.lineno})") from e

        if not isinstance(obj, dict):
            raise ValueError(f"settings JSON must be an object/dict: {p}")
        return cls(**obj)

    def to_json(self, path: str | Path, *, indent: int = 2) -> None:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(
            json.dumps(self.model_dump(), ensure_ascii=False, indent=indent) + "\n",
            encoding="utf-8",
        )


def resolve_settings(path: str | Path | None = None) -> BudgetSettings:
    """Defaults, optionally overlaid by a JSON file, then env overrides."""
    base = BudgetSettings.from_json(path) if path else BudgetSettings()
    return base.with_env_overrides()
