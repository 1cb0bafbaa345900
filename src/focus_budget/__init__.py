# focus-budget/src/focus_budget/__init__.py
from __future__ import annotations

from .allocate import AllocationOutOfRangeError, allocate, allocate_items, format_percent
from .colors import ColorRamp, hsl_to_rgb
from .geometry import donut_path, pie_slice_path, polar_to_cartesian, sector_path
from .polyline import approximate_arc
from .reorder import ReorderEngine
from .schema import FocusItem

__all__ = [
    "__version__",
    "AllocationOutOfRangeError",
    "ColorRamp",
    "FocusItem",
    "ReorderEngine",
    "allocate",
    "allocate_items",
    "approximate_arc",
    "donut_path",
    "format_percent",
    "hsl_to_rgb",
    "pie_slice_path",
    "polar_to_cartesian",
    "sector_path",
]

try:
    from importlib.metadata import PackageNotFoundError, version
    __version__ = version("focus-budget")
except PackageNotFoundError:
    __version__ = "0+unknown"
