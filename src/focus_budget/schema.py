# focus-budget/src/focus_budget/schema.py
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any

from . import _shared

# -----------------------------------------------------------------------------
# FocusItem record (list element contract)
# -----------------------------------------------------------------------------
# v1 contract: {"id": str, "text": str, "percent": number}
#
# Policy:
# - id is opaque and never rewritten
# - percent is derived; it is None until the allocator has run
# - stored percentages are never trusted (always recomputed after load)
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class FocusItem:
    id: str
    text: str
    percent: float | None = None

    @classmethod
    def create(cls, text: str, *, item_id: str | None = None) -> FocusItem:
        return cls(id=item_id or _shared.new_item_id(), text=_shared.clean_text(text))

    def with_percent(self, percent: float) -> FocusItem:
        return replace(self, percent=float(percent))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "percent": None if self.percent is None else float(self.percent),
        }


def item_from_record(rec: object) -> FocusItem | None:
    """
    Validate one stored record. Returns None when the record must be dropped.

    Rules (tolerant of old stores):
      - must be a dict with string id/text
      - blank id -> drop
      - percent must be a finite number > 0 (bool is not a number here)
    """
    if not isinstance(rec, dict):
        return None

    item_id = rec.get("id")
    text = rec.get("text")
    if not isinstance(item_id, str) or not isinstance(text, str):
        return None
    if not item_id.strip():
        return None

    pct = rec.get("percent")
    if isinstance(pct, bool) or not isinstance(pct, (int, float)):
        return None
    if not math.isfinite(float(pct)) or float(pct) <= 0:
        return None

    return FocusItem(id=item_id, text=text, percent=float(pct))


def items_from_records(records: list[object]) -> tuple[list[FocusItem], int]:
    """
    Validate a stored array, keeping first occurrence of each id.

    Returns (items, n_dropped).
    """
    seen: set[str] = set()
    out: list[FocusItem] = []
    dropped = 0
    for rec in records:
        item = item_from_record(rec)
        if item is None or item.id in seen:
            dropped += 1
            continue
        seen.add(item.id)
        out.append(item)
    return out, dropped


def assert_unique_ids(ids: list[str]) -> None:
    seen: set[str] = set()
    dup: list[str] = []
    for i in ids:
        if i in seen:
            dup.append(i)
        seen.add(i)
    if dup:
        raise ValueError(f"duplicate item ids: {sorted(set(dup))[:10]}")
