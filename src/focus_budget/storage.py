# focus-budget/src/focus_budget/storage.py
from __future__ import annotations

import json
import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .schema import FocusItem, items_from_records

# JSON store for the ordered list: a plain array of {"id", "text", "percent"}.
# Array order is rank order. Percentages are written for readers of the file
# but are recomputed on every load.


@dataclass(frozen=True)
class FocusStore:
    path: Path

    @classmethod
    def at(cls, path: str | Path) -> FocusStore:
        return cls(Path(path))

    def exists(self) -> bool:
        return self.path.exists() and self.path.is_file()

    def load(self) -> list[FocusItem]:
        """
        Read the stored list.

        Missing file -> []. Malformed JSON -> ValueError. A non-array document
        or invalid entries are dropped with a warning (never fatal).
        """
        p = self.path
        try:
            raw = p.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []

        if not raw.strip():
            return []

        try:
            obj = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(
                f"Invalid JSON in focus store: {p} ({e.msg} at line {e.lineno})"
            ) from e

        if not isinstance(obj, list):
            logging.warning("focus store is not a JSON array; ignoring contents: %s", p)
            return []

        items, dropped = items_from_records(obj)
        if dropped:
            logging.warning("dropped %d invalid/duplicate entries from %s", dropped, p)
        return items

    def save(self, items: Sequence[FocusItem]) -> Path:
        """Write atomically (temp file + replace)."""
        p = self.path
        p.parent.mkdir(parents=True, exist_ok=True)
        payload = [it.to_dict() for it in items]
        tmp = p.with_name(p.name + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
            f.write("\n")
        os.replace(tmp, p)
        logging.debug("saved %d focus items to %s", len(payload), p)
        return p

    def clear(self) -> bool:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        return True
