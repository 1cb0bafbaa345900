# focus-budget/src/focus_budget/reorder.py
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, Literal

from ._shared import clean_text, order_signature
from .allocate import MAX_ITEMS_DEFAULT, allocate_items
from .schema import FocusItem, assert_unique_ids

# -----------------------------------------------------------------------------
# ReorderEngine: sole owner of the ordered list
# -----------------------------------------------------------------------------
# Every structural change (add/remove/clear/move/reposition):
#   1) builds the new order
#   2) re-runs the allocator over the WHOLE list
#   3) swaps state in and notifies listeners
# A step that raises leaves the previous state untouched.
#
# Unknown ids are no-ops (InvalidReference): the operation returns False and
# `last_error` carries the reason; nothing is raised.
# -----------------------------------------------------------------------------

INVALID_REFERENCE = "invalid_reference"

Direction = Literal["top", "up", "down", "bottom"]
ChangeListener = Callable[[tuple[FocusItem, ...]], None]

COMMANDS = (
    "add",
    "remove",
    "clear",
    "move_to_top",
    "move_up",
    "move_down",
    "move_to_bottom",
    "reposition",
    "select",
)


class ReorderEngine:
    def __init__(
        self,
        items: Iterable[FocusItem] = (),
        *,
        max_items: int = MAX_ITEMS_DEFAULT,
        listeners: Iterable[ChangeListener] = (),
    ):
        seq = list(items)
        assert_unique_ids([it.id for it in seq])
        self.max_items = int(max_items)
        self._items: list[FocusItem] = allocate_items(seq, max_items=self.max_items)
        self._selected_id: str | None = None
        self._listeners: list[ChangeListener] = list(listeners)
        self.last_error: str | None = None

    # ---- observation (snapshots only) ----
    @property
    def items(self) -> tuple[FocusItem, ...]:
        return tuple(self._items)

    @property
    def ids(self) -> list[str]:
        return [it.id for it in self._items]

    def __len__(self) -> int:
        return len(self._items)

    def signature(self) -> str:
        return order_signature(self.ids)

    def index_of(self, item_id: str) -> int | None:
        for i, it in enumerate(self._items):
            if it.id == item_id:
                return i
        return None

    def get(self, item_id: str) -> FocusItem | None:
        i = self.index_of(item_id)
        return None if i is None else self._items[i]

    def percents(self) -> dict[str, float]:
        return {it.id: float(it.percent) for it in self._items}

    @property
    def selected_id(self) -> str | None:
        return self._selected_id

    @property
    def selected_index(self) -> int | None:
        return None if self._selected_id is None else self.index_of(self._selected_id)

    # ---- listeners ----
    def add_listener(self, callback: ChangeListener) -> None:
        self._listeners.append(callback)

    def remove_listener(self, callback: ChangeListener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _commit(self, new_order: list[FocusItem], action: str) -> bool:
        self._items = allocate_items(new_order, max_items=self.max_items)
        logging.debug("focus order changed. action=%s n=%d", action, len(self._items))
        snapshot = self.items
        for cb in list(self._listeners):
            cb(snapshot)
        return True

    def _invalid(self, action: str, item_id: object) -> bool:
        self.last_error = f"{INVALID_REFERENCE}: {item_id!r}"
        logging.debug("%s ignored; unknown id %r", action, item_id)
        return False

    # ---- structural ----
    def add(self, text: str, *, item_id: str | None = None) -> FocusItem | None:
        """
        Append a new item at the bottom. Blank text is ignored (returns None).

        Raises AllocationOutOfRangeError (before mutating) when the list is full,
        and ValueError for an explicit item_id already in use.
        """
        self.last_error = None
        label = clean_text(text)
        if not label:
            return None
        if item_id is not None and self.index_of(item_id) is not None:
            raise ValueError(f"item id already in use: {item_id!r}")

        item = FocusItem.create(label, item_id=item_id)
        self._commit([*self._items, item], "add")
        return self.get(item.id)

    def remove(self, item_id: str) -> bool:
        self.last_error = None
        i = self.index_of(item_id)
        if i is None:
            return self._invalid("remove", item_id)
        if self._selected_id == item_id:
            self._selected_id = None
        return self._commit(self._items[:i] + self._items[i + 1 :], "remove")

    def clear(self) -> bool:
        self.last_error = None
        self._selected_id = None
        if not self._items:
            return False
        return self._commit([], "clear")

    # ---- reorder ----
    def _move_to(self, item_id: str, target: int, action: str) -> bool:
        self.last_error = None
        i = self.index_of(item_id)
        if i is None:
            return self._invalid(action, item_id)
        target = max(0, min(len(self._items) - 1, int(target)))
        if target == i:
            return False
        order = list(self._items)
        item = order.pop(i)
        order.insert(target, item)
        return self._commit(order, action)

    def move_to_top(self, item_id: str) -> bool:
        return self._move_to(item_id, 0, "move_to_top")

    def move_to_bottom(self, item_id: str) -> bool:
        return self._move_to(item_id, len(self._items) - 1, "move_to_bottom")

    def move_up(self, item_id: str) -> bool:
        i = self.index_of(item_id)
        if i is None:
            return self._invalid("move_up", item_id)
        return self._move_to(item_id, i - 1, "move_up")

    def move_down(self, item_id: str) -> bool:
        i = self.index_of(item_id)
        if i is None:
            return self._invalid("move_down", item_id)
        return self._move_to(item_id, i + 1, "move_down")

    def reposition(self, from_id: str, to_id: str) -> bool:
        """
        Drag-and-drop move: take from_id out and reinsert it at to_id's index.

        Dragging upward lands before to_id, dragging downward lands after it.
        """
        self.last_error = None
        if from_id == to_id:
            return False
        i = self.index_of(from_id)
        j = self.index_of(to_id)
        if i is None:
            return self._invalid("reposition", from_id)
        if j is None:
            return self._invalid("reposition", to_id)
        return self._move_to(from_id, j, "reposition")

    # ---- selection ----
    def select(self, item_id: str | None) -> str | None:
        """
        Toggle selection. Selecting the selected item (or None) clears it.
        Returns the selected id afterwards.
        """
        self.last_error = None
        if item_id is None or item_id == self._selected_id:
            self._selected_id = None
        elif self.index_of(item_id) is None:
            self._invalid("select", item_id)
        else:
            self._selected_id = item_id
        return self._selected_id

    def move_selected(self, direction: Direction) -> bool:
        if self._selected_id is None:
            return False
        fn = {
            "top": self.move_to_top,
            "up": self.move_up,
            "down": self.move_down,
            "bottom": self.move_to_bottom,
        }.get(str(direction).strip().lower())
        if fn is None:
            raise ValueError(f"Unknown direction: {direction!r} (use top|up|down|bottom)")
        return fn(self._selected_id)

    # ---- command interface ----
    def dispatch(self, command: str, **kwargs: Any) -> Any:
        """
        Run a named command from the fixed capability set (see COMMANDS).

        Example: engine.dispatch("reposition", from_id=a, to_id=b)
        """
        name = str(command).strip().lower().replace("-", "_")
        if name not in COMMANDS:
            raise ValueError(f"Unknown command: {command!r} (use {'|'.join(COMMANDS)})")
        return getattr(self, name)(**kwargs)
