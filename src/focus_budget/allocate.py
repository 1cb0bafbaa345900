# focus-budget/src/focus_budget/allocate.py
from __future__ import annotations

from collections.abc import Hashable, Sequence

import numpy as np
import pandas as pd

from ._shared import round_half_up
from .colors import ColorRamp
from .schema import FocusItem, assert_unique_ids

# -----------------------------------------------------------------------------
# Rank -> percent (geometric doubling)
# -----------------------------------------------------------------------------
# weight(i) = 2^(n-1-i), total = 2^n - 1, percent(i) = weight(i) / total * 100
#
# Evaluated in the scaled form
#     percent(i) = 100 * 2^-(i+1) / (1 - 2^-n)
# which never overflows. Scaling by a power of two is exact in binary floating
# point, so adjacent ranks keep a ratio of exactly 2 as long as every share is
# a normal double. Past MAX_ITEMS_DEFAULT the tail shares approach the
# subnormal range, so larger lists are refused instead of silently degrading.
# -----------------------------------------------------------------------------

MAX_ITEMS_DEFAULT = 1000
DISPLAY_DECIMALS_DEFAULT = 1


class AllocationOutOfRangeError(ValueError):
    """List is too long for an exact doubling allocation."""

    def __init__(self, n: int, max_items: int):
        self.n = int(n)
        self.max_items = int(max_items)
        super().__init__(
            f"cannot allocate {self.n} items: the doubling rule is exact only up to "
            f"{self.max_items} items"
        )


def rank_percents(n: int, *, max_items: int = MAX_ITEMS_DEFAULT) -> np.ndarray:
    """
    Percent share per rank for a list of length n (rank 0 first).

    Returns an empty array for n == 0 and [100.0] for n == 1.
    Raises AllocationOutOfRangeError when n exceeds max_items.
    """
    n = int(n)
    if n < 0:
        raise ValueError(f"n must be >= 0 (got {n})")
    if n > int(max_items):
        raise AllocationOutOfRangeError(n, max_items)
    if n == 0:
        return np.zeros(0, dtype=float)
    if n == 1:
        return np.array([100.0])

    exps = -(np.arange(n, dtype=np.int32) + 1)
    scaled = np.ldexp(100.0, exps)
    denom = 1.0 - np.ldexp(1.0, -n)
    return scaled / denom


def allocate(
    ordered_ids: Sequence[Hashable], *, max_items: int = MAX_ITEMS_DEFAULT
) -> dict[Hashable, float]:
    """
    Map an ordered id sequence to percentages by rank.

    Parameters
    ----------
    ordered_ids : sequence
        Item ids, highest priority first. Ids must be unique.
    max_items : int, optional
        Upper bound on list length (default MAX_ITEMS_DEFAULT).

    Returns
    -------
    dict
        id -> percent in [0, 100], full double precision, insertion-ordered by rank.

    Notes
    -----
    - No rounding happens here; see `format_percent` for the display policy.
    - Duplicate ids raise ValueError; too-long lists raise AllocationOutOfRangeError.
    """
    ids = list(ordered_ids)
    assert_unique_ids(ids)
    pct = rank_percents(len(ids), max_items=max_items)
    return {i: float(p) for i, p in zip(ids, pct, strict=True)}


def allocate_items(
    items: Sequence[FocusItem], *, max_items: int = MAX_ITEMS_DEFAULT
) -> list[FocusItem]:
    """Return copies of `items` with `percent` recomputed from their order."""
    shares = allocate([it.id for it in items], max_items=max_items)
    return [it.with_percent(shares[it.id]) for it in items]


def format_percent(percent: float, decimals: int = DISPLAY_DECIMALS_DEFAULT) -> str:
    """
    Presentation rounding: fixed decimals, halves rounded away from zero.

    57.142857 -> "57.1", 100 -> "100.0" (decimals=1); decimals=0 -> "57".
    """
    d = max(0, int(decimals))
    scaled = round_half_up(float(percent) * (10**d))
    return f"{scaled / (10**d):.{d}f}"


ALLOCATION_COLS = [
    "rank",
    "id",
    "text",
    "weight_log2",
    "percent",
    "percent_display",
    "hue",
    "saturation",
    "lightness",
    "color_hex",
]


def allocation_frame(
    items: Sequence[FocusItem],
    *,
    ramp: ColorRamp | None = None,
    decimals: int = DISPLAY_DECIMALS_DEFAULT,
    max_items: int = MAX_ITEMS_DEFAULT,
) -> pd.DataFrame:
    """
    Tabular view of an allocation (one row per item, rank order).

    weight_log2 is the exponent n-1-i of the item's weight, so that the table
    stays finite for long lists.
    """
    ramp = ramp or ColorRamp()
    alloc = allocate_items(items, max_items=max_items)
    n = len(alloc)

    rows = []
    for i, it in enumerate(alloc):
        h, s, l = ramp.color_for(i, n)  # noqa: E741
        rows.append(
            {
                "rank": i,
                "id": it.id,
                "text": it.text,
                "weight_log2": n - 1 - i,
                "percent": float(it.percent),
                "percent_display": format_percent(it.percent, decimals),
                "hue": h,
                "saturation": s,
                "lightness": l,
                "color_hex": ramp.hex_for(i, n),
            }
        )
    return pd.DataFrame(rows, columns=ALLOCATION_COLS)
