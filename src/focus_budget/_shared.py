# focus-budget/src/focus_budget/_shared.py
from __future__ import annotations

import hashlib
import os
import random
import uuid

import pandas as pd

# -----------------------------------------------------------------------------
# _shared.py (minimal)
# -----------------------------------------------------------------------------
# Purpose:
#   - Centralize helpers that affect the persisted contract (ids, text, numbers).
#   - If these change, stored lists may load differently.
#
# Policy:
#   - Ids are opaque strings; never derived from text or position.
#   - Coercion is forgiving for config knobs, strict for env overrides.
# -----------------------------------------------------------------------------

ENV_PREFIX = "FOCUS_BUDGET_"


def is_na_scalar(x: object) -> bool:
    """
    pd.isna is unsafe for list-like; only treat scalars as NA here.
    """
    if x is None:
        return True
    if isinstance(x, (list, tuple, set, dict)):
        return False
    try:
        return bool(pd.isna(x))
    except Exception:
        return False


def clean_text(x: object) -> str:
    """
    Trim and collapse whitespace in a user label. NA-like scalars become "".
    """
    if is_na_scalar(x):
        return ""
    s = str(x).replace("\t", " ").replace("\r", " ").replace("\n", " ")
    return " ".join(s.split()).strip()


# -----------------------------------------------------------------------------
# Identity
# -----------------------------------------------------------------------------


def _fallback_uuid4() -> str:
    # RFC 4122 shape: version nibble 4, variant bits 10xx.
    tmpl = "xxxxxxxx-xxxx-4xxx-yxxx-xxxxxxxxxxxx"
    out = []
    for ch in tmpl:
        if ch == "x":
            out.append(f"{random.getrandbits(4):x}")
        elif ch == "y":
            out.append(f"{(random.getrandbits(4) & 0x3) | 0x8:x}")
        else:
            out.append(ch)
    return "".join(out)


def new_item_id() -> str:
    """
    Globally unique item id (uuid4 text).

    Falls back to a PRNG-built uuid4-shaped string when the OS has no random source.
    """
    try:
        return str(uuid.uuid4())
    except NotImplementedError:
        return _fallback_uuid4()


def sha256_12hex(payload: str) -> str:
    """
    Deterministic short hash (sha256[:12]) for order fingerprints.
    """
    return hashlib.sha256(str(payload).encode("utf-8")).hexdigest()[:12]


def order_signature(ids: list[str]) -> str:
    """
    Order-sensitive fingerprint of an id sequence.
    """
    return sha256_12hex("\n".join(str(i) for i in ids))


# -----------------------------------------------------------------------------
# Coercion (forgiving)
# -----------------------------------------------------------------------------


def as_int(x: object, default: int) -> int:
    try:
        if x is None:
            return int(default)
        return int(x)
    except Exception:
        return int(default)


def as_float(x: object, default: float) -> float:
    try:
        if x is None:
            return float(default)
        return float(x)
    except Exception:
        return float(default)


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, float(x)))


def round_half_up(x: float) -> int:
    """
    Round to nearest int, halves away from zero (Python's round() is banker's).
    """
    if x >= 0:
        return int(x + 0.5)
    return -int(-x + 0.5)


# -----------------------------------------------------------------------------
# Env overrides (strict)
# -----------------------------------------------------------------------------


def env_name(key: str) -> str:
    return ENV_PREFIX + str(key).strip().upper()


def env_int_strict(key: str) -> int | None:
    """
    Parse FOCUS_BUDGET_<KEY> as int.
    Returns None if unset/empty. Raises ValueError if malformed.
    """
    name = env_name(key)
    s = (os.environ.get(name, "") or "").strip()
    if not s:
        return None
    try:
        return int(s)
    except ValueError as e:
        raise ValueError(f"invalid env {name}={s!r} (expected an integer)") from e


def env_str(key: str, default: str = "") -> str:
    return (os.environ.get(env_name(key), default) or "").strip()
