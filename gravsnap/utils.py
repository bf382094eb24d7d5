#!/usr/bin/env python3
"""
General utilities for Gravity Snapshot.
"""
from typing import Optional


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


def try_float(val) -> Optional[float]:
    try:
        return float(val)
    except (TypeError, ValueError):
        return None


def try_int(val) -> Optional[int]:
    try:
        return int(str(val).strip())
    except (TypeError, ValueError):
        return None


def parse_frames(val) -> Optional[int]:
    """Frame count from text: "inf" means unbounded (None)."""
    text = str(val).strip().lower()
    if text in ("inf", "infinite", "0"):
        return None
    count = try_int(text)
    if count is None or count < 0:
        raise ValueError(f"invalid frame count {val!r}")
    return count
