"""Rounding helpers for decimal places."""

from __future__ import annotations

import math


def round_down(val: float, places: int) -> float:
    """Round a float down to the given number of decimal places."""
    scale = 10.0**places
    return math.floor(val * scale) / scale


def round_up(val: float, places: int) -> float:
    """Round a float up to the given number of decimal places."""
    scale = 10.0**places
    return math.ceil(val * scale) / scale