"""
Safe numeric parsing for parking-space counts.

- missing / null / empty   -> default
- non-numeric / non-finite -> default (+ warning)
- anything else            -> rounded half-up, clamped to >= 0
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional, Tuple

from parking_validator.utils.logger import get_logger

log = get_logger(__name__)


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def coerce_number(value: Any) -> Tuple[Optional[int], bool]:
    """
    Return (rounded value, is_valid) without clamping.

    Blank input gives (None, True); garbage gives (None, False).
    """
    if is_blank(value):
        return None, True

    if isinstance(value, bool):
        return int(value), True

    # Integers stay exact; float() overflows past ~1e308
    if isinstance(value, int):
        return value, True

    if isinstance(value, float):
        num = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            return int(text), True
        except ValueError:
            pass
        try:
            num = float(text)
        except ValueError:
            return None, False
    else:
        return None, False

    if not math.isfinite(num):
        return None, False

    return round_half_up(num), True


def parse_number(value: Any, default: int = 0, logger: Optional[logging.Logger] = None) -> int:
    """Coerce to a non-negative integer, falling back to ``default``."""
    rounded, valid = coerce_number(value)

    if not valid:
        (logger or log).warning(f"Invalid number value: {value!r}, using default: {default}")
        return default

    if rounded is None:
        return default

    return max(0, rounded)
