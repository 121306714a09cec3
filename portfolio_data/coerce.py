from __future__ import annotations

import math
from typing import Any, Union

Number = Union[int, float]

TRUE_VALUES = {"true", "1", "yes"}
RADIX_PREFIXES = ("0x", "0o", "0b")


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if not isinstance(value, str):
        return False
    return value.strip().lower() in TRUE_VALUES


def to_number(value: Any, fallback: Number = 0) -> Number:
    """
    Parse a numeric cell, returning `fallback` for empty, invalid or non-finite input.

    Integral values come back as int so they serialize as 2 rather than 2.0.
    """

    if value is None or isinstance(value, bool):
        return fallback
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        # float() accepts digit separators; spreadsheet cells should not.
        if not text or "_" in text:
            return fallback
        try:
            if text[:2].lower() in RADIX_PREFIXES:
                # Unsigned only: "0x10" is 16, "-0x10" falls back.
                return int(text, 0)
            number = float(text)
        except ValueError:
            return fallback

    if not math.isfinite(number):
        return fallback
    if number.is_integer():
        return int(number)
    return number
