"""Strict decimal parsing shared by the numeric constraint kinds."""

from __future__ import annotations

import math
import re
from typing import Any

# ASCII only; \d would also accept other Unicode digits.
_DECIMAL_RE = re.compile(r"-?[0-9]+(?:\.[0-9]+)?")


def parse_number(text: Any) -> float | None:
    """Parse *text* as a finite decimal number, or return None.

    Accepts an optional leading '-', ASCII digits and an optional single '.'
    followed by fractional digits.  Whitespace, thousands separators,
    exponents and values that overflow to infinity are all rejected.
    """
    if not isinstance(text, str):
        return None
    if not _DECIMAL_RE.fullmatch(text):
        return None
    value = float(text)
    if not math.isfinite(value):
        return None
    return value


def format_number(value: Any) -> str:
    """Render a bound for display: 10.0 -> '10', 5.5 -> '5.5'."""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
