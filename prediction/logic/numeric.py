"""
Numeric helpers shared by the prediction engine.
"""

import math
import re
from typing import Optional


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, with .5 always rounding up.

    The rank tables are calibrated against this rounding; Python's built-in
    round() uses banker's rounding and would shift ranks on exact halves.
    """
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


_NON_DIGITS = re.compile(r"[^\d]")


def parse_fee_amount(fees: Optional[str]) -> Optional[int]:
    """
    Extract the numeric amount from a display fee string.

    "₹6,50,000/year" -> 650000. Returns None when the string has no digits.
    """
    if not fees:
        return None
    digits = _NON_DIGITS.sub("", fees)
    if not digits:
        return None
    return int(digits)
