"""
Two-decimal rounding for money and distances.

Exact ties round up (``68.125 -> 68.13``), the way the MI PANA clients
format amounts, instead of Python's round-half-to-even.  The float's exact
binary value is what gets rounded, so ``1.005`` (stored just below the tie)
still becomes ``1.0``.
"""

import math
from decimal import ROUND_HALF_UP, Decimal

_CENT = Decimal("0.01")


def round2(value: float) -> float:
    """Round *value* to 2 decimals, ties away from zero.  NaN / inf pass through."""
    if not math.isfinite(value):
        return value
    return float(Decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP))
