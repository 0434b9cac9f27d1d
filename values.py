"""Numeric coercion helpers shared by every costing engine."""
from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Context, Decimal, localcontext

# Enough digits to quantize any finite float to 4 dp.
_ROUNDING_PRECISION = 400


def to_number(raw: object) -> float:
    """Coerce form/JSON input to a finite float, 0.0 for anything unusable.

    Sign is preserved; callers decide whether negatives are acceptable.
    """
    if raw is None or isinstance(raw, bool):
        return 0.0
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return 0.0
    try:
        value = float(raw)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return value


def non_negative(raw: object) -> float:
    return max(0.0, to_number(raw))


def _quantize(value: float, places: str) -> float:
    if not math.isfinite(value):
        return 0.0
    with localcontext(Context(prec=_ROUNDING_PRECISION)):
        return float(Decimal(str(value)).quantize(Decimal(places), rounding=ROUND_HALF_UP))


def round2(value: float) -> float:
    return _quantize(value, "0.01")


def round4(value: float) -> float:
    return _quantize(value, "0.0001")
