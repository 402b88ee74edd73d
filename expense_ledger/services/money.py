"""Money / rounding helpers.

Centralized so every total (overall and per category) uses identical
parsing and summing semantics. Rounding to cents is for presentation only.
"""

from __future__ import annotations
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import math
from typing import Any, Iterable


def round2(value: float) -> float:
    try:
        return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        # too many digits to quantize; cents are meaningless at that scale
        return float(value)


def sum_amounts(values: Iterable[float]) -> float:
    """Sum through ``Decimal`` so ``0.1 + 0.2`` is ``0.3`` without dropping sub-cent parts."""
    return float(sum((Decimal(str(v)) for v in values), Decimal(0)))


def parse_amount(value: Any, default: float = 0.0) -> float:
    """Parse a stored amount, returning ``default`` when it is not a finite number.

    Rows edited outside the ledger can hold text or NULL in the REAL column;
    those must count as ``default`` instead of breaking a total.
    """
    if isinstance(value, bool) or value is None:
        return default
    try:
        if isinstance(value, str):
            parsed = float(Decimal(value.strip()))
        else:
            parsed = float(value)
    except (TypeError, ValueError, InvalidOperation, OverflowError):
        return default
    if not math.isfinite(parsed):
        return default
    return parsed
