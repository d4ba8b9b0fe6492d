"""
Line amount and discount arithmetic.

Pure functions shared by the line-item entities, the collection manager and
the totals aggregator. Nothing here clamps or validates: a discount above 100
percent yields a negative amount, and callers are expected to coerce raw
input with ``coerce_number`` before calling in.
"""

import math
from typing import Any


def line_subtotal(unit_price: float, quantity: float) -> float:
    """Gross line value before discount."""
    return unit_price * quantity


def compute_amount(unit_price: float, quantity: float, discount_percent: float) -> float:
    """Line amount with a percentage discount."""
    subtotal = line_subtotal(unit_price, quantity)
    return subtotal - (subtotal * discount_percent / 100)


def compute_amount_from_discount_value(
    unit_price: float, quantity: float, discount_amount: float
) -> float:
    """Line amount with an absolute discount."""
    return line_subtotal(unit_price, quantity) - discount_amount


def percent_from_amount(unit_price: float, quantity: float, discount_amount: float) -> float:
    """Convert an absolute discount into a percentage of the line subtotal.

    Returns 0 when the subtotal is 0.
    """
    subtotal = line_subtotal(unit_price, quantity)
    if subtotal == 0:
        return 0.0
    return (discount_amount / subtotal) * 100


def amount_from_percent(unit_price: float, quantity: float, percent: float) -> float:
    """Convert a percentage discount into an absolute amount."""
    return line_subtotal(unit_price, quantity) * percent / 100


def coerce_number(raw: Any) -> float | None:
    """Parse raw form input into a non-negative number.

    Blank input is ``None`` (the field is missing). Anything unparsable,
    NaN, infinite or negative becomes 0.
    """
    if raw is None:
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(value) or math.isinf(value) or value < 0:
        return 0.0
    return value


def round_money(value: float, places: int = 2) -> float:
    """Round a money value for display or transport."""
    return round(value, places) + 0.0  # folds -0.0 into 0.0
