"""
Currency arithmetic.

Every monetary field passes through to_amount() before it is compared or
summed. Non-numeric, NaN, infinite and negative input becomes 0 instead of
raising, so a malformed value can never turn a total into NaN or push a
balance below zero. Callers that must reject bad input (request schemas)
validate before reaching this layer.
"""
import math
from typing import Any, Iterable

def to_amount(value: Any) -> float:
    """Coerce any value to a non-negative finite amount rounded to 2 decimals"""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number) or number < 0:
        return 0.0
    return round_money(number)

def round_money(value: float) -> float:
    # + 0.0 folds -0.0 into 0.0
    return round(value, 2) + 0.0

def sum_amounts(values: Iterable[Any]) -> float:
    return round_money(sum(to_amount(v) for v in values))
