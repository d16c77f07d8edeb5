"""Tolerant parsing of free-text money input, and display formatting."""

from __future__ import annotations

import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Union

_NON_NUMERIC = re.compile(r"[^0-9.\-]")
_LEADING_NUMBER = re.compile(r"-?\d*\.?\d+|-?\d+\.?")

Number = Union[int, float, Decimal]


def parse_money(value: Any, default: Number = 0) -> Decimal:
    """Parse ``value`` into an exact Decimal, falling back to ``default``.

    Thousands separators, currency symbols and whitespace are stripped, so
    ``"SGD $1,234.50"`` parses to ``Decimal("1234.50")``. Anything that does
    not contain a number (``None``, ``""``, ``"n/a"``) returns ``default``.
    Booleans are not amounts and also return ``default``.
    """
    fallback = Decimal(str(default))

    if value is None or isinstance(value, bool):
        return fallback
    if isinstance(value, Decimal):
        return value if value.is_finite() else fallback
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return fallback
        return Decimal(str(value))

    cleaned = _NON_NUMERIC.sub("", str(value))
    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        return fallback
    try:
        parsed = Decimal(match.group(0))
    except InvalidOperation:
        return fallback
    return parsed if parsed.is_finite() else fallback


def to_amount(value: Any, default: Number = 0) -> float:
    """``parse_money`` for the float-based calculators.

    Numbers too large for a float fall back to ``default``.
    """
    amount = float(parse_money(value, default))
    return amount if math.isfinite(amount) else float(default)


def format_money(amount: Any, currency: str = "SGD") -> str:
    """Render ``amount`` as ``"SGD $1,234.50"``; negatives keep their sign."""
    number = parse_money(amount)
    quantized = number.quantize(Decimal("0.01"))
    sign = "-" if quantized < 0 else ""
    return f"{currency} {sign}${abs(quantized):,.2f}"
