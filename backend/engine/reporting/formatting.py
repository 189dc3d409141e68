"""Presentation formatting for rendered values."""

from __future__ import annotations

from typing import Any

MISSING = "-"


def fmt_currency(value: Any, symbol: str = "$") -> str:
    """Currency with thousands separators: 22100 -> "$22,100".

    Whole amounts drop the cents; fractional ones keep two places.
    Non-numeric values are shown as-is after the symbol.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return f"{symbol}{value}"
    sign = "-" if value < 0 else ""
    amount = abs(value)
    if float(amount).is_integer():
        return f"{sign}{symbol}{amount:,.0f}"
    return f"{sign}{symbol}{amount:,.2f}"


def fmt_qty(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def or_missing(value: Any) -> str:
    if value is None or value == "":
        return MISSING
    return str(value)
