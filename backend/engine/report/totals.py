"""Per-category and grand totals over the depreciation ledger."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .model import LineItem


@dataclass
class Totals:
    """Subtotals keyed by category (first-seen order) plus the grand total."""
    by_category: dict[str, float] = field(default_factory=dict)
    grand_total: float = 0


def compute_totals(line_items: Iterable[LineItem]) -> Totals:
    """Sum effective totals by category and overall.

    No rounding is applied. Values are combined with plain ``+`` so that
    whatever the arithmetic yields, including an exception for
    non-numeric inputs, reaches the caller unchanged.
    """
    by_category: dict[str, float] = {}
    grand_total: float = 0
    for item in line_items:
        total = item.effective_total()
        if item.category in by_category:
            by_category[item.category] = by_category[item.category] + total
        else:
            by_category[item.category] = total
        grand_total = grand_total + total
    return Totals(by_category=by_category, grand_total=grand_total)
