"""Pricing engine: per-item and aggregate totals for a quote's line items.

All arithmetic is plain float. Nothing is clamped or rejected: an amount
discount larger than the gross produces a negative net, and NaN coming from an
empty numeric field propagates into every total that includes the item.
"""
from __future__ import annotations

from typing import Iterable

from .schemas import LineItem, QuoteTotals


def item_gross(item: LineItem) -> float:
    return item.quantity * item.unit_price


def item_discount_amount(item: LineItem) -> float:
    if item.discount_type == "percentage":
        return item.quantity * item.unit_price * (item.discount / 100)
    return item.discount


def item_net(item: LineItem) -> float:
    return item.quantity * item.unit_price - item_discount_amount(item)


def item_tax(item: LineItem) -> float:
    return item_net(item) * (item.tax_rate / 100)


def item_row_total(item: LineItem) -> float:
    """Row amount shown in item tables; tax is totalled separately."""
    return item_net(item)


def subtotal(items: Iterable[LineItem]) -> float:
    return sum((item_gross(i) for i in items), 0.0)


def total_discount(items: Iterable[LineItem]) -> float:
    return sum((item_discount_amount(i) for i in items), 0.0)


def total_tax(items: Iterable[LineItem]) -> float:
    return sum((item_tax(i) for i in items), 0.0)


def grand_total(items: Iterable[LineItem]) -> float:
    items = list(items)
    return subtotal(items) - total_discount(items) + total_tax(items)


def compute_totals(items: Iterable[LineItem]) -> QuoteTotals:
    """Every aggregate a renderer needs, computed once from the same items."""
    items = list(items)
    sub = subtotal(items)
    disc = total_discount(items)
    tax = total_tax(items)
    return QuoteTotals(
        subtotal=sub,
        total_discount=disc,
        total_tax=tax,
        grand_total=sub - disc + tax,
        has_discount=any(i.discount > 0 for i in items),
    )
