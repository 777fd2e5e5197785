"""Utility functions shared across the quote stores, editor, and renderers."""
from __future__ import annotations

import math
import re
import uuid
from datetime import date, timedelta
from typing import Optional

from dateutil import parser

ALLOWED_CURRENCIES = {"USD", "KRW", "EUR", "GBP", "JPY", "CNY"}
CURRENCY_SYMBOLS = {"USD": "$", "KRW": "₩", "EUR": "€", "GBP": "£", "JPY": "¥", "CNY": "¥"}
DOC_NUMBER_WIDTH = 6
EXPIRY_DAYS = 14


def new_id() -> str:
    """Short opaque identifier for quotes, items and custom fields."""
    return uuid.uuid4().hex[:9]


def format_doc_number(prefix: str, number: int) -> str:
    return f"{prefix}{int(number):0{DOC_NUMBER_WIDTH}d}"


def iso_day(value: date) -> str:
    return value.isoformat()


def expiry_for(issued: date, days: int = EXPIRY_DAYS) -> str:
    return (issued + timedelta(days=days)).isoformat()


def parse_date(value: str) -> Optional[date]:
    """Parse a date string into a date object; returns None on failure."""
    if not value:
        return None
    try:
        return parser.parse(value, dayfirst=False, yearfirst=True).date()
    except (ValueError, TypeError, OverflowError):
        return None


def to_number(value: object) -> float:
    """Coerce a free-text numeric field the way a browser number input does.

    Empty or unparseable input becomes NaN rather than raising, so the value
    flows into totals visibly instead of being silently dropped.
    """
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    if value is None:
        return math.nan
    text = str(value).strip()
    m = re.match(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", text)
    if not m:
        return math.nan
    return float(m.group(0))


def strip_to_number(value: str) -> float:
    """Keep digits and dots only (spreadsheet paste); NaN if nothing remains."""
    cleaned = re.sub(r"[^0-9.]", "", value or "")
    try:
        return float(cleaned)
    except ValueError:
        return math.nan


def format_money(amount: float, currency: str = "") -> str:
    if math.isnan(amount):
        body = "NaN"
    elif float(amount).is_integer():
        body = f"{amount:,.0f}"
    else:
        body = f"{amount:,.2f}"
    return f"{currency} {body}".strip()


def currency_symbol(currency: str) -> str:
    return CURRENCY_SYMBOLS.get(currency, "$")
