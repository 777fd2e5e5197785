"""Quote checks: completeness, format, business, and anomaly rules.

The report is advisory. No store operation consults it, so documents with
errors can still be saved, finalized, and exported.
"""
from __future__ import annotations

import math
from collections import Counter
from typing import Iterable, List

from .pricing import item_net
from .schemas import Quote, QuoteValidationResult, ValidationResponse, ValidationSummary
from .utils import ALLOWED_CURRENCIES, parse_date

ITEM_NUMERIC_FIELDS = ("quantity", "unit_price", "tax_rate", "discount")


class QuoteValidator:
    def __init__(self, allowed_currencies: Iterable[str] = ALLOWED_CURRENCIES) -> None:
        self.allowed_currencies = set(allowed_currencies)

    def validate_quotes(self, quotes: List[Quote]) -> ValidationResponse:
        seen_numbers: set[str] = set()
        results: List[QuoteValidationResult] = []
        error_counter: Counter[str] = Counter()

        for quote in quotes:
            errors: list[str] = []
            warnings: list[str] = []

            # Numbering
            if not quote.number:
                errors.append("missing_field: number")
            elif quote.number in seen_numbers:
                errors.append("anomaly: duplicate_number")
            else:
                seen_numbers.add(quote.number)

            # Completeness
            if not quote.client_name.strip():
                warnings.append("missing_field: client_name")
            if not quote.items:
                warnings.append("anomaly: no_line_items")

            # Dates
            issued = parse_date(quote.issue_date)
            expires = parse_date(quote.expiry_date)
            if not issued:
                errors.append("format: issue_date_unparseable")
            if not expires:
                errors.append("format: expiry_date_unparseable")
            if issued and expires and expires < issued:
                errors.append("business: expiry_before_issue_date")

            # Currency
            if quote.currency not in self.allowed_currencies:
                errors.append("format: currency_unknown")

            # Items
            for position, item in enumerate(quote.items, start=1):
                for field in ITEM_NUMERIC_FIELDS:
                    value = getattr(item, field)
                    if math.isnan(value):
                        errors.append(f"format: item_{field}_not_numeric")
                    elif value < 0:
                        errors.append(f"business: item_{field}_negative")
                if item.discount_type == "percentage" and item.discount > 100:
                    warnings.append("business: item_discount_over_100_percent")
                net = item_net(item)
                if not math.isnan(net) and net < 0:
                    warnings.append(f"business: item_{position}_net_negative")

            result = QuoteValidationResult(
                quote_id=quote.display_id,
                is_valid=len(errors) == 0,
                errors=errors,
                warnings=warnings,
            )
            results.append(result)
            error_counter.update(errors)

        summary = ValidationSummary(
            total_quotes=len(results),
            valid_quotes=sum(1 for r in results if r.is_valid),
            invalid_quotes=sum(1 for r in results if not r.is_valid),
            error_counts=dict(error_counter),
        )
        return ValidationResponse(summary=summary, results=results)
