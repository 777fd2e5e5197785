"""Editor session: a debounced working copy of the quote being edited."""
from __future__ import annotations

import logging
import math
import time
from typing import Any, Callable, List, Optional, Tuple
from urllib.parse import quote as url_quote

from .i18n import strings_for
from .pricing import compute_totals
from .quote_store import QuoteStore
from .schemas import AppSettings, LineItem, Quote, QuoteTotals
from .utils import currency_symbol, format_money, new_id, strip_to_number, to_number

logger = logging.getLogger(__name__)

NUMERIC_ITEM_FIELDS = frozenset({"quantity", "unit_price", "tax_rate", "discount"})
TEXT_ITEM_FIELDS = frozenset({"description", "unit"})


class EditorSession:
    """Holds the editable copy of ``QuoteStore.current_quote``.

    Edits only touch the working copy. The copy is pushed back into the store
    as a whole object once ``debounce_ms`` has passed since the last edit
    (see ``poll``), or immediately on ``flush``/``save``. ``settings`` is a
    provider so defaults and company details are read when they are used.
    """

    def __init__(self, store: QuoteStore, settings: Callable[[], AppSettings], quote: Quote,
                 debounce_ms: int = 500, clock: Callable[[], float] = time.monotonic) -> None:
        self.store = store
        self._settings = settings
        self.quote = quote.model_copy(deep=True)
        self.debounce_ms = debounce_ms
        self.clock = clock
        self._last_edit: Optional[float] = None

    @property
    def settings(self) -> AppSettings:
        return self._settings()

    @property
    def dirty(self) -> bool:
        return self._last_edit is not None

    # Document fields
    def set_client(self, name: Optional[str] = None, email: Optional[str] = None) -> None:
        if name is not None:
            self.quote.client_name = name
        if email is not None:
            self.quote.client_email = email
        self._touch()

    def set_dates(self, issue_date: Optional[str] = None, expiry_date: Optional[str] = None) -> None:
        if issue_date is not None:
            self.quote.issue_date = issue_date
        if expiry_date is not None:
            self.quote.expiry_date = expiry_date
        self._touch()

    def set_currency(self, currency: str) -> None:
        self.quote.currency = currency
        self._touch()

    def set_doc_type(self, doc_type: str) -> None:
        if doc_type not in ("quote", "invoice"):
            raise ValueError(f"Unknown document type '{doc_type}'")
        self.quote.doc_type = doc_type  # type: ignore[assignment]
        self._touch()

    def set_terms(self, terms: str) -> None:
        self.quote.terms = terms
        self._touch()

    def apply_terms_preset(self, preset: str) -> None:
        if not preset:
            return
        self.set_terms(preset)

    def set_notes(self, notes: str) -> None:
        self.quote.notes = notes
        self._touch()

    # Items
    def add_item(self) -> LineItem:
        item = QuoteStore.blank_item(self.settings)
        self.quote.items.append(item)
        self._touch()
        return item

    def remove_item(self, item_id: str) -> None:
        self.quote.items = [i for i in self.quote.items if i.id != item_id]
        self._touch()

    def update_item(self, item_id: str, **fields: Any) -> LineItem:
        item = self._item(item_id)
        for name, value in fields.items():
            if name in NUMERIC_ITEM_FIELDS:
                setattr(item, name, to_number(value))
            elif name in TEXT_ITEM_FIELDS:
                setattr(item, name, value)
            elif name == "discount_type":
                if value not in ("amount", "percentage"):
                    raise ValueError(f"Unknown discount type '{value}'")
                item.discount_type = value
            else:
                raise ValueError(f"Unknown item field '{name}'")
        self._touch()
        return item

    def move_item(self, index: int, direction: str) -> None:
        items = self.quote.items
        target = index - 1 if direction == "up" else index + 1
        if not (0 <= index < len(items) and 0 <= target < len(items)):
            return
        items[index], items[target] = items[target], items[index]
        self._touch()

    def duplicate_item(self, item_id: str) -> LineItem:
        source = self._item(item_id)
        item = source.model_copy(update={"id": new_id(), "description": f"{source.description} (Copy)"})
        self.quote.items.append(item)
        self._touch()
        return item

    def bulk_import(self, text: str) -> List[LineItem]:
        """Append one item per pasted row: ``description[, qty], price``.

        Rows split on tabs when present (spreadsheet paste), else on commas.
        """
        if not text.strip():
            return []
        added: List[LineItem] = []
        for row in text.strip().split("\n"):
            parts = row.split("\t") if "\t" in row else row.split(",")
            description = parts[0].strip() if parts else ""
            qty = strip_to_number(parts[1]) if len(parts) > 2 else 1.0
            if len(parts) > 1:
                price = strip_to_number(parts[2] if len(parts) > 2 else parts[1])
            else:
                price = 0.0
            added.append(LineItem(
                id=new_id(),
                description=description,
                quantity=1.0 if math.isnan(qty) else qty,
                unit_price=0.0 if math.isnan(price) else price,
                tax_rate=self.settings.default_tax_rate,
                discount=0,
                discount_type="amount",
            ))
        self.quote.items.extend(added)
        self._touch()
        logger.debug("Imported %d items into %s", len(added), self.quote.number)
        return added

    def totals(self) -> QuoteTotals:
        return compute_totals(self.quote.items)

    # Sharing
    def email_draft(self, settings: Optional[AppSettings] = None) -> Tuple[str, str]:
        settings = settings or self.settings
        t = strings_for(self.quote.language)
        title = t["invoiceTitle"] if self.quote.doc_type == "invoice" else t["quotationTitle"]
        subject = f"[{title}] {self.quote.number} - {settings.company_name}"
        body = "\n".join([
            t["emailGreeting"].format(client=self.quote.client_name),
            "",
            t["emailIntro"].format(title=title.lower(), number=self.quote.number),
            "",
            f"- {t['emailDocNo']}: {self.quote.number}",
            f"- {t['issueDate']}: {self.quote.issue_date}",
            f"- {t['emailTotal']}: {format_money(self.totals().grand_total, self.quote.currency)}",
            "",
            t["emailClosing"],
            "",
            t["emailRegards"],
            settings.representative_name,
            settings.company_name,
        ])
        return subject, body

    def mailto_url(self, settings: Optional[AppSettings] = None) -> str:
        subject, body = self.email_draft(settings)
        return f"mailto:{self.quote.client_email}?subject={url_quote(subject)}&body={url_quote(body)}"

    def clipboard_summary(self, settings: Optional[AppSettings] = None) -> str:
        settings = settings or self.settings
        t = strings_for(self.quote.language)
        symbol = currency_symbol(self.quote.currency)
        title = t["invoiceTitle"] if self.quote.doc_type == "invoice" else t["quotationTitle"]
        lines = [
            f"[{title}] {self.quote.number}",
            f"{t['client']}: {self.quote.client_name}",
            f"{t['date']}: {self.quote.issue_date}",
            "",
        ]
        lines += [
            f"- {i.description} ({format_money(i.quantity)} x {symbol}{format_money(i.unit_price)})"
            for i in self.quote.items
        ]
        lines += [
            "",
            f"{t['grandTotal']}: {symbol}{format_money(self.totals().grand_total)}",
            "",
            settings.company_name,
            settings.representative_name,
        ]
        return "\n".join(lines)

    # Reconciliation
    def poll(self, now: Optional[float] = None) -> bool:
        """Reconcile if the debounce window has elapsed; True when it did."""
        if self._last_edit is None:
            return False
        now = self.clock() if now is None else now
        if (now - self._last_edit) * 1000 < self.debounce_ms:
            return False
        self.flush()
        return True

    def flush(self) -> None:
        self.store.set_current_quote(self.quote.model_copy(deep=True))
        self._last_edit = None

    def save(self, close_editor: bool = True) -> Quote:
        self.flush()
        saved = self.quote.model_copy(deep=True)
        self.store.save_quote(saved, close_editor=close_editor)
        return saved

    # Internals
    def _touch(self) -> None:
        self._last_edit = self.clock()

    def _item(self, item_id: str) -> LineItem:
        for item in self.quote.items:
            if item.id == item_id:
                return item
        raise KeyError(item_id)
