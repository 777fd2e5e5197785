"""Quote store: the canonical document list, numbering, and lifecycle."""
from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Dict, List, Mapping, Optional

from pydantic import ValidationError

from .exceptions import QuoteNotFoundError
from .i18n import strings_for
from .schemas import AppSettings, LineItem, Quote, QuoteStatus, StatusCounts, ViewTab
from .storage import QUOTES_KEY, LocalStorage
from .themes import resolve_template_id, theme_for
from .utils import expiry_for, format_doc_number, iso_day, new_id, parse_date

logger = logging.getLogger(__name__)

ConfirmPrompt = Callable[[str], bool]
NumberConsumed = Callable[[int], None]


class QuoteStore:
    """Owns the saved quotes plus the editor/navigation state around them.

    The store never touches the settings counter itself: ``create_quote``
    leaves the increment to the caller and ``duplicate_quote`` reports the
    consumed number through a callback.
    """

    def __init__(self, storage: LocalStorage, today: Callable[[], date] = date.today) -> None:
        self.storage = storage
        self.today = today
        self._quotes: List[Quote] = self._load()
        self.current_quote: Optional[Quote] = None
        self.is_editing = False
        self.is_preview_open = False
        self.active_tab: ViewTab = "dashboard"

    @property
    def quotes(self) -> List[Quote]:
        return list(self._quotes)

    # Lifecycle
    def create_quote(self, settings: AppSettings, template_id: Optional[str] = None) -> Quote:
        selected = resolve_template_id(template_id, settings)
        issued = self.today()
        quote = Quote(
            id=new_id(),
            number=format_doc_number(settings.doc_number_prefix or "QT-", settings.next_doc_number or 1001),
            client_name="",
            client_email="",
            issue_date=iso_day(issued),
            expiry_date=expiry_for(issued),
            currency=settings.default_currency,
            items=[self.blank_item(settings)],
            status=QuoteStatus.DRAFT,
            template_id=selected,
            theme=theme_for(selected, settings),
            terms=settings.default_terms or "",
            notes=settings.default_footer_notes or "",
            language=settings.language,
        )
        logger.info("Created %s with template %s", quote.number, selected)
        self.open_quote(quote)
        return quote

    def save_quote(self, quote: Quote, close_editor: bool = True) -> None:
        index = self._index_of(quote.id)
        if index is None:
            self._quotes.insert(0, quote)
            logger.info("Saved new quote %s", quote.display_id)
        else:
            self._quotes[index] = quote
            logger.info("Updated quote %s", quote.display_id)
        self._persist()

        if close_editor:
            self.is_editing = False
            self.is_preview_open = False
            self.active_tab = "quotes"
            self.current_quote = None

    def duplicate_quote(self, quote: Quote, settings: AppSettings,
                        on_number_consumed: Optional[NumberConsumed] = None,
                        strings: Optional[Mapping[str, str]] = None) -> Quote:
        strings = strings or strings_for(settings.language)
        copy = quote.model_copy(deep=True)
        copy.id = new_id()
        copy.number = format_doc_number(settings.doc_number_prefix, settings.next_doc_number)
        copy.issue_date = iso_day(self.today())
        copy.status = QuoteStatus.DRAFT
        copy.client_name = f"{quote.client_name} {strings['copySuffix']}"

        if on_number_consumed is not None:
            on_number_consumed(settings.next_doc_number + 1)

        self._quotes.insert(0, copy)
        self._persist()
        logger.info("Duplicated %s as %s", quote.display_id, copy.number)
        self.open_quote(copy)
        return copy

    def delete_quote(self, quote_id: str, confirm: ConfirmPrompt,
                     strings: Optional[Mapping[str, str]] = None) -> bool:
        strings = strings or strings_for("en")
        if not confirm(strings["deleteConfirm"]):
            return False
        before = len(self._quotes)
        self._quotes = [q for q in self._quotes if q.id != quote_id]
        if len(self._quotes) != before:
            self._persist()
            logger.info("Deleted quote %s", quote_id)
        if self.current_quote is not None and self.current_quote.id == quote_id:
            self.is_editing = False
            self.current_quote = None
        return len(self._quotes) != before

    def update_quote_status(self, quote: Quote, new_status: QuoteStatus) -> Optional[Quote]:
        """Overwrite the stored status; every transition is allowed."""
        index = self._index_of(quote.id)
        if index is None:
            return None
        updated = self._quotes[index].model_copy(update={"status": QuoteStatus(new_status)})
        self._quotes[index] = updated
        self._persist()
        logger.info("Quote %s status %s -> %s", updated.display_id, quote.status.value, updated.status.value)
        return updated

    # Navigation state
    def open_quote(self, quote: Quote) -> None:
        self.current_quote = quote
        self.is_editing = True
        self.is_preview_open = False

    def set_current_quote(self, quote: Optional[Quote]) -> None:
        self.current_quote = quote

    def set_editing(self, editing: bool) -> None:
        self.is_editing = editing

    def set_preview_open(self, is_open: bool) -> None:
        self.is_preview_open = is_open

    def set_active_tab(self, tab: ViewTab) -> None:
        self.active_tab = tab

    # Queries
    def get_quote(self, key: str) -> Quote:
        """Look a quote up by id, then by document number."""
        for quote in self._quotes:
            if quote.id == key:
                return quote
        for quote in self._quotes:
            if quote.number == key:
                return quote
        raise QuoteNotFoundError(key)

    def filter_quotes(self, search: str = "", status: Optional[QuoteStatus] = None) -> List[Quote]:
        term = (search or "").lower()
        matches = [
            q for q in self._quotes
            if (term in q.client_name.lower() or term in q.number.lower())
            and (status is None or q.status == status)
        ]
        return _newest_first(matches)

    def status_counts(self) -> StatusCounts:
        counts: Dict[QuoteStatus, int] = {s: 0 for s in QuoteStatus}
        for quote in self._quotes:
            counts[quote.status] += 1
        return StatusCounts(
            total=len(self._quotes),
            draft=counts[QuoteStatus.DRAFT],
            finalized=counts[QuoteStatus.FINALIZED],
            won=counts[QuoteStatus.WON],
            lost=counts[QuoteStatus.LOST],
        )

    def latest_draft(self) -> Optional[Quote]:
        drafts = _newest_first([q for q in self._quotes if q.status == QuoteStatus.DRAFT])
        return drafts[0] if drafts else None

    def recent_quotes(self, limit: int = 5) -> List[Quote]:
        return _newest_first(self._quotes)[:limit]

    def saved_clients(self) -> List[str]:
        seen: Dict[str, None] = {}
        for quote in self._quotes:
            if quote.client_name.strip():
                seen.setdefault(quote.client_name, None)
        return list(seen)

    @staticmethod
    def blank_item(settings: AppSettings) -> LineItem:
        return LineItem(
            id=new_id(),
            description="",
            quantity=1,
            unit_price=0,
            tax_rate=settings.default_tax_rate,
            discount=0,
            discount_type="amount",
        )

    # Internals
    def _index_of(self, quote_id: str) -> Optional[int]:
        for i, quote in enumerate(self._quotes):
            if quote.id == quote_id:
                return i
        return None

    def _load(self) -> List[Quote]:
        raw = self.storage.read(QUOTES_KEY)
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning("Stored quotes are not a list, starting empty")
            return []
        try:
            return [Quote.model_validate(item) for item in raw]
        except ValidationError as exc:
            logger.warning("Stored quotes are invalid, starting empty: %s", exc)
            return []

    def _persist(self) -> None:
        self.storage.write(QUOTES_KEY, [q.model_dump(by_alias=True) for q in self._quotes])


def _newest_first(quotes: List[Quote]) -> List[Quote]:
    return sorted(quotes, key=lambda q: parse_date(q.issue_date) or date.min, reverse=True)
