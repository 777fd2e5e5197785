"""Composition root: builds the stores once and wires them together."""
from __future__ import annotations

import logging
import time
from datetime import date
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .config import AppConfig
from .editor import EditorSession
from .exceptions import QuoteTonicError
from .export import export_pdf
from .i18n import strings_for
from .quote_store import ConfirmPrompt, QuoteStore
from .schemas import AppSettings, Quote, QuoteStatus, ValidationResponse
from .settings_store import SettingsStore
from .storage import LocalStorage
from .themes import THEME_PRESETS, theme_for
from .tutorial import TutorialController
from .validator import QuoteValidator

logger = logging.getLogger(__name__)


class Workspace:
    """One per process. The CLI, the API, and the tutorial all go through it.

    Operations that involve both stores (creating or duplicating a document
    consumes a number from the settings counter) are coordinated here so the
    stores stay unaware of each other.
    """

    def __init__(self, config: AppConfig, today: Callable[[], date] = date.today,
                 clock: Callable[[], float] = time.monotonic) -> None:
        self.config = config
        self.clock = clock
        self.storage = LocalStorage(config.home)
        self.settings_store = SettingsStore(self.storage)
        self.quote_store = QuoteStore(self.storage, today=today)
        self.validator = QuoteValidator()
        self.editor: Optional[EditorSession] = None
        self.tutorial = TutorialController(self)

    @property
    def settings(self) -> AppSettings:
        return self.settings_store.settings

    @property
    def strings(self) -> Dict[str, str]:
        return strings_for(self.settings.language)

    # Documents
    def create_quote(self, template_id: Optional[str] = None) -> Quote:
        _check_template(template_id)
        quote = self.quote_store.create_quote(self.settings, template_id)
        self.settings_store.increment_doc_number()
        self._start_editor(quote)
        return quote

    def duplicate_quote(self, key: str) -> Quote:
        source = self.quote_store.get_quote(key)
        copy = self.quote_store.duplicate_quote(
            source, self.settings, self.settings_store.consume_doc_number, self.strings
        )
        self._start_editor(copy)
        return copy

    def edit_quote(self, key: str) -> EditorSession:
        quote = self.quote_store.get_quote(key)
        self.quote_store.open_quote(quote)
        return self._start_editor(quote)

    def save_quote(self, quote: Quote, close_editor: bool = True) -> Quote:
        self.quote_store.save_quote(quote, close_editor=close_editor)
        if close_editor:
            self.discard_editor()
        elif self.editor is not None and self.editor.quote.id == quote.id:
            self._start_editor(quote)
        return quote

    def delete_quote(self, key: str, confirm: ConfirmPrompt) -> bool:
        quote = self.quote_store.get_quote(key)
        deleted = self.quote_store.delete_quote(quote.id, confirm, self.strings)
        if deleted and self.editor is not None and self.editor.quote.id == quote.id:
            self.discard_editor()
        return deleted

    def update_status(self, key: str, status: QuoteStatus) -> Quote:
        quote = self.quote_store.get_quote(key)
        updated = self.quote_store.update_quote_status(quote, status) or quote
        # the open document and its editor copy carry the stored status
        current = self.quote_store.current_quote
        if current is not None and current.id == updated.id:
            self.quote_store.set_current_quote(current.model_copy(update={"status": updated.status}))
        if self.editor is not None and self.editor.quote.id == updated.id:
            self.editor.quote.status = updated.status
        return updated

    def apply_template(self, template_id: str) -> Optional[Quote]:
        """Switch the current document to another template and its theme."""
        _check_template(template_id)
        self.flush_editor()
        current = self.quote_store.current_quote
        if current is None:
            return None
        updated = current.model_copy(update={
            "template_id": template_id,
            "theme": theme_for(template_id, self.settings),
        })
        self.quote_store.set_current_quote(updated)
        self._start_editor(updated)
        logger.info("Applied template %s to %s", template_id, updated.display_id)
        return updated

    # Editor
    def flush_editor(self) -> None:
        if self.editor is not None and self.editor.dirty:
            self.editor.flush()

    def discard_editor(self) -> None:
        self.editor = None

    def save_editor(self, close_editor: bool = True) -> Optional[Quote]:
        if self.editor is None:
            return None
        saved = self.editor.save(close_editor=close_editor)
        if close_editor:
            self.discard_editor()
        return saved

    # Checks and export
    def validate(self, quotes: Optional[List[Quote]] = None) -> ValidationResponse:
        """Check ``quotes``, or the saved quotes when none are given."""
        return self.validator.validate_quotes(self.quote_store.quotes if quotes is None else quotes)

    def export_pdf(self, key: str, output: Optional[Path] = None) -> Path:
        quote = self.quote_store.get_quote(key)
        target = output or Path.cwd() / f"{quote.number}.pdf"
        return export_pdf(quote, self.settings, target)

    # Internals
    def _start_editor(self, quote: Quote) -> EditorSession:
        self.editor = EditorSession(
            self.quote_store, lambda: self.settings_store.settings, quote,
            debounce_ms=self.config.debounce_ms, clock=self.clock,
        )
        return self.editor


def _check_template(template_id: Optional[str]) -> None:
    if template_id and template_id not in THEME_PRESETS:
        raise QuoteTonicError(f"Unknown template '{template_id}'", error_code="UNKNOWN_TEMPLATE")
