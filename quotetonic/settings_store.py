"""Settings store: company profile, defaults, theme, and the numbering counter."""
from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from pydantic import ValidationError

from .exceptions import SettingsError
from .schemas import AppSettings, CustomField, ThemeConfig
from .storage import SETTINGS_KEY, LocalStorage
from .themes import THEME_PRESETS

logger = logging.getLogger(__name__)

COMPANY_FIELDS = frozenset({
    "company_name", "representative_name", "company_address", "company_reg_no",
    "company_email", "company_phone", "bank_info", "company_website",
    "company_slogan", "business_type", "business_item",
})


class SettingsStore:
    """Owns the single ``AppSettings`` record.

    Every change goes through a named method; each method validates the merged
    record and persists it immediately.
    """

    def __init__(self, storage: LocalStorage) -> None:
        self.storage = storage
        self._settings = self._load()

    @property
    def settings(self) -> AppSettings:
        return self._settings

    # Profile and defaults
    def set_language(self, language: str) -> AppSettings:
        if language not in ("en", "ko"):
            raise SettingsError(f"Unsupported language '{language}'")
        return self._update(language=language)

    def set_company_profile(self, **fields: Any) -> AppSettings:
        unknown = set(fields) - COMPANY_FIELDS
        if unknown:
            raise SettingsError(f"Unknown company field(s): {', '.join(sorted(unknown))}")
        return self._update(**fields)

    def set_defaults(self, currency: Optional[str] = None, tax_rate: Optional[float] = None,
                     template_id: Optional[str] = None, terms: Optional[str] = None,
                     footer_notes: Optional[str] = None) -> AppSettings:
        updates: dict[str, Any] = {}
        if currency is not None:
            updates["default_currency"] = currency
        if tax_rate is not None:
            updates["default_tax_rate"] = tax_rate
        if template_id is not None:
            updates["default_template_id"] = template_id
        if terms is not None:
            updates["default_terms"] = terms
        if footer_notes is not None:
            updates["default_footer_notes"] = footer_notes
        return self._update(**updates)

    def set_numbering(self, prefix: Optional[str] = None, next_number: Optional[int] = None) -> AppSettings:
        updates: dict[str, Any] = {}
        if prefix is not None:
            updates["doc_number_prefix"] = prefix
        if next_number is not None:
            if next_number < self._settings.next_doc_number:
                raise SettingsError(
                    f"Document counter cannot go back from {self._settings.next_doc_number} to {next_number}"
                )
            updates["next_doc_number"] = next_number
        return self._update(**updates)

    def set_logo(self, data_url: str) -> AppSettings:
        return self._update(company_logo=data_url)

    def set_seal(self, data_url: str) -> AppSettings:
        return self._update(company_seal=data_url)

    def set_monthly_goal(self, goal: float) -> AppSettings:
        return self._update(monthly_goal=goal)

    def set_custom_fields(self, fields: Iterable[CustomField]) -> AppSettings:
        return self._update(custom_fields=[f.model_dump() for f in fields])

    # Theme
    def update_theme(self, **fields: Any) -> AppSettings:
        merged = {**self._settings.theme.model_dump(), **fields}
        try:
            theme = ThemeConfig.model_validate(merged)
        except ValidationError as exc:
            raise SettingsError(f"Invalid theme: {exc}") from exc
        return self._update(theme=theme.model_dump())

    def apply_template_theme(self, template_id: str) -> AppSettings:
        preset = THEME_PRESETS.get(template_id)
        if preset is None:
            raise SettingsError(f"Unknown template '{template_id}'")
        return self._update(default_template_id=template_id, theme=preset.model_dump())

    # Tutorial flags
    def mark_tutorial_seen(self) -> AppSettings:
        return self._update(has_seen_tutorial=True)

    def set_tutorial_step(self, step: int) -> AppSettings:
        return self._update(tutorial_step=step)

    # Numbering
    def increment_doc_number(self) -> int:
        consumed = self._settings.next_doc_number
        self._update(next_doc_number=consumed + 1)
        logger.debug("Document number %s consumed", consumed)
        return self._settings.next_doc_number

    def consume_doc_number(self, next_number: int) -> int:
        """Accept a counter value reported by a store; never moves it backwards."""
        if next_number > self._settings.next_doc_number:
            self._update(next_doc_number=next_number)
        return self._settings.next_doc_number

    def reset(self) -> AppSettings:
        # keep the counter so numbers issued before the reset stay unique
        counter = self._settings.next_doc_number
        self._settings = AppSettings(next_doc_number=counter)
        self._persist()
        return self._settings

    # Internals
    def _load(self) -> AppSettings:
        raw = self.storage.read(SETTINGS_KEY)
        if raw is None:
            return AppSettings()
        try:
            return AppSettings.model_validate(raw)
        except ValidationError as exc:
            logger.warning("Stored settings are invalid, using defaults: %s", exc)
            return AppSettings()

    def _update(self, **updates: Any) -> AppSettings:
        if not updates:
            return self._settings
        merged = {**self._settings.model_dump(), **updates}
        try:
            self._settings = AppSettings.model_validate(merged)
        except ValidationError as exc:
            raise SettingsError(f"Invalid settings update: {exc}") from exc
        self._persist()
        return self._settings

    def _persist(self) -> None:
        self.storage.write(SETTINGS_KEY, self._settings.model_dump(by_alias=True))
