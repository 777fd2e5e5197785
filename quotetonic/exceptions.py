"""Exception types raised by the stores, renderers, and configuration."""
from __future__ import annotations

from typing import Any, Dict, Optional


class QuoteTonicError(Exception):
    def __init__(self, message: str, error_code: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


class ConfigurationError(QuoteTonicError):
    pass


class StorageError(QuoteTonicError):
    pass


class SettingsError(QuoteTonicError):
    pass


class QuoteNotFoundError(QuoteTonicError):
    def __init__(self, quote_id: str) -> None:
        super().__init__(f"No quote with id or number '{quote_id}'", context={"quote_id": quote_id})
        self.quote_id = quote_id


class ExportError(QuoteTonicError):
    """PDF rendering failed; ``message`` is already localized for the user."""
