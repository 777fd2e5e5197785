"""Local storage: one JSON file per key inside the application home."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from .exceptions import StorageError

logger = logging.getLogger(__name__)

QUOTES_KEY = "quotes"
SETTINGS_KEY = "settings"


class LocalStorage:
    """Key/value blobs with browser ``localStorage`` failure semantics.

    Reads that fail for any reason (missing file, bad JSON, permissions)
    return ``None``; writes that fail are logged and reported as ``False``.
    Neither case raises, callers fall back to their defaults.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> Optional[Any]:
        try:
            return self._read(key)
        except StorageError as exc:
            logger.warning("Ignoring unreadable storage key %s: %s", key, exc)
            return None

    def write(self, key: str, value: Any) -> bool:
        try:
            self._write(key, value)
        except StorageError as exc:
            logger.warning("Could not persist storage key %s: %s", key, exc)
            return False
        return True

    def remove(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("Could not remove storage key %s: %s", key, exc)

    # Internals
    def _read(self, key: str) -> Optional[Any]:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StorageError(str(exc), context={"key": key}) from exc

    def _write(self, key: str, value: Any) -> None:
        path = self.path_for(key)
        tmp = path.with_suffix(".json.tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(value, indent=2, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp, path)
        except (OSError, TypeError, ValueError) as exc:
            raise StorageError(str(exc), context={"key": key}) from exc
