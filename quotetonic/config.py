"""Runtime configuration: storage location, editor debounce, logging."""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError

ENV_HOME = "QUOTETONIC_HOME"
ENV_LOG_LEVEL = "QUOTETONIC_LOG_LEVEL"
ENV_DEBOUNCE_MS = "QUOTETONIC_DEBOUNCE_MS"
CONFIG_FILENAME = "config.json"


def default_home() -> Path:
    return Path.home() / ".quotetonic"


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    home: Path = Field(default_factory=default_home)
    debounce_ms: int = Field(500, ge=0)
    log_level: str = "INFO"
    log_file: Optional[Path] = None


def _read_config_file(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Cannot read {path}: {exc}", error_code="CONFIG_INVALID_FORMAT") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a JSON object", error_code="CONFIG_INVALID_FORMAT")
    return data


def load_config(home: Optional[Path] = None) -> AppConfig:
    """Defaults, then ``<home>/config.json``, then environment variables.

    An explicit ``home`` argument wins over ``QUOTETONIC_HOME``.
    """
    resolved_home = Path(home or os.environ.get(ENV_HOME) or default_home()).expanduser()
    values = _read_config_file(resolved_home / CONFIG_FILENAME)
    values["home"] = resolved_home

    if os.environ.get(ENV_LOG_LEVEL):
        values["log_level"] = os.environ[ENV_LOG_LEVEL]
    if os.environ.get(ENV_DEBOUNCE_MS):
        values["debounce_ms"] = os.environ[ENV_DEBOUNCE_MS]

    try:
        return AppConfig.model_validate(values)
    except ValidationError as exc:
        raise ConfigurationError(str(exc), error_code="CONFIG_INVALID_FORMAT") from exc
