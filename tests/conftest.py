"""
pytest configuration and fixtures for QuoteTonic tests
"""

from datetime import date
from pathlib import Path

import pytest

from quotetonic.config import AppConfig
from quotetonic.schemas import AppSettings
from quotetonic.storage import LocalStorage
from quotetonic.workspace import Workspace

TODAY = date(2026, 3, 2)


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def home(tmp_path) -> Path:
    return tmp_path / "home"


@pytest.fixture
def storage(home):
    return LocalStorage(home)


@pytest.fixture
def settings():
    return AppSettings()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config(home):
    return AppConfig(home=home, debounce_ms=500)


@pytest.fixture
def workspace(config, clock):
    return Workspace(config, today=lambda: TODAY, clock=clock)
