"""
Pytest configuration and fixtures for cachecore tests.
"""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from typing import Generator
from unittest.mock import patch

import pytest

from cachecore.config import clear_settings_cache


class FrozenClock:
    """Controllable clock for deterministic expiration checks."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FrozenClock:
    """Provide a clock frozen at a fixed UTC instant."""
    return FrozenClock(datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def mock_env_vars() -> Generator[dict[str, str], None, None]:
    """Provide mock CACHECORE_* environment variables for testing."""
    env_vars = {
        "CACHECORE_DEFAULT_TTL_SECONDS": "300",
        "CACHECORE_LOG_LEVEL": "DEBUG",
    }

    with patch.dict(os.environ, env_vars, clear=False):
        clear_settings_cache()
        yield env_vars
    clear_settings_cache()


@pytest.fixture(autouse=True)
def isolated_settings() -> Generator[None, None, None]:
    """Keep a developer's CACHECORE_* environment out of the tests."""
    cleaned = {k: v for k, v in os.environ.items() if not k.startswith("CACHECORE_")}
    with patch.dict(os.environ, cleaned, clear=True):
        clear_settings_cache()
        yield
    clear_settings_cache()
