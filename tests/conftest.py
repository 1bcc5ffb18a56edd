"""Pytest configuration and shared fixtures for klaw-assert tests."""

import logging

import pytest

from klaw_assert._config import reset_config
from klaw_assert._logging import clear_log_hooks
from klaw_assert.source import clear_source_cache
from klaw_assert.testing import RecordingT


@pytest.fixture(autouse=True)
def clean_state(monkeypatch: pytest.MonkeyPatch):
    """Start every test from environment defaults, an empty cache and quiet logging."""
    for name in ('KLAW_ASSERT_SOURCE', 'KLAW_ASSERT_CACHE', 'KLAW_ASSERT_LOG_LEVEL'):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    clear_source_cache()
    clear_log_hooks()
    yield
    reset_config()
    clear_source_cache()
    clear_log_hooks()
    package_logger = logging.getLogger('klaw_assert')
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture
def rt():
    """A fresh recording test context."""
    return RecordingT('fixture')
