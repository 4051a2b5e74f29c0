"""
Shared pytest fixtures for the grapher test suite.

This module provides:
- Isolation of cached settings and parsed formulas between tests
- A fresh default context
- Helpers for building sample ranges and scene files
"""

import logging

import pytest

from grapher.core.config import get_settings
from grapher.expression import clear_parse_cache
from grapher.parser.context import Context
from grapher.sampler import SampleRange


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Drop cached settings so environment changes made by a test apply."""
    for name in ("GRAPHER_LOG_FILE", "GRAPHER_LOG_FORMAT", "GRAPHER_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    clear_parse_cache()
    yield
    get_settings.cache_clear()
    clear_parse_cache()


@pytest.fixture
def restore_root_logging():
    """Undo handler changes made by setup_logging."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def context() -> Context:
    """A fresh default context that tests may modify."""
    return Context.default()


@pytest.fixture
def sample_range_factory():
    """Factory for SampleRange objects with the usual density."""
    def _factory(x_min: float, x_max: float, density: int = 10) -> SampleRange:
        return SampleRange(x_min=x_min, x_max=x_max, density=density)
    return _factory


@pytest.fixture
def scene_file(tmp_path):
    """Write scene text to a temporary file and return its path."""
    def _write(text: str, name: str = "scene.txt"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write
