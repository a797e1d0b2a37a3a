"""Shared fixtures for sqlreviewer tests."""

import pytest

from sqlreviewer.config import ReviewConfig
from sqlreviewer.rules.registry import RuleCatalog


@pytest.fixture(scope="session")
def catalog():
    """The bundled catalog built with default settings."""
    return RuleCatalog.default()


@pytest.fixture
def config():
    return ReviewConfig()


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep developer SQLREVIEWER_* and OpenAI settings out of the tests."""
    import os

    for name in list(os.environ):
        if name.startswith("SQLREVIEWER_") or name.startswith("OPENAI_"):
            monkeypatch.delenv(name, raising=False)
