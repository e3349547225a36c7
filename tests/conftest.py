"""Shared test fixtures and configuration.

Components take an explicit Settings object, so no environment patching
is needed; fixtures provide a temp SQLite store and ready settings.
"""

import pytest


@pytest.fixture
def tmp_db_path(tmp_path):
    """Return a temporary SQLite DB path."""
    return str(tmp_path / "test_jeni.db")


@pytest.fixture
def store(tmp_db_path):
    """Return a SQLiteStore backed by a temp file."""
    from jeni.adapters.sqlite_store import SQLiteStore
    return SQLiteStore(db_path=tmp_db_path)


@pytest.fixture
def settings(tmp_db_path):
    """Settings with a fake LLM key and one known API token."""
    from jeni.config import Settings
    return Settings(
        LLM_PROVIDER="groq",
        LLM_API_KEY="fake-llm-key-for-tests",
        DATABASE_PATH=tmp_db_path,
        API_TOKENS={"test-token": "user-1"},
    )
