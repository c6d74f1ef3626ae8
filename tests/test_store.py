"""Tests for the session alias/settings store."""

import sqlite3
from pathlib import Path

import pytest

from session_lens.store import SessionStore


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Provide a temporary database path."""
    return tmp_path / "state" / "sessions.db"


@pytest.fixture
def store(temp_db_path: Path) -> SessionStore:
    """Provide a SessionStore instance with temporary database."""
    store = SessionStore(temp_db_path)
    yield store
    store.close()


class TestSessionStoreInit:
    """Tests for SessionStore initialization."""

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        db_path = tmp_path / "nested" / "dirs" / "sessions.db"
        with SessionStore(db_path):
            assert db_path.exists()

    def test_creates_tables(self, store: SessionStore, temp_db_path: Path) -> None:
        conn = sqlite3.connect(temp_db_path)
        try:
            names = {
                row[0]
                for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            }
        finally:
            conn.close()
        assert {"session_aliases", "session_config"} <= names


class TestAliases:
    """Tests for alias operations."""

    def test_empty_initially(self, store: SessionStore) -> None:
        assert store.get_all_aliases() == {}
        assert store.get_alias("claude:abc") is None

    def test_set_and_get(self, store: SessionStore) -> None:
        store.set_alias("claude:abc", "Auth refactor")
        assert store.get_alias("claude:abc") == "Auth refactor"
        assert store.get_all_aliases() == {"claude:abc": "Auth refactor"}

    def test_set_replaces(self, store: SessionStore) -> None:
        store.set_alias("claude:abc", "first")
        store.set_alias("claude:abc", "second")
        assert store.get_all_aliases() == {"claude:abc": "second"}

    def test_alias_is_trimmed(self, store: SessionStore) -> None:
        store.set_alias("codex:x", "  spaced  ")
        assert store.get_alias("codex:x") == "spaced"

    @pytest.mark.parametrize("empty", ["", "   ", None])
    def test_empty_alias_deletes(self, store: SessionStore, empty: str | None) -> None:
        store.set_alias("claude:abc", "named")
        store.set_alias("claude:abc", empty)
        assert store.get_alias("claude:abc") is None

    def test_delete(self, store: SessionStore) -> None:
        store.set_alias("claude:abc", "named")
        store.set_alias("codex:abc", "other")

        store.delete_alias("claude:abc")

        assert store.get_all_aliases() == {"codex:abc": "other"}

    def test_delete_missing_is_noop(self, store: SessionStore) -> None:
        store.delete_alias("nope:nothing")
        assert store.get_all_aliases() == {}

    def test_persists_across_instances(self, temp_db_path: Path) -> None:
        with SessionStore(temp_db_path) as first:
            first.set_alias("gemini:g1", "Persisted")

        with SessionStore(temp_db_path) as second:
            assert second.get_alias("gemini:g1") == "Persisted"


class TestConfigValues:
    """Tests for config key/value operations."""

    def test_missing_key(self, store: SessionStore) -> None:
        assert store.get_config("resume.extra_args") is None

    def test_set_and_overwrite(self, store: SessionStore) -> None:
        store.set_config("resume.extra_args", "--verbose")
        store.set_config("resume.extra_args", "--model opus")
        assert store.get_config("resume.extra_args") == "--model opus"
