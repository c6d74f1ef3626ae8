"""Session alias and settings persistence with SQLite."""

import sqlite3
from pathlib import Path
from typing import Self


class SessionStore:
    """Persists user-assigned session aliases and string settings.

    Aliases are keyed by SessionMeta.key ("<provider_id>:<session_id>").
    """

    def __init__(self, db_path: Path) -> None:
        """Initialize the store with database path.

        Args:
            db_path: Path to SQLite database file. Parent directories
                     will be created if they don't exist.
        """
        self._db_path = db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(db_path)
        self._conn.row_factory = sqlite3.Row
        self.ensure_schema()

    def ensure_schema(self) -> None:
        """Create the alias and config tables if they don't exist."""
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS session_aliases (
                session_key TEXT PRIMARY KEY,
                alias TEXT NOT NULL
            )
        """)
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS session_config (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
        """)
        self._conn.commit()

    def get_all_aliases(self) -> dict[str, str]:
        """Get every alias, keyed by session key."""
        cursor = self._conn.execute("SELECT session_key, alias FROM session_aliases")
        return {row["session_key"]: row["alias"] for row in cursor}

    def get_alias(self, session_key: str) -> str | None:
        cursor = self._conn.execute(
            "SELECT alias FROM session_aliases WHERE session_key = ?",
            (session_key,),
        )
        row = cursor.fetchone()
        return row["alias"] if row else None

    def set_alias(self, session_key: str, alias: str | None) -> None:
        """Set a session alias; an empty alias restores the default name."""
        if alias is None or not alias.strip():
            self.delete_alias(session_key)
            return

        self._conn.execute(
            "INSERT OR REPLACE INTO session_aliases (session_key, alias) VALUES (?, ?)",
            (session_key, alias.strip()),
        )
        self._conn.commit()

    def delete_alias(self, session_key: str) -> None:
        self._conn.execute("DELETE FROM session_aliases WHERE session_key = ?", (session_key,))
        self._conn.commit()

    def get_config(self, key: str) -> str | None:
        cursor = self._conn.execute("SELECT value FROM session_config WHERE key = ?", (key,))
        row = cursor.fetchone()
        return row["value"] if row else None

    def set_config(self, key: str, value: str) -> None:
        self._conn.execute(
            "INSERT OR REPLACE INTO session_config (key, value) VALUES (?, ?)",
            (key, value),
        )
        self._conn.commit()

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def __enter__(self) -> Self:
        """Enter context manager."""
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        """Exit context manager, closing database connection."""
        self.close()
