"""
Database connection and initialization.
"""
from __future__ import annotations

import sqlite3
from pathlib import Path

from squashplan.config import get_settings

from .schema import all_schema_sql

_db_path: Path | None = None


def set_db_path(path: str | Path) -> None:
    """Set the database path. Call before first get_connection if not using settings."""
    global _db_path
    _db_path = Path(path)


def get_db_path() -> Path:
    """Return the current database path (explicit override, else Settings.db_path)."""
    if _db_path is not None:
        return _db_path
    return get_settings().db_path


def get_connection(db_path: str | Path | None = None) -> sqlite3.Connection:
    """
    Return a new SQLite connection.
    Use as context manager or ensure close() is called.
    """
    path = Path(db_path) if db_path else get_db_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db(db_path: str | Path | None = None, seed_players: list[str] | None = None) -> None:
    """
    Create or ensure all tables exist.
    seed_players: optional player names to insert when the players table is empty.
    """
    conn = get_connection(db_path)
    try:
        conn.executescript(all_schema_sql())
        conn.commit()
        if seed_players:
            from .repositories import PlayerRepository
            repo = PlayerRepository()
            if not repo.list_all(conn):
                for name in seed_players:
                    repo.create(conn, name)
    finally:
        conn.close()
