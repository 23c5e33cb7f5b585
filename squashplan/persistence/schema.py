"""
SQLite schema for squash scheduling entities.
Migration-friendly: each table created with IF NOT EXISTS.
"""
from __future__ import annotations


def users_schema() -> str:
    return """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        username TEXT NOT NULL,
        password_hash TEXT NOT NULL,
        name TEXT NOT NULL,
        created_at TEXT NOT NULL
    );
    CREATE UNIQUE INDEX IF NOT EXISTS ix_users_username ON users(username);
    """


def players_schema() -> str:
    """Players that schedules draw from. created_by is NULL for seeded players."""
    return """
    CREATE TABLE IF NOT EXISTS players (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        created_by TEXT,
        created_at TEXT NOT NULL,
        FOREIGN KEY (created_by) REFERENCES users(id)
    );
    CREATE INDEX IF NOT EXISTS ix_players_name ON players(name);
    """


def schedules_schema() -> str:
    return """
    CREATE TABLE IF NOT EXISTS schedules (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        court_count INTEGER NOT NULL,
        created_by TEXT NOT NULL,
        created_at TEXT NOT NULL,
        FOREIGN KEY (created_by) REFERENCES users(id)
    );
    CREATE INDEX IF NOT EXISTS ix_schedules_created_by ON schedules(created_by);
    """


def schedule_matches_schema() -> str:
    """One row per generated match. Bye pairings are never stored."""
    return """
    CREATE TABLE IF NOT EXISTS schedule_matches (
        id TEXT PRIMARY KEY,
        schedule_id TEXT NOT NULL,
        round_number INTEGER NOT NULL,
        court INTEGER NOT NULL,
        player1_id TEXT NOT NULL,
        player2_id TEXT NOT NULL,
        FOREIGN KEY (schedule_id) REFERENCES schedules(id) ON DELETE CASCADE,
        FOREIGN KEY (player1_id) REFERENCES players(id),
        FOREIGN KEY (player2_id) REFERENCES players(id)
    );
    CREATE INDEX IF NOT EXISTS ix_schedule_matches_schedule ON schedule_matches(schedule_id);
    """


def all_schema_sql() -> str:
    """Combine all schema DDL for a single execution. Order: users, players, schedules, schedule_matches."""
    return "\n".join([
        users_schema(),
        players_schema(),
        schedules_schema(),
        schedule_matches_schema(),
    ])
