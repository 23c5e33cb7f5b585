"""
Repository interfaces for squash scheduling data.
No business logic — only read/write operations.

Writes commit by default; pass commit=False to group several writes into one
transaction and commit (or roll back) from the caller.
"""
from __future__ import annotations

import sqlite3
import uuid
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from squashplan.models import Player, ScheduleMatchRecord, ScheduleRecord, User


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse_datetime(s: str | None) -> datetime:
    if s is None:
        raise ValueError("expected datetime string")
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


# ---------- UserRepository ----------


class UserRepository:
    """CRUD for users. username is unique; password_hash is never plain text."""

    def create_with_password(
        self, conn: sqlite3.Connection, username: str, password_hash: str, name: str | None = None
    ) -> User:
        uid = str(uuid.uuid4())
        now = _now_iso()
        display_name = name or username
        conn.execute(
            "INSERT INTO users (id, username, password_hash, name, created_at) VALUES (?, ?, ?, ?, ?)",
            (uid, username, password_hash, display_name, now),
        )
        conn.commit()
        return User(
            id=uid, username=username, name=display_name,
            created_at=_parse_datetime(now), password_hash=password_hash,
        )

    def get(self, conn: sqlite3.Connection, user_id: str) -> User | None:
        row = conn.execute(
            "SELECT id, username, password_hash, name, created_at FROM users WHERE id = ?",
            (user_id,),
        ).fetchone()
        return _user_from_row(row) if row is not None else None

    def get_by_username(self, conn: sqlite3.Connection, username: str) -> User | None:
        row = conn.execute(
            "SELECT id, username, password_hash, name, created_at FROM users WHERE username = ?",
            (username,),
        ).fetchone()
        return _user_from_row(row) if row is not None else None


def _user_from_row(row: sqlite3.Row) -> User:
    return User(
        id=row["id"],
        username=row["username"],
        name=row["name"],
        created_at=_parse_datetime(row["created_at"]),
        password_hash=row["password_hash"],
    )


# ---------- PlayerRepository ----------


class PlayerRepository:
    """CRUD for players."""

    def create(
        self,
        conn: sqlite3.Connection,
        name: str,
        created_by: str | None = None,
        id: str | None = None,
    ) -> Player:
        pid = id or str(uuid.uuid4())
        now = _now_iso()
        conn.execute(
            "INSERT INTO players (id, name, created_by, created_at) VALUES (?, ?, ?, ?)",
            (pid, name, created_by, now),
        )
        conn.commit()
        return Player(id=pid, name=name, created_at=_parse_datetime(now), created_by=created_by)

    def get(self, conn: sqlite3.Connection, player_id: str) -> Player | None:
        row = conn.execute(
            "SELECT id, name, created_by, created_at FROM players WHERE id = ?",
            (player_id,),
        ).fetchone()
        return _player_from_row(row) if row is not None else None

    def get_many(self, conn: sqlite3.Connection, player_ids: Iterable[str]) -> dict[str, Player]:
        """Players by id; ids with no row are absent from the result."""
        ids = list(dict.fromkeys(player_ids))
        if not ids:
            return {}
        placeholders = ", ".join("?" for _ in ids)
        rows = conn.execute(
            f"SELECT id, name, created_by, created_at FROM players WHERE id IN ({placeholders})",
            ids,
        ).fetchall()
        return {r["id"]: _player_from_row(r) for r in rows}

    def list_all(self, conn: sqlite3.Connection) -> list[Player]:
        rows = conn.execute(
            "SELECT id, name, created_by, created_at FROM players ORDER BY name, id"
        ).fetchall()
        return [_player_from_row(r) for r in rows]


def _player_from_row(row: sqlite3.Row) -> Player:
    return Player(
        id=row["id"],
        name=row["name"],
        created_at=_parse_datetime(row["created_at"]),
        created_by=row["created_by"],
    )


# ---------- ScheduleRepository ----------


class ScheduleRepository:
    """CRUD for schedules. Matches are stored by ScheduleMatchRepository."""

    def create(
        self,
        conn: sqlite3.Connection,
        name: str,
        court_count: int,
        created_by: str,
        id: str | None = None,
        commit: bool = True,
    ) -> ScheduleRecord:
        sid = id or str(uuid.uuid4())
        now = _now_iso()
        conn.execute(
            "INSERT INTO schedules (id, name, court_count, created_by, created_at) VALUES (?, ?, ?, ?, ?)",
            (sid, name, court_count, created_by, now),
        )
        if commit:
            conn.commit()
        return ScheduleRecord(
            id=sid, name=name, court_count=court_count, created_by=created_by,
            created_at=_parse_datetime(now),
        )

    def get(self, conn: sqlite3.Connection, schedule_id: str) -> ScheduleRecord | None:
        row = conn.execute(
            "SELECT id, name, court_count, created_by, created_at FROM schedules WHERE id = ?",
            (schedule_id,),
        ).fetchone()
        return _schedule_from_row(row) if row is not None else None

    def list_all(self, conn: sqlite3.Connection) -> list[ScheduleRecord]:
        """Newest first."""
        rows = conn.execute(
            "SELECT id, name, court_count, created_by, created_at FROM schedules ORDER BY created_at DESC, id"
        ).fetchall()
        return [_schedule_from_row(r) for r in rows]

    def delete(self, conn: sqlite3.Connection, schedule_id: str, commit: bool = True) -> None:
        conn.execute("DELETE FROM schedules WHERE id = ?", (schedule_id,))
        if commit:
            conn.commit()


def _schedule_from_row(row: sqlite3.Row) -> ScheduleRecord:
    return ScheduleRecord(
        id=row["id"],
        name=row["name"],
        court_count=row["court_count"],
        created_by=row["created_by"],
        created_at=_parse_datetime(row["created_at"]),
    )


# ---------- ScheduleMatchRepository ----------


class ScheduleMatchRepository:
    """Stored match rows for a schedule. No business logic."""

    def create_many(
        self,
        conn: sqlite3.Connection,
        schedule_id: str,
        rows: Iterable[dict[str, Any]],
        commit: bool = True,
    ) -> list[ScheduleMatchRecord]:
        """rows: { "round_number", "court", "player1_id", "player2_id" } per match."""
        records = [
            ScheduleMatchRecord(
                id=str(uuid.uuid4()),
                schedule_id=schedule_id,
                round_number=r["round_number"],
                court=r["court"],
                player1_id=r["player1_id"],
                player2_id=r["player2_id"],
            )
            for r in rows
        ]
        conn.executemany(
            "INSERT INTO schedule_matches (id, schedule_id, round_number, court, player1_id, player2_id) VALUES (?, ?, ?, ?, ?, ?)",
            [
                (m.id, m.schedule_id, m.round_number, m.court, m.player1_id, m.player2_id)
                for m in records
            ],
        )
        if commit:
            conn.commit()
        return records

    def list_by_schedule(self, conn: sqlite3.Connection, schedule_id: str) -> list[ScheduleMatchRecord]:
        """Ordered by round, then court, then insertion order."""
        rows = conn.execute(
            "SELECT id, schedule_id, round_number, court, player1_id, player2_id FROM schedule_matches "
            "WHERE schedule_id = ? ORDER BY round_number, court, rowid",
            (schedule_id,),
        ).fetchall()
        return [
            ScheduleMatchRecord(
                id=r["id"],
                schedule_id=r["schedule_id"],
                round_number=r["round_number"],
                court=r["court"],
                player1_id=r["player1_id"],
                player2_id=r["player2_id"],
            )
            for r in rows
        ]

    def delete_by_schedule(self, conn: sqlite3.Connection, schedule_id: str, commit: bool = True) -> None:
        conn.execute("DELETE FROM schedule_matches WHERE schedule_id = ?", (schedule_id,))
        if commit:
            conn.commit()
