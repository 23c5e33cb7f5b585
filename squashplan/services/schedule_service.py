"""
Schedule service: validation, generation and storage of saved schedules.
Generation is delegated to services.scheduling; storage to repositories.
"""
from __future__ import annotations

import logging
import sqlite3
from typing import Any

from squashplan.config import Settings, get_settings
from squashplan.models import Participant, Round, ScheduleRecord
from squashplan.persistence.repositories import (
    PlayerRepository,
    ScheduleMatchRepository,
    ScheduleRepository,
)
from squashplan.services.scheduling import flatten_schedule, generate_schedule, group_matches_by_round

logger = logging.getLogger(__name__)

MIN_PLAYERS = 2

# ---------- Exceptions ----------


class ScheduleValidationError(ValueError):
    """Schedule request is invalid (name, players or court count)."""


class ScheduleNotFoundError(ValueError):
    """No schedule with the given id."""


class NotScheduleOwnerError(ValueError):
    """Only the user who created a schedule may delete it."""


def _fallback_player_name(player_id: str) -> str:
    return f"Player {player_id[:8]}..."


# ---------- ScheduleService ----------


class ScheduleService:
    """
    Domain logic for saved schedules.
    Persistence is delegated to repositories.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._player_repo = PlayerRepository()
        self._schedule_repo = ScheduleRepository()
        self._match_repo = ScheduleMatchRepository()

    def _check_court_count(self, court_count: int) -> None:
        if not 1 <= court_count <= self._settings.max_courts:
            raise ScheduleValidationError(
                f"court_count must be between 1 and {self._settings.max_courts}, got {court_count}"
            )

    def resolve_participants(self, conn: sqlite3.Connection, player_ids: list[str]) -> list[Participant]:
        """
        Map player ids to participants, ordered by player name (then id).
        Duplicate or unknown ids are rejected.
        """
        if len(set(player_ids)) != len(player_ids):
            raise ScheduleValidationError("Each player may be selected only once")
        players = self._player_repo.get_many(conn, player_ids)
        missing = [pid for pid in player_ids if pid not in players]
        if missing:
            raise ScheduleValidationError(f"Player not found: {', '.join(missing)}")
        ordered = sorted(players.values(), key=lambda p: (p.name, p.id))
        return [p.to_participant() for p in ordered]

    def preview(self, conn: sqlite3.Connection, player_ids: list[str], court_count: int) -> list[Round]:
        """Generate rounds for the selected players without writing anything."""
        self._check_court_count(court_count)
        participants = self.resolve_participants(conn, player_ids)
        return generate_schedule(participants, court_count)

    def create_schedule(
        self,
        conn: sqlite3.Connection,
        name: str,
        court_count: int,
        created_by: str,
        player_ids: list[str],
    ) -> dict[str, Any]:
        """
        Validate, generate and store a schedule with all its matches in one transaction.
        Returns the same shape as get_schedule.
        """
        name = name.strip()
        if not name:
            raise ScheduleValidationError("Schedule name is required")
        if len(player_ids) < MIN_PLAYERS:
            raise ScheduleValidationError(f"Select at least {MIN_PLAYERS} players")
        rounds = self.preview(conn, player_ids, court_count)
        try:
            record = self._schedule_repo.create(conn, name, court_count, created_by, commit=False)
            self._match_repo.create_many(conn, record.id, flatten_schedule(rounds), commit=False)
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
        logger.info(
            "Created schedule %s (%r): %d players, %d rounds, %d court(s)",
            record.id, name, len(player_ids), len(rounds), court_count,
        )
        return self.get_schedule(conn, record.id)

    def get_record(self, conn: sqlite3.Connection, schedule_id: str) -> ScheduleRecord:
        record = self._schedule_repo.get(conn, schedule_id)
        if record is None:
            raise ScheduleNotFoundError(f"Schedule not found: {schedule_id}")
        return record

    def get_schedule(self, conn: sqlite3.Connection, schedule_id: str) -> dict[str, Any]:
        """
        Schedule record plus its matches grouped by round, with player names resolved.
        { "schedule": {...}, "rounds": [{ "round_number", "matches": [{ "court", "player1", "player2" }] }] }
        """
        record = self.get_record(conn, schedule_id)
        matches = self._match_repo.list_by_schedule(conn, schedule_id)
        ids = {m.player1_id for m in matches} | {m.player2_id for m in matches}
        players = self._player_repo.get_many(conn, ids)

        def player_ref(player_id: str) -> dict[str, str]:
            player = players.get(player_id)
            name = player.name if player is not None else _fallback_player_name(player_id)
            return {"id": player_id, "name": name}

        rounds = group_matches_by_round(m.to_dict() for m in matches)
        return {
            "schedule": record.to_dict(),
            "rounds": [
                {
                    "round_number": r["round_number"],
                    "matches": [
                        {
                            "id": row["id"],
                            "court": row["court"],
                            "player1": player_ref(row["player1_id"]),
                            "player2": player_ref(row["player2_id"]),
                        }
                        for row in r["matches"]
                    ],
                }
                for r in rounds
            ],
        }

    def list_schedules(self, conn: sqlite3.Connection) -> list[ScheduleRecord]:
        return self._schedule_repo.list_all(conn)

    def delete_schedule(self, conn: sqlite3.Connection, schedule_id: str, user_id: str) -> None:
        """Delete a schedule and its matches. Owner only."""
        record = self.get_record(conn, schedule_id)
        if record.created_by != user_id:
            raise NotScheduleOwnerError("Only the schedule owner can delete it")
        try:
            self._match_repo.delete_by_schedule(conn, schedule_id, commit=False)
            self._schedule_repo.delete(conn, schedule_id, commit=False)
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
        logger.info("Deleted schedule %s", schedule_id)
