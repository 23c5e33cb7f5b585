"""
Data models for the squash scheduling backend.
Domain objects only — no persistence or API logic.

Generated schedules (Participant, Match, Round) are transient: built in one pass
by services.scheduling and handed to a caller for display or storage.
Stored rows (User, Player, ScheduleRecord, ScheduleMatchRecord) mirror the tables
in persistence.schema.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


# ---------- Participant ----------
@dataclass(frozen=True)
class Participant:
    """Opaque identity in a generated schedule: stable id + display name."""
    id: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}


def participant_key(participant: Any) -> Any:
    """Identity used for uniqueness and pairing checks. Plain tokens are their own key."""
    if isinstance(participant, Participant):
        return participant.id
    return participant


def _participant_dict(participant: Any) -> Any:
    if isinstance(participant, Participant):
        return participant.to_dict()
    return participant


# ---------- Match (generated) ----------
@dataclass(frozen=True)
class Match:
    """Two distinct real participants on a court. Court is a 1-based label."""
    player1: Any
    player2: Any
    court: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "player1": _participant_dict(self.player1),
            "player2": _participant_dict(self.player2),
            "court": self.court,
        }


# ---------- Round (generated) ----------
@dataclass
class Round:
    """Matches sharing a 1-based round number. No participant appears twice."""
    round_number: int
    matches: list[Match] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "round_number": self.round_number,
            "matches": [m.to_dict() for m in self.matches],
        }


# ---------- User ----------
@dataclass
class User:
    """
    An account that can add players and save schedules.
    password_hash is never returned by to_dict.
    """
    id: str
    username: str
    name: str
    created_at: datetime
    password_hash: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "name": self.name,
            "created_at": self.created_at.isoformat(),
        }


# ---------- Player ----------
@dataclass
class Player:
    """A squash player that can be picked for a schedule."""
    id: str
    name: str
    created_at: datetime
    created_by: str | None = None

    def to_participant(self) -> Participant:
        return Participant(id=self.id, name=self.name)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at.isoformat(),
        }
        if self.created_by is not None:
            d["created_by"] = self.created_by
        return d


# ---------- Schedule (stored) ----------
@dataclass
class ScheduleRecord:
    """A saved schedule. Matches live in schedule_matches keyed by id."""
    id: str
    name: str
    court_count: int
    created_by: str
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "court_count": self.court_count,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat(),
        }


@dataclass
class ScheduleMatchRecord:
    """One stored match row: schedule id, round number, court and both player ids."""
    id: str
    schedule_id: str
    round_number: int
    court: int
    player1_id: str
    player2_id: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "schedule_id": self.schedule_id,
            "round_number": self.round_number,
            "court": self.court,
            "player1_id": self.player1_id,
            "player2_id": self.player2_id,
        }
