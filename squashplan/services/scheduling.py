"""
Deterministic round-robin schedule generation for squash sessions.

Every player meets every other player exactly once; a session of N players takes
N-1 rounds (N even) or N rounds (N odd). Each player plays at most one match per round.

BYE handling: when the number of players is odd, we add a virtual BYE. Each round the
player paired with BYE sits out, and that pairing is dropped from the output.

Uses the circle method: fix first slot, rotate the others each round. Same player list
ordering yields the same schedule.

Courts are labels, not a concurrency cap: within a round, pairing i is labelled
court (i % court_count) + 1, counting the dropped BYE pairing too.
"""
from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from typing import Any

from squashplan.models import Match, Participant, Round, participant_key

logger = logging.getLogger(__name__)

# Sentinel for bye when number of players is odd. Compared by identity only.
BYE = Participant(id="__bye__", name="Bye")


class InvalidArgumentError(ValueError):
    """Court count is not a positive int, or participant ids are not unique or not hashable."""


def _check_preconditions(participants: Sequence[Any], court_count: int) -> None:
    # bool is an int subclass; True would silently mean one court
    if isinstance(court_count, bool) or not isinstance(court_count, int):
        raise InvalidArgumentError(f"court_count must be an int, got {type(court_count).__name__}")
    if court_count < 1:
        raise InvalidArgumentError(f"court_count must be >= 1, got {court_count}")
    try:
        counts = Counter(participant_key(p) for p in participants)
    except TypeError as e:
        raise InvalidArgumentError(f"Participant tokens must be hashable: {e}") from e
    duplicates = sorted(str(k) for k, c in counts.items() if c > 1)
    if duplicates:
        raise InvalidArgumentError(f"Duplicate participant ids: {', '.join(duplicates)}")


def generate_schedule(participants: Sequence[Any], court_count: int) -> list[Round]:
    """
    Generate a complete round-robin schedule.

    participants: ordered, unique Participant objects (or plain hashable tokens).
    court_count: positive int; courts are assigned cyclically in pairing order.

    Returns rounds in generation order. Fewer than 2 participants yields [].
    Raises InvalidArgumentError before computing anything if a precondition fails.
    """
    _check_preconditions(participants, court_count)
    slots = list(participants)
    if len(slots) < 2:
        return []
    if len(slots) % 2 == 1:
        slots.append(BYE)
    n = len(slots)
    rounds: list[Round] = []
    for round_index in range(n - 1):
        matches: list[Match] = []
        # Pair slots[0] with slots[n-1], slots[1] with slots[n-2], ...
        for i in range(n // 2):
            home, away = slots[i], slots[n - 1 - i]
            if home is BYE or away is BYE:
                continue
            matches.append(Match(player1=home, player2=away, court=(i % court_count) + 1))
        rounds.append(Round(round_number=round_index + 1, matches=matches))
        # Rotate: keep slot 0, last slot moves to 1, the rest shift up by one
        slots = [slots[0], slots[n - 1]] + slots[1 : n - 1]
    logger.debug(
        "Generated %d rounds for %d participants on %d court(s)",
        len(rounds), len(participants), court_count,
    )
    return rounds


def pairings_by_round(rounds: Iterable[Round]) -> list[set[frozenset]]:
    """Unordered participant-key pairs per round, in round order."""
    return [
        {frozenset((participant_key(m.player1), participant_key(m.player2))) for m in r.matches}
        for r in rounds
    ]


def sitting_out(participants: Sequence[Any], round_: Round) -> list[Any]:
    """Real participants with no match in round_ (at most one, and only for odd counts)."""
    playing = set()
    for m in round_.matches:
        playing.add(participant_key(m.player1))
        playing.add(participant_key(m.player2))
    return [p for p in participants if participant_key(p) not in playing]


def flatten_schedule(rounds: Iterable[Round]) -> list[dict[str, Any]]:
    """
    One row per match: { "round_number", "court", "player1_id", "player2_id" }.
    This is the shape callers store, tagged with their own schedule id.
    """
    return [
        {
            "round_number": r.round_number,
            "court": m.court,
            "player1_id": participant_key(m.player1),
            "player2_id": participant_key(m.player2),
        }
        for r in rounds
        for m in r.matches
    ]


def group_matches_by_round(rows: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Group stored match rows back into rounds for display.
    Rows are ordered by round then court; returns [{ "round_number", "matches" }].
    """
    ordered = sorted(rows, key=lambda row: (row["round_number"], row["court"]))
    grouped: list[dict[str, Any]] = []
    for row in ordered:
        if not grouped or grouped[-1]["round_number"] != row["round_number"]:
            grouped.append({"round_number": row["round_number"], "matches": []})
        grouped[-1]["matches"].append(row)
    return grouped
