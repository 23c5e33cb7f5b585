"""
Tests for round-robin schedule generation.
Complete; no duplicate pairings; at most one match per player per round; no bye leakage.
"""
from __future__ import annotations

from collections import Counter
from itertools import combinations
from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from squashplan.models import Participant
from squashplan.services.scheduling import (
    BYE,
    InvalidArgumentError,
    flatten_schedule,
    generate_schedule,
    group_matches_by_round,
    pairings_by_round,
    sitting_out,
)


def _players(n: int) -> list[Participant]:
    return [Participant(id=f"p{i}", name=f"Player {i}") for i in range(n)]


def _all_pairs(rounds) -> list[frozenset]:
    return [frozenset((m.player1.id, m.player2.id)) for r in rounds for m in r.matches]


# ---------- Properties ----------


@pytest.mark.parametrize("n", range(2, 21))
def test_every_pair_meets_exactly_once(n):
    players = _players(n)
    expected = {frozenset((a.id, b.id)) for a, b in combinations(players, 2)}
    for courts in range(1, n + 1):
        pairs = _all_pairs(generate_schedule(players, courts))
        assert len(pairs) == n * (n - 1) // 2
        assert Counter(pairs) == Counter(expected)


@pytest.mark.parametrize("n", range(2, 21))
def test_round_count_and_per_round_exclusivity(n):
    rounds = generate_schedule(_players(n), 2)
    even_count = n + (n % 2)
    assert len(rounds) == even_count - 1
    assert [r.round_number for r in rounds] == list(range(1, even_count))
    for r in rounds:
        ids = [p.id for m in r.matches for p in (m.player1, m.player2)]
        assert len(ids) == len(set(ids))
        assert len(r.matches) == n // 2


@pytest.mark.parametrize("n", [3, 5, 7, 9, 15])
def test_odd_counts_never_leak_bye(n):
    players = _players(n)
    rounds = generate_schedule(players, 3)
    for r in rounds:
        for m in r.matches:
            assert m.player1 is not BYE and m.player2 is not BYE
            assert m.player1 != m.player2
    # Each player sits out exactly once across the schedule
    sat_out = [p.id for r in rounds for p in sitting_out(players, r)]
    assert sorted(sat_out) == sorted(p.id for p in players)


def test_no_self_pairing():
    for n in range(2, 12):
        for r in generate_schedule(_players(n), 1):
            assert all(m.player1.id != m.player2.id for m in r.matches)


def test_deterministic_for_same_input():
    players = _players(9)
    first = [r.to_dict() for r in generate_schedule(players, 3)]
    second = [r.to_dict() for r in generate_schedule(list(players), 3)]
    assert first == second


def test_input_list_not_mutated():
    players = _players(5)
    before = list(players)
    generate_schedule(players, 2)
    assert players == before


def test_court_labels_cycle_in_pairing_order():
    # 8 players, 3 courts: pairing index i gets court (i % 3) + 1
    for r in generate_schedule(_players(8), 3):
        assert [m.court for m in r.matches] == [1, 2, 3, 1]


def test_court_labels_stay_in_range():
    for n in range(2, 15):
        for courts in range(1, 6):
            for r in generate_schedule(_players(n), courts):
                assert all(1 <= m.court <= courts for m in r.matches)


def test_court_label_counts_dropped_bye_pairing():
    """The bye pairing still consumes its court index; the remaining labels do not shift."""
    a, b, c, d, e = _players(5)
    rounds = generate_schedule([a, b, c, d, e], 4)
    # Round 1 slots: a b c d e BYE -> (a, BYE) dropped at index 0
    assert [(m.player1, m.player2, m.court) for m in rounds[0].matches] == [(b, e, 2), (c, d, 3)]


# ---------- Concrete scenarios ----------


def test_two_players_one_court():
    a, b = Participant("a", "A"), Participant("b", "B")
    rounds = generate_schedule([a, b], 1)
    assert [r.to_dict() for r in rounds] == [
        {"round_number": 1, "matches": [{"player1": a.to_dict(), "player2": b.to_dict(), "court": 1}]}
    ]


def test_four_players_two_courts():
    a, b, c, d = (Participant(x, x.upper()) for x in "abcd")
    rounds = generate_schedule([a, b, c, d], 2)
    assert len(rounds) == 3
    assert all(len(r.matches) == 2 for r in rounds)
    assert [[(m.player1.id, m.player2.id, m.court) for m in r.matches] for r in rounds] == [
        [("a", "d", 1), ("b", "c", 2)],
        [("a", "c", 1), ("d", "b", 2)],
        [("a", "b", 1), ("c", "d", 2)],
    ]
    assert set(_all_pairs(rounds)) == {frozenset(p) for p in combinations("abcd", 2)}


def test_five_players_one_court():
    rounds = generate_schedule(_players(5), 1)
    assert len(rounds) == 5
    assert all(len(r.matches) == 2 for r in rounds)
    assert sum(len(r.matches) for r in rounds) == 10
    assert all(m.court == 1 for r in rounds for m in r.matches)


def test_three_players_four_courts():
    a, b, c = (Participant(x, x.upper()) for x in "abc")
    rounds = generate_schedule([a, b, c], 4)
    assert len(rounds) == 3
    assert all(len(r.matches) == 1 for r in rounds)
    assert [(m.player1.id, m.player2.id, m.court) for r in rounds for m in r.matches] == [
        ("b", "c", 2),
        ("a", "c", 1),
        ("a", "b", 1),
    ]
    assert [[p.id for p in sitting_out([a, b, c], r)] for r in rounds] == [["a"], ["b"], ["c"]]


@pytest.mark.parametrize("participants", [[], [Participant("solo", "Solo")]])
def test_fewer_than_two_players_is_empty(participants):
    assert generate_schedule(participants, 1) == []


def test_plain_tokens_are_accepted():
    rounds = generate_schedule(["A", "B", "C", "D"], 1)
    assert pairings_by_round(rounds) == [
        {frozenset("AD"), frozenset("BC")},
        {frozenset("AC"), frozenset("DB")},
        {frozenset("AB"), frozenset("CD")},
    ]


# ---------- Preconditions ----------


@pytest.mark.parametrize("courts", [0, -1])
def test_non_positive_court_count_rejected(courts):
    with pytest.raises(InvalidArgumentError, match="court_count"):
        generate_schedule(_players(4), courts)


@pytest.mark.parametrize("courts", [1.5, "2", True, None])
def test_non_int_court_count_rejected(courts):
    with pytest.raises(InvalidArgumentError):
        generate_schedule(_players(4), courts)


def test_court_count_checked_even_for_empty_input():
    with pytest.raises(InvalidArgumentError):
        generate_schedule([], 0)


def test_duplicate_participant_ids_rejected():
    players = [Participant("x", "X"), Participant("y", "Y"), Participant("x", "X again")]
    with pytest.raises(InvalidArgumentError, match="x"):
        generate_schedule(players, 1)


def test_unhashable_tokens_rejected():
    with pytest.raises(InvalidArgumentError, match="hashable"):
        generate_schedule([{"id": "a"}, {"id": "b"}], 1)


def test_invalid_argument_is_value_error():
    assert issubclass(InvalidArgumentError, ValueError)


# ---------- Flatten / group ----------


def test_flatten_schedule_rows():
    a, b, c = (Participant(x, x.upper()) for x in "abc")
    rows = flatten_schedule(generate_schedule([a, b, c], 1))
    assert rows == [
        {"round_number": 1, "court": 1, "player1_id": "b", "player2_id": "c"},
        {"round_number": 2, "court": 1, "player1_id": "a", "player2_id": "c"},
        {"round_number": 3, "court": 1, "player1_id": "a", "player2_id": "b"},
    ]


def test_group_matches_by_round_orders_by_round_then_court():
    rows = [
        {"round_number": 2, "court": 2, "player1_id": "d", "player2_id": "b"},
        {"round_number": 1, "court": 2, "player1_id": "b", "player2_id": "c"},
        {"round_number": 2, "court": 1, "player1_id": "a", "player2_id": "c"},
        {"round_number": 1, "court": 1, "player1_id": "a", "player2_id": "d"},
    ]
    grouped = group_matches_by_round(rows)
    assert [g["round_number"] for g in grouped] == [1, 2]
    assert [(m["player1_id"], m["court"]) for m in grouped[0]["matches"]] == [("a", 1), ("b", 2)]
    assert [(m["player1_id"], m["court"]) for m in grouped[1]["matches"]] == [("a", 1), ("d", 2)]


def test_group_matches_by_round_empty():
    assert group_matches_by_round([]) == []
