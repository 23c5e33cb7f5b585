"""
Print a round-robin schedule for the names given on the command line.

    python -m squashplan.run_schedule --courts 2 Anna Ben Carla Dan Eva
"""
from __future__ import annotations

import argparse
import logging

from squashplan.config import get_settings
from squashplan.models import Participant, Round
from squashplan.services.scheduling import InvalidArgumentError, generate_schedule, sitting_out


def _slug(name: str) -> str:
    """Stable id from player name (lowercase, spaces to underscores)."""
    return name.strip().lower().replace(" ", "_").replace("-", "_")


def _print_round(r: Round, participants: list[Participant]) -> None:
    print(f"Round {r.round_number}")
    for m in r.matches:
        print(f"  Court {m.court}: {m.player1.name} vs {m.player2.name}")
    for p in sitting_out(participants, r):
        print(f"  Sits out: {p.name}")


def run(names: list[str], courts: int = 1) -> list[Round]:
    participants = [Participant(id=_slug(n), name=n.strip()) for n in names]
    try:
        rounds = generate_schedule(participants, courts)
    except InvalidArgumentError as e:
        raise SystemExit(f"Invalid schedule request: {e}")
    if not rounds:
        print("Need at least 2 players for a schedule.")
        return rounds
    for i, r in enumerate(rounds):
        if i:
            print()
        _print_round(r, participants)
    return rounds


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Print a round-robin squash schedule.")
    parser.add_argument("names", nargs="*", help="Player names, in seeding order")
    parser.add_argument("--courts", type=int, default=1, help="Number of available courts")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else get_settings().log_level)
    run(args.names, courts=args.courts)


if __name__ == "__main__":
    main()
