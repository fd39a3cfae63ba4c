"""Parse round-robin match results and tally games per seat.

Match grid layout (0-indexed rows):
    - Rows 0-2: title, spacer, header (ignored)
    - Row 3+: column B player 1, C player 1 games, D literal "VS",
      E player 2 games, F player 2; later columns are ignored
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Sequence

from rotisserie_stats.data.grid import cell
from rotisserie_stats.utils.logging_config import get_logger

logger = get_logger(__name__)

FIRST_MATCH_ROW_INDEX = 3
VS_MARKER = "VS"


@dataclass
class MatchResult:
    """Games won by each side of one match, keyed by seat."""

    seat1: int
    seat2: int
    seat1_games_won: int
    seat2_games_won: int


@dataclass
class SeatMatchStats:
    """Games won and lost by one seat across all of its matches."""

    games_won: int = 0
    games_lost: int = 0


def _seat_for(player_name_to_seat: Mapping[str, int], name: str) -> int | None:
    seat = player_name_to_seat.get(name)
    if seat is None:
        seat = player_name_to_seat.get(name.lower())
    return seat


def parse_matches(
    rows: Sequence[Sequence[str]], player_name_to_seat: Mapping[str, int]
) -> List[MatchResult]:
    """Parse a match grid, keeping only rows whose players map to seats."""
    matches: List[MatchResult] = []
    skipped = 0

    for row in rows[FIRST_MATCH_ROW_INDEX:]:
        if len(row) < 6:
            continue

        player1, player2 = cell(row, 1), cell(row, 5)
        if not player1 or not player2 or cell(row, 3) != VS_MARKER:
            continue

        try:
            seat1_games = int(cell(row, 2))
            seat2_games = int(cell(row, 4))
        except ValueError:
            skipped += 1
            continue

        seat1 = _seat_for(player_name_to_seat, player1)
        seat2 = _seat_for(player_name_to_seat, player2)
        if seat1 is None or seat2 is None:
            skipped += 1
            continue

        matches.append(
            MatchResult(
                seat1=seat1,
                seat2=seat2,
                seat1_games_won=seat1_games,
                seat2_games_won=seat2_games,
            )
        )

    if skipped:
        logger.warning(f"Skipped {skipped} match rows with bad scores or unknown players")
    logger.debug(f"Parsed {len(matches)} matches")
    return matches


def aggregate_seat_stats(matches: Iterable[MatchResult]) -> Dict[int, SeatMatchStats]:
    """Sum games won and lost per seat."""
    stats: Dict[int, SeatMatchStats] = {}
    for match in matches:
        first = stats.setdefault(match.seat1, SeatMatchStats())
        first.games_won += match.seat1_games_won
        first.games_lost += match.seat2_games_won

        second = stats.setdefault(match.seat2, SeatMatchStats())
        second.games_won += match.seat2_games_won
        second.games_lost += match.seat1_games_won
    return stats
