"""Attribute seat match results back onto the cards each seat drafted.

Two models are computed side by side:
    - Win equity: each card's share is its estimated chance of making the deck
      (lands always play; other cards decay with pick position)
    - Raw win rate: every card in the pool gets an equal share
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Dict, List, Mapping, Sequence

from rotisserie_stats.analysis.card_stats import CardStats, WinRateResult
from rotisserie_stats.data.parse_matches import SeatMatchStats
from rotisserie_stats.data.records import CardMetadata, PickRecord, card_name_key
from rotisserie_stats.utils.grouping import group_by
from rotisserie_stats.utils.logging_config import get_logger

logger = get_logger(__name__)

LAND_PLAY_PROBABILITY = 1.0

# Upper pick-position bound (inclusive) of each play-probability tier
PICK_THRESHOLD_EARLY = 15
PICK_THRESHOLD_MID = 23
PICK_THRESHOLD_LATE = 30

PLAY_PROBABILITY_EARLY = 0.95
PLAY_PROBABILITY_MID = 0.8
PLAY_PROBABILITY_LATE = 0.4
PLAY_PROBABILITY_VERY_LATE = 0.1

MatchStats = Mapping[str, Mapping[int, SeatMatchStats]]


def get_play_probability(pick_position: int, is_land_card: bool) -> float:
    """Estimate how likely a card is to be played from its pick position.

    Lands: 1.0. Others: 0.95 for picks 1-15, 0.80 for 16-23, 0.40 for 24-30,
    0.10 afterwards.
    """
    if is_land_card:
        return LAND_PLAY_PROBABILITY
    if pick_position <= PICK_THRESHOLD_EARLY:
        return PLAY_PROBABILITY_EARLY
    if pick_position <= PICK_THRESHOLD_MID:
        return PLAY_PROBABILITY_MID
    if pick_position <= PICK_THRESHOLD_LATE:
        return PLAY_PROBABILITY_LATE
    return PLAY_PROBABILITY_VERY_LATE


def is_land(type_line: str | None) -> bool:
    """Check a type line ("Basic Land — Mountain") for the Land type."""
    return bool(type_line) and "Land" in type_line


def group_picks_by_draft_and_seat(
    picks: Sequence[PickRecord],
) -> Dict[str, Dict[int, List[PickRecord]]]:
    """Nest picked records as draft id -> seat -> picks; unpicked copies are dropped."""
    picked = [p for p in picks if p.was_picked]
    return {
        draft_id: group_by(draft_picks, lambda p: p.seat)
        for draft_id, draft_picks in group_by(picked, lambda p: p.draft_id).items()
    }


def _distribute(
    picks: Sequence[PickRecord],
    match_stats: MatchStats,
    weigh: Callable[[PickRecord], float],
) -> Dict[str, WinRateResult]:
    """Split every seat's games over its pool in proportion to ``weigh``."""
    totals: Dict[str, WinRateResult] = {}
    picks_by_draft_and_seat = group_picks_by_draft_and_seat(picks)
    seats_used = 0

    for draft_id, seat_stats in match_stats.items():
        draft_picks = picks_by_draft_and_seat.get(draft_id)
        if not draft_picks:
            continue

        for seat, stats in seat_stats.items():
            seat_picks = draft_picks.get(seat)
            if not seat_picks:
                continue

            weights = [weigh(pick) for pick in seat_picks]
            total_weight = sum(weights)
            if total_weight == 0:
                continue
            seats_used += 1

            for pick, weight in zip(seat_picks, weights):
                share = weight / total_weight
                result = totals.setdefault(card_name_key(pick.card_name), WinRateResult())
                result.wins += share * stats.games_won
                result.losses += share * stats.games_lost

    for result in totals.values():
        games = result.wins + result.losses
        result.win_rate = result.wins / games if games > 0 else 0.0

    logger.debug(f"Distributed match results from {seats_used} seats over {len(totals)} cards")
    return totals


def calculate_win_equity(
    picks: Sequence[PickRecord],
    match_stats: MatchStats,
    card_metadata: Mapping[str, CardMetadata] | None = None,
) -> Dict[str, WinRateResult]:
    """Probability-weighted win attribution, keyed by :func:`card_name_key`.

    Args:
        picks: Pick records from every draft
        match_stats: Draft id -> seat -> games won/lost
        card_metadata: Card key -> metadata, for land detection; missing cards
            count as non-lands

    Returns:
        Card key -> attributed wins, losses and win rate
    """
    card_metadata = card_metadata or {}

    def weigh(pick: PickRecord) -> float:
        card = card_metadata.get(card_name_key(pick.card_name))
        return get_play_probability(pick.pick_position, is_land(card.type_line if card else None))

    return _distribute(picks, match_stats, weigh)


def calculate_raw_win_rate(
    picks: Sequence[PickRecord], match_stats: MatchStats
) -> Dict[str, WinRateResult]:
    """Unweighted win attribution: each card gets ``1 / pool size`` of its seat's games."""
    return _distribute(picks, match_stats, lambda pick: 1.0)


def attach_win_rates(
    stats: Sequence[CardStats],
    win_equity: Mapping[str, WinRateResult],
    raw_win_rate: Mapping[str, WinRateResult],
) -> List[CardStats]:
    """Return copies of ``stats`` with ``win_equity`` and ``raw_win_rate`` filled in."""
    return [
        replace(
            stat,
            win_equity=win_equity.get(card_name_key(stat.card_name)),
            raw_win_rate=raw_win_rate.get(card_name_key(stat.card_name)),
        )
        for stat in stats
    ]
