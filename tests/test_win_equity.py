import numpy as np
import pytest

from rotisserie_stats.analysis.card_stats import calculate_card_stats
from rotisserie_stats.analysis.win_equity import (
    attach_win_rates,
    calculate_raw_win_rate,
    calculate_win_equity,
    get_play_probability,
    is_land,
)
from rotisserie_stats.data.parse_matches import SeatMatchStats
from rotisserie_stats.data.records import NO_SEAT, CardMetadata, PickRecord


def _pick(
    name: str, position: int, seat: int, draft_id: str = "d1", was_picked: bool = True
) -> PickRecord:
    return PickRecord(
        card_name=name,
        pick_position=position,
        copy_number=1,
        was_picked=was_picked,
        draft_id=draft_id,
        seat=seat if was_picked else NO_SEAT,
    )


PICKS = [
    _pick("Bolt", 1, 0),
    _pick("Volcanic Island", 40, 0),
    _pick("Goblin Guide", 20, 0),
    _pick("Counterspell", 2, 1),
    _pick("Brainstorm", 35, 1),
    _pick("Nobody Wanted", 90, NO_SEAT, was_picked=False),
]

MATCH_STATS = {"d1": {0: SeatMatchStats(games_won=6, games_lost=2), 1: SeatMatchStats(2, 6)}}

CARD_METADATA = {
    "volcanic island": CardMetadata(name="Volcanic Island", type_line="Land — Mountain Island"),
    "bolt": CardMetadata(name="Bolt", type_line="Instant"),
}


@pytest.mark.parametrize(
    "position,expected",
    [(1, 0.95), (15, 0.95), (16, 0.8), (23, 0.8), (24, 0.4), (30, 0.4), (31, 0.1), (300, 0.1)],
)
def test_play_probability_tiers(position: int, expected: float) -> None:
    assert get_play_probability(position, False) == expected


def test_lands_always_play() -> None:
    assert get_play_probability(300, True) == 1.0
    assert is_land("Basic Land — Mountain")
    assert not is_land("Creature — Elf")
    assert not is_land(None)


def test_weighted_equity_distributes_by_play_probability() -> None:
    equity = calculate_win_equity(PICKS, MATCH_STATS, CARD_METADATA)
    total = 0.95 + 1.0 + 0.8
    assert np.isclose(equity["bolt"].wins, 6 * 0.95 / total)
    assert np.isclose(equity["volcanic island"].losses, 2 * 1.0 / total)
    assert np.isclose(equity["goblin guide"].win_rate, 0.75)
    assert "nobody wanted" not in equity


def test_weighted_wins_sum_to_seat_total() -> None:
    equity = calculate_win_equity(PICKS, MATCH_STATS, CARD_METADATA)
    seat0 = ["bolt", "volcanic island", "goblin guide"]
    assert np.isclose(sum(equity[c].wins for c in seat0), 6)
    assert np.isclose(sum(equity[c].losses for c in seat0), 2)


def test_missing_metadata_means_non_land() -> None:
    equity = calculate_win_equity(PICKS, MATCH_STATS)
    total = 0.95 + 0.1 + 0.8
    assert np.isclose(equity["volcanic island"].wins, 6 * 0.1 / total)


def test_raw_win_rate_splits_evenly() -> None:
    raw = calculate_raw_win_rate(PICKS, MATCH_STATS)
    for card in ["bolt", "volcanic island", "goblin guide"]:
        assert np.isclose(raw[card].wins, 2.0)
        assert np.isclose(raw[card].losses, 2 / 3)
    assert np.isclose(raw["counterspell"].wins, 1.0)
    assert np.isclose(raw["brainstorm"].losses, 3.0)
    assert np.isclose(raw["brainstorm"].win_rate, 0.25)


def test_accumulates_across_drafts() -> None:
    picks = [_pick("Bolt", 1, 0, "d1"), _pick("Bolt", 3, 2, "d2")]
    match_stats = {"d1": {0: SeatMatchStats(3, 1)}, "d2": {2: SeatMatchStats(1, 3)}}
    raw = calculate_raw_win_rate(picks, match_stats)
    assert np.isclose(raw["bolt"].wins, 4)
    assert np.isclose(raw["bolt"].losses, 4)
    assert np.isclose(raw["bolt"].win_rate, 0.5)


def test_seats_without_picks_or_games() -> None:
    match_stats = {
        "d1": {5: SeatMatchStats(3, 0), 0: SeatMatchStats(0, 0)},
        "missing": {0: SeatMatchStats(1, 1)},
    }
    equity = calculate_win_equity(PICKS, match_stats)
    raw = calculate_raw_win_rate(PICKS, match_stats)
    # Seat 1 has no match stats and is never visited
    assert "counterspell" not in equity
    assert equity["bolt"].win_rate == 0.0
    assert raw["bolt"].wins == 0.0


def test_attach_win_rates() -> None:
    stats = calculate_card_stats(PICKS)
    merged = attach_win_rates(
        stats,
        calculate_win_equity(PICKS, MATCH_STATS, CARD_METADATA),
        calculate_raw_win_rate(PICKS, MATCH_STATS),
    )
    by_name = {s.card_name: s for s in merged}
    assert np.isclose(by_name["Counterspell"].raw_win_rate.win_rate, 0.25)
    assert by_name["Nobody Wanted"].win_equity is None
    assert stats[0].win_equity is None
