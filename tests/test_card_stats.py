import math

import numpy as np

from rotisserie_stats.analysis.card_stats import (
    DISTRIBUTION_BUCKET_COUNT,
    calculate_card_stats,
    card_stats_to_frame,
    get_distribution_bucket,
)
from rotisserie_stats.data.records import NO_SEAT, DraftMetadata, PickRecord


def _pick(
    name: str,
    position: int,
    draft_id: str = "d1",
    copy_number: int = 1,
    was_picked: bool = True,
    color: str = "",
) -> PickRecord:
    return PickRecord(
        card_name=name,
        pick_position=position,
        copy_number=copy_number,
        was_picked=was_picked,
        draft_id=draft_id,
        seat=0 if was_picked else NO_SEAT,
        color=color,
    )


def test_empty_input() -> None:
    assert calculate_card_stats([]) == []


def test_weighted_geomean_with_copy_and_unpicked_weights() -> None:
    picks = [
        _pick("Bolt", 5, "d1"),
        _pick("Bolt", 400, "d2", copy_number=2, was_picked=False),
    ]
    (stats,) = calculate_card_stats(picks)
    expected = math.exp((math.log(5) + 0.25 * math.log(400)) / 1.25)
    assert np.isclose(stats.weighted_geomean, expected)
    assert stats.total_picks == 1
    assert stats.times_unpicked == 1
    assert stats.times_available == 2
    assert stats.drafts_picked_in == 1
    assert stats.max_copies_in_draft == 2


def test_sorted_by_score_and_grouped_case_insensitively() -> None:
    picks = [
        _pick("Island", 90),
        _pick("Bolt", 3),
        _pick("bolt", 7, "d2"),
        _pick("Ragavan", 1, "d2"),
    ]
    stats = calculate_card_stats(picks)
    assert [s.card_name for s in stats] == ["Ragavan", "Bolt", "Island"]
    assert np.isclose(stats[1].weighted_geomean, math.sqrt(21))


def test_all_invalid_positions_score_zero() -> None:
    (stats,) = calculate_card_stats([_pick("Ghost", 0), _pick("Ghost", -2, "d2")])
    assert stats.weighted_geomean == 0.0
    assert sum(stats.pick_distribution) == 0


def test_colors_are_sorted_and_non_empty() -> None:
    picks = [
        _pick("Charm", 10, color="UB"),
        _pick("Charm", 12, "d2", color="B"),
        _pick("Charm", 9, "d3"),
    ]
    (stats,) = calculate_card_stats(picks)
    assert stats.colors == ["B", "UB"]


def test_distribution_buckets() -> None:
    assert get_distribution_bucket(1) == 0
    assert get_distribution_bucket(30) == 0
    assert get_distribution_bucket(31) == 1
    assert get_distribution_bucket(450) == 14
    assert get_distribution_bucket(999) == 14
    assert get_distribution_bucket(0) == 0
    assert get_distribution_bucket(-5) == 0

    picks = [_pick("Card", 30), _pick("Card", 31, "d2"), _pick("Card", 500, "d3", was_picked=False)]
    (stats,) = calculate_card_stats(picks)
    assert len(stats.pick_distribution) == DISTRIBUTION_BUCKET_COUNT
    assert stats.pick_distribution[0] == 1
    assert stats.pick_distribution[1] == 1
    assert stats.pick_distribution[14] == 1
    assert sum(stats.pick_distribution) == 3


def test_score_history_one_entry_per_draft_date() -> None:
    metadata = {
        "d1": DraftMetadata("d1", "Winter Cube", "2025-12-01", 8),
        "d2": DraftMetadata("d2", "Autumn Cube", "2025-10-01", None),
    }
    picks = [
        _pick("Bolt", 20, "d1"),
        _pick("Bolt", 9, "d1", copy_number=2),
        _pick("Bolt", 25, "d2"),
    ]
    (stats,) = calculate_card_stats(picks, metadata)
    history = stats.score_history
    assert [entry.date for entry in history] == ["2025-10-01", "2025-12-01"]

    autumn, winter = history
    assert autumn.draft_name == "Autumn Cube"
    assert autumn.num_drafters == 10
    assert autumn.round == 3
    assert autumn.picked_count is None and autumn.total_count is None
    # Best pick in the draft wins
    assert winter.pick_position == 9
    assert winter.round == 2
    assert winter.draft_id == "2025-12-01"


def test_score_history_aggregates_shared_dates() -> None:
    metadata = {
        "a": DraftMetadata("a", "Table A", "2025-11-01", 8),
        "b": DraftMetadata("b", "Table B", "2025-11-01", 11),
    }
    picks = [
        _pick("Bolt", 4, "a"),
        _pick("Bolt", 300, "b", was_picked=False),
    ]
    (stats,) = calculate_card_stats(picks, metadata)
    (entry,) = stats.score_history
    assert entry.draft_name == "2 drafts"
    assert entry.pick_position == round(math.sqrt(4 * 300))  # 34.64 -> 35
    assert entry.num_drafters == 10  # 9.5 rounds up
    assert entry.round == 4
    assert entry.was_picked
    assert entry.picked_count == 1
    assert entry.total_count == 2


def test_score_history_zero_seats_gives_round_zero() -> None:
    metadata = {"d1": DraftMetadata("d1", "Odd", "2025-01-01", 0)}
    (stats,) = calculate_card_stats([_pick("Bolt", 12)], metadata)
    assert stats.score_history[0].round == 0


def test_score_history_without_metadata() -> None:
    (stats,) = calculate_card_stats([_pick("Bolt", 12, "lost-draft")])
    (entry,) = stats.score_history
    assert entry.date == "1970-01-01"
    assert entry.draft_name == "lost-draft"
    assert entry.round == 2


def test_stats_frame_keeps_rank_order() -> None:
    stats = calculate_card_stats([_pick("Island", 90), _pick("Bolt", 3, color="R")])
    frame = card_stats_to_frame(stats)
    assert list(frame["card_name"]) == ["Bolt", "Island"]
    assert list(frame["rank"]) == [1, 2]
    assert frame.loc[0, "colors"] == "R"


def test_default_seat_count_applies_when_metadata_has_none() -> None:
    metadata = {"d1": DraftMetadata("d1", "Cube", "2025-01-01")}
    picks = [_pick("Bolt", 9)]
    (ten_seats,) = calculate_card_stats(picks, metadata)
    (eight_seats,) = calculate_card_stats(picks, metadata, default_num_drafters=8)
    assert ten_seats.score_history[0].round == 1
    assert eight_seats.score_history[0].round == 2
    assert eight_seats.score_history[0].num_drafters == 8
