"""Rank cards across drafts by how early they tend to be picked.

Each card's score is a weighted geometric mean of its pick positions: later
copies of a card and copies nobody drafted are weaker signal, so they count
less. Lower scores mean the card goes earlier.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence

import pandas as pd

from rotisserie_stats.data.records import (
    DEFAULT_NUM_DRAFTERS,
    UNKNOWN_DATE,
    DraftMetadata,
    PickRecord,
    card_name_key,
)
from rotisserie_stats.utils.grouping import group_by
from rotisserie_stats.utils.logging_config import get_logger
from rotisserie_stats.utils.metrics import (
    calculate_pick_weight,
    round_half_up,
    weighted_geometric_mean,
)

logger = get_logger(__name__)

# Histogram of pick positions: 15 buckets of 30 picks, the last one open-ended
DISTRIBUTION_BUCKET_COUNT = 15
DISTRIBUTION_BUCKET_SIZE = 30

@dataclass
class DraftScore:
    """One point in a card's score history (one calendar date).

    ``picked_count`` and ``total_count`` are only set when several drafts share
    the date.
    """

    draft_id: str
    date: str
    draft_name: str
    pick_position: int
    was_picked: bool
    num_drafters: int
    round: int
    picked_count: int | None = None
    total_count: int | None = None


@dataclass
class WinRateResult:
    """Wins and losses attributed to a card, with the derived win rate."""

    wins: float = 0.0
    losses: float = 0.0
    win_rate: float = 0.0


@dataclass
class CardStats:
    """Aggregated pick statistics for one card across every draft."""

    card_name: str
    weighted_geomean: float
    total_picks: int
    times_available: int
    drafts_picked_in: int
    times_unpicked: int
    max_copies_in_draft: int
    colors: List[str] = field(default_factory=list)
    score_history: List[DraftScore] = field(default_factory=list)
    pick_distribution: List[int] = field(
        default_factory=lambda: [0] * DISTRIBUTION_BUCKET_COUNT
    )
    win_equity: WinRateResult | None = None
    raw_win_rate: WinRateResult | None = None


def get_distribution_bucket(pick_position: int) -> int:
    """Histogram bucket for a pick position (1-30 -> 0, ..., 421+ -> 14).

    Positions below 1 clamp to the first bucket.
    """
    bucket = (pick_position - 1) // DISTRIBUTION_BUCKET_SIZE
    return max(0, min(bucket, DISTRIBUTION_BUCKET_COUNT - 1))


def _build_score_history(
    card_picks: Sequence[PickRecord],
    draft_metadata: Mapping[str, DraftMetadata],
    default_num_drafters: int = DEFAULT_NUM_DRAFTERS,
) -> List[DraftScore]:
    # Best (lowest) position per draft, then one entry per calendar date
    per_draft = []
    for draft_id, picks in group_by(card_picks, lambda p: p.draft_id).items():
        metadata = draft_metadata.get(draft_id)
        best = min(picks, key=lambda p: p.pick_position)
        num_drafters = metadata.num_drafters if metadata else None
        per_draft.append(
            {
                "date": (metadata.date if metadata else "") or UNKNOWN_DATE,
                "draft_name": (metadata.name if metadata else "") or draft_id,
                "pick_position": best.pick_position,
                "was_picked": best.was_picked,
                "num_drafters": default_num_drafters if num_drafters is None else num_drafters,
            }
        )

    history: List[DraftScore] = []
    for date, scores in group_by(per_draft, lambda s: s["date"]).items():
        position = round_half_up(
            weighted_geometric_mean((1.0, s["pick_position"]) for s in scores)
        )
        picked_count = sum(1 for s in scores if s["was_picked"])
        avg_num_drafters = round_half_up(
            sum(s["num_drafters"] for s in scores) / len(scores)
        )
        round_number = math.ceil(position / avg_num_drafters) if avg_num_drafters > 0 else 0
        shared_date = len(scores) > 1

        history.append(
            DraftScore(
                draft_id=date,
                date=date,
                draft_name=f"{len(scores)} drafts" if shared_date else scores[0]["draft_name"],
                pick_position=position,
                was_picked=picked_count > 0,
                num_drafters=avg_num_drafters,
                round=round_number,
                picked_count=picked_count if shared_date else None,
                total_count=len(scores) if shared_date else None,
            )
        )

    history.sort(key=lambda entry: entry.date)
    return history


def calculate_single_card_stats(
    card_name: str,
    card_picks: Sequence[PickRecord],
    draft_metadata: Mapping[str, DraftMetadata],
    default_num_drafters: int = DEFAULT_NUM_DRAFTERS,
) -> CardStats:
    """Aggregate every record of one card into :class:`CardStats`."""
    weighted_geomean = weighted_geometric_mean(
        (calculate_pick_weight(p.copy_number, p.was_picked), p.pick_position)
        for p in card_picks
    )

    copies_by_draft: Dict[str, int] = {}
    for pick in card_picks:
        copies_by_draft[pick.draft_id] = max(
            copies_by_draft.get(pick.draft_id, 0), pick.copy_number
        )

    pick_distribution = [0] * DISTRIBUTION_BUCKET_COUNT
    # Positions below 1 are left out, as in the geomean
    for pick in card_picks:
        if pick.pick_position > 0:
            pick_distribution[get_distribution_bucket(pick.pick_position)] += 1

    return CardStats(
        card_name=card_name,
        weighted_geomean=weighted_geomean,
        total_picks=sum(1 for p in card_picks if p.was_picked),
        times_available=len({p.draft_id for p in card_picks}),
        drafts_picked_in=len({p.draft_id for p in card_picks if p.was_picked}),
        times_unpicked=sum(1 for p in card_picks if not p.was_picked),
        max_copies_in_draft=max(copies_by_draft.values(), default=0),
        colors=sorted({p.color for p in card_picks if p.color}),
        score_history=_build_score_history(card_picks, draft_metadata, default_num_drafters),
        pick_distribution=pick_distribution,
    )


def calculate_card_stats(
    picks: Sequence[PickRecord],
    draft_metadata: Mapping[str, DraftMetadata] | None = None,
    default_num_drafters: int = DEFAULT_NUM_DRAFTERS,
) -> List[CardStats]:
    """Calculate stats for every card, sorted by weighted geomean (best first).

    Cards are grouped case-insensitively; the first record's name is used for
    display.

    Args:
        picks: Pick records from every draft
        draft_metadata: Draft id -> metadata, used for the score history
        default_num_drafters: Seat count for drafts whose metadata has none

    Returns:
        One :class:`CardStats` per distinct card
    """
    if not picks:
        return []
    draft_metadata = draft_metadata or {}

    stats = [
        calculate_single_card_stats(
            card_picks[0].card_name, card_picks, draft_metadata, default_num_drafters
        )
        for card_picks in group_by(picks, lambda p: card_name_key(p.card_name)).values()
    ]
    stats.sort(key=lambda s: s.weighted_geomean)

    logger.info(
        f"Calculated stats for {len(stats)} cards from {len(picks)} records "
        f"across {len({p.draft_id for p in picks})} drafts"
    )
    return stats


def card_stats_to_frame(stats: Sequence[CardStats]) -> pd.DataFrame:
    """Flatten ranked stats into a DataFrame (one row per card, rank order kept)."""
    rows = []
    for rank, stat in enumerate(stats, start=1):
        row = {
            "rank": rank,
            "card_name": stat.card_name,
            "weighted_geomean": stat.weighted_geomean,
            "total_picks": stat.total_picks,
            "times_available": stat.times_available,
            "drafts_picked_in": stat.drafts_picked_in,
            "times_unpicked": stat.times_unpicked,
            "max_copies_in_draft": stat.max_copies_in_draft,
            "colors": ",".join(stat.colors),
        }
        if stat.win_equity is not None:
            row["equity_win_rate"] = stat.win_equity.win_rate
        if stat.raw_win_rate is not None:
            row["raw_win_rate"] = stat.raw_win_rate.win_rate
        rows.append(row)
    return pd.DataFrame(rows)
