"""Reconstruct the state of an in-progress rotisserie draft.

The spreadsheet's own status cells ("Picks Made:", "Next Player:") are trusted
first because they already account for double-pick rounds; the snake-order
arithmetic in :mod:`rotisserie_stats.draft.turn_order` is the fallback.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence

from rotisserie_stats.config import get_config
from rotisserie_stats.data.grid import cell, extract_metadata
from rotisserie_stats.data.parse_picks import (
    FIRST_PICK_ROW_INDEX,
    FIRST_SEAT_COLUMN,
    MIN_PICK_GRID_ROWS,
    SEAT_ROW_INDEX,
    parse_pool,
    read_drafter_names,
)
from rotisserie_stats.data.records import (
    CardMetadata,
    DraftParseError,
    DrafterNotFoundError,
    card_name_key,
    normalize_card_name,
)
from rotisserie_stats.draft.turn_order import (
    DEFAULT_DOUBLE_PICK_STARTS_AFTER_ROUND,
    get_drafter_for_pick,
    picks_until_next_turn,
)
from rotisserie_stats.utils.logging_config import get_logger

logger = get_logger(__name__)

PICKS_MADE_LABEL = "Picks Made:"
NEXT_PLAYER_LABEL = "Next Player:"
DOUBLE_PICKS_AFTER_LABEL = "Double Picks After:"

# Runner-up color must reach this share of the leader's count to be reported
SECOND_COLOR_MIN_SHARE = 0.3

_NON_LETTERS = re.compile(r"[^a-zA-Z]")


@dataclass
class DraftState:
    """Snapshot of a live draft from one seat's point of view.

    Attributes:
        drafters: Seat names in column order
        user_index: Seat index of the configured user
        current_pick_number: Next unfilled pick (1-indexed)
        current_drafter_index: Seat on the clock
        is_users_turn: Whether the user is on the clock
        picks_until_user: Picks before the user's turn (0 on their turn)
        user_picks: Cards the user has taken so far
        all_picks: Seat name -> cards taken so far
        available_cards: Pool cards nobody has taken yet
        pool_size: Number of card copies in the pool
        double_pick_starts_after_round: Last single-pick round for this draft
    """

    drafters: List[str]
    user_index: int
    current_pick_number: int
    current_drafter_index: int
    is_users_turn: bool
    picks_until_user: int
    user_picks: List[str] = field(default_factory=list)
    all_picks: Dict[str, List[str]] = field(default_factory=dict)
    available_cards: List[str] = field(default_factory=list)
    pool_size: int = 0
    double_pick_starts_after_round: int = DEFAULT_DOUBLE_PICK_STARTS_AFTER_ROUND


def find_user_index(drafters: Sequence[str], user_name: str) -> int:
    """Find the user's seat by exact name or by name with decorations stripped.

    Raises:
        DrafterNotFoundError: Listing every seat name when there is no match.
    """
    for index, name in enumerate(drafters):
        if name == user_name or _NON_LETTERS.sub("", name) == user_name:
            return index
    raise DrafterNotFoundError(
        f'User "{user_name}" not found in drafter list. '
        f"Set DRAFT_USER_NAME environment variable to your drafter name. "
        f"Found drafters: {', '.join(drafters)}"
    )


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def parse_draft_state(
    pick_rows: Sequence[Sequence[str]],
    pool_rows: Sequence[Sequence[str]],
    user_name: str | None = None,
) -> DraftState:
    """Build a :class:`DraftState` from a live pick grid and its pool listing.

    Args:
        pick_rows: Pick grid (same layout as :func:`parse_draft_picks` expects)
        pool_rows: Pool listing
        user_name: Seat to treat as the user; defaults to ``DRAFT_USER_NAME``

    Raises:
        DraftParseError: If the grid is too short or has no seat names.
        DrafterNotFoundError: If the user is not one of the seats.
    """
    if len(pick_rows) < MIN_PICK_GRID_ROWS:
        raise DraftParseError(
            f"Invalid pick grid: {len(pick_rows)} rows, expected at least "
            f"{MIN_PICK_GRID_ROWS} for headers + picks"
        )

    drafters = read_drafter_names(pick_rows[SEAT_ROW_INDEX])
    if not drafters:
        raise DraftParseError(
            f"Invalid pick grid: no drafter names found in row {SEAT_ROW_INDEX + 1}"
        )

    config = get_config().draft
    user_index = find_user_index(drafters, user_name or config.user_name)
    num_drafters = len(drafters)

    all_picks: Dict[str, List[str]] = {name: [] for name in drafters}
    picked_cards: set[str] = set()
    first_empty_pick: int | None = None

    for row in pick_rows[FIRST_PICK_ROW_INDEX:]:
        if len(row) < 3:
            continue
        round_number = _parse_int(cell(row, 0))
        if round_number is None:
            continue

        # Snake order within the row, to find the first unfilled pick
        is_forward = round_number % 2 == 1
        for pick_in_round in range(num_drafters):
            seat = pick_in_round if is_forward else num_drafters - 1 - pick_in_round
            card_name = normalize_card_name(cell(row, FIRST_SEAT_COLUMN + seat))
            if card_name:
                all_picks[drafters[seat]].append(card_name)
                picked_cards.add(card_name)
            elif first_empty_pick is None:
                first_empty_pick = (round_number - 1) * num_drafters + pick_in_round + 1

    double_pick_starts_after_round = (
        _parse_int(extract_metadata(pick_rows, DOUBLE_PICKS_AFTER_LABEL))
        or config.double_pick_starts_after_round
    )

    picks_made = _parse_int(extract_metadata(pick_rows, PICKS_MADE_LABEL))
    if picks_made is not None:
        current_pick_number = picks_made + 1
    elif first_empty_pick is not None:
        current_pick_number = first_empty_pick
    else:
        current_pick_number = sum(len(cards) for cards in all_picks.values()) + 1

    next_player = _parse_int(extract_metadata(pick_rows, NEXT_PLAYER_LABEL))
    if next_player is not None and 1 <= next_player <= num_drafters:
        current_drafter_index = next_player - 1
    else:
        current_drafter_index = get_drafter_for_pick(
            current_pick_number, num_drafters, double_pick_starts_after_round
        )

    is_users_turn = current_drafter_index == user_index
    picks_until_user = (
        0
        if is_users_turn
        else picks_until_next_turn(
            current_pick_number, user_index, num_drafters, double_pick_starts_after_round
        )
    )

    pool_cards = parse_pool(pool_rows)
    available_cards = [card for card in pool_cards if card not in picked_cards]

    logger.info(
        f"Draft state: pick {current_pick_number}, {drafters[current_drafter_index]} on the "
        f"clock, {picks_until_user} picks until {drafters[user_index]}"
    )

    return DraftState(
        drafters=drafters,
        user_index=user_index,
        current_pick_number=current_pick_number,
        current_drafter_index=current_drafter_index,
        is_users_turn=is_users_turn,
        picks_until_user=picks_until_user,
        user_picks=list(all_picks[drafters[user_index]]),
        all_picks=all_picks,
        available_cards=available_cards,
        pool_size=len(pool_cards),
        double_pick_starts_after_round=double_pick_starts_after_round,
    )


def infer_drafter_colors(
    picks: Sequence[str], card_metadata: Mapping[str, CardMetadata]
) -> List[str]:
    """Guess a seat's colors from the color identities of its picks.

    Returns the most common color, plus the runner-up when it reaches 30% of
    the leader's count. Cards missing from ``card_metadata`` are ignored.
    """
    color_counts: Counter[str] = Counter()
    for card_name in picks:
        card = card_metadata.get(card_name_key(card_name))
        if card is None:
            continue
        color_counts.update(card.color_identity or card.colors)

    ranked = color_counts.most_common()
    if not ranked:
        return []
    if len(ranked) == 1:
        return [ranked[0][0]]

    (top_color, top_count), (second_color, second_count) = ranked[0], ranked[1]
    if second_count >= top_count * SECOND_COLOR_MIN_SHARE:
        return [top_color, second_color]
    return [top_color]
