"""Turn a rotisserie pick grid and its pool listing into pick records.

Pick grid layout (rows are 0-indexed here):
    - Rows 0-1: title and spacing (ignored)
    - Row 2: seat names from column C, ended by an arrow marker or a gap
    - Row 3+: column A is the round number, column B a direction arrow,
      columns C onwards one card per seat; an optional block of color codes
      (one per seat) sits at the far right of the row

Pool listing layout:
    - Row 0: header
    - Row 1+: column A check mark, column B card name, column D color code
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from rotisserie_stats.data.grid import LAST_ROUND_MARKER, cell, is_arrow
from rotisserie_stats.data.records import (
    NO_SEAT,
    DraftParseError,
    PickRecord,
    normalize_card_name,
)
from rotisserie_stats.utils.logging_config import get_logger

logger = get_logger(__name__)

# Header rows before the seat-name row, and the first column holding a seat
SEAT_ROW_INDEX = 2
FIRST_SEAT_COLUMN = 2
FIRST_PICK_ROW_INDEX = 3
MIN_PICK_GRID_ROWS = FIRST_PICK_ROW_INDEX + 1

POOL_NAME_COLUMN = 1
POOL_COLOR_COLUMN = 3

_COLOR_CODE = re.compile(r"^[WUBRGC]+$")


@dataclass
class ParsedDraft:
    """Result of parsing one draft's pick grid (and optionally its pool)."""

    picks: List[PickRecord]
    num_drafters: int
    drafter_names: List[str]
    pool_size: int = 0


def read_drafter_names(header_row: Sequence[str]) -> List[str]:
    """Collect seat names from the seat-name row.

    Names run from column C until an arrow marker; without a marker they stop
    at the first empty cell. Cells starting with ``#`` are spreadsheet error
    values, never names.
    """
    arrow_index = next(
        (i for i in range(FIRST_SEAT_COLUMN, len(header_row)) if is_arrow(header_row[i])),
        None,
    )

    names: List[str] = []
    if arrow_index is not None and arrow_index > FIRST_SEAT_COLUMN:
        for i in range(FIRST_SEAT_COLUMN, arrow_index):
            name = cell(header_row, i)
            if name and not name.startswith("#"):
                names.append(name)
        return names

    for i in range(FIRST_SEAT_COLUMN, len(header_row)):
        name = cell(header_row, i)
        if not name or is_arrow(name):
            if names or is_arrow(name):
                break
            continue
        if name.startswith("#"):
            continue
        names.append(name)
    return names


def detect_color_start(row: Sequence[str], num_drafters: int) -> int | None:
    """Locate the first column of the per-seat color block in a pick row.

    Scans from the right for a run of color-code cells ("W", "UB", "C", ...)
    where empty cells don't break the run. Without any color codes, falls back
    to the last ``num_drafters`` columns when they lie past the seat columns.

    Returns:
        Column index of the first seat's color, or None when the row has no
        color block (records then get an empty color).
    """
    first_color_index: int | None = None
    for i in range(len(row) - 1, -1, -1):
        value = cell(row, i)
        if not value:
            continue
        if _COLOR_CODE.match(value):
            first_color_index = i
        elif first_color_index is not None:
            break

    if first_color_index is None:
        potential_start = len(row) - num_drafters
        if potential_start > FIRST_SEAT_COLUMN + num_drafters:
            return potential_start
    return first_color_index


def _parse_round_number(row: Sequence[str]) -> int | None:
    try:
        return int(cell(row, 0))
    except ValueError:
        return None


def pick_position(round_number: int, seat: int, num_drafters: int) -> int:
    """Absolute pick number of ``seat`` in ``round_number`` (odd rounds forward)."""
    if round_number % 2 == 1:
        return (round_number - 1) * num_drafters + seat + 1
    return (round_number - 1) * num_drafters + (num_drafters - seat)


def _picks_from_row(
    row: Sequence[str],
    round_number: int,
    num_drafters: int,
    draft_id: str,
    copy_counts: Dict[str, int],
) -> Tuple[List[PickRecord], Dict[str, int]]:
    """Parse one pick row, returning its records and the updated copy counts."""
    counts = dict(copy_counts)
    color_start = detect_color_start(row, num_drafters)
    records: List[PickRecord] = []

    for seat in range(num_drafters):
        card_name = normalize_card_name(cell(row, FIRST_SEAT_COLUMN + seat))
        if not card_name:
            continue

        counts[card_name] = counts.get(card_name, 0) + 1
        color = cell(row, color_start + seat) if color_start is not None else ""

        records.append(
            PickRecord(
                card_name=card_name,
                pick_position=pick_position(round_number, seat, num_drafters),
                copy_number=counts[card_name],
                was_picked=True,
                draft_id=draft_id,
                seat=seat,
                color=color,
            )
        )

    return records, counts


def parse_draft_picks(rows: Sequence[Sequence[str]], draft_id: str) -> ParsedDraft:
    """Parse a pick grid into picked-card records.

    Copy numbers count every earlier copy of the same normalized name anywhere
    in the draft, scanning rows top to bottom and seats left to right.

    Raises:
        DraftParseError: If the grid has no pick rows or no seat names.
    """
    if len(rows) < MIN_PICK_GRID_ROWS:
        raise DraftParseError(
            f"Pick grid for {draft_id!r} has {len(rows)} rows; expected at least "
            f"{MIN_PICK_GRID_ROWS} (title rows, seat names in row {SEAT_ROW_INDEX + 1}, picks)"
        )

    drafter_names = read_drafter_names(rows[SEAT_ROW_INDEX])
    num_drafters = len(drafter_names)
    if num_drafters == 0:
        raise DraftParseError(
            f"Pick grid for {draft_id!r} has no seat names in row {SEAT_ROW_INDEX + 1} "
            f"starting at column C"
        )

    picks: List[PickRecord] = []
    copy_counts: Dict[str, int] = {}
    skipped_rows = 0

    for row in rows[FIRST_PICK_ROW_INDEX:]:
        round_number = _parse_round_number(row) if len(row) >= 3 else None
        if round_number is None:
            skipped_rows += 1
            continue
        row_picks, copy_counts = _picks_from_row(
            row, round_number, num_drafters, draft_id, copy_counts
        )
        picks.extend(row_picks)

    logger.debug(
        f"Draft {draft_id}: {len(picks)} picks across {num_drafters} seats "
        f"({skipped_rows} non-pick rows skipped)"
    )
    return ParsedDraft(picks=picks, num_drafters=num_drafters, drafter_names=drafter_names)


def parse_pool_entries(rows: Sequence[Sequence[str]]) -> List[Tuple[str, str]]:
    """Return ``(normalized name, color)`` for every card copy in a pool listing."""
    entries: List[Tuple[str, str]] = []
    for row in rows[1:]:
        if len(row) < 2:
            continue
        name = normalize_card_name(cell(row, POOL_NAME_COLUMN))
        if not name:
            continue
        entries.append((name, cell(row, POOL_COLOR_COLUMN)))
    return entries


def parse_pool(rows: Sequence[Sequence[str]]) -> List[str]:
    """Return every normalized card name in a pool listing, one per copy."""
    return [name for name, _ in parse_pool_entries(rows)]


def parse_draft(
    pick_rows: Sequence[Sequence[str]],
    pool_rows: Sequence[Sequence[str]],
    draft_id: str,
) -> ParsedDraft:
    """Parse a whole draft: picked copies from the grid plus unpicked pool copies.

    Pool copies beyond the number of times a card shows up in the pick grid are
    recorded as unpicked, at ``pick_position == pool_size`` with no seat. Their
    copy numbers continue after the picked copies.
    """
    parsed = parse_draft_picks(pick_rows, draft_id)
    pool_entries = parse_pool_entries(pool_rows)
    pool_size = len(pool_entries)

    copy_counts: Dict[str, int] = {}
    for pick in parsed.picks:
        copy_counts[pick.card_name] = max(copy_counts.get(pick.card_name, 0), pick.copy_number)
    unclaimed = dict(copy_counts)

    unpicked: List[PickRecord] = []
    for name, color in pool_entries:
        if unclaimed.get(name, 0) > 0:
            unclaimed[name] -= 1
            continue
        copy_counts[name] = copy_counts.get(name, 0) + 1
        unpicked.append(
            PickRecord(
                card_name=name,
                pick_position=pool_size,
                copy_number=copy_counts[name],
                was_picked=False,
                draft_id=draft_id,
                seat=NO_SEAT,
                color=color,
            )
        )

    missing_from_pool = sum(count for count in unclaimed.values() if count > 0)
    if missing_from_pool:
        logger.warning(
            f"Draft {draft_id}: {missing_from_pool} picked copies not found in the pool listing"
        )
    logger.info(
        f"Parsed draft {draft_id}: {len(parsed.picks)} picked, {len(unpicked)} unpicked, "
        f"pool size {pool_size}"
    )

    return ParsedDraft(
        picks=parsed.picks + unpicked,
        num_drafters=parsed.num_drafters,
        drafter_names=parsed.drafter_names,
        pool_size=pool_size,
    )


def is_draft_complete(rows: Sequence[Sequence[str]]) -> bool:
    """Check whether the last round (the row marked with ✪) has been picked.

    Drafts without the marker are treated as complete.
    """
    for row in rows:
        if any(LAST_ROUND_MARKER in value for value in row):
            first_pick = cell(row, FIRST_SEAT_COLUMN)
            return bool(first_pick) and not is_arrow(first_pick)
    return True
