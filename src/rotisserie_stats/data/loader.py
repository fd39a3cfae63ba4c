"""Load a directory of exported drafts.

Expected layout::

    data/
        metadata.json          {"<draft id>": {"name", "date", "numDrafters"}}
        <draft id>/
            picks.csv
            pool.csv
            matches.csv        (optional)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Tuple

from tqdm import tqdm

from rotisserie_stats.data.grid import read_grid
from rotisserie_stats.data.parse_matches import (
    SeatMatchStats,
    aggregate_seat_stats,
    parse_matches,
)
from rotisserie_stats.data.parse_picks import ParsedDraft, is_draft_complete, parse_draft
from rotisserie_stats.data.records import (
    UNKNOWN_DATE,
    DraftMetadata,
    DraftParseError,
    PickRecord,
    metadata_to_map,
)
from rotisserie_stats.utils.logging_config import get_logger

logger = get_logger(__name__)

PICKS_FILE = "picks.csv"
POOL_FILE = "pool.csv"
MATCHES_FILE = "matches.csv"
METADATA_FILE = "metadata.json"


@dataclass
class DraftCollection:
    """Everything the aggregators need, gathered from a data directory."""

    picks: List[PickRecord] = field(default_factory=list)
    metadata: Dict[str, DraftMetadata] = field(default_factory=dict)
    match_stats: Dict[str, Dict[int, SeatMatchStats]] = field(default_factory=dict)


def seat_lookup(drafter_names: List[str]) -> Dict[str, int]:
    """Map seat names, verbatim and lowercased, to seat indices."""
    name_to_seat: Dict[str, int] = {}
    for seat, name in enumerate(drafter_names):
        name_to_seat[name] = seat
        name_to_seat.setdefault(name.lower(), seat)
    return name_to_seat


def _resolve_metadata(
    metadata: DraftMetadata | None, draft_id: str, num_drafters: int
) -> DraftMetadata:
    # The pick grid knows the seat count even when metadata.json does not
    if metadata is None:
        return DraftMetadata(draft_id, draft_id, UNKNOWN_DATE, num_drafters)
    if not metadata.num_drafters:
        return replace(metadata, num_drafters=num_drafters)
    return metadata


def load_draft_folder(
    folder: Path, draft_id: str | None = None
) -> Tuple[ParsedDraft, Dict[int, SeatMatchStats]]:
    """Parse one draft folder; seat stats are empty when there is no matches file."""
    draft_id = draft_id or folder.name
    parsed = parse_draft(read_grid(folder / PICKS_FILE), read_grid(folder / POOL_FILE), draft_id)

    seat_stats: Dict[int, SeatMatchStats] = {}
    matches_path = folder / MATCHES_FILE
    if matches_path.exists():
        seat_stats = aggregate_seat_stats(
            parse_matches(read_grid(matches_path), seat_lookup(parsed.drafter_names))
        )

    return parsed, seat_stats


def load_drafts(data_dir: Path | str, *, skip_invalid: bool = True) -> DraftCollection:
    """Load every draft folder under ``data_dir``.

    Args:
        data_dir: Directory holding draft folders and ``metadata.json``
        skip_invalid: Log and skip folders that fail to parse instead of raising.
            Drafts still in progress are always skipped.

    Returns:
        Combined picks, metadata and per-seat match stats
    """
    data_dir = Path(data_dir)
    collection = DraftCollection()

    metadata_path = data_dir / METADATA_FILE
    if metadata_path.exists():
        with metadata_path.open("r", encoding="utf-8") as handle:
            collection.metadata = metadata_to_map(json.load(handle))
    else:
        logger.warning(f"No {METADATA_FILE} in {data_dir}; score history dates will be unknown")

    folders = sorted(
        p
        for p in data_dir.iterdir()
        if p.is_dir() and (p / PICKS_FILE).exists() and (p / POOL_FILE).exists()
    )
    logger.info(f"Found {len(folders)} draft folders in {data_dir}")

    loaded = 0
    for folder in tqdm(folders, desc="Loading drafts", disable=len(folders) < 5):
        if not is_draft_complete(read_grid(folder / PICKS_FILE)):
            logger.warning(f"Skipping {folder.name}: incomplete draft")
            continue
        try:
            parsed, seat_stats = load_draft_folder(folder)
        except DraftParseError as exc:
            if not skip_invalid:
                raise
            logger.warning(f"Skipping {folder.name}: {exc}")
            continue

        loaded += 1
        collection.picks.extend(parsed.picks)
        collection.metadata[folder.name] = _resolve_metadata(
            collection.metadata.get(folder.name), folder.name, parsed.num_drafters
        )
        if seat_stats:
            collection.match_stats[folder.name] = seat_stats

    logger.info(
        f"Loaded {len(collection.picks)} records from {loaded} of {len(folders)} drafts "
        f"({len(collection.match_stats)} with match results)"
    )
    return collection
