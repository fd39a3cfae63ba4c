"""Core records shared by the parsers and the aggregators.

Everything downstream keys cards by :func:`card_name_key`, so the normalization
here must be the only place card names get cleaned up.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, MutableMapping

import pandas as pd

from rotisserie_stats.utils.logging_config import get_logger

logger = get_logger(__name__)

# Seat value for pool copies nobody drafted
NO_SEAT = -1

# Seat count assumed for drafts recorded before it was tracked
DEFAULT_NUM_DRAFTERS = 10

# Date given to drafts with no recorded date
UNKNOWN_DATE = "1970-01-01"

_COPY_SUFFIX = re.compile(r"\s+\d+$")


class DraftParseError(ValueError):
    """Raised when a pick grid or pool listing cannot be interpreted."""


class DrafterNotFoundError(DraftParseError):
    """Raised when the configured user is not among the seat names."""


def normalize_card_name(card_name: str) -> str:
    """Strip whitespace and a trailing duplicate marker ("Scalding Tarn 2")."""
    return _COPY_SUFFIX.sub("", card_name.strip())


def card_name_key(card_name: str) -> str:
    """Lowercase lookup key for case-insensitive card matching."""
    return normalize_card_name(card_name).lower()


@dataclass
class PickRecord:
    """One copy of a card in one draft.

    Attributes:
        card_name: Normalized display name
        pick_position: Absolute pick number, or the pool size if never picked
        copy_number: 1-indexed ordinal among copies of this card in the draft
        was_picked: False for copies no seat selected
        draft_id: Draft this copy belongs to
        seat: 0-indexed seat that took it, or ``NO_SEAT``
        color: Color code string such as "W" or "UB" (may be empty)
    """

    card_name: str
    pick_position: int
    copy_number: int
    was_picked: bool
    draft_id: str
    seat: int = NO_SEAT
    color: str = ""


@dataclass
class DraftMetadata:
    """Display information for a single draft."""

    draft_id: str
    name: str
    date: str
    num_drafters: int | None = None


@dataclass
class CardMetadata:
    """Cached card attributes used for land detection and color identity."""

    name: str
    type_line: str = ""
    colors: List[str] = field(default_factory=list)
    color_identity: List[str] = field(default_factory=list)
    mana_cost: str = ""
    mana_value: float = 0.0
    oracle_text: str = ""


def metadata_to_map(metadata: Mapping[str, Mapping[str, object]]) -> dict[str, DraftMetadata]:
    """Convert a ``{draft_id: {"name", "date", "numDrafters"}}`` mapping to records."""
    result: dict[str, DraftMetadata] = {}
    for draft_id, data in metadata.items():
        num_drafters = data.get("numDrafters", data.get("num_drafters"))
        result[draft_id] = DraftMetadata(
            draft_id=draft_id,
            name=str(data.get("name", draft_id)),
            date=str(data.get("date", "")),
            num_drafters=int(num_drafters) if num_drafters is not None else None,
        )
    return result


def _split_colors(value: object) -> List[str]:
    if not isinstance(value, str):
        return []
    return [c for c in value.strip() if c.isalpha()]


def parse_card_metadata(path: Path | str) -> Mapping[str, CardMetadata]:
    """Parse a card metadata CSV keyed by :func:`card_name_key`.

    Required columns are ``name`` and ``type_line``. ``colors`` and
    ``color_identity`` hold concatenated color letters ("UB"); ``mana_cost``,
    ``mana_value`` and ``oracle_text`` are optional.
    """
    logger.info(f"Loading card metadata from {path}")
    frame = pd.read_csv(path, dtype={"name": str, "type_line": str}, keep_default_na=False)
    logger.info(f"Loaded {len(frame)} cards from metadata CSV")

    required_columns = {"name", "type_line"}
    missing = required_columns - set(frame.columns)
    if missing:
        logger.error(f"Card metadata missing required columns: {sorted(missing)}")
        raise ValueError(f"Card metadata missing required columns: {sorted(missing)}")

    metadata: MutableMapping[str, CardMetadata] = {}
    for row in frame.to_dict(orient="records"):
        name = normalize_card_name(str(row["name"]))
        if not name:
            continue
        mana_value = row.get("mana_value", 0.0)
        metadata[card_name_key(name)] = CardMetadata(
            name=name,
            type_line=str(row["type_line"]),
            colors=_split_colors(row.get("colors")),
            color_identity=_split_colors(row.get("color_identity")),
            mana_cost=str(row.get("mana_cost", "")),
            mana_value=float(mana_value) if mana_value != "" else 0.0,
            oracle_text=str(row.get("oracle_text", "")),
        )

    return metadata
