"""Rotisserie draft statistics.

Turns pick-by-pick records from rotisserie drafts (every seat picks in turn
from one shared, fully visible pool) into live draft state, cross-draft card
rankings and win-rate attributions.

Key Components:
    - Snake-draft turn order with late-draft double picks
    - Pick grid and pool listing parsers
    - Weighted geometric mean card rankings with score history
    - Win equity attribution from match results

Example:
    >>> from rotisserie_stats import calculate_card_stats, load_drafts
    >>>
    >>> collection = load_drafts("data")
    >>> stats = calculate_card_stats(collection.picks, collection.metadata)
    >>> print(stats[0].card_name, stats[0].weighted_geomean)
"""

from rotisserie_stats.analysis.card_stats import CardStats, DraftScore, calculate_card_stats
from rotisserie_stats.analysis.win_equity import calculate_raw_win_rate, calculate_win_equity
from rotisserie_stats.config import Config, get_config
from rotisserie_stats.data.loader import load_drafts
from rotisserie_stats.data.records import (
    DraftMetadata,
    DraftParseError,
    DrafterNotFoundError,
    PickRecord,
    card_name_key,
    normalize_card_name,
)
from rotisserie_stats.draft.draft_state import DraftState, parse_draft_state
from rotisserie_stats.draft.turn_order import get_drafter_for_pick

__version__ = "0.1.0"
__all__ = [
    # Configuration
    "Config",
    "get_config",
    # Data structures
    "PickRecord",
    "DraftMetadata",
    "DraftState",
    "CardStats",
    "DraftScore",
    # Errors
    "DraftParseError",
    "DrafterNotFoundError",
    # Operations
    "normalize_card_name",
    "card_name_key",
    "get_drafter_for_pick",
    "parse_draft_state",
    "load_drafts",
    "calculate_card_stats",
    "calculate_win_equity",
    "calculate_raw_win_rate",
]
