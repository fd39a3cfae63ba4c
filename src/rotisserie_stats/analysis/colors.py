"""Magic color codes and color filtering for ranked card lists."""

from __future__ import annotations

from enum import Enum
from typing import Callable, List, Sequence, TypeVar

T = TypeVar("T")

MTG_COLORS = {
    "W": "White",
    "U": "Blue",
    "B": "Black",
    "R": "Red",
    "G": "Green",
    "C": "Colorless",
}

COLORLESS = "C"


class ColorFilterMode(str, Enum):
    INCLUSIVE = "inclusive"  # card has ANY selected color
    EXCLUSIVE = "exclusive"  # card's colors are ALL among the selection


def get_color_label(code: str) -> str:
    """Full name of a color code, or the code itself when unknown."""
    return MTG_COLORS.get(code, code)


def format_colors(colors: Sequence[str] | None) -> str:
    """Readable color list ("Blue, Red"); empty means "Colorless"."""
    if not colors:
        return "Colorless"
    return ", ".join(get_color_label(color) for color in colors)


def filter_cards_by_color(
    cards: Sequence[T],
    selected: Sequence[str],
    mode: ColorFilterMode,
    get_colors: Callable[[T], Sequence[str]],
) -> List[T]:
    """Filter cards by color.

    Args:
        cards: Cards to filter
        selected: Selected codes; "C" selects colorless cards
        mode: Inclusive or exclusive matching
        get_colors: Extracts a card's color letters (e.g. its color identity)

    Returns:
        Matching cards in their original order; everything when nothing is selected
    """
    if not selected:
        return list(cards)

    selected_colors = [c for c in selected if c != COLORLESS]
    includes_colorless = COLORLESS in selected

    def matches(card: T) -> bool:
        card_colors = list(get_colors(card))
        if includes_colorless and not card_colors:
            return True
        if mode == ColorFilterMode.INCLUSIVE:
            return any(color in card_colors for color in selected_colors)
        return bool(card_colors) and all(color in selected_colors for color in card_colors)

    return [card for card in cards if matches(card)]
