from rotisserie_stats.analysis.colors import (
    ColorFilterMode,
    filter_cards_by_color,
    format_colors,
    get_color_label,
)

CARDS = {
    "Lightning Bolt": ["R"],
    "Izzet Charm": ["U", "R"],
    "Counterspell": ["U"],
    "Sol Ring": [],
}


def _names(selected: str, mode: ColorFilterMode) -> list:
    return filter_cards_by_color(list(CARDS), list(selected), mode, CARDS.__getitem__)


def test_color_labels() -> None:
    assert get_color_label("U") == "Blue"
    assert get_color_label("X") == "X"
    assert format_colors(["U", "R"]) == "Blue, Red"
    assert format_colors([]) == "Colorless"


def test_empty_selection_keeps_everything() -> None:
    assert _names("", ColorFilterMode.EXCLUSIVE) == list(CARDS)


def test_inclusive_matches_any_selected_color() -> None:
    assert _names("R", ColorFilterMode.INCLUSIVE) == ["Lightning Bolt", "Izzet Charm"]


def test_exclusive_requires_all_colors_selected() -> None:
    assert _names("R", ColorFilterMode.EXCLUSIVE) == ["Lightning Bolt"]
    assert _names("UR", ColorFilterMode.EXCLUSIVE) == [
        "Lightning Bolt",
        "Izzet Charm",
        "Counterspell",
    ]


def test_colorless_selection() -> None:
    assert _names("C", ColorFilterMode.INCLUSIVE) == ["Sol Ring"]
    assert _names("CU", ColorFilterMode.EXCLUSIVE) == ["Counterspell", "Sol Ring"]
