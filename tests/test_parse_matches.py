from rotisserie_stats.data.loader import seat_lookup
from rotisserie_stats.data.parse_matches import MatchResult, aggregate_seat_stats, parse_matches


def _grid(text: str) -> list[list[str]]:
    return [line.split(",") for line in text.strip("\n").split("\n")]


MATCHES = _grid(
    """,Round Robin,,,,,,
,,,,,,,
,Player 1,Games,,Games,Player 2,,
,Alice,2,VS,1,Bob,1,0
,Bob,2,VS,0,Carol,1,0
,Carol,x,VS,1,Alice,,
,Alice,2,VS,0,Mallory,,
,Alice,1,vs,2,Carol,,
,,,,,,,"""
)

SEATS = {"Alice": 0, "Bob": 1, "Carol": 2}


def test_parse_matches_skips_bad_rows() -> None:
    matches = parse_matches(MATCHES, SEATS)
    assert matches == [
        MatchResult(seat1=0, seat2=1, seat1_games_won=2, seat2_games_won=1),
        MatchResult(seat1=1, seat2=2, seat1_games_won=2, seat2_games_won=0),
    ]


def test_too_short_grid_has_no_matches() -> None:
    assert parse_matches(MATCHES[:3], SEATS) == []


def test_aggregate_seat_stats() -> None:
    stats = aggregate_seat_stats(parse_matches(MATCHES, SEATS))
    assert (stats[0].games_won, stats[0].games_lost) == (2, 1)
    assert (stats[1].games_won, stats[1].games_lost) == (3, 2)
    assert (stats[2].games_won, stats[2].games_lost) == (0, 2)


def test_seat_lookup_matches_names_regardless_of_case() -> None:
    lookup = seat_lookup(["Alice", "Bob", "Carol"])
    assert lookup["Alice"] == 0
    assert lookup["bob"] == 1

    rows = _grid(
        """,,,,,
,,,,,
,,,,,
,ALICE,2,VS,1,bob
,carol,0,VS,2,Bob"""
    )
    assert parse_matches(rows, lookup) == [
        MatchResult(seat1=0, seat2=1, seat1_games_won=2, seat2_games_won=1),
        MatchResult(seat1=2, seat2=1, seat1_games_won=0, seat2_games_won=2),
    ]
