"""Command line entrypoints for rotisserie-draft-stats."""

from __future__ import annotations

from pathlib import Path

import typer

from rotisserie_stats.analysis.card_stats import calculate_card_stats, card_stats_to_frame
from rotisserie_stats.analysis.colors import ColorFilterMode, filter_cards_by_color, format_colors
from rotisserie_stats.analysis.win_equity import (
    attach_win_rates,
    calculate_raw_win_rate,
    calculate_win_equity,
)
from rotisserie_stats.config import get_config
from rotisserie_stats.data.grid import read_grid
from rotisserie_stats.data.loader import POOL_FILE, PICKS_FILE, load_drafts
from rotisserie_stats.data.records import CardMetadata, DraftParseError, parse_card_metadata
from rotisserie_stats.draft.draft_state import infer_drafter_colors, parse_draft_state
from rotisserie_stats.utils.logging_config import setup_logging

app = typer.Typer(help="Rank cards and inspect rotisserie drafts")


@app.callback()
def main(
    log_level: str = typer.Option(None, help="Logging level (defaults to LOG_LEVEL)"),
    log_file: Path | None = typer.Option(None, help="Also write logs to this file"),
) -> None:
    setup_logging(log_level or get_config().log_level, log_file)


def _load_card_metadata(path: Path | None) -> dict[str, CardMetadata]:
    if path is None:
        return {}
    typer.echo(f"Loading card metadata from {path}")
    return dict(parse_card_metadata(path))


@app.command()
def rank(
    data_dir: Path = typer.Option(None, help="Directory of draft folders (defaults to DATA_DIR)"),
    top: int = typer.Option(25, help="Number of cards to print"),
    output: Path | None = typer.Option(None, help="Write the full ranking to this CSV"),
    colors: str = typer.Option("", help="Only show cards of these colors, e.g. \"WU\" or \"C\""),
    color_mode: ColorFilterMode = typer.Option(
        ColorFilterMode.INCLUSIVE, help="inclusive: any selected color; exclusive: only selected colors"
    ),
) -> None:
    """Rank cards by weighted geometric mean pick position."""
    collection = load_drafts(data_dir or get_config().data_dir)
    stats = calculate_card_stats(
        collection.picks, collection.metadata, get_config().draft.default_num_drafters
    )
    if not stats:
        typer.echo("No picks found. Check the data directory layout.")
        raise typer.Exit(code=1)

    stats = filter_cards_by_color(
        stats, list(colors.upper()), color_mode, lambda stat: sorted(set("".join(stat.colors)) - {"C"})
    )
    typer.echo(f"Top {min(top, len(stats))} of {len(stats)} cards:")
    for position, stat in enumerate(stats[:top], start=1):
        typer.echo(
            f"  {position:>3}. {stat.card_name:<40} {stat.weighted_geomean:7.1f}  "
            f"picked {stat.total_picks}/{stat.times_available}"
        )

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        card_stats_to_frame(stats).to_csv(output, index=False)
        typer.echo(f"Saved ranking to {output}")


@app.command()
def state(
    draft_path: Path = typer.Option(..., help="Folder holding picks.csv and pool.csv"),
    user: str | None = typer.Option(None, help="Your seat name (defaults to DRAFT_USER_NAME)"),
    card_metadata_path: Path | None = typer.Option(
        None, "--card-metadata", help="Card metadata CSV, used to guess opponents' colors"
    ),
) -> None:
    """Show whose turn it is in a live draft and how long until yours."""
    try:
        draft_state = parse_draft_state(
            read_grid(draft_path / PICKS_FILE), read_grid(draft_path / POOL_FILE), user
        )
    except DraftParseError as exc:
        typer.echo(f"Error: {exc}")
        raise typer.Exit(code=1)

    on_clock = draft_state.drafters[draft_state.current_drafter_index]
    typer.echo(f"Pick {draft_state.current_pick_number}: {on_clock} is on the clock")
    if draft_state.is_users_turn:
        typer.echo("It's your turn!")
    else:
        typer.echo(f"Picks until your turn: {draft_state.picks_until_user}")
    typer.echo(
        f"Your picks ({len(draft_state.user_picks)}): {', '.join(draft_state.user_picks) or '-'}"
    )
    typer.echo(f"Available: {len(draft_state.available_cards)} of {draft_state.pool_size} cards")

    card_metadata = _load_card_metadata(card_metadata_path)
    if card_metadata:
        for seat, name in enumerate(draft_state.drafters):
            if seat == draft_state.user_index:
                continue
            colors = infer_drafter_colors(draft_state.all_picks[name], card_metadata)
            typer.echo(f"  {name}: {format_colors(colors) if colors else 'unknown'}")


@app.command()
def equity(
    data_dir: Path = typer.Option(None, help="Directory of draft folders (defaults to DATA_DIR)"),
    card_metadata_path: Path | None = typer.Option(
        None, "--card-metadata", help="Card metadata CSV, used to detect lands"
    ),
    top: int = typer.Option(25, help="Number of cards to print"),
) -> None:
    """Show cards with the best probability-weighted win rates."""
    collection = load_drafts(data_dir or get_config().data_dir)
    if not collection.match_stats:
        typer.echo("No match results found (matches.csv) in any draft.")
        raise typer.Exit(code=1)

    card_metadata = _load_card_metadata(card_metadata_path)
    stats = attach_win_rates(
        calculate_card_stats(
            collection.picks, collection.metadata, get_config().draft.default_num_drafters
        ),
        calculate_win_equity(collection.picks, collection.match_stats, card_metadata),
        calculate_raw_win_rate(collection.picks, collection.match_stats),
    )
    with_games = [s for s in stats if s.win_equity is not None and s.raw_win_rate is not None]
    with_games.sort(key=lambda s: s.win_equity.win_rate, reverse=True)

    typer.echo("Top win equity:")
    for stat in with_games[:top]:
        typer.echo(
            f"  {stat.card_name:<40} equity {stat.win_equity.win_rate:.1%} "
            f"({stat.win_equity.wins:.2f}-{stat.win_equity.losses:.2f})  "
            f"raw {stat.raw_win_rate.win_rate:.1%}"
        )


if __name__ == "__main__":
    app()
