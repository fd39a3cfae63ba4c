"""Read spreadsheet exports into plain string grids.

Draft spreadsheets are ragged: header rows, pick rows and status rows all have
different widths. Every cell comes back as a string, missing cells as "".
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import List, Sequence

import pandas as pd

from rotisserie_stats.utils.logging_config import get_logger

logger = get_logger(__name__)

Grid = List[List[str]]

# Markers the draft sheet uses for pick direction and the last round
ARROW_MARKERS = ("→", "↪", "↩", "✪")
LAST_ROUND_MARKER = "✪"


def is_arrow(value: str | None) -> bool:
    """Check whether a cell holds one of the sheet's direction markers."""
    return value is not None and value.strip() in ARROW_MARKERS


def cell(row: Sequence[str], index: int) -> str:
    """Return the stripped cell at ``index``, or "" past the end of the row."""
    if index < 0 or index >= len(row):
        return ""
    return row[index].strip()


def parse_grid(text: str) -> Grid:
    """Parse CSV text into a list of string rows.

    Blank lines are kept as all-empty rows so row indices match the sheet.
    """
    if not text.strip():
        return []

    # A line never holds more fields than commas + 1, so this width fits every row
    width = max(line.count(",") for line in text.splitlines()) + 1
    frame = pd.read_csv(
        io.StringIO(text),
        header=None,
        names=list(range(width)),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=False,
        engine="python",
    ).fillna("")

    rows = [[str(value) for value in row] for row in frame.itertuples(index=False, name=None)]
    logger.debug(f"Parsed grid with {len(rows)} rows and {width} columns")
    return rows


def read_grid(path: Path | str) -> Grid:
    """Read a CSV file into a grid (see :func:`parse_grid`)."""
    return parse_grid(Path(path).read_text(encoding="utf-8"))


def extract_metadata(rows: Sequence[Sequence[str]], label: str) -> str | None:
    """Find ``label`` anywhere in the grid and return the cell to its right.

    The draft sheet keeps status values such as ``"Picks Made:"`` in label/value
    pairs beside the pick area.
    """
    for row in rows:
        for index in range(len(row) - 1):
            if row[index].strip() == label:
                return row[index + 1].strip() or None
    return None
