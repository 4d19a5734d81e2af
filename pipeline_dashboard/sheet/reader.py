from __future__ import annotations

import io
from collections.abc import Sequence
from pathlib import Path

import pandas as pd

"""Raw row reader for pipeline sheet exports.

The pipeline sheet has no usable header row: banner rows ("Hot Opportunity",
"Collected"), repeated column headers and subtotal rows are interleaved with
data, so rows are read positionally (header=None) and kept as plain strings.

列レイアウト (0-indexed):
  0=Date 1=Name 2=Notes 3=Payment 5=LeadSource 6=Product 7=ProjectedSale
  8=Probability 9=NetForecast 10=NextStep 11..22=Sep..Aug
"""

__all__ = [
    "ROW_WIDTH",
    "SheetReadError",
    "normalize_row",
    "parse_csv_text",
    "read_csv_file",
]

# Columns 0..22 carry meaning; anything beyond is ignored.
ROW_WIDTH = 23


class SheetReadError(Exception):
    """Raised when a CSV export cannot be read at all."""


def normalize_row(cells: Sequence[object] | None) -> list[str]:
    """Pad/truncate a raw row to ROW_WIDTH trimmed string cells.

    Missing trailing cells and None/NaN values become "".
    """
    out: list[str] = []
    for cell in list(cells or [])[:ROW_WIDTH]:
        if cell is None or (isinstance(cell, float) and pd.isna(cell)):
            out.append("")
        else:
            out.append(str(cell).strip())
    out.extend("" for _ in range(ROW_WIDTH - len(out)))
    return out


def _field_count(text: str) -> int:
    # Upper bound of fields per physical line; quoted commas only overcount.
    widest = max((line.count(",") + 1 for line in text.splitlines()), default=1)
    return max(ROW_WIDTH, widest)


def parse_csv_text(text: str) -> list[list[str]]:
    """Parse CSV text into ordered, normalized rows.

    Steps:
    1. Empty / whitespace-only text -> no rows
    2. pandas reads every cell as str, without NA conversion, keeping blank lines
       (a blank line is still a row; the classifier skips it by empty name)
    3. Ragged rows are padded; over-long rows are truncated

    Raises:
        SheetReadError: unparseable text, including an unterminated quoted cell
    """
    if not text or not text.strip():
        return []
    # Sheets exports double every embedded quote, so an odd count means a quoted
    # cell never closes and would swallow every row after it.
    if text.count('"') % 2:
        raise SheetReadError("invalid csv: unterminated quoted cell")
    width = _field_count(text)
    try:
        df = pd.read_csv(
            io.StringIO(text),
            header=None,
            names=list(range(width)),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=False,
            engine="python",
            on_bad_lines=lambda fields: fields[:width],
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise SheetReadError(f"invalid csv: {e}") from e
    df = df.fillna("")
    return [normalize_row(raw) for raw in df.itertuples(index=False, name=None)]


def read_csv_file(path: Path) -> list[list[str]]:
    """Read a local CSV export of the pipeline sheet."""
    if not path.exists():
        raise SheetReadError(f"csv file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise SheetReadError(f"cannot read {path}: {e}") from e
    return parse_csv_text(text)
