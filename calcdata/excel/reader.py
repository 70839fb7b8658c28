from __future__ import annotations

import math
import unicodedata
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from ..models.extraction import Grid
from ..models.workbook import Sheet, Workbook

"""Workbook reader.

Loads every sheet of a workbook eagerly through pandas (openpyxl engine) and
converts sheets into plain grids of raw cell values. Nothing downstream touches
pandas: the extraction services work on lists of lists only.

Blank cells come back as the configured default (empty string) so string
handling never has to special-case NaN or None.
"""

__all__ = [
    "WorkbookError",
    "SourceNotFound",
    "UnreadableFormat",
    "GridOptions",
    "load",
    "sheet_to_grid",
    "resolve_source",
    "is_blank",
    "cell_at",
    "cell_to_label",
]


class WorkbookError(Exception):
    """Base class for fatal workbook errors."""


class SourceNotFound(WorkbookError):
    """Raised when no readable workbook exists at the requested location."""


class UnreadableFormat(WorkbookError):
    """Raised when the file exists but cannot be parsed as a spreadsheet."""


@dataclass(frozen=True)
class GridOptions:
    drop_trailing_blank_rows: bool = True
    raw_values: bool = True  # False -> display strings
    default_value: Any = ""


def is_blank(value: Any) -> bool:
    """True for None, NaN/NaT and strings that are empty after trimming."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, float) and math.isnan(value):
        return True
    if value is pd.NaT:
        return True
    return False


def cell_at(row: Sequence[Any], index: int | None, default: Any = "") -> Any:
    """Cell `index` of `row`; cells past the end of a short row read as blank."""
    if index is None or index < 0 or index >= len(row):
        return default
    value = row[index]
    return default if is_blank(value) else value


def cell_to_label(value: Any) -> str:
    """Render a cell as a trimmed label string.

    Integral floats lose their ".0" so a power tier typed as 5 and read back as
    5.0 still yields "5".
    """
    if is_blank(value):
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value).strip()


def _native(value: Any) -> Any:
    # numpy scalars -> python scalars so json.dumps accepts them
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    return value


def load(path: Path | str) -> Workbook:
    """Load all sheets of the workbook at `path`.

    Raises
    ------
    SourceNotFound: path missing, not a regular file, or not readable
    UnreadableFormat: file exists but is not a spreadsheet pandas can parse
    """
    path = Path(path)
    if not path.is_file():
        raise SourceNotFound(f"workbook not found: {path}")
    try:
        # permission errors count as "not found", not as a format problem
        with path.open("rb"):
            pass
    except OSError as e:
        raise SourceNotFound(f"workbook not readable: {path}: {e}") from e

    try:
        xls = pd.ExcelFile(path)
    except Exception as e:
        raise UnreadableFormat(f"cannot parse {path.name} as a workbook: {e}") from e

    sheets: list[Sheet] = []
    try:
        with xls:
            for name in xls.sheet_names:
                # keep_default_na=False: "NA" / "null" stay text, blank cells read as ""
                df = xls.parse(name, header=None, dtype=object, keep_default_na=False)
                sheets.append(Sheet(name=str(name), frame=df))
    except Exception as e:
        raise UnreadableFormat(f"cannot read sheets of {path.name}: {e}") from e
    return Workbook(path=path, sheets=tuple(sheets))


def sheet_to_grid(sheet: Sheet, options: GridOptions | None = None) -> Grid:
    """Convert a sheet into a list of rows of cell values, in sheet order."""
    opts = options or GridOptions()
    grid: Grid = []
    for raw in sheet.frame.itertuples(index=False, name=None):
        row: list[Any] = []
        for value in raw:
            value = _native(value)
            if is_blank(value):
                row.append(opts.default_value)
            elif opts.raw_values:
                row.append(value)
            else:
                row.append(cell_to_label(value))
        grid.append(row)

    if opts.drop_trailing_blank_rows:
        while grid and all(is_blank(v) for v in grid[-1]):
            grid.pop()
    return grid


def _fold_name(name: str) -> str:
    # NFKD + combining marks removed: "Bazówka" (any composition) -> "bazowka"
    decomposed = unicodedata.normalize("NFKD", name)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def resolve_source(directory: Path | str, candidates: Iterable[str]) -> Path:
    """Return the first candidate workbook that exists under `directory`.

    Exact filenames are tried first, in order. Filenames saved with decomposed
    accents or different casing are then matched by a folded comparison against
    the directory listing, again in candidate order.
    """
    directory = Path(directory)
    ordered = list(candidates)
    for name in ordered:
        p = directory / name
        if p.is_file():
            return p

    if directory.is_dir():
        entries = sorted(p for p in directory.iterdir() if p.is_file())
        folded = {}
        for p in entries:
            folded.setdefault(_fold_name(p.name), p)
        for name in ordered:
            hit = folded.get(_fold_name(name))
            if hit is not None:
                return hit

    raise SourceNotFound(
        f"no workbook found in {directory} (tried: {', '.join(ordered) or '-'})"
    )
