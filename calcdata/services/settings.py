from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..excel.reader import cell_to_label, is_blank
from ..models.extraction import Grid

"""Settings table extraction.

The settings sheet is a plain two-column list: key in column A, value in
column B. Merge policy is last-write-wins everywhere: a key that appears again
further down the sheet (or in a later source passed to merge_settings)
replaces the earlier value, mirroring the upsert the quoting backend applies
when it stores the table.
"""

__all__ = [
    "extract_settings",
    "merge_settings",
]


def extract_settings(grid: Grid) -> dict[str, Any]:
    """Build key -> value from a two-column grid.

    Rows shorter than two cells and rows whose key is blank after trimming are
    skipped. Keys compare by exact trimmed text (no case folding). Values are
    kept as raw cells; a blank value is still recorded as "".
    """
    settings: dict[str, Any] = {}
    for row in grid:
        if len(row) < 2:
            continue
        key = cell_to_label(row[0])
        if not key:
            continue
        value = row[1]
        # last occurrence wins, the key keeps its first position
        settings[key] = "" if is_blank(value) else value
    return settings


def merge_settings(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Return base updated with overrides (overrides win on equal keys)."""
    merged = dict(base)
    merged.update(overrides)
    return merged
