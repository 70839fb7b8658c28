from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from ..excel.reader import cell_to_label, is_blank
from ..models.extraction import ColumnRoleAssignment, Grid, ResolvedColumn, Role

"""Column role inference for the pricing sheet.

Header wording drifts between spreadsheet revisions (translations, renamed
products) faster than column positions do, so each role is resolved in two
tiers:

1. header synonyms, case-insensitive exact match on the trimmed label; the
   first column (left to right) matching any synonym wins
2. a fixed positional fallback column

A fallback outside the header row resolves to None. Unresolved roles are not
an error: the pricing map for that family simply stays empty.

Everything here is a pure function of the header row and the configuration.
"""

__all__ = [
    "column_index",
    "infer_roles",
    "locate_header_row",
]


def column_index(ref: str | int) -> int:
    """Convert a spreadsheet column reference to a 0-based index.

    >>> column_index("A"), column_index("C"), column_index("AA"), column_index(4)
    (0, 2, 26, 4)
    """
    if isinstance(ref, bool):
        raise ValueError(f"invalid column reference: {ref!r}")
    if isinstance(ref, int):
        if ref < 0:
            raise ValueError(f"column index must be >= 0: {ref}")
        return ref
    text = str(ref).strip().upper()
    if not text.isalpha() or not text.isascii():
        raise ValueError(f"invalid column reference: {ref!r}")
    idx = 0
    for ch in text:
        idx = idx * 26 + (ord(ch) - ord("A") + 1)
    return idx - 1


def _match_synonym(header: Sequence[str], synonyms: Iterable[str]) -> int | None:
    wanted = {s.strip().casefold() for s in synonyms if s and s.strip()}
    if not wanted:
        return None
    for idx, label in enumerate(header):
        if label.casefold() in wanted:
            return idx
    return None


def infer_roles(
    header_row: Sequence[Any],
    synonyms_by_role: Mapping[Role, Iterable[str]],
    fallback_index_by_role: Mapping[Role, int | None],
) -> ColumnRoleAssignment:
    """Assign every role to a header column (or None)."""
    header = [cell_to_label(v) for v in header_row]
    columns: dict[Role, ResolvedColumn | None] = {}
    for role in Role:
        idx = _match_synonym(header, synonyms_by_role.get(role, ()))
        if idx is not None:
            columns[role] = ResolvedColumn(index=idx, label=header[idx])
            continue
        fallback = fallback_index_by_role.get(role)
        if fallback is not None and 0 <= fallback < len(header):
            columns[role] = ResolvedColumn(index=fallback, label=header[fallback], via_fallback=True)
        else:
            columns[role] = None
    return ColumnRoleAssignment(columns=columns)


def locate_header_row(grid: Grid, max_scan: int = 50) -> int:
    """Index of the header row: the first row with two or more non-blank cells.

    Only title banners (rows with at most one non-blank cell) above the header
    are skipped; scanning stops at the first multi-cell row, so content further
    down never moves the header. When every scanned row is a banner, or
    max_scan is 0, row 0 is taken as the header.
    """
    if max_scan <= 0:
        return 0
    for i, row in enumerate(grid[:max_scan]):
        if sum(1 for v in row if not is_blank(v)) >= 2:
            return i
    return 0
