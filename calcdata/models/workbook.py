from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pandas as pd

"""Workbook and Sheet domain models.

A Workbook is loaded once by calcdata.excel.reader.load and never mutated: each
sheet holds a fully materialized DataFrame read without a header row, so row 0
of the frame is row 1 of the spreadsheet.
"""

__all__ = [
    "Sheet",
    "Workbook",
]


@dataclass(frozen=True, eq=False)
class Sheet:
    """One named tab of a workbook."""
    name: str
    frame: pd.DataFrame  # raw cells, header=None, dtype=object

    @property
    def shape(self) -> tuple[int, int]:
        return self.frame.shape


@dataclass(frozen=True, eq=False)
class Workbook:
    """Ordered, immutable collection of sheets loaded from one file."""
    path: Path
    sheets: tuple[Sheet, ...]

    @property
    def sheet_names(self) -> list[str]:
        return [s.name for s in self.sheets]

    def sheet(self, name: str) -> Sheet | None:
        """Return the sheet called `name`, or None when the workbook lacks it."""
        for s in self.sheets:
            if s.name == name:
                return s
        return None
