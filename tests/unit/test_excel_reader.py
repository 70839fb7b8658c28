from __future__ import annotations
import unicodedata
from pathlib import Path

import pandas as pd
import pytest

from calcdata.excel.reader import (
    GridOptions,
    SourceNotFound,
    UnreadableFormat,
    cell_at,
    cell_to_label,
    is_blank,
    load,
    resolve_source,
    sheet_to_grid,
)
from calcdata.models.workbook import Sheet


def test_load_keeps_sheet_order_and_native_types(workbook_factory):
    path = workbook_factory(
        "book.xlsx",
        {
            "USTAWIENIA": [["Currency", "PLN"], ["VAT", "23"]],
            "FOTOWOLTAIKA": [["Moc", "D", "E"], ["5kW", 1000, 1200.5]],
        },
    )
    wb = load(path)
    assert wb.sheet_names == ["USTAWIENIA", "FOTOWOLTAIKA"]
    grid = sheet_to_grid(wb.sheet("FOTOWOLTAIKA"))
    assert grid == [["Moc", "D", "E"], ["5kW", 1000, 1200.5]]
    assert isinstance(grid[1][1], int)
    # text that looks numeric stays text
    assert sheet_to_grid(wb.sheet("USTAWIENIA"))[1] == ["VAT", "23"]


def test_load_missing_file(temp_workdir: Path):
    with pytest.raises(SourceNotFound):
        load(temp_workdir / "nope.xlsx")


def test_load_directory_is_not_a_workbook(temp_workdir: Path):
    with pytest.raises(SourceNotFound):
        load(temp_workdir / "config")


def test_load_garbage_bytes(temp_workdir: Path):
    bad = temp_workdir / "broken.xlsx"
    bad.write_bytes(b"this is not a spreadsheet")
    with pytest.raises(UnreadableFormat):
        load(bad)


def test_missing_sheet_is_none(workbook_factory):
    wb = load(workbook_factory("one.xlsx", {"A": [["x", 1]]}))
    assert wb.sheet("B") is None


def test_blank_cells_default_to_empty_string(workbook_factory):
    wb = load(workbook_factory("gaps.xlsx", {"S": [["a", None, "c"], ["d"]]}))
    grid = sheet_to_grid(wb.sheet("S"))
    assert grid == [["a", "", "c"], ["d", "", ""]]


def test_na_like_text_is_not_converted(workbook_factory):
    wb = load(workbook_factory("na.xlsx", {"S": [["NA", "null"], ["N/A", "x"]]}))
    assert sheet_to_grid(wb.sheet("S")) == [["NA", "null"], ["N/A", "x"]]


def test_trailing_blank_rows_dropped_interior_kept():
    frame = pd.DataFrame([["k", 1], [None, None], ["j", 2], [None, float("nan")], ["", "  "]], dtype=object)
    sheet = Sheet(name="S", frame=frame)
    assert sheet_to_grid(sheet) == [["k", 1], ["", ""], ["j", 2]]
    kept = sheet_to_grid(sheet, GridOptions(drop_trailing_blank_rows=False))
    assert len(kept) == 5


def test_display_strings_option():
    frame = pd.DataFrame([["5", 5.0, 1200.5, None]], dtype=object)
    grid = sheet_to_grid(Sheet(name="S", frame=frame), GridOptions(raw_values=False))
    assert grid == [["5", "5", "1200.5", ""]]


def test_numpy_scalars_become_python_scalars():
    frame = pd.DataFrame({"a": [1, 2]})  # int64 column
    grid = sheet_to_grid(Sheet(name="S", frame=frame))
    assert grid == [[1], [2]]
    assert type(grid[0][0]) is int


def test_cell_helpers():
    assert is_blank("   ") and is_blank(None) and is_blank(float("nan"))
    assert not is_blank(0)
    assert cell_at(["a"], 3) == ""
    assert cell_at(["a", "  "], 1) == ""
    assert cell_at(["a", 7], None) == ""
    assert cell_to_label("  Model X ") == "Model X"
    assert cell_to_label(5.0) == "5"
    assert cell_to_label(6.6) == "6.6"


def test_resolve_source_first_existing_wins(temp_workdir: Path):
    (temp_workdir / "b.xlsx").write_bytes(b"")
    (temp_workdir / "c.xlsx").write_bytes(b"")
    assert resolve_source(temp_workdir, ["a.xlsx", "c.xlsx", "b.xlsx"]).name == "c.xlsx"


def test_resolve_source_matches_decomposed_accents(temp_workdir: Path):
    decomposed = unicodedata.normalize("NFD", "Bazówka 585 (1).xlsx")
    (temp_workdir / decomposed).write_bytes(b"")
    found = resolve_source(temp_workdir, ["Bazówka 585 (1).xlsx"])
    assert found.exists()
    assert unicodedata.normalize("NFC", found.name) == "Bazówka 585 (1).xlsx"


def test_resolve_source_none_exist(temp_workdir: Path):
    with pytest.raises(SourceNotFound) as e:
        resolve_source(temp_workdir, ["a.xlsx", "b.xlsx"])
    assert "a.xlsx" in str(e.value)
