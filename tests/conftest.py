# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path

import pandas as pd
import pytest

from calcdata.logging.init import reset_logging


def make_workbook(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
    """Write a real .xlsx with one tab per entry (no header/index added by pandas)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return path


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: .
source_candidates:
  - missing-first.xlsx
  - prices.xlsx
sheets:
  settings: USTAWIENIA
  pricing: FOTOWOLTAIKA
header_scan_rows: 10
roles:
  power_key:
    synonyms: [Moc, Power]
    fallback_column: A
  price_variant_d:
    synonyms: [D, Cena D]
    fallback_column: C
  price_variant_e:
    synonyms: [E, Cena E]
    fallback_column: D
  inverter_key:
    synonyms: [Falownik]
    fallback_column: G
  inverter_price:
    synonyms: [Cena falownika]
    fallback_column: H
  battery_key:
    synonyms: [Magazyn energii]
    fallback_column: E
  battery_price:
    synonyms: [Cena magazynu]
    fallback_column: F
outputs:
  - out/frontend/calculatorData.json
  - out/backend/calculatorData.json
existing_settings: out/backend/calculatorData.json
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "extract.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def pricing_rows() -> list[list[object]]:
    return [
        ["Cennik fotowoltaika 08.2025"],
        [],
        ["Moc", "Moduły", "D", "E", "Magazyn energii", "Cena magazynu", "Falownik", "Cena falownika"],
        ["5kW", 12, 1000, 1200, "Pylontech 5 kWh", 9000, "Huawei SUN2000-5KTL", 4500],
        ["8kW", 20, 1500, "", "Pylontech 10 kWh", 16000, "", ""],
        ["", "", 999, 999, "", "", "Fronius Symo 10", 7000.5],
        ["10kW", 24, 2100, 2300],
    ]


@pytest.fixture()
def sample_workbook(temp_workdir: Path, pricing_rows) -> Path:
    return make_workbook(
        temp_workdir / "prices.xlsx",
        {
            "USTAWIENIA": [["Currency", "PLN"], ["VAT", "23"], ["Marża", 0.15]],
            "FOTOWOLTAIKA": pricing_rows,
        },
    )


@pytest.fixture()
def workbook_factory(temp_workdir: Path):
    def _make(name: str, sheets: dict[str, list[list[object]]]) -> Path:
        return make_workbook(temp_workdir / name, sheets)
    return _make
