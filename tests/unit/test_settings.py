from __future__ import annotations

from calcdata.services.settings import extract_settings, merge_settings


def test_two_column_rows_become_settings():
    grid = [["Currency", "PLN"], ["VAT", "23"]]
    assert extract_settings(grid) == {"Currency": "PLN", "VAT": "23"}


def test_keys_are_trimmed_values_kept_raw():
    grid = [["  Marża ", 0.15], ["Rabat", 500]]
    assert extract_settings(grid) == {"Marża": 0.15, "Rabat": 500}


def test_blank_keys_and_short_rows_are_skipped():
    grid = [["", "x"], ["   ", "y"], ["only-key"], [], ["ok", "1"]]
    assert extract_settings(grid) == {"ok": "1"}


def test_duplicate_key_last_row_wins():
    grid = [["VAT", "8"], ["Currency", "PLN"], ["VAT", "23"]]
    settings = extract_settings(grid)
    assert settings == {"VAT": "23", "Currency": "PLN"}
    assert list(settings) == ["VAT", "Currency"]


def test_keys_are_case_sensitive():
    grid = [["vat", "8"], ["VAT", "23"]]
    assert extract_settings(grid) == {"vat": "8", "VAT": "23"}


def test_blank_value_recorded_as_empty_string():
    assert extract_settings([["Dotacja", ""]]) == {"Dotacja": ""}


def test_extra_columns_ignored():
    assert extract_settings([["k", "v", "comment"]]) == {"k": "v"}


def test_merge_settings_overrides_win_and_base_untouched():
    base = {"Dotacja": 6000, "VAT": "8"}
    merged = merge_settings(base, {"VAT": "23"})
    assert merged == {"Dotacja": 6000, "VAT": "23"}
    assert base == {"Dotacja": 6000, "VAT": "8"}
