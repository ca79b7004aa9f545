from __future__ import annotations

import pytest

from sheet_cli.sheet_extract.utils.amounts import is_numeric_cell, parse_cell_number


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("$1,200.50", 1200.50),
        ("£ 45", 45.0),
        ("€-3.5", -3.5),
        ("-120", -120.0),
        (".5", 0.5),
        ("1e3", 1000.0),
    ],
)
def test_parse_cell_number_accepts_currency_noise(raw: str, expected: float) -> None:
    assert parse_cell_number(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", ["", "  ", "$", "abc", "inf", "nan", "0x10", "1_000", "(12.00)", "-"])
def test_parse_cell_number_rejects_non_decimal(raw: str) -> None:
    assert parse_cell_number(raw) is None
    assert not is_numeric_cell(raw)
