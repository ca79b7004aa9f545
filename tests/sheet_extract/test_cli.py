from __future__ import annotations

import csv
import json
import re
from io import StringIO
from pathlib import Path

from click.testing import CliRunner

from sheet_cli.sheet_extract.main import main


def _strip_ansi(value: str) -> str:
    return re.sub(r"\x1b\[[0-9;]*m", "", value)


def test_cli_writes_csv_to_output_file(tmp_path: Path, household_csv: Path) -> None:
    output = tmp_path / "out" / "records.csv"

    result = CliRunner().invoke(main, ["extract", str(household_csv), "--output", str(output)])

    assert result.exit_code == 0, result.output
    rows = list(csv.DictReader(StringIO(output.read_text(encoding="utf-8"))))
    balances = [row for row in rows if row["category"] == "Balance"]
    assert [row["declared_balance"] for row in balances] == ["1800.0", "1900.0", "1950.0"]
    assert rows[0].keys() == {
        "id",
        "date",
        "description",
        "category",
        "type",
        "amount",
        "declared_balance",
    }
    assert "Extraction complete" in _strip_ansi(result.output)


def test_cli_defaults_to_extract_command(tmp_path: Path, household_csv: Path) -> None:
    output = tmp_path / "records.json"

    result = CliRunner().invoke(main, [str(household_csv), "--format", "json", "--output", str(output)])

    assert result.exit_code == 0, result.output
    payload = json.loads(output.read_text(encoding="utf-8"))
    rent = next(item for item in payload if item["description"] == "Rent")
    assert rent["type"] == "expense"
    assert rent["amount"] == 1200.0
    assert rent["declared_balance"] is None
    assert rent["date"] == "2025-01-01"


def test_cli_reads_stdin() -> None:
    result = CliRunner().invoke(main, ["extract", "-"], input="Jan 2025,Current Balance,42\n")

    assert result.exit_code == 0, result.output
    assert "bal-2025-0-0-1,2025-01-01,Current Balance,Balance,income,42.00,42.00" in result.output


def test_cli_dry_run_summary(household_csv: Path) -> None:
    result = CliRunner().invoke(main, ["extract", str(household_csv), "--dry-run"])

    assert result.exit_code == 0, result.output
    output = _strip_ansi(result.output)
    assert "Balance declarations: 3" in output
    assert "Months: 2025-01, 2025-02" in output
    assert "bal-" not in output


def test_cli_rejects_html(tmp_path: Path) -> None:
    page = tmp_path / "login.csv"
    page.write_text("<!DOCTYPE html><html><body>Sign in</body></html>", encoding="utf-8")

    result = CliRunner().invoke(main, ["extract", str(page)])

    assert result.exit_code != 0
    assert "Anyone with the link" in result.output


def test_cli_warns_on_empty_sheet(tmp_path: Path) -> None:
    empty = tmp_path / "empty.csv"
    empty.write_text("\n\n", encoding="utf-8")

    result = CliRunner().invoke(main, ["extract", str(empty), "--dry-run"])

    assert result.exit_code == 0, result.output
    assert "Parsed 0 records" in _strip_ansi(result.output)


def test_cli_fetches_configured_url(monkeypatch, isolated_config: Path) -> None:
    isolated_config.mkdir(parents=True)
    (isolated_config / "config.yaml").write_text(
        "sheet:\n  url: https://docs.google.com/spreadsheets/d/abc/edit\n  cache_bust: false\n",
        encoding="utf-8",
    )
    fetched: list[str] = []

    def fake_fetch(url: str, *, timeout: float, cache_bust: bool) -> str:
        fetched.append(url)
        assert cache_bust is False
        return "Feb 2026,Current Balance,10\n"

    monkeypatch.setattr("sheet_cli.sheet_extract.sources.fetch_sheet_csv", fake_fetch)

    result = CliRunner().invoke(main, ["extract"])

    assert result.exit_code == 0, result.output
    assert fetched == ["https://docs.google.com/spreadsheets/d/abc/edit"]
    assert "bal-2026-1-0-1" in result.output


def test_cli_without_input_fails_cleanly() -> None:
    result = CliRunner().invoke(main, ["extract"])

    assert result.exit_code != 0
    assert "No input given" in result.output


def test_cli_output_and_stdout_conflict(tmp_path: Path, household_csv: Path) -> None:
    result = CliRunner().invoke(
        main, ["extract", str(household_csv), "--stdout", "--output", str(tmp_path / "x.csv")]
    )

    assert result.exit_code != 0
    assert "Cannot use both" in result.output


def test_csv_url_command() -> None:
    result = CliRunner().invoke(
        main, ["csv-url", "https://docs.google.com/spreadsheets/d/xyz/edit#gid=5"]
    )

    assert result.exit_code == 0, result.output
    assert result.output.strip() == (
        "https://docs.google.com/spreadsheets/d/xyz/gviz/tq?tqx=out:csv&gid=5"
    )


def test_block_width_from_config(isolated_config: Path) -> None:
    isolated_config.mkdir(parents=True)
    (isolated_config / "config.yaml").write_text(
        "extraction:\n  block_width: 1\n", encoding="utf-8"
    )

    result = CliRunner().invoke(main, ["extract", "-"], input="Jan 2025,,,\n,,Coffee,4.50\n")

    assert result.exit_code == 0, result.output
    assert "Coffee" not in result.output


def test_csv_keeps_full_amount_precision(tmp_path: Path) -> None:
    output = tmp_path / "records.csv"

    result = CliRunner().invoke(
        main, ["extract", "-", "--output", str(output)], input="Jan 2025,,,\nTip,0.125\n"
    )

    assert result.exit_code == 0, result.output
    rows = list(csv.DictReader(StringIO(output.read_text(encoding="utf-8"))))
    assert [(row["description"], row["amount"]) for row in rows] == [("Tip", "0.125")]
