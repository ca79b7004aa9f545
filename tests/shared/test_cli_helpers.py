from __future__ import annotations

from pathlib import Path

import click
import pytest
from click.testing import CliRunner

from sheet_cli.shared import paths
from sheet_cli.shared.cli import CLIContext, common_cli_options, dry_run_option, handle_cli_errors
from sheet_cli.shared.config import load_config
from sheet_cli.shared.exceptions import ConfigurationError, SheetLedgerError, UnusableSourceError


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_common_cli_options_builds_context(
    monkeypatch: pytest.MonkeyPatch, runner: CliRunner, tmp_path: Path
) -> None:
    monkeypatch.setattr(
        "sheet_cli.shared.cli.load_config",
        lambda config_path: load_config(env={paths.CONFIG_DIR_ENV: str(tmp_path)}),
    )

    @click.command()
    @dry_run_option
    @common_cli_options
    def sample(cli_ctx: CLIContext) -> None:
        click.echo(f"dry={cli_ctx.dry_run} verbose={cli_ctx.verbose} url={cli_ctx.config.sheet.url}")

    result = runner.invoke(sample, ["--dry-run", "--sheet-url", "https://example.com/s.csv"])

    assert result.exit_code == 0, result.output
    assert "dry=True verbose=False url=https://example.com/s.csv" in result.output


def test_dry_run_is_opt_in(runner: CliRunner) -> None:
    @click.command()
    @common_cli_options
    def sample(cli_ctx: CLIContext) -> None:
        click.echo(f"dry={cli_ctx.dry_run}")

    assert runner.invoke(sample, []).output.strip() == "dry=False"
    result = runner.invoke(sample, ["--dry-run"])
    assert result.exit_code == 2
    assert "No such option" in result.output


def test_common_cli_options_reports_configuration_errors(
    runner: CliRunner, tmp_path: Path
) -> None:
    cfg_file = tmp_path / "bad.yaml"
    cfg_file.write_text("- not a mapping", encoding="utf-8")

    @click.command()
    @common_cli_options
    def sample(cli_ctx: CLIContext) -> None:  # pragma: no cover - never reached
        click.echo("unreachable")

    result = runner.invoke(sample, ["--config", str(cfg_file)])

    assert result.exit_code != 0
    assert "mapping root object" in result.output


def test_handle_cli_errors_wraps_known_exceptions() -> None:
    @handle_cli_errors
    def boom() -> None:
        raise SheetLedgerError("boom")

    with pytest.raises(click.ClickException) as excinfo:
        boom()
    assert str(excinfo.value) == "boom"


def test_handle_cli_errors_keeps_unusable_source_message() -> None:
    @handle_cli_errors
    def html() -> None:
        raise UnusableSourceError("share the sheet")

    with pytest.raises(click.ClickException) as excinfo:
        html()
    assert str(excinfo.value) == "share the sheet"


def test_handle_cli_errors_formats_configuration_errors() -> None:
    @handle_cli_errors
    def misconfigured() -> None:
        raise ConfigurationError("missing value")

    with pytest.raises(click.ClickException) as excinfo:
        misconfigured()
    assert "Configuration error" in str(excinfo.value)


def test_handle_cli_errors_wraps_unexpected_exceptions() -> None:
    @handle_cli_errors
    def explode() -> None:
        raise RuntimeError("kapow")

    with pytest.raises(click.ClickException) as excinfo:
        explode()
    assert "Unexpected error: kapow" == str(excinfo.value)
