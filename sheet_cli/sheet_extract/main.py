"""sheet-extract CLI entrypoint."""

from __future__ import annotations

import csv
import json
from collections.abc import Iterable
from io import StringIO
from pathlib import Path

import click

from sheet_cli.shared.cli import (
    CLIContext,
    common_cli_options,
    dry_run_option,
    handle_cli_errors,
    pass_cli_context,
)
from sheet_cli.shared.config import AppConfig

from .parser import extract_sheet
from .sources import read_sheet_text, to_csv_export_url
from .types import HeuristicOptions, Record, SheetExtraction

CSV_HEADER = ["id", "date", "description", "category", "type", "amount", "declared_balance"]


class ExtractDefaultGroup(click.Group):
    """Click group that falls back to a default command when none is provided."""

    def __init__(self, *args, default_command: str | None = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._default_command = default_command

    def resolve_command(self, ctx: click.Context, args: list[str]):
        if self._default_command is None:
            return super().resolve_command(ctx, args)

        if not args:
            return super().resolve_command(ctx, [self._default_command])

        cmd = super().get_command(ctx, args[0])
        if cmd is not None:
            return super().resolve_command(ctx, args)

        return super().resolve_command(ctx, [self._default_command] + args)


def heuristic_options(config: AppConfig) -> HeuristicOptions:
    """Build classifier widths from the extraction settings."""

    return HeuristicOptions(
        block_width=config.extraction.block_width,
        balance_scan_width=config.extraction.balance_scan_width,
        transaction_scan_width=config.extraction.transaction_scan_width,
    )


def load_extraction(cli_ctx: CLIContext, source: str | None, url: str | None) -> SheetExtraction:
    """Read the sheet (file, stdin, or URL) and run the extractor over it."""

    sheet = cli_ctx.config.sheet
    effective_url = url or sheet.url
    if source:
        cli_ctx.logger.info(f"Reading sheet CSV from {'stdin' if source == '-' else source}")
    elif effective_url:
        cli_ctx.logger.info(f"Fetching sheet CSV from {to_csv_export_url(effective_url)}")
    text = read_sheet_text(
        source,
        url=effective_url,
        timeout=sheet.timeout,
        cache_bust=sheet.cache_bust,
    )
    extraction = extract_sheet(text, options=heuristic_options(cli_ctx.config))
    cli_ctx.logger.debug(
        f"Scanned {extraction.line_count} non-blank lines; "
        f"{extraction.balance_count} balance declarations found."
    )
    if not extraction.records:
        cli_ctx.logger.warning("Parsed 0 records. Check that the sheet has month headers like 'Jan 2025'.")
    return extraction


@click.group(
    help="Extract dated balance and transaction records from a spreadsheet CSV export.",
    invoke_without_command=True,
    cls=ExtractDefaultGroup,
    default_command="extract",
)
@dry_run_option
@common_cli_options
@click.pass_context
@handle_cli_errors
def main(ctx: click.Context, cli_ctx: CLIContext) -> None:
    if ctx.invoked_subcommand is None:
        ctx.invoke(extract_command)


@main.command("extract")
@click.argument("source", type=str, required=False)
@click.option("--url", type=str, help="Sheet URL to fetch instead of a local file.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["csv", "json"], case_sensitive=False),
    default="csv",
    show_default=True,
)
@click.option("--output", "output_path", type=click.Path(path_type=str), help="Write records to file.")
@click.option("--stdout", is_flag=True, help="Write records to stdout (default when --output is absent).")
@click.option(
    "--dry-run",
    "_dry_run_flag",
    is_flag=True,
    expose_value=False,
    help="Summarize results without writing records.",
    callback=lambda ctx, param, value: _mark_dry_run(ctx, value),
)
@handle_cli_errors
@pass_cli_context
def extract_command(
    cli_ctx: CLIContext,
    source: str | None = None,
    url: str | None = None,
    output_format: str = "csv",
    output_path: str | None = None,
    stdout: bool = False,
) -> None:
    """Extract records from SOURCE (a CSV path, or '-' for stdin) or a sheet URL."""

    if output_path and stdout:
        raise click.UsageError("Cannot use both --output and --stdout simultaneously.")

    extraction = load_extraction(cli_ctx, source, url)

    if cli_ctx.dry_run:
        _emit_dry_run_summary(cli_ctx, extraction)
        return

    payload = render_records(extraction.records, output_format=output_format.lower())
    if output_path:
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(payload + "\n", encoding="utf-8")
        cli_ctx.logger.success(
            f"Extraction complete. {len(extraction.records)} records written to {output_path}."
        )
    else:
        click.echo(payload)


@main.command("csv-url")
@click.argument("sheet_url", type=str)
def csv_url_command(sheet_url: str) -> None:
    """Print the CSV export URL for a sheet URL copied from the browser."""

    click.echo(to_csv_export_url(sheet_url))


def _mark_dry_run(ctx: click.Context, value: bool) -> None:
    if value and isinstance(ctx.obj, CLIContext):
        ctx.obj.dry_run = True


def _emit_dry_run_summary(cli_ctx: CLIContext, extraction: SheetExtraction) -> None:
    cli_ctx.logger.info("Dry run summary:")
    cli_ctx.logger.info(f"  Lines scanned: {extraction.line_count}")
    cli_ctx.logger.info(f"  Records: {len(extraction.records)}")
    cli_ctx.logger.info(f"  Balance declarations: {extraction.balance_count}")
    periods = ", ".join(f"{year:04d}-{month:02d}" for year, month in extraction.periods)
    cli_ctx.logger.info(f"  Months: {periods or 'none'}")


def render_records(records: Iterable[Record], *, output_format: str) -> str:
    """Serialize records as CSV or a JSON array."""

    if output_format == "json":
        return json.dumps([record.to_dict() for record in records], indent=2)
    if output_format != "csv":  # pragma: no cover - Click validation should prevent this
        raise ValueError(f"Unsupported output format '{output_format}'.")
    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_HEADER)
    writer.writerows(_render_csv_rows(records))
    return buffer.getvalue().strip()


def _render_csv_rows(records: Iterable[Record]) -> list[list[object]]:
    rows: list[list[object]] = []
    for record in records:
        declared = record.declared_balance
        rows.append(
            [
                record.id,
                record.date.isoformat(),
                record.description,
                record.category,
                record.kind.value,
                record.amount,
                "" if declared is None else declared,
            ]
        )
    return rows


if __name__ == "__main__":  # pragma: no cover
    main()
