"""sheet-analyze CLI entrypoint."""

from __future__ import annotations

import click

from sheet_cli.sheet_extract.main import load_extraction
from sheet_cli.shared.cli import CLIContext, common_cli_options, handle_cli_errors, pass_cli_context

from . import render
from .monthly import calculate_monthly_stats
from .months import MonthYear, fixed_month_range, parse_month_key


@click.group(help="Summarize extracted sheet records by month.")
@common_cli_options
@handle_cli_errors
def main(cli_ctx: CLIContext) -> None:
    return


@main.command("stats")
@click.argument("source", type=str, required=False)
@click.option("--url", type=str, help="Sheet URL to fetch instead of a local file.")
@click.option("--month", type=str, help="Month to summarize (YYYY-MM). Defaults to the newest month with data.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    show_default=True,
)
@handle_cli_errors
@pass_cli_context
def stats_command(
    cli_ctx: CLIContext,
    source: str | None,
    url: str | None,
    month: str | None,
    output_format: str,
) -> None:
    """Show the declared balance and records for one month."""

    catalog = _catalog(cli_ctx)
    extraction = load_extraction(cli_ctx, source, url)

    if month:
        try:
            month_index, year = parse_month_key(month)
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--month") from exc
        selection = _find_in_catalog(catalog, month_index, year)
        if selection is None:
            cli_ctx.logger.warning(f"{month} is outside the selectable month range.")
            label = month
        else:
            label = selection.label
    else:
        selection = _default_selection(catalog, extraction.periods)
        month_index, year, label = selection.month, selection.year, selection.label

    summary = calculate_monthly_stats(extraction.records, month_index, year)
    balance_record = summary.balance_record
    if balance_record is None:
        cli_ctx.logger.debug(f"No balance declaration found for {label}; reporting 0.")
    else:
        cli_ctx.logger.debug(f"Balance taken from sheet line {balance_record.line_index}.")
    render.render_summary(summary, label=label, output_format=output_format)


@main.command("months")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    show_default=True,
)
@handle_cli_errors
@pass_cli_context
def months_command(cli_ctx: CLIContext, output_format: str) -> None:
    """List the selectable months, newest first."""

    render.render_catalog(_catalog(cli_ctx), output_format=output_format)


def _catalog(cli_ctx: CLIContext) -> list[MonthYear]:
    catalog_cfg = cli_ctx.config.catalog
    return fixed_month_range(catalog_cfg.start_year, catalog_cfg.end_year)


def _find_in_catalog(catalog: list[MonthYear], month: int, year: int) -> MonthYear | None:
    for entry in catalog:
        if entry.month == month and entry.year == year:
            return entry
    return None


def _default_selection(catalog: list[MonthYear], periods: list[tuple[int, int]]) -> MonthYear:
    """Newest catalog month that has records, else the newest catalog month."""

    seen = {(year, month - 1) for year, month in periods}
    for entry in catalog:
        if (entry.year, entry.month) in seen:
            return entry
    return catalog[0]


if __name__ == "__main__":  # pragma: no cover
    main()
