"""Rendering helpers for sheet-analyze results."""

from __future__ import annotations

import json
import sys
from collections.abc import Sequence
from typing import IO

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .monthly import MonthlySummary
from .months import MonthYear


def format_currency(value: float) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def render_summary(
    summary: MonthlySummary,
    *,
    label: str,
    output_format: str,
    stream: IO[str] | None = None,
) -> None:
    stream = stream or sys.stdout
    fmt = (output_format or "table").lower()
    if fmt == "json":
        payload = {
            "month": summary.month,
            "year": summary.year,
            "label": label,
            "stats": summary.stats.to_dict(),
            "records": [record.to_dict() for record in summary.records],
        }
        stream.write(json.dumps(payload, indent=2) + "\n")
        return
    if fmt != "table":
        raise ValueError(f"Unsupported output format '{output_format}'.")

    console = Console(file=stream, highlight=False, force_terminal=False)
    stats = summary.stats
    console.print(f"[bold]{label}[/bold]")
    console.print(f"• Current balance: {format_currency(stats.total_balance)}")
    console.print(f"• Income: {format_currency(stats.total_income)}")
    console.print(f"• Expense: {format_currency(stats.total_expense)}")
    console.print(f"• Records: {stats.transaction_count}")
    if not summary.records:
        return

    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Date")
    table.add_column("Description")
    table.add_column("Category")
    table.add_column("Type")
    table.add_column("Amount", justify="right")
    for record in summary.records:
        table.add_row(
            record.date.isoformat(),
            escape(record.description),
            record.category,
            record.kind.value,
            format_currency(record.amount),
        )
    console.print(table)


def render_catalog(
    months: Sequence[MonthYear],
    *,
    output_format: str,
    stream: IO[str] | None = None,
) -> None:
    stream = stream or sys.stdout
    if (output_format or "table").lower() == "json":
        payload = [{"month": m.month, "year": m.year, "label": m.label} for m in months]
        stream.write(json.dumps(payload, indent=2) + "\n")
        return

    console = Console(file=stream, highlight=False, force_terminal=False)
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Key", style="bold")
    table.add_column("Label")
    for entry in months:
        table.add_row(entry.key, entry.label)
    console.print(table)
