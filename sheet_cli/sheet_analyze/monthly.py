"""Per-month view over extracted records."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from sheet_cli.sheet_extract.types import Record


@dataclass(frozen=True, slots=True)
class MonthlyStats:
    total_balance: float
    total_income: float
    total_expense: float
    transaction_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_balance": self.total_balance,
            "total_income": self.total_income,
            "total_expense": self.total_expense,
            "transaction_count": self.transaction_count,
        }


@dataclass(slots=True)
class MonthlySummary:
    """Stats for one month plus the records they were computed from."""

    month: int
    year: int
    stats: MonthlyStats
    records: list[Record] = field(default_factory=list)

    @property
    def balance_record(self) -> Record | None:
        return resolve_balance_record(self.records)


def resolve_balance_record(records: Iterable[Record]) -> Record | None:
    """Return the balance declaration lowest in the sheet (highest line index)."""

    balances = sorted((record for record in records if record.is_balance), key=lambda r: r.line_index)
    return balances[-1] if balances else None


def calculate_monthly_stats(records: Iterable[Record], month: int, year: int) -> MonthlySummary:
    """Filter ``records`` to ``month`` (0-11) of ``year`` and resolve its balance.

    Income and expense totals are reported as zero; only the declared balance
    is surfaced for the month.
    """

    target_month = month + 1
    monthly = [
        record
        for record in records
        if record.date.year == year and record.date.month == target_month
    ]
    balance_record = resolve_balance_record(monthly)
    total_balance = balance_record.value if balance_record is not None else 0.0
    stats = MonthlyStats(
        total_balance=total_balance,
        total_income=0.0,
        total_expense=0.0,
        transaction_count=len(monthly),
    )
    return MonthlySummary(month=month, year=year, stats=stats, records=monthly)
