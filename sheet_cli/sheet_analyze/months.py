"""Fixed catalog of selectable months."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

DEFAULT_START_YEAR = 2024
DEFAULT_END_YEAR = 2030

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


@dataclass(frozen=True, slots=True)
class MonthYear:
    month: int  # 0-11
    year: int
    label: str

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month + 1:02d}"


def fixed_month_range(
    start_year: int = DEFAULT_START_YEAR,
    end_year: int = DEFAULT_END_YEAR,
) -> list[MonthYear]:
    """Return January ``start_year`` through December ``end_year``, newest first."""

    if start_year > end_year:
        raise ValueError(f"start_year {start_year} is after end_year {end_year}")
    months = [
        MonthYear(month=month, year=year, label=f"{MONTH_NAMES[month]} {year}")
        for year in range(start_year, end_year + 1)
        for month in range(12)
    ]
    months.reverse()
    return months


def parse_month_key(value: str) -> tuple[int, int]:
    """Parse ``YYYY-MM`` into ``(month 0-11, year)``."""

    try:
        parsed = datetime.strptime(value.strip(), "%Y-%m")
    except ValueError as exc:
        raise ValueError(f"Invalid month '{value}'. Expected YYYY-MM format.") from exc
    return parsed.month - 1, parsed.year
