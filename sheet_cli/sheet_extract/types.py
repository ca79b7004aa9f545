"""Dataclasses describing records extracted from a sheet export."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

BALANCE_CATEGORY = "Balance"
GENERAL_CATEGORY = "General"


class RecordKind(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


def kind_for(value: float) -> RecordKind:
    """Negative values are expenses, everything else (zero included) is income."""
    return RecordKind.EXPENSE if value < 0 else RecordKind.INCOME


@dataclass(frozen=True, slots=True)
class ColumnContext:
    """Calendar period a column belongs to. ``month`` is zero-based (0 = January)."""

    month: int
    year: int

    @property
    def first_day(self) -> date:
        return date(self.year, self.month + 1, 1)


@dataclass(frozen=True, slots=True)
class HeuristicOptions:
    """Column widths used by the header tracker and the row classifier.

    ``block_width`` is how many columns a month header claims (description,
    category, type, amount plus spacing). The scan widths bound how far right
    of a label the classifier looks for its number.
    """

    block_width: int = 8
    balance_scan_width: int = 9
    transaction_scan_width: int = 3


DEFAULT_OPTIONS = HeuristicOptions()


@dataclass(frozen=True, slots=True)
class ColumnContextMap:
    """Column index -> ColumnContext, valid for a single parse call."""

    contexts: Mapping[int, ColumnContext] = field(default_factory=dict)

    def get(self, column: int) -> ColumnContext | None:
        return self.contexts.get(column)

    def assign(self, start: int, width: int, context: ColumnContext) -> ColumnContextMap:
        """Return a new map with ``[start, start + width)`` set to ``context``."""
        updated = dict(self.contexts)
        for column in range(start, start + width):
            updated[column] = context
        return ColumnContextMap(updated)

    def __len__(self) -> int:
        return len(self.contexts)


@dataclass(slots=True)
class Record:
    """A balance declaration or an inferred transaction pulled from one cell."""

    id: str
    date: date
    description: str
    category: str
    value: float
    source_line: str
    line_index: int
    column_index: int

    @property
    def is_balance(self) -> bool:
        return self.category == BALANCE_CATEGORY

    @property
    def amount(self) -> float:
        return abs(self.value)

    @property
    def declared_balance(self) -> float | None:
        return self.value if self.is_balance else None

    @property
    def kind(self) -> RecordKind:
        return kind_for(self.value)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "description": self.description,
            "category": self.category,
            "type": self.kind.value,
            "amount": self.amount,
            "declared_balance": self.declared_balance,
            "source_line": self.source_line,
        }


@dataclass(slots=True)
class SheetExtraction:
    """Records from one parse call plus a little bookkeeping for summaries."""

    records: list[Record]
    line_count: int

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self.records)

    @property
    def periods(self) -> list[tuple[int, int]]:
        """Sorted ``(year, month)`` pairs (month 1-12) that produced records."""
        return sorted({(record.date.year, record.date.month) for record in self.records})

    @property
    def balance_count(self) -> int:
        return sum(1 for record in self.records if record.is_balance)
