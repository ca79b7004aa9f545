"""Per-cell rules that turn labelled numbers into records."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from .types import (
    BALANCE_CATEGORY,
    DEFAULT_OPTIONS,
    GENERAL_CATEGORY,
    ColumnContext,
    ColumnContextMap,
    HeuristicOptions,
    Record,
)
from .utils.amounts import parse_cell_number, strip_amount_noise

BALANCE_KEYWORD = "current balance"
HEADER_LABEL_KEYWORDS = ("date", "amount")


@dataclass(frozen=True, slots=True)
class CellView:
    """One cell plus everything a rule needs to emit a record for it."""

    cells: Sequence[str]
    column: int
    context: ColumnContext
    line_index: int
    source_line: str

    @property
    def text(self) -> str:
        return self.cells[self.column]

    def first_number_right(self, width: int) -> float | None:
        """Return the first numeric cell within ``width`` columns to the right."""
        stop = min(self.column + width + 1, len(self.cells))
        for offset in range(self.column + 1, stop):
            value = parse_cell_number(self.cells[offset])
            if value is not None:
                return value
        return None


class ClassifierRule(ABC):
    """A rule claims a cell when ``matches`` is true, then may emit one record."""

    name: str = "rule"

    @abstractmethod
    def matches(self, text: str) -> bool:
        """Return True if this rule owns the cell."""

    @abstractmethod
    def emit(self, view: CellView, options: HeuristicOptions) -> Record | None:
        """Return a record for the claimed cell, or None when no number is found."""


class BalanceRule(ClassifierRule):
    """A ``Current Balance`` label followed by the nearest number to its right."""

    name = "balance"

    def matches(self, text: str) -> bool:
        return BALANCE_KEYWORD in text.lower()

    def emit(self, view: CellView, options: HeuristicOptions) -> Record | None:
        value = view.first_number_right(options.balance_scan_width)
        if value is None:
            return None
        ctx = view.context
        return Record(
            id=f"bal-{ctx.year}-{ctx.month}-{view.line_index}-{view.column}",
            date=ctx.first_day,
            description=view.text,
            category=BALANCE_CATEGORY,
            value=value,
            source_line=view.source_line,
            line_index=view.line_index,
            column_index=view.column,
        )


class TransactionRule(ClassifierRule):
    """Free text with a number shortly after it, e.g. ``Groceries,,-45.20``."""

    name = "transaction"

    def matches(self, text: str) -> bool:
        if len(text) <= 2:
            return False
        lowered = text.lower()
        if any(keyword in lowered for keyword in HEADER_LABEL_KEYWORDS):
            return False
        # Pure punctuation/currency cells carry no description.
        if not strip_amount_noise(text):
            return False
        return parse_cell_number(text) is None

    def emit(self, view: CellView, options: HeuristicOptions) -> Record | None:
        value = view.first_number_right(options.transaction_scan_width)
        if value is None:
            return None
        return Record(
            id=f"tx-{view.line_index}-{view.column}",
            date=view.context.first_day,
            description=view.text,
            category=GENERAL_CATEGORY,
            value=value,
            source_line=view.source_line,
            line_index=view.line_index,
            column_index=view.column,
        )


DEFAULT_RULES: tuple[ClassifierRule, ...] = (BalanceRule(), TransactionRule())


def classify_cell(
    view: CellView,
    *,
    options: HeuristicOptions = DEFAULT_OPTIONS,
    rules: Sequence[ClassifierRule] = DEFAULT_RULES,
) -> Record | None:
    """Apply the first rule that claims the cell; later rules never see it."""

    for rule in rules:
        if rule.matches(view.text):
            return rule.emit(view, options)
    return None


def classify_row(
    cells: Sequence[str],
    contexts: ColumnContextMap,
    *,
    line_index: int,
    source_line: str,
    options: HeuristicOptions = DEFAULT_OPTIONS,
    rules: Sequence[ClassifierRule] = DEFAULT_RULES,
) -> list[Record]:
    """Return the records emitted by one row, left to right.

    Cells in columns without a month context are ignored.
    """

    records: list[Record] = []
    for column in range(len(cells)):
        context = contexts.get(column)
        if context is None:
            continue
        view = CellView(
            cells=cells,
            column=column,
            context=context,
            line_index=line_index,
            source_line=source_line,
        )
        record = classify_cell(view, options=options, rules=rules)
        if record is not None:
            records.append(record)
    return records
