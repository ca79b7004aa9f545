"""Month header detection and per-column period tracking."""

from __future__ import annotations

import re
from collections.abc import Sequence

from .types import DEFAULT_OPTIONS, ColumnContext, ColumnContextMap
from .utils.amounts import CURRENCY_SYMBOLS

MAX_HEADER_LENGTH = 24

MONTH_ABBREVIATIONS = ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec")

_HEADER_RE = re.compile(
    r"(" + "|".join(MONTH_ABBREVIATIONS) + r")[a-z]*[\s\-'’]+(\d{2,4})",
    re.IGNORECASE,
)


def match_header(cell: str) -> ColumnContext | None:
    """Return the period named by a header cell like ``Jan 2025`` or ``March-25``.

    Long cells and cells carrying a currency symbol are treated as transaction
    text that merely mentions a date.
    """

    if len(cell) > MAX_HEADER_LENGTH or any(symbol in cell for symbol in CURRENCY_SYMBOLS):
        return None
    match = _HEADER_RE.search(cell)
    if not match:
        return None
    year = int(match.group(2))
    if year < 100:
        year += 2000
    month = MONTH_ABBREVIATIONS.index(match.group(1).lower())
    return ColumnContext(month=month, year=year)


def scan_headers(
    cells: Sequence[str],
    contexts: ColumnContextMap,
    *,
    block_width: int = DEFAULT_OPTIONS.block_width,
) -> ColumnContextMap:
    """Return ``contexts`` updated with every month header found in ``cells``.

    Each header claims ``block_width`` columns starting at its own column.
    Columns are visited left to right, so a later header overwrites the
    overlapping part of an earlier block.
    """

    updated = contexts
    for column, cell in enumerate(cells):
        context = match_header(cell)
        if context is not None:
            updated = updated.assign(column, block_width, context)
    return updated
