"""Extraction driver: raw CSV text in, dated records out."""

from __future__ import annotations

import logging
import re

from sheet_cli.shared.exceptions import UnusableSourceError

from .classifier import DEFAULT_RULES, ClassifierRule, classify_row
from .context import scan_headers
from .tokenizer import split_csv_line
from .types import DEFAULT_OPTIONS, ColumnContextMap, HeuristicOptions, Record, SheetExtraction

_LOGGER = logging.getLogger(__name__)

_LINE_SPLIT_RE = re.compile(r"\r?\n")

UNUSABLE_SOURCE_MESSAGE = (
    "Link error. The sheet returned a web page instead of CSV data. "
    "Please ensure the Sheet is 'Public' or shared with 'Anyone with the link'."
)


def ensure_tabular(text: str) -> None:
    """Raise when ``text`` is an HTML page (usually a sign-in screen) instead of CSV."""

    lowered = text.strip().lower()
    if lowered.startswith("<!doctype html") or "<html" in lowered:
        raise UnusableSourceError(UNUSABLE_SOURCE_MESSAGE)


def split_lines(text: str) -> list[str]:
    """Split on LF or CRLF and drop whitespace-only lines."""

    return [line for line in _LINE_SPLIT_RE.split(text) if line.strip()]


def _strip_wrapping_quotes(cell: str) -> str:
    if cell.startswith('"'):
        cell = cell[1:]
    if cell.endswith('"'):
        cell = cell[:-1]
    return cell.strip()


def tokenize_row(line: str) -> list[str]:
    return [_strip_wrapping_quotes(cell) for cell in split_csv_line(line)]


def extract_sheet(
    text: str,
    *,
    options: HeuristicOptions = DEFAULT_OPTIONS,
    rules: tuple[ClassifierRule, ...] = DEFAULT_RULES,
) -> SheetExtraction:
    """Parse a sheet export and return its records with line bookkeeping.

    Column contexts start empty on every call. Headers found on a line apply
    to that same line and every line after it until another header
    overwrites the columns.
    """

    ensure_tabular(text)
    lines = split_lines(text)
    contexts = ColumnContextMap()
    records: list[Record] = []
    for line_index, line in enumerate(lines):
        cells = tokenize_row(line)
        contexts = scan_headers(cells, contexts, block_width=options.block_width)
        records.extend(
            classify_row(
                cells,
                contexts,
                line_index=line_index,
                source_line=line,
                options=options,
                rules=rules,
            )
        )

    if not records:
        _LOGGER.debug("Parsed %d lines but found no records.", len(lines))
    else:
        _LOGGER.debug(
            "Parsed %d lines into %d records across %d tracked columns.",
            len(lines),
            len(records),
            len(contexts),
        )
    return SheetExtraction(records=records, line_count=len(lines))


def parse_sheet_csv(
    text: str,
    *,
    options: HeuristicOptions = DEFAULT_OPTIONS,
) -> list[Record]:
    """Return every record found in ``text``; an empty list means no data."""

    return extract_sheet(text, options=options).records
