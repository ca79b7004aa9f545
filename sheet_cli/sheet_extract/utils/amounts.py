"""Amount parsing helpers for hand-edited sheet cells."""

from __future__ import annotations

import re

CURRENCY_SYMBOLS = ("$", "£", "€")

_NOISE_RE = re.compile(r"[$£€,\s]")
# Plain base-10 decimals only: no inf/nan, hex, or underscore digit grouping.
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def strip_amount_noise(value: str) -> str:
    """Drop currency symbols, thousands separators, and whitespace."""

    return _NOISE_RE.sub("", value or "")


def parse_cell_number(value: str) -> float | None:
    """Return the numeric value of a cell such as ``$1,200.50``, or ``None``.

    An empty string after stripping is not a number.
    """

    cleaned = strip_amount_noise(value)
    if not cleaned or not _DECIMAL_RE.fullmatch(cleaned):
        return None
    return float(cleaned)


def is_numeric_cell(value: str) -> bool:
    return parse_cell_number(value) is not None
