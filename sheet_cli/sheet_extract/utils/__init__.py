"""Shared utilities for sheet extraction."""

from __future__ import annotations

from .amounts import CURRENCY_SYMBOLS, is_numeric_cell, parse_cell_number, strip_amount_noise

__all__ = [
    "CURRENCY_SYMBOLS",
    "is_numeric_cell",
    "parse_cell_number",
    "strip_amount_noise",
]
