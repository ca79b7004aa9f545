"""Project-wide custom exceptions."""

from __future__ import annotations


class SheetLedgerError(Exception):
    """Base exception for the sheet ledger CLI suite."""


class ConfigurationError(SheetLedgerError):
    """Raised when configuration loading or validation fails."""


class ExtractionError(SheetLedgerError):
    """Raised when sheet extraction cannot run at all."""


class UnusableSourceError(ExtractionError):
    """Raised when the source text is an HTML page rather than CSV data."""


class SourceFetchError(SheetLedgerError):
    """Raised when the published sheet cannot be downloaded."""
