"""Structured parsing errors for the tie import pipeline."""

from __future__ import annotations
from typing import Any


class ParsingError(Exception):
    """Base class for parsing related issues."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class MissingSectionError(ParsingError):
    """Raised when an expected HTML section is absent."""


class TableNotFound(MissingSectionError):
    """Raised when the results table cannot be located on the page."""


class RowSkipped(ParsingError):
    """A row that cannot become an import candidate. Row-local, never fatal."""


class ColumnMismatchError(RowSkipped):
    """Raised when a row does not have the expected number of cells."""


class ValueExtractionError(RowSkipped):
    """Raised when a critical value (date/time) cannot be extracted."""
