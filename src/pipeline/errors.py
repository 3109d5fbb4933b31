"""
Error taxonomy for the dashboard pipeline.

Structural failures (empty or unparseable input) are raised by the parser
and converted into explicit results by the state layer. Per-cell coercion
problems are never raised: they are collected as FieldCoercionWarning
values and the offending cell becomes NaN.
"""

from __future__ import annotations

from dataclasses import dataclass


class DashboardError(Exception):
    """Base exception for all dashboard pipeline failures."""

    user_message = "Unexpected error while loading the dataset."


class EmptyInputError(DashboardError):
    """Raised when no delimited text was supplied (blank after trimming)."""

    user_message = "No CSV content found."


class UnparseableInputError(DashboardError):
    """Raised when the delimited text is structurally broken."""

    user_message = "Failed to parse CSV file. Please check the format."


class EmptyDatasetError(DashboardError):
    """Parsed successfully but zero usable rows survived normalization."""

    user_message = "CSV parsed successfully but contained no rows."


class SourceReadError(DashboardError):
    """Raised when a local file or URL cannot be read."""

    user_message = "Could not read the CSV source."


class DashboardConfigError(DashboardError):
    """Raised for invalid runtime configuration."""


@dataclass(frozen=True)
class FieldCoercionWarning:
    """A single cell that could not be coerced to a number.

    `row_index` is the 0-based position of the row among the parsed data
    rows (header excluded).
    """

    row_index: int
    column: str
    raw_value: str

    @property
    def message(self) -> str:
        return (
            f"Data row {self.row_index + 1}: could not convert {self.column}={self.raw_value!r} "
            "to a number; treated as missing."
        )

    def __str__(self) -> str:
        return self.message


__all__ = [
    "DashboardError",
    "EmptyInputError",
    "UnparseableInputError",
    "EmptyDatasetError",
    "SourceReadError",
    "DashboardConfigError",
    "FieldCoercionWarning",
]
