"""
Core exception types raised by schema compilation, value conversion, and encoding.

Provides typed exceptions for core-domain failures:
- ConfigurationError for malformed option values, invalid row types, or invalid projections.
- ParseError for a cell whose text does not conform to its declared logical type.
- EncodingInvariantViolation for a value handed to a writer that does not match its RowType.

Notes:
    - This module uses only the Python standard library and has no side effects.
    - IO-layer failures (open/read/write) are raised as tabcsv.io.errors.Io* instead.

Examples:
    >>> from tabcsv.core.errors import ParseError
    >>> err = ParseError("not an integer", row=3, col=1, column="age", value="x")
    >>> err.row, err.column
    (3, 'age')
"""

from __future__ import annotations

__all__ = [
    "ConfigurationError",
    "ParseError",
    "EncodingInvariantViolation",
]


class ConfigurationError(ValueError):
    """Option value, row type, or projection is structurally invalid."""


class ParseError(ValueError):
    """
    A cell could not be converted into its declared logical type.

    Attributes:
        row (int | None): 1-based record index within the file (None when converting a
            detached token row).
        col (int | None): 0-based column position in the full row type.
        column (str | None): Column name.
        value (str | None): Raw cell text.
        reason (str): Human-readable cause.
    """

    def __init__(
        self,
        reason: str,
        *,
        row: int | None = None,
        col: int | None = None,
        column: str | None = None,
        value: str | None = None,
    ) -> None:
        super().__init__(
            f"ParseError(row={row}, col={col}, column={column!r}, value={value!r}): {reason}"
        )
        self.reason = reason
        self.row = row
        self.col = col
        self.column = column
        self.value = value


class EncodingInvariantViolation(TypeError):
    """A value handed to a writer does not conform to the RowType the writer was built for."""
