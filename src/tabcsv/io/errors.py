"""
Custom exceptions for the tabcsv.io module.

Purpose
- Provide IO-layer specific error types for file and stream failures.
- Keep tabcsv.core as the source of truth for configuration/parse/encoding errors
  (see tabcsv.core.errors).

Source of truth and boundaries
- tabcsv.core.errors.ConfigurationError, ParseError and EncodingInvariantViolation are
  raised by the compiler and converters.
- tabcsv.io raises Io* errors for filesystem concerns:
  - IoConfigError: invalid or unsupported runtime settings.
  - IoReadError: a file could not be opened or read while decoding.
  - IoWriteError: a record could not be written, or a writer was used after finish().

Notes
- The row-count estimator never raises these; it degrades to TableStats.UNKNOWN.
"""

from __future__ import annotations


class IoError(Exception):
    """
    Base class for IO-related errors in tabcsv.io.

    Notes:
        Use this as a catch-all for IO-layer failures, distinct from tabcsv.core errors.
    """


class IoConfigError(IoError):
    """
    Raised when runtime settings are invalid or unsupported.

    Examples:
        - Unknown text encoding
    """


class IoReadError(IoError):
    """Raised when a source file cannot be opened or read during decoding."""


class IoWriteError(IoError):
    """
    Raised when an encoded record cannot be written to its sink.

    Notes:
        Also raised when add_row() is called on a RowWriter that has already finished.
    """
