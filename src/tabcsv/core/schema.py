"""
Compiled CSV schema and the pure option resolver that builds it.

compile_schema() folds a FormatOptions record over documented defaults into an immutable
CsvSchema. Each option is an independent override, except that ``quotingDisabled`` makes
``quoteCharacter`` inert.

Resolution order
1) Column separator: backslash escapes in ``fieldDelimiter`` are resolved ("\\t" -> TAB),
   then the first character is used. Default ",".
2) Quoting: disabled when ``quotingDisabled``; else first character of ``quoteCharacter``;
   else '"'.
3) Comments: ``allowComments`` enables skipping of records starting with "#".
4) Array element separator: ``arrayElementDelimiter`` or ";".
5) Escape character: first character of ``escapeCharacter`` when set.
6) Null literal: ``nullLiteral`` when set; otherwise nulls are empty cells.

Notes
- Zero-IO; the same CsvSchema is consumed by both converter directions.
"""

from __future__ import annotations

import csv
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .constants import (
    COMMENT_MARKER,
    DEFAULT_ARRAY_ELEMENT_DELIMITER,
    DEFAULT_FIELD_DELIMITER,
    DEFAULT_LINE_SEPARATOR,
    DEFAULT_QUOTE_CHARACTER,
)
from .errors import ConfigurationError
from .options import FormatOptions, parse_options
from .types import RowType

__all__ = [
    "CsvSchema",
    "compile_schema",
    "unescape",
]


@dataclass(frozen=True)
class CsvSchema:
    """
    Immutable, compiled CSV codec schema.

    Attributes:
        column_names (tuple[str, ...]): Column names in RowType order.
        column_separator (str): Single-character field delimiter.
        quote_char (str | None): Quote character, or None when quoting is disabled.
        escape_char (str | None): Escape character, if any.
        allow_comments (bool): Skip records whose first character is "#".
        array_element_separator (str): Separator for elements inside one cell.
        null_value (str | None): Null literal, or None for "empty cell means null".
        line_separator (str): Record terminator used on write.
    """

    column_names: tuple[str, ...]
    column_separator: str = DEFAULT_FIELD_DELIMITER
    quote_char: str | None = DEFAULT_QUOTE_CHARACTER
    escape_char: str | None = None
    allow_comments: bool = False
    array_element_separator: str = DEFAULT_ARRAY_ELEMENT_DELIMITER
    null_value: str | None = None
    line_separator: str = DEFAULT_LINE_SEPARATOR

    @property
    def comment_marker(self) -> str | None:
        return COMMENT_MARKER if self.allow_comments else None

    @property
    def quoting_enabled(self) -> bool:
        return self.quote_char is not None

    def dialect_params(self) -> dict[str, Any]:
        """Keyword arguments for csv.reader / csv.writer matching this schema."""
        params: dict[str, Any] = {
            "delimiter": self.column_separator,
            "lineterminator": self.line_separator,
            "escapechar": self.escape_char,
            "doublequote": self.escape_char is None,
            "strict": False,
        }
        if self.quote_char is None:
            params["quotechar"] = None
            params["quoting"] = csv.QUOTE_NONE
        else:
            params["quotechar"] = self.quote_char
            params["quoting"] = csv.QUOTE_MINIMAL
        return params


def unescape(raw: str) -> str:
    """
    Resolve backslash escape sequences ("\\t", "\\n", "\\\\", "\\u0009", ...) in an option value.

    Raises:
        ConfigurationError: On a malformed escape sequence.
    """
    if "\\" not in raw:
        return raw
    try:
        return raw.encode("latin-1", "backslashreplace").decode("unicode_escape")
    except UnicodeDecodeError as exc:
        raise ConfigurationError(f"malformed escape sequence in {raw!r}: {exc}") from exc


def compile_schema(
    row_type: RowType,
    options: FormatOptions | Mapping[str, Any] | None = None,
) -> CsvSchema:
    """
    Compile a RowType and formatting options into a CsvSchema.

    Args:
        row_type (RowType): Structural row description; its order becomes column order.
        options (FormatOptions | Mapping[str, Any] | None): Option map with camelCase keys.

    Returns:
        CsvSchema: Immutable compiled schema.

    Raises:
        ConfigurationError: If an option value is structurally invalid.

    Examples:
        >>> from tabcsv.core.types import RowType, RowField, string
        >>> compile_schema(RowType.of(RowField("a", string())), {"fieldDelimiter": "\\\\t"}).column_separator
        '\\t'
    """
    opts = parse_options(options)

    separator = DEFAULT_FIELD_DELIMITER
    if opts.field_delimiter is not None:
        resolved = unescape(opts.field_delimiter)
        if not resolved:
            raise ConfigurationError("fieldDelimiter must not be empty")
        separator = resolved[0]

    quote_char: str | None = DEFAULT_QUOTE_CHARACTER
    if opts.quoting_disabled:
        quote_char = None
    elif opts.quote_character is not None:
        quote_char = opts.quote_character[0]

    escape_char = opts.escape_character[0] if opts.escape_character is not None else None

    array_separator = DEFAULT_ARRAY_ELEMENT_DELIMITER
    if opts.array_element_delimiter is not None:
        array_separator = opts.array_element_delimiter

    if quote_char is not None and quote_char == separator:
        raise ConfigurationError("quoteCharacter must differ from fieldDelimiter")
    if escape_char is not None and escape_char in (separator, quote_char):
        raise ConfigurationError("escapeCharacter must differ from fieldDelimiter and quoteCharacter")
    if separator in ("\r", "\n"):
        raise ConfigurationError("fieldDelimiter must not be a line terminator")

    return CsvSchema(
        column_names=row_type.field_names,
        column_separator=separator,
        quote_char=quote_char,
        escape_char=escape_char,
        allow_comments=bool(opts.allow_comments),
        array_element_separator=array_separator,
        null_value=opts.null_literal,
    )
