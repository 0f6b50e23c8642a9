"""
Token-row reader and writer built on the stdlib csv module.

A token row is the untyped list of cell strings for one CSV record. Reading yields
(position, tokens) pairs where position is the 1-based physical line number at which the
record ends; writing renders one token row into a single terminated record.

Notes
- Comment lines (first character "#") are dropped only where a record starts; lines that
  continue a quoted or escaped multi-line cell are never treated as comments.
- When comments are allowed, a record whose first cell starts with "#" is written quoted
  (or escaped when quoting is disabled) so it is not read back as a comment.
- Blank lines are skipped, except in single-column schemas where a blank line is one empty
  cell.
- With quoting disabled and no escape character, records are written by joining cells
  verbatim; the csv module would otherwise refuse cells containing the delimiter. A single
  empty cell is written as a blank line.
- The csv module's per-field size limit is lifted at import; cells are bounded only by
  memory, as on the write side.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable, Iterator, Sequence

from tabcsv.core.errors import ParseError
from tabcsv.core.schema import CsvSchema

from .errors import IoWriteError

__all__ = [
    "read_token_rows",
    "format_record",
]

logger = logging.getLogger(__name__)

# C long bound on every platform
csv.field_size_limit(2**31 - 1)


class _LineSource:
    """Line iterator that counts physical lines and drops comment lines at record starts."""

    def __init__(self, lines: Iterable[str], comment_marker: str | None) -> None:
        self._lines = iter(lines)
        self._marker = comment_marker
        self._in_record = False
        self.line_num = 0

    def __iter__(self) -> _LineSource:
        return self

    def __next__(self) -> str:
        while True:
            line = next(self._lines)
            self.line_num += 1
            if not self._in_record and self._marker is not None and line.startswith(self._marker):
                continue
            self._in_record = True
            return line

    def end_record(self) -> None:
        self._in_record = False


def read_token_rows(
    lines: Iterable[str],
    schema: CsvSchema,
    *,
    skip_malformed: bool = False,
) -> Iterator[tuple[int, list[str] | None]]:
    """
    Tokenize CSV text into token rows.

    Args:
        lines (Iterable[str]): Text lines, ideally from a handle opened with newline="".
        schema (CsvSchema): Compiled schema providing delimiter/quote/escape settings.
        skip_malformed (bool): Yield None for records the csv tokenizer rejects instead
            of raising.

    Yields:
        tuple[int, list[str] | None]: (line number where the record ends, cell strings).

    Raises:
        ParseError: On a record the csv tokenizer rejects, unless skip_malformed is set.
    """
    source = _LineSource(lines, schema.comment_marker)
    reader = csv.reader(source, **schema.dialect_params())
    single_column = len(schema.column_names) == 1
    while True:
        try:
            tokens = next(reader)
        except StopIteration:
            return
        except csv.Error as exc:
            source.end_record()
            if skip_malformed:
                logger.debug("malformed record ending at line %d: %s", source.line_num, exc)
                yield source.line_num, None
                continue
            raise ParseError(f"malformed CSV record: {exc}", row=source.line_num) from exc
        source.end_record()
        if not tokens:
            if not single_column:
                continue
            tokens = [""]
        yield source.line_num, tokens


def _render(tokens: Sequence[str], schema: CsvSchema, quoting: int | None = None) -> str:
    params = schema.dialect_params()
    if quoting is not None:
        params["quoting"] = quoting
    buf = io.StringIO()
    csv.writer(buf, **params).writerow(tokens)
    return buf.getvalue()


def format_record(tokens: Sequence[str], schema: CsvSchema) -> str:
    """
    Render one token row as a terminated CSV record.

    Raises:
        IoWriteError: If a leading comment marker cannot be protected because quoting is
            disabled and no escape character is configured.
    """
    marker = schema.comment_marker
    leading_marker = marker is not None and bool(tokens) and tokens[0].startswith(marker)
    if schema.quote_char is None and (schema.escape_char is None or list(tokens) == [""]):
        if leading_marker:
            raise IoWriteError(
                "record starting with the comment marker needs quoting or an escape character"
            )
        return schema.column_separator.join(tokens) + schema.line_separator
    if not leading_marker:
        return _render(tokens, schema)
    if schema.quote_char is not None:
        return _render(tokens, schema, quoting=csv.QUOTE_ALL)
    return schema.escape_char + _render(tokens, schema)
