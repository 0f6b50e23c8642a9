"""
Per-row CSV encode pipeline.

EncodePipeline binds a compiled CsvSchema and a write-direction serializer to a binary
sink. RowWriter appends one "\\n"-terminated record per row and finish() flushes the sink so
that no partial record is left behind.

Notes
- Rows that do not conform to the RowType raise EncodingInvariantViolation and nothing is
  written for that row. Conforming rows whose text the target encoding cannot represent
  raise IoWriteError, also before anything is written.
- finish() flushes but does not close the caller's sink; it is idempotent.
"""

from __future__ import annotations

import codecs
import logging
import os
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, BinaryIO

from tabcsv.core.options import FormatOptions, parse_options
from tabcsv.core.schema import CsvSchema, compile_schema
from tabcsv.core.types import RowType

from .convert import create_row_serializer
from .errors import IoConfigError, IoWriteError
from .fs import open_write
from .tokens import format_record

__all__ = [
    "EncodePipeline",
    "RowWriter",
]

logger = logging.getLogger(__name__)

Row = Sequence[Any] | Mapping[str, Any]


class RowWriter:
    """Appends encoded rows to a binary sink."""

    def __init__(self, pipeline: EncodePipeline, sink: BinaryIO) -> None:
        self._pipeline = pipeline
        self._sink = sink
        self._finished = False
        self.rows_written = 0

    def add_row(self, row: Row) -> None:
        """
        Encode and append one row.

        Raises:
            EncodingInvariantViolation: Row does not conform to the pipeline's RowType.
            IoWriteError: Writer already finished, the record cannot be represented in the
                pipeline's encoding or with its quoting settings, or the sink write failed.
        """
        if self._finished:
            raise IoWriteError("cannot add rows to a finished writer")
        record = self._pipeline.encode_row(row)
        try:
            data = record.encode(self._pipeline.encoding)
        except UnicodeEncodeError as exc:
            raise IoWriteError(
                f"record not representable in {self._pipeline.encoding!r}: {exc}"
            ) from exc
        try:
            self._sink.write(data)
        except OSError as exc:
            raise IoWriteError(f"failed to write CSV record: {exc}") from exc
        self.rows_written += 1

    def add_rows(self, rows: Iterable[Row]) -> None:
        for row in rows:
            self.add_row(row)

    def finish(self) -> None:
        """Flush the sink; further add_row() calls raise IoWriteError."""
        if self._finished:
            return
        self._finished = True
        try:
            self._sink.flush()
        except OSError as exc:
            raise IoWriteError(f"failed to flush CSV sink: {exc}") from exc

    def __enter__(self) -> RowWriter:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if exc_type is None:
            self.finish()


class EncodePipeline:
    """
    Encoder writing typed rows as CSV records.

    Examples:
        >>> from tabcsv.core.types import RowType, RowField, integer, array, string
        >>> rt = RowType.of(RowField("id", integer()), RowField("tags", array(string())))
        >>> EncodePipeline(rt).encode_row((1, ["a", "b"]))
        '1,a;b\\n'
    """

    def __init__(
        self,
        row_type: RowType,
        options: FormatOptions | Mapping[str, Any] | None = None,
        *,
        encoding: str = "utf-8",
    ) -> None:
        """
        Compile the schema and build the row serializer.

        Raises:
            ConfigurationError: Invalid options or unsupported nesting.
            IoConfigError: Unknown text encoding.
        """
        try:
            codecs.lookup(encoding)
        except LookupError as exc:
            raise IoConfigError(f"unknown encoding {encoding!r}") from exc
        self.row_type = row_type
        self.schema: CsvSchema = compile_schema(row_type, parse_options(options))
        self.encoding = encoding
        self._serialize = create_row_serializer(self.schema, row_type)

    def encode_row(self, row: Row) -> str:
        """Render one row as a terminated CSV record."""
        return format_record(self._serialize(row), self.schema)

    def open(self, sink: BinaryIO) -> RowWriter:
        """Bind a RowWriter to a caller-owned binary sink."""
        return RowWriter(self, sink)

    def write_file(self, path: str | os.PathLike[str], rows: Iterable[Row]) -> int:
        """
        Write rows to a new file, replacing any existing content.

        Returns:
            int: Number of rows written.

        Raises:
            IoWriteError: If the file cannot be opened or written.
            EncodingInvariantViolation: On an ill-typed row.
        """
        try:
            with open_write(path) as fh:
                writer = self.open(fh)
                writer.add_rows(rows)
                writer.finish()
        except OSError as exc:
            raise IoWriteError(f"failed to write CSV file {os.fspath(path)!r}: {exc}") from exc
        logger.debug("wrote %d rows to %s", writer.rows_written, os.fspath(path))
        return writer.rows_written
