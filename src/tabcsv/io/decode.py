"""
Per-file CSV decode pipeline.

DecodePipeline binds a compiled CsvSchema and a read-direction RowConverter to a text
source and exposes one entry point per file that lazily yields typed rows in file order.

Error policy
- ErrorPolicy.STRICT: the first unparsable record aborts iteration with a ParseError whose
  ``row`` is the line number at which the record ends.
- ErrorPolicy.LENIENT_SKIP: bad cells of nullable fields become None; records that still
  cannot be converted are left out of the output and logged at DEBUG.
- When no policy is passed, the ``ignoreParseErrors`` option selects LENIENT_SKIP.

Notes
- The pipeline holds no per-file state; the same instance may read any number of files.
  skipped_rows is a running total of records left out under LENIENT_SKIP across reads.
- IO failures surface as tabcsv.io.errors.IoReadError and are never retried.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from tabcsv.core.options import FormatOptions, parse_options
from tabcsv.core.projection import Projection
from tabcsv.core.schema import compile_schema
from tabcsv.core.types import RowType

from .convert import SKIPPED, ErrorPolicy, create_row_converter
from .errors import IoReadError
from .fs import open_text
from .tokens import read_token_rows

__all__ = [
    "DecodePipeline",
    "ErrorPolicy",
]

logger = logging.getLogger(__name__)


class DecodePipeline:
    """
    Decoder producing typed row tuples from CSV files or text streams.

    Examples:
        >>> import io
        >>> from tabcsv.core.types import RowType, RowField, integer, string
        >>> rt = RowType.of(RowField("id", integer()), RowField("name", string()))
        >>> list(DecodePipeline(rt).read_stream(io.StringIO("1,ada\\n2,bob\\n")))
        [(1, 'ada'), (2, 'bob')]
    """

    def __init__(
        self,
        row_type: RowType,
        options: FormatOptions | Mapping[str, Any] | None = None,
        projection: Projection | None = None,
        error_policy: ErrorPolicy | None = None,
        *,
        encoding: str = "utf-8",
    ) -> None:
        """
        Compile the schema and build the row converter.

        Args:
            row_type (RowType): Full physical row type of the files.
            options (FormatOptions | Mapping[str, Any] | None): CSV formatting options.
            projection (Projection | None): Columns to materialize; all when None.
            error_policy (ErrorPolicy | None): Overrides the ``ignoreParseErrors`` option.
            encoding (str): Text encoding of the files.

        Raises:
            ConfigurationError: Invalid options, projection, or unsupported nesting.
        """
        opts = parse_options(options)
        if error_policy is None:
            error_policy = (
                ErrorPolicy.LENIENT_SKIP if opts.ignore_parse_errors else ErrorPolicy.STRICT
            )
        self.row_type = row_type
        self.schema = compile_schema(row_type, opts)
        self.error_policy = error_policy
        self.encoding = encoding
        self.skipped_rows = 0
        self._converter = create_row_converter(self.schema, row_type, projection, error_policy)

    @property
    def produced_type(self) -> RowType:
        """Row type of the tuples this pipeline yields (after projection)."""
        return self._converter.produced_type

    def read_stream(self, lines: Iterable[str]) -> Iterator[tuple[Any, ...]]:
        """
        Decode CSV text into typed rows.

        Args:
            lines (Iterable[str]): Text lines; a handle opened with newline="" preserves
                line breaks inside quoted cells.

        Yields:
            tuple: One typed row per accepted record, in input order.

        Raises:
            ParseError: Under STRICT, on the first record that cannot be tokenized or
                converted, with the line number at which that record ends.
        """
        records = read_token_rows(
            lines,
            self.schema,
            skip_malformed=self.error_policy is ErrorPolicy.LENIENT_SKIP,
        )
        for line_num, tokens in records:
            value = SKIPPED if tokens is None else self._converter(tokens, row=line_num)
            if value is SKIPPED:
                self.skipped_rows += 1
                logger.debug("skipping unparsable record ending at line %d", line_num)
                continue
            yield value

    def read_file(self, path: str | os.PathLike[str]) -> Iterator[tuple[Any, ...]]:
        """
        Decode one CSV file into typed rows.

        Args:
            path (str | os.PathLike[str]): File to read.

        Yields:
            tuple: Typed rows in file order.

        Raises:
            IoReadError: If the file cannot be opened, read, or decoded as text.
            ParseError: See read_stream().
        """
        try:
            with open_text(path, encoding=self.encoding, newline="") as fh:
                yield from self.read_stream(fh)
        except (OSError, UnicodeDecodeError) as exc:
            raise IoReadError(f"failed to read CSV file {os.fspath(path)!r}: {exc}") from exc
