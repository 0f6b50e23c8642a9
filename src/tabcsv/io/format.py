"""
CSV format facade.

CsvFormat mirrors a format factory of a tabular engine: it is configured once with options
(or CsvSettings) and hands out decoders, encoders, and file statistics for a given RowType.
The format produces insert-only rows.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from typing import Any

import polars as pl

from tabcsv.core.constants import FORMAT_IDENTIFIER
from tabcsv.core.options import FormatOptions, parse_options
from tabcsv.core.projection import Projection
from tabcsv.core.types import RowType

from .config import CsvSettings
from .decode import DecodePipeline
from .encode import EncodePipeline
from .frame import read_frame, write_frame
from .stats import TableStats, estimate_row_count

__all__ = [
    "CsvFormat",
]


class CsvFormat:
    """
    Facade bound to one set of CSV formatting options.

    Notes:
        - Explicit ``options`` take precedence over ``settings`` key by key.
        - Options are validated eagerly; a ConfigurationError surfaces at construction.

    Examples:
        >>> fmt = CsvFormat({"nullLiteral": "n/a"})
        >>> fmt.options.null_literal
        'n/a'
    """

    identifier = FORMAT_IDENTIFIER
    changelog_mode = "insert_only"

    def __init__(
        self,
        options: FormatOptions | Mapping[str, Any] | None = None,
        settings: CsvSettings | None = None,
    ) -> None:
        self.settings = settings or CsvSettings()
        merged = dict(self.settings.to_options())
        if isinstance(options, FormatOptions):
            merged.update(options.model_dump(by_alias=True, exclude_unset=True))
        elif options is not None:
            merged.update(options)
        self.options = parse_options(merged)

    @classmethod
    def from_settings(cls, path: str | os.PathLike[str] | None = None) -> CsvFormat:
        """Build a format from CsvSettings.load() (env > TOML > defaults)."""
        return cls(settings=CsvSettings.load(path))

    def create_decoder(
        self,
        row_type: RowType,
        projection: Projection | None = None,
    ) -> DecodePipeline:
        return DecodePipeline(
            row_type, self.options, projection, encoding=self.settings.encoding
        )

    def create_encoder(self, row_type: RowType) -> EncodePipeline:
        return EncodePipeline(row_type, self.options, encoding=self.settings.encoding)

    def report_statistics(
        self,
        files: Iterable[str | os.PathLike[str]],
        row_type: RowType | None = None,
    ) -> TableStats:
        """Estimate the row count of a file set; never raises."""
        return estimate_row_count(files, row_type)

    def read_frame(
        self,
        path: str | os.PathLike[str],
        row_type: RowType,
        projection: Projection | None = None,
    ) -> pl.DataFrame:
        return read_frame(
            path, row_type, self.options, projection, encoding=self.settings.encoding
        )

    def write_frame(self, path: str | os.PathLike[str], df: pl.DataFrame, row_type: RowType) -> int:
        return write_frame(path, df, row_type, self.options, encoding=self.settings.encoding)
