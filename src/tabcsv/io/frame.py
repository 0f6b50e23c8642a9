"""
Polars frame helpers over the decode/encode pipelines.

Overview
- rows_to_frame(): materialize typed row tuples as a Polars DataFrame through an Arrow
  table built from the RowType (so nested ARRAY/ROW columns keep their types).
- frame_to_rows(): iterate a DataFrame as rows in RowType column order.
- read_frame() / write_frame(): file-level convenience wrappers.

Notes
- ROW values are tuples on the pipeline side and dicts/structs on the frame side.
- Frame columns outside the RowType are ignored on write; missing ones are an
  EncodingInvariantViolation.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

import polars as pl
import pyarrow as pa

from tabcsv.core.errors import EncodingInvariantViolation
from tabcsv.core.options import FormatOptions
from tabcsv.core.projection import Projection
from tabcsv.core.types import DataType, LogicalType, RowType, to_arrow_schema

from .convert import ErrorPolicy
from .decode import DecodePipeline
from .encode import EncodePipeline

__all__ = [
    "rows_to_frame",
    "frame_to_rows",
    "read_frame",
    "write_frame",
]


def _to_arrow_value(value: Any, dtype: DataType) -> Any:
    if value is None:
        return None
    if dtype.kind is LogicalType.ROW:
        return {f.name: _to_arrow_value(v, f.type) for f, v in zip(dtype.fields, value)}
    if dtype.kind is LogicalType.ARRAY:
        assert dtype.element is not None
        return [_to_arrow_value(v, dtype.element) for v in value]
    return value


def rows_to_frame(rows: Iterable[tuple[Any, ...]], row_type: RowType) -> pl.DataFrame:
    """
    Build a DataFrame from typed row tuples.

    Args:
        rows (Iterable[tuple]): Rows in row_type field order.
        row_type (RowType): Row type describing the tuples.

    Returns:
        pl.DataFrame: Frame with one column per field, typed via the Arrow mapping.
    """
    records = [
        {f.name: _to_arrow_value(v, f.type) for f, v in zip(row_type, r)} for r in rows
    ]
    table = pa.Table.from_pylist(records, schema=to_arrow_schema(row_type))
    return pl.from_arrow(table)


def frame_to_rows(df: pl.DataFrame, row_type: RowType) -> Iterator[tuple[Any, ...]]:
    """
    Iterate a DataFrame as tuples ordered like row_type.

    Raises:
        EncodingInvariantViolation: If a RowType column is missing from the frame.
    """
    missing = [n for n in row_type.field_names if n not in df.columns]
    if missing:
        raise EncodingInvariantViolation(f"frame is missing columns {missing!r}")
    yield from df.select(list(row_type.field_names)).iter_rows()


def read_frame(
    path: str | os.PathLike[str],
    row_type: RowType,
    options: FormatOptions | Mapping[str, Any] | None = None,
    projection: Projection | None = None,
    error_policy: ErrorPolicy | None = None,
    *,
    encoding: str = "utf-8",
) -> pl.DataFrame:
    """Decode a CSV file into a DataFrame of the (projected) row type."""
    pipeline = DecodePipeline(row_type, options, projection, error_policy, encoding=encoding)
    return rows_to_frame(pipeline.read_file(path), pipeline.produced_type)


def write_frame(
    path: str | os.PathLike[str],
    df: pl.DataFrame,
    row_type: RowType,
    options: FormatOptions | Mapping[str, Any] | None = None,
    *,
    encoding: str = "utf-8",
) -> int:
    """Encode a DataFrame to a CSV file; returns the number of rows written."""
    pipeline = EncodePipeline(row_type, options, encoding=encoding)
    return pipeline.write_file(path, frame_to_rows(df, row_type))
