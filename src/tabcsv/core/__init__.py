"""
Core package aggregator for tabcsv contracts (types, options, schema, projection, errors).

## Contracts (single source of truth)
- Types: closed LogicalType enumeration, DataType, RowField and RowType.
- Options: FormatOptions, the validated textual formatting knobs.
- Schema: CsvSchema and compile_schema(), the pure option resolver.
- Projection: nested index paths selecting the columns materialized on read.

## Notes
- Zero-IO policy: stdlib + pydantic (plus pyarrow/polars type mapping); no file/network IO.
- Field order in a RowType is significant and carried unchanged into CsvSchema.

## Downstream usage
- tabcsv.io builds converters and pipelines from a compiled CsvSchema and a RowType.
"""

from __future__ import annotations

from .errors import ConfigurationError, EncodingInvariantViolation, ParseError
from .options import FormatOptions
from .projection import Projection
from .schema import CsvSchema, compile_schema
from .types import DataType, LogicalType, RowField, RowType

__all__ = [
    "ConfigurationError",
    "EncodingInvariantViolation",
    "ParseError",
    "FormatOptions",
    "Projection",
    "CsvSchema",
    "compile_schema",
    "DataType",
    "LogicalType",
    "RowField",
    "RowType",
]
