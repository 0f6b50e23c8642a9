"""
tabcsv.io: CSV decode/encode pipelines, estimation, and frame IO.

## Responsibilities
- Turn a compiled CsvSchema (tabcsv.core.schema) into per-file row producers and per-row
  serializers over byte/text streams.
- Estimate row counts of file sets from a bounded line sample.
- Bridge decoded rows to Polars DataFrames through Arrow.

## Public API
- CsvSettings: runtime configuration (env > TOML > defaults).
- CsvFormat: facade handing out decoders, encoders and statistics.
- DecodePipeline / ErrorPolicy: per-file typed row producer.
- EncodePipeline / RowWriter: per-row serializer onto a binary sink.
- estimate_row_count / TableStats: sampling row-count estimator.

## Import DAG discipline
- Depends on stdlib, polars/pyarrow, and tabcsv.core.*; tabcsv.core never imports this package.
"""

from __future__ import annotations

from .config import CsvSettings
from .convert import ErrorPolicy
from .decode import DecodePipeline
from .encode import EncodePipeline, RowWriter
from .format import CsvFormat
from .stats import TableStats, estimate_row_count

__all__ = [
    "CsvSettings",
    "CsvFormat",
    "DecodePipeline",
    "ErrorPolicy",
    "EncodePipeline",
    "RowWriter",
    "TableStats",
    "estimate_row_count",
]
