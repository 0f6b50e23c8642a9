"""
tabcsv: Schema-driven CSV codec and row-count estimation for tabular pipelines.

## Layers
- tabcsv.core: zero-IO contracts (logical row types, format options, compiled CSV schema,
  projections, and domain errors).
- tabcsv.io: decode/encode pipelines over files and streams, value converters, the
  sampling row-count estimator, Polars frame helpers, and runtime settings.

## Examples
```python
from tabcsv import CsvFormat
from tabcsv.core.types import RowType, RowField, integer, string

rt = RowType.of(RowField("id", integer()), RowField("name", string()))
fmt = CsvFormat({"fieldDelimiter": "\\t"})  # doctest: +SKIP
rows = list(fmt.create_decoder(rt).read_file("people.tsv"))  # doctest: +SKIP
```
"""

from __future__ import annotations

from .io.format import CsvFormat

__all__ = [
    "CsvFormat",
]
