"""
Value converters between token rows and typed rows.

Overview
- Read direction: create_row_converter() builds a callable mapping a token row (list of cell
  strings) to a typed row tuple, honoring a Projection and an ErrorPolicy.
- Write direction: create_row_serializer() builds a callable mapping a typed row (sequence or
  mapping) to a token row, the inverse of the read direction.

Conversion is dispatched on LogicalType through per-variant tables (one function per
variant); ARRAY and ROW compose the element/field converters recursively. Composite values
live inside one cell, split on the schema's array element separator, so their elements must
themselves be scalar.

Null semantics
- A cell equal to the null literal is null. Without a null literal an empty cell is null for
  nullable columns; a non-nullable STRING column keeps "".
- Null for a non-nullable column is a parse error on read and an encoding invariant
  violation on write.

Canonical textual forms
- BOOLEAN "true"/"false"; FLOAT repr() with "NaN"/"Infinity"/"-Infinity"; DATE/TIME ISO-8601;
  TIMESTAMP ISO-8601 with a space separator; BYTES base64.
"""

from __future__ import annotations

import base64
import binascii
import datetime as dt
import math
from collections.abc import Callable, Mapping, Sequence
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from tabcsv.core.errors import ConfigurationError, EncodingInvariantViolation, ParseError
from tabcsv.core.projection import Projection
from tabcsv.core.schema import CsvSchema
from tabcsv.core.types import DataType, LogicalType, RowType

__all__ = [
    "ErrorPolicy",
    "SKIPPED",
    "RowConverter",
    "create_row_converter",
    "create_row_serializer",
]

CellParser = Callable[[str], Any]
CellFormatter = Callable[[Any], str]


class ErrorPolicy(Enum):
    """How the read path reacts to a cell that cannot be parsed."""

    STRICT = "strict"
    LENIENT_SKIP = "lenient_skip"


class _Skipped:
    def __repr__(self) -> str:
        return "SKIPPED"


# Returned by a RowConverter in lenient mode for a row that could not be converted.
SKIPPED: Any = _Skipped()


# =============================================================================
# Read direction
# =============================================================================


def _parse_boolean(text: str) -> bool:
    low = text.strip().lower()
    if low == "true":
        return True
    if low == "false":
        return False
    raise ValueError(f"not a boolean: {text!r}")


def _parse_integer(text: str) -> int:
    return int(text.strip())


def _parse_float(text: str) -> float:
    return float(text.strip())


def _parse_decimal(text: str) -> Decimal:
    try:
        value = Decimal(text.strip())
    except InvalidOperation as exc:
        raise ValueError(f"not a decimal: {text!r}") from exc
    if not value.is_finite():
        raise ValueError(f"not a finite decimal: {text!r}")
    return value


def _parse_string(text: str) -> str:
    return text


def _parse_bytes(text: str) -> bytes:
    try:
        return base64.b64decode(text.strip(), validate=True)
    except binascii.Error as exc:
        raise ValueError(f"not base64: {text!r}") from exc


def _parse_date(text: str) -> dt.date:
    return dt.date.fromisoformat(text.strip())


def _parse_time(text: str) -> dt.time:
    return dt.time.fromisoformat(text.strip())


def _parse_timestamp(text: str) -> dt.datetime:
    return dt.datetime.fromisoformat(text.strip())


_SCALAR_PARSERS: dict[LogicalType, CellParser] = {
    LogicalType.BOOLEAN: _parse_boolean,
    LogicalType.INTEGER: _parse_integer,
    LogicalType.FLOAT: _parse_float,
    LogicalType.DECIMAL: _parse_decimal,
    LogicalType.STRING: _parse_string,
    LogicalType.BYTES: _parse_bytes,
    LogicalType.DATE: _parse_date,
    LogicalType.TIME: _parse_time,
    LogicalType.TIMESTAMP: _parse_timestamp,
}


def _is_null(text: str, dtype: DataType, schema: CsvSchema) -> bool:
    if schema.null_value is not None:
        return text == schema.null_value
    return text == "" and dtype.nullable


def _with_nulls(parse: CellParser, dtype: DataType, schema: CsvSchema) -> CellParser:
    def convert(text: str) -> Any:
        if _is_null(text, dtype, schema):
            if not dtype.nullable:
                raise ValueError("null value in non-nullable column")
            return None
        return parse(text)

    return convert


def _require_scalar(dtype: DataType, where: str) -> None:
    if dtype.kind.is_composite:
        raise ConfigurationError(
            f"{where}: nested {dtype.kind.value} inside a single cell is not supported"
        )


def _create_array_parser(dtype: DataType, schema: CsvSchema) -> CellParser:
    assert dtype.element is not None
    _require_scalar(dtype.element, "array element")
    element = _create_cell_parser(dtype.element, schema)
    sep = schema.array_element_separator

    def parse(text: str) -> list[Any]:
        if text == "":
            return []
        return [element(part) for part in text.split(sep)]

    return parse


def _create_row_parser(dtype: DataType, schema: CsvSchema) -> CellParser:
    for f in dtype.fields:
        _require_scalar(f.type, f"row field {f.name!r}")
    fields = [_create_cell_parser(f.type, schema) for f in dtype.fields]
    sep = schema.array_element_separator

    def parse(text: str) -> tuple[Any, ...]:
        parts = text.split(sep)
        if len(parts) > len(fields):
            raise ValueError(f"row cell has {len(parts)} elements, expected {len(fields)}")
        parts += [""] * (len(fields) - len(parts))
        return tuple(conv(part) for conv, part in zip(fields, parts))

    return parse


_COMPOSITE_PARSERS: dict[LogicalType, Callable[[DataType, CsvSchema], CellParser]] = {
    LogicalType.ARRAY: _create_array_parser,
    LogicalType.ROW: _create_row_parser,
}


def _create_cell_parser(dtype: DataType, schema: CsvSchema) -> CellParser:
    if dtype.kind in _COMPOSITE_PARSERS:
        parse = _COMPOSITE_PARSERS[dtype.kind](dtype, schema)
    else:
        parse = _SCALAR_PARSERS[dtype.kind]
    return _with_nulls(parse, dtype, schema)


class _Column:
    """Read plan for one produced field: where its text lives and how to convert it."""

    def __init__(self, path: tuple[int, ...], row_type: RowType, schema: CsvSchema) -> None:
        chain = Projection.resolve(row_type, path)
        if len(chain) > 2:
            raise ConfigurationError(
                f"projection path {path} reaches below a nested row cell, which is not supported"
            )
        self.index = path[0]
        self.name = "_".join(f.name for f in chain)
        self.outer = chain[0].type
        self.leaf = chain[-1].type
        self.nullable = any(f.type.nullable for f in chain)
        self.sub_index = path[1] if len(path) == 2 else None
        if self.sub_index is not None:
            _require_scalar(self.leaf, f"row field {chain[-1].name!r}")
        self.convert = _create_cell_parser(self.leaf, schema)
        self.schema = schema

    def extract(self, tokens: Sequence[str]) -> Any:
        text = tokens[self.index] if self.index < len(tokens) else None
        if self.sub_index is None:
            if text is None:
                if not self.leaf.nullable:
                    raise ValueError("missing value in non-nullable column")
                return None
            return self.convert(text)
        if text is None or _is_null(text, self.outer, self.schema):
            if not self.outer.nullable:
                raise ValueError("null value in non-nullable column")
            return None
        parts = text.split(self.schema.array_element_separator)
        if len(parts) > len(self.outer.fields):
            raise ValueError(
                f"row cell has {len(parts)} elements, expected {len(self.outer.fields)}"
            )
        part = parts[self.sub_index] if self.sub_index < len(parts) else ""
        return self.convert(part)


class RowConverter:
    """
    Callable converting token rows into typed row tuples.

    Notes:
        - Only projected columns are parsed; other tokens are never inspected.
        - STRICT raises ParseError; LENIENT_SKIP nulls a bad cell of a nullable field and
          returns SKIPPED when a non-nullable field (or the record shape) is bad.
        - The input token row is never mutated.
    """

    def __init__(
        self,
        schema: CsvSchema,
        row_type: RowType,
        projection: Projection,
        error_policy: ErrorPolicy,
    ) -> None:
        projection.validate(row_type)
        self.schema = schema
        self.row_type = row_type
        self.produced_type = projection.project(row_type)
        self.error_policy = error_policy
        self._width = len(row_type)
        self._columns = [_Column(path, row_type, schema) for path in projection.paths]

    def __call__(self, tokens: Sequence[str], row: int | None = None) -> Any:
        lenient = self.error_policy is ErrorPolicy.LENIENT_SKIP
        if len(tokens) > self._width:
            if lenient:
                return SKIPPED
            raise ParseError(
                f"record has {len(tokens)} columns, expected at most {self._width}", row=row
            )
        out: list[Any] = []
        for column in self._columns:
            try:
                value = column.extract(tokens)
            except (ValueError, OverflowError) as exc:
                if lenient:
                    if not column.nullable:
                        return SKIPPED
                    value = None
                else:
                    raw = tokens[column.index] if column.index < len(tokens) else None
                    raise ParseError(
                        str(exc), row=row, col=column.index, column=column.name, value=raw
                    ) from exc
            out.append(value)
        return tuple(out)


def create_row_converter(
    schema: CsvSchema,
    row_type: RowType,
    projection: Projection | None = None,
    error_policy: ErrorPolicy = ErrorPolicy.STRICT,
) -> RowConverter:
    """
    Build the read-direction converter for a compiled schema.

    Args:
        schema (CsvSchema): Compiled schema (separators and null literal).
        row_type (RowType): Full physical row type of the file.
        projection (Projection | None): Columns to materialize; all columns when None.
        error_policy (ErrorPolicy): STRICT or LENIENT_SKIP.

    Returns:
        RowConverter: Callable ``(tokens, row=None) -> tuple | SKIPPED``.

    Raises:
        ConfigurationError: Invalid projection, or a composite nested inside a cell.
    """
    if projection is None:
        projection = Projection.all(row_type)
    return RowConverter(schema, row_type, projection, error_policy)


# =============================================================================
# Write direction
# =============================================================================


def _violation(expected: str, value: Any) -> EncodingInvariantViolation:
    return EncodingInvariantViolation(f"expected {expected}, got {type(value).__name__}: {value!r}")


def _format_boolean(value: Any) -> str:
    if not isinstance(value, bool):
        raise _violation("bool", value)
    return "true" if value else "false"


def _format_integer(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, int):
        raise _violation("int", value)
    return str(value)


def _format_float(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _violation("float", value)
    f = float(value)
    if math.isnan(f):
        return "NaN"
    if math.isinf(f):
        return "Infinity" if f > 0 else "-Infinity"
    return repr(f)


def _format_decimal(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, (Decimal, int)):
        raise _violation("Decimal", value)
    if isinstance(value, Decimal) and not value.is_finite():
        raise _violation("finite Decimal", value)
    return str(value)


def _format_string(value: Any) -> str:
    if not isinstance(value, str):
        raise _violation("str", value)
    return value


def _format_bytes(value: Any) -> str:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise _violation("bytes", value)
    return base64.b64encode(bytes(value)).decode("ascii")


def _format_date(value: Any) -> str:
    if isinstance(value, dt.datetime) or not isinstance(value, dt.date):
        raise _violation("date", value)
    return value.isoformat()


def _format_time(value: Any) -> str:
    if not isinstance(value, dt.time):
        raise _violation("time", value)
    return value.isoformat()


def _format_timestamp(value: Any) -> str:
    if not isinstance(value, dt.datetime):
        raise _violation("datetime", value)
    return value.isoformat(sep=" ")


_SCALAR_FORMATTERS: dict[LogicalType, CellFormatter] = {
    LogicalType.BOOLEAN: _format_boolean,
    LogicalType.INTEGER: _format_integer,
    LogicalType.FLOAT: _format_float,
    LogicalType.DECIMAL: _format_decimal,
    LogicalType.STRING: _format_string,
    LogicalType.BYTES: _format_bytes,
    LogicalType.DATE: _format_date,
    LogicalType.TIME: _format_time,
    LogicalType.TIMESTAMP: _format_timestamp,
}


def _null_token(schema: CsvSchema) -> str:
    return schema.null_value if schema.null_value is not None else ""


def _with_null_token(fmt: CellFormatter, dtype: DataType, schema: CsvSchema) -> CellFormatter:
    null = _null_token(schema)

    def render(value: Any) -> str:
        if value is None:
            if not dtype.nullable:
                raise EncodingInvariantViolation(f"null value for non-nullable {dtype}")
            return null
        return fmt(value)

    return render


def _create_array_formatter(dtype: DataType, schema: CsvSchema) -> CellFormatter:
    assert dtype.element is not None
    _require_scalar(dtype.element, "array element")
    element = _create_cell_formatter(dtype.element, schema)
    sep = schema.array_element_separator

    def render(value: Any) -> str:
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            raise _violation("list", value)
        return sep.join(element(v) for v in value)

    return render


def _create_row_formatter(dtype: DataType, schema: CsvSchema) -> CellFormatter:
    for f in dtype.fields:
        _require_scalar(f.type, f"row field {f.name!r}")
    names = [f.name for f in dtype.fields]
    fields = [_create_cell_formatter(f.type, schema) for f in dtype.fields]
    sep = schema.array_element_separator

    def render(value: Any) -> str:
        return sep.join(fmt(v) for fmt, v in zip(fields, _row_values(value, names)))

    return render


_COMPOSITE_FORMATTERS: dict[LogicalType, Callable[[DataType, CsvSchema], CellFormatter]] = {
    LogicalType.ARRAY: _create_array_formatter,
    LogicalType.ROW: _create_row_formatter,
}


def _create_cell_formatter(dtype: DataType, schema: CsvSchema) -> CellFormatter:
    if dtype.kind in _COMPOSITE_FORMATTERS:
        fmt = _COMPOSITE_FORMATTERS[dtype.kind](dtype, schema)
    else:
        fmt = _SCALAR_FORMATTERS[dtype.kind]
    return _with_null_token(fmt, dtype, schema)


def _row_values(value: Any, names: Sequence[str]) -> Sequence[Any]:
    if isinstance(value, Mapping):
        missing = [n for n in names if n not in value]
        if missing:
            raise EncodingInvariantViolation(f"row is missing fields {missing!r}")
        return [value[n] for n in names]
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise _violation("row sequence or mapping", value)
    if len(value) != len(names):
        raise EncodingInvariantViolation(f"row has {len(value)} values, expected {len(names)}")
    return value


def create_row_serializer(
    schema: CsvSchema,
    row_type: RowType,
) -> Callable[[Sequence[Any] | Mapping[str, Any]], list[str]]:
    """
    Build the write-direction converter for a compiled schema.

    Args:
        schema (CsvSchema): Compiled schema (separators and null literal).
        row_type (RowType): Row type the writer serializes against.

    Returns:
        Callable: ``row -> list[str]`` accepting a sequence in RowType order or a mapping
        keyed by field name.

    Raises:
        ConfigurationError: When building, for a composite nested inside a cell.
        EncodingInvariantViolation: When called with a row that does not conform to row_type.
    """
    names = list(row_type.field_names)
    formatters = [_create_cell_formatter(f.type, schema) for f in row_type]

    def serialize(row: Sequence[Any] | Mapping[str, Any]) -> list[str]:
        return [fmt(v) for fmt, v in zip(formatters, _row_values(row, names))]

    return serialize
