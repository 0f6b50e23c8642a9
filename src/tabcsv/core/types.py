"""
Logical row types consumed by the schema compiler and the value converters.

Notes:
    - LogicalType is a closed enumeration; converters dispatch on it with one function
      per member, composing recursively for ARRAY and ROW.
    - RowType is immutable and ordered. Its order defines CSV column order on write and
      positional token mapping on read.
    - to_arrow_schema() maps a RowType onto pyarrow for frame materialization; nullability
      is carried on each arrow field.

Examples:
    >>> from tabcsv.core.types import RowType, RowField, integer, string, array
    >>> rt = RowType.of(RowField("id", integer(nullable=False)), RowField("tags", array(string())))
    >>> rt.field_names
    ('id', 'tags')
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, replace
from enum import Enum

import pyarrow as pa

from .errors import ConfigurationError

__all__ = [
    "LogicalType",
    "DataType",
    "RowField",
    "RowType",
    "boolean",
    "integer",
    "float_",
    "decimal",
    "string",
    "bytes_",
    "date",
    "time",
    "timestamp",
    "array",
    "row",
    "to_arrow_type",
    "to_arrow_schema",
]


class LogicalType(Enum):
    """Closed set of logical column types (serialized values are lower_snake)."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    STRING = "string"
    BYTES = "bytes"
    DATE = "date"
    TIME = "time"
    TIMESTAMP = "timestamp"
    ARRAY = "array"
    ROW = "row"

    @property
    def is_composite(self) -> bool:
        return self in (LogicalType.ARRAY, LogicalType.ROW)


@dataclass(frozen=True)
class DataType:
    """
    A logical type plus nullability.

    Attributes:
        kind (LogicalType): The logical type tag.
        nullable (bool): Whether the column may hold nulls.
        element (DataType | None): Element type for ARRAY.
        fields (tuple[RowField, ...]): Nested fields for ROW.
        precision (int): DECIMAL precision.
        scale (int): DECIMAL scale.
    """

    kind: LogicalType
    nullable: bool = True
    element: DataType | None = None
    fields: tuple[RowField, ...] = ()
    precision: int = 38
    scale: int = 18

    def __post_init__(self) -> None:
        if self.kind is LogicalType.ARRAY and self.element is None:
            raise ConfigurationError("array type requires an element type")
        if self.kind is not LogicalType.ARRAY and self.element is not None:
            raise ConfigurationError(f"{self.kind.value} type cannot carry an element type")
        if self.kind is not LogicalType.ROW and self.fields:
            raise ConfigurationError(f"{self.kind.value} type cannot carry nested fields")
        if self.kind is LogicalType.ROW:
            _check_unique_names(self.fields)

    def as_nullable(self, nullable: bool = True) -> DataType:
        return replace(self, nullable=nullable)

    def __str__(self) -> str:
        if self.kind is LogicalType.ARRAY:
            text = f"array<{self.element}>"
        elif self.kind is LogicalType.ROW:
            text = "row<" + ", ".join(f"{f.name} {f.type}" for f in self.fields) + ">"
        elif self.kind is LogicalType.DECIMAL:
            text = f"decimal({self.precision}, {self.scale})"
        else:
            text = self.kind.value
        return text if self.nullable else f"{text} not null"


@dataclass(frozen=True)
class RowField:
    name: str
    type: DataType


def _check_unique_names(fields: tuple[RowField, ...]) -> None:
    seen: set[str] = set()
    for f in fields:
        if not f.name:
            raise ConfigurationError("field names must be non-empty")
        if f.name in seen:
            raise ConfigurationError(f"duplicate field name {f.name!r}")
        seen.add(f.name)


@dataclass(frozen=True)
class RowType:
    """
    Ordered, immutable sequence of named fields describing one CSV record.

    Raises:
        ConfigurationError: On empty or duplicate field names.
    """

    fields: tuple[RowField, ...]

    def __post_init__(self) -> None:
        _check_unique_names(self.fields)

    @classmethod
    def of(cls, *fields: RowField) -> RowType:
        return cls(tuple(fields))

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    @property
    def field_types(self) -> tuple[DataType, ...]:
        return tuple(f.type for f in self.fields)

    def index_of(self, name: str) -> int:
        for i, f in enumerate(self.fields):
            if f.name == name:
                return i
        raise KeyError(name)

    def as_data_type(self, nullable: bool = False) -> DataType:
        return DataType(LogicalType.ROW, nullable=nullable, fields=self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __getitem__(self, index: int) -> RowField:
        return self.fields[index]

    def __iter__(self) -> Iterator[RowField]:
        return iter(self.fields)


# -----------------------------------------------------------------------------
# Constructors
# -----------------------------------------------------------------------------


def boolean(nullable: bool = True) -> DataType:
    return DataType(LogicalType.BOOLEAN, nullable)


def integer(nullable: bool = True) -> DataType:
    return DataType(LogicalType.INTEGER, nullable)


def float_(nullable: bool = True) -> DataType:
    return DataType(LogicalType.FLOAT, nullable)


def decimal(precision: int = 38, scale: int = 18, nullable: bool = True) -> DataType:
    if not 0 <= scale <= precision:
        raise ConfigurationError(f"invalid decimal({precision}, {scale})")
    return DataType(LogicalType.DECIMAL, nullable, precision=precision, scale=scale)


def string(nullable: bool = True) -> DataType:
    return DataType(LogicalType.STRING, nullable)


def bytes_(nullable: bool = True) -> DataType:
    return DataType(LogicalType.BYTES, nullable)


def date(nullable: bool = True) -> DataType:
    return DataType(LogicalType.DATE, nullable)


def time(nullable: bool = True) -> DataType:
    return DataType(LogicalType.TIME, nullable)


def timestamp(nullable: bool = True) -> DataType:
    return DataType(LogicalType.TIMESTAMP, nullable)


def array(element: DataType, nullable: bool = True) -> DataType:
    return DataType(LogicalType.ARRAY, nullable, element=element)


def row(*fields: RowField, nullable: bool = True) -> DataType:
    return DataType(LogicalType.ROW, nullable, fields=tuple(fields))


# -----------------------------------------------------------------------------
# Arrow mapping
# -----------------------------------------------------------------------------

_ARROW_SCALARS: dict[LogicalType, pa.DataType] = {
    LogicalType.BOOLEAN: pa.bool_(),
    LogicalType.INTEGER: pa.int64(),
    LogicalType.FLOAT: pa.float64(),
    LogicalType.STRING: pa.string(),
    LogicalType.BYTES: pa.binary(),
    LogicalType.DATE: pa.date32(),
    LogicalType.TIME: pa.time64("us"),
    LogicalType.TIMESTAMP: pa.timestamp("us"),
}


def to_arrow_type(dt: DataType) -> pa.DataType:
    """Map a DataType onto the equivalent pyarrow type."""
    if dt.kind in _ARROW_SCALARS:
        return _ARROW_SCALARS[dt.kind]
    if dt.kind is LogicalType.DECIMAL:
        return pa.decimal128(dt.precision, dt.scale)
    if dt.kind is LogicalType.ARRAY:
        assert dt.element is not None
        return pa.list_(to_arrow_type(dt.element))
    return pa.struct([pa.field(f.name, to_arrow_type(f.type), f.type.nullable) for f in dt.fields])


def to_arrow_schema(row_type: RowType) -> pa.Schema:
    """Map a RowType onto a pyarrow schema, preserving field order and nullability."""
    return pa.schema(
        [pa.field(f.name, to_arrow_type(f.type), nullable=f.type.nullable) for f in row_type]
    )
