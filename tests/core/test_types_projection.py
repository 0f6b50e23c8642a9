import pyarrow as pa
import pytest

from tabcsv.core.errors import ConfigurationError
from tabcsv.core.projection import Projection
from tabcsv.core.types import (
    LogicalType,
    RowField,
    RowType,
    array,
    decimal,
    float_,
    integer,
    row,
    string,
    to_arrow_schema,
)


def _rt() -> RowType:
    return RowType.of(
        RowField("id", integer(nullable=False)),
        RowField("point", row(RowField("x", float_()), RowField("y", float_()), nullable=False)),
        RowField("tags", array(string())),
    )


def test_duplicate_field_names_rejected() -> None:
    with pytest.raises(ConfigurationError):
        RowType.of(RowField("a", string()), RowField("a", integer()))


def test_array_requires_element() -> None:
    from tabcsv.core.types import DataType

    with pytest.raises(ConfigurationError):
        DataType(LogicalType.ARRAY)


def test_row_type_accessors() -> None:
    rt = _rt()
    assert len(rt) == 3
    assert rt.field_names == ("id", "point", "tags")
    assert rt.index_of("tags") == 2
    assert rt[1].type.kind is LogicalType.ROW


def test_arrow_schema_mapping() -> None:
    schema = to_arrow_schema(_rt())
    assert schema.names == ["id", "point", "tags"]
    assert schema.field("id").type == pa.int64()
    assert schema.field("id").nullable is False
    assert pa.types.is_struct(schema.field("point").type)
    assert schema.field("tags").type == pa.list_(pa.string())


def test_decimal_bounds() -> None:
    assert decimal(10, 2).scale == 2
    with pytest.raises(ConfigurationError):
        decimal(2, 5)


def test_top_level_projection() -> None:
    produced = Projection.top_level([2, 0]).project(_rt())
    assert produced.field_names == ("tags", "id")


def test_nested_projection_names_and_nullability() -> None:
    produced = Projection.of([[1, 1], [0]]).project(_rt())
    assert produced.field_names == ("point_y", "id")
    assert produced[0].type.kind is LogicalType.FLOAT
    assert produced[0].type.nullable is True


def test_empty_projection_is_valid() -> None:
    assert len(Projection.of([]).project(_rt())) == 0


@pytest.mark.parametrize("paths", [[[3]], [[-1]], [[0, 0]], [[]], [[1, 5]]])
def test_invalid_projection_paths(paths: list) -> None:
    with pytest.raises(ConfigurationError):
        Projection.of(paths).validate(_rt())
