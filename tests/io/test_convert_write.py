import datetime as dt
import math
from decimal import Decimal

import pytest

from tabcsv.core.errors import EncodingInvariantViolation
from tabcsv.core.schema import compile_schema
from tabcsv.core.types import (
    RowField,
    RowType,
    array,
    boolean,
    bytes_,
    date,
    decimal,
    float_,
    integer,
    row,
    string,
    time,
    timestamp,
)
from tabcsv.io.convert import create_row_serializer


def test_canonical_textual_forms() -> None:
    rt = RowType.of(
        RowField("b", boolean()),
        RowField("i", integer()),
        RowField("f", float_()),
        RowField("d", decimal(10, 2)),
        RowField("raw", bytes_()),
        RowField("day", date()),
        RowField("at", time()),
        RowField("ts", timestamp()),
        RowField("xs", array(string())),
        RowField("p", row(RowField("x", integer()), RowField("y", float_()))),
    )
    serialize = create_row_serializer(compile_schema(rt), rt)
    out = serialize(
        (
            False,
            -3,
            0.1,
            Decimal("2.50"),
            b"hi",
            dt.date(2024, 1, 2),
            dt.time(8, 0),
            dt.datetime(2024, 1, 2, 8, 0, 1),
            ["a", "b"],
            (1, 2.5),
        )
    )
    assert out == [
        "false",
        "-3",
        "0.1",
        "2.50",
        "aGk=",
        "2024-01-02",
        "08:00:00",
        "2024-01-02 08:00:01",
        "a;b",
        "1;2.5",
    ]


def test_special_floats() -> None:
    rt = RowType.of(RowField("f", float_()))
    serialize = create_row_serializer(compile_schema(rt), rt)
    assert serialize([math.nan]) == ["NaN"]
    assert serialize([math.inf]) == ["Infinity"]
    assert serialize([-math.inf]) == ["-Infinity"]


def test_nulls_use_literal_or_empty() -> None:
    rt = RowType.of(RowField("s", string()), RowField("xs", array(integer())))
    assert create_row_serializer(compile_schema(rt), rt)([None, [1, None]]) == ["", "1;"]
    with_literal = create_row_serializer(compile_schema(rt, {"nullLiteral": "\\N"}), rt)
    assert with_literal([None, [None]]) == ["\\N", "\\N"]


def test_mapping_rows_are_accepted() -> None:
    rt = RowType.of(RowField("a", integer()), RowField("p", row(RowField("x", string()))))
    serialize = create_row_serializer(compile_schema(rt), rt)
    assert serialize({"p": {"x": "v"}, "a": 1}) == ["1", "v"]


@pytest.mark.parametrize(
    "value",
    [
        ("1",),
        (True,),
        (1.5,),
        (None,),
    ],
)
def test_ill_typed_values_raise(value: tuple) -> None:
    rt = RowType.of(RowField("i", integer(nullable=False)))
    serialize = create_row_serializer(compile_schema(rt), rt)
    with pytest.raises(EncodingInvariantViolation):
        serialize(value)


def test_wrong_arity_raises() -> None:
    rt = RowType.of(RowField("a", integer()), RowField("b", integer()))
    serialize = create_row_serializer(compile_schema(rt), rt)
    with pytest.raises(EncodingInvariantViolation):
        serialize((1,))
    with pytest.raises(EncodingInvariantViolation):
        serialize({"a": 1})


def test_date_column_rejects_datetime() -> None:
    rt = RowType.of(RowField("d", date()))
    serialize = create_row_serializer(compile_schema(rt), rt)
    with pytest.raises(EncodingInvariantViolation):
        serialize([dt.datetime(2024, 1, 1)])
