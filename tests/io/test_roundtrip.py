import datetime as dt
import io
from decimal import Decimal

import pytest

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
from tabcsv.io.decode import DecodePipeline
from tabcsv.io.encode import EncodePipeline

ROW_TYPE = RowType.of(
    RowField("flag", boolean()),
    RowField("n", integer(nullable=False)),
    RowField("ratio", float_()),
    RowField("amount", decimal(12, 3)),
    RowField("text", string()),
    RowField("blob", bytes_()),
    RowField("day", date()),
    RowField("at", time()),
    RowField("ts", timestamp()),
    RowField("nums", array(integer())),
    RowField("pair", row(RowField("k", string()), RowField("v", float_()))),
)

ROWS = [
    (
        True,
        1,
        0.25,
        Decimal("10.125"),
        'quote " and, comma',
        b"\x00\xff",
        dt.date(1999, 12, 31),
        dt.time(23, 59, 59, 500),
        dt.datetime(2020, 5, 17, 6, 7, 8, 9),
        [1, -2, 3],
        ("key", -1.5),
    ),
    (False, -7, None, None, None, None, None, None, None, None, None),
    (None, 0, 1e300, Decimal("0"), "multi\nline", b"\x01", None, None, None, [None, 4], (None, None)),
]

OPTION_SETS = [
    {},
    {"fieldDelimiter": "\\t"},
    {"fieldDelimiter": "|", "quoteCharacter": "'"},
    {"nullLiteral": "NULL", "arrayElementDelimiter": "/"},
    {"escapeCharacter": "\\"},
]


@pytest.mark.parametrize("options", OPTION_SETS)
def test_decode_inverts_encode(options: dict) -> None:
    encoder = EncodePipeline(ROW_TYPE, options)
    sink = io.BytesIO()
    with encoder.open(sink) as writer:
        writer.add_rows(ROWS)
    text = sink.getvalue().decode("utf-8")
    decoded = list(DecodePipeline(ROW_TYPE, options).read_stream(io.StringIO(text, newline="")))
    assert decoded == ROWS


def _roundtrip(row_type: RowType, rows: list, options: dict) -> list:
    sink = io.BytesIO()
    with EncodePipeline(row_type, options).open(sink) as writer:
        writer.add_rows(rows)
    text = sink.getvalue().decode("utf-8")
    return list(DecodePipeline(row_type, options).read_stream(io.StringIO(text, newline="")))


@pytest.mark.parametrize(
    "options",
    [
        {"allowComments": True},
        {"allowComments": True, "nullLiteral": "NULL"},
        {"allowComments": True, "quotingDisabled": True, "escapeCharacter": "\\"},
    ],
)
def test_comment_marker_values_survive(options: dict) -> None:
    rt = RowType.of(
        RowField("label", string()),
        RowField("note", string()),
        RowField("n", integer()),
    )
    rows = [
        ("#tag", "line\n#two", 1),
        ("plain", "#inner", None),
        ("# spaced", None, 3),
    ]
    assert _roundtrip(rt, rows, options) == rows


@pytest.mark.parametrize(
    "options",
    [
        {"quotingDisabled": True, "escapeCharacter": "\\"},
        {"quotingDisabled": True, "escapeCharacter": "\\", "nullLiteral": "NULL"},
    ],
)
def test_quoting_disabled_with_escape(options: dict) -> None:
    assert _roundtrip(ROW_TYPE, ROWS[:2], options) == ROWS[:2]


def test_quoting_disabled_without_escape() -> None:
    rt = RowType.of(RowField("a", string()), RowField("n", integer()))
    rows = [("a b", 1), (None, None), ("it's \"x\"", -2)]
    assert _roundtrip(rt, rows, {"quotingDisabled": True}) == rows


@pytest.mark.parametrize("options", [{"quotingDisabled": True}, {}])
def test_single_column_nulls(options: dict) -> None:
    rt = RowType.of(RowField("v", string()))
    rows = [(None,), ("x",), (None,)]
    assert _roundtrip(rt, rows, options) == rows


def test_cells_larger_than_default_csv_field_limit() -> None:
    rows = [(1, "x" * 200_000), (2, "y")]
    rt = RowType.of(RowField("n", integer()), RowField("text", string()))
    assert _roundtrip(rt, rows, {}) == rows
