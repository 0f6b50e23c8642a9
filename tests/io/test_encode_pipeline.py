import io
from pathlib import Path

import pytest

from tabcsv.core.errors import EncodingInvariantViolation
from tabcsv.core.types import RowField, RowType, array, integer, string
from tabcsv.io.encode import EncodePipeline
from tabcsv.io.errors import IoConfigError, IoWriteError


def _rt() -> RowType:
    return RowType.of(
        RowField("id", integer(nullable=False)),
        RowField("name", string()),
        RowField("tags", array(string())),
    )


def test_writes_one_record_per_row() -> None:
    sink = io.BytesIO()
    writer = EncodePipeline(_rt()).open(sink)
    writer.add_row((1, "ada", ["x", "y"]))
    writer.add_row((2, "bob, jr", None))
    writer.finish()
    assert sink.getvalue() == b'1,ada,x;y\n2,"bob, jr",\n'
    assert writer.rows_written == 2


def test_finish_is_idempotent_and_blocks_further_rows() -> None:
    sink = io.BytesIO()
    writer = EncodePipeline(_rt()).open(sink)
    writer.add_row((1, "a", []))
    writer.finish()
    writer.finish()
    with pytest.raises(IoWriteError):
        writer.add_row((2, "b", []))
    assert sink.getvalue() == b"1,a,\n"
    assert not sink.closed


def test_context_manager_finishes() -> None:
    sink = io.BytesIO()
    with EncodePipeline(_rt()).open(sink) as writer:
        writer.add_rows([(1, "a", None), (2, "b", None)])
    with pytest.raises(IoWriteError):
        writer.add_row((3, "c", None))


def test_ill_typed_row_writes_nothing() -> None:
    sink = io.BytesIO()
    writer = EncodePipeline(_rt()).open(sink)
    with pytest.raises(EncodingInvariantViolation):
        writer.add_row(("1", "a", None))
    assert sink.getvalue() == b""


def test_custom_options_shape_output() -> None:
    pipeline = EncodePipeline(
        _rt(),
        {"fieldDelimiter": "|", "arrayElementDelimiter": ",", "nullLiteral": "NULL"},
    )
    assert pipeline.encode_row((1, None, ["a", "b"])) == "1|NULL|a,b\n"


def test_quoting_disabled_ignores_quote_character() -> None:
    row = (1, "it's", ["q"])
    plain = EncodePipeline(_rt(), {"quotingDisabled": True}).encode_row(row)
    with_quote = EncodePipeline(
        _rt(), {"quotingDisabled": True, "quoteCharacter": "'"}
    ).encode_row(row)
    assert plain == with_quote == "1,it's,q\n"


def test_escape_character_used_when_quoting_disabled() -> None:
    pipeline = EncodePipeline(_rt(), {"quotingDisabled": True, "escapeCharacter": "\\"})
    assert pipeline.encode_row((1, "a,b", None)) == "1,a\\,b,\n"


def test_write_file(tmp_path: Path) -> None:
    p = tmp_path / "out.csv"
    n = EncodePipeline(_rt()).write_file(p, [(1, "a", ["t"]), (2, None, None)])
    assert n == 2
    assert p.read_bytes() == b"1,a,t\n2,,\n"


def test_unknown_encoding_rejected() -> None:
    with pytest.raises(IoConfigError):
        EncodePipeline(_rt(), encoding="no-such-codec")


def _labeled() -> RowType:
    return RowType.of(RowField("label", string()), RowField("n", integer()))


@pytest.mark.parametrize(
    ("options", "expected"),
    [
        ({}, "#tag,1\n"),
        ({"allowComments": True}, '"#tag","1"\n'),
        ({"allowComments": True, "quoteCharacter": "'"}, "'#tag','1'\n"),
        ({"allowComments": True, "quotingDisabled": True, "escapeCharacter": "\\"}, "\\#tag,1\n"),
    ],
)
def test_leading_comment_marker_protected_when_comments_allowed(
    options: dict, expected: str
) -> None:
    assert EncodePipeline(_labeled(), options).encode_row(("#tag", 1)) == expected


def test_leading_comment_marker_without_quoting_or_escape_rejected() -> None:
    pipeline = EncodePipeline(_labeled(), {"allowComments": True, "quotingDisabled": True})
    with pytest.raises(IoWriteError):
        pipeline.encode_row(("#tag", 1))
    assert pipeline.encode_row(("tag#", 1)) == "tag#,1\n"


def test_unencodable_text_raises_io_write_error() -> None:
    sink = io.BytesIO()
    writer = EncodePipeline(_rt(), encoding="latin-1").open(sink)
    with pytest.raises(IoWriteError):
        writer.add_row((1, "\u20ac", None))
    writer.add_row((2, "caf\u00e9", None))
    assert sink.getvalue() == "2,caf\u00e9,\n".encode("latin-1")
    assert writer.rows_written == 1
