import datetime as dt
from pathlib import Path

import polars as pl
import pytest

from tabcsv import CsvFormat
from tabcsv.core.errors import ConfigurationError, EncodingInvariantViolation
from tabcsv.core.projection import Projection
from tabcsv.core.types import RowField, RowType, array, date, float_, integer, row, string
from tabcsv.io.frame import frame_to_rows, read_frame, rows_to_frame, write_frame


def _rt() -> RowType:
    return RowType.of(
        RowField("id", integer(nullable=False)),
        RowField("name", string()),
        RowField("day", date()),
        RowField("tags", array(string())),
        RowField("pos", row(RowField("x", float_()), RowField("y", float_()))),
    )


def test_rows_to_frame_types_columns() -> None:
    df = rows_to_frame(
        [(1, "a", dt.date(2024, 1, 1), ["t"], (1.0, 2.0)), (2, None, None, None, None)],
        _rt(),
    )
    assert df.columns == ["id", "name", "day", "tags", "pos"]
    assert df.schema["id"] == pl.Int64
    assert df.schema["day"] == pl.Date
    assert df.schema["tags"] == pl.List(pl.String)
    assert isinstance(df.schema["pos"], pl.Struct)
    assert df.height == 2
    assert df["pos"][0] == {"x": 1.0, "y": 2.0}


def test_frame_round_trip_through_file(tmp_path: Path) -> None:
    df = pl.DataFrame(
        {
            "id": [1, 2],
            "name": ["ada", None],
            "day": [dt.date(2024, 3, 1), None],
            "tags": [["a", "b"], None],
            "pos": [{"x": 0.5, "y": -1.0}, {"x": 1.0, "y": 2.0}],
            "ignored": ["x", "y"],
        }
    )
    p = tmp_path / "frame.csv"
    assert write_frame(p, df, _rt()) == 2
    assert p.read_text() == "1,ada,2024-03-01,a;b,0.5;-1.0\n2,,,,1.0;2.0\n"
    back = read_frame(p, _rt())
    assert back.to_dicts() == df.drop("ignored").to_dicts()


def test_read_frame_with_projection(tmp_path: Path) -> None:
    p = tmp_path / "p.csv"
    p.write_text("1,ada,2024-03-01,a,1.0;2.0\n")
    df = read_frame(p, _rt(), projection=Projection.of([[4, 1], [1]]))
    assert df.columns == ["pos_y", "name"]
    assert df.to_dicts() == [{"pos_y": 2.0, "name": "ada"}]


def test_frame_missing_column_raises() -> None:
    df = pl.DataFrame({"id": [1]})
    with pytest.raises(EncodingInvariantViolation):
        list(frame_to_rows(df, _rt()))


def test_csv_format_facade(tmp_path: Path) -> None:
    fmt = CsvFormat({"fieldDelimiter": "\\t", "nullLiteral": "-"})
    rt = RowType.of(RowField("id", integer()), RowField("name", string()))
    p = tmp_path / "facade.tsv"
    fmt.create_encoder(rt).write_file(p, [(1, None), (2, "b")])
    assert p.read_text() == "1\t-\n2\tb\n"
    assert list(fmt.create_decoder(rt).read_file(p)) == [(1, None), (2, "b")]
    assert fmt.report_statistics([p], rt).row_count == 2
    assert fmt.identifier == "csv"
    assert fmt.changelog_mode == "insert_only"


def test_csv_format_rejects_bad_options() -> None:
    with pytest.raises(ConfigurationError):
        CsvFormat({"fieldDelimiter": ""})
