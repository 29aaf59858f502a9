from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from conftest import HEADER_ROWS, SAMPLE_EXTRACT_LINES, write_extract
from ua_census.excel.reader import (
    ExtractLayoutError,
    normalize_cell,
    read_extract,
    rows_from_frame,
    rows_from_records,
    sheet_label,
)
from ua_census.models.raw_row import RAW_FIELDS


def test_read_xlsx_skips_header_rows(sample_extract: Path):
    df = read_extract(sample_extract, sheet_name="UA", header_rows=HEADER_ROWS)
    rows = rows_from_frame(df, null_sentinels={"-"}, first_row_number=HEADER_ROWS + 1)
    assert len(rows) == len(SAMPLE_EXTRACT_LINES) - HEADER_ROWS
    first = rows[0]
    assert first.row_number == 3
    assert first.ua == "MAHARASHTRA"
    assert first.ua_no is None
    mumbai = rows[1]
    assert mumbai.ua_no == 1
    assert mumbai.district == "Mumbai"
    # "-" sentinel in pop_female -> None
    assert rows[5].year == "1981 Census"
    assert rows[5].pop_female is None


def test_read_csv_extract(temp_workdir: Path):
    path = write_extract(temp_workdir / "data" / "ua.csv", SAMPLE_EXTRACT_LINES)
    df = read_extract(path, header_rows=HEADER_ROWS)
    rows = rows_from_frame(df, first_row_number=HEADER_ROWS + 1)
    assert len(rows) == len(SAMPLE_EXTRACT_LINES) - HEADER_ROWS
    # CSV cells stay text; parsing happens later
    assert rows[1].ua_no == "1"
    assert rows[2].year == "1951 Census"
    assert sheet_label(path, 0) == "<CSV>"


def test_blank_lines_are_skipped_but_row_numbers_kept():
    df = pd.DataFrame([
        [1, "A", "D"] + [None] * 8,
        [None] * 11,
        [None, None, None, "1961"] + [None] * 7,
    ])
    rows = rows_from_frame(df, first_row_number=5)
    assert [r.row_number for r in rows] == [5, 7]


def test_extra_columns_ignored():
    df = pd.DataFrame([[1, "A", "D"] + [None] * 8 + ["notes", "more"]])
    rows = rows_from_frame(df)
    assert rows[0].ua == "A"


def test_read_ragged_csv_pads_short_lines(temp_workdir: Path):
    path = temp_workdir / "data" / "ragged.csv"
    path.write_text("MAHARASHTRA\n1,A,D\n,,,1961,UA,1.0,1000,1,1.0,520,480\n", encoding="utf-8")
    df = read_extract(path)
    assert df.shape == (3, len(RAW_FIELDS))
    rows = rows_from_frame(df)
    assert [r.row_number for r in rows] == [1, 2, 3]
    assert rows[0].ua_no == "MAHARASHTRA" and rows[0].ua is None
    assert rows[1].ua == "A" and rows[1].year is None
    assert rows[2].pop_female == "480"


def test_read_empty_csv_raises(temp_workdir: Path):
    path = temp_workdir / "data" / "empty.csv"
    path.write_text("title\n", encoding="utf-8")
    with pytest.raises(ExtractLayoutError):
        read_extract(path, header_rows=1)


def test_too_few_columns_raises():
    df = pd.DataFrame([[1, "A", "D"]])
    with pytest.raises(ExtractLayoutError):
        rows_from_frame(df)


def test_unsupported_suffix(temp_workdir: Path):
    p = temp_workdir / "data" / "extract.txt"
    p.write_text("x", encoding="utf-8")
    with pytest.raises(ExtractLayoutError):
        read_extract(p)


def test_missing_sheet_raises_layout_error(sample_extract: Path):
    with pytest.raises(ExtractLayoutError):
        read_extract(sample_extract, sheet_name="NoSuchSheet")


def test_normalize_cell():
    assert normalize_cell("  x ") == "x"
    assert normalize_cell("   ") is None
    assert normalize_cell(float("nan")) is None
    assert normalize_cell("na", {"NA"}) is None
    assert normalize_cell(0) == 0


def test_rows_from_records_by_column_name():
    df = pd.DataFrame({"year": ["1961"], "ua": ["A"], "ua_no": ["1"], "extra": ["z"]})
    (row,) = rows_from_records(df)
    assert row.ua_no == "1"
    assert row.ua == "A"
    assert row.year == "1961"
    assert row.district is None
    assert row.row_number == 2


def test_raw_fields_order():
    assert RAW_FIELDS == (
        "ua_no", "ua", "district", "year", "type", "area", "population",
        "pop_change", "pop_change_percent", "pop_male", "pop_female",
    )
