from __future__ import annotations

import csv
import zipfile
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import pandas as pd

from ua_census.models.raw_row import RAW_FIELDS, RawRow

"""Extract reader.

The census extract has a fixed number of title/header lines followed by the
eleven RawRow columns in order (ua_no, ua, district, year, type, area,
population, pop_change, pop_change_percent, pop_male, pop_female). Column
names in the file are not trusted: the header lines are skipped by offset and
the columns are named by position.

Cells are kept as read (no dtype inference on CSV) and only normalised for
blanks; parsing into numbers happens in the reconstructor.
"""

CSV_SHEET = "<CSV>"
EXCEL_SUFFIXES = {".xlsx", ".xlsm"}


class ExtractLayoutError(Exception):
    """Raised when the extract cannot be read or lacks the expected columns."""


def _csv_width(path: Path, header_rows: int) -> int:
    """Widest line after the header lines (csv lines may be ragged)."""
    with path.open(newline="", encoding="utf-8") as f:
        rows = csv.reader(f)
        return max((len(r) for i, r in enumerate(rows) if i >= header_rows), default=0)


def read_extract(path: Path, sheet_name: str | int = 0, header_rows: int = 0) -> pd.DataFrame:
    """Read the raw extract table without a header row.

    Parameters
    ----------
    path: .xlsx/.xlsm or .csv file
    sheet_name: sheet to read (Excel only; name or 0-based index)
    header_rows: leading lines to skip before the first data row
    """
    suffix = path.suffix.lower()
    try:
        if suffix in EXCEL_SUFFIXES:
            return pd.read_excel(
                path, sheet_name=sheet_name, header=None, skiprows=header_rows, engine="openpyxl"
            )
        if suffix == ".csv":
            width = _csv_width(path, header_rows)
            if width == 0:
                raise ExtractLayoutError(f"extract {path.name} has no data lines")
            # 短い行 (末尾のカンマを削った見出し行など) は NaN で埋める
            return pd.read_csv(
                path, header=None, names=range(width), skiprows=header_rows, dtype=str,
                keep_default_na=True, skip_blank_lines=False,
            )
    except (OSError, ValueError, csv.Error, zipfile.BadZipFile) as e:
        raise ExtractLayoutError(f"cannot read extract {path.name}: {e}") from e
    raise ExtractLayoutError(f"unsupported extract type: {path.suffix or '(none)'}")


def sheet_label(path: Path, sheet_name: str | int) -> str:
    """Sheet name used in data-quality notes."""
    if path.suffix.lower() == ".csv":
        return CSV_SHEET
    return str(sheet_name)


def normalize_cell(val: Any, null_sentinels: Iterable[str] | None = None) -> Any:
    """Map NaN, blank strings and null sentinels to None; strip other strings."""
    if val is None:
        return None
    if isinstance(val, str):
        stripped = val.strip()
        if stripped == "":
            return None
        if null_sentinels and stripped.upper() in null_sentinels:
            return None
        return stripped
    try:
        if pd.isna(val):
            return None
    except (TypeError, ValueError):  # array-like cell
        pass
    return val


def rows_from_frame(
    df: pd.DataFrame,
    null_sentinels: Iterable[str] | None = None,
    first_row_number: int = 1,
) -> list[RawRow]:
    """Turn a headerless extract frame into RawRows.

    Steps:
    1. Validate at least len(RAW_FIELDS) columns (extra trailing columns ignored)
    2. Name columns by position
    3. Skip rows where every cell is blank
    4. Normalise blanks / sentinels and attach the source row number
       (first_row_number is the file line of df's first row)
    """
    if df.shape[1] < len(RAW_FIELDS):
        raise ExtractLayoutError(
            f"extract has {df.shape[1]} columns, expected at least {len(RAW_FIELDS)}"
        )
    sentinels = {s.upper() for s in null_sentinels} if null_sentinels else None
    rows: list[RawRow] = []
    for offset, raw in enumerate(df.iloc[:, : len(RAW_FIELDS)].itertuples(index=False, name=None)):
        values = {col: normalize_cell(v, sentinels) for col, v in zip(RAW_FIELDS, raw, strict=True)}
        if all(v is None for v in values.values()):
            continue
        rows.append(RawRow.from_mapping(first_row_number + offset, values))
    return rows


def rows_from_records(df: pd.DataFrame, null_sentinels: Iterable[str] | None = None) -> list[RawRow]:
    """Build RawRows from a frame whose columns are already named (e.g. the clean CSV).

    Missing RawRow columns are treated as blank; row numbers assume one header line.
    """
    sentinels = {s.upper() for s in null_sentinels} if null_sentinels else None
    present = [c for c in RAW_FIELDS if c in df.columns]
    rows: list[RawRow] = []
    for offset, raw in enumerate(df[present].itertuples(index=False, name=None)):
        values = {col: normalize_cell(v, sentinels) for col, v in zip(present, raw, strict=True)}
        rows.append(RawRow.from_mapping(offset + 2, values))
    return rows
