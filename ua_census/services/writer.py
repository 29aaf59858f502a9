from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pandas as pd

from ..excel.reader import ExtractLayoutError, rows_from_records
from ..models.clean_record import CLEAN_FIELDS, CleanRecord
from ..models.trend import TREND_FIELDS, YEAR_TOTAL_FIELDS, GroupTrend, YearTotal
from .aggregator import records_to_frame
from .parsing import parse_int
from .reconstructor import to_clean_record

logger = logging.getLogger(__name__)

"""CSV output for the plotting notebooks.

Header rows are exactly the dataclass field names in declaration order.
Missing values are written as empty cells and integer columns never gain a
decimal point (nullable Int64). Readers select columns by name.
"""


def _write_frame(df: pd.DataFrame, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False, na_rep="")
    logger.debug("wrote %s rows=%d", path, len(df))
    return path


def write_clean_csv(records: Sequence[CleanRecord], path: Path) -> Path:
    df = records_to_frame(records)[list(CLEAN_FIELDS)]
    return _write_frame(df, path)


def _dataclass_frame(items: Sequence[Any], columns: Sequence[str], int_columns: Sequence[str]) -> pd.DataFrame:
    df = pd.DataFrame([dataclasses.astuple(i) for i in items], columns=list(columns))
    for col in int_columns:
        df[col] = pd.to_numeric(df[col], errors="coerce").astype("Int64")
    return df


def write_trend_csv(trends: Sequence[GroupTrend], path: Path) -> Path:
    df = _dataclass_frame(trends, TREND_FIELDS, ("ua_no", "n_years", "first_year", "last_year"))
    return _write_frame(df, path)


def write_year_totals_csv(totals: Sequence[YearTotal], path: Path) -> Path:
    df = _dataclass_frame(totals, YEAR_TOTAL_FIELDS, ("year", "n_ua", "population", "pop_male", "pop_female"))
    return _write_frame(df, path)


def read_clean_csv(path: Path) -> list[CleanRecord]:
    """Read a clean CSV back into CleanRecords, selecting columns by name.

    Raises:
        ExtractLayoutError: If the file is missing one of the CleanRecord columns
    """
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    missing = [c for c in CLEAN_FIELDS if c not in df.columns]
    if missing:
        raise ExtractLayoutError(f"{path.name} missing columns: {missing}")
    records: list[CleanRecord] = []
    for row in rows_from_records(df):
        ua_no = parse_int(row.ua_no)
        year = parse_int(row.year)
        if ua_no is None or year is None or row.ua is None:
            raise ExtractLayoutError(f"{path.name} line {row.row_number} has no ua_no/ua/year")
        records.append(to_clean_record(row, ua_no, str(row.ua), year))
    return records
