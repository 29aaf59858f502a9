# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from ua_census.logging.init import reset_logging

# Title block of the sample extract (skipped by header_rows)
HEADER_ROWS = 2

# ua_no, ua, district, year, type, area, population, pop_change, pop_change_percent, pop_male, pop_female
SAMPLE_EXTRACT_LINES: list[list[Any]] = [
    ["Urban Agglomerations", None, None, None, None, None, None, None, None, None, None],
    ["UA No.", "Name", "District", "Year", "Type", "Area", "Population", "Change", "Change %", "Males", "Females"],
    [None, "MAHARASHTRA", None, None, None, None, None, None, None, None, None],
    [1, "Greater Mumbai", "Mumbai", None, None, None, None, None, None, None, None],
    [None, None, None, "1951 Census", "UA", 235.0, 2966902, None, None, 1800000, 1166902],
    [None, None, None, "1961 Census", "UA", 437.71, 4152056, 1185154, 39.95, 2490000, 1662056],
    [None, None, None, "1971 Census", "UA", 437.71, 5970575, 1818519, 43.80, 3480000, 2490575],
    [None, None, None, "1981 Census", "UA", 603.0, 8243405, 2272830, 38.07, 4700000, "-"],
    [2, "Pune", "Pune", None, None, None, None, None, None, None, None],
    [None, None, None, "1961 Census", "UA", 125.0, 737426, 131450, 21.69, 390000, 347426],
    [None, None, None, "1971 (Census)", "UA", 140.0, 1135034, 397608, 53.92, 600000, 535034],
    ["2b", "Broken", "Nowhere", None, None, None, None, None, None, None, None],
    [None, None, None, "Census", "UA", 1.0, 100, 1, 1.0, 50, 50],
]


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


def write_extract(path: Path, lines: list[list[Any]]) -> Path:
    """Write extract lines as .xlsx (openpyxl) or .csv depending on suffix."""
    df = pd.DataFrame(lines)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix == ".csv":
        df.to_csv(path, header=False, index=False)
    else:
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="UA", header=False, index=False)
    return path


@pytest.fixture()
def sample_extract(temp_workdir: Path) -> Path:
    return write_extract(temp_workdir / "data" / "ua_census.xlsx", SAMPLE_EXTRACT_LINES)


@pytest.fixture()
def sample_config_yaml() -> str:
    return f"""source_path: ./data/ua_census.xlsx
sheet_name: UA
header_rows: {HEADER_ROWS}
min_year: 1961
null_sentinels: ["-", "NA"]
output_directory: ./output
clean_filename: ua_clean.csv
trend_filename: ua_trend.csv
year_totals_filename: ua_year_totals.csv
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "pipeline.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg
