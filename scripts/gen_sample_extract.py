#!/usr/bin/env python3
"""Generate a synthetic census UA extract for manual runs.

The generated workbook imitates the layout of the real extract:
- A title block of `--header-rows` lines
- Per state, a section header line (only the ua column filled)
- Per UA, a group start line (ua_no / ua / district) followed by one line
  per census year with free-text years ("1961 Census") and measurements
- A few messy cells: "-" sentinels, a malformed ua_no, an unparseable year
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

CENSUS_YEARS = [1951, 1961, 1971, 1981, 1991, 2001, 2011]
STATES = ["Maharashtra", "West Bengal", "Tamil Nadu", "Karnataka", "Gujarat"]


def generate_extract_rows(groups: int, seed: int = 42) -> list[list[Any]]:
    """Build extract lines (without the title block).

    Args:
        groups: Number of UA groups to generate
        seed: Random seed for reproducible data

    Returns:
        List of 11-cell lines in extract column order
    """
    rng = np.random.default_rng(seed)
    lines: list[list[Any]] = []
    per_state = max(1, groups // len(STATES))
    ua_no = 0
    for state in STATES:
        if ua_no >= groups:
            break
        lines.append([None, state, None, None, None, None, None, None, None, None, None])
        for _ in range(per_state):
            if ua_no >= groups:
                break
            ua_no += 1
            lines.append([ua_no, f"UA {ua_no:03d}", f"District {ua_no:03d}"] + [None] * 8)
            population = int(rng.integers(50_000, 500_000))
            area = round(float(rng.uniform(20, 300)), 2)
            for year in CENSUS_YEARS:
                change = int(population * rng.uniform(0.1, 0.5))
                previous, population = population, population + change
                male = int(population * rng.uniform(0.51, 0.55))
                female: Any = population - male
                if rng.random() < 0.05:
                    female = "-"  # sentinel -> missing
                lines.append([
                    None, None, None, f"{year} Census", "UA", area, population,
                    change, round(change / previous * 100, 2), male, female,
                ])
    # Defects the cleaner must report instead of importing
    lines.append(["12a", "Broken marker", "District X"] + [None] * 8)
    lines.append([None, None, None, "Census", "UA", 10.0, 1000, 10, 1.0, 520, 480])
    return lines


def create_extract_file(output_path: Path, groups: int, header_rows: int, seed: int = 42) -> int:
    """Write the extract workbook; returns the number of data lines written."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    title_block: list[list[Any]] = [["Urban Agglomerations: population 1951-2011"] + [None] * 10]
    title_block += [[None] * 11 for _ in range(max(0, header_rows - 1))]
    lines = generate_extract_rows(groups, seed)
    df = pd.DataFrame(title_block[:header_rows] + lines)
    if output_path.suffix.lower() == ".csv":
        df.to_csv(output_path, header=False, index=False)
    else:
        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="UA", header=False, index=False)
    return len(lines)


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic census UA extract",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/ua_census.xlsx
  %(prog)s data/ua_census.csv --groups 200 --header-rows 4 --seed 7
        """,
    )
    parser.add_argument("output", type=Path, help="Output .xlsx or .csv path")
    parser.add_argument("--groups", type=int, default=40, help="Number of UA groups (default: 40)")
    parser.add_argument("--header-rows", type=int, default=4, help="Title lines before data (default: 4)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.groups <= 0:
        print("Error: --groups must be positive", file=sys.stderr)
        return 1
    if args.header_rows < 0:
        print("Error: --header-rows must be >= 0", file=sys.stderr)
        return 1

    written = create_extract_file(args.output, args.groups, args.header_rows, args.seed)
    print(f"Created extract: {args.output}")
    print(f"  Groups: {args.groups}")
    print(f"  Data lines: {written} (+ {args.header_rows} header rows)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
