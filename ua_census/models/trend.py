from __future__ import annotations

from dataclasses import dataclass, fields

"""Summary models produced by the aggregator.

GroupTrend holds the per-UA sex ratio trend (OLS fit of sex_ratio ~ year);
YearTotal holds the per-census-year sums. Both are written to CSV for the
plotting notebooks.
"""

__all__ = [
    "GroupTrend",
    "TREND_FIELDS",
    "YEAR_TOTAL_FIELDS",
    "YearTotal",
]


@dataclass(frozen=True)
class GroupTrend:
    """Sex ratio trend for one UA group.

    n_years counts only records with a usable sex ratio. slope/intercept are
    None when fewer than two such records exist.
    """
    ua_no: int
    ua: str
    n_years: int
    mean_sex_ratio: float | None
    slope: float | None
    intercept: float | None
    first_year: int | None
    last_year: int | None


@dataclass(frozen=True)
class YearTotal:
    year: int
    n_ua: int
    population: int | None
    pop_male: int | None
    pop_female: int | None


TREND_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(GroupTrend))
YEAR_TOTAL_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(YearTotal))
