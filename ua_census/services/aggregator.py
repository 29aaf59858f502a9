from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import pandas as pd
import statsmodels.formula.api as smf

from ..models.clean_record import CLEAN_FIELDS, FLOAT_FIELDS, INT_FIELDS, CleanRecord
from ..models.trend import GroupTrend, YearTotal

logger = logging.getLogger(__name__)

"""Aggregation over reconstructed records.

- group_trends: per UA, mean sex ratio and the OLS fit sex_ratio ~ year
- year_totals: per census year, population sums

Missing measurements are excluded, never counted as zero: a record whose
pop_male or pop_female is None has no sex ratio and drops out of both the
sum and the count of its group's mean.
"""

__all__ = [
    "records_to_frame",
    "group_trends",
    "year_totals",
]


def _opt_float(value: Any) -> float | None:
    if value is None or pd.isna(value):
        return None
    return float(value)


def _opt_int(value: Any) -> int | None:
    if value is None or pd.isna(value):
        return None
    return int(value)


def records_to_frame(records: Sequence[CleanRecord]) -> pd.DataFrame:
    """CleanRecords -> DataFrame with nullable integer columns and a sex_ratio column."""
    df = pd.DataFrame(
        [[getattr(r, f) for f in CLEAN_FIELDS] for r in records],
        columns=list(CLEAN_FIELDS),
    )
    for col in ("ua_no", "year", *INT_FIELDS):
        df[col] = pd.to_numeric(df[col], errors="coerce").astype("Int64")
    for col in FLOAT_FIELDS:
        df[col] = pd.to_numeric(df[col], errors="coerce").astype("float64")
    df["ua"] = df["ua"].astype("object")

    male = df["pop_male"].astype("float64")
    female = df["pop_female"].astype("float64")
    # female == 0 は比率未定義 -> NaN
    df["sex_ratio"] = (male / female.where(female != 0)).astype("float64")
    return df


def _fit_trend(usable: pd.DataFrame) -> tuple[float | None, float | None]:
    """OLS sex_ratio ~ year; (None, None) without two distinct years."""
    if len(usable) < 2 or usable["year"].nunique() < 2:
        return None, None
    data = usable[["sex_ratio", "year"]].astype("float64")
    fit = smf.ols("sex_ratio ~ year", data=data).fit()
    return float(fit.params["year"]), float(fit.params["Intercept"])


def group_trends(records: Sequence[CleanRecord]) -> list[GroupTrend]:
    """Sex ratio trend per ua_no group, in first-appearance order."""
    if not records:
        return []
    df = records_to_frame(records)
    trends: list[GroupTrend] = []
    for ua_no, group in df.groupby("ua_no", sort=False):
        usable = group.dropna(subset=["sex_ratio"])
        slope, intercept = _fit_trend(usable)
        trends.append(
            GroupTrend(
                ua_no=int(ua_no),
                ua=str(group["ua"].iloc[0]),
                n_years=len(usable),
                mean_sex_ratio=_opt_float(usable["sex_ratio"].mean()) if len(usable) else None,
                slope=slope,
                intercept=intercept,
                first_year=_opt_int(usable["year"].min()) if len(usable) else None,
                last_year=_opt_int(usable["year"].max()) if len(usable) else None,
            )
        )
    logger.debug("group trends computed groups=%d", len(trends))
    return trends


def year_totals(records: Sequence[CleanRecord]) -> list[YearTotal]:
    """Population sums per census year, ascending by year."""
    if not records:
        return []
    df = records_to_frame(records)
    totals: list[YearTotal] = []
    for year, group in df.groupby("year", sort=True):
        totals.append(
            YearTotal(
                year=int(year),
                n_ua=int(group["ua_no"].nunique()),
                # min_count=1: 全欠損の年は 0 ではなく欠損
                population=_opt_int(group["population"].sum(min_count=1)),
                pop_male=_opt_int(group["pop_male"].sum(min_count=1)),
                pop_female=_opt_int(group["pop_female"].sum(min_count=1)),
            )
        )
    return totals
