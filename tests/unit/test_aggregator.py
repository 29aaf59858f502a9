from __future__ import annotations

import pytest

from ua_census.models.clean_record import CleanRecord
from ua_census.services.aggregator import group_trends, records_to_frame, year_totals


def _rec(ua_no: int, year: int, male: int | None, female: int | None, population: int | None = None, ua: str = "A"):
    return CleanRecord(ua_no=ua_no, ua=ua, year=year, population=population, pop_male=male, pop_female=female)


def test_records_to_frame_columns_and_sex_ratio():
    df = records_to_frame([_rec(1, 1961, 520, 480), _rec(1, 1971, 500, None), _rec(1, 1981, 10, 0)])
    assert list(df.columns[:9]) == [
        "ua_no", "ua", "year", "area", "population", "pop_change",
        "pop_change_percent", "pop_male", "pop_female",
    ]
    assert str(df["pop_female"].dtype) == "Int64"
    assert df["sex_ratio"].iloc[0] == pytest.approx(520 / 480)
    assert df["sex_ratio"].isna().tolist() == [False, True, True]


def test_mean_sex_ratio_excludes_missing_from_numerator_and_count():
    records = [
        _rec(1, 1961, 520, 480),
        _rec(1, 1971, 600, 500),
        _rec(1, 1981, 700, None),  # unparseable pop_female upstream
    ]
    (trend,) = group_trends(records)
    assert trend.n_years == 2
    assert trend.mean_sex_ratio == pytest.approx((520 / 480 + 600 / 500) / 2)
    assert trend.first_year == 1961
    assert trend.last_year == 1971


def test_slope_matches_ols_on_two_points():
    records = [_rec(1, 1961, 110, 100), _rec(1, 1971, 100, 100)]
    (trend,) = group_trends(records)
    # (1.0 - 1.1) / 10 years
    assert trend.slope == pytest.approx(-0.01)
    assert trend.intercept == pytest.approx(1.1 + 0.01 * 1961)


def test_slope_on_exact_line():
    records = [_rec(5, year, 100 + (year - 1961), 100, ua="Line") for year in (1961, 1971, 1981, 1991)]
    (trend,) = group_trends(records)
    assert trend.ua_no == 5
    assert trend.ua == "Line"
    assert trend.slope == pytest.approx(0.01)


def test_trend_fit_missing_with_single_observation():
    (trend,) = group_trends([_rec(1, 1961, 520, 480), _rec(1, 1971, None, 400)])
    assert trend.n_years == 1
    assert trend.slope is None
    assert trend.intercept is None
    assert trend.mean_sex_ratio == pytest.approx(520 / 480)


def test_trend_without_usable_rows():
    (trend,) = group_trends([_rec(1, 1961, None, None)])
    assert trend.n_years == 0
    assert trend.mean_sex_ratio is None
    assert trend.first_year is None


def test_groups_keep_first_appearance_order():
    records = [_rec(9, 1961, 1, 1, ua="Z"), _rec(3, 1961, 1, 1, ua="C"), _rec(9, 1971, 1, 1, ua="Z")]
    assert [t.ua_no for t in group_trends(records)] == [9, 3]


def test_year_totals_skip_missing_values():
    records = [
        _rec(1, 1961, 520, 480, population=1000),
        _rec(2, 1961, None, 300, population=None),
        _rec(1, 1971, None, None, population=None),
    ]
    t1961, t1971 = year_totals(records)
    assert t1961.year == 1961
    assert t1961.n_ua == 2
    assert t1961.population == 1000
    assert t1961.pop_male == 520
    assert t1961.pop_female == 780
    # all missing -> missing, not zero
    assert t1971.population is None
    assert t1971.pop_female is None


def test_empty_input():
    assert group_trends([]) == []
    assert year_totals([]) == []
