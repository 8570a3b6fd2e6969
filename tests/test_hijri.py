from datetime import date, timedelta

import pytest

from planner_calendar.hijri import (
    GregorianDate,
    approximate_hijri_year,
    hijri_year_candidates,
    islamic_to_gregorian,
    islamic_to_julian_day,
    julian_day_to_gregorian,
)

# date.toordinal() of 0001-01-01 is 1; its Julian Day Number is 1721426.
ORDINAL_TO_JDN = 1721425


def test_epoch_is_first_of_muharram_year_one():
    assert islamic_to_julian_day(1, 1, 1) == 1948440
    assert julian_day_to_gregorian(1948440) == GregorianDate(622, 7, 19)


def test_known_julian_day_numbers():
    assert julian_day_to_gregorian(2451545) == GregorianDate(2000, 1, 1)
    assert islamic_to_julian_day(1446, 10, 1) == 2460766
    assert julian_day_to_gregorian(2460766).to_date() == date(2025, 3, 31)


def test_fractional_day_numbers_are_floored():
    assert julian_day_to_gregorian(2451545.75) == GregorianDate(2000, 1, 1)


def test_julian_day_round_trip_against_ordinals():
    d = date(1900, 1, 1)
    while d <= date(2100, 12, 31):
        assert julian_day_to_gregorian(d.toordinal() + ORDINAL_TO_JDN).to_date() == d
        d += timedelta(days=37)


def test_month_lengths_alternate_30_and_29_days():
    jd = [islamic_to_julian_day(1446, m, 1) for m in range(1, 13)]
    lengths = [b - a for a, b in zip(jd, jd[1:])]
    assert lengths == [30, 29] * 5 + [30]


@pytest.mark.parametrize("hijri_year", range(1300, 1600, 7))
def test_shawwal_lands_near_naive_gregorian_estimate(hijri_year):
    g = islamic_to_gregorian(hijri_year, 10, 1)
    naive = 622 + hijri_year * 32 / 33
    assert abs(g.year - naive) <= 1.5


def test_candidates_bracket_the_approximation():
    assert approximate_hijri_year(2025) == 1446
    assert hijri_year_candidates(2025) == [1445, 1446, 1447, 1448]


def test_candidates_never_go_below_year_one():
    assert hijri_year_candidates(622) == [1, 2]
