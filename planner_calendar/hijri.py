"""
Tabular (arithmetic) Islamic calendar conversions.

The tabular calendar uses fixed 30-year leap cycles, so the Gregorian dates
it yields can differ by a day or two from dates fixed by lunar sighting.
Callers must keep inputs in range (month 1-12, day 1-30); out-of-range
values give a number, just not a meaningful one.
"""

from __future__ import annotations

import math
from datetime import date
from typing import List, NamedTuple

# Julian Day offset for the civil/tabular epoch: JDN(1 Muharram 1 AH) - 1.
ISLAMIC_EPOCH_OFFSET = 1948439

SHAWWAL = 10
DHU_AL_HIJJAH = 12


class GregorianDate(NamedTuple):
    year: int
    month: int
    day: int

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)


def islamic_to_julian_day(hijri_year: int, hijri_month: int, hijri_day: int) -> int:
    return (
        hijri_day
        + math.ceil(29.5 * (hijri_month - 1))
        + (hijri_year - 1) * 354
        + (3 + 11 * hijri_year) // 30
        + ISLAMIC_EPOCH_OFFSET
    )


def julian_day_to_gregorian(jd: float) -> GregorianDate:
    """Fliegel & Van Flandern. Fractional day numbers are floored first."""
    l = math.floor(jd) + 68569  # noqa: E741
    n = (4 * l) // 146097
    l = l - (146097 * n + 3) // 4  # noqa: E741
    i = (4000 * (l + 1)) // 1461001
    l = l - (1461 * i) // 4 + 31  # noqa: E741
    j = (80 * l) // 2447
    day = l - (2447 * j) // 80
    l = j // 11  # noqa: E741
    month = j + 2 - 12 * l
    year = 100 * (n - 49) + i + l
    return GregorianDate(year, month, day)


def islamic_to_gregorian(hijri_year: int, hijri_month: int, hijri_day: int) -> GregorianDate:
    return julian_day_to_gregorian(islamic_to_julian_day(hijri_year, hijri_month, hijri_day))


def approximate_hijri_year(gregorian_year: int) -> int:
    # 33 Hijri years run in roughly 32 Gregorian years.
    return (gregorian_year - 622) * 33 // 32


def hijri_year_candidates(gregorian_year: int) -> List[int]:
    """
    Hijri years whose dates may land inside ``gregorian_year``:
    approx-1 .. approx+2, dropping anything before 1 AH.
    """
    approx = approximate_hijri_year(gregorian_year)
    return [hy for hy in range(approx - 1, approx + 3) if hy > 0]
