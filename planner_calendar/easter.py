from __future__ import annotations

from datetime import date

from .errors import CalendarInputError

FIRST_GREGORIAN_YEAR = 1583


def easter_date(year: int) -> date:
    """
    Gregorian Easter Sunday for ``year`` (Meeus/Jones/Butcher).
    Integer arithmetic only; valid for every year of the Gregorian calendar.
    """
    if year < FIRST_GREGORIAN_YEAR:
        raise CalendarInputError(f"Gregorian Easter is undefined before {FIRST_GREGORIAN_YEAR}, got {year}")

    a = year % 19
    b = year // 100
    c = year % 100
    d = b // 4
    e = b % 4
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i = c // 4
    k = c % 4
    l = (32 + 2 * e + 2 * i - h - k) % 7  # noqa: E741
    m = (a + 11 * h + 22 * l) // 451
    month = (h + l - 7 * m + 114) // 31  # 3=March, 4=April
    day = (h + l - 7 * m + 114) % 31 + 1
    return date(year, month, day)
