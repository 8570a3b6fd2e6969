"""
Calendar-date helpers.

A "date key" is a plain ``datetime.date``: year, month and day in local
wall-clock terms, with no time zone attached. Equality and ordering come
straight from ``date``.

Conversions never go through UTC fields. A datetime contributes its own
wall-clock date; a POSIX timestamp contributes the date on the local calendar
(or on the calendar of an explicit ``tz``).
"""

from __future__ import annotations

import dataclasses
import re
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Iterable, List, Optional

from dateutil import parser as dateparser

from .errors import CalendarInputError

ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
YEAR_RE = re.compile(r"^\d{4}$")
YEAR_RANGE_RE = re.compile(r"^(\d{4})-(\d{4})$")
TIME_OF_DAY_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


# -----------------------------
# Date ranges
# -----------------------------

@dataclasses.dataclass(frozen=True)
class DateRange:
    start: date
    end: date  # inclusive

    def contains(self, d: date) -> bool:
        return self.start <= d <= self.end

    def intersects(self, other: "DateRange") -> bool:
        return not (self.end < other.start or other.end < self.start)

    def days(self) -> List[date]:
        return list(daterange_inclusive(self.start, self.end))


def daterange_inclusive(start: date, end: date) -> Iterable[date]:
    cur = start
    while cur <= end:
        yield cur
        cur += timedelta(days=1)


# -----------------------------
# Construction
# -----------------------------

def parse_date_key(text: str) -> date:
    """
    Parses a strict ``YYYY-MM-DD`` string:
      "2025-09-01" -> date(2025, 9, 1)
    Anything else (including a trailing time) is rejected.
    """
    m = ISO_DATE_RE.match(str(text or "").strip())
    if not m:
        raise CalendarInputError(f"expected a YYYY-MM-DD date, got {text!r}")
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError as exc:
        raise CalendarInputError(f"invalid calendar date {text!r}: {exc}") from exc


def date_key_from_datetime(value: datetime) -> date:
    # The datetime's own wall clock, whatever tzinfo it carries.
    return date(value.year, value.month, value.day)


def date_key_from_timestamp(ts: float, tz: Optional[tzinfo] = None) -> date:
    """Calendar date of a POSIX timestamp on the local (or given) calendar."""
    return date_key_from_datetime(datetime.fromtimestamp(ts, tz))


def year_of(raw_date: object) -> Optional[int]:
    """
    Year from the first four characters of a stored date string, or None.
    Used to filter override rows before they are parsed in full.
    """
    head = str(raw_date or "")[:4]
    if not head.isdigit():
        return None
    return int(head)


def parse_year_spec(spec: Optional[str], today: Optional[date] = None) -> List[int]:
    """
    Accepts:
      ""           -> [current year]
      "2025"       -> [2025]
      "2024-2026"  -> [2024, 2025, 2026]
      "2026-2024"  -> [2024, 2025, 2026]
    """
    s = str(spec or "").strip()
    if not s:
        return [(today or date.today()).year]
    if YEAR_RE.match(s):
        return [int(s)]
    m = YEAR_RANGE_RE.match(s)
    if m:
        a, b = int(m.group(1)), int(m.group(2))
        return list(range(min(a, b), max(a, b) + 1))
    raise CalendarInputError(f"year must be YYYY or YYYY-YYYY, got {spec!r}")


def parse_time_of_day(text: str) -> time:
    """Parses "HH:MM" or "HH:MM:SS" into a ``time``."""
    m = TIME_OF_DAY_RE.match(str(text or "").strip())
    if not m:
        raise CalendarInputError(f"expected a HH:MM time, got {text!r}")
    try:
        return time(int(m.group(1)), int(m.group(2)), int(m.group(3) or 0))
    except ValueError as exc:
        raise CalendarInputError(f"invalid time of day {text!r}: {exc}") from exc


def parse_local_instant(text: str) -> datetime:
    """
    Parses an ISO-8601 start instant while keeping the wall clock the user
    entered:
      "2025-09-01"                -> 2025-09-01 00:00 (naive, local)
      "2025-09-01T10:30"          -> 2025-09-01 10:30 (naive, local)
      "2025-10-04T09:00:00.000Z"  -> 2025-10-04 09:00 (naive, local)
      "2025-10-04T09:00:00+00:00" -> 2025-10-04 09:00 (naive, local)
      "2025-10-04T09:00:00+03:00" -> 2025-10-04 09:00+03:00 (aware)

    Zero-offset instants are how local times get serialized by the web tier,
    so they are read back as local wall-clock values rather than shifted.
    """
    s = str(text or "").strip()
    if not s:
        raise CalendarInputError("start instant is required")
    if ISO_DATE_RE.match(s):
        return datetime.combine(parse_date_key(s), time())
    try:
        parsed = dateparser.isoparse(s)
    except (ValueError, OverflowError) as exc:
        raise CalendarInputError(f"invalid ISO-8601 instant {text!r}: {exc}") from exc
    offset = parsed.utcoffset()
    if offset is not None and offset == timedelta(0):
        return parsed.replace(tzinfo=None)
    return parsed


# -----------------------------
# Weekdays
# -----------------------------

def sunday_based_weekday(d: date) -> int:
    """0=Sunday .. 6=Saturday (Python's ``weekday()`` is 0=Monday)."""
    return (d.weekday() + 1) % 7
