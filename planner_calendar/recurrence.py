"""
Weekly recurrence: "every N weeks on these weekdays, N times / until a date".

Weeks are counted from the start date itself, not from the calendar week it
falls in: day 0-6 after the start is week 0, day 7-13 is week 1, and so on.
Two series with the same weekdays that start on different days of one week
can therefore disagree about which weeks are "on" for an interval above 1.
"""

from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime, timedelta
from typing import FrozenSet, Iterable, List, Optional

from . import config
from .dates import date_key_from_datetime, parse_date_key, parse_local_instant, sunday_based_weekday
from .errors import CalendarInputError

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class RecurrenceDefinition:
    """
    start             first instant; its wall-clock date anchors week 0
    duration_minutes  length of every occurrence
    weekdays          0=Sunday .. 6=Saturday; empty means "start's weekday"
    interval_weeks    every Nth week; values below 1 are clamped to 1
    max_count / until exactly one bound; ``until`` is inclusive
    """

    start: datetime
    duration_minutes: int
    weekdays: FrozenSet[int] = frozenset()
    interval_weeks: int = 1
    max_count: Optional[int] = None
    until: Optional[date] = None

    def __post_init__(self):
        if not isinstance(self.start, datetime):
            raise CalendarInputError("start must be a datetime")

        if isinstance(self.duration_minutes, bool) or not isinstance(self.duration_minutes, int):
            raise CalendarInputError(f"duration_minutes must be an integer, got {self.duration_minutes!r}")
        if self.duration_minutes <= 0:
            raise CalendarInputError(f"duration_minutes must be positive, got {self.duration_minutes}")

        days = frozenset(self.weekdays or ())
        bad = sorted(d for d in days if not isinstance(d, int) or not 0 <= d <= 6)
        if bad:
            raise CalendarInputError(f"weekdays must be 0 (Sunday) .. 6 (Saturday), got {bad}")
        object.__setattr__(self, "weekdays", days)

        interval = 1 if self.interval_weeks is None else self.interval_weeks
        if isinstance(interval, bool) or not isinstance(interval, int):
            raise CalendarInputError(f"interval_weeks must be an integer, got {self.interval_weeks!r}")
        object.__setattr__(self, "interval_weeks", max(1, interval))

        if (self.max_count is None) == (self.until is None):
            raise CalendarInputError("exactly one of max_count or until is required")
        if self.max_count is not None and (
            isinstance(self.max_count, bool) or not isinstance(self.max_count, int) or self.max_count <= 0
        ):
            raise CalendarInputError(f"max_count must be a positive integer, got {self.max_count!r}")
        if self.until is not None and (isinstance(self.until, datetime) or not isinstance(self.until, date)):
            raise CalendarInputError(f"until must be a date, got {self.until!r}")

    @classmethod
    def from_input(
        cls,
        start: str,
        duration_minutes: int,
        weekdays: Optional[Iterable[int]] = None,
        interval_weeks: int = 1,
        max_count: Optional[int] = None,
        until: Optional[str] = None,
    ) -> "RecurrenceDefinition":
        """From form/JSON values: ISO start instant and YYYY-MM-DD until."""
        return cls(
            start=parse_local_instant(start),
            duration_minutes=duration_minutes,
            weekdays=frozenset(weekdays or ()),
            interval_weeks=interval_weeks,
            max_count=max_count,
            until=parse_date_key(until) if until is not None else None,
        )

    @property
    def start_date(self) -> date:
        return date_key_from_datetime(self.start)


def _past_until(d: date, until: Optional[date]) -> bool:
    return until is not None and d > until


def generate_occurrences(definition: RecurrenceDefinition,
                         max_visited_days: int = config.MAX_VISITED_DAYS) -> List[date]:
    """
    Ordered occurrence dates for ``definition``.

    With weekdays: walk day by day from the start date and keep a day when its
    weekday is selected and its week index is a multiple of the interval.
    Without weekdays: step 7 * interval days from the start date.

    Either walk stops at the count, past ``until``, or after
    ``max_visited_days`` steps, whichever comes first.
    """
    start = definition.start_date
    until = definition.until
    limit = definition.max_count
    out: List[date] = []

    if definition.weekdays:
        step = timedelta(days=1)
    else:
        step = timedelta(weeks=definition.interval_weeks)

    cursor = start
    for _ in range(max_visited_days):
        if _past_until(cursor, until):
            return out
        if definition.weekdays:
            week_index = (cursor - start).days // 7
            keep = sunday_based_weekday(cursor) in definition.weekdays and week_index % definition.interval_weeks == 0
        else:
            keep = True
        if keep:
            out.append(cursor)
            if limit is not None and len(out) >= limit:
                return out
        try:
            cursor += step
        except OverflowError:
            return out

    logger.warning("Stopped recurrence after %d steps from %s with %d occurrences", max_visited_days, start, len(out))
    return out
