"""
Turn occurrence dates into concrete start/end instants.

The start is composed from the date's year/month/day and the time of day's
hour/minute directly, so the wall clock never depends on the process time
zone. Naive datetimes stay naive (local wall clock); with ``tz`` the same
wall clock is labelled with that zone.
"""

from __future__ import annotations

import dataclasses
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any, Dict, List, Optional, Union

from .errors import CalendarInputError
from .recurrence import RecurrenceDefinition, generate_occurrences


@dataclasses.dataclass(frozen=True)
class Occurrence:
    start: datetime
    end: datetime
    definition: Optional[RecurrenceDefinition] = dataclasses.field(default=None, compare=False, repr=False)

    @property
    def date(self) -> date:
        return date(self.start.year, self.start.month, self.start.day)

    @property
    def duration_minutes(self) -> int:
        return int(_elapsed(self.start, self.end).total_seconds() // 60)

    def to_json(self) -> Dict[str, Any]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


def _elapsed(start: datetime, end: datetime) -> timedelta:
    # Same-tzinfo subtraction is wall-clock; go through UTC for real elapsed time.
    if start.tzinfo is not None and end.tzinfo is not None:
        return end.astimezone(timezone.utc) - start.astimezone(timezone.utc)
    return end - start


def _add_minutes(start: datetime, minutes: int) -> datetime:
    if start.tzinfo is None:
        return start + timedelta(minutes=minutes)
    return (start.astimezone(timezone.utc) + timedelta(minutes=minutes)).astimezone(start.tzinfo)


def _explicit_end(start: datetime, end: Union[datetime, time]) -> datetime:
    if isinstance(end, datetime):
        if start.tzinfo is None and end.tzinfo is not None:
            # Keep the end's wall clock rather than converting between zones.
            end = end.replace(tzinfo=None)
        elif start.tzinfo is not None and end.tzinfo is None:
            end = end.replace(tzinfo=start.tzinfo)
        if end < start:
            raise CalendarInputError(f"end {end.isoformat()} is before start {start.isoformat()}")
        return end
    if isinstance(end, time):
        candidate = datetime.combine(start.date(), end.replace(tzinfo=None), tzinfo=start.tzinfo)
        if candidate < start:
            # An end time earlier than the start time runs past midnight.
            candidate += timedelta(days=1)
        return candidate
    raise CalendarInputError(f"end must be a datetime or a time, got {end!r}")


def materialize(
    occurrence_date: date,
    time_of_day: time,
    duration_minutes: Optional[int] = None,
    end: Union[datetime, time, None] = None,
    tz: Optional[tzinfo] = None,
    definition: Optional[RecurrenceDefinition] = None,
) -> Occurrence:
    """
    Start = occurrence_date + time_of_day. End = start + duration_minutes.

    ``end`` (an end instant or an end time of day) is only consulted when no
    duration is given; a duration always wins so the displayed end stays
    consistent whatever zone the explicit end was serialized in.
    """
    start = datetime(
        occurrence_date.year, occurrence_date.month, occurrence_date.day,
        time_of_day.hour, time_of_day.minute, time_of_day.second,
        tzinfo=tz if tz is not None else time_of_day.tzinfo,
    )
    if duration_minutes is not None:
        if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int) or duration_minutes <= 0:
            raise CalendarInputError(f"duration_minutes must be a positive integer, got {duration_minutes!r}")
        return Occurrence(start, _add_minutes(start, duration_minutes), definition)
    if end is None:
        raise CalendarInputError("a duration or an explicit end is required")
    return Occurrence(start, _explicit_end(start, end), definition)


def materialize_series(definition: RecurrenceDefinition) -> List[Occurrence]:
    tod = definition.start.time()
    return [
        materialize(d, tod, definition.duration_minutes, tz=definition.start.tzinfo, definition=definition)
        for d in generate_occurrences(definition)
    ]
