"""Date computation for the student planner: recurring events and holidays."""

from .dates import DateRange, parse_date_key, parse_local_instant, parse_year_spec
from .easter import easter_date
from .eid import EidDates, build_eid_lookup, resolve_eid_dates
from .errors import CalendarInputError, HolidaySourceError, HolidaysUnavailable
from .hijri import islamic_to_julian_day, julian_day_to_gregorian
from .holidays import HolidayEntry, HolidayResolver, SourceTag, holidays_for_request
from .materialize import Occurrence, materialize, materialize_series
from .recurrence import RecurrenceDefinition, generate_occurrences
from .sources import FileHolidayStore, NagerDateProvider

__all__ = [
    "CalendarInputError",
    "DateRange",
    "EidDates",
    "FileHolidayStore",
    "HolidayEntry",
    "HolidayResolver",
    "HolidaySourceError",
    "HolidaysUnavailable",
    "NagerDateProvider",
    "Occurrence",
    "RecurrenceDefinition",
    "SourceTag",
    "build_eid_lookup",
    "easter_date",
    "generate_occurrences",
    "holidays_for_request",
    "islamic_to_julian_day",
    "julian_day_to_gregorian",
    "materialize",
    "materialize_series",
    "parse_date_key",
    "parse_local_instant",
    "parse_year_spec",
    "resolve_eid_dates",
]
