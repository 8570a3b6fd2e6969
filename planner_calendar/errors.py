from __future__ import annotations


class CalendarInputError(ValueError):
    """Input rejected before any computation started."""


class HolidaySourceError(RuntimeError):
    """One holiday source could not deliver data for the requested scope."""


class HolidaysUnavailable(RuntimeError):
    """Holiday resolution failed and no cached copy exists to fall back on."""
