"""
Defaults for the calendar engine.

Everything here can be overridden from the command line (see cli.py) or by
passing explicit arguments to the store/provider/resolver constructors.
"""

from __future__ import annotations

from typing import Dict, Tuple

# -----------------------------
# Holiday data locations
# -----------------------------

CACHE_DIR = "data"

# holidays-{REGION}-{YEAR}.json holds the raw provider response for one year.
CACHE_FILE_TEMPLATE = "holidays-{region}-{year}.json"

OVERRIDE_FILES: Dict[str, str] = {
    "IQ": "holidays-iq-kurdistan.json",
}
OVERRIDE_FILE_TEMPLATE = "holidays-{region}-overrides.json"

ACADEMIC_EXTRACT_PREFIX = "holidays-academic-"
ACADEMIC_EXTRACT_SUFFIX = "-normalized.json"

EID_LOOKUP_FILE = "holiday-eid-lookup.json"

# -----------------------------
# Remote provider
# -----------------------------

REMOTE_BASE_URL = "https://date.nager.at/api/v3/PublicHolidays"
REMOTE_TIMEOUT = 8
USER_AGENT = "university-planner"

DEFAULT_REGION = "IQ"

# -----------------------------
# Computed holidays
# -----------------------------

# (month, day, name, local_name, is_global, region_tags)
FixedTemplate = Tuple[int, int, str, str, bool, Tuple[str, ...]]

FIXED_HOLIDAYS: Dict[str, Tuple[FixedTemplate, ...]] = {
    "IQ": (
        (12, 25, "Christmas Day", "Christmas Day", True, ()),
        (3, 21, "Newroz (Kurdish New Year)", "Newroz", False, ("Kurdistan Region",)),
        (10, 3, "Iraq Independence Day", "Independence Day", True, ()),
    ),
}

# -----------------------------
# Recurrence
# -----------------------------

MAX_VISITED_DAYS = 10_000
