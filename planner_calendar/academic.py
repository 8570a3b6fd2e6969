"""
Academic-calendar holiday extracts.

Reads a university academic-calendar document (an HTML page, a saved HTML
file, or plain text pulled out of a PDF) and keeps every line that carries a
date, e.g.
  "* Labor Day: September 1, 2025 / Monday"
  "21 March 2025 - Spring Break"
  "Thanksgiving Holidays: November 26-30, 2025"
  "25-31 Dec 2025 Winter Recess"
  "2025-10-03  Independence Day"
Ranges are expanded to one record per day. The result is written as
holidays-academic-{label}-normalized.json next to the holiday cache, where
the holiday resolver picks it up.
"""

from __future__ import annotations

import re
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import requests
from bs4 import BeautifulSoup
from dateutil import parser as dateparser

from . import config
from .dates import DateRange
from .errors import CalendarInputError
from .sources import FileHolidayStore

Record = Dict[str, Any]

_PARSER_INFO = dateparser.parserinfo()

MONTH = r"([A-Za-z]{3,9})\.?"
DASH = r"\s*[-–]\s*"

# Most specific first; only the first pattern that matches a line is used.
PATTERNS = [
    ("iso", re.compile(r"(?<!\d)(\d{4})[-/](\d{1,2})[-/](\d{1,2})(?!\d)")),
    ("day_range_month_year", re.compile(rf"\b(\d{{1,2}}){DASH}(\d{{1,2}})\s+{MONTH},?\s+(\d{{4}})\b")),
    ("month_day_range_year", re.compile(rf"\b{MONTH}\s+(\d{{1,2}}){DASH}(\d{{1,2}}),?\s*(\d{{4}})\b")),
    ("day_month_year", re.compile(rf"\b(\d{{1,2}})\s+{MONTH},?\s+(\d{{4}})\b")),
    ("month_day_year", re.compile(rf"\b{MONTH}\s+(\d{{1,2}}),?\s+(\d{{4}})\b")),
]

LABEL_RE = re.compile(r"^[A-Za-z0-9_.-]+$")
HTML_HINT_RE = re.compile(r"<[A-Za-z!/]")
NAME_TRIM = " \t-–—:|,/*•·"


# -----------------------------
# Document loading
# -----------------------------

def fetch_html(url: str, timeout: int = 30) -> str:
    r = requests.get(url, headers={"User-Agent": config.USER_AGENT}, timeout=timeout)
    r.raise_for_status()
    return r.text


def load_document(source: str, timeout: int = 30) -> str:
    """A URL is fetched; anything else is read as a local file."""
    if re.match(r"^https?://", source):
        return fetch_html(source, timeout=timeout)
    return Path(source).read_text(encoding="utf-8")


def normalize_whitespace(s: str) -> str:
    return re.sub(r"\s+", " ", s).strip()


def document_lines(document: str) -> List[str]:
    if HTML_HINT_RE.search(document):
        text = BeautifulSoup(document, "html.parser").get_text("\n")
    else:
        text = document
    lines = [normalize_whitespace(l) for l in text.replace("\u00a0", " ").splitlines()]
    return [l for l in lines if l]


# -----------------------------
# Line parsing
# -----------------------------

def _month_number(token: str) -> Optional[int]:
    return _PARSER_INFO.month(token)


def _range_for(kind: str, groups: Sequence[str]) -> Optional[DateRange]:
    try:
        if kind == "iso":
            d = date(int(groups[0]), int(groups[1]), int(groups[2]))
            return DateRange(d, d)
        if kind == "day_range_month_year":
            d1, d2, mon, yyyy = groups
            month = _month_number(mon)
            if not month:
                return None
            return DateRange(date(int(yyyy), month, int(d1)), date(int(yyyy), month, int(d2)))
        if kind == "month_day_range_year":
            mon, d1, d2, yyyy = groups
            month = _month_number(mon)
            if not month:
                return None
            return DateRange(date(int(yyyy), month, int(d1)), date(int(yyyy), month, int(d2)))
        if kind == "day_month_year":
            dd, mon, yyyy = groups
        else:
            mon, dd, yyyy = groups
        month = _month_number(mon)
        if not month:
            return None
        d = date(int(yyyy), month, int(dd))
        return DateRange(d, d)
    except ValueError:
        return None


def _name_for(line: str, start: int, end: int) -> str:
    """
    Text before the date if there is any ("Exams: December 5-11, 2025"),
    otherwise the text after it ("21 March 2025 - Spring Break"). A trailing
    "/ Weekday" annotation after the date is dropped.
    """
    before = line[:start].strip(NAME_TRIM)
    if before:
        return before
    after = line[end:].split(" / ")[0].strip(NAME_TRIM)
    return after or line


def parse_line(line: str) -> Optional[Tuple[DateRange, str]]:
    """(DateRange, name) for a dated line, else None."""
    for kind, rx in PATTERNS:
        for m in rx.finditer(line):
            rng = _range_for(kind, m.groups())
            if rng is not None and rng.start <= rng.end:
                return rng, _name_for(line, m.start(), m.end())
    return None


def extract_academic_holidays(document: str, country_code: str = config.DEFAULT_REGION,
                              years: Optional[Sequence[int]] = None) -> List[Record]:
    """
    Holiday-shaped records, one per day, in document order then by date.
    Duplicate (date, name) pairs are dropped.
    """
    cc = country_code.upper()
    seen = set()
    out: List[Record] = []
    for line in document_lines(document):
        parsed = parse_line(line)
        if parsed is None:
            continue
        rng, name = parsed
        for d in rng.days():
            if years is not None and d.year not in years:
                continue
            key = (d, name.lower())
            if key in seen:
                continue
            seen.add(key)
            out.append({
                "date": d.isoformat(),
                "localName": name,
                "name": name,
                "countryCode": cc,
                "counties": [],
                "fixed": False,
                "global": False,
            })
    out.sort(key=lambda r: r["date"])
    return out


# -----------------------------
# Output
# -----------------------------

def academic_extract_path(cache_dir: Union[str, Path], label: str) -> Path:
    if not LABEL_RE.match(label or ""):
        raise CalendarInputError(f"extract label must be letters, digits, '.', '_' or '-', got {label!r}")
    return Path(cache_dir) / f"{config.ACADEMIC_EXTRACT_PREFIX}{label}{config.ACADEMIC_EXTRACT_SUFFIX}"


def write_academic_extract(records: List[Record], store: FileHolidayStore, label: str) -> Path:
    path = academic_extract_path(store.cache_dir, label)
    store.write_array(path, records)
    return path
