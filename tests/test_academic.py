from datetime import date
from unittest import mock

import pytest

from planner_calendar.academic import (
    academic_extract_path,
    document_lines,
    extract_academic_holidays,
    load_document,
    parse_line,
    write_academic_extract,
)
from planner_calendar.dates import DateRange
from planner_calendar.errors import CalendarInputError
from planner_calendar.holidays import HolidayResolver, SourceTag

CALENDAR_HTML = """
<html>
<body>
  <h1>Academic Calendar 2025-2026</h1>
  <ul>
    <li>First Day of Classes: September 14, 2025 / Sunday</li>
    <li>2025-10-03&nbsp;Independence Day</li>
    <li>25-31 Dec 2025 Winter Recess</li>
    <li>Registration opens soon</li>
  </ul>
</body>
</html>
"""

CALENDAR_TEXT = """\
Fall Semester
* Labor Day: September 1, 2025 / Monday
Thanksgiving Holidays: November 26-30, 2025
21 March 2026 - Spring Break
* Labor Day: September 1, 2025 / Monday
"""


class TestParseLine:
    @pytest.mark.parametrize("line, expected", [
        ("* Labor Day: September 1, 2025 / Monday", (DateRange(date(2025, 9, 1), date(2025, 9, 1)), "Labor Day")),
        ("21 March 2026 - Spring Break", (DateRange(date(2026, 3, 21), date(2026, 3, 21)), "Spring Break")),
        ("Thanksgiving Holidays: November 26-30, 2025",
         (DateRange(date(2025, 11, 26), date(2025, 11, 30)), "Thanksgiving Holidays")),
        ("25-31 Dec 2025 Winter Recess", (DateRange(date(2025, 12, 25), date(2025, 12, 31)), "Winter Recess")),
        ("2025-10-03 Independence Day", (DateRange(date(2025, 10, 3), date(2025, 10, 3)), "Independence Day")),
        ("Final Exams: Jan. 4, 2026", (DateRange(date(2026, 1, 4), date(2026, 1, 4)), "Final Exams")),
    ])
    def test_dated_lines(self, line, expected):
        assert parse_line(line) == expected

    @pytest.mark.parametrize("line", [
        "Registration opens soon",
        "Academic Calendar 2025-2026",
        "Deadline: February 30, 2025",
    ])
    def test_lines_without_a_usable_date(self, line):
        assert parse_line(line) is None


def test_html_lines_are_text_only():
    lines = document_lines(CALENDAR_HTML)
    assert "2025-10-03 Independence Day" in lines
    assert not any("<" in l for l in lines)


def test_extract_from_html():
    records = extract_academic_holidays(CALENDAR_HTML, "iq")
    assert [(r["date"], r["name"]) for r in records] == [
        ("2025-09-14", "First Day of Classes"),
        ("2025-10-03", "Independence Day"),
    ] + [(f"2025-12-{d}", "Winter Recess") for d in range(25, 32)]
    assert records[0] == {"date": "2025-09-14", "localName": "First Day of Classes", "name": "First Day of Classes",
                          "countryCode": "IQ", "counties": [], "fixed": False, "global": False}


def test_extract_from_text_drops_repeated_lines():
    records = extract_academic_holidays(CALENDAR_TEXT)
    assert [r["date"] for r in records] == [
        "2025-09-01", "2025-11-26", "2025-11-27", "2025-11-28", "2025-11-29", "2025-11-30", "2026-03-21",
    ]


def test_extract_keeps_requested_years():
    records = extract_academic_holidays(CALENDAR_TEXT, years=[2026])
    assert [(r["date"], r["name"]) for r in records] == [("2026-03-21", "Spring Break")]


def test_write_then_resolve(store, tmp_path):
    records = extract_academic_holidays(CALENDAR_HTML)
    path = write_academic_extract(records, store, "2025-2026")
    assert path == tmp_path / "holidays-academic-2025-2026-normalized.json"
    assert store.read_academic_extracts() == records

    entries = HolidayResolver(store).resolve(2025, 2025, "IQ")
    recess = [e for e in entries if e.local_name == "Winter Recess"]
    assert len(recess) == 7
    assert all(e.source is SourceTag.ACADEMIC_EXTRACT for e in recess)
    # Already provided by the fixed template for Iraq.
    independence = [e for e in entries if e.date == date(2025, 10, 3)]
    assert len(independence) == 1
    assert independence[0].source is SourceTag.ACADEMIC_EXTRACT


@pytest.mark.parametrize("label", ["", "../escape", "2025 2026"])
def test_bad_label(tmp_path, label):
    with pytest.raises(CalendarInputError):
        academic_extract_path(tmp_path, label)


def test_load_document_from_file(tmp_path):
    path = tmp_path / "calendar.txt"
    path.write_text(CALENDAR_TEXT, encoding="utf-8")
    assert load_document(str(path)) == CALENDAR_TEXT


def test_load_document_from_url():
    with mock.patch("planner_calendar.academic.requests.get") as get:
        get.return_value.text = CALENDAR_HTML
        assert load_document("https://www.example.edu/academic-calendar", timeout=5) == CALENDAR_HTML
    get.assert_called_once_with("https://www.example.edu/academic-calendar",
                                headers={"User-Agent": "university-planner"}, timeout=5)
