from __future__ import annotations

import json
import os
import time
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import pytest

from planner_calendar.errors import HolidaySourceError
from planner_calendar.sources import FileHolidayStore


class FakeProvider:
    """Stands in for NagerDateProvider; records every fetch."""

    def __init__(self, by_year: Optional[Dict[int, List[Dict[str, Any]]]] = None, fail_years: Iterable[int] = ()):
        self.by_year = by_year or {}
        self.fail_years = set(fail_years)
        self.calls: List[tuple] = []

    def fetch(self, year: int, region: str) -> List[Dict[str, Any]]:
        self.calls.append((year, region))
        if year in self.fail_years:
            raise HolidaySourceError(f"provider down for {year}")
        return list(self.by_year.get(year, []))


def write_json(path: Path, payload: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture()
def store(tmp_path: Path) -> FileHolidayStore:
    return FileHolidayStore(tmp_path)


@pytest.fixture()
def make_provider():
    return FakeProvider


@pytest.fixture()
def host_timezone():
    """Switches the process time zone; the previous TZ is restored afterwards."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    saved = os.environ.get("TZ")

    def _set(name: str) -> None:
        os.environ["TZ"] = name
        time.tzset()

    yield _set

    if saved is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = saved
    time.tzset()
