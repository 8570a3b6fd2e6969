"""
Holiday data sources.

- NagerDateProvider: public-holiday API (https://date.nager.at), one request
  per (year, region).
- FileHolidayStore: the JSON files under the cache directory:
    holidays-{REGION}-{YEAR}.json              raw provider response
    holidays-iq-kurdistan.json (per region)    curated overrides
    holidays-academic-*-normalized.json        academic extracts
    holiday-eid-lookup.json                    curated Eid dates

Both are handed to HolidayResolver explicitly; nothing here is global.
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import requests

from . import config
from .eid import EidDates, parse_eid_lookup
from .errors import HolidaySourceError

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

CACHE_FILE_RE = re.compile(r"^holidays-([A-Z]{2})-(\d{4})\.json$")


# -----------------------------
# Remote provider
# -----------------------------

class NagerDateProvider:
    def __init__(
        self,
        base_url: str = config.REMOTE_BASE_URL,
        timeout: float = config.REMOTE_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session

    def url_for(self, year: int, region: str) -> str:
        return f"{self.base_url}/{year}/{region}"

    def fetch(self, year: int, region: str) -> List[Record]:
        """
        Raw holiday rows for one year. An empty body or empty array is a valid
        "no holidays" answer; every transport or format problem raises
        HolidaySourceError.
        """
        url = self.url_for(year, region)
        http = self.session or requests
        try:
            r = http.get(url, headers={"User-Agent": config.USER_AGENT}, timeout=self.timeout)
            r.raise_for_status()
        except requests.RequestException as exc:
            raise HolidaySourceError(f"fetching {url} failed: {exc}") from exc

        body = r.text
        if not body or not body.strip():
            logger.info("Remote holidays returned an empty body for %s-%s (%s)", year, region, url)
            return []
        try:
            data = json.loads(body)
        except ValueError as exc:
            logger.debug("Remote holidays body snippet: %s", body[:1000])
            raise HolidaySourceError(f"unparsable JSON from {url}: {exc}") from exc
        if not isinstance(data, list):
            raise HolidaySourceError(f"expected a JSON array from {url}, got {type(data).__name__}")
        return data


# -----------------------------
# File store
# -----------------------------

class FileHolidayStore:
    def __init__(self, cache_dir: Union[str, os.PathLike] = config.CACHE_DIR,
                 override_files: Optional[Mapping[str, str]] = None):
        self.cache_dir = Path(cache_dir)
        self.override_files = dict(config.OVERRIDE_FILES if override_files is None else override_files)

    def cache_path(self, region: str, year: int) -> Path:
        return self.cache_dir / config.CACHE_FILE_TEMPLATE.format(region=region.upper(), year=year)

    def override_path(self, region: str) -> Path:
        name = self.override_files.get(region.upper())
        if not name:
            name = config.OVERRIDE_FILE_TEMPLATE.format(region=region.lower())
        return self.cache_dir / name

    def eid_lookup_path(self) -> Path:
        return self.cache_dir / config.EID_LOOKUP_FILE

    def _read_array(self, path: Path) -> Optional[List[Any]]:
        """JSON array from ``path``; None when missing or unreadable."""
        if not path.exists():
            return None
        try:
            raw = path.read_text(encoding="utf-8")
            data = json.loads(raw or "[]")
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable holiday file %s: %s", path, exc)
            return None
        if not isinstance(data, list):
            logger.warning("Ignoring holiday file %s: expected a JSON array", path)
            return None
        return data

    def write_array(self, path: Path, records: List[Any]) -> None:
        # Temp file + rename so readers never see a half-written file.
        # Concurrent writers of the same derived data: last one wins.
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=path.name, suffix=".tmp", dir=str(path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2, ensure_ascii=False)
            os.replace(tmp, path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    # Per-(region, year) cache

    def read_cached(self, region: str, year: int) -> Optional[List[Record]]:
        cached = self._read_array(self.cache_path(region, year))
        if cached is not None:
            logger.debug("Holiday cache hit for %s-%s", region, year)
        return cached

    def write_cached(self, region: str, year: int, records: List[Record]) -> None:
        path = self.cache_path(region, year)
        try:
            self.write_array(path, records)
        except OSError as exc:
            logger.warning("Could not write holiday cache %s: %s", path, exc)
            return
        logger.debug("Cached %d holidays in %s", len(records), path)

    def latest_cached(self, region: str, year: int) -> Optional[List[Record]]:
        """
        The cache file for (region, year) if present, else the newest cached
        year for the region.
        """
        exact = self._read_array(self.cache_path(region, year))
        if exact is not None:
            return exact
        try:
            names = os.listdir(self.cache_dir)
        except OSError:
            return None
        years = []
        for name in names:
            m = CACHE_FILE_RE.match(name)
            if m and m.group(1) == region.upper():
                years.append(int(m.group(2)))
        for y in sorted(years, reverse=True):
            data = self._read_array(self.cache_path(region, y))
            if data is not None:
                return data
        return None

    # Local sources

    def read_overrides(self, region: str) -> List[Record]:
        return self._read_array(self.override_path(region)) or []

    def read_academic_extracts(self) -> List[Record]:
        try:
            names = sorted(os.listdir(self.cache_dir))
        except OSError:
            return []
        records: List[Record] = []
        for name in names:
            if name.startswith(config.ACADEMIC_EXTRACT_PREFIX) and name.endswith(config.ACADEMIC_EXTRACT_SUFFIX):
                records.extend(self._read_array(self.cache_dir / name) or [])
        return records

    def read_eid_lookup(self) -> Dict[int, EidDates]:
        return parse_eid_lookup(self._read_array(self.eid_lookup_path()) or [])

    def write_eid_lookup(self, records: List[Record]) -> Path:
        path = self.eid_lookup_path()
        self.write_array(path, records)
        return path
