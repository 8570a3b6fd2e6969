"""
Merged holiday calendar for a year range and region.

Sources are merged in this order, each one additive:
  1) provider holidays per year (cache first, remote on a miss)
  2) curated regional overrides, restricted to the requested years
  3) academic-calendar extracts, restricted to the requested years
  4) fixed-date holidays of the region, projected onto every year
  5) Easter and the two Eids for every year

The combined list is deduplicated on "<date>::<lowercased name>" with the
first occurrence kept, then sorted by date. Remote outages and malformed
rows only shrink the result; they never fail the call.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
import re
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from . import config
from .dates import parse_date_key, parse_year_spec, year_of
from .easter import FIRST_GREGORIAN_YEAR, easter_date
from .eid import EidDates, resolve_eid_dates
from .errors import CalendarInputError, HolidaySourceError, HolidaysUnavailable
from .sources import FileHolidayStore, NagerDateProvider

logger = logging.getLogger(__name__)

REGION_RE = re.compile(r"^[A-Z]{2}$")


class SourceTag(str, enum.Enum):
    REMOTE = "remote"
    OVERRIDE = "override"
    ACADEMIC_EXTRACT = "academic-extract"
    COMPUTED_FIXED = "computed-fixed"
    COMPUTED_EASTER = "computed-easter"
    COMPUTED_EID = "computed-eid"


def _flag(value: Any, field: str, default: bool) -> bool:
    """JSON booleans, plus the strings "true"/"false" some hand-edited files carry."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise CalendarInputError(f"holiday field {field!r} must be true or false, got {value!r}")


@dataclasses.dataclass(frozen=True)
class HolidayEntry:
    date: date
    name: str
    local_name: str
    country_code: str
    is_global: bool = True
    region_tags: Tuple[str, ...] = ()
    fixed: bool = False
    source: SourceTag = SourceTag.REMOTE

    @property
    def canonical_name(self) -> str:
        return self.local_name or self.name

    @property
    def dedup_key(self) -> str:
        return f"{self.date.isoformat()}::{self.canonical_name.lower()}"

    def to_json(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "name": self.name,
            "localName": self.local_name,
            "countryCode": self.country_code,
            "counties": list(self.region_tags),
            "fixed": self.fixed,
            "global": self.is_global,
        }

    @classmethod
    def from_record(cls, rec: Mapping[str, Any], source: SourceTag, default_country: str) -> "HolidayEntry":
        """
        Builds an entry from a provider-shaped row:
          {"date": "2025-03-21", "localName": "Newroz", "name": "Nowruz",
           "countryCode": "IQ", "counties": null, "fixed": true, "global": true}
        Raises CalendarInputError when the row has no usable date or name.
        """
        if not isinstance(rec, Mapping):
            raise CalendarInputError(f"holiday row must be an object, got {type(rec).__name__}")
        d = parse_date_key(str(rec.get("date") or "")[:10])
        name = str(rec.get("name") or rec.get("localName") or "").strip()
        if not name:
            raise CalendarInputError(f"holiday row for {d} has no name")
        local_name = str(rec.get("localName") or name).strip()
        counties = rec.get("counties") or ()
        if isinstance(counties, str):
            counties = (counties,)
        elif not isinstance(counties, (list, tuple)):
            raise CalendarInputError(f"holiday row for {d} has counties of type {type(counties).__name__}")
        return cls(
            date=d,
            name=name,
            local_name=local_name,
            country_code=str(rec.get("countryCode") or default_country).upper(),
            is_global=_flag(rec.get("global"), "global", True),
            region_tags=tuple(str(c) for c in counties),
            fixed=_flag(rec.get("fixed"), "fixed", False),
            source=source,
        )


def dedupe_holidays(entries: Iterable[HolidayEntry]) -> List[HolidayEntry]:
    seen = set()
    out: List[HolidayEntry] = []
    for e in entries:
        if e.dedup_key in seen:
            continue
        seen.add(e.dedup_key)
        out.append(e)
    return out


# -----------------------------
# Computed holidays
# -----------------------------

def fixed_holidays(years: Sequence[int], region: str,
                   templates: Sequence[config.FixedTemplate]) -> List[HolidayEntry]:
    out = []
    for y in years:
        for month, day, name, local_name, is_global, tags in templates:
            out.append(HolidayEntry(
                date=date(y, month, day),
                name=name,
                local_name=local_name,
                country_code=region,
                is_global=is_global,
                region_tags=tuple(tags),
                fixed=True,
                source=SourceTag.COMPUTED_FIXED,
            ))
    return out


def easter_holiday(year: int, region: str) -> HolidayEntry:
    return HolidayEntry(easter_date(year), "Easter", "Easter", region, source=SourceTag.COMPUTED_EASTER)


def eid_holidays(year: int, region: str, lookup: Optional[Mapping[int, EidDates]] = None) -> List[HolidayEntry]:
    eids = resolve_eid_dates(year, lookup)
    out = []
    if eids.eid_al_fitr:
        out.append(HolidayEntry(eids.eid_al_fitr, "Eid al-Fitr", "Eid al-Fitr", region,
                                source=SourceTag.COMPUTED_EID))
    if eids.eid_al_adha:
        out.append(HolidayEntry(eids.eid_al_adha, "Eid al-Adha", "Eid al-Adha", region,
                                source=SourceTag.COMPUTED_EID))
    return out


# -----------------------------
# Resolver
# -----------------------------

class HolidayResolver:
    def __init__(
        self,
        store: FileHolidayStore,
        provider: Optional[NagerDateProvider] = None,
        fixed: Optional[Mapping[str, Sequence[config.FixedTemplate]]] = None,
        include_easter: bool = True,
        include_eid: bool = True,
    ):
        self.store = store
        self.provider = provider
        self.fixed = dict(config.FIXED_HOLIDAYS if fixed is None else fixed)
        self.include_easter = include_easter
        self.include_eid = include_eid

    def provider_records(self, year: int, region: str) -> List[Dict[str, Any]]:
        cached = self.store.read_cached(region, year)
        if cached is not None:
            return cached
        if self.provider is None:
            return []
        try:
            remote = self.provider.fetch(year, region)
        except HolidaySourceError as exc:
            logger.warning("Remote holidays unavailable for %s-%s: %s", year, region, exc)
            return []
        self.store.write_cached(region, year, remote)
        return remote

    def parse_records(self, records: Iterable[Any], source: SourceTag, region: str,
                      years: Optional[Sequence[int]] = None) -> List[HolidayEntry]:
        out = []
        for rec in records:
            if years is not None:
                raw_date = rec.get("date") if isinstance(rec, Mapping) else None
                y = year_of(raw_date)
                # Rows without a readable year fall through and get reported below.
                if y is not None and y not in years:
                    continue
            try:
                out.append(HolidayEntry.from_record(rec, source, region))
            except CalendarInputError as exc:
                logger.warning("Skipping malformed %s holiday row %r: %s", source.value, rec, exc)
        return out

    def resolve(self, min_year: int, max_year: int, region: str) -> List[HolidayEntry]:
        if min_year > max_year:
            raise CalendarInputError(f"year range is reversed: {min_year}..{max_year}")
        if min_year < FIRST_GREGORIAN_YEAR:
            raise CalendarInputError(f"years before {FIRST_GREGORIAN_YEAR} are not supported, got {min_year}")
        region = region.upper()
        years = list(range(min_year, max_year + 1))

        combined: List[HolidayEntry] = []
        for y in years:
            combined.extend(self.parse_records(self.provider_records(y, region), SourceTag.REMOTE, region))
        combined.extend(self.parse_records(self.store.read_overrides(region), SourceTag.OVERRIDE, region, years))
        combined.extend(self.parse_records(self.store.read_academic_extracts(), SourceTag.ACADEMIC_EXTRACT, region, years))
        combined.extend(fixed_holidays(years, region, self.fixed.get(region, ())))

        lookup = self.store.read_eid_lookup() if self.include_eid else {}
        for y in years:
            if self.include_easter:
                combined.append(easter_holiday(y, region))
            if self.include_eid:
                combined.extend(eid_holidays(y, region, lookup))

        merged = dedupe_holidays(combined)
        merged.sort(key=lambda e: e.date)
        return merged


def holidays_for_request(year_spec: Optional[str], region: Optional[str], resolver: HolidayResolver,
                         today: Optional[date] = None) -> List[Dict[str, Any]]:
    """
    Request-level entry point: "YYYY" or "YYYY-YYYY" plus a 2-letter region.
    Returns JSON-ready rows. If resolution breaks down entirely, the newest
    cached provider file for the region is served instead; with no cache at
    all HolidaysUnavailable is raised (an empty list means "no holidays").
    """
    years = parse_year_spec(year_spec, today)
    cc = str(region or config.DEFAULT_REGION).strip().upper()
    if not REGION_RE.match(cc):
        raise CalendarInputError(f"region must be a 2-letter code, got {region!r}")

    try:
        entries = resolver.resolve(years[0], years[-1], cc)
    except (OSError, RuntimeError) as exc:
        logger.error("Holiday resolution failed for %s %s: %s", cc, year_spec, exc)
        cached = resolver.store.latest_cached(cc, years[0])
        if cached is None:
            raise HolidaysUnavailable(f"unable to fetch holidays for {cc} {year_spec}") from exc
        return [e.to_json() for e in resolver.parse_records(cached, SourceTag.REMOTE, cc)]
    return [e.to_json() for e in entries]
