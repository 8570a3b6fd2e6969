"""
Eid al-Fitr / Eid al-Adha dates for a Gregorian year.

A curated lookup (holiday-eid-lookup.json) wins whenever it has the year,
since real dates follow moon sighting. Otherwise the dates are computed with
the tabular calendar: 1 Shawwal for al-Fitr and 10 Dhu al-Hijjah for
al-Adha, probing a few candidate Hijri years. In the rare year where two
candidates land inside the target year, the first one in candidate order is
kept; that is a limitation of the tabular method.
"""

from __future__ import annotations

import dataclasses
import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .dates import parse_date_key
from .hijri import DHU_AL_HIJJAH, SHAWWAL, hijri_year_candidates, islamic_to_gregorian

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class EidDates:
    eid_al_fitr: Optional[date] = None
    eid_al_adha: Optional[date] = None

    def to_record(self, year: int) -> Dict[str, Any]:
        return {
            "year": year,
            "eidFitr": self.eid_al_fitr.isoformat() if self.eid_al_fitr else None,
            "eidAdha": self.eid_al_adha.isoformat() if self.eid_al_adha else None,
        }


def compute_eid_dates(gregorian_year: int) -> EidDates:
    fitr: Optional[date] = None
    adha: Optional[date] = None
    for hy in hijri_year_candidates(gregorian_year):
        g = islamic_to_gregorian(hy, SHAWWAL, 1)
        if fitr is None and g.year == gregorian_year:
            fitr = g.to_date()
        g = islamic_to_gregorian(hy, DHU_AL_HIJJAH, 10)
        if adha is None and g.year == gregorian_year:
            adha = g.to_date()
    return EidDates(eid_al_fitr=fitr, eid_al_adha=adha)


def resolve_eid_dates(gregorian_year: int, lookup: Optional[Mapping[int, EidDates]] = None) -> EidDates:
    if lookup and gregorian_year in lookup:
        return lookup[gregorian_year]
    return compute_eid_dates(gregorian_year)


# -----------------------------
# Lookup table records
# -----------------------------

def _optional_date(raw: Any) -> Optional[date]:
    if raw in (None, ""):
        return None
    return parse_date_key(str(raw)[:10])


def parse_eid_lookup(records: Iterable[Mapping[str, Any]]) -> Dict[int, EidDates]:
    """
    Reads rows like {"year": 2025, "eidFitr": "2025-03-30", "eidAdha": "2025-06-06"}.
    Malformed rows are skipped with a warning; the first row for a year wins.
    """
    table: Dict[int, EidDates] = {}
    for rec in records:
        try:
            year = int(rec["year"])
            entry = EidDates(_optional_date(rec.get("eidFitr")), _optional_date(rec.get("eidAdha")))
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping malformed Eid lookup row %r: %s", rec, exc)
            continue
        table.setdefault(year, entry)
    return table


def build_eid_lookup(start_year: int, end_year: int) -> List[Dict[str, Any]]:
    """Tabular Eid dates for every year in start..end, in lookup-file shape."""
    return [compute_eid_dates(y).to_record(y) for y in range(start_year, end_year + 1)]
