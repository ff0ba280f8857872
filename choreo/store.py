"""
Event store
===========

Holds the validated, normalized displacement events. Raw rows (dicts produced
by the loader or written by hand in tests) go through `normalize_event`:

- blank crisis category / hazard type / event label become "unknown",
- hazard labels are folded into the closed `HazardType` vocabulary,
- displacement must be a non-negative integer,
- the reporting year (the `year` column, else the event date's year) must
  fall inside the configured year span. An event that started before the
  span but is filed under one of its years is kept.

Anything that fails validation raises `DataIntegrityError`; the store never
holds a half-valid record. Events are kept in chronological order.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
import logging
import math
from typing import Any, Iterable, List, Mapping, Optional

from .config import DEFAULT_CONFIG, DomainConfig, HazardType, UNKNOWN_LABEL
from .errors import DataIntegrityError
from .indices import Indices, build_indices, country_year_ids
from .models import EventRecord

logger = logging.getLogger(__name__)


def _to_str(x: Any) -> str:
    if x is None:
        return ""
    return str(x).strip()


def _to_date(x: Any) -> date:
    if isinstance(x, datetime):
        return x.date()
    if isinstance(x, date):
        return x
    s = _to_str(x)
    try:
        return datetime.strptime(s[:10], "%Y-%m-%d").date()
    except ValueError:
        raise DataIntegrityError(f"Invalid event date: {x!r}") from None


def _to_displaced(x: Any) -> int:
    if isinstance(x, str):
        x = x.replace(",", "").strip()
    try:
        value = float(x)
    except (TypeError, ValueError):
        raise DataIntegrityError(f"Invalid displacement figure: {x!r}") from None
    if not math.isfinite(value) or value < 0 or value != int(value):
        raise DataIntegrityError(f"Displacement must be a non-negative integer, got {x!r}")
    return int(value)


def _to_year(x: Any) -> int:
    try:
        return int(float(_to_str(x)))
    except (ValueError, OverflowError):
        raise DataIntegrityError(f"Invalid reporting year: {x!r}") from None


def normalize_event(row: Mapping[str, Any], config: DomainConfig = DEFAULT_CONFIG) -> EventRecord:
    """Turn one raw row into a validated `EventRecord`."""
    country = _to_str(row.get("country"))
    if not country:
        raise DataIntegrityError(f"Event without country: {dict(row)!r}")

    occurred_on = _to_date(row.get("occurred_on"))
    raw_year = row.get("year")
    reporting_year = _to_year(raw_year) if _to_str(raw_year) else None
    year = occurred_on.year if reporting_year is None else reporting_year
    if not config.first_year <= year <= config.last_year:
        raise DataIntegrityError(
            f"Event {occurred_on.isoformat()} filed under {year}, outside {config.first_year}-{config.last_year}"
        )

    raw_hazard = _to_str(row.get("hazard_type"))
    hazard = config.canonical_hazard(raw_hazard)
    if hazard is None:
        logger.warning("Unrecognized hazard type %r for %s, folding to 'unknown'", raw_hazard, country)
        hazard = HazardType.UNKNOWN

    return EventRecord(
        country=country,
        iso_code=_to_str(row.get("iso_code")).upper(),
        occurred_on=occurred_on,
        crisis_category=_to_str(row.get("crisis_category")) or UNKNOWN_LABEL,
        hazard_type=hazard,
        people_displaced=_to_displaced(row.get("people_displaced", 0)),
        event_label=_to_str(row.get("event_label")) or UNKNOWN_LABEL,
        reporting_year=reporting_year,
    )


@dataclass
class EventStore:
    """Chronologically ordered events plus lookup indices."""
    events: List[EventRecord]
    config: DomainConfig = DEFAULT_CONFIG
    idx: Indices = field(init=False)
    # crisis categories / country names in order of first appearance
    categories: List[str] = field(init=False)
    country_names: List[str] = field(init=False)

    def __post_init__(self) -> None:
        # stable: same-day events keep their input order
        self.events = sorted(self.events, key=lambda e: e.date_key())
        self.idx = build_indices(self.events)
        self.categories = []
        seen_cat = set()
        for e in self.events:
            if e.crisis_category not in seen_cat:
                seen_cat.add(e.crisis_category)
                self.categories.append(e.crisis_category)
        self.country_names = list(self.idx.by_country)

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, Any]], config: DomainConfig = DEFAULT_CONFIG) -> "EventStore":
        events = [normalize_event(r, config) for r in rows]
        logger.info("Normalized %d events", len(events))
        return cls(events=events, config=config)

    def __len__(self) -> int:
        return len(self.events)

    def events_for(self, country: str, year: int) -> List[EventRecord]:
        """Events of one country filed under one year, ascending by date."""
        return [self.events[i] for i in country_year_ids(self.idx, country, year)]

    def iso_code_of(self, country: str) -> Optional[str]:
        """First ISO code recorded for `country`."""
        for pos in self.idx.by_country.get(country, []):
            code = self.events[pos].iso_code
            if code:
                return code
        return None
