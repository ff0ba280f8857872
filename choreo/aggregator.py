"""
Place aggregator
================

Builds the place hierarchy from the event store:

1) `build_countries` walks every country x year bucket of the store (through
   the store indices) and sums frequency/displacement per hazard type and per
   crisis category.
2) `build_geographies` groups countries into regions and subregions and merges
   the member countries' years index by index. Raw events are never scanned
   again at this level.

Every aggregate enumerates the full hazard vocabulary and the full category
vocabulary (zero-filled) and every place has one year per year of the span.
Aggregate maps are handed out read-only.
`validate_place` checks both; a failure is a `DataIntegrityError`.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Sequence, Type, TypeVar

from .config import DEFAULT_CONFIG, DomainConfig, HazardType
from .errors import DataIntegrityError
from .geography import GeographyTable
from .models import (CategoryAggregate, Country, EventRecord, HazardAggregate, Place, Region,
                     Subregion, YearAggregate)
from .store import EventStore

logger = logging.getLogger(__name__)

P = TypeVar("P", Region, Subregion)


@dataclass(frozen=True)
class Geographies:
    regions: List[Region]
    subregions: List[Subregion]


# ---------------- Aggregate helpers ----------------
def _hazard_totals(events: Iterable[EventRecord], vocabulary: Sequence[HazardType]) -> Mapping[HazardType, HazardAggregate]:
    freq = {h: 0 for h in vocabulary}
    displ = {h: 0 for h in vocabulary}
    for e in events:
        freq[e.hazard_type] += 1
        displ[e.hazard_type] += e.people_displaced
    return MappingProxyType({h: HazardAggregate(h, freq[h], displ[h]) for h in vocabulary})


def _category_totals(events: Iterable[EventRecord], categories: Sequence[str]) -> Mapping[str, CategoryAggregate]:
    freq = {c: 0 for c in categories}
    displ = {c: 0 for c in categories}
    for e in events:
        freq[e.crisis_category] += 1
        displ[e.crisis_category] += e.people_displaced
    return MappingProxyType({c: CategoryAggregate(c, freq[c], displ[c]) for c in categories})


def sum_hazards(buckets: Iterable[Mapping[HazardType, HazardAggregate]],
                vocabulary: Sequence[HazardType]) -> Mapping[HazardType, HazardAggregate]:
    """Element-wise sum of hazard aggregate maps."""
    freq = {h: 0 for h in vocabulary}
    displ = {h: 0 for h in vocabulary}
    for bucket in buckets:
        for h, agg in bucket.items():
            freq[h] += agg.frequency
            displ[h] += agg.total_displaced
    return MappingProxyType({h: HazardAggregate(h, freq[h], displ[h]) for h in vocabulary})


def sum_categories(buckets: Iterable[Mapping[str, CategoryAggregate]],
                   categories: Sequence[str]) -> Mapping[str, CategoryAggregate]:
    """Element-wise sum of category aggregate maps."""
    freq = {c: 0 for c in categories}
    displ = {c: 0 for c in categories}
    for bucket in buckets:
        for c, agg in bucket.items():
            freq[c] += agg.frequency
            displ[c] += agg.total_displaced
    return MappingProxyType({c: CategoryAggregate(c, freq[c], displ[c]) for c in categories})


def build_year(year: int, events: Sequence[EventRecord], vocabulary: Sequence[HazardType],
               categories: Sequence[str]) -> YearAggregate:
    """One year bucket from the events that happened in it."""
    dates = tuple(sorted(events, key=lambda e: e.date_key()))
    return YearAggregate(
        year=year,
        dates=dates,
        total_displaced=sum(e.people_displaced for e in dates),
        hazard_aggregates=_hazard_totals(dates, vocabulary),
        category_aggregates=_category_totals(dates, categories),
    )


def merge_years(year: int, parts: Sequence[YearAggregate], vocabulary: Sequence[HazardType],
                categories: Sequence[str]) -> YearAggregate:
    """Merge the same year of several places (dates re-sorted, sums added)."""
    dates: List[EventRecord] = []
    for p in parts:
        if p.year != year:
            raise DataIntegrityError(f"Cannot merge year {p.year} into {year}")
        dates.extend(p.dates)
    dates.sort(key=lambda e: e.date_key())
    return YearAggregate(
        year=year,
        dates=tuple(dates),
        total_displaced=sum(p.total_displaced for p in parts),
        hazard_aggregates=sum_hazards((p.hazard_aggregates for p in parts), vocabulary),
        category_aggregates=sum_categories((p.category_aggregates for p in parts), categories),
    )


def _by_total_desc(places: List) -> List:
    # sorted() is stable: ties keep first-appearance order
    return sorted(places, key=lambda p: p.total_displaced, reverse=True)


# ---------------- Validation ----------------
def validate_place(place: Place, config: DomainConfig = DEFAULT_CONFIG) -> None:
    """Raise DataIntegrityError unless `place` has complete years and vocabularies."""
    years = tuple(y.year for y in place.years)
    if years != config.years:
        raise DataIntegrityError(f"{place.label} spans years {years}, expected {config.years}")

    vocabulary = set(config.hazard_vocabulary)
    categories = set(place.category_aggregates)
    if set(place.hazard_aggregates) != vocabulary:
        raise DataIntegrityError(f"{place.label} has an incomplete hazard vocabulary")
    for y in place.years:
        if set(y.hazard_aggregates) != vocabulary:
            raise DataIntegrityError(f"{place.label} {y.year} has an incomplete hazard vocabulary")
        if set(y.category_aggregates) != categories:
            raise DataIntegrityError(f"{place.label} {y.year} has an incomplete category vocabulary")


# ---------------- Builders ----------------
def build_countries(store: EventStore, geography: GeographyTable,
                    config: DomainConfig = DEFAULT_CONFIG) -> List[Country]:
    """Build every country of the store, most displaced first."""
    vocabulary = config.hazard_vocabulary
    categories = store.categories
    countries: List[Country] = []

    for name in store.country_names:
        geo = geography.resolve(name, store.iso_code_of(name))
        years = tuple(build_year(y, store.events_for(name, y), vocabulary, categories) for y in config.years)
        country = Country(
            name=name,
            total_displaced=sum(y.total_displaced for y in years),
            years=years,
            hazard_aggregates=sum_hazards((y.hazard_aggregates for y in years), vocabulary),
            category_aggregates=sum_categories((y.category_aggregates for y in years), categories),
            iso_code=store.iso_code_of(name) or geo.iso_code,
            region=geo.region,
            subregion=geo.subregion,
        )
        validate_place(country, config)
        countries.append(country)

    logger.info("Built %d countries", len(countries))
    return _by_total_desc(countries)


def _group(cls: Type[P], names: List[str], members: Dict[str, List[Country]],
           config: DomainConfig, categories: Sequence[str]) -> List[P]:
    vocabulary = config.hazard_vocabulary
    out: List[P] = []
    for name in names:
        group = members[name]
        years = tuple(
            merge_years(year, [c.years[i] for c in group], vocabulary, categories)
            for i, year in enumerate(config.years)
        )
        place = cls(
            name=name,
            total_displaced=sum(c.total_displaced for c in group),
            years=years,
            hazard_aggregates=sum_hazards((y.hazard_aggregates for y in years), vocabulary),
            category_aggregates=sum_categories((y.category_aggregates for y in years), categories),
            countries=tuple(group),
        )
        validate_place(place, config)
        out.append(place)
    return _by_total_desc(out)


def build_geographies(countries: Sequence[Country], config: DomainConfig = DEFAULT_CONFIG) -> Geographies:
    """Group countries into regions and subregions."""
    categories = list(countries[0].category_aggregates) if countries else []
    by_region: Dict[str, List[Country]] = {}
    by_subregion: Dict[str, List[Country]] = {}
    for c in countries:
        by_region.setdefault(c.region, []).append(c)
        by_subregion.setdefault(c.subregion, []).append(c)

    regions = _group(Region, list(by_region), by_region, config, categories)
    subregions = _group(Subregion, list(by_subregion), by_subregion, config, categories)
    logger.info("Built %d regions and %d subregions", len(regions), len(subregions))
    return Geographies(regions=regions, subregions=subregions)
