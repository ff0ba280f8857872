"""
Data model
==========

Every record produced by the pipeline is a frozen dataclass:

- `EventRecord` is one normalized row of the IDMC disaster export.
- `HazardAggregate` / `CategoryAggregate` hold frequency and displacement for
  one key inside one time bucket.
- `YearAggregate` is one of the 13 buckets (2008-2020) of a place.
- `Country`, `Region` and `Subregion` are the places.
- `ScoreDisaster` / `ScoreEntry` form the movement score.

Aggregates are built once by the aggregator and only read afterwards: their
maps are read-only `MappingProxyType` views. The score engine derives new
values from them instead of annotating them.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import ClassVar, Mapping, Optional, Tuple

from .config import HazardType


class Granularity(str, Enum):
    COUNTRY = "country"
    REGION = "region"
    SUBREGION = "subregion"


@dataclass(frozen=True)
class EventRecord:
    """One displacement event."""
    country: str
    iso_code: str
    occurred_on: date
    crisis_category: str
    hazard_type: HazardType
    people_displaced: int
    event_label: str
    # year the dataset files the event under; may differ from the start date
    reporting_year: Optional[int] = None

    @property
    def year(self) -> int:
        """Year bucket of the event."""
        if self.reporting_year is not None:
            return self.reporting_year
        return self.occurred_on.year

    def date_key(self) -> int:
        """Integer YYYYMMDD key for chronological sorting."""
        d = self.occurred_on
        return d.year * 10000 + d.month * 100 + d.day


@dataclass(frozen=True)
class HazardAggregate:
    hazard_type: HazardType
    frequency: int = 0
    total_displaced: int = 0


@dataclass(frozen=True)
class CategoryAggregate:
    category: str
    frequency: int = 0
    total_displaced: int = 0


@dataclass(frozen=True)
class YearAggregate:
    """Everything that happened in one place during one year."""
    year: int
    dates: Tuple[EventRecord, ...]
    total_displaced: int
    hazard_aggregates: Mapping[HazardType, HazardAggregate]
    category_aggregates: Mapping[str, CategoryAggregate]

    def hazard(self, hazard: HazardType) -> HazardAggregate:
        return self.hazard_aggregates[HazardType(hazard)]


@dataclass(frozen=True)
class Place:
    """Common shape of countries, regions and subregions."""
    granularity: ClassVar[Granularity]

    name: str
    total_displaced: int
    years: Tuple[YearAggregate, ...]
    hazard_aggregates: Mapping[HazardType, HazardAggregate]
    category_aggregates: Mapping[str, CategoryAggregate]

    @property
    def label(self) -> str:
        """Text identifying the place and its granularity, e.g. 'country: China'."""
        return f"{self.granularity.value}: {self.name}"

    def hazard(self, hazard: HazardType) -> HazardAggregate:
        return self.hazard_aggregates[HazardType(hazard)]

    def year_at(self, year: int) -> YearAggregate:
        for y in self.years:
            if y.year == year:
                return y
        raise KeyError(year)


@dataclass(frozen=True)
class Country(Place):
    granularity: ClassVar[Granularity] = Granularity.COUNTRY

    iso_code: str = ""
    region: str = ""
    subregion: str = ""


@dataclass(frozen=True)
class Region(Place):
    granularity: ClassVar[Granularity] = Granularity.REGION

    countries: Tuple[Country, ...] = ()


@dataclass(frozen=True)
class Subregion(Place):
    granularity: ClassVar[Granularity] = Granularity.SUBREGION

    countries: Tuple[Country, ...] = ()


@dataclass(frozen=True)
class RankingResult:
    """Top places of one granularity plus summaries over those places only."""
    granularity: Granularity
    top_places: Tuple[Place, ...]
    top_hazard_aggregates: Tuple[HazardAggregate, ...]
    top_category_aggregates: Tuple[CategoryAggregate, ...]


@dataclass(frozen=True)
class ScoreDisaster:
    """One hazard pose for one year of the movement score."""
    hazard_type: HazardType
    frequency: int
    total_displaced: int
    repetitions: int
    steps: int

    @property
    def opacity(self) -> float:
        """Ring opacity: 0.4 for one repetition up to 1.0 for five."""
        return round(0.4 + 0.15 * (self.repetitions - 1), 2)


@dataclass(frozen=True)
class ScoreEntry:
    year: int
    disasters: Tuple[ScoreDisaster, ...]


Score = Tuple[ScoreEntry, ...]
