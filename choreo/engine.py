"""
Core engine
===========

The engine wires one session of the pipeline together:

1) Event rows -> EventStore (validated, chronological, indexed)
2) EventStore -> countries, then regions/subregions (PlaceAggregator)
3) explore(granularity, max) -> RankingResult (RankingEngine)
4) navigate(...) -> Navigator, which computes scores for the selected place

Everything built in steps 1-3 is immutable; the navigator is the only object
with mutable state, and it belongs to this session.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from .aggregator import Geographies, build_countries, build_geographies
from .config import DEFAULT_CONFIG, DomainConfig
from .geography import GeographyTable
from .models import Country, Granularity, Place, RankingResult
from .navigation import Navigator
from .ranking import select_top
from .store import EventStore

logger = logging.getLogger(__name__)


@dataclass
class ChoreoEngine:
    """Displacement choreography engine for one session."""
    store: EventStore
    geography: GeographyTable
    config: DomainConfig = DEFAULT_CONFIG
    dataset_path: Optional[str] = None
    # commands that changed the session, replayed in the report
    command_log: List[str] = field(default_factory=list)
    countries: List[Country] = field(init=False)
    geos: Geographies = field(init=False)

    def __post_init__(self) -> None:
        self.countries = build_countries(self.store, self.geography, self.config)
        self.geos = build_geographies(self.countries, self.config)

    @classmethod
    def build(cls, rows: Iterable[Mapping[str, Any]], geography: GeographyTable,
              config: DomainConfig = DEFAULT_CONFIG, dataset_path: Optional[str] = None) -> "ChoreoEngine":
        store = EventStore.from_rows(rows, config)
        return cls(store=store, geography=geography, config=config, dataset_path=dataset_path)

    def places(self, granularity: Granularity) -> Sequence[Place]:
        granularity = Granularity(granularity)
        if granularity is Granularity.COUNTRY:
            return self.countries
        if granularity is Granularity.REGION:
            return self.geos.regions
        return self.geos.subregions

    def explore(self, granularity: Granularity, max_places: int) -> RankingResult:
        """Top `max_places` places of one granularity with their summaries."""
        return select_top(self.places(granularity), granularity, max_places, self.config)

    def navigate(self, granularity: Granularity = Granularity.COUNTRY, max_places: int = 10) -> Navigator:
        ranking = self.explore(granularity, max_places)
        logger.info("Navigating top %d %s", len(ranking.top_places), ranking.granularity.value)
        return Navigator(ranking, self.config)
