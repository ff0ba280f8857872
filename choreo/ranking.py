"""
Ranking engine
==============

`select_top` takes an already sorted population of places (countries, regions
or subregions, most displaced first) and keeps the first `max_places` of them.
Hazard and crisis-category summaries are computed over that subset only.
"""

from __future__ import annotations
import logging
from typing import List, Sequence

from .aggregator import sum_categories, sum_hazards
from .config import DEFAULT_CONFIG, DomainConfig
from .models import Granularity, Place, RankingResult

logger = logging.getLogger(__name__)


def select_top(places: Sequence[Place], granularity: Granularity, max_places: int,
               config: DomainConfig = DEFAULT_CONFIG) -> RankingResult:
    """Pick the top places of one granularity.

    `max_places` is clamped to the population size (there are only five
    regions, for example). Order is the aggregator's descending order; no
    re-sorting happens here.
    """
    granularity = Granularity(granularity)
    n = max(0, min(int(max_places), len(places)))
    if n < max_places:
        logger.debug("Clamped top-%d %s to %d", max_places, granularity.value, n)
    top: List[Place] = list(places[:n])

    years = [y for p in top for y in p.years]
    categories = list(top[0].category_aggregates) if top else []
    hazards = sum_hazards((y.hazard_aggregates for y in years), config.hazard_vocabulary)
    cats = sum_categories((y.category_aggregates for y in years), categories)

    return RankingResult(
        granularity=granularity,
        top_places=tuple(top),
        top_hazard_aggregates=tuple(sorted(hazards.values(), key=lambda a: a.frequency, reverse=True)),
        top_category_aggregates=tuple(sorted(cats.values(), key=lambda a: a.frequency, reverse=True)),
    )
