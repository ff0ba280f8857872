"""
Indices (precomputed lookup tables)
===================================

The event store keeps events in chronological order and builds maps from a
value to the sorted list of event positions that carry it:

- `by_country["China"]` gives positions of all Chinese events.
- `year_to_ids[2010]` gives positions of every event filed under 2010.

The aggregator asks for (country, year) buckets; sorted lists make that a
two-pointer intersection, and since positions follow the chronological order
the result is already sorted by date.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Sequence

from .models import EventRecord


@dataclass
class Indices:
    """Container of precomputed indices for fast bucket lookups."""
    by_country: Dict[str, List[int]]
    year_to_ids: Dict[int, List[int]]
    years_sorted: List[int]


def build_indices(events: Sequence[EventRecord]) -> Indices:
    by_country: Dict[str, List[int]] = {}
    year_to_ids: Dict[int, List[int]] = {}

    # positions are appended in increasing order, so every list is sorted
    for pos, e in enumerate(events):
        by_country.setdefault(e.country, []).append(pos)
        year_to_ids.setdefault(e.year, []).append(pos)

    return Indices(
        by_country=by_country,
        year_to_ids=year_to_ids,
        years_sorted=sorted(year_to_ids),
    )


def intersect_sorted(a: List[int], b: List[int]) -> List[int]:
    """Two-pointer intersection for sorted position lists."""
    i = j = 0
    out: List[int] = []
    while i < len(a) and j < len(b):
        if a[i] == b[j]:
            out.append(a[i]); i += 1; j += 1
        elif a[i] < b[j]:
            i += 1
        else:
            j += 1
    return out


def country_year_ids(idx: Indices, country: str, year: int) -> List[int]:
    """Positions of the events of `country` filed under `year`."""
    return intersect_sorted(idx.by_country.get(country, []), idx.year_to_ids.get(year, []))
