"""
Score engine
============

Turns a place into a "movement score": for every year of the span, the list
of hazards danced that year, most displacing first, each with

- `steps`: how far to move, log of people displaced (1-5),
- `repetitions`: how often to repeat the pose, log of event frequency (1-5).

Both scales are fitted once per place:

- stepScale: domain [1, largest yearly displacement of the place]
- repScale:  domain [1, largest yearly frequency of any hazard]

The engine never annotates the place's own aggregates. Each year's hazards
are derived into fresh `ScoreDisaster` values first, so computing a score
twice gives equal results and leaves the place untouched.
"""

from __future__ import annotations
import logging
from typing import List, Tuple

from .config import DEFAULT_CONFIG, DomainConfig, HazardType
from .models import Place, Score, ScoreDisaster, ScoreEntry, YearAggregate
from .scales import LogScale

logger = logging.getLogger(__name__)


def _derive(year: YearAggregate, config: DomainConfig) -> List[Tuple[HazardType, int, int]]:
    """Independent copy of the year's danceable hazards, most displacing first."""
    rows = [
        (agg.hazard_type, agg.frequency, agg.total_displaced)
        for h, agg in year.hazard_aggregates.items()
        if h in config.stackable_hazards
    ]
    rows = [r for r in rows if r[1] != 0 and r[2] != 0]
    rows.sort(key=lambda r: r[2], reverse=True)
    return rows


def fit_scales(place: Place, config: DomainConfig = DEFAULT_CONFIG) -> Tuple[LogScale, LogScale]:
    """Return (step_scale, rep_scale) for `place`."""
    most_displaced = max((y.total_displaced for y in place.years), default=0)
    most_frequent = max(
        (a.frequency for y in place.years for h, a in y.hazard_aggregates.items()
         if h in config.stackable_hazards),
        default=0,
    )
    step_scale = LogScale.fit(most_displaced)
    rep_scale = LogScale.fit(most_frequent)
    if step_scale.degenerate or rep_scale.degenerate:
        logger.debug("Degenerate score domain for %s (displaced<=%d, frequency<=%d)",
                     place.label, most_displaced, most_frequent)
    return step_scale, rep_scale


def compute_score(place: Place, config: DomainConfig = DEFAULT_CONFIG) -> Score:
    """Movement score of `place`: one entry per year, ascending."""
    step_scale, rep_scale = fit_scales(place, config)

    entries: List[ScoreEntry] = []
    for year in place.years:
        disasters = [
            ScoreDisaster(
                hazard_type=hazard,
                frequency=freq,
                total_displaced=displaced,
                repetitions=rep_scale.discrete(freq),
                steps=step_scale.discrete(displaced),
            )
            for hazard, freq, displaced in _derive(year, config)
        ]
        disasters.sort(key=lambda d: d.total_displaced, reverse=True)
        entries.append(ScoreEntry(year=year.year, disasters=tuple(disasters)))

    entries.sort(key=lambda e: e.year)
    return tuple(entries)


def score_table(entry: ScoreEntry) -> List[str]:
    """Text rows of one score year: hazard, reps (frequency), steps (displaced)."""
    lines = [f"{entry.year} Logarithmic Movement Score"]
    for d in entry.disasters:
        lines.append(
            f"  {d.hazard_type.value:<24} {d.repetitions} ({d.frequency:,})  {d.steps} ({d.total_displaced:,})"
        )
    if not entry.disasters:
        lines.append("  (no displacement recorded)")
    return lines
