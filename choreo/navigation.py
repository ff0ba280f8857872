"""
Navigation state machine
========================

The navigator owns the interactive selection of one session:

- which of the ranked places is selected,
- which year of the score is in focus (biennial: 0, 2, ..., 12),
- which hazard layers are visible (poses are revealed one at a time).

The selection is a frozen `NavigationState`. A transition computes the next
state (and, when the place changes, the next score) and swaps both in at once,
so readers always see a consistent (place, year, score row, visible set)
snapshot.

Every transition returns a `Transition` holding a render-ready `ViewModel`.
Commands that cannot apply (past the last place, before the first year, a
pose for a hazard that is not on screen) are rejected: state stays the same
and `accepted` is False. They never raise to the caller.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
import logging
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Tuple, Union

from .config import DEFAULT_CONFIG, DomainConfig, HazardType
from .errors import DataIntegrityError, InvalidTransitionInput
from .models import Place, RankingResult, Score, ScoreEntry, YearAggregate
from .score import compute_score

logger = logging.getLogger(__name__)


class Command(str, Enum):
    SELECT_NEXT = "select_next"
    SELECT_PREVIOUS = "select_previous"
    ADVANCE = "advance"
    RETREAT = "retreat"
    FILTER_BY_HAZARD = "filter_by_hazard"
    CLEAR_FILTER = "clear_filter"


class ViewMode(str, Enum):
    YEAR = "year"        # default view of the focused year
    SINGLE = "single"    # poses narrowed the visible layers
    ALL = "all"          # every year of the score at once


@dataclass(frozen=True)
class NavigationState:
    selected_place_index: int
    year_index: int
    active_hazard_filter: Optional[HazardType]
    visible_hazards: Tuple[HazardType, ...]
    visible_colors: Mapping[HazardType, str]

    @classmethod
    def initial(cls, config: DomainConfig = DEFAULT_CONFIG, place_index: int = 0) -> "NavigationState":
        return cls(
            selected_place_index=place_index,
            year_index=0,
            active_hazard_filter=None,
            visible_hazards=tuple(config.hazard_vocabulary),
            visible_colors=config.full_colors(),
        )

    def with_full_vocabulary(self, config: DomainConfig) -> "NavigationState":
        return replace(self, active_hazard_filter=None,
                       visible_hazards=tuple(config.hazard_vocabulary),
                       visible_colors=config.full_colors())


@dataclass(frozen=True)
class DatePoint:
    """One event of the focused year, as a stack row keyed by hazard."""
    occurred_on: date
    values: Mapping[HazardType, int]


@dataclass(frozen=True)
class ViewModel:
    mode: ViewMode
    label: str
    place_name: str
    year: int
    year_index: int
    span: Tuple[int, int]
    stacked_keys: Tuple[HazardType, ...]
    # hazard -> ((year, displaced), ...) over the span
    layers: Mapping[HazardType, Tuple[Tuple[int, int], ...]]
    date_layers: Tuple[DatePoint, ...]
    score_row: ScoreEntry
    colors: Mapping[HazardType, str]
    active_hazard: Optional[HazardType]


@dataclass(frozen=True)
class Transition:
    accepted: bool
    view: ViewModel
    reason: str = ""


# ---------------- Layer helpers ----------------
def stacked_keys(year: YearAggregate, config: DomainConfig = DEFAULT_CONFIG) -> Tuple[HazardType, ...]:
    """Hazards drawn as layers for one year: nonzero displacement, most displacing first."""
    aggs = [year.hazard_aggregates[h] for h in config.stackable_hazards]
    aggs = [a for a in aggs if a.total_displaced > 0]
    aggs.sort(key=lambda a: a.total_displaced, reverse=True)
    return tuple(a.hazard_type for a in aggs)


def _span_layers(place: Place, first: int, last: int, visible: Tuple[HazardType, ...],
                 config: DomainConfig) -> Mapping[HazardType, Tuple[Tuple[int, int], ...]]:
    years = [y for y in place.years if first <= y.year <= last]
    totals = {h: sum(y.hazard_aggregates[h].total_displaced for y in years) for h in config.stackable_hazards}
    keys = sorted((h for h in totals if totals[h] > 0 and h in visible), key=lambda h: totals[h], reverse=True)
    return MappingProxyType({h: tuple((y.year, y.hazard_aggregates[h].total_displaced) for y in years) for h in keys})


def _date_layers(year: YearAggregate, keys: Tuple[HazardType, ...]) -> Tuple[DatePoint, ...]:
    points = []
    for e in year.dates:
        if e.hazard_type not in keys:
            continue
        # other keys are zero so every layer stays continuous
        values = {k: 0 for k in keys}
        values[e.hazard_type] = e.people_displaced
        points.append(DatePoint(occurred_on=e.occurred_on, values=MappingProxyType(values)))
    return tuple(points)


HazardInput = Union[HazardType, str]


class Navigator:
    """Interactive selection over the places of one ranking."""

    def __init__(self, ranking: RankingResult, config: DomainConfig = DEFAULT_CONFIG,
                 scorer: Callable[[Place, DomainConfig], Score] = compute_score) -> None:
        if not ranking.top_places:
            raise DataIntegrityError("Cannot navigate an empty ranking")
        self.ranking = ranking
        self.config = config
        self._scorer = scorer
        self._state = NavigationState.initial(config)
        self._score = scorer(self.ranking.top_places[0], config)

    # ---------------- Snapshot ----------------
    @property
    def state(self) -> NavigationState:
        return self._state

    @property
    def score(self) -> Score:
        return self._score

    @property
    def place(self) -> Place:
        return self.ranking.top_places[self._state.selected_place_index]

    @property
    def year(self) -> YearAggregate:
        return self.place.years[self._state.year_index]

    @property
    def score_row(self) -> ScoreEntry:
        return self._score[self._state.year_index]

    @property
    def stacked_keys(self) -> Tuple[HazardType, ...]:
        return stacked_keys(self.year, self.config)

    def view(self, mode: Optional[ViewMode] = None) -> ViewModel:
        """Render-ready view of the current state."""
        st = self._state
        if mode is None:
            mode = ViewMode.SINGLE if st.active_hazard_filter is not None else ViewMode.YEAR
        place, year = self.place, self.year
        first = self.config.first_year
        if mode is ViewMode.ALL:
            last = self.config.last_year
        else:
            # the opening view still needs two years to draw an area
            last = first + max(st.year_index, 1)
        keys = self.stacked_keys
        visible_keys = tuple(k for k in keys if k in st.visible_hazards)
        return ViewModel(
            mode=mode,
            label=place.label,
            place_name=place.name,
            year=year.year,
            year_index=st.year_index,
            span=(first, last),
            stacked_keys=keys,
            layers=_span_layers(place, first, last, st.visible_hazards, self.config),
            date_layers=_date_layers(year, visible_keys),
            score_row=self.score_row,
            colors=st.visible_colors,
            active_hazard=st.active_hazard_filter,
        )

    # ---------------- Transitions ----------------
    def _commit(self, state: NavigationState, score: Optional[Score] = None) -> None:
        if score is not None:
            self._score = score
        self._state = state

    def _reject(self, err: InvalidTransitionInput) -> Transition:
        logger.debug("Rejected transition: %s", err)
        return Transition(accepted=False, view=self.view(), reason=str(err))

    def _select(self, delta: int) -> Transition:
        try:
            target = self._state.selected_place_index + delta
            if not 0 <= target < len(self.ranking.top_places):
                raise InvalidTransitionInput(f"No place at index {target}")
        except InvalidTransitionInput as err:
            return self._reject(err)
        score = self._scorer(self.ranking.top_places[target], self.config)
        self._commit(NavigationState.initial(self.config, place_index=target), score)
        return Transition(accepted=True, view=self.view(ViewMode.YEAR))

    def select_next(self) -> Transition:
        return self._select(+1)

    def select_previous(self) -> Transition:
        return self._select(-1)

    def advance(self) -> Transition:
        st = self._state
        if st.year_index < self.config.last_year_index:
            nxt = replace(st, year_index=st.year_index + self.config.year_step)
            self._commit(nxt.with_full_vocabulary(self.config))
            return Transition(accepted=True, view=self.view(ViewMode.YEAR))
        # past the last year: show the whole score, state unchanged
        return Transition(accepted=True, view=self.view(ViewMode.ALL))

    def retreat(self) -> Transition:
        st = self._state
        try:
            if st.year_index < self.config.year_step:
                raise InvalidTransitionInput("Already at the first year")
        except InvalidTransitionInput as err:
            return self._reject(err)
        prev = replace(st, year_index=st.year_index - self.config.year_step)
        self._commit(prev.with_full_vocabulary(self.config))
        return Transition(accepted=True, view=self.view(ViewMode.YEAR))

    def filter_by_hazard(self, hazard: HazardInput) -> Transition:
        st = self._state
        try:
            h = self._parse_hazard(hazard)
            if h not in self.stacked_keys:
                raise InvalidTransitionInput(f"{h.value} is not stacked for {self.place.name} {self.year.year}")
        except InvalidTransitionInput as err:
            return self._reject(err)

        if set(st.visible_hazards) == set(self.config.hazard_vocabulary):
            visible: Tuple[HazardType, ...] = (h,)
        elif h not in st.visible_hazards:
            visible = st.visible_hazards + (h,)
        else:
            return Transition(accepted=True, view=self.view(ViewMode.SINGLE), reason="already visible")

        colors = MappingProxyType({k: self.config.color_of(k) for k in visible})
        self._commit(replace(st, active_hazard_filter=h, visible_hazards=visible, visible_colors=colors))
        return Transition(accepted=True, view=self.view(ViewMode.SINGLE))

    def clear_filter(self) -> Transition:
        self._commit(self._state.with_full_vocabulary(self.config))
        return Transition(accepted=True, view=self.view(ViewMode.YEAR))

    def dispatch(self, command: Union[Command, str], hazard: Optional[HazardInput] = None) -> Transition:
        """Route one symbolic command. Unknown commands are rejected."""
        try:
            cmd = Command(command)
        except ValueError:
            return self._reject(InvalidTransitionInput(f"Unknown command {command!r}"))
        if cmd is Command.FILTER_BY_HAZARD:
            if hazard is None:
                return self._reject(InvalidTransitionInput("filter_by_hazard needs a hazard type"))
            return self.filter_by_hazard(hazard)
        handlers = {
            Command.SELECT_NEXT: self.select_next,
            Command.SELECT_PREVIOUS: self.select_previous,
            Command.ADVANCE: self.advance,
            Command.RETREAT: self.retreat,
            Command.CLEAR_FILTER: self.clear_filter,
        }
        return handlers[cmd]()

    def _parse_hazard(self, hazard: HazardInput) -> HazardType:
        if isinstance(hazard, HazardType):
            return hazard
        h = self.config.canonical_hazard(str(hazard))
        if h is None or not str(hazard).strip():
            raise InvalidTransitionInput(f"Unknown hazard type {hazard!r}")
        return h
