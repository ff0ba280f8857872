"""
Domain configuration
====================

Everything the pipeline treats as "fixed for the session" lives here:

- the closed set of hazard types (`HazardType`),
- the folding table that canonicalizes raw IDMC hazard labels,
- the canonical colour of each hazard,
- the year span (2008-2020) and the biennial navigation step,
- manual geography overrides for countries missing from the ISO table,
- keyboard bindings used by the CLI.

`DomainConfig` is frozen and its tables are read-only mappings: it is built
once and passed by reference into the aggregator, score engine and navigator.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


class HazardType(str, Enum):
    """Canonical hazard types found in the IDMC disaster export."""
    FLOOD = "Flood"
    STORM = "Storm"
    WILDFIRE = "Wildfire"
    EARTHQUAKE = "Earthquake"
    VOLCANO = "Volcano"
    DROUGHT = "Drought"
    MASS_MOVEMENT = "Mass movement"
    EXTREME_TEMPERATURE = "Extreme temperature"
    SEVERE_WINTER_CONDITION = "Severe winter condition"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


UNKNOWN_LABEL = "unknown"

# raw label -> canonical label
HAZARD_FOLDING: Mapping[str, str] = MappingProxyType({
    "Wet Mass movement": "Mass movement",
    "Wet Mass Movement": "Mass movement",
    "Wet mass movement": "Mass movement",
    "Dry mass movement": "Mass movement",
    "Volcanic activity": "Volcano",
    "Volcanic eruption": "Volcano",
})

HAZARD_COLORS: Mapping[HazardType, str] = MappingProxyType({
    HazardType.FLOOD: "#285D82",
    HazardType.STORM: "#93A7B5",
    HazardType.WILDFIRE: "#822A28",
    HazardType.EARTHQUAKE: "#204F4A",
    HazardType.VOLCANO: "#F02D3A",
    HazardType.DROUGHT: "#817C8A",
    HazardType.MASS_MOVEMENT: "#5C423D",
    HazardType.EXTREME_TEMPERATURE: "#4FC2B6",
    HazardType.SEVERE_WINTER_CONDITION: "#FFFFFF",
    HazardType.UNKNOWN: "#000000",
})

# Pose keys of the choreographic interface
HAZARD_KEYS: Mapping[str, HazardType] = MappingProxyType({
    "f": HazardType.FLOOD,
    "s": HazardType.STORM,
    "w": HazardType.WILDFIRE,
    "e": HazardType.EARTHQUAKE,
    "v": HazardType.VOLCANO,
    "d": HazardType.DROUGHT,
    "m": HazardType.MASS_MOVEMENT,
    "x": HazardType.EXTREME_TEMPERATURE,
    "c": HazardType.SEVERE_WINTER_CONDITION,
})


@dataclass(frozen=True)
class GeoEntry:
    """Where a country sits in the UN geoscheme."""
    iso_code: str
    region: str
    subregion: str


# Countries absent from the ISO-3166 region table
GEOGRAPHY_OVERRIDES: Mapping[str, GeoEntry] = MappingProxyType({
    "Kosovo": GeoEntry(iso_code="XKX", region="Europe", subregion="South-eastern Europe"),
    "Abyei Area": GeoEntry(iso_code="AB9", region="Africa", subregion="North-eastern Africa"),
})


@dataclass(frozen=True)
class DomainConfig:
    """Immutable session configuration shared by every pipeline stage."""
    first_year: int = 2008
    last_year: int = 2020
    # navigation advances two years per step
    year_step: int = 2
    hazard_vocabulary: Tuple[HazardType, ...] = tuple(HazardType)
    colors: Mapping[HazardType, str] = field(default_factory=lambda: dict(HAZARD_COLORS))
    folding: Mapping[str, str] = field(default_factory=lambda: dict(HAZARD_FOLDING))
    geography_overrides: Mapping[str, GeoEntry] = field(default_factory=lambda: dict(GEOGRAPHY_OVERRIDES))
    hazard_keys: Mapping[str, HazardType] = field(default_factory=lambda: dict(HAZARD_KEYS))

    def __post_init__(self) -> None:
        # read-only views over private copies; the caller's dicts stay detached
        for name in ("colors", "folding", "geography_overrides", "hazard_keys"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    @property
    def years(self) -> Tuple[int, ...]:
        return tuple(range(self.first_year, self.last_year + 1))

    @property
    def year_count(self) -> int:
        return self.last_year - self.first_year + 1

    @property
    def last_year_index(self) -> int:
        """Highest reachable navigation index (12 for 2008-2020)."""
        return ((self.year_count - 1) // self.year_step) * self.year_step

    @property
    def stackable_hazards(self) -> Tuple[HazardType, ...]:
        """Hazards that may be drawn as layers / danced as poses."""
        return tuple(h for h in self.hazard_vocabulary if h is not HazardType.UNKNOWN)

    def color_of(self, hazard: HazardType) -> str:
        return self.colors.get(hazard, HAZARD_COLORS[HazardType.UNKNOWN])

    def full_colors(self) -> Mapping[HazardType, str]:
        return MappingProxyType({h: self.color_of(h) for h in self.hazard_vocabulary})

    def canonical_hazard(self, raw: Optional[str]) -> Optional[HazardType]:
        """Fold a raw hazard label into the closed vocabulary.

        Blank labels become `HazardType.UNKNOWN`. Returns None when the label
        is not part of the vocabulary even after folding.
        """
        label = (raw or "").strip()
        if not label:
            return HazardType.UNKNOWN
        label = self.folding.get(label, label)
        for h in self.hazard_vocabulary:
            if h.value.lower() == label.lower():
                return h
        return None

    def hazard_for_key(self, key: str) -> Optional[HazardType]:
        return self.hazard_keys.get(key)


DEFAULT_CONFIG = DomainConfig()
