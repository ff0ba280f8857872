"""
Geography lookup
================

Maps a country to its UN geoscheme region and subregion. The canonical table
is keyed by ISO 3166 alpha-3 code (the "regions" CSV); a small override list
covers countries that the ISO table does not know (Kosovo, Abyei Area).

Overrides win over the table. A country that neither resolves raises
`DataIntegrityError`: a country is never dropped for lack of geography.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional

from .config import DEFAULT_CONFIG, GeoEntry
from .errors import DataIntegrityError


@dataclass
class GeographyTable:
    by_iso: Dict[str, GeoEntry] = field(default_factory=dict)
    overrides: Mapping[str, GeoEntry] = field(default_factory=lambda: DEFAULT_CONFIG.geography_overrides)

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, str]],
                  overrides: Optional[Mapping[str, GeoEntry]] = None) -> "GeographyTable":
        """Build from rows with `iso_code`, `region` and `subregion` keys."""
        by_iso: Dict[str, GeoEntry] = {}
        for r in rows:
            code = str(r.get("iso_code") or "").strip().upper()
            if not code:
                continue
            by_iso[code] = GeoEntry(
                iso_code=code,
                region=str(r.get("region") or "").strip(),
                subregion=str(r.get("subregion") or "").strip(),
            )
        table = cls(by_iso=by_iso)
        if overrides is not None:
            table.overrides = MappingProxyType(dict(overrides))
        return table

    def resolve(self, country: str, iso_code: Optional[str]) -> GeoEntry:
        if country in self.overrides:
            return self.overrides[country]
        entry = self.by_iso.get((iso_code or "").upper())
        if entry is None or not entry.region or not entry.subregion:
            raise DataIntegrityError(
                f"No geography for {country!r} (ISO {iso_code!r}); add an override entry"
            )
        return entry
