"""
Dataset loader (CSV / Excel -> raw event rows)
==============================================

Reads the IDMC disaster displacement export and the ISO-3166 region table
and turns them into plain row dicts for the event store and geography table.

Key ideas:
- We try multiple possible column names because exports vary between the
  IDMC download page and hand-cleaned copies.
- The `year` column is the reporting year the store buckets events by; it
  may differ from the start date (events that began late in the previous
  year).
- Blank cells become None; normalization ("unknown", hazard folding,
  validation) happens in the event store, not here.
- `.xlsx` files are read through openpyxl, anything else as CSV.
"""

from __future__ import annotations
import logging
import re
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from .config import DEFAULT_CONFIG, GeoEntry
from .geography import GeographyTable

logger = logging.getLogger(__name__)


def _cell(x) -> Optional[Any]:
    """Return None for blank/NaN cells."""
    if x is None:
        return None
    try:
        if pd.isna(x):
            return None
    except (TypeError, ValueError):
        pass
    if isinstance(x, str) and not x.strip():
        return None
    return x


def _norm(s: str) -> str:
    return re.sub(r"[^a-z0-9]+", "", str(s).lower())


def _col(df: pd.DataFrame, *names: str, required: bool = True) -> Optional[str]:
    cols = list(df.columns)
    for n in names:
        if n in cols:
            return n
    norm_map = {_norm(c): c for c in cols}
    for n in names:
        nn = _norm(n)
        if nn in norm_map:
            return norm_map[nn]
    if required:
        raise KeyError(f"Missing required column. Tried={names}. Available={cols}")
    return None


def _read_table(path: str) -> pd.DataFrame:
    if str(path).lower().endswith((".xlsx", ".xlsm")):
        df = pd.read_excel(path, engine="openpyxl")
    else:
        df = pd.read_csv(path, dtype=str, keep_default_na=True)
    df.rename(columns={c: str(c).strip() for c in df.columns}, inplace=True)
    return df


def load_events(path: str) -> List[Dict[str, Any]]:
    """Read the disaster export into raw event rows."""
    df = _read_table(path)

    country_col = _col(df, "country", "Country / Territory", "Country/Territory", "Country")
    code_col = _col(df, "code", "iso3", "ISO3", "iso", required=False)
    start_col = _col(df, "start", "Date of event (start)", "Start Date", "date", "Event Date")
    year_col = _col(df, "year", "Year", required=False)
    category_col = _col(df, "crisis_category", "Hazard Category", "category", required=False)
    hazard_col = _col(df, "hazard_type", "Hazard Type", "hazard")
    displaced_col = _col(df, "displaced", "Disaster Internal Displacements",
                         "New Displacements", "Internal Displacements")
    event_col = _col(df, "event", "Event Name", "event_name", required=False)

    rows: List[Dict[str, Any]] = []
    for _, row in df.iterrows():
        start = _cell(row[start_col])
        if start is None and year_col is not None and _cell(row[year_col]) is not None:
            # undated events fall on the first day of their reporting year
            start = f"{int(float(row[year_col])):04d}-01-01"
        rows.append({
            "country": _cell(row[country_col]),
            "iso_code": _cell(row[code_col]) if code_col else None,
            "occurred_on": start,
            "year": _cell(row[year_col]) if year_col else None,
            "crisis_category": _cell(row[category_col]) if category_col else None,
            "hazard_type": _cell(row[hazard_col]),
            "people_displaced": _cell(row[displaced_col]) or 0,
            "event_label": _cell(row[event_col]) if event_col else None,
        })
    logger.info("Read %d event rows from %s", len(rows), path)
    return rows


def load_geography(path: str, overrides: Optional[Mapping[str, GeoEntry]] = None) -> GeographyTable:
    """Read the ISO-3166 region table (alpha-3 code, region, sub-region)."""
    df = _read_table(path)
    code_col = _col(df, "alpha3", "alpha-3", "iso3", "code")
    region_col = _col(df, "region")
    sub_col = _col(df, "subRegion", "sub-region", "subregion")

    rows = [
        {
            "iso_code": _cell(r[code_col]),
            "region": _cell(r[region_col]),
            "subregion": _cell(r[sub_col]),
        }
        for _, r in df.iterrows()
    ]
    if overrides is None:
        overrides = DEFAULT_CONFIG.geography_overrides
    return GeographyTable.from_rows(rows, overrides=overrides)
