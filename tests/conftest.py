"""
Shared fixtures for the choreo tests.

Two synthetic datasets:
  - `basic_rows`: the three-event Alpha/Beta scenario.
  - `rich_rows`: three countries over several years, including a
    zero-displacement event and an event with a blank hazard type.

Geography is a hand-written ISO table so no files are needed.
"""

import pytest

from choreo.config import DEFAULT_CONFIG
from choreo.engine import ChoreoEngine
from choreo.geography import GeographyTable
from choreo.store import EventStore


def make_row(country, iso, day, hazard, displaced, category="Weather related", label=""):
    return {
        "country": country,
        "iso_code": iso,
        "occurred_on": day,
        "crisis_category": category,
        "hazard_type": hazard,
        "people_displaced": displaced,
        "event_label": label,
    }


@pytest.fixture
def config():
    return DEFAULT_CONFIG


@pytest.fixture
def geography():
    return GeographyTable.from_rows([
        {"iso_code": "ALP", "region": "Europe", "subregion": "Western Europe"},
        {"iso_code": "BET", "region": "Europe", "subregion": "Eastern Europe"},
        {"iso_code": "GAM", "region": "Asia", "subregion": "Eastern Asia"},
    ])


@pytest.fixture
def basic_rows():
    return [
        make_row("Alpha", "ALP", "2008-05-01", "Flood", 100),
        make_row("Alpha", "ALP", "2008-03-01", "Storm", 50),
        make_row("Beta", "BET", "2009-07-01", "Flood", 10),
    ]


@pytest.fixture
def rich_rows():
    return [
        make_row("Alpha", "ALP", "2008-03-01", "Flood", 100, label="March floods"),
        make_row("Alpha", "ALP", "2008-01-15", "Storm", 50),
        make_row("Alpha", "ALP", "2010-06-01", "Flood", 1000),
        make_row("Alpha", "ALP", "2010-07-01", "Flood", 10),
        make_row("Alpha", "ALP", "2012-02-02", "Earthquake", 500, category="Geophysical"),
        make_row("Beta", "BET", "2009-05-05", "Wet mass movement", 10),
        make_row("Beta", "BET", "2010-01-01", "Storm", 300),
        make_row("Gamma", "GAM", "2008-02-01", "Drought", 0),
        make_row("Gamma", "GAM", "2020-12-31", "", 5, category=""),
    ]


@pytest.fixture
def basic_store(basic_rows):
    return EventStore.from_rows(basic_rows)


@pytest.fixture
def rich_store(rich_rows):
    return EventStore.from_rows(rich_rows)


@pytest.fixture
def rich_engine(rich_rows, geography):
    return ChoreoEngine.build(rich_rows, geography)


@pytest.fixture
def row():
    """Factory for raw event rows."""
    return make_row
