"""Tests for event normalization and the event store."""

import logging
from datetime import date

import pytest

from choreo.config import HazardType
from choreo.errors import DataIntegrityError
from choreo.indices import build_indices, country_year_ids, intersect_sorted
from choreo.store import EventStore, normalize_event


class TestNormalizeEvent:

    def test_blank_fields_become_unknown(self, row):
        e = normalize_event(row("Alpha", "alp", "2010-01-01", "", 3, category="", label=""))
        assert e.hazard_type is HazardType.UNKNOWN
        assert e.crisis_category == "unknown"
        assert e.event_label == "unknown"
        assert e.iso_code == "ALP"

    @pytest.mark.parametrize("raw", [
        "Wet Mass movement", "Wet Mass Movement", "Wet mass movement", "Dry mass movement",
    ])
    def test_mass_movement_subtypes_fold(self, row, raw):
        assert normalize_event(row("A", "ALP", "2010-01-01", raw, 1)).hazard_type is HazardType.MASS_MOVEMENT

    @pytest.mark.parametrize("raw", ["Volcanic activity", "Volcanic eruption"])
    def test_volcanic_labels_fold(self, row, raw):
        assert normalize_event(row("A", "ALP", "2010-01-01", raw, 1)).hazard_type is HazardType.VOLCANO

    def test_negative_displacement_rejected(self, row):
        with pytest.raises(DataIntegrityError):
            normalize_event(row("A", "ALP", "2010-01-01", "Flood", -1))

    def test_fractional_displacement_rejected(self, row):
        with pytest.raises(DataIntegrityError):
            normalize_event(row("A", "ALP", "2010-01-01", "Flood", 2.5))

    def test_thousands_separator_accepted(self, row):
        assert normalize_event(row("A", "ALP", "2010-01-01", "Flood", "1,200")).people_displaced == 1200

    @pytest.mark.parametrize("day", ["2007-12-31", "2021-01-01"])
    def test_date_outside_span_rejected(self, row, day):
        with pytest.raises(DataIntegrityError):
            normalize_event(row("A", "ALP", day, "Flood", 1))

    def test_invalid_date_rejected(self, row):
        with pytest.raises(DataIntegrityError):
            normalize_event(row("A", "ALP", "not a date", "Flood", 1))

    def test_missing_country_rejected(self, row):
        with pytest.raises(DataIntegrityError):
            normalize_event(row("", "ALP", "2010-01-01", "Flood", 1))

    def test_accepts_date_objects(self, row):
        e = normalize_event(row("A", "ALP", date(2015, 4, 25), "Earthquake", 7))
        assert e.occurred_on == date(2015, 4, 25)
        assert e.year == 2015

    def test_reporting_year_is_the_bucket(self, row):
        r = dict(row("A", "ALP", "2007-12-30", "Flood", 1), year="2008")
        e = normalize_event(r)
        assert e.occurred_on == date(2007, 12, 30)
        assert e.year == 2008

    @pytest.mark.parametrize("year", ["2007", "2021"])
    def test_reporting_year_outside_span_rejected(self, row, year):
        with pytest.raises(DataIntegrityError):
            normalize_event(dict(row("A", "ALP", "2010-01-01", "Flood", 1), year=year))

    def test_invalid_reporting_year_rejected(self, row):
        with pytest.raises(DataIntegrityError):
            normalize_event(dict(row("A", "ALP", "2010-01-01", "Flood", 1), year="soon"))

    def test_unrecognized_hazard_folds_to_unknown_with_warning(self, row, caplog):
        with caplog.at_level(logging.WARNING, logger="choreo.store"):
            e = normalize_event(row("A", "ALP", "2010-01-01", "Meteor", 1))
        assert e.hazard_type is HazardType.UNKNOWN
        assert "Meteor" in caplog.text


class TestEventStore:

    def test_events_sorted_chronologically(self, basic_store):
        days = [e.occurred_on for e in basic_store.events]
        assert days == sorted(days)

    def test_events_for_country_and_year(self, basic_store):
        alpha_2008 = basic_store.events_for("Alpha", 2008)
        assert [e.hazard_type for e in alpha_2008] == [HazardType.STORM, HazardType.FLOOD]
        assert basic_store.events_for("Alpha", 2009) == []
        assert basic_store.events_for("Nowhere", 2008) == []

    def test_categories_in_first_appearance_order(self, rich_store):
        assert rich_store.categories == ["Weather related", "Geophysical", "unknown"]

    def test_iso_code_lookup(self, basic_store):
        assert basic_store.iso_code_of("Beta") == "BET"
        assert basic_store.iso_code_of("Nowhere") is None

    def test_len(self, rich_store):
        assert len(rich_store) == 9


class TestIndices:

    def test_intersect_sorted(self):
        assert intersect_sorted([1, 3, 5, 7], [2, 3, 7, 9]) == [3, 7]
        assert intersect_sorted([], [1]) == []

    def test_country_year_ids(self, rich_store):
        idx = build_indices(rich_store.events)
        ids = country_year_ids(idx, "Alpha", 2010)
        assert [rich_store.events[i].people_displaced for i in ids] == [1000, 10]
        assert idx.years_sorted == [2008, 2009, 2010, 2012, 2020]

    def test_country_year_ids_follow_reporting_year(self, row):
        store = EventStore.from_rows([
            dict(row("Alpha", "ALP", "2007-12-30", "Flood", 100), year=2008),
            row("Alpha", "ALP", "2008-06-01", "Storm", 5),
        ])
        ids = country_year_ids(store.idx, "Alpha", 2008)
        assert [store.events[i].occurred_on for i in ids] == [date(2007, 12, 30), date(2008, 6, 1)]
        assert store.idx.years_sorted == [2008]
