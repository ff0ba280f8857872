"""Tests for the session configuration."""

import pytest

from choreo.config import (DEFAULT_CONFIG, GEOGRAPHY_OVERRIDES, HAZARD_COLORS, HAZARD_FOLDING,
                           DomainConfig, GeoEntry, HazardType)


class TestDomainConfig:

    def test_tables_are_read_only(self, config):
        with pytest.raises(TypeError):
            config.colors[HazardType.FLOOD] = "#000000"
        with pytest.raises(TypeError):
            config.folding["Flood"] = "Storm"
        with pytest.raises(TypeError):
            config.geography_overrides["Atlantis"] = GeoEntry("ATL", "Ocean", "Deep")
        with pytest.raises(TypeError):
            config.hazard_keys["z"] = HazardType.FLOOD
        assert config.color_of(HazardType.FLOOD) == "#285D82"
        assert config.canonical_hazard("Flood") is HazardType.FLOOD

    def test_module_tables_are_read_only(self):
        with pytest.raises(TypeError):
            HAZARD_COLORS[HazardType.FLOOD] = "#000000"
        with pytest.raises(TypeError):
            HAZARD_FOLDING["Flood"] = "Storm"
        with pytest.raises(TypeError):
            GEOGRAPHY_OVERRIDES["Atlantis"] = GeoEntry("ATL", "Ocean", "Deep")

    def test_caller_dict_is_detached(self):
        colors = {HazardType.FLOOD: "#111111"}
        cfg = DomainConfig(colors=colors)
        colors[HazardType.FLOOD] = "#222222"
        assert cfg.color_of(HazardType.FLOOD) == "#111111"

    def test_full_colors_read_only(self):
        full = DEFAULT_CONFIG.full_colors()
        assert set(full) == set(HazardType)
        with pytest.raises(TypeError):
            full[HazardType.STORM] = "#000000"

    def test_navigation_index_bounds(self):
        assert DEFAULT_CONFIG.last_year_index == 12
        assert DEFAULT_CONFIG.years[0] == 2008 and DEFAULT_CONFIG.years[-1] == 2020
