"""Tests for the REPL command handler."""

import pytest

from choreo.cli import handle, main
from choreo.config import HazardType
from choreo.models import Granularity


@pytest.fixture
def nav(rich_engine):
    return rich_engine.navigate(Granularity.COUNTRY, 10)


class TestHandle:

    def test_pose_key(self, rich_engine, nav, capsys):
        handle(rich_engine, nav, "f")
        assert nav.state.visible_hazards == (HazardType.FLOOD,)
        assert "pose: Flood" in capsys.readouterr().out

    def test_rejected_pose_prints_neutral(self, rich_engine, nav, capsys):
        handle(rich_engine, nav, "e")
        assert "Neutral" in capsys.readouterr().out
        assert nav.state.active_hazard_filter is None

    def test_pose_by_name(self, rich_engine, nav):
        handle(rich_engine, nav, 'pose "Storm"')
        assert nav.state.active_hazard_filter is HazardType.STORM

    def test_navigation_keys(self, rich_engine, nav):
        handle(rich_engine, nav, "n")
        assert nav.state.year_index == 2
        handle(rich_engine, nav, "b")
        assert nav.state.year_index == 0
        handle(rich_engine, nav, "next")
        assert nav.place.name == "Beta"
        handle(rich_engine, nav, "prev")
        assert nav.place.name == "Alpha"

    def test_clear(self, rich_engine, nav):
        handle(rich_engine, nav, "f")
        handle(rich_engine, nav, "0")
        assert nav.state.active_hazard_filter is None

    def test_explore_returns_new_navigator(self, rich_engine, nav, capsys):
        new_nav = handle(rich_engine, nav, "explore region 10")
        assert new_nav is not nav
        assert new_nav.ranking.granularity is Granularity.REGION
        assert len(new_nav.ranking.top_places) == 2
        assert "region: Europe" in capsys.readouterr().out

    def test_score_and_top(self, rich_engine, nav, capsys):
        handle(rich_engine, nav, "score")
        handle(rich_engine, nav, "top")
        out = capsys.readouterr().out
        assert "2020 Logarithmic Movement Score" in out
        assert "Alpha" in out and "Gamma" in out

    def test_unknown_command(self, rich_engine, nav, capsys):
        handle(rich_engine, nav, "dance")
        assert "Unknown command" in capsys.readouterr().out


class TestMain:

    def test_session(self, tmp_path, monkeypatch, capsys):
        events = tmp_path / "events.csv"
        regions = tmp_path / "regions.csv"
        events.write_text(
            "country,code,start,crisis_category,hazard_type,displaced\n"
            "Alpha,ALP,2008-05-01,Weather related,Flood,100\n",
            encoding="utf-8",
        )
        regions.write_text("alpha-3,region,sub-region\nALP,Europe,Western Europe\n", encoding="utf-8")
        commands = iter(["f", "n", "bogus", "quit"])
        monkeypatch.setattr("builtins.input", lambda prompt="": next(commands))
        main(["--events", str(events), "--regions", str(regions)])
        out = capsys.readouterr().out
        assert "Loaded 1 events, 1 countries" in out
        assert "pose: Flood" in out
        assert "Unknown command" in out

    def test_invalid_log_level_is_a_usage_error(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--events", str(tmp_path / "e.csv"), "--regions", str(tmp_path / "r.csv"),
                  "--log-level", "LOUD"])
        assert exc.value.code == 2
        assert "invalid choice" in capsys.readouterr().err

    def test_log_level_case_insensitive(self, tmp_path, monkeypatch, capsys):
        events = tmp_path / "events.csv"
        regions = tmp_path / "regions.csv"
        events.write_text("country,code,start,hazard_type,displaced\nAlpha,ALP,2008-05-01,Flood,100\n",
                          encoding="utf-8")
        regions.write_text("alpha-3,region,sub-region\nALP,Europe,Western Europe\n", encoding="utf-8")
        monkeypatch.setattr("builtins.input", lambda prompt="": "quit")
        main(["--events", str(events), "--regions", str(regions), "--log-level", "debug"])
        assert "Loaded 1 events" in capsys.readouterr().out
