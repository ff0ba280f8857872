"""Tests for the DOCX score report."""

import pytest

from choreo.models import Granularity, RankingResult
from choreo.engine import ChoreoEngine
from choreo.report import DatasetCitation, ReportConfig, _text_rgb, generate_docx_report

docx = pytest.importorskip("docx")


def _all_text(path):
    doc = docx.Document(path)
    parts = [p.text for p in doc.paragraphs]
    for table in doc.tables:
        for r in table.rows:
            parts.extend(c.text for c in r.cells)
    return "\n".join(parts)


class TestGenerateDocxReport:

    def test_writes_score_book(self, rich_engine, tmp_path):
        ranking = rich_engine.explore(Granularity.COUNTRY, 2)
        out = tmp_path / "out" / "score.docx"
        cfg = ReportConfig(citation=DatasetCitation(file_name="idmc_disaster.csv"),
                           command_log=["explore country 2"])
        assert generate_docx_report(ranking, str(out), config=cfg) == str(out)
        text = _all_text(str(out))
        assert "country: Alpha" in text
        assert "country: Beta" in text
        assert "2010 Logarithmic Movement Score" in text
        assert "5 (1,010)" in text
        assert "idmc_disaster.csv" in text
        assert "explore country 2" in text

    def test_biennial_only(self, rich_engine, tmp_path):
        ranking = rich_engine.explore(Granularity.COUNTRY, 1)
        out = tmp_path / "biennial.docx"
        generate_docx_report(ranking, str(out), config=ReportConfig(biennial_only=True))
        text = _all_text(str(out))
        assert "2010 Logarithmic Movement Score" in text
        assert "2009 Logarithmic Movement Score" not in text

    def test_empty_ranking_rejected(self, tmp_path):
        with pytest.raises(ValueError):
            generate_docx_report(RankingResult(Granularity.REGION, (), (), ()), str(tmp_path / "x.docx"))

    def test_white_hazard_label_printed_dark(self, row, geography, tmp_path):
        engine = ChoreoEngine.build([
            row("Alpha", "ALP", "2010-01-05", "Severe winter condition", 40),
            row("Alpha", "ALP", "2010-06-01", "Flood", 400),
        ], geography)
        out = tmp_path / "winter.docx"
        generate_docx_report(engine.explore(Granularity.COUNTRY, 1), str(out))
        colors = {}
        for table in docx.Document(str(out)).tables:
            if table.rows[0].cells[0].text != "Hazard":
                continue
            for r in table.rows[1:]:
                runs = r.cells[0].paragraphs[0].runs
                if runs:
                    colors[runs[0].text] = str(runs[0].font.color.rgb)
        assert colors["Severe winter condition"] == "000000"
        assert colors["Flood"] == "285D82"


class TestTextColor:

    @pytest.mark.parametrize("color,expected", [
        ("#FFFFFF", "000000"),
        ("#fafafa", "000000"),
        ("#285D82", "285D82"),
        ("#93A7B5", "93A7B5"),
    ])
    def test_near_white_falls_back_to_black(self, color, expected):
        assert _text_rgb(color) == expected
