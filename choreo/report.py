from __future__ import annotations

"""
Choreo score report
-------------------
This module writes a DOCX "score book" for a ranking: one section per ranked
place with its yearly movement score (hazard, repetitions, steps), preceded
by the ranking summary and the dataset citation.

Design goals:
- Keep choreo usable without python-docx (lazy import, only on `report`).
- Print the score the way the dancer reads it: repetitions with frequency in
  brackets, steps with people displaced in brackets.
"""

from dataclasses import dataclass, field
from datetime import datetime
import logging
import os
from typing import Callable, List, Optional

from .config import DEFAULT_CONFIG, DomainConfig
from .models import RankingResult, Score
from .score import compute_score

logger = logging.getLogger(__name__)


def _text_rgb(color: str) -> str:
    """Hex colour usable as text on a white page; near-white falls back to black."""
    hex6 = color.lstrip("#").upper()
    r, g, b = (int(hex6[i:i + 2], 16) for i in (0, 2, 4))
    # relative luminance (ITU-R BT.709 weights)
    if 0.2126 * r + 0.7152 * g + 0.0722 * b > 230:
        return "000000"
    return hex6


# -----------------------------
# Configuration / citation types
# -----------------------------

@dataclass
class DatasetCitation:
    """Minimal dataset citation metadata for the DOCX report."""
    database_name: str = "Global Internal Displacement Database (GIDD), disaster displacements"
    institutional_author: str = "Internal Displacement Monitoring Centre (IDMC)"
    location: str = "Geneva, Switzerland"
    website: str = "https://www.internal-displacement.org/database"
    file_name: Optional[str] = None
    file_note: Optional[str] = "Disaster events export, 2008-2020."


@dataclass
class ReportConfig:
    """High-level knobs to control how the report is written."""
    title: str = "Displacement Choreography"
    subtitle: str = "Logarithmic movement score"
    citation: DatasetCitation = field(default_factory=DatasetCitation)

    # Only every `year_step`-th year is danced; False prints all 13 years
    biennial_only: bool = False

    # Optional: list of CLI commands used to reach this ranking
    command_log: Optional[List[str]] = None


def generate_docx_report(
    ranking: RankingResult,
    out_path: str,
    *,
    config: Optional[ReportConfig] = None,
    domain: DomainConfig = DEFAULT_CONFIG,
    scorer: Callable = compute_score,
) -> str:
    """Write the score book for every place of `ranking` to `out_path`."""
    config = config or ReportConfig()

    # Lazy import: only required when "report" is used.
    try:
        from docx import Document
        from docx.enum.text import WD_ALIGN_PARAGRAPH
        from docx.shared import Pt, RGBColor
    except ImportError as e:
        raise ImportError(
            "Missing dependency: python-docx.\n"
            "Install it with: python -m pip install python-docx"
        ) from e

    if not ranking.top_places:
        raise ValueError("No places to report on (ranking is empty).")

    doc = Document()
    style = doc.styles["Normal"]
    style.font.name = "Calibri"
    style.font.size = Pt(11)

    def _center_title(text: str, size: int, bold: bool = False, italic: bool = False) -> None:
        p = doc.add_paragraph()
        r = p.add_run(text)
        r.bold = bold
        r.italic = italic
        r.font.size = Pt(size)
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER

    def _kv(key: str, value: str) -> None:
        p = doc.add_paragraph()
        r = p.add_run(f"{key}: ")
        r.bold = True
        p.add_run(value)

    _center_title(config.title, 22, bold=True)
    _center_title(config.subtitle, 12, italic=True)

    doc.add_paragraph("")
    _kv("Granularity", ranking.granularity.value)
    _kv("Places", str(len(ranking.top_places)))
    _kv("Years", f"{domain.first_year} to {domain.last_year}")

    doc.add_heading("Dataset citation", level=1)
    cit = config.citation
    if cit.file_name:
        doc.add_paragraph(f"Data file used: {cit.file_name}")
    if cit.file_note:
        doc.add_paragraph(f"File note: {cit.file_note}")
    doc.add_paragraph(f"{cit.institutional_author}. {cit.database_name}. {cit.location}. {cit.website}.")

    if config.command_log:
        doc.add_heading("Command log (reproducibility)", level=1)
        for line in config.command_log:
            doc.add_paragraph(line, style="List Bullet")

    # Ranking summary
    doc.add_heading(f"Top {len(ranking.top_places)} by people displaced", level=1)
    t = doc.add_table(rows=1, cols=3)
    h = t.rows[0].cells
    h[0].text = "#"
    h[1].text = ranking.granularity.value.capitalize()
    h[2].text = "Displaced"
    for i, p in enumerate(ranking.top_places, start=1):
        r = t.add_row().cells
        r[0].text = str(i)
        r[1].text = p.name
        r[2].text = f"{p.total_displaced:,}"

    doc.add_paragraph("")
    doc.add_paragraph("Hazard types across these places (by number of events):")
    t2 = doc.add_table(rows=1, cols=3)
    h = t2.rows[0].cells
    h[0].text = "Hazard type"
    h[1].text = "Events"
    h[2].text = "Displaced"
    for agg in ranking.top_hazard_aggregates:
        if agg.frequency == 0:
            continue
        r = t2.add_row().cells
        r[0].text = agg.hazard_type.value
        r[1].text = f"{agg.frequency:,}"
        r[2].text = f"{agg.total_displaced:,}"

    doc.add_paragraph("")
    doc.add_paragraph("Crisis categories across these places:")
    t3 = doc.add_table(rows=1, cols=3)
    h = t3.rows[0].cells
    h[0].text = "Category"
    h[1].text = "Events"
    h[2].text = "Displaced"
    for agg in ranking.top_category_aggregates:
        if agg.frequency == 0:
            continue
        r = t3.add_row().cells
        r[0].text = agg.category
        r[1].text = f"{agg.frequency:,}"
        r[2].text = f"{agg.total_displaced:,}"

    # One score per place
    for place in ranking.top_places:
        score: Score = scorer(place, domain)
        doc.add_page_break()
        doc.add_heading(place.label, level=1)
        _kv("People displaced", f"{place.total_displaced:,}")
        for i, entry in enumerate(score):
            if config.biennial_only and i % domain.year_step:
                continue
            doc.add_heading(f"{entry.year} Logarithmic Movement Score", level=2)
            if not entry.disasters:
                doc.add_paragraph("No displacement recorded.")
                continue
            st = doc.add_table(rows=1, cols=3)
            h = st.rows[0].cells
            h[0].text = "Hazard"
            h[1].text = "Repetitions (events)"
            h[2].text = "Steps (displaced)"
            for d in entry.disasters:
                r = st.add_row().cells
                run = r[0].paragraphs[0].add_run(d.hazard_type.value)
                run.font.color.rgb = RGBColor.from_string(_text_rgb(domain.color_of(d.hazard_type)))
                r[1].text = f"{d.repetitions} ({d.frequency:,})"
                r[2].text = f"{d.steps} ({d.total_displaced:,})"

    # Reproducibility footer
    doc.add_page_break()
    doc.add_heading("Reproducibility footer", level=1)
    try:
        from . import __version__ as choreo_version
    except ImportError:
        choreo_version = "unknown"
    doc.add_paragraph(f"choreo version: {choreo_version}")
    doc.add_paragraph(f"Report generated at: {datetime.now().isoformat(timespec='seconds')}")
    doc.add_paragraph("Steps: log scale of people displaced, domain [1, most displaced in a year], range 1-5.")
    doc.add_paragraph("Repetitions: log scale of event count, domain [1, most events of one hazard in a year], range 1-5.")

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    doc.save(out_path)
    logger.info("Wrote score report for %d places to %s", len(ranking.top_places), out_path)
    return out_path
