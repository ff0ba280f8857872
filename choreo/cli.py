"""
Choreo Command Line Interface (CLI)
===================================

The interactive terminal program, run like:

    python -m choreo.cli --events data/idmc_disaster.csv --regions data/regions.csv

It is the keyboard of the choreographic interface:
- argparse for the data files and starting ranking,
- a REPL loop mapping keys to navigator commands,
- a text print of the view model and the movement score row.

The CLI does not modify the data files. They are loaded once; everything
after that happens on in-memory aggregates.
"""

from __future__ import annotations
import argparse
import logging
import shlex
from typing import Optional

from .engine import ChoreoEngine
from .loader import load_events, load_geography
from .models import Granularity
from .navigation import Command, Navigator, Transition, ViewMode
from .score import score_table

HELP = """
Choreo commands
---------------

1) Navigate
   next | prev                      select the next / previous ranked place
   n | forward                      advance two years (past 2020: show all years)
   b | back                         go back two years
   f s w e v d m x c                pose: Flood Storm Wildfire Earthquake Volcano
                                    Drought Mass-movement eXtreme-temp Cold-winter
   pose "<Hazard type>"             same, by name
   0 | clear                        show every hazard layer again

2) Inspect
   view                             print the current view
   score                            print the whole movement score of the place
   top                              print the ranking and its hazard summary

3) Ranking
   explore <country|region|subregion> <max>

4) Report (DOCX)
   report "<out.docx>"

5) Exit
   quit
"""

# commands that do not change the session are not logged
_READ_ONLY = ("help", "view", "score", "top", "quit", "exit")


def main(argv: Optional[list] = None) -> None:
    """Entry point for the choreo CLI.

    1) Load events and geography
    2) Build the aggregates
    3) Start an interactive REPL on the top places
    """
    ap = argparse.ArgumentParser(description="Displacement choreography engine")
    ap.add_argument("--events", required=True, help="Path to the IDMC disaster export (CSV or XLSX)")
    ap.add_argument("--regions", required=True, help="Path to the ISO-3166 regions table")
    ap.add_argument("--granularity", default="country", choices=[g.value for g in Granularity])
    ap.add_argument("--top", type=int, default=10, help="Number of top places to navigate")
    ap.add_argument("--log-level", default="WARNING", type=str.upper,
                    choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], help="Logging level")
    args = ap.parse_args(argv)

    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    print("Loading dataset...")
    engine = ChoreoEngine.build(load_events(args.events), load_geography(args.regions),
                                dataset_path=args.events)
    nav = engine.navigate(Granularity(args.granularity), args.top)
    print(f"Loaded {len(engine.store)} events, {len(engine.countries)} countries. Type 'help' for commands.")
    _print_view(Transition(accepted=True, view=nav.view()))

    while True:
        try:
            line = input("choreo> ")
        except EOFError:
            break
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.lower() in ("quit", "exit"):
            break
        if stripped.split()[0].lower() not in _READ_ONLY:
            engine.command_log.append(stripped)
        try:
            nav = handle(engine, nav, stripped)
        except Exception as e:
            print(f"Error: {e}")


def handle(engine: ChoreoEngine, nav: Navigator, line: str) -> Navigator:
    """Handle one command line; returns the (possibly new) navigator."""
    parts = shlex.split(line)
    cmd = parts[0]
    low = cmd.lower()

    if low == "help":
        print(HELP)
        return nav

    # single-key poses
    hazard = engine.config.hazard_for_key(cmd)
    if hazard is not None and len(parts) == 1:
        _print_view(nav.dispatch(Command.FILTER_BY_HAZARD, hazard))
        return nav

    if low == "pose":
        if len(parts) < 2:
            raise ValueError('Usage: pose "<Hazard type>"')
        _print_view(nav.dispatch(Command.FILTER_BY_HAZARD, parts[1]))
        return nav

    simple = {
        "next": Command.SELECT_NEXT,
        "prev": Command.SELECT_PREVIOUS,
        "n": Command.ADVANCE,
        "forward": Command.ADVANCE,
        "b": Command.RETREAT,
        "back": Command.RETREAT,
        "0": Command.CLEAR_FILTER,
        "clear": Command.CLEAR_FILTER,
    }
    if low in simple:
        _print_view(nav.dispatch(simple[low]))
        return nav

    if low == "view":
        _print_view(Transition(accepted=True, view=nav.view()))
        return nav

    if low == "score":
        for entry in nav.score:
            for row in score_table(entry):
                print(row)
        return nav

    if low == "top":
        r = nav.ranking
        print(f"Top {len(r.top_places)} {r.granularity.value} by people displaced:")
        for i, p in enumerate(r.top_places):
            marker = ">" if i == nav.state.selected_place_index else " "
            print(f"{marker} {i + 1:>2}. {p.name:<32} {p.total_displaced:>14,}")
        print("Hazard types:")
        for a in r.top_hazard_aggregates:
            if a.frequency:
                print(f"    {a.hazard_type.value:<24} events={a.frequency:<6} displaced={a.total_displaced:,}")
        return nav

    if low == "explore":
        if len(parts) < 3:
            raise ValueError("Usage: explore <country|region|subregion> <max>")
        nav = engine.navigate(Granularity(parts[1].lower()), int(parts[2]))
        print(f"Exploring top {len(nav.ranking.top_places)} {nav.ranking.granularity.value}.")
        _print_view(Transition(accepted=True, view=nav.view()))
        return nav

    if low == "report":
        # report "<path.docx>"
        from .report import DatasetCitation, ReportConfig, generate_docx_report
        if len(parts) < 2:
            raise ValueError('Usage: report "out.docx"')
        import os
        cfg = ReportConfig(
            citation=DatasetCitation(file_name=os.path.basename(engine.dataset_path) if engine.dataset_path else None),
            command_log=engine.command_log,
        )
        generate_docx_report(nav.ranking, parts[1], config=cfg, domain=engine.config)
        print(f"Report written to {parts[1]}")
        return nav

    print("Unknown command. Type 'help'.")
    return nav


def _print_view(t: Transition) -> None:
    v = t.view
    if not t.accepted:
        print(f"Neutral ({t.reason})")
        return
    years = f"{v.span[0]}-{v.span[1]}"
    print(f"[{v.label}] {years}" + (f"  pose: {v.active_hazard.value}" if v.active_hazard else ""))
    if v.mode is ViewMode.ALL:
        print("  all years of the score are shown")
    for h, points in v.layers.items():
        total = sum(d for _, d in points)
        print(f"  {h.value:<24} {total:>14,}  {v.colors.get(h, '')}")
    for row in score_table(v.score_row):
        print(row)


if __name__ == "__main__":
    main()
