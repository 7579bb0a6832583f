"""
TIDE Command Line Interface (CLI)
=================================

Interactive terminal program standing in for the map page's time slider:

    python -m tide.cli --data "path/to/cases.csv"

Each window change recomputes the display filter and the statistics panel,
exactly as dragging the slider does on the map.

The CLI DOES NOT modify the data file. It loads it once and works on the
in-memory records.
"""

from __future__ import annotations
import argparse, logging, shlex, time
from typing import List, Optional

from .config import TideConfig, parse_date
from .engine import TIDE
from .loader import load_records

logger = logging.getLogger(__name__)

HELP = """
Commands:
  help
  show [n]                         first n records drawn on the map (default 10)
  window <start> <end>             set the slider window (YYYY-MM-DD or M/D/YYYY)
  step [back]                      move the window by one stop (10 days)
  play [n]                         step forward n times (default: to the end)
  stats                            print the statistics panel
  filter                           print the display filter and window split
  legend
  popup <record id>
  report "<path.docx>"
  quit
"""


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the TIDE CLI.

    1) Load dataset
    2) Build the session (slider, provider, reactor)
    3) Start an interactive REPL
    """
    cfg = TideConfig.from_env()
    ap = argparse.ArgumentParser(prog="tide")
    ap.add_argument("--data", default=cfg.data_path, required=cfg.data_path is None,
                    help="Path to the case table (.csv or .xlsx)")
    ap.add_argument("--start", help="Slider start date (default 2013-06-25, 'none' = first record)")
    ap.add_argument("--window-days", type=int, default=cfg.window_days)
    ap.add_argument("--stop-days", type=int, default=cfg.stop_days)
    ap.add_argument("--html", action="store_true", help="Keep <br/> separators in the panel text")
    ap.add_argument("--log-level", default="WARNING")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg.data_path = args.data
    cfg.window_days = args.window_days
    cfg.stop_days = args.stop_days
    if args.start:
        cfg.slider_start = None if args.start.lower() == "none" else parse_date(args.start)
    if not args.html:
        cfg.separator = "\n"

    print("Loading dataset...")
    records = load_records(cfg.data_path)
    engine = TIDE.from_records(records, config=cfg)
    print(f"Loaded {len(records)} records. Type 'help' for commands.")
    print(engine.start())

    while True:
        try:
            line = input("tide> ")
        except EOFError:
            break
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.lower() in ("quit", "exit"):
            break
        if stripped.split()[0].lower() in ("window", "step", "play"):
            engine.command_log.append(stripped)
        try:
            handle(engine, stripped)
        except Exception as e:
            logger.debug("Command failed", exc_info=True)
            print(f"Error: {e}")


def handle(engine: TIDE, line: str) -> None:
    """Handle one CLI command line."""
    parts = shlex.split(line)
    cmd = parts[0].lower()

    if cmd == "help":
        print(HELP)
        return

    if cmd == "show":
        n = int(parts[1]) if len(parts) >= 2 else 10
        _print_rows(engine, engine.visible_records()[:n])
        return

    if cmd == "window":
        if len(parts) < 3:
            raise ValueError("usage: window <start> <end>")
        engine.set_window(parse_date(parts[1]), parse_date(parts[2]))
        print(engine.report_text)
        return

    if cmd == "step":
        direction = -1 if len(parts) >= 2 and parts[1].lower() == "back" else 1
        if not engine.step(direction):
            print("Window is already at the edge of the time extent.")
            return
        print(engine.report_text)
        return

    if cmd == "play":
        n = int(parts[1]) if len(parts) >= 2 else None
        steps = 0
        while (n is None or steps < n) and engine.step(1):
            steps += 1
            print(engine.report_text)
            print("")
            time.sleep(engine.config.play_rate_ms / 1000.0)
        print(f"Played {steps} steps.")
        return

    if cmd == "stats":
        print(engine.report_text or "No statistics yet.")
        return

    if cmd == "filter":
        r = engine.reactor
        print(f"Definition expression: {r.definition_expression}")
        print(f"Excluded effect: {r.excluded_effect}")
        p = r.partition
        print(f"active={len(p.active)} past={len(p.past)} future={len(p.future)}")
        return

    if cmd == "legend":
        for title, entries in engine.layer.legend():
            print(f"{title}: {', '.join(entries)}")
        return

    if cmd == "popup":
        rec = engine.record(int(parts[1]))
        title, rows = engine.layer.popup(rec)
        print(title)
        for label, value in rows:
            print(f"  {label}: {value}")
        return

    if cmd == "report":
        from .report import generate_docx_report, ReportConfig
        if len(parts) < 2:
            raise ValueError('usage: report "<path.docx>"')
        path = parts[1]
        cfg = ReportConfig(command_log=engine.command_log)
        records, window, result = engine.report_scope()
        generate_docx_report(
            records,
            window,
            result,
            path,
            config=cfg,
        )
        print(f"Report written to {path}")
        return

    print("Unknown command. Type 'help'.")


def _print_rows(engine: TIDE, rows) -> None:
    effect = engine.reactor.effect
    for r in rows:
        faded = " (past)" if effect is not None and effect.applies_to(r) else ""
        print(f"[{r.record_id}] {r.timestamp:%Y-%m-%d} | {r.place} | {r.title} | cases={r.magnitude}{faded}")


if __name__ == "__main__":
    main()
