from __future__ import annotations

"""
TIDE report formatting
----------------------
Two outputs live here:

1) The statistics panel text shown next to the map on every slider change:

       4 incidences were reported between 6/25/2013 - 10/3/2013.<br/>
       Max number of cases per day: 4<br/>
       ...

   `format_fragments` builds the ordered pieces and `render` joins them.

2) An optional DOCX report of the current window (python-docx + matplotlib),
   lazily importing its dependencies so the panel works without them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence
import math
import os
import tempfile
from collections import Counter

from .aggregator import COUNT_FIELD
from .models import AggregateResult, Record, TimeRange

# outputName -> label, in display order
STATS_FIELDS: Dict[str, str] = {
    "Max_magnitude": "Max number of cases per day",
    "Average_magnitude": "Average of cases per day",
    "Min_magnitude": "Min number of cases per day",
    "Average_depth": "TOTAL CASES (slider range)",
}

LINE_BREAK = "<br/>"


# -----------------------------
# Panel text
# -----------------------------

def format_date(ts: datetime) -> str:
    """US short date without zero padding, e.g. 6/25/2013."""
    return f"{ts.month}/{ts.day}/{ts.year}"


def round_half_up(value: float) -> int:
    """Round to zero decimals, halves away from zero (2.5 -> 3, 3.25 -> 3)."""
    return int(math.floor(abs(value) + 0.5)) * (1 if value >= 0 else -1)


def format_fragments(result: Optional[AggregateResult], window: TimeRange) -> List[str]:
    """Ordered text pieces for the statistics panel.

    The first piece is always the incidence sentence. Statistics with no data
    are left out.
    """
    result = result or {}
    date_range = f"{format_date(window.start)} - {format_date(window.end)}"
    count = result.get(COUNT_FIELD)
    if count is None:
        return [f"0 incidences were reported between {date_range}."]

    out = [f"{int(count)} incidences were reported between {date_range}."]
    for name, label in STATS_FIELDS.items():
        value = result.get(name)
        if value is None:
            continue
        out.append(f"{label}: {round_half_up(value)}")
    return out


def render(fragments: Sequence[str], separator: str = LINE_BREAK) -> str:
    """Join fragments with a line break between them."""
    return separator.join(fragments)


def format_report(result: Optional[AggregateResult], window: TimeRange, separator: str = LINE_BREAK) -> str:
    return render(format_fragments(result, window), separator)


# -----------------------------
# DOCX report
# -----------------------------

@dataclass
class ReportConfig:
    """High-level knobs to control how the DOCX report is written."""
    title: str = "TIDE Window Report"
    subtitle: str = "Reported Cases of Flu in Texas"
    dataset_name: str = "Flu case reports (time, cases, county, area)"
    data_credit: str = "data: MPortillo"

    # How many counties to show in the bar chart / table
    top_n: int = 10

    # How many rows to show in the preview table
    max_rows_preview: int = 15

    # Optional: list of CLI commands that led to the current window
    command_log: Optional[List[str]] = field(default=None)


def generate_docx_report(
    records: Sequence[Record],
    window: TimeRange,
    result: Optional[AggregateResult],
    out_path: str,
    *,
    config: Optional[ReportConfig] = None,
) -> str:
    """
    Write a DOCX report for the records inside `window`.

    `result` is the aggregate already shown on the panel; the same text goes
    into the report so both always agree.
    """
    config = config or ReportConfig()

    # Lazy imports: only required when "report" is used.
    try:
        from docx import Document
        from docx.shared import Pt, Inches
        from docx.enum.text import WD_ALIGN_PARAGRAPH
    except ImportError as e:
        raise ImportError(
            "Missing dependency: python-docx.\n"
            "Install it with: python -m pip install python-docx"
        ) from e

    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError as e:
        raise ImportError(
            "Missing dependency: matplotlib.\n"
            "Install with: python -m pip install matplotlib"
        ) from e

    if not records:
        raise ValueError("No records to report on (the window is empty).")

    # -----------------------------
    # 1) Per-day totals + per-county counts
    # -----------------------------
    per_day: Dict[datetime, float] = {}
    for r in records:
        day = datetime(r.timestamp.year, r.timestamp.month, r.timestamp.day)
        per_day[day] = per_day.get(day, 0.0) + (r.magnitude or 0.0)
    days = sorted(per_day)
    c_place = Counter(r.place for r in records if r.place)

    # -----------------------------
    # 2) Charts
    # -----------------------------
    tmpdir = tempfile.mkdtemp(prefix="tide_report_")
    chart_paths: List[tuple] = []

    def _save(filename: str) -> str:
        path = os.path.join(tmpdir, filename)
        plt.tight_layout()
        plt.savefig(path, dpi=200)
        plt.close()
        return path

    plt.figure()
    plt.bar(days, [per_day[d] for d in days], color="orange")
    plt.xticks(rotation=45, ha="right")
    plt.title("Cases per day in window")
    plt.ylabel("Cases")
    chart_paths.append(("Cases per day in window", _save("cases_per_day.png")))

    if len(c_place) > 1:
        top = c_place.most_common(config.top_n)
        plt.figure()
        plt.bar([k for k, _ in top], [v for _, v in top])
        plt.xticks(rotation=45, ha="right")
        plt.title(f"Top {config.top_n} counties by number of reports")
        plt.ylabel("Reports")
        chart_paths.append(("Top counties", _save("top_counties.png")))

    # -----------------------------
    # 3) Build DOCX
    # -----------------------------
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
    _kv("Dataset", config.dataset_name)
    _kv("Window", f"{format_date(window.start)} - {format_date(window.end)}")
    _kv("Records in window", str(len(records)))

    doc.add_heading("Summary", level=1)
    for line in format_fragments(result, window):
        doc.add_paragraph(line)

    if config.command_log:
        doc.add_heading("Command log (reproducibility)", level=1)
        for line in config.command_log:
            doc.add_paragraph(line, style="List Bullet")

    doc.add_heading("Visualizations", level=1)
    for title, path in chart_paths:
        doc.add_paragraph(title)
        doc.add_picture(path, width=Inches(6.5))

    doc.add_heading("Preview of first few records", level=1)
    t = doc.add_table(rows=1, cols=4)
    h = t.rows[0].cells
    h[0].text = "Date"
    h[1].text = "County"
    h[2].text = "Area"
    h[3].text = "Cases"
    for r in list(records)[:config.max_rows_preview]:
        row = t.add_row().cells
        row[0].text = format_date(r.timestamp)
        row[1].text = r.place
        row[2].text = r.title
        row[3].text = str(round_half_up(r.magnitude)) if r.magnitude is not None else ""

    from . import __version__ as tide_version
    doc.add_heading("Reproducibility footer", level=1)
    doc.add_paragraph(f"TIDE version: {tide_version}")
    doc.add_paragraph(f"Report generated at: {datetime.now().isoformat(timespec='seconds')}")
    doc.add_paragraph(config.data_credit)

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    doc.save(out_path)
    return out_path
