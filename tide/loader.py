"""
Dataset loader (table -> Record list)
=====================================

Reads a CSV or Excel table of case reports and converts each row into a
`Record` object.

Key ideas:
- We try multiple possible column names because exports vary
  ("time" / "date", "mag" / "cases", ...).
- `time` may be epoch milliseconds (as stored by the map layer) or a date string.
- Conversion helpers (_to_float/_to_str) handle blank cells.
- The loader returns immutable records; TIDE never edits the data file.
"""

from __future__ import annotations
from typing import List, Optional
import logging
import re

import pandas as pd

from .models import Record

logger = logging.getLogger(__name__)


def _to_float(x) -> Optional[float]:
    """Convert a cell to float, returning None if missing/invalid."""
    if pd.isna(x): return None
    try: return float(x)
    except (TypeError, ValueError): return None

def _to_str(x) -> str:
    if pd.isna(x): return ""
    return str(x).strip()

def _norm(s: str) -> str:
    return re.sub(r"[^a-z0-9]+", "", str(s).lower())

def _col(df: pd.DataFrame, *names: str) -> str:
    cols = list(df.columns)
    for n in names:
        if n in cols:
            return n
    norm_map = {_norm(c): c for c in cols}
    for n in names:
        nn = _norm(n)
        if nn in norm_map:
            return norm_map[nn]
    raise KeyError(f"Missing required column. Tried={names}. Available={cols}")

def _opt_col(df: pd.DataFrame, *names: str) -> Optional[str]:
    try:
        return _col(df, *names)
    except KeyError:
        return None

def parse_times(values: pd.Series) -> pd.Series:
    """Epoch milliseconds, parsed dates or date strings -> naive UTC datetimes."""
    if pd.api.types.is_datetime64_any_dtype(values):
        times = values
    elif pd.api.types.is_numeric_dtype(values):
        times = pd.to_datetime(values, unit="ms", errors="coerce")
    else:
        numeric = pd.to_numeric(values, errors="coerce")
        present = values.notna().sum()
        if present and numeric.notna().sum() == present:
            times = pd.to_datetime(numeric, unit="ms")
        else:
            times = pd.to_datetime(values, errors="coerce", utc=True)
    # offsets are folded into UTC; the slider works on naive timestamps
    if times.dt.tz is not None:
        times = times.dt.tz_convert(None)
    return times

def read_table(path: str) -> pd.DataFrame:
    if path.lower().endswith((".xlsx", ".xls")):
        df = pd.read_excel(path, engine="openpyxl")
    else:
        df = pd.read_csv(path)
    df.rename(columns={c: str(c).strip() for c in df.columns}, inplace=True)
    return df

def records_from_frame(df: pd.DataFrame) -> List[Record]:
    """Convert a DataFrame with time / mag / place / title columns to records.

    Rows without a timestamp are skipped.
    """
    time_col = _col(df, "time", "Date", "Report Date", "timestamp")
    mag_col = _col(df, "mag", "Cases", "Number of cases", "magnitude")
    place_col = _opt_col(df, "place", "County")
    title_col = _opt_col(df, "title", "Area", "Name")
    depth_col = _opt_col(df, "depth", "Intensity")

    times = parse_times(df[time_col])
    records: List[Record] = []
    skipped = 0
    for i, (ts, (_, row)) in enumerate(zip(times, df.iterrows())):
        if pd.isna(ts):
            skipped += 1
            continue
        records.append(Record(
            record_id=i,
            timestamp=ts.to_pydatetime(),
            magnitude=_to_float(row[mag_col]),
            place=_to_str(row[place_col]) if place_col else "",
            title=_to_str(row[title_col]) if title_col else "",
            depth=_to_float(row[depth_col]) if depth_col else None,
        ))
    if skipped:
        logger.warning(f"Skipped {skipped} rows without a timestamp")
    return records

def load_records(path: str) -> List[Record]:
    """Load case records from a .csv or .xlsx file."""
    df = read_table(path)
    records = records_from_frame(df)
    logger.info(f"Loaded {len(records)} records from {path}")
    return records
