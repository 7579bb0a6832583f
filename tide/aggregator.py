"""
Aggregator (summary statistics over the window)
===============================================

Computes the fixed set of output statistics over one numeric field.

Rules:
- count is the number of records in the set,
- max / min / avg / sum ignore missing values,
- with no values at all, max / min / avg / sum are *absent* from the result
  ("no data"), never 0 or NaN.

Values keep full precision here; rounding is done when formatting.
"""

from __future__ import annotations
from typing import Iterable, List, Sequence

import pandas as pd

from .models import AggregateResult, Record, Statistic, StatisticKind

DEFAULT_FIELD = "mag"

# Output names are the ones the statistics panel has always used. Note that
# "Average_depth" holds the *sum* of cases (total cases in the slider range).
DEFAULT_STATISTICS: List[Statistic] = [
    Statistic(DEFAULT_FIELD, StatisticKind.MAX, "Max_magnitude"),
    Statistic(DEFAULT_FIELD, StatisticKind.AVERAGE, "Average_magnitude"),
    Statistic(DEFAULT_FIELD, StatisticKind.MIN, "Min_magnitude"),
    Statistic(DEFAULT_FIELD, StatisticKind.COUNT, "tremor_count"),
    Statistic(DEFAULT_FIELD, StatisticKind.SUM, "Average_depth"),
]

COUNT_FIELD = "tremor_count"

_PANDAS_AGG = {
    StatisticKind.MAX: "max",
    StatisticKind.MIN: "min",
    StatisticKind.AVERAGE: "mean",
    StatisticKind.SUM: "sum",
}


def _column(records: Iterable[Record], field: str) -> pd.Series:
    """Numeric column for `field`, missing values dropped."""
    values = [r.value(field) for r in records]
    return pd.to_numeric(pd.Series(values, dtype="object"), errors="coerce").dropna()


def aggregate(
    records: Sequence[Record],
    statistics: Sequence[Statistic] = DEFAULT_STATISTICS,
) -> AggregateResult:
    """Compute every statistic over `records`.

    Returns:
        outputName -> value. Missing keys mean "no data".
    """
    result: AggregateResult = {}
    columns = {}
    for stat in statistics:
        if stat.field not in columns:
            columns[stat.field] = _column(records, stat.field)
        col = columns[stat.field]

        if stat.kind == StatisticKind.COUNT:
            result[stat.output_name] = len(records)
            continue
        if col.empty:
            continue
        result[stat.output_name] = float(col.agg(_PANDAS_AGG[stat.kind]))
    return result
