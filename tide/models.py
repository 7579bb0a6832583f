"""
Data model (Record, TimeRange, Statistic)
=========================================

Each row of the case table is converted into a `Record` object.
Records are immutable (`frozen=True`) so that:
- the data provider owns them and nothing in TIDE can edit them, and
- filters and statistics operate by *selecting* records, never changing them.

`TimeRange` is used twice: for the full extent of the slider and for the
currently selected window.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, Optional


class ConfigurationError(ValueError):
    """Raised when a time range or window is invalid (start > end, out of extent)."""


class QueryFailure(RuntimeError):
    """Raised when the statistics round trip to the data provider fails."""


@dataclass(frozen=True)
class TimeRange:
    """A closed interval [start, end] of timestamps."""
    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ConfigurationError(f"start {self.start} is after end {self.end}")

    def contains(self, ts: datetime) -> bool:
        """Two-sided, inclusive membership test."""
        return self.start <= ts <= self.end

    def covers(self, other: "TimeRange") -> bool:
        return self.start <= other.start and other.end <= self.end

    @property
    def span(self) -> timedelta:
        return self.end - self.start

    @property
    def days(self) -> float:
        return self.span.total_seconds() / 86400.0


@dataclass(frozen=True)
class Record:
    """One geotagged case report.

    `magnitude` is the number of cases reported that day (the `mag` column of
    the source data). It is None when the cell was blank.
    """
    record_id: int
    timestamp: datetime
    magnitude: Optional[float]
    place: str
    title: str
    # intensity attribute driving the colour ramp; absent in many exports
    depth: Optional[float] = None

    def value(self, field: str) -> Optional[float]:
        """Return a numeric attribute by its source column name."""
        if field in ("mag", "magnitude", "cases"):
            return self.magnitude
        if field == "depth":
            return self.depth
        raise KeyError(f"Unknown numeric field: {field}")


class StatisticKind(str, Enum):
    MAX = "max"
    MIN = "min"
    AVERAGE = "avg"
    COUNT = "count"
    SUM = "sum"


@dataclass(frozen=True)
class Statistic:
    """Static definition of one output statistic (field + kind + output name)."""
    field: str
    kind: StatisticKind
    output_name: str


# outputName -> value. A missing key means "no data" for that statistic.
AggregateResult = Dict[str, float]
