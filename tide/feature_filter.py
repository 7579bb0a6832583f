"""
Feature filter (display partition + time index)
===============================================

Two different windowings are used on every slider change:

1) Display filter (one-sided): records with `time <= window.end` stay on the
   map. Records older than `window.start` are still drawn but greyed out,
   leaving a "history trail" of cases that already happened.
2) Statistics filter (two-sided): only records inside [start, end] take part
   in the statistics. `TimeIndex` answers that with binary search over the
   sorted timestamps, the same idea as a year-range index.
"""

from __future__ import annotations
from bisect import bisect_left, bisect_right
from calendar import timegm
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Sequence

from .models import Record, TimeRange

ACTIVE = "active"
PAST = "past"
FUTURE = "future"

DEFAULT_EXCLUDED_EFFECT = "grayscale(20%) opacity(12%)"


def _epoch_ms(ts: datetime) -> int:
    if ts.tzinfo is not None:
        return int(ts.timestamp() * 1000)
    return timegm(ts.timetuple()) * 1000 + ts.microsecond // 1000


@dataclass(frozen=True)
class WindowPredicate:
    """Classifies records against one window.

    cutoff is window.end: anything later is in the future and hidden.
    """
    window: TimeRange

    @property
    def cutoff(self) -> datetime:
        return self.window.end

    def is_displayed(self, record: Record) -> bool:
        return record.timestamp <= self.cutoff

    def is_past(self, record: Record) -> bool:
        return record.timestamp < self.window.start

    def classify(self, record: Record) -> str:
        if record.timestamp > self.cutoff:
            return FUTURE
        if record.timestamp < self.window.start:
            return PAST
        return ACTIVE


@dataclass
class Partition:
    """Disjoint split of a record sequence, each list in input order."""
    active: List[Record] = field(default_factory=list)
    past: List[Record] = field(default_factory=list)
    future: List[Record] = field(default_factory=list)
    # input order of everything still drawn on the map (past + active)
    visible: List[Record] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.active) + len(self.past) + len(self.future)


def partition(predicate: WindowPredicate, records: Sequence[Record]) -> Partition:
    """Split records into active / past / future in a single pass."""
    out = Partition()
    buckets = {ACTIVE: out.active, PAST: out.past, FUTURE: out.future}
    for r in records:
        kind = predicate.classify(r)
        buckets[kind].append(r)
        if kind != FUTURE:
            out.visible.append(r)
    return out


def definition_expression(window: TimeRange, time_field: str = "time") -> str:
    """Display filter keeping records up to the window's end (epoch milliseconds)."""
    return f"{time_field} <= {_epoch_ms(window.end)}"


@dataclass(frozen=True)
class DisplayEffect:
    """Visual effect: records outside `window` get `excluded_effect` applied."""
    window: TimeRange
    excluded_effect: str = DEFAULT_EXCLUDED_EFFECT

    def applies_to(self, record: Record) -> bool:
        """True if the record is drawn de-emphasised."""
        return not self.window.contains(record.timestamp)


class TimeIndex:
    """Records sorted by timestamp, queried with bisect.

    Sorting is stable, so records sharing a timestamp keep their input order.
    """

    def __init__(self, records: Sequence[Record]) -> None:
        self.records: List[Record] = sorted(records, key=lambda r: r.timestamp)
        self.stamps: List[datetime] = [r.timestamp for r in self.records]

    def __len__(self) -> int:
        return len(self.records)

    def in_window(self, window: TimeRange) -> List[Record]:
        """Records with start <= timestamp <= end."""
        lo = bisect_left(self.stamps, window.start)
        hi = bisect_right(self.stamps, window.end)
        return self.records[lo:hi]

    def up_to(self, cutoff: datetime) -> List[Record]:
        """Records with timestamp <= cutoff."""
        return self.records[:bisect_right(self.stamps, cutoff)]
