"""
Time range model (slider state)
===============================

Holds the full selectable extent and the currently selected window.

- The extent is fixed once the data is known.
- The window starts at the extent's start and spans `window_days` (100 by
  default), clamped to the extent's end.
- Every change of the window is pushed synchronously to the subscribers
  (observer pattern). There is no queue: a subscriber sees each change once.

Stops (every `stop_days` across the extent) mirror the slider's tick marks;
`step()` moves the whole window by one stop, which is what "play" does.
"""

from __future__ import annotations
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Sequence
import logging

from .models import ConfigurationError, Record, TimeRange

logger = logging.getLogger(__name__)

WindowCallback = Callable[[TimeRange], None]

DEFAULT_WINDOW_DAYS = 100
DEFAULT_STOP_DAYS = 10


class TimeRangeModel:
    """Extent (read-only) + current window (read-write) with change notifications."""

    def __init__(
        self,
        extent: TimeRange,
        window_days: int = DEFAULT_WINDOW_DAYS,
        stop_days: int = DEFAULT_STOP_DAYS,
    ) -> None:
        if window_days < 0 or stop_days <= 0:
            raise ConfigurationError("window_days must be >= 0 and stop_days > 0")
        self._extent = extent
        self.stop_interval = timedelta(days=stop_days)
        end = min(extent.start + timedelta(days=window_days), extent.end)
        self._window = TimeRange(extent.start, end)
        self._subscribers: List[WindowCallback] = []

    @classmethod
    def from_records(
        cls,
        records: Sequence[Record],
        start: Optional[datetime] = None,
        **kwargs,
    ) -> "TimeRangeModel":
        """Build the extent from the data: [start or earliest record, latest record]."""
        if not records:
            raise ConfigurationError("Cannot derive a time extent from an empty dataset.")
        stamps = [r.timestamp for r in records]
        lo = start if start is not None else min(stamps)
        return cls(TimeRange(lo, max(stamps)), **kwargs)

    # ---------------- Properties ----------------
    @property
    def extent(self) -> TimeRange:
        return self._extent

    @property
    def window(self) -> TimeRange:
        return self._window

    @window.setter
    def window(self, value: TimeRange) -> None:
        self.set_window(value.start, value.end)

    # ---------------- Mutation ----------------
    def set_window(self, start: datetime, end: datetime) -> TimeRange:
        """Replace the current window and notify subscribers.

        Raises ConfigurationError when start > end or the window leaves the extent.
        """
        window = TimeRange(start, end)
        if not self._extent.covers(window):
            raise ConfigurationError(
                f"Window {start} - {end} is outside the extent "
                f"{self._extent.start} - {self._extent.end}"
            )
        self._window = window
        logger.debug(f"Window changed to {window.start} - {window.end}")
        self._notify()
        return window

    def step(self, direction: int = 1) -> bool:
        """Shift the window by one stop interval (forward for +1, back for -1).

        The shift is clamped to the extent. Returns False if the window is
        already against the extent edge in that direction.
        """
        w = self._window
        delta = self.stop_interval * (1 if direction >= 0 else -1)
        if direction >= 0:
            if w.end >= self._extent.end:
                return False
            delta = min(delta, self._extent.end - w.end)
        else:
            if w.start <= self._extent.start:
                return False
            delta = max(delta, self._extent.start - w.start)
        self.set_window(w.start + delta, w.end + delta)
        return True

    def stops(self) -> List[datetime]:
        """Tick positions from extent start to extent end, every stop interval."""
        out: List[datetime] = []
        t = self._extent.start
        while t <= self._extent.end:
            out.append(t)
            t += self.stop_interval
        return out

    # ---------------- Observers ----------------
    def subscribe(self, callback: WindowCallback) -> Callable[[], None]:
        """Register a window-change callback. Returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def _notify(self) -> None:
        for cb in list(self._subscribers):
            cb(self._window)
