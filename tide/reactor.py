"""
Window-change reactor
=====================

Glue between the slider and the statistics panel. On every window change it
runs, in order:

1) cutoff = window.end
2) rebuild the predicate (active: <= cutoff, past: < start, future: > cutoff)
3) update the display filter, the grey-out effect and the record partition
4) start the statistics query for the two-sided window [start, end]
5) when the answer arrives, format it and overwrite the display

Steps 1-4 happen synchronously inside the change callback. The query is an
asynchronous round trip, so several can be in flight at once. Every query
gets a sequence number; only the answer to the most recently *issued* query
is rendered, older ones are dropped when they arrive ("latest wins").

Failures of the round trip never reach the slider: they are logged and the
panel keeps the last good report.
"""

from __future__ import annotations
from typing import Callable, List, Optional, Sequence, Set
import asyncio
import logging

from .aggregator import DEFAULT_STATISTICS
from .display import DisplaySurface
from .feature_filter import (
    DEFAULT_EXCLUDED_EFFECT,
    DisplayEffect,
    Partition,
    WindowPredicate,
    definition_expression,
    partition,
)
from .models import AggregateResult, QueryFailure, Record, Statistic, TimeRange
from .provider import DataProvider, check_rows
from .report import LINE_BREAK, format_report
from .time_range import TimeRangeModel

logger = logging.getLogger(__name__)


class WindowChangeReactor:
    """Reacts to window changes of a `TimeRangeModel`.

    All collaborators are passed in: the model to watch, the provider to
    query, the surface to write to and the records drawn on the map.
    """

    def __init__(
        self,
        model: TimeRangeModel,
        provider: DataProvider,
        display: DisplaySurface,
        records: Sequence[Record] = (),
        statistics: Sequence[Statistic] = DEFAULT_STATISTICS,
        excluded_effect: str = DEFAULT_EXCLUDED_EFFECT,
        separator: str = LINE_BREAK,
    ) -> None:
        self.model = model
        self.provider = provider
        self.display = display
        self.records = list(records)
        self.statistics = list(statistics)
        self.excluded_effect = excluded_effect
        self.separator = separator

        # Display state derived from the latest window
        self.predicate: Optional[WindowPredicate] = None
        self.definition_expression: Optional[str] = None
        self.effect: Optional[DisplayEffect] = None
        self.partition: Partition = Partition()

        # Last rendered statistics and their window (None until the first successful query)
        self.last_result: Optional[AggregateResult] = None
        self.last_window: Optional[TimeRange] = None
        self.failures: List[BaseException] = []
        self.stale_dropped = 0

        self._seq = 0
        self._pending: Set[asyncio.Task] = set()
        self._unsubscribe: Optional[Callable[[], None]] = None

    # ---------------- Subscription ----------------
    def attach(self) -> None:
        """Subscribe to the model (once)."""
        if self._unsubscribe is None:
            self._unsubscribe = self.model.subscribe(self.on_window_change)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    @property
    def pending(self) -> Set[asyncio.Task]:
        return set(self._pending)

    @property
    def latest_seq(self) -> int:
        return self._seq

    # ---------------- Pipeline ----------------
    def on_window_change(self, window: TimeRange) -> Optional[asyncio.Task]:
        """Change callback. Returns the query task when an event loop is running.

        Without a running loop (e.g. a plain REPL) the query is run to
        completion before returning.
        """
        seq = self._begin(window)
        coro = self._query_and_render(seq, window)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(coro)
            return None
        task = loop.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def refresh(self) -> str:
        """Run the whole pipeline for the current window and wait for it."""
        window = self.model.window
        seq = self._begin(window)
        await self._query_and_render(seq, window)
        return self.display.text

    async def wait(self) -> None:
        """Wait for every query still in flight."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    def _begin(self, window: TimeRange) -> int:
        predicate = WindowPredicate(window)
        self.predicate = predicate
        self.definition_expression = definition_expression(window)
        self.effect = DisplayEffect(window, self.excluded_effect)
        self.partition = partition(predicate, self.records)
        self._seq += 1
        return self._seq

    def _is_current(self, seq: int, window: TimeRange) -> bool:
        return seq == self._seq and window == self.model.window

    async def _query_and_render(self, seq: int, window: TimeRange) -> None:
        try:
            rows = check_rows(await self.provider.query(self.statistics, window))
        except Exception as e:
            if not self._is_current(seq, window):
                logger.debug(f"Ignoring failure of superseded query #{seq}: {e}")
                return
            self.failures.append(e)
            kind = "Statistics query failed" if isinstance(e, QueryFailure) else "Statistics query raised"
            logger.warning(f"{kind} for {window.start} - {window.end}: {e}")
            return

        if not self._is_current(seq, window):
            self.stale_dropped += 1
            logger.debug(f"Dropping stale statistics #{seq} (latest is #{self._seq})")
            return

        result: AggregateResult = dict(rows[0]) if rows else {}
        self.last_result = result
        self.last_window = window
        self.display.write(format_report(result, window, self.separator))
