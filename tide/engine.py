"""
Session engine (TIDE)
=====================

Wires the pieces of one map session together:

    records -> TimeRangeModel (slider) -> WindowChangeReactor -> DisplaySurface
                                   \\-> InMemoryProvider (statistics queries)

The CLI and the DOCX report talk to this object only.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple

from .config import TideConfig
from .display import DisplaySurface
from .feature_filter import TimeIndex
from .layer import LayerConfig
from .models import AggregateResult, Record, TimeRange
from .provider import DataProvider, InMemoryProvider
from .reactor import WindowChangeReactor
from .time_range import TimeRangeModel


@dataclass
class TIDE:
    """Time-windowed Incidence Display Engine.

    The engine stores:
    - records: every loaded case report
    - model: slider extent + current window
    - reactor: keeps display filter and statistics in sync with the window

    Window changes go through the model only; the reactor follows them.
    """
    records: List[Record]
    model: TimeRangeModel
    provider: DataProvider
    display: DisplaySurface = field(default_factory=DisplaySurface)
    layer: LayerConfig = field(default_factory=LayerConfig)
    config: TideConfig = field(default_factory=TideConfig)
    # Stores CLI commands (for reproducibility in reports)
    command_log: List[str] = field(default_factory=list)
    reactor: WindowChangeReactor = field(init=False)
    index: TimeIndex = field(init=False)

    def __post_init__(self) -> None:
        self.index = TimeIndex(self.records)
        self.reactor = WindowChangeReactor(
            self.model,
            self.provider,
            self.display,
            records=self.records,
            excluded_effect=self.config.excluded_effect,
            separator=self.config.separator,
        )
        self.reactor.attach()

    @classmethod
    def from_records(
        cls,
        records: List[Record],
        config: Optional[TideConfig] = None,
        provider: Optional[DataProvider] = None,
    ) -> "TIDE":
        config = config or TideConfig()
        model = TimeRangeModel.from_records(
            records,
            start=config.slider_start,
            window_days=config.window_days,
            stop_days=config.stop_days,
        )
        provider = provider or InMemoryProvider(records, latency=config.provider_latency)
        return cls(records=records, model=model, provider=provider, config=config)

    def start(self) -> str:
        """Push the initial window through the pipeline, like the slider's first change."""
        self.model.set_window(self.window.start, self.window.end)
        return self.display.text

    # ---------------- Window ----------------
    @property
    def window(self) -> TimeRange:
        return self.model.window

    def set_window(self, start: datetime, end: datetime) -> TimeRange:
        return self.model.set_window(start, end)

    def step(self, direction: int = 1) -> bool:
        return self.model.step(direction)

    # ---------------- Selections ----------------
    def records_in_window(self) -> List[Record]:
        """Records used for statistics: start <= time <= end."""
        return self.index.in_window(self.window)

    def report_scope(self) -> Tuple[List[Record], TimeRange, Optional[AggregateResult]]:
        """Records, window and statistics of the report currently on the panel.

        After a failed query the panel still shows an older window; the DOCX
        report follows the panel, not the slider.
        """
        window = self.reactor.last_window
        if window is None:
            return self.records_in_window(), self.window, None
        return self.index.in_window(window), window, self.reactor.last_result

    def visible_records(self) -> List[Record]:
        """Records drawn on the map: time <= end (older ones greyed out)."""
        return self.index.up_to(self.window.end)

    def record(self, record_id: int) -> Record:
        for r in self.records:
            if r.record_id == record_id:
                return r
        raise KeyError(f"No record with id {record_id}")

    @property
    def report_text(self) -> str:
        return self.display.text
