"""
Layer configuration (renderer, legend, popup)
=============================================

Declarative description of how case records are symbolised on the map.
Drawing is done by the mapping front end; this module only holds the
configuration and answers "what size / colour / popup would this record get".

Visual variables interpolate linearly between stops and clamp outside them,
the way map renderers treat size and colour ramps.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from .models import Record


@dataclass(frozen=True)
class SizeStop:
    value: float
    size: float  # points


@dataclass(frozen=True)
class ColorStop:
    value: float
    color: str  # "#RRGGBB"
    label: str


@dataclass(frozen=True)
class FieldInfo:
    field_name: str
    label: str
    visible: bool = True


@dataclass(frozen=True)
class TimeInfo:
    start_field: str = "time"
    interval_unit: str = "days"
    interval_value: int = 1


@dataclass
class LayerConfig:
    title: str = "Reported Cases of Flu in Texas"
    copyright: str = "data: MPortillo"
    time_info: TimeInfo = field(default_factory=TimeInfo)
    value_field: str = "mag"
    marker_color: str = "orange"
    size_title: str = "Number of cases per day"
    size_stops: List[SizeStop] = field(default_factory=lambda: [
        SizeStop(2, 5), SizeStop(3, 10), SizeStop(4, 15),
    ])
    color_title: str = "Intensity"
    color_field: str = "depth"
    color_stops: List[ColorStop] = field(default_factory=lambda: [
        ColorStop(2.5, "#F9C653", "low rate of cases per day"),
        ColorStop(3.5, "#F8864D", "medium rate of cases per day"),
        ColorStop(4, "#C53C06", "high rate of cases per day"),
    ])
    popup_title: str = "{title}"
    popup_fields: List[FieldInfo] = field(default_factory=lambda: [
        FieldInfo("place", "County"),
        FieldInfo("title", "Area"),
        FieldInfo("mag", "Cases"),
    ])

    # ---------------- Visual variables ----------------
    def size_for(self, value: Optional[float]) -> Optional[float]:
        if value is None or not self.size_stops:
            return None
        return _interp(value, [(s.value, s.size) for s in self.size_stops])

    def color_for(self, value: Optional[float]) -> Optional[str]:
        if value is None or not self.color_stops:
            return None
        stops = self.color_stops
        if value <= stops[0].value:
            return stops[0].color
        if value >= stops[-1].value:
            return stops[-1].color
        for lo, hi in zip(stops, stops[1:]):
            if lo.value <= value <= hi.value:
                t = (value - lo.value) / (hi.value - lo.value)
                return _mix(lo.color, hi.color, t)
        return stops[-1].color

    def symbol(self, record: Record) -> Tuple[Optional[float], Optional[str]]:
        """Marker (size, colour): size from `value_field`, colour from `color_field`."""
        return self.size_for(record.value(self.value_field)), self.color_for(record.value(self.color_field))

    def color_label(self, value: Optional[float]) -> Optional[str]:
        """Legend label of the stop nearest to `value`."""
        if value is None or not self.color_stops:
            return None
        return min(self.color_stops, key=lambda s: abs(s.value - value)).label

    def legend(self) -> List[Tuple[str, List[str]]]:
        """(title, entries) pairs as a legend widget would list them."""
        return [
            (self.size_title, [f"{s.value:g}" for s in self.size_stops]),
            (self.color_title, [s.label for s in self.color_stops]),
        ]

    # ---------------- Popup ----------------
    def popup(self, record: Record) -> Tuple[str, List[Tuple[str, str]]]:
        """Popup title and visible (label, value) rows for one record."""
        attrs = _attributes(record)
        title = self.popup_title.format(**attrs)
        rows = [
            (fi.label, attrs.get(fi.field_name, ""))
            for fi in self.popup_fields if fi.visible
        ]
        return title, rows


def _attributes(record: Record) -> dict:
    mag = record.magnitude
    return {
        "place": record.place,
        "title": record.title,
        "mag": "" if mag is None else f"{mag:g}",
        "depth": "" if record.depth is None else f"{record.depth:g}",
        "time": record.timestamp.isoformat(),
    }


def _interp(value: float, stops: List[Tuple[float, float]]) -> float:
    # np.interp clamps to the first/last stop outside the range
    xs, ys = zip(*stops)
    return float(np.interp(value, xs, ys))


def _mix(c0: str, c1: str, t: float) -> str:
    a = [int(c0[i:i + 2], 16) for i in (1, 3, 5)]
    b = [int(c1[i:i + 2], 16) for i in (1, 3, 5)]
    return "#" + "".join(f"{round(x + (y - x) * t):02X}" for x, y in zip(a, b))
