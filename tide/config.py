"""
Configuration
=============

Defaults match the original map: the slider starts on 2013-06-25, shows a
100-day window, ticks every 10 days and plays at 500 ms per step.

Every value can be overridden with a `TIDE_*` environment variable (see
`TideConfig.from_env`) or a CLI flag.
"""

from __future__ import annotations
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Mapping, Optional
import os

from .feature_filter import DEFAULT_EXCLUDED_EFFECT
from .models import ConfigurationError
from .report import LINE_BREAK

ENV_PREFIX = "TIDE_"


@dataclass
class TideConfig:
    """High-level knobs for a TIDE session."""
    data_path: Optional[str] = None

    # Slider
    slider_start: Optional[datetime] = datetime(2013, 6, 25)
    window_days: int = 100
    stop_days: int = 10
    play_rate_ms: int = 500

    # Display
    excluded_effect: str = DEFAULT_EXCLUDED_EFFECT
    separator: str = LINE_BREAK

    # Simulated round trip of the in-memory provider, in seconds
    provider_latency: float = 0.0

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TideConfig":
        """Build a config from defaults overridden by TIDE_* variables.

        Example: TIDE_WINDOW_DAYS=30 or TIDE_SLIDER_START=2014-01-01.
        TIDE_SLIDER_START=none starts the slider at the earliest record.
        """
        env = os.environ if environ is None else environ
        cfg = cls()
        for f in fields(cls):
            raw = env.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            setattr(cfg, f.name, _coerce(f.name, getattr(cfg, f.name), raw))
        return cfg


def parse_date(text: str) -> datetime:
    """Accepts YYYY-MM-DD or M/D/YYYY."""
    for fmt in ("%Y-%m-%d", "%m/%d/%Y", "%Y-%m-%dT%H:%M:%S"):
        try:
            return datetime.strptime(text.strip(), fmt)
        except ValueError:
            continue
    raise ConfigurationError(f"Unrecognised date: {text!r} (use YYYY-MM-DD or M/D/YYYY)")


def _coerce(name: str, current, raw: str):
    if name == "slider_start":
        return None if raw.strip().lower() in ("", "none") else parse_date(raw)
    if name == "data_path":
        return raw
    try:
        if isinstance(current, bool):
            return raw.strip().lower() in ("1", "true", "yes")
        if isinstance(current, int):
            return int(raw)
        if isinstance(current, float):
            return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"Invalid value for {ENV_PREFIX}{name.upper()}: {raw!r}") from e
    return raw
