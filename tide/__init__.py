"""
TIDE package
============

This package contains the Time-windowed Incidence Display Engine (TIDE).

- The CLI entry point is in `tide/cli.py`.
- The slider model is in `tide/time_range.py`; the window-change pipeline
  (filter, statistics, panel text) is in `tide/reactor.py`.
- Dataset loading is in `tide/loader.py`.
"""

__version__ = '0.1.0'
