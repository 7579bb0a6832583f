"""
Data provider (asynchronous statistics queries)
===============================================

The reactor never computes statistics itself; it asks a provider:

    rows = await provider.query(statistics, window)

A provider returns a list of attribute mappings (one row for an aggregate
query, or an empty list when nothing matched). It signals failure either by
raising `QueryFailure` or by returning a row carrying an `error` key.

`InMemoryProvider` answers from records already loaded in memory. Its
`latency` argument stands in for the network round trip, so that several
queries can be in flight at once.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Protocol, Sequence
import asyncio
import logging

from .aggregator import aggregate
from .feature_filter import TimeIndex
from .models import QueryFailure, Record, Statistic, TimeRange

logger = logging.getLogger(__name__)

Rows = List[Dict[str, Any]]


class DataProvider(Protocol):
    async def query(self, statistics: Sequence[Statistic], window: TimeRange) -> Rows:
        ...


class InMemoryProvider:
    """Provider backed by a `TimeIndex` over loaded records."""

    def __init__(self, records: Sequence[Record], latency: float = 0.0) -> None:
        self.index = TimeIndex(records)
        self.latency = latency
        self.queries = 0

    async def query(self, statistics: Sequence[Statistic], window: TimeRange) -> Rows:
        self.queries += 1
        if self.latency:
            await asyncio.sleep(self.latency)
        selected = self.index.in_window(window)
        logger.debug(f"Statistics query over {len(selected)} records in {window.start} - {window.end}")
        if not selected:
            return []
        return [dict(aggregate(selected, statistics))]


def check_rows(rows: Optional[Rows]) -> Rows:
    """Turn an error payload into a QueryFailure; pass normal results through."""
    if rows is None:
        raise QueryFailure("Provider returned no response")
    for row in rows:
        if isinstance(row, dict) and row.get("error"):
            raise QueryFailure(str(row["error"]))
    return rows
