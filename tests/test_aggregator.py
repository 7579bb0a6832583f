"""Tests for the window statistics."""

from datetime import datetime

import pytest

from tide.aggregator import DEFAULT_STATISTICS, aggregate
from tide.models import Record, Statistic, StatisticKind


def _recs(*mags):
    return [Record(i, datetime(2013, 7, 1 + i), m, "", "") for i, m in enumerate(mags)]


def test_default_statistics_over_window():
    result = aggregate(_recs(2, 3, 4, 4))

    assert result == {
        "Max_magnitude": 4.0,
        "Average_magnitude": 3.25,
        "Min_magnitude": 2.0,
        "tremor_count": 4,
        "Average_depth": 13.0,
    }


def test_empty_set_has_no_data_and_zero_count():
    result = aggregate([])

    assert result == {"tremor_count": 0}


def test_count_equals_set_size():
    for n in (1, 5, 17):
        assert aggregate(_recs(*([1] * n)))["tremor_count"] == n


def test_missing_values_are_ignored_but_counted():
    result = aggregate(_recs(2, None, 6))

    assert result["tremor_count"] == 3
    assert result["Average_magnitude"] == pytest.approx(4.0)
    assert result["Average_depth"] == 8.0


def test_all_values_missing_is_no_data():
    assert aggregate(_recs(None, None)) == {"tremor_count": 2}


def test_average_keeps_full_precision():
    result = aggregate(_recs(1, 2, 2))

    assert result["Average_magnitude"] == pytest.approx(5 / 3)


def test_custom_statistics():
    stats = [Statistic("mag", StatisticKind.SUM, "total")]

    assert aggregate(_recs(1, 2), stats) == {"total": 3.0}
    assert len(DEFAULT_STATISTICS) == 5
