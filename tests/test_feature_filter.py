"""Tests for the display partition, filter expression and time index."""

from datetime import datetime

from tide.feature_filter import (
    DisplayEffect,
    TimeIndex,
    WindowPredicate,
    definition_expression,
    partition,
)
from tide.models import Record, TimeRange


WINDOW = TimeRange(datetime(2013, 7, 1), datetime(2013, 9, 1))


def test_partition_is_disjoint_and_complete(records):
    p = partition(WindowPredicate(WINDOW), records)

    ids = [r.record_id for r in p.active + p.past + p.future]
    assert sorted(ids) == [r.record_id for r in records]
    assert len(set(ids)) == len(ids)
    assert len(p) == len(records)


def test_partition_buckets_preserve_input_order(records):
    p = partition(WindowPredicate(WINDOW), list(reversed(records)))

    assert [r.record_id for r in p.past] == [0]
    assert [r.record_id for r in p.active] == [2, 1]
    assert [r.record_id for r in p.future] == [5, 4, 3]
    # the history trail keeps past records on the map
    assert [r.record_id for r in p.visible] == [2, 1, 0]


def test_partition_of_empty_input():
    p = partition(WindowPredicate(WINDOW), [])

    assert p.active == [] and p.past == [] and p.future == []


def test_window_bounds_are_inclusive(records):
    window = TimeRange(datetime(2013, 6, 25), datetime(2013, 10, 3))
    p = partition(WindowPredicate(window), records)

    assert [r.record_id for r in p.active] == [0, 1, 2, 3]
    assert p.past == []


def test_predicate_display_rule(records):
    pred = WindowPredicate(WINDOW)

    assert pred.cutoff == WINDOW.end
    assert pred.is_displayed(records[0]) and pred.is_past(records[0])
    assert not pred.is_displayed(records[3])


def test_definition_expression_uses_epoch_milliseconds():
    window = TimeRange(datetime(2013, 6, 25), datetime(2013, 10, 3))

    assert definition_expression(window) == "time <= 1380758400000"


def test_display_effect_greys_out_records_outside_window(records):
    effect = DisplayEffect(WINDOW)

    assert effect.excluded_effect == "grayscale(20%) opacity(12%)"
    assert effect.applies_to(records[0])
    assert not effect.applies_to(records[1])


def test_time_index_window_and_cutoff(records):
    idx = TimeIndex(list(reversed(records)))

    assert [r.record_id for r in idx.in_window(WINDOW)] == [1, 2]
    assert [r.record_id for r in idx.up_to(datetime(2013, 8, 1))] == [0, 1, 2]
    assert idx.in_window(TimeRange(datetime(2015, 1, 1), datetime(2015, 2, 1))) == []


def test_time_index_keeps_ties_in_input_order():
    ts = datetime(2013, 7, 1)
    recs = [Record(i, ts, 1, "", "") for i in range(3)]

    assert [r.record_id for r in TimeIndex(recs).in_window(TimeRange(ts, ts))] == [0, 1, 2]
