"""Tests for the statistics panel text."""

from datetime import datetime

from tide.models import TimeRange
from tide.report import format_date, format_fragments, format_report, render, round_half_up

WINDOW = TimeRange(datetime(2013, 6, 25), datetime(2013, 10, 3))

FULL = {
    "Max_magnitude": 4.0,
    "Average_magnitude": 3.25,
    "Min_magnitude": 2.0,
    "tremor_count": 4,
    "Average_depth": 13.0,
}


def test_format_date_has_no_padding():
    assert format_date(datetime(2013, 6, 5)) == "6/5/2013"
    assert format_date(datetime(2013, 10, 3)) == "10/3/2013"


def test_full_report():
    assert format_report(FULL, WINDOW) == (
        "4 incidences were reported between 6/25/2013 - 10/3/2013.<br/>"
        "Max number of cases per day: 4<br/>"
        "Average of cases per day: 3<br/>"
        "Min number of cases per day: 2<br/>"
        "TOTAL CASES (slider range): 13"
    )


def test_missing_count_gives_zero_incidence_sentence():
    assert format_fragments({}, WINDOW) == [
        "0 incidences were reported between 6/25/2013 - 10/3/2013."
    ]
    assert format_fragments(None, WINDOW) == format_fragments({}, WINDOW)


def test_statistics_without_data_are_omitted():
    fragments = format_fragments({"tremor_count": 0}, WINDOW)

    assert fragments == ["0 incidences were reported between 6/25/2013 - 10/3/2013."]


def test_fragments_follow_declared_order():
    result = {"Average_depth": 9.0, "Min_magnitude": 1.0, "tremor_count": 3, "Max_magnitude": 5.0}

    assert format_fragments(result, WINDOW)[1:] == [
        "Max number of cases per day: 5",
        "Min number of cases per day: 1",
        "TOTAL CASES (slider range): 9",
    ]


def test_round_half_up():
    assert round_half_up(3.25) == 3
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(0.49) == 0


def test_render_separator():
    assert render(["a", "b"], separator="\n") == "a\nb"
    assert render(["a"]) == "a"
