"""Shared fixtures: a small flu-case dataset around the 2013 slider start."""

from datetime import datetime

import pytest

from tide.models import Record, TimeRange


def make_record(record_id, ts, mag, place="Harris", title="Houston"):
    return Record(record_id=record_id, timestamp=ts, magnitude=mag, place=place, title=title)


@pytest.fixture
def extent():
    return TimeRange(datetime(2013, 6, 25), datetime(2020, 1, 1))


@pytest.fixture
def records():
    """Four reports in the first 100 days (mag 2, 3, 4, 4) plus two later ones."""
    return [
        make_record(0, datetime(2013, 6, 25), 2, "Harris", "Houston"),
        make_record(1, datetime(2013, 7, 10), 3, "Dallas", "Dallas"),
        make_record(2, datetime(2013, 8, 1), 4, "Travis", "Austin"),
        make_record(3, datetime(2013, 10, 3), 4, "Bexar", "San Antonio"),
        make_record(4, datetime(2014, 3, 1), 5, "Harris", "Pasadena"),
        make_record(5, datetime(2020, 1, 1), 1, "El Paso", "El Paso"),
    ]
