"""Tests for loading case tables."""

from datetime import datetime

import pandas as pd
import pytest

from tide.config import TideConfig
from tide.engine import TIDE
from tide.loader import load_records, records_from_frame


def test_load_csv_with_epoch_milliseconds(tmp_path):
    path = tmp_path / "cases.csv"
    pd.DataFrame({
        "time": [1372118400000, 1380758400000],
        "mag": [2, 4],
        "place": ["Harris", "Bexar"],
        "title": ["Houston", "San Antonio"],
    }).to_csv(path, index=False)

    records = load_records(str(path))

    assert [r.timestamp for r in records] == [datetime(2013, 6, 25), datetime(2013, 10, 3)]
    assert records[1].magnitude == 4.0
    assert records[1].place == "Bexar"


def test_alternative_column_names_and_date_strings():
    df = pd.DataFrame({
        "Date": ["2013-07-01", "2013-07-02"],
        "Cases": [3, None],
        "County": ["Travis", "Dallas"],
    })

    records = records_from_frame(df)

    assert records[0].timestamp == datetime(2013, 7, 1)
    assert records[1].magnitude is None
    assert records[0].title == ""


def test_rows_without_time_are_skipped():
    df = pd.DataFrame({"time": ["2013-07-01", None], "mag": [1, 2]})

    records = records_from_frame(df)

    assert len(records) == 1
    assert records[0].record_id == 0


def test_missing_required_column():
    with pytest.raises(KeyError):
        records_from_frame(pd.DataFrame({"time": ["2013-07-01"]}))


def test_parsed_datetime_column_is_kept():
    df = pd.DataFrame({"time": pd.to_datetime(["2013-07-01", "2013-08-01"]), "mag": [2, 3]})

    records = records_from_frame(df)

    assert [r.timestamp for r in records] == [datetime(2013, 7, 1), datetime(2013, 8, 1)]


def test_load_xlsx_with_date_cells(tmp_path):
    pytest.importorskip("openpyxl")
    path = tmp_path / "cases.xlsx"
    pd.DataFrame({
        "time": [datetime(2013, 6, 25), datetime(2013, 10, 3)],
        "mag": [2, 4],
        "place": ["Harris", "Bexar"],
        "depth": [2.5, 4.0],
    }).to_excel(path, index=False)

    records = load_records(str(path))

    assert [r.timestamp for r in records] == [datetime(2013, 6, 25), datetime(2013, 10, 3)]
    assert records[1].depth == 4.0


def test_timezone_aware_strings_become_naive_utc(tmp_path):
    path = tmp_path / "cases.csv"
    pd.DataFrame({
        "time": ["2013-07-01T00:00:00Z", "2013-08-01T02:00:00+02:00"],
        "mag": [2, 3],
    }).to_csv(path, index=False)

    records = load_records(str(path))

    assert [r.timestamp for r in records] == [datetime(2013, 7, 1), datetime(2013, 8, 1)]
    assert all(r.timestamp.tzinfo is None for r in records)

    engine = TIDE.from_records(records, config=TideConfig())
    assert engine.start().startswith("2 incidences were reported between 6/25/2013 - 8/1/2013.")
