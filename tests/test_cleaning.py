import numpy as np
import pandas as pd
import pytest

from nyc_congestion_pipelines.transform.cleaning import (
    build_traffic_datetime,
    cleanup_duplicate_columns,
    drop_missing_target,
    parse_month_name,
    standardize_traffic_datetime,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("January 2021", "2021-01-01"),
        ("Sep 2022", "2022-09-01"),
        ("2020-07", "2020-07-01"),
        ("  March 2019 ", "2019-03-01"),
    ],
)
def test_parse_month_name(raw, expected):
    assert parse_month_name(raw) == pd.Timestamp(expected)


@pytest.mark.parametrize("raw", [None, np.nan, "", "nan", "not a month", "Smarch 2021"])
def test_parse_month_name_invalid(raw):
    assert pd.isna(parse_month_name(raw))


def test_build_traffic_datetime_marks_invalid():
    df = pd.DataFrame({
        "Yr": [2023, 2023, 2023, None],
        "M": [5, 13, 2, 1],
        "D": [17, 1, 30, 1],
        "HH": [8, 0, 0, 0],
        "MM": [45, 0, 0, 0],
    })
    out = build_traffic_datetime(df)
    assert out.iloc[0] == pd.Timestamp("2023-05-17 08:45")
    assert out.iloc[1:].isna().all()


def test_standardize_traffic_datetime_drops_bad_rows():
    df = pd.DataFrame({
        "Yr": [2023, 2023],
        "M": [5, 13],
        "D": [17, 1],
        "HH": [8, 0],
        "MM": [0, 0],
        "Vol": [10, 20],
    })
    out = standardize_traffic_datetime(df)
    assert len(out) == 1
    assert out["Vol"].tolist() == [10]


def test_drop_missing_target():
    df = pd.DataFrame({"Vol": [1, None, "x", 4]})
    out = drop_missing_target(df)
    assert out["Vol"].tolist() == [1.0, 4.0]


def test_drop_missing_target_requires_column():
    with pytest.raises(KeyError):
        drop_missing_target(pd.DataFrame({"a": [1]}))


def test_cleanup_duplicate_columns():
    df = pd.DataFrame([[1, 2, 3]], columns=["a", "b", "a"])
    out = cleanup_duplicate_columns(df)
    assert list(out.columns) == ["a", "b"]
    assert out["a"].tolist() == [1]
