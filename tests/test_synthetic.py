import numpy as np
import pandas as pd
import pytest

from nyc_congestion_pipelines.transform.synthetic import build_integrated_dataset, seasonal_temperature


def test_same_seed_is_byte_identical():
    a = build_integrated_dataset(year=2023, seed=7).to_csv(index=False)
    b = build_integrated_dataset(year=2023, seed=7).to_csv(index=False)
    assert a == b


def test_different_seed_differs():
    a = build_integrated_dataset(seed=1)
    b = build_integrated_dataset(seed=2)
    assert not a["Vol"].equals(b["Vol"])


def test_one_row_per_date_and_borough():
    df = build_integrated_dataset(year=2023, boroughs=["Bronx", "Queens"])
    assert len(df) == 365 * 2
    assert not df.duplicated(subset=["Date", "Borough"]).any()
    assert df["Date"].min() == pd.Timestamp("2023-01-01")
    assert df["Date"].max() == pd.Timestamp("2023-12-31")


def test_leap_year_grid():
    df = build_integrated_dataset(year=2024, boroughs=["Bronx"])
    assert len(df) == 366


def test_distributions_follow_weekend_and_season():
    df = build_integrated_dataset(seed=42)

    weekday = df.loc[df["IsWeekend"] == 0, "Vol"]
    weekend = df.loc[df["IsWeekend"] == 1, "Vol"]
    assert weekday.mean() == pytest.approx(550, abs=20)
    assert weekend.mean() == pytest.approx(400, abs=20)

    assert (df["Rainfall"] >= 0).all()
    assert (df["Vol"] >= 0).all()

    by_season = df.groupby("Season")["Temperature"].mean()
    assert by_season["Summer"] > by_season["Spring"] > by_season["Winter"]


def test_weekend_flag_matches_day_of_week():
    df = build_integrated_dataset()
    assert (df["IsWeekend"] == (df["DayOfWeek"] >= 5).astype(int)).all()


def test_seasonal_curve_peaks_in_summer():
    doy = np.arange(1, 366)
    curve = seasonal_temperature(doy)
    assert 180 <= doy[curve.argmax()] <= 210
    assert curve.min() < curve.max()


def test_requires_borough():
    with pytest.raises(ValueError):
        build_integrated_dataset(boroughs=[])
