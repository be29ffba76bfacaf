import numpy as np
import pandas as pd
import pytest

from nyc_congestion_pipelines.transform.encoding import (
    add_lag_features,
    add_one_hot,
    build_engineered_dataset,
    dummy_source_map,
    impute_mean,
    save_datasets,
)
from nyc_congestion_pipelines.transform.synthetic import build_integrated_dataset


def test_add_one_hot_creates_integer_indicators():
    df = pd.DataFrame({"Season": ["Winter", "Summer", "Winter"], "x": [1, 2, 3]})
    out = add_one_hot(df, ["Season"])
    assert out["Season_Winter"].tolist() == [1, 0, 1]
    assert out["Season_Summer"].tolist() == [0, 1, 0]
    assert out["Season_Winter"].dtype.kind == "i"
    assert "Season" in out.columns


def test_add_one_hot_unknown_column():
    with pytest.raises(KeyError):
        add_one_hot(pd.DataFrame({"a": [1]}), ["b"])


def test_dummy_source_map():
    mapping = dummy_source_map(["Hour", "Boro_Bronx", "Boro_Staten Island", "TimeOfDay_Night"], ["Boro", "TimeOfDay"])
    assert mapping == {
        "Hour": "Hour",
        "Boro_Bronx": "Boro",
        "Boro_Staten Island": "Boro",
        "TimeOfDay_Night": "TimeOfDay",
    }


def test_lag_is_per_group():
    df = pd.DataFrame({
        "Date": pd.to_datetime(["2023-01-01", "2023-01-02", "2023-01-03"] * 2),
        "Borough": ["A"] * 3 + ["B"] * 3,
        "Vol": [1, 2, 3, 10, 20, 30],
    })
    out = add_lag_features(df, group_col="Borough", target_col="Vol", date_col="Date")
    a = out[out["Borough"] == "A"].sort_values("Date")
    b = out[out["Borough"] == "B"].sort_values("Date")
    assert a["Vol_lag_1"].tolist()[1:] == [1, 2]
    assert b["Vol_lag_1"].tolist()[1:] == [10, 20]
    assert a["Vol_lag_1"].isna().iloc[0] and b["Vol_lag_1"].isna().iloc[0]


def test_impute_mean_leaves_no_missing():
    df = pd.DataFrame({"lag": [np.nan, 2.0, 4.0, np.nan], "other": [np.nan, 1, 1, 1]})
    out = impute_mean(df, ["lag"])
    assert out["lag"].notna().all()
    assert out["lag"].tolist() == [3.0, 2.0, 4.0, 3.0]
    assert out["other"].isna().sum() == 1


def test_impute_mean_all_missing_falls_back_to_zero():
    out = impute_mean(pd.DataFrame({"lag": [np.nan, np.nan]}), ["lag"])
    assert out["lag"].tolist() == [0.0, 0.0]


def test_build_engineered_dataset():
    integrated = build_integrated_dataset(boroughs=["Bronx", "Queens"])
    engineered = build_engineered_dataset(integrated)

    assert len(engineered) == len(integrated)
    assert engineered["Vol_lag_1"].notna().all()
    for col in ["Season_Winter", "Season_Spring", "Season_Summer", "Season_Fall", "Borough_Bronx", "Borough_Queens"]:
        assert col in engineered.columns
    assert (engineered.filter(like="Borough_").sum(axis=1) == 1).all()

    # first day of each borough is imputed with the column mean
    first = engineered[engineered["Date"] == engineered["Date"].min()]
    assert first["Vol_lag_1"].nunique() == 1


def test_save_datasets(tmp_path):
    integrated = build_integrated_dataset(boroughs=["Bronx"])
    engineered = build_engineered_dataset(integrated)
    paths = save_datasets(integrated, engineered, tmp_path / "processed")

    assert paths["integrated"].name == "integrated_dataset.csv"
    assert paths["engineered"].name == "engineered_dataset.csv"
    assert len(pd.read_csv(paths["engineered"])) == len(engineered)
