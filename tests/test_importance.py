import pytest

from nyc_congestion_pipelines.models.importance import (
    build_importance_table,
    normalize_importance,
    top_k_features,
)
from nyc_congestion_pipelines.models.results import ModelResult


def _result(name, importance):
    return ModelResult(name=name, rmse=1.0, r2=0.5, mae=1.0, n_train=8, n_test=2, feature_importance=importance)


def test_normalize_max_is_one():
    out = normalize_importance({"a": 2.0, "b": 8.0, "c": 0.0})
    assert max(out.values()) == 1.0
    assert out == {"a": 0.25, "b": 1.0, "c": 0.0}


def test_normalize_all_zero():
    assert normalize_importance({"a": 0.0, "b": 0.0}) == {"a": 0.0, "b": 0.0}


def test_normalize_empty():
    assert normalize_importance({}) == {}


def test_missing_feature_counts_as_zero():
    results = [
        _result("linear", {"Hour": 4.0, "Boro": 2.0}),
        _result("forest", {"Hour": 0.5, "Boro_Bronx": 0.5}),
    ]
    table = build_importance_table(results)

    assert table.loc["Boro", "forest"] == 0.0
    assert table.loc["Boro_Bronx", "linear"] == 0.0
    assert table.loc["Hour", "mean_importance"] == pytest.approx(1.0)
    assert table.loc["Boro", "mean_importance"] == pytest.approx(0.25)
    assert table.index[0] == "Hour"
    assert table["mean_importance"].is_monotonic_decreasing


def test_each_model_column_peaks_at_one():
    results = [
        _result("a", {"x": 3.0, "y": 1.0}),
        _result("b", {"x": 0.0, "y": 0.0}),
    ]
    table = build_importance_table(results)
    assert table["a"].max() == 1.0
    assert table["b"].max() == 0.0


def test_top_k():
    importance = {f"f{i}": float(i) for i in range(20)}
    table = build_importance_table([_result("m", importance)])
    top = top_k_features(table, 10)
    assert len(top) == 10
    assert top.index[0] == "f19"


def test_model_result_is_immutable():
    result = _result("m", {"x": 1.0})
    with pytest.raises(Exception):
        result.rmse = 3.0


def test_model_result_rejects_out_of_range_r2():
    with pytest.raises(ValueError):
        ModelResult(name="m", rmse=1.0, r2=1.5, mae=1.0, n_train=1, n_test=1, feature_importance={})
