import numpy as np
import pandas as pd
import pytest
from sklearn.ensemble import RandomForestRegressor
from sklearn.linear_model import LinearRegression
from xgboost import XGBRegressor

from nyc_congestion_pipelines.models.explain import (
    compare_methods,
    compute_lime,
    compute_shap,
    importance_stability,
)
from nyc_congestion_pipelines.models.results import (
    ExplanationUnavailable,
    LimeExplanation,
    ShapExplanation,
)


@pytest.fixture
def regression_data():
    rng = np.random.default_rng(0)
    X = pd.DataFrame({
        "a": rng.normal(size=120),
        "b": rng.normal(size=120),
        "c": rng.uniform(0, 5, size=120),
    })
    y = 4 * X["a"] + 0.5 * X["c"] + rng.normal(scale=0.1, size=120)
    return X, y


@pytest.fixture
def forest(regression_data):
    X, y = regression_data
    return RandomForestRegressor(n_estimators=30, max_depth=5, random_state=0).fit(X.iloc[:100], y.iloc[:100])


def test_shap_on_tree_model(forest, regression_data):
    X, _ = regression_data
    result = compute_shap(forest, X.iloc[100:], "RandomForest", max_samples=10, seed=0)

    assert isinstance(result, ShapExplanation)
    assert result.available
    assert result.values.shape == (10, 3)
    mean_abs = result.mean_abs()
    assert max(mean_abs, key=mean_abs.get) == "a"


@pytest.fixture
def booster(regression_data):
    X, y = regression_data
    model = XGBRegressor(n_estimators=50, max_depth=3, learning_rate=0.1, random_state=0)
    return model.fit(X.iloc[:100], y.iloc[:100])


def test_shap_on_xgboost(booster, regression_data):
    X, _ = regression_data
    result = compute_shap(booster, X.iloc[100:], "XGBRegressor", seed=0)

    assert isinstance(result, ShapExplanation), getattr(result, "reason", None)
    assert result.values.shape == (20, 3)
    mean_abs = result.mean_abs()
    assert max(mean_abs, key=mean_abs.get) == "a"
    # additivity: base value + contributions reproduce the prediction
    preds = booster.predict(result.data)
    assert np.allclose(result.base_value + result.values.sum(axis=1), preds, atol=1e-3)


def test_lime_on_xgboost(booster, regression_data):
    X, _ = regression_data
    result = compute_lime(booster, X.iloc[:100], X.iloc[100:], "XGBRegressor", row_index=2, num_features=3, seed=0)

    assert isinstance(result, LimeExplanation), getattr(result, "reason", None)
    assert len(result.weights) == 3
    assert result.prediction == pytest.approx(float(booster.predict(X.iloc[[102]])[0]), rel=1e-5)


def test_shap_failure_returns_sentinel(regression_data):
    X, y = regression_data
    linear = LinearRegression().fit(X, y)
    result = compute_shap(linear, X, "LinearRegression")

    assert isinstance(result, ExplanationUnavailable)
    assert not result.available
    assert result.method == "shap"
    assert result.reason


def test_shap_empty_input_returns_sentinel(forest, regression_data):
    X, _ = regression_data
    result = compute_shap(forest, X.iloc[0:0])
    assert isinstance(result, ExplanationUnavailable)


def test_lime_on_tree_model(forest, regression_data):
    X, _ = regression_data
    result = compute_lime(forest, X.iloc[:100], X.iloc[100:], "RandomForest", row_index=0, num_features=3, seed=0)

    assert isinstance(result, LimeExplanation)
    assert len(result.weights) == 3
    assert result.prediction == pytest.approx(forest.predict(X.iloc[[100]])[0])


def test_lime_bad_row_returns_sentinel(forest, regression_data):
    X, _ = regression_data
    result = compute_lime(forest, X.iloc[:100], X.iloc[100:], "RandomForest", row_index=999)
    assert isinstance(result, ExplanationUnavailable)
    assert result.method == "lime"


def test_importance_stability(regression_data):
    X, y = regression_data

    def factory(seed):
        return RandomForestRegressor(n_estimators=10, random_state=seed)

    summary = importance_stability(X, y, n_runs=3, seed=0, model_factory=factory)

    assert list(summary.columns) == ["mean", "std", "min", "max", "mean_rank"]
    assert summary.index[0] == "a"
    assert summary.loc["a", "mean"] == pytest.approx(1.0)
    assert (summary["std"] >= 0).all()


def test_importance_stability_is_reproducible(regression_data):
    X, y = regression_data

    def factory(seed):
        return RandomForestRegressor(n_estimators=5, random_state=seed)

    a = importance_stability(X, y, n_runs=2, seed=3, model_factory=factory)
    b = importance_stability(X, y, n_runs=2, seed=3, model_factory=factory)
    pd.testing.assert_frame_equal(a, b)


def test_compare_methods_with_shap(forest, regression_data):
    X, y = regression_data
    shap_result = compute_shap(forest, X.iloc[100:], "RandomForest", seed=0)
    table, rank_corr = compare_methods(forest, X.iloc[100:], y.iloc[100:], shap_result, seed=0, n_repeats=3)

    assert list(table.columns) == ["built_in", "permutation", "shap"]
    assert (table.max() == 1.0).all()
    assert table.index[0] == "a"
    assert rank_corr.shape == (3, 3)


def test_compare_methods_omits_unavailable_shap(forest, regression_data):
    X, y = regression_data
    sentinel = ExplanationUnavailable(method="shap", model_name="RandomForest", reason="boom")
    table, _ = compare_methods(forest, X.iloc[100:], y.iloc[100:], sentinel, seed=0, n_repeats=2)
    assert list(table.columns) == ["built_in", "permutation"]
