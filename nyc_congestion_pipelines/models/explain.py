# SHAP / LIME explanations plus stability and method-comparison studies
#
# Explanation failures come back as ExplanationUnavailable so downstream code
# can tell "not computed" apart from "zero importance".

from typing import Callable, Dict, Optional, Tuple

import numpy as np
import pandas as pd
import shap
from lime.lime_tabular import LimeTabularExplainer
from rich.console import Console
from sklearn.base import clone
from sklearn.inspection import permutation_importance

from config import RANDOM_SEED, SHAP_MAX_SAMPLES, LIME_NUM_FEATURES, STABILITY_RUNS
from nyc_congestion_pipelines.models.importance import normalize_importance
from nyc_congestion_pipelines.models.results import (
    Explanation,
    ExplanationUnavailable,
    LimeExplanation,
    ShapExplanation,
)
from nyc_congestion_pipelines.models.training import build_model_zoo

console = Console()


def compute_shap(
    model,
    X: pd.DataFrame,
    model_name: str = "XGBRegressor",
    max_samples: int = SHAP_MAX_SAMPLES,
    seed: int = RANDOM_SEED,
) -> Explanation:
    """TreeExplainer SHAP values on (a seeded sample of) X."""
    console.print(f"[cyan]Computing SHAP values for {model_name}...[/cyan]")
    try:
        if X.empty:
            raise ValueError("no rows to explain")
        sample = X.sample(n=max_samples, random_state=seed) if len(X) > max_samples else X
        explainer = shap.TreeExplainer(model)
        values = np.asarray(explainer.shap_values(sample))
        base_value = float(np.ravel(explainer.expected_value)[0])
    except Exception as e:
        console.print(f"[bold yellow]SHAP unavailable for {model_name}:[/bold yellow] {e}")
        return ExplanationUnavailable(method="shap", model_name=model_name, reason=str(e))

    console.print(f"[green]SHAP values computed[/green] for {len(sample):,} rows.")
    return ShapExplanation(
        model_name=model_name,
        values=values,
        data=sample.reset_index(drop=True),
        base_value=base_value,
    )


def compute_lime(
    model,
    X_train: pd.DataFrame,
    X_test: pd.DataFrame,
    model_name: str = "XGBRegressor",
    row_index: int = 0,
    num_features: int = LIME_NUM_FEATURES,
    seed: int = RANDOM_SEED,
) -> Explanation:
    """Local LIME surrogate around one held-out row."""
    console.print(f"[cyan]Computing LIME explanation for {model_name} (test row {row_index})...[/cyan]")
    columns = list(X_train.columns)

    def predict_fn(arr: np.ndarray) -> np.ndarray:
        return model.predict(pd.DataFrame(arr, columns=columns))

    try:
        row = X_test.iloc[row_index].to_numpy(dtype=float)
        explainer = LimeTabularExplainer(
            training_data=X_train.to_numpy(dtype=float),
            feature_names=columns,
            mode="regression",
            discretize_continuous=True,
            random_state=seed,
        )
        exp = explainer.explain_instance(
            data_row=row,
            predict_fn=predict_fn,
            num_features=min(num_features, len(columns)),
        )
        prediction = float(predict_fn(row.reshape(1, -1))[0])
        intercept = float(exp.intercept.get(1, exp.intercept.get(0, 0.0)))
        weights = [(str(feat), float(w)) for feat, w in exp.as_list()]
    except Exception as e:
        console.print(f"[bold yellow]LIME unavailable for {model_name}:[/bold yellow] {e}")
        return ExplanationUnavailable(method="lime", model_name=model_name, reason=str(e))

    for feat, w in weights:
        console.print(f"  {feat:40s} -> {w:+.3f}")

    return LimeExplanation(
        model_name=model_name,
        row_index=row_index,
        prediction=prediction,
        intercept=intercept,
        weights=weights,
    )


def importance_stability(
    X: pd.DataFrame,
    y: pd.Series,
    n_runs: int = STABILITY_RUNS,
    seed: int = RANDOM_SEED,
    model_factory: Optional[Callable[[int], object]] = None,
) -> pd.DataFrame:
    """
    Refit the gradient-boosted model on seeded bootstrap resamples and
    summarise how much each feature's normalised importance moves.

    Returns a frame indexed by feature with mean, std, min, max and mean_rank,
    sorted by mean.
    """
    if n_runs < 1:
        raise ValueError("n_runs must be >= 1")

    if model_factory is None:
        base = build_model_zoo(seed)["XGBRegressor"]

        def model_factory(run_seed: int):
            return clone(base).set_params(random_state=run_seed)

    runs: Dict[int, Dict[str, float]] = {}
    for i in range(n_runs):
        run_seed = seed + i
        rng = np.random.default_rng(run_seed)
        idx = rng.integers(0, len(X), size=len(X))

        model = model_factory(run_seed)
        model.fit(X.iloc[idx], y.iloc[idx])
        runs[i] = normalize_importance(dict(zip(X.columns, map(float, model.feature_importances_))))

    per_run = pd.DataFrame(runs).fillna(0.0)
    ranks = per_run.rank(ascending=False)

    summary = pd.DataFrame({
        "mean": per_run.mean(axis=1),
        "std": per_run.std(axis=1, ddof=0),
        "min": per_run.min(axis=1),
        "max": per_run.max(axis=1),
        "mean_rank": ranks.mean(axis=1),
    })
    summary.index.name = "feature"
    console.print(f"[green]Importance stability computed over {n_runs} bootstrap runs.[/green]")
    return summary.sort_values("mean", ascending=False)


def compare_methods(
    model,
    X_test: pd.DataFrame,
    y_test: pd.Series,
    shap_result: Optional[Explanation] = None,
    seed: int = RANDOM_SEED,
    n_repeats: int = 5,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Normalised importance per feature from built-in importance, permutation
    importance and (when available) mean |SHAP|.

    Returns (importance table sorted by built-in, rank-correlation matrix).
    """
    methods: Dict[str, Dict[str, float]] = {}

    methods["built_in"] = normalize_importance(
        dict(zip(X_test.columns, map(float, model.feature_importances_)))
    )

    perm = permutation_importance(
        model, X_test, y_test,
        n_repeats=n_repeats,
        random_state=seed,
        scoring="neg_mean_squared_error",
    )
    methods["permutation"] = normalize_importance(
        dict(zip(X_test.columns, np.clip(perm.importances_mean, 0, None).astype(float)))
    )

    if isinstance(shap_result, ShapExplanation):
        methods["shap"] = normalize_importance(shap_result.mean_abs())
    elif shap_result is not None:
        console.print(f"[yellow]SHAP column omitted from method comparison: {getattr(shap_result, 'reason', 'not a SHAP result')}[/yellow]")

    table = pd.DataFrame(methods).fillna(0.0)
    table.index.name = "feature"

    # Pearson on ranks = Spearman
    rank_corr = table.rank(ascending=False).corr()
    rank_corr.index.name = "method"
    return table.sort_values("built_in", ascending=False), rank_corr


__all__ = [
    "compute_shap",
    "compute_lime",
    "importance_stability",
    "compare_methods",
]
