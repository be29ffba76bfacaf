# Temporal split + three regressors on the traffic table

from typing import Dict, List, Optional, Tuple

import numpy as np
import pandas as pd
from rich.console import Console
from rich.panel import Panel
from sklearn.ensemble import RandomForestRegressor
from sklearn.linear_model import LinearRegression
from sklearn.metrics import mean_absolute_error, mean_squared_error
from xgboost import XGBRegressor

from config import RANDOM_SEED, TRAIN_FRACTION, TARGET_COL
from nyc_congestion_pipelines.models.results import ModelResult
from nyc_congestion_pipelines.transform.encoding import add_one_hot, dummy_source_map

console = Console()

TRAFFIC_NUMERIC_FEATURES = ["Hour", "DayOfWeek", "Month", "IsWeekend", "IsHoliday"]
TRAFFIC_CATEGORICAL_FEATURES = ["Boro", "TimeOfDay", "Direction"]


def build_model_zoo(seed: int = RANDOM_SEED) -> Dict[str, object]:
    models: Dict[str, object] = {}

    models["LinearRegression"] = LinearRegression()

    models["RandomForest"] = RandomForestRegressor(
        n_estimators=200,
        max_depth=10,
        random_state=seed,
        n_jobs=-1,
    )

    models["XGBRegressor"] = XGBRegressor(
        n_estimators=400,
        learning_rate=0.05,
        max_depth=6,
        subsample=0.8,
        colsample_bytree=0.8,
        objective="reg:squarederror",
        random_state=seed,
        n_jobs=-1,
    )

    return models


def temporal_train_test_split(
    df: pd.DataFrame,
    train_fraction: float = TRAIN_FRACTION,
    date_col: Optional[str] = None,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    First `train_fraction` of rows -> train, remainder -> test. No shuffling.
    When date_col is given rows are stably sorted by it first.
    """
    if not 0 < train_fraction < 1:
        raise ValueError(f"train_fraction must be in (0, 1), got {train_fraction}")

    if date_col is not None:
        df = df.sort_values(date_col, kind="stable")

    n_train = int(np.floor(len(df) * train_fraction))
    if n_train == 0 or n_train == len(df):
        raise ValueError(f"Cannot split {len(df)} rows into non-empty train/test sets")

    return df.iloc[:n_train].copy(), df.iloc[n_train:].copy()


def compute_metrics(y_true, y_pred) -> Dict[str, float]:
    """
    RMSE = sqrt(MSE); R2 = squared Pearson correlation of predictions vs
    actuals (0.0 if either side is constant); MAE.
    """
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)

    rmse = float(np.sqrt(mean_squared_error(y_true, y_pred)))
    mae = float(mean_absolute_error(y_true, y_pred))

    if len(y_true) < 2 or np.std(y_true) == 0 or np.std(y_pred) == 0:
        r2 = 0.0
    else:
        corr = np.corrcoef(y_true, y_pred)[0, 1]
        r2 = float(np.clip(corr ** 2, 0.0, 1.0))

    return {"RMSE": rmse, "R2": r2, "MAE": mae}


def extract_feature_importance(
    model,
    feature_cols: List[str],
    source_map: Optional[Dict[str, str]] = None,
) -> Dict[str, float]:
    """
    Linear models: |coef| summed back onto the source feature of each encoded
    column. Tree ensembles: built-in feature_importances_ per column.
    """
    if hasattr(model, "coef_"):
        coefs = np.abs(np.ravel(model.coef_))
        source_map = source_map or {}
        importance: Dict[str, float] = {}
        for col, value in zip(feature_cols, coefs):
            source = source_map.get(col, col)
            importance[source] = importance.get(source, 0.0) + float(value)
        return importance

    if hasattr(model, "feature_importances_"):
        return {col: float(v) for col, v in zip(feature_cols, model.feature_importances_)}

    raise TypeError(f"{type(model).__name__} exposes neither coef_ nor feature_importances_")


def prepare_traffic_features(traffic: pd.DataFrame) -> Tuple[pd.DataFrame, List[str], Dict[str, str]]:
    """
    Design matrix for the traffic table.

    Returns (frame with encoded columns, feature column names, encoded -> source map).
    """
    categorical = [c for c in TRAFFIC_CATEGORICAL_FEATURES if c in traffic.columns]
    numeric = [c for c in TRAFFIC_NUMERIC_FEATURES if c in traffic.columns]

    encoded = add_one_hot(traffic, categorical)
    dummy_cols = [c for c in encoded.columns if c not in traffic.columns]

    feature_cols = numeric + dummy_cols
    return encoded, feature_cols, dummy_source_map(feature_cols, categorical)


def train_models(
    df: pd.DataFrame,
    feature_cols: List[str],
    target_col: str = TARGET_COL,
    date_col: Optional[str] = None,
    source_map: Optional[Dict[str, str]] = None,
    models: Optional[Dict[str, object]] = None,
    train_fraction: float = TRAIN_FRACTION,
    seed: int = RANDOM_SEED,
) -> Tuple[List[ModelResult], Dict[str, object], Dict[str, pd.DataFrame]]:
    """
    Fit every model on the same temporal split and score on the held-out tail.

    Returns (results, fitted models by name, split frames X_train/X_test/y_train/y_test).
    """
    train_df, test_df = temporal_train_test_split(df, train_fraction, date_col)

    X_train = train_df[feature_cols].fillna(0)
    y_train = train_df[target_col]
    X_test = test_df[feature_cols].fillna(0)
    y_test = test_df[target_col]

    if models is None:
        models = build_model_zoo(seed)

    console.print(
        Panel(
            f"[bold cyan]Temporal split: {len(train_df):,} train / {len(test_df):,} test rows[/bold cyan]"
        )
    )

    results: List[ModelResult] = []
    fitted: Dict[str, object] = {}

    for name, model in models.items():
        console.print(f"[cyan]Training {name}...[/cyan]")
        model.fit(X_train, y_train)
        preds = model.predict(X_test)
        m = compute_metrics(y_test, preds)

        console.print(
            f"[green]{name}[/green] "
            f"RMSE={m['RMSE']:.4f}, R²={m['R2']:.4f}, MAE={m['MAE']:.4f}"
        )

        results.append(
            ModelResult(
                name=name,
                rmse=m["RMSE"],
                r2=m["R2"],
                mae=m["MAE"],
                n_train=len(train_df),
                n_test=len(test_df),
                feature_importance=extract_feature_importance(model, feature_cols, source_map),
            )
        )
        fitted[name] = model

    split = {"X_train": X_train, "X_test": X_test, "y_train": y_train, "y_test": y_test}
    return results, fitted, split


def results_table(results: List[ModelResult]) -> pd.DataFrame:
    """Leaderboard sorted by RMSE."""
    rows = [
        {"Model": r.name, "RMSE": r.rmse, "R2": r.r2, "MAE": r.mae, "n_train": r.n_train, "n_test": r.n_test}
        for r in results
    ]
    return pd.DataFrame(rows).sort_values("RMSE").reset_index(drop=True)


__all__ = [
    "build_model_zoo",
    "temporal_train_test_split",
    "compute_metrics",
    "extract_feature_importance",
    "prepare_traffic_features",
    "train_models",
    "results_table",
]
