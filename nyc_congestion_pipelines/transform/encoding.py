# Encoding, lag & imputation for the engineered dataset

from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pandas as pd
from rich.console import Console

from config import PROCESSED_DIR, INTEGRATED_CSV, ENGINEERED_CSV
from nyc_congestion_pipelines.utils.logging import log_step

console = Console()


def add_one_hot(df: pd.DataFrame, columns: Iterable[str]) -> pd.DataFrame:
    """One-hot encode categorical columns into 0/1 '<col>_<value>' indicators (originals kept)."""
    df = df.copy()
    for col in columns:
        if col not in df.columns:
            raise KeyError(f"'{col}' column not found for one-hot encoding.")
        console.print(f"[cyan]One-hot encoding:[/cyan] '{col}'")
        dummies = pd.get_dummies(df[col], prefix=col, dtype=int)
        df = pd.concat([df, dummies], axis=1)
    return df


def dummy_source_map(columns: Iterable[str], categorical: Iterable[str]) -> Dict[str, str]:
    """Map each encoded column back to the feature it came from."""
    categorical = sorted(categorical, key=len, reverse=True)
    mapping = {}
    for col in columns:
        source = next((c for c in categorical if col.startswith(f"{c}_")), col)
        mapping[col] = source
    return mapping


def add_lag_features(
    df: pd.DataFrame,
    group_col: str,
    target_col: str,
    date_col: str,
    lags: Optional[List[int]] = None,
) -> pd.DataFrame:
    """
    Add lag features for panel data grouped by borough.

    Parameters:
        df: DataFrame containing panel data
        group_col: column used to group (e.g., 'Borough')
        target_col: value to lag (e.g., 'Vol')
        date_col: ordering column within each group
        lags: list of lag steps (default: [1])

    Returns:
        DataFrame with '<target>_lag_<n>' columns added; the first n rows of
        each group are NaN.
    """
    if lags is None:
        lags = [1]

    df = df.copy()
    df = df.sort_values([group_col, date_col], kind="stable")

    for lag in lags:
        df[f"{target_col}_lag_{lag}"] = df.groupby(group_col)[target_col].shift(lag)

    return df.sort_values([date_col, group_col], kind="stable").reset_index(drop=True)


def impute_mean(df: pd.DataFrame, columns: Iterable[str]) -> pd.DataFrame:
    """Fill missing values with the column mean; an all-missing column falls back to 0."""
    df = df.copy()
    for col in columns:
        n_missing = int(df[col].isna().sum())
        if not n_missing:
            continue
        mean = df[col].mean()
        fill = 0.0 if pd.isna(mean) else mean
        df[col] = df[col].fillna(fill)
        console.print(f"[cyan]Imputed {n_missing:,} missing '{col}' values with mean {fill:.2f}[/cyan]")
    return df


def build_engineered_dataset(integrated: pd.DataFrame, lags: Optional[List[int]] = None) -> pd.DataFrame:
    """One-hot Season/Borough, per-borough lagged Vol, mean-imputed lags."""
    if lags is None:
        lags = [1]

    df = add_one_hot(integrated, ["Season", "Borough"])
    df = add_lag_features(df, group_col="Borough", target_col="Vol", date_col="Date", lags=lags)
    df = impute_mean(df, [f"Vol_lag_{lag}" for lag in lags])

    log_step("Engineered dataset (one-hot + lags)", df)
    return df


def save_datasets(integrated: pd.DataFrame, engineered: pd.DataFrame, data_dir: Path = PROCESSED_DIR) -> Dict[str, Path]:
    """Write integrated_dataset.csv and engineered_dataset.csv."""
    data_dir = Path(data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)

    paths = {
        "integrated": data_dir / INTEGRATED_CSV.name,
        "engineered": data_dir / ENGINEERED_CSV.name,
    }
    integrated.to_csv(paths["integrated"], index=False)
    engineered.to_csv(paths["engineered"], index=False)

    for name, path in paths.items():
        console.print(f"[green]Saved {name} dataset[/green] → {path}")
    return paths


__all__ = [
    "add_one_hot",
    "dummy_source_map",
    "add_lag_features",
    "impute_mean",
    "build_engineered_dataset",
    "save_datasets",
]
