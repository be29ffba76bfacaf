# Cross-model feature importance aggregation

from typing import Dict, List, Mapping

import pandas as pd
from rich.console import Console
from rich.table import Table

from config import TOP_K
from nyc_congestion_pipelines.models.results import ModelResult

console = Console()


def normalize_importance(importance: Mapping[str, float]) -> Dict[str, float]:
    """Scale to [0, 1] by the max value; an all-zero vector stays all zero."""
    if not importance:
        return {}
    peak = max(importance.values())
    if peak <= 0:
        return {k: 0.0 for k in importance}
    return {k: float(v) / peak for k, v in importance.items()}


def build_importance_table(results: List[ModelResult]) -> pd.DataFrame:
    """
    Features × models table of normalised importance plus 'mean_importance'.

    A feature missing from one model's vector counts as 0.0 for that model.
    Sorted by mean importance, descending.
    """
    columns = {r.name: normalize_importance(r.feature_importance) for r in results}
    table = pd.DataFrame(columns).fillna(0.0)
    table.index.name = "feature"

    table["mean_importance"] = table[[r.name for r in results]].mean(axis=1)
    return table.sort_values("mean_importance", ascending=False)


def top_k_features(table: pd.DataFrame, k: int = TOP_K) -> pd.DataFrame:
    return table.head(k)


def show_importance_table(table: pd.DataFrame, k: int = TOP_K) -> None:
    """Rich table of the consensus top-k."""
    rich_table = Table(title=f"Top {k} Features (mean normalised importance)", show_header=True)
    rich_table.add_column("Feature", style="cyan")
    for col in table.columns:
        rich_table.add_column(col, style="green", justify="right")

    for feature, row in top_k_features(table, k).iterrows():
        rich_table.add_row(str(feature), *[f"{v:.3f}" for v in row.values])

    console.print(rich_table)


__all__ = [
    "normalize_importance",
    "build_importance_table",
    "top_k_features",
    "show_importance_table",
]
