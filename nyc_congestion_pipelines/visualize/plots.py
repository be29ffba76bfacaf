# Report figures: model metrics, importance comparisons, SHAP/LIME, EDA

from pathlib import Path
from typing import Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns
import shap
from rich.console import Console

from config import FIGURES_DIR, TOP_K
from nyc_congestion_pipelines.models.results import (
    Explanation,
    LimeExplanation,
    ShapExplanation,
)
from nyc_congestion_pipelines.transform.calendar import SEASONS, TIMES_OF_DAY

console = Console()

sns.set(style="whitegrid")


def _save(fig, name: str, out_dir: Path) -> Path:
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / name
    fig.tight_layout()
    fig.savefig(path, dpi=200, bbox_inches="tight")
    plt.close(fig)
    console.print(f"[green]✓ Figure saved[/green]: {path}")
    return path


def plot_placeholder(title: str, reason: str, name: str, out_dir: Path = FIGURES_DIR) -> Path:
    """Blank figure stating why an explanation could not be drawn."""
    fig, ax = plt.subplots(figsize=(8, 3))
    ax.axis("off")
    ax.set_title(title)
    ax.text(0.5, 0.5, f"Explanation unavailable:\n{reason}", ha="center", va="center", wrap=True)
    return _save(fig, name, out_dir)


def plot_model_metrics(leaderboard: pd.DataFrame, out_dir: Path = FIGURES_DIR) -> Path:
    fig, axes = plt.subplots(1, 2, figsize=(12, 4))
    sns.barplot(data=leaderboard, x="Model", y="RMSE", ax=axes[0], color="steelblue")
    axes[0].set_title("Held-out RMSE")
    sns.barplot(data=leaderboard, x="Model", y="R2", ax=axes[1], color="darkorange")
    axes[1].set_title("Held-out R² (squared correlation)")
    axes[1].set_ylim(0, 1)
    return _save(fig, "model_metrics.png", out_dir)


def plot_importance_comparison(table: pd.DataFrame, k: int = TOP_K, out_dir: Path = FIGURES_DIR) -> Path:
    """Grouped bars of normalised importance per model for the top-k features."""
    top = table.head(k).drop(columns=["mean_importance"])
    long_df = (
        top.reset_index()
           .melt(id_vars="feature", var_name="Model", value_name="Normalised importance")
    )

    fig, ax = plt.subplots(figsize=(10, 6))
    sns.barplot(data=long_df, y="feature", x="Normalised importance", hue="Model", ax=ax)
    ax.set_title(f"Top {k} Features by Mean Normalised Importance")
    ax.set_ylabel("")
    return _save(fig, "importance_comparison.png", out_dir)


def plot_shap_summary(result: Explanation, out_dir: Path = FIGURES_DIR) -> Path:
    if not isinstance(result, ShapExplanation):
        return plot_placeholder("SHAP Summary", getattr(result, "reason", "not computed"), "shap_summary.png", out_dir)

    try:
        shap.summary_plot(result.values, result.data, show=False, max_display=TOP_K)
    except Exception as e:
        plt.close("all")
        console.print(f"[bold yellow]SHAP summary plot failed:[/bold yellow] {e}")
        return plot_placeholder("SHAP Summary", str(e), "shap_summary.png", out_dir)
    fig = plt.gcf()
    fig.suptitle(f"SHAP Summary ({result.model_name})")
    return _save(fig, "shap_summary.png", out_dir)


def plot_lime(result: Explanation, out_dir: Path = FIGURES_DIR) -> Path:
    if not isinstance(result, LimeExplanation):
        return plot_placeholder("LIME Local Explanation", getattr(result, "reason", "not computed"), "lime_explanation.png", out_dir)

    weights = pd.DataFrame(result.weights, columns=["rule", "weight"]).iloc[::-1]
    colors = ["seagreen" if w > 0 else "indianred" for w in weights["weight"]]

    fig, ax = plt.subplots(figsize=(9, 5))
    ax.barh(weights["rule"], weights["weight"], color=colors)
    ax.axvline(0, color="black", linewidth=0.8)
    ax.set_title(f"LIME: test row {result.row_index} (prediction {result.prediction:,.1f})")
    ax.set_xlabel("Local weight")
    return _save(fig, "lime_explanation.png", out_dir)


def plot_stability(stability: pd.DataFrame, k: int = TOP_K, out_dir: Path = FIGURES_DIR) -> Path:
    top = stability.head(k).iloc[::-1]
    fig, ax = plt.subplots(figsize=(9, 5))
    ax.barh(top.index, top["mean"], xerr=top["std"], color="steelblue", capsize=3)
    ax.set_title("Importance Stability Across Bootstrap Refits (mean ± std)")
    ax.set_xlabel("Normalised importance")
    return _save(fig, "importance_stability.png", out_dir)


def plot_method_comparison(table: pd.DataFrame, k: int = TOP_K, out_dir: Path = FIGURES_DIR) -> Path:
    long_df = (
        table.head(k).reset_index()
             .melt(id_vars="feature", var_name="Method", value_name="Normalised importance")
    )
    fig, ax = plt.subplots(figsize=(10, 6))
    sns.barplot(data=long_df, y="feature", x="Normalised importance", hue="Method", ax=ax)
    ax.set_title("Interpretability Method Comparison")
    ax.set_ylabel("")
    return _save(fig, "method_comparison.png", out_dir)


def plot_traffic_patterns(traffic: pd.DataFrame, out_dir: Path = FIGURES_DIR) -> Path:
    """Mean volume by hour (per borough) and by time-of-day bucket."""
    fig, axes = plt.subplots(1, 2, figsize=(14, 5))

    hourly = traffic.groupby(["Hour", "Boro"])["Vol"].mean().reset_index()
    sns.lineplot(data=hourly, x="Hour", y="Vol", hue="Boro", ax=axes[0])
    axes[0].set_title("Mean Volume by Hour")

    sns.barplot(data=traffic, x="TimeOfDay", y="Vol", order=TIMES_OF_DAY, ax=axes[1], color="steelblue", errorbar=None)
    axes[1].set_title("Mean Volume by Time of Day")
    return _save(fig, "traffic_patterns.png", out_dir)


def plot_weather_overview(weather: pd.DataFrame, out_dir: Path = FIGURES_DIR) -> Path:
    fig, axes = plt.subplots(1, 2, figsize=(14, 5))

    axes[0].plot(weather["Date"], weather["Temperature"], color="indianred", label="Temperature (°F)")
    ax2 = axes[0].twinx()
    ax2.bar(weather["Date"], weather["Rainfall"], width=20, alpha=0.4, color="steelblue", label="Rainfall (in)")
    axes[0].set_title("Monthly Temperature and Rainfall")
    axes[0].set_ylabel("Temperature (°F)")
    ax2.set_ylabel("Rainfall (in)")

    sns.boxplot(data=weather, x="Season", y="Temperature", order=SEASONS, ax=axes[1])
    axes[1].set_title("Temperature by Season")
    return _save(fig, "weather_overview.png", out_dir)


def plot_engineered_correlations(engineered: pd.DataFrame, out_dir: Path = FIGURES_DIR) -> Optional[Path]:
    numeric = engineered.select_dtypes("number")
    if numeric.shape[1] < 2:
        console.print("[yellow]Not enough numeric columns for a correlation heatmap.[/yellow]")
        return None

    fig, ax = plt.subplots(figsize=(12, 10))
    sns.heatmap(numeric.corr(), cmap="vlag", center=0, ax=ax)
    ax.set_title("Engineered Dataset Correlations")
    return _save(fig, "engineered_correlations.png", out_dir)


__all__ = [
    "plot_placeholder",
    "plot_model_metrics",
    "plot_importance_comparison",
    "plot_shap_summary",
    "plot_lime",
    "plot_stability",
    "plot_method_comparison",
    "plot_traffic_patterns",
    "plot_weather_overview",
    "plot_engineered_correlations",
]
