#!/usr/bin/env python
# End-to-end data + modeling pipeline with Rich console output
# To quick run: python -m nyc_congestion_pipelines.models.pipeline --nrows 200000

import argparse
from pathlib import Path
from typing import Any, Dict, Optional

import pandas as pd
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from config import (
    TEMPERATURE_CSV,
    RAINFALL_CSV,
    TRAFFIC_CSV,
    EMERGENCY_CSV,
    PROCESSED_DIR,
    FIGURES_DIR,
    TEST_RESULTS_DIR,
    CARDS_DIR,
    TRAFFIC_ROW_CAP,
    RANDOM_SEED,
    TOP_K,
    TARGET_COL,
)
from nyc_congestion_pipelines.ingestion.ingestion_master import run_ingestion
from nyc_congestion_pipelines.transform.transform_master import run_transforms
from nyc_congestion_pipelines.transform.encoding import save_datasets
from nyc_congestion_pipelines.validate.orchestrator import run_engineered_validations
from nyc_congestion_pipelines.models.training import prepare_traffic_features, train_models, results_table
from nyc_congestion_pipelines.models.importance import build_importance_table, show_importance_table
from nyc_congestion_pipelines.models.explain import (
    compute_shap,
    compute_lime,
    importance_stability,
    compare_methods,
)
from nyc_congestion_pipelines.models.reporting import save_result_tables, generate_model_card
from nyc_congestion_pipelines.visualize import plots
from nyc_congestion_pipelines.utils.logging import clear_pipeline_log, show_pipeline_table

console = Console()

EXPLAINED_MODEL = "XGBRegressor"
TOTAL_STEPS = 6


def create_header():
    header = """
    ╔═══════════════════════════════════════════════════════════════╗
    ║        NYC TRAFFIC CONGESTION INTERPRETABILITY PIPELINE       ║
    ║   Ingest → Transform → Train → Importance → Explain → Report  ║
    ╚═══════════════════════════════════════════════════════════════╝
    """
    return Panel(header, style="bold cyan", border_style="bright_cyan", expand=False)


def create_step_panel(step_num, total_steps, title, status="running"):
    if status == "running":
        emoji, style = "⏳", "bold yellow"
    elif status == "complete":
        emoji, style = "✅", "bold green"
    else:
        emoji, style = "❌", "bold red"
    return Panel(f"{emoji} [bold]{title}[/bold]", title=f"[{style}]Step {step_num}/{total_steps}[/{style}]", border_style=style, expand=False)


def create_results_table(leaderboard: pd.DataFrame, traffic: pd.DataFrame):
    table = Table(title="📊 Pipeline Results", box=box.ROUNDED, show_header=True, header_style="bold magenta", border_style="bright_magenta")
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")
    table.add_row("Traffic Rows Modeled", f"{len(traffic):,}")
    table.add_row("Date Range", f"{traffic['DateTime'].min()} → {traffic['DateTime'].max()}")
    for _, row in leaderboard.iterrows():
        table.add_row(row["Model"], f"RMSE {row['RMSE']:.2f} | R² {row['R2']:.3f}")
    return table


def engineered_feature_columns(engineered: pd.DataFrame):
    drop = {TARGET_COL, "Date"}
    return [c for c in engineered.select_dtypes("number").columns if c not in drop]


def run_pipeline(
    temperature_path: Path = TEMPERATURE_CSV,
    rainfall_path: Path = RAINFALL_CSV,
    traffic_path: Path = TRAFFIC_CSV,
    emergency_path: Path = EMERGENCY_CSV,
    traffic_nrows: Optional[int] = TRAFFIC_ROW_CAP,
    seed: int = RANDOM_SEED,
    explain: bool = True,
    quality_report: bool = False,
    data_dir: Path = PROCESSED_DIR,
    figures_dir: Path = FIGURES_DIR,
    results_dir: Path = TEST_RESULTS_DIR,
    cards_dir: Path = CARDS_DIR,
) -> Dict[str, Any]:
    """Run every stage in order and return the intermediate tables and results."""
    clear_pipeline_log()

    console.print(create_step_panel(1, TOTAL_STEPS, "Ingestion", "running"))
    ingestion_output = run_ingestion(
        temperature_path, rainfall_path, traffic_path, emergency_path, traffic_nrows=traffic_nrows
    )
    console.print(create_step_panel(1, TOTAL_STEPS, "Ingestion Complete", "complete"))

    console.print(create_step_panel(2, TOTAL_STEPS, "Transformations", "running"))
    frames = run_transforms(ingestion_output, seed=seed)
    run_engineered_validations(frames["engineered"], show_quality_report=quality_report)
    save_datasets(frames["integrated"], frames["engineered"], data_dir)
    console.print(create_step_panel(2, TOTAL_STEPS, "Transformations Complete", "complete"))

    console.print(create_step_panel(3, TOTAL_STEPS, "Model Training", "running"))
    encoded, feature_cols, source_map = prepare_traffic_features(frames["traffic"])
    results, fitted, split = train_models(
        encoded, feature_cols, TARGET_COL, date_col="DateTime", source_map=source_map, seed=seed
    )
    leaderboard = results_table(results)
    console.print(create_step_panel(3, TOTAL_STEPS, "Model Training Complete", "complete"))

    console.print(create_step_panel(4, TOTAL_STEPS, "Importance Aggregation", "running"))
    importance = build_importance_table(results)
    show_importance_table(importance, TOP_K)
    console.print(create_step_panel(4, TOTAL_STEPS, "Importance Aggregation Complete", "complete"))

    explanations = []
    stability = method_table = rank_corr = None
    if explain:
        console.print(create_step_panel(5, TOTAL_STEPS, "Explanations", "running"))
        model = fitted[EXPLAINED_MODEL]
        shap_result = compute_shap(model, split["X_test"], EXPLAINED_MODEL, seed=seed)
        lime_result = compute_lime(model, split["X_train"], split["X_test"], EXPLAINED_MODEL, seed=seed)
        explanations = [shap_result, lime_result]

        method_table, rank_corr = compare_methods(model, split["X_test"], split["y_test"], shap_result, seed=seed)

        engineered = frames["engineered"]
        eng_cols = engineered_feature_columns(engineered)
        stability = importance_stability(engineered[eng_cols], engineered[TARGET_COL], seed=seed)
        console.print(create_step_panel(5, TOTAL_STEPS, "Explanations Complete", "complete"))

    console.print(create_step_panel(6, TOTAL_STEPS, "Figures & Reports", "running"))
    plots.plot_traffic_patterns(frames["traffic"], figures_dir)
    plots.plot_weather_overview(frames["weather"], figures_dir)
    plots.plot_engineered_correlations(frames["engineered"], figures_dir)
    plots.plot_model_metrics(leaderboard, figures_dir)
    plots.plot_importance_comparison(importance, TOP_K, figures_dir)

    tables = {"model_leaderboard": leaderboard, "feature_importance": importance, "monthly_overview": frames["monthly"]}
    if explain:
        plots.plot_shap_summary(explanations[0], figures_dir)
        plots.plot_lime(explanations[1], figures_dir)
        plots.plot_method_comparison(method_table, TOP_K, figures_dir)
        plots.plot_stability(stability, TOP_K, figures_dir)
        tables.update({"method_comparison": method_table, "method_rank_correlation": rank_corr, "importance_stability": stability})

    save_result_tables(tables, results_dir)
    generate_model_card(leaderboard, importance, explanations, cards_dir)
    console.print(create_step_panel(6, TOTAL_STEPS, "Figures & Reports Complete", "complete"))

    return {
        **frames,
        "results": results,
        "leaderboard": leaderboard,
        "importance": importance,
        "explanations": explanations,
        "method_comparison": method_table,
        "stability": stability,
    }


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="NYC traffic congestion: ingest, engineer, model and explain traffic volume."
    )
    parser.add_argument("--nrows", type=int, default=TRAFFIC_ROW_CAP, help="Row cap for the traffic CSV (0 = no cap)")
    parser.add_argument("--seed", type=int, default=RANDOM_SEED, help="Seed for synthetic data and models")
    parser.add_argument("--skip-explanations", action="store_true", help="Skip SHAP/LIME/stability stages")
    parser.add_argument("--quality-report", action="store_true", help="Print the engineered dataset quality report")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    console.print()
    console.print(create_header())
    console.print()
    try:
        output = run_pipeline(
            traffic_nrows=args.nrows or None,
            seed=args.seed,
            explain=not args.skip_explanations,
            quality_report=args.quality_report,
        )
        console.print(Panel("[bold green] PIPELINE COMPLETED SUCCESSFULLY [/bold green]", border_style="bright_green", expand=False))
        console.print(create_results_table(output["leaderboard"], output["traffic"]))
        console.print(Panel("[bold cyan] Pipeline Execution Summary[/bold cyan]", border_style="cyan", expand=False))
        show_pipeline_table()
    except Exception as e:
        console.print()
        console.print(Panel(f"[bold red] PIPELINE FAILED [/bold red]\n\n[red]Error:[/red] {str(e)}\n\n[dim]Check logs above for details.[/dim]", border_style="bright_red", title="[bold red]Error[/bold red]", expand=False))
        raise


if __name__ == "__main__":
    main()
