"""
transform_master.py

Orchestrates all transformation steps after ingestion.
"""

from typing import Dict, Optional

import pandas as pd
from rich.console import Console

from config import RANDOM_SEED, SYNTHETIC_YEAR
from nyc_congestion_pipelines.utils.logging import log_step
from nyc_congestion_pipelines.transform.synthetic import build_integrated_dataset
from nyc_congestion_pipelines.transform.encoding import build_engineered_dataset

console = Console()


def monthly_overview(
    traffic: pd.DataFrame,
    weather: pd.DataFrame,
    emergency: Optional[pd.DataFrame] = None,
) -> pd.DataFrame:
    """
    Month-level descriptive table: mean/total traffic volume per month joined
    with that month's weather and mean emergency response times. For EDA only.
    """
    traffic_monthly = (
        traffic.groupby(["Year", "Month"])["Vol"]
               .agg(MeanVol="mean", TotalVol="sum", Counts="size")
               .reset_index()
    )

    overview = traffic_monthly.merge(
        weather[["Year", "Month", "Temperature", "Rainfall", "Season"]],
        on=["Year", "Month"],
        how="left",
    )

    if emergency is not None and not emergency.empty:
        time_cols = [c for c in emergency.columns if c not in {"Date", "Year", "Month", "Borough"}]
        if time_cols:
            emergency_monthly = emergency.groupby(["Year", "Month"])[time_cols].mean().reset_index()
            overview = overview.merge(emergency_monthly, on=["Year", "Month"], how="left")

    return overview.sort_values(["Year", "Month"]).reset_index(drop=True)


def run_transforms(
    ingestion_output: Dict[str, pd.DataFrame],
    seed: int = RANDOM_SEED,
    year: int = SYNTHETIC_YEAR,
) -> Dict[str, pd.DataFrame]:
    """
    Run the transformation stage.

    Parameters:
        ingestion_output: Dict with keys 'weather', 'traffic', 'emergency'
        seed: seed for the synthetic integrated dataset
        year: calendar year of the synthetic integrated dataset

    Returns:
        Dict with the ingested frames plus:
            - monthly: month-level overview of the real tables
            - integrated: synthetic daily × borough dataset
            - engineered: integrated + one-hot + mean-imputed lag features
    """
    console.print("\n[bold cyan]=== TRANSFORM PIPELINE START ===[/bold cyan]\n")

    traffic = ingestion_output["traffic"]
    weather = ingestion_output["weather"]
    emergency = ingestion_output.get("emergency")

    monthly = monthly_overview(traffic, weather, emergency)
    log_step("Monthly overview (traffic × weather × emergency)", monthly)

    integrated = build_integrated_dataset(year=year, seed=seed)
    engineered = build_engineered_dataset(integrated)

    console.print("\n[green]Transformation completed successfully.[/green]\n")

    return {
        **ingestion_output,
        "monthly": monthly,
        "integrated": integrated,
        "engineered": engineered,
    }
