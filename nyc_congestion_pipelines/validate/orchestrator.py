# Master validation orchestrator that runs all validation checks

import pandas as pd
from rich.console import Console
from typing import Dict

from .core import run_validation_checks, missing_summary, show_missing_summary
from .engineered_checks import (
    engineered_quality_report,
    validate_engineered_schema,
    validate_no_missing,
    validate_daily_grid,
)

console = Console()


def run_validations(
    df: pd.DataFrame,
    step_name: str = "Final dataset",
    check_boro: bool = False
) -> Dict[str, bool]:
    """
    Run standard validation checks on an ingested frame.

    Parameters:
        df: DataFrame to validate
        step_name: Name of the validation step
        check_boro: Whether to check borough values

    Returns:
        Mapping of check name -> passed
    """
    console.print(f"\n[bold cyan]=== VALIDATION: {step_name} ===[/bold cyan]\n")

    results = run_validation_checks(df, step_name, check_boro=check_boro)
    show_missing_summary(df, step_name)

    return results


def run_engineered_validations(
    df: pd.DataFrame,
    check_schema: bool = True,
    check_completeness: bool = True,
    check_grid: bool = True,
    show_quality_report: bool = False
) -> pd.DataFrame:
    """
    Run validation checks on the engineered dataset.

    Returns:
        Original DataFrame (unmodified)
    """
    console.print("\n[bold cyan]=== ENGINEERED VALIDATION START ===[/bold cyan]\n")

    if show_quality_report:
        engineered_quality_report(df)

    if check_schema:
        lag_cols = [c for c in df.columns if "_lag_" in c]
        if not lag_cols:
            raise ValueError("Engineered dataset has no lag features")
        validate_engineered_schema(df, extra_required=lag_cols)

    if check_completeness:
        validate_no_missing(df)

    if check_grid:
        validate_daily_grid(df, boroughs=df["Borough"].unique())

    console.print("\n[green]Engineered validation completed successfully.[/green]\n")
    return df


__all__ = ["run_validations", "run_engineered_validations"]
