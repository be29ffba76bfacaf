# Core data validation checks for the NYC congestion pipeline

import pandas as pd
from rich.console import Console
from rich.table import Table
from typing import Dict

from config import BOROUGHS, TARGET_COL

console = Console()


def run_validation_checks(df: pd.DataFrame, step_name: str, check_boro: bool = False) -> Dict[str, bool]:
    """
    Key integrity checks:
    - target volume non-null and non-negative
    - DateTime / Date completeness
    - one weather record per calendar month
    - borough category sanity (optional)

    Returns a mapping of check name -> passed. Failures are reported, not raised.
    """
    results: Dict[str, bool] = {}

    if TARGET_COL in df.columns:
        missing = int(df[TARGET_COL].isna().sum())
        negative = int((df[TARGET_COL] < 0).sum())
        results["target_complete"] = missing == 0
        results["target_non_negative"] = negative == 0
        if missing:
            console.print(f"[bold red]FAIL: {step_name} - {missing:,} rows missing '{TARGET_COL}'.[/bold red]")
        else:
            console.print(f"[green]PASS: {step_name} - '{TARGET_COL}' complete.[/green]")
        if negative:
            console.print(f"[bold yellow]WARNING: {step_name} - {negative:,} negative '{TARGET_COL}' values.[/bold yellow]")

    for col in ["DateTime", "Date"]:
        if col in df.columns and len(df):
            missing_pct = df[col].isna().sum() / len(df)
            results[f"{col}_complete"] = bool(missing_pct <= 0.01)
            if missing_pct > 0.01:
                console.print(f"[bold red]FAIL: {step_name} - '{col}' missing {missing_pct:.2%} (>1%).[/bold red]")
            else:
                console.print(
                    f"[green]PASS: {step_name} - '{col}' completeness OK ({missing_pct:.2%} missing).[/green]"
                )

    if {"Date", "Temperature", "Rainfall"}.issubset(df.columns):
        per_month = df["Date"].dt.to_period("M").value_counts()
        dupes = int((per_month > 1).sum())
        results["one_record_per_month"] = dupes == 0
        if dupes:
            console.print(f"[bold red]FAIL: {step_name} - {dupes:,} months with multiple weather records.[/bold red]")
        else:
            console.print(f"[green]PASS: {step_name} - one weather record per month.[/green]")

    boro_col = "Boro" if "Boro" in df.columns else "Borough" if "Borough" in df.columns else None
    if check_boro and boro_col is not None:
        valid = {b.upper() for b in BOROUGHS}
        current = set(df[boro_col].dropna().astype(str).str.upper().unique().tolist())
        invalid = current - valid
        results["boroughs_valid"] = not invalid
        if invalid:
            console.print(f"[bold red]FAIL: {step_name} - unexpected boroughs: {sorted(invalid)}[/bold red]")
        else:
            console.print(f"[green]PASS: {step_name} - borough values valid.[/green]")

    return results


def missing_summary(df: pd.DataFrame) -> pd.DataFrame:
    """Columns with at least one missing value: count and percent, worst first."""
    counts = df.isna().sum()
    counts = counts[counts > 0]
    summary = pd.DataFrame({
        "missing": counts.astype(int),
        "pct": (counts / len(df) * 100).round(2) if len(df) else 0.0,
    })
    summary.index.name = "column"
    return summary.sort_values("missing", ascending=False)


def show_missing_summary(df: pd.DataFrame, step_name: str) -> None:
    summary = missing_summary(df)
    if summary.empty:
        console.print(f"[green]{step_name}: no missing values.[/green]")
        return

    table = Table(title=f"{step_name}: missing values", header_style="bold magenta")
    table.add_column("Column", style="cyan")
    table.add_column("Missing", justify="right", style="red")
    table.add_column("%", justify="right")
    for col, row in summary.iterrows():
        table.add_row(col, f"{int(row['missing']):,}", f"{row['pct']:.2f}")
    console.print(table)


__all__ = ["run_validation_checks", "missing_summary", "show_missing_summary"]
