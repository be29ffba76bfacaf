# Validation checks for the integrated / engineered daily × borough datasets


from typing import Iterable, Optional

import pandas as pd
from rich.console import Console

from config import BOROUGHS

console = Console()

REQUIRED_INTEGRATED_COLS = [
    "Date", "Borough", "Vol", "Temperature", "Rainfall",
    "IsWeekend", "Season", "Month", "DayOfWeek",
]


def engineered_quality_report(df: pd.DataFrame) -> None:
    """Shape, top missing columns, lag missingness and sample rows."""
    console.print("\n[bold cyan]=== ENGINEERED DATASET QUALITY REPORT ===[/bold cyan]")
    console.print(f"[cyan]Rows:[/cyan] {df.shape[0]:,}")
    console.print(f"[cyan]Columns:[/cyan] {df.shape[1]}")

    console.print("\n[yellow]Missing values (top 20):[/yellow]")
    missing = df.isna().sum().sort_values(ascending=False).head(20)
    for col, count in missing.items():
        if count > 0:
            pct = (count / len(df)) * 100
            console.print(f"  {col}: {count:,} ({pct:.2f}%)")

    lag_cols = [c for c in df.columns if "_lag_" in c]
    if lag_cols:
        console.print("\n[yellow]Lag distribution:[/yellow]")
        for col in lag_cols:
            console.print(f"  {col}: mean={df[col].mean():.1f}, missing={int(df[col].isna().sum()):,}")

    console.print("\n[cyan]Sample rows (first 5):[/cyan]")
    console.print(df.head().to_string())


def validate_engineered_schema(df: pd.DataFrame, extra_required: Optional[Iterable[str]] = None) -> None:
    """Raise ValueError if base columns, one-hot indicators or lag features are absent."""
    required = list(REQUIRED_INTEGRATED_COLS)
    required += [f"Season_{s}" for s in sorted(df["Season"].unique())] if "Season" in df.columns else []
    required += [f"Borough_{b}" for b in sorted(df["Borough"].unique())] if "Borough" in df.columns else []
    if extra_required:
        required += list(extra_required)

    missing = [c for c in required if c not in df.columns]
    if missing:
        console.print("[bold red]Engineered schema validation failed.[/bold red]")
        console.print(f"[red]Missing columns:[/red] {missing}")
        raise ValueError(f"Engineered schema validation failed. Missing: {missing}")

    console.print("[green]Engineered schema validated.[/green]")


def validate_no_missing(df: pd.DataFrame, columns: Optional[Iterable[str]] = None) -> None:
    """Every listed column (default: all) must be fully populated."""
    cols = list(columns) if columns is not None else list(df.columns)
    failures = [(c, int(df[c].isna().sum())) for c in cols if c in df.columns and df[c].isna().any()]

    if failures:
        console.print("[bold red]Completeness validation failed:[/bold red]")
        for col, count in failures:
            console.print(f"  [red]{col}: {count:,} missing[/red]")
        raise ValueError(f"Missing values remain in: {[c for c, _ in failures]}")

    console.print("[green]Completeness validated (no missing values).[/green]")


def validate_daily_grid(df: pd.DataFrame, boroughs: Iterable[str] = BOROUGHS) -> None:
    """Exactly one row per (Date, Borough) over the full calendar range."""
    boroughs = list(boroughs)
    dupes = int(df.duplicated(subset=["Date", "Borough"]).sum())
    if dupes:
        raise ValueError(f"{dupes:,} duplicated (Date, Borough) rows")

    n_days = pd.to_datetime(df["Date"]).nunique()
    expected = n_days * len(boroughs)
    if len(df) != expected:
        console.print(f"[bold red]Grid incomplete:[/bold red] {len(df):,} rows, expected {expected:,}")
        raise ValueError(f"Daily grid has {len(df)} rows, expected {expected}")

    console.print(f"[green]Daily grid validated: {n_days} days x {len(boroughs)} boroughs.[/green]")


__all__ = [
    "REQUIRED_INTEGRATED_COLS",
    "engineered_quality_report",
    "validate_engineered_schema",
    "validate_no_missing",
    "validate_daily_grid",
]
