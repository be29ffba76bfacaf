# Emergency response times (monthly, per borough)

from pathlib import Path
from typing import List

import pandas as pd
from rich.console import Console

from config import EMERGENCY_CSV
from nyc_congestion_pipelines.transform.cleaning import parse_month_name, require_columns
from nyc_congestion_pipelines.utils.logging import log_step

console = Console()


def response_time_columns(df: pd.DataFrame) -> List[str]:
    """Columns holding response-time measurements."""
    return [c for c in df.columns if "response" in c.lower() or "time" in c.lower()]


def load_emergency(path: Path = EMERGENCY_CSV) -> pd.DataFrame:
    """Read response records, parse 'Month Name' into Date, coerce response times."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Emergency response file not found: {path}")

    console.print(f"[cyan]Reading:[/cyan] {path.name}")
    df = pd.read_csv(path)
    df.columns = [c.strip() for c in df.columns]

    if "Borough" not in df.columns and "Boro" in df.columns:
        df = df.rename(columns={"Boro": "Borough"})
    require_columns(df, ["Month Name", "Borough"], "emergency")

    total_rows = len(df)
    df["Date"] = df["Month Name"].apply(parse_month_name)
    invalid = int(df["Date"].isna().sum())
    console.print(f"[yellow]Dropped unparseable 'Month Name' values: {invalid:,} of {total_rows:,}")

    df = df.dropna(subset=["Date"]).copy()
    df["Date"] = pd.to_datetime(df["Date"])
    df["Year"] = df["Date"].dt.year
    df["Month"] = df["Date"].dt.month
    df["Borough"] = df["Borough"].astype(str).str.strip().str.title()

    time_cols = response_time_columns(df.drop(columns=["Date", "Month Name"]))
    for col in time_cols:
        df[col] = pd.to_numeric(df[col], errors="coerce")

    df = df[["Date", "Year", "Month", "Borough"] + time_cols]
    df = df.sort_values(["Date", "Borough"], kind="stable").reset_index(drop=True)
    log_step("Emergency: Month Name parsed", df)
    return df


__all__ = ["load_emergency", "response_time_columns"]
