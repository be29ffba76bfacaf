# Core cleaning transformations used before any feature engineering
import re
from typing import Any, Iterable
import pandas as pd
from dateutil import parser
from rich.console import Console

from nyc_congestion_pipelines.utils.logging import log_step

console = Console()

TRAFFIC_DATETIME_PARTS = {"Yr": "year", "M": "month", "D": "day", "HH": "hour", "MM": "minute"}


def require_columns(df: pd.DataFrame, columns: Iterable[str], source: str) -> None:
    """Raise KeyError naming the first missing column."""
    for col in columns:
        if col not in df.columns:
            raise KeyError(f"'{col}' column not found in {source} data.")


def parse_month_name(x: Any) -> pd.Timestamp:
    """
    Parse a textual month field ("January 2021", "Jan 2021", "2021-01") into
    the first day of that month. Falls back to dateutil.parser when possible.
    """
    if pd.isna(x):
        return pd.NaT

    s = str(x).strip()
    if not s or s.lower() == "nan":
        return pd.NaT

    if re.match(r"^[A-Za-z]+ \d{4}$", s):
        ts = pd.to_datetime(s, format="%B %Y", errors="coerce")
        if pd.isna(ts):
            ts = pd.to_datetime(s, format="%b %Y", errors="coerce")
        return ts

    try:
        ts = pd.Timestamp(parser.parse(s, default=pd.Timestamp("2000-01-01").to_pydatetime()))
    except (ValueError, OverflowError):
        return pd.NaT
    return ts.normalize().replace(day=1)


def build_traffic_datetime(df: pd.DataFrame) -> pd.Series:
    """
    Combine the separate Yr/M/D/HH/MM columns of the traffic counts into one
    timestamp. Combinations that do not form a valid datetime become NaT.
    """
    require_columns(df, TRAFFIC_DATETIME_PARTS, "traffic")
    parts = pd.DataFrame(
        {name: pd.to_numeric(df[col], errors="coerce") for col, name in TRAFFIC_DATETIME_PARTS.items()},
        index=df.index,
    )
    valid = parts.notna().all(axis=1) & (parts == parts.round()).all(axis=1)
    ints = parts[valid].astype("int64").astype(str)

    text = (
        ints["year"].str.zfill(4) + "-" + ints["month"].str.zfill(2) + "-" + ints["day"].str.zfill(2)
        + " " + ints["hour"].str.zfill(2) + ":" + ints["minute"].str.zfill(2)
    )

    out = pd.Series(pd.NaT, index=df.index, dtype="datetime64[ns]")
    out.loc[valid] = pd.to_datetime(text, format="%Y-%m-%d %H:%M", errors="coerce")
    return out


def drop_missing_target(df: pd.DataFrame, target_col: str = "Vol") -> pd.DataFrame:
    """Discard rows where the target is missing or non-numeric."""
    require_columns(df, [target_col], "traffic")

    df = df.copy()
    total_rows = len(df)
    df[target_col] = pd.to_numeric(df[target_col], errors="coerce")
    df = df.dropna(subset=[target_col])

    console.print(f"[yellow]Dropped rows with missing {target_col}: {total_rows - len(df):,}")
    return df


def standardize_traffic_datetime(df: pd.DataFrame) -> pd.DataFrame:
    """
    Build 'DateTime' from the component columns and drop rows that fail
    to parse.
    """
    console.print("\n[bold cyan]Standardizing traffic DateTime...[/bold cyan]")

    df = df.copy()
    total_rows = len(df)

    df["DateTime"] = build_traffic_datetime(df)

    invalid = int(df["DateTime"].isna().sum())
    console.print(f"[cyan]Rows: {total_rows:,}")
    console.print(f"[green]Parsed timestamps: {total_rows - invalid:,}")
    console.print(f"[yellow]Dropped invalid timestamps: {invalid:,}")

    df = df.dropna(subset=["DateTime"]).copy()
    log_step("Traffic: DateTime built", df)
    return df


def cleanup_duplicate_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Keep the first of any repeated column names."""
    repeated = df.columns.duplicated()
    if repeated.any():
        console.print(f"[yellow]Dropped duplicate columns:[/yellow] {sorted(set(df.columns[repeated]))}")
    return df.loc[:, ~repeated]


__all__ = [
    "require_columns",
    "parse_month_name",
    "build_traffic_datetime",
    "drop_missing_target",
    "standardize_traffic_datetime",
    "cleanup_duplicate_columns",
]
