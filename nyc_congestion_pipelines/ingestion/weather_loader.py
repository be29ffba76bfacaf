# Monthly NYC weather from NOAA "Climate at a Glance" CSV exports

from pathlib import Path
from typing import List

import numpy as np
import pandas as pd
from rich.console import Console

from config import NOAA_MISSING_VALUES, TEMPERATURE_CSV, RAINFALL_CSV
from nyc_congestion_pipelines.transform.calendar import season_series
from nyc_congestion_pipelines.transform.cleaning import require_columns
from nyc_congestion_pipelines.utils.logging import log_step

console = Console()


def _find_header_row(path: Path) -> int:
    """NOAA exports carry a few title lines before the Date,Value,Anomaly header."""
    with open(path, "r", encoding="utf-8-sig") as fh:
        for idx, line in enumerate(fh):
            if line.strip().lower().startswith("date"):
                return idx
    raise ValueError(f"No 'Date' header row found in {path}")


def load_monthly_series(path: Path, value_name: str) -> pd.DataFrame:
    """
    Load one monthly series.

    Returns a frame with columns Date, <value_name>, <anomaly_name> where the
    anomaly column is named after the value ('Temperature' -> 'TempAnomaly',
    'Rainfall' -> 'RainAnomaly').
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Weather file not found: {path}")

    console.print(f"[cyan]Reading:[/cyan] {path.name}")
    header_row = _find_header_row(path)
    df = pd.read_csv(path, skiprows=header_row, na_values=NOAA_MISSING_VALUES)
    df.columns = [c.strip() for c in df.columns]
    require_columns(df, ["Date", "Value"], f"weather ({path.name})")

    anomaly_name = anomaly_column_name(value_name)

    yyyymm = pd.to_numeric(df["Date"], errors="coerce").astype("Int64").astype("string")

    out = pd.DataFrame({
        "Date": pd.to_datetime(yyyymm, format="%Y%m", errors="coerce"),
        value_name: pd.to_numeric(df["Value"], errors="coerce"),
        anomaly_name: pd.to_numeric(df["Anomaly"], errors="coerce") if "Anomaly" in df.columns else np.nan,
    })

    invalid = int(out["Date"].isna().sum())
    if invalid:
        console.print(f"[yellow]Dropped unparseable months in {path.name}: {invalid:,}")
    out = out.dropna(subset=["Date"])

    # one record per calendar month
    out = out.drop_duplicates(subset=["Date"], keep="first")
    return out.sort_values("Date").reset_index(drop=True)


def anomaly_column_name(value_name: str) -> str:
    prefixes = {"Temperature": "Temp", "Rainfall": "Rain"}
    return f"{prefixes.get(value_name, value_name)}Anomaly"


def merge_weather(temperature: pd.DataFrame, rainfall: pd.DataFrame) -> pd.DataFrame:
    """Join monthly temperature and rainfall on Date and add calendar columns."""
    weather = temperature.merge(rainfall, on="Date", how="inner")
    weather["Year"] = weather["Date"].dt.year
    weather["Month"] = weather["Date"].dt.month
    weather["Season"] = season_series(weather["Month"])

    cols: List[str] = [
        "Date", "Temperature", "TempAnomaly", "Rainfall", "RainAnomaly",
        "Year", "Month", "Season",
    ]
    return weather[cols].sort_values("Date").reset_index(drop=True)


def load_weather(
    temperature_path: Path = TEMPERATURE_CSV,
    rainfall_path: Path = RAINFALL_CSV,
) -> pd.DataFrame:
    """Load and merge both monthly weather series."""
    temperature = load_monthly_series(temperature_path, "Temperature")
    rainfall = load_monthly_series(rainfall_path, "Rainfall")

    weather = merge_weather(temperature, rainfall)
    log_step("Weather: temperature + rainfall merged", weather)
    return weather


__all__ = ["load_monthly_series", "merge_weather", "load_weather", "anomaly_column_name"]
