# Raw Data Ingestion for NYC DOT Automated Traffic Volume Counts
from pathlib import Path
from typing import Optional

import pandas as pd
from rich.console import Console

from config import TRAFFIC_CSV, TARGET_COL
from nyc_congestion_pipelines.transform.calendar import add_calendar_features
from nyc_congestion_pipelines.transform.cleaning import (
    cleanup_duplicate_columns,
    drop_missing_target,
    require_columns,
    standardize_traffic_datetime,
)
from nyc_congestion_pipelines.utils.logging import log_step

console = Console()

STREET_METADATA_COLS = ["RequestID", "SegmentID", "WktGeom", "street", "fromSt", "toSt", "Direction"]


def load_traffic(path: Path = TRAFFIC_CSV, nrows: Optional[int] = None) -> pd.DataFrame:
    """
    Read raw traffic counts -> drop missing Vol -> build DateTime -> calendar features.

    Parameters:
        path: CSV with columns Boro, Yr, M, D, HH, MM, Vol and street metadata
        nrows: optional row cap to bound memory on the full file
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Traffic file not found: {path}")

    cap = f" (first {nrows:,} rows)" if nrows else ""
    console.print(f"[cyan]Reading:[/cyan] {path.name}{cap}")

    df = pd.read_csv(path, nrows=nrows, low_memory=False)
    df.columns = [c.strip() for c in df.columns]
    df = cleanup_duplicate_columns(df)
    require_columns(df, ["Boro", TARGET_COL], "traffic")
    log_step("Traffic: raw rows read", df)

    df = drop_missing_target(df, TARGET_COL)
    df = standardize_traffic_datetime(df)
    df = add_calendar_features(df, "DateTime")

    df["Boro"] = df["Boro"].astype(str).str.strip()

    keep = [
        "DateTime", "Year", "Month", "Day", "DayOfWeek", "DayName", "Hour",
        "TimeOfDay", "IsWeekend", "IsHoliday", "Season", "Boro", TARGET_COL,
    ]
    keep += [c for c in STREET_METADATA_COLS if c in df.columns]

    df = df[keep].sort_values("DateTime", kind="stable").reset_index(drop=True)
    log_step("Traffic: cleaned", df)
    return df


__all__ = ["load_traffic", "STREET_METADATA_COLS"]
