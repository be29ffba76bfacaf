# Calendar features: season, time-of-day bucket, weekend and holiday flags

import numpy as np
import pandas as pd
import holidays
from rich.console import Console

console = Console()

SEASONS = ["Winter", "Spring", "Summer", "Fall"]
TIMES_OF_DAY = ["Morning", "Midday", "Evening", "Night"]

_SEASON_BY_MONTH = {
    12: "Winter", 1: "Winter", 2: "Winter",
    3: "Spring", 4: "Spring", 5: "Spring",
    6: "Summer", 7: "Summer", 8: "Summer",
    9: "Fall", 10: "Fall", 11: "Fall",
}


def season_from_month(month: int) -> str:
    """Map a calendar month (1-12) to its meteorological season."""
    month = int(month)
    if month not in _SEASON_BY_MONTH:
        raise ValueError(f"Month must be in 1..12, got {month}")
    return _SEASON_BY_MONTH[month]


def time_of_day_from_hour(hour: int) -> str:
    """
    Bucket an hour of day (0-23).

    Morning [6, 10), Midday [10, 16), Evening [16, 20), Night otherwise.
    """
    hour = int(hour)
    if not 0 <= hour <= 23:
        raise ValueError(f"Hour must be in 0..23, got {hour}")
    if 6 <= hour < 10:
        return "Morning"
    if 10 <= hour < 16:
        return "Midday"
    if 16 <= hour < 20:
        return "Evening"
    return "Night"


def is_weekend_from_dayofweek(day_index: int) -> int:
    """1 for Saturday/Sunday, using the pandas convention Monday=0."""
    day_index = int(day_index)
    if not 0 <= day_index <= 6:
        raise ValueError(f"Day of week must be in 0..6, got {day_index}")
    return int(day_index >= 5)


def season_series(months: pd.Series) -> pd.Series:
    """Vectorised season_from_month; unknown months raise."""
    seasons = months.astype(int).map(_SEASON_BY_MONTH)
    if seasons.isna().any():
        bad = sorted(months[seasons.isna()].unique().tolist())
        raise ValueError(f"Months outside 1..12: {bad}")
    return seasons


def time_of_day_series(hours: pd.Series) -> pd.Series:
    hours = hours.astype(int)
    if ((hours < 0) | (hours > 23)).any():
        raise ValueError("Hours outside 0..23 found")
    labels = np.select(
        [(hours >= 6) & (hours < 10), (hours >= 10) & (hours < 16), (hours >= 16) & (hours < 20)],
        ["Morning", "Midday", "Evening"],
        default="Night",
    )
    return pd.Series(labels, index=hours.index)


def add_calendar_features(df: pd.DataFrame, datetime_col: str = "DateTime") -> pd.DataFrame:
    """Add Year/Month/Day/DayOfWeek/Hour/TimeOfDay/IsWeekend/IsHoliday/Season."""

    df = df.copy()
    if datetime_col not in df.columns:
        raise KeyError(f"'{datetime_col}' column not found.")

    df[datetime_col] = pd.to_datetime(df[datetime_col])
    dt = df[datetime_col].dt

    df["Year"] = dt.year
    df["Month"] = dt.month
    df["Day"] = dt.day
    df["DayOfWeek"] = dt.dayofweek
    df["DayName"] = dt.day_name()
    df["Hour"] = dt.hour

    df["TimeOfDay"] = time_of_day_series(df["Hour"])
    df["IsWeekend"] = (df["DayOfWeek"] >= 5).astype(int)
    df["Season"] = season_series(df["Month"])

    years = sorted(df["Year"].unique().tolist())
    holiday_dates = holidays.country_holidays("US", subdiv="NY", years=years)
    df["IsHoliday"] = dt.date.isin(list(holiday_dates.keys())).astype(int)

    console.print("[green]Calendar features added.[/green]")
    return df


__all__ = [
    "SEASONS",
    "TIMES_OF_DAY",
    "season_from_month",
    "time_of_day_from_hour",
    "is_weekend_from_dayofweek",
    "season_series",
    "time_of_day_series",
    "add_calendar_features",
]
