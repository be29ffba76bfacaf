# Synthetic daily × borough "integrated" dataset
#
# Drawn from seeded parametric distributions, not joined from the ingested
# traffic, weather and emergency tables. It carries no measured correlations.

from typing import Iterable, Optional

import numpy as np
import pandas as pd
from rich.console import Console

from config import (
    BOROUGHS,
    RANDOM_SEED,
    SYNTHETIC_YEAR,
    WEEKDAY_VOL_MEAN,
    WEEKDAY_VOL_STD,
    WEEKEND_VOL_MEAN,
    WEEKEND_VOL_STD,
    TEMP_BASELINE_F,
    TEMP_AMPLITUDE_F,
    TEMP_NOISE_STD_F,
    RAIN_SCALE_IN,
)
from nyc_congestion_pipelines.transform.calendar import season_series
from nyc_congestion_pipelines.utils.logging import log_step

console = Console()


def seasonal_temperature(day_of_year: np.ndarray) -> np.ndarray:
    """Noise-free sinusoid peaking in mid-July, trough in mid-January."""
    return TEMP_BASELINE_F + TEMP_AMPLITUDE_F * np.sin(2 * np.pi * (day_of_year - 105) / 365)


def build_integrated_dataset(
    year: int = SYNTHETIC_YEAR,
    boroughs: Optional[Iterable[str]] = None,
    seed: int = RANDOM_SEED,
) -> pd.DataFrame:
    """
    One row per (Date, Borough) over a calendar year.

    Vol ~ N(550, 150) on weekdays and N(400, 100) on weekends, rounded and
    clipped at 0. Temperature follows seasonal_temperature plus N(0, 5) noise.
    Rainfall ~ Exponential(0.15). Equal seeds give identical frames.
    """
    boroughs = list(BOROUGHS if boroughs is None else boroughs)
    if not boroughs:
        raise ValueError("At least one borough is required")

    rng = np.random.default_rng(seed)

    dates = pd.date_range(f"{year}-01-01", f"{year}-12-31", freq="D")
    grid = pd.MultiIndex.from_product([dates, boroughs], names=["Date", "Borough"]).to_frame(index=False)

    n = len(grid)
    dow = grid["Date"].dt.dayofweek.to_numpy()
    weekend = (dow >= 5).astype(int)

    vol_mean = np.where(weekend == 1, WEEKEND_VOL_MEAN, WEEKDAY_VOL_MEAN)
    vol_std = np.where(weekend == 1, WEEKEND_VOL_STD, WEEKDAY_VOL_STD)
    vol = rng.normal(vol_mean, vol_std, size=n)

    doy = grid["Date"].dt.dayofyear.to_numpy()
    temperature = seasonal_temperature(doy) + rng.normal(0.0, TEMP_NOISE_STD_F, size=n)

    rainfall = rng.exponential(RAIN_SCALE_IN, size=n)

    grid["Vol"] = np.clip(np.round(vol), 0, None).astype(int)
    grid["Temperature"] = np.round(temperature, 2)
    grid["Rainfall"] = np.round(rainfall, 3)
    grid["IsWeekend"] = weekend
    grid["Month"] = grid["Date"].dt.month
    grid["DayOfWeek"] = dow
    grid["Season"] = season_series(grid["Month"])

    log_step(f"Synthetic integrated dataset ({year}, seed={seed})", grid)
    return grid


__all__ = ["build_integrated_dataset", "seasonal_temperature"]
