from pathlib import Path

import numpy as np
import pandas as pd
import pytest

BOROS = ["Bronx", "Brooklyn", "Manhattan", "Queens", "Staten Island"]


def _write_noaa(path: Path, title: str, units: str, values, anomalies) -> Path:
    lines = [title, f"Units: {units}", "Base Period: 1901-2000", "Missing: -99", "Date,Value,Anomaly"]
    for month, (v, a) in enumerate(zip(values, anomalies), start=1):
        lines.append(f"2023{month:02d},{v},{a}")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def temperature_csv(tmp_path) -> Path:
    temps = [35.1, 38.0, 45.2, 55.0, 64.3, 72.8, 78.1, 76.9, 69.5, 58.0, 47.7, -99]
    anomalies = [2.1, 1.0, 0.4, -0.3, 0.9, 1.8, 0.5, 0.1, 1.2, 2.0, -0.5, -99]
    return _write_noaa(tmp_path / "temperature.csv", "New York, Average Temperature", "Degrees Fahrenheit", temps, anomalies)


@pytest.fixture
def rainfall_csv(tmp_path) -> Path:
    rain = [3.2, 2.9, 4.1, 3.8, 3.5, 4.4, 4.6, 4.2, 3.9, 3.6, 3.1, 3.7]
    anomalies = [-0.3, 0.1, 0.2, -0.1, 0.0, 0.4, 0.3, -0.2, 0.1, 0.5, -0.1, 0.2]
    return _write_noaa(tmp_path / "rainfall.csv", "New York, Precipitation", "Inches", rain, anomalies)


def make_raw_traffic(n_days: int = 20, seed: int = 0) -> pd.DataFrame:
    """Hourly counts for every borough over n_days starting 2023-03-01."""
    rng = np.random.default_rng(seed)
    rows = []
    start = pd.Timestamp("2023-03-01")
    for day in range(n_days):
        ts = start + pd.Timedelta(days=day)
        for hour in range(0, 24, 3):
            for i, boro in enumerate(BOROS):
                rows.append({
                    "RequestID": 1000 + day,
                    "Boro": boro,
                    "Yr": ts.year,
                    "M": ts.month,
                    "D": ts.day,
                    "HH": hour,
                    "MM": 15,
                    "Vol": int(100 + 20 * i + 10 * hour + rng.integers(0, 30)),
                    "SegmentID": 5000 + i,
                    "WktGeom": "POINT (0 0)",
                    "street": f"Street {i}",
                    "fromSt": "A Ave",
                    "toSt": "B Ave",
                    "Direction": "NB" if hour % 2 else "SB",
                })
    return pd.DataFrame(rows)


@pytest.fixture
def raw_traffic() -> pd.DataFrame:
    return make_raw_traffic()


@pytest.fixture
def traffic_csv(tmp_path, raw_traffic) -> Path:
    bad = raw_traffic.head(3).copy()
    bad.loc[bad.index[0], "Vol"] = np.nan
    bad.loc[bad.index[1], "M"] = 13
    bad.loc[bad.index[2], ["M", "D"]] = [2, 30]
    df = pd.concat([raw_traffic, bad], ignore_index=True)

    path = tmp_path / "traffic.csv"
    df.to_csv(path, index=False)
    return path


@pytest.fixture
def emergency_csv(tmp_path) -> Path:
    rows = []
    for month in ["January 2023", "February 2023", "Mar 2023", "2023-04"]:
        for boro in ["BRONX", "Brooklyn", "manhattan"]:
            rows.append({"Month Name": month, "Borough": boro, "Average Response Time": "8.5", "Incident Count": 10})
    rows.append({"Month Name": "not a month", "Borough": "Queens", "Average Response Time": "9.0", "Incident Count": 3})
    rows.append({"Month Name": None, "Borough": "Queens", "Average Response Time": "n/a", "Incident Count": 4})

    path = tmp_path / "emergency.csv"
    pd.DataFrame(rows).to_csv(path, index=False)
    return path


@pytest.fixture
def input_paths(temperature_csv, rainfall_csv, traffic_csv, emergency_csv):
    return {
        "temperature_path": temperature_csv,
        "rainfall_path": rainfall_csv,
        "traffic_path": traffic_csv,
        "emergency_path": emergency_csv,
    }
