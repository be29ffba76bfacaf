# nyc_congestion_pipelines/ingestion/ingestion_master.py
from pathlib import Path
from typing import Dict, Optional

import pandas as pd
from rich.console import Console

from .weather_loader import load_weather
from .traffic_loader import load_traffic
from .emergency_loader import load_emergency
from nyc_congestion_pipelines.validate.orchestrator import run_validations

from config import TEMPERATURE_CSV, RAINFALL_CSV, TRAFFIC_CSV, EMERGENCY_CSV, TRAFFIC_ROW_CAP

console = Console()


def run_ingestion(
    temperature_path: Path = TEMPERATURE_CSV,
    rainfall_path: Path = RAINFALL_CSV,
    traffic_path: Path = TRAFFIC_CSV,
    emergency_path: Path = EMERGENCY_CSV,
    traffic_nrows: Optional[int] = TRAFFIC_ROW_CAP,
) -> Dict[str, pd.DataFrame]:
    """Load all raw sources. A missing input file raises FileNotFoundError."""
    console.print("\n[bold cyan]=== INGESTION PIPELINE START ===[/bold cyan]\n")

    missing = [p for p in (temperature_path, rainfall_path, traffic_path, emergency_path) if not Path(p).exists()]
    if missing:
        raise FileNotFoundError(f"Required input files not found: {[str(p) for p in missing]}")

    # 1. Monthly weather (temperature + rainfall)
    weather = load_weather(temperature_path, rainfall_path)
    run_validations(weather, "Ingestion → Weather")

    # 2. Traffic counts (row-capped)
    traffic = load_traffic(traffic_path, nrows=traffic_nrows)
    run_validations(traffic, "Ingestion → Traffic", check_boro=True)

    # 3. Emergency response times
    emergency = load_emergency(emergency_path)
    run_validations(emergency, "Ingestion → Emergency")

    console.print("\n[green]✓ Ingestion completed successfully.[/green]\n")

    return {
        "weather": weather,
        "traffic": traffic,
        "emergency": emergency,
    }
