# Step log shared by every stage: name, shape and row change since the previous step

from typing import Any, Dict, List, Optional

import pandas as pd
from rich.console import Console
from rich.table import Table

console = Console()

pipeline_log: List[Dict[str, Any]] = []


def _shape(df: Any) -> Optional[tuple]:
    if isinstance(df, pd.DataFrame) and not df.empty:
        return int(df.shape[0]), int(df.shape[1])
    return None


def log_step(step_name: str, df: pd.DataFrame) -> None:
    """
    Record a step and print its shape.

    Empty frames (or non-frames) are recorded with rows/cols "N/A". `delta`
    is the row change against the previous step that had a shape, None for
    the first one.
    """
    shape = _shape(df)
    previous = next((e["rows"] for e in reversed(pipeline_log) if isinstance(e["rows"], int)), None)

    if shape is None:
        entry = {"step": step_name, "rows": "N/A", "cols": "N/A", "delta": None}
        console.print(f"[green]{step_name}[/green] [dim]empty[/dim]")
    else:
        rows, cols = shape
        delta = None if previous is None else rows - previous
        entry = {"step": step_name, "rows": rows, "cols": cols, "delta": delta}
        console.print(f"[green]{step_name}[/green] [cyan]{rows:,} rows x {cols} cols[/cyan]")

    pipeline_log.append(entry)


def get_pipeline_log() -> List[Dict[str, Any]]:
    return [dict(e) for e in pipeline_log]


def show_pipeline_table() -> None:
    if not pipeline_log:
        console.print("[red]No pipeline steps logged yet.[/red]")
        return

    table = Table(title="NYC Congestion Pipeline Summary", show_lines=True)
    table.add_column("Step", style="cyan", no_wrap=True)
    table.add_column("Rows", justify="right", style="green")
    table.add_column("Cols", justify="right", style="yellow")
    table.add_column("Δ Rows", justify="right", style="magenta")

    for e in pipeline_log:
        rows = f"{e['rows']:,}" if isinstance(e["rows"], int) else e["rows"]
        delta = "" if e["delta"] is None else f"{e['delta']:+,}"
        table.add_row(e["step"], rows, str(e["cols"]), delta)

    console.print(table)


def clear_pipeline_log() -> None:
    pipeline_log.clear()


__all__ = ["log_step", "show_pipeline_table", "clear_pipeline_log", "get_pipeline_log"]
