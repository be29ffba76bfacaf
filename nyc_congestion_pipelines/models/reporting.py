# Result tables and markdown cards written next to the figures

from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
from rich.console import Console

from config import CARDS_DIR, TEST_RESULTS_DIR, TOP_K
from nyc_congestion_pipelines.models.results import Explanation

console = Console()


def save_result_tables(tables: Dict[str, pd.DataFrame], out_dir: Path = TEST_RESULTS_DIR) -> Dict[str, Path]:
    """Write each named table to <out_dir>/<name>.csv (index kept when it is named)."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    paths = {}
    for name, table in tables.items():
        path = out_dir / f"{name}.csv"
        table.to_csv(path, index=table.index.name is not None)
        paths[name] = path
        console.print(f"[green]Saved[/green] {name} → {path}")
    return paths


def generate_model_card(
    leaderboard: pd.DataFrame,
    importance: pd.DataFrame,
    explanations: Optional[List[Explanation]] = None,
    out_dir: Path = CARDS_DIR,
    k: int = TOP_K,
) -> Path:
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    timestamp = pd.Timestamp.now().strftime("%Y-%m-%d %H:%M:%S")

    best_model = leaderboard.sort_values("RMSE").iloc[0]["Model"]

    lines = []
    for exp in explanations or []:
        status = "computed" if exp.available else f"unavailable ({exp.reason})"
        lines.append(f"- {exp.method.upper()} on {exp.model_name}: {status}")
    explanation_md = "\n".join(lines) if lines else "- not run"

    card = f"""# Model Card: NYC Traffic Volume

Generated: {timestamp}

## Held-out Metrics (temporal 80/20 split)

{leaderboard.to_markdown(index=False, floatfmt=".4f")}

**Best model (by RMSE):** **{best_model}**

## Top {k} Features (mean normalised importance)

{importance.head(k).to_markdown(floatfmt=".3f")}

## Explanations

{explanation_md}
"""

    path = out_dir / "model_card.md"
    path.write_text(card, encoding="utf-8")
    console.print(f"[green]Model card written[/green] → {path}")
    return path


__all__ = ["save_result_tables", "generate_model_card"]
