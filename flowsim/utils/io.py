"""JSON and CSV helpers for simulation results."""

import json
from pathlib import Path
from typing import Any, Iterable

from ..core.result import SimulationResult


def save_json(obj: Any, file_path: str, indent: int = 2) -> None:
    """Save object as JSON, creating parent directories."""
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w') as f:
        json.dump(obj, f, indent=indent, default=str)


def load_json(file_path: str) -> Any:
    """Load JSON file."""
    with open(file_path, 'r') as f:
        return json.load(f)


def save_results_csv(results: Iterable[SimulationResult], file_path: str) -> None:
    """Write one CSV row per run result, with a header line."""
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w') as f:
        f.write(SimulationResult.csv_header() + "\n")
        for result in results:
            f.write(result.to_csv_row() + "\n")
