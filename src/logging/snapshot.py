"""
Snapshot manager for the Predator/Prey Simulator.

Saves and loads full simulation state snapshots (JSON) per step. Snapshots
capture every live entity and the grid dimensions for later replay or
analysis in the UI.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import numpy as np

from src.simulation.engine import Simulation


class SnapshotManager:
    """
    Saves and loads simulation state snapshots as JSON files.

    Each snapshot is saved to: {output_dir}/snapshots/step_{N:04d}.json

    Attributes:
        output_dir: Base output directory for the run.
    """

    def __init__(self, output_dir: str | Path):
        self.output_dir = Path(output_dir)
        self.snapshot_dir = self.output_dir / "snapshots"

    def save(self, simulation: Simulation) -> Path:
        """
        Save a snapshot of the current simulation state.

        Args:
            simulation: The simulation to snapshot (filename uses its step count).

        Returns:
            Path to the saved snapshot file.
        """
        self.snapshot_dir.mkdir(parents=True, exist_ok=True)
        snapshot = self.to_dict(simulation)
        file_path = self.snapshot_dir / f"step_{simulation.step_count:04d}.json"

        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(snapshot, f, indent=2, ensure_ascii=False, default=_json_default)

        return file_path

    def load(self, step: int) -> dict:
        """
        Load a snapshot for a specific step.

        Raises:
            FileNotFoundError: If snapshot doesn't exist.
        """
        file_path = self.snapshot_dir / f"step_{step:04d}.json"
        if not file_path.exists():
            raise FileNotFoundError(f"Snapshot not found: {file_path}")

        with open(file_path, "r", encoding="utf-8") as f:
            return json.load(f)

    def list_snapshots(self) -> list[int]:
        """Sorted list of step numbers with a saved snapshot."""
        if not self.snapshot_dir.exists():
            return []
        steps = []
        for p in self.snapshot_dir.glob("step_*.json"):
            try:
                steps.append(int(p.stem.split("_")[1]))
            except (IndexError, ValueError):
                continue
        return sorted(steps)

    @staticmethod
    def to_dict(simulation: Simulation) -> dict:
        """Convert simulation state to a serializable dict."""
        return {
            "step": simulation.step_count,
            "width": simulation.width,
            "height": simulation.height,
            "prey_count": simulation.prey_count,
            "predator_count": simulation.predator_count,
            "entities": [e.to_dict() for e in simulation.entities],
            "field": simulation.world.population_field(),
        }


def _json_default(obj: Any) -> Any:
    """JSON serialization fallback for NumPy types."""
    if isinstance(obj, (np.integer,)):
        return int(obj)
    if isinstance(obj, (np.floating,)):
        return float(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")
