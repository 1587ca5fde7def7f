"""
Run Manager for the Predator/Prey Simulator.

Manages output directories for simulation runs:
  - Creates timestamped run directories under a base output path
  - Copies the config and the starting scenario used for the run
  - Provides paths for the metrics CSV, field log and snapshots
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Optional

from src.core.config import SimConfig, save_config
from src.logging.csv_logger import CSVLogger
from src.logging.snapshot import SnapshotManager
from src.simulation.engine import Simulation


class RunManager:
    """
    Manages a single simulation run's output directory.

    Directory structure:
        {base_dir}/{run_name}/
            config.json          copy of the simulation config
            scenario.txt         starting population in scenario text format
            metrics.csv          per-step KPIs
            field.txt            rendered field after every step
            snapshots/           simulation state snapshots (JSON)
                step_0000.json
                ...
            summary.json         written by finalize()

    Attributes:
        run_dir: Path to this run's output directory.
        csv_logger: CSVLogger instance for metrics.
        snapshot_manager: SnapshotManager instance for state snapshots.
    """

    def __init__(
        self,
        config: SimConfig,
        base_dir: Optional[str | Path] = None,
        run_name: Optional[str] = None,
    ):
        """
        Initialize a run manager and create the output directory.

        Args:
            config: Simulation configuration (will be saved as config.json).
            base_dir: Base output directory. None = use config.output.output_dir.
            run_name: Name for this run's subdirectory. None = timestamp.
        """
        if base_dir is None:
            base_dir = config.output.output_dir

        if run_name is None:
            run_name = datetime.now().strftime("%Y%m%d_%H%M%S")

        self.run_dir = Path(base_dir) / run_name
        self.run_dir.mkdir(parents=True, exist_ok=True)

        self._config_path = self.run_dir / "config.json"
        save_config(config, self._config_path)

        self.csv_logger = CSVLogger(self.run_dir / "metrics.csv")
        self.snapshot_manager = SnapshotManager(self.run_dir)
        self._field_path = self.run_dir / "field.txt"

    @property
    def config_path(self) -> Path:
        return self._config_path

    @property
    def metrics_path(self) -> Path:
        return self.csv_logger.file_path

    @property
    def field_path(self) -> Path:
        return self._field_path

    @property
    def snapshots_dir(self) -> Path:
        return self.snapshot_manager.snapshot_dir

    def save_scenario(self, scenario_text: str) -> Path:
        """Store the starting population as scenario.txt."""
        path = self.run_dir / "scenario.txt"
        path.write_text(scenario_text, encoding="utf-8")
        return path

    def log_step(self, kpi_dict: dict) -> None:
        """Log a step's KPIs to CSV."""
        self.csv_logger.log_row(kpi_dict)

    def log_field(self, step: int, field_text: str) -> None:
        """Append a rendered field to field.txt under a 'Step N:' header."""
        with open(self._field_path, "a", encoding="utf-8") as f:
            f.write(f"Step {step}:\n{field_text}\n\n")

    def save_snapshot(self, simulation: Simulation) -> Path:
        """Save a simulation state snapshot."""
        return self.snapshot_manager.save(simulation)

    def finalize(self, summary: Optional[dict] = None) -> None:
        """
        Finalize the run (write summary file if provided).

        Args:
            summary: Optional summary dict to save as summary.json.
        """
        if summary is not None:
            summary_path = self.run_dir / "summary.json"
            with open(summary_path, "w", encoding="utf-8") as f:
                json.dump(summary, f, indent=2, ensure_ascii=False)

    @staticmethod
    def list_runs(base_dir: str | Path) -> list[str]:
        """Sorted names of all run directories under the base directory."""
        base = Path(base_dir)
        if not base.exists():
            return []
        return sorted(
            d.name for d in base.iterdir()
            if d.is_dir() and (d / "config.json").exists()
        )

    def __repr__(self) -> str:
        return f"RunManager(run_dir='{self.run_dir}')"
