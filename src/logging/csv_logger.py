"""
CSV Logger for the Predator/Prey Simulator.

Writes one row per step to a CSV file with all KPI columns.
Supports incremental appending (writes header on first row, then appends).
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Optional

from src.simulation.metrics import MetricsCollector


class CSVLogger:
    """
    Logs per-step KPIs to a CSV file.

    Usage:
        logger = CSVLogger("runs/my_run/metrics.csv")
        logger.log_row(kpi_dict)          # append one row
        logger.log_all(metrics.history)   # rewrite the file with all rows

    Attributes:
        file_path: Path to the CSV file.
        columns: Ordered list of column names.
        rows_written: Rows written by this logger instance.
    """

    def __init__(
        self,
        file_path: str | Path,
        columns: Optional[list[str]] = None,
    ):
        """
        Args:
            file_path: Path to the output CSV file. Directory is created if needed.
            columns: Ordered column names. None = use MetricsCollector.kpi_names().
        """
        self.file_path = Path(file_path)
        self.columns = columns or MetricsCollector.kpi_names()
        self.rows_written = 0
        self._header_written = False

        self.file_path.parent.mkdir(parents=True, exist_ok=True)

    def _writer(self, f) -> csv.DictWriter:
        return csv.DictWriter(f, fieldnames=self.columns, extrasaction="ignore")

    def _ensure_header(self) -> None:
        # An existing non-empty file already has its header
        if self._header_written:
            return
        if not (self.file_path.exists() and self.file_path.stat().st_size > 0):
            with open(self.file_path, "w", newline="", encoding="utf-8") as f:
                self._writer(f).writeheader()
        self._header_written = True

    def log_row(self, kpi_dict: dict) -> None:
        """Append a single KPI row to the CSV file."""
        self._ensure_header()
        with open(self.file_path, "a", newline="", encoding="utf-8") as f:
            self._writer(f).writerow(kpi_dict)
        self.rows_written += 1

    def log_all(self, kpi_list: list[dict]) -> None:
        """Write all KPI rows at once (overwrites existing file)."""
        with open(self.file_path, "w", newline="", encoding="utf-8") as f:
            writer = self._writer(f)
            writer.writeheader()
            writer.writerows(kpi_list)
        self._header_written = True
        self.rows_written = len(kpi_list)

    def read_back(self) -> list[dict]:
        """Read back all rows from the CSV file (values as strings)."""
        if not self.file_path.exists():
            return []
        with open(self.file_path, "r", encoding="utf-8") as f:
            return list(csv.DictReader(f))
