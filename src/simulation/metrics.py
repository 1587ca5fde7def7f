"""
KPI Metrics collection for the Predator/Prey Simulator.

MetricsCollector gathers per-step Key Performance Indicators (KPIs) from the
simulation state and the step's statistics. It produces a flat dictionary
per step suitable for CSV export and charting.
"""

from __future__ import annotations

import numpy as np

from src.simulation.engine import Simulation


class MetricsCollector:
    """
    Collects and computes KPIs per step.

    Usage:
      1. After each step (and once before the first), call `collect(simulation)`
      2. Resulting dict is appended to `history`
      3. Call `get_history()` to retrieve all collected rows

    Attributes:
        history: List of KPI dicts, one per collected step.
    """

    def __init__(self):
        self.history: list[dict] = []

    def collect(self, simulation: Simulation) -> dict:
        """
        Compute all KPIs for the current state and append to history.

        The event counters (eaten, births, deaths) come from the most recent
        step; for step 0 they are all zero.

        Args:
            simulation: Simulation after a step (or before the first step).

        Returns:
            Dict of KPI_name -> value.
        """
        world = simulation.world
        stats = simulation.step_stats
        prey = world.get_prey()
        predators = world.get_predators()

        kpis: dict = {}

        # --- Population ---
        kpis["step"] = simulation.step_count
        kpis["prey_count"] = len(prey)
        kpis["predator_count"] = len(predators)
        kpis["population"] = len(prey) + len(predators)
        kpis["extinction_flag"] = world.is_extinct

        # --- Events of the last step ---
        fresh = simulation.step_count == 0
        kpis["prey_eaten"] = 0 if fresh else stats.prey_eaten
        kpis["births_prey"] = 0 if fresh else stats.births_prey
        kpis["births_predator"] = 0 if fresh else stats.births_predator
        kpis["deaths_prey"] = 0 if fresh else stats.deaths_prey
        kpis["deaths_predator"] = 0 if fresh else stats.deaths_predator

        # --- Age statistics ---
        kpis["avg_prey_age"] = _mean([p.age for p in prey])
        kpis["avg_predator_age"] = _mean([p.age for p in predators])

        # --- Predator consumption ---
        if predators:
            consumed = np.array([p.consumed_count for p in predators])
            kpis["avg_consumed"] = float(np.mean(consumed))
            kpis["max_consumed"] = int(np.max(consumed))
        else:
            kpis["avg_consumed"] = 0.0
            kpis["max_consumed"] = 0

        self.history.append(kpis)
        return kpis

    def get_history(self) -> list[dict]:
        """Return all collected KPI dicts."""
        return list(self.history)

    def get_series(self, kpi_name: str) -> list:
        """Return the values of one KPI across all collected steps."""
        return [row.get(kpi_name) for row in self.history]

    def reset(self) -> None:
        """Clear history."""
        self.history = []

    @staticmethod
    def kpi_names() -> list[str]:
        """Ordered list of all KPI column names."""
        return [
            "step",
            "prey_count", "predator_count", "population", "extinction_flag",
            "prey_eaten",
            "births_prey", "births_predator",
            "deaths_prey", "deaths_predator",
            "avg_prey_age", "avg_predator_age",
            "avg_consumed", "max_consumed",
        ]


def _mean(values: list[int]) -> float:
    if not values:
        return 0.0
    return float(np.mean(values))
