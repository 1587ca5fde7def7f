"""
Simulation Engine: main step loop for the Predator/Prey Simulator.

One step advances the world by a single tick through five phases, always
in this order:

  1. Move         every entity walks and possibly turns
  2. Predation    predators eat every prey sharing their cell
  3. Aging        every survivor ages by one
  4. Reproduction eligible survivors spawn offspring (appended afterwards)
  5. Extinction   entities at or past their species' max age are removed

All preconditions (grid size, entity bounds, turn periods) are enforced on
construction and insertion, so a step always applies completely.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Callable, Optional

from src.core.config import SimConfig
from src.core.entity import Entity
from src.core.predator import THRESHOLD_MODES, Predator
from src.core.prey import Prey
from src.core.world import World
from src.core.errors import InvalidConfiguration


# ---------------------------------------------------------------------------
# Step statistics: lightweight counters for one step
# ---------------------------------------------------------------------------

@dataclass
class StepStats:
    """Statistics collected during a single step."""
    prey_eaten: int = 0
    consumption_credits: int = 0
    births_prey: int = 0
    births_predator: int = 0
    deaths_prey: int = 0
    deaths_predator: int = 0


# ---------------------------------------------------------------------------
# Run result
# ---------------------------------------------------------------------------

@dataclass
class RunResult:
    """Result of a multi-step run."""
    total_steps: int = 0
    final_prey: int = 0
    final_predators: int = 0
    extinct: bool = False
    extinction_step: Optional[int] = None
    step_stats_history: list[StepStats] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Simulation
# ---------------------------------------------------------------------------

class Simulation:
    """
    Core simulation engine.

    Attributes:
        world: The owned World holding every live entity.
        predator_threshold: Reproduction rule for predators added through
            `add_predator` ("escalating" or "constant").
        step_count: Number of completed steps.
        step_stats: Statistics of the most recent step.
        on_step: Optional callback invoked after each step(step_number, simulation).
    """

    def __init__(self, width: int, height: int, predator_threshold: str = "escalating"):
        """
        Create a simulation on an empty width x height torus.

        Raises:
            InvalidConfiguration: If a dimension is < 1 or the threshold
                mode is unknown.
        """
        if predator_threshold not in THRESHOLD_MODES:
            raise InvalidConfiguration(
                f"predator_threshold must be one of {THRESHOLD_MODES}, got '{predator_threshold}'"
            )
        self.world = World(width, height)
        self.predator_threshold = predator_threshold
        self.step_count: int = 0

        self.step_stats = StepStats()
        self._accumulated_step_stats: list[StepStats] = []

        self.on_step: Optional[Callable[[int, "Simulation"], None]] = None

    @classmethod
    def from_config(cls, config: SimConfig) -> Simulation:
        """Create an empty simulation using the world size and species rules of a config."""
        return cls(
            config.world.width,
            config.world.height,
            predator_threshold=config.species.predator_threshold,
        )

    # ------------------------------------------------------------------
    # Population setup
    # ------------------------------------------------------------------

    def add_entity(self, entity: Entity) -> None:
        """
        Insert a fully constructed Prey or Predator.

        Raises:
            InvalidEntityState: If the entity lies outside the grid or is
                already present.
        """
        self.world.add_entity(entity)

    def add_prey(self, x: int, y: int, direction=0, turn_period: int = 1) -> Prey:
        prey = Prey(x, y, direction, turn_period)
        self.add_entity(prey)
        return prey

    def add_predator(self, x: int, y: int, direction=0, turn_period: int = 1) -> Predator:
        predator = Predator(x, y, direction, turn_period, threshold_mode=self.predator_threshold)
        self.add_entity(predator)
        return predator

    # ------------------------------------------------------------------
    # Core step
    # ------------------------------------------------------------------

    def step(self) -> None:
        """
        Advance the world by exactly one tick.

        Statistics for the step are stored in `step_stats`.
        """
        stats = StepStats()

        self._move()
        self._resolve_predation(stats)
        self._age()
        self._reproduce(stats)
        self._remove_extinct(stats)

        self.step_count += 1
        self.step_stats = stats
        self._accumulated_step_stats.append(stats)

        if self.on_step is not None:
            self.on_step(self.step_count, self)

    def _move(self) -> None:
        width, height = self.world.width, self.world.height
        for entity in self.world:
            entity.advance(width, height)

    def _resolve_predation(self, stats: StepStats) -> None:
        # Collect victims by id first; a prey shared by several predators
        # credits each of them but is removed once.
        predators = self.world.get_predators()
        prey = self.world.get_prey()
        eaten: dict[int, Prey] = {}

        for predator in predators:
            for victim in prey:
                if predator.x == victim.x and predator.y == victim.y:
                    predator.feed()
                    stats.consumption_credits += 1
                    eaten[victim.id] = victim

        for victim_id in eaten:
            self.world.remove_entity(victim_id)
        stats.prey_eaten = len(eaten)

    def _age(self) -> None:
        for entity in self.world:
            entity.increase_age()

    def _reproduce(self, stats: StepStats) -> None:
        offspring: list[Entity] = []
        for entity in self.world:
            if entity.can_reproduce():
                offspring.append(entity.spawn_offspring())

        for child in offspring:
            self.world.add_entity(child)
            if child.is_predator():
                stats.births_predator += 1
            else:
                stats.births_prey += 1

    def _remove_extinct(self, stats: StepStats) -> None:
        dead = [e for e in self.world if e.is_dead()]
        for entity in dead:
            self.world.remove_entity(entity.id)
            if entity.is_predator():
                stats.deaths_predator += 1
            else:
                stats.deaths_prey += 1

    # ------------------------------------------------------------------
    # Multi-step run
    # ------------------------------------------------------------------

    def run(self, max_steps: int, stop_on_extinction: bool = True) -> RunResult:
        """
        Run the simulation for up to `max_steps` steps.

        Args:
            max_steps: Maximum number of steps to simulate.
            stop_on_extinction: Stop early once no prey and no predators are left.

        Returns:
            RunResult with summary statistics.
        """
        if max_steps < 0:
            raise InvalidConfiguration(f"max_steps must be >= 0, got {max_steps}")

        result = RunResult()
        history_start = len(self._accumulated_step_stats)

        steps_run = 0
        while steps_run < max_steps:
            if stop_on_extinction and self.world.is_extinct:
                break
            self.step()
            steps_run += 1

            if self.world.is_extinct and result.extinction_step is None:
                result.extinction_step = self.step_count

        result.total_steps = steps_run
        result.extinct = self.world.is_extinct
        result.final_prey = self.world.prey_count
        result.final_predators = self.world.predator_count
        result.step_stats_history = self._accumulated_step_stats[history_start:]
        return result

    # ------------------------------------------------------------------
    # Accumulated statistics helpers
    # ------------------------------------------------------------------

    def get_accumulated_stats(self) -> dict[str, int]:
        """
        Sum all step stats from the current accumulation period.

        Returns:
            Dict of stat_name -> total_value.
        """
        totals = {f.name: 0 for f in fields(StepStats)}
        for stats in self._accumulated_step_stats:
            for name in totals:
                totals[name] += getattr(stats, name)
        return totals

    def reset_accumulated_stats(self) -> list[StepStats]:
        """
        Reset and return the accumulated step stats.

        Returns:
            The accumulated stats before reset.
        """
        old = self._accumulated_step_stats
        self._accumulated_step_stats = []
        return old

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self.world.width

    @property
    def height(self) -> int:
        return self.world.height

    @property
    def entities(self) -> list[Entity]:
        """Snapshot of live entities in insertion order."""
        return self.world.get_entities()

    @property
    def prey_count(self) -> int:
        return self.world.prey_count

    @property
    def predator_count(self) -> int:
        return self.world.predator_count

    @property
    def is_extinct(self) -> bool:
        return self.world.is_extinct

    def __repr__(self) -> str:
        return (
            f"Simulation(step={self.step_count}, "
            f"size={self.width}x{self.height}, "
            f"prey={self.prey_count}, predators={self.predator_count})"
        )
