"""
Scenario loading for the Predator/Prey Simulator.

A scenario is the grid size, the number of steps to run and the initial
population. Three sources are supported:

  - preset:  one of the built-in scenario literals in PRESETS
  - manual:  the same text format typed in (or piped) through a stream
  - random:  uniformly placed entities from a seeded NumPy generator

Text format (whitespace separated, line breaks optional):

    W H T          grid width, grid height, steps
    R P            number of prey, number of predators
    x y d k        R lines of prey: position, direction code 0..3, turn period
    x y d k        P lines of predators
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional, TextIO

import numpy as np

from src.core.errors import InvalidConfiguration
from src.core.predator import Predator
from src.core.prey import Prey
from src.simulation.engine import Simulation
from src.utils.spatial import Direction


PRESETS: dict[str, str] = {
    "classic": "4 4 20\n1 1\n0 0 1 100\n0 3 0 100\n",
    "small": "3 3 5\n2 1\n1 2 1 1\n1 1 0 2\n0 2 1 2\n",
}


# ---------------------------------------------------------------------------
# Scenario data
# ---------------------------------------------------------------------------

@dataclass
class EntitySpec:
    """Initial state of one entity."""
    x: int
    y: int
    direction: Direction = Direction.UP
    turn_period: int = 1


@dataclass
class Scenario:
    """
    A complete starting setup.

    Attributes:
        width, height: Grid dimensions.
        steps: Number of steps to simulate.
        prey: Initial prey.
        predators: Initial predators.
    """
    width: int
    height: int
    steps: int
    prey: list[EntitySpec] = field(default_factory=list)
    predators: list[EntitySpec] = field(default_factory=list)

    def build_simulation(self, predator_threshold: str = "escalating") -> Simulation:
        """
        Create a Simulation and insert every entity, prey first.

        Raises:
            InvalidConfiguration: Bad dimensions or turn periods.
            InvalidEntityState: An entity lies outside the grid.
        """
        sim = Simulation(self.width, self.height, predator_threshold=predator_threshold)
        for spec in self.prey:
            sim.add_entity(Prey(spec.x, spec.y, spec.direction, spec.turn_period))
        for spec in self.predators:
            sim.add_entity(Predator(
                spec.x, spec.y, spec.direction, spec.turn_period,
                threshold_mode=predator_threshold,
            ))
        return sim

    def to_text(self) -> str:
        """Serialize back to the scenario text format."""
        lines = [f"{self.width} {self.height} {self.steps}", f"{len(self.prey)} {len(self.predators)}"]
        for spec in self.prey + self.predators:
            lines.append(f"{spec.x} {spec.y} {int(spec.direction)} {spec.turn_period}")
        return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# Text parsing
# ---------------------------------------------------------------------------

class _TokenReader:
    """Pull integer tokens one at a time, naming what is being read in errors."""

    def __init__(self, tokens: Iterator[str]):
        self._tokens = tokens

    def next_int(self, what: str) -> int:
        try:
            token = next(self._tokens)
        except StopIteration:
            raise InvalidConfiguration(f"Scenario ended early: expected {what}") from None
        try:
            return int(token)
        except ValueError:
            raise InvalidConfiguration(f"Expected integer for {what}, got '{token}'") from None


def _read_scenario(reader: _TokenReader) -> Scenario:
    width = reader.next_int("grid width")
    height = reader.next_int("grid height")
    steps = reader.next_int("number of steps")
    prey_count = reader.next_int("number of prey")
    predator_count = reader.next_int("number of predators")

    if width < 1 or height < 1:
        raise InvalidConfiguration(f"Grid must be at least 1x1, got {width}x{height}")
    if steps < 0:
        raise InvalidConfiguration(f"Number of steps must be >= 0, got {steps}")
    if prey_count < 0 or predator_count < 0:
        raise InvalidConfiguration(
            f"Entity counts must be >= 0, got {prey_count} prey and {predator_count} predators"
        )

    def read_specs(count: int, label: str) -> list[EntitySpec]:
        specs = []
        for i in range(count):
            x = reader.next_int(f"{label} {i + 1} x")
            y = reader.next_int(f"{label} {i + 1} y")
            d = reader.next_int(f"{label} {i + 1} direction")
            k = reader.next_int(f"{label} {i + 1} turn period")
            specs.append(EntitySpec(x, y, Direction.parse(d), k))
        return specs

    prey = read_specs(prey_count, "prey")
    predators = read_specs(predator_count, "predator")
    return Scenario(width, height, steps, prey, predators)


def parse_scenario(text: str) -> Scenario:
    """
    Parse a scenario from the text format.

    Trailing tokens after the last entity are ignored.

    Raises:
        InvalidConfiguration: If the text is truncated, non-numeric or out of range.
    """
    return _read_scenario(_TokenReader(iter(text.split())))


def load_preset(name: str) -> Scenario:
    """
    Load one of the built-in scenarios by name.

    Raises:
        InvalidConfiguration: If no preset has that name.
    """
    if name not in PRESETS:
        raise InvalidConfiguration(f"Unknown preset '{name}', choose from {sorted(PRESETS)}")
    return parse_scenario(PRESETS[name])


def read_manual(stream: TextIO, out: Optional[TextIO] = None) -> Scenario:
    """
    Read a scenario interactively, line by line, from a text stream.

    Prompts are written to `out` when given. Tokens may be split across
    lines freely; reading stops as soon as the scenario is complete.
    """
    if out is not None:
        out.write(
            "Enter field width, height and number of steps, then the number of prey\n"
            "and predators, then one 'x y direction turn_period' line per entity\n"
            "(prey first, directions 0=up 1=right 2=down 3=left):\n"
        )
        out.flush()

    def tokens() -> Iterator[str]:
        for line in stream:
            yield from line.split()

    return _read_scenario(_TokenReader(tokens()))


# ---------------------------------------------------------------------------
# Random generation
# ---------------------------------------------------------------------------

def generate_random(
    width: int,
    height: int,
    steps: int,
    prey_count: int,
    predator_count: int,
    rng: np.random.Generator,
    turn_period_range: tuple[int, int] = (1, 5),
) -> Scenario:
    """
    Build a scenario with uniformly random entities.

    Positions are uniform over the grid, directions uniform over the four
    headings and turn periods uniform in `turn_period_range` (inclusive).

    Args:
        width, height: Grid dimensions.
        steps: Number of steps to simulate.
        prey_count, predator_count: Population sizes.
        rng: Seeded NumPy generator.
        turn_period_range: Inclusive [low, high] turn period bounds.

    Returns:
        A Scenario (prey listed first).
    """
    low, high = turn_period_range
    if width < 1 or height < 1:
        raise InvalidConfiguration(f"Grid must be at least 1x1, got {width}x{height}")
    if low < 1 or low > high:
        raise InvalidConfiguration(f"turn_period_range must satisfy 1 <= low <= high, got {turn_period_range}")
    if prey_count < 0 or predator_count < 0:
        raise InvalidConfiguration("Entity counts must be >= 0")

    def draw(count: int) -> list[EntitySpec]:
        xs = rng.integers(0, width, size=count)
        ys = rng.integers(0, height, size=count)
        ds = rng.integers(0, 4, size=count)
        ks = rng.integers(low, high + 1, size=count)
        return [
            EntitySpec(int(x), int(y), Direction(int(d)), int(k))
            for x, y, d, k in zip(xs, ys, ds, ks)
        ]

    return Scenario(width, height, steps, draw(prey_count), draw(predator_count))
