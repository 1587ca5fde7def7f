"""
Predator species for the Predator/Prey Simulator.

Predators walk two cells per tick and eat every prey they share a cell with
after movement. Each prey eaten adds to a lifetime `consumed_count` that is
never reset by reproduction.

Reproduction is gated by a threshold on `consumed_count`:
  - "escalating" (default): consumed >= 2 * (1 + prior reproductions),
    i.e. 2, 4, 6, ... for the 1st, 2nd, 3rd offspring
  - "constant": consumed >= 2 for every offspring
"""

from __future__ import annotations

from src.core.entity import Entity, Species
from src.core.errors import InvalidConfiguration, InvalidEntityState


THRESHOLD_MODES = ("escalating", "constant")
THRESHOLD_STEP = 2


class Predator(Entity):
    """
    A predator entity.

    Attributes:
        consumed_count: Lifetime number of prey eaten.
        reproductions: Number of offspring spawned so far.
        threshold_mode: "escalating" or "constant" reproduction threshold.
    """

    species = Species.PREDATOR
    move_steps_per_tick = 2
    max_age = 20

    def __init__(self, x, y, direction=0, turn_period=1, threshold_mode: str = "escalating"):
        if threshold_mode not in THRESHOLD_MODES:
            raise InvalidConfiguration(
                f"threshold_mode must be one of {THRESHOLD_MODES}, got '{threshold_mode}'"
            )
        super().__init__(x, y, direction, turn_period)
        self.consumed_count = 0
        self.reproductions = 0
        self.threshold_mode = threshold_mode

    @property
    def reproduction_threshold(self) -> int:
        """Consumed count required for the next offspring."""
        if self.threshold_mode == "constant":
            return THRESHOLD_STEP
        return THRESHOLD_STEP * (1 + self.reproductions)

    def is_hungry(self) -> bool:
        return True

    def feed(self) -> None:
        """Credit one eaten prey."""
        self.consumed_count += 1

    def reduce_hunger(self, amount: int) -> None:
        """
        Lower the consumed count by `amount`, flooring at 0.

        Not part of the step pipeline; available to external drivers.

        Raises:
            InvalidConfiguration: If amount is negative.
        """
        if amount < 0:
            raise InvalidConfiguration(f"reduce_hunger amount must be >= 0, got {amount}")
        self.consumed_count = max(0, self.consumed_count - amount)

    def can_reproduce(self) -> bool:
        return self.consumed_count >= self.reproduction_threshold

    def spawn_offspring(self) -> Predator:
        """
        Spawn a newborn predator at this predator's cell.

        The consumed count is kept; only the reproduction counter grows.

        Raises:
            InvalidEntityState: If the threshold is not reached.
        """
        if not self.can_reproduce():
            raise InvalidEntityState(
                f"{self!r} needs {self.reproduction_threshold} consumed to reproduce, "
                f"has {self.consumed_count}"
            )
        self.reproductions += 1
        return Predator(
            self.x, self.y, self.direction, self.turn_period,
            threshold_mode=self.threshold_mode,
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["consumed_count"] = self.consumed_count
        data["reproductions"] = self.reproductions
        data["threshold_mode"] = self.threshold_mode
        return data

    def __repr__(self) -> str:
        return (
            f"Predator(id={self.id}, pos=({self.x},{self.y}), "
            f"dir={self.direction.name}, turn={self.turn_counter}/{self.turn_period}, "
            f"age={self.age}, consumed={self.consumed_count}, "
            f"reproductions={self.reproductions})"
        )
