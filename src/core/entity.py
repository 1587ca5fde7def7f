"""
Entity (Agent) base for the Predator/Prey Simulator.

Every creature on the grid shares position, heading, a turn cycle and an
age. Each tick an entity walks `move_steps_per_tick` unit steps in its
current direction (wrapping around the torus), then advances its turn
counter; after `turn_period` moves it rotates clockwise.

Species-specific feeding, reproduction and death rules live in the Prey and
Predator subclasses. Each entity carries a Species tag used for
classification by the renderer and metrics.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Union

from src.core.errors import InvalidConfiguration
from src.utils.spatial import Direction, step_toward


class Species(Enum):
    PREY = "prey"
    PREDATOR = "predator"


# Unique ID counter for entities
_next_entity_id: int = 0


def _get_next_id() -> int:
    """Generate a globally unique entity ID."""
    global _next_entity_id
    eid = _next_entity_id
    _next_entity_id += 1
    return eid


def reset_entity_id_counter() -> None:
    """Reset the ID counter (useful for tests)."""
    global _next_entity_id
    _next_entity_id = 0


class Entity(ABC):
    """
    A creature on the simulation grid. Never instantiated directly.

    Attributes:
        id: Unique identifier (stable for the entity's lifetime).
        x: Current x-coordinate (column).
        y: Current y-coordinate (row).
        direction: Current heading.
        turn_period: Number of moves between clockwise rotations.
        turn_counter: Moves since the last rotation, in [0, turn_period).
        age: Completed steps survived through the aging phase.
    """

    species: Species
    move_steps_per_tick: int = 1
    max_age: int = 0

    def __init__(
        self,
        x: int,
        y: int,
        direction: Union[Direction, int, str] = Direction.UP,
        turn_period: int = 1,
    ):
        """
        Create an entity.

        Args:
            x, y: Initial grid position (bounds are checked on insertion).
            direction: Initial heading (Direction, code 0..3 or name).
            turn_period: Moves between rotations, must be >= 1.

        Raises:
            InvalidConfiguration: If turn_period is not a positive int or
                direction is unknown.
        """
        if isinstance(turn_period, bool) or not isinstance(turn_period, int):
            raise InvalidConfiguration(f"turn_period must be an int, got {turn_period!r}")
        if turn_period <= 0:
            raise InvalidConfiguration(f"turn_period must be >= 1, got {turn_period}")

        self.id = _get_next_id()
        self.x = int(x)
        self.y = int(y)
        self.direction = Direction.parse(direction)
        self.turn_period = turn_period
        self.turn_counter = 0
        self.age = 0

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def position(self) -> tuple[int, int]:
        """Current grid position."""
        return (self.x, self.y)

    # ------------------------------------------------------------------
    # Motion and aging
    # ------------------------------------------------------------------

    def advance(self, width: int, height: int) -> None:
        """
        Apply one movement phase.

        Takes `move_steps_per_tick` wrapped unit steps in the current
        direction, then counts one move towards the turn period and rotates
        clockwise once the period is reached.

        Args:
            width, height: Grid dimensions.
        """
        for _ in range(self.move_steps_per_tick):
            self.x, self.y = step_toward(self.x, self.y, self.direction, width, height)

        self.turn_counter += 1
        if self.turn_counter >= self.turn_period:
            self.direction = self.direction.successor()
            self.turn_counter = 0

    def increase_age(self) -> None:
        self.age += 1

    # ------------------------------------------------------------------
    # Species capabilities
    # ------------------------------------------------------------------

    @abstractmethod
    def is_hungry(self) -> bool:
        ...

    @abstractmethod
    def feed(self) -> None:
        ...

    @abstractmethod
    def can_reproduce(self) -> bool:
        ...

    @abstractmethod
    def spawn_offspring(self) -> Entity:
        """Use the current reproduction opportunity and return the newborn."""

    def is_dead(self) -> bool:
        """True once the entity has reached its species' maximum age."""
        return self.age >= self.max_age

    def is_predator(self) -> bool:
        return self.species is Species.PREDATOR

    # ------------------------------------------------------------------
    # Representation
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        """Serialize entity state for snapshots/logging."""
        return {
            "id": self.id,
            "species": self.species.value,
            "x": self.x,
            "y": self.y,
            "direction": self.direction.name,
            "turn_period": self.turn_period,
            "turn_counter": self.turn_counter,
            "age": self.age,
        }

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(id={self.id}, pos=({self.x},{self.y}), "
            f"dir={self.direction.name}, turn={self.turn_counter}/{self.turn_period}, "
            f"age={self.age})"
        )
