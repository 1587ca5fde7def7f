"""
World (population store) for the Predator/Prey Simulator.

Owns the 2D toroidal grid dimensions and every live entity. Entities are
kept in an insertion-ordered arena keyed by their unique id, so removal
never depends on list positions shifting and deduplication by identity is
a dict lookup.
"""

from __future__ import annotations

from typing import Iterator

import numpy as np
from numpy.typing import NDArray

from src.core.entity import Entity
from src.core.errors import InvalidConfiguration, InvalidEntityState
from src.core.predator import Predator
from src.core.prey import Prey
from src.utils.spatial import in_bounds


class World:
    """
    The simulation world: a 2D toroidal grid with prey and predators.

    Attributes:
        width: Grid width (number of columns).
        height: Grid height (number of rows).
        entities: Dict of entity_id -> Entity (alive only, insertion order).
    """

    def __init__(self, width: int, height: int):
        """
        Initialize an empty world.

        Args:
            width, height: Grid dimensions, both >= 1.

        Raises:
            InvalidConfiguration: If a dimension is not a positive int.
        """
        for name, value in (("width", width), ("height", height)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise InvalidConfiguration(f"{name} must be an int, got {value!r}")
            if value < 1:
                raise InvalidConfiguration(f"{name} must be >= 1, got {value}")

        self.width = int(width)
        self.height = int(height)
        self.entities: dict[int, Entity] = {}

    # ------------------------------------------------------------------
    # Entity management
    # ------------------------------------------------------------------

    def add_entity(self, entity: Entity) -> None:
        """
        Add an entity to the world.

        Raises:
            InvalidEntityState: If the position is outside the grid or the
                entity is already in the world.
        """
        if not isinstance(entity, (Prey, Predator)):
            raise InvalidEntityState(f"Expected a Prey or Predator, got {type(entity).__name__}")
        if not in_bounds(entity.x, entity.y, self.width, self.height):
            raise InvalidEntityState(
                f"{entity!r} is outside the {self.width}x{self.height} grid"
            )
        if entity.id in self.entities:
            raise InvalidEntityState(f"{entity!r} is already in the world")
        self.entities[entity.id] = entity

    def remove_entity(self, entity_id: int) -> Entity:
        """Remove and return the entity with the given id."""
        return self.entities.pop(entity_id)

    def __contains__(self, entity: Entity) -> bool:
        return entity.id in self.entities

    def __iter__(self) -> Iterator[Entity]:
        return iter(self.entities.values())

    def __len__(self) -> int:
        return len(self.entities)

    def get_entities(self) -> list[Entity]:
        """Snapshot list of all entities, safe to iterate while modifying."""
        return list(self.entities.values())

    def get_prey(self) -> list[Prey]:
        return [e for e in self.entities.values() if not e.is_predator()]

    def get_predators(self) -> list[Predator]:
        return [e for e in self.entities.values() if e.is_predator()]

    def entities_at(self, x: int, y: int) -> list[Entity]:
        """All entities currently at a given grid cell."""
        return [e for e in self.entities.values() if e.x == x and e.y == y]

    @property
    def population(self) -> int:
        return len(self.entities)

    @property
    def prey_count(self) -> int:
        return sum(1 for e in self.entities.values() if not e.is_predator())

    @property
    def predator_count(self) -> int:
        return sum(1 for e in self.entities.values() if e.is_predator())

    @property
    def is_extinct(self) -> bool:
        """True if no entity of either species is left."""
        return len(self.entities) == 0

    # ------------------------------------------------------------------
    # Rendering support
    # ------------------------------------------------------------------

    def population_field(self) -> NDArray[np.int64]:
        """
        Net population count per cell.

        Returns:
            Array of shape (height, width): +1 per prey, -1 per predator.
        """
        field = np.zeros((self.height, self.width), dtype=np.int64)
        for entity in self.entities.values():
            field[entity.y, entity.x] += -1 if entity.is_predator() else 1
        return field

    def __repr__(self) -> str:
        return (
            f"World(size={self.width}x{self.height}, "
            f"prey={self.prey_count}, predators={self.predator_count})"
        )
