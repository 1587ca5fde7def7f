"""
Prey species for the Predator/Prey Simulator.

Prey walk one cell per tick, never feed, and get exactly two reproduction
opportunities in their lifetime: at age 5 and at age 10. They die of old
age at 10, so the second offspring is born in the prey's final step.
"""

from __future__ import annotations

from src.core.entity import Entity, Species
from src.core.errors import InvalidEntityState


class Prey(Entity):
    """
    A prey entity.

    Attributes:
        reproduced_at_first: Age-5 opportunity has been used.
        reproduced_at_second: Age-10 opportunity has been used.
    """

    species = Species.PREY
    move_steps_per_tick = 1
    max_age = 10
    first_reproduction_age = 5
    second_reproduction_age = 10

    def __init__(self, x, y, direction=0, turn_period=1):
        super().__init__(x, y, direction, turn_period)
        self.reproduced_at_first = False
        self.reproduced_at_second = False

    def is_hungry(self) -> bool:
        return False

    def feed(self) -> None:
        pass

    def can_reproduce(self) -> bool:
        return (
            (self.age == self.first_reproduction_age and not self.reproduced_at_first)
            or (self.age == self.second_reproduction_age and not self.reproduced_at_second)
        )

    def spawn_offspring(self) -> Prey:
        """
        Use the current reproduction opportunity and return the newborn.

        The offspring starts at this prey's position, direction and turn
        period with age 0 and unused opportunities.

        Raises:
            InvalidEntityState: If no opportunity is available at this age.
        """
        if not self.can_reproduce():
            raise InvalidEntityState(f"{self!r} cannot reproduce at age {self.age}")

        if self.age == self.first_reproduction_age:
            self.reproduced_at_first = True
        else:
            self.reproduced_at_second = True

        return Prey(self.x, self.y, self.direction, self.turn_period)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["reproduced_at_first"] = self.reproduced_at_first
        data["reproduced_at_second"] = self.reproduced_at_second
        return data
