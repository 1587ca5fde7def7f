"""
Spatial utilities for the Predator/Prey Simulator.

Provides the cardinal Direction type and toroidal (wrap-around) grid math:
coordinate wrapping, bounds checks and unit steps.

All functions assume a 2D grid with dimensions (width, height) where
coordinates wrap: x % width, y % height. Row 0 is the top row, so moving
Up decreases y.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Union

from src.core.errors import InvalidConfiguration


class Direction(IntEnum):
    """Heading of an entity. Integer values match the scenario file codes."""
    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3

    def successor(self) -> Direction:
        """Next direction clockwise: Up -> Right -> Down -> Left -> Up."""
        return Direction((self.value + 1) % 4)

    @classmethod
    def parse(cls, value: Union[Direction, int, str]) -> Direction:
        """
        Convert a Direction, an int code 0..3 or a name ("up", "RIGHT") to a Direction.

        Raises:
            InvalidConfiguration: If the value names no direction.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper()
            if key in cls.__members__:
                return cls[key]
            if key.lstrip("-").isdigit():
                value = int(key)
            else:
                raise InvalidConfiguration(f"Unknown direction '{value}'")
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidConfiguration(f"Direction must be an int 0..3 or a name, got {value!r}")
        try:
            return cls(value)
        except ValueError:
            raise InvalidConfiguration(f"Direction code must be in 0..3, got {value}") from None


# (dx, dy) for a single unit step
_OFFSETS: dict[Direction, tuple[int, int]] = {
    Direction.UP: (0, -1),
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
}


def toroidal_wrap(x: int, y: int, width: int, height: int) -> tuple[int, int]:
    """
    Wrap (x, y) coordinates to stay within grid bounds.

    Args:
        x, y: Raw coordinates (may be negative or >= dimensions).
        width, height: Grid dimensions.

    Returns:
        Wrapped (x, y) tuple within [0, width) and [0, height).
    """
    return x % width, y % height


def in_bounds(x: int, y: int, width: int, height: int) -> bool:
    """True if (x, y) lies inside the grid without wrapping."""
    return 0 <= x < width and 0 <= y < height


def direction_offset(direction: Direction) -> tuple[int, int]:
    """Unit (dx, dy) displacement for a direction."""
    return _OFFSETS[Direction(direction)]


def step_toward(
    x: int, y: int,
    direction: Direction,
    width: int, height: int,
) -> tuple[int, int]:
    """
    Compute one unit step from (x, y) in the given direction on a toroidal grid.

    Args:
        x, y: Current position.
        direction: Heading of the step.
        width, height: Grid dimensions.

    Returns:
        New (x, y) position, wrapped.
    """
    dx, dy = direction_offset(direction)
    return toroidal_wrap(x + dx, y + dy, width, height)
