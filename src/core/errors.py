"""
Exception types for the Predator/Prey Simulator.

All core precondition violations derive from SimulationError. The concrete
types also subclass ValueError so callers validating input generically keep
working.
"""

from __future__ import annotations


class SimulationError(Exception):
    """Base class for all simulator errors."""


class InvalidConfiguration(SimulationError, ValueError):
    """A construction parameter is out of its valid domain (dimensions, turn period, ...)."""


class InvalidEntityState(SimulationError, ValueError):
    """An entity is in a state the requested operation does not accept."""
