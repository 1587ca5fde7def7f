"""
Configuration system for the Predator/Prey Simulator.

Provides a hierarchical dataclass-based config with JSON serialization,
validation, and sensible defaults for all simulation parameters.
"""

from __future__ import annotations

import json
import warnings
from copy import deepcopy
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Any, Optional

from src.core.predator import THRESHOLD_MODES


SCENARIO_MODES = ("manual", "preset", "random")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# ---------------------------------------------------------------------------
# Sub-config dataclasses (grouped by domain)
# ---------------------------------------------------------------------------

@dataclass
class WorldConfig:
    """Grid settings for random scenarios."""
    width: int = 10
    height: int = 10
    seed: Optional[int] = None  # None = fresh entropy on every run

    def validate(self) -> list[str]:
        errors = []
        for name in ("width", "height"):
            value = getattr(self, name)
            if not _is_int(value):
                errors.append(f"world.{name} must be an integer, got {value!r}")
            elif value < 1:
                errors.append(f"world.{name} must be >= 1, got {value}")
        if self.seed is not None and (not _is_int(self.seed) or self.seed < 0):
            errors.append(f"world.seed must be an integer >= 0 or null, got {self.seed!r}")
        return errors


@dataclass
class SpeciesConfig:
    """Species rule variants."""
    predator_threshold: str = "escalating"  # "escalating" or "constant"

    def validate(self) -> list[str]:
        errors = []
        if self.predator_threshold not in THRESHOLD_MODES:
            errors.append(
                f"species.predator_threshold must be one of {THRESHOLD_MODES}, "
                f"got '{self.predator_threshold}'"
            )
        return errors


@dataclass
class ScenarioConfig:
    """How the initial population is built."""
    mode: str = "preset"             # "manual", "preset" or "random"
    preset: str = "classic"
    steps: int = 20
    prey_count: int = 10             # random mode only
    predator_count: int = 3          # random mode only
    turn_period_range: list[int] = field(default_factory=lambda: [1, 5])  # inclusive

    def validate(self) -> list[str]:
        errors = []
        if self.mode not in SCENARIO_MODES:
            errors.append(f"scenario.mode must be one of {SCENARIO_MODES}, got '{self.mode}'")
        if not isinstance(self.preset, str):
            errors.append(f"scenario.preset must be a string, got {self.preset!r}")
        for name in ("steps", "prey_count", "predator_count"):
            value = getattr(self, name)
            if not _is_int(value):
                errors.append(f"scenario.{name} must be an integer, got {value!r}")
            elif value < 0:
                errors.append(f"scenario.{name} must be >= 0, got {value}")
        rng = self.turn_period_range
        if (
            not isinstance(rng, (list, tuple))
            or len(rng) != 2
            or not all(_is_int(v) for v in rng)
            or rng[0] < 1
            or rng[0] > rng[1]
        ):
            errors.append("scenario.turn_period_range must be [low, high] with 1 <= low <= high")
        return errors


@dataclass
class OutputConfig:
    """Console and run-directory output settings."""
    output_dir: str = "runs"
    log_metrics: bool = True
    snapshot_every_n_steps: int = 0  # 0 = no snapshots
    print_field: bool = True

    def validate(self) -> list[str]:
        errors = []
        if not _is_int(self.snapshot_every_n_steps):
            errors.append(
                f"output.snapshot_every_n_steps must be an integer, got {self.snapshot_every_n_steps!r}"
            )
        elif self.snapshot_every_n_steps < 0:
            errors.append(
                f"output.snapshot_every_n_steps must be >= 0, got {self.snapshot_every_n_steps}"
            )
        if not isinstance(self.output_dir, str) or not self.output_dir:
            errors.append(f"output.output_dir must be a non-empty string, got {self.output_dir!r}")
        for name in ("log_metrics", "print_field"):
            if not isinstance(getattr(self, name), bool):
                errors.append(f"output.{name} must be true or false, got {getattr(self, name)!r}")
        return errors


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------

@dataclass
class SimConfig:
    """
    Top-level simulation configuration.

    All parameters are adjustable. Nested dataclasses group related settings.
    Load from JSON with `load_config()`, validate with `validate()`.
    """
    world: WorldConfig = field(default_factory=WorldConfig)
    species: SpeciesConfig = field(default_factory=SpeciesConfig)
    scenario: ScenarioConfig = field(default_factory=ScenarioConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def validate(self) -> list[str]:
        """Validate all config sections. Returns list of error messages (empty = valid)."""
        errors = []
        for f in fields(self):
            sub = getattr(self, f.name)
            if hasattr(sub, "validate"):
                errors.extend(sub.validate())
        return errors

    def to_dict(self) -> dict[str, Any]:
        """Convert to nested dict for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SimConfig:
        """Create SimConfig from nested dict, merging with defaults."""
        config = cls()
        _merge_into_dataclass(config, data)
        return config

    def copy(self) -> SimConfig:
        """Deep copy of this config."""
        return deepcopy(self)


# ---------------------------------------------------------------------------
# JSON I/O helpers
# ---------------------------------------------------------------------------

def _merge_into_dataclass(target: Any, source: dict[str, Any]) -> None:
    """
    Recursively merge a dict into a dataclass instance.
    Unknown keys emit a warning but don't raise.
    """
    if not isinstance(source, dict):
        return

    known_fields = {f.name for f in fields(target)}
    for key, value in source.items():
        if key not in known_fields:
            warnings.warn(
                f"Unknown config key '{key}' in section {type(target).__name__}, ignored.",
                UserWarning,
                stacklevel=3,
            )
            continue

        current = getattr(target, key)

        if hasattr(current, "__dataclass_fields__") and isinstance(value, dict):
            _merge_into_dataclass(current, value)
        else:
            setattr(target, key, value)


def load_config(path: str | Path) -> SimConfig:
    """
    Load config from a JSON file. Missing fields use defaults.

    Args:
        path: Path to JSON config file.

    Returns:
        Validated SimConfig instance.

    Raises:
        FileNotFoundError: If path doesn't exist.
        json.JSONDecodeError: If JSON is malformed.
        ValueError: If config values are invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    config = SimConfig.from_dict(data)

    errors = config.validate()
    if errors:
        msg = "Invalid configuration:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(msg)

    return config


def save_config(config: SimConfig, path: str | Path) -> None:
    """Save config to JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)


def get_default_config() -> SimConfig:
    """Return a fresh default config (all defaults, validated)."""
    config = SimConfig()
    errors = config.validate()
    assert not errors, f"Default config is invalid: {errors}"
    return config


def apply_param_override(config: SimConfig, dotted_key: str, value: Any) -> None:
    """
    Apply a single parameter override using dot notation.

    Example:
        apply_param_override(config, "world.width", 8)
        apply_param_override(config, "species.predator_threshold", "constant")

    Args:
        config: SimConfig to modify in-place.
        dotted_key: Dot-separated path like "world.width" or "scenario.steps".
        value: New value to set.

    Raises:
        KeyError: If the path doesn't exist.
    """
    parts = dotted_key.split(".")
    obj = config
    for part in parts[:-1]:
        if not hasattr(obj, part):
            raise KeyError(f"Config path '{dotted_key}' invalid: '{part}' not found in {type(obj).__name__}")
        obj = getattr(obj, part)

    final_key = parts[-1]
    if not hasattr(obj, final_key):
        raise KeyError(f"Config path '{dotted_key}' invalid: '{final_key}' not found in {type(obj).__name__}")

    setattr(obj, final_key, value)
