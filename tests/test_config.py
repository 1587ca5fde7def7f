"""
Unit tests for the configuration system.

Tests cover:
- Default config creation and validation
- JSON load/save roundtrip
- Partial config loading (missing fields use defaults)
- Invalid value detection
- Unknown key warnings
- Dot-notation parameter overrides
"""

import json
import warnings
from pathlib import Path

import pytest

from src.core.config import (
    SCENARIO_MODES,
    SimConfig,
    WorldConfig,
    SpeciesConfig,
    ScenarioConfig,
    OutputConfig,
    load_config,
    save_config,
    get_default_config,
    apply_param_override,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def default_config() -> SimConfig:
    return get_default_config()


@pytest.fixture
def tmp_config_path(tmp_path) -> Path:
    return tmp_path / "test_config.json"


@pytest.fixture
def minimal_config_path(tmp_path) -> Path:
    """Config file with only a few overrides."""
    path = tmp_path / "minimal.json"
    path.write_text(json.dumps({
        "world": {"width": 6, "height": 4},
        "scenario": {"mode": "random", "prey_count": 7},
    }))
    return path


@pytest.fixture
def invalid_config_path(tmp_path) -> Path:
    path = tmp_path / "invalid.json"
    path.write_text(json.dumps({
        "world": {"width": -5, "height": 0},
        "species": {"predator_threshold": "doubling"},
    }))
    return path


# ---------------------------------------------------------------------------
# Default Config Tests
# ---------------------------------------------------------------------------

class TestDefaultConfig:
    def test_default_config_valid(self, default_config: SimConfig):
        errors = default_config.validate()
        assert errors == [], f"Default config has errors: {errors}"

    def test_default_world_values(self, default_config: SimConfig):
        assert default_config.world.width == 10
        assert default_config.world.height == 10
        assert default_config.world.seed is None

    def test_default_species_values(self, default_config: SimConfig):
        assert default_config.species.predator_threshold == "escalating"

    def test_default_scenario_values(self, default_config: SimConfig):
        sc = default_config.scenario
        assert sc.mode == "preset"
        assert sc.preset == "classic"
        assert sc.steps == 20
        assert sc.turn_period_range == [1, 5]

    def test_default_output_values(self, default_config: SimConfig):
        out = default_config.output
        assert out.output_dir == "runs"
        assert out.log_metrics is True
        assert out.snapshot_every_n_steps == 0
        assert out.print_field is True

    def test_default_is_fresh(self):
        a = get_default_config()
        a.scenario.turn_period_range.append(9)
        assert get_default_config().scenario.turn_period_range == [1, 5]


# ---------------------------------------------------------------------------
# JSON Load / Save Tests
# ---------------------------------------------------------------------------

class TestConfigIO:
    def test_save_and_load_roundtrip(self, default_config: SimConfig, tmp_config_path: Path):
        default_config.species.predator_threshold = "constant"
        default_config.scenario.turn_period_range = [2, 3]
        save_config(default_config, tmp_config_path)
        loaded = load_config(tmp_config_path)
        assert loaded.to_dict() == default_config.to_dict()

    def test_save_creates_parent_dirs(self, default_config: SimConfig, tmp_path: Path):
        deep_path = tmp_path / "a" / "b" / "config.json"
        save_config(default_config, deep_path)
        assert deep_path.exists()

    def test_load_partial_config_uses_defaults(self, minimal_config_path: Path):
        config = load_config(minimal_config_path)
        assert config.world.width == 6
        assert config.world.height == 4
        assert config.scenario.mode == "random"
        assert config.scenario.prey_count == 7
        # untouched fields
        assert config.scenario.predator_count == 3
        assert config.species.predator_threshold == "escalating"

    def test_load_nonexistent_file_raises(self):
        with pytest.raises(FileNotFoundError):
            load_config("nonexistent_path/config.json")

    def test_load_malformed_json_raises(self, tmp_path: Path):
        bad_path = tmp_path / "bad.json"
        bad_path.write_text("{invalid json content!!}")
        with pytest.raises(json.JSONDecodeError):
            load_config(bad_path)

    def test_load_invalid_values_raises(self, invalid_config_path: Path):
        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(invalid_config_path)

    def test_bundled_default_config_loads(self):
        path = Path(__file__).parent.parent / "config" / "default_config.json"
        config = load_config(path)
        assert config.to_dict() == get_default_config().to_dict()


# ---------------------------------------------------------------------------
# Unknown Keys Warning Test
# ---------------------------------------------------------------------------

class TestUnknownKeys:
    def test_unknown_top_level_key_warns(self, tmp_path: Path):
        path = tmp_path / "extra.json"
        path.write_text(json.dumps({
            "world": {"width": 8},
            "genetics": {"dna_length": 64},
        }))
        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always")
            config = load_config(path)
            assert any("Unknown config key 'genetics'" in str(warning.message) for warning in w)
        assert config.world.width == 8

    def test_unknown_nested_key_warns(self, tmp_path: Path):
        path = tmp_path / "extra_nested.json"
        path.write_text(json.dumps({"species": {"prey_threshold": 3}}))
        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always")
            load_config(path)
            assert any("SpeciesConfig" in str(warning.message) for warning in w)


# ---------------------------------------------------------------------------
# Validation Tests
# ---------------------------------------------------------------------------

class TestValidation:
    def test_world_width_zero(self):
        config = SimConfig()
        config.world.width = 0
        assert any("world.width" in e for e in config.validate())

    def test_world_height_negative(self):
        config = SimConfig()
        config.world.height = -3
        assert any("world.height" in e for e in config.validate())

    def test_one_by_one_world_valid(self):
        assert WorldConfig(width=1, height=1).validate() == []

    def test_seed_none_valid(self):
        assert WorldConfig(seed=None).validate() == []

    def test_seed_negative(self):
        assert any("world.seed" in e for e in WorldConfig(seed=-1).validate())

    @pytest.mark.parametrize("mode", ["escalating", "constant"])
    def test_threshold_modes_valid(self, mode):
        assert SpeciesConfig(predator_threshold=mode).validate() == []

    def test_threshold_mode_invalid(self):
        errors = SpeciesConfig(predator_threshold="linear").validate()
        assert any("predator_threshold" in e for e in errors)

    @pytest.mark.parametrize("mode", SCENARIO_MODES)
    def test_scenario_modes_valid(self, mode):
        assert ScenarioConfig(mode=mode).validate() == []

    def test_scenario_mode_invalid(self):
        assert any("scenario.mode" in e for e in ScenarioConfig(mode="file").validate())

    def test_negative_steps(self):
        assert any("scenario.steps" in e for e in ScenarioConfig(steps=-1).validate())

    def test_zero_steps_valid(self):
        assert ScenarioConfig(steps=0).validate() == []

    def test_negative_counts(self):
        errors = ScenarioConfig(prey_count=-1, predator_count=-2).validate()
        assert any("prey_count" in e for e in errors)
        assert any("predator_count" in e for e in errors)

    @pytest.mark.parametrize("bad", [[0, 3], [4, 2], [1], [1, 2, 3]])
    def test_turn_period_range_invalid(self, bad):
        errors = ScenarioConfig(turn_period_range=bad).validate()
        assert any("turn_period_range" in e for e in errors)

    def test_snapshot_interval_negative(self):
        errors = OutputConfig(snapshot_every_n_steps=-1).validate()
        assert any("snapshot_every_n_steps" in e for e in errors)

    def test_empty_output_dir(self):
        assert any("output_dir" in e for e in OutputConfig(output_dir="").validate())

    @pytest.mark.parametrize("section, key, value", [
        ("world", "width", "5"),
        ("world", "height", 2.5),
        ("world", "width", True),
        ("world", "seed", "abc"),
        ("scenario", "steps", "20"),
        ("scenario", "prey_count", None),
        ("scenario", "turn_period_range", "1-5"),
        ("scenario", "turn_period_range", [1, "5"]),
        ("output", "snapshot_every_n_steps", "2"),
        ("output", "output_dir", 7),
        ("output", "print_field", "yes"),
    ])
    def test_wrong_type_reported_not_raised(self, section, key, value):
        config = SimConfig()
        setattr(getattr(config, section), key, value)
        errors = config.validate()
        assert any(f"{section}.{key}" in e for e in errors)

    def test_wrong_type_in_file_raises_value_error(self, tmp_path: Path):
        path = tmp_path / "typed.json"
        path.write_text(json.dumps({"world": {"width": "5"}}))
        with pytest.raises(ValueError, match="world.width must be an integer"):
            load_config(path)

    def test_multiple_errors_reported(self):
        config = SimConfig()
        config.world.width = -1
        config.world.height = -1
        config.species.predator_threshold = "x"
        config.scenario.steps = -5
        assert len(config.validate()) >= 4


# ---------------------------------------------------------------------------
# Parameter Override Tests
# ---------------------------------------------------------------------------

class TestParamOverride:
    def test_override_value(self, default_config: SimConfig):
        apply_param_override(default_config, "world.width", 25)
        assert default_config.world.width == 25

    def test_override_threshold(self, default_config: SimConfig):
        apply_param_override(default_config, "species.predator_threshold", "constant")
        assert default_config.species.predator_threshold == "constant"

    def test_override_invalid_path_raises(self, default_config: SimConfig):
        with pytest.raises(KeyError):
            apply_param_override(default_config, "world.depth", 3)

    def test_override_invalid_section_raises(self, default_config: SimConfig):
        with pytest.raises(KeyError):
            apply_param_override(default_config, "genetics.dna_length", 42)

    def test_override_preserves_other_values(self, default_config: SimConfig):
        apply_param_override(default_config, "world.width", 25)
        assert default_config.world.height == 10


# ---------------------------------------------------------------------------
# Copy / Serialization Tests
# ---------------------------------------------------------------------------

class TestCopyAndSerialization:
    def test_copy_is_independent(self, default_config: SimConfig):
        copy = default_config.copy()
        copy.world.width = 99
        copy.scenario.turn_period_range.append(7)
        assert default_config.world.width == 10
        assert default_config.scenario.turn_period_range == [1, 5]

    def test_to_dict_sections(self, default_config: SimConfig):
        d = default_config.to_dict()
        assert set(d) == {"world", "species", "scenario", "output"}

    def test_from_dict_roundtrip(self, default_config: SimConfig):
        restored = SimConfig.from_dict(default_config.to_dict())
        assert restored.to_dict() == default_config.to_dict()

    def test_from_empty_dict_uses_defaults(self):
        assert SimConfig.from_dict({}).to_dict() == SimConfig().to_dict()

    def test_from_dict_with_overrides(self):
        config = SimConfig.from_dict({"world": {"width": 3}, "output": {"print_field": False}})
        assert config.world.width == 3
        assert config.world.height == 10
        assert config.output.print_field is False
