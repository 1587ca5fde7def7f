"""
Unit tests for scenario loading.

Tests cover:
- Text format parsing (presets, whitespace, trailing tokens)
- Malformed input errors
- Interactive reading from a stream
- Random generation (reproducibility, bounds, ranges)
- Building a Simulation from a scenario
"""

import io

import numpy as np
import pytest

from src.core.entity import reset_entity_id_counter
from src.core.errors import InvalidConfiguration, InvalidEntityState
from src.core.predator import Predator
from src.core.prey import Prey
from src.simulation.scenario import (
    PRESETS,
    EntitySpec,
    Scenario,
    generate_random,
    load_preset,
    parse_scenario,
    read_manual,
)
from src.utils.spatial import Direction


@pytest.fixture(autouse=True)
def reset_ids():
    reset_entity_id_counter()
    yield
    reset_entity_id_counter()


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

class TestParseScenario:
    def test_small_preset(self):
        sc = load_preset("small")
        assert (sc.width, sc.height, sc.steps) == (3, 3, 5)
        assert sc.prey == [
            EntitySpec(1, 2, Direction.RIGHT, 1),
            EntitySpec(1, 1, Direction.UP, 2),
        ]
        assert sc.predators == [EntitySpec(0, 2, Direction.RIGHT, 2)]

    def test_classic_preset(self):
        sc = load_preset("classic")
        assert (sc.width, sc.height, sc.steps) == (4, 4, 20)
        assert sc.prey == [EntitySpec(0, 0, Direction.RIGHT, 100)]
        assert sc.predators == [EntitySpec(0, 3, Direction.UP, 100)]

    @pytest.mark.parametrize("name", sorted(PRESETS))
    def test_every_preset_builds(self, name):
        sim = load_preset(name).build_simulation()
        assert sim.world.population > 0

    def test_unknown_preset(self):
        with pytest.raises(InvalidConfiguration, match="Unknown preset"):
            load_preset("huge")

    def test_line_breaks_optional(self):
        sc = parse_scenario("2 2 1 1 0 1 1 3 4")
        assert sc.prey == [EntitySpec(1, 1, Direction.LEFT, 4)]
        assert sc.predators == []

    def test_trailing_tokens_ignored(self):
        sc = parse_scenario("2 2 1\n0 0\nextra stuff")
        assert sc.prey == [] and sc.predators == []

    def test_zero_steps_allowed(self):
        assert parse_scenario("1 1 0 0 0").steps == 0

    def test_truncated(self):
        with pytest.raises(InvalidConfiguration, match="ended early"):
            parse_scenario("3 3 5\n1 0\n1 2")

    def test_non_integer(self):
        with pytest.raises(InvalidConfiguration, match="Expected integer"):
            parse_scenario("3 three 5\n0 0")

    @pytest.mark.parametrize("text", ["0 3 5 0 0", "3 -1 5 0 0"])
    def test_bad_dimensions(self, text):
        with pytest.raises(InvalidConfiguration):
            parse_scenario(text)

    def test_negative_steps(self):
        with pytest.raises(InvalidConfiguration):
            parse_scenario("3 3 -1 0 0")

    def test_negative_counts(self):
        with pytest.raises(InvalidConfiguration):
            parse_scenario("3 3 1 -1 0")

    def test_bad_direction_code(self):
        with pytest.raises(InvalidConfiguration):
            parse_scenario("3 3 1 1 0 0 0 4 1")

    def test_to_text_parses_back(self):
        sc = load_preset("small")
        assert parse_scenario(sc.to_text()) == sc

    def test_preset_text_matches_to_text(self):
        assert load_preset("small").to_text() == PRESETS["small"]


# ---------------------------------------------------------------------------
# Interactive reading
# ---------------------------------------------------------------------------

class TestReadManual:
    def test_reads_stream(self):
        stream = io.StringIO("4 4 3\n1 1\n0 0 1 2\n3 3 2 1\n")
        sc = read_manual(stream)
        assert (sc.width, sc.height, sc.steps) == (4, 4, 3)
        assert sc.prey == [EntitySpec(0, 0, Direction.RIGHT, 2)]
        assert sc.predators == [EntitySpec(3, 3, Direction.DOWN, 1)]

    def test_prompt_written(self):
        out = io.StringIO()
        read_manual(io.StringIO("1 1 1 0 0"), out=out)
        assert "width" in out.getvalue()

    def test_no_prompt_without_out(self, capsys):
        read_manual(io.StringIO("1 1 1 0 0"))
        assert capsys.readouterr().out == ""

    def test_stops_after_complete_scenario(self):
        stream = io.StringIO("1 1 1\n0 0\nnext line\n")
        read_manual(stream)
        assert stream.readline() == "next line\n"

    def test_truncated_stream(self):
        with pytest.raises(InvalidConfiguration):
            read_manual(io.StringIO("5 5"))


# ---------------------------------------------------------------------------
# Random generation
# ---------------------------------------------------------------------------

class TestGenerateRandom:
    def test_counts_and_bounds(self):
        sc = generate_random(7, 4, 10, 30, 8, rng=np.random.default_rng(0))
        assert len(sc.prey) == 30
        assert len(sc.predators) == 8
        for spec in sc.prey + sc.predators:
            assert 0 <= spec.x < 7
            assert 0 <= spec.y < 4
            assert isinstance(spec.direction, Direction)
            assert 1 <= spec.turn_period <= 5

    def test_reproducible_with_seed(self):
        a = generate_random(10, 10, 5, 6, 2, rng=np.random.default_rng(42))
        b = generate_random(10, 10, 5, 6, 2, rng=np.random.default_rng(42))
        assert a == b

    def test_unseeded_generators_differ(self):
        a = generate_random(10, 10, 5, 20, 5, rng=np.random.default_rng())
        b = generate_random(10, 10, 5, 20, 5, rng=np.random.default_rng())
        assert a != b

    def test_turn_period_range(self):
        sc = generate_random(5, 5, 1, 40, 0, rng=np.random.default_rng(1), turn_period_range=(3, 3))
        assert {s.turn_period for s in sc.prey} == {3}

    def test_zero_entities(self):
        sc = generate_random(2, 2, 1, 0, 0, rng=np.random.default_rng(1))
        assert sc.build_simulation().is_extinct

    @pytest.mark.parametrize("kwargs", [
        dict(width=0, height=3),
        dict(width=3, height=3, turn_period_range=(0, 2)),
        dict(width=3, height=3, turn_period_range=(4, 2)),
        dict(width=3, height=3, prey_count=-1),
    ])
    def test_invalid_inputs(self, kwargs):
        args = dict(steps=1, prey_count=1, predator_count=1, rng=np.random.default_rng(0))
        args.update(kwargs)
        with pytest.raises(InvalidConfiguration):
            generate_random(**args)


# ---------------------------------------------------------------------------
# Building simulations
# ---------------------------------------------------------------------------

class TestBuildSimulation:
    def test_prey_inserted_first(self):
        sim = load_preset("small").build_simulation()
        kinds = [type(e) for e in sim.entities]
        assert kinds == [Prey, Prey, Predator]

    def test_entity_state(self):
        sim = load_preset("small").build_simulation()
        first = sim.entities[0]
        assert first.position == (1, 2)
        assert first.direction is Direction.RIGHT
        assert first.turn_period == 1
        assert first.age == 0

    def test_threshold_mode_passed_through(self):
        sim = load_preset("classic").build_simulation(predator_threshold="constant")
        assert sim.world.get_predators()[0].threshold_mode == "constant"

    def test_out_of_bounds_entity(self):
        sc = Scenario(2, 2, 1, prey=[EntitySpec(2, 0)])
        with pytest.raises(InvalidEntityState):
            sc.build_simulation()

    def test_bad_turn_period(self):
        sc = Scenario(2, 2, 1, predators=[EntitySpec(0, 0, Direction.UP, 0)])
        with pytest.raises(InvalidConfiguration):
            sc.build_simulation()

    def test_small_preset_first_step(self):
        sim = load_preset("small").build_simulation()
        a, b, pred = sim.entities
        sim.step()
        # prey a: (1,2) right -> (2,2), turns down
        assert a.position == (2, 2) and a.direction is Direction.DOWN
        # prey b: (1,1) up -> (1,0), first of two moves
        assert b.position == (1, 0) and b.direction is Direction.UP
        # predator: (0,2) right twice -> (2,2), shares a's cell
        assert pred.position == (2, 2)
        assert a not in sim.world
        assert pred.consumed_count == 1
