"""
Predator/Prey Simulator: Streamlit Web UI

Single page:
  - Sidebar: scenario source (preset or random), size, steps, predator rule
  - Run the scenario and scrub through every step with a slider
  - Field heatmap and text view for the selected step
  - Population and event charts for the whole run
  - Saved runs: browse snapshots and metrics written by the CLI
"""

from pathlib import Path

import numpy as np
import pandas as pd
import streamlit as st

from src.core.config import get_default_config
from src.core.errors import SimulationError
from src.core.predator import THRESHOLD_MODES
from src.logging.run_manager import RunManager
from src.logging.snapshot import SnapshotManager
from src.simulation.metrics import MetricsCollector
from src.simulation.scenario import PRESETS, generate_random, load_preset
from src.ui.components.charts import events_per_step, history_frame, population_over_time
from src.ui.components.field_view import field_counts, render_field_figure, render_field_text

# Must be the very first Streamlit command
st.set_page_config(
    page_title="Predator/Prey Simulator",
    page_icon="🐺",
    layout="wide",
    initial_sidebar_state="expanded",
)


def _init_session_state() -> None:
    defaults = {
        "pp_fields": [],    # net counts per step, step 0 first
        "pp_history": [],   # KPI dicts per step
    }
    for k, v in defaults.items():
        if k not in st.session_state:
            st.session_state[k] = v


def _sidebar_scenario(source: str):
    """Render the scenario controls for a preset or random source and return the scenario."""
    config = get_default_config()

    if source == "Preset":
        name = st.sidebar.selectbox("Preset", options=sorted(PRESETS))
        scenario = load_preset(name)
        scenario.steps = int(st.sidebar.number_input(
            "Steps", min_value=0, max_value=1000, value=scenario.steps, step=1,
        ))
        return scenario

    width = st.sidebar.number_input("Width", min_value=1, max_value=200, value=config.world.width)
    height = st.sidebar.number_input("Height", min_value=1, max_value=200, value=config.world.height)
    steps = st.sidebar.number_input("Steps", min_value=0, max_value=1000, value=config.scenario.steps)
    prey = st.sidebar.number_input("Prey", min_value=0, max_value=10_000, value=config.scenario.prey_count)
    predators = st.sidebar.number_input(
        "Predators", min_value=0, max_value=10_000, value=config.scenario.predator_count,
    )
    seed = st.sidebar.number_input(
        "Seed", min_value=0, max_value=999_999_999, value=config.world.seed,
        placeholder="fresh every run",
    )
    return generate_random(
        int(width), int(height), int(steps), int(prey), int(predators),
        rng=np.random.default_rng(None if seed is None else int(seed)),
        turn_period_range=tuple(config.scenario.turn_period_range),
    )


def _run(scenario, threshold: str) -> None:
    sim = scenario.build_simulation(predator_threshold=threshold)
    metrics = MetricsCollector()

    fields = [field_counts(sim)]
    metrics.collect(sim)
    for _ in range(scenario.steps):
        sim.step()
        fields.append(field_counts(sim))
        metrics.collect(sim)

    st.session_state.pp_fields = fields
    st.session_state.pp_history = metrics.get_history()


def _render_field(counts, title: str) -> None:
    left, right = st.columns([3, 2])
    with left:
        st.plotly_chart(render_field_figure(counts, title=title), use_container_width=True)
    with right:
        st.code(render_field_text(counts), language=None)


def _render_charts(history: list[dict]) -> None:
    df = history_frame(history)
    st.plotly_chart(population_over_time(df), use_container_width=True)
    st.plotly_chart(events_per_step(df), use_container_width=True)


def _render_saved_run() -> None:
    """Browse a run directory written by the CLI."""
    base_dir = st.sidebar.text_input("Output directory", value=get_default_config().output.output_dir)
    runs = RunManager.list_runs(base_dir)

    st.title("📁 Saved runs")
    if not runs:
        st.info(f"No runs found in `{base_dir}/`. Run `python main.py` first.")
        return

    name = st.sidebar.selectbox("Run", options=runs[::-1])
    run_dir = Path(base_dir) / name
    st.caption(f"`{run_dir}`")

    snapshots = SnapshotManager(run_dir)
    steps = snapshots.list_snapshots()
    if steps:
        step = st.select_slider("Snapshot step", options=steps) if len(steps) > 1 else steps[0]
        data = snapshots.load(step)

        col1, col2 = st.columns(2)
        col1.metric("Prey", data["prey_count"])
        col2.metric("Predators", data["predator_count"])
        _render_field(field_counts(data), title=f"Step {step}")
    else:
        st.info("This run saved no snapshots (set output.snapshot_every_n_steps).")

    metrics_path = run_dir / "metrics.csv"
    if metrics_path.exists():
        _render_charts(pd.read_csv(metrics_path).to_dict("records"))


def main() -> None:
    """Main entry point for the Streamlit app."""
    _init_session_state()

    st.sidebar.title("🐺 Predator/Prey Simulator")
    st.sidebar.markdown("---")
    source = st.sidebar.radio("Scenario", options=["Preset", "Random", "Saved run"], index=0)

    if source == "Saved run":
        _render_saved_run()
        return

    threshold = st.sidebar.selectbox("Predator reproduction rule", options=list(THRESHOLD_MODES))
    scenario = _sidebar_scenario(source)

    st.title("🐺 Predator/Prey Simulator")
    st.caption(
        f"{scenario.width}x{scenario.height} torus, {len(scenario.prey)} prey, "
        f"{len(scenario.predators)} predators, {scenario.steps} steps"
    )

    if st.button("🚀 Run"):
        try:
            _run(scenario, threshold)
        except SimulationError as e:
            st.error(str(e))
            return

    fields = st.session_state.pp_fields
    if not fields:
        st.info("Choose a scenario in the sidebar and press Run.")
        return

    step = st.slider("Step", min_value=0, max_value=len(fields) - 1, value=0) if len(fields) > 1 else 0
    row = st.session_state.pp_history[step]

    col1, col2, col3 = st.columns(3)
    col1.metric("Prey", row["prey_count"])
    col2.metric("Predators", row["predator_count"])
    col3.metric("Prey eaten this step", row["prey_eaten"])

    _render_field(fields[step], title=f"Step {step}")
    _render_charts(st.session_state.pp_history)


if __name__ == "__main__":
    main()
