"""
Predator/Prey Simulator: CLI Entry Point

Usage:
    python main.py --mode preset --preset small
    python main.py --mode random --width 10 --height 10 --steps 30 --prey 12 --predators 3 --seed 7
    python main.py --mode manual < scenario.txt
    python main.py --config config/default_config.json
    python main.py --ui
"""

import argparse
import sys
import time
from pathlib import Path

import numpy as np


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Predator/Prey Simulator: discrete-time population dynamics on a toroidal grid",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --ui                                   Launch Streamlit UI
  python main.py --mode preset --preset classic         Run a built-in scenario
  python main.py --mode random --prey 20 --seed 1       Random population
  python main.py --mode manual                          Type the scenario in
        """,
    )

    parser.add_argument(
        "--mode",
        choices=["manual", "preset", "random"],
        default=None,
        help="Scenario source (default: scenario.mode from the config)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to JSON config file (default: built-in defaults)",
    )
    parser.add_argument("--preset", type=str, default=None, help="Preset name for --mode preset")
    parser.add_argument("--width", type=int, default=None, help="Grid width (random mode)")
    parser.add_argument("--height", type=int, default=None, help="Grid height (random mode)")
    parser.add_argument("--steps", type=int, default=None, help="Number of steps (overrides scenario)")
    parser.add_argument("--prey", type=int, default=None, help="Number of prey (random mode)")
    parser.add_argument("--predators", type=int, default=None, help="Number of predators (random mode)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (random mode, default: fresh entropy, recorded in the summary)")
    parser.add_argument(
        "--threshold",
        choices=["escalating", "constant"],
        default=None,
        help="Predator reproduction threshold rule",
    )
    parser.add_argument("--output", type=str, default=None, help="Override output directory")
    parser.add_argument("--no-log", action="store_true", help="Do not write a run directory")
    parser.add_argument("--quiet", action="store_true", help="Do not print the field after each step")
    parser.add_argument(
        "--ui",
        action="store_true",
        help="Launch Streamlit web UI (ignores all other options)",
    )

    return parser.parse_args(argv)


def launch_ui() -> None:
    """Launch the Streamlit web UI."""
    import subprocess
    ui_path = Path(__file__).parent / "src" / "ui" / "app.py"
    if not ui_path.exists():
        print(f"Error: UI app not found at {ui_path}")
        sys.exit(1)
    subprocess.run(
        [
            sys.executable, "-m", "streamlit", "run", str(ui_path),
            "--server.port=8501",
            "--server.headless=true",
            "--browser.gatherUsageStats=false",
        ],
        check=True,
    )


def build_config(args: argparse.Namespace):
    """Load the config file (or defaults) and apply command-line overrides."""
    from src.core.config import load_config, get_default_config, apply_param_override

    config = load_config(args.config) if args.config else get_default_config()

    overrides = {
        "scenario.mode": args.mode,
        "scenario.preset": args.preset,
        "scenario.steps": args.steps,
        "scenario.prey_count": args.prey,
        "scenario.predator_count": args.predators,
        "world.width": args.width,
        "world.height": args.height,
        "world.seed": args.seed,
        "species.predator_threshold": args.threshold,
        "output.output_dir": args.output,
    }
    for key, value in overrides.items():
        if value is not None:
            apply_param_override(config, key, value)
    if args.quiet:
        config.output.print_field = False
    if args.no_log:
        config.output.log_metrics = False

    errors = config.validate()
    if errors:
        raise ValueError("Invalid configuration:\n" + "\n".join(f"  - {e}" for e in errors))
    return config


def load_scenario(config, steps_override=None):
    """Build the starting scenario for the configured mode."""
    from src.simulation.scenario import generate_random, load_preset, read_manual

    mode = config.scenario.mode
    if mode == "preset":
        scenario = load_preset(config.scenario.preset)
    elif mode == "manual":
        scenario = read_manual(sys.stdin, out=sys.stdout if sys.stdin.isatty() else None)
    else:
        if config.world.seed is None:
            # drawn entropy ends up in config.json and summary.json
            config.world.seed = int(np.random.SeedSequence().entropy)
        scenario = generate_random(
            config.world.width,
            config.world.height,
            config.scenario.steps,
            config.scenario.prey_count,
            config.scenario.predator_count,
            rng=np.random.default_rng(config.world.seed),
            turn_period_range=tuple(config.scenario.turn_period_range),
        )

    if steps_override is not None:
        scenario.steps = steps_override
    return scenario


def run_simulation(config, scenario) -> dict:
    """Run a scenario, printing the field after every step. Returns the summary dict."""
    from src.simulation.metrics import MetricsCollector
    from src.logging.run_manager import RunManager
    from src.ui.components.field_view import field_counts, render_field_text

    out = config.output
    print(f"[Predator/Prey Simulator] {config.scenario.mode} scenario")
    print(f"  Grid: {scenario.width}x{scenario.height}")
    print(f"  Prey: {len(scenario.prey)}  Predators: {len(scenario.predators)}")
    print(f"  Steps: {scenario.steps}")
    print(f"  Predator threshold: {config.species.predator_threshold}")
    if config.scenario.mode == "random":
        print(f"  Seed: {config.world.seed}")

    sim = scenario.build_simulation(predator_threshold=config.species.predator_threshold)
    metrics = MetricsCollector()
    run_manager = None
    if out.log_metrics:
        run_manager = RunManager(config, base_dir=out.output_dir)
        run_manager.save_scenario(scenario.to_text())
        print(f"  Output: {run_manager.run_dir}")

    def record(step: int) -> None:
        kpis = metrics.collect(sim)
        text = render_field_text(field_counts(sim))
        if out.print_field:
            print(f"\nStep {step}:")
            print(text)
        if run_manager is not None:
            run_manager.log_step(kpis)
            run_manager.log_field(step, text)
            if out.snapshot_every_n_steps and step % out.snapshot_every_n_steps == 0:
                run_manager.save_snapshot(sim)

    sim.on_step = lambda step, _sim: record(step)

    start_time = time.time()
    record(0)
    result = sim.run(scenario.steps, stop_on_extinction=False)
    elapsed = time.time() - start_time

    print()
    print("[Result]")
    print(f"  Steps: {result.total_steps}")
    print(f"  Final prey: {result.final_prey}")
    print(f"  Final predators: {result.final_predators}")
    print(f"  Extinct: {result.extinct}")
    print(f"  Elapsed: {elapsed:.2f}s")

    summary = {
        "total_steps": result.total_steps,
        "final_prey": result.final_prey,
        "final_predators": result.final_predators,
        "extinct": result.extinct,
        "extinction_step": result.extinction_step,
        "totals": sim.get_accumulated_stats(),
        "elapsed_seconds": round(elapsed, 3),
        "seed": config.world.seed if config.scenario.mode == "random" else None,
    }
    if run_manager is not None:
        run_manager.finalize(summary)
        print(f"  Output saved to: {run_manager.run_dir}")
    return summary


def main(argv=None) -> int:
    from src.core.errors import SimulationError

    args = parse_args(argv)

    if args.ui:
        launch_ui()
        return 0

    try:
        config = build_config(args)
        scenario = load_scenario(config, steps_override=args.steps)
        run_simulation(config, scenario)
    except (SimulationError, ValueError, FileNotFoundError, KeyError) as e:
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
