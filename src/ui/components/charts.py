"""
Reusable chart components for the Predator/Prey Simulator UI.

Provides helper functions that return Plotly figures for:
  - Prey and predator counts over time
  - Births, deaths and predation events per step
"""

import pandas as pd
import plotly.graph_objects as go


def history_frame(history: list[dict]) -> pd.DataFrame:
    """KPI history (list of per-step dicts) as a DataFrame indexed by step."""
    df = pd.DataFrame(history)
    if "step" in df.columns:
        df = df.set_index("step")
    return df


def population_over_time(
    df: pd.DataFrame,
    title: str = "Population Over Time",
) -> go.Figure:
    """
    Line chart of prey and predator counts over steps.

    Args:
        df: DataFrame from `history_frame`.
        title: Chart title.

    Returns:
        Plotly figure.
    """
    fig = go.Figure()

    pop_cols = {
        "prey_count": ("Prey", "#2ecc71"),
        "predator_count": ("Predators", "#e74c3c"),
    }

    for col, (label, color) in pop_cols.items():
        if col in df.columns:
            fig.add_trace(go.Scatter(
                x=df.index,
                y=df[col],
                mode="lines+markers",
                name=label,
                line=dict(color=color, width=2),
            ))

    fig.update_layout(
        title=title,
        xaxis_title="Step",
        yaxis_title="Count",
        template="plotly_white",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    return fig


def events_per_step(
    df: pd.DataFrame,
    title: str = "Events per Step",
) -> go.Figure:
    """
    Grouped bar chart of births, deaths and prey eaten per step.

    Args:
        df: DataFrame from `history_frame`.
        title: Chart title.

    Returns:
        Plotly figure.
    """
    event_cols = {
        "births_prey": ("Prey born", "#27ae60"),
        "births_predator": ("Predators born", "#c0392b"),
        "prey_eaten": ("Prey eaten", "#f39c12"),
        "deaths_prey": ("Prey died of age", "#95a5a6"),
        "deaths_predator": ("Predators died of age", "#34495e"),
    }

    fig = go.Figure()
    for col, (label, color) in event_cols.items():
        if col in df.columns:
            fig.add_trace(go.Bar(x=df.index, y=df[col], name=label, marker_color=color))

    fig.update_layout(
        title=title,
        barmode="group",
        xaxis_title="Step",
        yaxis_title="Count",
        template="plotly_white",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    return fig
