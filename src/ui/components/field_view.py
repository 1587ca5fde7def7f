"""
Field view component for the Predator/Prey Simulator.

Turns the per-cell net population (+1 per prey, -1 per predator) into:
  - a plain text grid for the console, one row per y
  - a Plotly heatmap for the Streamlit UI

Text cells are " *" for an empty or balanced cell,
"+N" for a prey majority and "-N" for a predator majority.
"""

from typing import Optional, Union

import numpy as np
import plotly.graph_objects as go
from numpy.typing import NDArray

from src.core.world import World
from src.simulation.engine import Simulation


EMPTY_CELL = " *"


def field_counts(source: Union[Simulation, World, dict]) -> NDArray[np.int64]:
    """
    Net population per cell, shape (height, width).

    Args:
        source: A Simulation, a World, or a snapshot dict with a 'field' entry.
    """
    if isinstance(source, Simulation):
        return source.world.population_field()
    if isinstance(source, World):
        return source.population_field()
    return np.asarray(source["field"], dtype=np.int64)


def format_cell(count: int) -> str:
    """Render one cell: ' *' when zero, otherwise an explicitly signed count."""
    if count == 0:
        return EMPTY_CELL
    return f"{count:+d}"


def render_field_text(counts: NDArray[np.int64]) -> str:
    """
    Render net counts as text rows.

    Args:
        counts: Array of shape (height, width).

    Returns:
        Rows joined by newlines (no trailing newline), cells separated by a space.
    """
    return "\n".join(
        " ".join(format_cell(int(c)) for c in row)
        for row in counts
    )


def render_field_figure(
    counts: NDArray[np.int64],
    title: Optional[str] = None,
    width: int = 600,
    height: int = 600,
) -> go.Figure:
    """
    Render net counts as a diverging heatmap (prey green, predators red).

    Args:
        counts: Array of shape (height, width).
        title: Optional chart title.
        width, height: Plot size in pixels.

    Returns:
        Plotly figure.
    """
    grid_h, grid_w = counts.shape
    limit = max(1, int(np.abs(counts).max())) if counts.size else 1

    if title is None:
        title = f"Field ({grid_w}x{grid_h})"

    fig = go.Figure(data=go.Heatmap(
        z=counts,
        x=list(range(grid_w)),
        y=list(range(grid_h)),
        zmin=-limit, zmax=limit,
        colorscale=[[0.0, "#e74c3c"], [0.5, "#f8f9fa"], [1.0, "#2ecc71"]],
        text=[[format_cell(int(c)).strip() for c in row] for row in counts],
        texttemplate="%{text}",
        colorbar=dict(title="Net", thickness=15, len=0.5),
        hovertemplate="Cell (%{x}, %{y})<br>Net: %{z}<extra></extra>",
        xgap=1, ygap=1,
    ))

    fig.update_layout(
        title=title,
        width=width,
        height=height,
        xaxis=dict(title="X", scaleanchor="y", scaleratio=1, constrain="domain", dtick=1),
        yaxis=dict(title="Y", autorange="reversed", dtick=1),
        template="plotly_white",
        margin=dict(l=40, r=40, t=60, b=40),
    )
    return fig
