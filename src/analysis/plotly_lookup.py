"""Interactive Plotly lookup of the expectimax roll/stop decision.

Public functions:

    build_decision_figure(grid, title, ...)  — hoverable heatmap of a grid
                                               from heat_maps.build_decision_grid
    save_lookup_html(fig, path)              — export to a self-contained HTML file

Hover over a cell to see brains banked, blasts taken, the recommended action
and the expected-utility margin.
"""

from __future__ import annotations

import numpy as np
import plotly.graph_objects as go

from src.analysis.heat_maps import BLAST_COUNTS, BRAIN_COUNTS

# Red→green diverging scale centred on zero: red = STOP, green = ROLL.
_COLORSCALE: str = "RdYlGn"


def _build_hover(grid: np.ndarray, rows: list[int], cols: list[int]) -> list[list[str]]:
    """Return hover strings matching *grid* cell for cell."""
    text: list[list[str]] = []
    for r, n_brains in enumerate(rows):
        row: list[str] = []
        for c, n_blasts in enumerate(cols):
            margin = grid[r, c]
            action = "ROLL" if margin > 0 else "STOP"
            lines = [
                f"Brains banked: <b>{n_brains}</b>",
                f"Blasts taken: {n_blasts}",
                f"Action: <b>{action}</b>",
                f"EU(roll) − EU(stop): {margin:+.3f}",
            ]
            row.append("<br>".join(lines))
        text.append(row)
    return text


def build_decision_figure(
    grid: np.ndarray,
    title: str = "Roll vs stop",
    *,
    brain_counts: list[int] | None = None,
    blast_counts: list[int] | None = None,
) -> go.Figure:
    """Build an interactive heatmap figure for a decision grid.

    Args:
        grid:         Matrix from build_decision_grid().
        title:        Figure title.
        brain_counts: Row values; defaults to BRAIN_COUNTS.
        blast_counts: Column values; defaults to BLAST_COUNTS.

    Returns:
        go.Figure with a single heatmap trace.
    """
    rows = BRAIN_COUNTS if brain_counts is None else brain_counts
    cols = BLAST_COUNTS if blast_counts is None else blast_counts
    limit = max(float(np.max(np.abs(grid))), 1e-9) if grid.size else 1.0

    trace = go.Heatmap(
        z=grid.tolist(),
        x=[f"blasts={b}" for b in cols],
        y=[f"brains={b}" for b in rows],
        colorscale=_COLORSCALE,
        zmin=-limit,
        zmax=limit,
        text=_build_hover(grid, rows, cols),
        hovertemplate="%{text}<extra></extra>",
        colorbar={"title": "EU margin"},
        name="decision",
    )
    fig = go.Figure(data=[trace])
    fig.update_layout(title=title, height=500)
    fig.update_xaxes(title_text="Blasts taken this turn")
    fig.update_yaxes(title_text="Brains banked this turn")
    return fig


def save_lookup_html(fig: go.Figure, path: str) -> None:
    """Save a Plotly figure to a self-contained HTML file.

    Plotly JS is loaded from the CDN so the file itself remains compact.
    """
    fig.write_html(path, include_plotlyjs="cdn")


# ─── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    from src.analysis.heat_maps import build_decision_grid

    print("Building decision grid for score 0-0 (depth 2) …")
    data = build_decision_grid(0, 0, depth_limit=2)
    save_lookup_html(build_decision_figure(data, "Roll vs stop at 0–0"), "decision_lookup.html")
    print("Saved: decision_lookup.html")
