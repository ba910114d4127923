"""Tests for the roll/stop heat maps (src/analysis/heat_maps.py).

Grids are searched at depth 1 over a few cells to keep the suite quick.
The Agg backend is activated before any pyplot import so environments
without a display server can run the suite.
"""

from __future__ import annotations

import os

import matplotlib

matplotlib.use("Agg")  # must precede any pyplot import

import matplotlib.figure
import matplotlib.pyplot as plt
import numpy as np
import pytest

from src.analysis.heat_maps import (
    BLAST_COUNTS,
    BRAIN_COUNTS,
    build_decision_grid,
    grid_position,
    plot_decision_heatmap,
)
from src.engine.dice import DieColor
from src.engine.game_state import Player
from src.solvers.expectimax import evaluate_choices

ROWS = [1, 3]
COLS = [0, 2]


@pytest.fixture(scope="module")
def grid() -> np.ndarray:
    return build_decision_grid(0, 0, depth_limit=1, brain_counts=ROWS, blast_counts=COLS)


# ─── grid_position ────────────────────────────────────────────────────────────


class TestGridPosition:
    def test_counts(self) -> None:
        s = grid_position(2, 1)
        assert s.brains_collected == 2
        assert s.blasts_collected == 1
        assert len(s.cup) == 10
        assert s.turn is Player.ONE
        assert s.hand == []

    def test_brains_greens_first(self) -> None:
        s = grid_position(8, 0)
        colors = [d.color for d in s.brains]
        assert colors.count(DieColor.GREEN) == 6
        assert colors.count(DieColor.YELLOW) == 2

    def test_blasts_reds_first(self) -> None:
        s = grid_position(0, 2)
        assert all(d.color is DieColor.RED for d in s.blasts)

    def test_scores(self) -> None:
        s = grid_position(1, 0, score_one=5, score_two=9)
        assert (s.score_one, s.score_two) == (5, 9)


# ─── build_decision_grid ──────────────────────────────────────────────────────


class TestBuildDecisionGrid:
    def test_shape(self, grid) -> None:
        assert grid.shape == (len(ROWS), len(COLS))

    def test_default_axes(self) -> None:
        assert BRAIN_COUNTS == [1, 2, 3, 4, 5, 6]
        assert BLAST_COUNTS == [0, 1, 2]

    def test_matches_evaluate_choices(self, grid) -> None:
        eu_roll, eu_stop = evaluate_choices(grid_position(3, 2), depth_limit=1)
        assert grid[1, 1] == pytest.approx(eu_roll - eu_stop)

    def test_bounded(self, grid) -> None:
        assert np.all(np.abs(grid) <= 200.0)

    def test_stop_on_the_brink_of_winning(self) -> None:
        g = build_decision_grid(12, 0, depth_limit=1, brain_counts=[1], blast_counts=[2])
        assert g[0, 0] < 0


# ─── plot_decision_heatmap ────────────────────────────────────────────────────


class TestPlotDecisionHeatmap:
    def test_returns_figure(self, grid) -> None:
        fig = plot_decision_heatmap(grid, "test", brain_counts=ROWS, blast_counts=COLS, show=False)
        assert isinstance(fig, matplotlib.figure.Figure)
        plt.close(fig)

    def test_annotations(self, grid) -> None:
        fig = plot_decision_heatmap(grid, "test", brain_counts=ROWS, blast_counts=COLS, show=False)
        texts = [t.get_text() for t in fig.axes[0].texts]
        assert len(texts) == grid.size
        assert all(t.startswith(("ROLL", "STOP")) for t in texts)
        plt.close(fig)

    def test_save(self, grid, tmp_path) -> None:
        path = str(tmp_path / "grid.png")
        fig = plot_decision_heatmap(
            grid, "test", brain_counts=ROWS, blast_counts=COLS, show=False, save_path=path
        )
        assert os.path.exists(path)
        plt.close(fig)
