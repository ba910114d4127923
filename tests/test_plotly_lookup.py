"""Tests for the interactive Plotly lookup (src/analysis/plotly_lookup.py).

No display server is required: Plotly figures are in-memory objects and the
save helper writes HTML without rendering.
"""

from __future__ import annotations

import os

import numpy as np
import plotly.graph_objects as go
import pytest

from src.analysis.plotly_lookup import build_decision_figure, save_lookup_html

ROWS = [1, 2]
COLS = [0, 1, 2]


@pytest.fixture
def grid() -> np.ndarray:
    return np.array([[12.5, 3.0, -1.0], [4.0, -0.5, -20.0]])


class TestBuildDecisionFigure:
    def test_returns_figure(self, grid) -> None:
        fig = build_decision_figure(grid, brain_counts=ROWS, blast_counts=COLS)
        assert isinstance(fig, go.Figure)
        assert len(fig.data) == 1

    def test_axis_labels(self, grid) -> None:
        trace = build_decision_figure(grid, brain_counts=ROWS, blast_counts=COLS).data[0]
        assert list(trace.x) == ["blasts=0", "blasts=1", "blasts=2"]
        assert list(trace.y) == ["brains=1", "brains=2"]

    def test_symmetric_colour_range(self, grid) -> None:
        trace = build_decision_figure(grid, brain_counts=ROWS, blast_counts=COLS).data[0]
        assert trace.zmin == -20.0
        assert trace.zmax == 20.0

    def test_hover_text(self, grid) -> None:
        trace = build_decision_figure(grid, brain_counts=ROWS, blast_counts=COLS).data[0]
        assert "<b>ROLL</b>" in trace.text[0][0]
        assert "<b>STOP</b>" in trace.text[1][2]
        assert "+12.500" in trace.text[0][0]

    def test_title(self, grid) -> None:
        fig = build_decision_figure(grid, "Roll vs stop at 3–7", brain_counts=ROWS, blast_counts=COLS)
        assert fig.layout.title.text == "Roll vs stop at 3–7"


class TestSaveLookupHtml:
    def test_writes_file(self, grid, tmp_path) -> None:
        path = str(tmp_path / "lookup.html")
        save_lookup_html(build_decision_figure(grid, brain_counts=ROWS, blast_counts=COLS), path)
        assert os.path.exists(path)
        with open(path) as f:
            assert "plotly" in f.read().lower()
