"""Roll-versus-stop heat maps for the expectimax player.

One public data builder and one plot function:

    build_decision_grid(score_one, score_two, ...)  — EU(roll) − EU(stop) matrix
    plot_decision_heatmap(grid, title, ...)          — matplotlib figure

Matrix convention:
    Shape  : (len(brain_counts), len(blast_counts)) —
             rows = brains banked this turn, cols = blasts taken this turn
    Values : EU(roll) − EU(stop) from player one's point of view;
             positive = keep rolling, negative = stop.

Each cell is a mid-turn position for player one with an empty hand.  The
banked dice are taken greens-first for brains and reds-first for blasts,
which is the most likely composition.
"""

from __future__ import annotations

import matplotlib
import matplotlib.colors
import matplotlib.figure
import matplotlib.pyplot as plt
import numpy as np

from src.engine.cup import DICE_PER_COLOR
from src.engine.dice import DieColor
from src.engine.game_state import BLASTS_TO_BUST, WIN_PAYOFF, GameState, Player, build_state
from src.solvers.expectimax import evaluate_choices

# ─── Constants ────────────────────────────────────────────────────────────────

BRAIN_COUNTS: list[int] = [1, 2, 3, 4, 5, 6]
BLAST_COUNTS: list[int] = list(range(BLASTS_TO_BUST))

_BRAIN_ORDER: list[DieColor] = [DieColor.GREEN, DieColor.YELLOW, DieColor.RED]
_BLAST_ORDER: list[DieColor] = [DieColor.RED, DieColor.YELLOW, DieColor.GREEN]


def _make_diverging_cmap() -> matplotlib.colors.Colormap:
    """Red = stop, green = roll."""
    return matplotlib.colormaps["RdYlGn"].copy()


_DIVERGING_CMAP: matplotlib.colors.Colormap = _make_diverging_cmap()


# ─── Position helpers ─────────────────────────────────────────────────────────


def _take_colors(n: int, order: list[DieColor], used: dict[DieColor, int]) -> list[DieColor]:
    colors: list[DieColor] = []
    for color in order:
        while len(colors) < n and used[color] < DICE_PER_COLOR[color]:
            colors.append(color)
            used[color] += 1
    return colors


def grid_position(
    n_brains: int,
    n_blasts: int,
    score_one: int = 0,
    score_two: int = 0,
) -> GameState:
    """Build the player-one position for one heat-map cell.

    Examples:
        >>> s = grid_position(2, 1)
        >>> s.brains_collected, s.blasts_collected, len(s.cup)
        (2, 1, 10)
    """
    used = {color: 0 for color in DieColor}
    blasts = _take_colors(n_blasts, _BLAST_ORDER, used)
    brains = _take_colors(n_brains, _BRAIN_ORDER, used)
    return build_state(
        score_one=score_one,
        score_two=score_two,
        turn=Player.ONE,
        brains=brains,
        blasts=blasts,
    )


# ─── Data builder ─────────────────────────────────────────────────────────────


def build_decision_grid(
    score_one: int = 0,
    score_two: int = 0,
    *,
    depth_limit: int = 2,
    brain_counts: list[int] | None = None,
    blast_counts: list[int] | None = None,
) -> np.ndarray:
    """Return the EU(roll) − EU(stop) matrix for player one.

    Args:
        score_one:    Player one's brains eaten before this turn.
        score_two:    Player two's brains eaten.
        depth_limit:  Search horizon for each cell.
        brain_counts: Row values (brains banked).  Defaults to BRAIN_COUNTS.
        blast_counts: Column values (blasts taken).  Defaults to BLAST_COUNTS.

    Returns:
        float64 matrix of shape (len(brain_counts), len(blast_counts)).
    """
    rows = BRAIN_COUNTS if brain_counts is None else brain_counts
    cols = BLAST_COUNTS if blast_counts is None else blast_counts
    grid = np.zeros((len(rows), len(cols)))
    for r, n_brains in enumerate(rows):
        for c, n_blasts in enumerate(cols):
            state = grid_position(n_brains, n_blasts, score_one, score_two)
            eu_roll, eu_stop = evaluate_choices(state, depth_limit=depth_limit)
            grid[r, c] = eu_roll - eu_stop
    return grid


# ─── Plot ─────────────────────────────────────────────────────────────────────


def plot_decision_heatmap(
    grid: np.ndarray,
    title: str,
    *,
    brain_counts: list[int] | None = None,
    blast_counts: list[int] | None = None,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Plot a decision grid with ROLL/STOP annotations.

    Args:
        grid:         Matrix from build_decision_grid().
        title:        Figure title.
        brain_counts: Row labels; defaults to BRAIN_COUNTS.
        blast_counts: Column labels; defaults to BLAST_COUNTS.
        show:         If True, call plt.show() after rendering.
        save_path:    If not None, save the figure to this path before showing.

    Returns:
        matplotlib.figure.Figure.
    """
    rows = BRAIN_COUNTS if brain_counts is None else brain_counts
    cols = BLAST_COUNTS if blast_counts is None else blast_counts
    limit = max(float(np.max(np.abs(grid))), 1e-9) if grid.size else WIN_PAYOFF

    fig, ax = plt.subplots(figsize=(5, 6))
    im = ax.imshow(grid, cmap=_DIVERGING_CMAP, vmin=-limit, vmax=limit, aspect="auto")
    ax.set_title(title, fontsize=12, fontweight="bold")
    ax.set_xticks(range(len(cols)))
    ax.set_xticklabels([str(b) for b in cols], fontsize=9)
    ax.set_yticks(range(len(rows)))
    ax.set_yticklabels([str(b) for b in rows], fontsize=9)
    ax.set_xlabel("Blasts taken this turn", fontsize=9)
    ax.set_ylabel("Brains banked this turn", fontsize=9)

    for r in range(grid.shape[0]):
        for c in range(grid.shape[1]):
            val = grid[r, c]
            label = "ROLL" if val > 0 else "STOP"
            ax.text(c, r, f"{label}\n{val:+.1f}", ha="center", va="center", fontsize=8)

    plt.colorbar(im, ax=ax, label="EU(roll) − EU(stop)", fraction=0.046, pad=0.04)
    plt.tight_layout()

    if save_path is not None:
        fig.savefig(save_path, bbox_inches="tight", dpi=120)
    if show:
        plt.show()

    return fig


# ─── Entry point ──────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import sys

    depth = int(sys.argv[1]) if len(sys.argv) > 1 else 2
    for s1, s2 in [(0, 0), (8, 10)]:
        print(f"Building decision grid for score {s1}-{s2} (depth {depth}) …")
        data = build_decision_grid(s1, s2, depth_limit=depth)
        path = f"decision_{s1}_{s2}.png"
        plot_decision_heatmap(data, f"Roll vs stop at {s1}–{s2}", show=False, save_path=path)
        print(f"Saved: {path}")
