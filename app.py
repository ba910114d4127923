"""Zombie Dice Expectimax Solver — Streamlit Dashboard.

Four-tab interactive dashboard:
  Tab 1 — Position Evaluator     (EU of rolling vs stopping for a set-up position)
  Tab 2 — Decision Heat Map      (matplotlib, roll/stop over banked brains × blasts)
  Tab 3 — Interactive Lookup     (Plotly, hover for action + EU margin)
  Tab 4 — Self-Play Simulation   (threshold strategies, win rates with exact CIs)

Run:
    PYTHONPATH=. streamlit run app.py
"""

from __future__ import annotations

import contextlib
import io

import matplotlib

matplotlib.use("Agg")  # must be set before any other matplotlib imports

import streamlit as st

# ─── Page config ──────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Zombie Dice Solver",
    page_icon="🧟",
    layout="wide",
)

# ─── Lazy imports (inside functions to keep startup fast) ─────────────────────


@st.cache_resource
def _load_modules():
    """Import the engine and analysis modules once (cached for the process lifetime)."""
    from src.analysis.heat_maps import build_decision_grid, plot_decision_heatmap
    from src.analysis.plotly_lookup import build_decision_figure
    from src.analysis.simulator import make_threshold_strategy, simulate_games
    from src.cli.play import render_state
    from src.engine.dice import DieColor
    from src.engine.game_state import Player, build_state
    from src.solvers.expectimax import choose_move, evaluate_choices, heuristic

    return {
        "DieColor": DieColor,
        "Player": Player,
        "build_state": build_state,
        "render_state": render_state,
        "evaluate_choices": evaluate_choices,
        "choose_move": choose_move,
        "heuristic": heuristic,
        "build_decision_grid": build_decision_grid,
        "plot_decision_heatmap": plot_decision_heatmap,
        "build_decision_figure": build_decision_figure,
        "simulate_games": simulate_games,
        "make_threshold_strategy": make_threshold_strategy,
    }


@st.cache_data
def _decision_grid(score_one: int, score_two: int, depth_limit: int):
    """Build and cache the roll/stop grid (keyed on score line and depth)."""
    return _load_modules()["build_decision_grid"](score_one, score_two, depth_limit=depth_limit)


m = _load_modules()
DieColor = m["DieColor"]
Player = m["Player"]

# ─── Sidebar controls ─────────────────────────────────────────────────────────

with st.sidebar:
    st.title("🧟 Zombie Dice Solver")
    st.markdown("---")

    score_one = st.number_input("Player one brains eaten", min_value=0, max_value=30, value=0)
    score_two = st.number_input("Player two brains eaten", min_value=0, max_value=30, value=0)
    to_move = st.selectbox(
        "Player to move",
        options=[Player.ONE, Player.TWO],
        format_func=lambda p: "One (max)" if p is Player.ONE else "Two (min)",
    )

    st.markdown("---")
    st.subheader("This turn")
    brain_counts = {
        c: st.number_input(f"{c.name.title()} brains", min_value=0, max_value=6, value=0)
        for c in DieColor
    }
    blast_counts = {
        c: st.number_input(f"{c.name.title()} blasts", min_value=0, max_value=2, value=0)
        for c in DieColor
    }
    hand_counts = {
        c: st.number_input(f"{c.name.title()} feet in hand", min_value=0, max_value=2, value=0)
        for c in DieColor
    }

    st.markdown("---")
    depth_limit = st.slider("Search depth", min_value=1, max_value=3, value=1)

    st.markdown("---")
    st.caption("Engine → Expectimax → Analysis")

# ─── Tabs ─────────────────────────────────────────────────────────────────────

tab1, tab2, tab3, tab4 = st.tabs(
    [
        "Position Evaluator",
        "Decision Heat Map",
        "Interactive Lookup",
        "Self-Play Simulation",
    ]
)

# ── Tab 1: Position Evaluator ─────────────────────────────────────────────────

with tab1:
    st.header("Position Evaluator")

    def _expand(counts):
        return [c for c, n in counts.items() for _ in range(int(n))]

    try:
        position = m["build_state"](
            score_one=int(score_one),
            score_two=int(score_two),
            turn=to_move,
            brains=_expand(brain_counts),
            blasts=_expand(blast_counts),
            hand=_expand(hand_counts),
        )
    except ValueError as exc:
        st.error(f"Impossible position: {exc}")
        position = None

    if position is not None and position.blasts_collected >= 3:
        st.warning("Three or more blasts: this player is already shotgunned.")
        position = None
    elif position is not None and len(position.hand) > 2:
        st.warning("At most two feet dice can be carried into the next roll.")
        position = None

    if position is not None:
        st.code(m["render_state"](position), language=None)
        with st.spinner(f"Searching to depth {depth_limit} …"):
            eu_roll, eu_stop = m["evaluate_choices"](position, depth_limit=depth_limit)
            move = m["choose_move"](position, depth_limit=depth_limit)

        col1, col2, col3, col4 = st.columns(4)
        col1.metric("EU(roll)", f"{eu_roll:+.2f}")
        col2.metric("EU(stop)", f"{eu_stop:+.2f}")
        col3.metric("Heuristic", f"{m['heuristic'](position):+.2f}")
        col4.metric("Recommended", move.name)
        if position.brains_collected == 0:
            st.caption("Nothing banked yet: rolling is forced.")

# ── Tab 2: Decision Heat Map ──────────────────────────────────────────────────

with tab2:
    st.header("Decision Heat Map")
    st.caption(
        "Rows = brains banked this turn | Cols = blasts taken | "
        "Green = ROLL, Red = STOP | player one to move, empty hand"
    )
    if st.button("Build heat map", key="heatmap"):
        with st.spinner("Searching every cell …"):
            grid = _decision_grid(int(score_one), int(score_two), depth_limit)
        fig = m["plot_decision_heatmap"](
            grid, f"Roll vs stop at {int(score_one)}–{int(score_two)}", show=False
        )
        st.pyplot(fig)
    else:
        st.info("Press **Build heat map** to search every cell for the sidebar score line.")

# ── Tab 3: Interactive Lookup ─────────────────────────────────────────────────

with tab3:
    st.header("Interactive Decision Lookup")
    st.caption("Hover over any cell to see the action and EU margin.")
    if st.button("Build lookup", key="lookup"):
        with st.spinner("Searching every cell …"):
            grid = _decision_grid(int(score_one), int(score_two), depth_limit)
        fig = m["build_decision_figure"](
            grid, f"Roll vs stop at {int(score_one)}–{int(score_two)}"
        )
        st.plotly_chart(fig, use_container_width=True)
    else:
        st.info("Press **Build lookup** to search every cell for the sidebar score line.")

# ── Tab 4: Self-Play Simulation ───────────────────────────────────────────────

with tab4:
    st.header("Self-Play Simulation")
    st.caption("Threshold strategies: keep rolling until N brains are banked this turn.")

    col1, col2, col3 = st.columns(3)
    target_one = col1.slider("Player one stops at", min_value=1, max_value=8, value=3)
    target_two = col2.slider("Player two stops at", min_value=1, max_value=8, value=3)
    n_games = col3.slider("Games", min_value=100, max_value=5_000, value=500, step=100)

    if st.button("Run simulation", type="primary"):
        import pandas as pd

        with st.spinner(f"Simulating {n_games:,} games …"):
            sim = m["simulate_games"](
                m["make_threshold_strategy"](target_one),
                m["make_threshold_strategy"](target_two),
                n_games=n_games,
                seed=42,
            )

        col1, col2, col3, col4 = st.columns(4)
        col1.metric("P1 win rate", f"{sim.win_rate_one * 100:.1f}%")
        col2.metric("95% CI", f"[{sim.ci_95_low:.3f}, {sim.ci_95_high:.3f}]")
        col3.metric("Mean turns", f"{sim.mean_turns:.1f}")
        col4.metric("Bust rate", f"{sim.bust_rate * 100:.1f}%")

        df = pd.DataFrame(
            [
                {"Outcome": "Player one wins", "Games": sim.wins_one},
                {"Outcome": "Player two wins", "Games": sim.wins_two},
                {"Outcome": "Unfinished", "Games": sim.n_unfinished},
            ]
        )
        st.dataframe(df, use_container_width=True, hide_index=True)

        buf = io.StringIO()
        with contextlib.redirect_stdout(buf):
            print(sim)
        st.code(buf.getvalue(), language=None)
    else:
        st.info("Press **Run simulation** to play the two strategies against each other.")
