"""
Monte Carlo self-play simulator for Zombie Dice strategies.

Plays complete games between two strategies on the live turn flow
(``take_action``) and summarises the results: wins per side, win rate for
player one with an exact (Clopper-Pearson) 95% confidence interval, and the
mean game length in turns.

Strategies are plain callables ``GameState -> Decision``.  Two factories are
provided:
    make_threshold_strategy(n)        — roll until n brains are banked or
                                        one blast away from being shotgunned
    make_expectimax_strategy(depth)   — search-based choose_move()

Games are capped at ``max_turns``; a game that hits the cap (possible in
principle because tied scores never end the game) is counted as unfinished.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np
from scipy import stats

from src.engine.game_state import (
    BLASTS_TO_BUST,
    Decision,
    GameState,
    Player,
    take_action,
)
from src.solvers.expectimax import DEPTH_LIMIT, choose_move

Strategy = Callable[[GameState], Decision]


# ─── Result types ─────────────────────────────────────────────────────────────


@dataclass
class GameResult:
    """Outcome of one simulated game.

    Attributes:
        winner:    Player.ONE / Player.TWO, or None if the game hit max_turns.
        score_one: Final brains eaten by player one.
        score_two: Final brains eaten by player two.
        n_turns:   Completed turns (each stop counts one).
        n_busts:   Turns that ended by being shotgunned.
    """

    winner: Player | None
    score_one: int
    score_two: int
    n_turns: int
    n_busts: int


@dataclass
class SimulationResult:
    """Aggregate statistics from a self-play run.

    Attributes:
        n_games:      Games played.
        wins_one:     Games won by player one.
        wins_two:     Games won by player two.
        n_unfinished: Games stopped at max_turns.
        win_rate_one: wins_one / finished games (0.0 if none finished).
        ci_95_low:    Lower Clopper-Pearson 95% bound for win_rate_one.
        ci_95_high:   Upper Clopper-Pearson 95% bound for win_rate_one.
        mean_turns:   Mean turns per game.
        bust_rate:    Fraction of turns that ended shotgunned.
    """

    n_games: int
    wins_one: int
    wins_two: int
    n_unfinished: int
    win_rate_one: float
    ci_95_low: float
    ci_95_high: float
    mean_turns: float
    bust_rate: float

    def __str__(self) -> str:
        return (
            f"Games: {self.n_games:,} | "
            f"P1 wins: {self.wins_one:,} ({self.win_rate_one * 100:.1f}%) | "
            f"95% CI: [{self.ci_95_low:.3f}, {self.ci_95_high:.3f}] | "
            f"P2 wins: {self.wins_two:,} | Unfinished: {self.n_unfinished} | "
            f"Mean turns: {self.mean_turns:.1f}"
        )


# ─── Strategy factories ───────────────────────────────────────────────────────


def make_threshold_strategy(brain_target: int = 3) -> Strategy:
    """Return a strategy that rolls until *brain_target* brains are banked.

    It also stops once another blast would shotgun it, provided it has at
    least one brain to bank.

    Args:
        brain_target: Brains banked this turn at which to stop.

    Returns:
        Strategy callable.
    """

    def _strategy(state: GameState) -> Decision:
        if state.brains_collected == 0:
            return Decision.ROLL
        if state.brains_collected >= brain_target:
            return Decision.STOP
        if state.blasts_collected >= BLASTS_TO_BUST - 1:
            return Decision.STOP
        return Decision.ROLL

    return _strategy


def make_expectimax_strategy(depth_limit: int = DEPTH_LIMIT) -> Strategy:
    """Return a strategy backed by the expectimax search at *depth_limit*."""

    def _strategy(state: GameState) -> Decision:
        return choose_move(state, depth_limit=depth_limit)

    return _strategy


# ─── Game loop ────────────────────────────────────────────────────────────────


def play_game(
    strategy_one: Strategy,
    strategy_two: Strategy,
    max_turns: int = 500,
) -> GameResult:
    """Play one game from a fresh position and return its result."""
    state = GameState.new_game()
    strategies = {Player.ONE: strategy_one, Player.TWO: strategy_two}
    n_turns = n_busts = 0

    while not state.is_terminal() and n_turns < max_turns:
        acting = state.turn
        decision = strategies[acting](state)
        shotgunned = take_action(state, decision)
        if shotgunned:
            n_busts += 1
        if state.decision is Decision.STOP or state.turn is not acting:
            n_turns += 1

    winner: Player | None = None
    if state.is_terminal():
        winner = Player.ONE if state.score_one > state.score_two else Player.TWO
    return GameResult(
        winner=winner,
        score_one=state.score_one,
        score_two=state.score_two,
        n_turns=n_turns,
        n_busts=n_busts,
    )


def simulate_games(
    strategy_one: Strategy,
    strategy_two: Strategy,
    n_games: int = 1_000,
    seed: int | None = 42,
    max_turns: int = 500,
) -> SimulationResult:
    """Play *n_games* of self-play and return aggregate statistics.

    Args:
        strategy_one: Strategy for player one (moves first).
        strategy_two: Strategy for player two.
        n_games:      Number of games.
        seed:         NumPy random seed for reproducibility.  None for a
                      non-deterministic run.
        max_turns:    Per-game turn cap.

    Returns:
        SimulationResult for the run.
    """
    if seed is not None:
        np.random.seed(seed)

    results = [play_game(strategy_one, strategy_two, max_turns) for _ in range(n_games)]

    wins_one = sum(1 for r in results if r.winner is Player.ONE)
    wins_two = sum(1 for r in results if r.winner is Player.TWO)
    finished = wins_one + wins_two
    turns = np.array([r.n_turns for r in results], dtype=np.float64)
    total_turns = float(turns.sum())

    if finished > 0:
        ci = stats.binomtest(wins_one, finished).proportion_ci(confidence_level=0.95)
        win_rate, ci_low, ci_high = wins_one / finished, float(ci.low), float(ci.high)
    else:
        win_rate, ci_low, ci_high = 0.0, 0.0, 1.0

    return SimulationResult(
        n_games=n_games,
        wins_one=wins_one,
        wins_two=wins_two,
        n_unfinished=n_games - finished,
        win_rate_one=win_rate,
        ci_95_low=ci_low,
        ci_95_high=ci_high,
        mean_turns=float(turns.mean()) if n_games > 0 else 0.0,
        bust_rate=sum(r.n_busts for r in results) / total_turns if total_turns else 0.0,
    )


# ─── __main__ ─────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    print("Zombie Dice self-play — threshold strategies, 2,000 games each\n")
    for target_one, target_two in [(2, 2), (3, 2), (4, 2), (3, 5)]:
        result = simulate_games(
            make_threshold_strategy(target_one),
            make_threshold_strategy(target_two),
            n_games=2_000,
        )
        print(f"stop@{target_one} vs stop@{target_two}: {result}")

    print("\nExpectimax (depth 1) vs stop@3, 50 games")
    print(simulate_games(make_expectimax_strategy(1), make_threshold_strategy(3), n_games=50))
