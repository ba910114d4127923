"""
Finite-horizon expectimax search for Zombie Dice.

Player ONE maximizes and player TWO minimizes the payoff (+WIN_PAYOFF for a
player-one win).  A position is expanded through three node types:

    decision node  — UNDECIDED: roll or stop (MAX for ONE, MIN for TWO)
    draw node      — ROLL with a short hand: one branch per die color,
                     weighted by the cup's color probabilities
    roll node      — ROLL with a full hand: one branch per face combination
                     (3**HAND_SIZE of them), weighted by per-die face odds

Depth counts decision rounds: it advances after a non-busting roll and after
a stop, nowhere else.  At DEPTH_LIMIT the heuristic is backed up instead.

Every branch works on its own ``GameState.copy()``; the caller's state is
never left modified.  Results are memoised per call on
``GameState.search_key()`` plus depth, which collapses the many draw orders
and face permutations that lead to the same position.
"""

from __future__ import annotations

import itertools

from src.engine.dice import DieColor, DieFace
from src.engine.game_state import (
    HAND_SIZE,
    Decision,
    GameState,
    InvalidDecisionError,
    Player,
    heuristic,
)

# ─── Constants ────────────────────────────────────────────────────────────────

DEPTH_LIMIT: int = 3
"""Non-terminal positions at this depth are scored by heuristic()."""

ROLL_OUTCOMES: list[tuple[DieFace, ...]] = list(itertools.product(DieFace, repeat=HAND_SIZE))
"""Every face combination for a full hand, in DieFace order (27 for HAND_SIZE=3)."""


# ─── Entry point ──────────────────────────────────────────────────────────────


def value(
    state: GameState,
    depth: int = 0,
    *,
    depth_limit: int = DEPTH_LIMIT,
    memo: dict | None = None,
) -> float:
    """Return the expected payoff of *state* under expectimax play.

    Terminal states return their payoff; non-terminal states at
    ``depth >= depth_limit`` return the heuristic.

    Args:
        state:       Position to evaluate.  Not modified.
        depth:       Decision rounds already searched.
        depth_limit: Horizon in decision rounds.
        memo:        Transposition table to share between calls that use the
                     same depth_limit.  A fresh one is used when None.

    Raises:
        InvalidDecisionError: If the state's decision is NONE.
    """
    if state.is_terminal() or depth >= depth_limit:
        return state.payoff()
    if memo is None:
        memo = {}
    key = (state.search_key(), depth)
    cached = memo.get(key)
    if cached is not None:
        return cached

    if state.decision is Decision.ROLL:
        result = value_roll(state, depth, depth_limit=depth_limit, memo=memo)
    elif state.decision is Decision.STOP:
        result = value_stop(state, depth, depth_limit=depth_limit, memo=memo)
    elif state.decision is Decision.UNDECIDED:
        result = value_choose(state, depth, depth_limit=depth_limit, memo=memo)
    else:
        raise InvalidDecisionError(f"Cannot evaluate a state with decision {state.decision!r}.")

    memo[key] = result
    return result


# ─── Chance nodes ─────────────────────────────────────────────────────────────


def value_roll(
    state: GameState,
    depth: int,
    *,
    depth_limit: int = DEPTH_LIMIT,
    memo: dict | None = None,
) -> float:
    """Expected payoff when the player to move is about to draw and roll.

    A full hand goes straight to the roll node.  Otherwise one more die is
    drawn: over every color still in the cup, or from banked brains tipped
    back in when the cup is empty.  Drawing is not a decision, so depth is
    unchanged.
    """
    if memo is None:
        memo = {}
    if state.num_dice_in_hand() >= HAND_SIZE:
        return value_roll_hand(state, depth, depth_limit=depth_limit, memo=memo)

    if state.cup_is_empty():
        refilled = state.copy()
        refilled.reuse_brains()
        if refilled.cup_is_empty():
            raise ValueError("Cannot fill a hand: the cup and banked brains are both empty.")
        return value_roll(refilled, depth, depth_limit=depth_limit, memo=memo)

    total = 0.0
    for color in DieColor:
        p_color = state.draw_prob(color)
        if p_color == 0.0:
            continue
        branch = state.copy()
        branch.draw(color)
        total += p_color * value_roll(branch, depth, depth_limit=depth_limit, memo=memo)
    return total


def value_roll_hand(
    state: GameState,
    depth: int,
    *,
    depth_limit: int = DEPTH_LIMIT,
    memo: dict | None = None,
) -> float:
    """Expected payoff of rolling a full hand: sum over all face combinations."""
    if memo is None:
        memo = {}
    total = 0.0
    for faces in ROLL_OUTCOMES:
        p_faces = state.roll_prob(faces)
        if p_faces == 0.0:
            continue
        rolled = state.roll(faces)
        total += p_faces * value_rolled_hand(rolled, depth, depth_limit=depth_limit, memo=memo)
    return total


def value_rolled_hand(
    rolled_state: GameState,
    depth: int,
    *,
    depth_limit: int = DEPTH_LIMIT,
    memo: dict | None = None,
) -> float:
    """Expected payoff once the hand shows known faces.

    Brains and blasts are collected.  A shotgunned player is forced to stop
    at the same depth; otherwise the player decides again one round deeper.
    """
    s = rolled_state.copy()
    s.collect_hand()
    if s.is_shotgunned():
        s.decision = Decision.STOP
        return value(s, depth, depth_limit=depth_limit, memo=memo)
    s.decision = Decision.UNDECIDED
    return value(s, depth + 1, depth_limit=depth_limit, memo=memo)


# ─── Stop and decision nodes ──────────────────────────────────────────────────


def value_stop(
    stop_state: GameState,
    depth: int,
    *,
    depth_limit: int = DEPTH_LIMIT,
    memo: dict | None = None,
) -> float:
    """Expected payoff when the player to move stops now."""
    s = stop_state.copy()
    s.end_turn()
    if s.is_terminal():
        return s.payoff()
    s.next_player()
    return value(s, depth + 1, depth_limit=depth_limit, memo=memo)


def _value_as(
    state: GameState,
    decision: Decision,
    depth: int,
    depth_limit: int,
    memo: dict | None,
) -> float:
    """Value of *state* with its decision temporarily set to *decision*."""
    previous = state.decision
    state.decision = decision
    try:
        return value(state, depth, depth_limit=depth_limit, memo=memo)
    finally:
        state.decision = previous


def value_choose(
    state: GameState,
    depth: int,
    *,
    depth_limit: int = DEPTH_LIMIT,
    memo: dict | None = None,
) -> float:
    """Value of a roll-or-stop decision: max for player ONE, min for TWO.

    With no brains banked this turn, stopping is never better than rolling,
    so only the roll branch is searched.
    """
    if memo is None:
        memo = {}
    eu_roll = _value_as(state, Decision.ROLL, depth, depth_limit, memo)
    if state.brains_collected == 0:
        return eu_roll
    eu_stop = _value_as(state, Decision.STOP, depth, depth_limit, memo)
    if state.turn is Player.ONE:
        return max(eu_roll, eu_stop)
    return min(eu_roll, eu_stop)


# ─── Move selection ───────────────────────────────────────────────────────────


def evaluate_choices(
    state: GameState,
    *,
    depth_limit: int = DEPTH_LIMIT,
) -> tuple[float, float]:
    """Return ``(eu_roll, eu_stop)`` for the player to move.

    Both are searched from depth 0 on copies of *state* and share one
    transposition table.
    """
    memo: dict = {}
    rolling = state.copy()
    rolling.decision = Decision.ROLL
    eu_roll = value(rolling, depth_limit=depth_limit, memo=memo)
    stopping = state.copy()
    stopping.decision = Decision.STOP
    eu_stop = value(stopping, depth_limit=depth_limit, memo=memo)
    return eu_roll, eu_stop


def choose_move(state: GameState, *, depth_limit: int = DEPTH_LIMIT) -> Decision:
    """Pick ROLL or STOP for the player to move.

    Always rolls with nothing banked.  Player ONE takes the higher expected
    payoff and player TWO the lower; ties go to ROLL.
    """
    if state.brains_collected == 0:
        return Decision.ROLL
    eu_roll, eu_stop = evaluate_choices(state, depth_limit=depth_limit)
    if state.turn is Player.ONE:
        return Decision.ROLL if eu_roll >= eu_stop else Decision.STOP
    return Decision.ROLL if eu_roll <= eu_stop else Decision.STOP
