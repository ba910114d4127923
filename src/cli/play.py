"""
Console Zombie Dice: the computer (player ONE, expectimax) against a human.

Usage:
    python -m src.cli.play [--depth N] [--seed S] [--computer-only]
"""

from __future__ import annotations

import argparse
from typing import Callable

import numpy as np

from src.engine.dice import Die
from src.engine.game_state import (
    Decision,
    GameState,
    InvalidDecisionError,
    Player,
    take_action,
)
from src.solvers.expectimax import DEPTH_LIMIT, choose_move

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]

_PLAYER_NAMES: dict[Player, str] = {Player.ONE: "comp", Player.TWO: "user"}


# ─── Rendering ────────────────────────────────────────────────────────────────


def _dice_section(title: str, dice: list[Die], extra: list[str] | None = None) -> list[str]:
    lines = list(extra or []) + [str(d) for d in dice]
    if not lines:
        return [f"  {title} = NONE."]
    return [f"  {title} ="] + [f"    {line}" for line in lines]


def render_state(state: GameState) -> str:
    """Return a human-readable dump of the game state.

    Brains counted this turn whose dice went back into an empty cup are
    reported as "N reused brains".
    """
    lines = [
        "GAME STATE:",
        f"  COMP BRAINS EATEN = {state.score_one:2d}",
        f"  USER BRAINS EATEN = {state.score_two:2d}",
        "",
        f"  CURRENT PLAYER = {_PLAYER_NAMES[state.turn]}",
        "",
    ]
    lines += _dice_section("BLASTS COLLECTED", state.blasts)
    lines.append("")
    reused = state.brains_collected - len(state.brains)
    if state.brains_collected == 0:
        lines.append("  BRAINS COLLECTED = NONE.")
    else:
        extra = [f"{reused} reused brains"] if reused > 0 else []
        lines += _dice_section("BRAINS COLLECTED", state.brains, extra)
    lines.append("")
    lines += _dice_section("DICE IN HAND", state.hand)
    return "\n".join(lines)


# ─── Human input ──────────────────────────────────────────────────────────────


def parse_move(text: str) -> Decision | None:
    """Map a typed answer to ROLL/STOP by its first letter; None if invalid.

    Examples:
        >>> parse_move("roll")
        <Decision.ROLL: 3>
        >>> parse_move("S")
        <Decision.STOP: 4>
        >>> parse_move("maybe") is None
        True
    """
    text = text.strip()
    if not text:
        return None
    first = text[0].lower()
    if first == "r":
        return Decision.ROLL
    if first == "s":
        return Decision.STOP
    return None


def request_move(input_fn: InputFn = input, output_fn: OutputFn = print) -> Decision:
    """Prompt until the human types a valid move.

    Malformed answers are rejected and asked again, never defaulted.  An
    EOFError from *input_fn* propagates to the caller.
    """
    while True:
        output_fn("")
        move = parse_move(input_fn("Roll or Stop?  "))
        if move is not None:
            return move
        output_fn("Please answer R (roll) or S (stop).")


# ─── Game loop ────────────────────────────────────────────────────────────────


def play_game(
    state: GameState | None = None,
    *,
    depth_limit: int = DEPTH_LIMIT,
    computer_players: frozenset[Player] = frozenset({Player.ONE}),
    input_fn: InputFn = input,
    output_fn: OutputFn = print,
) -> GameState:
    """Play one game to completion and return the final state.

    Players in *computer_players* move by expectimax search; the others are
    prompted through *input_fn*.  An invalid decision aborts the game after
    being reported.
    """
    if state is None:
        state = GameState.new_game()

    output_fn("")
    output_fn("ZOMBIE DICE!")
    output_fn("")
    output_fn(render_state(state))

    while not state.is_terminal():
        if state.turn in computer_players:
            action = choose_move(state, depth_limit=depth_limit)
        else:
            action = request_move(input_fn, output_fn)

        if action is Decision.ROLL:
            output_fn("")
            output_fn("PLAYER ROLLS!")
        elif action is Decision.STOP:
            output_fn("")
            output_fn("PLAYER STOPS!")
        try:
            shotgunned = take_action(state, action)
        except InvalidDecisionError as exc:
            output_fn("")
            output_fn(f"ERROR:  {exc}")
            return state
        if shotgunned:
            output_fn("")
            output_fn("SHOTGUNNED!")
        output_fn("")
        output_fn(render_state(state))

    output_fn("")
    output_fn("COMPUTER WINS!" if state.score_one > state.score_two else "USER WINS!")
    output_fn("")
    return state


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Play Zombie Dice against an expectimax player.")
    parser.add_argument("--depth", type=int, default=DEPTH_LIMIT, help="search depth limit")
    parser.add_argument("--seed", type=int, default=None, help="NumPy random seed")
    parser.add_argument(
        "--computer-only",
        action="store_true",
        help="let the computer play both sides",
    )
    args = parser.parse_args(argv)

    if args.seed is not None:
        np.random.seed(args.seed)
    computers = frozenset(Player) if args.computer_only else frozenset({Player.ONE})
    try:
        play_game(depth_limit=args.depth, computer_players=computers)
    except (EOFError, KeyboardInterrupt):
        print("\nGame abandoned.")


if __name__ == "__main__":
    main()
