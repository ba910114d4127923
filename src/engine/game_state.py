"""
Game state management and the live turn flow.

A GameState holds everything about a Zombie Dice position:

    scores → whose turn → pending decision → banked brains / blasts →
    dice in hand → dice cup

It is used both for the real game in progress and for the hypothetical
positions explored by the expectimax search.  Methods documented as
"in place" mutate the state; search code must branch on ``copy()``.

Turn flow (driven externally by ``take_action``):
    UNDECIDED → ROLL  : draw to a full hand, roll, collect brains/blasts.
                        Shotgunned (3+ blasts) forces STOP; else UNDECIDED.
    UNDECIDED → STOP  : bank brains (unless shotgunned), return all dice to
                        the cup, then hand over the turn unless terminal.

Termination is asymmetric: the game only ends at player two's
stop boundary, so player two always gets the last turn of a round.  Equal
scores never end the game, even above the win threshold.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Sequence

from .cup import TOTAL_NUM_DICE, Cup
from .dice import Die, DieColor, DieFace, dice_to_str

# ─── Constants ────────────────────────────────────────────────────────────────

HAND_SIZE: int = 3
BLASTS_TO_BUST: int = 3
BRAINS_TO_WIN: int = 13
WIN_PAYOFF: float = 100.0


# ─── Enumerations ─────────────────────────────────────────────────────────────


class Player(Enum):
    ONE = auto()  # maximizer (the computer in the console game)
    TWO = auto()  # minimizer

    @property
    def other(self) -> Player:
        return Player.TWO if self is Player.ONE else Player.ONE


class Decision(Enum):
    NONE = auto()       # no valid decision; never resolvable
    UNDECIDED = auto()
    ROLL = auto()
    STOP = auto()


class InvalidDecisionError(ValueError):
    """Raised when a turn is asked to resolve a decision other than ROLL/STOP."""


# ─── State ────────────────────────────────────────────────────────────────────


@dataclass
class GameState:
    """Mutable snapshot of a Zombie Dice game.

    ``brains_collected`` is a running count for the current turn and may
    exceed ``len(brains)`` once banked brain dice have been reused to refill
    an empty cup.
    """

    score_one: int = 0
    score_two: int = 0
    turn: Player = Player.ONE
    decision: Decision = Decision.UNDECIDED
    brains_collected: int = 0
    blasts_collected: int = 0
    brains: list[Die] = field(default_factory=list)
    blasts: list[Die] = field(default_factory=list)
    hand: list[Die] = field(default_factory=list)
    cup: Cup = field(default_factory=Cup)

    @classmethod
    def new_game(cls) -> GameState:
        """Start of game: player one to move, full cup already shaken."""
        state = cls()
        state.cup.shake()
        return state

    def copy(self) -> GameState:
        """Return a deep copy; no Die object is shared with the original."""
        return GameState(
            score_one=self.score_one,
            score_two=self.score_two,
            turn=self.turn,
            decision=self.decision,
            brains_collected=self.brains_collected,
            blasts_collected=self.blasts_collected,
            brains=[d.copy() for d in self.brains],
            blasts=[d.copy() for d in self.blasts],
            hand=[d.copy() for d in self.hand],
            cup=self.cup.copy(),
        )

    # ── Queries ───────────────────────────────────────────────────────────────

    def num_dice_in_hand(self) -> int:
        return len(self.hand)

    def cup_is_empty(self) -> bool:
        return self.cup.is_empty()

    def is_shotgunned(self) -> bool:
        """True once this turn's blasts reach the bust threshold."""
        return self.blasts_collected >= BLASTS_TO_BUST

    def total_dice(self) -> int:
        """Dice across cup, hand, banked brains and blasts (13 at turn boundaries)."""
        return len(self.cup) + len(self.hand) + len(self.brains) + len(self.blasts)

    def score_of(self, player: Player) -> int:
        return self.score_one if player is Player.ONE else self.score_two

    def draw_prob(self, color: DieColor) -> float:
        """Probability that the next die drawn from the cup has *color*."""
        return self.cup.probability(color)

    def roll_prob(self, faces: Sequence[DieFace]) -> float:
        """Probability of rolling *faces* (position by position) on a full hand.

        Returns 0.0 unless the hand holds HAND_SIZE dice.
        """
        if len(self.hand) < HAND_SIZE or len(faces) != len(self.hand):
            return 0.0
        prob = 1.0
        for die, face in zip(self.hand, faces):
            prob *= die.probability(face)
        return prob

    def is_terminal(self) -> bool:
        """True iff the game is over.

        Assumes the current turn has been ended with ``end_turn()``.
        """
        return (
            self.turn is Player.TWO
            and self.decision is Decision.STOP
            and self.score_one != self.score_two
            and (self.score_one >= BRAINS_TO_WIN or self.score_two >= BRAINS_TO_WIN)
        )

    def payoff(self) -> float:
        """±WIN_PAYOFF at a terminal state, else the heuristic estimate."""
        if self.is_terminal():
            return WIN_PAYOFF if self.score_one > self.score_two else -WIN_PAYOFF
        return heuristic(self)

    def search_key(self) -> tuple:
        """Hashable summary of everything the search value depends on.

        Draw order and the faces showing in hand are excluded: the search
        enumerates colors and faces exhaustively, so neither affects a value.
        """
        return (
            self.score_one,
            self.score_two,
            self.turn,
            self.decision,
            self.brains_collected,
            self.blasts_collected,
            _colors_key(self.brains),
            _colors_key(self.blasts),
            _colors_key(self.hand),
            self.cup.composition(),
        )

    # ── In-place mutators ─────────────────────────────────────────────────────

    def collect_hand(self) -> None:
        """Move brain and blast dice out of the hand, in place.

        Afterwards every die left in the hand shows feet.
        """
        kept: list[Die] = []
        for die in self.hand:
            if die.face is DieFace.BRAIN:
                self.brains_collected += 1
                self.brains.append(die)
            elif die.face is DieFace.BLAST:
                self.blasts_collected += 1
                self.blasts.append(die)
            else:
                kept.append(die)
        self.hand = kept

    def end_turn(self) -> None:
        """Bank this turn's brains (unless shotgunned) and reset, in place.

        All dice go back into the cup, the cup is shaken, and the decision is
        forced to STOP.  Assumes the latest hand has been collected.
        """
        if not self.is_shotgunned():
            if self.turn is Player.ONE:
                self.score_one += self.brains_collected
            else:
                self.score_two += self.brains_collected
        self.brains_collected = 0
        self.blasts_collected = 0
        self.cup.replace_all(self.brains)
        self.brains = []
        self.cup.replace_all(self.blasts)
        self.blasts = []
        self.cup.replace_all(self.hand)
        self.hand = []
        self.cup.shake()
        self.decision = Decision.STOP

    def next_player(self) -> None:
        """Hand the turn over, in place.  Assumes ``end_turn()`` has run."""
        self.turn = self.turn.other
        self.decision = Decision.UNDECIDED

    def reuse_brains(self) -> None:
        """Tip banked brain dice back into the cup, in place.

        The running ``brains_collected`` count is NOT reset: only the dice
        are reused.
        """
        self.cup.replace_all(self.brains)
        self.brains = []

    def draw(self, color: DieColor | None = None) -> Die | None:
        """Draw one die into the hand, in place.

        Draws the die at the front of the cup, or the first die of *color*
        when one is given.  Returns None if the hand is full or no suitable
        die is in the cup.  The drawn die is reset to show feet.
        """
        if len(self.hand) >= HAND_SIZE:
            return None
        die = self.cup.draw() if color is None else self.cup.draw_color(color)
        if die is None:
            return None
        die.set_face(DieFace.FEET)
        self.hand.append(die)
        return die

    def draw_hand(self) -> bool:
        """Draw random dice until the hand is full, in place.

        When the cup runs dry, banked brain dice are reused.  Returns False
        only if the hand cannot be filled even after reuse.
        """
        for _ in range(TOTAL_NUM_DICE + HAND_SIZE):
            if len(self.hand) >= HAND_SIZE:
                return True
            if self.draw() is None:
                if not self.brains:
                    return False
                self.reuse_brains()
        return len(self.hand) >= HAND_SIZE

    def replace(self, die: Die) -> bool:
        """Return *die* from the hand to the cup.  False if it is not in hand."""
        for i, held in enumerate(self.hand):
            if held is die:
                del self.hand[i]
                self.cup.replace(die)
                return True
        return False

    def roll_in_place(self, faces: Sequence[DieFace] | None = None) -> GameState:
        """Roll the hand in place and return self.

        With *faces*, set each die's face position by position instead of
        rolling (used to enumerate outcomes).  A random roll also resets the
        decision to UNDECIDED.
        """
        if faces is None:
            for die in self.hand:
                die.roll()
            self.decision = Decision.UNDECIDED
        elif len(self.hand) >= HAND_SIZE:
            for die, face in zip(self.hand, faces):
                die.set_face(face)
        return self

    # ── Copying transitions ───────────────────────────────────────────────────

    def roll(self, faces: Sequence[DieFace] | None = None) -> GameState:
        """Like ``roll_in_place`` but on a new copy; self is left untouched."""
        return self.copy().roll_in_place(faces)

    def __str__(self) -> str:
        return (
            f"One: {self.score_one} | Two: {self.score_two} | "
            f"Turn: {self.turn.name} | {self.decision.name} | "
            f"Brains: {self.brains_collected} | Blasts: {self.blasts_collected} | "
            f"Hand: {dice_to_str(self.hand) or '-'} | Cup: {len(self.cup)}"
        )


def _colors_key(dice: list[Die]) -> tuple[str, ...]:
    return tuple(sorted(d.color.value for d in dice))


# ─── Heuristic ────────────────────────────────────────────────────────────────


def heuristic(state: GameState) -> float:
    """Estimate the payoff of a non-terminal state without look-ahead.

    Player one's progress counts its eaten brains plus, on its own turn, the
    brains banked so far.  If that reaches BRAINS_TO_WIN the estimate is
    +WIN_PAYOFF.  Otherwise the estimate is player one's lead over player
    two's eaten brains, as a fraction of BRAINS_TO_WIN, scaled to WIN_PAYOFF
    and clipped to [-WIN_PAYOFF, +WIN_PAYOFF].

    Examples:
        >>> heuristic(GameState(score_one=5, score_two=5))
        0.0
        >>> heuristic(GameState(score_one=12, brains_collected=1))
        100.0
    """
    progress = state.score_one
    if state.turn is Player.ONE:
        progress += state.brains_collected
    if progress >= BRAINS_TO_WIN:
        return WIN_PAYOFF
    lead = progress - state.score_two
    estimate = lead / BRAINS_TO_WIN * WIN_PAYOFF
    return max(-WIN_PAYOFF, min(WIN_PAYOFF, estimate))


# ─── Position builder ─────────────────────────────────────────────────────────


def build_state(
    *,
    score_one: int = 0,
    score_two: int = 0,
    turn: Player = Player.ONE,
    decision: Decision = Decision.UNDECIDED,
    brains: Sequence[DieColor] = (),
    blasts: Sequence[DieColor] = (),
    hand: Sequence[DieColor] = (),
    brains_collected: int | None = None,
) -> GameState:
    """Build a position by pulling the given dice out of a full cup.

    Useful for tests and analysis where a specific mid-turn position is
    needed.  Banked brains show BRAIN, blasts show BLAST, hand dice show FEET.
    ``brains_collected`` defaults to ``len(brains)``; pass a larger value to
    model reused brains.

    Raises:
        ValueError: If more dice of a color are requested than exist.

    Examples:
        >>> s = build_state(brains=[DieColor.GREEN], hand=[DieColor.RED])
        >>> s.brains_collected, len(s.cup), s.total_dice()
        (1, 11, 13)
    """
    state = GameState(score_one=score_one, score_two=score_two, turn=turn, decision=decision)
    for colors, face, target in (
        (brains, DieFace.BRAIN, state.brains),
        (blasts, DieFace.BLAST, state.blasts),
        (hand, DieFace.FEET, state.hand),
    ):
        for color in colors:
            die = state.cup.draw_color(color)
            if die is None:
                raise ValueError(f"No {color.name} die left in the cup.")
            die.set_face(face)
            target.append(die)
    state.brains_collected = len(state.brains) if brains_collected is None else brains_collected
    state.blasts_collected = len(state.blasts)
    return state


# ─── Live turn flow ───────────────────────────────────────────────────────────


def take_action(state: GameState, decision: Decision) -> bool:
    """Apply the current player's *decision* to the live game, in place.

    ROLL draws a full hand, rolls it, and collects brains and blasts; a
    shotgunned player is forced through the STOP flow.  STOP ends the turn
    and hands over to the next player unless the game is over.

    Returns:
        True if the player was shotgunned by this action.

    Raises:
        InvalidDecisionError: For any decision other than ROLL or STOP.  The
            state's decision is set to NONE and the turn is abandoned.
    """
    if decision is Decision.ROLL:
        state.decision = Decision.ROLL
        if not state.draw_hand():
            # Unreachable under the reuse policy; end the turn rather than loop.
            take_action(state, Decision.STOP)
            return False
        state.roll_in_place()
        state.collect_hand()
        if state.is_shotgunned():
            take_action(state, Decision.STOP)
            return True
        state.decision = Decision.UNDECIDED
        return False

    if decision is Decision.STOP:
        state.decision = Decision.STOP
        state.end_turn()
        if not state.is_terminal():
            state.next_player()
        return False

    state.decision = Decision.NONE
    raise InvalidDecisionError(f"Cannot resolve decision {decision!r}; expected ROLL or STOP.")
