"""
The dice cup: a finite multiset of dice drawn without replacement.

The cup is tracked both as an ordered list of Die objects (draw order) and as
per-color counts (draw probabilities).  All mutators work in place; search
code branches on ``Cup.copy()``.
"""

from __future__ import annotations

import numpy as np

from .dice import Die, DieColor

# ─── Constants ────────────────────────────────────────────────────────────────

DICE_PER_COLOR: dict[DieColor, int] = {
    DieColor.GREEN: 6,
    DieColor.YELLOW: 4,
    DieColor.RED: 3,
}

TOTAL_NUM_DICE: int = sum(DICE_PER_COLOR.values())  # 13


# ─── Cup ──────────────────────────────────────────────────────────────────────


class Cup:
    """Dice cup with per-color bookkeeping.

    Examples:
        >>> cup = Cup()
        >>> cup.num_dice
        13
        >>> cup.probability(DieColor.GREEN) == 6 / 13
        True
    """

    def __init__(self, counts: dict[DieColor, int] | None = None) -> None:
        if counts is None:
            counts = DICE_PER_COLOR
        self.dice: list[Die] = []
        self.counts: dict[DieColor, int] = {color: 0 for color in DieColor}
        self.num_dice: int = 0
        # Fixed construction order: all greens, then yellows, then reds.
        for color in DieColor:
            for _ in range(counts.get(color, 0)):
                self.replace(Die(color))

    @classmethod
    def from_counts(cls, counts: dict[DieColor, int]) -> Cup:
        """Build a cup holding exactly the given number of dice per color.

        Examples:
            >>> Cup.from_counts({DieColor.RED: 2}).num_dice
            2
        """
        return cls(counts)

    def copy(self) -> Cup:
        """Return an independent copy; every Die is copied."""
        new = Cup.__new__(Cup)
        new.dice = [d.copy() for d in self.dice]
        new.counts = dict(self.counts)
        new.num_dice = self.num_dice
        return new

    def __len__(self) -> int:
        return self.num_dice

    def is_empty(self) -> bool:
        return self.num_dice <= 0

    def shake(self) -> None:
        """Randomise the draw order in place."""
        np.random.shuffle(self.dice)

    def _take(self, index: int) -> Die:
        die = self.dice.pop(index)
        self.num_dice -= 1
        self.counts[die.color] -= 1
        return die

    def draw(self) -> Die | None:
        """Remove and return the die at the front of the cup, or None if empty."""
        if not self.dice:
            return None
        return self._take(0)

    def draw_color(self, color: DieColor) -> Die | None:
        """Remove and return the first die of *color*, or None if there is none.

        This is a linear scan, not a weighted sample.
        """
        for i, die in enumerate(self.dice):
            if die.color == color:
                return self._take(i)
        return None

    def replace(self, die: Die) -> None:
        """Put *die* back at the end of the cup."""
        self.dice.append(die)
        self.num_dice += 1
        self.counts[die.color] += 1

    def replace_all(self, dice: list[Die]) -> None:
        for die in dice:
            self.replace(die)

    def probability(self, color: DieColor) -> float:
        """Return the probability that the next fresh die drawn has *color*.

        Raises:
            ValueError: If the cup is empty.  Check ``is_empty()`` first.
        """
        if self.is_empty():
            raise ValueError("Cannot compute a draw probability from an empty cup.")
        return self.counts[color] / self.num_dice

    def composition(self) -> tuple[int, ...]:
        """Per-color counts in DieColor order, e.g. (6, 4, 3) for a full cup."""
        return tuple(self.counts[color] for color in DieColor)
