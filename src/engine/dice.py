"""
Die colors, faces, and the per-die outcome model.

Each die carries its color-conditioned face distribution, derived once from
integer face counts over DIE_SIDES:

    color   brain  feet  blast
    GREEN     3     2     1
    YELLOW    2     2     2
    RED       1     2     3

Zombie Dice is a trademark of Steve Jackson Games.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import numpy as np

# ─── Enumerations ─────────────────────────────────────────────────────────────


class DieColor(Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


class DieFace(Enum):
    BRAIN = "brain"
    FEET = "feet"
    BLAST = "blast"


# ─── Constants ────────────────────────────────────────────────────────────────

DIE_SIDES: int = 6

# (brain, feet, blast) face counts per color, out of DIE_SIDES.
FACE_COUNTS: dict[DieColor, tuple[int, int, int]] = {
    DieColor.GREEN: (3, 2, 1),
    DieColor.YELLOW: (2, 2, 2),
    DieColor.RED: (1, 2, 3),
}


# ─── Die ──────────────────────────────────────────────────────────────────────


@dataclass(eq=False)
class Die:
    """A single die: its color, the face currently showing, and its odds.

    The probabilities are fixed at construction.  A color missing from
    FACE_COUNTS (e.g. None) gets all-zero probabilities.

    Examples:
        >>> d = Die(DieColor.GREEN)
        >>> d.probability(DieFace.BRAIN)
        0.5
        >>> str(d)
        '[GREEN FEET]'
    """

    color: DieColor | None
    face: DieFace = DieFace.FEET
    p_brain: float = field(init=False, default=0.0)
    p_feet: float = field(init=False, default=0.0)
    p_blast: float = field(init=False, default=0.0)

    def __post_init__(self) -> None:
        counts = FACE_COUNTS.get(self.color)
        if counts is not None:
            brains, feet, blasts = counts
            self.p_brain = brains / DIE_SIDES
            self.p_feet = feet / DIE_SIDES
            self.p_blast = blasts / DIE_SIDES

    def probability(self, face: DieFace | None) -> float:
        """Return the probability of rolling *face*; 0.0 for anything else."""
        if face is DieFace.BRAIN:
            return self.p_brain
        if face is DieFace.FEET:
            return self.p_feet
        if face is DieFace.BLAST:
            return self.p_blast
        return 0.0

    def set_face(self, face: DieFace | None) -> DieFace:
        """Manually set the face showing.  None leaves the face unchanged."""
        if face is not None:
            self.face = face
        return self.face

    def roll(self) -> DieFace:
        """Randomly select a new face using the global NumPy random source.

        Mutates the die in place and returns the new face.
        """
        u = np.random.random()
        if u < self.p_brain:
            self.face = DieFace.BRAIN
        elif u < self.p_brain + self.p_feet:
            self.face = DieFace.FEET
        else:
            self.face = DieFace.BLAST
        return self.face

    def copy(self) -> Die:
        return Die(self.color, self.face)

    def __str__(self) -> str:
        color_name = self.color.name if self.color is not None else "INVALID"
        return f"[{color_name} {self.face.name}]"


def dice_to_str(dice: list[Die]) -> str:
    """Render a list of dice on one line.

    Examples:
        >>> dice_to_str([Die(DieColor.RED), Die(DieColor.GREEN, DieFace.BRAIN)])
        '[RED FEET] [GREEN BRAIN]'
    """
    return " ".join(str(d) for d in dice)
