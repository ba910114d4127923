"""Tests for src/engine/dice.py — die colors, faces, and outcome odds."""

from __future__ import annotations

import numpy as np
import pytest

from src.engine.dice import DIE_SIDES, FACE_COUNTS, Die, DieColor, DieFace, dice_to_str


class TestFaceCounts:
    def test_every_color_covers_all_sides(self):
        for color, counts in FACE_COUNTS.items():
            assert sum(counts) == DIE_SIDES, color

    def test_green_is_the_friendliest(self):
        assert FACE_COUNTS[DieColor.GREEN] == (3, 2, 1)
        assert FACE_COUNTS[DieColor.RED] == (1, 2, 3)


class TestProbabilities:
    @pytest.mark.parametrize("color", list(DieColor))
    def test_sum_to_one(self, color):
        d = Die(color)
        total = sum(d.probability(face) for face in DieFace)
        assert total == pytest.approx(1.0, abs=1e-12)

    def test_yellow_is_uniform(self):
        d = Die(DieColor.YELLOW)
        for face in DieFace:
            assert d.probability(face) == pytest.approx(1 / 3)

    def test_invalid_color_all_zero(self):
        d = Die(None)
        assert (d.p_brain, d.p_feet, d.p_blast) == (0.0, 0.0, 0.0)

    def test_invalid_face_zero(self):
        assert Die(DieColor.GREEN).probability(None) == 0.0

    def test_non_negative(self):
        for color in DieColor:
            d = Die(color)
            assert min(d.p_brain, d.p_feet, d.p_blast) >= 0.0


class TestFace:
    def test_starts_on_feet(self):
        assert Die(DieColor.RED).face is DieFace.FEET

    def test_set_face(self):
        d = Die(DieColor.RED)
        assert d.set_face(DieFace.BLAST) is DieFace.BLAST
        assert d.face is DieFace.BLAST

    def test_set_face_none_ignored(self):
        d = Die(DieColor.RED, DieFace.BRAIN)
        assert d.set_face(None) is DieFace.BRAIN

    def test_roll_returns_valid_face(self):
        d = Die(DieColor.GREEN)
        for _ in range(50):
            face = d.roll()
            assert face in DieFace
            assert d.face is face

    def test_roll_frequencies_follow_face_counts(self):
        np.random.seed(7)
        d = Die(DieColor.RED)
        faces = [d.roll() for _ in range(6_000)]
        assert faces.count(DieFace.BLAST) / 6_000 == pytest.approx(0.5, abs=0.03)
        assert faces.count(DieFace.BRAIN) / 6_000 == pytest.approx(1 / 6, abs=0.03)

    def test_roll_thresholds(self, monkeypatch):
        d = Die(DieColor.GREEN)  # brain < 0.5, feet < 5/6, else blast
        for u, expected in [(0.0, DieFace.BRAIN), (0.6, DieFace.FEET), (0.9, DieFace.BLAST)]:
            monkeypatch.setattr(np.random, "random", lambda u=u: u)
            assert d.roll() is expected


class TestCopyAndStr:
    def test_copy_is_independent(self):
        d = Die(DieColor.YELLOW, DieFace.BRAIN)
        c = d.copy()
        c.set_face(DieFace.BLAST)
        assert d.face is DieFace.BRAIN
        assert c.color is DieColor.YELLOW
        assert c.p_blast == d.p_blast

    def test_dice_compare_by_identity(self):
        assert Die(DieColor.GREEN) != Die(DieColor.GREEN)

    def test_str(self):
        assert str(Die(DieColor.GREEN, DieFace.BRAIN)) == "[GREEN BRAIN]"
        assert str(Die(None)) == "[INVALID FEET]"

    def test_dice_to_str(self):
        dice = [Die(DieColor.RED), Die(DieColor.YELLOW, DieFace.BLAST)]
        assert dice_to_str(dice) == "[RED FEET] [YELLOW BLAST]"
        assert dice_to_str([]) == ""
