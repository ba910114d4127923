"""
Shared pytest fixtures for the Zombie Dice solver tests.

Provides seeded randomness and convenience builders for known positions.
"""

from __future__ import annotations

import numpy as np
import pytest

from src.engine.dice import DieColor
from src.engine.game_state import GameState, build_state

G, Y, R = DieColor.GREEN, DieColor.YELLOW, DieColor.RED


@pytest.fixture(autouse=True)
def _seed_numpy():
    """Make every test's dice rolls and shuffles reproducible."""
    np.random.seed(1234)


@pytest.fixture
def fresh_state() -> GameState:
    """Start-of-game position with an unshaken, full cup."""
    return GameState()


@pytest.fixture
def mid_turn_state() -> GameState:
    """Player one has banked two brains, taken one blast, and holds a feet die."""
    return build_state(score_one=4, score_two=6, brains=[G, Y], blasts=[R], hand=[G])
