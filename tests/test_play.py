"""Tests for src/cli/play.py — state rendering, move parsing and the console loop."""

from __future__ import annotations

import pytest

import src.cli.play as play
from src.cli.play import main, parse_move, play_game, render_state, request_move
from src.engine.dice import DieColor
from src.engine.game_state import Decision, GameState, Player, build_state

G, Y, R = DieColor.GREEN, DieColor.YELLOW, DieColor.RED


def scripted(*answers: str):
    """Return an input function that replays *answers* in order."""
    queue = list(answers)

    def _input(prompt: str) -> str:
        return queue.pop(0)

    return _input


# ─── render_state ─────────────────────────────────────────────────────────────


class TestRenderState:
    def test_fresh_state(self, fresh_state):
        text = render_state(fresh_state)
        assert text.startswith("GAME STATE:")
        assert "COMP BRAINS EATEN =  0" in text
        assert "USER BRAINS EATEN =  0" in text
        assert "CURRENT PLAYER = comp" in text
        assert "BLASTS COLLECTED = NONE." in text
        assert "BRAINS COLLECTED = NONE." in text
        assert "DICE IN HAND = NONE." in text

    def test_lists_dice(self, mid_turn_state):
        text = render_state(mid_turn_state)
        assert "COMP BRAINS EATEN =  4" in text
        assert "USER BRAINS EATEN =  6" in text
        assert "[RED BLAST]" in text
        assert "[GREEN BRAIN]" in text
        assert "[YELLOW BRAIN]" in text
        assert "[GREEN FEET]" in text
        assert "NONE." not in text

    def test_user_turn(self):
        assert "CURRENT PLAYER = user" in render_state(GameState(turn=Player.TWO))

    def test_reused_brains(self):
        s = build_state(brains=[G] * 6 + [Y] * 4, blasts=[R, R], hand=[R])
        assert s.draw_hand()
        text = render_state(s)
        assert "10 reused brains" in text
        assert "BRAINS COLLECTED = NONE." not in text


# ─── Move input ───────────────────────────────────────────────────────────────


class TestParseMove:
    @pytest.mark.parametrize("text", ["r", "R", "roll", "  Roll again "])
    def test_roll(self, text):
        assert parse_move(text) is Decision.ROLL

    @pytest.mark.parametrize("text", ["s", "S", "stop", "STOP!"])
    def test_stop(self, text):
        assert parse_move(text) is Decision.STOP

    @pytest.mark.parametrize("text", ["", "   ", "x", "quit", "1"])
    def test_invalid(self, text):
        assert parse_move(text) is None


class TestRequestMove:
    def test_reprompts_until_valid(self):
        out: list[str] = []
        move = request_move(scripted("", "maybe", "stop"), out.append)
        assert move is Decision.STOP
        assert out.count("Please answer R (roll) or S (stop).") == 2

    def test_eof_propagates(self):
        def _eof(prompt: str) -> str:
            raise EOFError

        with pytest.raises(EOFError):
            request_move(_eof, lambda line: None)


# ─── Game loop ────────────────────────────────────────────────────────────────


class TestPlayGame:
    def test_user_stops_to_win(self):
        out: list[str] = []
        s = build_state(score_one=3, score_two=12, turn=Player.TWO, brains=[G])
        final = play_game(s, input_fn=scripted("x", "s"), output_fn=out.append)
        assert final.score_two == 13
        assert final.is_terminal()
        assert "ZOMBIE DICE!" in out
        assert "PLAYER STOPS!" in out
        assert "Please answer R (roll) or S (stop)." in out
        assert out[-2] == "USER WINS!"

    def test_computer_only_game_finishes(self):
        out: list[str] = []
        s = build_state(score_one=12, score_two=12)
        final = play_game(
            s,
            depth_limit=1,
            computer_players=frozenset(Player),
            output_fn=out.append,
        )
        assert final.is_terminal()
        assert out[-2] in ("COMPUTER WINS!", "USER WINS!")
        assert "PLAYER ROLLS!" in out

    def test_invalid_decision_aborts(self, monkeypatch):
        monkeypatch.setattr(play, "choose_move", lambda state, depth_limit: Decision.UNDECIDED)
        out: list[str] = []
        final = play_game(GameState.new_game(), output_fn=out.append)
        assert final.decision is Decision.NONE
        assert any(line.startswith("ERROR:  ") for line in out)
        assert "COMPUTER WINS!" not in out
        assert "PLAYER STOPS!" not in out
        assert "PLAYER ROLLS!" not in out


class TestMain:
    def test_arguments_reach_the_game(self, monkeypatch):
        seen = {}

        def _fake(**kwargs):
            seen.update(kwargs)

        monkeypatch.setattr(play, "play_game", _fake)
        main(["--depth", "1", "--seed", "7", "--computer-only"])
        assert seen["depth_limit"] == 1
        assert seen["computer_players"] == frozenset(Player)

    def test_defaults(self, monkeypatch):
        seen = {}
        monkeypatch.setattr(play, "play_game", lambda **kw: seen.update(kw))
        main([])
        assert seen["depth_limit"] == 3
        assert seen["computer_players"] == frozenset({Player.ONE})

    def test_abandoned_game(self, monkeypatch, capsys):
        def _quit(**kwargs):
            raise EOFError

        monkeypatch.setattr(play, "play_game", _quit)
        main([])
        assert "Game abandoned." in capsys.readouterr().out
