"""Tests for serpientes.stats."""

import pytest

from serpientes.board import Board
from serpientes.stats import GameOutcome, simulate, summarize


def test_simulate_plays_every_game_to_victory():
    outcomes = simulate(20, seed=5)
    assert len(outcomes) == 20
    for o in outcomes:
        assert o.won
        assert o.rolls >= 5    # ladders 7→23 and 34→44 give the shortest path
        assert 0 <= o.verses_collected <= 16


def test_simulate_is_repeatable_with_seed():
    assert simulate(10, seed=99) == simulate(10, seed=99)


def test_simulate_without_remaps_needs_at_least_eight_rolls():
    board = Board(remaps={}, verses={})
    for o in simulate(10, seed=1, board=board):
        assert o.rolls >= 8
        assert o.snakes == 0 and o.ladders == 0
        assert o.verses_collected == 0


def test_summarize():
    outcomes = [
        GameOutcome(rolls=10, verses_collected=4, snakes=1, ladders=0),
        GameOutcome(rolls=20, verses_collected=6, snakes=2, ladders=1),
        GameOutcome(rolls=30, verses_collected=8, snakes=0, ladders=2),
    ]
    s = summarize(outcomes)
    assert s.games == 3
    assert s.mean_rolls == 20
    assert s.median_rolls == 20
    assert s.min_rolls == 10
    assert s.max_rolls == 30
    assert s.mean_verses == 6
    assert s.snakes == 3
    assert s.ladders == 3


def test_summarize_empty_raises():
    with pytest.raises(ValueError):
        summarize([])
