"""Tests for serpientes.game — move resolution."""

import random

import pytest

from serpientes.board import Board
from serpientes.game import (
    GameState,
    Phase,
    Remapped,
    Settled,
    Stepped,
    VerseCollected,
    Victory,
    resolve_move,
    roll_die,
)


def _kinds(result):
    return [type(e) for e in result.events]


# ── scenarios ───────────────────────────────────────────────────────

def test_ladder_from_5_rolling_2():
    """5 + 2 = 7 → ladder to 23, no verse anywhere."""
    result = resolve_move(GameState(position=5), 2)

    assert result.target == 7
    assert result.final_state.position == 23
    remaps = [e for e in result.events if isinstance(e, Remapped)]
    assert remaps == [Remapped(7, 23)]
    assert not any(isinstance(e, VerseCollected) for e in result.events)
    assert result.final_state.collected_verses == []
    assert result.outcome == "ladder"


def test_overshoot_is_clamped_to_victory():
    result = resolve_move(GameState(position=44), 6)

    assert result.target == 47
    assert result.final_state.position == 47
    assert result.won
    assert result.phase is Phase.VICTORY
    assert result.events[-1] == Victory(47)
    assert _kinds(result) == [Stepped, Stepped, Stepped, Victory]


def test_verse_on_space_4():
    result = resolve_move(GameState(position=0), 4)

    verse = "Los dados ruedan y escapan a tu mano"
    assert result.final_state.position == 4
    assert result.final_state.collected_verses == [verse]
    assert VerseCollected(verse, 4) in result.events
    assert result.collected == verse
    assert result.outcome == "verse"


def test_snake_from_12_rolling_3():
    result = resolve_move(GameState(position=12), 3)

    assert result.final_state.position == 3
    assert result.remap == Remapped(15, 3)
    assert result.outcome == "snake"
    # The verse printed on the snake's mouth is not collected
    assert result.final_state.collected_verses == []


def test_exact_landing_on_final_space_wins():
    result = resolve_move(GameState(position=43), 4)
    assert result.won
    assert result.final_state.position == 47


def test_plain_move_settles_without_verse():
    result = resolve_move(GameState(position=18), 1)

    assert result.final_state.position == 19
    assert result.outcome == "normal"
    assert result.phase is Phase.SETTLED
    assert result.events == [Stepped(19), Settled(19, None)]


# ── events ──────────────────────────────────────────────────────────

def test_steps_cover_every_space_to_target():
    result = resolve_move(GameState(position=16), 5)
    steps = [e.position for e in result.events if isinstance(e, Stepped)]
    assert steps == [17, 18, 19, 20, 21]


def test_settled_carries_verse_of_final_space():
    result = resolve_move(GameState(position=21), 4)
    assert result.events[-1] == Settled(25, "Tiras dados, que siga el relajo")


def test_settled_after_remap_reports_destination():
    result = resolve_move(GameState(position=30), 3)  # 33 → snake to 18
    assert result.events[-1] == Settled(18, "Se acerca mordiendo el fracaso")
    assert result.final_state.collected_verses == []


def test_event_order_remap_then_settle():
    result = resolve_move(GameState(position=4), 6)  # 10 → ladder to 27
    assert _kinds(result)[-2:] == [Remapped, Settled]


# ── invariants ──────────────────────────────────────────────────────

def test_settled_position_always_on_board():
    for position in range(48):
        for die in range(1, 7):
            result = resolve_move(GameState(position=position), die)
            assert 0 <= result.final_state.position <= 47


def test_verse_collection_is_idempotent():
    verse = "Los dados ruedan y escapan a tu mano"
    state = GameState(position=0, collected_verses=[verse])

    result = resolve_move(state, 4)

    assert result.final_state.collected_verses == [verse]
    assert not any(isinstance(e, VerseCollected) for e in result.events)


def test_resolution_is_deterministic():
    state = GameState(position=9, collected_verses=["Estas al inicio formado"])
    first = resolve_move(state, 4)
    second = resolve_move(state, 4)
    assert first.events == second.events
    assert first.final_state == second.final_state


def test_input_state_not_mutated():
    state = GameState(position=0)
    resolve_move(state, 4)
    assert state == GameState(position=0)


def test_verses_keep_insertion_order():
    state = GameState(position=0)
    state = resolve_move(state, 4).final_state      # 4
    state = resolve_move(state, 3).final_state      # 7 → ladder 23
    state = resolve_move(state, 2).final_state      # 25
    assert state.collected_verses == [
        "Los dados ruedan y escapan a tu mano",
        "Tiras dados, que siga el relajo",
    ]


def test_invalid_die_value_rejected():
    with pytest.raises(ValueError):
        resolve_move(GameState(), 0)
    with pytest.raises(ValueError):
        resolve_move(GameState(), 7)


def test_chained_remap_applies_single_hop():
    """A remap landing on another remap source does not loop or chain."""
    board = Board(remaps={5: 9, 9: 5}, verses={9: "nueve"})

    result = resolve_move(GameState(position=2), 3, board)

    assert result.final_state.position == 9
    assert [e for e in result.events if isinstance(e, Remapped)] == [Remapped(5, 9)]
    assert result.final_state.collected_verses == []


# ── dice ─────────────────────────────────────────────────────────────

def test_roll_die_in_range():
    rng = random.Random(1234)
    rolls = {roll_die(rng) for _ in range(500)}
    assert rolls == {1, 2, 3, 4, 5, 6}


def test_roll_die_seeded_is_repeatable():
    a = [roll_die(random.Random(7)) for _ in range(3)]
    b = [roll_die(random.Random(7)) for _ in range(3)]
    assert a == b


# ── GameState ────────────────────────────────────────────────────────

def test_initial_state():
    s = GameState()
    assert s.position == 0
    assert s.collected_verses == []


def test_collect_reports_duplicates():
    s = GameState()
    assert s.collect("uno") is True
    assert s.collect("uno") is False
    assert s.collected_verses == ["uno"]
