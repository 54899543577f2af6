"""Tests for snakes_ladders.state."""

import pytest

from snakes_ladders.board import Board
from snakes_ladders.errors import InvalidStateError
from snakes_ladders.rules import RuleKind
from snakes_ladders.state import GameState, Player, TurnState


def test_new_player_not_started():
    p = Player("Alice", "p1")
    assert p.turn_state is TurnState.NOT_STARTED
    assert not p.has_started


def test_position_defaults_to_zero():
    state = GameState(board=Board(10))
    assert state.position_of("nobody") == 0


def test_set_position():
    state = GameState(board=Board(10))
    state.set_position_of("p1", 7)
    assert state.position_of("p1") == 7
    assert state.positions == {"p1": 7}


def test_unbound_accessors_raise():
    state = GameState(board=Board(10))
    with pytest.raises(InvalidStateError):
        state.current_player
    with pytest.raises(InvalidStateError):
        state.dice_value


def test_bind_sets_turn_and_clears_fired():
    state = GameState(board=Board(10))
    state.fired.append(RuleKind.LAND_ON_SNAKE)
    p = Player("Alice", "p1")
    state.bind(p, 4)
    assert state.current_player is p
    assert state.dice_value == 4
    assert state.fired == []


def test_bind_without_player():
    state = GameState(board=Board(10))
    with pytest.raises(InvalidStateError):
        state.bind(None, 4)
