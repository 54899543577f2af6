"""Tests for snakes_ladders.engine (turn execution)."""

import pytest

from snakes_ladders.board import Board, classic_board, coins_board
from snakes_ladders.engine import MoveOutcome, OverflowPolicy, TurnEngine
from snakes_ladders.errors import (
    ConfigurationError,
    InvalidStateError,
    OverflowPolicyViolation,
)
from snakes_ladders.rules import (
    LandOnCoin,
    LandOnLadder,
    LandOnSnake,
    NoSixToStart,
    RuleKind,
    WonGame,
    default_rules,
)
from snakes_ladders.state import CoinCollected, Player, TurnState


def _engine(board: Board, rules=None, **kwargs) -> TurnEngine:
    return TurnEngine(board, rules if rules is not None else default_rules(coins=True), **kwargs)


def _play(engine: TurnEngine, player: Player, rolls: list[int]) -> list[MoveOutcome]:
    return [engine.execute_move(r, player) for r in rolls]


# ── construction ─────────────────────────────────────────────────────

def test_missing_start_rule():
    with pytest.raises(ConfigurationError):
        TurnEngine(Board(10), [LandOnSnake(), WonGame()])


def test_missing_win_rule():
    with pytest.raises(ConfigurationError):
        TurnEngine(Board(10), [NoSixToStart(), LandOnSnake()])


def test_duplicate_start_rule():
    with pytest.raises(ConfigurationError):
        TurnEngine(Board(10), [NoSixToStart(), NoSixToStart(start_face=1), WonGame()])


def test_non_rule_rejected():
    with pytest.raises(ConfigurationError):
        TurnEngine(Board(10), [NoSixToStart(), WonGame(), "snake"])


def test_effect_rules_keep_declared_order():
    rules = [WonGame(), LandOnCoin(), NoSixToStart(), LandOnLadder(), LandOnSnake()]
    engine = TurnEngine(Board(10), rules)
    assert [r.kind for r in engine.effect_rules] == [
        RuleKind.LAND_ON_COIN,
        RuleKind.LAND_ON_LADDER,
        RuleKind.LAND_ON_SNAKE,
    ]


# ── start gate ───────────────────────────────────────────────────────

def test_no_move_leaves_position_untouched():
    engine = _engine(classic_board())
    p = Player("Alice", "p1")
    for roll in [1, 2, 3, 4, 5]:
        assert engine.execute_move(roll, p) is MoveOutcome.NO_MOVE
        assert p.turn_state is TurnState.NOT_STARTED
        assert engine.state.position_of("p1") == 0
    assert "p1" not in engine.state.positions


def test_six_starts_without_moving():
    engine = _engine(classic_board())
    p = Player("Alice", "p1")
    assert engine.execute_move(6, p) is MoveOutcome.STARTED
    assert p.turn_state is TurnState.STARTING
    assert engine.state.position_of("p1") == 0


def test_started_player_becomes_active_and_moves():
    engine = _engine(classic_board())
    p = Player("Alice", "p1")
    assert _play(engine, p, [6, 5]) == [MoveOutcome.STARTED, MoveOutcome.ADVANCED]
    assert p.turn_state is TurnState.ACTIVE
    assert engine.state.position_of("p1") == 5


def test_six_after_start_just_moves():
    engine = _engine(classic_board())
    p = Player("Alice", "p1")
    assert _play(engine, p, [6, 6]) == [MoveOutcome.STARTED, MoveOutcome.ADVANCED]
    assert engine.state.position_of("p1") == 6


# ── board effects ────────────────────────────────────────────────────

def test_snake_hit():
    """Classic board: 6 to start, then 6×5 lands on 30 → snake to 14."""
    engine = _engine(classic_board())
    p = Player("Alice", "p1")
    outcomes = _play(engine, p, [6, 6, 6, 6, 6, 6])
    assert outcomes[-1] is MoveOutcome.ADVANCED
    assert engine.state.position_of("p1") == 14
    assert engine.state.fired == [RuleKind.LAND_ON_SNAKE]


def test_ladder_hit():
    """4 → 9 → 15, ladder to 21."""
    engine = _engine(classic_board())
    p = Player("Alice", "p1")
    _play(engine, p, [6, 4, 5, 6])
    assert engine.state.position_of("p1") == 21
    assert engine.state.fired == [RuleKind.LAND_ON_LADDER]


def test_coin_hit():
    """4 → 10 collects the 5-point coin and stays on 10."""
    engine = _engine(coins_board())
    p = Player("Alice", "p1")
    outcomes = _play(engine, p, [6, 4, 6])
    assert outcomes[-1] is MoveOutcome.ADVANCED
    assert engine.state.position_of("p1") == 10
    assert engine.state.coin_events == [CoinCollected("p1", 10, 5)]
    assert engine.state.fired == [RuleKind.LAND_ON_COIN]


def test_coin_ignored_without_coin_rule():
    engine = TurnEngine(coins_board(), default_rules(coins=False))
    p = Player("Alice", "p1")
    _play(engine, p, [6, 4, 6])
    assert engine.state.coin_events == []


def test_no_ladder_rule_means_no_climb():
    engine = TurnEngine(classic_board(), default_rules(ladders=False))
    p = Player("Alice", "p1")
    _play(engine, p, [6, 4, 5, 6])
    assert engine.state.position_of("p1") == 15


def test_fired_resets_each_turn():
    engine = _engine(classic_board())
    p = Player("Alice", "p1")
    _play(engine, p, [6, 4, 5, 6])
    assert engine.state.fired
    engine.execute_move(1, p)
    assert engine.state.fired == []


# ── ordering and single pass ─────────────────────────────────────────

def test_snake_then_ladder_stacks():
    """Snake 20→10 drops onto ladder 10→30; the ladder rule runs after."""
    board = Board(50, snakes=[(20, 10)], ladders=[(10, 30)])
    engine = TurnEngine(board, [NoSixToStart(), LandOnSnake(), LandOnLadder(), WonGame()])
    p = Player("Alice", "p1")
    engine.state.set_position_of("p1", 15)
    p.turn_state = TurnState.ACTIVE
    engine.execute_move(5, p)
    assert engine.state.position_of("p1") == 30
    assert engine.state.fired == [RuleKind.LAND_ON_SNAKE, RuleKind.LAND_ON_LADDER]


def test_reordered_chain_changes_result():
    """Same board, ladder rule first: it sees 20 (no ladder) and never fires."""
    board = Board(50, snakes=[(20, 10)], ladders=[(10, 30)])
    engine = TurnEngine(board, [NoSixToStart(), LandOnLadder(), LandOnSnake(), WonGame()])
    p = Player("Alice", "p1")
    engine.state.set_position_of("p1", 15)
    p.turn_state = TurnState.ACTIVE
    engine.execute_move(5, p)
    assert engine.state.position_of("p1") == 10
    assert engine.state.fired == [RuleKind.LAND_ON_SNAKE]


def test_single_pass_no_retrigger():
    """Ladder 5→20 tops out on snake 20→8; the snake already ran, so it stays."""
    board = Board(50, ladders=[(5, 20)], snakes=[(20, 8)])
    engine = TurnEngine(board, default_rules())
    p = Player("Alice", "p1")
    _play(engine, p, [6, 5])
    assert engine.state.position_of("p1") == 20
    assert engine.state.fired == [RuleKind.LAND_ON_LADDER]


# ── winning ──────────────────────────────────────────────────────────

def test_exact_landing_wins():
    engine = _engine(Board(10))
    p = Player("Alice", "p1")
    assert _play(engine, p, [6, 6, 4]) == [
        MoveOutcome.STARTED, MoveOutcome.ADVANCED, MoveOutcome.WON,
    ]
    assert p.turn_state is TurnState.WON
    assert engine.state.position_of("p1") == 10


def test_clamp_overshoot_wins_on_final_cell():
    engine = _engine(Board(10), overflow=OverflowPolicy.CLAMP)
    p = Player("Alice", "p1")
    assert _play(engine, p, [6, 6, 6])[-1] is MoveOutcome.WON
    assert engine.state.position_of("p1") == 10


def test_exact_policy_rejects_overshoot():
    engine = _engine(Board(10), overflow=OverflowPolicy.EXACT)
    p = Player("Alice", "p1")
    _play(engine, p, [6, 6])
    with pytest.raises(OverflowPolicyViolation) as info:
        engine.execute_move(6, p)
    assert info.value.position == 6
    assert info.value.roll == 6
    assert engine.state.position_of("p1") == 6
    assert p.turn_state is TurnState.ACTIVE
    assert engine.execute_move(4, p) is MoveOutcome.WON


def test_exact_policy_rejection_keeps_player_starting():
    engine = _engine(Board(3), overflow=OverflowPolicy.EXACT)
    p = Player("Alice", "p1")
    assert engine.execute_move(6, p) is MoveOutcome.STARTED
    with pytest.raises(OverflowPolicyViolation):
        engine.execute_move(5, p)
    assert p.turn_state is TurnState.STARTING
    assert engine.state.position_of("p1") == 0
    assert engine.execute_move(3, p) is MoveOutcome.WON


def test_win_skips_board_effects():
    """A coin on the second-last cell is never reached by a winning roll."""
    board = Board(10, coins=[(9, 3)])
    engine = _engine(board)
    p = Player("Alice", "p1")
    _play(engine, p, [6, 5, 6])
    assert engine.state.coin_events == []
    assert engine.state.fired == []


def test_no_win_before_movement():
    """A player already at the threshold of a custom win rule still needs a roll."""
    engine = TurnEngine(Board(10), [NoSixToStart(), WonGame(threshold=0)])
    p = Player("Alice", "p1")
    assert engine.execute_move(6, p) is MoveOutcome.STARTED
    assert engine.execute_move(1, p) is MoveOutcome.WON


def test_winner_cannot_move_again():
    engine = _engine(Board(10))
    p = Player("Alice", "p1")
    _play(engine, p, [6, 6, 4])
    with pytest.raises(InvalidStateError):
        engine.execute_move(1, p)


# ── failures and determinism ─────────────────────────────────────────

def test_missing_player():
    engine = _engine(Board(10))
    with pytest.raises(InvalidStateError):
        engine.execute_move(3, None)


def test_deterministic_for_same_rolls():
    rolls = [6, 3, 5, 6, 2, 4, 1, 6, 6, 3]
    results = []
    for _ in range(2):
        engine = _engine(coins_board())
        p = Player("Alice", "p1")
        outcomes = _play(engine, p, rolls)
        results.append((outcomes, engine.state.positions, engine.state.coin_events))
    assert results[0] == results[1]


def test_players_tracked_independently():
    engine = _engine(classic_board())
    a, b = Player("Alice", "p1"), Player("Bob", "p2")
    engine.execute_move(6, a)
    engine.execute_move(3, a)
    engine.execute_move(6, b)
    engine.execute_move(2, b)
    assert engine.state.positions == {"p1": 3, "p2": 2}
