"""Turn rules: small stateless strategies evaluated against ``GameState``.

Each rule answers one question ("did I fire?") and, for board effects,
performs its effect while answering. The engine decides *when* each rule
runs; a rule never calls another rule.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

from snakes_ladders.board import Coin, Ladder, Snake
from snakes_ladders.errors import InvalidStateError
from snakes_ladders.state import CoinCollected, GameState

logger = logging.getLogger(__name__)

START_FACE = 6


class RuleKind(Enum):
    NO_SIX_TO_START = "no_six_to_start"
    WON_GAME = "won_game"
    LAND_ON_SNAKE = "land_on_snake"
    LAND_ON_LADDER = "land_on_ladder"
    LAND_ON_COIN = "land_on_coin"


# Kinds the engine evaluates itself at fixed points of the turn.
GATE_KINDS = (RuleKind.NO_SIX_TO_START, RuleKind.WON_GAME)


@runtime_checkable
class Rule(Protocol):
    """Structural interface: any object with ``kind`` and ``applies`` works."""

    @property
    def kind(self) -> RuleKind: ...

    def applies(self, state: GameState) -> bool: ...


def _require(state: GameState | None) -> GameState:
    if state is None:
        raise InvalidStateError("Rule evaluated without a game state.")
    return state


# ── Gate rules ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class NoSixToStart:
    """A player who has not started needs exactly ``start_face`` to begin."""

    start_face: int = START_FACE

    @property
    def kind(self) -> RuleKind:
        return RuleKind.NO_SIX_TO_START

    def applies(self, state: GameState) -> bool:
        state = _require(state)
        if state.current_player.has_started:
            return True
        return state.dice_value == self.start_face


@dataclass(frozen=True)
class WonGame:
    """Fires once the current position reaches ``threshold``.

    Without an explicit threshold the board's final cell is used.
    """

    threshold: int | None = None

    @property
    def kind(self) -> RuleKind:
        return RuleKind.WON_GAME

    def applies(self, state: GameState) -> bool:
        state = _require(state)
        threshold = self.threshold if self.threshold is not None else state.board.final_cell
        return state.position_of(state.current_player.id) >= threshold


# ── Board-effect rules ───────────────────────────────────────────────

@dataclass(frozen=True)
class LandOnSnake:
    @property
    def kind(self) -> RuleKind:
        return RuleKind.LAND_ON_SNAKE

    def applies(self, state: GameState) -> bool:
        state = _require(state)
        player = state.current_player
        cell = state.board.behavior_at(state.position_of(player.id))
        if not isinstance(cell, Snake):
            return False
        state.set_position_of(player.id, cell.end)
        logger.debug("%s bitten by snake %d→%d", player.name, cell.start, cell.end)
        return True


@dataclass(frozen=True)
class LandOnLadder:
    @property
    def kind(self) -> RuleKind:
        return RuleKind.LAND_ON_LADDER

    def applies(self, state: GameState) -> bool:
        state = _require(state)
        player = state.current_player
        cell = state.board.behavior_at(state.position_of(player.id))
        if not isinstance(cell, Ladder):
            return False
        state.set_position_of(player.id, cell.end)
        logger.debug("%s climbed ladder %d→%d", player.name, cell.start, cell.end)
        return True


@dataclass(frozen=True)
class LandOnCoin:
    """Records a collection event; never moves the pawn."""

    @property
    def kind(self) -> RuleKind:
        return RuleKind.LAND_ON_COIN

    def applies(self, state: GameState) -> bool:
        state = _require(state)
        player = state.current_player
        cell = state.board.behavior_at(state.position_of(player.id))
        if not isinstance(cell, Coin):
            return False
        state.coin_events.append(CoinCollected(player.id, cell.position, cell.reward))
        logger.debug("%s collected a coin worth %d at %d", player.name, cell.reward, cell.position)
        return True


def default_rules(coins: bool = False, ladders: bool = True) -> list[Rule]:
    """Standard chain: start gate, snake, ladder, coin, win check.

    Effect rules run in list order, so snake-before-ladder means a snake
    ending at a ladder's foot is followed by that ladder in the same turn.
    """
    rules: list[Rule] = [NoSixToStart(), LandOnSnake()]
    if ladders:
        rules.append(LandOnLadder())
    if coins:
        rules.append(LandOnCoin())
    rules.append(WonGame())
    return rules
