"""Turn engine: runs one player's roll through the rule chain.

Per-player state machine::

    NOT_STARTED --(start gate fires)--> STARTING --(next call)--> ACTIVE --(final cell)--> WON
    NOT_STARTED --(start gate misses)--> NOT_STARTED   (outcome NO_MOVE)

The engine never picks the next player; the caller rotates based on the
returned ``MoveOutcome``.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Sequence

from snakes_ladders.board import Board
from snakes_ladders.errors import (
    ConfigurationError,
    InvalidStateError,
    OverflowPolicyViolation,
)
from snakes_ladders.rules import GATE_KINDS, Rule, RuleKind
from snakes_ladders.state import GameState, Player, TurnState

logger = logging.getLogger(__name__)


class MoveOutcome(Enum):
    NO_MOVE = "no_move"    # start gate not satisfied
    STARTED = "started"    # start gate satisfied; pawn not moved yet
    ADVANCED = "advanced"  # moved and board effects applied
    WON = "won"


class OverflowPolicy(Enum):
    """What a roll past the final cell does."""

    CLAMP = "clamp"  # stop on the final cell, which wins
    EXACT = "exact"  # reject the move; position unchanged


class TurnEngine:
    """Applies one roll for one player against a shared ``GameState``."""

    def __init__(
        self,
        board: Board,
        rules: Sequence[Rule],
        overflow: OverflowPolicy = OverflowPolicy.CLAMP,
        state: GameState | None = None,
    ):
        for rule in rules:
            if not isinstance(rule, Rule):
                raise ConfigurationError(f"{rule!r} is not a rule.")

        self._gates: dict[RuleKind, Rule] = {}
        for kind in GATE_KINDS:
            matches = [r for r in rules if r.kind is kind]
            if not matches:
                raise ConfigurationError(f"Engine requires a {kind.name} rule.")
            if len(matches) > 1:
                raise ConfigurationError(f"Engine given {len(matches)} {kind.name} rules.")
            self._gates[kind] = matches[0]

        # Declared order is the application order.
        self.effect_rules: tuple[Rule, ...] = tuple(
            r for r in rules if r.kind not in GATE_KINDS
        )
        self.board = board
        self.overflow = overflow
        self.state = state or GameState(board=board)
        if self.state.board is not board:
            raise ConfigurationError("Game state was built for a different board.")

    @property
    def start_rule(self) -> Rule:
        return self._gates[RuleKind.NO_SIX_TO_START]

    @property
    def win_rule(self) -> Rule:
        return self._gates[RuleKind.WON_GAME]

    def execute_move(self, dice_value: int, player: Player) -> MoveOutcome:
        """Run one roll for *player* and classify the result.

        Raises ``OverflowPolicyViolation`` under ``OverflowPolicy.EXACT`` when
        the roll overshoots; the pawn stays where it was.
        """
        if player is None:
            raise InvalidStateError("execute_move called without a player.")
        if player.turn_state is TurnState.WON:
            raise InvalidStateError(f"Player {player.id} has already won.")

        state = self.state
        state.bind(player, dice_value)

        if player.turn_state is TurnState.NOT_STARTED:
            if not self.start_rule.applies(state):
                logger.debug("%s rolled %d: not started", player.name, dice_value)
                return MoveOutcome.NO_MOVE
            player.turn_state = TurnState.STARTING
            logger.debug("%s rolled %d: started", player.name, dice_value)
            return MoveOutcome.STARTED

        current = state.position_of(player.id)
        target = current + dice_value
        final = self.board.final_cell
        if target > final:
            if self.overflow is OverflowPolicy.EXACT:
                raise OverflowPolicyViolation(player.id, current, dice_value, final)
            target = final

        # Promote only once the move is accepted.
        if player.turn_state is TurnState.STARTING:
            player.turn_state = TurnState.ACTIVE
        state.set_position_of(player.id, target)

        if self.win_rule.applies(state):
            player.turn_state = TurnState.WON
            logger.debug("%s rolled %d: reached %d and won", player.name, dice_value, target)
            return MoveOutcome.WON

        for rule in self.effect_rules:
            if rule.applies(state):
                state.fired.append(rule.kind)

        logger.debug(
            "%s rolled %d: %d → %d",
            player.name, dice_value, current, state.position_of(player.id),
        )
        return MoveOutcome.ADVANCED
