"""Players and the mutable per-game state shared by the rule chain."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from snakes_ladders.board import Board
from snakes_ladders.errors import InvalidStateError

if TYPE_CHECKING:
    from snakes_ladders.rules import RuleKind


class TurnState(Enum):
    NOT_STARTED = "not_started"
    STARTING = "starting"
    ACTIVE = "active"
    WON = "won"


@dataclass
class Player:
    """A participant. ``id`` is the stable key; the roster owns the object."""

    name: str
    id: str
    turn_state: TurnState = TurnState.NOT_STARTED

    @property
    def has_started(self) -> bool:
        return self.turn_state is not TurnState.NOT_STARTED


@dataclass(frozen=True)
class CoinCollected:
    player_id: str
    position: int
    reward: int


@dataclass
class GameState:
    """Mutable record every rule reads and writes.

    Positions live here, not on ``Player``: rules redirect a pawn by
    rewriting ``positions``, which is how their effects reach the engine.
    The current player and roll are transient and rebound each turn.
    """

    board: Board
    positions: dict[str, int] = field(default_factory=dict)
    coin_events: list[CoinCollected] = field(default_factory=list)
    # Effect rules that fired during the current turn
    fired: list[RuleKind] = field(default_factory=list)
    _current_player: Player | None = field(default=None, repr=False)
    _dice_value: int | None = field(default=None, repr=False)

    def bind(self, player: Player, dice_value: int) -> None:
        if player is None:
            raise InvalidStateError("Cannot bind a turn without a player.")
        self._current_player = player
        self._dice_value = dice_value
        self.fired = []

    @property
    def current_player(self) -> Player:
        if self._current_player is None:
            raise InvalidStateError("No current player bound to the game state.")
        return self._current_player

    @property
    def dice_value(self) -> int:
        if self._dice_value is None:
            raise InvalidStateError("No dice value bound to the game state.")
        return self._dice_value

    def position_of(self, player_id: str) -> int:
        return self.positions.get(player_id, 0)

    def set_position_of(self, player_id: str, position: int) -> None:
        self.positions[player_id] = position
