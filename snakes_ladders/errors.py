"""Exceptions raised by the board, the rule chain, and the turn engine."""

from __future__ import annotations


class EngineError(Exception):
    """Base class for every error the engine raises."""


class ConfigurationError(EngineError):
    """Board or engine built from an unusable configuration."""


class InvalidStateError(EngineError):
    """Operation invoked without a player/state, or on a finished player."""


class OverflowPolicyViolation(EngineError):
    """A roll would carry the player past the final cell under exact landing."""

    def __init__(self, player_id: str, position: int, roll: int, final_cell: int):
        self.player_id = player_id
        self.position = position
        self.roll = roll
        self.final_cell = final_cell
        super().__init__(
            f"Player {player_id} on {position} rolled {roll}: "
            f"overshoots final cell {final_cell}."
        )
