"""Game runner — the external loop that rolls dice and rotates players."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from snakes_ladders.engine import MoveOutcome, TurnEngine
from snakes_ladders.errors import ConfigurationError, OverflowPolicyViolation
from snakes_ladders.rules import RuleKind
from snakes_ladders.state import CoinCollected, Player

logger = logging.getLogger(__name__)


# ── Dice interface ───────────────────────────────────────────────────

@runtime_checkable
class DiceSource(Protocol):
    """Structural interface: anything with ``roll() -> int`` works."""

    def roll(self) -> int: ...


# ── Structured types ────────────────────────────────────────────────

@dataclass
class LogEntry:
    """Record of a single engine call during a game."""

    turn_number: int
    player_id: str
    roll: int
    outcome: MoveOutcome | None  # None when the move was rejected
    position_before: int
    position_after: int
    fired: list[RuleKind] = field(default_factory=list)
    coins: list[CoinCollected] = field(default_factory=list)
    rejected: bool = False

    def describe(self, name: str | None = None) -> str:
        who = name or self.player_id
        if self.rejected:
            return f"{who} rolled {self.roll}: overshoots, stays on {self.position_before}."
        if self.outcome is MoveOutcome.NO_MOVE:
            return f"{who} rolled {self.roll}: needs a start roll."
        if self.outcome is MoveOutcome.STARTED:
            return f"{who} rolled {self.roll}: started! Rolls again."
        msg = f"{who} rolled {self.roll}: {self.position_before} → {self.position_after}"
        extras = [kind.value.replace("_", " ") for kind in self.fired]
        extras += [f"+{c.reward} coin" for c in self.coins]
        if extras:
            msg += f" ({', '.join(extras)})"
        if self.outcome is MoveOutcome.WON:
            msg += " and wins!"
        return msg


@dataclass
class GameResult:
    winner: str | None  # player id, or None if the game hit max_turns
    reason: str  # "win" | "max_turns"
    turns: int = 0


# ── Observers ───────────────────────────────────────────────────────

class GameObserver(Protocol):
    """Receives structured events as a game is played."""

    def on_turn(self, entry: LogEntry) -> None: ...


@dataclass
class ListObserver:
    """Default observer — collects entries into a list."""

    entries: list[LogEntry] = field(default_factory=list)

    def on_turn(self, entry: LogEntry) -> None:
        self.entries.append(entry)


@dataclass
class LoggingObserver:
    """Writes each entry to a ``logging`` logger."""

    log: logging.Logger = logger
    level: int = logging.INFO

    def on_turn(self, entry: LogEntry) -> None:
        self.log.log(self.level, "[turn %d] %s", entry.turn_number, entry.describe())


# ── Runner ───────────────────────────────────────────────────────────

MAX_TURNS = 1000  # engine calls, safety valve against endless games

# Only these end a player's turn; NO_MOVE and STARTED roll again.
ROTATING_OUTCOMES = frozenset({MoveOutcome.ADVANCED})


class GameRunner:
    """Play one full game for two or more players."""

    def __init__(
        self,
        players: list[Player],
        engine: TurnEngine,
        dice: DiceSource,
        max_turns: int = MAX_TURNS,
        observer: GameObserver | None = None,
    ):
        if len(players) < 2:
            raise ConfigurationError("A game needs at least two players.")
        ids = [p.id for p in players]
        if len(set(ids)) != len(ids):
            raise ConfigurationError(f"Player ids must be unique, got {ids}.")
        self.players = players
        self.engine = engine
        self.dice = dice
        self.max_turns = max_turns
        self.observer = observer or ListObserver()
        self.current_index = 0
        self.turn_number = 0

    @property
    def current_player(self) -> Player:
        return self.players[self.current_index]

    def play(self) -> GameResult:
        self.turn_number = 0

        while self.turn_number < self.max_turns:
            player = self.current_player
            entry = self.play_turn()

            if entry.outcome is MoveOutcome.WON:
                return GameResult(winner=player.id, reason="win", turns=self.turn_number)

        return GameResult(winner=None, reason="max_turns", turns=self.turn_number)

    def play_turn(self) -> LogEntry:
        """Roll once for the current player, record it, and rotate if due."""
        player = self.current_player
        state = self.engine.state
        roll = self.dice.roll()
        before = state.position_of(player.id)
        coins_before = len(state.coin_events)
        self.turn_number += 1

        try:
            outcome = self.engine.execute_move(roll, player)
        except OverflowPolicyViolation as exc:
            logger.debug("Rejected move: %s", exc)
            entry = LogEntry(
                turn_number=self.turn_number,
                player_id=player.id,
                roll=roll,
                outcome=None,
                position_before=before,
                position_after=before,
                rejected=True,
            )
            self.observer.on_turn(entry)
            self._rotate()
            return entry

        entry = LogEntry(
            turn_number=self.turn_number,
            player_id=player.id,
            roll=roll,
            outcome=outcome,
            position_before=before,
            position_after=state.position_of(player.id),
            fired=list(state.fired) if outcome is MoveOutcome.ADVANCED else [],
            coins=state.coin_events[coins_before:],
        )
        self.observer.on_turn(entry)

        if outcome in ROTATING_OUTCOMES:
            self._rotate()
        return entry

    def _rotate(self) -> None:
        self.current_index = (self.current_index + 1) % len(self.players)
