"""Play many seeded games and summarise who wins and how long games last."""

from __future__ import annotations

import statistics
from dataclasses import dataclass, field
from typing import Callable

from snakes_ladders.board import Board
from snakes_ladders.dice import Dice
from snakes_ladders.engine import OverflowPolicy, TurnEngine
from snakes_ladders.game import GameResult, GameRunner, MAX_TURNS
from snakes_ladders.rules import default_rules
from snakes_ladders.state import Player


@dataclass
class SimulationSummary:
    """Aggregate over a batch of games."""

    wins: dict[str, int] = field(default_factory=dict)
    lengths: list[int] = field(default_factory=list)  # turns of finished games
    unfinished: int = 0

    @property
    def games(self) -> int:
        return len(self.lengths) + self.unfinished

    @property
    def mean_length(self) -> float | None:
        return statistics.fmean(self.lengths) if self.lengths else None

    @property
    def median_length(self) -> float | None:
        return statistics.median(self.lengths) if self.lengths else None

    def record(self, result: GameResult) -> None:
        if result.winner is None:
            self.unfinished += 1
            return
        self.wins[result.winner] = self.wins.get(result.winner, 0) + 1
        self.lengths.append(result.turns)


def make_players(count: int) -> list[Player]:
    return [Player(name=f"Player_{i + 1}", id=f"Player_{i + 1}") for i in range(count)]


def play_game(
    board: Board,
    players: list[Player],
    dice: Dice,
    coins: bool = False,
    overflow: OverflowPolicy = OverflowPolicy.CLAMP,
    max_turns: int = MAX_TURNS,
) -> GameResult:
    engine = TurnEngine(
        board,
        default_rules(coins=coins, ladders=bool(board.ladders)),
        overflow=overflow,
    )
    return GameRunner(players, engine, dice, max_turns=max_turns).play()


def simulate_games(
    board_factory: Callable[[], Board],
    games: int,
    players: int = 2,
    seed: int | None = None,
    overflow: OverflowPolicy = OverflowPolicy.CLAMP,
    max_turns: int = MAX_TURNS,
) -> SimulationSummary:
    """Play *games* independent games.

    One seeded die drives the whole batch, so equal seeds give equal summaries.
    """
    dice = Dice.seeded(seed)
    summary = SimulationSummary()
    for _ in range(games):
        board = board_factory()
        result = play_game(
            board,
            make_players(players),
            dice,
            coins=bool(board.coins),
            overflow=overflow,
            max_turns=max_turns,
        )
        summary.record(result)
    return summary
