"""Board layout and cell behaviours for Snakes & Ladders.

Positions run from 0 (off the board, where every pawn starts) to
``cell_count`` (the final cell). Every index carries exactly one behaviour:
a plain cell, or the trigger of a snake, ladder or coin.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Iterable, Union

from snakes_ladders.errors import ConfigurationError


# ── Cell behaviours ──────────────────────────────────────────────────

@dataclass(frozen=True)
class Plain:
    position: int

    @property
    def trigger(self) -> int:
        return self.position


@dataclass(frozen=True)
class Snake:
    start: int
    end: int

    @property
    def trigger(self) -> int:
        return self.start


@dataclass(frozen=True)
class Ladder:
    start: int
    end: int

    @property
    def trigger(self) -> int:
        return self.start


@dataclass(frozen=True)
class Coin:
    position: int
    reward: int

    @property
    def trigger(self) -> int:
        return self.position


CellBehavior = Union[Plain, Snake, Ladder, Coin]


# ── Board ────────────────────────────────────────────────────────────

class Board:
    """Immutable board: cell count plus the special cells keyed by trigger."""

    def __init__(
        self,
        cell_count: int,
        snakes: Iterable[tuple[int, int]] = (),
        ladders: Iterable[tuple[int, int]] = (),
        coins: Iterable[tuple[int, int]] = (),
    ):
        if cell_count < 1:
            raise ConfigurationError(f"Board needs at least one cell, got {cell_count}.")
        self._cell_count = cell_count

        specials: dict[int, CellBehavior] = {}
        for start, end in snakes:
            if end >= start:
                raise ConfigurationError(f"Snake {start}→{end} must lead down.")
            self._place(specials, Snake(start, end))
        for start, end in ladders:
            if end <= start:
                raise ConfigurationError(f"Ladder {start}→{end} must lead up.")
            self._place(specials, Ladder(start, end))
        for position, reward in coins:
            if reward <= 0:
                raise ConfigurationError(f"Coin at {position} must have a positive reward.")
            self._place(specials, Coin(position, reward))

        self._specials = MappingProxyType(dict(sorted(specials.items())))

    def _place(self, specials: dict[int, CellBehavior], cell: CellBehavior) -> None:
        trigger = cell.trigger
        # Position 0 is the off-board start; no move ever lands there.
        if not 1 <= trigger < self._cell_count:
            raise ConfigurationError(
                f"{type(cell).__name__} trigger {trigger} outside [1, {self._cell_count})."
            )
        end = getattr(cell, "end", None)
        # Redirects never land on the final cell: the win check runs before effects.
        if end is not None and not 0 <= end < self._cell_count:
            raise ConfigurationError(
                f"{type(cell).__name__} end {end} outside [0, {self._cell_count})."
            )
        if trigger in specials:
            raise ConfigurationError(
                f"Cell {trigger} already holds {specials[trigger]!r}; "
                f"cannot also place {cell!r}."
            )
        specials[trigger] = cell

    @property
    def cell_count(self) -> int:
        return self._cell_count

    @property
    def final_cell(self) -> int:
        return self._cell_count

    def behavior_at(self, index: int) -> CellBehavior:
        if not 0 <= index <= self._cell_count:
            raise IndexError(f"Position {index} is off the board (0..{self._cell_count}).")
        return self._specials.get(index) or Plain(index)

    @property
    def snakes(self) -> list[Snake]:
        return [c for c in self._specials.values() if isinstance(c, Snake)]

    @property
    def ladders(self) -> list[Ladder]:
        return [c for c in self._specials.values() if isinstance(c, Ladder)]

    @property
    def coins(self) -> list[Coin]:
        return [c for c in self._specials.values() if isinstance(c, Coin)]

    def __repr__(self) -> str:
        return (
            f"Board(cell_count={self._cell_count}, snakes={len(self.snakes)}, "
            f"ladders={len(self.ladders)}, coins={len(self.coins)})"
        )


# ── Built-in layouts ─────────────────────────────────────────────────

DEFAULT_CELL_COUNT = 100

# fmt: off
CLASSIC_SNAKES: list[tuple[int, int]] = [
    (11,  5), (30, 14), (36, 23), (50, 39),
    (80, 20), (93, 45), (97, 60), (99, 85),
]

CLASSIC_LADDERS: list[tuple[int, int]] = [
    (15, 21), (32, 67), (43, 55), (70, 85), (89, 95),
]

# (position, reward)
CLASSIC_COINS: list[tuple[int, int]] = [
    (10,  5), (25, 10), (40, 15), (60, 20), (75, 25), (90, 50),
]
# fmt: on


def classic_board(cell_count: int = DEFAULT_CELL_COUNT) -> Board:
    return Board(cell_count, snakes=CLASSIC_SNAKES, ladders=CLASSIC_LADDERS)


def coins_board(cell_count: int = DEFAULT_CELL_COUNT) -> Board:
    return Board(
        cell_count,
        snakes=CLASSIC_SNAKES,
        ladders=CLASSIC_LADDERS,
        coins=CLASSIC_COINS,
    )


def no_ladders_board(cell_count: int = DEFAULT_CELL_COUNT) -> Board:
    return Board(cell_count, snakes=CLASSIC_SNAKES, coins=CLASSIC_COINS)


LAYOUTS: dict[str, Callable[[], Board]] = {
    "classic": classic_board,
    "coins": coins_board,
    "no_ladders": no_ladders_board,
}


def board_from_dict(data: dict) -> Board:
    """Build a board from ``{"cells": N, "snakes": [[s, e], ...], ...}``."""
    try:
        cell_count = int(data["cells"])
        snakes = [(int(s), int(e)) for s, e in data.get("snakes", [])]
        ladders = [(int(s), int(e)) for s, e in data.get("ladders", [])]
        coins = [(int(p), int(r)) for p, r in data.get("coins", [])]
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigurationError(f"Malformed board layout: {exc}") from exc
    return Board(cell_count, snakes=snakes, ladders=ladders, coins=coins)


def load_layout(path: Path | str) -> Board:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Cannot read layout {path}: {exc}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must hold a JSON object.")
    return board_from_dict(data)
