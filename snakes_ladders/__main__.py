"""CLI entry point: python -m snakes_ladders {play,simulate,chart}."""

from __future__ import annotations

import argparse
import logging
import sys

from snakes_ladders.board import LAYOUTS, Board, load_layout
from snakes_ladders.chart import make_length_chart
from snakes_ladders.dice import Dice
from snakes_ladders.engine import OverflowPolicy, TurnEngine
from snakes_ladders.errors import ConfigurationError
from snakes_ladders.game import GameRunner, ListObserver, MAX_TURNS
from snakes_ladders.rules import default_rules
from snakes_ladders.simulate import make_players, simulate_games


def _board_factory(args: argparse.Namespace):
    if args.layout_file:
        path = args.layout_file
        return lambda: load_layout(path)
    return LAYOUTS[args.layout]


def _overflow(args: argparse.Namespace) -> OverflowPolicy:
    return OverflowPolicy(args.overflow)


# ── play ─────────────────────────────────────────────────────────────

def cmd_play(args: argparse.Namespace) -> None:
    """Play a single game and print every roll."""
    board: Board = _board_factory(args)()
    players = make_players(args.players)
    names = {p.id: p.name for p in players}

    engine = TurnEngine(
        board,
        default_rules(coins=bool(board.coins), ladders=bool(board.ladders)),
        overflow=_overflow(args),
    )
    observer = ListObserver()
    runner = GameRunner(
        players,
        engine,
        Dice.seeded(args.seed),
        max_turns=args.max_turns,
        observer=observer,
    )

    print(f"{board!r}, {len(players)} players, overflow={engine.overflow.value}")
    result = runner.play()

    for entry in observer.entries:
        print(f"  [{entry.turn_number:4d}] {entry.describe(names[entry.player_id])}")

    if result.winner is None:
        print(f"\nNo winner after {result.turns} turns.")
    else:
        print(f"\n{names[result.winner]} won the game in {result.turns} turns.")
        for event in engine.state.coin_events:
            print(f"  {names[event.player_id]} collected {event.reward} at {event.position}")


# ── simulate ─────────────────────────────────────────────────────────

def _run_simulation(args: argparse.Namespace):
    return simulate_games(
        _board_factory(args),
        games=args.games,
        players=args.players,
        seed=args.seed,
        overflow=_overflow(args),
        max_turns=args.max_turns,
    )


def cmd_simulate(args: argparse.Namespace) -> None:
    """Play many games and print win counts and length statistics."""
    summary = _run_simulation(args)

    print(f"\nSimulated {summary.games} games")
    print("=" * 40)
    for name, wins in sorted(summary.wins.items(), key=lambda kv: kv[1], reverse=True):
        print(f"  {name:30s} {wins:7d}")
    if summary.lengths:
        print(f"\n  mean length   {summary.mean_length:7.1f}")
        print(f"  median length {summary.median_length:7.1f}")
    if summary.unfinished:
        print(f"  unfinished    {summary.unfinished:7d}")


# ── chart ────────────────────────────────────────────────────────────

def cmd_chart(args: argparse.Namespace) -> None:
    """Simulate games and save a histogram of their lengths."""
    summary = _run_simulation(args)
    if not summary.lengths:
        print("No game finished; nothing to chart.", file=sys.stderr)
        sys.exit(1)

    out = args.output or "game_lengths.png"
    make_length_chart(summary, output_path=out)
    print(f"Chart saved to {out}")


# ── main ─────────────────────────────────────────────────────────────

def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("--players", type=int, default=2, help="Number of players (default 2)")
    p.add_argument("--layout", choices=sorted(LAYOUTS), default="classic", help="Built-in board")
    p.add_argument("--layout-file", help="JSON board layout (overrides --layout)")
    p.add_argument("--seed", type=int, help="Seed for the dice")
    p.add_argument(
        "--overflow", choices=[o.value for o in OverflowPolicy], default="clamp",
        help="Overshooting the final cell: clamp (wins) or exact (stay put)",
    )
    p.add_argument("--max-turns", type=int, default=MAX_TURNS, help="Max engine calls per game")


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="snakes_ladders",
        description="Snakes & Ladders turn engine",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    p_play = sub.add_parser("play", help="Play one game")
    _add_common(p_play)

    p_sim = sub.add_parser("simulate", help="Play many games and summarise")
    _add_common(p_sim)
    p_sim.add_argument("--games", type=int, default=1000, help="Games to play (default 1000)")

    p_chart = sub.add_parser("chart", help="Histogram of game lengths")
    _add_common(p_chart)
    p_chart.add_argument("--games", type=int, default=1000, help="Games to play (default 1000)")
    p_chart.add_argument("--output", "-o", help="Output PNG path")

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    commands = {"play": cmd_play, "simulate": cmd_simulate, "chart": cmd_chart}
    if args.command not in commands:
        parser.print_help()
        return
    try:
        commands[args.command](args)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
