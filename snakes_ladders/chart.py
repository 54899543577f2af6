"""Generate a histogram of game lengths from a simulation summary."""

from __future__ import annotations

import matplotlib
matplotlib.use("Agg")  # non-interactive backend

import matplotlib.pyplot as plt

from snakes_ladders.simulate import SimulationSummary


def make_length_chart(
    summary: SimulationSummary,
    output_path: str = "game_lengths.png",
    title: str = "Snakes & Ladders: Turns per Game",
    bins: int = 30,
) -> str:
    """Create a histogram of finished-game lengths with the mean marked.

    Returns the path to the saved PNG.
    """
    if not summary.lengths:
        raise ValueError("No finished games to chart.")

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.hist(summary.lengths, bins=bins, color="#4A90D9", edgecolor="white")

    mean = summary.mean_length
    ax.axvline(mean, color="#D94A4A", linestyle="--", linewidth=1.5)
    ax.text(
        mean, ax.get_ylim()[1] * 0.95, f" mean {mean:.1f}",
        color="#D94A4A", fontsize=11, fontweight="bold", va="top",
    )

    # Win counts in the corner, best first
    wins = sorted(summary.wins.items(), key=lambda kv: kv[1], reverse=True)
    ax.text(
        0.98, 0.95, "\n".join(f"{name}: {count}" for name, count in wins),
        transform=ax.transAxes, ha="right", va="top", fontsize=10,
    )

    ax.set_xlabel("Engine calls until a win")
    ax.set_ylabel("Games")
    ax.set_title(f"{title} ({summary.games} games)", fontsize=14, fontweight="bold")

    plt.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path
