"""Histogram of how many rolls simulated games took to finish."""

from __future__ import annotations

from collections import Counter

import matplotlib
matplotlib.use("Agg")  # non-interactive backend

import matplotlib.pyplot as plt


def make_rolls_chart(
    rolls: list[int],
    output_path: str = "rolls_to_victory.png",
    title: str = "Serpientes & Poemas — rolls to victory",
) -> str:
    """Create a bar chart with one bar per roll count.

    Returns the path to the saved PNG.
    """
    if not rolls:
        raise ValueError("no games to chart")

    counts = Counter(rolls)
    xs = list(range(min(rolls), max(rolls) + 1))
    ys = [counts[x] for x in xs]

    fig, ax = plt.subplots(figsize=(10, 4))
    ax.bar(xs, ys, color="#2A9D8F", edgecolor="white")

    mean = sum(rolls) / len(rolls)
    ax.axvline(mean, color="#E76F51", linestyle="--", linewidth=1.5)
    ax.text(
        mean, max(ys), f" mean {mean:.1f}",
        va="top", fontsize=10, fontweight="bold", color="#E76F51",
    )

    ax.set_xlabel("Rolls")
    ax.set_ylabel("Games")
    ax.set_title(title, fontsize=14, fontweight="bold")

    plt.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path
