"""Batch simulation and summary statistics over complete games."""

from __future__ import annotations

import random
import statistics
from dataclasses import dataclass

from serpientes.board import DEFAULT_BOARD, Board
from serpientes.game import GameSession


@dataclass
class GameOutcome:
    """Result of a single simulated game."""

    rolls: int
    verses_collected: int
    snakes: int = 0
    ladders: int = 0
    won: bool = True


@dataclass
class Summary:
    games: int
    mean_rolls: float
    median_rolls: float
    min_rolls: int
    max_rolls: int
    mean_verses: float
    snakes: int
    ladders: int


def simulate(
    games: int,
    seed: int | None = None,
    board: Board = DEFAULT_BOARD,
    max_rolls: int = 1000,
) -> list[GameOutcome]:
    """Play *games* complete games with a (optionally seeded) die."""
    rng = random.Random(seed)
    outcomes: list[GameOutcome] = []

    for _ in range(games):
        session = GameSession(board=board, rng=rng)
        results = session.play_to_victory(max_rolls=max_rolls)
        outcome = GameOutcome(
            rolls=len(results),
            verses_collected=len(session.state.collected_verses),
            won=session.finished,
        )
        for result in results:
            if result.outcome == "snake":
                outcome.snakes += 1
            elif result.outcome == "ladder":
                outcome.ladders += 1
        outcomes.append(outcome)

    return outcomes


def summarize(outcomes: list[GameOutcome]) -> Summary:
    """Aggregate simulated games. Raises ValueError when *outcomes* is empty."""
    if not outcomes:
        raise ValueError("no games to summarize")

    rolls = [o.rolls for o in outcomes]
    return Summary(
        games=len(outcomes),
        mean_rolls=statistics.mean(rolls),
        median_rolls=statistics.median(rolls),
        min_rolls=min(rolls),
        max_rolls=max(rolls),
        mean_verses=statistics.mean(o.verses_collected for o in outcomes),
        snakes=sum(o.snakes for o in outcomes),
        ladders=sum(o.ladders for o in outcomes),
    )
