"""CLI entry point: python -m serpientes {play,roll,status,board,reset,history,simulate,chart}."""

from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path

from serpientes.board import DEFAULT_BOARD
from serpientes.chart import make_rolls_chart
from serpientes.config import Settings, load_settings
from serpientes.game import (
    GameSession,
    MoveEvent,
    MoveResult,
    Remapped,
    Settled,
    VerseCollected,
    Victory,
)
from serpientes.narration import ConsoleNarrator
from serpientes.persistence import GameStore
from serpientes.stats import simulate, summarize


# ── Terminal output ──────────────────────────────────────────────────

class ConsoleObserver:
    """Prints the settled outcome of each move."""

    def on_event(self, event: MoveEvent) -> None:
        if isinstance(event, Remapped):
            kind = "Escalera" if event.is_ladder else "Serpiente"
            print(f"  {kind}: {event.from_space} → {event.to_space}")
        elif isinstance(event, VerseCollected):
            print(f"  Verso nuevo en {event.position}.")
        elif isinstance(event, Settled):
            verse = event.verse or "No hay verso aquí."
            print(f"  Casilla {event.position}: {verse}")
        elif isinstance(event, Victory):
            print("  ¡Felicidades! Has terminado el juego.")


def _board_text(position: int | None = None) -> str:
    board = DEFAULT_BOARD
    lines = []
    for row in board.grid():
        cells = []
        for index in row:
            if index == position:
                mark = "*"
            elif board.is_ladder(index):
                mark = "^"
            elif board.is_snake(index):
                mark = "v"
            elif board.verse_at(index) is not None:
                mark = "·"
            else:
                mark = " "
            cells.append(f"{index:2d}{mark}")
        lines.append(" ".join(cells))
    lines.append("  * you   ^ ladder   v snake   · verse")
    return "\n".join(lines)


def _open_session(settings: Settings) -> GameSession:
    store = GameStore(settings.db_path)
    return GameSession(
        store=store,
        narrator=ConsoleNarrator(),
        observer=ConsoleObserver(),
        muted=settings.muted,
        locale=settings.locale,
        rng=random.Random(settings.seed),
    )


def _print_roll(result: MoveResult) -> None:
    print(f"Rolled {result.roll}: {result.start} → {result.final_state.position}")


def _print_verses(verses: list[str]) -> None:
    if not verses:
        print("Aún no has recogido versos.")
        return
    for verse in verses:
        print(f"  {verse}")


# ── play ─────────────────────────────────────────────────────────────

YES = ("s", "si", "sí", "y", "yes")


def _dismiss_victory(session: GameSession) -> bool:
    """Show the collected verses, then reset. Returns True to play again."""
    _print_verses(session.state.collected_verses)
    try:
        again = input("¿Nueva partida? [s/N] ").strip().lower()
    finally:
        session.reset()
    return again in YES


def cmd_play(args: argparse.Namespace, settings: Settings) -> None:
    """Interactive game: Enter rolls, q quits."""
    session = _open_session(settings)
    try:
        if session.finished:
            # Saved game was won but the victory never dismissed
            print("  ¡Felicidades! Has terminado el juego.")
            session.play_victory()
            if not _dismiss_victory(session):
                return
        while True:
            print()
            print(_board_text(session.state.position))
            answer = input("Enter para tirar el dado (q para salir): ").strip().lower()
            if answer == "q":
                break
            result = session.roll()
            if result is None:
                continue
            _print_roll(result)
            if result.won and not _dismiss_victory(session):
                break
    except (EOFError, KeyboardInterrupt):
        print()
    finally:
        session.store.close()


# ── roll ─────────────────────────────────────────────────────────────

def cmd_roll(args: argparse.Namespace, settings: Settings) -> None:
    """Apply a single roll to the saved game."""
    if args.value is not None and not 1 <= args.value <= 6:
        print(f"Die value must be between 1 and 6, got {args.value}.", file=sys.stderr)
        sys.exit(1)

    session = _open_session(settings)
    try:
        if session.finished:
            print("The game is already won. Run `reset` to play again.", file=sys.stderr)
            sys.exit(1)
        result = session.roll(args.value)
        if result is not None:
            _print_roll(result)
    finally:
        session.store.close()


# ── status / board / reset ───────────────────────────────────────────

def cmd_status(args: argparse.Namespace, settings: Settings) -> None:
    store = GameStore(settings.db_path)
    state = store.load()
    number = store.game_number
    store.close()

    print(f"Game {number}: on space {state.position} of {DEFAULT_BOARD.final_space}")
    print(_board_text(state.position))
    print(f"\nCollected verses ({len(state.collected_verses)}):")
    _print_verses(state.collected_verses)


def cmd_board(args: argparse.Namespace, settings: Settings) -> None:
    print(_board_text())
    problems = DEFAULT_BOARD.layout_problems()
    for problem in problems:
        print(f"warning: {problem}", file=sys.stderr)


def cmd_reset(args: argparse.Namespace, settings: Settings) -> None:
    session = _open_session(settings)
    session.reset()
    session.store.close()
    print("Game reset.")


# ── history ──────────────────────────────────────────────────────────

def cmd_history(args: argparse.Namespace, settings: Settings) -> None:
    """List completed games from the database."""
    if not settings.db_path.exists():
        print(f"No database found at {settings.db_path}. Play a game first.", file=sys.stderr)
        sys.exit(1)

    store = GameStore(settings.db_path)
    games = store.list_games()
    store.close()

    if not games:
        print("No completed games yet.", file=sys.stderr)
        sys.exit(1)

    print("\nCompleted games")
    print("=" * 40)
    for g in games:
        print(f"  #{g.game_number:<5d} {g.rolls:4d} rolls  {g.verses_collected:2d} verses  {g.completed_at}")


# ── simulate / chart ─────────────────────────────────────────────────

def cmd_simulate(args: argparse.Namespace, settings: Settings) -> None:
    """Play many games automatically and print summary statistics."""
    seed = args.seed if args.seed is not None else settings.seed
    summary = summarize(simulate(args.games, seed=seed))

    print(f"\n{summary.games} games")
    print("=" * 40)
    print(f"  rolls   mean {summary.mean_rolls:6.1f}   median {summary.median_rolls:5.1f}")
    print(f"          min  {summary.min_rolls:6d}   max    {summary.max_rolls:5d}")
    print(f"  verses  mean {summary.mean_verses:6.1f}")
    print(f"  snakes {summary.snakes}   ladders {summary.ladders}")


def cmd_chart(args: argparse.Namespace, settings: Settings) -> None:
    """Simulate games and chart the rolls each one took."""
    seed = args.seed if args.seed is not None else settings.seed
    outcomes = simulate(args.games, seed=seed)
    out = args.output or "rolls_to_victory.png"
    make_rolls_chart([o.rolls for o in outcomes], output_path=out)
    print(f"Chart saved to {out}")


# ── main ─────────────────────────────────────────────────────────────

COMMANDS = {
    "play": cmd_play,
    "roll": cmd_roll,
    "status": cmd_status,
    "board": cmd_board,
    "reset": cmd_reset,
    "history": cmd_history,
    "simulate": cmd_simulate,
    "chart": cmd_chart,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="serpientes",
        description="Serpientes & Poemas — snakes and ladders with verses",
    )
    parser.add_argument("--db", help="SQLite file for saved progress")
    parser.add_argument("--mute", action="store_true", help="Silence verse narration")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("play", help="Play interactively")

    p_roll = sub.add_parser("roll", help="Roll once and save")
    p_roll.add_argument("--value", type=int, help="Use this die value instead of rolling")

    sub.add_parser("status", help="Show saved progress")
    sub.add_parser("board", help="Print the board layout")
    sub.add_parser("reset", help="Start a new game")
    sub.add_parser("history", help="List completed games")

    p_sim = sub.add_parser("simulate", help="Simulate games and print statistics")
    p_sim.add_argument("--games", type=int, default=1000, help="Games to play (default 1000)")
    p_sim.add_argument("--seed", type=int, help="Seed for the die")

    p_chart = sub.add_parser("chart", help="Chart rolls-to-victory of simulated games")
    p_chart.add_argument("--games", type=int, default=1000, help="Games to play (default 1000)")
    p_chart.add_argument("--seed", type=int, help="Seed for the die")
    p_chart.add_argument("--output", "-o", help="Output PNG path")

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings()
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        sys.exit(1)
    settings = settings.with_overrides(
        db_path=Path(args.db) if args.db else None,
        muted=True if args.mute else None,
    )

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return
    handler(args, settings)


if __name__ == "__main__":
    main()
