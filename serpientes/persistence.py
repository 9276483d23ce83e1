"""Saved game progress — SQLite and in-memory stores.

Progress is kept under two named values, ``playerPosition`` and
``collectedVerses``. Verses are joined with ``|``; a ``|`` or ``\\``
inside a verse is escaped with a backslash so the save cannot be split
in the wrong place. Anything that fails to decode resets the game.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from serpientes.board import TOTAL_SPACES
from serpientes.game import GameState

if TYPE_CHECKING:
    from serpientes.game import MoveResult

logger = logging.getLogger(__name__)

POSITION_KEY = "playerPosition"
VERSES_KEY = "collectedVerses"
GAME_NUMBER_KEY = "gameNumber"

DELIMITER = "|"
ESCAPE = "\\"


class CorruptStateError(ValueError):
    """Persisted values that cannot be turned back into a GameState."""


# ── Codec ────────────────────────────────────────────────────────────

def encode_verses(verses: list[str]) -> str:
    escaped = (
        v.replace(ESCAPE, ESCAPE + ESCAPE).replace(DELIMITER, ESCAPE + DELIMITER)
        for v in verses
    )
    return DELIMITER.join(escaped)


def decode_verses(raw: str) -> list[str]:
    """Inverse of :func:`encode_verses`. The empty string decodes to []."""
    if raw == "":
        return []

    verses: list[str] = []
    current: list[str] = []
    chars = iter(raw)
    for ch in chars:
        if ch == ESCAPE:
            nxt = next(chars, None)
            if nxt is None:
                raise CorruptStateError("dangling escape at end of verses")
            current.append(nxt)
        elif ch == DELIMITER:
            verses.append("".join(current))
            current = []
        else:
            current.append(ch)
    verses.append("".join(current))

    if any(v == "" for v in verses):
        raise CorruptStateError(f"empty verse in {raw!r}")
    if len(set(verses)) != len(verses):
        raise CorruptStateError("duplicate verses")
    return verses


def decode_state(
    raw_position: str | None,
    raw_verses: str | None,
    total_spaces: int = TOTAL_SPACES,
) -> GameState:
    """Build a GameState from stored text. Missing values mean a fresh game."""
    if raw_position is None or raw_position == "":
        position = 0
    else:
        try:
            position = int(raw_position)
        except ValueError:
            raise CorruptStateError(f"position is not a number: {raw_position!r}") from None
    if not 0 <= position < total_spaces:
        raise CorruptStateError(f"position {position} is off the board")

    verses = decode_verses(raw_verses or "")
    return GameState(position=position, collected_verses=verses)


# ── Store interface ──────────────────────────────────────────────────

class StateStore(Protocol):
    """What a GameSession needs from durable storage."""

    @property
    def game_number(self) -> int: ...

    def load(self) -> GameState: ...

    def save(self, state: GameState) -> None: ...

    def start_new_game(self) -> int: ...

    def record_move(self, game_number: int, result: MoveResult) -> None: ...

    def record_victory(self, game_number: int, verses_collected: int) -> None: ...


@dataclass
class MoveRecord:
    game_number: int
    roll: int
    start_position: int
    target: int
    end_position: int
    outcome: str
    verse: str | None = None


@dataclass
class GameRecord:
    game_number: int
    rolls: int
    verses_collected: int
    completed_at: str | None = None


def _move_record(game_number: int, result: MoveResult) -> MoveRecord:
    return MoveRecord(
        game_number=game_number,
        roll=result.roll,
        start_position=result.start,
        target=result.target,
        end_position=result.final_state.position,
        outcome=result.outcome,
        verse=result.collected,
    )


# ── In-memory store ──────────────────────────────────────────────────

@dataclass
class MemoryStore:
    """Dict-backed store for tests and simulations."""

    values: dict[str, str] = field(default_factory=dict)
    total_spaces: int = TOTAL_SPACES
    moves: list[MoveRecord] = field(default_factory=list)
    games: list[GameRecord] = field(default_factory=list)

    @property
    def game_number(self) -> int:
        return int(self.values.get(GAME_NUMBER_KEY, "1"))

    def load(self) -> GameState:
        try:
            return decode_state(
                self.values.get(POSITION_KEY),
                self.values.get(VERSES_KEY),
                self.total_spaces,
            )
        except CorruptStateError as exc:
            logger.warning("Saved game is corrupt (%s); starting over", exc)
            state = GameState()
            self.save(state)
            self.start_new_game()
            return state

    def save(self, state: GameState) -> None:
        self.values[POSITION_KEY] = str(state.position)
        self.values[VERSES_KEY] = encode_verses(state.collected_verses)

    def start_new_game(self) -> int:
        number = self.game_number + 1
        self.values[GAME_NUMBER_KEY] = str(number)
        return number

    def record_move(self, game_number: int, result: MoveResult) -> None:
        self.moves.append(_move_record(game_number, result))

    def record_victory(self, game_number: int, verses_collected: int) -> None:
        rolls = sum(1 for m in self.moves if m.game_number == game_number)
        self.games.append(GameRecord(game_number, rolls, verses_collected))


# ── SQLite store ─────────────────────────────────────────────────────

class GameStore:
    """Thin wrapper around a SQLite database for saved progress and history."""

    def __init__(self, path: Path | str, total_spaces: int = TOTAL_SPACES):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.total_spaces = total_spaces
        self._conn = sqlite3.connect(self.path)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._create_tables()

    def _create_tables(self) -> None:
        self._conn.executescript("""
            CREATE TABLE IF NOT EXISTS settings (
                key         TEXT PRIMARY KEY,
                value       TEXT NOT NULL
            );
            CREATE TABLE IF NOT EXISTS moves (
                id              INTEGER PRIMARY KEY AUTOINCREMENT,
                game_number     INTEGER NOT NULL,
                roll            INTEGER NOT NULL,
                start_position  INTEGER NOT NULL,
                target          INTEGER NOT NULL,
                end_position    INTEGER NOT NULL,
                outcome         TEXT NOT NULL,
                verse           TEXT,
                created_at      TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );
            CREATE TABLE IF NOT EXISTS games (
                id                  INTEGER PRIMARY KEY AUTOINCREMENT,
                game_number         INTEGER NOT NULL UNIQUE,
                rolls               INTEGER NOT NULL,
                verses_collected    INTEGER NOT NULL,
                completed_at        TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );
        """)
        self._conn.commit()

    # ── key/value ───────────────────────────────────────────────────

    def _get(self, key: str) -> str | None:
        row = self._conn.execute(
            "SELECT value FROM settings WHERE key = ?", (key,)
        ).fetchone()
        return row[0] if row else None

    def _set(self, key: str, value: str) -> None:
        self._conn.execute(
            "INSERT INTO settings (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
            (key, value),
        )

    @property
    def game_number(self) -> int:
        raw = self._get(GAME_NUMBER_KEY)
        try:
            return int(raw) if raw is not None else 1
        except ValueError:
            logger.warning("Ignoring bad game number %r", raw)
            return 1

    # ── progress ────────────────────────────────────────────────────

    def load(self) -> GameState:
        """Read saved progress; corrupt values reset the game."""
        try:
            return decode_state(
                self._get(POSITION_KEY), self._get(VERSES_KEY), self.total_spaces,
            )
        except CorruptStateError as exc:
            logger.warning("Saved game in %s is corrupt (%s); starting over", self.path, exc)
            state = GameState()
            self.save(state)
            self.start_new_game()
            return state

    def save(self, state: GameState) -> None:
        self._set(POSITION_KEY, str(state.position))
        self._set(VERSES_KEY, encode_verses(state.collected_verses))
        self._conn.commit()

    def start_new_game(self) -> int:
        number = self.game_number + 1
        self._set(GAME_NUMBER_KEY, str(number))
        self._conn.commit()
        return number

    # ── history ─────────────────────────────────────────────────────

    def record_move(self, game_number: int, result: MoveResult) -> None:
        m = _move_record(game_number, result)
        self._conn.execute(
            "INSERT INTO moves (game_number, roll, start_position, target, "
            "end_position, outcome, verse) VALUES (?, ?, ?, ?, ?, ?, ?)",
            (m.game_number, m.roll, m.start_position, m.target,
             m.end_position, m.outcome, m.verse),
        )
        self._conn.commit()

    def record_victory(self, game_number: int, verses_collected: int) -> None:
        rolls = self._conn.execute(
            "SELECT COUNT(*) FROM moves WHERE game_number = ?", (game_number,)
        ).fetchone()[0]
        self._conn.execute(
            "INSERT OR REPLACE INTO games (game_number, rolls, verses_collected) "
            "VALUES (?, ?, ?)",
            (game_number, rolls, verses_collected),
        )
        self._conn.commit()

    def moves_for_game(self, game_number: int) -> list[MoveRecord]:
        rows = self._conn.execute(
            "SELECT game_number, roll, start_position, target, end_position, "
            "outcome, verse FROM moves WHERE game_number = ? ORDER BY id",
            (game_number,),
        ).fetchall()
        return [MoveRecord(*r) for r in rows]

    def list_games(self) -> list[GameRecord]:
        """Completed games, oldest first."""
        rows = self._conn.execute(
            "SELECT game_number, rolls, verses_collected, completed_at "
            "FROM games ORDER BY game_number"
        ).fetchall()
        return [GameRecord(*r) for r in rows]

    def close(self) -> None:
        self._conn.close()
