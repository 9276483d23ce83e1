"""Move engine and game session — resolves die rolls into settled state."""

from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, Union

from serpientes.board import DEFAULT_BOARD, Board
from serpientes.narration import DEFAULT_LOCALE, Narrator, SilentNarrator

if TYPE_CHECKING:
    from serpientes.persistence import StateStore

logger = logging.getLogger(__name__)

DIE_FACES = 6


# ── State ────────────────────────────────────────────────────────────

@dataclass
class GameState:
    """Mutable progress for a single player."""

    position: int = 0
    collected_verses: list[str] = field(default_factory=list)

    def copy(self) -> GameState:
        return GameState(self.position, list(self.collected_verses))

    def collect(self, verse: str) -> bool:
        """Append *verse* unless already collected. Returns True if added."""
        if verse in self.collected_verses:
            return False
        self.collected_verses.append(verse)
        return True


class Phase(enum.Enum):
    IDLE = "idle"
    MOVING = "moving"
    REMAPPING = "remapping"
    SETTLED = "settled"
    VICTORY = "victory"


# ── Events ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Stepped:
    """The pawn advanced one space."""

    position: int


@dataclass(frozen=True)
class Remapped:
    """A snake or ladder moved the pawn."""

    from_space: int
    to_space: int

    @property
    def is_ladder(self) -> bool:
        return self.to_space > self.from_space


@dataclass(frozen=True)
class VerseCollected:
    verse: str
    position: int


@dataclass(frozen=True)
class Settled:
    """Position detail at the end of a non-winning move."""

    position: int
    verse: str | None = None


@dataclass(frozen=True)
class Victory:
    position: int


MoveEvent = Union[Stepped, Remapped, VerseCollected, Settled, Victory]

_EVENT_PHASES: dict[type, Phase] = {
    Stepped: Phase.MOVING,
    Remapped: Phase.REMAPPING,
    VerseCollected: Phase.SETTLED,
    Settled: Phase.SETTLED,
    Victory: Phase.VICTORY,
}


@dataclass
class MoveResult:
    """What happened after a roll."""

    roll: int
    start: int
    target: int
    events: list[MoveEvent]
    final_state: GameState

    @property
    def won(self) -> bool:
        return any(isinstance(e, Victory) for e in self.events)

    @property
    def phase(self) -> Phase:
        return Phase.VICTORY if self.won else Phase.SETTLED

    @property
    def remap(self) -> Remapped | None:
        for e in self.events:
            if isinstance(e, Remapped):
                return e
        return None

    @property
    def collected(self) -> str | None:
        for e in self.events:
            if isinstance(e, VerseCollected):
                return e.verse
        return None

    @property
    def outcome(self) -> str:
        """One of victory, ladder, snake, verse or normal."""
        if self.won:
            return "victory"
        remap = self.remap
        if remap is not None:
            return "ladder" if remap.is_ladder else "snake"
        if self.collected is not None:
            return "verse"
        return "normal"


# ── Engine ───────────────────────────────────────────────────────────

def roll_die(rng: random.Random | None = None) -> int:
    """Uniform roll of a six-sided die."""
    return (rng or random).randint(1, DIE_FACES)


def resolve_move(
    state: GameState, die_value: int, board: Board = DEFAULT_BOARD,
) -> MoveResult:
    """Compute the result of rolling *die_value* from *state*.

    Does NOT mutate *state* — the returned ``final_state`` is a copy.
    """
    if not 1 <= die_value <= DIE_FACES:
        raise ValueError(f"die value must be 1–{DIE_FACES}, got {die_value}")

    final = state.copy()
    # Overshoot → clamp to the last space
    target = min(state.position + die_value, board.final_space)
    events: list[MoveEvent] = []

    for position in range(state.position + 1, target + 1):
        events.append(Stepped(position))
    final.position = target

    if target == board.final_space:
        events.append(Victory(target))
        return MoveResult(die_value, state.position, target, events, final)

    dest = board.remap_of(target)
    if dest is not None:
        # Single hop: the destination's own remap and verse are not applied
        final.position = dest
        events.append(Remapped(target, dest))
    else:
        verse = board.verse_at(target)
        if verse is not None and final.collect(verse):
            events.append(VerseCollected(verse, target))

    events.append(Settled(final.position, board.verse_at(final.position)))
    return MoveResult(die_value, state.position, target, events, final)


# ── Observer ────────────────────────────────────────────────────────

class GameObserver(Protocol):
    """Receives move events in order as a roll is dispatched."""

    def on_event(self, event: MoveEvent) -> None: ...


@dataclass
class ListObserver:
    """Default observer — collects events into a list."""

    events: list[MoveEvent] = field(default_factory=list)

    def on_event(self, event: MoveEvent) -> None:
        self.events.append(event)


# ── Session ──────────────────────────────────────────────────────────

class GameSession:
    """Owns the game state for one player and drives it roll by roll."""

    def __init__(
        self,
        store: StateStore | None = None,
        narrator: Narrator | None = None,
        observer: GameObserver | None = None,
        board: Board = DEFAULT_BOARD,
        muted: bool = False,
        locale: str = DEFAULT_LOCALE,
        rng: random.Random | None = None,
    ):
        if store is None:
            from serpientes.persistence import MemoryStore
            store = MemoryStore(total_spaces=board.total_spaces)
        self.store = store
        self.narrator = narrator or SilentNarrator()
        self.observer = observer or ListObserver()
        self.board = board
        self.muted = muted
        self.locale = locale
        self.rng = rng
        self.state = store.load()
        self._rolling = False
        self._moving_phase = Phase.MOVING

    @property
    def finished(self) -> bool:
        return self.state.position == self.board.final_space

    @property
    def phase(self) -> Phase:
        """Phase of the move being dispatched, else IDLE or VICTORY."""
        if self._rolling:
            return self._moving_phase
        if self.finished:
            return Phase.VICTORY
        return Phase.IDLE

    def roll(self, die_value: int | None = None) -> MoveResult | None:
        """Roll (or apply *die_value*) and settle the move.

        Returns None when the roll is ignored: a move is already being
        dispatched, or the game is won and waiting for :meth:`reset`.
        """
        if self._rolling:
            logger.debug("Roll ignored: move in progress")
            return None
        if self.finished:
            logger.debug("Roll ignored: game already won")
            return None

        self._rolling = True
        self._moving_phase = Phase.MOVING
        try:
            if die_value is None:
                die_value = roll_die(self.rng)
            result = resolve_move(self.state, die_value, self.board)
            self._dispatch(result)
        finally:
            self._rolling = False
        return result

    def _dispatch(self, result: MoveResult) -> None:
        game_number = self.store.game_number
        logger.debug(
            "Rolled %d: %d → %d", result.roll, result.start, result.target,
        )
        for event in result.events:
            self._moving_phase = _EVENT_PHASES[type(event)]
            self.observer.on_event(event)
            if isinstance(event, Remapped):
                logger.info(
                    "%s %d → %d",
                    "Ladder" if event.is_ladder else "Snake",
                    event.from_space, event.to_space,
                )
            elif isinstance(event, VerseCollected):
                logger.info("Collected verse on %d", event.position)
                self._speak(event.verse)

        self.state = result.final_state
        self.store.save(self.state)
        self.store.record_move(game_number, result)

        if result.won:
            logger.info(
                "Victory with %d verses", len(self.state.collected_verses),
            )
            self.store.record_victory(
                game_number, len(self.state.collected_verses),
            )
            self.play_victory()

    def play_victory(self) -> None:
        """Narrate every collected verse in order."""
        for verse in self.state.collected_verses:
            self._speak(verse)

    def _speak(self, text: str) -> None:
        self.narrator.speak(text, muted=self.muted, locale=self.locale)

    def reset(self) -> None:
        """Start over from space 0 with no verses (victory dismissed)."""
        self.state = GameState()
        self.store.save(self.state)
        number = self.store.start_new_game()
        logger.info("Game reset; now game %d", number)

    def play_to_victory(self, max_rolls: int = 1000) -> list[MoveResult]:
        """Keep rolling until the game is won or *max_rolls* is reached."""
        results: list[MoveResult] = []
        while not self.finished and len(results) < max_rolls:
            result = self.roll()
            if result is None:
                break
            results.append(result)
        return results
