"""Board layout and special spaces for Serpientes & Poemas."""

from __future__ import annotations

from dataclasses import dataclass, field

ROWS = 6
COLUMNS = 8

# fmt: off
SNAKES_LADDERS: dict[int, int] = {
    # Ladders (go UP)
     7: 23,  10: 27,  34: 44,
    # Snakes (go DOWN)
    15:  3,  33: 18,  42: 22,
}
# fmt: on

VERSES: dict[int, str] = {
    1: "Estas al inicio formado",
    4: "Los dados ruedan y escapan a tu mano",
    7: "Avanzas sin ningún atraso",
    10: "Entre casillas buscas el atajo",
    13: "No ves los dientes del engaño",
    15: "Y la boca de serpiente te lleva hacia abajo",
    18: "Se acerca mordiendo el fracaso",
    22: "Ganar parece algo lejano",
    25: "Tiras dados, que siga el relajo",
    28: "Atrás medio tablero ha quedado",
    31: "Entre risas pegas brincos y saltos",
    34: "Subes la escalera, peldaño a peldaño",
    37: "A la meta estás más cercano",
    40: "Avanzas, cuidando cada paso",
    43: "Escalas hasta lo más alto",
    46: "En la meta estás, has ganado",
}


@dataclass(frozen=True)
class Board:
    """Grid dimensions plus the snake/ladder and verse tables."""

    rows: int = ROWS
    columns: int = COLUMNS
    remaps: dict[int, int] = field(default_factory=lambda: dict(SNAKES_LADDERS))
    verses: dict[int, str] = field(default_factory=lambda: dict(VERSES))

    @property
    def total_spaces(self) -> int:
        return self.rows * self.columns

    @property
    def final_space(self) -> int:
        return self.total_spaces - 1

    # ── layout ──────────────────────────────────────────────────────

    def index_of(self, row: int, column: int) -> int:
        """Space index for a grid cell; row 0 is the top of the board.

        The path snakes upward from the bottom row, alternating direction
        on every row. Out-of-range cells are not checked.
        """
        reversed_row = self.rows - row - 1
        if reversed_row % 2 == 0:
            return (reversed_row + 1) * self.columns - column - 1
        return reversed_row * self.columns + column

    def coords_of(self, index: int) -> tuple[int, int]:
        """Inverse of :meth:`index_of`."""
        reversed_row, offset = divmod(index, self.columns)
        row = self.rows - reversed_row - 1
        if reversed_row % 2 == 0:
            return row, self.columns - offset - 1
        return row, offset

    def grid(self) -> list[list[int]]:
        """Space indices row by row, top row first."""
        return [
            [self.index_of(row, column) for column in range(self.columns)]
            for row in range(self.rows)
        ]

    # ── special spaces ──────────────────────────────────────────────

    def verse_at(self, index: int) -> str | None:
        return self.verses.get(index)

    def remap_of(self, index: int) -> int | None:
        return self.remaps.get(index)

    def is_ladder(self, index: int) -> bool:
        dest = self.remaps.get(index)
        return dest is not None and dest > index

    def is_snake(self, index: int) -> bool:
        dest = self.remaps.get(index)
        return dest is not None and dest < index

    def layout_problems(self) -> list[str]:
        """Configuration errors in the remap and verse tables.

        Chained remaps are reported here rather than followed: a move
        applies at most one hop.
        """
        problems: list[str] = []
        last = self.final_space
        for src, dest in sorted(self.remaps.items()):
            if not 0 <= src <= last:
                problems.append(f"remap source {src} is off the board")
            if not 0 <= dest <= last:
                problems.append(f"remap {src} → {dest} leaves the board")
            if src in (0, last):
                problems.append(f"remap on reserved space {src}")
            if src == dest:
                problems.append(f"remap {src} → {dest} goes nowhere")
            elif dest in self.remaps:
                problems.append(
                    f"chained remap {src} → {dest} → {self.remaps[dest]}"
                )
        for index in sorted(self.verses):
            if not 0 <= index <= last:
                problems.append(f"verse on space {index} is off the board")
        texts = list(self.verses.values())
        for text in sorted(set(texts)):
            if texts.count(text) > 1:
                problems.append(f"verse appears more than once: {text!r}")
        return problems


DEFAULT_BOARD = Board()
TOTAL_SPACES = DEFAULT_BOARD.total_spaces
FINAL_SPACE = DEFAULT_BOARD.final_space


def index_of(row: int, column: int) -> int:
    return DEFAULT_BOARD.index_of(row, column)


def verse_at(index: int) -> str | None:
    return DEFAULT_BOARD.verse_at(index)


def remap_of(index: int) -> int | None:
    return DEFAULT_BOARD.remap_of(index)


def is_ladder(index: int) -> bool:
    return DEFAULT_BOARD.is_ladder(index)


def is_snake(index: int) -> bool:
    return DEFAULT_BOARD.is_snake(index)
