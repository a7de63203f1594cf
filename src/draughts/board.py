"""The Game board: the cells of the board plus the directional scans that the movement rules are built on"""

from dataclasses import dataclass
from typing import Optional, Self

from src.draughts.pieces import UNICODE_PIECES, Cell, Color
from src.draughts.square import (
    INTERNAL_SIZE,
    NUM_SQUARES,
    Direction,
    is_outside,
    to_internal,
)

Ray = tuple[Cell, ...]

BOARD_EDGE = "+" + "-" * 22 + "+"


@dataclass
class Board:
    """
    56 cells, indexed with the internal numbering. The sentinel cells (every 11th) always hold Cell.OUTSIDE,
    the other 50 hold the playable squares.
    """

    cells: list[Cell]

    @classmethod
    def empty(cls) -> Self:
        return cls(
            [
                Cell.OUTSIDE if is_outside(index) else Cell.EMPTY
                for index in range(INTERNAL_SIZE)
            ]
        )

    @classmethod
    def from_external(cls, position: str) -> Self:
        """
        Construct a board from the external position string.

        That is 51 characters: index 0 is the side to move (ignored here), indices 1-50 hold the contents of squares 1-50.
        ex. standard starting position:
        Wbbbbbbbbbbbbbbbbbbbb0000000000wwwwwwwwwwwwwwwwwwww
        """
        board = cls.empty()
        for square, character in enumerate(position[1 : NUM_SQUARES + 1], start=1):
            board.place(Cell.from_char(character), square)
        return board

    def to_external(self, turn: Color) -> str:
        """Reverse operation: side to move followed by the 50 playable squares"""
        return turn.value + "".join(
            self.piece(square).value for square in range(1, NUM_SQUARES + 1)
        )

    def to_internal(self) -> str:
        """The 56 character string, sentinels included. Mostly useful when debugging."""
        return "".join(cell.value for cell in self.cells)

    # --- access by external square number ---
    def piece(self, square: int) -> Cell:
        return self.cells[to_internal(square)]

    def place(self, cell: Cell, square: int) -> None:
        self.cells[to_internal(square)] = cell

    def remove(self, square: int) -> Cell:
        piece = self.piece(square)
        self.place(Cell.EMPTY, square)
        return piece

    def move_piece(self, from_square: int, to_square: int) -> Cell:
        """Relocate whatever stands on from_square. Returns the piece that moved."""
        piece = self.remove(from_square)
        self.place(piece, to_square)
        return piece

    def locate_color(self, color: Color) -> list[int]:
        """Internal indices of all pieces of the given color, in increasing order"""
        return [index for index, cell in enumerate(self.cells) if cell.color == color]

    def has_pieces(self, color: Color) -> bool:
        return any(cell.color == color for cell in self.cells)

    # --- directional scans (internal numbering) ---
    def scan(self, index: int, max_length: Optional[int] = None) -> dict[Direction, Ray]:
        """
        Direction strings
        -----

        For each of the four directions, walk from the given cell and collect the contents of every cell passed,
        until falling off the board (or until max_length cells have been collected).

        ex. for internal index 29: {NE: (b, 0, 0, b, b, 0), SE: (b, w, w, 0), SW: (b, 0), NW: (b, w)}

        Men only need to look two cells ahead (max_length=2), kings see the whole diagonal.
        """
        if is_outside(index):
            raise ValueError(f"Cannot scan from index {index}: not a square on the board.")

        rays: dict[Direction, Ray] = {}
        for direction in Direction:
            collected: list[Cell] = []
            walk = index + direction.step
            while not is_outside(walk) and (
                max_length is None or len(collected) < max_length
            ):
                collected.append(self.cells[walk])
                walk += direction.step
            rays[direction] = tuple(collected)
        return rays

    # --- display ---
    def ascii(self, unicode: bool = False) -> str:
        """Text diagram of the board, square 1 top left (from White's point of view)"""
        lines = [BOARD_EDGE]
        square = 1
        for row in range(10):
            row_chars: list[str] = []
            for column in range(10):
                if (row + column) % 2 == 0:
                    row_chars.append("  ")
                    continue
                cell = self.piece(square)
                symbol = UNICODE_PIECES[cell] if unicode else cell.value
                row_chars.append(f" {symbol}")
                square += 1
            lines.append(f"| {''.join(row_chars)} |")
        lines.append(BOARD_EDGE)
        return "\n".join(lines) + "\n"
