"""Defines the pieces (and the contents of a board cell)"""

from enum import Enum
from typing import Optional, Self

from src.draughts.square import Direction


class Color(Enum):
    """Values are the letters used for the side to move / side lists in FEN."""

    WHITE = "W"
    BLACK = "B"

    @property
    def opponent(self) -> Self:
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class Cell(Enum):
    """
    Everything a cell of the board can hold. Values are the single characters of the (internal / external) position strings:
    lower case for men, upper case for kings. OUTSIDE only ever appears on the sentinel cells.
    """

    EMPTY = "0"
    WHITE_MAN = "w"
    BLACK_MAN = "b"
    WHITE_KING = "W"
    BLACK_KING = "B"
    OUTSIDE = "-"

    @classmethod
    def from_char(cls, character: str) -> Self:
        return cls(character)

    @classmethod
    def man(cls, color: Color) -> Self:
        return cls.WHITE_MAN if color == Color.WHITE else cls.BLACK_MAN

    @classmethod
    def king(cls, color: Color) -> Self:
        return cls.WHITE_KING if color == Color.WHITE else cls.BLACK_KING

    @property
    def color(self) -> Optional[Color]:
        return PIECE_COLORS.get(self)

    @property
    def is_piece(self) -> bool:
        return self in PIECE_COLORS

    @property
    def is_man(self) -> bool:
        return self in (Cell.WHITE_MAN, Cell.BLACK_MAN)

    @property
    def is_king(self) -> bool:
        return self in (Cell.WHITE_KING, Cell.BLACK_KING)

    def is_opponent_of(self, color: Color) -> bool:
        return self.is_piece and self.color != color

    def promoted(self) -> Self:
        # kings (and non-pieces) stay what they are
        if not self.is_man:
            return self
        return Cell.king(self.color)


PIECE_COLORS: dict[Cell, Color] = {
    Cell.WHITE_MAN: Color.WHITE,
    Cell.WHITE_KING: Color.WHITE,
    Cell.BLACK_MAN: Color.BLACK,
    Cell.BLACK_KING: Color.BLACK,
}

PIECE_CHARACTERS = "bwBW"

# White starts on the bottom rows (31-50) and moves up the board, Black the other way around.
FORWARD_DIRECTIONS: dict[Color, tuple[Direction, ...]] = {
    Color.WHITE: (Direction.NE, Direction.NW),
    Color.BLACK: (Direction.SE, Direction.SW),
}

# Row on which a man of that color gets crowned (external square numbers)
PROMOTION_SQUARES: dict[Color, range] = {
    Color.WHITE: range(1, 6),
    Color.BLACK: range(46, 51),
}

UNICODE_PIECES: dict[Cell, str] = {
    Cell.WHITE_MAN: "⛀",
    Cell.WHITE_KING: "⛁",
    Cell.BLACK_MAN: "⛂",
    Cell.BLACK_KING: "⛃",
    Cell.EMPTY: " ",
}


def is_promotion_square(square: int, color: Color) -> bool:
    return square in PROMOTION_SQUARES[color]
