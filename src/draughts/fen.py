"""
Representation of a single position on the board. The part that can be encoded in a FEN string.

Draughts FEN looks nothing like chess FEN. It lists the squares occupied by each side:

<side to move>:<color><squares>:<color><squares>

* The side to move is "W" or "B" ("?" if unknown)
* Each side starts with its color letter, followed by a comma separated list of squares.
  A "K" in front of a square denotes a king. A range "31-50" stands for every square from 31 up to and including 50.

ex) The standard starting position
W:W31-50:B1-20
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Self

from src.core.exceptions import InvalidFENError
from src.draughts.board import Board
from src.draughts.pieces import Cell, Color
from src.draughts.square import NUM_SQUARES, is_valid_square

logger = logging.getLogger(__name__)

DEFAULT_FEN = "W:W31-50:B1-20"
EMPTY_BOARD_FENS = ("B::", "W::", "?::")
VALID_TURNS = ("B", "W", "?")
VALID_SIDE_COLORS = ("BW", "WB")
# Validation is a bit more lenient than the board: squares up to 100 pass (anything above 50 is ignored when loading)
MAX_FEN_SQUARE = 100

_INTEGER_RE = re.compile(r"^[0-9]+$")


class FENErrorCode(Enum):
    """Error number + message reported back when validating a FEN"""

    NO_ERROR = (0, "no errors")
    NOT_A_STRING = (1, "fen position not a string")
    NO_COLON = (2, "fen position has not colon at second position")
    NOT_THREE_PARTS = (3, "fen position has not 2 colons")
    INVALID_TURN = (4, "side to move of fen position not valid")
    INVALID_COLORS = (5, "color(s) of sides of fen position not valid")
    SQUARE_NOT_INTEGER = (6, "squares of fen position not integer")
    SQUARE_OUT_OF_RANGE = (7, "squares of fen position not valid")
    EMPTY = (8, "empty fen position")

    @property
    def code(self) -> int:
        return self.value[0]

    @property
    def message(self) -> str:
        return self.value[1]


@dataclass(frozen=True)
class FENValidation:
    """Outcome of validate_fen(). `fen` is the normalized string, `fragment` the part that made it fail (if any)."""

    valid: bool
    error: FENErrorCode
    fen: str
    fragment: Optional[str] = None

    @property
    def error_number(self) -> int:
        return self.error.code


def _invalid(error: FENErrorCode, fen: str, fragment: Optional[str] = None) -> FENValidation:
    return FENValidation(False, error, fen, fragment)


def normalize_fen(fen: str) -> str:
    """Whitespace is meaningless, and anything after a dot is a suffix we do not use"""
    fen = re.sub(r"\s+", "", fen)
    if fen in EMPTY_BOARD_FENS:
        return f"{fen[0]}:B:W"
    return re.sub(r"\..*$", "", fen)


def validate_fen(fen: Any) -> FENValidation:
    """
    Check if given string follows proper FEN notation.
    ----

    Checks in order: type, empty, colon after the side to move, three parts, side to move, colors of both sides,
    and finally every square (or range endpoint) in both lists.
    """
    if not isinstance(fen, str):
        return _invalid(FENErrorCode.NOT_A_STRING, repr(fen))

    fen = normalize_fen(fen)
    if fen == "":
        return _invalid(FENErrorCode.EMPTY, fen)

    if fen[1:2] != ":":
        return _invalid(FENErrorCode.NO_COLON, fen, fen[:2])

    # fen should be 3 sections separated by colons
    parts = fen.split(":")
    if len(parts) != 3:
        return _invalid(FENErrorCode.NOT_THREE_PARTS, fen)

    turn, white_or_black, black_or_white = parts
    if turn not in VALID_TURNS:
        return _invalid(FENErrorCode.INVALID_TURN, fen, turn)

    colors = white_or_black[:1] + black_or_white[:1]
    if colors not in VALID_SIDE_COLORS:
        return _invalid(FENErrorCode.INVALID_COLORS, fen, colors)

    for side in (white_or_black, black_or_white):
        for square_token in _square_tokens(side):
            error = _validate_square_token(square_token)
            if error is not None:
                return _invalid(error, fen, square_token)

    return FENValidation(True, FENErrorCode.NO_ERROR, fen)


def is_valid_fen(fen: Any) -> bool:
    return validate_fen(fen).valid


def _square_tokens(side: str) -> list[str]:
    """The comma separated entries after the color letter (none for a side without pieces)"""
    squares = side[1:]
    if not squares:
        return []
    return squares.split(",")


def _validate_square_token(token: str) -> Optional[FENErrorCode]:
    """A square, K + square, or a range of squares. Returns what is wrong with it (None if valid)."""
    token = token.removeprefix("K")
    endpoints = token.split("-")
    if len(endpoints) != 2:
        endpoints = [token]
    for endpoint in endpoints:
        if not _INTEGER_RE.match(endpoint):
            return FENErrorCode.SQUARE_NOT_INTEGER
        if not (1 <= int(endpoint) <= MAX_FEN_SQUARE):
            return FENErrorCode.SQUARE_OUT_OF_RANGE
    return None


def _expand_square_token(token: str) -> tuple[bool, list[int]]:
    """Is it a king (or range of kings)? + all the squares the entry stands for"""
    is_king = token.startswith("K")
    token = token.removeprefix("K")
    endpoints = token.split("-")
    if len(endpoints) == 2:
        first, last = int(endpoints[0]), int(endpoints[1])
        return is_king, list(range(first, last + 1))
    return is_king, [int(token)]


def squares_to_fen(squares: list[int], kings: set[int]) -> str:
    """Comma separated list of squares, kings marked with a K"""
    return ",".join(f"K{square}" if square in kings else str(square) for square in squares)


@dataclass
class FENState:
    """
    Data that can be constructed from a FEN string: the side to move and the board.
    """

    turn: Color
    board: Board

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Parse the FEN into data"""

        # raise an exception if invalid FEN:
        validation = validate_fen(fen)
        if not validation.valid:
            raise InvalidFENError(
                f"Cannot interpret supplied string as FEN: {validation.fen!r} ({validation.error.message}"
                f"{f': {validation.fragment!r}' if validation.fragment else ''})"
            )

        turn_str, *sides = validation.fen.split(":")

        # an unknown side to move ("?") is treated as White to move
        turn = Color.BLACK if turn_str == Color.BLACK.value else Color.WHITE

        board = Board.empty()
        for side in sides:
            color = Color(side[0])
            for token in _square_tokens(side):
                is_king, squares = _expand_square_token(token)
                piece = Cell.king(color) if is_king else Cell.man(color)
                for square in squares:
                    if not is_valid_square(square):
                        logger.debug("Ignoring square %d outside the board in FEN %s", square, fen)
                        continue
                    board.place(piece, square)
        return cls(turn, board)

    def to_fen(self) -> str:
        """reverse operation: write a FEN from the given data (white pieces first, no ranges)"""
        lists: dict[Color, list[int]] = {Color.WHITE: [], Color.BLACK: []}
        kings: set[int] = set()
        for square in range(1, NUM_SQUARES + 1):
            piece = self.board.piece(square)
            if not piece.is_piece:
                continue
            lists[piece.color].append(square)
            if piece.is_king:
                kings.add(square)
        white = squares_to_fen(lists[Color.WHITE], kings)
        black = squares_to_fen(lists[Color.BLACK], kings)
        return f"{self.turn.value}:W{white}:B{black}"

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(DEFAULT_FEN)


def generate_fen(board: Board, turn: Color) -> str:
    return FENState(turn, board).to_fen()


def parse_fen(fen: str) -> tuple[Color, Board]:
    state = FENState.from_fen(fen)
    return state.turn, state.board
