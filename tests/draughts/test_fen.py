"""Unit tests for src/draughts/fen.py"""

from typing import Any

import pytest

from src.core.exceptions import InvalidFENError
from src.draughts.board import Board
from src.draughts.fen import (
    DEFAULT_FEN,
    FENErrorCode,
    FENState,
    generate_fen,
    is_valid_fen,
    normalize_fen,
    parse_fen,
    validate_fen,
)
from src.draughts.pieces import Cell, Color

EXPANDED_STARTING_FEN = (
    "W:W31,32,33,34,35,36,37,38,39,40,41,42,43,44,45,46,47,48,49,50"
    ":B1,2,3,4,5,6,7,8,9,10,11,12,13,14,15,16,17,18,19,20"
)


@pytest.mark.parametrize(
    "fen, normalized",
    [
        ("W:W31-50:B1-20", "W:W31-50:B1-20"),
        (" W : W31, 32 :B1 ", "W:W31,32:B1"),
        ("B::", "B:B:W"),
        ("W::", "W:B:W"),
        ("?::", "?:B:W"),
        ("W:W31:B1.some suffix", "W:W31:B1"),
    ],
)
def test_normalize_fen(fen: str, normalized: str) -> None:
    assert normalize_fen(fen) == normalized


@pytest.mark.parametrize(
    "fen",
    [
        DEFAULT_FEN,
        EXPANDED_STARTING_FEN,
        "B:WK3,28:B23,K45",
        "W:WK31-35:B1",
        "W:B1:W31",  # black first is fine too
        "?:W:B",
        "W::",
        "W:W31:B100",  # above 50 still passes validation
    ],
)
def test_valid_fen(fen: str) -> None:
    validation = validate_fen(fen)
    assert validation.valid
    assert validation.error == FENErrorCode.NO_ERROR
    assert validation.error_number == 0


@pytest.mark.parametrize(
    "fen, error, number",
    [
        (123, FENErrorCode.NOT_A_STRING, 1),
        (None, FENErrorCode.NOT_A_STRING, 1),
        ("WW31-50:B1-20", FENErrorCode.NO_COLON, 2),
        ("W:W31-50", FENErrorCode.NOT_THREE_PARTS, 3),
        ("W:W31:B1:", FENErrorCode.NOT_THREE_PARTS, 3),
        ("X:W31:B1", FENErrorCode.INVALID_TURN, 4),
        ("W:X31:B1", FENErrorCode.INVALID_COLORS, 5),
        ("W:W31:W1", FENErrorCode.INVALID_COLORS, 5),
        ("W:Wa:B1", FENErrorCode.SQUARE_NOT_INTEGER, 6),
        ("W:W31-b:B1", FENErrorCode.SQUARE_NOT_INTEGER, 6),
        ("W:W0:B1", FENErrorCode.SQUARE_OUT_OF_RANGE, 7),
        ("W:W31:B101", FENErrorCode.SQUARE_OUT_OF_RANGE, 7),
        ("", FENErrorCode.EMPTY, 8),
        ("   ", FENErrorCode.EMPTY, 8),
    ],
)
def test_invalid_fen(fen: Any, error: FENErrorCode, number: int) -> None:
    validation = validate_fen(fen)
    assert not validation.valid
    assert validation.error == error
    assert validation.error_number == number
    assert not is_valid_fen(fen)


def test_error_messages() -> None:
    assert FENErrorCode.NO_ERROR.message == "no errors"
    assert FENErrorCode.EMPTY.message == "empty fen position"


def test_starting_position_from_fen() -> None:
    state = FENState.from_fen(DEFAULT_FEN)
    assert state.turn == Color.WHITE
    assert len(state.board.locate_color(Color.WHITE)) == 20
    assert len(state.board.locate_color(Color.BLACK)) == 20
    assert state.board.piece(31) == Cell.WHITE_MAN
    assert state.board.piece(20) == Cell.BLACK_MAN
    assert state.board.piece(25) == Cell.EMPTY


def test_to_fen_lists_every_square() -> None:
    assert FENState.starting_position().to_fen() == EXPANDED_STARTING_FEN


def test_kings_and_round_trip() -> None:
    fen = "B:WK3,28:B23,K45"
    state = FENState.from_fen(fen)
    assert state.turn == Color.BLACK
    assert state.board.piece(3) == Cell.WHITE_KING
    assert state.board.piece(28) == Cell.WHITE_MAN
    assert state.board.piece(45) == Cell.BLACK_KING
    assert state.to_fen() == fen
    assert FENState.from_fen(state.to_fen()) == state


def test_unknown_side_to_move_is_white() -> None:
    assert FENState.from_fen("?:W31:B1").turn == Color.WHITE


def test_empty_board_fen() -> None:
    state = FENState.from_fen("B::")
    assert state.turn == Color.BLACK
    assert state.board == Board.empty()
    assert state.to_fen() == "B:W:B"


def test_squares_above_fifty_are_ignored() -> None:
    state = FENState.from_fen("W:W31,77:B1")
    assert len(state.board.locate_color(Color.WHITE)) == 1


def test_invalid_fen_raises() -> None:
    with pytest.raises(InvalidFENError):
        FENState.from_fen("W:W31")


def test_generate_fen() -> None:
    board = Board.empty()
    board.place(Cell.BLACK_KING, 50)
    board.place(Cell.WHITE_MAN, 1)
    assert generate_fen(board, Color.WHITE) == "W:W1:BK50"


def test_parse_fen() -> None:
    turn, board = parse_fen("B:W28:BK23")
    assert turn == Color.BLACK
    assert board.piece(23) == Cell.BLACK_KING
    with pytest.raises(InvalidFENError):
        parse_fen("W:W28")
