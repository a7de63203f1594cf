"""Unit tests for src/draughts/pdn.py"""

import pytest

from src.core.exceptions import InvalidPDNError
from src.draughts.fen import FENState
from src.draughts.moves import AcceptedMove, NormalMove, generate_moves
from src.draughts.pdn import build_pdn, parse_pdn
from src.draughts.pieces import Color


def test_parse_headers_and_moves() -> None:
    pdn = "\n".join(
        [
            '[Event "Club match"]',
            '[White "Player \\"One\\""]',
            "",
            "1. 32-28 19-23 2. 28x19 14x23 *",
        ]
    )
    parsed = parse_pdn(pdn)
    assert parsed.headers == {"Event": "Club match", "White": 'Player "One"'}
    assert parsed.moves == ["32-28", "19-23", "28x19", "14x23"]
    assert parsed.result == "*"


def test_parse_without_headers_or_result() -> None:
    parsed = parse_pdn("1. 32-28 19-23")
    assert parsed.headers == {}
    assert parsed.moves == ["32-28", "19-23"]
    assert parsed.result is None


def test_move_numbers_on_their_own() -> None:
    parsed = parse_pdn("1. 34-30 19-23 2.\n30-25 20-24 3...")
    assert parsed.moves == ["34-30", "19-23", "30-25", "20-24"]


def test_black_to_move_marker() -> None:
    parsed = parse_pdn("12... 19-23 13. 32-28")
    assert parsed.moves == ["19-23", "32-28"]


def test_comments_variations_and_annotations_are_skipped() -> None:
    parsed = parse_pdn("1. 32-28! {good move} 19-23 (18-23 2. 37-32 (2. 33-29)) 2. 28x19?! ; best\n14x23 2-0")
    assert parsed.moves == ["32-28", "19-23", "28x19", "14x23"]
    assert parsed.result == "2-0"


@pytest.mark.parametrize("result", ["2-0", "0-2", "1-1", "0-0", "*", "1-0", "0-1"])
def test_trailing_result(result: str) -> None:
    parsed = parse_pdn(f"1. 32-28 19-23 {result}")
    assert parsed.result == result
    assert parsed.moves == ["32-28", "19-23"]


@pytest.mark.parametrize(
    "pdn",
    [
        "1. 32-28 nonsense",
        "1. 32/28",
        '[Event "unterminated\n1. 32-28',
    ],
)
def test_invalid_pdn(pdn: str) -> None:
    with pytest.raises(InvalidPDNError):
        parse_pdn(pdn)


def _play(fen: str, moves: list[str]) -> list[AcceptedMove]:
    """Accepted moves for a sequence of normal moves (legal ones, not checked here)"""
    state = FENState.from_fen(fen)
    history: list[AcceptedMove] = []
    move_number = 1
    for token in moves:
        from_square, to_square = (int(square) for square in token.split("-"))
        history.append(
            AcceptedMove.from_move_and_board(NormalMove(from_square, to_square), state.board, state.turn, move_number)
        )
        state.board.move_piece(from_square, to_square)
        if state.turn == Color.BLACK:
            move_number += 1
        state.turn = state.turn.opponent
    return history


def test_build_pdn() -> None:
    history = _play("W:W31-50:B1-20", ["32-28", "19-23", "37-32"])
    pdn = build_pdn({"Event": "Casual", "Result": "*"}, history)
    assert pdn == '[Event "Casual"]\n[Result "*"]\n\n1. 32-28 19-23 2. 37-32 *'


def test_build_pdn_black_moves_first() -> None:
    history = _play("B:W31-50:B1-20", ["19-23", "32-28"])
    assert build_pdn({}, history) == "1. ... 19-23 2. 32-28"


def test_build_pdn_wrapping() -> None:
    history = _play("W:W31-50:B1-20", ["32-28", "19-23", "37-32", "14-19"])
    pdn = build_pdn({"Result": "*"}, history, max_width=10, newline="\r\n")
    assert pdn == '[Result "*"]\r\n\r\n1. 32-28\r\n19-23\r\n2. 37-32\r\n14-19 *'


def test_build_pdn_escapes_header_values() -> None:
    assert build_pdn({"White": 'A "quoted" name'}, []) == '[White "A \\"quoted\\" name"]\n'


def test_parse_what_was_built() -> None:
    history = _play("W:W31-50:B1-20", ["32-28", "19-23", "37-32"])
    parsed = parse_pdn(build_pdn({"Event": 'The "big" one', "Result": "0-2"}, history))
    assert parsed.headers == {"Event": 'The "big" one', "Result": "0-2"}
    assert parsed.moves == ["32-28", "19-23", "37-32"]
    assert parsed.result == "0-2"


def test_capture_written_with_x() -> None:
    state = FENState.from_fen("W:W28:B23")
    capture = generate_moves(state.board, Color.WHITE)[0]
    history = [AcceptedMove.from_move_and_board(capture, state.board, Color.WHITE, 1)]
    assert build_pdn({}, history) == "1. 28x19"
