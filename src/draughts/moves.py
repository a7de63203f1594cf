"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define the moves / jumps for each kind of piece (man or king), both working on the
direction strings ("rays") the Board produces for a square.

Captures are mandatory and only the longest capture sequences are legal, so the capture search runs first and its
result (if any) replaces the ordinary moves.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, ClassVar, Optional, Self

from src.draughts.board import Board, Ray
from src.draughts.pieces import (
    FORWARD_DIRECTIONS,
    Cell,
    Color,
    is_promotion_square,
)
from src.draughts.square import Direction, to_external

MOVE_TOKEN_RE = re.compile(r"^\d+(?:[-x]\d+)+$")


class MoveFlag(Enum):
    NORMAL = "n"
    CAPTURE = "c"
    PROMOTION = "p"


@dataclass(frozen=True)
class NormalMove:
    """A piece sliding to an empty square, nothing gets taken"""

    from_square: int
    to_square: int

    flag: ClassVar[MoveFlag] = MoveFlag.NORMAL

    @property
    def jumps(self) -> tuple[int, ...]:
        return (self.from_square, self.to_square)

    @property
    def takes(self) -> tuple[int, ...]:
        return ()

    @property
    def pieces_taken(self) -> tuple[Cell, ...]:
        return ()

    def to_pdn(self) -> str:
        return f"{self.from_square}-{self.to_square}"


@dataclass(frozen=True)
class Capture:
    """
    A (multi-)jump. All squares are external square numbers.

    * jumps: every square the capturing piece stands on, from start to end
    * takes: the squares of the pieces taken, in the order they are jumped
    * pieces_taken: what stood on those squares
    """

    jumps: tuple[int, ...]
    takes: tuple[int, ...]
    pieces_taken: tuple[Cell, ...]

    flag: ClassVar[MoveFlag] = MoveFlag.CAPTURE

    def __post_init__(self) -> None:
        if len(self.jumps) < 2:
            raise ValueError(f"A capture needs at least one jump: {self.jumps}")
        if not (len(self.takes) == len(self.pieces_taken) == len(self.jumps) - 1):
            raise ValueError(
                f"Every jump takes exactly one piece. jumps: {self.jumps}, takes: {self.takes}, pieces: {self.pieces_taken}"
            )
        if len(set(self.takes)) != len(self.takes):
            raise ValueError(f"A piece cannot be taken twice: {self.takes}")

    @property
    def from_square(self) -> int:
        return self.jumps[0]

    @property
    def to_square(self) -> int:
        return self.jumps[-1]

    def to_pdn(self) -> str:
        return f"{self.from_square}x{self.to_square}"

    def to_pdn_path(self) -> str:
        """Long form listing every landing square, unambiguous even if two sequences share start and end"""
        return "x".join(str(square) for square in self.jumps)


Move = NormalMove | Capture


@dataclass(frozen=True)
class MoveText:
    """
    A move as written in PDN: <from>-<to> for a normal move, <from>x<to> for a capture.
    A capture may also list the intermediate landing squares (28x19x10).

    NOTE: Only the squares are stored, the separator is not significant ("28-19" finds the capture 28x19 as well).
    Game will look for the legal move they point to.
    """

    squares: tuple[int, ...]

    @classmethod
    def from_pdn(cls, token: str) -> Self:
        squares = tuple(int(square) for square in re.split(r"[-x]", token))
        return cls(squares)

    @property
    def from_square(self) -> int:
        return self.squares[0]

    @property
    def to_square(self) -> int:
        return self.squares[-1]

    def matches(self, move: Move) -> bool:
        """Start and end square should match. If intermediate squares are given, the whole path should match."""
        if (move.from_square, move.to_square) != (self.from_square, self.to_square):
            return False
        if len(self.squares) > 2:
            return move.jumps == self.squares
        return True


def is_valid_move_token(token: str) -> bool:
    return MOVE_TOKEN_RE.match(token) is not None


@dataclass
class AcceptedMove:
    """
    Snapshot of a move at the time it got played. This is what ends up in the history of the game
    (and what is needed to take the move back again).
    """

    move: Move
    piece: Cell
    flag: MoveFlag
    turn: Color
    move_number: int

    @classmethod
    def from_move_and_board(
        cls, move: Move, board: Board, turn: Color, move_number: int
    ) -> Self:
        """Capture the moving piece before the board gets updated. A man reaching the far row gets promoted (flag overrides capture)."""
        piece = board.piece(move.from_square)
        flag = move.flag
        if piece.is_man and is_promotion_square(move.to_square, piece.color):
            flag = MoveFlag.PROMOTION
        return cls(move, piece, flag, turn, move_number)

    @property
    def from_square(self) -> int:
        return self.move.from_square

    @property
    def to_square(self) -> int:
        return self.move.to_square

    @property
    def is_capture(self) -> bool:
        return isinstance(self.move, Capture)

    @property
    def captures(self) -> tuple[int, ...]:
        return self.move.takes

    @property
    def pieces_captured(self) -> tuple[Cell, ...]:
        return self.move.pieces_taken

    def to_pdn(self) -> str:
        return self.move.to_pdn()


# --- MOVEMENT RULES (non-capturing) ---
def man_moves(index: int, board: Board) -> list[Move]:
    """A man steps one square diagonally forward, onto an empty square. Men never move backward (without capturing)."""
    piece = board.cells[index]
    rays = board.scan(index, max_length=2)
    moves: list[Move] = []
    for direction in Direction:
        if direction not in FORWARD_DIRECTIONS[piece.color]:
            continue
        ray = rays[direction]
        if ray and ray[0] == Cell.EMPTY:
            target = index + direction.step
            moves.append(NormalMove(to_external(index), to_external(target)))
    return moves


def king_moves(index: int, board: Board) -> list[Move]:
    """
    A king flies any distance along a diagonal, as long as the squares are empty.
    One move per empty square, stopping at (not on) the first obstruction.
    """
    rays = board.scan(index)
    moves: list[Move] = []
    for direction in Direction:
        for distance, cell in enumerate(rays[direction], start=1):
            if cell != Cell.EMPTY:
                break
            target = index + distance * direction.step
            moves.append(NormalMove(to_external(index), to_external(target)))
    return moves


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[int, Board], list[Move]]
MOVEMENT_RULES: dict[Cell, CandidateMovesFn] = {
    Cell.WHITE_MAN: man_moves,
    Cell.BLACK_MAN: man_moves,
    Cell.WHITE_KING: king_moves,
    Cell.BLACK_KING: king_moves,
}


# --- CAPTURING RULES ---
# A jump is described by two distances (counted in steps along the ray): where the taken piece is and where we land.
Jump = tuple[int, int]


def man_jumps(ray: Ray, color: Color) -> list[Jump]:
    """Opponent piece (man or king) right next to the man, empty square right behind it."""
    if len(ray) == 2 and ray[0].is_opponent_of(color) and ray[1] == Cell.EMPTY:
        return [(1, 2)]
    return []


def king_jumps(ray: Ray, color: Color) -> list[Jump]:
    """
    Flying capture
    ----

    Any number of empty squares, exactly one opponent piece, then at least one empty square.
    Every empty square behind the taken piece (up to the next obstruction) is a possible landing square.
    """
    distance = 0
    while distance < len(ray) and ray[distance] == Cell.EMPTY:
        distance += 1
    if distance == len(ray) or not ray[distance].is_opponent_of(color):
        return []

    take_distance = distance + 1
    jumps: list[Jump] = []
    for landing_distance in range(take_distance + 1, len(ray) + 1):
        if ray[landing_distance - 1] != Cell.EMPTY:
            break
        jumps.append((take_distance, landing_distance))
    return jumps


# --- STRATEGY PATTERN: CAPTURING RULES ---
JumpsFn = Callable[[Ray, Color], list[Jump]]
CAPTURE_RULES: dict[Cell, JumpsFn] = {
    Cell.WHITE_MAN: man_jumps,
    Cell.BLACK_MAN: man_jumps,
    Cell.WHITE_KING: king_jumps,
    Cell.BLACK_KING: king_jumps,
}

# how far ahead a piece needs to look along a diagonal (None: the whole diagonal)
SCAN_LENGTH: dict[Cell, Optional[int]] = {
    Cell.WHITE_MAN: 2,
    Cell.BLACK_MAN: 2,
    Cell.WHITE_KING: None,
    Cell.BLACK_KING: None,
}


@dataclass
class _CaptureInProgress:
    """The part of a capture sequence found so far (internal indices)"""

    jumps: list[int]
    takes: list[int]
    pieces_taken: list[Cell]

    def extended(self, take: int, landing: int, taken_piece: Cell) -> Self:
        return _CaptureInProgress(
            self.jumps + [landing],
            self.takes + [take],
            self.pieces_taken + [taken_piece],
        )

    def to_capture(self) -> Capture:
        return Capture(
            jumps=tuple(to_external(index) for index in self.jumps),
            takes=tuple(to_external(index) for index in self.takes),
            pieces_taken=tuple(self.pieces_taken),
        )


def _search_captures(
    board: Board,
    index: int,
    piece: Cell,
    forbidden: Optional[Direction],
    in_progress: _CaptureInProgress,
    found: list[Capture],
) -> None:
    """
    Recursive multi-jump search
    -----

    From the square the capturing piece stands on, try every direction (except going straight back the way we came).
    For each possible jump: move the piece on the board, recurse from the landing square, and move it back again.

    * Taken pieces are NOT removed during the search. They keep blocking the diagonal (they only leave the board when the
      whole move is played), and a piece that has been taken once can never be taken again.
    * Only sequences that cannot be continued are recorded.
    * A man passing the promotion row during the sequence stays a man.
    """
    rays = board.scan(index, SCAN_LENGTH[piece])
    jump_rule = CAPTURE_RULES[piece]
    can_continue = False
    for direction in Direction:
        if direction == forbidden:
            continue
        for take_distance, landing_distance in jump_rule(rays[direction], piece.color):
            take = index + take_distance * direction.step
            if take in in_progress.takes:
                continue
            landing = index + landing_distance * direction.step
            can_continue = True

            board.cells[index] = Cell.EMPTY
            board.cells[landing] = piece
            _search_captures(
                board,
                landing,
                piece,
                direction.opposite,
                in_progress.extended(take, landing, board.cells[take]),
                found,
            )
            board.cells[landing] = Cell.EMPTY
            board.cells[index] = piece

    if not can_continue and in_progress.takes:
        found.append(in_progress.to_capture())


def _capture_sequences(board: Board, index: int) -> list[Capture]:
    """All maximal capture sequences from one square (not yet filtered on length)"""
    piece = board.cells[index]
    if piece not in CAPTURE_RULES:
        return []
    found: list[Capture] = []
    _search_captures(board, index, piece, None, _CaptureInProgress([index], [], []), found)
    return found


def longest_captures(captures: list[Capture]) -> list[Capture]:
    """
    Longest capture rule: only the sequences taking the most pieces are allowed.
    If no sequence has a single jump, there is nothing to capture at all.
    """
    max_jumps = max((len(capture.jumps) for capture in captures), default=0)
    if max_jumps < 2:
        return []
    return [capture for capture in captures if len(capture.jumps) == max_jumps]


def captures_from(board: Board, index: int) -> list[Capture]:
    """Longest capture sequences available to the piece on the given internal index"""
    # the search moves pieces around in-place; work on a copy so the caller's board is never touched
    working_board = Board(list(board.cells))
    return longest_captures(_capture_sequences(working_board, index))


def all_captures_for_side(board: Board, color: Color) -> list[Capture]:
    """Longest capture sequences over all pieces of a side (the rule applies across pieces, not per piece)"""
    working_board = Board(list(board.cells))
    found: list[Capture] = []
    for index in board.locate_color(color):
        found.extend(_capture_sequences(working_board, index))
    return longest_captures(found)


def non_capturing_moves(board: Board, color: Color) -> list[Move]:
    moves: list[Move] = []
    for index in board.locate_color(color):
        movement_rule = MOVEMENT_RULES[board.cells[index]]
        moves.extend(movement_rule(index, board))
    return moves


def generate_moves(board: Board, color: Color) -> list[Move]:
    """
    Legal moves for the side with the given color
    ----

    1. Look for captures (longest sequences only, across all pieces).
    2. Found any? Those are the only legal moves.
    3. Otherwise, all ordinary moves.
    """
    captures = all_captures_for_side(board, color)
    if captures:
        return captures
    return non_capturing_moves(board, color)


def moves_at_square(board: Board, square: int, color: Color) -> list[Move]:
    """Legal moves of the side to move, restricted to the piece standing on the given square"""
    return [move for move in generate_moves(board, color) if move.from_square == square]
