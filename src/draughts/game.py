"""
The Draughts class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a game of international draughts:
keeping track of the position, the side to move, the moves played, and the positions reached along the way.
"""

import logging
from collections import Counter
from copy import deepcopy
from typing import Any, Optional, Self

from src.core.exceptions import GameStateError, InvalidFENError, InvalidPDNError
from src.core.models import GameModel
from src.core.shared_types import Status
from src.draughts.board import Board
from src.draughts.fen import DEFAULT_FEN, FENState
from src.draughts.moves import (
    AcceptedMove,
    Capture,
    Move,
    MoveFlag,
    MoveText,
    NormalMove,
    all_captures_for_side,
    generate_moves,
    is_valid_move_token,
    moves_at_square,
)
from src.draughts.pdn import build_pdn, parse_pdn
from src.draughts.pieces import PIECE_CHARACTERS, Cell, Color
from src.draughts.square import is_valid_square

logger = logging.getLogger(__name__)

SETUP_HEADERS = ("SetUp", "FEN")


class Draughts:
    """
    A single game of draughts.
    ----

    * board: the current position
    * turn: the side to move
    * move_number: starts at 1, goes up by one after every move of Black
    * moves: the moves played so far (what undo() takes back)
    * states: snapshot of the (external) position after every change of the board. Used to detect repetitions.
    * header: PDN tags. SetUp / FEN are kept up to date as long as no move has been played.

    NOTE Every instance owns all of its state. Nothing is shared between games.
    """

    def __init__(self, fen: Optional[str] = None) -> None:
        self.board = Board.empty()
        self.turn = Color.WHITE
        self.move_number = 1
        self.moves: list[AcceptedMove] = []
        self.states: list[str] = []
        self.header: dict[str, str] = {}
        self.starting_fen = DEFAULT_FEN

        # An invalid FEN in the constructor cannot be reported through a return value. Let the InvalidFENError propagate.
        self._set_up(FENState.from_fen(fen or DEFAULT_FEN))

    # --- BOUNDARY: conversion from / to the transport model ---
    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Rebuild the game by replaying the recorded moves on top of the starting position."""
        if model.status not in Status.__members__.values():
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join(status.value for status in Status)}"
            )

        try:
            game = cls(model.starting_fen)
        except InvalidFENError as exc:
            raise GameStateError(f"Cannot restore game: {exc}") from exc

        for token in model.moves:
            if game.apply_move(token) is None:
                raise GameStateError(
                    f"Cannot restore game: move {token!r} is not legal in position {game.serialize_position()}"
                )

        if game.serialize_position() != model.current_fen:
            raise GameStateError(
                f"Cannot restore game: replayed moves reach {game.serialize_position()}, expected {model.current_fen}"
            )

        if model.state_log:
            game.states = list(model.state_log)
        game.header = dict(model.header)
        return game

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            starting_fen=self.starting_fen,
            current_fen=self.serialize_position(),
            state_log=list(self.states),
            moves=[_replayable_token(accepted.move) for accepted in self.moves],
            header=dict(self.header),
            status=self.status,
        )

    # --- SETTING UP A POSITION ---
    def load(self, fen: str) -> bool:
        """Set up the position described by the FEN. An invalid FEN leaves the game untouched."""
        try:
            state = FENState.from_fen(fen)
        except InvalidFENError as exc:
            logger.warning("FEN rejected: %s", exc)
            return False
        self._set_up(state)
        return True

    def reset(self) -> None:
        """Back to the standard starting position"""
        self.load(DEFAULT_FEN)

    def clear(self) -> None:
        """Empty board, White to move"""
        self._set_up(FENState(Color.WHITE, Board.empty()))

    def get(self, square: int) -> Optional[Cell]:
        if not is_valid_square(square):
            return None
        return self.board.piece(square)

    def place(self, piece: Cell | str, square: int) -> bool:
        """Put a piece on the board outside of normal play"""
        if isinstance(piece, str):
            if len(piece) != 1 or piece not in PIECE_CHARACTERS:
                return False
            piece = Cell.from_char(piece)
        if not piece.is_piece or not is_valid_square(square):
            return False

        self.board.place(piece, square)
        self._record_state()
        self._update_setup()
        return True

    def remove(self, square: int) -> Optional[Cell]:
        """Take whatever stands on the square off the board (and return it)"""
        if not is_valid_square(square):
            return None
        piece = self.board.remove(square)
        self._record_state()
        self._update_setup()
        return piece

    # --- PLAYING ---
    def legal_moves(self, square: Optional[int] = None) -> list[Move]:
        """
        Legal moves for the side to move.
        ----

        Captures are mandatory (and only the longest ones count), so the list either holds captures only or normal moves only.
        When a square is given, only the moves of the piece on that square are returned.
        """
        if square is None:
            return generate_moves(self.board, self.turn)
        return moves_at_square(self.board, square, self.turn)

    def captures(self) -> list[Capture]:
        return all_captures_for_side(self.board, self.turn)

    def apply_move(self, move: Move | MoveText | str) -> Optional[AcceptedMove]:
        """
        Attempt to make a move
        -----

        The move can be given as PDN ("32-28", "28x19", "28x19x10") or as a move object. It is looked up in the set of legal
        moves, and only played if it is in there. Returns the move as played (None if it is not legal).
        """
        move_text = self._to_move_text(move)
        if move_text is None:
            logger.warning("Cannot interpret %r as a move", move)
            return None

        legal_move = next(
            (candidate for candidate in self.legal_moves() if move_text.matches(candidate)),
            None,
        )
        if legal_move is None:
            logger.warning(
                "Move not allowed: %s (%s to move in %s)",
                move,
                self.turn.name.lower(),
                self.serialize_position(),
            )
            return None

        return self._make_move(legal_move)

    def undo(self) -> Optional[AcceptedMove]:
        """Take back the last move. Nothing to take back? Then nothing happens and None is returned."""
        if not self.moves or not self.states:
            return None
        accepted = self.moves.pop()
        self.states.pop()

        self.turn = accepted.turn
        self.move_number = accepted.move_number

        # put the piece back as it was (a man stays a man, even if it got promoted on arrival)
        self.board.place(Cell.EMPTY, accepted.to_square)
        self.board.place(accepted.piece, accepted.from_square)
        for square, piece in zip(accepted.captures, accepted.pieces_captured):
            self.board.place(piece, square)

        logger.debug("Took back %s", accepted.to_pdn())
        return accepted

    # --- CHECKS FOR ENDING THE GAME ---
    def is_repeated_position(self) -> bool:
        """The same position (side to move included) occurred at least three times"""
        if not self.states:
            return False
        _, occurrences = Counter(self.states).most_common(1)[0]
        return occurrences >= 3

    def is_game_over(self) -> bool:
        if self.is_repeated_position():
            return True
        if not self.board.has_pieces(self.turn):
            return True
        return len(self.legal_moves()) == 0

    @property
    def status(self) -> Status:
        if self.is_repeated_position():
            return Status.DRAW_REPETITION
        if not self.is_game_over():
            return Status.IN_PROGRESS
        # the side to move is stuck (or has nothing left): the opponent wins
        return Status.WHITE_WINS if self.turn == Color.BLACK else Status.BLACK_WINS

    @property
    def winner(self) -> Optional[Color]:
        status = self.status
        if status == Status.WHITE_WINS:
            return Color.WHITE
        if status == Status.BLACK_WINS:
            return Color.BLACK
        return None

    # --- QUERIES / NOTATION ---
    def history(self, verbose: bool = False) -> list[str] | list[AcceptedMove]:
        """The moves played so far. As PDN ("32-28", "23x32") by default, or the full records when verbose."""
        if verbose:
            return list(self.moves)
        return [accepted.to_pdn() for accepted in self.moves]

    def current_turn(self) -> Color:
        return self.turn

    def render_position(self) -> str:
        """External position: side to move + the contents of squares 1-50"""
        return self.board.to_external(self.turn)

    def set_header(self, key: str, value: str) -> dict[str, str]:
        self.header[key] = value
        return dict(self.header)

    def serialize_position(self) -> str:
        return FENState(self.turn, self.board).to_fen()

    def serialize_movetext(self, max_width: int = 0, newline: str = "\n") -> str:
        return build_pdn(self.header, self.moves, max_width=max_width, newline=newline)

    def load_pdn(self, pdn: str) -> bool:
        """
        Replace the game by the one described in the PDN.
        -----

        1. Parse headers and movetext
        2. Set up the position (the FEN header if SetUp is "1", the starting position otherwise)
        3. Play every move. A single illegal move makes the whole game invalid.
        4. A result at the end of the movetext ends up in the Result header (unless that header is already there)

        On failure the game is left as it was before the call.
        """
        try:
            parsed = parse_pdn(pdn)
        except InvalidPDNError as exc:
            logger.warning("PDN rejected: %s", exc)
            return False

        saved = self._save_state()
        if parsed.headers.get("SetUp") == "1":
            if "FEN" not in parsed.headers or not self.load(parsed.headers["FEN"]):
                logger.warning("PDN rejected: SetUp without a valid FEN header")
                self._restore_state(saved)
                return False
        else:
            self.reset()

        # loading the position rewrote the header, the tags of the PDN win
        self.header.update(parsed.headers)

        for token in parsed.moves:
            if self.apply_move(token) is None:
                logger.warning("PDN rejected: illegal move %s", token)
                self._restore_state(saved)
                return False

        if parsed.result is not None and "Result" not in self.header:
            self.header["Result"] = parsed.result
        return True

    def ascii(self, unicode: bool = False) -> str:
        return self.board.ascii(unicode=unicode)

    def perft(self, depth: int) -> int:
        """
        Count the leaf nodes of the game tree up to the given depth (in half moves).
        Used to verify the move generator against known node counts.
        """
        if depth < 1:
            return 1
        nodes = 0
        for move in self.legal_moves():
            self._make_move(move)
            nodes += self.perft(depth - 1)
            self.undo()
        return nodes

    # -- PRIVATE HELPERS ---
    def _set_up(self, state: FENState) -> None:
        """Fresh game from the given position: no moves, no header, a single snapshot"""
        self.board = state.board
        self.turn = state.turn
        self.move_number = 1
        self.moves = []
        self.states = []
        self.header = {}
        self._record_state()
        self._update_setup()
        logger.debug("Position set up: %s", self.serialize_position())

    def _record_state(self) -> None:
        self.states.append(self.render_position())

    def _update_setup(self) -> None:
        """
        Keep the SetUp / FEN tags in line with the initial position.

        Only as long as no move has been played: once the game is underway, placing or removing pieces does not rewrite the
        initial position any more. The standard starting position needs no tags.
        """
        if self.moves:
            return
        fen = self.serialize_position()
        self.starting_fen = fen
        if fen != _default_position_fen():
            self.header["SetUp"] = "1"
            self.header["FEN"] = fen
        else:
            for key in SETUP_HEADERS:
                self.header.pop(key, None)

    def _make_move(self, move: Move) -> AcceptedMove:
        """
        Update the board and the bookkeeping for a move known to be legal

        1. move the piece, remove the pieces taken
        2. promote a man reaching the far row
        3. move number goes up after Black moved, then the other side is to move
        4. store the move and a snapshot of the new position
        """
        accepted = AcceptedMove.from_move_and_board(
            move, self.board, self.turn, self.move_number
        )

        self.board.move_piece(move.from_square, move.to_square)
        for square in move.takes:
            self.board.remove(square)

        if accepted.flag == MoveFlag.PROMOTION:
            self.board.place(accepted.piece.promoted(), move.to_square)

        if self.turn == Color.BLACK:
            self.move_number += 1
        self.turn = self.turn.opponent

        self.moves.append(accepted)
        self._record_state()
        logger.debug("Played %s", accepted.to_pdn())
        return accepted

    def _to_move_text(self, move: Any) -> Optional[MoveText]:
        if isinstance(move, MoveText):
            return move
        if isinstance(move, (Capture, NormalMove)):
            return MoveText(move.jumps)
        if isinstance(move, str) and is_valid_move_token(move.strip()):
            return MoveText.from_pdn(move.strip())
        return None

    def _save_state(self) -> dict[str, Any]:
        return deepcopy(vars(self))

    def _restore_state(self, saved: dict[str, Any]) -> None:
        vars(self).update(saved)


def _default_position_fen() -> str:
    return FENState.starting_position().to_fen()


def _replayable_token(move: Move) -> str:
    """Captures with their full path, so the exact sequence can be found again when replaying"""
    if isinstance(move, Capture):
        return move.to_pdn_path()
    return move.to_pdn()
