"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from uuid import UUID

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    UndoRequest,
)
from src.core.exceptions import GameStateError, IllegalMoveError, RepositoryError
from src.core.models import GameModel
from src.core.shared_types import Side, Status
from src.db.repository import GameRepository
from src.draughts.game import Draughts
from src.draughts.pieces import Color

logger = logging.getLogger(__name__)

SIDES = {Color.WHITE: Side.WHITE, Color.BLACK: Side.BLACK}


class DraughtsService:
    """Orchestration of layers for a draughts game."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Start a game from the standard position (or from the requested one)."""

        # Use info in CreateGameRequest to create a new game, and convert into GameModel
        new_game = Draughts(request.starting_fen)

        # Store the GameModel in the repository
        _, game_id = self.repo.create_game(new_game.to_model())
        logger.debug("New game %s from %s", game_id, new_game.starting_fen)

        # Return a GameResponse
        return self._create_game_response(game_id, new_game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        game = self._load_game(request.game_id)
        return self._create_game_response(request.game_id, game)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Retrieve the set of legal moves of the side to move (optionally only those of the piece on one square)."""
        game = self._load_game(request.game_id)
        return LegalMovesResponse(
            game_id=request.game_id,
            turn=SIDES[game.turn],
            legal_moves=[move.to_pdn() for move in game.legal_moves(request.square)],
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Make a move attempt."""
        game = self._load_game(request.game_id)
        if game.is_game_over():
            raise GameStateError(f"Game {request.game_id} is over: {game.status}.")

        # only start and end square are given, the separator does not matter for the lookup
        move_text = f"{request.from_square}-{request.to_square}"
        if game.apply_move(move_text) is None:
            raise IllegalMoveError(
                f"Move {request.from_square} to {request.to_square} is not legal in position {game.serialize_position()}."
            )

        self._store_game(request.game_id, game)
        return self._create_game_response(request.game_id, game)

    def undo_move(self, request: UndoRequest) -> GameResponse:
        """Take back the last move."""
        game = self._load_game(request.game_id)
        if game.undo() is None:
            raise GameStateError(f"Game {request.game_id} has no moves to take back.")

        self._store_game(request.game_id, game)
        return self._create_game_response(request.game_id, game)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        if self.repo.delete_game(request.game_id) is None:
            raise RepositoryError(f"Game with game_id={request.game_id} not found.")

    # -- Internal helpers --
    def _create_game_response(self, game_id: UUID, game: Draughts) -> GameResponse:
        """Convert the state of the game to a GameResponse (for game with given ID.)"""
        return GameResponse(
            game_id=game_id,
            fen=game.serialize_position(),
            position=game.render_position(),
            turn=SIDES[game.turn],
            status=Status(game.status),
            moves=game.history(),
            header=game.header,
        )

    def _load_game(self, game_id: UUID) -> Draughts:
        return Draughts.from_model(self._fetch_game(game_id))

    def _store_game(self, game_id: UUID, game: Draughts) -> None:
        if self.repo.update_game(game_id, game.to_model()) is None:
            raise RepositoryError(f"Game with {game_id=} could not be updated.")

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model
