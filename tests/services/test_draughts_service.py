"""Unit tests for src/services/draughts_service.py"""

from uuid import uuid4

import pytest

from src.core.exceptions import GameError, GameStateError, IllegalMoveError, RepositoryError
from src.core.shared_types import Side, Status
from src.db.memory_repository import InMemoryGameRepository
from src.services.draughts_service import (
    CreateGameRequest,
    DeleteGameRequest,
    DraughtsService,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    UndoRequest,
)

STARTING_POSITION = "W" + "b" * 20 + "0" * 10 + "w" * 20


@pytest.fixture
def service(in_memory_repository: InMemoryGameRepository) -> DraughtsService:
    return DraughtsService(in_memory_repository)


# --- SERVICE - CREATE NEW GAME ----
def test_create_a_new_game(service: DraughtsService, in_memory_repository: InMemoryGameRepository) -> None:
    """Check that new game is created, persisted in repo, and return has the appropriate information."""
    response = service.create_new_game(CreateGameRequest())

    assert isinstance(response, GameResponse)
    assert response.position == STARTING_POSITION
    assert response.turn == Side.WHITE
    assert response.status == Status.IN_PROGRESS
    assert response.moves == []
    assert response.header == {}

    stored = in_memory_repository.get_game(response.game_id)
    assert stored is not None
    assert stored.current_fen == response.fen


def test_create_game_from_position(service: DraughtsService) -> None:
    response = service.create_new_game(CreateGameRequest(starting_fen="B:W28:B23"))
    assert response.turn == Side.BLACK
    assert response.header == {"SetUp": "1", "FEN": "B:W28:B23"}


# --- SERVICE - GET GAME / LEGAL MOVES ---
def test_get_game_state(service: DraughtsService) -> None:
    created = service.create_new_game(CreateGameRequest())
    response = service.get_game_state(GetGameRequest(game_id=created.game_id))
    assert response == created


def test_unknown_game(service: DraughtsService) -> None:
    with pytest.raises(RepositoryError):
        service.get_game_state(GetGameRequest(game_id=uuid4()))


def test_legal_moves(service: DraughtsService) -> None:
    created = service.create_new_game(CreateGameRequest())
    response = service.legal_moves(LegalMovesRequest(game_id=created.game_id))
    assert isinstance(response, LegalMovesResponse)
    assert response.turn == Side.WHITE
    assert len(response.legal_moves) == 9

    one_square = service.legal_moves(LegalMovesRequest(game_id=created.game_id, square=35))
    assert one_square.legal_moves == ["35-30"]


# --- SERVICE - MOVES ---
def test_make_moves(service: DraughtsService) -> None:
    game_id = service.create_new_game(CreateGameRequest()).game_id
    service.make_move(MoveRequest(game_id=game_id, from_square=32, to_square=28))
    service.make_move(MoveRequest(game_id=game_id, from_square=19, to_square=23))
    response = service.make_move(MoveRequest(game_id=game_id, from_square=28, to_square=19))

    assert response.moves == ["32-28", "19-23", "28x19"]
    assert response.turn == Side.BLACK

    legal = service.legal_moves(LegalMovesRequest(game_id=game_id))
    assert sorted(legal.legal_moves) == ["13x24", "14x23"]


def test_illegal_move(service: DraughtsService) -> None:
    game_id = service.create_new_game(CreateGameRequest()).game_id
    with pytest.raises(IllegalMoveError):
        service.make_move(MoveRequest(game_id=game_id, from_square=32, to_square=23))
    assert service.get_game_state(GetGameRequest(game_id=game_id)).moves == []


def test_move_in_finished_game(service: DraughtsService) -> None:
    game_id = service.create_new_game(CreateGameRequest(starting_fen="B:W28:B23")).game_id
    response = service.make_move(MoveRequest(game_id=game_id, from_square=23, to_square=32))
    assert response.status == Status.BLACK_WINS

    with pytest.raises(GameStateError):
        service.make_move(MoveRequest(game_id=game_id, from_square=32, to_square=37))


def test_undo_move(service: DraughtsService) -> None:
    game_id = service.create_new_game(CreateGameRequest()).game_id
    service.make_move(MoveRequest(game_id=game_id, from_square=32, to_square=28))
    response = service.undo_move(UndoRequest(game_id=game_id))
    assert response.position == STARTING_POSITION
    assert response.moves == []

    with pytest.raises(GameStateError):
        service.undo_move(UndoRequest(game_id=game_id))


# --- SERVICE - DELETE ---
def test_delete_game(service: DraughtsService) -> None:
    game_id = service.create_new_game(CreateGameRequest()).game_id
    service.delete_game(DeleteGameRequest(game_id=game_id))

    # all errors of the application share a base class
    with pytest.raises(GameError):
        service.get_game_state(GetGameRequest(game_id=game_id))
    with pytest.raises(RepositoryError):
        service.delete_game(DeleteGameRequest(game_id=game_id))
