"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Side, Status
from src.draughts.fen import validate_fen
from src.draughts.square import NUM_SQUARES, is_valid_square


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    starting_fen: Optional[str] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        validation = validate_fen(value)
        if not validation.valid:
            raise InvalidRequestError(
                f"Cannot use {value!r} as starting position: {validation.error.message} (error {validation.error_number})."
            )
        return value


class GetGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID
    square: Optional[int] = None

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and not is_valid_square(value):
            raise InvalidRequestError(
                f"Square {value} is not on the board (1-{NUM_SQUARES})."
            )
        return value


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: int
    to_square: int

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: int) -> int:
        if not is_valid_square(value):
            raise InvalidRequestError(
                f"Square {value} is not on the board (1-{NUM_SQUARES})."
            )
        return value


class UndoRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    fen: str
    position: str
    turn: Side
    status: Status
    moves: list[str]
    header: dict[str, str]


class LegalMovesResponse(BaseModel):
    game_id: UUID
    turn: Side
    legal_moves: list[str]
