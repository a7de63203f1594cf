"""
Storage interface for draughts games, as seen by the DraughtsService.

Records are GameModel objects (starting position, moves, snapshot log, header, status). Anything that stores them by UUID
can back the service: the in-memory dict in memory_repository.py, or a database table later on.
"""

from typing import Protocol
from uuid import UUID

from src.core.models import GameModel


class GameRepository(Protocol):
    """Stores games by ID. Lookups of unknown IDs give None, the service decides whether that is an error."""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """The stored record, or None for an unknown ID."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store a freshly created game under a new ID."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Overwrite the record after a move / undo. None if there is no such game."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Drop the record and hand back what was stored (None if there was nothing)."""
        ...
