"""Implementation of (Game)Repository keeping every game in a dict"""

import logging
from copy import deepcopy
from uuid import UUID, uuid4

from src.core.models import GameModel

logger = logging.getLogger(__name__)


class InMemoryGameRepository:
    """
    Games stored by ID for the lifetime of the process.

    NOTE Stored records are copies: changing a GameModel after handing it over (or after getting it back) does not change
    what is stored.
    """

    def __init__(self) -> None:
        self._games: dict[UUID, GameModel] = {}

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game = self._games.get(game_id)
        if game is None:
            return None
        return deepcopy(game)

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        new_id = uuid4()
        self._games[new_id] = deepcopy(game)
        logger.debug("Created game %s", new_id)
        return deepcopy(game), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Replace the stored data of an existing record."""
        if game_id not in self._games:
            return None
        self._games[game_id] = deepcopy(game)
        return deepcopy(game)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        game = self._games.pop(game_id, None)
        if game is not None:
            logger.debug("Deleted game %s", game_id)
        return game

    def __len__(self) -> int:
        return len(self._games)
