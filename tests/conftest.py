"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable

import pytest

from src.db.memory_repository import InMemoryGameRepository
from src.draughts.game import Draughts


@pytest.fixture
def in_memory_repository() -> InMemoryGameRepository:
    """Fresh (empty) repository for every test"""
    return InMemoryGameRepository()


@pytest.fixture
def starting_game() -> Draughts:
    return Draughts()


@pytest.fixture
def game_from_fen() -> Callable[[str], Draughts]:
    """Call the inner function with the FEN of the position to set up"""

    def _create_game(fen: str) -> Draughts:
        return Draughts(fen)

    return _create_game
