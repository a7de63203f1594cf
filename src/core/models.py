"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the API layer or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field

from src.core.shared_types import Status


@dataclass
class GameModel:
    """Transport-safe representation of a draughts game used between API, Service, DB, and Game layers."""

    starting_fen: str
    current_fen: str
    state_log: list[str]
    moves: list[str]
    header: dict[str, str] = field(default_factory=dict)
    status: str = Status.IN_PROGRESS
