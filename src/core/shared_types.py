"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    IN_PROGRESS = "in progress"
    WHITE_WINS = "white wins"
    BLACK_WINS = "black wins"
    DRAW_REPETITION = "draw by repetition"


# --- NOTE The domain layer has its own Color enum (src/draughts/pieces.py) that uses the single-letter codes of the notation.
# --- This one is what the API exposes.


class Side(StrEnum):
    WHITE = "white"
    BLACK = "black"
