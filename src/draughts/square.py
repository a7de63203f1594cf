"""
Squares of the board and the two numbering schemes for them.

(placed in its own module as multiple other modules need to import it)

External numbering      Internal numbering
--------------------    --------------------
  01  02  03  04  05      01  02  03  04  05
06  07  08  09  10      06  07  08  09  10
  11  12  13  14  15      12  13  14  15  16
16  17  18  19  20      17  18  19  20  21
  ...                     ...
46  47  48  49  50      50  51  52  53  54

The internal numbering skips every 11th index (0, 11, 22, 33, 44, 55). Those sentinel cells make every diagonal step a fixed
offset, and a walk along a diagonal simply ends when it lands on a sentinel (or leaves 0..55).
"""

from enum import Enum
from typing import Self

# Only 10x10 for now, but keep the numbers in one place
NUM_SQUARES = 50
INTERNAL_SIZE = 56
SENTINEL_STRIDE = 11


def to_internal(square: int) -> int:
    """External square number (1-50) to internal index"""
    return square + (square - 1) // 10


def to_external(index: int) -> int:
    """Internal index to external square number (1-50)"""
    return index - (index - 1) // SENTINEL_STRIDE


def is_outside(index: int) -> bool:
    """The only boundary check used by the directional walks. Negative indices or anything past 55 is simply outside."""
    return not (0 <= index < INTERNAL_SIZE and index % SENTINEL_STRIDE != 0)


def is_valid_square(square: int) -> bool:
    return 1 <= square <= NUM_SQUARES


def internal_indices() -> range:
    """All internal indices, sentinels included (callers filter with `is_outside`)"""
    return range(INTERNAL_SIZE)


class Direction(Enum):
    """Diagonal directions (wind directions) and the step to take along them in the internal numbering."""

    NE = -5
    SE = 6
    SW = 5
    NW = -6

    @property
    def step(self) -> int:
        return self.value

    @property
    def opposite(self) -> Self:
        return OPPOSITE_DIRECTIONS[self]


OPPOSITE_DIRECTIONS: dict[Direction, Direction] = {
    Direction.NE: Direction.SW,
    Direction.SE: Direction.NW,
    Direction.SW: Direction.NE,
    Direction.NW: Direction.SE,
}
