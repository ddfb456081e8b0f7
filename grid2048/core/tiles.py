"""
Tile, board and direction types for the 2048 grid engine.

Boards are immutable snapshots: every engine operation returns a new ``Board`` instead of
mutating tiles in place.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Sequence

from numpy import int64, ndarray, zeros

# ##>: The grid is always 4x4.
SIZE = 4


class Direction(str, Enum):
    """
    Move direction.

    The string values match what human input and move advisors send.
    """

    UP = 'UP'
    DOWN = 'DOWN'
    LEFT = 'LEFT'
    RIGHT = 'RIGHT'

    @classmethod
    def parse(cls, value: 'Direction | str') -> 'Direction':
        """
        Convert a direction name (any case, surrounding spaces ignored) into a ``Direction``.

        Raises
        ------
        ValueError
            If the value isn't one of UP, DOWN, LEFT or RIGHT.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            name = value.strip().upper()
            if name in cls.__members__:
                return cls[name]
        raise ValueError(f'Unknown direction: {value!r}')


@dataclass(frozen=True)
class Tile:
    """
    A single tile.

    Attributes
    ----------
    id : int
        Stable identifier, assigned at creation and kept until the tile is removed.
    value : int
        Power of two carried by the tile.
    row, column : int
        Position on the grid, each in [0, 3].
    removed : bool
        True when the tile was merged away by the move that produced the board.
    just_spawned : bool
        True only for the newest spawned tile.
    """

    id: int
    value: int
    row: int
    column: int
    removed: bool = False
    just_spawned: bool = False

    @property
    def position(self) -> tuple[int, int]:
        return self.row, self.column


@dataclass(frozen=True)
class Board:
    """
    Immutable snapshot of the grid.

    Holds the live tiles and, right after a move, the tiles that move merged away (flagged ``removed``).
    """

    tiles: tuple[Tile, ...] = ()

    @property
    def live(self) -> tuple[Tile, ...]:
        """Tiles still on the grid."""
        return tuple(tile for tile in self.tiles if not tile.removed)

    @property
    def removed(self) -> tuple[Tile, ...]:
        """Tiles merged away by the last move."""
        return tuple(tile for tile in self.tiles if tile.removed)

    @property
    def count(self) -> int:
        return len(self.live)

    @property
    def is_full(self) -> bool:
        return self.count == SIZE * SIZE

    @property
    def max_value(self) -> int:
        return max((tile.value for tile in self.live), default=0)

    @property
    def total(self) -> int:
        return sum(tile.value for tile in self.live)

    def cells(self) -> dict[tuple[int, int], Tile]:
        """Map each occupied position to its live tile."""
        return {tile.position: tile for tile in self.live}

    def open_cells(self) -> list[tuple[int, int]]:
        """Empty positions in row-major order."""
        occupied = self.cells()
        return [(row, column) for row in range(SIZE) for column in range(SIZE) if (row, column) not in occupied]

    def to_matrix(self) -> ndarray:
        """
        Serialize the board as a 4x4 matrix.

        Returns
        -------
        ndarray
            Tile values, 0 for empty cells.
        """
        matrix = zeros((SIZE, SIZE), dtype=int64)
        for tile in self.live:
            matrix[tile.row, tile.column] = tile.value
        return matrix

    def to_lists(self) -> list[list[int]]:
        """Serialize the board as nested lists, the format handed to move advisors."""
        return self.to_matrix().tolist()

    def mirrored(self) -> 'Board':
        """Reflect the board left to right, keeping tile ids."""
        return Board(tuple(replace(tile, column=SIZE - 1 - tile.column) for tile in self.tiles))

    @classmethod
    def from_matrix(cls, matrix: Sequence[Sequence[int]] | ndarray, arena: 'TileArena | None' = None) -> 'Board':
        """
        Build a board from a 4x4 matrix of tile values.

        Parameters
        ----------
        matrix : Sequence[Sequence[int]] | ndarray
            Tile values, 0 for empty cells.
        arena : TileArena, optional
            Source of tile ids. A fresh arena is used when omitted, so ids start at 0 in row-major order.

        Raises
        ------
        ValueError
            If the matrix isn't 4x4.
        """
        rows = [list(row) for row in matrix]
        if len(rows) != SIZE or any(len(row) != SIZE for row in rows):
            raise ValueError(f'Board matrix must be {SIZE}x{SIZE}')

        arena = arena if arena is not None else TileArena()
        tiles = []
        for row, values in enumerate(rows):
            for column, value in enumerate(values):
                if value:
                    tiles.append(Tile(id=arena.next_id(), value=int(value), row=row, column=column))
        return cls(tuple(tiles))


@dataclass
class TileArena:
    """
    Owner of tile identities for one game.

    Hands out monotonic tile ids and tracks the game generation, which is bumped on every restart so that
    callbacks scheduled for an earlier game can be recognized and dropped.
    """

    generation: int = 0
    _next: int = field(default=0, repr=False)

    def next_id(self) -> int:
        tile_id = self._next
        self._next += 1
        return tile_id

    def reserve(self, tiles: Iterable[Tile]) -> None:
        """Make sure later ids don't collide with the given tiles."""
        self._next = max([self._next] + [tile.id + 1 for tile in tiles])

    def new_generation(self) -> int:
        self.generation += 1
        return self.generation
