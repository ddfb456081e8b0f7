"""
Core functionality of the 2048 grid engine: shifting and merging tiles, spawning new tiles, and
detecting whether any move is left.
"""

from dataclasses import dataclass, replace

from numpy.random import PCG64DXSM, Generator, default_rng

from grid2048.core.tiles import SIZE, Board, Direction, Tile

# ##: Tile spawn probabilities for 2048 game (90% for 2, 10% for 4).
TILE_SPAWN_PROBS: dict[int, float] = {2: 0.9, 4: 0.1}

# ##>: Pre-computed tile values and probabilities for fast sampling.
_TILE_VALUES = [2, 4]
_TILE_PROBS = [0.9, 0.1]

# ##>: Module-level generator, used when the caller doesn't supply one.
_GENERATOR = default_rng(PCG64DXSM())

# ##>: For each direction: whether lines are columns, and the scan step along a line.
_SCAN = {
    Direction.UP: (True, 1),
    Direction.DOWN: (True, -1),
    Direction.LEFT: (False, 1),
    Direction.RIGHT: (False, -1),
}


@dataclass(frozen=True)
class Merge:
    """Two tiles combined by a move: ``survivor_id`` stays on the board, ``removed_id`` is consumed."""

    survivor_id: int
    removed_id: int
    value: int


@dataclass(frozen=True)
class MoveOutcome:
    """
    Result of a shift that changed the board.

    Attributes
    ----------
    board : Board
        Board after the shift. Tiles merged away keep their last position and are flagged ``removed``.
    merges : tuple[Merge, ...]
        Merges performed, in scan order.
    """

    board: Board
    merges: tuple[Merge, ...] = ()

    @property
    def score(self) -> int:
        """Sum of the values created by merges."""
        return sum(merge.value for merge in self.merges)


def shift(board: Board, direction: Direction | str) -> MoveOutcome | None:
    """
    Slide and merge every tile of the board toward a direction.

    Parameters
    ----------
    board : Board
        The current board. It isn't modified.
    direction : Direction | str
        UP, DOWN, LEFT or RIGHT.

    Returns
    -------
    MoveOutcome | None
        The new board and the merges performed, or None when no tile moved or merged.

    Notes
    -----
    - Lines are columns for UP/DOWN and rows for LEFT/RIGHT. Each line is scanned from the edge the tiles move
      toward, so UP scans rows 0 to 3 and DOWN scans rows 3 to 0.
    - A tile equal to the last tile placed in its line merges into it, unless that tile already merged this move.
      The earlier tile survives with the doubled value; the later one lands on it and is flagged ``removed``.
    - A tile merges at most once per move: 2, 2, 2 becomes 4, 2.
    - Tiles removed by an earlier move are dropped from the new board.
    """
    columns, step = _SCAN[Direction.parse(direction)]
    start = 0 if step == 1 else SIZE - 1
    cells = board.cells()

    placed: list[Tile] = []
    merges: list[Merge] = []
    changed = False

    for line in range(SIZE):
        last: int | None = None
        last_merged = False
        slot = start

        for index in range(start, start + step * SIZE, step):
            tile = cells.get((index, line) if columns else (line, index))
            if tile is None:
                continue

            previous = placed[last] if last is not None else None
            if previous is not None and not last_merged and previous.value == tile.value:
                # ##: Merge into the last placed tile, which stays where it is.
                value = tile.value * 2
                placed[last] = replace(previous, value=value)
                consumed = replace(tile, value=value, row=previous.row, column=previous.column, just_spawned=False)
                placed.append(replace(consumed, removed=True))
                merges.append(Merge(survivor_id=previous.id, removed_id=tile.id, value=value))
                last_merged = True
                changed = True
            else:
                # ##: Slide to the next free slot.
                row, column = (slot, line) if columns else (line, slot)
                changed = changed or (row, column) != tile.position
                placed.append(replace(tile, row=row, column=column, just_spawned=False))
                last = len(placed) - 1
                last_merged = False
                slot += step

    if not changed:
        return None

    return MoveOutcome(board=Board(tuple(sorted(placed, key=lambda tile: tile.id))), merges=tuple(merges))


def spawn_tile(board: Board, tile_id: int, rng: Generator | None = None) -> Board:
    """
    Place a new tile (2 or 4) on a random empty cell.

    Parameters
    ----------
    board : Board
        The current board. It isn't modified.
    tile_id : int
        Fresh identifier for the new tile.
    rng : Generator, optional
        Random number generator, for reproducibility. The module-level generator is used when omitted.

    Returns
    -------
    Board
        A new board with the tile added and flagged ``just_spawned``, or the same board when it is full.

    Notes
    -----
    - The cell is drawn uniformly among the empty cells, taken in row-major order.
    - New tiles have a 90% chance of being 2 and a 10% chance of being 4.
    """
    open_cells = board.open_cells()
    if not open_cells:
        return board

    rng = rng if rng is not None else _GENERATOR
    row, column = open_cells[int(rng.integers(len(open_cells)))]
    value = int(rng.choice(_TILE_VALUES, p=_TILE_PROBS))

    tiles = tuple(replace(tile, just_spawned=False) if tile.just_spawned else tile for tile in board.tiles)
    return Board(tiles + (Tile(id=tile_id, value=value, row=row, column=column, just_spawned=True),))


def has_valid_move(board: Board) -> bool:
    """
    Check if any move would change the board.

    Parameters
    ----------
    board : Board
        The board to check. It isn't modified.

    Returns
    -------
    bool
        True if at least one direction changes the board.

    Notes
    -----
    On a full board nothing can slide, so a line changes only through an equal adjacent pair, whichever end it
    moves toward: checking UP and LEFT is enough there. With empty cells the two ends differ, e.g. a lone tile in
    the top-left corner moves only DOWN and RIGHT, so every direction is checked.
    """
    directions = (Direction.UP, Direction.LEFT) if board.is_full else tuple(Direction)
    return any(shift(board, direction) is not None for direction in directions)


def legal_moves(board: Board) -> list[Direction]:
    """Directions whose shift changes the board, in UP, DOWN, LEFT, RIGHT order."""
    return [direction for direction in Direction if shift(board, direction) is not None]
