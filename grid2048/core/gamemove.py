"""
Move utilities working on the matrix view of a board (4x4 array of values, 0 for empty cells).

These vectorized checks don't build any tile; they are used to screen boards handed over by move advisors.
"""

from numpy import any as np_any
from numpy import asarray, ndarray

from grid2048.core.tiles import Direction


def _can_move(near: ndarray, far: ndarray) -> bool:
    """Whether a tile of ``far`` can slide or merge onto its neighbor in ``near``, cell for cell."""
    return bool(np_any((far != 0) & ((near == 0) | (near == far))))


def legal_directions_mask(state: ndarray) -> dict[Direction, bool]:
    """
    Tell, for each direction, whether it changes the board.

    Parameters
    ----------
    state : ndarray
        The board as a 4x4 matrix.

    Returns
    -------
    dict[Direction, bool]
        True for each direction that would move or merge at least one tile.

    Notes
    -----
    Each direction compares the grid with itself shifted by one cell: the side the tiles move toward is ``near``,
    the other is ``far``.
    """
    state = asarray(state)
    top, bottom = state[:-1, :], state[1:, :]
    left, right = state[:, :-1], state[:, 1:]

    return {
        Direction.UP: _can_move(top, bottom),
        Direction.DOWN: _can_move(bottom, top),
        Direction.LEFT: _can_move(left, right),
        Direction.RIGHT: _can_move(right, left),
    }


def legal_directions(state: ndarray) -> list[Direction]:
    """Directions that change the board, in UP, DOWN, LEFT, RIGHT order."""
    mask = legal_directions_mask(state)
    return [direction for direction in Direction if mask[direction]]


def illegal_directions(state: ndarray) -> list[Direction]:
    """Directions that leave the board unchanged, in UP, DOWN, LEFT, RIGHT order."""
    mask = legal_directions_mask(state)
    return [direction for direction in Direction if not mask[direction]]


def is_done(state: ndarray) -> bool:
    """
    Check if no move is left.

    Returns
    -------
    bool
        True when no direction changes the board, e.g. a full board without equal neighbors.
    """
    return not any(legal_directions_mask(state).values())
