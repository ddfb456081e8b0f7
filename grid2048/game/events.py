# -*- coding: utf-8 -*-
"""
Events emitted by a game for its presentation layer, and the results returned to move requests.
"""
from dataclasses import dataclass
from enum import Enum

from grid2048.core import Direction, Tile


class MoveResult(str, Enum):
    """
    Outcome of a move request.

    APPLIED: the board changed, a tile spawn is pending.
    NO_CHANGE: the direction doesn't move or merge any tile.
    ABORTED: the game is locked or over, the request was ignored.
    """

    APPLIED = 'applied'
    NO_CHANGE = 'no_change'
    ABORTED = 'aborted'


class RejectReason(str, Enum):
    """Why a move was rejected."""

    NO_CHANGE = 'no_change'
    LOCKED = 'locked'
    OVER = 'over'


@dataclass(frozen=True)
class TileSpawned:
    tile: Tile


@dataclass(frozen=True)
class TilesMerged:
    ids: tuple[int, int]
    value: int


@dataclass(frozen=True)
class MoveRejected:
    direction: Direction
    reason: RejectReason


@dataclass(frozen=True)
class GameOver:
    won: bool


GameEvent = TileSpawned | TilesMerged | MoveRejected | GameOver
