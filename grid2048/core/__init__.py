# -*- coding: utf-8 -*-
"""
The 2048 grid engine.

It provides immutable tile and board types, directional shifting and merging, tile spawning, and checks for
legal moves, both on tile boards and on their matrix view.
"""

from .gameboard import TILE_SPAWN_PROBS, Merge, MoveOutcome, has_valid_move, legal_moves, shift, spawn_tile
from .gamemove import illegal_directions, is_done, legal_directions, legal_directions_mask
from .tiles import SIZE, Board, Direction, Tile, TileArena

__all__ = [
    "SIZE",
    "TILE_SPAWN_PROBS",
    "Board",
    "Direction",
    "Merge",
    "MoveOutcome",
    "Tile",
    "TileArena",
    "has_valid_move",
    "illegal_directions",
    "is_done",
    "legal_directions",
    "legal_directions_mask",
    "legal_moves",
    "shift",
    "spawn_tile",
]
