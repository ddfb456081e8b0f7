# -*- coding: utf-8 -*-
"""
Python implementation of the 2048 game engine.

It provides the grid engine (`grid2048.core`), the turn state machine (`grid2048.game`), move advisors
(`grid2048.advisor`), and a `Session` tying a game to its move source.
"""

from .core import Board, Direction, Tile, has_valid_move, shift, spawn_tile
from .game import Game, GameConfig, GameState, MoveResult
from .session import Session

__all__ = [
    "Board",
    "Direction",
    "Game",
    "GameConfig",
    "GameState",
    "MoveResult",
    "Session",
    "Tile",
    "has_valid_move",
    "shift",
    "spawn_tile",
]
