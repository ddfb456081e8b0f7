# -*- coding: utf-8 -*-
"""
Turn sequencing of a 2048 game.

This module provides the `Game` state machine, its configuration, the events it emits, and the queue holding
its deferred tile spawns.
"""

from .config import AdvisorConfig, GameConfig
from .controller import Game, GameSnapshot, GameState
from .events import GameEvent, GameOver, MoveRejected, MoveResult, RejectReason, TilesMerged, TileSpawned
from .scheduler import DeferredQueue, Handle

__all__ = [
    "AdvisorConfig",
    "DeferredQueue",
    "Game",
    "GameConfig",
    "GameEvent",
    "GameOver",
    "GameSnapshot",
    "GameState",
    "Handle",
    "MoveRejected",
    "MoveResult",
    "RejectReason",
    "TileSpawned",
    "TilesMerged",
]
