# -*- coding: utf-8 -*-
"""
Game and advisor configuration.
"""
from dataclasses import dataclass


@dataclass
class GameConfig:
    """
    Configuration of a game.

    Attributes
    ----------
    spawn_delay : float
        Seconds between a successful move and the tile spawn that follows it. Pacing only.
    win_value : int
        Tile value that wins the game.
    initial_tiles : int
        Tiles spawned by a restart.
    seed : int, optional
        Seed of the tile spawn generator, for reproducible games.
    """

    spawn_delay: float = 0.1
    win_value: int = 2048
    initial_tiles: int = 2
    seed: int | None = None


@dataclass
class AdvisorConfig:
    """Retry budget when asking a move advisor for a state-changing move."""

    max_retries: int = 10
