"""Turn state machine of a 2048 game."""

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Callable, Sequence

from numpy import ndarray
from numpy.random import default_rng

from grid2048.core import SIZE, Board, Direction, TileArena, has_valid_move, shift, spawn_tile
from grid2048.game.config import GameConfig
from grid2048.game.events import GameEvent, GameOver, MoveRejected, MoveResult, RejectReason, TilesMerged, TileSpawned
from grid2048.game.scheduler import DeferredQueue, Handle

# ##>: Module logger.
_logger = logging.getLogger(__name__)


class GameState(str, Enum):
    """
    Turn state.

    READY: accepting moves.
    LOCKED: a move was applied, its tile spawn is pending.
    OVER: the game ended, see ``won``.
    """

    READY = 'ready'
    LOCKED = 'locked'
    OVER = 'over'


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of a game."""

    board: Board
    score: int
    state: GameState
    won: bool | None
    moves: int
    failed_moves: int

    @property
    def over(self) -> bool:
        return self.state is GameState.OVER

    @property
    def locked(self) -> bool:
        return self.state is GameState.LOCKED

    @property
    def total_moves(self) -> int:
        """Moves requested while ready, failed ones included."""
        return self.moves + self.failed_moves

    @property
    def bad_move_rate(self) -> float:
        """Share of the requested moves that changed nothing."""
        return self.failed_moves / self.total_moves if self.total_moves else 0.0


class Game:
    """
    A 2048 game.

    The game owns its board, its tile ids and its generation. The board changes only when a move is applied and
    when the tile spawn scheduled by that move fires; every other request is reported through ``MoveResult`` and
    the event queue.

    Parameters
    ----------
    config : GameConfig, optional
        Game configuration (default is ``GameConfig()``).
    scheduler : DeferredQueue, optional
        Queue holding the pending tile spawns. The host is responsible for running it.
    """

    def __init__(self, config: GameConfig | None = None, scheduler: DeferredQueue | None = None):
        self.config = config if config is not None else GameConfig()
        self.scheduler = scheduler if scheduler is not None else DeferredQueue()
        self._rng = default_rng(self.config.seed)
        self._arena = TileArena()
        self._events: deque[GameEvent] = deque()
        self._pending: Handle | None = None
        self._listeners: list[Callable[['Game'], None]] = []

        self._board = Board()
        self._score = 0
        self._state = GameState.READY
        self._won: bool | None = None
        self._moves = 0
        self._failed_moves = 0

        self.restart()

    @property
    def board(self) -> Board:
        return self._board

    @property
    def score(self) -> int:
        return self._score

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def won(self) -> bool | None:
        return self._won

    @property
    def over(self) -> bool:
        return self._state is GameState.OVER

    @property
    def locked(self) -> bool:
        return self._state is GameState.LOCKED

    @property
    def generation(self) -> int:
        return self._arena.generation

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            board=self._board,
            score=self._score,
            state=self._state,
            won=self._won,
            moves=self._moves,
            failed_moves=self._failed_moves,
        )

    def add_spawn_listener(self, listener: Callable[['Game'], None]) -> None:
        """
        Call ``listener(game)`` every time the tile spawn following a move lands.

        Listeners run once the game is ready again (or over), so they may request the next move right away. The
        tiles of a restart don't notify them.
        """
        self._listeners.append(listener)

    def drain_events(self) -> list[GameEvent]:
        """Return and forget the events emitted since the last call."""
        events = list(self._events)
        self._events.clear()
        return events

    def restart(self) -> None:
        """
        Start a new game with two random tiles.

        Any pending tile spawn belongs to the previous game and is dropped.
        """
        self._start(Board())
        for _ in range(self.config.initial_tiles):
            self._spawn()
        _logger.info('Game %d started', self.generation)

    def load(self, board: Board | Sequence[Sequence[int]] | ndarray, score: int = 0) -> None:
        """
        Start a new game from a given board, e.g. a saved one.

        Parameters
        ----------
        board : Board | Sequence[Sequence[int]] | ndarray
            The board, or its 4x4 matrix of values.
        score : int, optional
            Score already accumulated (default is 0).

        Raises
        ------
        ValueError
            If the score is negative, or the board holds a tile off the grid, a value that isn't a power of two,
            or two tiles sharing a cell or an id.
        """
        if score < 0:
            raise ValueError(f'Score must be non-negative, got {score}')
        if not isinstance(board, Board):
            board = Board.from_matrix(board, arena=self._arena)
        _check_board(board)
        self._arena.reserve(board.tiles)
        self._start(Board(board.live))
        self._score = score
        self._evaluate()

    def move(self, direction: Direction | str) -> MoveResult:
        """
        Apply a move.

        Parameters
        ----------
        direction : Direction | str
            UP, DOWN, LEFT or RIGHT.

        Returns
        -------
        MoveResult
            APPLIED when the board changed and a tile spawn was scheduled, NO_CHANGE when the direction doesn't
            move any tile, ABORTED when the game is locked or over.

        Raises
        ------
        ValueError
            If the direction is unknown.
        """
        direction = Direction.parse(direction)

        if self._state is not GameState.READY:
            reason = RejectReason.LOCKED if self._state is GameState.LOCKED else RejectReason.OVER
            _logger.debug('Move %s aborted: game is %s', direction.value, self._state.value)
            self._events.append(MoveRejected(direction=direction, reason=reason))
            return MoveResult.ABORTED

        outcome = shift(self._board, direction)
        if outcome is None:
            self._failed_moves += 1
            _logger.debug('Move %s leaves the board unchanged', direction.value)
            self._events.append(MoveRejected(direction=direction, reason=RejectReason.NO_CHANGE))
            return MoveResult.NO_CHANGE

        self._board = outcome.board
        self._score += outcome.score
        self._moves += 1
        for merge in outcome.merges:
            self._events.append(TilesMerged(ids=(merge.survivor_id, merge.removed_id), value=merge.value))

        # ##: Lock until the follow-up tile lands.
        self._state = GameState.LOCKED
        self._pending = self.scheduler.call_later(
            self.config.spawn_delay, partial(self._deferred_spawn, self.generation)
        )
        return MoveResult.APPLIED

    def _start(self, board: Board) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        self._arena.new_generation()
        self._board = board
        self._score = 0
        self._state = GameState.READY
        self._won = None
        self._moves = 0
        self._failed_moves = 0

    def _spawn(self) -> None:
        board = spawn_tile(self._board, self._arena.next_id(), rng=self._rng)
        if board is not self._board:
            self._events.append(TileSpawned(tile=board.tiles[-1]))
        self._board = board

    def _deferred_spawn(self, generation: int) -> None:
        if generation != self.generation or self._state is not GameState.LOCKED:
            _logger.debug('Dropping tile spawn scheduled by game %d', generation)
            return

        self._pending = None
        self._spawn()
        self._state = GameState.READY
        self._evaluate()
        for listener in list(self._listeners):
            listener(self)

    def _evaluate(self) -> None:
        if self._board.max_value >= self.config.win_value:
            self._finish(won=True)
        elif self._board.is_full and not has_valid_move(self._board):
            self._finish(won=False)

    def _finish(self, won: bool) -> None:
        self._state = GameState.OVER
        self._won = won
        self._events.append(GameOver(won=won))
        _logger.info('Game %d over (%s), score %d', self.generation, 'won' if won else 'lost', self._score)


def _check_board(board: Board) -> None:
    positions = set()
    ids = set()
    for tile in board.live:
        if not (0 <= tile.row < SIZE and 0 <= tile.column < SIZE):
            raise ValueError(f'Tile {tile.id} is off the grid at {tile.position}')
        if tile.value < 2 or tile.value & (tile.value - 1):
            raise ValueError(f'Tile {tile.id} has value {tile.value}, expected a power of two')
        if tile.position in positions:
            raise ValueError(f'Two tiles at {tile.position}')
        if tile.id in ids:
            raise ValueError(f'Two tiles with id {tile.id}')
        positions.add(tile.position)
        ids.add(tile.id)
