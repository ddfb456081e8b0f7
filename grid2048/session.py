# -*- coding: utf-8 -*-
"""
Entry point for a host application: routes move, restart and agent requests to a game.
"""
import logging
from collections import deque

from grid2048.advisor import AdvisorExhausted, GreedyAdvisor, MoveAdvisor, Proposal, RandomAdvisor, advise_move
from grid2048.core import Direction
from grid2048.game import AdvisorConfig, Game, GameSnapshot, MoveResult

# ##>: Module logger.
_logger = logging.getLogger(__name__)

MANUAL = 'manual'

# ##: Rationale recorded for moves that come without one, e.g. manual moves.
NO_REASON = '-- no reason --'

# ##: Rationales kept for display, newest first.
REASONS_KEPT = 5


class Session:
    """
    A game plus the source of its moves.

    The move source is either ``manual`` (moves come from ``request_move``) or the name of a registered advisor
    (moves come from ``request_agent_move``). Directions are accepted from any source.

    With ``auto_play``, an advisor source drives the game by itself: switching to it, restarting, and every tile
    spawn that follows a move each request the next advisor move. The host only has to run the game scheduler.

    Parameters
    ----------
    game : Game, optional
        The game to drive (default is a new ``Game()``).
    advisors : dict[str, MoveAdvisor], optional
        Advisors by name (default is ``random`` and ``greedy``).
    config : AdvisorConfig, optional
        Retry budget for advisors.
    auto_play : bool, optional
        Chain advisor moves without waiting for ``request_agent_move`` (default is False).

    Attributes
    ----------
    reasons : deque[str]
        Rationales of the last applied moves, newest first.
    """

    def __init__(
        self,
        game: Game | None = None,
        advisors: dict[str, MoveAdvisor] | None = None,
        config: AdvisorConfig | None = None,
        auto_play: bool = False,
    ):
        self.game = game if game is not None else Game()
        self.advisors = advisors if advisors is not None else {'random': RandomAdvisor(), 'greedy': GreedyAdvisor()}
        self.config = config if config is not None else AdvisorConfig()
        self.agent = MANUAL
        self.auto_play = auto_play
        self.reasons: deque[str] = deque(maxlen=REASONS_KEPT)

        self.game.add_spawn_listener(self._on_spawn)

    @property
    def kinds(self) -> list[str]:
        return [MANUAL, *self.advisors]

    def snapshot(self) -> GameSnapshot:
        return self.game.snapshot()

    def request_move(self, direction: Direction | str) -> MoveResult:
        result = self.game.move(direction)
        if result is MoveResult.APPLIED:
            self.reasons.appendleft(NO_REASON)
        return result

    def request_restart(self) -> None:
        self.game.restart()
        self.reasons.clear()
        if self.auto_play:
            self._play_next()

    def request_agent_change(self, kind: str) -> None:
        """
        Switch the move source.

        Raises
        ------
        ValueError
            If no advisor is registered under that name.
        """
        if kind != MANUAL and kind not in self.advisors:
            raise ValueError(f'Unknown agent: {kind!r}, expected one of {self.kinds}')
        _logger.info('Move source: %s', kind)
        self.agent = kind
        if self.auto_play:
            self._play_next()

    def request_agent_move(self) -> Proposal | None:
        """
        Play one move chosen by the current advisor.

        Returns
        -------
        Proposal | None
            The applied proposal, or None when the source is manual or the game isn't ready.

        Raises
        ------
        AdvisorExhausted
            If the advisor found no move that changes the board.
        """
        if self.agent == MANUAL:
            return None
        proposal = advise_move(self.game, self.advisors[self.agent], max_retries=self.config.max_retries)
        if proposal is not None:
            self.reasons.appendleft(proposal.reason or NO_REASON)
        return proposal

    def _on_spawn(self, game: Game) -> None:
        if self.auto_play and not game.over:
            self._play_next()

    def _play_next(self) -> None:
        # ##: An exhausted advisor pauses the game, nothing is raised into the scheduler.
        try:
            self.request_agent_move()
        except AdvisorExhausted as error:
            _logger.warning('Auto-play paused: %s', error)
