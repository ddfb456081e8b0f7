# -*- coding: utf-8 -*-
"""
Play a game turn with a move advisor.
"""
import logging

from grid2048.advisor.core import AdvisorExhausted, AdvisorFailure, MoveAdvisor, Proposal
from grid2048.core import Direction
from grid2048.game import Game, MoveResult

# ##>: Module logger.
_logger = logging.getLogger(__name__)


def advise_move(game: Game, advisor: MoveAdvisor, max_retries: int = 10) -> Proposal | None:
    """
    Ask an advisor for moves until one changes the board.

    Parameters
    ----------
    game : Game
        The game to play. Nothing happens unless it is ready for a move.
    advisor : MoveAdvisor
        The source of proposals.
    max_retries : int, optional
        Proposals to request at most, failed ones included (default is 10).

    Returns
    -------
    Proposal | None
        The proposal that was applied, or None when the game was locked or over.

    Raises
    ------
    AdvisorExhausted
        If no proposal changed the board within the budget. The game is left untouched, ready for a new request.

    Notes
    -----
    Every direction that leaves the board unchanged is added to the avoid-list handed to the next request.
    """
    if game.locked or game.over:
        return None

    board = game.board.to_lists()
    avoid: list[Direction] = []

    for attempt in range(1, max_retries + 1):
        try:
            proposal = advisor.propose(board, avoid=tuple(avoid))
        except AdvisorFailure as error:
            _logger.warning('Advisor failed (attempt %d/%d): %s', attempt, max_retries, error)
            continue

        try:
            result = game.move(proposal.direction)
        except ValueError as error:
            _logger.warning('Advisor proposed an unknown direction (attempt %d/%d): %s', attempt, max_retries, error)
            continue

        if result is MoveResult.APPLIED:
            return proposal
        if result is MoveResult.ABORTED:
            return None

        _logger.warning('Advisor proposed %s, which changes nothing', proposal.direction.value)
        if proposal.direction not in avoid:
            avoid.append(proposal.direction)

    _logger.error('Advisor gave no valid move after %d attempts', max_retries)
    raise AdvisorExhausted(attempts=max_retries, avoid=avoid)
