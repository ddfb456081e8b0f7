# -*- coding: utf-8 -*-
"""
Move advisors running in-process.
"""
from typing import Iterable, Sequence

from numpy.random import default_rng

from grid2048.advisor.core import AdvisorFailure, Proposal
from grid2048.advisor.prompt import parse_proposal
from grid2048.core import SIZE, Board, Direction, legal_directions, shift

# ##>: Tie-break order of the greedy advisor, keeps big tiles in the top-left corner.
_PREFERENCE = (Direction.UP, Direction.LEFT, Direction.RIGHT, Direction.DOWN)


class RandomAdvisor:
    """
    Proposes a random direction among the ones not yet avoided.

    It doesn't look at the board, so its proposals often leave it unchanged.
    """

    def __init__(self, seed: int | None = None):
        self._rng = default_rng(seed)

    def propose(self, board: list[list[int]], avoid: Sequence[Direction] = ()) -> Proposal:
        candidates = [direction for direction in Direction if direction not in avoid]
        if not candidates:
            raise AdvisorFailure('Every direction is avoided')
        direction = candidates[int(self._rng.integers(len(candidates)))]
        return Proposal(direction=direction, reason='random choice')


class GreedyAdvisor:
    """
    Proposes the legal direction with the best immediate merge score.

    Ties are broken by the number of empty cells left, then by the UP, LEFT, RIGHT, DOWN order.
    """

    def propose(self, board: list[list[int]], avoid: Sequence[Direction] = ()) -> Proposal:
        candidates = [direction for direction in legal_directions(board) if direction not in avoid]
        if not candidates:
            raise AdvisorFailure('No legal direction left')

        tiles = Board.from_matrix(board)
        analysis = {}
        best, best_key = None, None
        for direction in candidates:
            outcome = shift(tiles, direction)
            empty = SIZE * SIZE - outcome.board.count
            analysis[direction] = f'{len(outcome.merges)} merges for {outcome.score} points, {empty} empty cells'

            key = (outcome.score, empty, -_PREFERENCE.index(direction))
            if best_key is None or key > best_key:
                best, best_key = direction, key

        return Proposal(direction=best, reason=analysis[best], analysis=analysis)


class ScriptedAdvisor:
    """
    Replays recorded model replies, one per proposal.

    Each reply goes through ``parse_proposal``, like a live model reply would. Useful to replay a transcript.
    """

    def __init__(self, replies: Iterable[str | dict]):
        self._replies = iter(replies)

    def propose(self, board: list[list[int]], avoid: Sequence[Direction] = ()) -> Proposal:
        try:
            reply = next(self._replies)
        except StopIteration as error:
            raise AdvisorFailure('No recorded reply left') from error
        return parse_proposal(reply)
