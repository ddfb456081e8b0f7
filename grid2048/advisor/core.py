# -*- coding: utf-8 -*-
"""
Contract of a move advisor: anything that looks at a board and proposes a direction.
"""
from dataclasses import dataclass, field
from typing import Protocol, Sequence

from grid2048.core import Direction


class AdvisorFailure(RuntimeError):
    """The advisor couldn't be reached, or replied with something that isn't a valid proposal."""


class AdvisorExhausted(RuntimeError):
    """
    No state-changing move was found within the retry budget.

    Attributes
    ----------
    attempts : int
        Proposals requested.
    avoid : list[Direction]
        Directions found to leave the board unchanged.
    """

    def __init__(self, attempts: int, avoid: Sequence[Direction]):
        self.attempts = attempts
        self.avoid = list(avoid)
        names = ', '.join(direction.value for direction in self.avoid) or 'none'
        super().__init__(f'No valid move after {attempts} attempts (avoided: {names})')


@dataclass(frozen=True)
class Proposal:
    """
    A proposed move.

    Attributes
    ----------
    direction : Direction
        The direction to play. Direction names are accepted and converted.
    reason : str
        Free-text rationale.
    analysis : dict[Direction, str]
        What the advisor expects from each direction, when it says so.
    """

    direction: Direction
    reason: str = ''
    analysis: dict[Direction, str] = field(default_factory=dict)

    def __post_init__(self):
        try:
            object.__setattr__(self, 'direction', Direction.parse(self.direction))
        except ValueError as error:
            raise AdvisorFailure(str(error)) from error


class MoveAdvisor(Protocol):
    """A source of moves."""

    def propose(self, board: list[list[int]], avoid: Sequence[Direction] = ()) -> Proposal:
        """
        Propose a direction for the board.

        Parameters
        ----------
        board : list[list[int]]
            The board as a 4x4 matrix, 0 for empty cells.
        avoid : Sequence[Direction]
            Directions already known to leave the board unchanged this turn.

        Raises
        ------
        AdvisorFailure
            If no proposal could be obtained.
        """
        ...
