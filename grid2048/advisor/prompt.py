"""
Briefing and reply format for a language-model move advisor.

The model is called by the host application; this module only writes the prompt it receives and reads the
JSON reply it sends back.
"""

import json
from typing import Any, Sequence

from grid2048.advisor.core import AdvisorFailure, Proposal
from grid2048.core import Direction

SYSTEM_PROMPT = """\
You are a game-playing system for 2048, tasked with finding the optimal move. The 4x4 board is a nested array \
of 4 rows, each holding 4 integers: a tile's value (a power of 2) or 0 for an empty cell. The first element of \
the first row is the top-left corner; each row reads left to right.

In each move you shift every tile in one of four directions: UP, DOWN, LEFT or RIGHT. Tiles slide toward the \
chosen direction and adjacent tiles of the same value merge into one tile of double value. Tiles of different \
values don't merge; they stack from the far side of the board in the same order, without gaps. Tiles merge from \
the far side toward the near side, and each tile merges at most once per move.

At the beginning of the game 2 tiles of value 2 or 4 are placed at random. After each move a new tile of value \
2 or 4 is added to a random empty cell. The game ends when a 2048 tile is created (you win), or when the board \
is full and no move is left (you lose).

Important: choose a direction that moves or merges tiles. A move that leaves the board unchanged is wasted.

Examples:
- [[0, 0, 2, 4], [0, 0, 0, 8], [0, 8, 2, 4], [0, 0, 0, 4]]: RIGHT changes nothing.
- [[0, 0, 0, 0], [0, 0, 0, 8], [2, 0, 2, 16], [4, 0, 4, 8]]: DOWN changes nothing, LEFT gives \
[[0, 0, 0, 0], [8, 0, 0, 0], [4, 16, 0, 0], [8, 8, 0, 0]].
- [[2, 2, 2, 0], [0, 4, 4, 4], [8, 16, 0, 16], [2, 2, 2, 2]]: RIGHT gives \
[[0, 0, 2, 4], [0, 0, 4, 8], [0, 0, 8, 32], [0, 0, 4, 4]].

Strategies: merge the largest tiles, prefer moves with several merges, keep high values in a corner, and plan \
for the merges the move sets up.

Analyze what each direction would do, then choose the best one. Answer with a JSON object:
{"ifUp": "...", "ifDown": "...", "ifLeft": "...", "ifRight": "...", "direction": "UP", "reason": "..."}
Keep the analysis and the reason under 20 words each. "direction" is one of "UP", "DOWN", "LEFT", "RIGHT".
"""

# ##>: Function-calling schema for models that support structured replies.
FUNCTION_SCHEMA: dict[str, Any] = {
    'name': 'get_direction',
    'description': 'Provides a direction',
    'parameters': {
        'type': 'object',
        'properties': {
            'direction': {
                'type': 'string',
                'enum': [direction.value for direction in Direction],
                'description': 'The direction to be returned',
            },
            'reason': {'type': 'string', 'description': 'The reason why that direction was chosen'},
            'ifUp': {'type': 'string', 'description': 'What would happen if you moved UP'},
            'ifDown': {'type': 'string', 'description': 'What would happen if you moved DOWN'},
            'ifLeft': {'type': 'string', 'description': 'What would happen if you moved LEFT'},
            'ifRight': {'type': 'string', 'description': 'What would happen if you moved RIGHT'},
        },
        'required': ['direction', 'reason', 'ifUp', 'ifDown', 'ifLeft', 'ifRight'],
    },
}

_ANALYSIS_KEYS = {
    'ifUp': Direction.UP,
    'ifDown': Direction.DOWN,
    'ifLeft': Direction.LEFT,
    'ifRight': Direction.RIGHT,
}


def build_prompt(board: list[list[int]], avoid: Sequence[Direction] = ()) -> str:
    """
    Write the user prompt for a board.

    Parameters
    ----------
    board : list[list[int]]
        The board as a 4x4 matrix, 0 for empty cells.
    avoid : Sequence[Direction]
        Directions already known to leave the board unchanged.

    Returns
    -------
    str
        The prompt, to send along with ``SYSTEM_PROMPT``.
    """
    prompt = f'Current Board: {json.dumps(board)}\n'
    if avoid:
        prompt += f'Avoid using the following directions: {", ".join(direction.value for direction in avoid)}\n'
    return prompt + 'Next Move:\n'


def parse_proposal(reply: str | dict[str, Any]) -> Proposal:
    """
    Read a model reply.

    Parameters
    ----------
    reply : str | dict[str, Any]
        The JSON text of the reply, or the already decoded object.

    Returns
    -------
    Proposal
        The proposed direction, with its reason and per-direction analysis.

    Raises
    ------
    AdvisorFailure
        If the reply isn't a JSON object or doesn't name a valid direction.
    """
    if isinstance(reply, str):
        try:
            reply = json.loads(reply)
        except json.JSONDecodeError as error:
            raise AdvisorFailure(f'Reply is not valid JSON: {error}') from error

    if not isinstance(reply, dict):
        raise AdvisorFailure(f'Reply is not a JSON object: {reply!r}')

    try:
        direction = Direction.parse(reply.get('direction'))
    except ValueError as error:
        raise AdvisorFailure(str(error)) from error

    analysis = {direction: str(reply[key]) for key, direction in _ANALYSIS_KEYS.items() if reply.get(key)}
    return Proposal(direction=direction, reason=str(reply.get('reason') or ''), analysis=analysis)
