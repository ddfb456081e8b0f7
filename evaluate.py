# -*- coding: utf-8 -*-
"""
Evaluate a move advisor.
"""
import logging
from collections import Counter
from typing import Dict

from tqdm import trange

from grid2048.advisor import GreedyAdvisor, RandomAdvisor
from grid2048.game import Game, GameConfig
from grid2048.session import Session

ADVISORS = {
    "random": RandomAdvisor,
    "greedy": GreedyAdvisor,
}


def evaluate(method: str, length: int = 10, seed: int | None = None) -> Dict[int, int]:
    """
    Play games with an advisor.

    Parameters
    ----------
    method : str
        The name of the advisor to evaluate.
    length : int, optional
        The number of games to play (default is 10).
    seed : int, optional
        Seed of the tile spawns, for reproducible evaluations.

    Returns
    -------
    Dict[int, int]
        How many games ended with each max tile.
    """
    game = Game(GameConfig(spawn_delay=0.0, seed=seed))
    session = Session(game=game, advisors={method: ADVISORS[method]()})
    session.request_agent_change(method)
    session.auto_play = True
    score = []

    with trange(length) as period:
        for num in period:
            # ##: Play a game, every spawn asks the advisor for the next move.
            session.request_restart()
            game.scheduler.run_all()

            # ##: Log.
            snapshot = session.snapshot()
            period.set_description(f"Evaluation: {num + 1}")
            period.set_postfix(score=snapshot.score, max=snapshot.board.max_value, bad=f"{snapshot.bad_move_rate:.1%}")

            # ##: Save max cells.
            score.append(snapshot.board.max_value)

    # ##: Final log.
    frequency = Counter(score)
    return dict(sorted(frequency.items()))


if __name__ == "__main__":
    from argparse import ArgumentParser

    parser = ArgumentParser()
    parser.add_argument("--method", type=str, default="greedy", choices=sorted(ADVISORS))
    parser.add_argument("--games", type=int, default=10)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)
    result = evaluate(method=args.method, length=args.games, seed=args.seed)
    print(f"Evaluation of the {args.method} advisor, max tiles: {result}")
