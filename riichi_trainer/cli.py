"""
Watch scripted opponents play.

Usage:
    python -m riichi_trainer --games 4 --difficulty advanced --seed 7 --fast
"""

import argparse
import asyncio
import logging
from typing import List, Optional

import numpy as np

from .advisor import analyze_hand
from .config import DEFAULT_CONFIG, FAST_CONFIG, Difficulty
from .game import Phase, TableState
from .session import GameSession

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def format_round(state: TableState) -> str:
    lines = [f"Round {state.round_number} (dealer P{state.dealer}, honba {state.honba})"]
    result = state.result
    if state.phase == Phase.DRAW or result is None or result.winner is None:
        lines.append("  Exhaustive draw")
    else:
        source = f" from P{result.loser}" if result.loser is not None else ""
        lines.append(
            f"  P{result.winner} wins by {result.win_type}{source} on {result.winning_tile}: "
            f"{result.han} han {result.fu} fu, {result.points} points"
        )
        if result.yaku_list:
            lines.append(f"  Yaku: {', '.join(result.yaku_list)}")
    for player in state.players:
        lines.append(f"  P{player.index} {player}")
    return "\n".join(lines)


async def watch(
    num_games: int,
    difficulty: Difficulty,
    seed: Optional[int],
    fast: bool,
) -> List[TableState]:
    """Play `num_games` rounds with four scripted seats, scores carried over"""
    base = FAST_CONFIG if fast else DEFAULT_CONFIG
    config = base.with_overrides(human_seat=None, difficulty=difficulty, seed=seed)
    session = GameSession(config, rng=np.random.default_rng(seed))

    results = []
    for game_num in range(num_games):
        logger.info(f"Starting game {game_num + 1}/{num_games}")
        if game_num == 0:
            session.start()
        else:
            session.next_round()
        state = await session.run_until_finished()
        results.append(state)

        print(format_round(state))
        analysis = analyze_hand(state.players[0], state)
        print(f"  P0 advisor: {analysis.recommended_action} "
              f"(waits {len(analysis.waits)}, shanten {analysis.shanten})")
        print()

    scores = ", ".join(f"P{p.index} {p.score}" for p in results[-1].players)
    print(f"Final scores: {scores}")
    return results


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        description="Watch scripted Riichi Mahjong opponents play",
    )
    parser.add_argument("--games", type=int, default=1,
                        help="Number of rounds to play")
    parser.add_argument("--difficulty", type=str, default="intermediate",
                        choices=[d.name.lower() for d in Difficulty],
                        help="Scripted opponent tier")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for reproducible games")
    parser.add_argument("--fast", action="store_true",
                        help="Skip the thinking delay")
    parser.add_argument("--verbose", action="store_true",
                        help="Log every draw and discard")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
    )

    if args.games < 1:
        parser.error("--games must be at least 1")

    asyncio.run(watch(
        num_games=args.games,
        difficulty=Difficulty[args.difficulty.upper()],
        seed=args.seed,
        fast=args.fast,
    ))
