"""Headless simulator: measure how many shots each AI tier needs to win."""

from __future__ import annotations

import argparse
import logging
import random
import statistics
from collections.abc import Sequence
from dataclasses import dataclass

from shipwrecker.ai.memory import AIMemory
from shipwrecker.ai.strategy import build_ai_strategy
from shipwrecker.core.board import (
    PlayerBoard,
    apply_shot,
    create_empty_board,
    is_untried,
    paint_ship,
    redact_for_opponent,
)
from shipwrecker.core.fleet import random_fleet
from shipwrecker.core.models import Difficulty, Ship, cells_for_placement
from shipwrecker.infra.config import load_default_env_files, load_game_config
from shipwrecker.infra.logging import setup_logging

logger = logging.getLogger(__name__)

# Upper bound on shots per game; a 10x10 board has 100 cells.
MAX_SHOTS = 100


@dataclass(frozen=True, slots=True)
class SimulationSummary:
    difficulty: Difficulty
    games: int
    mean_shots: float
    best: int
    worst: int


def play_game(difficulty: Difficulty, rng: random.Random) -> int:
    """Let one AI tier sink a random fleet and return the shots it took."""
    board = _random_board(rng)
    strategy = build_ai_strategy(difficulty, rng)
    memory = AIMemory()

    shots = 0
    while not board.all_ships_sunk and shots < MAX_SHOTS:
        view = redact_for_opponent(board)
        coord = strategy.choose_shot(view, memory)
        if not is_untried(board, coord):
            raise RuntimeError(f"{difficulty.value} AI chose a resolved cell: {coord}")
        report = apply_shot(board, coord)
        strategy.notify_result(memory, coord, report.outcome, redact_for_opponent(board))
        shots += 1
    return shots


def simulate(difficulty: Difficulty, games: int, rng: random.Random) -> SimulationSummary:
    results = [play_game(difficulty, rng) for _ in range(games)]
    return SimulationSummary(
        difficulty=difficulty,
        games=games,
        mean_shots=statistics.fmean(results),
        best=min(results),
        worst=max(results),
    )


def _random_board(rng: random.Random) -> PlayerBoard:
    board = create_empty_board()
    for placement in random_fleet(rng, owner="sim").ships:
        coords = cells_for_placement(placement.start, placement.orientation, placement.ship_type.size)
        paint_ship(board, Ship(id=f"sim_{placement.ship_type.value}", ship_type=placement.ship_type, coords=coords))
    return board


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulate AI opponents against random fleets.")
    parser.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty] + ["all"],
        default="all",
        help="AI tier to simulate (default: all)",
    )
    parser.add_argument("--games", type=int, default=200, help="games per tier (default: 200)")
    parser.add_argument("--seed", type=int, default=None, help="random seed (default: SHIPWRECKER_SEED)")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the simulator CLI."""
    load_default_env_files()
    setup_logging()
    args = _parse_args(argv)
    if args.games <= 0:
        logger.error("invalid_games value=%d", args.games)
        return 2

    seed = args.seed if args.seed is not None else load_game_config().seed
    rng = random.Random(seed)
    tiers = list(Difficulty) if args.difficulty == "all" else [Difficulty(args.difficulty)]
    logger.info("simulation_start games=%d tiers=%s seed=%s", args.games, ",".join(t.value for t in tiers), seed)

    for tier in tiers:
        summary = simulate(tier, args.games, rng)
        print(
            f"{summary.difficulty.value:<7} games={summary.games} "
            f"mean={summary.mean_shots:.1f} best={summary.best} worst={summary.worst}"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
