import random

import numpy as np

from shipwrecker.ai.hunt_target import HuntTargetAI
from shipwrecker.ai.memory import AIMemory
from shipwrecker.ai.probability_target import (
    ProbabilityTargetAI,
    probability_density,
    remaining_ship_lengths,
)
from shipwrecker.ai.random_shot import RandomShotAI
from shipwrecker.ai.strategy import FALLBACK_COORD, build_ai_strategy
from shipwrecker.core.board import create_empty_board, is_untried
from shipwrecker.core.models import CellState, Coord, Difficulty, Orientation, Ship, ShipType, ShotOutcome

CLASSIC_LENGTHS = [5, 4, 3, 3, 2]


def test_build_ai_strategy_maps_difficulty() -> None:
    rng = random.Random(1)
    assert isinstance(build_ai_strategy(Difficulty.EASY, rng), RandomShotAI)
    assert isinstance(build_ai_strategy("medium", rng), HuntTargetAI)
    assert isinstance(build_ai_strategy(Difficulty.HARD, rng), ProbabilityTargetAI)
    assert isinstance(build_ai_strategy("impossible", rng), HuntTargetAI)
    assert isinstance(build_ai_strategy(None, rng), HuntTargetAI)


def test_easy_picks_untried_and_keeps_no_memory() -> None:
    view = create_empty_board()
    view.grid[:, :] = CellState.MISS
    view.grid[7, 3] = CellState.EMPTY
    ai = RandomShotAI(random.Random(2))
    memory = AIMemory()
    assert ai.choose_shot(view, memory) == Coord(7, 3)

    ai.notify_result(memory, Coord(7, 3), ShotOutcome.HIT, view)
    assert memory.last_hit is None and not memory.candidates


def test_all_tiers_fall_back_when_board_is_exhausted() -> None:
    view = create_empty_board()
    view.grid[:, :] = CellState.MISS
    for difficulty in Difficulty:
        ai = build_ai_strategy(difficulty, random.Random(3))
        assert ai.choose_shot(view, AIMemory()) == FALLBACK_COORD


def test_medium_drains_candidates_before_hunting() -> None:
    view = create_empty_board()
    view.grid[4, 4] = CellState.HIT
    memory = AIMemory()
    memory.record(Coord(4, 4), ShotOutcome.HIT, view)
    ai = HuntTargetAI(random.Random(4))
    assert ai.choose_shot(view, memory) == Coord(3, 4)


def test_medium_hunt_stays_on_checkerboard_while_available() -> None:
    view = create_empty_board()
    for row in range(10):
        for col in range(10):
            if (row + col) % 2 == 0 and (row, col) != (6, 2):
                view.grid[row, col] = CellState.MISS
    for seed in range(30):
        assert HuntTargetAI(random.Random(seed)).choose_shot(view, AIMemory()) == Coord(6, 2)


def test_medium_hunt_falls_back_to_any_untried_cell() -> None:
    view = create_empty_board()
    for row in range(10):
        for col in range(10):
            if (row + col) % 2 == 0:
                view.grid[row, col] = CellState.MISS
    shot = HuntTargetAI(random.Random(5)).choose_shot(view, AIMemory())
    assert (shot.row + shot.col) % 2 == 1


def test_density_corner_is_lower_than_center() -> None:
    density = probability_density(create_empty_board(), CLASSIC_LENGTHS)
    assert density[0, 0] == 10
    assert density[0, 0] < density[4, 4]
    assert density[9, 9] < density[5, 5]


def test_density_excludes_misses_and_zeroes_resolved_cells() -> None:
    view = create_empty_board()
    view.grid[0, 1] = CellState.MISS
    view.grid[1, 0] = CellState.MISS
    view.grid[5, 5] = CellState.HIT
    density = probability_density(view, CLASSIC_LENGTHS)
    assert density[0, 0] == 0
    assert density[0, 1] == 0
    assert density[5, 5] == 0
    assert density[5, 6] > 0


def test_remaining_lengths_skip_sunk_ships() -> None:
    view = create_empty_board()
    view.ships.append(
        Ship(id="x_destroyer", ship_type=ShipType.DESTROYER, coords=[Coord(0, 0), Coord(0, 1)], hits=2, sunk=True)
    )
    view.ships.append(Ship(id="x_carrier", ship_type=ShipType.CARRIER, coords=[]))
    assert remaining_ship_lengths(view) == [5, 4, 3, 3]


def test_hard_hunt_picks_a_maximum_density_cell() -> None:
    view = create_empty_board()
    density = probability_density(view, CLASSIC_LENGTHS)
    for seed in range(20):
        shot = ProbabilityTargetAI(random.Random(seed)).choose_shot(view, AIMemory())
        assert density[shot.row, shot.col] == density.max()
        assert shot not in {Coord(0, 0), Coord(0, 9), Coord(9, 0), Coord(9, 9)}


def test_hard_follows_known_orientation_first() -> None:
    view = create_empty_board()
    view.grid[5, 5] = CellState.HIT
    view.grid[5, 6] = CellState.HIT
    memory = AIMemory(last_hit=Coord(5, 6), orientation=Orientation.HORIZONTAL)
    memory.push_back([Coord(0, 0)])
    ai = ProbabilityTargetAI(random.Random(6))
    assert ai.choose_shot(view, memory) == Coord(5, 7)

    view.grid[5, 7] = CellState.MISS
    assert ai.choose_shot(view, memory) == Coord(0, 0)


def test_hard_plays_full_game_without_repeating_cells() -> None:
    from shipwrecker.main import play_game

    shots = play_game(Difficulty.HARD, random.Random(8))
    assert 17 <= shots <= 100


def test_every_tier_only_targets_untried_cells() -> None:
    rng = random.Random(9)
    for difficulty in Difficulty:
        view = create_empty_board()
        ai = build_ai_strategy(difficulty, rng)
        memory = AIMemory()
        for _ in range(60):
            shot = ai.choose_shot(view, memory)
            assert is_untried(view, shot)
            view.grid[shot.row, shot.col] = CellState.MISS
            ai.notify_result(memory, shot, ShotOutcome.MISS, view)
        assert int(np.sum(view.grid == CellState.MISS)) == 60
