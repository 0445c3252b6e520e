"""AI strategy interface and selection utilities."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod

from shipwrecker.ai.memory import AIMemory
from shipwrecker.core.board import PlayerBoard, untried_cells
from shipwrecker.core.models import Coord, Difficulty, ShotOutcome

# Returned when nothing is left to shoot at; unreachable before the fleet sinks.
FALLBACK_COORD = Coord(0, 0)


class AIStrategy(ABC):
    """Shot selection over the redacted opponent board."""

    def __init__(self, rng: random.Random) -> None:
        self._rng = rng

    @abstractmethod
    def choose_shot(self, view: PlayerBoard, memory: AIMemory) -> Coord:
        """Return next coordinate to fire."""

    def notify_result(self, memory: AIMemory, coord: Coord, outcome: ShotOutcome, view: PlayerBoard) -> None:
        """Update memory with the outcome of the shot at `coord`."""
        memory.record(coord, outcome, view)

    def _random_untried(self, view: PlayerBoard) -> Coord:
        untried = untried_cells(view)
        if not untried:
            return FALLBACK_COORD
        return self._rng.choice(untried)


def build_ai_strategy(difficulty: Difficulty | str | None, rng: random.Random) -> AIStrategy:
    """Construct AI strategy from selected difficulty; unknown values mean medium."""
    from shipwrecker.ai.hunt_target import HuntTargetAI
    from shipwrecker.ai.probability_target import ProbabilityTargetAI
    from shipwrecker.ai.random_shot import RandomShotAI

    match _resolve_difficulty(difficulty):
        case Difficulty.EASY:
            return RandomShotAI(rng)
        case Difficulty.HARD:
            return ProbabilityTargetAI(rng)
        case Difficulty.MEDIUM:
            return HuntTargetAI(rng)


def _resolve_difficulty(difficulty: Difficulty | str | None) -> Difficulty:
    if difficulty is None:
        return Difficulty.MEDIUM
    try:
        return Difficulty(difficulty)
    except ValueError:
        return Difficulty.MEDIUM
