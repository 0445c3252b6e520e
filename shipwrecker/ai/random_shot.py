"""Easy AI: uniform random fire."""

from __future__ import annotations

from shipwrecker.ai.memory import AIMemory
from shipwrecker.ai.strategy import AIStrategy
from shipwrecker.core.board import PlayerBoard
from shipwrecker.core.models import Coord, ShotOutcome


class RandomShotAI(AIStrategy):
    """Picks any untried cell with equal probability and keeps no memory."""

    def choose_shot(self, view: PlayerBoard, memory: AIMemory) -> Coord:
        return self._random_untried(view)

    def notify_result(self, memory: AIMemory, coord: Coord, outcome: ShotOutcome, view: PlayerBoard) -> None:
        return None
