"""Hunt/Target AI strategy with checkerboard hunting."""

from __future__ import annotations

from shipwrecker.ai.memory import AIMemory
from shipwrecker.ai.strategy import FALLBACK_COORD, AIStrategy
from shipwrecker.core.board import PlayerBoard, untried_cells
from shipwrecker.core.models import Coord


class HuntTargetAI(AIStrategy):
    """Medium AI: follow up queued hits, otherwise hunt on one checkerboard colour."""

    def choose_shot(self, view: PlayerBoard, memory: AIMemory) -> Coord:
        candidate = memory.pop_candidate(view)
        if candidate is not None:
            return candidate
        return self.hunt(view)

    def hunt(self, view: PlayerBoard) -> Coord:
        untried = untried_cells(view)
        if not untried:
            return FALLBACK_COORD
        # Every ship of length >= 2 covers at least one even-parity cell.
        parity = [coord for coord in untried if (coord.row + coord.col) % 2 == 0]
        return self._rng.choice(parity or untried)
