"""Probability-density AI with orientation-aware target mode."""

from __future__ import annotations

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from shipwrecker.ai.memory import AIMemory, axis_neighbors
from shipwrecker.ai.strategy import AIStrategy
from shipwrecker.core.board import PlayerBoard, is_untried
from shipwrecker.core.models import DEFAULT_FLEET, CellState, Coord


class ProbabilityTargetAI(AIStrategy):
    """Hard AI that hunts where the most remaining-ship placements overlap."""

    def choose_shot(self, view: PlayerBoard, memory: AIMemory) -> Coord:
        if memory.orientation is not None and memory.last_hit is not None:
            for cell in axis_neighbors(memory.last_hit, memory.orientation):
                if is_untried(view, cell):
                    return cell

        candidate = memory.pop_candidate(view)
        if candidate is not None:
            return candidate
        return self.hunt(view)

    def hunt(self, view: PlayerBoard) -> Coord:
        density = probability_density(view, remaining_ship_lengths(view))
        best = int(density.max())
        if best == 0:
            return self._random_untried(view)
        cells = [Coord(int(row), int(col)) for row, col in np.argwhere(density == best)]
        return self._rng.choice(cells)


def remaining_ship_lengths(view: PlayerBoard) -> list[int]:
    """Lengths of fleet ships not yet visible as sunk."""
    sunk = {ship.ship_type for ship in view.ships if ship.sunk}
    return [ship_type.size for ship_type in DEFAULT_FLEET if ship_type not in sunk]


def probability_density(view: PlayerBoard, lengths: list[int]) -> np.ndarray:
    """Count, per cell, the ship placements that could still cover it.

    Placements may not cross miss or sunk cells. Cells already fired at are
    zeroed in the result.
    """
    size = view.size
    blocked = (view.grid == CellState.MISS) | (view.grid == CellState.SUNK)
    density = np.zeros((size, size), dtype=np.int32)

    for length in lengths:
        if length > size:
            continue
        span = size - length + 1
        # fits[r, c]: a horizontal ship can start at (r, c)
        fits = ~sliding_window_view(blocked, length, axis=1).any(axis=-1)
        for offset in range(length):
            density[:, offset : offset + span] += fits
        fits = ~sliding_window_view(blocked, length, axis=0).any(axis=-1)
        for offset in range(length):
            density[offset : offset + span, :] += fits

    resolved = (view.grid == CellState.HIT) | blocked
    density[resolved] = 0
    return density
