"""Persistent hunt/target memory of the computer opponent."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import StrEnum

from shipwrecker.core.board import PlayerBoard, is_untried
from shipwrecker.core.models import Coord, Orientation, ShotOutcome


class TargetMode(StrEnum):
    HUNT = "hunt"
    TARGET = "target"


@dataclass(slots=True)
class AIMemory:
    """Hunt/target state carried between AI turns.

    `candidates` is a priority deque: the front is investigated first and
    cells that were resolved in the meantime are dropped when popped.
    """

    mode: TargetMode = TargetMode.HUNT
    candidates: deque[Coord] = field(default_factory=deque)
    last_hit: Coord | None = None
    orientation: Orientation | None = None

    def push_front(self, coords: list[Coord]) -> None:
        """Queue coords ahead of everything else, keeping their order."""
        self.candidates.extendleft(reversed(coords))

    def push_back(self, coords: list[Coord]) -> None:
        self.candidates.extend(coords)

    def pop_candidate(self, view: PlayerBoard) -> Coord | None:
        """Pop the highest-priority candidate that is still untried."""
        while self.candidates:
            coord = self.candidates.popleft()
            if is_untried(view, coord):
                return coord
        return None

    def reset(self) -> None:
        self.mode = TargetMode.HUNT
        self.candidates.clear()
        self.last_hit = None
        self.orientation = None

    def record(self, coord: Coord, outcome: ShotOutcome, view: PlayerBoard) -> None:
        """Update memory from the outcome of a shot at `coord`.

        `view` is the opponent board after the shot was applied.
        """
        match outcome:
            case ShotOutcome.HIT:
                self._record_hit(coord, view)
            case ShotOutcome.SUNK:
                self.reset()
            case ShotOutcome.MISS:
                pass

    def _record_hit(self, coord: Coord, view: PlayerBoard) -> None:
        self.mode = TargetMode.TARGET
        self.push_front([cell for cell in orthogonal_neighbors(coord) if is_untried(view, cell)])

        previous = self.last_hit
        if previous is not None:
            if previous.row == coord.row:
                self.orientation = Orientation.HORIZONTAL
            elif previous.col == coord.col:
                self.orientation = Orientation.VERTICAL
            if previous.row == coord.row or previous.col == coord.col:
                self.push_front([cell for cell in axis_neighbors(coord, self.orientation) if is_untried(view, cell)])

        self.last_hit = coord


def orthogonal_neighbors(coord: Coord) -> list[Coord]:
    """Up, down, left, right."""
    return [
        Coord(coord.row - 1, coord.col),
        Coord(coord.row + 1, coord.col),
        Coord(coord.row, coord.col - 1),
        Coord(coord.row, coord.col + 1),
    ]


def axis_neighbors(coord: Coord, orientation: Orientation | None) -> list[Coord]:
    """The two neighbors along `orientation`: left/right or up/down."""
    match orientation:
        case Orientation.HORIZONTAL:
            return [Coord(coord.row, coord.col - 1), Coord(coord.row, coord.col + 1)]
        case Orientation.VERTICAL:
            return [Coord(coord.row - 1, coord.col), Coord(coord.row + 1, coord.col)]
        case None:
            return []
