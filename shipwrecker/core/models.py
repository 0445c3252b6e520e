"""Core domain models used by game logic."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, StrEnum

BOARD_SIZE = 10


class Orientation(StrEnum):
    """Ship orientation."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class ShipType(StrEnum):
    """Classic Battleship ship types."""

    CARRIER = "carrier"
    BATTLESHIP = "battleship"
    CRUISER = "cruiser"
    SUBMARINE = "submarine"
    DESTROYER = "destroyer"

    @property
    def size(self) -> int:
        return SHIP_LENGTHS[self]


SHIP_LENGTHS: dict[ShipType, int] = {
    ShipType.CARRIER: 5,
    ShipType.BATTLESHIP: 4,
    ShipType.CRUISER: 3,
    ShipType.SUBMARINE: 3,
    ShipType.DESTROYER: 2,
}

DEFAULT_FLEET: tuple[ShipType, ...] = (
    ShipType.CARRIER,
    ShipType.BATTLESHIP,
    ShipType.CRUISER,
    ShipType.SUBMARINE,
    ShipType.DESTROYER,
)


class CellState(IntEnum):
    """Per-cell board state; values are the numpy grid codes."""

    EMPTY = 0
    SHIP = 1
    HIT = 2
    MISS = 3
    SUNK = 4

    @property
    def label(self) -> str:
        return self.name.lower()


UNTRIED_STATES: frozenset[CellState] = frozenset({CellState.EMPTY, CellState.SHIP})


class ShotOutcome(StrEnum):
    """Result of a single resolved shot."""

    HIT = "hit"
    MISS = "miss"
    SUNK = "sunk"


class GamePhase(StrEnum):
    """Room lifecycle phase."""

    WAITING = "waiting"
    SETUP = "setup"
    PLAYING = "playing"
    FINISHED = "finished"


class GameMode(StrEnum):
    """Room opponent mode."""

    MULTIPLAYER = "multiplayer"
    SINGLE_PLAYER = "singlePlayer"


class Difficulty(StrEnum):
    """Computer opponent strength."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True, slots=True)
class Coord:
    """Board coordinate."""

    row: int
    col: int


@dataclass(frozen=True, slots=True)
class ShipPlacement:
    """Placement request for a single ship."""

    ship_type: ShipType
    start: Coord
    orientation: Orientation


@dataclass(slots=True)
class Ship:
    """A placed ship and its damage."""

    id: str
    ship_type: ShipType
    coords: list[Coord]
    hits: int = 0
    sunk: bool = False

    @property
    def length(self) -> int:
        return self.ship_type.size

    def occupies(self, coord: Coord) -> bool:
        return coord in self.coords


@dataclass(slots=True)
class PlayerSlot:
    """One of the two seats in a room."""

    id: str
    ready: bool = False
    connected: bool = True


@dataclass(slots=True)
class FleetPlacement:
    """Collection of ship placements."""

    ships: list[ShipPlacement] = field(default_factory=list)

    def by_type(self, ship_type: ShipType) -> ShipPlacement | None:
        """Find ship placement for the given type."""
        for ship in self.ships:
            if ship.ship_type == ship_type:
                return ship
        return None


def cells_for_placement(start: Coord, orientation: Orientation, length: int) -> list[Coord]:
    """Compute occupied cells for a ship starting at `start`."""
    result: list[Coord] = []
    for i in range(length):
        if orientation is Orientation.HORIZONTAL:
            result.append(Coord(start.row, start.col + i))
        else:
            result.append(Coord(start.row + i, start.col))
    return result


def in_bounds(coord: Coord, size: int = BOARD_SIZE) -> bool:
    """Return whether the coordinate is in board bounds."""
    return 0 <= coord.row < size and 0 <= coord.col < size
