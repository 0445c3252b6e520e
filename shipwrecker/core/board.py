"""Board state representation, placement validation and shot resolution."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

import numpy as np

from shipwrecker.core.errors import GameError
from shipwrecker.core.models import (
    BOARD_SIZE,
    CellState,
    Coord,
    Orientation,
    Ship,
    ShipType,
    ShotOutcome,
    UNTRIED_STATES,
    cells_for_placement,
    in_bounds,
)


def _empty_grid() -> np.ndarray:
    return np.full((BOARD_SIZE, BOARD_SIZE), CellState.EMPTY, dtype=np.int8)


@dataclass(slots=True)
class PlayerBoard:
    """Numpy-backed grid of cell states plus the ships placed on it."""

    grid: np.ndarray = field(default_factory=_empty_grid)
    ships: list[Ship] = field(default_factory=list)
    all_ships_sunk: bool = False

    @property
    def size(self) -> int:
        return int(self.grid.shape[0])

    def cell(self, coord: Coord) -> CellState:
        return CellState(int(self.grid[coord.row, coord.col]))

    def ship_at(self, coord: Coord) -> Ship | None:
        for ship in self.ships:
            if ship.occupies(coord):
                return ship
        return None

    def ship_of_type(self, ship_type: ShipType) -> Ship | None:
        for ship in self.ships:
            if ship.ship_type is ship_type:
                return ship
        return None


@dataclass(frozen=True, slots=True)
class PlacementCheck:
    """Result of validating a placement request."""

    coords: list[Coord]
    error: GameError | None = None

    @property
    def valid(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class ShotReport:
    """Outcome of applying one shot to a board."""

    outcome: ShotOutcome
    sunk_ship: ShipType | None = None


def create_empty_board() -> PlayerBoard:
    """Return a fresh all-empty board with no ships."""
    return PlayerBoard()


def validate_placement(
    ship_type: ShipType,
    start: Coord,
    orientation: Orientation,
    existing_ships: list[Ship],
) -> PlacementCheck:
    """Validate a placement against bounds and already placed ships."""
    coords = cells_for_placement(start, orientation, ship_type.size)
    if any(ship.ship_type is ship_type for ship in existing_ships):
        return PlacementCheck(coords=[], error=GameError.SHIP_ALREADY_PLACED)
    if not all(in_bounds(coord) for coord in coords):
        return PlacementCheck(coords=coords, error=GameError.OUT_OF_BOUNDS)
    occupied = {coord for ship in existing_ships for coord in ship.coords}
    if any(coord in occupied for coord in coords):
        return PlacementCheck(coords=coords, error=GameError.OVERLAP)
    return PlacementCheck(coords=coords)


def paint_ship(board: PlayerBoard, ship: Ship) -> None:
    """Add a validated ship to the board."""
    board.ships.append(ship)
    for coord in ship.coords:
        board.grid[coord.row, coord.col] = CellState.SHIP


def clear_ship(board: PlayerBoard, ship: Ship) -> None:
    """Remove a ship and restore its cells to empty."""
    board.ships.remove(ship)
    for coord in ship.coords:
        board.grid[coord.row, coord.col] = CellState.EMPTY


def apply_shot(board: PlayerBoard, coord: Coord) -> ShotReport:
    """Resolve a shot at a cell the caller already checked as untargeted."""
    ship = board.ship_at(coord)
    if ship is None:
        board.grid[coord.row, coord.col] = CellState.MISS
        return ShotReport(ShotOutcome.MISS)

    ship.hits += 1
    if ship.hits >= ship.length:
        ship.sunk = True
        for cell in ship.coords:
            board.grid[cell.row, cell.col] = CellState.SUNK
        board.all_ships_sunk = are_all_ships_sunk(board.ships)
        return ShotReport(ShotOutcome.SUNK, ship.ship_type)

    board.grid[coord.row, coord.col] = CellState.HIT
    return ShotReport(ShotOutcome.HIT)


def are_all_ships_sunk(ships: list[Ship]) -> bool:
    return bool(ships) and all(ship.sunk for ship in ships)


def redact_for_opponent(board: PlayerBoard) -> PlayerBoard:
    """Project a board for the opponent, hiding unsunk ship positions."""
    grid = board.grid.copy()
    grid[grid == CellState.SHIP] = CellState.EMPTY
    ships: list[Ship] = []
    for ship in board.ships:
        ships.append(replace(ship, coords=list(ship.coords) if ship.sunk else []))
    return PlayerBoard(grid=grid, ships=ships, all_ships_sunk=board.all_ships_sunk)


def is_untried(board: PlayerBoard, coord: Coord) -> bool:
    """Return whether a coordinate is on the board and not yet fired at."""
    return in_bounds(coord, board.size) and board.cell(coord) in UNTRIED_STATES


def untried_cells(board: PlayerBoard) -> list[Coord]:
    """Return every cell still open to a shot, in row-major order."""
    mask = (board.grid == CellState.EMPTY) | (board.grid == CellState.SHIP)
    return [Coord(int(row), int(col)) for row, col in np.argwhere(mask)]
