"""Random fleet generation for the computer opponent."""

from __future__ import annotations

import logging
import random

from shipwrecker.core.board import validate_placement
from shipwrecker.core.models import (
    BOARD_SIZE,
    DEFAULT_FLEET,
    Coord,
    FleetPlacement,
    Orientation,
    Ship,
    ShipPlacement,
)

logger = logging.getLogger(__name__)

MAX_PLACEMENT_ATTEMPTS = 100


def random_fleet(rng: random.Random, owner: str = "ai") -> FleetPlacement:
    """Generate random non-overlapping placements for the default fleet.

    A ship that cannot be placed within `MAX_PLACEMENT_ATTEMPTS` tries is
    logged and left out; with the default board and fleet this does not happen.
    """
    placements: list[ShipPlacement] = []
    placed: list[Ship] = []

    for ship_type in DEFAULT_FLEET:
        for _ in range(MAX_PLACEMENT_ATTEMPTS):
            orientation = rng.choice((Orientation.HORIZONTAL, Orientation.VERTICAL))
            max_row = BOARD_SIZE - ship_type.size if orientation is Orientation.VERTICAL else BOARD_SIZE - 1
            max_col = BOARD_SIZE - ship_type.size if orientation is Orientation.HORIZONTAL else BOARD_SIZE - 1
            start = Coord(row=rng.randint(0, max_row), col=rng.randint(0, max_col))
            check = validate_placement(ship_type, start, orientation, placed)
            if check.valid:
                placements.append(ShipPlacement(ship_type, start, orientation))
                placed.append(Ship(id=f"{owner}_{ship_type.value}", ship_type=ship_type, coords=check.coords))
                break
        else:
            logger.error(
                "fleet_placement_failed owner=%s ship=%s attempts=%d",
                owner,
                ship_type.value,
                MAX_PLACEMENT_ATTEMPTS,
            )

    return FleetPlacement(ships=placements)
