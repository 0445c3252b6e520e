import logging
import random

from shipwrecker.core import fleet as fleet_module
from shipwrecker.core.board import validate_placement
from shipwrecker.core.errors import GameError
from shipwrecker.core.fleet import random_fleet
from shipwrecker.core.models import DEFAULT_FLEET, Ship, cells_for_placement, in_bounds


def test_random_fleet_is_complete_and_non_overlapping(seeded_rng) -> None:
    for _ in range(25):
        fleet = random_fleet(seeded_rng)
        assert [p.ship_type for p in fleet.ships] == list(DEFAULT_FLEET)
        occupied = set()
        for placement in fleet.ships:
            cells = cells_for_placement(placement.start, placement.orientation, placement.ship_type.size)
            assert all(in_bounds(cell) for cell in cells)
            assert occupied.isdisjoint(cells)
            occupied.update(cells)


def test_random_fleet_is_reproducible_from_seed() -> None:
    assert random_fleet(random.Random(7)) == random_fleet(random.Random(7))


def test_random_fleet_logs_and_skips_unplaceable_ship(monkeypatch, caplog) -> None:
    def _always_overlap(ship_type, start, orientation, existing: list[Ship]):
        check = validate_placement(ship_type, start, orientation, existing)
        if ship_type is DEFAULT_FLEET[-1]:
            return type(check)(coords=[], error=GameError.OVERLAP)
        return check

    monkeypatch.setattr(fleet_module, "validate_placement", _always_overlap)
    with caplog.at_level(logging.ERROR, logger="shipwrecker.core.fleet"):
        fleet = random_fleet(random.Random(3))

    assert len(fleet.ships) == len(DEFAULT_FLEET) - 1
    assert fleet.by_type(DEFAULT_FLEET[-1]) is None
    assert "fleet_placement_failed" in caplog.text
