from __future__ import annotations

import random

import pytest

from shipwrecker.core.models import Coord, FleetPlacement, Orientation, ShipPlacement, ShipType
from shipwrecker.core.rules import (
    GameState,
    add_player,
    create_game_state,
    place_ship,
    set_player_ready,
)


def make_valid_fleet() -> FleetPlacement:
    return FleetPlacement(
        ships=[
            ShipPlacement(ShipType.CARRIER, Coord(0, 0), Orientation.HORIZONTAL),
            ShipPlacement(ShipType.BATTLESHIP, Coord(2, 0), Orientation.HORIZONTAL),
            ShipPlacement(ShipType.CRUISER, Coord(4, 0), Orientation.HORIZONTAL),
            ShipPlacement(ShipType.SUBMARINE, Coord(6, 0), Orientation.HORIZONTAL),
            ShipPlacement(ShipType.DESTROYER, Coord(8, 0), Orientation.HORIZONTAL),
        ]
    )


def make_setup_state(room_id: str = "ROOM01") -> GameState:
    state = create_game_state(room_id)
    add_player(state, "alice")
    add_player(state, "bob")
    return state


def make_playing_state(room_id: str = "ROOM01") -> GameState:
    state = make_setup_state(room_id)
    for player_id in ("alice", "bob"):
        for placement in make_valid_fleet().ships:
            assert place_ship(state, player_id, placement).success
        assert set_player_ready(state, player_id).success
    return state


@pytest.fixture
def valid_fleet() -> FleetPlacement:
    return make_valid_fleet()


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1337)


@pytest.fixture
def setup_state() -> GameState:
    return make_setup_state()


@pytest.fixture
def playing_state() -> GameState:
    return make_playing_state()
