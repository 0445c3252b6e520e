import orjson
import pytest

from shipwrecker.app.protocol import (
    FireMessage,
    JoinMessage,
    PlaceShipMessage,
    ProtocolError,
    ReadyMessage,
    RematchMessage,
    RemoveShipMessage,
    decode_client_message,
    encode_server_message,
)
from shipwrecker.core.models import Coord, Difficulty, GameMode, Orientation, ShipType


def test_decode_join_with_optional_fields() -> None:
    assert decode_client_message('{"type": "join", "playerId": "p1"}') == JoinMessage(player_id="p1")
    message = decode_client_message(
        b'{"type": "join", "playerId": "p1", "gameMode": "singlePlayer", "aiDifficulty": "hard"}'
    )
    assert message == JoinMessage(player_id="p1", mode=GameMode.SINGLE_PLAYER, difficulty=Difficulty.HARD)


def test_decode_setup_and_battle_messages() -> None:
    place = decode_client_message(
        orjson.dumps(
            {
                "type": "placeShip",
                "placement": {"shipType": "cruiser", "startCoord": {"row": 2, "col": 3}, "orientation": "vertical"},
            }
        )
    )
    assert isinstance(place, PlaceShipMessage)
    assert place.placement.ship_type is ShipType.CRUISER
    assert place.placement.start == Coord(2, 3)
    assert place.placement.orientation is Orientation.VERTICAL

    assert decode_client_message('{"type": "removeShip", "shipType": "destroyer"}') == RemoveShipMessage(
        ShipType.DESTROYER
    )
    assert decode_client_message('{"type": "ready"}') == ReadyMessage()
    assert decode_client_message('{"type": "fire", "coord": {"row": 0, "col": 9}}') == FireMessage(Coord(0, 9))
    assert decode_client_message('{"type": "rematch"}') == RematchMessage()


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "[1, 2]",
        '{"type": "dance"}',
        '{"type": "join"}',
        '{"type": "join", "playerId": "p1", "gameMode": "solo"}',
        '{"type": "fire", "coord": {"row": "1", "col": 2}}',
        '{"type": "fire", "coord": {"row": true, "col": 2}}',
        '{"type": "fire"}',
        '{"type": "removeShip", "shipType": "canoe"}',
        '{"type": "placeShip", "placement": {"shipType": "cruiser", "orientation": "vertical"}}',
    ],
)
def test_decode_rejects_malformed_frames(raw: str) -> None:
    with pytest.raises(ProtocolError):
        decode_client_message(raw)


def test_encode_server_message_round_trips_payload() -> None:
    payload = {"type": "turnChange", "isYourTurn": True}
    assert orjson.loads(encode_server_message(payload)) == payload
