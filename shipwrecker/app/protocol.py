"""Client/server message codec for the room session."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, TypeVar

import orjson

from shipwrecker.core.models import (
    Coord,
    Difficulty,
    GameMode,
    Orientation,
    ShipPlacement,
    ShipType,
)


E = TypeVar("E", bound=StrEnum)


class ProtocolError(ValueError):
    """Raised when a client frame cannot be decoded into a known message."""


@dataclass(frozen=True, slots=True)
class JoinMessage:
    player_id: str
    mode: GameMode | None = None
    difficulty: Difficulty | None = None


@dataclass(frozen=True, slots=True)
class PlaceShipMessage:
    placement: ShipPlacement


@dataclass(frozen=True, slots=True)
class RemoveShipMessage:
    ship_type: ShipType


@dataclass(frozen=True, slots=True)
class ReadyMessage:
    pass


@dataclass(frozen=True, slots=True)
class FireMessage:
    coord: Coord


@dataclass(frozen=True, slots=True)
class RematchMessage:
    pass


ClientMessage = JoinMessage | PlaceShipMessage | RemoveShipMessage | ReadyMessage | FireMessage | RematchMessage


def decode_client_message(raw: str | bytes) -> ClientMessage:
    """Parse one JSON frame into a typed client message."""
    try:
        payload = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise ProtocolError(f"malformed json: {exc}") from exc
    if not isinstance(payload, dict):
        raise ProtocolError("message must be a JSON object")

    match payload.get("type"):
        case "join":
            player_id = payload.get("playerId")
            if not isinstance(player_id, str) or not player_id.strip():
                raise ProtocolError("join requires a non-empty playerId")
            return JoinMessage(
                player_id=player_id,
                mode=_optional_enum(GameMode, payload.get("gameMode"), "gameMode"),
                difficulty=_optional_enum(Difficulty, payload.get("aiDifficulty"), "aiDifficulty"),
            )
        case "placeShip":
            placement = _require_dict(payload.get("placement"), "placement")
            return PlaceShipMessage(
                placement=ShipPlacement(
                    ship_type=_enum(ShipType, placement.get("shipType"), "shipType"),
                    start=_coord(placement.get("startCoord"), "startCoord"),
                    orientation=_enum(Orientation, placement.get("orientation"), "orientation"),
                )
            )
        case "removeShip":
            return RemoveShipMessage(ship_type=_enum(ShipType, payload.get("shipType"), "shipType"))
        case "ready":
            return ReadyMessage()
        case "fire":
            return FireMessage(coord=_coord(payload.get("coord"), "coord"))
        case "rematch":
            return RematchMessage()
        case other:
            raise ProtocolError(f"unknown message type: {other!r}")


def encode_server_message(payload: dict[str, Any]) -> bytes:
    """Serialize an outbound message to a JSON frame."""
    return orjson.dumps(payload)


def _require_dict(value: object, name: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ProtocolError(f"{name} must be an object")
    return value


def _coord(value: object, name: str) -> Coord:
    data = _require_dict(value, name)
    row = data.get("row")
    col = data.get("col")
    # bool is an int subclass; reject it explicitly.
    if not all(isinstance(v, int) and not isinstance(v, bool) for v in (row, col)):
        raise ProtocolError(f"{name} requires integer row and col")
    return Coord(row=row, col=col)


def _enum(kind: type[E], value: object, name: str) -> E:
    try:
        return kind(value)
    except ValueError as exc:
        raise ProtocolError(f"invalid {name}: {value!r}") from exc


def _optional_enum(kind: type[E], value: object, name: str) -> E | None:
    if value is None:
        return None
    return _enum(kind, value, name)
