"""Recoverable game errors reported back to the originating caller."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class GameError(StrEnum):
    """Reason codes for rejected intents."""

    PHASE_VIOLATION = "phase_violation"
    NOT_YOUR_TURN = "not_your_turn"
    ROOM_FULL = "room_full"
    PLAYER_NOT_FOUND = "player_not_found"
    SHIP_ALREADY_PLACED = "ship_already_placed"
    OUT_OF_BOUNDS = "out_of_bounds"
    OVERLAP = "overlap"
    SHIP_NOT_FOUND = "ship_not_found"
    FLEET_INCOMPLETE = "fleet_incomplete"
    CELL_ALREADY_TARGETED = "cell_already_targeted"
    OPPONENT_NOT_FOUND = "opponent_not_found"
    INVALID_MESSAGE = "invalid_message"
    NOT_JOINED = "not_joined"
    RESERVED_PLAYER_ID = "reserved_player_id"
    ALREADY_JOINED = "already_joined"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES: dict[GameError, str] = {
    GameError.PHASE_VIOLATION: "Action not allowed in the current phase.",
    GameError.NOT_YOUR_TURN: "Not your turn.",
    GameError.ROOM_FULL: "Room is full.",
    GameError.PLAYER_NOT_FOUND: "Player not found.",
    GameError.SHIP_ALREADY_PLACED: "Ship already placed.",
    GameError.OUT_OF_BOUNDS: "Ship goes out of bounds.",
    GameError.OVERLAP: "Ship overlaps with another ship.",
    GameError.SHIP_NOT_FOUND: "Ship not found.",
    GameError.FLEET_INCOMPLETE: "Not all ships placed.",
    GameError.CELL_ALREADY_TARGETED: "Cell already targeted.",
    GameError.OPPONENT_NOT_FOUND: "Opponent not found.",
    GameError.INVALID_MESSAGE: "Invalid message format.",
    GameError.NOT_JOINED: "Not connected to a player slot.",
    GameError.RESERVED_PLAYER_ID: "Player id is reserved.",
    GameError.ALREADY_JOINED: "Connection already joined as another player.",
}


@dataclass(frozen=True, slots=True)
class MutationResult:
    """Outcome of a state-machine mutator without extra payload."""

    success: bool
    error: GameError | None = None


OK = MutationResult(success=True)


def rejected(error: GameError) -> MutationResult:
    return MutationResult(success=False, error=error)
