"""Per-player projections of a room's state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from shipwrecker.core.board import PlayerBoard, create_empty_board, redact_for_opponent
from shipwrecker.core.models import CellState, Coord, Difficulty, GameMode, GamePhase, Ship
from shipwrecker.core.rules import GameState, opponent_id, player_slot, slot_number

Relative = Literal["you", "opponent"]


@dataclass(frozen=True, slots=True)
class ClientView:
    """Game state as one player is allowed to see it."""

    room_id: str
    phase: GamePhase
    mode: GameMode
    difficulty: Difficulty | None
    player_id: str
    player_number: int
    is_your_turn: bool
    your_board: PlayerBoard
    opponent_board: PlayerBoard
    opponent_ready: bool
    opponent_connected: bool
    is_ai_opponent: bool
    winner: Relative | None

    def to_payload(self) -> dict[str, object]:
        """Render as plain JSON-compatible types."""
        return {
            "roomId": self.room_id,
            "phase": self.phase.value,
            "gameMode": self.mode.value,
            "aiDifficulty": self.difficulty.value if self.difficulty is not None else None,
            "playerId": self.player_id,
            "playerNumber": self.player_number,
            "isYourTurn": self.is_your_turn,
            "yourBoard": board_payload(self.your_board),
            "opponentBoard": board_payload(self.opponent_board),
            "opponentReady": self.opponent_ready,
            "opponentConnected": self.opponent_connected,
            "isAIOpponent": self.is_ai_opponent,
            "winner": self.winner,
        }


def get_client_view(state: GameState, player_id: str) -> ClientView | None:
    """Build the view for `player_id`; None when they hold no slot."""
    number = slot_number(state, player_id)
    if number is None:
        return None

    other_id = opponent_id(state, player_id)
    opponent = player_slot(state, other_id) if other_id is not None else None
    if other_id is not None and other_id in state.boards:
        opponent_board = redact_for_opponent(state.boards[other_id])
    else:
        opponent_board = create_empty_board()

    return ClientView(
        room_id=state.room_id,
        phase=state.phase,
        mode=state.mode,
        difficulty=state.difficulty,
        player_id=player_id,
        player_number=number,
        is_your_turn=state.current_turn == player_id,
        your_board=state.boards.get(player_id) or create_empty_board(),
        opponent_board=opponent_board,
        opponent_ready=opponent.ready if opponent is not None else False,
        opponent_connected=opponent.connected if opponent is not None else False,
        is_ai_opponent=state.has_ai_opponent,
        winner=_relative_winner(state.winner, player_id),
    )


def _relative_winner(winner: str | None, player_id: str) -> Relative | None:
    if winner is None:
        return None
    return "you" if winner == player_id else "opponent"


def board_payload(board: PlayerBoard) -> dict[str, object]:
    return {
        "grid": [[CellState(int(value)).label for value in row] for row in board.grid],
        "ships": [_ship_payload(ship) for ship in board.ships],
        "allShipsSunk": board.all_ships_sunk,
    }


def _ship_payload(ship: Ship) -> dict[str, object]:
    return {
        "id": ship.id,
        "type": ship.ship_type.value,
        "length": ship.length,
        "coords": [coord_payload(coord) for coord in ship.coords],
        "hits": ship.hits,
        "sunk": ship.sunk,
    }


def coord_payload(coord: Coord) -> dict[str, int]:
    return {"row": coord.row, "col": coord.col}
