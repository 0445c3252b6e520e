"""Room game state and its phase/turn transitions.

Every mutator takes the room's `GameState`, mutates it in place and returns a
result object carrying `success` and an optional `GameError`. Legality
failures are never raised. A room's state is owned by exactly one session
actor, so nothing here locks.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from shipwrecker.core.board import (
    PlayerBoard,
    apply_shot,
    clear_ship,
    create_empty_board,
    is_untried,
    paint_ship,
    validate_placement,
)
from shipwrecker.core.errors import OK, GameError, MutationResult, rejected
from shipwrecker.core.fleet import random_fleet
from shipwrecker.core.models import (
    DEFAULT_FLEET,
    Coord,
    Difficulty,
    GameMode,
    GamePhase,
    PlayerSlot,
    Ship,
    ShipPlacement,
    ShipType,
    ShotOutcome,
    in_bounds,
)

logger = logging.getLogger(__name__)

AI_PLAYER_ID = "ai_opponent"


@dataclass(slots=True)
class GameState:
    """Authoritative state of a single room."""

    room_id: str
    phase: GamePhase = GamePhase.WAITING
    mode: GameMode = GameMode.MULTIPLAYER
    difficulty: Difficulty | None = None
    player1: PlayerSlot | None = None
    player2: PlayerSlot | None = None
    current_turn: str | None = None
    winner: str | None = None
    boards: dict[str, PlayerBoard] = field(default_factory=dict)

    @property
    def slots(self) -> tuple[PlayerSlot | None, PlayerSlot | None]:
        return self.player1, self.player2

    @property
    def has_ai_opponent(self) -> bool:
        return self.mode is GameMode.SINGLE_PLAYER


@dataclass(frozen=True, slots=True)
class JoinResult:
    success: bool
    slot: int | None = None
    error: GameError | None = None


@dataclass(frozen=True, slots=True)
class ReadyResult:
    success: bool
    both_ready: bool = False
    error: GameError | None = None


@dataclass(frozen=True, slots=True)
class FireResult:
    """Resolved shot as reported back to the shooter."""

    success: bool
    outcome: ShotOutcome | None = None
    sunk_ship: ShipType | None = None
    game_over: bool = False
    winner: str | None = None
    error: GameError | None = None


def create_game_state(
    room_id: str,
    mode: GameMode = GameMode.MULTIPLAYER,
    difficulty: Difficulty | None = None,
) -> GameState:
    """Create the initial waiting-phase state for a room."""
    return GameState(room_id=room_id, mode=mode, difficulty=difficulty)


def player_slot(state: GameState, player_id: str) -> PlayerSlot | None:
    """Return the slot held by `player_id`, if any."""
    for slot in state.slots:
        if slot is not None and slot.id == player_id:
            return slot
    return None


def slot_number(state: GameState, player_id: str) -> int | None:
    for number, slot in enumerate(state.slots, start=1):
        if slot is not None and slot.id == player_id:
            return number
    return None


def opponent_id(state: GameState, player_id: str) -> str | None:
    """Return the id occupying the other slot."""
    if state.player1 is not None and state.player1.id == player_id:
        return state.player2.id if state.player2 is not None else None
    if state.player2 is not None and state.player2.id == player_id:
        return state.player1.id if state.player1 is not None else None
    return None


def add_player(state: GameState, player_id: str) -> JoinResult:
    """Seat a player, or reconnect one already seated."""
    for number, slot in enumerate(state.slots, start=1):
        if slot is not None and slot.id == player_id:
            slot.connected = True
            return JoinResult(success=True, slot=number)

    if state.player1 is None:
        state.player1 = PlayerSlot(id=player_id)
        state.boards[player_id] = create_empty_board()
        return JoinResult(success=True, slot=1)

    if state.player2 is None:
        state.player2 = PlayerSlot(id=player_id)
        state.boards[player_id] = create_empty_board()
        state.phase = GamePhase.SETUP
        logger.info("phase_change room=%s phase=%s", state.room_id, state.phase.value)
        return JoinResult(success=True, slot=2)

    return JoinResult(success=False, error=GameError.ROOM_FULL)


def join(
    state: GameState,
    player_id: str,
    mode: GameMode | None = None,
    difficulty: Difficulty | None = None,
    *,
    rng: random.Random,
) -> JoinResult:
    """Join a room; the first joiner fixes the mode.

    In single-player mode the computer opponent takes slot 2 immediately with
    a random fleet and is ready from the start. The computer opponent's id is
    reserved and never accepted from a human joiner.
    """
    if player_id == AI_PLAYER_ID:
        logger.info("join_reserved_id room=%s", state.room_id)
        return JoinResult(success=False, error=GameError.RESERVED_PLAYER_ID)

    if state.player1 is None and mode is not None:
        state.mode = mode
        if mode is GameMode.SINGLE_PLAYER:
            state.difficulty = difficulty or Difficulty.MEDIUM

    result = add_player(state, player_id)
    if not result.success:
        return result

    if state.mode is GameMode.SINGLE_PLAYER and state.player2 is None:
        add_player(state, AI_PLAYER_ID)
        deploy_ai_fleet(state, rng)
    return result


def deploy_ai_fleet(state: GameState, rng: random.Random) -> None:
    """Place a random fleet for the computer opponent and mark it ready."""
    for placement in random_fleet(rng, owner=AI_PLAYER_ID).ships:
        place_ship(state, AI_PLAYER_ID, placement)
    ai_slot = player_slot(state, AI_PLAYER_ID)
    if ai_slot is not None:
        ai_slot.ready = True


def remove_player(state: GameState, player_id: str) -> None:
    """Mark a player disconnected; the slot stays reserved for reconnection."""
    slot = player_slot(state, player_id)
    if slot is not None:
        slot.connected = False


def place_ship(state: GameState, player_id: str, placement: ShipPlacement) -> MutationResult:
    """Place one ship during setup."""
    if state.phase is not GamePhase.SETUP:
        return rejected(GameError.PHASE_VIOLATION)
    board = state.boards.get(player_id)
    slot = player_slot(state, player_id)
    if board is None or slot is None:
        return rejected(GameError.PLAYER_NOT_FOUND)

    check = validate_placement(placement.ship_type, placement.start, placement.orientation, board.ships)
    if check.error is not None:
        return rejected(check.error)

    paint_ship(
        board,
        Ship(id=f"{player_id}_{placement.ship_type.value}", ship_type=placement.ship_type, coords=check.coords),
    )
    if _fleet_complete(board):
        slot.ready = True
    return OK


def remove_ship(state: GameState, player_id: str, ship_type: ShipType) -> MutationResult:
    """Take a ship back off the board during setup."""
    if state.phase is not GamePhase.SETUP:
        return rejected(GameError.PHASE_VIOLATION)
    board = state.boards.get(player_id)
    slot = player_slot(state, player_id)
    if board is None or slot is None:
        return rejected(GameError.PLAYER_NOT_FOUND)

    ship = board.ship_of_type(ship_type)
    if ship is None:
        return rejected(GameError.SHIP_NOT_FOUND)
    clear_ship(board, ship)
    slot.ready = False
    return OK


def set_player_ready(state: GameState, player_id: str) -> ReadyResult:
    """Confirm a full fleet; starts play once both players are ready."""
    if state.phase is not GamePhase.SETUP:
        return ReadyResult(success=False, error=GameError.PHASE_VIOLATION)
    slot = player_slot(state, player_id)
    board = state.boards.get(player_id)
    if slot is None or board is None:
        return ReadyResult(success=False, error=GameError.PLAYER_NOT_FOUND)
    if not _fleet_complete(board):
        return ReadyResult(success=False, error=GameError.FLEET_INCOMPLETE)

    slot.ready = True
    first, second = state.slots
    both_ready = False
    if first is not None and second is not None and first.ready and second.ready:
        both_ready = True
        state.phase = GamePhase.PLAYING
        # Slot 1 always opens.
        state.current_turn = first.id
        logger.info("phase_change room=%s phase=%s", state.room_id, state.phase.value)
    return ReadyResult(success=True, both_ready=both_ready)


def fire_shot(state: GameState, player_id: str, coord: Coord) -> FireResult:
    """Resolve a shot by the player holding the turn."""
    if state.phase is not GamePhase.PLAYING:
        return FireResult(success=False, error=GameError.PHASE_VIOLATION)
    if state.current_turn != player_id:
        return FireResult(success=False, error=GameError.NOT_YOUR_TURN)

    target_id = opponent_id(state, player_id)
    if target_id is None or target_id not in state.boards:
        return FireResult(success=False, error=GameError.OPPONENT_NOT_FOUND)
    if not in_bounds(coord):
        return FireResult(success=False, error=GameError.OUT_OF_BOUNDS)

    board = state.boards[target_id]
    if not is_untried(board, coord):
        return FireResult(success=False, error=GameError.CELL_ALREADY_TARGETED)

    report = apply_shot(board, coord)
    logger.debug(
        "shot room=%s shooter=%s row=%d col=%d outcome=%s",
        state.room_id,
        player_id,
        coord.row,
        coord.col,
        report.outcome.value,
    )
    if board.all_ships_sunk:
        state.phase = GamePhase.FINISHED
        state.winner = player_id
        logger.info("game_over room=%s winner=%s", state.room_id, player_id)
        return FireResult(
            success=True,
            outcome=report.outcome,
            sunk_ship=report.sunk_ship,
            game_over=True,
            winner=player_id,
        )

    state.current_turn = target_id
    return FireResult(success=True, outcome=report.outcome, sunk_ship=report.sunk_ship)


def reset_game(state: GameState) -> None:
    """Return a finished room to setup with fresh boards for both players."""
    state.phase = GamePhase.SETUP
    state.current_turn = None
    state.winner = None
    for slot in state.slots:
        if slot is None:
            continue
        slot.ready = False
        state.boards[slot.id] = create_empty_board()


def _fleet_complete(board: PlayerBoard) -> bool:
    placed = {ship.ship_type for ship in board.ships}
    return all(ship_type in placed for ship_type in DEFAULT_FLEET)
