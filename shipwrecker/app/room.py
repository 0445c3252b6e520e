"""Room session actor: routes client intents into the game engine.

One `RoomSession` owns one room. The transport feeds it decoded frames and
clock ticks from a single loop, then drains `Outbound` messages addressed to
connection ids. Handlers run to completion, so the game state needs no locks.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from shipwrecker.ai.memory import AIMemory
from shipwrecker.ai.strategy import AIStrategy, build_ai_strategy
from shipwrecker.app.protocol import (
    FireMessage,
    JoinMessage,
    PlaceShipMessage,
    ProtocolError,
    ReadyMessage,
    RematchMessage,
    RemoveShipMessage,
    decode_client_message,
)
from shipwrecker.app.scheduler import Scheduler
from shipwrecker.core.board import redact_for_opponent
from shipwrecker.core.errors import GameError
from shipwrecker.core.models import Coord, GameMode, GamePhase, ShotOutcome
from shipwrecker.core.rules import (
    AI_PLAYER_ID,
    FireResult,
    create_game_state,
    deploy_ai_fleet,
    fire_shot,
    join,
    opponent_id,
    place_ship,
    remove_player,
    remove_ship,
    reset_game,
    set_player_ready,
    slot_number,
)
from shipwrecker.core.views import coord_payload, get_client_view
from shipwrecker.infra.config import GameConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Outbound:
    """A server message addressed to one connection."""

    conn_id: str
    payload: dict[str, object]


class RoomSession:
    """Single-writer owner of one room's game state and AI opponent."""

    def __init__(
        self,
        room_id: str,
        *,
        rng: random.Random,
        scheduler: Scheduler | None = None,
        config: GameConfig | None = None,
    ) -> None:
        self.state = create_game_state(room_id)
        self._rng = rng
        self._scheduler = scheduler or Scheduler()
        self._config = config or GameConfig()
        self._connections: dict[str, str] = {}
        self._rematch_requests: set[str] = set()
        self._ai_strategy: AIStrategy | None = None
        self._ai_memory: AIMemory | None = None
        self._ai_task: int | None = None
        self._outbox: list[Outbound] = []

    @property
    def room_id(self) -> str:
        return self.state.room_id

    @property
    def ai_memory(self) -> AIMemory | None:
        return self._ai_memory

    @property
    def ai_turn_pending(self) -> bool:
        return self._ai_task is not None and self._scheduler.is_pending(self._ai_task)

    def player_for(self, conn_id: str) -> str | None:
        return self._connections.get(conn_id)

    def drain(self) -> list[Outbound]:
        """Return and clear queued outbound messages."""
        messages, self._outbox = self._outbox, []
        return messages

    def tick(self, delta_seconds: float) -> int:
        """Advance the room clock, running any due AI turn."""
        return self._scheduler.advance(delta_seconds)

    def connect(self, conn_id: str) -> None:
        logger.info("connection_open room=%s conn=%s", self.room_id, conn_id)

    def disconnect(self, conn_id: str) -> None:
        player_id = self._connections.pop(conn_id, None)
        if player_id is None:
            return
        logger.info("player_disconnected room=%s player=%s", self.room_id, player_id)
        if player_id in self._connections.values():
            return
        remove_player(self.state, player_id)
        if self.state.has_ai_opponent:
            self._cancel_ai_turn()
        number = slot_number(self.state, player_id)
        if number is not None:
            self._broadcast({"type": "playerLeft", "playerNumber": number})
        self._broadcast_state()

    def handle_message(self, conn_id: str, raw: str | bytes) -> None:
        """Decode and dispatch one client frame."""
        try:
            message = decode_client_message(raw)
        except ProtocolError as exc:
            logger.info("message_rejected room=%s conn=%s reason=%s", self.room_id, conn_id, exc)
            self._send_error(conn_id, GameError.INVALID_MESSAGE)
            return

        if isinstance(message, JoinMessage):
            self._handle_join(conn_id, message)
            return

        player_id = self._connections.get(conn_id)
        if player_id is None:
            self._send_error(conn_id, GameError.NOT_JOINED)
            return

        match message:
            case PlaceShipMessage(placement=placement):
                result = place_ship(self.state, player_id, placement)
                if not result.success:
                    self._send_error(conn_id, result.error)
                    return
                self._send_state(conn_id, player_id)
            case RemoveShipMessage(ship_type=ship_type):
                result = remove_ship(self.state, player_id, ship_type)
                if not result.success:
                    self._send_error(conn_id, result.error)
                    return
                self._send_state(conn_id, player_id)
            case ReadyMessage():
                self._handle_ready(conn_id, player_id)
            case FireMessage(coord=coord):
                self._handle_fire(conn_id, player_id, coord)
            case RematchMessage():
                self._handle_rematch(conn_id, player_id)

    def _handle_join(self, conn_id: str, message: JoinMessage) -> None:
        bound = self._connections.get(conn_id)
        if bound is not None and bound != message.player_id:
            logger.info("join_rejected room=%s conn=%s bound=%s", self.room_id, conn_id, bound)
            self._send_error(conn_id, GameError.ALREADY_JOINED)
            return

        for existing_conn, existing_player in list(self._connections.items()):
            if existing_player == message.player_id and existing_conn != conn_id:
                # Reconnection by identity: the old handle is dropped.
                del self._connections[existing_conn]

        difficulty = message.difficulty
        if message.mode is GameMode.SINGLE_PLAYER and difficulty is None:
            difficulty = self._config.default_difficulty
        result = join(self.state, message.player_id, message.mode, difficulty, rng=self._rng)
        if not result.success:
            logger.info("join_rejected room=%s player=%s error=%s", self.room_id, message.player_id, result.error)
            self._send_error(conn_id, result.error)
            return

        self._connections[conn_id] = message.player_id
        if self.state.has_ai_opponent and self._ai_strategy is None:
            self._ai_strategy = build_ai_strategy(self.state.difficulty, self._rng)
            self._ai_memory = AIMemory()
        logger.info(
            "player_joined room=%s player=%s slot=%s mode=%s",
            self.room_id,
            message.player_id,
            result.slot,
            self.state.mode.value,
        )
        self._broadcast({"type": "playerJoined", "playerNumber": result.slot})
        self._broadcast_state()
        self._schedule_ai_turn()

    def _handle_ready(self, conn_id: str, player_id: str) -> None:
        result = set_player_ready(self.state, player_id)
        if not result.success:
            self._send_error(conn_id, result.error)
            return
        if result.both_ready:
            self._broadcast({"type": "phaseChange", "phase": GamePhase.PLAYING.value})
        self._broadcast_state()
        self._schedule_ai_turn()

    def _handle_fire(self, conn_id: str, player_id: str, coord: Coord) -> None:
        result = fire_shot(self.state, player_id, coord)
        if result.outcome is None:
            self._send_error(conn_id, result.error)
            return
        self._publish_shot(player_id, coord, result.outcome, result)
        self._schedule_ai_turn()

    def _handle_rematch(self, conn_id: str, player_id: str) -> None:
        if self.state.phase is not GamePhase.FINISHED:
            self._send_error(conn_id, GameError.PHASE_VIOLATION)
            return

        self._rematch_requests.add(player_id)
        self._broadcast({"type": "rematchRequested", "byPlayer": slot_number(self.state, player_id)})
        if self.state.has_ai_opponent:
            self._rematch_requests.add(AI_PLAYER_ID)

        occupied = [slot.id for slot in self.state.slots if slot is not None]
        if len(occupied) < 2 or not all(pid in self._rematch_requests for pid in occupied):
            return

        self._rematch_requests.clear()
        self._cancel_ai_turn()
        reset_game(self.state)
        if self.state.has_ai_opponent:
            deploy_ai_fleet(self.state, self._rng)
            self._ai_memory = AIMemory()
        logger.info("rematch_started room=%s", self.room_id)
        self._broadcast({"type": "rematchStarted"})
        self._broadcast({"type": "phaseChange", "phase": GamePhase.SETUP.value})
        self._broadcast_state()

    def _schedule_ai_turn(self) -> None:
        if not self._is_ai_turn():
            return
        self._cancel_ai_turn()
        delay = self._rng.uniform(self._config.ai_delay_min, self._config.ai_delay_max)
        self._ai_task = self._scheduler.call_later(delay, self._run_ai_turn)
        logger.debug("ai_turn_scheduled room=%s delay=%.2f", self.room_id, delay)

    def _cancel_ai_turn(self) -> None:
        if self._ai_task is not None:
            self._scheduler.cancel(self._ai_task)
            self._ai_task = None

    def _is_ai_turn(self) -> bool:
        return (
            self.state.has_ai_opponent
            and self.state.phase is GamePhase.PLAYING
            and self.state.current_turn == AI_PLAYER_ID
        )

    def _run_ai_turn(self) -> None:
        self._ai_task = None
        if not self._is_ai_turn():
            logger.debug("ai_turn_skipped room=%s phase=%s", self.room_id, self.state.phase.value)
            return
        target_id = opponent_id(self.state, AI_PLAYER_ID)
        if target_id is None or self._ai_strategy is None or self._ai_memory is None:
            return

        view = redact_for_opponent(self.state.boards[target_id])
        coord = self._ai_strategy.choose_shot(view, self._ai_memory)
        result = fire_shot(self.state, AI_PLAYER_ID, coord)
        outcome = result.outcome
        if outcome is None:
            logger.warning(
                "ai_shot_rejected room=%s row=%d col=%d error=%s",
                self.room_id,
                coord.row,
                coord.col,
                result.error,
            )
            return

        logger.debug(
            "ai_shot room=%s row=%d col=%d outcome=%s mode=%s",
            self.room_id,
            coord.row,
            coord.col,
            outcome.value,
            self._ai_memory.mode.value,
        )
        self._ai_strategy.notify_result(
            self._ai_memory, coord, outcome, redact_for_opponent(self.state.boards[target_id])
        )
        self._publish_shot(AI_PLAYER_ID, coord, outcome, result)

    def _publish_shot(self, shooter_id: str, coord: Coord, outcome: ShotOutcome, result: FireResult) -> None:
        sunk = result.sunk_ship.value if result.sunk_ship is not None else None
        for conn_id in self._connections_for(shooter_id):
            self._push(
                conn_id,
                {
                    "type": "shotResult",
                    "result": {
                        "coord": coord_payload(coord),
                        "result": outcome.value,
                        "sunkShip": sunk,
                        "gameOver": result.game_over,
                    },
                },
            )
        target_id = opponent_id(self.state, shooter_id)
        if target_id is not None:
            for conn_id in self._connections_for(target_id):
                self._push(
                    conn_id,
                    {
                        "type": "opponentShot",
                        "coord": coord_payload(coord),
                        "result": outcome.value,
                        "sunkShip": sunk,
                    },
                )

        if result.game_over:
            self._broadcast({"type": "phaseChange", "phase": GamePhase.FINISHED.value})
            for conn_id, player_id in self._connections.items():
                self._push(
                    conn_id,
                    {"type": "gameOver", "winner": "you" if player_id == result.winner else "opponent"},
                )
        else:
            for conn_id, player_id in self._connections.items():
                self._push(conn_id, {"type": "turnChange", "isYourTurn": self.state.current_turn == player_id})
        self._broadcast_state()

    def _connections_for(self, player_id: str) -> list[str]:
        return [conn_id for conn_id, pid in self._connections.items() if pid == player_id]

    def _send_state(self, conn_id: str, player_id: str) -> None:
        view = get_client_view(self.state, player_id)
        if view is not None:
            self._push(conn_id, {"type": "gameState", "state": view.to_payload()})

    def _broadcast_state(self) -> None:
        for conn_id, player_id in self._connections.items():
            self._send_state(conn_id, player_id)

    def _broadcast(self, payload: dict[str, object]) -> None:
        for conn_id in self._connections:
            self._push(conn_id, payload)

    def _send_error(self, conn_id: str, error: GameError | None) -> None:
        code = error or GameError.INVALID_MESSAGE
        self._push(conn_id, {"type": "error", "code": code.value, "message": code.message})

    def _push(self, conn_id: str, payload: dict[str, object]) -> None:
        self._outbox.append(Outbound(conn_id=conn_id, payload=payload))
