"""
WebSocket transport for Thirteen lobbies.
"""

import logging
import uuid
from typing import Callable, Dict, Iterable, List, Optional

import orjson
from fastapi import WebSocket, WebSocketDisconnect

from ..engine import Emission, LobbyEngine
from ..errors import INTERNAL_ERROR, INVALID_EVENT, GameError
from .events import (
    AssignHostEvent, CreateLobbyEvent, EventType, InboundEvent, JoinLobbyEvent,
    LeaveLobbyEvent, OutboundEvent, StartGameEvent, create_error_event, parse_inbound_event
)

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Manages WebSocket connections and delivery."""

    def __init__(self):
        self.active_connections: Dict[str, WebSocket] = {}

    async def connect(self, websocket: WebSocket, connection_id: str):
        await websocket.accept()
        self.active_connections[connection_id] = websocket
        logger.info(f"Player connected: {connection_id}")

    def disconnect(self, connection_id: str):
        if connection_id in self.active_connections:
            del self.active_connections[connection_id]
            logger.info(f"Player disconnected: {connection_id}")

    async def send_personal_message(self, event: OutboundEvent, connection_id: str):
        websocket = self.active_connections.get(connection_id)
        if websocket is None:
            return
        try:
            await websocket.send_text(event.to_json())
        except Exception as e:
            logger.error(f"Error sending {event.type.value} to {connection_id}: {e}")

    async def deliver(self, emissions: Iterable[Emission]):
        for emission in emissions:
            for connection_id in emission.targets:
                await self.send_personal_message(emission.event, connection_id)


class LobbyWebSocketServer:
    def __init__(self, engine: Optional[LobbyEngine] = None):
        self.engine = engine or LobbyEngine()
        self.connection_manager = ConnectionManager()
        self.handlers: Dict[EventType, Callable[[str, InboundEvent], List[Emission]]] = {
            EventType.CREATE_LOBBY: self.handle_create_lobby,
            EventType.JOIN_LOBBY: self.handle_join_lobby,
            EventType.LEAVE_LOBBY: self.handle_leave_lobby,
            EventType.START_GAME: self.handle_start_game,
            EventType.ASSIGN_HOST: self.handle_assign_host,
        }

    async def handle_websocket(self, websocket: WebSocket, connection_id: Optional[str] = None):
        if not connection_id:
            connection_id = uuid.uuid4().hex

        await self.connection_manager.connect(websocket, connection_id)

        try:
            while True:
                data = await websocket.receive_text()
                await self.handle_message(data, connection_id)

        except WebSocketDisconnect:
            logger.info(f"WebSocket disconnected for {connection_id}")
        except Exception as e:
            logger.error(f"WebSocket error for {connection_id}: {e}")
        finally:
            self.connection_manager.disconnect(connection_id)
            await self.connection_manager.deliver(self.engine.disconnect(connection_id))

    async def handle_message(self, data: str, connection_id: str):
        try:
            event = parse_inbound_event(orjson.loads(data))
        except ValueError as e:
            logger.warning(f"Invalid event from {connection_id}: {e}")
            await self.send_error(connection_id, str(e), INVALID_EVENT)
            return

        try:
            emissions = self.handlers[event.type](connection_id, event)
        except GameError as e:
            logger.warning(f"{event.type.value} rejected for {connection_id}: {e}")
            await self.send_error(connection_id, e.message, e.code)
            return
        except Exception as e:
            logger.error(f"Error handling {event.type.value} from {connection_id}: {e}")
            await self.send_error(connection_id, "Internal server error", INTERNAL_ERROR)
            return

        await self.connection_manager.deliver(emissions)

    async def send_error(self, connection_id: str, message: str, code: str):
        await self.connection_manager.send_personal_message(
            create_error_event(message, code), connection_id
        )

    def handle_create_lobby(self, connection_id: str, event: CreateLobbyEvent) -> List[Emission]:
        return self.engine.create_lobby(connection_id, event.player_name, event.lobby_name)

    def handle_join_lobby(self, connection_id: str, event: JoinLobbyEvent) -> List[Emission]:
        return self.engine.join_lobby(connection_id, event.code, event.player_name)

    def handle_leave_lobby(self, connection_id: str, event: LeaveLobbyEvent) -> List[Emission]:
        return self.engine.leave_lobby(connection_id)

    def handle_start_game(self, connection_id: str, event: StartGameEvent) -> List[Emission]:
        return self.engine.start_game(connection_id, event.code)

    def handle_assign_host(self, connection_id: str, event: AssignHostEvent) -> List[Emission]:
        return self.engine.assign_host(connection_id, event.code, event.new_host_id)
