"""
WebSocket event models and validation.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..registry import normalize_code


class EventType(str, Enum):
    """Inbound event types."""
    CREATE_LOBBY = "createLobby"
    JOIN_LOBBY = "joinLobby"
    LEAVE_LOBBY = "leaveLobby"
    START_GAME = "startGame"
    ASSIGN_HOST = "assignHost"


class OutboundEventType(str, Enum):
    """Outbound event types."""
    LOBBY_CREATED = "lobbyCreated"
    LOBBY_UPDATED = "lobbyUpdated"
    ERROR_MESSAGE = "errorMessage"
    GAME_STARTED = "gameStarted"
    GAME_MESSAGE = "gameMessage"


# Inbound event models
class BaseEvent(BaseModel):
    """Base event model."""
    model_config = ConfigDict(populate_by_name=True)

    type: EventType


class CodeEvent(BaseEvent):
    """Event addressed to a lobby by code."""
    code: str = Field(..., max_length=16)

    @field_validator('code')
    @classmethod
    def uppercase_code(cls, v):
        return normalize_code(v)


class CreateLobbyEvent(BaseEvent):
    """Create lobby event."""
    type: EventType = EventType.CREATE_LOBBY
    player_name: str = Field(..., alias="playerName")
    lobby_name: str = Field(default="", alias="lobbyName")


class JoinLobbyEvent(CodeEvent):
    """Join lobby event."""
    type: EventType = EventType.JOIN_LOBBY
    player_name: str = Field(..., alias="playerName")


class LeaveLobbyEvent(BaseEvent):
    """Leave lobby event. The bound lobby is used whatever code is sent."""
    type: EventType = EventType.LEAVE_LOBBY
    code: Optional[str] = None


class StartGameEvent(CodeEvent):
    """Start game event."""
    type: EventType = EventType.START_GAME


class AssignHostEvent(CodeEvent):
    """Hand host privileges to another player."""
    type: EventType = EventType.ASSIGN_HOST
    new_host_id: str = Field(..., alias="newHostId", min_length=1)


# Union type for all inbound events
InboundEvent = Union[
    CreateLobbyEvent,
    JoinLobbyEvent,
    LeaveLobbyEvent,
    StartGameEvent,
    AssignHostEvent,
]


# Outbound event models
class OutboundEvent(BaseModel):
    """Base for server -> client events."""
    model_config = ConfigDict(populate_by_name=True)

    type: OutboundEventType

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class PlayerSummary(BaseModel):
    """Roster entry. Never carries a hand."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    is_host: bool = Field(..., alias="isHost")


class CardPayload(BaseModel):
    rank: str
    suit: str


class LobbyCreatedEvent(OutboundEvent):
    """Creation confirmation, sent to the creator only."""
    type: OutboundEventType = OutboundEventType.LOBBY_CREATED
    code: str
    lobby_name: str = Field(..., alias="lobbyName")
    players: List[PlayerSummary]
    host_id: Optional[str] = Field(..., alias="hostId")
    player_socket_id: str = Field(..., alias="playerSocketId")


class LobbyUpdatedEvent(OutboundEvent):
    """Roster broadcast."""
    type: OutboundEventType = OutboundEventType.LOBBY_UPDATED
    code: str
    lobby_name: str = Field(..., alias="lobbyName")
    players: List[PlayerSummary]
    host_id: Optional[str] = Field(..., alias="hostId")


class ErrorMessageEvent(OutboundEvent):
    """Error event."""
    type: OutboundEventType = OutboundEventType.ERROR_MESSAGE
    message: str
    code: Optional[str] = None


class GameStartedEvent(OutboundEvent):
    """Private deal payload for one player."""
    type: OutboundEventType = OutboundEventType.GAME_STARTED
    hand: List[CardPayload]
    turn_index: int = Field(..., alias="turnIndex")
    players: List[str]


class GameMessageEvent(OutboundEvent):
    """Announcement to the whole lobby."""
    type: OutboundEventType = OutboundEventType.GAME_MESSAGE
    message: str


def parse_inbound_event(data: Any) -> InboundEvent:
    """
    Parse raw event data into appropriate event model.

    Args:
        data: Raw event data from WebSocket

    Returns:
        Parsed event model

    Raises:
        ValueError: If event type is invalid or data is malformed
    """
    if not isinstance(data, dict):
        raise ValueError("Event must be a JSON object")

    event_type = data.get("type")

    if not event_type:
        raise ValueError("Missing event type")

    try:
        event_type = EventType(event_type)
    except ValueError:
        raise ValueError(f"Invalid event type: {event_type}")

    event_map = {
        EventType.CREATE_LOBBY: CreateLobbyEvent,
        EventType.JOIN_LOBBY: JoinLobbyEvent,
        EventType.LEAVE_LOBBY: LeaveLobbyEvent,
        EventType.START_GAME: StartGameEvent,
        EventType.ASSIGN_HOST: AssignHostEvent,
    }

    event_class = event_map[event_type]

    try:
        return event_class(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid event data: {e.errors()[0]['msg']}")


def create_error_event(message: str, code: Optional[str] = None) -> ErrorMessageEvent:
    """Create an error event."""
    return ErrorMessageEvent(message=message, code=code)
