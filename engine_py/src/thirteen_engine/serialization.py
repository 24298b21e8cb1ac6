"""
State serialization and sanitization utilities.

Roster payloads never include hands; a hand only ever travels in the
owning player's private ``gameStarted`` event.
"""

from typing import Any, Dict, List

from .models import Player, Session
from .ws.events import (
    CardPayload, GameMessageEvent, GameStartedEvent, LobbyCreatedEvent,
    LobbyUpdatedEvent, PlayerSummary
)


def serialize_player(player: Player) -> PlayerSummary:
    return PlayerSummary(id=player.id, name=player.name, is_host=player.is_host)


def serialize_roster(session: Session) -> List[PlayerSummary]:
    return [serialize_player(player) for player in session.players]


def _host_id(session: Session):
    host = session.host
    return host.id if host else None


def lobby_created_event(session: Session, creator_id: str) -> LobbyCreatedEvent:
    return LobbyCreatedEvent(
        code=session.code,
        lobby_name=session.name,
        players=serialize_roster(session),
        host_id=_host_id(session),
        player_socket_id=creator_id,
    )


def lobby_updated_event(session: Session) -> LobbyUpdatedEvent:
    return LobbyUpdatedEvent(
        code=session.code,
        lobby_name=session.name,
        players=serialize_roster(session),
        host_id=_host_id(session),
    )


def game_started_event(session: Session, player: Player) -> GameStartedEvent:
    """Private payload: the viewer's own hand plus public table info."""
    return GameStartedEvent(
        hand=[CardPayload(**card.to_dict()) for card in player.hand],
        turn_index=session.turn_index,
        players=session.player_names(),
    )


def starting_player_event(session: Session) -> GameMessageEvent:
    starter = session.players[session.turn_index]
    return GameMessageEvent(message=f"Game started! {starter.name} goes first (has 3♠)")


def get_public_lobby_info(session: Session, max_players: int) -> Dict[str, Any]:
    """Get public information about a lobby for listings."""
    return {
        "code": session.code,
        "lobbyName": session.name,
        "started": session.started,
        "playerCount": len(session.players),
        "maxPlayers": max_players,
        "hostId": _host_id(session),
        "players": [
            serialize_player(player).model_dump(by_alias=True)
            for player in session.players
        ],
    }
