"""Lobby engine: validates requests, mutates lobby state, and says who to tell"""

import logging
import random
import threading
from dataclasses import dataclass
from typing import List, Optional

from .errors import (
    ALREADY_STARTED, AUTHORIZATION_ERROR, CAPACITY_EXCEEDED, DUPLICATE_NAME,
    INSUFFICIENT_PLAYERS, MEMBERSHIP_CONFLICT, NOT_FOUND, VALIDATION_ERROR, raise_error
)
from .models import Player, Session
from .registry import SessionRegistry
from .rules import RuleConfig, default_rules
from .serialization import (
    game_started_event, lobby_created_event, lobby_updated_event, starting_player_event
)
from .shuffle import find_starting_player_index, setup_round
from .ws.events import OutboundEvent

logger = logging.getLogger(__name__)


@dataclass
class Emission:
    """One outbound event and the connections that should receive it."""
    event: OutboundEvent
    targets: List[str]


class LobbyEngine:
    """
    Every public operation checks all of its preconditions before touching
    any state, so a rejected request leaves the registry exactly as it was.
    Failures raise GameError; successes return the emissions to deliver.
    """

    def __init__(self, rules: RuleConfig = default_rules, rng: Optional[random.Random] = None,
                 registry: Optional[SessionRegistry] = None):
        self.rules = rules
        self.rng = rng or random.Random()
        self.registry = registry or SessionRegistry(self.rng, rules.code_length)
        self.lock = threading.RLock()

    def get_lobby(self, code: str) -> Optional[Session]:
        return self.registry.lookup(code)

    def create_lobby(self, connection_id: str, player_name: str, lobby_name: str = "") -> List[Emission]:
        with self.lock:
            name = self._require_name(player_name)
            self._require_unbound(connection_id)

            session = self.registry.create_session((lobby_name or "").strip() or f"{name}'s lobby")
            session.players.append(Player(id=connection_id, name=name, is_host=True))
            self.registry.bind(connection_id, session.code)

            logger.info(f"Lobby {session.code} created by {name} ({connection_id})")
            return [Emission(lobby_created_event(session, connection_id), [connection_id])]

    def join_lobby(self, connection_id: str, code: str, player_name: str) -> List[Emission]:
        with self.lock:
            name = self._require_name(player_name)
            self._require_unbound(connection_id)
            session = self.registry.require(code)

            if session.is_full(self.rules.max_players):
                raise_error(CAPACITY_EXCEEDED, "Lobby is full")
            if session.started:
                raise_error(ALREADY_STARTED, "Game already started")
            if any(self.rules.same_name(player.name, name) for player in session.players):
                raise_error(DUPLICATE_NAME, f"The name {name} is already taken in this lobby")

            session.players.append(Player(id=connection_id, name=name))
            self.registry.bind(connection_id, session.code)

            logger.info(f"{name} joined lobby {session.code} ({len(session.players)}/{self.rules.max_players})")
            return [self._to_lobby(session, lobby_updated_event(session))]

    def leave_lobby(self, connection_id: str) -> List[Emission]:
        with self.lock:
            session = self.registry.session_for(connection_id)
            if session is None:
                raise_error(NOT_FOUND, "You are not in a lobby")

            return self._remove_player(session, connection_id)

    def disconnect(self, connection_id: str) -> List[Emission]:
        """Transport-initiated removal. Never raises; unknown connections are a no-op."""
        with self.lock:
            session = self.registry.session_for(connection_id)
            if session is None:
                self.registry.unbind(connection_id)
                return []

            return self._remove_player(session, connection_id)

    def start_game(self, connection_id: str, code: str) -> List[Emission]:
        with self.lock:
            session = self.registry.require(code)
            self._require_host(session, connection_id, "Only the host can start the game")

            if session.started:
                raise_error(ALREADY_STARTED, "Game already started")
            if len(session.players) != self.rules.max_players:
                raise_error(
                    INSUFFICIENT_PLAYERS,
                    f"Need {self.rules.max_players} players to start "
                    f"({len(session.players)}/{self.rules.max_players})"
                )

            setup_round(session, self.rng, self.rules)
            session.started = True

            logger.info(f"Game started in lobby {session.code}, turn index {session.turn_index}")

            emissions = [
                Emission(game_started_event(session, player), [player.id])
                for player in session.players
            ]
            emissions.append(self._to_lobby(session, starting_player_event(session)))
            return emissions

    def assign_host(self, connection_id: str, code: str, new_host_id: str) -> List[Emission]:
        with self.lock:
            session = self.registry.require(code)
            self._require_host(session, connection_id, "Only the host can assign a new host")

            new_host = session.find_player(new_host_id)
            if new_host is None:
                raise_error(NOT_FOUND, "Player not found in this lobby")

            for player in session.players:
                player.is_host = player is new_host

            logger.info(f"Lobby {session.code}: host is now {new_host.name}")
            return [self._to_lobby(session, lobby_updated_event(session))]

    def _remove_player(self, session: Session, connection_id: str) -> List[Emission]:
        player = session.find_player(connection_id)
        if player is not None:
            session.players.remove(player)
        self.registry.unbind(connection_id)

        name = player.name if player else connection_id
        logger.info(f"{name} left lobby {session.code}")

        if not session.players:
            self.registry.delete_if_empty(session.code)
            return []

        if player is not None and player.is_host:
            session.players[0].is_host = True
            logger.info(f"Lobby {session.code}: host passed to {session.players[0].name}")

        if session.started:
            session.turn_index = find_starting_player_index(session.players)

        return [self._to_lobby(session, lobby_updated_event(session))]

    def _to_lobby(self, session: Session, event: OutboundEvent) -> Emission:
        return Emission(event, [player.id for player in session.players])

    def _require_name(self, player_name: Optional[str]) -> str:
        name = (player_name or "").strip()
        if not name:
            raise_error(VALIDATION_ERROR, "Player name is required")
        return name

    def _require_unbound(self, connection_id: str):
        if self.registry.code_for(connection_id) is not None:
            raise_error(MEMBERSHIP_CONFLICT, "You are already in a lobby")

    def _require_host(self, session: Session, connection_id: str, message: str):
        host = session.host
        if host is None or host.id != connection_id:
            raise_error(AUTHORIZATION_ERROR, message)
