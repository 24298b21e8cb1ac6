"""
Tests for inbound event parsing and outbound payload shapes.
"""

import pytest

from thirteen_engine.models import Card, Player, Session
from thirteen_engine.serialization import (
    game_started_event, get_public_lobby_info, lobby_created_event, lobby_updated_event
)
from thirteen_engine.ws.events import (
    AssignHostEvent, CreateLobbyEvent, EventType, JoinLobbyEvent, LeaveLobbyEvent,
    StartGameEvent, create_error_event, parse_inbound_event
)


def make_session():
    session = Session(code="WXYZ", name="Game1")
    session.players = [
        Player(id="c0", name="Alice", is_host=True, hand=[Card('3', '♠'), Card('2', '♥')]),
        Player(id="c1", name="Bob", hand=[Card('4', '♦')]),
    ]
    session.turn_index = 0
    return session


def test_parse_create_lobby():
    event = parse_inbound_event({"type": "createLobby", "playerName": "Alice", "lobbyName": "Game1"})
    assert isinstance(event, CreateLobbyEvent)
    assert event.player_name == "Alice"
    assert event.lobby_name == "Game1"


def test_parse_join_lobby_uppercases_code():
    event = parse_inbound_event({"type": "joinLobby", "code": " abcd", "playerName": "Bob"})
    assert isinstance(event, JoinLobbyEvent)
    assert event.code == "ABCD"


def test_parse_leave_start_and_assign_host():
    assert isinstance(parse_inbound_event({"type": "leaveLobby"}), LeaveLobbyEvent)
    assert isinstance(parse_inbound_event({"type": "startGame", "code": "abcd"}), StartGameEvent)

    event = parse_inbound_event({"type": "assignHost", "code": "ABCD", "newHostId": "c2"})
    assert isinstance(event, AssignHostEvent)
    assert event.type == EventType.ASSIGN_HOST
    assert event.new_host_id == "c2"


@pytest.mark.parametrize("data", [
    {},
    {"type": "dealCards"},
    {"type": "joinLobby", "playerName": "Bob"},
    {"type": "createLobby"},
    {"type": "assignHost", "code": "ABCD"},
    ["createLobby"],
])
def test_parse_rejects_malformed_events(data):
    with pytest.raises(ValueError):
        parse_inbound_event(data)


def test_whitespace_name_passes_shape_check():
    # emptiness after trimming is a lobby rule, not a shape rule
    event = parse_inbound_event({"type": "createLobby", "playerName": "   "})
    assert event.player_name == "   "


def test_long_and_padded_names_pass_shape_check():
    name = "   " + "A" * 40 + "   "
    event = parse_inbound_event({"type": "createLobby", "playerName": name, "lobbyName": "L" * 80})
    assert event.player_name == name

    event = parse_inbound_event({"type": "joinLobby", "code": "ABCD", "playerName": name})
    assert event.player_name == name


def test_lobby_created_wire_format():
    wire = lobby_created_event(make_session(), "c0").to_wire()
    assert wire == {
        "type": "lobbyCreated",
        "code": "WXYZ",
        "lobbyName": "Game1",
        "players": [
            {"id": "c0", "name": "Alice", "isHost": True},
            {"id": "c1", "name": "Bob", "isHost": False},
        ],
        "hostId": "c0",
        "playerSocketId": "c0",
    }


def test_lobby_updated_never_includes_hands():
    wire = lobby_updated_event(make_session()).to_wire()
    assert wire["type"] == "lobbyUpdated"
    assert wire["hostId"] == "c0"
    assert all(set(player) == {"id", "name", "isHost"} for player in wire["players"])


def test_game_started_is_private():
    session = make_session()
    wire = game_started_event(session, session.players[1]).to_wire()
    assert wire == {
        "type": "gameStarted",
        "hand": [{"rank": "4", "suit": "♦"}],
        "turnIndex": 0,
        "players": ["Alice", "Bob"],
    }


def test_error_event():
    wire = create_error_event("Lobby not found", "NOT_FOUND").to_wire()
    assert wire == {"type": "errorMessage", "message": "Lobby not found", "code": "NOT_FOUND"}


def test_public_lobby_info():
    info = get_public_lobby_info(make_session(), 4)
    assert info["playerCount"] == 2
    assert info["maxPlayers"] == 4
    assert info["started"] is False
    assert "hand" not in info["players"][0]
