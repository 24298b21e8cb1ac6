"""
End-to-end tests for the WebSocket transport and HTTP endpoints.
"""

import random

import pytest
from fastapi.testclient import TestClient

from thirteen_engine.engine import Emission, LobbyEngine
from thirteen_engine.main import create_app
from thirteen_engine.ws.events import GameMessageEvent
from thirteen_engine.ws.server import ConnectionManager, LobbyWebSocketServer


class FakeWebSocket:
    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    async def send_text(self, text):
        if self.fail:
            raise RuntimeError("connection reset")
        self.sent.append(text)


@pytest.fixture
def client():
    with TestClient(create_app(LobbyEngine(rng=random.Random(8)))) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "lobbies": 0, "connections": 0}


def test_unknown_lobby_info(client):
    assert client.get("/lobbies/ABCD").status_code == 404


def test_full_game_setup_flow(client):
    with client.websocket_connect("/ws") as alice, \
            client.websocket_connect("/ws") as bob, \
            client.websocket_connect("/ws") as carol, \
            client.websocket_connect("/ws") as dave:
        alice.send_json({"type": "createLobby", "playerName": "Alice", "lobbyName": "Game1"})
        created = alice.receive_json()
        assert created["type"] == "lobbyCreated"
        code = created["code"]
        assert created["hostId"] == created["playerSocketId"]

        joined = [alice]
        for ws, name in ((bob, "Bob"), (carol, "Carol"), (dave, "Dave")):
            ws.send_json({"type": "joinLobby", "code": code.lower(), "playerName": name})
            joined.append(ws)
            for member in joined:
                update = member.receive_json()
                assert update["type"] == "lobbyUpdated"
                assert len(update["players"]) == len(joined)

        info = client.get(f"/lobbies/{code.lower()}").json()
        assert info["playerCount"] == 4

        bob.send_json({"type": "startGame", "code": code})
        error = bob.receive_json()
        assert error["type"] == "errorMessage"
        assert error["code"] == "AUTHORIZATION_ERROR"

        alice.send_json({"type": "startGame", "code": code})
        hands = []
        for member in joined:
            started = member.receive_json()
            assert started["type"] == "gameStarted"
            assert len(started["hand"]) == 13
            assert started["players"] == ["Alice", "Bob", "Carol", "Dave"]
            hands.append(started["hand"])

            message = member.receive_json()
            assert message["type"] == "gameMessage"

        turn_index = started["turnIndex"]
        assert {"rank": "3", "suit": "♠"} in hands[turn_index]

        dealt = [(card["rank"], card["suit"]) for hand in hands for card in hand]
        assert len(set(dealt)) == 52


def test_host_disconnect_reassigns_host(client):
    with client.websocket_connect("/ws") as bob:
        with client.websocket_connect("/ws") as alice:
            alice.send_json({"type": "createLobby", "playerName": "Alice", "lobbyName": "G"})
            code = alice.receive_json()["code"]

            bob.send_json({"type": "joinLobby", "code": code, "playerName": "Bob"})
            alice.receive_json()
            bob_id = bob.receive_json()["players"][1]["id"]

        update = bob.receive_json()
        assert update["type"] == "lobbyUpdated"
        assert update["hostId"] == bob_id
        assert update["players"] == [{"id": bob_id, "name": "Bob", "isHost": True}]

        bob.send_json({"type": "leaveLobby", "code": code})
        bob.send_json({"type": "startGame", "code": code})
        assert bob.receive_json()["message"] == "Lobby not found"


def test_connection_ids_are_full_uuids(client):
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "createLobby", "playerName": "Alice"})
        connection_id = ws.receive_json()["playerSocketId"]

    assert len(connection_id) == 32
    int(connection_id, 16)


def test_invalid_messages_get_error_replies(client):
    with client.websocket_connect("/ws") as ws:
        ws.send_text("not json")
        assert ws.receive_json()["code"] == "INVALID_EVENT"

        ws.send_json({"type": "shuffle"})
        assert ws.receive_json()["code"] == "INVALID_EVENT"

        ws.send_json({"type": "joinLobby", "code": "ZZZZ", "playerName": "Bob"})
        error = ws.receive_json()
        assert error == {"type": "errorMessage", "message": "Lobby not found", "code": "NOT_FOUND"}


@pytest.mark.asyncio
async def test_deliver_sends_to_each_target():
    manager = ConnectionManager()
    first, second = FakeWebSocket(), FakeWebSocket()
    manager.active_connections = {"a": first, "b": second}

    await manager.deliver([
        Emission(GameMessageEvent(message="hello"), ["a", "b", "gone"]),
        Emission(GameMessageEvent(message="just a"), ["a"]),
    ])

    assert len(first.sent) == 2
    assert len(second.sent) == 1
    assert '"gameMessage"' in second.sent[0]


@pytest.mark.asyncio
async def test_send_failure_does_not_stop_delivery():
    manager = ConnectionManager()
    broken, healthy = FakeWebSocket(fail=True), FakeWebSocket()
    manager.active_connections = {"a": broken, "b": healthy}

    await manager.deliver([Emission(GameMessageEvent(message="hi"), ["a", "b"])])

    assert healthy.sent


@pytest.mark.asyncio
async def test_handle_message_routes_by_type():
    server = LobbyWebSocketServer(LobbyEngine(rng=random.Random(1)))
    socket = FakeWebSocket()
    server.connection_manager.active_connections["c0"] = socket

    await server.handle_message('{"type": "createLobby", "playerName": "Alice"}', "c0")
    await server.handle_message('{"type": "createLobby", "playerName": "Alice"}', "c0")

    assert '"lobbyCreated"' in socket.sent[0]
    assert '"MEMBERSHIP_CONFLICT"' in socket.sent[1]
    assert len(server.engine.registry) == 1
