"""
WebSocket tests for the lobby server.
"""

import asyncio
import logging
from dataclasses import fields

import pytest
from fastapi.testclient import TestClient

from cah_engine.main import app, lobby_manager
from cah_engine.ws.server import Lobby, _log_setup_failure


def receive_until(websocket, event_type, limit=10):
    for _ in range(limit):
        message = websocket.receive_json()
        if message["type"] == event_type:
            return message
    raise AssertionError(f"No {event_type} event received")


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["packs"] >= 1


def test_lobby_flow_to_start(client):
    with client.websocket_connect("/ws") as host, client.websocket_connect("/ws") as guest:
        host.send_json({"type": "create", "user_id": "host", "seed": 42})
        lobby_id = receive_until(host, "created")["lobby_id"]
        view = receive_until(host, "view")
        assert view["view"]["title"] == "Cards Against Humanity"
        
        host.send_json({"type": "component", "custom_id": "join"})
        receive_until(host, "view")
        
        guest.send_json({"type": "connect", "lobby_id": lobby_id, "user_id": "guest"})
        receive_until(guest, "view")
        guest.send_json({"type": "component", "custom_id": "join"})
        view = receive_until(guest, "view")
        players = view["view"]["fields"][0]["value"]
        assert "<@host>" in players and "<@guest>" in players
        
        host.send_json({"type": "component", "custom_id": "start"})
        started = receive_until(host, "started")
        state = started["state"]
        assert set(state["players"]) == {"host", "guest"}
        assert state["black_deck_size"] > 0
        assert state["white_deck_size"] >= 20
        
        receive_until(guest, "started")
    
    lobbies = client.get("/lobbies").json()
    assert any(lobby["id"] == lobby_id and lobby["phase"] == "play" for lobby in lobbies)


def test_start_without_players_sends_notice(client):
    with client.websocket_connect("/ws") as host:
        host.send_json({"type": "create", "user_id": "host"})
        receive_until(host, "view")
        
        host.send_json({"type": "component", "custom_id": "start"})
        notice = receive_until(host, "notice")
        assert "At least 2 players" in notice["content"]


def test_errors_are_reported(client):
    with client.websocket_connect("/ws") as websocket:
        websocket.send_json({"type": "component", "custom_id": "join"})
        assert receive_until(websocket, "error")["code"] == "NOT_CONNECTED"
        
        websocket.send_json({"type": "dance"})
        assert receive_until(websocket, "error")["code"] == "INVALID_EVENT"
        
        websocket.send_json({"type": "connect", "lobby_id": "NOPE", "user_id": "u"})
        assert receive_until(websocket, "error")["code"] == "LOBBY_NOT_FOUND"
        
        websocket.send_json({"type": "create", "user_id": "host"})
        receive_until(websocket, "view")
        websocket.send_json({"type": "component", "custom_id": "leave"})
        assert receive_until(websocket, "error")["code"] == "NOT_IN_LOBBY"


def test_component_interactions_carry_lobby_origin(client):
    with client.websocket_connect("/ws") as host:
        host.send_json({"type": "create", "user_id": "host", "origin_id": "guild-7"})
        lobby_id = receive_until(host, "created")["lobby_id"]
        receive_until(host, "view")
        
        lobby = lobby_manager.lobbies[lobby_id]
        assert lobby.session.origin_id == "guild-7"
        assert "origin_id" not in {f.name for f in fields(Lobby)}


def test_failed_setup_is_logged(caplog):
    async def scenario():
        async def broken_setup():
            raise RuntimeError("no packs")
        
        task = asyncio.ensure_future(broken_setup())
        await asyncio.wait([task])
        _log_setup_failure("ABCD1234", task)
    
    with caplog.at_level(logging.ERROR, logger="cah_engine.ws.server"):
        asyncio.run(scenario())
    assert "Setup of lobby ABCD1234 failed" in caplog.text
    assert "no packs" in caplog.text
