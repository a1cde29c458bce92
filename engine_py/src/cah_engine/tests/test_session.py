"""
Tests for the game session roster and component routing.
"""

import asyncio

import pytest

from cah_engine.constants import PHASE_PLAY
from cah_engine.errors import (
    ALREADY_JOINED, LOBBY_CLOSED, LOBBY_FULL, NOT_IN_LOBBY, UNKNOWN_COMPONENT, GameError
)
from cah_engine.ui import MessageController

from conftest import user


def test_join_and_leave_call_hooks(session):
    events = []
    session.on_join(lambda interaction, player_id: events.append(("join", player_id)))
    session.on_leave(lambda interaction, player_id: events.append(("leave", player_id)))
    session.set_player_limits(2, 4)
    
    session.handle_join(user("a"))
    session.handle_join(user("b"))
    session.handle_leave(user("a"))
    
    assert session.players == ["b"]
    assert events == [("join", "a"), ("join", "b"), ("leave", "a")]


def test_join_rejections(session):
    session.set_player_limits(1, 1)
    session.handle_join(user("a"))
    
    with pytest.raises(GameError) as excinfo:
        session.handle_join(user("a"))
    assert excinfo.value.code == ALREADY_JOINED
    
    with pytest.raises(GameError) as excinfo:
        session.handle_join(user("b"))
    assert excinfo.value.code == LOBBY_FULL
    
    with pytest.raises(GameError) as excinfo:
        session.handle_leave(user("b"))
    assert excinfo.value.code == NOT_IN_LOBBY


def test_invalid_player_limits(session):
    with pytest.raises(ValueError):
        session.set_player_limits(3, 2)


def test_unknown_component(session):
    with pytest.raises(GameError) as excinfo:
        session.handle_component(user("a"), "flags9:0")
    assert excinfo.value.code == UNKNOWN_COMPONENT


def test_bad_flag_index_is_reported(session, transport):
    message = MessageController(lambda: {}, transport)
    session.add_flags_input(message, "Rules", ["A"], [False])
    
    with pytest.raises(GameError) as excinfo:
        session.handle_component(user("a"), "flags0:7")
    assert excinfo.value.code == UNKNOWN_COMPONENT


def test_component_changes_rerender(session, transport):
    message = MessageController(lambda: {"title": "t"}, transport)
    values = [False]
    session.add_flags_input(message, "Rules", ["A"], values)
    session.set_setup_message(message, lambda interaction, message: None)
    
    session.handle_component(user("a"), "flags0:0")
    
    assert values == [True]
    assert transport.views[-1]["components"][0]["options"][0]["enabled"] is True


def test_reset_controls_drops_inputs(session, transport):
    message = MessageController(lambda: {}, transport)
    session.add_number_input(message, "Cards", 1, 2, 3, lambda value: None)
    session.set_setup_message(message, lambda interaction, message: None)
    session.reset_controls()
    
    assert message.controls == []
    with pytest.raises(GameError):
        session.handle_component(user("a"), "number0__max")


def test_start_lobby_moves_to_play(session, transport):
    started = []
    
    async def listener(s):
        started.append(s.id)
    
    session.on_started(listener)
    message = MessageController(lambda: {}, transport)
    asyncio.run(session.start_lobby(message))
    
    assert session.phase == PHASE_PLAY
    assert started == ["test-session"]
    assert transport.views
    
    with pytest.raises(GameError) as excinfo:
        session.handle_component(user("a"), "join")
    assert excinfo.value.code == LOBBY_CLOSED
