"""
Tests for lobby message controls.
"""

import pytest

from cah_engine.ui import Button, FlagsInput, MessageController, NumberInput


def test_flags_toggle_bound_values():
    values = [False, True]
    flags = FlagsInput("flags0", "Rules", ["A", "B"], values)
    
    assert flags.toggle(0) is True
    flags.handle("1")
    assert values == [True, False]
    
    with pytest.raises(IndexError):
        flags.toggle(2)


def test_flags_need_one_value_per_option():
    with pytest.raises(ValueError):
        FlagsInput("flags0", "Rules", ["A", "B"], [False])


def test_number_input_clamps_and_reports():
    seen = []
    number = NumberInput("number0", "Cards", 5, 10, 20, seen.append)
    
    assert seen == [10]
    assert number.set(50) == 20
    assert number.step(-100) == 5
    number.handle("max")
    assert seen[-1] == 6
    
    rendered = number.render()
    assert rendered["can_decrease"] and rendered["can_increase"]
    
    with pytest.raises(ValueError):
        number.handle("sideways")


def test_number_default_must_be_in_range():
    with pytest.raises(ValueError):
        NumberInput("number0", "Cards", 5, 30, 20, lambda value: None)


def test_message_render_and_disable(transport):
    message = MessageController(lambda: {"title": "Lobby"}, transport)
    message.add_control(FlagsInput("flags0", "Rules", ["A"], [False]))
    message.add_button(Button("join", "Join"))
    message.add_button(Button("start", "Start"))
    
    message.disable_buttons(None, "join")
    view = transport.views[-1]
    
    assert view["title"] == "Lobby"
    assert view["components"][0]["type"] == "flags"
    buttons = {button["id"]: button["disabled"] for button in view["components"][1]["components"]}
    assert buttons == {"join": True, "start": False}
    
    message.clear_controls()
    assert [component["type"] for component in message.render()["components"]] == ["row"]


def test_notify_is_ephemeral(transport):
    message = MessageController(lambda: {}, transport)
    message.notify(None, "only you")
    
    assert transport.messages[-1][2] is True
    assert transport.notices == ["only you"]
