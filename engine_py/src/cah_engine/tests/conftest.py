"""
Shared fixtures for lobby tests.
"""

import asyncio
import random

import pytest

from cah_engine.models import CAHState, Pack, PackCards
from cah_engine.session import GameSession
from cah_engine.setup_flow import run_setup
from cah_engine.ui import Interaction


class RecordingTransport:
    """Keeps every delivered message for inspection."""
    
    def __init__(self):
        self.messages = []
    
    def deliver(self, interaction, payload, ephemeral=False):
        self.messages.append((interaction, payload, ephemeral))
    
    @property
    def notices(self):
        return [payload["content"] for _, payload, ephemeral in self.messages if ephemeral]
    
    @property
    def views(self):
        return [payload for _, payload, ephemeral in self.messages if not ephemeral]


def make_pack(name, white=40, black=10):
    return Pack(
        name=name,
        cards=PackCards(
            white=[f"{name} white {i}" for i in range(white)],
            black=[f"{name} black {i}" for i in range(black)],
        ),
    )


def user(user_id, origin_id=None):
    return Interaction(user_id=user_id, origin_id=origin_id)


class Lobby:
    """A lobby opened with run_setup, driven from inside a running loop."""
    
    def __init__(self, session, state, transport, task):
        self.session = session
        self.state = state
        self.transport = transport
        self.task = task
    
    def join(self, *user_ids):
        for user_id in user_ids:
            self.session.handle_join(user(user_id))
    
    def press(self, user_id, custom_id, value=None):
        self.session.handle_component(user(user_id), custom_id, value)
    
    def start(self, user_id="p1"):
        return self.session.handle_start(user(user_id))
    
    async def settle(self):
        for _ in range(5):
            await asyncio.sleep(0)
    
    def close(self):
        if not self.task.done():
            self.task.cancel()


async def open_lobby(catalog, origin_id=None, seed=1234, **kwargs):
    transport = RecordingTransport()
    session = GameSession("test-lobby", transport, origin_id=origin_id)
    state = CAHState()
    task = asyncio.ensure_future(run_setup(
        session, state, user("host", origin_id),
        catalog=catalog, rng=random.Random(seed), **kwargs
    ))
    await asyncio.sleep(0)
    return Lobby(session, state, transport, task)


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def session(transport):
    return GameSession("test-session", transport)
