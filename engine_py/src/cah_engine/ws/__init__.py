"""
WebSocket server and event handling for Cards Against Humanity lobbies.
"""

from .events import *
from .server import LobbyManager

__all__ = ["LobbyManager"]
