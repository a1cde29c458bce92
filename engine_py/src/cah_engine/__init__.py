"""
Lobby setup and deck assembly for Cards Against Humanity games.
"""

from .models import CAHState, Pack, PackCards, PackChoice, PlayerState
from .session import GameSession
from .setup_flow import ValidationResult, run_setup, start_game

__all__ = [
    "CAHState",
    "GameSession",
    "Pack",
    "PackCards",
    "PackChoice",
    "PlayerState",
    "ValidationResult",
    "run_setup",
    "start_game",
]
