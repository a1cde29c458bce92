"""
State serialization and sanitization utilities.
"""

from typing import Any, Dict, Optional

from .constants import RANDO_ID
from .models import CAHState
from .session import GameSession


def sanitize_state(state: CAHState, viewer_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Sanitize game state for transmission to clients.
    
    Deck contents are never sent, only their sizes. Only the viewer's own
    hand is included.
    
    Args:
        state: Game state to sanitize
        viewer_id: ID of the player viewing the state (to show their cards)
    
    Returns:
        Sanitized state dictionary safe for JSON transmission
    """
    sanitized = {
        "rules": {
            "rando": state.rando,
            "quiplash": state.quiplash,
        },
        "max_points": state.max_points,
        "hand_cards": state.hand_cards,
        "white_deck_size": len(state.white_deck),
        "black_deck_size": len(state.black_deck),
        "players": {},
    }
    
    for player_id, player in state.players.items():
        sanitized_player = {
            "id": player_id,
            "is_rando": player_id == RANDO_ID,
            "points": player.points,
            "hidden": player.hidden,
            "hand_count": len(player.hand),
            "playing_count": len(player.playing),
        }
        
        # Show full hand only to the viewer
        if player_id == viewer_id:
            sanitized_player["hand"] = player.hand.copy()
        
        sanitized["players"][player_id] = sanitized_player
    
    return sanitized


def get_public_lobby_info(session: GameSession) -> Dict[str, Any]:
    """Summary of a lobby for listings."""
    return {
        "id": session.id,
        "phase": session.phase,
        "player_count": len(session.players),
        "min_players": session.min_players(),
        "max_players": session.max_players(),
    }
