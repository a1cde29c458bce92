"""
Multiplayer game session: roster, lobby controls and the lobby-to-play transition.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from .constants import (
    GAME_NAME, JOIN_BUTTON, LEAVE_BUTTON, PHASE_LOBBY, PHASE_PLAY, START_BUTTON
)
from .errors import (
    ALREADY_JOINED, LOBBY_CLOSED, LOBBY_FULL, NOT_IN_LOBBY,
    UNKNOWN_COMPONENT, GameError
)
from .ui import Button, FlagsInput, Interaction, MessageController, NumberInput, Transport

logger = logging.getLogger(__name__)

PlayerHook = Callable[[Interaction, str], None]
StartHook = Callable[[Interaction, MessageController], Any]
StartedListener = Callable[["GameSession"], Awaitable[None]]


class GameSession:
    """Tracks who is in a lobby and routes their interactions."""
    
    def __init__(self, session_id: str, transport: Transport, origin_id: Optional[str] = None, name: str = GAME_NAME):
        self.id = session_id
        self.transport = transport
        self.origin_id = origin_id
        self.name = name
        self.phase = PHASE_LOBBY
        self.players: List[str] = []
        self._min_players = 1
        self._max_players = 1
        self._join: Optional[PlayerHook] = None
        self._leave: Optional[PlayerHook] = None
        self._controls: Dict[str, Any] = {}
        self._message: Optional[MessageController] = None
        self._on_start: Optional[StartHook] = None
        self._started_listeners: List[StartedListener] = []
    
    # Registration
    
    def on_join(self, hook: PlayerHook):
        self._join = hook
    
    def on_leave(self, hook: PlayerHook):
        self._leave = hook
    
    def on_started(self, listener: StartedListener):
        self._started_listeners.append(listener)
    
    def set_player_limits(self, min_players: int, max_players: int):
        if not 1 <= min_players <= max_players:
            raise ValueError(f"Invalid player limits [{min_players}, {max_players}]")
        self._min_players = min_players
        self._max_players = max_players
    
    def min_players(self) -> int:
        return self._min_players
    
    def max_players(self) -> int:
        return self._max_players
    
    def add_flags_input(
        self,
        message: MessageController,
        label: str,
        options: Sequence[str],
        values,
    ) -> FlagsInput:
        control = FlagsInput(f"flags{len(self._controls)}", label, options, values)
        self._register(message, control)
        return control
    
    def add_number_input(
        self,
        message: MessageController,
        label: str,
        minimum: int,
        default: int,
        maximum: int,
        on_change: Callable[[int], None],
    ) -> NumberInput:
        control = NumberInput(f"number{len(self._controls)}", label, minimum, default, maximum, on_change)
        self._register(message, control)
        return control
    
    def _register(self, message: MessageController, control):
        self._controls[control.custom_id] = control
        message.add_control(control)
    
    def set_setup_message(self, message: MessageController, on_start: StartHook):
        """Attach the lobby buttons to the message and bind the start action."""
        self._message = message
        self._on_start = on_start
        message.add_button(Button(JOIN_BUTTON, "Join", style="success"))
        message.add_button(Button(LEAVE_BUTTON, "Leave", style="danger"))
        message.add_button(Button(START_BUTTON, "Start", style="primary"))
    
    def reset_controls(self):
        self._controls = {}
        if self._message:
            self._message.clear_controls()
    
    # Interaction handling
    
    def handle_component(self, interaction: Interaction, custom_id: str, value: Any = None):
        """Route a button press or input change to its handler."""
        if custom_id == JOIN_BUTTON:
            self.handle_join(interaction)
            return
        if custom_id == LEAVE_BUTTON:
            self.handle_leave(interaction)
            return
        if custom_id == START_BUTTON:
            self.handle_start(interaction)
            return
        
        self._require_lobby()
        control_id, action = _split_component_id(custom_id)
        control = self._controls.get(control_id)
        if control is None:
            raise GameError(UNKNOWN_COMPONENT, f"No control '{custom_id}'")
        try:
            control.handle(action, value)
        except (ValueError, IndexError, TypeError) as e:
            raise GameError(UNKNOWN_COMPONENT, str(e)) from e
        
        if self._message:
            self._message.update_all(interaction)
    
    def handle_join(self, interaction: Interaction):
        self._require_lobby()
        player_id = interaction.user_id
        if player_id in self.players:
            raise GameError(ALREADY_JOINED, "You are already in this game")
        if len(self.players) >= self.max_players():
            raise GameError(LOBBY_FULL, f"This game is full ({self.max_players()} players)")
        
        self.players.append(player_id)
        logger.info(f"Player {player_id} joined session {self.id}")
        if self._join:
            self._join(interaction, player_id)
    
    def handle_leave(self, interaction: Interaction):
        self._require_lobby()
        player_id = interaction.user_id
        if player_id not in self.players:
            raise GameError(NOT_IN_LOBBY, "You are not in this game")
        
        self.players.remove(player_id)
        logger.info(f"Player {player_id} left session {self.id}")
        if self._leave:
            self._leave(interaction, player_id)
    
    def handle_start(self, interaction: Interaction):
        """Run the start action; returns whatever it returns, or None if not run."""
        self._require_lobby()
        if len(self.players) < self.min_players():
            if self._message:
                self._message.notify(
                    interaction,
                    f"At least {self.min_players()} players are needed to start."
                )
            logger.info(f"Start of session {self.id} refused: {len(self.players)} players")
            return None
        if self._on_start is None:
            raise GameError(UNKNOWN_COMPONENT, "This lobby has no start action")
        return self._on_start(interaction, self._message)
    
    def close_lobby(self):
        """Refuse further joins, leaves, control changes and starts."""
        self.phase = PHASE_PLAY

    async def start_lobby(self, context: MessageController) -> None:
        """Close the lobby and hand over to gameplay."""
        self.close_lobby()
        logger.info(f"Session {self.id} started with {len(self.players)} players")
        context.update_all()
        for listener in list(self._started_listeners):
            await listener(self)
    
    def _require_lobby(self):
        if self.phase != PHASE_LOBBY:
            raise GameError(LOBBY_CLOSED, "This game has already started")


def _split_component_id(custom_id: str):
    """Split 'number1__max' or 'flags0:2' into (control id, action)."""
    if ":" in custom_id:
        control_id, _, action = custom_id.partition(":")
        return control_id, action
    if "__" in custom_id:
        control_id, _, action = custom_id.partition("__")
        return control_id, action
    return custom_id, ""
