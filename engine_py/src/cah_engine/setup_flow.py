"""
Lobby setup for a Cards Against Humanity game.

Players join and leave, the lobby picks packs, rules, the point goal and the
hand size, and on start the two decks are built, validated and shuffled before
the session moves into play.
"""

import asyncio
import logging
import random
from functools import partial
from typing import Any, Dict, List, Optional, Sequence

from .config import Settings, default_settings
from .constants import (
    DEFAULT_HAND_CARDS, DEFAULT_POINTS, FLAG_QUIPLASH, FLAG_RANDO, GAME_COLOR, GAME_NAME,
    JOIN_BUTTON, LEAVE_BUTTON, MAX_HAND_CARDS, MAX_PLAYERS, MAX_POINTS, MIN_HAND_CARDS,
    MIN_PLAYERS, MIN_POINTS, NO_BLACK_CARDS_MESSAGE, NOT_ENOUGH_WHITE_CARDS_MESSAGE,
    RANDO_ID, RANDO_NAME, RULE_NAMES
)
from .errors import NO_BLACK_CARDS, NOT_ENOUGH_WHITE_CARDS
from .models import CAHState, Pack, PackCards, PackChoice, PlayerState
from .packs import PackSelection, candidate_packs
from .session import GameSession
from .shuffle import assemble_decks, shuffle_deck, validate_deck_integrity
from .ui import Interaction, MessageController

logger = logging.getLogger(__name__)


class ValidationResult:
    """Outcome of checking whether a lobby can start."""

    def __init__(
        self,
        valid: bool,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
    ):
        self.valid = valid
        self.error_code = error_code
        self.error_message = error_message

    @classmethod
    def success(cls) -> 'ValidationResult':
        return cls(valid=True)

    @classmethod
    def error(cls, error_code: str, error_message: str) -> 'ValidationResult':
        return cls(valid=False, error_code=error_code, error_message=error_message)


def required_white_cards(flags: Sequence[bool], player_count: int, hand_cards: int) -> int:
    """
    Number of white cards needed before the first round can be dealt.

    Quiplash mode does not deal hands up front, so only Rando needs a card.
    """
    rando, quiplash = flags[FLAG_RANDO], flags[FLAG_QUIPLASH]
    required = 0 if quiplash else player_count * hand_cards
    if rando:
        required += 1
    return required


def validate_decks(
    white_deck: Sequence[str],
    black_deck: Sequence[str],
    flags: Sequence[bool],
    player_count: int,
    hand_cards: int,
) -> ValidationResult:
    if not black_deck:
        return ValidationResult.error(NO_BLACK_CARDS, NO_BLACK_CARDS_MESSAGE)
    if len(white_deck) < required_white_cards(flags, player_count, hand_cards):
        return ValidationResult.error(NOT_ENOUGH_WHITE_CARDS, NOT_ENOUGH_WHITE_CARDS_MESSAGE)
    return ValidationResult.success()


def new_player() -> PlayerState:
    return PlayerState(hand=[], playing=[], points=0, hidden=False)


def start_game(
    state: CAHState,
    choices: Sequence[PackChoice],
    player_count: int,
    rng: Optional[random.Random] = None,
) -> ValidationResult:
    """
    Build and shuffle both decks and add Rando if enabled.

    On rejection the decks are left empty and no player is added.
    """
    state.white_deck = []
    state.black_deck = []

    white_deck, black_deck = assemble_decks(choices)
    result = validate_decks(white_deck, black_deck, state.flags, player_count, state.hand_cards)
    if not result.valid:
        return result

    shuffle_deck(white_deck, rng=rng)
    shuffle_deck(black_deck, rng=rng)
    state.white_deck = white_deck
    state.black_deck = black_deck

    if state.rando:
        state.players[RANDO_ID] = new_player()

    return result


def player_list(players: Sequence[str], rando: bool) -> str:
    lines = [f"<@{player_id}>" for player_id in players]
    if rando:
        lines.append(RANDO_NAME)
    return "\n".join(lines) if lines else "*None.*"


def render_lobby(session: GameSession, state: CAHState, selection: PackSelection) -> Dict[str, Any]:
    """Embed-style description of the lobby."""
    packs = ", ".join(selection.selected_names()) or "*None.*"
    return {
        "title": GAME_NAME,
        "color": GAME_COLOR,
        "fields": [
            {"name": "Players", "value": player_list(session.players, state.rando)},
            {"name": "Packs", "value": packs},
            {"name": "Points", "value": str(state.max_points)},
            {"name": "Cards", "value": str(state.hand_cards)},
        ],
    }


# Session handlers. Each receives the state it works on explicitly.

def on_join(state: CAHState, message: MessageController, interaction: Interaction, player_id: str):
    state.players[player_id] = new_player()
    message.update_all(interaction)


def on_leave(state: CAHState, message: MessageController, interaction: Interaction, player_id: str):
    state.players.pop(player_id, None)
    message.update_all(interaction)


def set_max_points(state: CAHState, value: int):
    state.max_points = value


def set_hand_cards(state: CAHState, value: int):
    state.hand_cards = value


def on_start(
    session: GameSession,
    state: CAHState,
    choices: List[PackChoice],
    done: asyncio.Future,
    rng: Optional[random.Random],
    interaction: Interaction,
    message: MessageController,
) -> ValidationResult:
    result = start_game(state, choices, len(session.players), rng=rng)
    if not result.valid:
        logger.info(f"Start of session {session.id} rejected: {result.error_code}")
        message.notify(interaction, result.error_message)
        return result

    if not validate_deck_integrity(state, choices):
        logger.error(f"Session {session.id} decks do not match the selected packs")
    logger.info(
        f"Session {session.id} decks ready: {len(state.white_deck)} white, "
        f"{len(state.black_deck)} black"
    )
    # closed before the hand-off runs so late joins and repeat starts are refused
    session.close_lobby()
    message.disable_buttons(interaction, JOIN_BUTTON, LEAVE_BUTTON)
    session.reset_controls()

    task = asyncio.ensure_future(session.start_lobby(message))
    task.add_done_callback(partial(_resolve, done))
    return result


def _resolve(done: asyncio.Future, task: asyncio.Future):
    if done.done():
        return
    if task.cancelled():
        done.cancel()
    elif task.exception() is not None:
        done.set_exception(task.exception())
    else:
        done.set_result(None)


def build_setup(
    session: GameSession,
    state: CAHState,
    interaction: Interaction,
    done: asyncio.Future,
    catalog: Sequence[Pack] = (),
    bonus: Optional[PackCards] = None,
    settings: Settings = default_settings,
    rng: Optional[random.Random] = None,
) -> MessageController:
    """
    Register the lobby's handlers and inputs on the session.

    Returns the configuration message, not yet sent.
    """
    choices = candidate_packs(catalog, bonus, interaction.origin_id, settings)
    selection = PackSelection(choices)

    message = MessageController(partial(render_lobby, session, state, selection), session.transport)

    session.on_join(partial(on_join, state, message))
    session.on_leave(partial(on_leave, state, message))
    session.set_player_limits(MIN_PLAYERS, MAX_PLAYERS)

    session.add_flags_input(message, "Packs", selection.names(), selection)
    session.add_flags_input(message, "Rules", RULE_NAMES, state.flags)
    session.add_number_input(
        message, "Points", MIN_POINTS, DEFAULT_POINTS, MAX_POINTS, partial(set_max_points, state)
    )
    session.add_number_input(
        message, "Cards", MIN_HAND_CARDS, DEFAULT_HAND_CARDS, MAX_HAND_CARDS, partial(set_hand_cards, state)
    )
    session.set_setup_message(message, partial(on_start, session, state, choices, done, rng))
    return message


async def run_setup(
    session: GameSession,
    state: CAHState,
    interaction: Interaction,
    catalog: Sequence[Pack] = (),
    bonus: Optional[PackCards] = None,
    settings: Settings = default_settings,
    rng: Optional[random.Random] = None,
) -> None:
    """
    Open a lobby and wait until it has started.

    Args:
        session: Session the lobby runs in
        state: Game state to configure; owned by the lobby until it returns
        interaction: Interaction that opened the lobby
        catalog: Packs on offer
        bonus: Extra pack content loaded at startup, if any
        settings: Gate for the bonus pack
        rng: Random source for shuffling
    """
    done = asyncio.get_running_loop().create_future()
    message = build_setup(
        session, state, interaction, done,
        catalog=catalog, bonus=bonus, settings=settings, rng=rng,
    )
    message.reply(interaction)
    await done
