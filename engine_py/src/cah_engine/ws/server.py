"""
WebSocket lobby server for Cards Against Humanity games.
"""

import asyncio
import logging
import random
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Dict, List, Optional, Set, Tuple

import orjson
from fastapi import WebSocket, WebSocketDisconnect
from pydantic import BaseModel

from ..config import Settings
from ..errors import GameError
from ..models import CAHState, Pack, PackCards
from ..packs import load_catalog, load_optional_pack
from ..serialization import get_public_lobby_info, sanitize_state
from ..session import GameSession
from ..setup_flow import run_setup
from ..ui import Interaction
from .events import (
    ComponentEvent, ConnectEvent, CreateEvent, ErrorCode, RequestStateEvent,
    create_created_event, create_error_event, create_notice_event,
    create_started_event, create_view_event, parse_inbound_event
)

logger = logging.getLogger(__name__)


def _error_code(code: str) -> ErrorCode:
    try:
        return ErrorCode(code)
    except ValueError:
        return ErrorCode.INTERNAL


def _log_setup_failure(lobby_id: str, task: asyncio.Task):
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.error(f"Setup of lobby {lobby_id} failed: {error!r}", exc_info=error)


class LobbyTransport:
    """Collects messages produced by synchronous handlers until they are flushed."""

    def __init__(self, lobby_id: str):
        self.lobby_id = lobby_id
        self.outbox: List[Tuple[Optional[str], BaseModel]] = []
        self.last_view: Optional[Dict[str, Any]] = None

    def deliver(self, interaction: Optional[Interaction], payload: Dict[str, Any], ephemeral: bool = False):
        if ephemeral:
            user_id = interaction.user_id if interaction else None
            self.outbox.append((user_id, create_notice_event(payload["content"])))
        else:
            self.last_view = payload
            self.outbox.append((None, create_view_event(self.lobby_id, payload)))

    def drain(self) -> List[Tuple[Optional[str], BaseModel]]:
        pending, self.outbox = self.outbox, []
        return pending


@dataclass
class Lobby:
    session: GameSession
    state: CAHState
    transport: LobbyTransport
    setup_task: Optional[asyncio.Task] = None


@dataclass
class Content:
    """Pack content resolved once at startup."""
    catalog: List[Pack] = field(default_factory=list)
    bonus: Optional[PackCards] = None


def load_content(settings: Settings) -> Content:
    return Content(
        catalog=load_catalog(settings.packs_dir),
        bonus=load_optional_pack(settings.bonus_pack_path),
    )


class ConnectionManager:
    """Tracks which socket watches which lobby as which user."""

    def __init__(self):
        self.lobby_connections: Dict[str, Set[WebSocket]] = defaultdict(set)
        self.connection_users: Dict[WebSocket, str] = {}
        self.connection_lobbies: Dict[WebSocket, str] = {}

    def attach(self, websocket: WebSocket, lobby_id: str, user_id: str):
        self.detach(websocket)
        self.lobby_connections[lobby_id].add(websocket)
        self.connection_users[websocket] = user_id
        self.connection_lobbies[websocket] = lobby_id
        logger.info(f"User {user_id} connected to lobby {lobby_id}")

    def detach(self, websocket: WebSocket):
        lobby_id = self.connection_lobbies.pop(websocket, None)
        self.connection_users.pop(websocket, None)
        if lobby_id and lobby_id in self.lobby_connections:
            self.lobby_connections[lobby_id].discard(websocket)
            if not self.lobby_connections[lobby_id]:
                del self.lobby_connections[lobby_id]

    async def send(self, websocket: WebSocket, event: BaseModel):
        await websocket.send_text(orjson.dumps(event.model_dump(mode="json")).decode())

    async def broadcast(self, lobby_id: str, event: BaseModel):
        for websocket in list(self.lobby_connections.get(lobby_id, ())):
            try:
                await self.send(websocket, event)
            except Exception as e:
                logger.error(f"Error broadcasting to lobby {lobby_id}: {e}")
                self.detach(websocket)

    async def send_to_user(self, lobby_id: str, user_id: str, event: BaseModel):
        for websocket in list(self.lobby_connections.get(lobby_id, ())):
            if self.connection_users.get(websocket) == user_id:
                try:
                    await self.send(websocket, event)
                except Exception as e:
                    logger.error(f"Error sending to {user_id}: {e}")
                    self.detach(websocket)


class LobbyManager:
    """Owns all open lobbies and dispatches socket events to them."""

    def __init__(self, settings: Optional[Settings] = None, content: Optional[Content] = None):
        self.settings = settings or Settings.from_env()
        self.content = content or load_content(self.settings)
        self.lobbies: Dict[str, Lobby] = {}
        self.connections = ConnectionManager()

    async def handle_websocket(self, websocket: WebSocket):
        await websocket.accept()
        logger.info("WebSocket connection accepted")

        try:
            while True:
                raw_data = await websocket.receive_text()
                try:
                    event = parse_inbound_event(orjson.loads(raw_data))
                    await self.handle_event(websocket, event)
                except orjson.JSONDecodeError as e:
                    await self.connections.send(websocket, create_error_event(ErrorCode.INVALID_EVENT, str(e)))
                except ValueError as e:
                    await self.connections.send(websocket, create_error_event(ErrorCode.INVALID_EVENT, str(e)))
                except GameError as e:
                    await self.connections.send(websocket, create_error_event(_error_code(e.code), e.message))
        except WebSocketDisconnect:
            logger.info("WebSocket disconnected")
        finally:
            self.connections.detach(websocket)

    async def handle_event(self, websocket: WebSocket, event):
        if isinstance(event, CreateEvent):
            await self.handle_create(websocket, event)
        elif isinstance(event, ConnectEvent):
            await self.handle_connect(websocket, event)
        elif isinstance(event, ComponentEvent):
            await self.handle_component(websocket, event)
        elif isinstance(event, RequestStateEvent):
            await self.handle_request_state(websocket, event)
        else:
            raise ValueError(f"Unhandled event type: {type(event)}")

    async def handle_create(self, websocket: WebSocket, event: CreateEvent):
        lobby_id = str(uuid.uuid4())[:8].upper()
        transport = LobbyTransport(lobby_id)
        session = GameSession(lobby_id, transport, origin_id=event.origin_id)
        lobby = Lobby(session=session, state=CAHState(), transport=transport)
        self.lobbies[lobby_id] = lobby
        self.connections.attach(websocket, lobby_id, event.user_id)
        await self.connections.send(websocket, create_created_event(lobby_id))

        session.on_started(self._on_started)
        rng = random.Random(event.seed) if event.seed is not None else None
        interaction = Interaction(user_id=event.user_id, origin_id=event.origin_id)
        lobby.setup_task = asyncio.create_task(run_setup(
            session, lobby.state, interaction,
            catalog=self.content.catalog,
            bonus=self.content.bonus,
            settings=self.settings,
            rng=rng,
        ))
        lobby.setup_task.add_done_callback(partial(_log_setup_failure, lobby_id))
        # let run_setup register its handlers and render the first view
        await asyncio.sleep(0)
        await self.flush(lobby_id)
        logger.info(f"Lobby {lobby_id} opened by {event.user_id}")

    async def handle_connect(self, websocket: WebSocket, event: ConnectEvent):
        lobby = self._get_lobby(event.lobby_id)
        self.connections.attach(websocket, event.lobby_id, event.user_id)
        if lobby.transport.last_view is not None:
            await self.connections.send(websocket, create_view_event(event.lobby_id, lobby.transport.last_view))

    async def handle_component(self, websocket: WebSocket, event: ComponentEvent):
        lobby_id, user_id = self._require_connection(websocket)
        lobby = self._get_lobby(lobby_id)
        interaction = Interaction(user_id=user_id, origin_id=lobby.session.origin_id)
        try:
            lobby.session.handle_component(interaction, event.custom_id, event.value)
        finally:
            await self.flush(lobby_id)

    async def handle_request_state(self, websocket: WebSocket, event: RequestStateEvent):
        lobby_id, user_id = self._require_connection(websocket)
        lobby = self._get_lobby(lobby_id)
        if lobby.transport.last_view is not None:
            await self.connections.send(websocket, create_view_event(lobby_id, lobby.transport.last_view))
        if lobby.setup_task is not None and lobby.setup_task.done():
            state = sanitize_state(lobby.state, user_id)
            await self.connections.send(websocket, create_started_event(lobby_id, state))

    async def flush(self, lobby_id: str):
        lobby = self.lobbies.get(lobby_id)
        if lobby is None:
            return
        for user_id, event in lobby.transport.drain():
            if user_id is None:
                await self.connections.broadcast(lobby_id, event)
            else:
                await self.connections.send_to_user(lobby_id, user_id, event)

    async def _on_started(self, session: GameSession):
        lobby = self.lobbies[session.id]
        await self.flush(session.id)
        for websocket in list(self.connections.lobby_connections.get(session.id, ())):
            viewer_id = self.connections.connection_users.get(websocket)
            state = sanitize_state(lobby.state, viewer_id)
            try:
                await self.connections.send(websocket, create_started_event(session.id, state))
            except Exception as e:
                logger.error(f"Error sending start of lobby {session.id}: {e}")
                self.connections.detach(websocket)

    def _get_lobby(self, lobby_id: str) -> Lobby:
        lobby = self.lobbies.get(lobby_id)
        if lobby is None:
            raise GameError(ErrorCode.LOBBY_NOT_FOUND.value, f"Lobby {lobby_id} not found")
        return lobby

    def _require_connection(self, websocket: WebSocket) -> Tuple[str, str]:
        lobby_id = self.connections.connection_lobbies.get(websocket)
        user_id = self.connections.connection_users.get(websocket)
        if not lobby_id or not user_id:
            raise GameError(ErrorCode.NOT_CONNECTED.value, "Not connected to a lobby")
        return lobby_id, user_id

    def summary(self) -> List[Dict[str, Any]]:
        return [get_public_lobby_info(lobby.session) for lobby in self.lobbies.values()]
