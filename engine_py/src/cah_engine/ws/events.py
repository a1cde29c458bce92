"""
WebSocket event models and validation.
"""

import time
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """Inbound event types."""
    CREATE = "create"
    CONNECT = "connect"
    COMPONENT = "component"
    REQUEST_STATE = "request_state"


class OutboundEventType(str, Enum):
    """Outbound event types."""
    CREATED = "created"
    VIEW = "view"
    NOTICE = "notice"
    STARTED = "started"
    ERROR = "error"


class ErrorCode(str, Enum):
    """Error codes for client events."""
    INVALID_EVENT = "INVALID_EVENT"
    LOBBY_NOT_FOUND = "LOBBY_NOT_FOUND"
    NOT_CONNECTED = "NOT_CONNECTED"
    LOBBY_FULL = "LOBBY_FULL"
    LOBBY_CLOSED = "LOBBY_CLOSED"
    ALREADY_JOINED = "ALREADY_JOINED"
    NOT_IN_LOBBY = "NOT_IN_LOBBY"
    UNKNOWN_COMPONENT = "UNKNOWN_COMPONENT"
    INTERNAL = "INTERNAL"


# Inbound event models
class BaseEvent(BaseModel):
    """Base event model."""
    type: EventType


class CreateEvent(BaseEvent):
    """Open a new lobby."""
    type: EventType = EventType.CREATE
    user_id: str = Field(..., min_length=1, max_length=64)
    origin_id: Optional[str] = Field(default=None, max_length=64)
    seed: Optional[int] = None


class ConnectEvent(BaseEvent):
    """Watch an existing lobby."""
    type: EventType = EventType.CONNECT
    lobby_id: str = Field(..., min_length=1, max_length=50)
    user_id: str = Field(..., min_length=1, max_length=64)


class ComponentEvent(BaseEvent):
    """Button press or input change on the lobby message."""
    type: EventType = EventType.COMPONENT
    custom_id: str = Field(..., min_length=1, max_length=100)
    value: Optional[int] = None


class RequestStateEvent(BaseEvent):
    """Request the current view."""
    type: EventType = EventType.REQUEST_STATE


# Union type for all inbound events
InboundEvent = Union[
    CreateEvent,
    ConnectEvent,
    ComponentEvent,
    RequestStateEvent,
]


# Outbound event models
class CreatedEvent(BaseModel):
    """Lobby creation confirmation."""
    type: OutboundEventType = OutboundEventType.CREATED
    lobby_id: str
    timestamp: float


class ViewEvent(BaseModel):
    """Rendered lobby message."""
    type: OutboundEventType = OutboundEventType.VIEW
    lobby_id: str
    view: Dict[str, Any]
    timestamp: float


class NoticeEvent(BaseModel):
    """Message shown only to its recipient."""
    type: OutboundEventType = OutboundEventType.NOTICE
    content: str
    timestamp: float


class StartedEvent(BaseModel):
    """Lobby closed, game state ready."""
    type: OutboundEventType = OutboundEventType.STARTED
    lobby_id: str
    state: Dict[str, Any]
    timestamp: float


class ErrorEvent(BaseModel):
    """Error event."""
    type: OutboundEventType = OutboundEventType.ERROR
    code: ErrorCode
    message: str
    timestamp: float


OutboundEvent = Union[
    CreatedEvent,
    ViewEvent,
    NoticeEvent,
    StartedEvent,
    ErrorEvent,
]


def parse_inbound_event(data: Dict[str, Any]) -> InboundEvent:
    """
    Parse raw event data into appropriate event model.
    
    Args:
        data: Raw event data from WebSocket
    
    Returns:
        Parsed event model
    
    Raises:
        ValueError: If event type is invalid or data is malformed
    """
    event_type = data.get("type")
    
    if not event_type:
        raise ValueError("Missing event type")
    
    try:
        event_type = EventType(event_type)
    except ValueError:
        raise ValueError(f"Invalid event type: {event_type}")
    
    event_map = {
        EventType.CREATE: CreateEvent,
        EventType.CONNECT: ConnectEvent,
        EventType.COMPONENT: ComponentEvent,
        EventType.REQUEST_STATE: RequestStateEvent,
    }
    
    event_class = event_map[event_type]
    
    try:
        return event_class(**data)
    except Exception as e:
        raise ValueError(f"Invalid event data: {str(e)}")


def create_error_event(code: ErrorCode, message: str) -> ErrorEvent:
    """Create an error event."""
    return ErrorEvent(code=code, message=message, timestamp=time.time())


def create_created_event(lobby_id: str) -> CreatedEvent:
    return CreatedEvent(lobby_id=lobby_id, timestamp=time.time())


def create_view_event(lobby_id: str, view: Dict[str, Any]) -> ViewEvent:
    return ViewEvent(lobby_id=lobby_id, view=view, timestamp=time.time())


def create_notice_event(content: str) -> NoticeEvent:
    return NoticeEvent(content=content, timestamp=time.time())


def create_started_event(lobby_id: str, state: Dict[str, Any]) -> StartedEvent:
    return StartedEvent(lobby_id=lobby_id, state=state, timestamp=time.time())
