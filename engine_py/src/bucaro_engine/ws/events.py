"""
WebSocket event models and validation.
"""

import time
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError


class EventType(str, Enum):
    """Inbound event types."""
    JOIN = "join"
    START = "start"
    DRAW_CLOSED = "draw_closed"
    DRAW_OPEN = "draw_open"
    PLACE_MELDS = "place_melds"
    ADD_TO_MELD = "add_to_meld"
    DISCARD = "discard"
    SHOW = "show"
    REQUEST_STATE = "request_state"


class OutboundEventType(str, Enum):
    """Outbound event types."""
    JOIN_SUCCESS = "join_success"
    LOBBY = "lobby"
    STATE_FULL = "state_full"
    SCORES = "scores"
    ERROR = "error"


class ErrorCode(str, Enum):
    """Session-level error codes. Engine rule violations carry the engine's own code."""
    INVALID_EVENT = "INVALID_EVENT"
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    NOT_IN_ROOM = "NOT_IN_ROOM"
    INTERNAL = "INTERNAL"


# Inbound event models
class BaseEvent(BaseModel):
    """Base event model."""
    type: EventType


class JoinEvent(BaseEvent):
    """Join room event. Passing a known player_id rejoins the same seat."""
    type: EventType = EventType.JOIN
    room_id: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=30)
    player_id: Optional[str] = None


class StartEvent(BaseEvent):
    """Start game event."""
    type: EventType = EventType.START


class DrawClosedEvent(BaseEvent):
    type: EventType = EventType.DRAW_CLOSED


class DrawOpenEvent(BaseEvent):
    type: EventType = EventType.DRAW_OPEN


class MeldPayload(BaseModel):
    """A proposed meld, as card ids from the player's hand."""
    card_ids: List[str] = Field(..., min_length=1)


class MeldAdditionPayload(BaseModel):
    """Cards from hand to append to a meld already on the team board."""
    meld_id: str = Field(..., min_length=1)
    card_ids: List[str] = Field(..., min_length=1)


class PlaceMeldsEvent(BaseEvent):
    type: EventType = EventType.PLACE_MELDS
    melds: List[MeldPayload] = Field(..., min_length=1)


class AddToMeldEvent(BaseEvent):
    type: EventType = EventType.ADD_TO_MELD
    additions: List[MeldAdditionPayload] = Field(..., min_length=1)


class DiscardEvent(BaseEvent):
    type: EventType = EventType.DISCARD
    card_id: str = Field(..., min_length=1)


class ShowEvent(BaseEvent):
    type: EventType = EventType.SHOW
    melds: List[MeldPayload] = Field(..., min_length=1)


class RequestStateEvent(BaseEvent):
    """Request full state event."""
    type: EventType = EventType.REQUEST_STATE


# Union type for all inbound events
InboundEvent = Union[
    JoinEvent,
    StartEvent,
    DrawClosedEvent,
    DrawOpenEvent,
    PlaceMeldsEvent,
    AddToMeldEvent,
    DiscardEvent,
    ShowEvent,
    RequestStateEvent,
]


# Outbound event models
class JoinSuccessEvent(BaseModel):
    """Join success confirmation event."""
    type: OutboundEventType = OutboundEventType.JOIN_SUCCESS
    room_id: str
    player_id: str
    seat: int
    team_id: int
    timestamp: float


class LobbyEvent(BaseModel):
    """Seat summary sent while the room is still in the lobby."""
    type: OutboundEventType = OutboundEventType.LOBBY
    room_id: str
    status: str
    seats: List[Dict[str, Any]]
    timestamp: float


class StateFullEvent(BaseModel):
    """Full per-player state event."""
    type: OutboundEventType = OutboundEventType.STATE_FULL
    state: Dict[str, Any]
    timestamp: float


class ScoresEvent(BaseModel):
    """Final scores, sent once when the game ends."""
    type: OutboundEventType = OutboundEventType.SCORES
    scores: Dict[str, Any]
    timestamp: float


class ErrorEvent(BaseModel):
    """Error event."""
    type: OutboundEventType = OutboundEventType.ERROR
    code: str
    message: str
    timestamp: float


EVENT_MAP = {
    EventType.JOIN: JoinEvent,
    EventType.START: StartEvent,
    EventType.DRAW_CLOSED: DrawClosedEvent,
    EventType.DRAW_OPEN: DrawOpenEvent,
    EventType.PLACE_MELDS: PlaceMeldsEvent,
    EventType.ADD_TO_MELD: AddToMeldEvent,
    EventType.DISCARD: DiscardEvent,
    EventType.SHOW: ShowEvent,
    EventType.REQUEST_STATE: RequestStateEvent,
}


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
    if not isinstance(data, dict):
        raise ValueError("Event must be a JSON object")

    event_type = data.get("type")
    if not event_type:
        raise ValueError("Missing event type")

    try:
        event_type = EventType(event_type)
    except ValueError:
        raise ValueError(f"Invalid event type: {event_type}")

    event_class = EVENT_MAP[event_type]
    try:
        return event_class(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid event data: {e}")


def create_error_event(code: str, message: str) -> ErrorEvent:
    """Create an error event."""
    return ErrorEvent(code=code, message=message, timestamp=time.time())


def create_join_success_event(room_id: str, player_id: str, seat: int, team_id: int) -> JoinSuccessEvent:
    """Create a join success event."""
    return JoinSuccessEvent(
        room_id=room_id,
        player_id=player_id,
        seat=seat,
        team_id=team_id,
        timestamp=time.time()
    )


def create_lobby_event(room_id: str, status: str, seats: List[Dict[str, Any]]) -> LobbyEvent:
    return LobbyEvent(room_id=room_id, status=status, seats=seats, timestamp=time.time())


def create_state_full_event(state: Dict[str, Any]) -> StateFullEvent:
    """Create a full state event."""
    return StateFullEvent(state=state, timestamp=time.time())


def create_scores_event(scores: Dict[str, Any]) -> ScoresEvent:
    return ScoresEvent(scores=scores, timestamp=time.time())
