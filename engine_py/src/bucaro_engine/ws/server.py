"""
FastAPI WebSocket server hosting Bucaro game rooms.

The server holds no game rules: it seats connections, relays actions to the
engine one at a time per room, and pushes fresh per-player snapshots back.
"""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

import orjson
from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from ..constants import PHASE_LOBBY, PLAYER_COUNT
from ..engine import BucaroGame
from ..errors import GameError
from ..rules import RuleConfig, default_rules
from ..serialization import serialize_player_for_list
from .events import (
    AddToMeldEvent, DiscardEvent, DrawClosedEvent, DrawOpenEvent, ErrorCode,
    JoinEvent, PlaceMeldsEvent, RequestStateEvent, ShowEvent, StartEvent,
    create_error_event, create_join_success_event, create_lobby_event,
    create_scores_event, create_state_full_event, parse_inbound_event
)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# FastAPI app
app = FastAPI(title="Bucaro Game Engine", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@dataclass
class Room:
    id: str
    game: BucaroGame
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    connections: Dict[str, WebSocket] = field(default_factory=dict)  # player_id -> socket
    scores_sent: bool = False
    last_active: float = field(default_factory=time.time)


class RoomCreated(BaseModel):
    room_id: str


# Global state
rules: RuleConfig = default_rules
rooms: Dict[str, Room] = {}
connection_players: Dict[WebSocket, str] = {}
connection_rooms: Dict[WebSocket, str] = {}


def prune_idle_rooms(now: Optional[float] = None) -> int:
    """Drop rooms nobody is connected to that have been idle past the room timeout."""
    now = now if now is not None else time.time()
    stale = [room_id for room_id, room in rooms.items()
             if not room.connections and now - room.last_active > rules.room_timeout]
    for room_id in stale:
        del rooms[room_id]
        logger.info(f"Room {room_id} removed after inactivity")
    return len(stale)


def create_room(room_id: Optional[str] = None) -> Room:
    """Create a room, generating an 8-character id when none is given."""
    prune_idle_rooms()
    if len(rooms) >= rules.max_rooms:
        raise HTTPException(status_code=503, detail="Room limit reached")
    room_id = room_id or uuid.uuid4().hex[:8].upper()
    room = Room(id=room_id, game=BucaroGame(game_id=room_id, rules=rules))
    rooms[room_id] = room
    logger.info(f"Room {room_id} created")
    return room


class ConnectionManager:
    """Tracks which socket belongs to which seat and pushes snapshots."""

    def connect(self, websocket: WebSocket, room: Room, player_id: str):
        if websocket in connection_players:
            self.disconnect(websocket)
        previous = room.connections.get(player_id)
        if previous is not None and previous is not websocket:
            connection_players.pop(previous, None)
            connection_rooms.pop(previous, None)
        room.connections[player_id] = websocket
        connection_players[websocket] = player_id
        connection_rooms[websocket] = room.id
        logger.info(f"Player {player_id} connected to room {room.id}")

    def disconnect(self, websocket: WebSocket):
        player_id = connection_players.pop(websocket, None)
        room_id = connection_rooms.pop(websocket, None)
        room = rooms.get(room_id) if room_id else None
        if room and room.connections.get(player_id) is websocket:
            del room.connections[player_id]
        if player_id:
            logger.info(f"Player {player_id} disconnected from room {room_id}")
        return player_id, room_id

    async def send(self, websocket: WebSocket, event: BaseModel):
        await websocket.send_text(event.model_dump_json())

    def lobby_event(self, room: Room):
        players = {p.seat: p for p in room.game.state.players}
        seats = []
        for seat in range(PLAYER_COUNT):
            player = players.get(seat)
            entry = serialize_player_for_list(player) if player else {"seat": seat}
            entry["connected"] = bool(player and player.id in room.connections)
            seats.append(entry)
        return create_lobby_event(room.id, room.game.phase, seats)

    async def broadcast_room(self, room: Room):
        """Send every connected player their own view of the room."""
        lobby = self.lobby_event(room) if room.game.phase == PHASE_LOBBY else None
        for player_id, websocket in list(room.connections.items()):
            try:
                if lobby is not None:
                    await self.send(websocket, lobby)
                else:
                    view = room.game.get_player_state(player_id)
                    await self.send(websocket, create_state_full_event(view))
            except Exception as e:
                logger.error(f"Error broadcasting to {player_id}: {e}")
                self.disconnect(websocket)

    async def broadcast_scores_once(self, room: Room):
        """Compute and distribute final scores the first time the game is seen ended."""
        if not room.game.is_ended or room.scores_sent:
            return
        room.scores_sent = True
        scores = room.game.compute_final_scores()
        logger.info(f"Room {room.id} final scores: {scores.team_scores}")
        event = create_scores_event(scores.to_dict())
        for player_id, websocket in list(room.connections.items()):
            try:
                await self.send(websocket, event)
            except Exception as e:
                logger.error(f"Error sending scores to {player_id}: {e}")
                self.disconnect(websocket)


manager = ConnectionManager()


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "rooms": len(rooms),
        "connections": len(connection_players),
    }


@app.post("/rooms", response_model=RoomCreated)
async def create_room_endpoint():
    room = create_room()
    return RoomCreated(room_id=room.id)


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """Main WebSocket endpoint."""
    await websocket.accept()
    logger.info("WebSocket connection accepted")

    try:
        while True:
            raw_data = await websocket.receive_text()
            try:
                event = parse_inbound_event(orjson.loads(raw_data))
                await handle_event(websocket, event)
            except (ValueError, orjson.JSONDecodeError) as e:
                await manager.send(websocket, create_error_event(ErrorCode.INVALID_EVENT.value, str(e)))
            except HTTPException as e:
                await manager.send(websocket, create_error_event(ErrorCode.INTERNAL.value, e.detail))
            except Exception as e:
                logger.exception(f"Error handling event: {e}")
                await manager.send(websocket, create_error_event(ErrorCode.INTERNAL.value, "Internal server error"))
    except WebSocketDisconnect:
        logger.info("WebSocket disconnected")
    finally:
        manager.disconnect(websocket)


async def handle_event(websocket: WebSocket, event) -> None:
    """Handle an inbound event."""
    if isinstance(event, JoinEvent):
        await handle_join(websocket, event)
    elif isinstance(event, StartEvent):
        await run_action(websocket, lambda game, player_id: game.start_game())
    elif isinstance(event, DrawClosedEvent):
        await run_action(websocket, lambda game, player_id: game.draw_from_closed(player_id))
    elif isinstance(event, DrawOpenEvent):
        await run_action(websocket, lambda game, player_id: game.draw_from_open(player_id))
    elif isinstance(event, PlaceMeldsEvent):
        melds = [m.card_ids for m in event.melds]
        await run_action(websocket, lambda game, player_id: game.place_melds(player_id, melds))
    elif isinstance(event, AddToMeldEvent):
        additions = [(a.meld_id, a.card_ids) for a in event.additions]
        await run_action(websocket, lambda game, player_id: game.add_cards_to_meld(player_id, additions))
    elif isinstance(event, DiscardEvent):
        await run_action(websocket, lambda game, player_id: game.discard(player_id, event.card_id))
    elif isinstance(event, ShowEvent):
        melds = [m.card_ids for m in event.melds]
        await run_action(websocket, lambda game, player_id: game.show(player_id, melds))
    elif isinstance(event, RequestStateEvent):
        await handle_request_state(websocket)
    else:
        raise ValueError(f"Unhandled event type: {type(event)}")


async def handle_join(websocket: WebSocket, event: JoinEvent) -> None:
    """Seat a new player, or reattach a known player_id to its seat."""
    room = rooms.get(event.room_id) or create_room(event.room_id)

    async with room.lock:
        room.last_active = time.time()
        game = room.game
        try:
            if event.player_id and any(p.id == event.player_id for p in game.state.players):
                player = game.get_player(event.player_id)
                logger.info(f"Player {player.id} rejoined room {room.id}")
            else:
                player = game.add_player(event.name, event.player_id)
        except GameError as e:
            logger.info(f"Join rejected for room {room.id}: {e}")
            await manager.send(websocket, create_error_event(e.code, e.message))
            return

        manager.connect(websocket, room, player.id)
        await manager.send(
            websocket,
            create_join_success_event(room.id, player.id, player.seat, player.team_id)
        )
        await manager.broadcast_room(room)


async def run_action(websocket: WebSocket, action: Callable[[BucaroGame, str], object]) -> None:
    """Apply one engine action for the socket's player, then push fresh state."""
    player_id = connection_players.get(websocket)
    room = rooms.get(connection_rooms.get(websocket, ""))
    if not player_id or room is None:
        await manager.send(websocket, create_error_event(ErrorCode.NOT_IN_ROOM.value, "Not in a room"))
        return

    async with room.lock:
        room.last_active = time.time()
        try:
            action(room.game, player_id)
        except GameError as e:
            logger.info(f"Rejected action from {player_id} in room {room.id}: {e}")
            await manager.send(websocket, create_error_event(e.code, e.message))
            return

        await manager.broadcast_room(room)
        await manager.broadcast_scores_once(room)


async def handle_request_state(websocket: WebSocket) -> None:
    player_id = connection_players.get(websocket)
    room = rooms.get(connection_rooms.get(websocket, ""))
    if not player_id or room is None:
        await manager.send(websocket, create_error_event(ErrorCode.NOT_IN_ROOM.value, "Not in a room"))
        return

    if room.game.phase == PHASE_LOBBY:
        await manager.send(websocket, manager.lobby_event(room))
    else:
        await manager.send(websocket, create_state_full_event(room.game.get_player_state(player_id)))
