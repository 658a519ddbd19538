"""
Broadcast Service - Centralized Socket.IO message broadcasting.

This service handles all Socket.IO emissions in a centralized way:
- Room-wide broadcasts
- Individual player messages
- Game snapshots, timer ticks and end-of-game results
- Membership and reset notices
"""

import logging
from typing import Dict, Any, Optional

from src.core.messages import OutboundEvent
from src.services.room_state_presenter import RoomStatePresenter

logger = logging.getLogger(__name__)


class BroadcastService:
    """Centralized service for all Socket.IO broadcasting operations."""

    def __init__(self, socketio, room_state_presenter: Optional[RoomStatePresenter] = None):
        """Initialize the broadcast service.

        Args:
            socketio: Flask-SocketIO instance for emitting messages
            room_state_presenter: Payload builder, created when not given
        """
        self.socketio = socketio
        self.room_state_presenter = room_state_presenter or RoomStatePresenter()

    # Core emission methods

    def emit_to_room(self, event: str, data: Any, room_id: str):
        """Emit an event to all players in a room."""
        try:
            self.socketio.emit(event, data, room=room_id)
            logger.debug(f'Emitted {event} to room {room_id}')
        except Exception as e:
            logger.error(f'Error emitting {event} to room {room_id}: {e}')

    def emit_to_player(self, event: str, data: Any, socket_id: str):
        """Emit an event to a specific player."""
        try:
            self.socketio.emit(event, data, room=socket_id)
            logger.debug(f'Emitted {event} to player {socket_id}')
        except Exception as e:
            logger.error(f'Error emitting {event} to player {socket_id}: {e}')

    def subscribe(self, socket_id: str, room_id: str, namespace: str = '/'):
        """Add a connection to a room's broadcasts."""
        try:
            self.socketio.server.enter_room(socket_id, room_id, namespace=namespace)
            logger.debug(f'Connection {socket_id} subscribed to room {room_id}')
        except Exception as e:
            logger.error(f'Error subscribing {socket_id} to room {room_id}: {e}')

    def close_room(self, room_id: str):
        """Drop every connection's subscription to a deleted room."""
        try:
            self.socketio.close_room(room_id)
            logger.debug(f'Closed Socket.IO room {room_id}')
        except Exception as e:
            logger.error(f'Error closing Socket.IO room {room_id}: {e}')

    # High-level broadcast methods

    def send_room_created(self, room_id: str, socket_id: str):
        self.emit_to_player(OutboundEvent.ROOM_CREATED.value, room_id, socket_id)

    def broadcast_player_joined(self, room_state: Dict[str, Any]):
        """Broadcast the player list after a join."""
        players = self.room_state_presenter.create_player_list(room_state)
        self.emit_to_room(OutboundEvent.PLAYER_JOINED.value, players, room_state['room_id'])

    def broadcast_player_left(self, room_id: str, room_state: Optional[Dict[str, Any]]):
        """Broadcast the remaining players after a departure."""
        players = self.room_state_presenter.create_player_list(room_state) if room_state else []
        self.emit_to_room(OutboundEvent.PLAYER_LEFT.value, players, room_id)

    def broadcast_game_start(self, room_state: Dict[str, Any]):
        """Broadcast the freshly dealt game."""
        payload = self.room_state_presenter.create_game_start(room_state)
        self.emit_to_room(OutboundEvent.GAME_START.value, payload, room_state['room_id'])
        logger.debug(f"Broadcasted game start to room {room_state['room_id']}")

    def broadcast_game_update(self, room_state: Dict[str, Any]):
        """Broadcast the current snapshot to all players in room."""
        snapshot = self.room_state_presenter.create_snapshot(room_state)
        self.emit_to_room(OutboundEvent.GAME_UPDATE.value, snapshot, room_state['room_id'])

    def broadcast_timer_update(self, room_state: Dict[str, Any]):
        """Broadcast the turn countdown."""
        payload = self.room_state_presenter.create_timer_update(room_state)
        self.emit_to_room(OutboundEvent.TIMER_UPDATE.value, payload, room_state['room_id'])

    def broadcast_game_end(self, room_state: Dict[str, Any], winner: Optional[Dict[str, Any]], is_tie: bool):
        """Broadcast final scores and statistics."""
        payload = self.room_state_presenter.create_game_end(room_state, winner, is_tie)
        self.emit_to_room(OutboundEvent.GAME_END.value, payload, room_state['room_id'])
        logger.debug(f"Broadcasted game end to room {room_state['room_id']}")

    def broadcast_game_reset(self, room_id: str, message: str):
        """Broadcast game reset notification."""
        self.emit_to_room(OutboundEvent.GAME_RESET.value, message, room_id)
        logger.debug(f'Broadcasted game reset to room {room_id}')
