"""
Session Service - Maps Socket.IO connections to the room they play in.

A connection belongs to at most one room. Sessions are dropped when the
connection goes away or its room is deleted after a game.
"""

import logging
import threading
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class SessionService:
    """Tracks which room each connection is playing in."""

    def __init__(self):
        # socket_id -> {room_id, player_id, player_name}
        self._player_sessions: Dict[str, Dict[str, str]] = {}
        self._lock = threading.Lock()
        logger.info("SessionService initialized")

    def create_session(self, socket_id: str, room_id: str, player_id: str, player_name: str) -> None:
        """Create or replace the session of a connection.

        Args:
            socket_id: Socket.IO connection ID
            room_id: Room the player is in
            player_id: Player identifier (the connection ID)
            player_name: Player's display name
        """
        with self._lock:
            self._player_sessions[socket_id] = {
                'room_id': room_id,
                'player_id': player_id,
                'player_name': player_name
            }
        logger.debug(f"Created session for player {player_name} ({player_id}) in room {room_id}")

    def get_session(self, socket_id: str) -> Optional[Dict[str, str]]:
        with self._lock:
            return self._player_sessions.get(socket_id)

    def has_session(self, socket_id: str) -> bool:
        with self._lock:
            return socket_id in self._player_sessions

    def remove_session(self, socket_id: str) -> Optional[Dict[str, str]]:
        """Remove a connection's session.

        Returns:
            The removed session info or None if not found
        """
        with self._lock:
            session_info = self._player_sessions.pop(socket_id, None)
        if session_info:
            logger.debug(f"Removed session for player {session_info['player_name']} "
                         f"({session_info['player_id']})")
        return session_info

    def get_sessions_by_room(self, room_id: str) -> Dict[str, Dict[str, str]]:
        """Get all sessions for a specific room.

        Returns:
            Dictionary mapping socket_id to session info for the room
        """
        with self._lock:
            return {
                socket_id: session_info
                for socket_id, session_info in self._player_sessions.items()
                if session_info['room_id'] == room_id
            }

    def get_sessions_count(self) -> int:
        with self._lock:
            return len(self._player_sessions)
