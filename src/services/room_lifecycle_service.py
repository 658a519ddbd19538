"""
Room Lifecycle Service for the Pairs game

Owns the room table: creation, deletion and lookup.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional
import threading

from src.core.errors import ErrorCode, ValidationError
from src.core.game_phases import RoomPhase

logger = logging.getLogger(__name__)


class RoomLifecycleService:
    """Manages room creation, deletion, and lifecycle operations."""

    def __init__(self):
        self._rooms: Dict[str, Dict] = {}
        self._rooms_lock = threading.RLock()

    def _create_initial_room_data(self, room_id: str, pair_count: int, turn_duration: int,
                                  password_hash: Optional[str]) -> Dict:
        """Create initial room data structure."""
        return {
            "room_id": room_id,
            "players": [],
            "cards": [],
            "current_turn": None,
            "game_started": False,
            "locked": False,
            "phase": RoomPhase.WAITING.value,
            "pair_count": pair_count,
            "turn_duration": turn_duration,
            "password_hash": password_hash,
            "time_remaining": None,
            "tasks": {},
            "task_tokens": {},
            "started_at": None,
            "ended_at": None,
            "created_at": datetime.now(),
            "last_activity": datetime.now()
        }

    def create_room(self, room_id: str, pair_count: int, turn_duration: int,
                    password_hash: Optional[str] = None) -> Dict:
        """
        Create a new game room with the given ID.

        Args:
            room_id: Unique identifier for the room
            pair_count: Number of pairs dealt when the game starts
            turn_duration: Seconds per turn, 0 for no turn timer
            password_hash: Hash of the room password, None for an open room

        Returns:
            Dict containing the room data

        Raises:
            ValidationError: If room already exists
        """
        with self._rooms_lock:
            if room_id in self._rooms:
                raise ValidationError(
                    ErrorCode.DUPLICATE_ROOM_ID,
                    f"Room {room_id} already exists",
                    {"room_id": room_id}
                )

            room_data = self._create_initial_room_data(room_id, pair_count, turn_duration, password_hash)
            self._rooms[room_id] = room_data
            logger.info(f"Created room {room_id}")
            return room_data

    def delete_room(self, room_id: str) -> bool:
        """
        Delete a room.

        Args:
            room_id: ID of the room to delete

        Returns:
            True if room was deleted, False if room didn't exist
        """
        with self._rooms_lock:
            if room_id in self._rooms:
                del self._rooms[room_id]
                logger.info(f"Deleted room {room_id}")
                return True
            return False

    def room_exists(self, room_id: str) -> bool:
        """Check if a room exists."""
        return room_id in self._rooms

    def get_room_data(self, room_id: str) -> Optional[Dict]:
        """
        Get room data (internal access for other services).

        Args:
            room_id: ID of the room

        Returns:
            Room data dict or None if room doesn't exist
        """
        return self._rooms.get(room_id)

    def get_all_room_ids(self) -> List[str]:
        """
        Get list of all active room IDs.

        Returns:
            List of room ID strings
        """
        with self._rooms_lock:
            return list(self._rooms.keys())
