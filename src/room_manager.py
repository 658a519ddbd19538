"""
Room Manager for the Pairs game

Room registry facade over the lifecycle, player management and concurrency
services. It is the only owner of room dicts; callers look a room up by id
for every event and must not keep the dict past it.
"""

import copy
import logging
from typing import Dict, Optional, List

from werkzeug.security import generate_password_hash

from src.config.game_settings import get_game_settings
from src.core.errors import ErrorCode, ValidationError
from src.services.room_lifecycle_service import RoomLifecycleService
from src.services.player_management_service import PlayerManagementService
from src.services.concurrency_control_service import ConcurrencyControlService

logger = logging.getLogger(__name__)


class RoomManager:
    """Manages game rooms and their membership."""

    def __init__(self, game_settings=None):
        self.game_settings = game_settings or get_game_settings()
        self.concurrency_control = ConcurrencyControlService()
        self.lifecycle = RoomLifecycleService()
        self.players = PlayerManagementService(self.lifecycle, self.concurrency_control, self.game_settings)

    # Room Lifecycle Operations
    def create_room(self, room_id: str, player_name: str, socket_id: str, password: Optional[str] = None,
                    pair_count: Optional[int] = None, turn_duration: Optional[int] = None) -> Dict:
        """
        Create a new room with its first player.

        Args:
            room_id: Unique identifier for the room
            player_name: Display name of the creator
            socket_id: Connection ID of the creator
            password: Optional room password
            pair_count: Pairs to deal, defaults to the configured pair count
            turn_duration: Seconds per turn, defaults to the configured duration (0 disables)

        Returns:
            The room dict

        Raises:
            ValidationError: DUPLICATE_ROOM_ID or INVALID_CONFIG
        """
        if not room_id or not player_name:
            raise ValidationError(ErrorCode.INVALID_CONFIG, "Room ID and player name are required")

        if pair_count is None:
            pair_count = self.game_settings.default_pair_count
        if turn_duration is None:
            turn_duration = self.game_settings.default_turn_duration
        password_hash = generate_password_hash(password) if password else None

        with self.concurrency_control.room_operation(room_id):
            room = self.lifecycle.create_room(room_id, pair_count, turn_duration, password_hash)
            try:
                self.players.add_player_to_room(room_id, player_name, socket_id, check_password=False)
            except ValidationError:
                self.delete_room(room_id)
                raise
            return room

    def join_room(self, room_id: str, player_name: str, socket_id: str, password: Optional[str] = None) -> Dict:
        """
        Add a second player to an existing room.

        Returns:
            The room dict

        Raises:
            ValidationError: ROOM_NOT_FOUND, ROOM_FULL, ALREADY_IN_ROOM or AUTHENTICATION_FAILED
        """
        with self.concurrency_control.room_operation(room_id):
            self.players.add_player_to_room(room_id, player_name, socket_id, password)
            return self.lifecycle.get_room_data(room_id)

    def delete_room(self, room_id: str) -> bool:
        """
        Delete a room and clean up its lock. Idempotent.

        Returns:
            True if room was deleted, False if room didn't exist
        """
        result = self.lifecycle.delete_room(room_id)
        if result:
            self.concurrency_control.cleanup_room_lock(room_id)
        return result

    def room_exists(self, room_id: str) -> bool:
        return self.lifecycle.room_exists(room_id)

    def get_all_rooms(self) -> List[str]:
        """
        Get list of all active room IDs.

        Returns:
            List of room ID strings
        """
        return self.lifecycle.get_all_room_ids()

    def get_room(self, room_id: str) -> Optional[Dict]:
        """
        Get the live room dict for mutation. Call inside room_operation().

        Returns:
            Room dict or None if room doesn't exist
        """
        return self.lifecycle.get_room_data(room_id)

    def get_room_state(self, room_id: str) -> Optional[Dict]:
        """
        Get a detached copy of a room for read-only use.

        Returns:
            Room data dict without scheduled task handles, or None
        """
        with self.concurrency_control.room_operation(room_id):
            room = self.lifecycle.get_room_data(room_id)
            if room is None:
                return None
            snapshot = {key: value for key, value in room.items() if key not in ("tasks", "task_tokens")}
            snapshot = copy.deepcopy(snapshot)
            snapshot["pending_tasks"] = sorted(room["tasks"].keys())
            return snapshot

    def find_rooms_for_player(self, player_id: str) -> List[str]:
        """
        Find every room the given connection is a member of.

        Returns:
            List of room IDs
        """
        room_ids = []
        for room_id in self.get_all_rooms():
            room = self.lifecycle.get_room_data(room_id)
            if room and any(p["player_id"] == player_id for p in room["players"]):
                room_ids.append(room_id)
        return room_ids

    # Player Management Operations
    def remove_player_from_room(self, room_id: str, player_id: str) -> Optional[Dict]:
        """
        Remove a player from a room, deleting the room when it becomes empty.

        Returns:
            The removed player, or None if player or room didn't exist
        """
        with self.concurrency_control.room_operation(room_id):
            removed = self.players.remove_player_from_room(room_id, player_id)
            if removed is not None and self.players.is_room_empty(room_id):
                self.delete_room(room_id)
            return removed

    def get_room_players(self, room_id: str) -> List[Dict]:
        """Get all players in a room, in join order."""
        return self.players.get_room_players(room_id)

    def find_player(self, room: Dict, player_id: str) -> Optional[Dict]:
        return self.players.find_player(room, player_id)

    def room_operation(self, room_id: str):
        """Context manager serializing all mutations of one room."""
        return self.concurrency_control.room_operation(room_id)
