"""
Player Management Service for the Pairs game

Handles admission of players into rooms and their removal.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from werkzeug.security import check_password_hash

from src.config.game_settings import get_game_settings
from src.core.errors import ErrorCode, ValidationError

logger = logging.getLogger(__name__)


class PlayerManagementService:
    """Manages player operations within rooms."""

    def __init__(self, room_lifecycle_service, concurrency_control_service, game_settings=None):
        self.room_lifecycle_service = room_lifecycle_service
        self.concurrency_control_service = concurrency_control_service
        self.game_settings = game_settings or get_game_settings()

    def _create_player_data(self, player_name: str, socket_id: str) -> Dict:
        """Create player data structure."""
        return {
            "player_id": socket_id,
            "name": player_name,
            "score": 0,
            "moves": 0,
            "hits": 0
        }

    def _validate_player_addition(self, room: Dict, socket_id: str, password: Optional[str],
                                  check_password: bool) -> None:
        """Validate that a player can be added to the room."""
        for player in room["players"]:
            if player["player_id"] == socket_id:
                raise ValidationError(
                    ErrorCode.ALREADY_IN_ROOM,
                    f"You are already in room {room['room_id']}"
                )

        max_players = self.game_settings.max_players_per_room
        if len(room["players"]) >= max_players:
            raise ValidationError(
                ErrorCode.ROOM_FULL,
                f"Room {room['room_id']} is full",
                {"max_players": max_players}
            )

        if check_password and room["password_hash"] is not None:
            if not password or not check_password_hash(room["password_hash"], password):
                raise ValidationError(
                    ErrorCode.AUTHENTICATION_FAILED,
                    f"Wrong password for room {room['room_id']}"
                )

    def add_player_to_room(self, room_id: str, player_name: str, socket_id: str,
                           password: Optional[str] = None, check_password: bool = True) -> Dict:
        """
        Append a player to a room.

        Args:
            room_id: ID of the room
            player_name: Display name for the player
            socket_id: Socket connection ID, used as the player ID
            password: Password offered by the player
            check_password: False for the room creator

        Returns:
            Player data dict

        Raises:
            ValidationError: ROOM_NOT_FOUND, ALREADY_IN_ROOM, ROOM_FULL or AUTHENTICATION_FAILED
        """
        with self.concurrency_control_service.room_operation(room_id):
            room = self.room_lifecycle_service.get_room_data(room_id)
            if room is None:
                raise ValidationError(
                    ErrorCode.ROOM_NOT_FOUND,
                    f"Room {room_id} not found",
                    {"room_id": room_id}
                )

            self._validate_player_addition(room, socket_id, password, check_password)

            player_data = self._create_player_data(player_name, socket_id)
            room["players"].append(player_data)
            room["last_activity"] = datetime.now()
            logger.info(f"Player {player_name} ({socket_id}) joined room {room_id}, "
                        f"players: {len(room['players'])}")
            return player_data

    def remove_player_from_room(self, room_id: str, player_id: str) -> Optional[Dict]:
        """
        Remove a player from a room.

        Args:
            room_id: ID of the room
            player_id: ID of the player to remove

        Returns:
            The removed player, or None if player or room didn't exist
        """
        with self.concurrency_control_service.room_operation(room_id):
            room = self.room_lifecycle_service.get_room_data(room_id)
            if not room:
                return None

            for index, player in enumerate(room["players"]):
                if player["player_id"] == player_id:
                    del room["players"][index]
                    room["last_activity"] = datetime.now()
                    logger.info(f"Player {player['name']} ({player_id}) left room {room_id}, "
                                f"remaining players: {len(room['players'])}")
                    return player
            return None

    def get_room_players(self, room_id: str) -> List[Dict]:
        """
        Get all players in a room, in join order.

        Args:
            room_id: ID of the room

        Returns:
            List of player data dicts
        """
        room = self.room_lifecycle_service.get_room_data(room_id)
        if not room:
            return []

        return [player.copy() for player in room["players"]]

    def find_player(self, room: Dict, player_id: str) -> Optional[Dict]:
        """Find a player in a room by ID."""
        for player in room["players"]:
            if player["player_id"] == player_id:
                return player
        return None

    def is_room_empty(self, room_id: str) -> bool:
        """
        Check if a room has no players.

        Returns:
            True if room has no players or doesn't exist, False otherwise
        """
        room = self.room_lifecycle_service.get_room_data(room_id)
        if not room:
            return True
        return len(room["players"]) == 0
