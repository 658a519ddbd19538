"""
Validation Service for the Pairs game

Turns raw Socket.IO payloads into typed inbound messages. Anything malformed
is rejected here, before it reaches the room state machine.
"""

import logging
import re
from typing import Any, Dict, Optional

from src.config.game_settings import get_game_settings
from src.core.errors import ErrorCode, ValidationError
from src.core.messages import CreateRoomMessage, FlipCardMessage, JoinRoomMessage, RestartGameMessage

logger = logging.getLogger(__name__)


class ValidationService:
    """Service responsible for input validation and message parsing."""

    # Room ID pattern: alphanumeric, hyphens, underscores
    ROOM_ID_PATTERN = re.compile(r'^[a-zA-Z0-9_-]+$')

    def __init__(self, game_settings=None):
        self.game_settings = game_settings or get_game_settings()

    def validate_socket_data(self, data: Any, error_code: ErrorCode = ErrorCode.INVALID_DATA) -> Dict:
        """
        Check that an event payload is a mapping.

        Raises:
            ValidationError: With ``error_code`` if data is not a dictionary
        """
        if not isinstance(data, dict):
            raise ValidationError(
                error_code,
                "Invalid data format - expected dictionary"
            )
        return data

    def validate_room_id(self, room_id: Any, error_code: ErrorCode = ErrorCode.INVALID_CONFIG) -> str:
        """
        Validate and strip a room ID.

        Args:
            room_id: Raw room ID value
            error_code: Code to raise with

        Returns:
            Stripped room ID

        Raises:
            ValidationError: If room ID is missing, too long or has invalid characters
        """
        if not room_id or not isinstance(room_id, str):
            raise ValidationError(error_code, "Room ID is required", {"field": "roomId"})

        room_id = room_id.strip()
        if not room_id:
            raise ValidationError(error_code, "Room ID cannot be empty", {"field": "roomId"})

        max_length = self.game_settings.max_room_id_length
        if len(room_id) > max_length:
            raise ValidationError(
                error_code,
                f"Room ID must be {max_length} characters or less",
                {"field": "roomId", "max_length": max_length, "actual_length": len(room_id)}
            )

        if not self.ROOM_ID_PATTERN.match(room_id):
            raise ValidationError(
                error_code,
                "Room ID can only contain letters, numbers, hyphens, and underscores",
                {"field": "roomId"}
            )

        return room_id

    def validate_player_name(self, player_name: Any) -> str:
        """
        Validate and strip a player name.

        Raises:
            ValidationError: INVALID_CONFIG if the name is missing or too long
        """
        if not player_name or not isinstance(player_name, str):
            raise ValidationError(ErrorCode.INVALID_CONFIG, "Player name is required", {"field": "playerName"})

        player_name = player_name.strip()
        if not player_name:
            raise ValidationError(ErrorCode.INVALID_CONFIG, "Player name cannot be empty", {"field": "playerName"})

        max_length = self.game_settings.max_player_name_length
        if len(player_name) > max_length:
            raise ValidationError(
                ErrorCode.INVALID_CONFIG,
                f"Player name must be {max_length} characters or less",
                {"field": "playerName", "max_length": max_length, "actual_length": len(player_name)}
            )

        return player_name

    def validate_password(self, password: Any, required: bool = False) -> Optional[str]:
        """
        Validate an optional room password. An empty string counts as no password.

        Raises:
            ValidationError: INVALID_CONFIG if the password is not a string,
                too long, or missing while required
        """
        if password is None or password == "":
            if required:
                raise ValidationError(ErrorCode.INVALID_CONFIG, "A room password is required",
                                      {"field": "password"})
            return None

        if not isinstance(password, str):
            raise ValidationError(ErrorCode.INVALID_CONFIG, "Password must be a string", {"field": "password"})

        max_length = self.game_settings.max_password_length
        if len(password) > max_length:
            raise ValidationError(
                ErrorCode.INVALID_CONFIG,
                f"Password must be {max_length} characters or less",
                {"field": "password", "max_length": max_length}
            )
        return password

    def _validate_int(self, value: Any, field: str, minimum: int, maximum: int) -> int:
        # bool is an int subclass; true/false from JSON is not a number here
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(ErrorCode.INVALID_CONFIG, f"{field} must be an integer", {"field": field})
        if not minimum <= value <= maximum:
            raise ValidationError(
                ErrorCode.INVALID_CONFIG,
                f"{field} must be between {minimum} and {maximum}",
                {"field": field, "min": minimum, "max": maximum, "provided": value}
            )
        return value

    def validate_pair_count(self, pair_count: Any) -> Optional[int]:
        """
        Validate the requested number of pairs.

        Returns:
            The pair count, or None when not given and not required
        """
        if pair_count is None:
            if self.game_settings.require_pair_count:
                raise ValidationError(ErrorCode.INVALID_CONFIG, "pairCount is required", {"field": "pairCount"})
            return None
        return self._validate_int(pair_count, "pairCount",
                                  self.game_settings.min_pair_count, self.game_settings.max_pair_count)

    def validate_turn_duration(self, turn_duration: Any) -> Optional[int]:
        """
        Validate the requested turn duration.

        Zero turns the timer off; any other value must lie within the
        configured bounds.

        Returns:
            Duration in seconds, or None when not given and not required
        """
        if turn_duration is None:
            if self.game_settings.require_turn_duration:
                raise ValidationError(ErrorCode.INVALID_CONFIG, "turnDurationSeconds is required",
                                      {"field": "turnDurationSeconds"})
            return None
        if turn_duration == 0 and not isinstance(turn_duration, bool):
            return 0
        return self._validate_int(turn_duration, "turnDurationSeconds",
                                  self.game_settings.min_turn_duration, self.game_settings.max_turn_duration)

    def validate_card_id(self, card_id: Any) -> int:
        """
        Validate a card ID's type. Range is checked against the dealt deck later.

        Raises:
            ValidationError: INVALID_DATA if the card ID is missing or not an integer
        """
        if card_id is None:
            raise ValidationError(ErrorCode.INVALID_DATA, "Card ID is required", {"field": "cardId"})
        if isinstance(card_id, bool) or not isinstance(card_id, int):
            raise ValidationError(ErrorCode.INVALID_DATA, "Card ID must be an integer", {"field": "cardId"})
        return card_id

    # Message parsing

    def parse_create_room(self, data: Any) -> CreateRoomMessage:
        data = self.validate_socket_data(data, ErrorCode.INVALID_CONFIG)
        return CreateRoomMessage(
            room_id=self.validate_room_id(data.get('roomId')),
            player_name=self.validate_player_name(data.get('playerName')),
            password=self.validate_password(data.get('password'), self.game_settings.require_room_password),
            pair_count=self.validate_pair_count(data.get('pairCount')),
            turn_duration_seconds=self.validate_turn_duration(data.get('turnDurationSeconds'))
        )

    def parse_join_room(self, data: Any) -> JoinRoomMessage:
        data = self.validate_socket_data(data, ErrorCode.INVALID_CONFIG)
        return JoinRoomMessage(
            room_id=self.validate_room_id(data.get('roomId')),
            player_name=self.validate_player_name(data.get('playerName')),
            password=self.validate_password(data.get('password'))
        )

    def parse_flip_card(self, data: Any) -> FlipCardMessage:
        data = self.validate_socket_data(data)
        return FlipCardMessage(
            room_id=self.validate_room_id(data.get('roomId'), ErrorCode.INVALID_DATA),
            card_id=self.validate_card_id(data.get('cardId'))
        )

    def parse_restart_game(self, data: Any) -> RestartGameMessage:
        data = self.validate_socket_data(data)
        return RestartGameMessage(
            room_id=self.validate_room_id(data.get('roomId'), ErrorCode.INVALID_DATA)
        )
