"""
Game Settings Configuration Module

Provides centralized access to game-specific configuration values,
replacing hardcoded constants throughout the codebase.
"""

import logging

logger = logging.getLogger(__name__)

MAX_PLAYERS_PER_ROOM = 2


class GameSettings:
    """Centralized game settings management."""

    def __init__(self, app_config=None):
        """
        Initialize game settings.

        Args:
            app_config: Application configuration instance from config_factory
        """
        self._config = app_config
        if app_config is None:
            try:
                from config_factory import get_config
                self._config = get_config()
            except (ImportError, Exception) as e:
                logger.warning(f"Could not load configuration: {e}, using defaults")
                self._config = None

    def _get(self, name: str, default):
        if self._config is None:
            return default
        return getattr(self._config, name, default)

    @property
    def max_players_per_room(self) -> int:
        """Rooms are strictly two-player."""
        return MAX_PLAYERS_PER_ROOM

    @property
    def default_pair_count(self) -> int:
        return self._get('default_pair_count', 8)

    @property
    def min_pair_count(self) -> int:
        return self._get('min_pair_count', 1)

    @property
    def max_pair_count(self) -> int:
        return self._get('max_pair_count', 45)

    @property
    def default_turn_duration(self) -> int:
        """
        Get the turn duration used when a room does not configure its own.

        Returns:
            Duration in seconds, 0 when rooms have no turn timer by default
        """
        return self._get('default_turn_duration_seconds', 0)

    @property
    def min_turn_duration(self) -> int:
        return self._get('min_turn_duration_seconds', 5)

    @property
    def max_turn_duration(self) -> int:
        return self._get('max_turn_duration_seconds', 300)

    @property
    def reveal_delay(self) -> float:
        """
        Get how long a mismatched pair stays face up before flipping back.

        Returns:
            Delay in seconds
        """
        return self._get('reveal_delay_seconds', 1.0)

    @property
    def timer_tick(self) -> float:
        return self._get('timer_tick_seconds', 1.0)

    @property
    def require_room_password(self) -> bool:
        return self._get('require_room_password', False)

    @property
    def require_pair_count(self) -> bool:
        return self._get('require_pair_count', False)

    @property
    def require_turn_duration(self) -> bool:
        return self._get('require_turn_duration', False)

    @property
    def max_room_id_length(self) -> int:
        return self._get('max_room_id_length', 50)

    @property
    def max_player_name_length(self) -> int:
        return self._get('max_player_name_length', 20)

    @property
    def max_password_length(self) -> int:
        return self._get('max_password_length', 64)

    @property
    def matched_player_keeps_turn(self) -> bool:
        return self._get('matched_player_keeps_turn', True)

    @property
    def retain_ended_rooms(self) -> bool:
        """
        Whether a room survives its gameEnd so the players can restart.

        Returns:
            True to keep the room in ENDED, False to delete it
        """
        return self._get('retain_ended_rooms', True)

    @property
    def images_file(self) -> str:
        from config_factory import DEFAULT_IMAGES_FILE
        return self._get('images_file', DEFAULT_IMAGES_FILE)


# Global instance for easy access
_game_settings_instance = None


def get_game_settings(app_config=None) -> GameSettings:
    """
    Get or create the global game settings instance.

    Args:
        app_config: Optional app config to use

    Returns:
        GameSettings instance
    """
    global _game_settings_instance

    if _game_settings_instance is None or app_config is not None:
        _game_settings_instance = GameSettings(app_config)

    return _game_settings_instance


def reset_game_settings():
    """Reset the global game settings instance (mainly for testing)."""
    global _game_settings_instance
    _game_settings_instance = None
