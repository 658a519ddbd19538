"""
Configuration Factory - Centralized configuration management for the Pairs server
Provides type-safe configuration with validation and environment-specific settings.
"""

import os
import logging
from typing import Any, Dict, Optional, Type
from enum import Enum
from dataclasses import dataclass, field


_PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
DEFAULT_IMAGES_FILE = os.path.join(_PROJECT_ROOT, 'images.yaml')
DEFAULT_SECRET_KEY = 'dev-secret-key-change-in-production'


class Environment(Enum):
    """Environment types for configuration"""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class ConfigError(Exception):
    """Configuration-related errors"""
    pass


@dataclass
class AppConfig:
    """Application configuration with type safety and validation"""

    # Core Flask settings
    secret_key: str = field(default_factory=lambda: DEFAULT_SECRET_KEY)
    debug: bool = False
    flask_env: str = 'development'  # Default to development for safety

    # Server settings
    host: str = '0.0.0.0'
    port: int = 3000
    socketio_async_mode: str = 'eventlet'

    # Deck and turn settings
    default_pair_count: int = 8
    min_pair_count: int = 1
    max_pair_count: int = 45
    default_turn_duration_seconds: int = 0  # 0 disables the turn timer
    min_turn_duration_seconds: int = 5
    max_turn_duration_seconds: int = 300
    reveal_delay_seconds: float = 1.0
    timer_tick_seconds: float = 1.0

    # Admission settings
    require_room_password: bool = False
    require_pair_count: bool = False
    require_turn_duration: bool = False
    max_room_id_length: int = 50
    max_player_name_length: int = 20
    max_password_length: int = 64

    # Policy points
    matched_player_keeps_turn: bool = True
    retain_ended_rooms: bool = True

    # File paths
    images_file: str = DEFAULT_IMAGES_FILE

    # Gunicorn settings (for production deployment)
    worker_connections: int = 1000
    timeout: int = 30
    keepalive: int = 2
    log_level: str = 'info'

    # Environment
    environment: Environment = Environment.DEVELOPMENT

    def __post_init__(self):
        """Validate configuration after initialization"""
        self._validate()

    def _validate(self):
        """Validate configuration values"""
        if self.port < 1 or self.port > 65535:
            raise ConfigError(f"Invalid port number: {self.port}")

        if self.socketio_async_mode not in ('eventlet', 'threading', 'gevent'):
            raise ConfigError(f"Invalid socketio_async_mode: {self.socketio_async_mode}")

        if self.min_pair_count < 1:
            raise ConfigError(f"Invalid min_pair_count: {self.min_pair_count}")

        if self.max_pair_count < self.min_pair_count or self.max_pair_count > 500:
            raise ConfigError(f"Invalid max_pair_count: {self.max_pair_count}")

        if not self.min_pair_count <= self.default_pair_count <= self.max_pair_count:
            raise ConfigError(f"Invalid default_pair_count: {self.default_pair_count}")

        if self.min_turn_duration_seconds < 1 or self.max_turn_duration_seconds < self.min_turn_duration_seconds:
            raise ConfigError(
                f"Invalid turn duration bounds: {self.min_turn_duration_seconds}..{self.max_turn_duration_seconds}"
            )

        if self.default_turn_duration_seconds != 0 and not (
                self.min_turn_duration_seconds <= self.default_turn_duration_seconds <= self.max_turn_duration_seconds):
            raise ConfigError(f"Invalid default_turn_duration_seconds: {self.default_turn_duration_seconds}")

        if self.reveal_delay_seconds < 0 or self.reveal_delay_seconds > 30:
            raise ConfigError(f"Invalid reveal_delay_seconds: {self.reveal_delay_seconds}")

        if self.timer_tick_seconds <= 0 or self.timer_tick_seconds > 60:
            raise ConfigError(f"Invalid timer_tick_seconds: {self.timer_tick_seconds}")

        if self.max_room_id_length < 1 or self.max_room_id_length > 200:
            raise ConfigError(f"Invalid max_room_id_length: {self.max_room_id_length}")

        if self.max_player_name_length < 1 or self.max_player_name_length > 100:
            raise ConfigError(f"Invalid max_player_name_length: {self.max_player_name_length}")

        if self.max_password_length < 1 or self.max_password_length > 1024:
            raise ConfigError(f"Invalid max_password_length: {self.max_password_length}")

        if self.environment == Environment.PRODUCTION and self.secret_key == DEFAULT_SECRET_KEY:
            raise ConfigError("Production environment requires a secure SECRET_KEY")

    @property
    def turn_timer_enabled(self) -> bool:
        """Check if rooms get a turn timer unless they configure one themselves"""
        return self.default_turn_duration_seconds > 0

    @property
    def is_development(self) -> bool:
        """Check if running in development mode"""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode"""
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode"""
        return self.environment == Environment.TESTING


class ConfigurationFactory:
    """
    Factory for creating and managing application configuration.

    Features:
    - Environment variable loading with type conversion
    - Configuration validation
    - Environment-specific defaults
    - Singleton pattern for global config access
    """

    _instance: Optional['ConfigurationFactory'] = None
    _config: Optional[AppConfig] = None

    def __new__(cls) -> 'ConfigurationFactory':
        """Singleton pattern implementation"""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize the configuration factory"""
        if not hasattr(self, '_initialized'):
            self._logger = logging.getLogger(__name__)
            self._env_overrides: Dict[str, Any] = {}
            self._initialized = True

    def load_from_environment(self, env_prefix: str = '') -> AppConfig:
        """
        Load configuration from environment variables.

        Args:
            env_prefix: Optional prefix for environment variables (e.g., 'PAIRS_')

        Returns:
            Configured AppConfig instance
        """
        def get_env_var(key: str, default: Any = None, var_type: Type = str) -> Any:
            """Get environment variable with type conversion"""
            env_key = f"{env_prefix}{key}" if env_prefix else key
            value = os.environ.get(env_key)

            if value is None:
                return default

            # Type conversion
            if var_type == bool:
                return value.lower() in ('true', '1', 'yes', 'on')
            elif var_type == int:
                try:
                    return int(value)
                except ValueError:
                    self._logger.warning(f"Invalid integer value for {env_key}: {value}, using default: {default}")
                    return default
            elif var_type == float:
                try:
                    return float(value)
                except ValueError:
                    self._logger.warning(f"Invalid float value for {env_key}: {value}, using default: {default}")
                    return default
            else:
                return value

        # Determine environment
        flask_env = get_env_var('FLASK_ENV', 'development')  # Default to development for safety
        if flask_env == 'development':
            environment = Environment.DEVELOPMENT
            debug = True
        elif flask_env == 'testing':
            environment = Environment.TESTING
            debug = True
        else:
            environment = Environment.PRODUCTION
            debug = False

        config = AppConfig(
            # Core Flask settings
            secret_key=get_env_var('SECRET_KEY', DEFAULT_SECRET_KEY),
            debug=get_env_var('DEBUG', debug, bool),
            flask_env=flask_env,

            # Server settings
            host=get_env_var('HOST', '0.0.0.0'),
            port=get_env_var('PORT', 3000, int),
            socketio_async_mode=get_env_var('SOCKETIO_ASYNC_MODE', 'eventlet'),

            # Deck and turn settings
            default_pair_count=get_env_var('DEFAULT_PAIR_COUNT', 8, int),
            min_pair_count=get_env_var('MIN_PAIR_COUNT', 1, int),
            max_pair_count=get_env_var('MAX_PAIR_COUNT', 45, int),
            default_turn_duration_seconds=get_env_var('TURN_DURATION_SECONDS', 0, int),
            min_turn_duration_seconds=get_env_var('MIN_TURN_DURATION_SECONDS', 5, int),
            max_turn_duration_seconds=get_env_var('MAX_TURN_DURATION_SECONDS', 300, int),
            reveal_delay_seconds=get_env_var('REVEAL_DELAY_SECONDS', 1.0, float),
            timer_tick_seconds=get_env_var('TIMER_TICK_SECONDS', 1.0, float),

            # Admission settings
            require_room_password=get_env_var('REQUIRE_ROOM_PASSWORD', False, bool),
            require_pair_count=get_env_var('REQUIRE_PAIR_COUNT', False, bool),
            require_turn_duration=get_env_var('REQUIRE_TURN_DURATION', False, bool),
            max_room_id_length=get_env_var('MAX_ROOM_ID_LENGTH', 50, int),
            max_player_name_length=get_env_var('MAX_PLAYER_NAME_LENGTH', 20, int),
            max_password_length=get_env_var('MAX_PASSWORD_LENGTH', 64, int),

            # Policy points
            matched_player_keeps_turn=get_env_var('MATCHED_PLAYER_KEEPS_TURN', True, bool),
            retain_ended_rooms=get_env_var('RETAIN_ENDED_ROOMS', True, bool),

            # File paths
            images_file=get_env_var('IMAGES_FILE', DEFAULT_IMAGES_FILE),

            # Gunicorn settings
            worker_connections=get_env_var('WORKER_CONNECTIONS', 1000, int),
            timeout=get_env_var('TIMEOUT', 30, int),
            keepalive=get_env_var('KEEPALIVE', 2, int),
            log_level=get_env_var('LOG_LEVEL', 'info'),

            # Environment
            environment=environment
        )

        # Apply any manual overrides
        for key, value in self._env_overrides.items():
            if hasattr(config, key):
                setattr(config, key, value)
        if self._env_overrides:
            config._validate()

        self._config = config
        self._logger.info(f"Configuration loaded for environment: {environment.value}")
        return config

    def load_from_dict(self, config_dict: Dict[str, Any]) -> AppConfig:
        """
        Load configuration from dictionary (useful for testing).

        Args:
            config_dict: Dictionary of configuration values

        Returns:
            Configured AppConfig instance
        """
        config_dict = dict(config_dict)
        # Convert environment string to enum if provided
        if 'environment' in config_dict and isinstance(config_dict['environment'], str):
            config_dict['environment'] = Environment(config_dict['environment'])

        self._config = AppConfig(**config_dict)
        return self._config

    def override_setting(self, key: str, value: Any) -> 'ConfigurationFactory':
        """
        Override a specific configuration setting.

        Args:
            key: Configuration key to override
            value: New value for the setting

        Returns:
            Self for method chaining
        """
        self._env_overrides[key] = value

        # Update current config if loaded
        if self._config and hasattr(self._config, key):
            setattr(self._config, key, value)
            self._config._validate()  # Re-validate after change

        return self

    def get_config(self) -> AppConfig:
        """
        Get the current configuration.

        Returns:
            Current AppConfig instance

        Raises:
            ConfigError: If no configuration has been loaded
        """
        if self._config is None:
            raise ConfigError("Configuration not loaded. Call load_from_environment() or load_from_dict() first.")
        return self._config

    def reset(self) -> 'ConfigurationFactory':
        """Reset the factory (useful for testing)"""
        self._config = None
        self._env_overrides.clear()
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert current configuration to dictionary"""
        if self._config is None:
            raise ConfigError("Configuration not loaded")

        config_dict = {}
        for field_info in self._config.__dataclass_fields__.values():
            value = getattr(self._config, field_info.name)
            if isinstance(value, Environment):
                config_dict[field_info.name] = value.value
            else:
                config_dict[field_info.name] = value

        return config_dict

    def get_flask_config(self) -> Dict[str, Any]:
        """
        Get Flask-compatible configuration dictionary.

        Returns:
            Dictionary suitable for Flask app.config.update()
        """
        if self._config is None:
            raise ConfigError("Configuration not loaded")

        return {
            'SECRET_KEY': self._config.secret_key,
            'DEBUG': self._config.debug,
            'ENV': self._config.flask_env,
            'DEFAULT_PAIR_COUNT': self._config.default_pair_count,
            'TURN_DURATION_SECONDS': self._config.default_turn_duration_seconds,
            'REVEAL_DELAY_SECONDS': self._config.reveal_delay_seconds,
            'IMAGES_FILE': self._config.images_file,
        }


# Global factory instance
_config_factory = ConfigurationFactory()


def get_config() -> AppConfig:
    """Get the global application configuration"""
    return _config_factory.get_config()


def load_config(env_prefix: str = '') -> AppConfig:
    """Load configuration from environment variables"""
    return _config_factory.load_from_environment(env_prefix)


def load_config_from_dict(config_dict: Dict[str, Any]) -> AppConfig:
    """Load configuration from dictionary"""
    return _config_factory.load_from_dict(config_dict)


def override_config(key: str, value: Any) -> ConfigurationFactory:
    """Override a configuration setting"""
    return _config_factory.override_setting(key, value)


def reset_config() -> ConfigurationFactory:
    """Reset configuration (for testing)"""
    return _config_factory.reset()
